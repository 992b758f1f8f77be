"""Spendguard: daily spending limits, purchase logging and savings goals."""

__version__ = "0.1.0"
