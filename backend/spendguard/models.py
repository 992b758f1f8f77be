from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Text, JSON, Index

from .database import Base

GOAL_TYPES = ("daily_spending", "savings", "custom")
GOAL_PERIODS = ("daily", "weekly", "monthly", "yearly", "one_time")
SAVINGS_GOAL_TYPES = ("savings", "custom")
DISTRIBUTION_METHODS = ("equal", "proportional", "priority")
PURCHASE_CATEGORIES = ("food", "fashion", "entertainment", "transport", "travel", "living", "other")


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (
        Index("ix_goals_user_type", "user_id", "type"),
        Index("ix_goals_user_default", "user_id", "is_default"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, default="custom")  # daily_spending, savings, custom
    target_amount = Column(Float, nullable=False)  # for daily_spending this is the limit
    current_amount = Column(Float, nullable=False, default=0.0)
    period = Column(String, nullable=False, default="one_time")  # daily, weekly, monthly, yearly, one_time
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Purchase(Base):
    __tablename__ = "purchases"
    __table_args__ = (
        Index("ix_purchases_user_date", "user_id", "purchase_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    item_name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    currency = Column(String, nullable=False, default="USD")
    category = Column(String, nullable=False, default="other")
    website = Column(String, nullable=False)
    url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    purchase_date = Column(DateTime, nullable=False, default=datetime.now)
    extra_data = Column(JSON, nullable=True)  # whatever the browser extension sends along
    created_at = Column(DateTime, default=datetime.now)


class SavedPurchase(Base):
    __tablename__ = "saved_purchases"
    __table_args__ = (
        Index("ix_saved_purchases_user_date", "user_id", "saved_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    item_name = Column(String, nullable=False)
    amount_saved = Column(Float, nullable=False)  # the amount that was NOT spent
    currency = Column(String, nullable=False, default="USD")
    website = Column(String, nullable=False)
    url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    saved_date = Column(DateTime, nullable=False, default=datetime.now)
    distribution_method = Column(String, nullable=True)  # equal, proportional, priority
    goals_updated = Column(JSON, nullable=False, default=list)  # ids of goals that received money
    extra_data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
