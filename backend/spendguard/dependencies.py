"""Shared FastAPI dependencies."""
from fastapi import Header, HTTPException

from .services.llm import GeminiClient, get_llm_client


def get_current_user_id(x_user_id: str = Header(default="")) -> str:
    """Resolve the caller from the ``X-User-Id`` header set by the auth proxy."""
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized - Please sign in")
    return user_id


def get_llm() -> GeminiClient:
    return get_llm_client()
