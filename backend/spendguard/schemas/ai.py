from pydantic import BaseModel
from typing import Dict, List, Tuple


class RoastRequest(BaseModel):
    items: Dict[str, str]
    amount: str
    goals: Dict[str, Tuple[str, str]]


class RoastResponse(BaseModel):
    result: str


class CategorizeRequest(BaseModel):
    items: Dict[str, str]


class CategorizedItem(BaseModel):
    item: str
    price: str


class CategorizeResponse(BaseModel):
    categories: Dict[str, List[CategorizedItem]]
