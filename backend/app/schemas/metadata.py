from typing import Optional
from pydantic import BaseModel


class StoreListOut(BaseModel):
    id: int
    name: str
    slug: Optional[str]
    location: Optional[str] = None

    class Config:
        from_attributes = True


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: Optional[str]

    class Config:
        from_attributes = True
