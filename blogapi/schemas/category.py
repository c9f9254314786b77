"""Category schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CategoryRequest(BaseModel):
    name: Optional[str] = Field(None, description="Category name, stored normalized (e.g. 'Tech News' -> 'tech-news')")


class CategoryResponse(BaseModel):
    id: str
    name: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, category) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryListResponse(BaseModel):
    categories: List[CategoryResponse]


class CategorySingleResponse(BaseModel):
    category: CategoryResponse
