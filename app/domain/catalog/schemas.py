"""Catalog schemas - categories and units of measure"""

from typing import Optional

from pydantic import BaseModel, field_validator


class CategoryCreate(BaseModel):
    title: str
    description: Optional[str] = None
    image: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class CategoryResponse(BaseModel):
    id: int
    title: Optional[str]
    description: Optional[str]
    image: Optional[str]

    class Config:
        from_attributes = True


class UnitCreate(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class UnitResponse(BaseModel):
    id: int
    title: Optional[str]
    description: Optional[str]

    class Config:
        from_attributes = True
