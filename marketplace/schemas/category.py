"""分类校验 Schema"""
from typing import Optional
from pydantic import Field
from .base import SchemaBase


class CategoryCreate(SchemaBase):
    name: str = Field(..., min_length=1, max_length=128, description="分类名称 (唯一)")
    slug: str = Field(..., min_length=1, max_length=128, description="URL 标识 (唯一)")


class CategoryUpdate(SchemaBase):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    slug: Optional[str] = Field(None, min_length=1, max_length=128)
