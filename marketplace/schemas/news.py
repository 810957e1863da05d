"""新闻文章校验 Schema"""
from typing import Optional
from pydantic import Field, field_validator
from .base import SchemaBase


class NewsArticleCreate(SchemaBase):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1, description="列表页摘要")
    image: Optional[str] = Field(None, description="封面图 URL")

    @field_validator('image', mode='before')
    @classmethod
    def blank_image_to_none(cls, value):
        # 未上传封面时前端会提交空串
        return value or None


class NewsArticleUpdate(SchemaBase):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None
