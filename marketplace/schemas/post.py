"""
资源帖校验 Schema

PostCreate  - 新建资源帖 (price 缺省为 0)
PostUpdate  - 部分更新，所有字段可选，只应用实际提供的字段
DownloadFile - 可下载文件元数据 {name, url, size}
"""
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from pydantic import Field, field_validator
from .base import SchemaBase


def derive_is_free(price) -> bool:
    """价格缺省、空串或数值为 0 时视为免费"""
    if price is None:
        return True
    text = str(price).strip()
    if not text:
        return True
    try:
        return Decimal(text) == 0
    except InvalidOperation:
        return False


def _blank_price_to_zero(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return '0'
    return value


class DownloadFile(SchemaBase):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    size: int = Field(0, ge=0, description="字节数")


class PostCreate(SchemaBase):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1, max_length=64)
    price: Decimal = Field(Decimal('0'), ge=0, max_digits=10, decimal_places=2)
    images: List[str] = Field(default_factory=list)
    download_files: List[DownloadFile] = Field(default_factory=list)

    @field_validator('price', mode='before')
    @classmethod
    def normalize_price(cls, value):
        return _blank_price_to_zero(value)

    @property
    def is_free(self) -> bool:
        return derive_is_free(self.price)


class PostUpdate(SchemaBase):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    category_id: Optional[str] = Field(None, min_length=1, max_length=64)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    images: Optional[List[str]] = None
    download_files: Optional[List[DownloadFile]] = None

    @field_validator('price', mode='before')
    @classmethod
    def normalize_price(cls, value):
        # 显式提交空价格等同于 0
        return _blank_price_to_zero(value)
