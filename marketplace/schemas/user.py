from pydantic import ConfigDict, Field
from .base import SchemaBase


class UserCreate(SchemaBase):
    # 密码原样保存，不去空白
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
