from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SchemaBase(BaseModel):
    """
    请求数据校验基类

    同时接受 snake_case (Python 调用) 和 camelCase (前端表单/JSON) 字段名，
    字符串自动去除首尾空白，多余字段忽略。
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )

    def changes(self) -> dict:
        """更新用：只返回调用方实际提供且非空的字段"""
        return self.model_dump(exclude_unset=True, exclude_none=True)
