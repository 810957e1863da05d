import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy import inspect
from marketplace.extensions import db


def generate_id():
    """生成 UUID 字符串主键"""
    return str(uuid.uuid4())


def camelize(name):
    """category_id -> categoryId"""
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


class BaseModel(db.Model):
    """
    市场模型基类
    包含：字符串 UUID 主键, 保存/删除, 序列化方法
    """
    __abstract__ = True

    # 序列化时排除的字段 (属性名)
    serialize_exclude = ()

    id = db.Column(db.String(64), primary_key=True, default=generate_id)

    def save(self):
        """保存到数据库"""
        db.session.add(self)
        db.session.commit()

    def delete(self):
        """物理删除"""
        db.session.delete(self)
        db.session.commit()

    def to_dict(self):
        """
        通用序列化方法：将模型转换为字典，便于 API 返回 JSON。
        字段名转换为 camelCase，时间转 ISO 8601，金额转字符串。
        """
        data = {}
        for attr in inspect(self).mapper.column_attrs:
            if attr.key.startswith('_') or attr.key in self.serialize_exclude:
                continue
            val = getattr(self, attr.key)
            if isinstance(val, datetime):
                val = val.isoformat()
            elif isinstance(val, Decimal):
                val = str(val)
            data[camelize(attr.key)] = val
        return data
