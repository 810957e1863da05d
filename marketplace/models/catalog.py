from datetime import datetime
from decimal import Decimal
from marketplace.extensions import db
from .base import BaseModel


class Category(BaseModel):
    """资源分类"""
    __tablename__ = 'categories'

    name = db.Column(db.Text, nullable=False, unique=True)
    slug = db.Column(db.Text, nullable=False, unique=True)

    def __repr__(self):
        return f'<Category {self.slug}>'


class Post(BaseModel):
    """可下载的资源帖 (模型、贴图、地图、软件等)"""
    __tablename__ = 'posts'

    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    # 软引用：不建外键，删除分类不会级联
    category_id = db.Column(db.String(64), nullable=False, index=True)

    price = db.Column(db.Numeric(10, 2), default=Decimal('0'))
    is_free = db.Column(db.Boolean, default=True)  # 由 price 推导，每个写入点都要重新计算

    images = db.Column(db.JSON, default=list)  # 图片 URL 列表 (有序)
    download_files = db.Column(db.JSON, default=list)  # [{"name": ..., "url": ..., "size": ...}]
    download_count = db.Column(db.String(32), default='0')  # 字符串编码的整数

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<Post {self.title}>'
