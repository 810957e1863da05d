from datetime import datetime
from marketplace.extensions import db
from .base import BaseModel

class NewsArticle(BaseModel):
    """新闻文章"""
    __tablename__ = 'news_articles'

    title = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    excerpt = db.Column(db.Text, nullable=False)  # 列表页摘要
    image = db.Column(db.Text, nullable=True)  # 封面图 URL

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
