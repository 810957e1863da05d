"""
存储层

BaseStorage 定义分类 / 资源帖 / 新闻 / 用户的读写接口，
DatabaseStorage 基于 SQLAlchemy 实现。路由层只通过模块级 `storage` 访问数据库。
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from flask import current_app
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError

from marketplace.extensions import db
from marketplace.exceptions import ValidationError
from marketplace.models import User, Category, Post, NewsArticle
from marketplace.schemas import (
    UserCreate, CategoryCreate, CategoryUpdate,
    PostCreate, PostUpdate, NewsArticleCreate, NewsArticleUpdate,
    derive_is_free,
)


def _escape_like(value):
    """转义 LIKE 通配符，按字面子串匹配"""
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class BaseStorage(ABC):

    # ---------- 用户 ----------
    @abstractmethod
    def get_user(self, id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data) -> User: ...

    # ---------- 分类 ----------
    @abstractmethod
    def get_categories(self) -> List[Category]: ...

    @abstractmethod
    def get_category_by_id(self, id: str) -> Optional[Category]: ...

    @abstractmethod
    def get_category_by_slug(self, slug: str) -> Optional[Category]: ...

    @abstractmethod
    def create_category(self, data, category_id: Optional[str] = None) -> Category: ...

    @abstractmethod
    def update_category(self, id: str, patch) -> Optional[Category]: ...

    @abstractmethod
    def delete_category(self, id: str) -> bool: ...

    # ---------- 资源帖 ----------
    @abstractmethod
    def get_posts(self, category_id: Optional[str] = None) -> List[Post]:
        """全部资源帖 (可按分类过滤)，按创建时间倒序"""

    @abstractmethod
    def get_post_by_id(self, id: str) -> Optional[Post]: ...

    @abstractmethod
    def create_post(self, data) -> Post: ...

    @abstractmethod
    def update_post(self, id: str, patch) -> Optional[Post]: ...

    @abstractmethod
    def delete_post(self, id: str) -> bool: ...

    @abstractmethod
    def increment_download_count(self, id: str) -> Optional[str]:
        """下载数 +1 并返回新值；资源帖不存在时返回 None"""

    @abstractmethod
    def search_posts(self, query: str) -> List[Post]:
        """标题或描述包含 query (不区分大小写)，按创建时间倒序"""

    # ---------- 新闻 ----------
    @abstractmethod
    def get_news_articles(self) -> List[NewsArticle]: ...

    @abstractmethod
    def get_news_article_by_id(self, id: str) -> Optional[NewsArticle]: ...

    @abstractmethod
    def create_news_article(self, data) -> NewsArticle: ...

    @abstractmethod
    def update_news_article(self, id: str, patch) -> Optional[NewsArticle]: ...

    @abstractmethod
    def delete_news_article(self, id: str) -> bool: ...


class DatabaseStorage(BaseStorage):

    @staticmethod
    def _validate(schema, data, message):
        """将 dict 校验为 schema 实例；校验细节只写日志，不返回给调用方"""
        if isinstance(data, schema):
            return data
        try:
            return schema.model_validate(data)
        except SchemaValidationError as e:
            current_app.logger.warning(f'⚠️ {message}: {e.errors()}')
            raise ValidationError(message) from e

    @staticmethod
    def _commit(obj, message):
        """提交写入；唯一约束冲突转换为 ValidationError，其它错误回滚后抛出"""
        try:
            if obj is not None:
                db.session.add(obj)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            current_app.logger.warning(f'⚠️ {message}: {e.orig}')
            raise ValidationError(message) from e
        except Exception:
            db.session.rollback()
            raise
        return obj

    @staticmethod
    def _remove(obj) -> bool:
        if obj is None:
            return False
        try:
            obj.delete()
        except Exception:
            db.session.rollback()
            raise
        return True

    # ---------- 用户 ----------
    def get_user(self, id):
        return db.session.get(User, id)

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def create_user(self, data):
        payload = self._validate(UserCreate, data, 'Invalid user data')
        user = User(username=payload.username, password=payload.password)
        return self._commit(user, 'Username already exists')

    # ---------- 分类 ----------
    def get_categories(self):
        return Category.query.order_by(Category.name).all()

    def get_category_by_id(self, id):
        return db.session.get(Category, id)

    def get_category_by_slug(self, slug):
        return Category.query.filter_by(slug=slug).first()

    def create_category(self, data, category_id=None):
        payload = self._validate(CategoryCreate, data, 'Invalid category data')
        category = Category(name=payload.name, slug=payload.slug)
        if category_id:
            category.id = category_id
        return self._commit(category, 'Category already exists')

    def update_category(self, id, patch):
        payload = self._validate(CategoryUpdate, patch, 'Invalid category data')
        category = db.session.get(Category, id)
        if category is None:
            return None
        for key, value in payload.changes().items():
            setattr(category, key, value)
        return self._commit(category, 'Category already exists')

    def delete_category(self, id):
        # 引用该分类的资源帖保持不变
        return self._remove(db.session.get(Category, id))

    # ---------- 资源帖 ----------
    def get_posts(self, category_id=None):
        query = Post.query
        if category_id:
            query = query.filter_by(category_id=category_id)
        return query.order_by(Post.created_at.desc()).all()

    def get_post_by_id(self, id):
        return db.session.get(Post, id)

    def create_post(self, data):
        payload = self._validate(PostCreate, data, 'Invalid post data')
        post = Post(
            title=payload.title,
            description=payload.description,
            category_id=payload.category_id,
            price=payload.price,
            is_free=payload.is_free,
            images=list(payload.images),
            download_files=[f.model_dump() for f in payload.download_files],
            download_count='0',
        )
        return self._commit(post, 'Invalid post data')

    def update_post(self, id, patch):
        payload = self._validate(PostUpdate, patch, 'Invalid post data')
        post = db.session.get(Post, id)
        if post is None:
            return None
        changes = payload.changes()
        if 'price' in changes:
            changes['is_free'] = derive_is_free(changes['price'])
        for key, value in changes.items():
            # JSON 列整体重新赋值，确保变更被追踪
            setattr(post, key, list(value) if isinstance(value, list) else value)
        return self._commit(post, 'Invalid post data')

    def delete_post(self, id):
        return self._remove(db.session.get(Post, id))

    def increment_download_count(self, id):
        # 单条 UPDATE 完成读-改-写，并发下载不会丢失计数
        new_count = db.cast(db.cast(Post.download_count, db.Integer) + 1, db.String)
        try:
            result = db.session.execute(
                db.update(Post)
                .where(Post.id == id)
                .values(download_count=new_count)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.session.rollback()
                return None
            # 同一事务内读取，行锁保证读到的是本次写入的值
            count = db.session.execute(
                db.select(Post.download_count).where(Post.id == id)
            ).scalar_one()
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return count

    def search_posts(self, query):
        term = f'%{_escape_like(query)}%'
        return Post.query.filter(
            db.or_(
                Post.title.ilike(term, escape='\\'),
                Post.description.ilike(term, escape='\\'),
            )
        ).order_by(Post.created_at.desc()).all()

    # ---------- 新闻 ----------
    def get_news_articles(self):
        return NewsArticle.query.order_by(NewsArticle.created_at.desc()).all()

    def get_news_article_by_id(self, id):
        return db.session.get(NewsArticle, id)

    def create_news_article(self, data):
        payload = self._validate(NewsArticleCreate, data, 'Invalid article data')
        article = NewsArticle(
            title=payload.title,
            content=payload.content,
            excerpt=payload.excerpt,
            image=payload.image,
        )
        return self._commit(article, 'Invalid article data')

    def update_news_article(self, id, patch):
        payload = self._validate(NewsArticleUpdate, patch, 'Invalid article data')
        article = db.session.get(NewsArticle, id)
        if article is None:
            return None
        for key, value in payload.changes().items():
            setattr(article, key, value)
        return self._commit(article, 'Invalid article data')

    def delete_news_article(self, id):
        return self._remove(db.session.get(NewsArticle, id))


storage = DatabaseStorage()
