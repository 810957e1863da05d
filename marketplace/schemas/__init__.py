from .base import SchemaBase
from .user import UserCreate
from .category import CategoryCreate, CategoryUpdate
from .post import DownloadFile, PostCreate, PostUpdate, derive_is_free
from .news import NewsArticleCreate, NewsArticleUpdate
