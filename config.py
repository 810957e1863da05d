import os
import tempfile
from dotenv import load_dotenv

# 加载 .env 环境变量
load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))

MB = 1024 * 1024


class Config:
    """基础配置类"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'hard-to-guess-string'

    # 数据库配置
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_RECORD_QUERIES = True
    # 启动时自动建表 (生产环境可改用 flask db upgrade)
    AUTO_CREATE_TABLES = os.environ.get('AUTO_CREATE_TABLES', 'true').lower() in ('1', 'true', 'yes')

    # 文件上传配置
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'uploads')
    UPLOAD_URL_PREFIX = '/uploads'
    MAX_FILE_SIZE = 100 * MB  # 单个文件上限 100MB
    MAX_IMAGES_PER_POST = 10
    MAX_FILES_PER_POST = 5
    # 整个请求体上限：所有文件 + 表单字段
    MAX_CONTENT_LENGTH = (MAX_IMAGES_PER_POST + MAX_FILES_PER_POST) * MAX_FILE_SIZE + MB

    # 孤儿文件清理：新上传的文件在宽限期内不会被删除
    ORPHAN_GRACE_SECONDS = int(os.environ.get('ORPHAN_GRACE_SECONDS', 3600))

    # 默认分类 (启动时按 slug 补齐)
    SEED_DEFAULT_CATEGORIES = os.environ.get('SEED_DEFAULT_CATEGORIES', 'true').lower() in ('1', 'true', 'yes')
    DEFAULT_CATEGORIES = [
        {'slug': 'warcraft-3', 'name': 'Warcraft 3'},
        {'slug': 'minecraft', 'name': 'Minecraft'},
        {'slug': 'books', 'name': 'Books'},
        {'slug': '3d', 'name': '3D'},
        {'slug': 'other', 'name': 'Other'},
    ]
    # flask add-categories 使用的扩展分类
    EXTENDED_CATEGORIES = [
        {'slug': 'minecraft', 'name': 'Minecraft'},
        {'slug': 'warcraft-3', 'name': 'Warcraft 3'},
        {'slug': '3d-models', 'name': '3D Models'},
        {'slug': 'concept-art', 'name': 'Concept Art'},
        {'slug': 'reference', 'name': 'Reference'},
        {'slug': 'miscellaneous', 'name': 'Miscellaneous'},
    ]

    @staticmethod
    def init_app(app):
        # 确保上传目录存在
        upload_folder = app.config['UPLOAD_FOLDER']
        if not os.path.exists(upload_folder):
            os.makedirs(upload_folder)
        # 本地 SQLite 数据库目录
        instance_dir = os.path.join(basedir, 'instance')
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') and not os.path.exists(instance_dir):
            os.makedirs(instance_dir)


class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'marketplace.db')


class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False

    DATABASE_URL = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'marketplace_prod.db')
    # PostgreSQL URL 修正（部分托管平台使用 postgres://）
    if DATABASE_URL and DATABASE_URL.startswith('postgres://'):
        DATABASE_URL = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = DATABASE_URL

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'marketplace-test-uploads')
    SEED_DEFAULT_CATEGORIES = False
    ORPHAN_GRACE_SECONDS = 0


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
