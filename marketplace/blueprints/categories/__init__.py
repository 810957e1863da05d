from flask import Blueprint

# 注意：url_prefix 在 marketplace/__init__.py 注册时设置，这里不重复设置
categories_bp = Blueprint('categories', __name__)

from . import routes
