import logging
import colorlog
from flask import Flask, jsonify
from config import config
from marketplace.extensions import db, migrate
from marketplace.exceptions import MarketplaceException

# 导入 commands 模块，用于注册 CLI 命令
from marketplace import commands


def create_app(config_name='default'):
    """资源市场应用工厂函数"""
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. 初始化扩展
    db.init_app(app)
    migrate.init_app(app, db)

    # 3. 配置日志
    configure_logging(app)

    # 4. 注册蓝图 (Blueprints)
    register_blueprints(app)

    # 5. 注册全局错误处理
    register_error_handlers(app)

    # 6. 注册 CLI 命令
    register_commands(app)

    # 7. 建表并补齐默认分类
    init_database(app)

    return app


def init_database(app):
    """启动时建表、补齐默认分类；失败只记录日志，不阻止启动"""
    from marketplace import models  # noqa: F401  确保模型已注册
    from marketplace.services.seed_service import seed_default_categories

    with app.app_context():
        if app.config.get('AUTO_CREATE_TABLES'):
            try:
                db.create_all()
            except Exception as e:
                app.logger.error(f'❌ 数据库建表失败: {e}')
                return

        if app.config.get('SEED_DEFAULT_CATEGORIES'):
            seed_default_categories(app)


def register_blueprints(app):
    """注册业务模块蓝图"""
    # 分类
    from marketplace.blueprints.categories import categories_bp
    app.register_blueprint(categories_bp, url_prefix='/api/categories')

    # 资源帖
    from marketplace.blueprints.posts import posts_bp
    app.register_blueprint(posts_bp, url_prefix='/api/posts')

    # 新闻
    from marketplace.blueprints.news import news_bp
    app.register_blueprint(news_bp, url_prefix='/api/news')

    # 上传文件静态访问
    from marketplace.blueprints.uploads import uploads_bp
    app.register_blueprint(uploads_bp, url_prefix=app.config['UPLOAD_URL_PREFIX'])


def register_error_handlers(app):
    """所有错误统一返回 {"message": ...}，不暴露字段细节"""
    @app.errorhandler(MarketplaceException)
    def handle_marketplace_exception(e):
        return jsonify(e.to_dict()), e.code

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({'message': 'Bad request'}), 400

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({'message': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def request_entity_too_large(e):
        return jsonify({'message': 'Upload too large'}), 413

    @app.errorhandler(500)
    def internal_server_error(e):
        return jsonify({'message': 'Internal server error'}), 500


def register_commands(app):
    """注册 Flask CLI 命令"""
    app.cli.add_command(commands.status)
    app.cli.add_command(commands.seed_categories)
    app.cli.add_command(commands.add_categories)
    app.cli.add_command(commands.cleanup_uploads)
    app.cli.add_command(commands.create_user)


def configure_logging(app):
    """配置控制台日志：开发环境彩色输出"""
    if app.testing:
        return

    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)

    if app.debug:
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s")

    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.setLevel(logging.INFO)
