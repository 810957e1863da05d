from flask import jsonify, current_app
from marketplace.blueprints.news import news_bp
from marketplace.blueprints.news.forms import NewsForm, NewsUpdateForm
from marketplace.exceptions import ValidationError, NotFound
from marketplace.services.storage import storage
from marketplace.services.upload_service import UploadService


@news_bp.route('', methods=['GET'])
def index():
    """新闻列表 (最新在前)"""
    try:
        articles = storage.get_news_articles()
    except Exception:
        current_app.logger.exception('❌ 读取新闻失败')
        return jsonify({'message': 'Failed to fetch news articles'}), 500
    return jsonify([a.to_dict() for a in articles])


@news_bp.route('/<id>', methods=['GET'])
def detail(id):
    try:
        article = storage.get_news_article_by_id(id)
    except Exception:
        current_app.logger.exception('❌ 读取新闻失败')
        return jsonify({'message': 'Failed to fetch article'}), 500
    if article is None:
        raise NotFound('Article not found')
    return jsonify(article.to_dict())


@news_bp.route('', methods=['POST'])
def create():
    form = NewsForm()
    if not form.validate():
        current_app.logger.warning(f'⚠️ 新闻表单校验失败: {form.errors}')
        raise ValidationError('Failed to create article')

    try:
        image = UploadService.store_image(form.image.data)
        article = storage.create_news_article({
            'title': form.title.data,
            'content': form.content.data,
            'excerpt': form.excerpt.data,
            'image': image,
        })
    except ValidationError:
        raise ValidationError('Failed to create article')
    except Exception:
        current_app.logger.exception('❌ 发布新闻失败')
        return jsonify({'message': 'Failed to create article'}), 500

    current_app.logger.info(f'✅ 新闻已发布: {article.id}')
    return jsonify(article.to_dict()), 201


@news_bp.route('/<id>', methods=['PUT'])
def update(id):
    """编辑新闻：只有上传了新封面才替换 image"""
    form = NewsUpdateForm()
    if not form.validate():
        current_app.logger.warning(f'⚠️ 新闻表单校验失败: {form.errors}')
        raise ValidationError('Failed to update article')

    try:
        existing = storage.get_news_article_by_id(id)
    except Exception:
        current_app.logger.exception('❌ 读取新闻失败')
        return jsonify({'message': 'Failed to update article'}), 500
    if existing is None:
        raise NotFound('Article not found')

    try:
        patch = form.submitted_fields()
        image = UploadService.store_image(form.image.data)
        if image:
            patch['image'] = image
        article = storage.update_news_article(id, patch)
    except ValidationError:
        raise ValidationError('Failed to update article')
    except Exception:
        current_app.logger.exception('❌ 更新新闻失败')
        return jsonify({'message': 'Failed to update article'}), 500

    if article is None:
        raise NotFound('Article not found')
    return jsonify(article.to_dict())


@news_bp.route('/<id>', methods=['DELETE'])
def delete(id):
    try:
        deleted = storage.delete_news_article(id)
    except Exception:
        current_app.logger.exception('❌ 删除新闻失败')
        return jsonify({'message': 'Failed to delete article'}), 500
    if not deleted:
        raise NotFound('Article not found')
    return '', 204
