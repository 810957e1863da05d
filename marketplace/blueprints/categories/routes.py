from flask import request, jsonify, current_app
from marketplace.blueprints.categories import categories_bp
from marketplace.exceptions import ValidationError, NotFound
from marketplace.services.storage import storage


def _payload():
    """JSON 或表单提交的分类字段"""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


@categories_bp.route('', methods=['GET'])
def index():
    """分类列表"""
    try:
        categories = storage.get_categories()
    except Exception:
        current_app.logger.exception('❌ 读取分类失败')
        return jsonify({'message': 'Failed to fetch categories'}), 500
    return jsonify([c.to_dict() for c in categories])


@categories_bp.route('/<id>', methods=['GET'])
def detail(id):
    try:
        category = storage.get_category_by_id(id)
    except Exception:
        current_app.logger.exception('❌ 读取分类失败')
        return jsonify({'message': 'Failed to fetch category'}), 500
    if category is None:
        raise NotFound('Category not found')
    return jsonify(category.to_dict())


@categories_bp.route('/slug/<slug>', methods=['GET'])
def detail_by_slug(slug):
    try:
        category = storage.get_category_by_slug(slug)
    except Exception:
        current_app.logger.exception('❌ 读取分类失败')
        return jsonify({'message': 'Failed to fetch category'}), 500
    if category is None:
        raise NotFound('Category not found')
    return jsonify(category.to_dict())


@categories_bp.route('', methods=['POST'])
def create():
    """新建分类"""
    try:
        category = storage.create_category(_payload())
    except ValidationError:
        raise ValidationError('Invalid category data')
    except Exception:
        current_app.logger.exception('❌ 新建分类失败')
        return jsonify({'message': 'Failed to create category'}), 500
    current_app.logger.info(f'✅ 分类已创建: {category.slug}')
    return jsonify(category.to_dict()), 201


@categories_bp.route('/<id>', methods=['PUT'])
def update(id):
    """部分更新分类"""
    try:
        category = storage.update_category(id, _payload())
    except ValidationError:
        raise ValidationError('Invalid category data')
    except Exception:
        current_app.logger.exception('❌ 更新分类失败')
        return jsonify({'message': 'Failed to update category'}), 500
    if category is None:
        raise NotFound('Category not found')
    return jsonify(category.to_dict())


@categories_bp.route('/<id>', methods=['DELETE'])
def delete(id):
    """删除分类 (引用它的资源帖不受影响)"""
    try:
        deleted = storage.delete_category(id)
    except Exception:
        current_app.logger.exception('❌ 删除分类失败')
        return jsonify({'message': 'Failed to delete category'}), 500
    if not deleted:
        raise NotFound('Category not found')
    return '', 204
