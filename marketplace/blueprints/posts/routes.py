from flask import request, jsonify, current_app
from marketplace.blueprints.posts import posts_bp
from marketplace.blueprints.posts.forms import PostForm, PostUpdateForm
from marketplace.exceptions import ValidationError, NotFound
from marketplace.services.storage import storage
from marketplace.services.upload_service import UploadService


@posts_bp.route('', methods=['GET'])
def index():
    """资源帖列表：?search= 优先，其次 ?categoryId="""
    category_id = request.args.get('categoryId', '', type=str)
    search = request.args.get('search', '', type=str)
    try:
        if search:
            posts = storage.search_posts(search)
        else:
            posts = storage.get_posts(category_id or None)
    except Exception:
        current_app.logger.exception('❌ 读取资源帖失败')
        return jsonify({'message': 'Failed to fetch posts'}), 500
    return jsonify([p.to_dict() for p in posts])


@posts_bp.route('/<id>', methods=['GET'])
def detail(id):
    try:
        post = storage.get_post_by_id(id)
    except Exception:
        current_app.logger.exception('❌ 读取资源帖失败')
        return jsonify({'message': 'Failed to fetch post'}), 500
    if post is None:
        raise NotFound('Post not found')
    return jsonify(post.to_dict())


@posts_bp.route('', methods=['POST'])
def create():
    """发布资源帖 (multipart: images[] 最多 10 个, files[] 最多 5 个)"""
    form = PostForm()
    if not form.validate():
        current_app.logger.warning(f'⚠️ 资源帖表单校验失败: {form.errors}')
        raise ValidationError('Failed to create post')

    try:
        # 先落盘再入库；入库失败留下的文件交给 cleanup-uploads 处理
        images = UploadService.store_images(form.images.data)
        download_files = UploadService.store_download_files(form.files.data)
        post = storage.create_post({
            'title': form.title.data,
            'description': form.description.data,
            'categoryId': form.categoryId.data,
            'price': form.price.data,
            'images': images,
            'downloadFiles': download_files,
        })
    except ValidationError:
        raise ValidationError('Failed to create post')
    except Exception:
        current_app.logger.exception('❌ 发布资源帖失败')
        return jsonify({'message': 'Failed to create post'}), 500

    current_app.logger.info(f'✅ 资源帖已发布: {post.id} ({len(images)} 图, {len(download_files)} 文件)')
    return jsonify(post.to_dict()), 201


@posts_bp.route('/<id>', methods=['PUT'])
def update(id):
    """编辑资源帖：新上传的图片/文件追加到原有列表之后"""
    form = PostUpdateForm()
    if not form.validate():
        current_app.logger.warning(f'⚠️ 资源帖表单校验失败: {form.errors}')
        raise ValidationError('Failed to update post')

    try:
        existing = storage.get_post_by_id(id)
    except Exception:
        current_app.logger.exception('❌ 读取资源帖失败')
        return jsonify({'message': 'Failed to update post'}), 500
    if existing is None:
        raise NotFound('Post not found')

    try:
        patch = form.submitted_fields()
        new_images = UploadService.store_images(form.images.data)
        new_files = UploadService.store_download_files(form.files.data)
        if new_images:
            patch['images'] = list(existing.images or []) + new_images
        if new_files:
            patch['downloadFiles'] = list(existing.download_files or []) + new_files
        post = storage.update_post(id, patch)
    except ValidationError:
        raise ValidationError('Failed to update post')
    except Exception:
        current_app.logger.exception('❌ 更新资源帖失败')
        return jsonify({'message': 'Failed to update post'}), 500

    if post is None:
        raise NotFound('Post not found')
    return jsonify(post.to_dict())


@posts_bp.route('/<id>', methods=['DELETE'])
def delete(id):
    try:
        deleted = storage.delete_post(id)
    except Exception:
        current_app.logger.exception('❌ 删除资源帖失败')
        return jsonify({'message': 'Failed to delete post'}), 500
    if not deleted:
        raise NotFound('Post not found')
    return '', 204


@posts_bp.route('/<id>/download', methods=['POST'])
def download(id):
    """下载计数 +1"""
    try:
        count = storage.increment_download_count(id)
    except Exception:
        current_app.logger.exception('❌ 更新下载数失败')
        return jsonify({'message': 'Failed to increment download count'}), 500
    return jsonify({'message': 'Download count incremented', 'downloadCount': count})
