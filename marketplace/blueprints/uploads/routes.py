from flask import send_from_directory, current_app
from marketplace.blueprints.uploads import uploads_bp


@uploads_bp.after_request
def allow_cross_origin(response):
    """上传文件允许任意来源读取"""
    response.headers['Access-Control-Allow-Origin'] = '*'
    return response


@uploads_bp.route('/<path:filename>', methods=['GET'])
def serve(filename):
    """只读访问上传目录中的文件"""
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
