import os
import time
import uuid
from werkzeug.utils import secure_filename
from flask import current_app


def get_file_extension(filename):
    """从文件名获取扩展名"""
    if not filename or '.' not in filename:
        return None
    return filename.rsplit('.', 1)[1].lower()


def safe_display_name(original_filename):
    """
    secure_filename 可能会清空非 ASCII 字符 (中文、俄文文件名)，
    此时使用随机名并保留扩展名。
    """
    safe_name = secure_filename(original_filename or '')
    if not safe_name:
        ext = get_file_extension(original_filename)
        safe_name = f"file_{uuid.uuid4().hex[:8]}" + (f".{ext}" if ext else '')
    return safe_name


def reserve_upload_name(upload_folder, original_filename):
    """
    原子地占用 {毫秒时间戳}-{文件名}，重名时时间戳递增
    返回: (stored_name, fd)，fd 为已创建的空文件，由调用方写入并关闭
    """
    safe_name = safe_display_name(original_filename)
    timestamp = int(time.time() * 1000)
    while True:
        stored_name = f"{timestamp}-{safe_name}"
        try:
            fd = os.open(os.path.join(upload_folder, stored_name), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            timestamp += 1
            continue
        return stored_name, fd


def public_url(stored_name):
    """上传文件对外访问路径"""
    return f"{current_app.config['UPLOAD_URL_PREFIX']}/{stored_name}"


def stored_name_from_url(url):
    """public_url 的逆操作；非本站上传地址返回 None"""
    prefix = current_app.config['UPLOAD_URL_PREFIX'].rstrip('/') + '/'
    if not url or not url.startswith(prefix):
        return None
    return url[len(prefix):]


def save_upload(file):
    """
    将上传文件写入公开上传目录
    返回: (original_name, stored_name, file_size)
    """
    if not file or not file.filename:
        return None

    upload_folder = current_app.config['UPLOAD_FOLDER']
    if not os.path.exists(upload_folder):
        os.makedirs(upload_folder)
        current_app.logger.info(f'save_upload: 创建目录 {upload_folder}')

    stored_name, fd = reserve_upload_name(upload_folder, file.filename)
    save_path = os.path.join(upload_folder, stored_name)
    with os.fdopen(fd, 'wb') as out:
        file.save(out)

    file_size = os.path.getsize(save_path)
    current_app.logger.info(f'save_upload: {file.filename} -> {stored_name} ({format_size(file_size)})')
    return file.filename, stored_name, file_size


def file_size_of(file):
    """不读入内存计算上传文件大小"""
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def format_size(size):
    """将字节转换为易读格式 (KB, MB)"""
    power = 2**10
    n = 0
    power_labels = {0 : '', 1: 'K', 2: 'M', 3: 'G', 4: 'T'}
    while size > power and n < 4:
        size /= power
        n += 1
    return f"{size:.1f} {power_labels[n]}B"
