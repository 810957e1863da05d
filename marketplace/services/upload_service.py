import os
import time
from flask import current_app
from marketplace.services.storage import storage
from marketplace.utils.file_helper import save_upload, public_url, stored_name_from_url


class UploadService:
    """
    上传文件落盘与孤儿文件清理

    文件先写入公开目录，再由路由提交引用它的数据库行；
    两步之间失败留下的孤儿文件由 cleanup_orphans 定期清除。
    """

    @staticmethod
    def store_images(files) -> list:
        """保存图片，返回 URL 列表 (保持上传顺序)"""
        urls = []
        for file in files or []:
            result = save_upload(file)
            if result:
                _, stored_name, _ = result
                urls.append(public_url(stored_name))
        return urls

    @staticmethod
    def store_download_files(files) -> list:
        """保存可下载文件，返回 [{name, url, size}]"""
        entries = []
        for file in files or []:
            result = save_upload(file)
            if result:
                orig_name, stored_name, size = result
                entries.append({
                    'name': orig_name,
                    'url': public_url(stored_name),
                    'size': size,
                })
        return entries

    @staticmethod
    def store_image(file):
        """保存单张图片，未上传时返回 None"""
        urls = UploadService.store_images([file] if file else [])
        return urls[0] if urls else None

    @staticmethod
    def referenced_files() -> set:
        """所有资源帖与新闻引用的上传文件名"""
        urls = []
        for post in storage.get_posts():
            urls.extend(post.images or [])
            urls.extend(f.get('url') for f in (post.download_files or []))
        for article in storage.get_news_articles():
            urls.append(article.image)
        return {name for name in map(stored_name_from_url, urls) if name}

    @staticmethod
    def find_orphans(grace_seconds=None) -> list:
        """上传目录中超过宽限期且未被引用的文件"""
        if grace_seconds is None:
            grace_seconds = current_app.config['ORPHAN_GRACE_SECONDS']
        upload_folder = current_app.config['UPLOAD_FOLDER']
        if not os.path.isdir(upload_folder):
            return []

        referenced = UploadService.referenced_files()
        cutoff = time.time() - grace_seconds
        orphans = []
        for name in sorted(os.listdir(upload_folder)):
            path = os.path.join(upload_folder, name)
            if not os.path.isfile(path) or name in referenced:
                continue
            # 宽限期内的文件可能属于尚未提交的请求
            if os.path.getmtime(path) > cutoff:
                continue
            orphans.append(name)
        return orphans

    @staticmethod
    def cleanup_orphans(grace_seconds=None, dry_run=False) -> list:
        """删除孤儿文件，返回被删除 (或将被删除) 的文件名"""
        upload_folder = current_app.config['UPLOAD_FOLDER']
        orphans = UploadService.find_orphans(grace_seconds)
        if dry_run:
            return orphans

        removed = []
        for name in orphans:
            try:
                os.remove(os.path.join(upload_folder, name))
                removed.append(name)
            except OSError as e:
                current_app.logger.error(f'❌ 删除孤儿文件失败 {name}: {e}')
        if removed:
            current_app.logger.info(f'✅ 已清理 {len(removed)} 个孤儿文件')
        return removed
