from flask import current_app
from marketplace.exceptions import ValidationError
from marketplace.services.storage import storage


class SeedService:
    @staticmethod
    def ensure_categories(categories, use_slug_as_id=True):
        """
        按 slug 补齐分类 (已存在则跳过)，可重复执行。
        插入由唯一约束把关：并发进程抢先写入，或已有同名分类使用了别的 slug，
        插入都会失败；记录原因后跳过，不重试。
        :param categories: [{'slug': ..., 'name': ...}, ...]
        :return: (created_slugs, existing_slugs, skipped_slugs)
        """
        created, existing, skipped = [], [], []
        for item in categories:
            slug = item['slug']
            if storage.get_category_by_slug(slug):
                existing.append(slug)
                continue
            try:
                storage.create_category(item, category_id=slug if use_slug_as_id else None)
            except ValidationError as e:
                cause = getattr(e.__cause__, 'orig', None) or e.message
                current_app.logger.warning(f'⚠️ 分类 {slug} 写入失败，跳过: {cause}')
                skipped.append(slug)
                continue
            created.append(slug)
        return created, existing, skipped


def seed_default_categories(app):
    """启动时补齐默认分类；失败只记录日志，不阻止服务启动"""
    try:
        created, _, skipped = SeedService.ensure_categories(app.config['DEFAULT_CATEGORIES'])
        if created:
            app.logger.info(f'✅ 默认分类已初始化: {", ".join(created)}')
        if skipped:
            app.logger.warning(f'⚠️ 默认分类未写入: {", ".join(skipped)}')
    except Exception as e:
        app.logger.error(f'❌ 默认分类初始化失败: {e}')
