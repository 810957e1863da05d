import click
from flask import current_app
from flask.cli import with_appcontext
from marketplace.exceptions import ValidationError
from marketplace.models import User, Category, Post, NewsArticle
from marketplace.services.seed_service import SeedService
from marketplace.services.storage import storage
from marketplace.services.upload_service import UploadService


@click.command('status')
@with_appcontext
def status():
    """
    [验证指令] 查看当前数据库中的数据统计。
    """
    click.echo(click.style('📊 数据库状态:', fg='cyan', bold=True))

    try:
        c_count = Category.query.count()
        p_count = Post.query.count()
        n_count = NewsArticle.query.count()
        u_count = User.query.count()

        click.echo(f" - 分类 (Categories): \t{c_count}")
        click.echo(f" - 资源帖 (Posts): \t{p_count}")
        click.echo(f" - 新闻 (News): \t{n_count}")
        click.echo(f" - 用户 (Users): \t{u_count}")

        if c_count > 0:
            click.echo(click.style('✔ 数据库连接正常，数据已存在。', fg='green'))
        else:
            click.echo(click.style('⚠ 分类为空，请运行 flask seed-categories。', fg='yellow'))

    except Exception as e:
        click.echo(click.style(f'✘ 数据库读取失败: {str(e)}', fg='red'))
        click.echo("请检查是否执行了 'flask db upgrade'")


def _report(created, existing, skipped):
    for slug in created:
        click.echo(click.style(f'  ✓ 已创建: {slug}', fg='green'))
    for slug in existing:
        click.echo(f'  - 已存在: {slug}')
    for slug in skipped:
        click.echo(click.style(f'  ✗ 写入失败 (名称冲突?): {slug}', fg='yellow'))


@click.command('seed-categories')
@with_appcontext
def seed_categories():
    """补齐默认分类 (可重复执行)"""
    created, existing, skipped = SeedService.ensure_categories(current_app.config['DEFAULT_CATEGORIES'])
    _report(created, existing, skipped)
    click.echo(click.style(f'✔ 默认分类处理完成 (新建 {len(created)} 个)', fg='green', bold=True))


@click.command('add-categories')
@with_appcontext
def add_categories():
    """补齐扩展分类 (模型、概念图、参考资料等)"""
    created, existing, skipped = SeedService.ensure_categories(current_app.config['EXTENDED_CATEGORIES'])
    _report(created, existing, skipped)
    click.echo(click.style(f'✔ 扩展分类处理完成 (新建 {len(created)} 个)', fg='green', bold=True))


@click.command('cleanup-uploads')
@click.option('--dry-run', is_flag=True, help='只列出孤儿文件，不删除')
@click.option('--grace', type=int, default=None, help='宽限秒数 (默认读取 ORPHAN_GRACE_SECONDS)')
@with_appcontext
def cleanup_uploads(dry_run, grace):
    """
    清理上传目录中没有被任何资源帖或新闻引用的文件。
    """
    names = UploadService.cleanup_orphans(grace_seconds=grace, dry_run=dry_run)
    for name in names:
        click.echo(f'  {"[dry-run] " if dry_run else ""}{name}')
    verb = '发现' if dry_run else '已删除'
    click.echo(click.style(f'✔ {verb} {len(names)} 个孤儿文件', fg='green', bold=True))


@click.command('create-user')
@click.argument('username')
@click.password_option()
@with_appcontext
def create_user(username, password):
    """创建用户"""
    if storage.get_user_by_username(username):
        raise click.ClickException(f'用户 {username} 已存在')
    try:
        user = storage.create_user({'username': username, 'password': password})
    except ValidationError as e:
        raise click.ClickException(e.message)
    click.echo(click.style(f'✔ 用户已创建: {user.username} ({user.id})', fg='green'))
