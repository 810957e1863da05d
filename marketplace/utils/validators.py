"""
表单验证器
"""
from decimal import Decimal, InvalidOperation
from flask import current_app
from wtforms.validators import ValidationError
from marketplace.utils.file_helper import file_size_of, format_size


def _as_list(data):
    if not data:
        return []
    return data if isinstance(data, list) else [data]


def validate_price(form, field):
    """验证价格：非负数，最多两位小数"""
    if field.data:
        try:
            price = Decimal(field.data.strip())
        except InvalidOperation:
            raise ValidationError('价格格式无效')
        if not price.is_finite():
            raise ValidationError('价格格式无效')
        if price < 0:
            raise ValidationError('价格不能为负')
        if price.as_tuple().exponent < -2:
            raise ValidationError('价格最多两位小数')


class MaxFiles:
    """限制同一字段的文件数量，上限从配置读取"""
    def __init__(self, config_key):
        self.config_key = config_key

    def __call__(self, form, field):
        limit = current_app.config[self.config_key]
        if len(_as_list(field.data)) > limit:
            raise ValidationError(f'最多上传 {limit} 个文件')


def validate_file_size(form, field):
    """单个文件大小不超过 MAX_FILE_SIZE"""
    max_size = current_app.config['MAX_FILE_SIZE']
    for f in _as_list(field.data):
        if file_size_of(f) > max_size:
            raise ValidationError(f'{f.filename} 超过 {format_size(max_size)}')
