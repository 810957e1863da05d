from flask_wtf import FlaskForm
from flask_wtf.file import MultipleFileField
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional
from marketplace.utils.validators import validate_price, validate_file_size, MaxFiles


class PostForm(FlaskForm):
    """资源帖发布表单 (multipart)"""
    class Meta:
        csrf = False

    title = StringField('标题', validators=[DataRequired()])
    description = TextAreaField('描述', validators=[DataRequired()])
    categoryId = StringField('分类', validators=[DataRequired(), Length(max=64)])
    price = StringField('价格', validators=[Optional(), validate_price])
    images = MultipleFileField('预览图', validators=[MaxFiles('MAX_IMAGES_PER_POST'), validate_file_size])
    files = MultipleFileField('下载文件', validators=[MaxFiles('MAX_FILES_PER_POST'), validate_file_size])


class PostUpdateForm(PostForm):
    """资源帖编辑表单：所有字段可选，只更新提交了的字段"""
    title = StringField('标题', validators=[Optional()])
    description = TextAreaField('描述', validators=[Optional()])
    categoryId = StringField('分类', validators=[Optional(), Length(max=64)])

    def submitted_fields(self):
        """实际出现在请求里的文本字段"""
        return {
            field.name: field.data
            for field in (self.title, self.description, self.categoryId, self.price)
            if field.raw_data
        }
