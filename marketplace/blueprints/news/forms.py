from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Optional
from marketplace.utils.validators import validate_file_size


class NewsForm(FlaskForm):
    """新闻发布表单"""
    class Meta:
        csrf = False

    title = StringField('标题', validators=[DataRequired()])
    # 富文本 HTML
    content = TextAreaField('内容', validators=[DataRequired()])
    excerpt = TextAreaField('摘要', validators=[DataRequired()])
    image = FileField('封面图', validators=[validate_file_size])


class NewsUpdateForm(NewsForm):
    title = StringField('标题', validators=[Optional()])
    content = TextAreaField('内容', validators=[Optional()])
    excerpt = TextAreaField('摘要', validators=[Optional()])

    def submitted_fields(self):
        return {
            field.name: field.data
            for field in (self.title, self.content, self.excerpt)
            if field.raw_data
        }
