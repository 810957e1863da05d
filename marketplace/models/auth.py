from werkzeug.security import generate_password_hash, check_password_hash
from marketplace.extensions import db
from .base import BaseModel

class User(BaseModel):
    """用户 (演示遗留，主流程不使用)"""
    __tablename__ = 'users'
    serialize_exclude = ('password_hash',)

    username = db.Column(db.Text, nullable=False, unique=True)
    password_hash = db.Column('password', db.Text, nullable=False)

    @property
    def password(self):
        raise AttributeError('密码不可读')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.username}>'
