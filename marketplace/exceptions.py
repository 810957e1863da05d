class MarketplaceException(Exception):
    """市场系统基础异常类"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        return rv

class ValidationError(MarketplaceException):
    """输入数据校验失败 / 唯一约束冲突"""
    def __init__(self, message="Invalid data", payload=None):
        super().__init__(message, code=400, payload=payload)

class NotFound(MarketplaceException):
    """资源不存在"""
    def __init__(self, message="Not found", payload=None):
        super().__init__(message, code=404, payload=payload)
