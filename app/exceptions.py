class AcademoraException(Exception):
    """系统基础异常类"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['code'] = self.code
        rv['success'] = False
        return rv

class ValidationError(AcademoraException):
    """本地表单校验错误（不会发起网络请求）"""
    def __init__(self, message="Invalid data", payload=None):
        super().__init__(message, code=400, payload=payload)

class QuotaExceeded(AcademoraException):
    """待审核文章数量已达上限"""
    def __init__(self, message="Submission limit reached", payload=None):
        super().__init__(message, code=409, payload=payload)

class PermissionDenied(AcademoraException):
    """权限不足"""
    def __init__(self, message="Access denied", payload=None):
        super().__init__(message, code=403, payload=payload)

class ApiError(AcademoraException):
    """后端返回非 2xx 响应，或无法连接后端 (status=0)"""
    def __init__(self, message="Request failed", status=0, payload=None):
        super().__init__(message, code=status or 502, payload=payload)
        self.status = status

class NotFound(ApiError):
    """后端资源不存在"""
    def __init__(self, message="Not found", payload=None):
        super().__init__(message, status=404, payload=payload)

class IdentityProviderError(AcademoraException):
    """身份认证服务拒绝请求（邮箱重复、密码过弱、验证码错误等）"""
    def __init__(self, message="Identity provider error", status=400, payload=None):
        super().__init__(message, code=status, payload=payload)
        self.status = status

class VerificationIncomplete(IdentityProviderError):
    """验证码校验未返回 complete 状态"""
    def __init__(self, message="Verification incomplete", status=400, payload=None):
        super().__init__(message, status=status, payload=payload)
