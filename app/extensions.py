from flask_login import LoginManager
from flask_caching import Cache
from flask_assets import Environment
from flask_wtf.csrf import CSRFProtect

from app.services.api_client import BackendClient
from app.services.identity_service import IdentityClient

# 初始化扩展对象 (暂不绑定 app)
cache = Cache()
assets = Environment()
login_manager = LoginManager()
csrf = CSRFProtect()
backend = BackendClient()
identity = IdentityClient()

# 配置 LoginManager
login_manager.login_view = 'auth.login'  # 未登录跳转视图
login_manager.login_message = 'Please sign in to continue.'
login_manager.login_message_category = 'warning'  # 消息类别
login_manager.session_protection = 'basic'


@login_manager.user_loader
def load_user(user_id):
    """Flask-Login 用户加载回调：从会话中恢复用户，不访问数据库"""
    from flask import session
    from app.models.user import SessionUser
    data = session.get('user')
    if not data or str(data.get('id')) != str(user_id):
        return None
    return SessionUser.from_dict(data)
