"""
请求级会话工具
访问令牌只保存在签名的 Flask 会话里，每个请求构造一次 ApiSession 放在 g 上。
"""
from flask import g, session
from flask_login import login_user, logout_user

from app.extensions import backend

TOKEN_KEY = 'api_token'
USER_KEY = 'user'


def get_api():
    """当前请求的 API 会话（携带当前用户的访问令牌）"""
    if 'api' not in g:
        g.api = backend.session(session.get(TOKEN_KEY))
    return g.api


def start_user_session(user, token, remember=False):
    """登录：写入令牌和用户镜像，并交给 Flask-Login"""
    session[TOKEN_KEY] = token
    session[USER_KEY] = user.to_dict()
    g.pop('api', None)
    login_user(user, remember=remember)


def end_user_session():
    """登出：清除令牌、用户镜像和同步标记"""
    logout_user()
    for key in (TOKEN_KEY, USER_KEY, 'user_synced_until', 'signup'):
        session.pop(key, None)
    g.pop('api', None)
