"""
角色检查
角色来自后端用户记录（登录时写入会话），后端仍会对每个请求再次鉴权。
"""
from functools import wraps
from flask import abort, current_app, flash, redirect, url_for, request
from flask_login import current_user


def role_required(*roles):
    """
    限定角色访问的装饰器

    用法:
        @role_required('admin')
        def users():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                flash('Please sign in to continue.', 'warning')
                return redirect(url_for('auth.login', next=request.url))

            if current_user.role not in roles:
                current_app.logger.info(
                    f'拒绝访问 {request.path}: {current_user.email} (role={current_user.role})'
                )
                abort(403)

            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_required = role_required('admin')
