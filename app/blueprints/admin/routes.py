from flask import render_template

from app.blueprints.admin import admin_bp
from app.services.content_service import get_admin_users
from app.utils.permissions import admin_required
from app.utils.session import get_api


@admin_bp.route('/users')
@admin_required
def users():
    """用户列表（仅管理员）"""
    return render_template('admin/users.html', users=get_admin_users(get_api()))
