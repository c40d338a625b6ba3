import logging
import colorlog
from flask import Flask, render_template, redirect, url_for, flash, request
from flask_assets import Bundle
from config import config
from app.extensions import login_manager, cache, assets, csrf, backend, identity
from app.exceptions import ApiError, NotFound

from app import commands


def create_app(config_name='default'):
    """AcademOra Web 应用工厂函数"""
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. 初始化扩展
    login_manager.init_app(app)
    cache.init_app(app)
    assets.init_app(app)
    csrf.init_app(app)
    backend.init_app(app)
    identity.init_app(app)

    # 3. 配置日志
    configure_logging(app)

    # 4. 注册静态资源
    register_assets(app)

    # 5. 注册蓝图 (Blueprints)
    register_blueprints(app)

    # 6. 注册全局错误处理
    register_error_handlers(app)

    # 7. 注册 CLI 命令
    register_commands(app)

    return app


def register_blueprints(app):
    """注册所有页面模块蓝图"""
    # 主页 / 营销页面 / 仪表盘
    from app.blueprints.main import main_bp
    app.register_blueprint(main_bp)

    # 登录、注册、找回密码
    from app.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp)

    # 用户投稿
    from app.blueprints.articles import articles_bp
    app.register_blueprint(articles_bp, url_prefix='/my-articles')

    # 内容浏览
    from app.blueprints.content import content_bp
    app.register_blueprint(content_bp)

    # 管理员
    from app.blueprints.admin import admin_bp
    app.register_blueprint(admin_bp, url_prefix='/admin')


def register_assets(app):
    """站点样式和富文本编辑器脚本"""
    if 'site_css' not in assets:
        assets.register('site_css', Bundle('css/site.css', output='gen/site.css'))
        assets.register('editor_js', Bundle('js/editor.js', output='gen/editor.js'))


def register_error_handlers(app):
    @app.errorhandler(403)
    def forbidden(e):
        return render_template('errors/403.html'), 403

    @app.errorhandler(404)
    def page_not_found(e):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        return render_template('errors/500.html'), 500

    @app.errorhandler(NotFound)
    def api_not_found(e):
        return render_template('errors/404.html', message=e.message), 404

    @app.errorhandler(ApiError)
    def api_error(e):
        # 令牌失效：清理会话后回到登录页
        if e.status == 401:
            from app.utils.session import end_user_session
            end_user_session()
            flash('Your session has expired. Please sign in again.', 'warning')
            return redirect(url_for('auth.login', next=request.full_path))
        app.logger.error(f'未处理的 API 错误 ({e.status}): {e.message}')
        return render_template('errors/api.html', message=e.message), 502


def register_commands(app):
    """注册 Flask CLI 命令"""
    app.cli.add_command(commands.status)


def configure_logging(app):
    """配置彩色控制台日志，提升开发体验"""
    if app.debug:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)

        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.INFO)
