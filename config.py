import os
from dotenv import load_dotenv

# 加载 .env 环境变量
load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    """基础配置类"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'hard-to-guess-string'

    # 后端 REST API 配置 (兼容前端构建时的 VITE_API_URL)
    API_BASE_URL = (os.environ.get('API_BASE_URL') or
                    os.environ.get('VITE_API_URL') or
                    'http://localhost:3001/api')
    API_TIMEOUT = float(os.environ.get('API_TIMEOUT', '30'))

    # 外部身份认证服务
    IDENTITY_API_URL = os.environ.get('IDENTITY_API_URL', 'https://api.clerk.com')
    IDENTITY_API_KEY = os.environ.get('IDENTITY_API_KEY', '')

    # 文章投稿
    ARTICLE_REDIRECT_DELAY = 1.5  # 提交成功后跳转到列表的延迟（秒）
    DEFAULT_MAX_PENDING = 3

    # 用户同步标记有效期（分钟）
    USER_SYNC_TTL_MINUTES = 30
    USER_SYNC_RETRY_MINUTES = 5

    # 缓存配置 (默认使用 SimpleCache，生产环境可改 Redis)
    CACHE_TYPE = "SimpleCache"
    CACHE_DEFAULT_TIMEOUT = 300

    @staticmethod
    def init_app(app):
        pass

class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True

class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False

    # 安全设置
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)
        if app.config['SECRET_KEY'] == 'hard-to-guess-string':
            app.logger.warning('⚠️ SECRET_KEY 未配置，正在使用默认值')

class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    CACHE_TYPE = "NullCache"
    ASSETS_DEBUG = True
    API_BASE_URL = 'http://api.test/api'
    IDENTITY_API_URL = 'http://identity.test'
    ARTICLE_REDIRECT_DELAY = 0

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
