import os
from app import create_app
from app.extensions import backend, identity

# 从环境变量获取配置模式
# 支持 FLASK_ENV 或 FLASK_CONFIG
config_name = os.getenv('FLASK_ENV') or os.getenv('FLASK_CONFIG') or 'default'
if config_name in ('development', 'dev'):
    config_name = 'development'

app = create_app(config_name)

@app.shell_context_processor
def make_shell_context():
    """
    配置 Flask Shell 上下文。
    允许在命令行中使用 'flask shell' 时直接拿到 API 客户端。
    """
    return dict(
        app=app,
        backend=backend,
        identity=identity,
    )

if __name__ == '__main__':
    print("-------------------------------------------------------")
    print("   ACADEMORA WEB STARTUP                               ")
    print(f"   API: {app.config['API_BASE_URL']}")
    print("-------------------------------------------------------")
    app.run(host='0.0.0.0', port=5000)
