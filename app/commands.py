import click
from flask import current_app
from flask.cli import with_appcontext

from app.exceptions import ApiError
from app.extensions import backend


@click.command('status')
@with_appcontext
def status():
    """
    [检查指令] 查看后端 API 和身份服务配置，并探测后端是否在线。
    """
    click.echo(click.style('📊 AcademOra 服务状态:', fg='cyan', bold=True))
    click.echo(f" - API: \t\t{current_app.config['API_BASE_URL']}")
    click.echo(f" - Identity: \t{current_app.config['IDENTITY_API_URL']}")
    key_state = '已配置' if current_app.config.get('IDENTITY_API_KEY') else '未配置'
    click.echo(f" - Identity Key: \t{key_state}")

    try:
        backend.session().get('/health')
        click.echo(click.style('✔ 后端连接正常。', fg='green'))
    except ApiError as e:
        click.echo(click.style(f'✘ 后端不可用: {e.message}', fg='red'))
