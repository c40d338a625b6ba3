def test_status_reports_backend_online(app, backend_api):
    backend_api.add('GET', '/health', {'status': 'ok'})
    result = app.test_cli_runner().invoke(args=['status'])

    assert result.exit_code == 0
    assert 'http://api.test/api' in result.output
    assert '后端连接正常' in result.output


def test_status_reports_backend_down(app):
    result = app.test_cli_runner().invoke(args=['status'])

    assert result.exit_code == 0
    assert '后端不可用' in result.output
