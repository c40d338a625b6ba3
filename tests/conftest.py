import json

import httpx
import pytest

from app import create_app
from app.extensions import backend, identity


class FakeService:
    """记录请求并按 (method, path) 返回预设响应的 httpx MockTransport 处理器"""

    def __init__(self, prefix=''):
        self.prefix = prefix
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method, self.prefix + path)] = (status, body)

    def handler(self, request):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={'error': 'Not found'})
        status, body = route
        if callable(body):
            return body(request)
        return httpx.Response(status, json=body if body is not None else {})

    def calls(self, method, path):
        return [r for r in self.requests
                if r.method == method and r.url.path == self.prefix + path]

    def last_json(self, method, path):
        return json.loads(self.calls(method, path)[-1].content)


@pytest.fixture
def backend_api():
    return FakeService(prefix='/api')


@pytest.fixture
def identity_api():
    return FakeService()


@pytest.fixture
def app(backend_api, identity_api):
    app = create_app('testing')
    app.config['API_TRANSPORT'] = httpx.MockTransport(backend_api.handler)
    app.config['IDENTITY_TRANSPORT'] = httpx.MockTransport(identity_api.handler)
    backend.init_app(app)
    identity.init_app(app)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, role=None, token='token-123', user_id='user_1'):
    """直接写入会话，模拟已登录用户"""
    with client.session_transaction() as sess:
        sess['api_token'] = token
        sess['user'] = {
            'id': user_id,
            'email': 'ada@academora.io',
            'role': role,
            'first_name': 'Ada',
            'last_name': 'Lovelace',
        }
        sess['_user_id'] = user_id
        sess['_fresh'] = True


@pytest.fixture
def auth_client(client):
    login(client)
    return client


@pytest.fixture
def admin_client(client):
    login(client, role='admin')
    return client
