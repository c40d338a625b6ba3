"""
后端 REST API 客户端
使用 httpx 直接调用 API，认证令牌以显式的 ApiSession 对象传递，
不依赖任何全局存储。
"""
from typing import Any, Dict, Optional

import httpx
from flask import current_app

from app.exceptions import ApiError, NotFound


def extract_error_message(response: httpx.Response) -> str:
    """从后端错误响应中提取可展示的错误信息"""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get('error') or body.get('message')
        if message:
            return str(message)
        return 'Request failed'

    if response.status_code == 0 or response.status_code >= 500:
        return 'Server is not responding. Please try again later.'
    return f'HTTP error! status: {response.status_code}'


class ApiSession:
    """绑定了某个访问令牌的请求会话（请求级作用域）"""

    def __init__(self, client: httpx.Client, token: Optional[str] = None):
        self._client = client
        self.token = token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def with_token(self, token: Optional[str]) -> 'ApiSession':
        """使用另一个令牌创建新会话（例如刚签发的身份令牌）"""
        return ApiSession(self._client, token)

    def request(self, method: str, endpoint: str, payload: Any = None,
                params: Optional[Dict] = None) -> Any:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'

        try:
            response = self._client.request(
                method, endpoint.lstrip('/'),
                json=payload, params=params, headers=headers
            )
        except httpx.TransportError as e:
            current_app.logger.error(f'API 连接失败 {method} {endpoint}: {e}')
            raise ApiError(
                f'Cannot connect to API at {self._client.base_url}. '
                'Make sure the backend server is running.',
                status=0
            )

        if response.status_code == 404:
            raise NotFound(extract_error_message(response))

        if response.is_error:
            message = extract_error_message(response)
            current_app.logger.warning(
                f'API {method} {endpoint} -> {response.status_code}: {message}'
            )
            try:
                body = response.json()
            except ValueError:
                body = None
            raise ApiError(message, status=response.status_code,
                           payload=body if isinstance(body, dict) else None)

        if not response.content:
            return {}
        return response.json()

    def get(self, endpoint, params=None):
        return self.request('GET', endpoint, params=params)

    def post(self, endpoint, payload=None):
        return self.request('POST', endpoint, payload=payload)

    def put(self, endpoint, payload=None):
        return self.request('PUT', endpoint, payload=payload)

    def delete(self, endpoint):
        return self.request('DELETE', endpoint)


class BackendClient:
    """后端 API 扩展，按 Flask 扩展的方式 init_app 绑定"""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        base_url = app.config['API_BASE_URL'].rstrip('/') + '/'
        client = httpx.Client(
            base_url=base_url,
            timeout=app.config.get('API_TIMEOUT', 30.0),
            transport=app.config.get('API_TRANSPORT'),
        )
        app.extensions['backend_client'] = client

    @property
    def client(self) -> httpx.Client:
        return current_app.extensions['backend_client']

    def session(self, token: Optional[str] = None) -> ApiSession:
        return ApiSession(self.client, token)
