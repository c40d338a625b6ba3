"""
外部身份认证服务客户端
封装待注册账号创建、邮箱验证码发送与校验、会话激活和令牌签发。
"""
from typing import Dict, Optional

import httpx
from flask import current_app

from app.exceptions import IdentityProviderError


def extract_provider_message(response: httpx.Response) -> str:
    """身份服务错误格式: {"errors": [{"message": ..., "long_message": ...}]}"""
    try:
        body = response.json()
    except ValueError:
        return f'Identity provider error (status {response.status_code})'

    errors = body.get('errors') if isinstance(body, dict) else None
    if errors:
        first = errors[0]
        return first.get('long_message') or first.get('message') or 'Identity provider error'
    if isinstance(body, dict) and body.get('message'):
        return body['message']
    return f'Identity provider error (status {response.status_code})'


class IdentityClient:
    """身份认证服务扩展"""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        headers = {'Accept': 'application/json'}
        if app.config.get('IDENTITY_API_KEY'):
            headers['Authorization'] = f"Bearer {app.config['IDENTITY_API_KEY']}"

        client = httpx.Client(
            base_url=app.config['IDENTITY_API_URL'].rstrip('/') + '/',
            timeout=app.config.get('API_TIMEOUT', 30.0),
            headers=headers,
            transport=app.config.get('IDENTITY_TRANSPORT'),
        )
        app.extensions['identity_client'] = client

    @property
    def client(self) -> httpx.Client:
        return current_app.extensions['identity_client']

    def _post(self, endpoint: str, payload: Optional[Dict] = None) -> Dict:
        try:
            response = self.client.post(endpoint, json=payload or {})
        except httpx.TransportError as e:
            current_app.logger.error(f'身份服务连接失败 {endpoint}: {e}')
            raise IdentityProviderError(
                'Unable to reach the identity service. Please try again.', status=0
            )

        if response.is_error:
            message = extract_provider_message(response)
            current_app.logger.info(f'身份服务拒绝 {endpoint} ({response.status_code}): {message}')
            raise IdentityProviderError(message, status=response.status_code)

        body = response.json() if response.content else {}
        # 部分接口将结果包在 response 字段中
        if isinstance(body, dict) and isinstance(body.get('response'), dict):
            return body['response']
        return body

    def create_sign_up(self, first_name, last_name, email, password) -> Dict:
        """创建待验证的注册记录"""
        return self._post('sign_ups', {
            'first_name': first_name,
            'last_name': last_name,
            'email_address': email,
            'password': password,
        })

    def prepare_email_verification(self, sign_up_id: str) -> Dict:
        """发送邮箱一次性验证码"""
        return self._post(f'sign_ups/{sign_up_id}/prepare_verification', {
            'strategy': 'email_code',
        })

    def attempt_email_verification(self, sign_up_id: str, code: str) -> Dict:
        """提交验证码，返回 status / created_session_id / created_user_id"""
        return self._post(f'sign_ups/{sign_up_id}/attempt_verification', {
            'strategy': 'email_code',
            'code': code,
        })

    def activate_session(self, session_id: str) -> Dict:
        """激活新会话"""
        return self._post(f'sessions/{session_id}/touch')

    def create_session_token(self, session_id: str) -> str:
        """为会话签发新的访问令牌 (JWT)"""
        data = self._post(f'sessions/{session_id}/tokens')
        token = data.get('jwt') or data.get('token')
        if not token:
            raise IdentityProviderError('Identity provider returned no session token', status=502)
        return token
