"""
账号注册服务
两步状态机：FORM（收集资料）-> VERIFY（6 位邮箱验证码）-> COMPLETE。
验证完成后将资料同步到本地用户记录：先双写完整资料，失败再做仅令牌的同步，
两者都失败只记录日志，不阻塞用户继续注册流程。
"""
from datetime import datetime, timedelta

from flask import current_app, session

from app.exceptions import ApiError, IdentityProviderError, VerificationIncomplete
from app.models.signup import VerifyState, SignupResult

SYNC_FLAG_KEY = 'user_synced_until'


class SignupFlow:
    """注册流程编排（身份服务 + 后端 API）"""

    def __init__(self, identity, api):
        self.identity = identity
        self.api = api

    def start(self, profile):
        """
        FORM -> VERIFY
        创建待验证注册并立即发送验证码；任何拒绝都会抛出
        IdentityProviderError，调用方保持在 FORM 阶段。
        """
        sign_up = self.identity.create_sign_up(
            profile.first_name, profile.last_name, profile.email, profile.password
        )
        sign_up_id = sign_up.get('id')
        if not sign_up_id:
            raise IdentityProviderError('Sign up could not be created. Please try again.')

        self.identity.prepare_email_verification(sign_up_id)
        current_app.logger.info(f'验证码已发送: {profile.email}')

        return VerifyState(
            sign_up_id=sign_up_id,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            account_type=profile.account_type,
        )

    def verify(self, state, code):
        """
        VERIFY -> COMPLETE
        状态不是 complete 时抛出 VerificationIncomplete（停留在 VERIFY）。
        """
        attempt = self.identity.attempt_email_verification(state.sign_up_id, code)
        status = attempt.get('status')
        if status != 'complete':
            current_app.logger.info(f'验证未完成 ({status}): {state.email}')
            raise VerificationIncomplete(
                'Verification incomplete. Please check the code and try again.'
            )

        session_id = attempt.get('created_session_id')
        user_id = attempt.get('created_user_id') or ''

        # 验证码已被消费，之后的失败都不能让用户停留在 VERIFY
        token = self._issue_token(state, session_id)
        synced = self.sync_profile(state, token, user_id) if token else False

        return SignupResult(
            session_id=session_id or '',
            user_id=user_id,
            token=token or '',
            email=state.email,
            account_type=state.account_type,
            synced=synced,
        )

    def _issue_token(self, state, session_id):
        """激活新会话并签发令牌，失败时返回 None（跳过资料同步）"""
        if not session_id:
            current_app.logger.warning(f'验证完成但未返回会话 ID，跳过会话激活: {state.email}')
            return None
        try:
            self.identity.activate_session(session_id)
            return self.identity.create_session_token(session_id)
        except IdentityProviderError as e:
            current_app.logger.warning(f'会话激活或令牌签发失败，跳过资料同步: {e.message}')
            return None

    def sync_profile(self, state, token, user_id=None):
        """
        尽力同步资料到本地用户记录
        返回是否同步成功；失败只记录日志。
        """
        api = self.api.with_token(token)
        try:
            api.post('/users/dual-sync', state.profile_payload(user_id))
            current_app.logger.info(f'✅ 用户资料双写完成: {state.email}')
            return True
        except ApiError as e:
            current_app.logger.warning(f'资料双写失败，尝试仅令牌同步: {e.message}')

        try:
            api.post('/users/sync')
            current_app.logger.info(f'用户同步完成（未含资料字段）: {state.email}')
            return True
        except ApiError as e:
            current_app.logger.warning(f'⚠️ 用户同步失败，继续注册流程: {e.message}')
            return False


def ensure_user_synced(api, force=False):
    """
    确保已登录用户在后端存在（即时同步）
    成功后在会话中记录有效期，失败则缩短为重试间隔；从不抛出异常。
    """
    if not api.is_authenticated:
        return False

    now = datetime.utcnow()
    flag = session.get(SYNC_FLAG_KEY)
    if not force and flag:
        # 标记未过期时沿用上次结果
        try:
            if datetime.fromisoformat(flag['until']) > now:
                return bool(flag.get('ok'))
        except (KeyError, ValueError):
            pass

    try:
        api.post('/users/sync')
    except ApiError as e:
        current_app.logger.warning(f'即时用户同步失败: {e.message}')
        retry = current_app.config['USER_SYNC_RETRY_MINUTES']
        session[SYNC_FLAG_KEY] = {'ok': False, 'until': (now + timedelta(minutes=retry)).isoformat()}
        return False

    ttl = current_app.config['USER_SYNC_TTL_MINUTES']
    session[SYNC_FLAG_KEY] = {'ok': True, 'until': (now + timedelta(minutes=ttl)).isoformat()}
    return True
