from dataclasses import dataclass, asdict
from enum import Enum
from urllib.parse import urlencode

ACCOUNT_TYPES = ('individual', 'institution')
DEFAULT_ACCOUNT_TYPE = 'individual'


class SignupStep(Enum):
    """注册流程状态"""
    FORM = 'form'
    VERIFY = 'verify'
    COMPLETE = 'complete'


@dataclass
class SignupProfile:
    """FORM 阶段收集的资料（密码不会写入会话）"""
    first_name: str
    last_name: str
    email: str
    password: str
    account_type: str = DEFAULT_ACCOUNT_TYPE


@dataclass
class VerifyState:
    """VERIFY 阶段：等待 6 位验证码，可序列化到会话"""
    sign_up_id: str
    email: str
    first_name: str
    last_name: str
    account_type: str = DEFAULT_ACCOUNT_TYPE

    step = SignupStep.VERIFY

    def to_dict(self):
        data = asdict(self)
        data['step'] = self.step.value
        return data

    @classmethod
    def from_dict(cls, data):
        if not data or data.get('step') != SignupStep.VERIFY.value:
            return None
        return cls(
            sign_up_id=data['sign_up_id'],
            email=data['email'],
            first_name=data.get('first_name', ''),
            last_name=data.get('last_name', ''),
            account_type=data.get('account_type', DEFAULT_ACCOUNT_TYPE),
        )

    def profile_payload(self, user_id=None):
        """本地用户记录双写使用的资料"""
        payload = {
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'accountType': self.account_type,
        }
        if user_id:
            payload['clerkId'] = user_id
        return payload


@dataclass
class SignupResult:
    """COMPLETE 阶段：会话已激活"""
    session_id: str
    user_id: str
    token: str
    email: str
    account_type: str
    synced: bool

    step = SignupStep.COMPLETE

    @property
    def redirect_path(self):
        return '/register?' + urlencode({'type': self.account_type})


def normalize_account_type(value):
    """
    深链接中的账号类型：缺省为 individual，非法值返回 None
    （调用方应跳转到账号类型选择页）
    """
    if value is None or value == '':
        return DEFAULT_ACCOUNT_TYPE
    return value if value in ACCOUNT_TYPES else None
