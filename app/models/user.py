from dataclasses import dataclass, asdict
from typing import Optional

from flask_login import UserMixin


@dataclass
class SessionUser(UserMixin):
    """
    登录用户
    本地用户记录的镜像（id / email / role），保存在签名会话中，
    权威数据始终在后端。
    """
    id: str
    email: str
    role: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def display_name(self):
        full = ' '.join(p for p in (self.first_name, self.last_name) if p)
        return full or self.email

    @classmethod
    def from_api(cls, data):
        """从后端 /auth/me 或登录响应构造"""
        return cls(
            id=str(data.get('id') or data.get('clerkId') or ''),
            email=data.get('email', ''),
            role=data.get('role'),
            first_name=data.get('firstName') or data.get('first_name'),
            last_name=data.get('lastName') or data.get('last_name'),
        )

    @classmethod
    def from_dict(cls, data):
        return cls(**{k: data.get(k) for k in ('id', 'email', 'role', 'first_name', 'last_name')})

    def to_dict(self):
        return asdict(self)
