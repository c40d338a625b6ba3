# 会话用户、投稿、注册流程（无本地数据库，数据均来自后端 API）
from .user import SessionUser
from .article import (
    Article, ArticleDraft, ArticleStatus, StatusDisplay, STATUS_DISPLAY, SubmissionQuota
)
from .signup import (
    ACCOUNT_TYPES, SignupStep, SignupProfile, VerifyState, SignupResult, normalize_account_type
)
