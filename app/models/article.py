import re
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import List, Optional


class ArticleStatus(Enum):
    """文章状态（封闭集合，审核流转由后端决定）"""
    DRAFT = 'draft'
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    PUBLISHED = 'published'
    # 后端返回了未知状态：只展示，不允许编辑或删除
    UNKNOWN = 'unknown'

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def display(self):
        return STATUS_DISPLAY[self]

    @property
    def label(self):
        return self.display.label

    @property
    def is_deletable(self):
        """作者只能删除草稿和被驳回的文章"""
        return self in (ArticleStatus.DRAFT, ArticleStatus.REJECTED)

    @property
    def is_editable(self):
        return self in (ArticleStatus.DRAFT, ArticleStatus.REJECTED)


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    icon: str
    tone: str


STATUS_DISPLAY = {
    ArticleStatus.DRAFT: StatusDisplay('Draft', 'edit', 'gray'),
    ArticleStatus.PENDING: StatusDisplay('Pending Review', 'clock', 'yellow'),
    ArticleStatus.APPROVED: StatusDisplay('Approved', 'check-circle', 'green'),
    ArticleStatus.REJECTED: StatusDisplay('Rejected', 'x-circle', 'red'),
    ArticleStatus.PUBLISHED: StatusDisplay('Published', 'check-circle', 'blue'),
    ArticleStatus.UNKNOWN: StatusDisplay('Unknown', 'help-circle', 'gray'),
}


def _parse_datetime(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None


@dataclass
class Article:
    """作者的文章（后端返回的列表项）"""
    id: str
    title: str
    status: ArticleStatus
    slug: str = ''
    excerpt: str = ''
    content: str = ''
    featured_image: str = ''
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    meta_title: str = ''
    meta_description: str = ''
    created_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewer_name: Optional[str] = None
    rejection_reason: Optional[str] = None
    total_views: int = 0
    total_likes: int = 0
    total_comments: int = 0
    total_shares: int = 0

    @classmethod
    def from_api(cls, data):
        category_id = data.get('category_id')
        return cls(
            id=str(data['id']),
            title=data.get('title') or '',
            status=ArticleStatus.parse(data.get('status')),
            slug=data.get('slug') or '',
            excerpt=data.get('excerpt') or '',
            content=data.get('content') or '',
            featured_image=data.get('featured_image') or '',
            category_id=str(category_id) if category_id is not None else None,
            category_name=data.get('category_name'),
            tags=list(data.get('tags') or []),
            meta_title=data.get('meta_title') or '',
            meta_description=data.get('meta_description') or '',
            created_at=_parse_datetime(data.get('created_at')),
            submitted_at=_parse_datetime(data.get('submitted_at')),
            reviewed_at=_parse_datetime(data.get('reviewed_at')),
            reviewer_name=data.get('reviewer_name'),
            rejection_reason=data.get('rejection_reason'),
            total_views=int(data.get('total_views') or 0),
            total_likes=int(data.get('total_likes') or 0),
            total_comments=int(data.get('total_comments') or data.get('comment_count') or 0),
            total_shares=int(data.get('total_shares') or 0),
        )


@dataclass
class ArticleDraft:
    """编辑器中的表单数据"""
    id: Optional[str] = None
    title: str = ''
    slug: str = ''
    excerpt: str = ''
    content: str = ''
    featured_image: str = ''
    category_id: str = ''
    tags: List[str] = field(default_factory=list)
    meta_title: str = ''
    meta_description: str = ''

    @property
    def is_new(self):
        return not self.id

    def missing_required(self):
        """提交审核时的必填字段（标题、正文、分类）"""
        missing = []
        if not (self.title or '').strip():
            missing.append('title')
        if not _has_text(self.content):
            missing.append('content')
        if not str(self.category_id or '').strip():
            missing.append('category')
        return missing

    @classmethod
    def from_article(cls, article):
        return cls(
            id=article.id,
            title=article.title,
            slug=article.slug,
            excerpt=article.excerpt,
            content=article.content,
            featured_image=article.featured_image,
            category_id=article.category_id or '',
            tags=list(article.tags),
            meta_title=article.meta_title,
            meta_description=article.meta_description,
        )

    def to_payload(self, status):
        data = asdict(self)
        if not self.id:
            data.pop('id')
        category = str(self.category_id or '').strip()
        data['category_id'] = int(category) if category.isdigit() else (category or None)
        data['status'] = status.value
        return data


def _has_text(html):
    """空编辑器会产生 <p></p>，视为无内容"""
    if not html:
        return False
    text = re.sub(r'<[^>]+>', '', html).replace('&nbsp;', ' ')
    return bool(text.strip()) or '<img' in html


@dataclass
class SubmissionQuota:
    """待审核配额（由后端计算，前端只做展示和预检）"""
    pending_count: int
    max_pending: int
    remaining: int
    can_submit: bool

    @classmethod
    def from_api(cls, data, default_max=3):
        pending = int(data.get('pendingCount') or 0)
        max_pending = data.get('maxPending')
        maximum = int(max_pending) if max_pending is not None else default_max
        remaining = data.get('remaining')
        can_submit = data.get('canSubmit')
        return cls(
            pending_count=pending,
            max_pending=maximum,
            remaining=int(remaining) if remaining is not None else max(maximum - pending, 0),
            can_submit=bool(can_submit) if can_submit is not None else pending < maximum,
        )

    @property
    def limit_message(self):
        return (f'You have reached the limit of {self.max_pending} pending articles. '
                'Please wait for review.')
