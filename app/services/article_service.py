"""
用户文章投稿服务
草稿保存 / 提交审核 / 删除，以及待审核配额的前端预检。
配额的最终校验在后端，这里只用于提前给出提示、避免无效请求。
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

from flask import current_app

from app.exceptions import ApiError, NotFound, PermissionDenied, QuotaExceeded, ValidationError
from app.models.article import Article, ArticleStatus, SubmissionQuota

REQUIRED_FIELDS_MESSAGE = 'Title, content, and category are required for submission'


def slugify(title):
    """根据标题生成 URL slug"""
    slug = (title or '').lower()
    slug = re.sub(r'[^\w\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


@dataclass
class EditorContext:
    """编辑器加载所需的数据"""
    quota: Optional[SubmissionQuota]
    article: Optional[Article] = None
    categories: List[dict] = field(default_factory=list)


class ArticleWorkflow:
    """作者的文章投稿流程"""

    def __init__(self, api):
        self.api = api

    def list_articles(self):
        """获取我的文章列表，失败时返回空列表"""
        try:
            data = self.api.get('/user-articles/my-articles')
        except ApiError as e:
            current_app.logger.error(f'加载文章列表失败: {e.message}')
            return []
        return [Article.from_api(item) for item in data.get('articles') or []]

    def get_quota(self):
        """获取待审核配额，失败时返回 None（由后端继续兜底校验）"""
        try:
            data = self.api.get('/user-articles/can-submit')
        except ApiError as e:
            current_app.logger.error(f'加载投稿配额失败: {e.message}')
            return None
        return SubmissionQuota.from_api(data, current_app.config['DEFAULT_MAX_PENDING'])

    def get_categories(self):
        try:
            data = self.api.get('/categories')
        except ApiError as e:
            current_app.logger.warning(f'加载分类失败: {e.message}')
            return []
        if isinstance(data, dict):
            return data.get('categories') or []
        return data or []

    def load(self, article_id=None):
        """加载编辑器：分类、配额，编辑时还有文章本身"""
        context = EditorContext(quota=self.get_quota(), categories=self.get_categories())
        if article_id:
            article = next((a for a in self.list_articles() if a.id == str(article_id)), None)
            if article is None:
                raise NotFound('Article not found')
            context.article = article
        return context

    def save_draft(self, draft):
        """保存草稿：不做必填和配额校验"""
        return self._submit(draft, ArticleStatus.DRAFT)

    def submit_for_review(self, draft, quota):
        """
        提交审核
        1. 标题、正文、分类必填
        2. 新文章且配额已满时直接拒绝
        以上两种情况都不会发起网络请求。
        """
        if draft.missing_required():
            raise ValidationError(REQUIRED_FIELDS_MESSAGE,
                                  payload={'missing': draft.missing_required()})

        if quota is not None and not quota.can_submit and draft.is_new:
            raise QuotaExceeded(quota.limit_message, payload={
                'pendingCount': quota.pending_count,
                'maxPending': quota.max_pending,
            })

        return self._submit(draft, ArticleStatus.PENDING)

    def _submit(self, draft, status):
        if not draft.slug and draft.title:
            draft.slug = slugify(draft.title)
        data = self.api.post('/user-articles/submit', draft.to_payload(status))
        current_app.logger.info(f'文章已保存 ({status.value}): {draft.title!r}')
        if status is ArticleStatus.PENDING:
            return data.get('message') or 'Article submitted for review'
        return data.get('message') or 'Draft saved'

    def delete(self, article):
        """删除草稿或被驳回的文章，成功后返回最新配额"""
        if not article.status.is_deletable:
            raise PermissionDenied('Only draft or rejected articles can be deleted')
        self.api.delete(f'/user-articles/{article.id}')
        current_app.logger.info(f'文章已删除: {article.id}')
        return self.get_quota()

    def analytics(self, article_id):
        return self.api.get(f'/user-articles/my-articles/{article_id}/analytics')


def filter_articles(articles, status='all'):
    """按状态过滤，'all' 或未知状态返回全部"""
    known = {s.value for s in ArticleStatus}
    if not status or status == 'all' or status not in known:
        return list(articles)
    return [a for a in articles if a.status.value == status]


def article_stats(articles):
    stats = {'total': len(articles)}
    for status in ArticleStatus:
        stats[status.value] = sum(1 for a in articles if a.status is status)
    return stats
