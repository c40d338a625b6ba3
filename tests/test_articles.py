import httpx
import pytest

from app.exceptions import PermissionDenied, QuotaExceeded, ValidationError
from app.extensions import backend
from app.models.article import Article, ArticleDraft, ArticleStatus, SubmissionQuota
from app.services.article_service import (
    REQUIRED_FIELDS_MESSAGE, ArticleWorkflow, article_stats, filter_articles, slugify
)

LIMIT_MESSAGE = 'You have reached the limit of 3 pending articles. Please wait for review.'


def make_article(article_id, status, title='Title'):
    return {
        'id': article_id,
        'title': title,
        'status': status,
        'content': '<p>Body</p>',
        'category_id': 1,
        'category_name': 'Guides',
        'total_views': 10,
    }


@pytest.fixture
def articles():
    return [
        make_article('a-draft', 'draft', 'My draft'),
        make_article('a-pending', 'pending', 'Waiting'),
        make_article('a-rejected', 'rejected', 'Needs work'),
        make_article('a-published', 'published', 'Live'),
    ]


@pytest.fixture
def article_api(backend_api, articles):
    """文章列表与删除共享同一份数据"""
    def my_articles(request):
        return httpx.Response(200, json={'articles': articles})

    backend_api.add('GET', '/user-articles/my-articles', my_articles)
    backend_api.add('GET', '/categories', {'categories': [{'id': 1, 'name': 'Guides'}]})
    backend_api.add('POST', '/user-articles/submit', {'message': 'Article submitted for review'})

    for article in articles:
        def remove(request, article_id=article['id']):
            articles[:] = [a for a in articles if a['id'] != article_id]
            return httpx.Response(200, json={'message': 'deleted'})
        backend_api.add('DELETE', f"/user-articles/{article['id']}", remove)
    return backend_api


def set_quota(api, pending, maximum=3):
    api.add('GET', '/user-articles/can-submit', {
        'canSubmit': pending < maximum,
        'pendingCount': pending,
        'maxPending': maximum,
        'remaining': max(maximum - pending, 0),
    })


# ---- 模型与纯函数 ----

def test_status_rules():
    assert ArticleStatus.DRAFT.is_deletable and ArticleStatus.REJECTED.is_deletable
    assert not ArticleStatus.PENDING.is_deletable
    assert not ArticleStatus.APPROVED.is_deletable
    assert not ArticleStatus.PUBLISHED.is_deletable
    assert ArticleStatus.PENDING.label == 'Pending Review'


def test_quota_limit_message():
    quota = SubmissionQuota.from_api({'pendingCount': 3, 'maxPending': 3})
    assert not quota.can_submit
    assert quota.remaining == 0
    assert quota.limit_message == LIMIT_MESSAGE


def test_missing_required_treats_empty_editor_as_blank():
    draft = ArticleDraft(title='  ', content='<p><br></p>', category_id='')
    assert draft.missing_required() == ['title', 'content', 'category']
    assert ArticleDraft(title='T', content='<p>x</p>', category_id='2').missing_required() == []


def test_payload_drops_id_for_new_articles():
    payload = ArticleDraft(title='T', category_id='4').to_payload(ArticleStatus.PENDING)
    assert 'id' not in payload
    assert payload['category_id'] == 4
    assert payload['status'] == 'pending'


def test_slugify():
    assert slugify('Study in France: A Guide!') == 'study-in-france-a-guide'
    assert slugify('  multiple   spaces -- here ') == 'multiple-spaces-here'


def test_filter_and_stats(articles):
    parsed = [Article.from_api(a) for a in articles]
    assert [a.id for a in filter_articles(parsed, 'rejected')] == ['a-rejected']
    assert len(filter_articles(parsed, 'all')) == 4
    stats = article_stats(parsed)
    assert stats['total'] == 4
    assert stats['draft'] == 1 and stats['pending'] == 1


# ---- 投稿流程 ----

def test_submit_without_required_fields_never_reaches_backend(app, article_api):
    with app.app_context():
        workflow = ArticleWorkflow(backend.session('t'))
        with pytest.raises(ValidationError) as exc:
            workflow.submit_for_review(ArticleDraft(title='Only a title'), quota=None)

    assert exc.value.message == REQUIRED_FIELDS_MESSAGE
    assert article_api.calls('POST', '/user-articles/submit') == []


def test_full_quota_blocks_new_submission(app, article_api):
    quota = SubmissionQuota(pending_count=3, max_pending=3, remaining=0, can_submit=False)
    draft = ArticleDraft(title='T', content='<p>Body</p>', category_id='1')
    with app.app_context():
        workflow = ArticleWorkflow(backend.session('t'))
        with pytest.raises(QuotaExceeded) as exc:
            workflow.submit_for_review(draft, quota)

    assert exc.value.message == LIMIT_MESSAGE
    assert article_api.calls('POST', '/user-articles/submit') == []


def test_unknown_quota_lets_backend_decide(app, article_api):
    draft = ArticleDraft(title='Hello World', content='<p>Body</p>', category_id='1')
    with app.app_context():
        message = ArticleWorkflow(backend.session('t')).submit_for_review(draft, quota=None)

    assert message == 'Article submitted for review'
    payload = article_api.last_json('POST', '/user-articles/submit')
    assert payload['slug'] == 'hello-world'
    assert payload['status'] == 'pending'


def test_delete_refuses_pending_article(app, article_api):
    article = Article.from_api(make_article('a-pending', 'pending'))
    with app.app_context():
        with pytest.raises(PermissionDenied):
            ArticleWorkflow(backend.session('t')).delete(article)
    assert article_api.calls('DELETE', '/user-articles/a-pending') == []


# ---- 页面 ----

def test_list_shows_delete_only_for_draft_and_rejected(auth_client, article_api):
    set_quota(article_api, pending=1)
    html = auth_client.get('/my-articles/').get_data(as_text=True)

    assert '/my-articles/a-draft/delete' in html
    assert '/my-articles/a-rejected/delete' in html
    assert '/my-articles/a-pending/delete' not in html
    assert '/my-articles/a-published/delete' not in html
    assert 'Pending review: 1 / 3' in html


def test_list_requires_login(client):
    response = client.get('/my-articles/')
    assert response.status_code == 302
    assert '/login' in response.headers['Location']


def test_delete_confirmation_then_removal(auth_client, article_api):
    set_quota(article_api, pending=1)
    confirm = auth_client.get('/my-articles/a-draft/delete')
    assert confirm.status_code == 200
    assert article_api.calls('DELETE', '/user-articles/a-draft') == []

    response = auth_client.post('/my-articles/a-draft/delete', follow_redirects=True)
    html = response.get_data(as_text=True)
    assert len(article_api.calls('DELETE', '/user-articles/a-draft')) == 1
    assert 'id="article-a-draft"' not in html
    assert 'Article deleted.' in html


def test_delete_pending_article_is_refused(auth_client, article_api):
    set_quota(article_api, pending=1)
    response = auth_client.post('/my-articles/a-pending/delete', follow_redirects=True)
    assert article_api.calls('DELETE', '/user-articles/a-pending') == []
    assert 'Only draft or rejected articles can be deleted.' in response.get_data(as_text=True)


def test_submit_blocked_when_quota_full(auth_client, article_api):
    set_quota(article_api, pending=3)
    response = auth_client.post('/my-articles/new', data={
        'title': 'New guide',
        'content': '<p>Body</p>',
        'category_id': '1',
        'action': 'submit',
    })

    assert response.status_code == 200
    assert LIMIT_MESSAGE in response.get_data(as_text=True)
    assert article_api.calls('POST', '/user-articles/submit') == []


def test_submit_with_missing_fields_shows_message(auth_client, article_api):
    set_quota(article_api, pending=0)
    response = auth_client.post('/my-articles/new', data={
        'title': 'No body',
        'content': '<p></p>',
        'action': 'submit',
    })

    assert REQUIRED_FIELDS_MESSAGE in response.get_data(as_text=True)
    assert article_api.calls('POST', '/user-articles/submit') == []


def test_draft_saves_with_empty_fields_and_redirects(auth_client, article_api):
    set_quota(article_api, pending=3)
    response = auth_client.post('/my-articles/new', data={'title': 'Idea', 'action': 'draft'})

    html = response.get_data(as_text=True)
    assert 'http-equiv="refresh"' in html
    assert 'url=/my-articles/' in html
    assert article_api.last_json('POST', '/user-articles/submit')['status'] == 'draft'


def test_rejected_article_can_be_resubmitted_with_full_quota(auth_client, article_api):
    set_quota(article_api, pending=3)
    auth_client.post('/my-articles/a-rejected/edit', data={
        'title': 'Needs work',
        'content': '<p>Fixed</p>',
        'category_id': '1',
        'action': 'submit',
    })

    payload = article_api.last_json('POST', '/user-articles/submit')
    assert payload['id'] == 'a-rejected'
    assert payload['status'] == 'pending'


def test_pending_article_is_not_editable(auth_client, article_api):
    set_quota(article_api, pending=1)
    response = auth_client.get('/my-articles/a-pending/edit')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/my-articles/')


def test_backend_rejection_is_shown_in_editor(auth_client, article_api):
    set_quota(article_api, pending=0)
    article_api.add('POST', '/user-articles/submit', {'error': 'Slug already taken'}, status=400)
    response = auth_client.post('/my-articles/new', data={
        'title': 'Dup', 'content': '<p>x</p>', 'category_id': '1', 'action': 'submit',
    })
    assert 'Slug already taken' in response.get_data(as_text=True)


def test_analytics_page(auth_client, backend_api):
    backend_api.add('GET', '/user-articles/my-articles/a-published/analytics', {
        'daily': [{'date': '2024-05-01', 'views': 4, 'likes': 1, 'comments': 0, 'shares': 0}],
        'totals': {'total_views': 4, 'total_likes': 1, 'total_comments': 0, 'total_shares': 0},
    })
    response = auth_client.get('/my-articles/a-published/analytics')
    assert response.status_code == 200
    assert '2024-05-01' in response.get_data(as_text=True)


# ---- 未知状态、草稿保存与配额边界 ----

def test_unknown_status_is_read_only():
    article = Article.from_api(make_article('x1', 'archived'))
    assert article.status is ArticleStatus.UNKNOWN
    assert not article.status.is_deletable
    assert not article.status.is_editable
    assert article.status.label == 'Unknown'


def test_unknown_status_is_never_offered_for_deletion(auth_client, article_api, articles):
    articles.append(make_article('x1', 'archived', 'Archived piece'))
    set_quota(article_api, pending=1)

    html = auth_client.get('/my-articles/').get_data(as_text=True)
    assert 'id="article-x1"' in html
    assert '/my-articles/x1/delete' not in html
    assert '/my-articles/x1/edit' not in html

    auth_client.post('/my-articles/x1/delete')
    assert article_api.calls('DELETE', '/user-articles/x1') == []


def test_filter_with_unrecognised_status_returns_everything(articles):
    parsed = [Article.from_api(a) for a in articles]
    assert len(filter_articles(parsed, 'bogus')) == 4


def test_draft_saves_field_values_as_entered(auth_client, article_api):
    set_quota(article_api, pending=0)
    response = auth_client.post('/my-articles/new', data={
        'title': 'Idea',
        'featured_image': 'cover.png',
        'action': 'draft',
    })

    assert 'http-equiv="refresh"' in response.get_data(as_text=True)
    payload = article_api.last_json('POST', '/user-articles/submit')
    assert payload['featured_image'] == 'cover.png'
    assert payload['status'] == 'draft'


def test_quota_keeps_zero_limit_from_server():
    quota = SubmissionQuota.from_api({'pendingCount': 0, 'maxPending': 0})
    assert quota.max_pending == 0
    assert quota.remaining == 0
    assert not quota.can_submit
    assert 'limit of 0 pending articles' in quota.limit_message


def test_quota_falls_back_to_default_limit():
    quota = SubmissionQuota.from_api({'pendingCount': 1}, default_max=3)
    assert quota.max_pending == 3
    assert quota.remaining == 2
    assert quota.can_submit


def test_delete_refreshes_quota(auth_client, article_api):
    set_quota(article_api, pending=1)
    response = auth_client.post('/my-articles/a-rejected/delete')

    assert response.status_code == 302
    assert len(article_api.calls('DELETE', '/user-articles/a-rejected')) == 1
    delete_at = article_api.requests.index(article_api.calls('DELETE', '/user-articles/a-rejected')[0])
    quota_after = [r for r in article_api.requests[delete_at + 1:]
                   if r.method == 'GET' and r.url.path == '/api/user-articles/can-submit']
    assert len(quota_after) == 1
