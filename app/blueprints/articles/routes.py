from flask import render_template, request, flash, redirect, url_for, current_app, abort
from flask_login import login_required

from app.blueprints.articles import articles_bp
from app.blueprints.articles.forms import ArticleForm
from app.exceptions import ApiError, QuotaExceeded, ValidationError
from app.models.article import ArticleDraft, ArticleStatus
from app.services.article_service import ArticleWorkflow, filter_articles, article_stats
from app.utils.session import get_api


@articles_bp.route('/')
@login_required
def index():
    """我的文章列表"""
    status = request.args.get('status', 'all')
    workflow = ArticleWorkflow(get_api())
    articles = workflow.list_articles()

    return render_template('articles/index.html',
                           articles=filter_articles(articles, status),
                           stats=article_stats(articles),
                           quota=workflow.get_quota(),
                           statuses=[s for s in ArticleStatus if s is not ArticleStatus.UNKNOWN],
                           current_status=status)


@articles_bp.route('/new', methods=['GET', 'POST'])
@login_required
def new():
    return _editor()


@articles_bp.route('/<article_id>/edit', methods=['GET', 'POST'])
@login_required
def edit(article_id):
    return _editor(article_id)


def _editor(article_id=None):
    """新建 / 编辑文章（保存草稿或提交审核）"""
    workflow = ArticleWorkflow(get_api())
    context = workflow.load(article_id)

    if context.article and not context.article.status.is_editable:
        flash(f'{context.article.status.label} articles cannot be edited.', 'warning')
        return redirect(url_for('articles.index'))

    form = ArticleForm()
    form.set_categories(context.categories)
    if request.method == 'GET' and context.article:
        form.load_draft(ArticleDraft.from_article(context.article))

    action = request.form.get('action', 'draft')
    # 草稿按原样保存，不做表单校验
    if request.method == 'POST' and (action == 'draft' or form.validate()):
        draft = form.to_draft(article_id)
        try:
            if action == 'submit':
                message = workflow.submit_for_review(draft, context.quota)
            else:
                message = workflow.save_draft(draft)
        except (ValidationError, QuotaExceeded) as e:
            flash(e.message, 'danger')
        except ApiError as e:
            flash(e.message or 'Failed to save article', 'danger')
        else:
            return render_template(
                'redirect_notice.html',
                message=message,
                redirect_url=url_for('articles.index'),
                delay=current_app.config['ARTICLE_REDIRECT_DELAY'],
            )

    return render_template('articles/editor.html',
                           form=form,
                           article=context.article,
                           quota=context.quota)


def _find_article(workflow, article_id):
    article = next((a for a in workflow.list_articles() if a.id == article_id), None)
    if article is None:
        abort(404)
    return article


@articles_bp.route('/<article_id>/delete', methods=['GET', 'POST'])
@login_required
def delete(article_id):
    """删除草稿或被驳回的文章（需要二次确认）"""
    workflow = ArticleWorkflow(get_api())
    article = _find_article(workflow, article_id)

    if not article.status.is_deletable:
        flash('Only draft or rejected articles can be deleted.', 'warning')
        return redirect(url_for('articles.index'))

    if request.method == 'POST':
        try:
            workflow.delete(article)
        except ApiError as e:
            flash(e.message or 'Failed to delete article', 'danger')
        else:
            flash('Article deleted.', 'success')
        return redirect(url_for('articles.index'))

    return render_template('articles/confirm_delete.html', article=article)


@articles_bp.route('/<article_id>/analytics')
@login_required
def analytics(article_id):
    """单篇文章的阅读 / 互动统计"""
    workflow = ArticleWorkflow(get_api())
    try:
        data = workflow.analytics(article_id)
    except ApiError as e:
        if e.status == 403:
            abort(403)
        raise
    return render_template('articles/analytics.html',
                           daily=data.get('daily') or [],
                           totals=data.get('totals') or {},
                           article_id=article_id)
