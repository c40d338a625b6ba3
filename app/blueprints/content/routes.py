from flask import render_template, request
from flask_login import current_user, login_required

from app.blueprints.content import content_bp
from app.exceptions import NotFound
from app.services.content_service import (
    CONTENT_TYPES, LANGUAGES, doc_categories, get_doc, get_language_stats,
    get_localized_content, get_orientation_category, get_orientation_resource,
    get_orientation_resources, search_docs
)
from app.utils.session import get_api


@content_bp.route('/orientation')
def orientation():
    """定向资源总览"""
    return render_template('content/orientation.html', grouped=get_orientation_resources())


@content_bp.route('/orientation/<category>')
def orientation_category(category):
    resources = get_orientation_category(category)
    return render_template('content/orientation_category.html',
                           category=category, resources=resources)


@content_bp.route('/orientation/<category>/<slug>')
def orientation_detail(category, slug):
    """资源详情；不存在时显示兜底页，付费资源要求登录"""
    try:
        resource = get_orientation_resource(category, slug)
    except NotFound:
        return render_template('content/resource_not_found.html', category=category), 404

    if resource.get('premium') and not current_user.is_authenticated:
        return render_template('content/premium_gate.html', resource=resource, category=category)

    return render_template('content/orientation_detail.html', resource=resource, category=category)


@content_bp.route('/docs')
def docs():
    term = request.args.get('q', '')
    category = request.args.get('category', 'all')
    return render_template('content/docs.html',
                           docs=search_docs(term, category),
                           categories=doc_categories(),
                           term=term,
                           current_category=category)


@content_bp.route('/docs/<slug>')
def doc_detail(slug):
    doc = get_doc(slug)
    if doc is None:
        return render_template('content/resource_not_found.html', category='docs'), 404
    return render_template('content/doc_detail.html', doc=doc)


@content_bp.route('/localized-content')
@login_required
def localized_content():
    """多语言内容；管理员额外显示各语言统计"""
    language = request.args.get('language', 'en')
    content_type = request.args.get('content_type', 'article')
    api = get_api()

    stats = get_language_stats(api) if current_user.is_admin else []
    return render_template('content/localized_content.html',
                           items=get_localized_content(api, content_type, language),
                           stats=stats,
                           languages=LANGUAGES,
                           content_types=CONTENT_TYPES,
                           current_language=language,
                           current_content_type=content_type)
