from flask import render_template, request, flash, redirect, url_for, current_app
from flask_login import login_required, current_user

from . import main_bp
from .forms import ContactForm
from app.services.article_service import ArticleWorkflow, article_stats
from app.services.content_service import CAREERS, careers_by_department, get_profile, get_static_page
from app.services.signup_service import ensure_user_synced
from app.utils.session import get_api


@main_bp.route('/')
def index():
    return render_template('main/index.html')


@main_bp.route('/about')
def about():
    return render_template('main/about.html')


@main_bp.route('/careers')
def careers():
    department = request.args.get('department') or None
    departments = sorted({c['department'] for c in CAREERS})
    return render_template('main/careers.html',
                           careers=careers_by_department(department),
                           departments=departments,
                           current_department=department)


@main_bp.route('/contact', methods=['GET', 'POST'])
def contact():
    form = ContactForm()
    if form.validate_on_submit():
        current_app.logger.info(f'收到联系表单: {form.email.data} / {form.subject.data}')
        flash('Thank you for your message! We will get back to you soon.', 'success')
        return redirect(url_for('main.contact'))
    return render_template('main/contact.html', form=form)


@main_bp.route('/dashboard')
@login_required
def dashboard():
    api = get_api()

    # 1. 确保用户已同步到后端（失败不影响页面）
    ensure_user_synced(api)

    # 2. 个人资料，加载失败时回退到会话中的用户信息
    profile = get_profile(api) or current_user.to_dict()

    # 3. 投稿统计
    workflow = ArticleWorkflow(api)
    articles = workflow.list_articles()

    return render_template('main/dashboard.html',
                           profile=profile,
                           stats=article_stats(articles),
                           recent_articles=articles[:5],
                           quota=workflow.get_quota())


@main_bp.route('/pages/<slug>')
def static_page(slug):
    """后台维护的静态页面（隐私政策、条款等）"""
    page = get_static_page(slug)
    return render_template('main/static_page.html', page=page)
