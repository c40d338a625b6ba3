from flask import render_template, redirect, request, url_for, flash, session, current_app, abort
from flask_login import login_required, current_user
from urllib.parse import urlsplit

from app.blueprints.auth import auth_bp
from app.blueprints.auth.forms import (
    LoginForm, SignupForm, VerifyCodeForm, ForgotPasswordForm, ResetPasswordForm, OnboardingForm
)
from app.exceptions import ApiError, IdentityProviderError
from app.extensions import identity
from app.models.signup import (
    ACCOUNT_TYPES, SignupProfile, VerifyState, normalize_account_type
)
from app.models.user import SessionUser
from app.services.signup_service import SignupFlow
from app.utils.session import get_api, start_user_session, end_user_session

SIGNUP_KEY = 'signup'

OAUTH_PROVIDERS = {
    'google': 'Continue with Google',
    'microsoft': 'Continue with Microsoft',
    'github': 'Continue with GitHub',
    'linkedin': 'Continue with LinkedIn',
}

ACCOUNT_TYPE_CARDS = [
    {
        'id': 'individual',
        'title': 'Individual Journey',
        'description': 'Discover tailored programs, financing options, and campuses based on your ambitions.',
        'benefits': [
            'Personalized orientation tracks',
            'Scholarship matching alerts',
            'Mentorship and peer community access',
        ],
    },
    {
        'id': 'institution',
        'title': 'Institutional Workspace',
        'description': 'Engage prospects, manage programs, and collaborate with partners in one dashboard.',
        'benefits': [
            'Multi-campus analytics and reporting',
            'Content and admissions management',
            'Dedicated onboarding concierge',
        ],
    },
]


def _safe_next(default_endpoint='main.dashboard'):
    # 防止开放重定向攻击
    next_page = request.args.get('next')
    if not next_page or urlsplit(next_page).netloc != '':
        next_page = url_for(default_endpoint)
    return next_page


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    # 如果已登录，直接跳到仪表盘
    if current_user.is_authenticated:
        return redirect(url_for('main.dashboard'))

    form = LoginForm()
    if form.validate_on_submit():
        try:
            data = get_api().post('/auth/login', {
                'email': form.email.data,
                'password': form.password.data,
            })
        except ApiError as e:
            flash(e.message, 'danger')
            return render_template('auth/login.html', form=form, providers=OAUTH_PROVIDERS)

        token = data.get('token')
        if not token:
            flash('Sign in failed. Please try again.', 'danger')
            return render_template('auth/login.html', form=form, providers=OAUTH_PROVIDERS)

        user = SessionUser.from_api(data.get('user') or {'email': form.email.data})
        start_user_session(user, token, remember=form.remember_me.data)
        current_app.logger.info(f'用户登录: {user.email}')
        flash(f'Welcome back, {user.display_name}.', 'success')
        return redirect(_safe_next())

    return render_template('auth/login.html', form=form, providers=OAUTH_PROVIDERS)


@auth_bp.route('/logout')
@login_required
def logout():
    current_app.logger.info(f'用户登出: {current_user.email}')
    end_user_session()
    flash('You have been signed out.', 'info')
    return redirect(url_for('auth.login'))


@auth_bp.route('/account-type')
def account_type():
    """账号类型选择"""
    return render_template('auth/account_type.html', account_types=ACCOUNT_TYPE_CARDS)


@auth_bp.route('/signup', methods=['GET', 'POST'])
def signup():
    """注册第一步：收集资料并发送验证码"""
    # OAuth 回跳：?token=...&oauth=google
    token = request.args.get('token')
    if token and request.args.get('oauth'):
        return _complete_oauth(token)

    account_type = normalize_account_type(request.args.get('type'))
    if account_type is None:
        return redirect(url_for('auth.account_type'))

    if current_user.is_authenticated:
        return redirect(url_for('main.dashboard'))

    form = SignupForm(account_type=account_type)
    if form.validate_on_submit():
        profile = SignupProfile(
            first_name=form.first_name.data.strip(),
            last_name=form.last_name.data.strip(),
            email=form.email.data.strip(),
            password=form.password.data,
            account_type=normalize_account_type(form.account_type.data) or account_type,
        )
        flow = SignupFlow(identity, get_api())
        try:
            state = flow.start(profile)
        except IdentityProviderError as e:
            flash(e.message, 'danger')
            return render_template('auth/signup.html', form=form, account_type=account_type,
                                   providers=OAUTH_PROVIDERS)

        session[SIGNUP_KEY] = state.to_dict()
        flash(f'We sent a 6-digit code to {state.email}.', 'info')
        return redirect(url_for('auth.verify'))

    return render_template('auth/signup.html', form=form, account_type=account_type,
                           providers=OAUTH_PROVIDERS)


@auth_bp.route('/signup/verify', methods=['GET', 'POST'])
def verify():
    """注册第二步：校验验证码"""
    state = VerifyState.from_dict(session.get(SIGNUP_KEY))
    if state is None:
        return redirect(url_for('auth.signup'))

    form = VerifyCodeForm()
    if form.validate_on_submit():
        flow = SignupFlow(identity, get_api())
        try:
            result = flow.verify(state, form.code.data)
        except IdentityProviderError as e:
            flash(e.message, 'danger')
            return render_template('auth/verify.html', form=form, state=state)

        session.pop(SIGNUP_KEY, None)
        if result.token:
            user = SessionUser(id=result.user_id, email=result.email,
                               first_name=state.first_name, last_name=state.last_name)
            start_user_session(user, result.token)
        current_app.logger.info(f'注册完成: {result.email} (synced={result.synced})')
        return redirect(result.redirect_path)

    return render_template('auth/verify.html', form=form, state=state)


@auth_bp.route('/signup/restart')
def restart_signup():
    """放弃当前验证，回到资料表单"""
    data = session.pop(SIGNUP_KEY, None) or {}
    return redirect(url_for('auth.signup', type=data.get('account_type', 'individual')))


def _complete_oauth(token):
    api = get_api().with_token(token)
    try:
        me = api.get('/auth/me')
    except ApiError as e:
        flash(e.message or 'OAuth sign up failed', 'danger')
        return redirect(url_for('auth.signup'))

    user = SessionUser.from_api(me.get('user') or me)
    start_user_session(user, token)
    return redirect(url_for('main.dashboard'))


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """注册完成后的补充信息（onboarding）"""
    account_type = normalize_account_type(request.args.get('type'))
    if account_type is None:
        return redirect(url_for('auth.account_type'))

    form = OnboardingForm()
    if form.validate_on_submit():
        if current_user.is_authenticated:
            try:
                get_api().post('/onboarding', {
                    'accountType': account_type,
                    'answers': {
                        'goal': form.goal.data,
                        'organization': form.organization.data or '',
                        'country': form.country.data or '',
                    },
                })
            except ApiError as e:
                # 不阻塞用户继续使用
                current_app.logger.warning(f'Onboarding 提交失败，继续流程: {e.message}')
            return redirect(url_for('main.dashboard'))
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html', form=form, account_type=account_type,
                           account_types=ACCOUNT_TYPES)


@auth_bp.route('/forgot-password', methods=['GET', 'POST'])
def forgot_password():
    form = ForgotPasswordForm()
    if form.validate_on_submit():
        try:
            get_api().post('/auth/forgot-password', {'email': form.email.data})
        except ApiError as e:
            flash(e.message or 'Failed to request password reset', 'danger')
        else:
            flash('If an account exists for that email, a reset link was sent.', 'success')
            return redirect(url_for('auth.forgot_password'))
    return render_template('auth/forgot_password.html', form=form)


@auth_bp.route('/reset-password', methods=['GET', 'POST'])
def reset_password():
    form = ResetPasswordForm()
    if request.method == 'GET':
        # 邮件链接中带的参数预填，缺失时允许手动输入
        form.email.data = request.args.get('email', '')
        form.token.data = request.args.get('token', '')

    if form.validate_on_submit():
        try:
            get_api().post('/auth/reset-password', {
                'email': form.email.data,
                'token': form.token.data,
                'password': form.password.data,
            })
        except ApiError as e:
            flash(e.message or 'Failed to reset password', 'danger')
        else:
            return render_template(
                'redirect_notice.html',
                message='Your password was reset successfully. Redirecting to login...',
                redirect_url=url_for('auth.login'),
                delay=current_app.config['ARTICLE_REDIRECT_DELAY'],
            )
    return render_template('auth/reset_password.html', form=form)


@auth_bp.route('/oauth/<provider>/start')
def oauth_start(provider):
    """跳转到后端的第三方登录入口"""
    if provider not in OAUTH_PROVIDERS:
        abort(404)
    base = current_app.config['API_BASE_URL'].rstrip('/')
    return redirect(f'{base}/auth/oauth/{provider}/start')
