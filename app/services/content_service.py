"""
内容浏览服务
定向资源、静态页面、多语言内容、管理员用户列表等“取数即渲染”的页面数据。
公开数据用匿名会话获取并缓存，和登录用户相关的数据不缓存。
"""
from flask import current_app

from app.exceptions import ApiError
from app.extensions import backend, cache

LANGUAGES = [
    ('en', 'English'),
    ('fr', 'Français'),
    ('es', 'Español'),
    ('ar', 'العربية'),
    ('zh', '中文'),
]

CONTENT_TYPES = [
    ('article', 'Articles'),
    ('orientation', 'Orientation resources'),
    ('page', 'Static pages'),
    ('university', 'Universities'),
]

DOCS = [
    {
        'slug': 'getting-started',
        'title': 'Getting Started Guide',
        'description': 'Complete guide to getting started with AcademOra platform. Learn how to '
                       'navigate the interface, create your profile, and start exploring academic resources.',
        'category': 'User Guide',
    },
    {
        'slug': 'api-docs',
        'title': 'API Documentation',
        'description': 'Technical documentation for AcademOra API endpoints. Learn how to integrate '
                       'with our RESTful API and access programmatic features.',
        'category': 'Technical',
    },
    {
        'slug': 'feature-overview',
        'title': 'Feature Overview',
        'description': 'Comprehensive overview of all AcademOra features including matching algorithms, '
                       'comparison tools, and academic resources.',
        'category': 'Features',
    },
    {
        'slug': 'university-matching',
        'title': 'University Matching System',
        'description': 'Detailed explanation of our university matching algorithm and how to use it '
                       'effectively to find your perfect academic fit.',
        'category': 'Features',
    },
    {
        'slug': 'study-abroad-guide',
        'title': 'Study Abroad Guide',
        'description': 'Everything you need to know about studying abroad, from application procedures '
                       'to cultural adaptation tips.',
        'category': 'User Guide',
    },
]

CAREERS = [
    {
        'title': 'Content Writers',
        'department': 'Content',
        'description': 'Write guides, articles and orientation resources that help students make informed decisions.',
        'responsibilities': [
            'Research and write long-form educational articles',
            'Keep orientation resources accurate and up to date',
            'Work with editors on style and accuracy',
        ],
        'compensation': 'Per-article payment + bonuses based on engagement',
    },
    {
        'title': 'Quality Testers',
        'department': 'Engineering',
        'description': 'Help us ship a reliable platform by testing new features before release.',
        'responsibilities': [
            'Test new features and functionality across different devices and browsers',
            'Identify, document, and report bugs with detailed reproduction steps',
            'Provide user experience feedback and suggest improvements',
            'Participate in regression testing and quality assurance processes',
        ],
        'compensation': 'Per-bug payment ($10-100) + hourly rates ($15-40) + bonuses for critical issue discovery',
    },
    {
        'title': 'Visual Editors',
        'department': 'Design',
        'description': 'Create compelling visual content including graphics, videos, and multimedia for our platform.',
        'responsibilities': [
            'Design eye-catching graphics for articles and social media',
            'Create educational videos and visual content',
            'Develop brand-consistent visual assets across all platforms',
            'Collaborate with content team to enhance article engagement through visuals',
        ],
        'compensation': 'Per-project payment ($100-1000) + retainer options + performance bonuses',
    },
    {
        'title': 'Programmers',
        'department': 'Engineering',
        'description': "Build and maintain our platform's features, APIs, and infrastructure.",
        'responsibilities': [
            'Develop new features and functionality for the AcademOra platform',
            'Write clean, efficient code and participate in code reviews',
            'Maintain and optimize existing systems for better performance',
            'Collaborate with cross-functional teams to deliver high-quality solutions',
        ],
        'compensation': 'Hourly rates ($25-100) + project-based payments + equity options',
    },
]


def _items(data, key):
    """后端有时返回列表，有时返回 {key: [...]}"""
    if isinstance(data, dict):
        return data.get(key) or []
    return data or []


@cache.memoize(timeout=300)
def get_orientation_resources():
    """定向资源总览，按分类分组"""
    data = backend.session().get('/orientation')
    grouped = {}
    for item in _items(data, 'resources'):
        grouped.setdefault(item.get('category') or 'general', []).append(item)
    return grouped


@cache.memoize(timeout=300)
def get_orientation_category(category):
    return _items(backend.session().get(f'/orientation/category/{category}'), 'resources')


def get_orientation_resource(category, slug):
    """单个资源（不缓存：付费资源的访问判断依赖登录状态）"""
    return backend.session().get(f'/orientation/{category}/{slug}')


@cache.memoize(timeout=300)
def get_static_page(slug):
    return backend.session().get(f'/pages/{slug}')


def search_docs(term='', category='all'):
    """文档目录的搜索和分类过滤"""
    term = (term or '').strip().lower()
    results = []
    for doc in DOCS:
        if category and category != 'all' and doc['category'] != category:
            continue
        if term and term not in doc['title'].lower() and term not in doc['description'].lower():
            continue
        results.append(doc)
    return results


def doc_categories():
    return sorted({doc['category'] for doc in DOCS})


def get_doc(slug):
    return next((doc for doc in DOCS if doc['slug'] == slug), None)


def careers_by_department(department=None):
    if not department:
        return list(CAREERS)
    return [c for c in CAREERS if c['department'] == department]


def get_localized_content(api, content_type, language_code):
    """多语言内容列表；失败时返回空列表并记录日志"""
    try:
        data = api.get('/localized-content', params={
            'content_type': content_type,
            'language_code': language_code,
        })
    except ApiError as e:
        current_app.logger.warning(f'加载多语言内容失败: {e.message}')
        return []
    return _items(data, 'content')


def get_language_stats(api):
    try:
        data = api.get('/admin/localized-content/stats')
    except ApiError as e:
        current_app.logger.warning(f'加载语言统计失败: {e.message}')
        return []
    return _items(data, 'stats')


def get_admin_users(api):
    return _items(api.get('/admin/users'), 'users')


def get_profile(api):
    """当前用户资料，失败时返回 None"""
    try:
        return api.get('/profile')
    except ApiError as e:
        current_app.logger.warning(f'加载个人资料失败: {e.message}')
        return None
