from app.services.content_service import careers_by_department, get_doc, search_docs
from tests.conftest import login


def test_orientation_groups_by_category(client, backend_api):
    backend_api.add('GET', '/orientation', {'resources': [
        {'title': 'Study abroad', 'slug': 'study-abroad', 'category': 'universities'},
        {'title': 'Grants 101', 'slug': 'grants-101', 'category': 'scholarships'},
    ]})
    html = client.get('/orientation').get_data(as_text=True)
    assert '/orientation/universities/study-abroad' in html
    assert '/orientation/scholarships/grants-101' in html


def test_missing_resource_shows_not_found_page(client):
    response = client.get('/orientation/universities/nope')
    assert response.status_code == 404
    assert 'Resource Not Found' in response.get_data(as_text=True)


def test_premium_resource_requires_login(client, backend_api):
    backend_api.add('GET', '/orientation/scholarships/full-ride', {
        'title': 'Full ride scholarships', 'premium': True, 'content': '<p>Secret list</p>',
    })
    html = client.get('/orientation/scholarships/full-ride').get_data(as_text=True)
    assert 'premium members only' in html
    assert 'Secret list' not in html

    login(client)
    html = client.get('/orientation/scholarships/full-ride').get_data(as_text=True)
    assert 'Secret list' in html


def test_docs_search_and_detail(client):
    docs = search_docs('', 'all')
    assert docs
    first = docs[0]
    assert search_docs(first['title'].upper()) == [first]
    assert search_docs('zzz-nothing') == []
    assert get_doc('missing') is None

    assert client.get(f"/docs/{first['slug']}").status_code == 200
    assert client.get('/docs/missing').status_code == 404


def test_careers_filter(client):
    engineering = careers_by_department('Engineering')
    assert engineering and all(c['department'] == 'Engineering' for c in engineering)
    html = client.get('/careers?department=Engineering').get_data(as_text=True)
    assert 'Programmers' in html
    assert 'Content Writers' not in html


def test_static_page(client, backend_api):
    backend_api.add('GET', '/pages/privacy', {'title': 'Privacy Policy', 'content': '<p>We care.</p>'})
    html = client.get('/pages/privacy').get_data(as_text=True)
    assert 'Privacy Policy' in html
    assert client.get('/pages/unknown').status_code == 404


def test_localized_content_hides_stats_from_non_admins(auth_client, backend_api):
    backend_api.add('GET', '/localized-content', {'content': [{'title': 'Bonjour', 'content': ''}]})
    response = auth_client.get('/localized-content?language=fr')

    assert 'Bonjour' in response.get_data(as_text=True)
    request = backend_api.calls('GET', '/localized-content')[0]
    assert request.url.params['language_code'] == 'fr'
    assert backend_api.calls('GET', '/admin/localized-content/stats') == []


def test_contact_form(client):
    response = client.post('/contact', data={
        'name': 'Ada', 'email': 'ada@academora.io', 'subject': 'Hi', 'message': 'Hello there',
    }, follow_redirects=True)
    assert 'Thank you for your message!' in response.get_data(as_text=True)
