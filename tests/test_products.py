import pytest

from storefront.formatting import get_dosage_form

VALID_PRODUCT = {
    'name': 'gui pi wan',
    'price': 89.9,
    'category': 'Fórmulas Magistrais Chinesas',
    'imageUrl': 'https://example.com/gui-pi.jpg',
    'quantityInfo': '200 pílulas',
    'action': 'Tonifica o Qi',
    'indication': 'Cansaço',
}


# ==============================================================================
# CATÁLOGO PÚBLICO
# ==============================================================================

def test_catalog_hides_hidden_products_and_lists_categories(client, make_product):
    make_product(name='BAO HE WAN', category='Fórmulas')
    make_product(name='YIN QIAO JIE DU PIAN', category='Chás')
    make_product(name='OCULTO', category='Secreta', visibility='hidden')

    body = client.get('/api/products').get_json()
    assert [p['name'] for p in body['products']] == ['BAO HE WAN', 'YIN QIAO JIE DU PIAN']
    assert body['categories'] == ['all', 'Chás', 'Fórmulas']


def test_catalog_search_and_category_filter(client, make_product):
    make_product(name='BAO HE WAN', category='Fórmulas')
    make_product(name='YIN QIAO JIE DU PIAN', category='Chás')

    body = client.get('/api/products?q=qiao').get_json()
    assert [p['name'] for p in body['products']] == ['YIN QIAO JIE DU PIAN']

    body = client.get('/api/products', query_string={'category': 'Fórmulas'}).get_json()
    assert [p['name'] for p in body['products']] == ['BAO HE WAN']


def test_catalog_reports_effective_price_and_dosage_form(client, make_product):
    make_product(name='XIAO YAO WAN', price=100.0, promo_price=70.0, promo_end_date='2099-01-01')
    make_product(name='ZHI KE JIAONANG', price=50.0, promo_price=40.0, promo_end_date='2000-01-01')

    products = {p['name']: p for p in client.get('/api/products').get_json()['products']}
    assert products['XIAO YAO WAN']['promoActive'] is True
    assert products['XIAO YAO WAN']['effectivePrice'] == 70.0
    assert products['XIAO YAO WAN']['dosageForm'] == 'Pílula'
    assert products['ZHI KE JIAONANG']['promoActive'] is False
    assert products['ZHI KE JIAONANG']['effectivePrice'] == 50.0
    assert products['ZHI KE JIAONANG']['dosageForm'] == 'Cápsula'


def test_hidden_product_detail_is_not_found(client, make_product):
    visible = make_product()
    hidden = make_product(visibility='hidden')
    assert client.get(f'/api/products/{visible.id}').status_code == 200
    assert client.get(f'/api/products/{hidden.id}').status_code == 404


@pytest.mark.parametrize('name, form', [
    ('Jin Gui Shen Qi Wan', 'Pílula'),
    ('Yin Qiao Pian', 'Comprimido'),
    ('Yunnan Baiyao Spray', 'Spray'),
    ('Pomada tubo', 'Pomada'),
    ('Chá verde', None),
])
def test_get_dosage_form(name, form):
    assert get_dosage_form(name) == form


# ==============================================================================
# PANEL
# ==============================================================================

def test_admin_routes_require_login(client):
    assert client.get('/admin/api/products').status_code == 401
    assert client.post('/admin/api/products', json=VALID_PRODUCT).status_code == 401


def test_create_product_uppercases_name(admin_client):
    r = admin_client.post('/admin/api/products', json=VALID_PRODUCT)
    assert r.status_code == 201
    product = r.get_json()['product']
    assert product['name'] == 'GUI PI WAN'
    assert product['visibility'] == 'in_stock'
    assert product['id'] == 1


def test_create_product_validation_messages(admin_client):
    r = admin_client.post('/admin/api/products', json={
        'name': ' ', 'category': '', 'price': 0, 'imageUrl': 'not-a-url',
    })
    assert r.status_code == 400
    assert r.get_json()['errors'] == {
        'name': 'Nome do produto é obrigatório.',
        'category': 'Categoria é obrigatória.',
        'price': 'O preço deve ser maior que zero.',
        'imageUrl': 'Por favor, insira uma URL válida.',
    }

    r = admin_client.post('/admin/api/products', json=dict(VALID_PRODUCT, imageUrl=''))
    assert r.get_json()['errors'] == {'imageUrl': 'URL da imagem é obrigatória.'}


def test_update_keeps_promotion_fields(admin_client, make_product):
    p = make_product(price=100.0, promo_price=80.0, promo_end_date='2099-01-01')

    r = admin_client.put(f'/admin/api/products/{p.id}', json={'price': 120.0, 'name': 'novo nome'})
    product = r.get_json()['product']
    assert product['price'] == 120.0
    assert product['name'] == 'NOVO NOME'
    assert product['promoPrice'] == 80.0
    assert product['promoEndDate'] == '2099-01-01'


def test_update_and_delete_missing_product(admin_client):
    assert admin_client.put('/admin/api/products/99', json=VALID_PRODUCT).status_code == 404
    assert admin_client.delete('/admin/api/products/99').status_code == 404


def test_visibility_change(admin_client, make_product):
    p = make_product()
    r = admin_client.put(f'/admin/api/products/{p.id}/visibility', json={'visibility': 'hidden'})
    assert r.get_json()['product']['visibility'] == 'hidden'

    r = admin_client.put(f'/admin/api/products/{p.id}/visibility', json={'visibility': 'sold'})
    assert r.status_code == 400


def test_admin_list_includes_hidden(admin_client, make_product):
    make_product(visibility='hidden')
    assert len(admin_client.get('/admin/api/products').get_json()['products']) == 1


def test_delete_product(admin_client, container, make_product):
    p = make_product()
    assert admin_client.delete(f'/admin/api/products/{p.id}').status_code == 200
    assert container.product_repo.get_product(p.id) is None


# ==============================================================================
# PROMOCIONES
# ==============================================================================

def test_set_and_clear_promotion(admin_client, make_product):
    p = make_product(price=100.0)
    r = admin_client.put(f'/admin/api/products/{p.id}/promotion', json={
        'promoPrice': 79.9, 'promoStartDate': '2026-01-01', 'promoEndDate': '2099-01-31T00:00:00Z',
    })
    product = r.get_json()['product']
    assert product['promoPrice'] == 79.9
    assert product['promoEndDate'] == '2099-01-31'
    assert product['price'] == 100.0

    r = admin_client.delete(f'/admin/api/products/{p.id}/promotion')
    product = r.get_json()['product']
    assert product['promoPrice'] is None
    assert product['promoEndDate'] is None


def test_promotion_validation(admin_client, make_product):
    p = make_product(price=100.0)
    r = admin_client.put(f'/admin/api/products/{p.id}/promotion', json={
        'promoPrice': 120.0, 'promoStartDate': '2026-02-01', 'promoEndDate': '2026-01-01',
    })
    errors = r.get_json()['errors']
    assert set(errors) == {'promoPrice', 'promoStartDate'}

    r = admin_client.put(f'/admin/api/products/{p.id}/promotion', json={'promoPrice': 50.0})
    assert 'promoEndDate' in r.get_json()['errors']


def test_bulk_promotion_apply_and_clear(admin_client, container, make_product):
    make_product(name='A', price=100.0)
    make_product(name='B', price=19.9)

    r = admin_client.post('/admin/api/promotions/bulk', json={
        'discountPercent': 50, 'startDate': None, 'endDate': '2099-12-31',
    })
    assert r.get_json() == {'ok': True, 'updated': 2}
    promo = {p.name: p.promo_price for p in container.product_repo.list_products()}
    assert promo == {'A': 50.0, 'B': 9.95}

    r = admin_client.post('/admin/api/promotions/bulk', json={'discountPercent': None})
    assert r.get_json()['updated'] == 2
    assert all(p.promo_price is None and p.promo_end_date is None
               for p in container.product_repo.list_products())


@pytest.mark.parametrize('pct', [0, 100, -10, 'abc'])
def test_bulk_promotion_rejects_bad_percent(admin_client, pct):
    r = admin_client.post('/admin/api/promotions/bulk', json={
        'discountPercent': pct, 'endDate': '2099-12-31',
    })
    assert r.status_code == 400
    assert 'discountPercent' in r.get_json()['errors']
