import pytest

from storefront.app_container import AppContainer
from storefront.main import create_app
from storefront.models import Product

ADMIN_PASSWORD = 'segredo-admin'


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'BACKEND': 'json',
        'DATA_DIR': str(tmp_path / 'data'),
        'LOG_DIR': str(tmp_path / 'logs'),
        'ADMIN_PASSWORD': ADMIN_PASSWORD,
        'SECRET_KEY': 'test-secret',
        'WHATSAPP_NUMBER': '5511988887777',
        'ENABLE_PROFILING': False,
    })
    yield app
    AppContainer.reset_instance()


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def admin_client(client):
    r = client.post('/admin/login', json={'password': ADMIN_PASSWORD})
    assert r.status_code == 200
    return client


@pytest.fixture
def container(app):
    return AppContainer.get_instance()


@pytest.fixture
def make_product(container):
    """Inserta un producto directo en el repositorio."""
    def _make(**overrides):
        data = dict(
            id=None,
            name='LIU WEI DI HUANG WAN',
            price=100.0,
            image_url='https://example.com/liu.jpg',
            category='Fórmulas Magistrais Chinesas',
            quantity_info='200 pílulas',
        )
        data.update(overrides)
        return container.product_repo.create_product(Product(**data))
    return _make
