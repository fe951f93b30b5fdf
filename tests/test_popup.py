from datetime import datetime, timezone

from storefront.models import PopupConfig
from storefront.services.popup_service import is_popup_visible

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_visibility_rules():
    assert is_popup_visible(PopupConfig(text='Feriado', active=True), NOW)
    assert not is_popup_visible(PopupConfig(text='Feriado', active=False), NOW)
    assert not is_popup_visible(PopupConfig(text='  ', active=True), NOW)
    assert is_popup_visible(PopupConfig(text='Feriado', active=True, expires_at='2026-05-02'), NOW)
    assert not is_popup_visible(
        PopupConfig(text='Feriado', active=True, expires_at='2026-05-01T11:59:00Z'), NOW
    )


def test_public_popup_endpoint(client, admin_client):
    assert client.get('/api/popup').get_json()['popup'] is None

    r = admin_client.put('/admin/api/popup', json={
        'text': 'Loja fechada no feriado', 'active': True, 'expiresAt': '2099-01-01T00:00:00Z',
    })
    assert r.status_code == 200

    assert client.get('/api/popup').get_json()['popup'] == {'text': 'Loja fechada no feriado'}
    assert admin_client.get('/admin/api/popup').get_json()['popup']['active'] is True


def test_expired_popup_is_not_shown(client, admin_client):
    admin_client.put('/admin/api/popup', json={
        'text': 'Promoção de verão', 'active': True, 'expiresAt': '2000-01-01',
    })
    assert client.get('/api/popup').get_json()['popup'] is None


def test_save_popup_validation(admin_client):
    r = admin_client.put('/admin/api/popup', json={'text': '', 'active': True})
    assert r.status_code == 400
    r = admin_client.put('/admin/api/popup', json={'text': 'x', 'active': True, 'expiresAt': 'amanhã'})
    assert r.get_json()['errors'] == {'expiresAt': 'Data de expiração inválida.'}
