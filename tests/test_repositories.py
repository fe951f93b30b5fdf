import json

import pytest
import requests

from storefront.models import CartItem, Customer, Order
from storefront.repositories import (
    BackendError,
    ID_UUID,
    JsonTable,
    OrderRepository,
    SettingsRepository,
    SupabaseClient,
    SupabaseTable,
)
from storefront.services.duplicates import find_duplicate_order_ids


# ==============================================================================
# JsonTable
# ==============================================================================

def test_json_table_assigns_incremental_ids(tmp_path):
    table = JsonTable(str(tmp_path), 'products')
    first = table.insert({'name': 'A'})
    second = table.insert({'name': 'B'})
    assert (first['id'], second['id']) == (1, 2)

    with open(tmp_path / 'products.json', encoding='utf-8') as f:
        assert [r['name'] for r in json.load(f)] == ['A', 'B']


def test_json_table_uuid_ids(tmp_path):
    table = JsonTable(str(tmp_path), 'orders', id_type=ID_UUID)
    row = table.insert({'date': '2026-01-01'})
    assert isinstance(row['id'], str) and len(row['id']) == 36


def test_json_table_fetch_all_orders_missing_values_last(tmp_path):
    table = JsonTable(str(tmp_path), 'orders')
    table.insert({'date': '2026-01-02'})
    table.insert({'date': None})
    table.insert({'date': '2026-01-01'})

    dates = [r['date'] for r in table.fetch_all(order_by='date', ascending=False)]
    assert dates == ['2026-01-02', '2026-01-01', None]


def test_json_table_update_delete_and_nested_find(tmp_path):
    table = JsonTable(str(tmp_path), 'orders', id_type=ID_UUID)
    row = table.insert({'customer': {'cpf': '111.111.111-11'}, 'status': 'open'})

    assert table.find_by('customer.cpf', '111.111.111-11', limit=1)[0]['id'] == row['id']
    assert table.update(row['id'], {'status': 'completed'})['status'] == 'completed'
    assert table.update('missing', {'status': 'open'}) is None
    assert table.delete(row['id']) is True
    assert table.delete(row['id']) is False


def test_json_table_corrupt_file_reads_as_empty(tmp_path):
    (tmp_path / 'products.json').write_text('{no es json', encoding='utf-8')
    assert JsonTable(str(tmp_path), 'products').fetch_all() == []


def test_settings_upsert_replaces_value(tmp_path):
    repo = SettingsRepository(JsonTable(str(tmp_path), 'settings'))
    assert repo.get_setting('startup_popup', {}) == {}

    repo.set_setting('startup_popup', {'text': 'uno'})
    repo.set_setting('startup_popup', {'text': 'dos'})

    assert repo.get_setting('startup_popup') == {'text': 'dos'}
    assert len(repo.table.fetch_all()) == 1


def test_order_repository_customer_lookup(tmp_path):
    repo = OrderRepository(JsonTable(str(tmp_path), 'orders', id_type=ID_UUID))
    repo.table.insert({'customer': {'cpf': '111.111.111-11'}, 'date': '2026-01-01'})
    assert repo.customer_has_orders('111.111.111-11')
    assert not repo.customer_has_orders('222.222.222-22')


# ==============================================================================
# SupabaseTable (sesión HTTP falsa)
# ==============================================================================

class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.content = b'' if payload is None else json.dumps(payload).encode()
        self.text = text or self.content.decode()

    def json(self):
        if self._payload is None:
            raise ValueError('sin cuerpo')
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(payload=[])
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


def supabase_table(session, table='orders'):
    client = SupabaseClient('https://demo.supabase.co/', 'anon-key', session=session)
    return SupabaseTable(client, table)


def test_supabase_find_by_nested_field():
    session = FakeSession(FakeResponse(payload=[{'id': 'x'}]))
    rows = supabase_table(session).find_by('customer.cpf', '111.111.111-11', limit=1)

    method, url, kwargs = session.calls[0]
    assert rows == [{'id': 'x'}]
    assert method == 'GET'
    assert url == 'https://demo.supabase.co/rest/v1/orders'
    assert kwargs['params']['customer->>cpf'] == 'eq.111.111.111-11'
    assert kwargs['params']['limit'] == 1
    assert kwargs['headers']['apikey'] == 'anon-key'
    assert kwargs['headers']['Authorization'] == 'Bearer anon-key'


def test_supabase_fetch_all_order_param():
    session = FakeSession()
    supabase_table(session).fetch_all(order_by='date', ascending=False)
    assert session.calls[0][2]['params']['order'] == 'date.desc.nullslast'


def test_supabase_update_returns_none_when_missing():
    session = FakeSession(FakeResponse(payload=[]))
    assert supabase_table(session).update('x', {'status': 'completed'}) is None
    _, _, kwargs = session.calls[0]
    assert kwargs['params'] == {'id': 'eq.x'}
    assert kwargs['headers']['Prefer'] == 'return=representation'


def test_supabase_upsert_merges_duplicates():
    session = FakeSession(FakeResponse(payload=[{'key': 'k', 'value': 1}]))
    supabase_table(session, 'settings').upsert({'key': 'k', 'value': 1}, on_conflict='key')
    _, _, kwargs = session.calls[0]
    assert kwargs['params'] == {'on_conflict': 'key'}
    assert kwargs['headers']['Prefer'].startswith('resolution=merge-duplicates')


def test_supabase_http_error_raises_backend_error():
    session = FakeSession(FakeResponse(status_code=401, payload={'message': 'Invalid API key'}))
    with pytest.raises(BackendError) as exc:
        supabase_table(session).fetch_all()
    assert exc.value.status_code == 401
    assert exc.value.unavailable


def test_supabase_connection_error_raises_backend_error():
    session = FakeSession(error=requests.ConnectionError('sin red'))
    with pytest.raises(BackendError) as exc:
        supabase_table(session).insert({'a': 1})
    assert exc.value.unavailable


def test_supabase_not_configured_never_calls_network():
    session = FakeSession()
    table = SupabaseTable(SupabaseClient('', '', session=session), 'orders')
    with pytest.raises(BackendError):
        table.fetch_all()
    assert session.calls == []


def test_order_without_date_is_the_earliest(tmp_path):
    repo = OrderRepository(JsonTable(str(tmp_path), 'orders', id_type=ID_UUID))
    customer = Customer(name='Ana', email='ana@example.com', cpf='111.111.111-11')
    items = [CartItem(id=1, name='P1', price=75.0, quantity=2)]

    legacy_row = Order(customer=customer, items=items, total_price=150.0).to_dict(include_id=False)
    legacy_row['date'] = None
    legacy = repo.table.insert(legacy_row)
    copy = repo.create_order(Order(
        date='2026-01-01T10:00:00+00:00', customer=customer, items=items, total_price=150.0,
    ))

    orders = repo.list_orders()
    assert {o.id: o.date for o in orders}[legacy['id']] == ''
    assert find_duplicate_order_ids(orders) == {copy.id}


def test_create_order_stamps_missing_date(tmp_path):
    repo = OrderRepository(JsonTable(str(tmp_path), 'orders', id_type=ID_UUID))
    saved = repo.create_order(Order(total_price=10.0))
    assert saved.date.startswith('20')
    assert repo.get_order(saved.id).date == saved.date


def test_supabase_error_body_that_is_not_an_object():
    session = FakeSession(FakeResponse(status_code=500, payload=['falha interna']))
    with pytest.raises(BackendError) as exc:
        supabase_table(session).fetch_all()
    assert exc.value.status_code == 500
    assert 'falha interna' in str(exc.value)
