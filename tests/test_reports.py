import csv
import io

from storefront.formatting import format_currency, format_local_datetime
from storefront.models import CartItem, Customer, Order
from storefront.services.report_service import ReportService, TXT_SEPARATOR


def sample_order(**extra):
    data = dict(
        id='abc',
        date='2026-01-15T13:30:00+00:00',
        customer=Customer(name='Ana Souza', email='ana@example.com', cpf='111.111.111-11'),
        items=[
            CartItem(id=1, name='bao he wan', price=75.0, quantity=2),
            CartItem(id=2, name='XIAO YAO WAN', price=1234.5, quantity=1),
        ],
        total_price=1384.5,
    )
    data.update(extra)
    return Order(**data)


def test_format_currency_pt_br():
    assert format_currency(1234.56) == 'R$ 1.234,56'
    assert format_currency(0) == 'R$ 0,00'
    assert format_currency(1000000) == 'R$ 1.000.000,00'
    assert format_currency(-5.5) == '-R$ 5,50'


def test_local_datetime_uses_store_timezone():
    # São Paulo es UTC-3
    assert format_local_datetime('2026-01-15T13:30:00+00:00') == '15/01/2026 10:30'
    assert format_local_datetime('2026-01-15T13:30:00Z', 'UTC') == '15/01/2026 13:30'
    assert format_local_datetime('2026-01-15T13:30:00.12345+00:00') == '15/01/2026 10:30'
    assert format_local_datetime('ayer') == 'ayer'


def test_txt_report_block():
    text = ReportService().order_txt(sample_order())
    assert text.splitlines() == [
        '*Pedido de: Ana Souza*',
        '*CPF:* 111.111.111-11',
        '*Data:* 15/01/2026 10:30',
        '',
        '*Itens do Pedido:*',
        '- 2x BAO HE WAN (R$ 150,00)',
        '- 1x XIAO YAO WAN (R$ 1.234,50)',
        '',
        '*Total:* R$ 1.384,50',
        '*Status Cadastro:* Pendente',
        '*Status Venda:* Aberto',
        '*Observação:* Nenhuma',
        TXT_SEPARATOR,
    ]


def test_txt_report_joins_orders_with_blank_line():
    done = sample_order(status='completed', customer_status='registered', observation='pago')
    text = ReportService().orders_txt([done, sample_order()])
    first, second = text.split(TXT_SEPARATOR + '\n\n')
    assert '*Status Cadastro:* Realizado' in first
    assert '*Status Venda:* Concluída' in first
    assert '*Observação:* pago' in first
    assert second.startswith('*Pedido de: Ana Souza*')


def test_csv_report_columns():
    content = ReportService().orders_csv([sample_order(status='completed')])
    rows = list(csv.reader(io.StringIO(content)))
    assert rows[0] == [
        'Data', 'Cliente', 'CPF', 'Email', 'Status Cadastro',
        'Produtos', 'Valor Total', 'Status', 'Observação',
    ]
    assert rows[1] == [
        '15/01/2026 10:30', 'Ana Souza', '111.111.111-11', 'ana@example.com', 'Pendente',
        'bao he wan (2x - R$ 150,00); XIAO YAO WAN (1x - R$ 1.234,50)',
        '1384.50', 'Concluída', '',
    ]


def test_export_endpoints(admin_client, container):
    container.order_repo.create_order(sample_order(id=None))

    r = admin_client.get('/admin/api/orders/export.csv')
    assert r.status_code == 200
    assert r.mimetype == 'text/csv'
    assert 'relatorio_pedidos.csv' in r.headers['Content-Disposition']
    assert 'Ana Souza' in r.get_data(as_text=True)

    r = admin_client.get('/admin/api/orders/export.txt')
    assert r.status_code == 200
    assert 'pedidos_whatsapp.txt' in r.headers['Content-Disposition']
    assert r.get_data(as_text=True).startswith('*Pedido de: Ana Souza*')


def test_export_requires_login(client):
    assert client.get('/admin/api/orders/export.csv').status_code == 401
