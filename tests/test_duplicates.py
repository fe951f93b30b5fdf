from storefront.models import CartItem, Customer, Order
from storefront.repositories.errors import BackendError
from storefront.services.duplicates import (
    DUPLICATE_MARKER,
    annotate_duplicates,
    composite_key,
    find_duplicate_order_ids,
)


def order(order_id, date, cpf='111.111.111-11', total=150.0, items=((1, 2),), observation=''):
    return Order(
        id=order_id,
        date=date,
        customer=Customer(name='Ana', email='ana@example.com', cpf=cpf),
        items=[CartItem(id=pid, name=f'P{pid}', price=75.0, quantity=qty) for pid, qty in items],
        total_price=total,
        observation=observation,
    )


class FakeOrderRepo:
    def __init__(self, fail=False):
        self.updates = []
        self.fail = fail

    def update_order(self, order_id, fields):
        if self.fail:
            raise BackendError('sin conexión', unavailable=True)
        self.updates.append((order_id, fields))
        return True


def test_composite_key_format():
    o = order('a', '2026-01-01T10:00:00+00:00', items=((3, 1), (1, 2)))
    assert composite_key(o) == '111.111.111-11|150.00|1:2,3:1'


def test_later_copy_is_flagged_regardless_of_list_order():
    t1 = order('t1', '2026-01-01T10:00:00+00:00')
    t2 = order('t2', '2026-01-01T10:05:00+00:00')
    # El listado del panel viene del más reciente al más antiguo
    assert find_duplicate_order_ids([t2, t1]) == {'t2'}


def test_integer_and_float_totals_match():
    t1 = order('t1', '2026-01-01T10:00:00+00:00', total=150)
    t2 = order('t2', '2026-01-02T10:00:00+00:00', total=150.0)
    assert find_duplicate_order_ids([t1, t2]) == {'t2'}


def test_unique_orders_are_never_flagged():
    orders = [
        order('a', '2026-01-01T10:00:00+00:00'),
        order('b', '2026-01-01T10:01:00+00:00', cpf='222.222.222-22'),
        order('c', '2026-01-01T10:02:00+00:00', total=151.0),
        order('d', '2026-01-01T10:03:00+00:00', items=((1, 3),)),
    ]
    assert find_duplicate_order_ids(orders) == set()


def test_every_later_copy_is_flagged():
    orders = [order(str(i), f'2026-01-0{i}T10:00:00+00:00') for i in range(1, 5)]
    assert find_duplicate_order_ids(orders) == {'2', '3', '4'}


def test_ties_keep_list_order():
    same = '2026-01-01T10:00:00+00:00'
    assert find_duplicate_order_ids([order('x', same), order('y', same)]) == {'y'}


def test_empty_item_lists_still_participate():
    a = order('a', '2026-01-01T10:00:00+00:00', items=())
    b = order('b', '2026-01-01T11:00:00+00:00', items=())
    assert find_duplicate_order_ids([a, b]) == {'b'}


def test_annotate_prefixes_marker_and_persists():
    t1 = order('t1', '2026-01-01T10:00:00+00:00')
    t2 = order('t2', '2026-01-01T10:05:00+00:00', observation='ligar amanhã')
    repo = FakeOrderRepo()

    assert annotate_duplicates([t2, t1], repo) == {'t2'}
    assert t2.observation == DUPLICATE_MARKER + 'ligar amanhã'
    assert t1.observation == ''
    assert repo.updates == [('t2', {'observation': DUPLICATE_MARKER + 'ligar amanhã'})]


def test_annotate_is_idempotent():
    t1 = order('t1', '2026-01-01T10:00:00+00:00')
    t2 = order('t2', '2026-01-01T10:05:00+00:00')
    repo = FakeOrderRepo()

    annotate_duplicates([t1, t2], repo)
    annotate_duplicates([t1, t2], repo)

    assert len(repo.updates) == 1
    assert t2.observation.count(DUPLICATE_MARKER) == 1


def test_annotate_keeps_going_when_backend_fails():
    t1 = order('t1', '2026-01-01T10:00:00+00:00')
    t2 = order('t2', '2026-01-01T10:05:00+00:00')

    assert annotate_duplicates([t1, t2], FakeOrderRepo(fail=True)) == {'t2'}
    assert t2.observation == ''


def test_trimmed_fraction_timestamps_keep_chronology():
    # El backend recorta ceros finales de la fracción de segundo
    t1 = order('t1', '2026-01-01T10:00:00.12345+00:00')
    t2 = order('t2', '2026-01-01T10:05:00.5+00:00')
    assert find_duplicate_order_ids([t2, t1]) == {'t2'}
