from decimal import Decimal

import pytest

from kasir_pos.exceptions import (
    CartLineNotFound,
    EmptyCart,
    InsufficientPayment,
    InvalidQuantity,
    UnknownProduct,
)
from kasir_pos.models import PaymentMethod, Product
from kasir_pos.repositories import SalesJournal
from kasir_pos.services import CartLedger, parse_amount


@pytest.fixture
def ledger(catalog):
    return CartLedger(catalog.find_by_id)


def expected_total(ledger):
    return sum(line.quantity * line.unit_price for line in ledger.lines())


def test_add_item_creates_then_increments_line(ledger):
    first = ledger.add_item('1')
    assert first.quantity == 1
    assert first.unit_price == 3500

    second = ledger.add_item('1')
    assert second.quantity == 2
    assert second.subtotal == 7000
    assert len(ledger.lines()) == 1
    assert ledger.total() == 7000


def test_lines_keep_insertion_order(ledger):
    for pid in ('3', '1', '2', '1'):
        ledger.add_item(pid)
    assert [line.product_id for line in ledger.lines()] == ['3', '1', '2']
    assert ledger.item_count() == 4


def test_add_item_keeps_captured_price_after_catalog_change():
    products = {'A': Product(id='A', name='Kopi', price=2500)}
    ledger = CartLedger(products.get)

    ledger.add_item('A')
    products['A'] = Product(id='A', name='Kopi', price=9000)
    line = ledger.add_item('A')

    assert line.unit_price == 2500
    assert ledger.total() == 5000


def test_add_item_unknown_product_leaves_cart_untouched(ledger):
    ledger.add_item('1')
    with pytest.raises(UnknownProduct):
        ledger.add_item('999')
    assert ledger.total() == 3500
    assert len(ledger.lines()) == 1


def test_add_item_uses_explicit_lookup():
    ledger = CartLedger()
    with pytest.raises(UnknownProduct):
        ledger.add_item('X')

    line = ledger.add_item('X', lambda pid: Product(id=pid, name='Roti', price=6000))
    assert line.name == 'Roti'
    assert ledger.total() == 6000


def test_set_quantity_updates_subtotal_from_captured_price(ledger):
    ledger.add_item('2')
    line = ledger.set_quantity('2', 5)
    assert line.quantity == 5
    assert line.subtotal == 20000
    assert ledger.total() == 20000


@pytest.mark.parametrize('quantity', [0, -1, -10])
def test_set_quantity_non_positive_removes_line(ledger, quantity):
    ledger.add_item('1')
    ledger.add_item('2')
    assert ledger.set_quantity('1', quantity) is None
    assert [line.product_id for line in ledger.lines()] == ['2']


def test_removed_line_is_not_re_added_by_set_quantity(ledger):
    ledger.add_item('1')
    ledger.set_quantity('1', 0)

    with pytest.raises(CartLineNotFound) as excinfo:
        ledger.set_quantity('1', 3)

    assert isinstance(excinfo.value, UnknownProduct)
    assert ledger.is_empty()
    assert ledger.total() == 0


def test_remove_item_requires_existing_line(ledger):
    ledger.add_item('5')
    ledger.remove_item('5')
    assert ledger.is_empty()
    with pytest.raises(CartLineNotFound):
        ledger.remove_item('5')


def test_total_matches_lines_after_mixed_operations(ledger):
    steps = [
        ('add', '1'), ('add', '2'), ('add', '1'), ('set', '2', 4),
        ('add', '3'), ('set', '1', 0), ('add', '5'), ('set', '3', 7),
        ('add', '1'),
    ]
    for step in steps:
        if step[0] == 'add':
            ledger.add_item(step[1])
        else:
            ledger.set_quantity(step[1], step[2])
        assert ledger.total() == expected_total(ledger)

    assert ledger.total() == 4 * 4000 + 7 * 5000 + 8000 + 3500


def test_empty_cart_total_is_zero(ledger):
    assert ledger.total() == 0
    assert ledger.item_count() == 0


def test_clear_is_idempotent_and_resets_payment(ledger):
    ledger.add_item('1')
    ledger.set_payment_method('qris')
    ledger.set_cash_tendered('5000')

    ledger.clear()
    first = (ledger.lines(), ledger.total(), ledger.payment_method, ledger.cash_tendered)
    ledger.clear()
    second = (ledger.lines(), ledger.total(), ledger.payment_method, ledger.cash_tendered)

    assert first == second == ([], 0, PaymentMethod.CASH, Decimal('0'))


@pytest.mark.parametrize('text, expected', [
    ('10000', Decimal('10000')),
    ('  7500.50 ', Decimal('7500.50')),
    (20000, Decimal('20000')),
    ('abc', Decimal('0')),
    ('', Decimal('0')),
    (None, Decimal('0')),
    ('-5', Decimal('0')),
    ('NaN', Decimal('0')),
    ('Infinity', Decimal('0')),
])
def test_parse_amount_is_lenient(text, expected):
    assert parse_amount(text) == expected


def test_change_due_for_cash_may_be_negative(ledger):
    ledger.add_item('5')
    ledger.set_cash_tendered('5000')
    assert ledger.change_due() == Decimal('-3000')

    ledger.set_cash_tendered('10000')
    assert ledger.change_due() == Decimal('2000')


def test_switching_method_keeps_tendered_amount(ledger):
    ledger.add_item('1')
    ledger.set_cash_tendered('4000')

    ledger.set_payment_method(PaymentMethod.QRIS)
    assert ledger.change_due() is None
    assert ledger.cash_tendered == Decimal('4000')

    ledger.set_payment_method('cash')
    assert ledger.change_due() == Decimal('500')


def test_unknown_payment_method_is_rejected(ledger):
    with pytest.raises(ValueError):
        ledger.set_payment_method('bitcoin')
    assert ledger.payment_method == PaymentMethod.CASH


@pytest.mark.parametrize('method', list(PaymentMethod))
def test_checkout_empty_cart_fails_for_every_method(ledger, method):
    ledger.set_payment_method(method)
    with pytest.raises(EmptyCart):
        ledger.checkout()


def test_empty_cart_is_checked_before_payment(ledger):
    ledger.set_cash_tendered('0')
    with pytest.raises(EmptyCart):
        ledger.checkout()


def test_checkout_insufficient_cash_keeps_state(ledger):
    ledger.add_item('1')
    ledger.add_item('2')
    ledger.set_cash_tendered('7000')

    with pytest.raises(InsufficientPayment) as excinfo:
        ledger.checkout()

    assert excinfo.value.total == 7500
    assert excinfo.value.tendered == Decimal('7000')
    assert ledger.total() == 7500
    assert ledger.cash_tendered == Decimal('7000')


def test_checkout_unparseable_cash_is_insufficient(ledger):
    ledger.add_item('1')
    ledger.set_cash_tendered('lots')
    with pytest.raises(InsufficientPayment):
        ledger.checkout()


def test_checkout_cash_returns_snapshot_and_resets(ledger):
    ledger.add_item('1')
    ledger.add_item('1')
    ledger.add_item('3')
    ledger.set_cash_tendered('20000')

    receipt = ledger.checkout(cashier_id='1')

    assert receipt.total == 12000
    assert receipt.method == PaymentMethod.CASH
    assert receipt.tendered == Decimal('20000')
    assert receipt.change_due == Decimal('8000')
    assert receipt.cashier_id == '1'
    assert [(l.product_id, l.quantity) for l in receipt.lines] == [('1', 2), ('3', 1)]

    assert ledger.is_empty()
    assert ledger.payment_method == PaymentMethod.CASH
    assert ledger.cash_tendered == Decimal('0')


def test_checkout_exact_cash_gives_zero_change(ledger):
    ledger.add_item('4')
    ledger.set_cash_tendered('2500')
    assert ledger.checkout().change_due == Decimal('0')


def test_checkout_non_cash_ignores_tendered(ledger):
    ledger.add_item('2')
    ledger.set_payment_method('debt')

    receipt = ledger.checkout()

    assert receipt.method == PaymentMethod.DEBT
    assert receipt.change_due is None
    assert receipt.to_dict()['change_due'] is None


def test_receipt_lines_are_detached_from_ledger(ledger):
    ledger.add_item('1')
    ledger.set_cash_tendered('3500')
    receipt = ledger.checkout()

    ledger.add_item('1')
    ledger.set_quantity('1', 9)
    assert receipt.lines[0].quantity == 1


def test_checkout_is_audited(catalog, audit_service):
    ledger = CartLedger(catalog.find_by_id, audit_service)
    ledger.add_item('1')
    ledger.set_cash_tendered('5000')
    ledger.checkout(cashier_id='1')

    logs = audit_service.get_logs(log_type='SALE')
    assert len(logs) == 1
    assert logs[0].user == '1'
    assert 'Rp 3.500' in logs[0].message
    assert 'Change: Rp 1.500' in logs[0].message


@pytest.mark.parametrize('quantity', [2.9, '3', 'abc', True, None])
def test_set_quantity_rejects_non_integer_without_change(ledger, quantity):
    ledger.add_item('1')
    with pytest.raises(InvalidQuantity):
        ledger.set_quantity('1', quantity)
    assert [(l.product_id, l.quantity) for l in ledger.lines()] == [('1', 1)]


def test_checkout_records_receipt_in_journal(catalog):
    journal = SalesJournal()
    ledger = CartLedger(catalog.find_by_id, sales_journal=journal)
    ledger.add_item('2')
    ledger.set_payment_method('qris')

    receipt = ledger.checkout(cashier_id='1')

    assert journal.load() == [receipt]
    assert ledger.is_empty()


def test_failed_checkout_records_nothing(catalog):
    journal = SalesJournal()
    ledger = CartLedger(catalog.find_by_id, sales_journal=journal)
    ledger.add_item('2')
    with pytest.raises(InsufficientPayment):
        ledger.checkout()
    assert journal.load() == []
