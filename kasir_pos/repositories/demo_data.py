# ==============================================================================
# DEMO DATA
# ==============================================================================
# Seed data for the in-memory repositories: the shop's demo accounts,
# catalog and stock. Secrets are plain text on purpose (demo accounts);
# a werkzeug hash is accepted as well by the session guard.
# ==============================================================================

from kasir_pos.models import Account, Product, StockRecord, UserRole


DEMO_ACCOUNTS = (
    Account(
        user_id='1',
        name='John Cashier',
        role=UserRole.CASHIER,
        email='cashier@pos.com',
        secret='cashier123',
    ),
    Account(
        user_id='2',
        name='Jane Owner',
        role=UserRole.OWNER,
        email='owner@pos.com',
        secret='owner123',
    ),
)

DEMO_PRODUCTS = (
    Product(id='1', name='Indomie Goreng', price=3500, barcode='8992388101010', stock=100, category='Makanan'),
    Product(id='2', name='Aqua 600ml', price=4000, barcode='8992388202020', stock=50, category='Minuman'),
    Product(id='3', name='Teh Botol Sosro', price=5000, barcode='8992388303030', stock=75, category='Minuman'),
    Product(id='4', name='Kopi Kapal Api', price=2500, barcode='8992388404040', stock=30, category='Minuman'),
    Product(id='5', name='Biskuit Roma', price=8000, barcode='8992388505050', stock=25, category='Makanan'),
)


def demo_stock_records():
    """Fresh stock records (mutable, so a new list on every call)."""
    return [
        StockRecord(
            product_id='1', name='Indomie Goreng', category='Makanan',
            barcode='8992388101010', box_stock=5, piece_stock=20,
            pieces_per_box=40, min_stock=50,
        ),
        StockRecord(
            product_id='2', name='Aqua 600ml', category='Minuman',
            barcode='8992388202020', box_stock=3, piece_stock=15,
            pieces_per_box=24, min_stock=30,
        ),
        StockRecord(
            product_id='3', name='Teh Botol Sosro', category='Minuman',
            barcode='8992388303030', box_stock=2, piece_stock=10,
            pieces_per_box=24, min_stock=25,
        ),
        StockRecord(
            product_id='4', name='Kopi Kapal Api', category='Minuman',
            barcode='8992388404040', box_stock=1, piece_stock=5,
            pieces_per_box=12, min_stock=20,
        ),
    ]
