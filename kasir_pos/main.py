# ==============================================================================
# HTTP API - Flask application
# ==============================================================================
# Thin JSON layer over the services:
#   request → route → service → {'ok': True, ...} / {'ok': False, 'error': ...}
#
# Business rules live in services/. Routes only parse input, call a
# service and translate domain errors into messages.
# ==============================================================================

from functools import wraps

from flask import Blueprint, Flask, current_app, g, request

from kasir_pos import config
from kasir_pos.app_container import AppContainer, get_container
from kasir_pos.exceptions import (
    AuthFailure,
    CartLineNotFound,
    EmptyCart,
    InsufficientPayment,
    InvalidQuantity,
    NoBoxStock,
    PosError,
    UnknownProduct,
)
from kasir_pos.formatting import format_currency
from kasir_pos.models import UserRole
from kasir_pos.models.entities import amount_to_json
from kasir_pos.performance_logger import init_profiling
from kasir_pos.services.stats_service import PERIODS
from kasir_pos.services.stock_ledger import classify_record

api = Blueprint('api', __name__)

# ═══════════════════════════════════════════════════════════════════════════
# ERROR TRANSLATION
# ═══════════════════════════════════════════════════════════════════════════

ERROR_MESSAGES = {
    AuthFailure.code: 'Invalid email or password',
    UnknownProduct.code: 'Product not found',
    CartLineNotFound.code: 'Product is not in the cart',
    EmptyCart.code: 'Cart is empty',
    InsufficientPayment.code: 'Insufficient cash received',
    NoBoxStock.code: 'No box left to open',
    InvalidQuantity.code: 'Quantity must be greater than 0',
}

ERROR_STATUS = {
    AuthFailure.code: 401,
    UnknownProduct.code: 404,
    CartLineNotFound.code: 404,
}


def error_response(code, status=400, message=None):
    return {'ok': False, 'error': code, 'message': message or ERROR_MESSAGES.get(code, code)}, status


@api.app_errorhandler(PosError)
def handle_pos_error(exc):
    return error_response(exc.code, ERROR_STATUS.get(exc.code, 400))


def to_int(v, default=None):
    if isinstance(v, bool):
        return default
    if isinstance(v, float):
        return int(v) if v.is_integer() else default
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _container() -> AppContainer:
    return current_app.config['POS_CONTAINER']


def _json_body():
    return request.get_json(silent=True) or {}


# ═══════════════════════════════════════════════════════════════════════════
# ACCESS CONTROL
# ═══════════════════════════════════════════════════════════════════════════

def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        user_session = _container().session_guard.current_session()
        if user_session is None:
            return error_response('login_required', 401, 'You must log in')
        g.pos_session = user_session
        return f(*args, **kwargs)
    return wrapper


def role_required(role):
    def deco(f):
        @wraps(f)
        @login_required
        def wrapper(*args, **kwargs):
            if g.pos_session.role != role:
                return error_response('forbidden', 403, 'Permission denied')
            return f(*args, **kwargs)
        return wrapper
    return deco


def _user_view(user_session):
    # the login token stays in the session cookie only
    data = user_session.to_dict()
    data.pop('token', None)
    return data


def _cart():
    return _container().cart_for(g.pos_session.cart_key)


def _cart_view(cart):
    change = cart.change_due()
    return {
        'lines': [line.to_dict() for line in cart.lines()],
        'item_count': cart.item_count(),
        'total': cart.total(),
        'total_display': format_currency(cart.total()),
        'payment_method': cart.payment_method.value,
        'cash_tendered': amount_to_json(cart.cash_tendered),
        'change_due': amount_to_json(change),
        'change_display': format_currency(change) if change is not None else None,
    }


def _stock_view(record):
    data = record.to_dict()
    data['status'] = classify_record(record).value
    return data


# ═══════════════════════════════════════════════════════════════════════════
# SESSION
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/health')
def health():
    return {'status': 'ok'}


@api.route('/login', methods=['POST'])
def login():
    data = _json_body()
    identifier = (data.get('email') or data.get('identifier') or '').strip()
    secret = data.get('password') or data.get('secret') or ''

    if not identifier or not secret:
        return error_response('missing_fields', 400, 'Please fill in all fields')

    user_session = _container().session_guard.login(identifier, secret)
    return {
        'ok': True,
        'user': _user_view(user_session),
        'dashboard': user_session.dashboard,
    }


@api.route('/logout', methods=['POST'])
def logout():
    container = _container()
    user_session = container.session_guard.current_session()
    if user_session is not None:
        container.drop_cart(user_session.cart_key)
    container.session_guard.end_session(user_session)
    return {'ok': True}


@api.route('/me')
@login_required
def me():
    return {
        'ok': True,
        'user': _user_view(g.pos_session),
        'dashboard': g.pos_session.dashboard,
    }


# ═══════════════════════════════════════════════════════════════════════════
# CATALOG AND CART
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/products')
@login_required
def products():
    query = request.args.get('q', '')
    found = _container().catalog_repo.search(query)
    return {
        'ok': True,
        'products': [
            dict(p.to_dict(), price_display=format_currency(p.price)) for p in found
        ],
    }


@api.route('/cart')
@login_required
def cart_view():
    return dict(ok=True, **_cart_view(_cart()))


@api.route('/cart/items', methods=['POST'])
@login_required
def cart_add():
    product_id = _json_body().get('product_id')
    if product_id is None or str(product_id).strip() == '':
        return error_response(UnknownProduct.code, 400, 'Invalid product id')

    cart = _cart()
    line = cart.add_item(str(product_id))
    return dict(ok=True, line=line.to_dict(), **_cart_view(cart))


@api.route('/cart/items/<product_id>', methods=['POST'])
@login_required
def cart_set_quantity(product_id):
    quantity = to_int(_json_body().get('quantity'))
    if quantity is None:
        return error_response(InvalidQuantity.code)

    cart = _cart()
    line = cart.set_quantity(product_id, quantity)
    return dict(ok=True, line=line.to_dict() if line else None, **_cart_view(cart))


@api.route('/cart/items/<product_id>', methods=['DELETE'])
@login_required
def cart_remove(product_id):
    cart = _cart()
    cart.remove_item(product_id)
    return dict(ok=True, **_cart_view(cart))


@api.route('/cart/clear', methods=['POST'])
@login_required
def cart_clear():
    cart = _cart()
    cart.clear()
    return dict(ok=True, **_cart_view(cart))


@api.route('/cart/payment', methods=['POST'])
@login_required
def cart_payment():
    data = _json_body()
    cart = _cart()

    if 'method' in data:
        try:
            cart.set_payment_method(data.get('method'))
        except ValueError:
            return error_response('invalid_payment_method', 400, 'Unknown payment method')
    if 'cash' in data:
        cart.set_cash_tendered(data.get('cash'))

    return dict(ok=True, **_cart_view(cart))


@api.route('/cart/checkout', methods=['POST'])
@login_required
def cart_checkout():
    receipt = _cart().checkout(cashier_id=g.pos_session.user_id)
    body = receipt.to_dict()
    body['total_display'] = format_currency(receipt.total)
    if receipt.change_due is not None:
        body['change_display'] = format_currency(receipt.change_due)
    return {'ok': True, 'receipt': body}


# ═══════════════════════════════════════════════════════════════════════════
# STOCK
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/stock')
@login_required
def stock_search():
    found = _container().stock_ledger.search(
        request.args.get('q', ''),
        request.args.get('category')
    )
    return {'ok': True, 'items': [_stock_view(r) for r in found]}


@api.route('/stock/categories')
@login_required
def stock_categories():
    return {'ok': True, 'categories': _container().stock_ledger.categories()}


@api.route('/stock/<product_id>/open-box', methods=['POST'])
@login_required
def stock_open_box(product_id):
    record = _container().stock_ledger.open_box(product_id, user=g.pos_session.user_id)
    return {'ok': True, 'item': _stock_view(record)}


@api.route('/stock/<product_id>/pieces', methods=['POST'])
@login_required
def stock_add_pieces(product_id):
    raw = _json_body().get('quantity')
    quantity = to_int(raw)
    if quantity is None:
        return error_response(InvalidQuantity.code)

    record = _container().stock_ledger.add_pieces(product_id, quantity, user=g.pos_session.user_id)
    return {'ok': True, 'item': _stock_view(record)}


# ═══════════════════════════════════════════════════════════════════════════
# DASHBOARD STATS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/stats/daily')
@login_required
def stats_daily():
    """Cashiers see their own sales; the owner sees the whole shop."""
    user_session = g.pos_session
    cashier_id = None if user_session.is_owner else user_session.user_id
    summary = _container().stats_service.daily_summary(cashier_id)
    summary['total_display'] = format_currency(summary['total_sales'])
    summary['target_display'] = format_currency(summary['target'])
    return {'ok': True, 'summary': summary}


@api.route('/stats')
@role_required(UserRole.OWNER)
def stats():
    period = request.args.get('period', 'daily')
    if period not in PERIODS:
        return error_response('invalid_period', 400, 'Period must be daily, weekly or monthly')

    figures = _container().stats_service.business_stats(period)
    for product in figures['top_products']:
        product['sales_display'] = format_currency(product['sales'])
    return {'ok': True, 'stats': figures}


# ═══════════════════════════════════════════════════════════════════════════
# AUDIT (owner only)
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/audit')
@role_required(UserRole.OWNER)
def audit():
    limit = to_int(request.args.get('limit'), 100)
    logs = _container().audit_service.get_logs(limit, request.args.get('type'))
    return {'ok': True, 'logs': [entry.to_dict() for entry in logs]}


# ═══════════════════════════════════════════════════════════════════════════
# APPLICATION FACTORY
# ═══════════════════════════════════════════════════════════════════════════

def create_app(container: AppContainer = None, settings: dict = None) -> Flask:
    """
    Builds the Flask application.

    Args:
        container: Dependency container (global singleton by default)
        settings: Extra Flask config values (tests)

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    app.config.update(config.FLASK_SETTINGS)
    if settings:
        app.config.update(settings)
    app.config['POS_CONTAINER'] = container or get_container()

    init_profiling(app)
    app.register_blueprint(api)
    return app
