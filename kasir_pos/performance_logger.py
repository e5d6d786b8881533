# ==============================================================================
# INTERNAL PROFILING
# ==============================================================================
# Measures route and function timings without affecting the caller.
# Slow calls are written as readable blocks into POS_LOGS_DIR.
#
# ENABLE/DISABLE: POS_ENABLE_PROFILING (see config.py)
# ==============================================================================

import os
import time
import threading
from collections import defaultdict
from datetime import datetime
from functools import wraps

from kasir_pos import config

# File names inside config.LOGS_DIR
PERFORMANCE_LOG = 'performance.log'
SLOW_ROUTES_LOG = 'slow_routes.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'

# Readable names for routes (method + Flask rule)
ROUTE_NAMES = {
    'POST /login': 'Log in',
    'POST /logout': 'Log out',
    'GET /me': 'Current session',
    'GET /products': 'Search products',
    'GET /cart': 'View cart',
    'POST /cart/items': 'Add to cart',
    'POST /cart/items/<product_id>': 'Change cart quantity',
    'DELETE /cart/items/<product_id>': 'Remove from cart',
    'POST /cart/clear': 'Clear cart',
    'POST /cart/payment': 'Set payment',
    'POST /cart/checkout': 'Checkout',
    'GET /stock': 'Search stock',
    'GET /stock/categories': 'Stock categories',
    'POST /stock/<product_id>/open-box': 'Open box',
    'POST /stock/<product_id>/pieces': 'Add pieces',
    'GET /stats/daily': 'Daily summary',
    'GET /stats': 'Business stats',
    'GET /audit': 'View audit log',
}


# ═══════════════════════════════════════════════════════════════════════════
# FUNCTION STATS (in memory)
# ═══════════════════════════════════════════════════════════════════════════

# {function_name: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


def _get_timestamp():
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filename, content):
    """Appends to a log file. Write failures never reach the caller."""
    try:
        with _write_lock:
            os.makedirs(config.LOGS_DIR, exist_ok=True)
            with open(os.path.join(config.LOGS_DIR, filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass


def _get_route_name(method, rule):
    return ROUTE_NAMES.get(f"{method} {rule}", f"{method} {rule}")


# ═══════════════════════════════════════════════════════════════════════════
# 1. ROUTE PROFILING
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, user=None):
    """
    Records one request in performance.log

    Args:
        method: GET, POST, etc.
        path: Requested path (/cart/items)
        rule: Flask rule (/cart/items/<product_id>)
        time_ms: Elapsed milliseconds
        user: Logged-in user id (optional)
    """
    if not config.ENABLE_PROFILING:
        return

    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Action: {_get_route_name(method, rule)}
User: {user or 'anonymous'}
Route: {method} {path}
Time: {time_ms:.0f} ms
"""
    _write_log(PERFORMANCE_LOG, log_entry)


def log_slow_route(method, path, rule, time_ms, user=None, level='WARNING'):
    """
    Records a slow request in slow_routes.log

    Args:
        level: 'WARNING' (>= THRESHOLD_WARNING) or 'CRITICAL' (>= THRESHOLD_CRITICAL)
    """
    if not config.ENABLE_PROFILING:
        return

    threshold = config.THRESHOLD_WARNING if level == 'WARNING' else config.THRESHOLD_CRITICAL
    log_entry = f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
Slow route: {_get_route_name(method, rule)}
User: {user or 'anonymous'}
Detail: {method} {path}
Time: {time_ms:.0f} ms (threshold: {threshold} ms)
────────────────────────────────────────
"""
    _write_log(SLOW_ROUTES_LOG, log_entry)


def init_profiling(app):
    """
    Registers before_request / after_request timing hooks on a Flask app.

    Usage:
        from kasir_pos.performance_logger import init_profiling
        init_profiling(app)
    """
    if not config.ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request, session

        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000

        method = request.method
        path = request.path
        rule = str(request.url_rule) if request.url_rule else path
        user = (session.get(config.SESSION_KEY) or {}).get('id')

        log_route_performance(method, path, rule, elapsed, user)

        if elapsed >= config.THRESHOLD_CRITICAL:
            log_slow_route(method, path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= config.THRESHOLD_WARNING:
            log_slow_route(method, path, rule, elapsed, user, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2. FUNCTION DECORATOR
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Measures calls to key functions.

    Usage:
        @profile_function
        def my_function():
            ...

        @profile_function(name="Checkout")
        def checkout(self):
            ...

    Records call count, average and maximum time. The decision to profile
    is taken at call time, so toggling config.ENABLE_PROFILING applies to
    functions decorated at import.
    """
    def decorator(fn):
        func_name = name or fn.__qualname__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not config.ENABLE_PROFILING:
                return fn(*args, **kwargs)

            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                if elapsed_ms >= config.THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    # Allow bare @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    severity = 'CRITICAL' if time_ms >= config.THRESHOLD_CRITICAL else 'SLOW'

    log_entry = f"""
[{severity}] {_get_timestamp()}
Function: {func_name}
Time: {time_ms:.0f} ms
────────────────────────────────────────
"""
    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 3. STATS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Stats of every profiled function.

    Returns:
        dict: {name: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Clears all stats (used by tests)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
