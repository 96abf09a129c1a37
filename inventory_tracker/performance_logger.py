# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y operaciones de servicio sin afectar al usuario.
# Las llamadas lentas se registran con logging (logger de este módulo).
#
# ACTIVAR/DESACTIVAR: configure_profiling(enabled=...) o la variable de
# entorno INVENTORY_ENABLE_PROFILING.
# ==============================================================================

import logging
import threading
import time
from collections import defaultdict
from functools import wraps


logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

_settings = {
    'enabled': True,
    'warning_ms': 300,   # Advertencia si supera 300ms
    'critical_ms': 700,  # Crítico si supera 700ms
}


def configure_profiling(enabled=True, warning_ms=300, critical_ms=700):
    """Ajusta el profiling en tiempo de ejecución (lo llama create_app)."""
    _settings['enabled'] = bool(enabled)
    _settings['warning_ms'] = warning_ms
    _settings['critical_ms'] = critical_ms


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()


def _record(func_name, elapsed_ms):
    with _stats_lock:
        stats = _function_stats[func_name]
        stats['calls'] += 1
        stats['total_time'] += elapsed_ms
        if elapsed_ms > stats['max_time']:
            stats['max_time'] = elapsed_ms

    if elapsed_ms >= _settings['critical_ms']:
        logger.critical("Operación MUY LENTA: %s tardó %.0f ms", func_name, elapsed_ms)
    elif elapsed_ms >= _settings['warning_ms']:
        logger.warning("Operación lenta: %s tardó %.0f ms", func_name, elapsed_ms)


# ═══════════════════════════════════════════════════════════════════════════
# DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Registrar venta")
        def record_sale():
            ...

    Registra:
        - Cantidad de llamadas
        - Tiempo promedio
        - Tiempo máximo
    """
    def decorator(fn):
        func_name = name or fn.__qualname__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not _settings['enabled']:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                _record(func_name, (time.perf_counter() - start) * 1000)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


# ═══════════════════════════════════════════════════════════════════════════
# HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app):
    """
    Registra hooks before_request y after_request que miden cada ruta.

    Uso:
        init_profiling(app)
    """
    from flask import g, request

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        start = g.pop('start_time', None)
        if start is None or not _settings['enabled']:
            return response
        rule = str(request.url_rule) if request.url_rule else request.path
        _record(f"{request.method} {rule}", (time.perf_counter() - start) * 1000)
        return response


# ═══════════════════════════════════════════════════════════════════════════
# REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
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
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'configure_profiling',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
