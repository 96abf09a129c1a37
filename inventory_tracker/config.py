# ==============================================================================
# CONFIGURACIÓN - Valores por defecto y variables de entorno
# ==============================================================================
# Toda la configuración se lee de variables de entorno con un valor por
# defecto razonable para desarrollo local.
#
# VARIABLES:
#   INVENTORY_DATA_DIR            → Carpeta de los archivos JSON
#   INVENTORY_STORAGE             → "json" (archivos) o "memory" (tests)
#   INVENTORY_LOW_STOCK_THRESHOLD → Umbral de stock bajo (default 10)
#   INVENTORY_LOG_LEVEL           → DEBUG, INFO, WARNING...
#   INVENTORY_ENABLE_PROFILING    → "0" para desactivar el profiling
#   INVENTORY_SECRET_KEY          → Clave de Flask (obligatoria en producción)
# ==============================================================================

import os
from dataclasses import dataclass


BASE_DIR = os.path.dirname(os.path.abspath(__file__))

_DEFAULT_SECRET = "inventory_tracker_dev_secret_key_change_in_production"

STORAGE_JSON = 'json'
STORAGE_MEMORY = 'memory'


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off', '')


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} debe ser un número entero, recibido: {value!r}")


@dataclass
class Config:
    """
    Configuración de la aplicación.

    Attributes:
        data_dir: Carpeta donde viven los archivos <coleccion>.json
        storage: Tipo de almacenamiento ('json' o 'memory')
        low_stock_threshold: Cantidad bajo la cual un producto tiene stock bajo
        log_level: Nivel de logging
        enable_profiling: Activa el decorador profile_function
        slow_warning_ms: Umbral de advertencia para operaciones lentas
        slow_critical_ms: Umbral crítico para operaciones lentas
        secret_key: Clave secreta de Flask
        testing: Modo testing de Flask
    """
    data_dir: str = os.path.join(BASE_DIR, 'data')
    storage: str = STORAGE_JSON
    low_stock_threshold: int = 10
    log_level: str = 'INFO'
    enable_profiling: bool = True
    slow_warning_ms: int = 300
    slow_critical_ms: int = 700
    secret_key: str = _DEFAULT_SECRET
    testing: bool = False

    @classmethod
    def from_env(cls) -> 'Config':
        """Construye la configuración desde variables de entorno."""
        storage = os.environ.get('INVENTORY_STORAGE', STORAGE_JSON).strip().lower()
        if storage not in (STORAGE_JSON, STORAGE_MEMORY):
            raise ValueError(f"INVENTORY_STORAGE inválido: {storage!r}")

        return cls(
            data_dir=os.environ.get('INVENTORY_DATA_DIR', os.path.join(BASE_DIR, 'data')),
            storage=storage,
            low_stock_threshold=_env_int('INVENTORY_LOW_STOCK_THRESHOLD', 10),
            log_level=os.environ.get('INVENTORY_LOG_LEVEL', 'INFO').upper(),
            enable_profiling=_env_bool('INVENTORY_ENABLE_PROFILING', True),
            slow_warning_ms=_env_int('INVENTORY_SLOW_WARNING_MS', 300),
            slow_critical_ms=_env_int('INVENTORY_SLOW_CRITICAL_MS', 700),
            secret_key=os.environ.get('INVENTORY_SECRET_KEY') or _DEFAULT_SECRET,
        )

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == _DEFAULT_SECRET


@dataclass
class TestingConfig(Config):
    """Configuración para tests: almacenamiento en memoria, sin profiling."""
    __test__ = False  # no es una clase de tests de pytest

    storage: str = STORAGE_MEMORY
    enable_profiling: bool = False
    log_level: str = 'WARNING'
    testing: bool = True
