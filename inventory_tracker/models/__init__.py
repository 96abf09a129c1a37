# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Beneficios:
#   - Type hints para mejor documentación y autocompletado
#   - Fácil serialización/deserialización para JSON o SQL
#   - Independiente del mecanismo de persistencia
# ==============================================================================

from .entities import (
    # Catálogo
    Product,

    # Clientes
    Customer,

    # Stock
    StockLevel,
    StockEntry,
    MovementType,

    # Ventas
    Sale,

    # Utilidades
    generate_id,
    now,
    format_timestamp,
    parse_timestamp,
)

__all__ = [
    'Product',
    'Customer',
    'StockLevel',
    'StockEntry',
    'MovementType',
    'Sale',
    'generate_id',
    'now',
    'format_timestamp',
    'parse_timestamp',
]
