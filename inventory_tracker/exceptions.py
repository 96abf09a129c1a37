# ==============================================================================
# EXCEPCIONES DEL DOMINIO
# ==============================================================================
# Todas las fallas de reglas de negocio se lanzan como excepciones tipadas
# para que la capa HTTP pueda mostrar un mensaje al usuario.
# No hay reintentos automáticos en ningún servicio.
# ==============================================================================

from typing import Any, Optional


class InventoryError(Exception):
    """Excepción base de todas las fallas de negocio."""
    pass


class NotFoundError(InventoryError):
    """La entidad referenciada (producto, cliente) no existe."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} no encontrado")


class DuplicateKeyError(InventoryError):
    """
    Violación de unicidad en clientes.

    Attributes:
        field: Campo en conflicto ('username' o 'email')
        value: Valor que ya estaba en uso
    """

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"El {field} '{value}' ya está en uso")


class InsufficientStockError(InventoryError):
    """La cantidad pedida supera el stock actual del producto."""

    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Stock insuficiente para {product_id}. "
            f"Solicitado: {requested}, Disponible: {available}"
        )


class ValidationError(InventoryError):
    """Entrada mal formada en el borde de un servicio."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
