# ==============================================================================
# VALIDACIÓN DE ENTRADAS
# ==============================================================================
# Conversión estricta de valores que llegan desde la capa HTTP o de otros
# servicios. Cualquier valor inválido lanza ValidationError.
# ==============================================================================

from typing import Any, Optional

from inventory_tracker.exceptions import ValidationError


def to_int(value: Any, field: str) -> int:
    """
    Convierte a entero rechazando decimales, notación científica y bool.

    Args:
        value: Valor recibido (int o string de dígitos)
        field: Nombre del campo para el mensaje de error

    Returns:
        Entero validado
    """
    # bool es subclase de int, se rechaza explícitamente
    if isinstance(value, bool):
        raise ValidationError(f"{field} debe ser un número entero", field)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or 'e' in stripped.lower() or '.' in stripped:
            raise ValidationError(f"{field} debe ser un número entero", field)
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} debe ser un número entero", field)
    raise ValidationError(f"{field} debe ser un número entero", field)


def to_price(value: Any, field: str) -> float:
    """
    Convierte un precio a float >= 0 redondeado a 2 decimales.
    """
    if isinstance(value, bool) or value is None or value == '':
        raise ValidationError(f"{field} es obligatorio y debe ser numérico", field)
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} debe ser numérico", field)
    if price != price or price in (float('inf'), float('-inf')):
        raise ValidationError(f"{field} debe ser un número finito", field)
    if price < 0:
        raise ValidationError(f"{field} no puede ser negativo", field)
    return round(price, 2)


def required_text(value: Any, field: str) -> str:
    """Texto obligatorio, sin espacios al inicio/fin."""
    text = str(value).strip() if value is not None else ''
    if not text:
        raise ValidationError(f"{field} es obligatorio", field)
    return text


def optional_text(value: Any) -> Optional[str]:
    """Texto opcional: vacío se guarda como ausente."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
