# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia.
#
# Los nombres de campo persistidos (to_dict) están en camelCase porque el
# esquema de las colecciones es consumido tal cual por la UI y reportes.
# ==============================================================================

import uuid
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from enum import Enum
from datetime import datetime


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class MovementType(str, Enum):
    """Tipos de movimiento de stock."""
    ADD = "add"        # Entrada (suma)
    ADJUST = "adjust"  # Ajuste a valor absoluto
    SALE = "sale"      # Salida por venta


# ==============================================================================
# UTILIDADES DE FECHAS E IDS
# ==============================================================================

def generate_id() -> str:
    """Genera un identificador opaco y único."""
    return uuid.uuid4().hex


def now() -> datetime:
    """Fecha/hora local actual (sin timezone)."""
    return datetime.now()


def format_timestamp(value: datetime) -> str:
    """Serializa una fecha a ISO 8601 con microsegundos."""
    return value.isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parsea una fecha desde string ISO.
    Las fechas con timezone se convierten a hora local sin timezone.
    Retorna None si no puede parsear.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _optional(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if value not in (None, '') else None


# ==============================================================================
# ENTIDADES DE CATÁLOGO
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador inmutable
        name: Nombre visible (no único)
        sku: Código interno (no único)
        purchase_price: Costo de compra por unidad
        selling_price: Precio de venta por defecto
        category: Categoría libre
        description: Descripción opcional
    """
    id: str
    name: str
    sku: str = ''
    purchase_price: float = 0.0
    selling_price: float = 0.0
    category: str = ''
    description: Optional[str] = None
    created_at: datetime = field(default_factory=now)
    updated_at: datetime = field(default_factory=now)

    @property
    def margin(self) -> float:
        """Margen porcentual sobre el precio de venta."""
        if not self.selling_price:
            return 0.0
        return (self.selling_price - self.purchase_price) / self.selling_price * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        d = {
            'id': self.id,
            'name': self.name,
            'sku': self.sku,
            'purchasePrice': self.purchase_price,
            'sellingPrice': self.selling_price,
            'category': self.category,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }
        if self.description is not None:
            d['description'] = self.description
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario."""
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            sku=data.get('sku', ''),
            purchase_price=float(data.get('purchasePrice', 0) or 0),
            selling_price=float(data.get('sellingPrice', 0) or 0),
            category=data.get('category', ''),
            description=_optional(data, 'description'),
            created_at=parse_timestamp(data.get('createdAt')) or now(),
            updated_at=parse_timestamp(data.get('updatedAt')) or now(),
        )


# ==============================================================================
# ENTIDADES DE CLIENTES
# ==============================================================================

@dataclass
class Customer:
    """
    Cliente registrado.

    username es único sin distinguir mayúsculas; email también, cuando existe.
    """
    id: str
    first_name: str
    last_name: str
    username: str
    email: Optional[str] = None
    created_at: datetime = field(default_factory=now)
    updated_at: datetime = field(default_factory=now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'username': self.username,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }
        if self.email:
            d['email'] = self.email
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(
            id=data['id'],
            first_name=data.get('firstName', ''),
            last_name=data.get('lastName', ''),
            username=data.get('username', ''),
            email=_optional(data, 'email'),
            created_at=parse_timestamp(data.get('createdAt')) or now(),
            updated_at=parse_timestamp(data.get('updatedAt')) or now(),
        )


# ==============================================================================
# ENTIDADES DE STOCK
# ==============================================================================

@dataclass
class StockLevel:
    """
    Stock actual de un producto (una fila por producto).

    Attributes:
        product_id: Producto al que pertenece
        product_name: Copia del nombre, se sincroniza al renombrar
        quantity: Cantidad en inventario (nunca negativa)
    """
    product_id: str
    product_name: str
    quantity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productId': self.product_id,
            'productName': self.product_name,
            'quantity': self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StockLevel':
        return cls(
            product_id=data['productId'],
            product_name=data.get('productName', ''),
            quantity=int(data.get('quantity', 0) or 0),
        )


@dataclass(frozen=True)
class StockEntry:
    """
    Movimiento histórico de stock. Inmutable una vez escrito.

    quantity es el valor final para 'adjust' (no tiene delta natural)
    y la magnitud del movimiento para 'add' y 'sale'.
    """
    id: str
    product_id: str
    product_name: str
    type: MovementType
    quantity: int
    previous_quantity: int
    new_quantity: int
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=now)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id': self.id,
            'productId': self.product_id,
            'productName': self.product_name,
            'type': self.type.value,
            'quantity': self.quantity,
            'previousQuantity': self.previous_quantity,
            'newQuantity': self.new_quantity,
            'createdAt': format_timestamp(self.created_at),
        }
        if self.notes is not None:
            d['notes'] = self.notes
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StockEntry':
        return cls(
            id=data['id'],
            product_id=data['productId'],
            product_name=data.get('productName', ''),
            type=MovementType(data['type']),
            quantity=int(data.get('quantity', 0)),
            previous_quantity=int(data.get('previousQuantity', 0)),
            new_quantity=int(data.get('newQuantity', 0)),
            notes=_optional(data, 'notes'),
            created_at=parse_timestamp(data.get('createdAt')) or now(),
        )


# ==============================================================================
# ENTIDADES DE VENTAS
# ==============================================================================

@dataclass(frozen=True)
class Sale:
    """
    Venta registrada.

    Attributes:
        product_name: Copia del nombre al momento de la venta
        customer_id: Cliente opcional
        customer_name: Copia del nombre del cliente, si se resolvió
        unit_price: Precio efectivo por unidad
        total_price: unit_price × quantity
        profit: (unit_price − costo) × quantity, puede ser negativo
    """
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float
    profit: float
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    created_at: datetime = field(default_factory=now)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id': self.id,
            'productId': self.product_id,
            'productName': self.product_name,
            'quantity': self.quantity,
            'unitPrice': self.unit_price,
            'totalPrice': self.total_price,
            'profit': self.profit,
            'createdAt': format_timestamp(self.created_at),
        }
        if self.customer_id is not None:
            d['customerId'] = self.customer_id
        if self.customer_name is not None:
            d['customerName'] = self.customer_name
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        return cls(
            id=data['id'],
            product_id=data['productId'],
            product_name=data.get('productName', ''),
            quantity=int(data.get('quantity', 0)),
            unit_price=float(data.get('unitPrice', 0) or 0),
            total_price=float(data.get('totalPrice', 0) or 0),
            profit=float(data.get('profit', 0) or 0),
            customer_id=_optional(data, 'customerId'),
            customer_name=_optional(data, 'customerName'),
            created_at=parse_timestamp(data.get('createdAt')) or now(),
        )
