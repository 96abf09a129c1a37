# ==============================================================================
# SERVICIO DE CLIENTES
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con clientes.
#
# REGLAS DE UNICIDAD (sin distinguir mayúsculas):
# - username: único entre todos los clientes
# - email: único entre los clientes que tienen email
# Estas validaciones se hacen AQUÍ, no en formularios ni rutas.
# ==============================================================================

import logging
import random
import re
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Set

from inventory_tracker.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from inventory_tracker.models import Customer, generate_id, now
from inventory_tracker.repositories.base import RecordStore
from inventory_tracker.repositories.customer_repository import CustomerRepository
from inventory_tracker.validation import optional_text, required_text


logger = logging.getLogger(__name__)


EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

# Campos editables: clave recibida → atributo de Customer
EDITABLE_FIELDS = {
    'firstName': 'first_name',
    'first_name': 'first_name',
    'lastName': 'last_name',
    'last_name': 'last_name',
    'username': 'username',
    'email': 'email',
}

# Límites de la sugerencia de username
FIRST_NAME_CHARS = 8
LAST_NAME_CHARS = 8
SINGLE_NAME_CHARS = 15
MAX_SUFFIX = 1000


def normalize_name_part(value: Optional[str]) -> str:
    """Minúsculas y solo caracteres alfanuméricos ASCII."""
    return re.sub(r'[^a-z0-9]', '', (value or '').lower())


class CustomerService:
    """
    Servicio para gestión de clientes.

    Responsabilidades:
    - CRUD de clientes
    - Unicidad de username y email
    - Sugerencia de username a partir del nombre
    - Búsqueda de clientes
    """

    def __init__(self, store: RecordStore, customer_repo: CustomerRepository):
        """
        Args:
            store: Almacén compartido (para transacciones)
            customer_repo: Repositorio de clientes
        """
        self.store = store
        self.customer_repo = customer_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_all_customers(self) -> List[Customer]:
        return self.customer_repo.load()

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        return self.customer_repo.get_customer(customer_id)

    def search_customers(self, term: str = '') -> List[Customer]:
        """Busca por nombre, apellido, username o email."""
        term = (term or '').strip().lower()
        customers = self.get_all_customers()
        if not term:
            return customers
        return [
            c for c in customers
            if term in c.first_name.lower()
            or term in c.last_name.lower()
            or term in c.username.lower()
            or term in (c.email or '').lower()
        ]

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_customer(self, data: Dict[str, Any]) -> Customer:
        """
        Crea un cliente nuevo.

        Args:
            data: firstName, lastName, username (obligatorios), email (opcional)

        Returns:
            Cliente creado

        Raises:
            ValidationError: Campos obligatorios vacíos o email mal formado
            DuplicateKeyError: username o email ya usados
        """
        fields = self._normalize_fields(data)
        for attr, key in (('first_name', 'firstName'), ('last_name', 'lastName'), ('username', 'username')):
            fields[attr] = required_text(fields.get(attr), key)

        timestamp = now()
        customer = Customer(
            id=generate_id(),
            first_name=fields['first_name'],
            last_name=fields['last_name'],
            username=fields['username'],
            email=fields.get('email'),
            created_at=timestamp,
            updated_at=timestamp,
        )

        # Verificación y escritura bajo el mismo lock del almacén
        with self.store.transaction():
            self._check_unique(customer.username, customer.email, self.customer_repo.load())
            self.customer_repo.create_customer(customer)

        logger.info("Cliente creado: %s (%s)", customer.username, customer.id)
        return customer

    def update_customer(self, customer_id: str, updates: Dict[str, Any]) -> Customer:
        """
        Actualiza un cliente validando unicidad contra los DEMÁS clientes.

        Raises:
            NotFoundError: Si el cliente no existe
            DuplicateKeyError: Conflicto de username o email
        """
        fields = self._normalize_fields(updates)
        for attr, key in (('first_name', 'firstName'), ('last_name', 'lastName'), ('username', 'username')):
            if attr in fields:
                fields[attr] = required_text(fields[attr], key)

        with self.store.transaction():
            customer = self.customer_repo.get_customer(customer_id)
            if customer is None:
                raise NotFoundError('Cliente', customer_id)

            updated = replace(customer, updated_at=now(), **fields)
            others = [c for c in self.customer_repo.load() if c.id != customer_id]
            self._check_unique(updated.username, updated.email, others)

            self.customer_repo.update_customer(updated)

        logger.info("Cliente actualizado: %s (%s)", updated.username, customer_id)
        return updated

    def delete_customer(self, customer_id: str) -> bool:
        """
        Elimina un cliente. Las ventas conservan el nombre copiado.

        Returns:
            True si se eliminó un registro
        """
        removed = self.customer_repo.delete_customer(customer_id)
        if removed:
            logger.info("Cliente eliminado: %s", customer_id)
        return removed

    # =========================================================================
    # SUGERENCIA DE USERNAME
    # =========================================================================

    def suggest_username(
        self,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None
    ) -> str:
        """
        Sugiere un username libre a partir del nombre.

        1. Nombre y apellido: 8 + 8 caracteres alfanuméricos en minúsculas
        2. Solo nombre: hasta 15 caracteres
        3. Si está tomado: {base}1, {base}2... hasta 1000 (luego se rinde
           y retorna el último intento aunque esté tomado)
        4. Sin nombres utilizables: customer{0-9999}, con sufijo si está tomado

        Returns:
            Username sugerido
        """
        taken = self._taken_usernames()

        base = ''
        if (first_name or '').strip() and (last_name or '').strip():
            base = (normalize_name_part(first_name)[:FIRST_NAME_CHARS]
                    + normalize_name_part(last_name)[:LAST_NAME_CHARS])
        elif (first_name or '').strip():
            base = normalize_name_part(first_name)[:SINGLE_NAME_CHARS]

        if base:
            if base not in taken:
                return base
            counter = 1
            candidate = f"{base}{counter}"
            while candidate in taken and counter < MAX_SUFFIX:
                counter += 1
                candidate = f"{base}{counter}"
            if candidate in taken:
                logger.warning("Sin username libre para '%s' tras %d intentos", base, MAX_SUFFIX)
            return candidate

        base = f"customer{random.randint(0, 9999)}"
        candidate = base
        counter = 1
        while candidate in taken:
            candidate = f"{base}{counter}"
            counter += 1
        return candidate

    # =========================================================================
    # VALIDACIONES INTERNAS
    # =========================================================================

    def _taken_usernames(self) -> Set[str]:
        return self._lowered(self.customer_repo.usernames())

    @staticmethod
    def _lowered(values: Iterable[str]) -> Set[str]:
        return {v.lower() for v in values if v}

    def _check_unique(
        self,
        username: str,
        email: Optional[str],
        others: List[Customer]
    ) -> None:
        """
        Raises:
            DuplicateKeyError: Si username o email chocan con otro cliente
        """
        if username.lower() in self._lowered(c.username for c in others):
            logger.warning("Username duplicado rechazado: %s", username)
            raise DuplicateKeyError('username', username)
        if email and email.lower() in self._lowered(c.email for c in others if c.email):
            logger.warning("Email duplicado rechazado: %s", email)
            raise DuplicateKeyError('email', email)

    def _normalize_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Filtra campos editables; email vacío se guarda como ausente."""
        fields: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            attr = EDITABLE_FIELDS.get(key)
            if attr is None:
                continue
            if attr == 'email':
                email = optional_text(value)
                if email and not EMAIL_RE.match(email):
                    raise ValidationError("Email con formato inválido", 'email')
                fields[attr] = email
            else:
                fields[attr] = str(value).strip() if value is not None else ''
        return fields
