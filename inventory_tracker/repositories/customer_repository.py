# ==============================================================================
# REPOSITORIO DE CLIENTES
# ==============================================================================
# Encapsula todo el acceso a la colección "customers"
# Las reglas de unicidad (username/email) viven en CustomerService
# ==============================================================================

from typing import List, Optional

from inventory_tracker.models import Customer
from inventory_tracker.repositories.base import ListRepository


class CustomerRepository(ListRepository):
    """
    Repositorio para gestión de clientes.

    Formato de datos en customers:
    [
        {
            "id": "9c1e...",
            "firstName": "Jane",
            "lastName": "Doe",
            "username": "janedoe",
            "email": "jane@example.com",
            "createdAt": "...",
            "updatedAt": "..."
        }
    ]
    """

    collection = 'customers'

    def load(self) -> List[Customer]:
        """Carga todos los clientes."""
        return [Customer.from_dict(r) for r in self.get_all()]

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        """
        Obtiene un cliente por su ID.

        Returns:
            Cliente o None
        """
        record = self.find_by('id', customer_id)
        return Customer.from_dict(record) if record else None

    def usernames(self) -> List[str]:
        """Todos los usernames registrados."""
        return [r.get('username', '') for r in self.get_all()]

    def create_customer(self, customer: Customer) -> None:
        self.append(customer.to_dict())

    def update_customer(self, customer: Customer) -> bool:
        """
        Reemplaza los datos de un cliente existente.

        Returns:
            True si se actualizó
        """
        data = self.get_all()
        for index, record in enumerate(data):
            if record.get('id') == customer.id:
                data[index] = customer.to_dict()
                self.save_all(data)
                return True
        return False

    def delete_customer(self, customer_id: str) -> bool:
        return self.delete_where('id', customer_id) > 0
