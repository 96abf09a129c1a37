# ==============================================================================
# INVENTORY TRACKER - Libro de inventario y registro de ventas
# ==============================================================================
# Productos, stock, historial de movimientos, ventas y clientes.
# ==============================================================================

__version__ = '1.0.0'
