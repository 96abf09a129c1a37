# ==============================================================================
# SERVICIO DE ESTADÍSTICAS
# ==============================================================================
# Cálculos de solo lectura a partir de ventas, stock y productos.
# No guarda estado propio y nunca modifica datos.
#
# VENTANAS DE TIEMPO (hora local):
# - today → createdAt >= inicio del día calendario actual
# - week  → createdAt >= ahora - 7 días
# - month → createdAt >= ahora - 30 días
# ==============================================================================

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from inventory_tracker.models import Sale, now as current_time
from inventory_tracker.repositories.product_repository import ProductRepository
from inventory_tracker.repositories.sales_repository import SalesRepository
from inventory_tracker.services.stock_service import StockService


WEEK_DAYS = 7
MONTH_DAYS = 30
OVERVIEW_LIMIT = 5


class StatsService:
    """
    Servicio para cálculo de estadísticas.

    Responsabilidades:
    - Totales del panel principal
    - Ingresos y ganancias por período (hoy / semana / mes)
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        sales_repo: SalesRepository,
        stock_service: StockService
    ):
        self.product_repo = product_repo
        self.sales_repo = sales_repo
        self.stock_service = stock_service

    # =========================================================================
    # RANGOS DE FECHAS
    # =========================================================================

    @staticmethod
    def _window_start(period: str, now: datetime) -> datetime:
        """
        Límite inferior inclusivo de cada ventana.

        Args:
            period: 'today', 'week' o 'month'
            now: Momento de referencia
        """
        if period == 'today':
            return now.replace(hour=0, minute=0, second=0, microsecond=0)
        if period == 'week':
            return now - timedelta(days=WEEK_DAYS)
        if period == 'month':
            return now - timedelta(days=MONTH_DAYS)
        raise ValueError(f"Período desconocido: {period}")

    @staticmethod
    def _revenue(sales: Iterable[Sale]) -> float:
        return round(sum(s.total_price for s in sales), 2)

    @staticmethod
    def _profit(sales: Iterable[Sale]) -> float:
        return round(sum(s.profit for s in sales), 2)

    # =========================================================================
    # ESTADÍSTICAS
    # =========================================================================

    def dashboard_stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Totales del panel principal.

        Returns:
            {
                'totalProducts': int,
                'totalStock': int,
                'lowStockCount': int,   # filas con cantidad < umbral
                'totalRevenue': float,
                'totalProfit': float,
                'totalSales': int,
                'weekRevenue': float,   # ventas de los últimos 7 días
            }
        """
        now = now or current_time()
        levels = self.stock_service.all_levels()
        sales = self.sales_repo.load()
        week_start = self._window_start('week', now)

        return {
            'totalProducts': len(self.product_repo.get_all()),
            'totalStock': sum(level.quantity for level in levels),
            'lowStockCount': sum(
                1 for level in levels if level.quantity < self.stock_service.low_stock_threshold
            ),
            'totalRevenue': self._revenue(sales),
            'totalProfit': self._profit(sales),
            'totalSales': len(sales),
            'weekRevenue': self._revenue(s for s in sales if s.created_at >= week_start),
        }

    def period_stats(self, now: Optional[datetime] = None) -> Dict[str, float]:
        """
        Ingresos y ganancias por ventana de tiempo, calculadas por separado.

        Returns:
            {todayRevenue, todayProfit, weekRevenue, weekProfit,
             monthRevenue, monthProfit}
        """
        now = now or current_time()
        sales = self.sales_repo.load()

        result: Dict[str, float] = {}
        for period in ('today', 'week', 'month'):
            start = self._window_start(period, now)
            window = [s for s in sales if s.created_at >= start]
            result[f'{period}Revenue'] = self._revenue(window)
            result[f'{period}Profit'] = self._profit(window)
        return result

    def dashboard_overview(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Datos completos del panel: totales, últimas ventas y stock bajo.
        """
        return {
            'stats': self.dashboard_stats(now),
            'recentSales': [s.to_dict() for s in self.sales_repo.load()[:OVERVIEW_LIMIT]],
            'lowStock': [level.to_dict() for level in self.stock_service.low_stock(limit=OVERVIEW_LIMIT)],
        }

    def sales_in_period(self, period: str, now: Optional[datetime] = None) -> List[Sale]:
        """Ventas de una ventana ('today', 'week', 'month'), más reciente primero."""
        return self.sales_repo.get_sales_since(self._window_start(period, now or current_time()))
