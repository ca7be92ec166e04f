"""Sales report domain service."""

import csv
import io
from datetime import date, timedelta
from typing import Any, Optional

from kedai.database.base import EntityStore
from kedai.domain.catalog import LOW_STOCK_THRESHOLD, CatalogService
from kedai.domain.sales import SalesService
from kedai.utils.clock import ms_to_date, ms_to_datetime

SALES_CSV_COLUMNS = ["id", "date", "items", "total", "paid", "change", "method", "reference"]


class ReportService:
    """Service for dashboard figures and the sales CSV export."""

    def __init__(self, store: EntityStore):
        """Initialize report service.

        Args:
            store: Entity store instance
        """
        self.store = store
        self.sales_service = SalesService(store)
        self.catalog = CatalogService(store)

    def total_for_date(self, day: date) -> int:
        """Sum of sale totals on a local calendar day."""
        return sum(s.total for s in self.sales_service.list_sales(day, day))

    def count_for_date(self, day: date) -> int:
        """Number of sales on a local calendar day."""
        return len(self.sales_service.list_sales(day, day))

    def daily_totals(self, days: int = 7, today: Optional[date] = None) -> list[dict[str, Any]]:
        """Totals for the last ``days`` days, oldest first.

        Returns:
            List of dicts with ``date`` and ``total``; days without sales are 0
        """
        today = today or date.today()
        start = today - timedelta(days=days - 1)
        totals = {start + timedelta(days=i): 0 for i in range(days)}
        for sale in self.sales_service.list_sales(start, today):
            totals[ms_to_date(sale.created_at)] += sale.total
        return [{"date": day, "total": total} for day, total in totals.items()]

    def dashboard(self, today: Optional[date] = None) -> dict[str, Any]:
        """Today's total and count, the 7-day series and low-stock products."""
        today = today or date.today()
        return {
            "total_today": self.total_for_date(today),
            "count_today": self.count_for_date(today),
            "daily_totals": self.daily_totals(7, today=today),
            "low_stock": self.catalog.low_stock(LOW_STOCK_THRESHOLD),
        }

    def export_sales_csv(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> str:
        """Render sales in a date range as CSV text, newest first."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(SALES_CSV_COLUMNS)
        for sale in self.sales_service.list_sales(start_date, end_date):
            writer.writerow(
                [
                    sale.id,
                    ms_to_datetime(sale.created_at).strftime("%Y-%m-%d %H:%M:%S"),
                    "; ".join(f"{item.name} x{item.quantity}" for item in sale.items),
                    sale.total,
                    sale.amount_paid,
                    sale.change,
                    sale.payment_method.value,
                    sale.payment_reference or "",
                ]
            )
        return buffer.getvalue()
