"""Tests for report service."""

import csv
import io
from datetime import date, datetime, timedelta

from kedai.database.base import SALES
from kedai.domain.entities import PaymentMethod, Sale, SaleItem
from kedai.domain.reports import SALES_CSV_COLUMNS, ReportService

TODAY = date(2024, 3, 10)


def _sale(sale_id, day, total, method=PaymentMethod.CASH, reference=None):
    created_at = int(datetime(day.year, day.month, day.day, 10).timestamp() * 1000)
    return Sale(
        id=sale_id,
        created_at=created_at,
        items=(SaleItem(product_id="p-1", name="Dimsum", price=total, quantity=1),),
        total=total,
        amount_paid=total,
        change=0,
        payment_method=method,
        payment_reference=reference,
    )


def test_daily_totals(temp_store):
    temp_store.put(SALES, _sale("s-1", TODAY, 12000))
    temp_store.put(SALES, _sale("s-2", TODAY, 5000))
    temp_store.put(SALES, _sale("s-3", TODAY - timedelta(days=2), 11000))
    temp_store.put(SALES, _sale("s-old", TODAY - timedelta(days=30), 99000))

    totals = ReportService(temp_store).daily_totals(7, today=TODAY)

    assert len(totals) == 7
    assert totals[0]["date"] == TODAY - timedelta(days=6)
    assert totals[-1] == {"date": TODAY, "total": 17000}
    assert totals[-3] == {"date": TODAY - timedelta(days=2), "total": 11000}
    assert sum(row["total"] for row in totals) == 28000


def test_dashboard(temp_store, catalog, mie, teh):
    temp_store.put(SALES, _sale("s-1", TODAY, 12000))

    data = ReportService(temp_store).dashboard(today=TODAY)

    assert data["total_today"] == 12000
    assert data["count_today"] == 1
    assert [p.id for p in data["low_stock"]] == [teh.id]


def test_export_sales_csv(temp_store):
    temp_store.put(SALES, _sale("s-1", TODAY, 12000, PaymentMethod.BANK_TRANSFER, "TRX-9"))

    rows = list(csv.reader(io.StringIO(ReportService(temp_store).export_sales_csv())))

    assert rows[0] == SALES_CSV_COLUMNS
    assert rows[1][0] == "s-1"
    assert rows[1][1].startswith("2024-03-10")
    assert rows[1][2] == "Dimsum x1"
    assert rows[1][6:] == ["bank-transfer", "TRX-9"]
