"""Domain layer for kedai."""

from kedai.domain.catalog import CatalogService
from kedai.domain.cart import Cart
from kedai.domain.checkout import CheckoutService
from kedai.domain.sales import SalesService
from kedai.domain.snapshot import SnapshotService
from kedai.domain.settings import SettingsService
from kedai.domain.auto_backup import AutoBackupScheduler
from kedai.domain.csv_products import ProductCSVService
from kedai.domain.reports import ReportService
from kedai.domain.users import UserService

__all__ = [
    "CatalogService",
    "Cart",
    "CheckoutService",
    "SalesService",
    "SnapshotService",
    "SettingsService",
    "AutoBackupScheduler",
    "ProductCSVService",
    "ReportService",
    "UserService",
]
