"""Product CSV export and import."""

import csv
import io
import logging
from pathlib import Path
from typing import Any

from kedai.domain.catalog import CatalogService
from kedai.domain.entities import Product
from kedai.domain.errors import DomainError, ValidationError
from kedai.utils.amount_parser import parse_price

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["category", "name", "price", "stock", "notes"]
REQUIRED_COLUMNS = {"category", "name", "price", "stock"}


def _match_key(category: str, name: str) -> tuple[str, str]:
    return (category.strip().lower(), name.strip().lower())


class ProductCSVService:
    """Service for moving the catalog in and out of CSV files."""

    def __init__(self, catalog: CatalogService):
        """Initialize product CSV service.

        Args:
            catalog: Catalog service to read from and write to
        """
        self.catalog = catalog

    def export_products_csv(self) -> str:
        """Render every product as CSV text.

        Header is ``category,name,price,stock,notes``. Values containing a
        comma, quote or newline are quoted with inner quotes doubled.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        for product in self.catalog.list_products():
            writer.writerow(
                [product.category, product.name, product.price, product.stock, product.notes or ""]
            )
        return buffer.getvalue()

    def export_products_file(self, csv_file_path: str | Path) -> int:
        """Write the product CSV to a file. Returns the number of products."""
        Path(csv_file_path).write_text(self.export_products_csv(), encoding="utf-8")
        return len(self.catalog.list_products())

    def import_products_file(self, csv_file_path: str | Path) -> dict[str, Any]:
        """Import products from a CSV file.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the header lacks required columns
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")
        return self.import_products_csv(csv_path.read_text(encoding="utf-8-sig"))

    def import_products_csv(self, text: str) -> dict[str, Any]:
        """Import products from CSV text.

        Header names are matched case-insensitively; ``category``, ``name``,
        ``price`` and ``stock`` are required and ``notes`` is optional. A row
        whose category and name (case-insensitive) match a product that
        existed before the import updates that product instead of creating a
        second one. Each existing product is updated at most once; further
        matching rows create new products.

        Returns:
            Dict with import statistics:
            - created: number of new products
            - updated: number of existing products overwritten
            - errors: list of row-numbered error messages

        Raises:
            ValidationError: If the header lacks required columns
        """
        reader = csv.reader(io.StringIO(text))
        header = next(reader, None)
        if header is None:
            raise ValidationError("CSV file is empty")
        columns = [h.strip().lower() for h in header]
        missing = REQUIRED_COLUMNS - set(columns)
        if missing:
            raise ValidationError(
                f"CSV file missing required columns: {', '.join(sorted(missing))}"
            )
        index = {name: columns.index(name) for name in CSV_COLUMNS if name in columns}

        # Only products that existed before this import can be updated, each once
        matchable: dict[tuple[str, str], Product] = {}
        for product in self.catalog.list_products():
            matchable.setdefault(_match_key(product.category, product.name), product)

        created = 0
        updated = 0
        errors = []

        for row_num, cells in enumerate(reader, start=2):  # Header is row 1
            if not any(cell.strip() for cell in cells):
                continue

            def cell(name: str) -> str:
                pos = index.get(name)
                if pos is None or pos >= len(cells):
                    return ""
                return cells[pos].strip()

            try:
                price = parse_price(cell("price"))
                stock_str = cell("stock") or "0"
                try:
                    stock = int(stock_str)
                except ValueError:
                    raise ValidationError(f"Invalid stock '{stock_str}'") from None

                fields = dict(
                    category=cell("category"),
                    name=cell("name"),
                    price=price,
                    stock=stock,
                    notes=cell("notes") or None,
                )
                existing = matchable.pop(_match_key(fields["category"], fields["name"]), None)
                if existing is not None:
                    self.catalog.update_product(
                        existing.id, clear_notes=fields["notes"] is None, **fields
                    )
                    updated += 1
                else:
                    self.catalog.create_product(**fields)
                    created += 1
            except (DomainError, ValueError) as e:
                errors.append(f"Row {row_num}: {e}")

        logger.info("CSV import: %d created, %d updated, %d error(s)", created, updated, len(errors))
        return {"created": created, "updated": updated, "errors": errors}
