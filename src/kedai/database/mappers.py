"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the table layout can change
without touching business code.
"""

from kedai.domain import entities as domain
from kedai.domain.snapshot_format import (
    sale_item_from_document,
    sale_item_to_document,
    snapshot_from_document,
    snapshot_to_document,
)
from kedai.database.models import (
    BackupRecord,
    ProductRecord,
    SaleRecord,
    SettingRecord,
    UserRecord,
)


def product_to_domain(record: ProductRecord) -> domain.Product:
    """Convert SQLAlchemy ProductRecord to domain Product entity."""
    return domain.Product(
        id=record.id,
        category=record.category or "",
        name=record.name,
        price=record.price,
        stock=record.stock,
        notes=record.notes,
    )


def product_to_record(product: domain.Product) -> ProductRecord:
    """Convert domain Product entity to SQLAlchemy ProductRecord."""
    return ProductRecord(
        id=product.id,
        category=product.category,
        name=product.name,
        price=product.price,
        stock=product.stock,
        notes=product.notes,
    )


def sale_to_domain(record: SaleRecord) -> domain.Sale:
    """Convert SQLAlchemy SaleRecord to domain Sale entity."""
    return domain.Sale(
        id=record.id,
        created_at=record.created_at,
        items=tuple(
            sale_item_from_document(item, f"sale {record.id} item {i}")
            for i, item in enumerate(record.items)
        ),
        total=record.total,
        amount_paid=record.amount_paid,
        change=record.change,
        payment_method=domain.PaymentMethod(record.payment_method),
        payment_reference=record.payment_reference,
    )


def sale_to_record(sale: domain.Sale) -> SaleRecord:
    """Convert domain Sale entity to SQLAlchemy SaleRecord."""
    return SaleRecord(
        id=sale.id,
        created_at=sale.created_at,
        items=[sale_item_to_document(item) for item in sale.items],
        total=sale.total,
        amount_paid=sale.amount_paid,
        change=sale.change,
        payment_method=sale.payment_method.value,
        payment_reference=sale.payment_reference,
    )


def backup_to_domain(record: BackupRecord) -> domain.Backup:
    """Convert SQLAlchemy BackupRecord to domain Backup entity."""
    return domain.Backup(
        id=record.id,
        name=record.name,
        created_at=record.created_at,
        payload=snapshot_from_document(record.payload),
    )


def backup_to_record(backup: domain.Backup) -> BackupRecord:
    """Convert domain Backup entity to SQLAlchemy BackupRecord."""
    return BackupRecord(
        id=backup.id,
        name=backup.name,
        created_at=backup.created_at,
        payload=snapshot_to_document(backup.payload),
    )


def setting_to_domain(record: SettingRecord) -> domain.Setting:
    """Convert SQLAlchemy SettingRecord to domain Setting entity."""
    return domain.Setting(key=record.key, value=record.value)


def setting_to_record(setting: domain.Setting) -> SettingRecord:
    """Convert domain Setting entity to SQLAlchemy SettingRecord."""
    return SettingRecord(key=setting.key, value=setting.value)


def user_to_domain(record: UserRecord) -> domain.User:
    """Convert SQLAlchemy UserRecord to domain User entity."""
    return domain.User(id=record.id, username=record.username, pin_hash=record.pin_hash)


def user_to_record(user: domain.User) -> UserRecord:
    """Convert domain User entity to SQLAlchemy UserRecord."""
    return UserRecord(id=user.id, username=user.username, pin_hash=user.pin_hash)
