"""SQLAlchemy models for kedai database."""

from sqlalchemy import (
    BigInteger,
    Column,
    Integer,
    JSON,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class ProductRecord(Base):
    """Product model."""

    __tablename__ = "products"

    id = Column(String, primary_key=True)
    category = Column(String, nullable=False, default="", index=True)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    notes = Column(String, nullable=True)


class SaleRecord(Base):
    """Sale model.

    Items are stored denormalized as a JSON list so a sale stays readable
    after its products are renamed or deleted.
    """

    __tablename__ = "sales"

    id = Column(String, primary_key=True)
    created_at = Column(BigInteger, nullable=False, index=True)
    items = Column(JSON, nullable=False)
    total = Column(Integer, nullable=False)
    amount_paid = Column(Integer, nullable=False)
    change = Column(Integer, nullable=False)
    payment_method = Column(String, nullable=False)
    payment_reference = Column(String, nullable=True)


class BackupRecord(Base):
    """Backup model holding a full snapshot document."""

    __tablename__ = "backups"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    payload = Column(JSON, nullable=False)


class SettingRecord(Base):
    """Key/value setting model."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)


class UserRecord(Base):
    """Operator model."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    pin_hash = Column(String, nullable=False)


class SchemaInfo(Base):
    """Single-row table recording the applied schema version."""

    __tablename__ = "schema_info"

    id = Column(Integer, primary_key=True)
    version = Column(Integer, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Tables are created by ``SQLAlchemyEntityStore.initialize_schema`` so that
    upgrades can see which tables already existed.
    """
    engine = create_engine(database_url, echo=False)
    return sessionmaker(bind=engine, expire_on_commit=False)
