"""
Metadata store abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from sqlalchemy import Column, Float, Integer, String, create_engine, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker


class MetadataStore(Protocol):
    """Interface for product metadata access."""

    def insert_product(self, name: str, photo_key: str) -> "ProductRecord":
        ...

    def list_products(self, offset: int, limit: int) -> list["ProductRecord"]:
        ...

    def get_product(self, product_id: int) -> Optional["ProductRecord"]:
        ...

    def delete_product(self, product_id: int) -> bool:
        ...

    def close(self) -> None:
        ...


@dataclass
class ProductRecord:
    id: int
    name: str
    photo_key: str
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "photo_key": self.photo_key,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class InMemoryProductStore:
    """Simple in-memory metadata store for development and tests."""

    def __init__(self):
        self.products: Dict[int, ProductRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def insert_product(self, name: str, photo_key: str) -> ProductRecord:
        with self._lock:
            record = ProductRecord(id=self._next_id, name=name, photo_key=photo_key)
            self.products[record.id] = record
            self._next_id += 1
        return record

    def list_products(self, offset: int, limit: int) -> list[ProductRecord]:
        ordered = sorted(self.products.values(), key=lambda record: record.id)
        return ordered[offset : offset + limit]

    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        return self.products.get(product_id)

    def delete_product(self, product_id: int) -> bool:
        with self._lock:
            return self.products.pop(product_id, None) is not None

    def close(self) -> None:
        pass


class SqlProductStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlProductStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_record(self, row: "ProductRow") -> ProductRecord:
        return ProductRecord(
            id=row.id,
            name=row.name,
            photo_key=row.photo_key,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def insert_product(self, name: str, photo_key: str) -> ProductRecord:
        now = time.time()
        with self.Session() as session:
            row = ProductRow(
                name=name,
                photo_key=photo_key,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_record(row)

    def list_products(self, offset: int, limit: int) -> list[ProductRecord]:
        with self.Session() as session:
            stmt = (
                select(ProductRow)
                .order_by(ProductRow.id.asc())
                .offset(offset)
                .limit(limit)
            )
            return [self._to_record(row) for row in session.execute(stmt).scalars()]

    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        with self.Session() as session:
            row = session.get(ProductRow, product_id)
            if not row:
                return None
            return self._to_record(row)

    def delete_product(self, product_id: int) -> bool:
        with self.Session() as session:
            row = session.get(ProductRow, product_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    def close(self) -> None:
        self.engine.dispose()


Base = declarative_base()


class ProductRow(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    photo_key = Column(String(1024), nullable=False)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)
