"""Modelos SQLAlchemy para o armazenamento chave-valor."""
from __future__ import annotations
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, LargeBinary, TIMESTAMP
from datetime import datetime

class Base(DeclarativeBase):
    """Base declarativa."""
    pass

class KVEntry(Base):
    __tablename__ = "kv_entries"
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=False), default=datetime.utcnow, onupdate=datetime.utcnow)
