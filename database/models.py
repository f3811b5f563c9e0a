"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    # Only ever the bcrypt digest.
    password_hash = Column("password", String(255), nullable=False)

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, email={self.email!r})"
