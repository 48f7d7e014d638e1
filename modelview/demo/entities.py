"""
Demo entities.

A single ``student`` table used by the demo application and the tests.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Double, Integer, SmallInteger, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for the demo entities."""


class Student(Base):
    __tablename__ = "student"

    # SQLite only auto-increments INTEGER PRIMARY KEY columns.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True
    )
    name: Mapped[str] = mapped_column(String)
    region: Mapped[str] = mapped_column(String)
    age: Mapped[int] = mapped_column(SmallInteger)
    create_time: Mapped[datetime]
    score: Mapped[float] = mapped_column(Double)
    gender: Mapped[bool]
