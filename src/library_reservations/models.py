import enum
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import (
    String, Integer, Enum, ForeignKey, Numeric, Date, DateTime, CheckConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from library_reservations.db import Base

class ReservationStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"

class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)

class Book(Base):
    __tablename__ = "books"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False, index=True)
    author: Mapped[str | None] = mapped_column(String)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="chk_book_available_non_negative"),
        CheckConstraint("price > 0", name="chk_book_price_positive"),
    )

class Reservation(Base):
    __tablename__ = "reservations"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    book_external_id: Mapped[int] = mapped_column(Integer, ForeignKey("books.external_id", ondelete="RESTRICT"), nullable=False, index=True)
    rental_days: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    expected_return_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    actual_return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # Precio del libro al momento de reservar
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    late_fee: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    status: Mapped[ReservationStatus] = mapped_column(Enum(ReservationStatus, native_enum=False), default=ReservationStatus.ACTIVE, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    user = relationship("User", lazy="selectin")
    book = relationship("Book", lazy="selectin")

    __table_args__ = (
        CheckConstraint("rental_days >= 1", name="chk_reservation_rental_days"),
    )
