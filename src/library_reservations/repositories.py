from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_

from library_reservations.models import Book, Reservation, ReservationStatus, User
from library_reservations.results import ErrorKind, Result, err, ok

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    async def resolve(self, user_id: int) -> Optional[User]: ...


class BookCatalog(Protocol):
    async def resolve(self, external_id: int) -> Optional[Book]: ...
    async def decrease_available(self, external_id: int) -> Result[Book]: ...
    async def increase_available(self, external_id: int) -> Result[Book]: ...


class ReservationStore(Protocol):
    async def save(self, reservation: Reservation) -> Reservation: ...
    async def find_by_id(self, reservation_id: int) -> Optional[Reservation]: ...
    async def find_all(self) -> Sequence[Reservation]: ...
    async def find_by_user_id(self, user_id: int) -> Sequence[Reservation]: ...
    async def find_by_status(self, status: ReservationStatus) -> Sequence[Reservation]: ...
    async def find_overdue(self, as_of: date) -> Sequence[Reservation]: ...


class UnitOfWork(Protocol):
    users: UserDirectory
    books: BookCatalog
    reservations: ReservationStore

    async def __aenter__(self) -> "UnitOfWork": ...
    async def __aexit__(self, exc_type, exc, tb) -> None: ...
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


class SqlUserDirectory:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, user_id: int) -> Optional[User]:
        r = await self.session.execute(select(User).where(User.id == user_id))
        return r.scalar_one_or_none()


class SqlBookCatalog:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, external_id: int) -> Optional[Book]:
        r = await self.session.execute(select(Book).where(Book.external_id == external_id))
        return r.scalar_one_or_none()

    async def decrease_available(self, external_id: int) -> Result[Book]:
        book = await self.resolve(external_id)
        if not book:
            return err(ErrorKind.NOT_FOUND, f"Libro no encontrado con ID externo: {external_id}", code="BOOK_NOT_FOUND")
        if book.available_quantity <= 0:
            return err(ErrorKind.INVENTORY_ERROR, f"No hay libros disponibles con ID externo: {external_id}", code="NO_AVAILABLE_COPIES")
        book.available_quantity -= 1
        await self.session.flush()
        logger.debug("Disponibles de %s: %s", external_id, book.available_quantity)
        return ok(book)

    async def increase_available(self, external_id: int) -> Result[Book]:
        book = await self.resolve(external_id)
        if not book:
            return err(ErrorKind.NOT_FOUND, f"Libro no encontrado con ID externo: {external_id}", code="BOOK_NOT_FOUND")
        if book.available_quantity >= book.stock_quantity:
            return err(ErrorKind.INVENTORY_ERROR, f"La cantidad disponible ya alcanza el stock del libro: {external_id}", code="STOCK_EXCEEDED")
        book.available_quantity += 1
        await self.session.flush()
        logger.debug("Disponibles de %s: %s", external_id, book.available_quantity)
        return ok(book)


class SqlReservationStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, reservation: Reservation) -> Reservation:
        if reservation.created_at is None:
            reservation.created_at = datetime.now(timezone.utc)
        self.session.add(reservation)
        await self.session.flush()
        return reservation

    async def find_by_id(self, reservation_id: int) -> Optional[Reservation]:
        r = await self.session.execute(select(Reservation).where(Reservation.id == reservation_id))
        return r.scalar_one_or_none()

    async def _list(self, *criteria) -> List[Reservation]:
        stmt = select(Reservation).where(*criteria).order_by(Reservation.id)
        return list((await self.session.execute(stmt)).scalars().all())

    async def find_all(self) -> List[Reservation]:
        return await self._list()

    async def find_by_user_id(self, user_id: int) -> List[Reservation]:
        return await self._list(Reservation.user_id == user_id)

    async def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        return await self._list(Reservation.status == status)

    async def find_overdue(self, as_of: date) -> List[Reservation]:
        # Devueltas con retraso, o todavía activas con la fecha esperada vencida
        return await self._list(
            or_(
                Reservation.status == ReservationStatus.OVERDUE,
                and_(Reservation.status == ReservationStatus.ACTIVE, Reservation.expected_return_date < as_of),
            )
        )


# Una sola sesión: inventario y reservas en la misma transacción
class SqlUnitOfWork:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = SqlUserDirectory(session)
        self.books = SqlBookCatalog(session)
        self.reservations = SqlReservationStore(session)

    async def __aenter__(self) -> "SqlUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            logger.error("Transacción revertida: %s", exc)
            await self.rollback()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
