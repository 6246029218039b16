from __future__ import annotations
import logging
from datetime import date, timedelta
from typing import List, Optional

from library_reservations.fees import calculate_late_fee, calculate_total_fee, days_between
from library_reservations.models import Reservation, ReservationStatus
from library_reservations.repositories import UnitOfWork
from library_reservations.results import ErrorKind, Result, err, ok

logger = logging.getLogger(__name__)


class ReservationManager:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def create_reservation(self, user_id: int, book_external_id: int, rental_days: int, start_date: date) -> Result[Reservation]:
        if rental_days < 1:
            return err(ErrorKind.INVALID_INPUT, f"Los días de alquiler deben ser al menos 1 (recibido: {rental_days}).", code="INVALID_RENTAL_DAYS")
        try:
            expected_return_date = start_date + timedelta(days=rental_days)
        except OverflowError:
            return err(ErrorKind.INVALID_INPUT, f"Los días de alquiler exceden el rango de fechas válido (recibido: {rental_days}).", code="INVALID_RENTAL_DAYS")
        async with self.uow:
            user = await self.uow.users.resolve(user_id)
            if not user:
                logger.warning("Reserva rechazada: usuario %s no existe", user_id)
                return err(ErrorKind.NOT_FOUND, f"Usuario no encontrado con ID: {user_id}", code="USER_NOT_FOUND")
            book = await self.uow.books.resolve(book_external_id)
            if not book:
                logger.warning("Reserva rechazada: libro %s no existe", book_external_id)
                return err(ErrorKind.NOT_FOUND, f"Libro no encontrado con ID externo: {book_external_id}", code="BOOK_NOT_FOUND")

            reservation = Reservation(
                user_id=user.id,
                user=user,
                book_external_id=book.external_id,
                book=book,
                rental_days=rental_days,
                start_date=start_date,
                expected_return_date=expected_return_date,
                daily_rate=book.price,
                total_fee=calculate_total_fee(book.price, rental_days),
                late_fee=None,
                actual_return_date=None,
                status=ReservationStatus.ACTIVE,
            )

            decreased = await self.uow.books.decrease_available(book.external_id)
            if not decreased.ok:
                logger.warning("Reserva rechazada para libro %s: %s", book_external_id, decreased.message)
                await self.uow.rollback()
                return decreased

            saved = await self.uow.reservations.save(reservation)
            await self.uow.commit()
        logger.info("Reserva %s creada: usuario=%s libro=%s días=%s total=%s",
                    saved.id, user_id, book_external_id, rental_days, saved.total_fee)
        return ok(saved, "La reserva se realizó exitosamente.")

    async def return_book(self, reservation_id: int, return_date: date) -> Result[Reservation]:
        async with self.uow:
            reservation = await self.uow.reservations.find_by_id(reservation_id)
            if not reservation:
                return err(ErrorKind.NOT_FOUND, f"Reserva no encontrada con ID: {reservation_id}", code="RESERVATION_NOT_FOUND")
            if reservation.status != ReservationStatus.ACTIVE:
                logger.warning("Devolución rechazada: reserva %s en estado %s", reservation_id, reservation.status.value)
                return err(ErrorKind.INVALID_STATE, f"La reserva {reservation_id} ya fue devuelta.", code="RESERVATION_NOT_ACTIVE")
            book = await self.uow.books.resolve(reservation.book_external_id)
            if not book:
                return err(ErrorKind.NOT_FOUND, f"Libro no encontrado con ID externo: {reservation.book_external_id}", code="BOOK_NOT_FOUND")

            reservation.actual_return_date = return_date
            if return_date > reservation.expected_return_date:
                days_late = days_between(reservation.expected_return_date, return_date)
                # Se cobra sobre el precio actual del libro, no sobre daily_rate
                reservation.late_fee = calculate_late_fee(book.price, days_late)
                reservation.status = ReservationStatus.OVERDUE
            else:
                reservation.status = ReservationStatus.RETURNED

            increased = await self.uow.books.increase_available(book.external_id)
            if not increased.ok:
                logger.warning("Devolución de reserva %s revertida: %s", reservation_id, increased.message)
                await self.uow.rollback()
                return increased

            saved = await self.uow.reservations.save(reservation)
            await self.uow.commit()
        logger.info("Reserva %s devuelta: estado=%s multa=%s", saved.id, saved.status.value, saved.late_fee)
        return ok(saved, "La devolución se registró exitosamente.")

    async def get_by_id(self, reservation_id: int) -> Result[Reservation]:
        reservation = await self.uow.reservations.find_by_id(reservation_id)
        if not reservation:
            return err(ErrorKind.NOT_FOUND, f"Reserva no encontrada con ID: {reservation_id}", code="RESERVATION_NOT_FOUND")
        return ok(reservation)

    async def get_all(self) -> List[Reservation]:
        return list(await self.uow.reservations.find_all())

    async def get_by_user(self, user_id: int) -> List[Reservation]:
        return list(await self.uow.reservations.find_by_user_id(user_id))

    async def get_active(self) -> List[Reservation]:
        return list(await self.uow.reservations.find_by_status(ReservationStatus.ACTIVE))

    async def get_overdue(self, as_of: Optional[date] = None) -> List[Reservation]:
        return list(await self.uow.reservations.find_overdue(as_of or date.today()))
