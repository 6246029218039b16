from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from library_reservations.deps import get_manager
from library_reservations.manager import ReservationManager
from library_reservations.models import Reservation
from library_reservations.results import ErrorKind, Result
from library_reservations.schemas import ReservationIn, ReservationOut, ReturnIn

router = APIRouter(prefix="/reservations")

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.INVENTORY_ERROR: 409,
    ErrorKind.INVALID_INPUT: 400,
}

def _to_out(r: Reservation) -> ReservationOut:
    return ReservationOut(
        id=r.id,
        user_id=r.user_id,
        user_name=r.user.name if r.user else None,
        book_external_id=r.book_external_id,
        book_title=r.book.title if r.book else None,
        rental_days=r.rental_days,
        start_date=r.start_date,
        expected_return_date=r.expected_return_date,
        actual_return_date=r.actual_return_date,
        daily_rate=r.daily_rate,
        total_fee=r.total_fee,
        late_fee=r.late_fee,
        status=r.status.value,
        created_at=r.created_at,
    )

def _unwrap(r: Result[Reservation]) -> ReservationOut:
    if not r.ok:
        raise HTTPException(status_code=_STATUS_BY_KIND.get(r.kind, 400), detail=r.message)
    return _to_out(r.value)

@router.post("", response_model=ReservationOut, status_code=201)
async def http_create_reservation(payload: ReservationIn, manager: ReservationManager = Depends(get_manager)):
    r = await manager.create_reservation(
        user_id=payload.user_id,
        book_external_id=payload.book_external_id,
        rental_days=payload.rental_days,
        start_date=payload.start_date,
    )
    return _unwrap(r)

@router.post("/{reservation_id}/return", response_model=ReservationOut)
async def http_return_book(reservation_id: int, payload: ReturnIn, manager: ReservationManager = Depends(get_manager)):
    r = await manager.return_book(reservation_id, payload.return_date)
    return _unwrap(r)

@router.get("", response_model=list[ReservationOut])
async def http_list_reservations(manager: ReservationManager = Depends(get_manager)):
    return [_to_out(r) for r in await manager.get_all()]

@router.get("/active", response_model=list[ReservationOut])
async def http_list_active(manager: ReservationManager = Depends(get_manager)):
    return [_to_out(r) for r in await manager.get_active()]

@router.get("/overdue", response_model=list[ReservationOut])
async def http_list_overdue(as_of: date | None = None, manager: ReservationManager = Depends(get_manager)):
    return [_to_out(r) for r in await manager.get_overdue(as_of)]

@router.get("/user/{user_id}", response_model=list[ReservationOut])
async def http_list_by_user(user_id: int, manager: ReservationManager = Depends(get_manager)):
    return [_to_out(r) for r in await manager.get_by_user(user_id)]

@router.get("/{reservation_id}", response_model=ReservationOut)
async def http_get_reservation(reservation_id: int, manager: ReservationManager = Depends(get_manager)):
    return _unwrap(await manager.get_by_id(reservation_id))
