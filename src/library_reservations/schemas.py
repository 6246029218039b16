from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, conint

class ReservationIn(BaseModel):
    user_id: int
    book_external_id: int
    rental_days: conint(ge=1)
    start_date: date

class ReturnIn(BaseModel):
    return_date: date

class ReservationOut(BaseModel):
    id: int
    user_id: int
    user_name: str | None
    book_external_id: int
    book_title: str | None
    rental_days: int
    start_date: date
    expected_return_date: date
    actual_return_date: date | None
    daily_rate: Decimal
    total_fee: Decimal
    late_fee: Decimal | None
    status: str
    created_at: datetime
