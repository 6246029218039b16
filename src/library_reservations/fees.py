from datetime import date
from decimal import Decimal, ROUND_HALF_UP

# 15% del precio del libro por cada día de demora
LATE_FEE_PERCENTAGE = Decimal("0.15")

_CENTS = Decimal("0.01")
# Multa mínima cuando hay al menos un día de demora
MIN_LATE_FEE = _CENTS

def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))

def round_money(value) -> Decimal:
    return _as_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)

def calculate_total_fee(daily_rate, rental_days: int) -> Decimal:
    return round_money(_as_decimal(daily_rate) * Decimal(rental_days))

def calculate_late_fee(book_price, days_late: int) -> Decimal:
    fee = round_money(_as_decimal(book_price) * LATE_FEE_PERCENTAGE * Decimal(days_late))
    if days_late > 0:
        return max(fee, MIN_LATE_FEE)
    return fee

# Negativo si se devuelve antes de lo esperado
def days_between(expected: date, actual: date) -> int:
    return actual.toordinal() - expected.toordinal()
