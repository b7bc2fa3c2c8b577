"""Geldrechnung mit fester Rundung auf zwei Nachkommastellen.

Alle Beträge sind Festkomma mit zwei Stellen. Gerundet wird kaufmännisch
(half-up) auf Cent-Ebene.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # float über str, sonst schleppt Decimal die Binärdarstellung mit
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_fee(price: Number, fee_percent: Number) -> Decimal:
    """Gebühr = round2(price * fee_percent / 100)."""
    return round2(to_decimal(price) * to_decimal(fee_percent) / HUNDRED)


def compute_net(price: Number, fee_amount: Number) -> Decimal:
    """Netto = round2(price - fee_amount)."""
    return round2(to_decimal(price) - to_decimal(fee_amount))


def compute_fee_and_net(price: Number, fee_percent: Number) -> Tuple[Decimal, Decimal]:
    fee_amount = compute_fee(price, fee_percent)
    return fee_amount, compute_net(price, fee_amount)


def percent_of(amount: Number, percent: Number) -> Decimal:
    return round2(to_decimal(amount) * to_decimal(percent) / HUNDRED)


def equal_split_amounts(net_amount: Number, head_count: int) -> Tuple[Decimal, Decimal]:
    """Betrag und Prozent pro Kopf bei gleichmäßiger Aufteilung.

    Jeder Anteil wird einzeln gerundet. Die Summe kann dadurch um bis zu
    0.01 * (head_count - 1) vom Nettobetrag abweichen; der Rest bleibt
    bewusst unverteilt und taucht in der Abstimmung als "remaining" auf.
    """
    if head_count < 1:
        raise ValueError("head_count muss mindestens 1 sein")
    amount = round2(to_decimal(net_amount) / head_count)
    percent = round2(HUNDRED / head_count)
    return amount, percent
