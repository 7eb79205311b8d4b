import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Union

from .config import get_settings
from .exceptions import ValidationError
from .models import Account
from .store import LedgerStore

logger = logging.getLogger(__name__)


PHONE_PATTERN = re.compile(r"[0-9]{10}")
# Largest value SQLite stores as an INTEGER.
MAX_POINTS = 2**63 - 1

UPSERT_POINTS_SQL = """
    INSERT INTO rewards (phone, points) VALUES (:phone, :points)
    ON CONFLICT(phone) DO UPDATE SET points = points + :points
    WHERE points <= :max_points - :points
"""
SELECT_POINTS_SQL = "SELECT points FROM rewards WHERE phone = :phone"
# Guarded so a balance can never go below zero, even between the read and the write.
SUBTRACT_POINTS_SQL = """
    UPDATE rewards SET points = points - :points
    WHERE phone = :phone AND points >= :points
"""


def is_valid_phone(phone: Any) -> bool:
    """True for exactly 10 ASCII digits and nothing else."""
    return isinstance(phone, str) and PHONE_PATTERN.fullmatch(phone) is not None


def round_points(amount: Union[Decimal, float, int, str]) -> int:
    """
    Convert a purchase amount to whole points.

    Ties round away from zero (2.5 -> 3). Floats go through str() first so
    13.95 is rounded as written rather than as its binary approximation.
    """
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a number")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number")
    if not value.is_finite():
        raise ValidationError("Amount must be a number")
    if value < 0:
        raise ValidationError("Amount must not be negative")
    if value > MAX_POINTS:
        raise ValidationError("Amount is too large")
    try:
        return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValidationError("Amount is too large")


class RewardsService:
    def __init__(self, store: Optional[LedgerStore] = None):
        self.store = store or LedgerStore(get_settings().database_url)

    def credit(self, phone: str, amount: Union[Decimal, float, int, str]) -> Account:
        self._check_phone(phone)
        points = round_points(amount)

        updated = self.store.execute(
            UPSERT_POINTS_SQL, {"phone": phone, "points": points, "max_points": MAX_POINTS}
        )
        if updated == 0:
            logger.warning("Rejected credit of %d points for %s, balance would overflow", points, phone)
            raise ValidationError("Balance would be too large")
        account = self.get_account(phone)
        logger.info("Credited %d points to %s, balance %d", points, phone, account.points)
        return account

    def query(self, phone: str) -> int:
        self._check_phone(phone)
        points = self.store.query(SELECT_POINTS_SQL, {"phone": phone})
        return points if points is not None else 0

    def debit(self, phone: str, points: int) -> Account:
        self._check_phone(phone)
        if isinstance(points, bool) or not isinstance(points, int):
            raise ValidationError("Points must be a whole number")
        if points < 0:
            raise ValidationError("Points must be positive")
        if points == 0:
            raise ValidationError("Points must be greater than 0")

        current_points = self.query(phone)
        if current_points < points:
            logger.warning("Rejected redeem of %d points for %s, balance %d", points, phone, current_points)
            raise ValidationError("Not enough points available")

        updated = self.store.execute(SUBTRACT_POINTS_SQL, {"phone": phone, "points": points})
        if updated == 0:
            logger.warning("Balance for %s changed before redeem of %d points", phone, points)
            raise ValidationError("Not enough points available")

        account = self.get_account(phone)
        logger.info("Redeemed %d points for %s, balance %d", points, phone, account.points)
        return account

    def get_account(self, phone: str) -> Account:
        return Account(phone=phone, points=self.query(phone))

    def close(self) -> None:
        self.store.close()

    def _check_phone(self, phone: Any) -> None:
        if not is_valid_phone(phone):
            raise ValidationError("Phone number must be 10 digits")
