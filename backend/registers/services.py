from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import datetime
import logging

from django.db.models import Q

from core_backend.exceptions import ConflictError, StateError
from core_backend.transactions import atomic_operation
from .models import CashRegisterLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisterStatus:
    status: str  # "unopened", "open" or "closed"
    opening_cash: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None
    last_open_at: Optional[datetime.datetime] = None
    last_close_at: Optional[datetime.datetime] = None


class RegisterService:
    """Cash register sessions. Orders may only be created while a session is open."""

    @staticmethod
    def is_open() -> bool:
        latest = CashRegisterLog.objects.order_by("-created_at", "-id").first()
        return latest is not None and latest.type == CashRegisterLog.EntryType.OPEN

    @staticmethod
    def status() -> RegisterStatus:
        last_open = (
            CashRegisterLog.objects.filter(type=CashRegisterLog.EntryType.OPEN)
            .order_by("-created_at", "-id")
            .first()
        )
        if last_open is None:
            return RegisterStatus(status="unopened")

        closes = CashRegisterLog.objects.filter(type=CashRegisterLog.EntryType.CLOSE)
        after_open = Q(created_at__gt=last_open.created_at) | Q(created_at=last_open.created_at, id__gt=last_open.id)
        close_after = closes.filter(after_open).order_by("created_at", "id").first()
        if close_after is None:
            previous = closes.exclude(after_open).order_by("-created_at", "-id").first()
            return RegisterStatus(
                status="open",
                opening_cash=last_open.amount,
                previous_close=previous.amount if previous else None,
                last_open_at=last_open.created_at,
            )
        return RegisterStatus(
            status="closed",
            opening_cash=last_open.amount,
            previous_close=close_after.amount,
            last_open_at=last_open.created_at,
            last_close_at=close_after.created_at,
        )

    @staticmethod
    @atomic_operation
    def open_register(amount=Decimal("0.00"), note: str = "") -> CashRegisterLog:
        # Serialize concurrent open/close attempts on the newest entry.
        list(CashRegisterLog.objects.select_for_update().order_by("-created_at", "-id")[:1])
        if RegisterService.is_open():
            raise ConflictError("Register is already open")
        entry = CashRegisterLog.objects.create(
            type=CashRegisterLog.EntryType.OPEN, amount=amount, note=note or ""
        )
        logger.info(f"Register opened with {entry.amount}")
        return entry

    @staticmethod
    @atomic_operation
    def close_register(amount=Decimal("0.00"), note: str = "") -> CashRegisterLog:
        list(CashRegisterLog.objects.select_for_update().order_by("-created_at", "-id")[:1])
        if not RegisterService.is_open():
            raise StateError("Register is not open")
        entry = CashRegisterLog.objects.create(
            type=CashRegisterLog.EntryType.CLOSE, amount=amount, note=note or ""
        )
        logger.info(f"Register closed with {entry.amount}")
        return entry
