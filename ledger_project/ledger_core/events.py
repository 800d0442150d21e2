"""
Typed domain events consumed by the journal generators, plus the
notification emitted when a fiscal period closes.

Events cross process boundaries as plain dicts (Celery JSON payloads):
amounts travel as strings and come back as Decimal, dates as ISO strings.
"""
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional

from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date, parse_datetime

from .money import to_decimal


def _as_date(value):
    if value is None or isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(f"Invalid date: {value!r}")
    return parsed


def _as_quantity(value):
    # quantities may be fractional (kg, litres) but never floats
    if isinstance(value, float):
        raise ValidationError("Quantities must not be floats.")
    return Decimal(str(value))


def _encode(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    return value


class DomainEvent:
    """Shared transport helpers; subclasses are frozen dataclasses."""

    kind: ClassVar[str] = ""
    reference_type: ClassVar[str] = ""

    @property
    def reference_id(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict:
        return _encode(asdict(self))

    @classmethod
    def from_dict(cls, data: dict):
        raise NotImplementedError


@dataclass(frozen=True)
class PayrollProcessed(DomainEvent):
    tenant_id: int
    payroll_id: int
    period_start: date
    period_end: date
    gross_salary: Decimal
    employee_tax_amount: Decimal
    employer_tax_amount: Decimal
    employer_benefits_amount: Decimal
    other_deductions_amount: Decimal
    net_salary: Decimal
    payroll_number: str = ""
    payment_date: Optional[date] = None

    kind: ClassVar[str] = "payroll_processed"
    reference_type: ClassVar[str] = "payroll"

    @property
    def reference_id(self) -> str:
        return str(self.payroll_id)

    @classmethod
    def from_dict(cls, data: dict) -> "PayrollProcessed":
        return cls(
            tenant_id=int(data["tenant_id"]),
            payroll_id=int(data["payroll_id"]),
            period_start=_as_date(data["period_start"]),
            period_end=_as_date(data["period_end"]),
            gross_salary=to_decimal(data["gross_salary"]),
            employee_tax_amount=to_decimal(data.get("employee_tax_amount", 0)),
            employer_tax_amount=to_decimal(data.get("employer_tax_amount", 0)),
            employer_benefits_amount=to_decimal(
                data.get("employer_benefits_amount", 0)),
            other_deductions_amount=to_decimal(
                data.get("other_deductions_amount", 0)),
            net_salary=to_decimal(data["net_salary"]),
            payroll_number=data.get("payroll_number") or "",
            payment_date=_as_date(data.get("payment_date")),
        )


@dataclass(frozen=True)
class StockMovementRecorded(DomainEvent):
    tenant_id: int
    movement_id: int
    product_id: int
    product_cost_price: Decimal
    quantity: Decimal  # signed: > 0 into stock, < 0 out of stock
    movement_type: str
    reference_number: str = ""
    unit_cost: Optional[Decimal] = None
    product_name: str = ""
    occurred_on: Optional[date] = None

    kind: ClassVar[str] = "stock_movement_recorded"
    reference_type: ClassVar[str] = "stock_movement"

    @property
    def reference_id(self) -> str:
        return str(self.movement_id)

    @classmethod
    def from_dict(cls, data: dict) -> "StockMovementRecorded":
        unit_cost = data.get("unit_cost")
        return cls(
            tenant_id=int(data["tenant_id"]),
            movement_id=int(data["movement_id"]),
            product_id=int(data["product_id"]),
            product_cost_price=to_decimal(data.get("product_cost_price", 0)),
            quantity=_as_quantity(data["quantity"]),
            movement_type=str(data["movement_type"]).lower(),
            reference_number=data.get("reference_number") or "",
            unit_cost=to_decimal(unit_cost) if unit_cost is not None else None,
            product_name=data.get("product_name") or "",
            occurred_on=_as_date(data.get("occurred_on")),
        )


@dataclass(frozen=True)
class GoodsReceivedLine:
    product_id: int
    received_quantity: Decimal
    unit_price: Decimal


@dataclass(frozen=True)
class GoodsReceived(DomainEvent):
    tenant_id: int
    receipt_id: int
    supplier_name: str
    warehouse_id: int
    lines: tuple = field(default_factory=tuple)  # of GoodsReceivedLine
    receipt_number: str = ""
    receipt_date: Optional[date] = None

    kind: ClassVar[str] = "goods_received"
    reference_type: ClassVar[str] = "goods_receipt"

    @property
    def reference_id(self) -> str:
        return str(self.receipt_id)

    @classmethod
    def from_dict(cls, data: dict) -> "GoodsReceived":
        lines = tuple(
            GoodsReceivedLine(
                product_id=int(line["product_id"]),
                received_quantity=_as_quantity(line["received_quantity"]),
                unit_price=to_decimal(line["unit_price"]),
            )
            for line in data.get("lines", [])
        )
        return cls(
            tenant_id=int(data["tenant_id"]),
            receipt_id=int(data["receipt_id"]),
            supplier_name=data.get("supplier_name") or "",
            warehouse_id=int(data["warehouse_id"]),
            lines=lines,
            receipt_number=data.get("receipt_number") or "",
            receipt_date=_as_date(data.get("receipt_date")),
        )


@dataclass(frozen=True)
class FiscalPeriodClosed:
    """Notification sent after a period close commits."""

    period_id: int
    tenant_id: int
    closed_by: str
    closed_at: datetime

    def to_dict(self) -> dict:
        return _encode(asdict(self))

    @classmethod
    def from_dict(cls, data: dict) -> "FiscalPeriodClosed":
        closed_at = data["closed_at"]
        if not isinstance(closed_at, datetime):
            closed_at = parse_datetime(closed_at)
        return cls(
            period_id=int(data["period_id"]),
            tenant_id=int(data["tenant_id"]),
            closed_by=data.get("closed_by") or "",
            closed_at=closed_at,
        )


# kind → event class, used to rebuild events from queue payloads
EVENT_TYPES = {
    cls.kind: cls
    for cls in (PayrollProcessed, StockMovementRecorded, GoodsReceived)
}


def event_from_payload(kind: str, payload: dict) -> DomainEvent:
    try:
        event_cls = EVENT_TYPES[kind]
    except KeyError:
        raise ValidationError(f"Unknown event kind: {kind!r}")
    return event_cls.from_dict(payload)

