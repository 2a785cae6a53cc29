"""
Invoice domain model and state machine.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Any
from decimal import Decimal
from shared.utils.convert import (
    convert_to_json_entity,
    normalize_keys,
    parse_date,
    parse_datetime,
    parse_decimal,
)

class InvoiceStatus(str, Enum):
    """Invoice status machine states."""
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    OVERDUE = "overdue"
    REJECTED = "rejected"


# Transitions triggered by an explicit user action. Re-applying the current
# status is always accepted.
VALID_STATUS_TRANSITIONS: dict[InvoiceStatus, tuple[InvoiceStatus, ...]] = {
    InvoiceStatus.PENDING: (
        InvoiceStatus.APPROVED,
        InvoiceStatus.PAID,
        InvoiceStatus.OVERDUE,
        InvoiceStatus.REJECTED,
    ),
    InvoiceStatus.APPROVED: (InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.REJECTED),
    InvoiceStatus.OVERDUE: (InvoiceStatus.PAID, InvoiceStatus.REJECTED),
    InvoiceStatus.PAID: (InvoiceStatus.REJECTED,),
    InvoiceStatus.REJECTED: (),  # Terminal state
}


@dataclass
class Invoice:
    """Invoice record owned by a single user."""

    # ========== IDENTIFIERS ==========
    id: str
    user_id: str
    vendor_name: str
    invoice_number: Optional[str] = None

    # ========== AMOUNTS ==========
    amount: Decimal = Decimal("0")
    currency: str = "USD"

    # ========== CLASSIFICATION ==========
    status: InvoiceStatus = InvoiceStatus.PENDING
    category: str = ""
    description: Optional[str] = None

    # ========== DATES ==========
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    payment_date: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # ========== ATTACHMENT ==========
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    extracted_text: Optional[str] = None

    def can_transition_to(self, new_status: InvoiceStatus) -> bool:
        """Check if transition to new status is valid."""
        if new_status == self.status:
            return True
        return new_status in VALID_STATUS_TRANSITIONS.get(self.status, ())

    def to_dict(self, decimal_as_str: bool = False) -> dict:
        """Convert Invoice to its camelCase JSON form. Amounts are numbers unless decimal_as_str is set."""
        return convert_to_json_entity(asdict(self), decimal_as_str=decimal_as_str)

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Invoice':
        """Create Invoice from a camelCase or snake_case dictionary. Unknown keys are ignored."""
        known = cls.field_names()
        converted: dict[str, Any] = {
            key: value for key, value in normalize_keys(data).items() if key in known
        }

        if "amount" in converted:
            converted["amount"] = parse_decimal(converted["amount"])
            if converted["amount"] is None:
                raise ValueError("amount is required")
        if "status" in converted:
            converted["status"] = InvoiceStatus(converted["status"])
        for key in ("invoice_date", "due_date"):
            if key in converted:
                converted[key] = parse_date(converted[key])
        for key in ("payment_date", "created_at", "updated_at"):
            if key in converted:
                converted[key] = parse_datetime(converted[key])
        if converted.get("file_size") is not None:
            converted["file_size"] = int(converted["file_size"])

        return cls(**converted)


@dataclass
class InvoiceFormData:
    """User supplied data for a new invoice."""
    vendor_name: str
    amount: Optional[Decimal]
    category: str
    invoice_date: Optional[date]
    invoice_number: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    file: Optional[Any] = None  # UploadedFileDTO
