"""
Dashboard statistics derived from the invoice collection.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal

from shared.utils.convert import convert_to_json_entity


@dataclass
class InvoiceStats:
    """Totals by status. Amounts are sums of Invoice.amount."""
    total: Decimal = Decimal("0")
    pending: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    overdue: Decimal = Decimal("0")
    count: int = 0
    pending_count: int = 0
    paid_count: int = 0
    overdue_count: int = 0

    def to_dict(self) -> dict:
        return convert_to_json_entity(asdict(self))


@dataclass
class CategorySpending:
    """Spend for one category, used by the dashboard breakdown."""
    category: str
    amount: Decimal
    count: int
    color: str

    def to_dict(self) -> dict:
        return convert_to_json_entity(asdict(self))
