"""
Category domain model.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional

from shared.utils.convert import convert_to_json_entity


@dataclass
class Category:
    """Expense category used to tag invoices. ``name`` is the join key from Invoice.category."""
    id: str
    user_id: str
    name: str
    color: str
    description: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        """Convert Category to its camelCase JSON form."""
        return convert_to_json_entity(asdict(self))
