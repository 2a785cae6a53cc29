from typing import Final

# (id, name, description, color) for the built-in expense categories
DEFAULT_CATEGORIES: Final[tuple[tuple[str, str, str, str], ...]] = (
    ("cat_office_supplies", "Office Supplies", "General office supplies and equipment", "#2563EB"),
    ("cat_software", "Software", "Software licenses and subscriptions", "#10B981"),
    ("cat_travel", "Travel", "Business travel and accommodation", "#F59E0B"),
    ("cat_marketing", "Marketing", "Marketing and advertising expenses", "#EF4444"),
    ("cat_utilities", "Utilities", "Utilities and operational costs", "#8B5CF6"),
    ("cat_professional", "Professional Services", "Legal, accounting, and consulting", "#06B6D4"),
    ("cat_equipment", "Equipment", "Hardware and equipment purchases", "#84CC16"),
    ("cat_other", "Other", "Miscellaneous expenses", "#6B7280"),
)

DEFAULT_CATEGORY_OWNER: Final[str] = "default"
FALLBACK_CATEGORY_NAME: Final[str] = "Other"
