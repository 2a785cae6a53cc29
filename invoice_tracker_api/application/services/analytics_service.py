"""
Dashboard aggregates computed from an invoice collection snapshot.

Both functions are pure: they read the invoices they are given and keep no
state, so callers always see figures for the collection as it is now.
"""
from decimal import Decimal
from typing import Iterable

from shared.models.invoice import Invoice, InvoiceStatus
from shared.models.invoice_stats import CategorySpending, InvoiceStats
from invoice_tracker_api.application.services.category_registry import CategoryRegistry


def compute_invoice_stats(invoices: Iterable[Invoice]) -> InvoiceStats:
    stats = InvoiceStats()
    for invoice in invoices:
        stats.total += invoice.amount
        stats.count += 1
        if invoice.status == InvoiceStatus.PENDING:
            stats.pending += invoice.amount
            stats.pending_count += 1
        elif invoice.status == InvoiceStatus.PAID:
            stats.paid += invoice.amount
            stats.paid_count += 1
        elif invoice.status == InvoiceStatus.OVERDUE:
            stats.overdue += invoice.amount
            stats.overdue_count += 1
    return stats


def compute_category_spending(invoices: Iterable[Invoice],
                              categories: CategoryRegistry) -> list[CategorySpending]:
    """Spend per category, largest first. Categories without invoices are left out."""
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for invoice in invoices:
        totals[invoice.category] = totals.get(invoice.category, Decimal("0")) + invoice.amount
        counts[invoice.category] = counts.get(invoice.category, 0) + 1

    spending = [
        CategorySpending(
            category=name,
            amount=amount,
            count=counts[name],
            color=categories.color_for(name),
        )
        for name, amount in totals.items()
    ]
    spending.sort(key=lambda item: (-item.amount, item.category))
    return spending
