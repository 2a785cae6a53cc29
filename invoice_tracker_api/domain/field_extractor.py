"""
Best-effort field guessing from extracted invoice text.

Used to pre-fill the invoice form after an upload. The guesses are
heuristics, not parsing: vendor name in particular is just the first
non-blank line of the document.
"""
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

# Optional "$", digits with optional thousands separators, optional decimals.
# Numbers glued to letters, hyphens or dots are part of identifiers or dates
# (INV-2024-07, 2024-01-15) and are skipped.
AMOUNT_PATTERN = re.compile(
    r"(?<![\w.\-])\$?\s?((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?)(?![\w\-])"
)

INVOICE_NUMBER_PATTERN = re.compile(r"\b(?:invoice|inv)\b\s*#?\s*([A-Za-z0-9-]+)", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractedInvoiceFields:
    amount: Optional[Decimal] = None
    vendor_name: Optional[str] = None
    invoice_number: Optional[str] = None

    def is_empty(self) -> bool:
        return self.amount is None and self.vendor_name is None and self.invoice_number is None

    def to_dict(self) -> dict:
        """camelCase form with absent fields left out."""
        result = {}
        if self.amount is not None:
            result["amount"] = float(self.amount)
        if self.vendor_name is not None:
            result["vendorName"] = self.vendor_name
        if self.invoice_number is not None:
            result["invoiceNumber"] = self.invoice_number
        return result


def extract_amount(text: str) -> Optional[Decimal]:
    """Largest positive currency-like figure in the text, the usual place of the invoice total."""
    amounts = []
    for match in AMOUNT_PATTERN.finditer(text):
        try:
            value = Decimal(match.group(1).replace(",", ""))
        except InvalidOperation:
            continue
        if value > 0:
            amounts.append(value)
    return max(amounts) if amounts else None


def extract_vendor_name(text: str) -> Optional[str]:
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line
    return None


def extract_invoice_number(text: str) -> Optional[str]:
    match = INVOICE_NUMBER_PATTERN.search(text)
    return match.group(1) if match else None


def extract_invoice_fields(
    text: Optional[str],
    vendor_name: Optional[str] = None,
    invoice_number: Optional[str] = None,
) -> ExtractedInvoiceFields:
    """
    Guess amount, vendor name and invoice number from document text.

    Vendor name and invoice number are only guessed when the caller has not
    supplied one already (blank counts as not supplied).

    Args:
        text: Text extracted from the uploaded document
        vendor_name: Vendor name already entered by the user, if any
        invoice_number: Invoice number already entered by the user, if any

    Returns:
        ExtractedInvoiceFields with the fields that could be guessed
    """
    if not text or not text.strip():
        return ExtractedInvoiceFields()

    return ExtractedInvoiceFields(
        amount=extract_amount(text),
        vendor_name=None if vendor_name and vendor_name.strip() else extract_vendor_name(text),
        invoice_number=None if invoice_number and invoice_number.strip() else extract_invoice_number(text),
    )
