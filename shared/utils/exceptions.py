"""Custom exceptions for the invoice tracker."""


class InvoiceTrackerException(Exception):
    """Base exception for all invoice tracker errors."""
    pass


class ValidationException(InvoiceTrackerException):
    """Raised when invoice input fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Invoice validation failed: {'; '.join(self.errors)}")


class UnknownCategoryException(ValidationException):
    """Raised when an invoice references a category the registry does not know."""

    def __init__(self, category: str):
        self.category = category
        super().__init__([f"Unknown category: {category}"])


class InvoiceNotFoundException(InvoiceTrackerException):
    """Raised when an invoice cannot be found in the collection."""

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice not found: {invoice_id}")


class InvalidInvoiceStateException(InvoiceTrackerException):
    """Raised when an invoice is in an invalid state for the requested transition."""

    def __init__(self, current_status: str, requested_status: str):
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(f"Invalid status transition from {current_status} to {requested_status}")


class UploadException(InvoiceTrackerException):
    """Raised when storing an uploaded file fails."""
    pass


class DocumentExtractionException(InvoiceTrackerException):
    """Raised when text extraction from a document fails."""
    pass


class PersistenceException(InvoiceTrackerException):
    """Raised when the invoice collection cannot be written."""
    pass


class AuthenticationException(InvoiceTrackerException):
    """Raised when an operation needs a signed-in user and there is none."""
    pass
