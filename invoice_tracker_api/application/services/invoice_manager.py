from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional
import uuid

from shared.config.settings import Settings, settings as default_settings
from shared.models.auth import AuthState, AuthUser
from shared.models.category import Category
from shared.models.invoice import Invoice, InvoiceFormData, InvoiceStatus
from shared.models.invoice_stats import CategorySpending, InvoiceStats
from shared.utils.clock import Clock, SystemClock
from shared.utils.convert import convert_to_json_entity, normalize_keys, parse_date, parse_decimal
from shared.utils.exceptions import (
    AuthenticationException,
    InvalidInvoiceStateException,
    InvoiceNotFoundException,
    UnknownCategoryException,
    UploadException,
    ValidationException,
)
from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.service_interfaces import (
    AuthProviderInterface,
    InvoiceRepositoryInterface,
    StorageServiceInterface,
    TextExtractionServiceInterface,
)
from invoice_tracker_api.application.services.analytics_service import (
    compute_category_spending,
    compute_invoice_stats,
)
from invoice_tracker_api.application.services.category_registry import CategoryRegistry
from invoice_tracker_api.domain.field_extractor import ExtractedInvoiceFields, extract_invoice_fields
from invoice_tracker_api.domain.uploaded_file_dto import UploadedFileDTO

logger = get_logger(__name__)

ALL_FILTER = "all"


@dataclass
class UploadResult:
    file_url: str
    extracted_text: str
    file_name: str
    file_size: int
    blob_name: str

    def to_dict(self) -> dict:
        return convert_to_json_entity(asdict(self))


class InvoiceManager:
    """
    Owns the invoice collection of the signed-in user.

    This service handles:
    - Loading the collection when a user signs in
    - Creating, updating and deleting invoices
    - Uploading invoice files and extracting their text
    - Dashboard statistics, search and category breakdown

    Every mutation builds a new snapshot of the collection, persists it,
    and only then replaces the in-memory copy, so a failed write leaves the
    collection as it was. The in-memory copy is the source of truth for
    reads; the persisted blob is only read by ``load_invoices``.

    One instance is created per session. Operations are expected to be
    awaited one at a time; ``is_loading`` tells callers an operation is in
    flight.

    Attributes:
        repository: Persistence adapter for per-user collections
        storage_service: File storage for uploaded documents
        extraction_service: Text extraction for uploaded documents
        category_registry: Known expense categories
    """

    IMMUTABLE_FIELDS = ("id", "user_id", "created_at")
    REQUIRED_FIELDS = ("vendor_name", "amount", "currency", "status", "category", "invoice_date")
    TEXT_FIELDS = (
        "vendor_name", "invoice_number", "currency", "status", "category", "description",
        "file_url", "file_name", "extracted_text",
    )

    def __init__(self,
                 repository: InvoiceRepositoryInterface,
                 storage_service: StorageServiceInterface,
                 extraction_service: TextExtractionServiceInterface,
                 category_registry: Optional[CategoryRegistry] = None,
                 clock: Optional[Clock] = None,
                 app_settings: Optional[Settings] = None):
        self.repository = repository
        self.storage_service = storage_service
        self.extraction_service = extraction_service
        self.category_registry = category_registry or CategoryRegistry()
        self.clock = clock or SystemClock()
        self.settings = app_settings or default_settings

        self._invoices: list[Invoice] = []
        self._user: Optional[AuthUser] = None
        self._is_loading = False
        self._unsubscribe: Optional[Callable[[], None]] = None

        logger.info(
            "Invoice manager initialized",
            extra={
                "repository_type": type(repository).__name__,
                "storage_type": type(storage_service).__name__,
                "extraction_type": type(extraction_service).__name__,
            }
        )

    # ==================== Lifecycle ====================

    async def init(self, auth_provider: AuthProviderInterface) -> None:
        """Subscribe to authentication changes and load invoices if a user is already signed in."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = auth_provider.on_auth_state_changed(self._handle_auth_state)
        await self._handle_auth_state(auth_provider.state)

    def dispose(self) -> None:
        """Unsubscribe from authentication changes and drop in-memory state."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._invoices = []
        self._user = None
        self._is_loading = False

    async def _handle_auth_state(self, state: AuthState) -> None:
        if state.is_loading or state.user == self._user:
            return

        self._user = state.user
        if state.user is None:
            logger.info("User signed out, clearing invoices")
            self._invoices = []
            return

        logger.info("User present, loading invoices", extra={"user_id": state.user.id})
        self.load_invoices()

    def load_invoices(self) -> list[Invoice]:
        """Replace the in-memory collection with the signed-in user's persisted one. Never raises on bad data."""
        with self._busy():
            self._invoices = self.repository.load(self._user.id) if self._user is not None else []
            return list(self._invoices)

    # ==================== Read access ====================

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._user

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def invoices(self) -> list[Invoice]:
        return list(self._invoices)

    @property
    def categories(self) -> list[Category]:
        return self.category_registry.list()

    def list_invoices(self) -> list[Invoice]:
        return list(self._invoices)

    def get(self, invoice_id: str) -> Invoice:
        _, invoice = self._find(invoice_id)
        return invoice

    def search(self,
               term: Optional[str] = None,
               status: Optional[str] = None,
               category: Optional[str] = None) -> list[Invoice]:
        """
        Filter invoices the way the invoice table does.

        ``term`` is matched case-insensitively against vendor name, id,
        invoice number and description. ``status`` and ``category`` must
        match exactly; None or "all" disables a filter.
        """
        needle = (term or "").strip().lower()
        try:
            status_filter = None if status in (None, "", ALL_FILTER) else InvoiceStatus(status)
        except ValueError as e:
            raise ValidationException([f"Unknown status: {status}"]) from e
        category_filter = None if category in (None, "", ALL_FILTER) else category

        def matches(invoice: Invoice) -> bool:
            if needle:
                haystacks = (invoice.vendor_name, invoice.id, invoice.invoice_number, invoice.description)
                if not any(value and needle in value.lower() for value in haystacks):
                    return False
            if status_filter is not None and invoice.status != status_filter:
                return False
            if category_filter is not None and invoice.category != category_filter:
                return False
            return True

        return [invoice for invoice in self._invoices if matches(invoice)]

    def stats(self) -> InvoiceStats:
        """Totals by status, recomputed from the current collection on every call."""
        return compute_invoice_stats(self._invoices)

    def spending_by_category(self) -> list[CategorySpending]:
        return compute_category_spending(self._invoices, self.category_registry)

    def prefill_from_text(self,
                          text: Optional[str],
                          vendor_name: Optional[str] = None,
                          invoice_number: Optional[str] = None) -> ExtractedInvoiceFields:
        return extract_invoice_fields(text, vendor_name=vendor_name, invoice_number=invoice_number)

    # ==================== Mutations ====================

    async def create(self, form_data: InvoiceFormData) -> Invoice:
        """
        Create a new pending invoice, uploading its file first when one is attached.

        Args:
            form_data: Invoice fields entered by the user

        Returns:
            The created invoice

        Raises:
            AuthenticationException: If no user is signed in
            ValidationException: If required fields are missing or invalid
            UploadException: If the attached file cannot be stored
            PersistenceException: If the collection cannot be written
        """
        user = self._require_user()

        with self._busy():
            amount, invoice_date, due_date = self._validate_form(form_data)

            attachment: dict[str, Any] = {}
            if form_data.file is not None:
                upload = await self._upload_and_extract(user, form_data.file)
                attachment = {
                    "file_url": upload.file_url,
                    "file_name": upload.file_name,
                    "file_size": upload.file_size,
                    "extracted_text": upload.extracted_text,
                }

            now = self.clock.now()
            invoice = Invoice(
                id=self._new_invoice_id(),
                user_id=user.id,
                vendor_name=form_data.vendor_name.strip(),
                invoice_number=_clean_optional(form_data.invoice_number),
                amount=amount,
                currency=self.settings.default_currency,
                status=InvoiceStatus.PENDING,
                category=form_data.category.strip(),
                description=_clean_optional(form_data.description),
                invoice_date=invoice_date,
                due_date=due_date,
                created_at=now,
                updated_at=now,
                **attachment,
            )

            self._commit([*self._invoices, invoice])

            logger.info(
                "Invoice created",
                extra={
                    "invoice_id": invoice.id,
                    "user_id": user.id,
                    "amount": invoice.amount,
                    "category": invoice.category,
                    "has_file": bool(attachment),
                }
            )
            return invoice

    async def update(self, invoice_id: str, fields: dict[str, Any]) -> Invoice:
        """
        Merge ``fields`` (camelCase or snake_case keys) into an invoice.

        A move to ``paid`` stamps ``payment_date`` unless the caller sets it.

        Raises:
            AuthenticationException: If no user is signed in
            InvoiceNotFoundException: If the invoice does not exist
            ValidationException: If a field is unknown, immutable, missing or invalid
            InvalidInvoiceStateException: If the status transition is not allowed
            PersistenceException: If the collection cannot be written
        """
        user = self._require_user()
        with self._busy():
            index, current = self._find(invoice_id)
            changes = normalize_keys(fields)

            unknown = sorted(set(changes) - Invoice.field_names())
            if unknown:
                raise ValidationException([f"Unknown field: {name}" for name in unknown])
            self._raise_if_invalid(self._check_change_types(changes), "")

            try:
                updated = Invoice.from_dict({**asdict(current), **changes})
            except (ValueError, TypeError, InvalidOperation) as e:
                raise ValidationException([f"Invalid invoice field value: {e}"]) from e

            errors = [
                f"{name} cannot be changed"
                for name in self.IMMUTABLE_FIELDS
                if getattr(updated, name) != getattr(current, name)
            ]
            errors.extend(self._collect_errors(
                vendor_name=updated.vendor_name,
                amount=updated.amount,
                category=updated.category,
                invoice_date=updated.invoice_date,
                due_date=updated.due_date,
                check_registry="category" in changes,
            ))
            self._raise_if_invalid(errors, updated.category)

            if not current.can_transition_to(updated.status):
                logger.warning(
                    "Rejected status transition",
                    extra={
                        "invoice_id": invoice_id,
                        "from_status": current.status,
                        "to_status": updated.status,
                    }
                )
                raise InvalidInvoiceStateException(current.status.value, updated.status.value)

            now = self._next_timestamp(current.updated_at)
            if (updated.status == InvoiceStatus.PAID and current.status != InvoiceStatus.PAID
                    and "payment_date" not in changes):
                updated.payment_date = now
            updated.updated_at = now

            snapshot = list(self._invoices)
            snapshot[index] = updated
            self._commit(snapshot)

            logger.info(
                "Invoice updated",
                extra={
                    "invoice_id": invoice_id,
                    "user_id": user.id,
                    "fields": sorted(changes),
                    "status": updated.status,
                }
            )
            return updated

    async def delete(self, invoice_id: str) -> None:
        """
        Remove an invoice.

        Raises:
            AuthenticationException: If no user is signed in
            InvoiceNotFoundException: If the invoice does not exist
            PersistenceException: If the collection cannot be written
        """
        user = self._require_user()
        with self._busy():
            index, _ = self._find(invoice_id)
            snapshot = self._invoices[:index] + self._invoices[index + 1:]
            self._commit(snapshot)
            logger.info("Invoice deleted", extra={"invoice_id": invoice_id, "user_id": user.id})

    async def upload_file(self, uploaded_file: UploadedFileDTO) -> UploadResult:
        """
        Store a file and extract its text.

        Storage failures raise UploadException. Extraction failures are
        logged and give an empty ``extracted_text``.
        """
        user = self._require_user()
        with self._busy():
            return await self._upload_and_extract(user, uploaded_file)

    # ==================== Internals ====================

    async def _upload_and_extract(self, user: AuthUser, uploaded_file: UploadedFileDTO) -> UploadResult:
        blob_name = f"invoices/{user.id}/{self.clock.timestamp_ms()}-{uploaded_file.file_name}"
        logger.info(f"Uploading blob with name: {blob_name}, {uploaded_file.size} bytes")

        try:
            file_url = await self.storage_service.upload_file_as_bytes(
                uploaded_file.file_content,
                blob_name,
                content_type=uploaded_file.content_type,
                overwrite=True,
            )
        except Exception as e:
            logger.error(
                "Failed to upload invoice file",
                extra={"blob_name": blob_name, "error_type": "UploadFailed", "error_details": str(e)},
                exc_info=True
            )
            raise UploadException(f"Failed to upload {uploaded_file.file_name}: {e}") from e

        if not file_url:
            raise UploadException(f"Storage returned no URL for {uploaded_file.file_name}")

        extracted_text = ""
        try:
            extracted_text = await self.extraction_service.extract_text(uploaded_file) or ""
        except Exception as e:
            logger.warning(
                "Failed to extract text from file",
                extra={"blob_name": blob_name, "error_details": str(e)}
            )

        return UploadResult(
            file_url=file_url,
            extracted_text=extracted_text,
            file_name=uploaded_file.file_name,
            file_size=uploaded_file.size,
            blob_name=blob_name,
        )

    def _commit(self, snapshot: list[Invoice]) -> None:
        # persist first: a failed save must leave the in-memory copy untouched
        self.repository.save(self._require_user().id, snapshot)
        self._invoices = snapshot

    def _check_change_types(self, changes: dict[str, Any]) -> list[str]:
        errors = []
        for name, value in changes.items():
            label = name.replace("_", " ").capitalize()
            if value is None and name in self.REQUIRED_FIELDS:
                errors.append(f"{label} is required")
            elif value is not None and name in self.TEXT_FIELDS and not isinstance(value, str):
                errors.append(f"{label} must be a string")
        return errors

    def _find(self, invoice_id: str) -> tuple[int, Invoice]:
        user_id = self._user.id if self._user is not None else None
        for index, invoice in enumerate(self._invoices):
            if invoice.id == invoice_id and invoice.user_id == user_id:
                return index, invoice
        raise InvoiceNotFoundException(invoice_id)

    def _require_user(self) -> AuthUser:
        if self._user is None:
            raise AuthenticationException("A signed-in user is required")
        return self._user

    def _new_invoice_id(self) -> str:
        existing = {invoice.id for invoice in self._invoices}
        while True:
            invoice_id = f"inv_{uuid.uuid4().hex[:12]}"
            if invoice_id not in existing:
                return invoice_id

    def _next_timestamp(self, previous: datetime) -> datetime:
        now = self.clock.now()
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    @contextmanager
    def _busy(self):
        self._is_loading = True
        try:
            yield
        finally:
            self._is_loading = False

    def _validate_form(self, form_data: InvoiceFormData) -> tuple[Decimal, date, Optional[date]]:
        errors: list[str] = []

        amount = None
        try:
            amount = parse_decimal(form_data.amount)
        except (InvalidOperation, ValueError, TypeError):
            errors.append("Amount must be a number")

        invoice_date = due_date = None
        try:
            invoice_date = parse_date(form_data.invoice_date)
        except (ValueError, TypeError):
            errors.append("Invoice date must be an ISO date (YYYY-MM-DD)")
        try:
            due_date = parse_date(form_data.due_date)
        except (ValueError, TypeError):
            errors.append("Due date must be an ISO date (YYYY-MM-DD)")

        errors.extend(self._collect_errors(
            vendor_name=form_data.vendor_name,
            amount=amount,
            category=form_data.category,
            invoice_date=invoice_date,
            due_date=due_date,
            check_registry=True,
            amount_parsed=not any(e.startswith("Amount") for e in errors),
            dates_parsed=not any("date must be" in e for e in errors),
        ))
        self._raise_if_invalid(errors, (form_data.category or "").strip())
        return amount, invoice_date, due_date

    def _collect_errors(self,
                        vendor_name: Optional[str],
                        amount: Optional[Decimal],
                        category: Optional[str],
                        invoice_date: Optional[date],
                        due_date: Optional[date],
                        check_registry: bool,
                        amount_parsed: bool = True,
                        dates_parsed: bool = True) -> list[str]:
        errors = []
        if not vendor_name or not vendor_name.strip():
            errors.append("Vendor name is required")
        if amount_parsed:
            if amount is None:
                errors.append("Amount is required")
            elif not amount.is_finite() or amount < 0:
                errors.append("Amount must be zero or greater")
        if not category or not category.strip():
            errors.append("Category is required")
        elif (check_registry and self.settings.validate_categories
              and not self.category_registry.is_known(category.strip())):
            errors.append(f"Unknown category: {category.strip()}")
        if dates_parsed:
            if invoice_date is None:
                errors.append("Invoice date is required")
            elif due_date is not None and due_date < invoice_date:
                errors.append("Due date cannot be before the invoice date")
        return errors

    def _raise_if_invalid(self, errors: list[str], category: str) -> None:
        if not errors:
            return
        logger.error(
            "Invoice validation failed",
            extra={"validation_errors": errors, "error_type": "InvoiceValidationFailed"}
        )
        if errors == [f"Unknown category: {category}"]:
            raise UnknownCategoryException(category)
        raise ValidationException(errors)


def _clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
