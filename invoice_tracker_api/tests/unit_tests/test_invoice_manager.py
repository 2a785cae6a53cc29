import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

import json
import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from shared.config.settings import settings
from shared.utils.logging_config import get_logger, setup_logging
from shared.models.auth import AuthUser
from shared.models.invoice import InvoiceFormData, InvoiceStatus
from shared.utils.clock import FixedClock
from shared.utils.exceptions import (
    AuthenticationException,
    DocumentExtractionException,
    InvalidInvoiceStateException,
    InvoiceNotFoundException,
    PersistenceException,
    UnknownCategoryException,
    UploadException,
    ValidationException,
)
from invoice_tracker_api.application.interfaces.service_interfaces import (
    KeyValueStoreInterface,
    StorageServiceInterface,
    TextExtractionServiceInterface,
)
from invoice_tracker_api.application.services.invoice_manager import InvoiceManager
from invoice_tracker_api.domain.uploaded_file_dto import UploadedFileDTO
from invoice_tracker_api.infrastructure.auth.in_memory_auth_provider import InMemoryAuthProvider
from invoice_tracker_api.infrastructure.repositories.in_memory_key_value_store import InMemoryKeyValueStore
from invoice_tracker_api.infrastructure.repositories.local_invoice_repository import LocalInvoiceRepository

setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_to_console=settings.log_to_console
    )
logger = get_logger(__name__)

DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "invoices_data.json"
FILE_URL = "https://examplestorage.blob.core.windows.net/invoices/acme.pdf"


def make_form(**overrides) -> InvoiceFormData:
    values = dict(
        vendor_name="Acme Corp",
        amount=Decimal("100.00"),
        category="Office Supplies",
        invoice_date=date(2024, 7, 1),
        invoice_number="INV-2024-07",
        description="Printer paper",
    )
    values.update(overrides)
    return InvoiceFormData(**values)


class TestInvoiceManager:

    @pytest_asyncio.fixture
    async def store(self):
        return InMemoryKeyValueStore()

    @pytest_asyncio.fixture
    async def repository(self, store):
        return LocalInvoiceRepository(store, storage_key="invoices")

    @pytest_asyncio.fixture
    async def mock_storage_service(self):
        """Create a mock storage service."""
        mock_service = AsyncMock(spec=StorageServiceInterface)
        mock_service.upload_file_as_bytes.return_value = FILE_URL
        return mock_service

    @pytest_asyncio.fixture
    async def mock_extraction_service(self):
        """Create a mock text extraction service."""
        mock_service = AsyncMock(spec=TextExtractionServiceInterface)
        mock_service.extract_text.return_value = "Acme Corp\nInvoice #INV-2024-07\nTotal Due: $1,234.56"
        return mock_service

    @pytest_asyncio.fixture
    async def clock(self):
        return FixedClock(datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc), step=timedelta(seconds=1))

    @pytest_asyncio.fixture
    async def auth_provider(self):
        return InMemoryAuthProvider()

    @pytest_asyncio.fixture
    async def invoice_manager(self, repository, mock_storage_service, mock_extraction_service, clock, auth_provider):
        """Create a signed-in InvoiceManager with mocked external clients."""
        manager = InvoiceManager(
            repository=repository,
            storage_service=mock_storage_service,
            extraction_service=mock_extraction_service,
            clock=clock,
        )
        await manager.init(auth_provider)
        await auth_provider.sign_in(AuthUser(id="user-1", email="owner@example.com"))
        yield manager
        manager.dispose()

    @pytest_asyncio.fixture
    async def sample_invoices(self, store):
        """Seed the store with the sample collection."""
        raw = DATA_PATH.read_text(encoding="utf-8")
        store.set_item("invoices:user-1", raw)
        return json.loads(raw)

    # ==================== create ====================

    @pytest.mark.asyncio
    async def test_create_without_file(self, invoice_manager: InvoiceManager, repository, mock_storage_service):
        """A new invoice starts pending with matching timestamps and is persisted."""
        invoice = await invoice_manager.create(make_form())

        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.id.startswith("inv_")
        assert invoice.user_id == "user-1"
        assert invoice.currency == "USD"
        assert invoice.created_at == invoice.updated_at
        assert invoice.file_url is None
        assert invoice_manager.invoices == [invoice]
        assert repository.load("user-1") == [invoice]
        mock_storage_service.upload_file_as_bytes.assert_not_called()
        logger.info(f"✓ test_create_without_file passed")

    @pytest.mark.asyncio
    async def test_create_assigns_unique_ids(self, invoice_manager: InvoiceManager):
        for index in range(25):
            await invoice_manager.create(make_form(amount=Decimal(index)))

        ids = [invoice.id for invoice in invoice_manager.invoices]
        assert len(ids) == 25
        assert len(set(ids)) == 25

    @pytest.mark.asyncio
    async def test_create_with_file_uploads_and_embeds_text(self, invoice_manager: InvoiceManager,
                                                           mock_storage_service, mock_extraction_service):
        uploaded_file = UploadedFileDTO("acme.pdf", "application/pdf", b"%PDF-1.7 sample")

        invoice = await invoice_manager.create(make_form(file=uploaded_file))

        mock_storage_service.upload_file_as_bytes.assert_called_once()
        call = mock_storage_service.upload_file_as_bytes.call_args
        assert call.args[0] == b"%PDF-1.7 sample"
        assert re.fullmatch(r"invoices/user-1/\d+-acme\.pdf", call.args[1])
        assert call.kwargs["overwrite"] is True
        mock_extraction_service.extract_text.assert_called_once_with(uploaded_file)

        assert invoice.file_url == FILE_URL
        assert invoice.file_name == "acme.pdf"
        assert invoice.file_size == len(b"%PDF-1.7 sample")
        assert invoice.extracted_text.startswith("Acme Corp")
        logger.info(f"✓ test_create_with_file_uploads_and_embeds_text passed")

    @pytest.mark.asyncio
    async def test_create_upload_failure_leaves_collection_unchanged(self, invoice_manager: InvoiceManager,
                                                                     repository, mock_storage_service):
        mock_storage_service.upload_file_as_bytes.side_effect = ConnectionError("storage unavailable")
        uploaded_file = UploadedFileDTO("acme.pdf", "application/pdf", b"data")

        with pytest.raises(UploadException):
            await invoice_manager.create(make_form(file=uploaded_file))

        assert invoice_manager.invoices == []
        assert repository.load("user-1") == []
        assert invoice_manager.is_loading is False

    @pytest.mark.asyncio
    async def test_create_extraction_failure_still_creates(self, invoice_manager: InvoiceManager,
                                                           mock_extraction_service):
        mock_extraction_service.extract_text.side_effect = DocumentExtractionException("unreadable")
        uploaded_file = UploadedFileDTO("scan.png", "image/png", b"\x89PNG")

        invoice = await invoice_manager.create(make_form(file=uploaded_file))

        assert invoice.file_url == FILE_URL
        assert invoice.extracted_text == ""

    @pytest.mark.asyncio
    async def test_create_persistence_failure_leaves_collection_unchanged(self, mock_storage_service,
                                                                          mock_extraction_service, clock):
        failing_store = MagicMock(spec=KeyValueStoreInterface)
        failing_store.get_item.return_value = None
        failing_store.set_item.side_effect = OSError("disk full")
        auth_provider = InMemoryAuthProvider()
        manager = InvoiceManager(
            repository=LocalInvoiceRepository(failing_store),
            storage_service=mock_storage_service,
            extraction_service=mock_extraction_service,
            clock=clock,
        )
        await manager.init(auth_provider)
        await auth_provider.sign_in(AuthUser(id="user-1"))

        with pytest.raises(PersistenceException):
            await manager.create(make_form())

        assert manager.invoices == []
        assert manager.stats().count == 0

    @pytest.mark.asyncio
    async def test_create_reports_every_validation_error(self, invoice_manager: InvoiceManager, repository):
        form = make_form(vendor_name="  ", amount=Decimal("-5"), category="", invoice_date=None)

        with pytest.raises(ValidationException) as exc_info:
            await invoice_manager.create(form)

        assert "Vendor name is required" in exc_info.value.errors
        assert "Amount must be zero or greater" in exc_info.value.errors
        assert "Category is required" in exc_info.value.errors
        assert "Invoice date is required" in exc_info.value.errors
        assert repository.load("user-1") == []

    @pytest.mark.asyncio
    async def test_create_rejects_unparseable_values(self, invoice_manager: InvoiceManager):
        with pytest.raises(ValidationException) as exc_info:
            await invoice_manager.create(make_form(amount="twelve", invoice_date="07/01/2024"))

        assert "Amount must be a number" in exc_info.value.errors
        assert "Invoice date must be an ISO date (YYYY-MM-DD)" in exc_info.value.errors

    @pytest.mark.asyncio
    async def test_create_rejects_due_date_before_invoice_date(self, invoice_manager: InvoiceManager):
        with pytest.raises(ValidationException):
            await invoice_manager.create(make_form(due_date=date(2024, 6, 1)))

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_category(self, invoice_manager: InvoiceManager):
        with pytest.raises(UnknownCategoryException) as exc_info:
            await invoice_manager.create(make_form(category="Snacks"))

        assert exc_info.value.category == "Snacks"

    @pytest.mark.asyncio
    async def test_create_accepts_iso_strings(self, invoice_manager: InvoiceManager):
        invoice = await invoice_manager.create(
            make_form(amount="49.90", invoice_date="2024-07-02", due_date="2024-08-01")
        )

        assert invoice.amount == Decimal("49.90")
        assert invoice.invoice_date == date(2024, 7, 2)
        assert invoice.due_date == date(2024, 8, 1)

    @pytest.mark.asyncio
    async def test_create_requires_signed_in_user(self, repository, mock_storage_service, mock_extraction_service):
        manager = InvoiceManager(repository, mock_storage_service, mock_extraction_service)

        with pytest.raises(AuthenticationException):
            await manager.create(make_form())

    # ==================== update / delete ====================

    @pytest.mark.asyncio
    async def test_update_to_paid_sets_payment_date(self, invoice_manager: InvoiceManager, repository):
        invoice = await invoice_manager.create(make_form())

        updated = await invoice_manager.update(invoice.id, {"status": "paid"})

        assert updated.status == InvoiceStatus.PAID
        assert updated.payment_date is not None
        assert updated.updated_at > invoice.updated_at
        assert updated.created_at == invoice.created_at
        assert repository.load("user-1") == [updated]
        logger.info(f"✓ test_update_to_paid_sets_payment_date passed")

    @pytest.mark.asyncio
    async def test_update_timestamp_strictly_increases_with_frozen_clock(self, repository, mock_storage_service,
                                                                         mock_extraction_service):
        auth_provider = InMemoryAuthProvider()
        manager = InvoiceManager(
            repository=repository,
            storage_service=mock_storage_service,
            extraction_service=mock_extraction_service,
            clock=FixedClock(datetime(2024, 7, 1, tzinfo=timezone.utc)),
        )
        await manager.init(auth_provider)
        await auth_provider.sign_in(AuthUser(id="user-1"))
        invoice = await manager.create(make_form())

        first = await manager.update(invoice.id, {"description": "first"})
        second = await manager.update(invoice.id, {"description": "second"})

        assert invoice.updated_at < first.updated_at < second.updated_at

    @pytest.mark.asyncio
    async def test_update_merges_camel_case_fields(self, invoice_manager: InvoiceManager):
        invoice = await invoice_manager.create(make_form())

        updated = await invoice_manager.update(invoice.id, {"vendorName": "Acme Corporation", "amount": 150.25})

        assert updated.vendor_name == "Acme Corporation"
        assert updated.amount == Decimal("150.25")
        assert updated.category == invoice.category
        assert invoice_manager.get(invoice.id) == updated

    @pytest.mark.asyncio
    async def test_update_keeps_caller_payment_date(self, invoice_manager: InvoiceManager):
        invoice = await invoice_manager.create(make_form())

        updated = await invoice_manager.update(
            invoice.id, {"status": "paid", "paymentDate": "2024-07-15T12:00:00+00:00"}
        )

        assert updated.payment_date == datetime(2024, 7, 15, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_status_transitions(self, invoice_manager: InvoiceManager):
        invoice = await invoice_manager.create(make_form())

        approved = await invoice_manager.update(invoice.id, {"status": "approved"})
        assert approved.payment_date is None
        overdue = await invoice_manager.update(invoice.id, {"status": "overdue"})
        assert overdue.status == InvoiceStatus.OVERDUE
        paid = await invoice_manager.update(invoice.id, {"status": "paid"})
        assert paid.payment_date is not None
        rejected = await invoice_manager.update(invoice.id, {"status": "rejected"})
        assert rejected.status == InvoiceStatus.REJECTED

        with pytest.raises(InvalidInvoiceStateException):
            await invoice_manager.update(invoice.id, {"status": "approved"})
        assert invoice_manager.get(invoice.id).status == InvoiceStatus.REJECTED

    @pytest.mark.asyncio
    async def test_paid_cannot_go_back_to_pending(self, invoice_manager: InvoiceManager):
        invoice = await invoice_manager.create(make_form())
        await invoice_manager.update(invoice.id, {"status": "paid"})

        with pytest.raises(InvalidInvoiceStateException):
            await invoice_manager.update(invoice.id, {"status": "pending"})

    @pytest.mark.asyncio
    async def test_update_rejects_immutable_and_unknown_fields(self, invoice_manager: InvoiceManager):
        invoice = await invoice_manager.create(make_form())

        with pytest.raises(ValidationException):
            await invoice_manager.update(invoice.id, {"id": "inv_other"})
        with pytest.raises(ValidationException):
            await invoice_manager.update(invoice.id, {"userId": "someone-else"})
        with pytest.raises(ValidationException):
            await invoice_manager.update(invoice.id, {"colour": "red"})
        with pytest.raises(ValidationException):
            await invoice_manager.update(invoice.id, {"amount": -1})
        with pytest.raises(ValidationException):
            await invoice_manager.update(invoice.id, {"status": "archived"})

        assert invoice_manager.get(invoice.id) == invoice

    @pytest.mark.asyncio
    async def test_update_unknown_invoice(self, invoice_manager: InvoiceManager):
        with pytest.raises(InvoiceNotFoundException):
            await invoice_manager.update("inv_missing", {"status": "paid"})

    @pytest.mark.asyncio
    async def test_update_persistence_failure_keeps_previous_version(self, invoice_manager: InvoiceManager,
                                                                     repository, monkeypatch):
        invoice = await invoice_manager.create(make_form())

        def fail(_user_id, _invoices):
            raise PersistenceException("write failed")

        monkeypatch.setattr(repository, "save", fail)

        with pytest.raises(PersistenceException):
            await invoice_manager.update(invoice.id, {"status": "paid"})

        assert invoice_manager.get(invoice.id).status == InvoiceStatus.PENDING

    @pytest.mark.asyncio
    async def test_delete_then_update_or_delete_fails(self, invoice_manager: InvoiceManager, repository):
        invoice = await invoice_manager.create(make_form())

        await invoice_manager.delete(invoice.id)

        assert invoice_manager.invoices == []
        assert repository.load("user-1") == []
        with pytest.raises(InvoiceNotFoundException):
            await invoice_manager.update(invoice.id, {"status": "paid"})
        with pytest.raises(InvoiceNotFoundException):
            await invoice_manager.delete(invoice.id)

    # ==================== upload ====================

    @pytest.mark.asyncio
    async def test_upload_file_swallows_extraction_failure(self, invoice_manager: InvoiceManager,
                                                           mock_extraction_service):
        mock_extraction_service.extract_text.side_effect = RuntimeError("extraction backend down")

        result = await invoice_manager.upload_file(UploadedFileDTO("acme.pdf", "application/pdf", b"data"))

        assert result.file_url == FILE_URL
        assert result.extracted_text == ""

    @pytest.mark.asyncio
    async def test_upload_file_storage_failure_propagates(self, invoice_manager: InvoiceManager,
                                                          mock_storage_service, mock_extraction_service):
        mock_storage_service.upload_file_as_bytes.side_effect = ConnectionError("timeout")

        with pytest.raises(UploadException):
            await invoice_manager.upload_file(UploadedFileDTO("acme.pdf", "application/pdf", b"data"))

        mock_extraction_service.extract_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_file_marks_manager_busy(self, invoice_manager: InvoiceManager, mock_storage_service):
        seen = []

        async def upload(*args, **kwargs):
            seen.append(invoice_manager.is_loading)
            return FILE_URL

        mock_storage_service.upload_file_as_bytes.side_effect = upload

        await invoice_manager.upload_file(UploadedFileDTO("acme.pdf", "application/pdf", b"data"))

        assert seen == [True]
        assert invoice_manager.is_loading is False

    # ==================== stats & queries ====================

    @pytest.mark.asyncio
    async def test_stats_scenario(self, invoice_manager: InvoiceManager):
        await invoice_manager.create(make_form(vendor_name="A", amount=Decimal("100")))
        b = await invoice_manager.create(make_form(vendor_name="B", amount=Decimal("200")))
        await invoice_manager.update(b.id, {"status": "paid"})

        stats = invoice_manager.stats()

        assert stats.total == Decimal("300")
        assert stats.pending == Decimal("100")
        assert stats.paid == Decimal("200")
        assert stats.count == 2
        assert stats.pending_count == 1
        assert stats.paid_count == 1
        assert stats.overdue_count == 0

    @pytest.mark.asyncio
    async def test_stats_follow_every_mutation(self, invoice_manager: InvoiceManager):
        a = await invoice_manager.create(make_form(amount=Decimal("10.50")))
        b = await invoice_manager.create(make_form(amount=Decimal("20.25")))
        await invoice_manager.update(a.id, {"amount": "30"})
        await invoice_manager.delete(b.id)

        stats = invoice_manager.stats()

        assert stats.total == sum(invoice.amount for invoice in invoice_manager.invoices) == Decimal("30")
        assert stats.count == len(invoice_manager.invoices) == 1

    @pytest.mark.asyncio
    async def test_search_filters(self, invoice_manager: InvoiceManager, auth_provider, sample_invoices):
        invoice_manager.load_invoices()

        assert [i.vendor_name for i in invoice_manager.search(term="acme")] == ["Acme Corp"]
        assert [i.vendor_name for i in invoice_manager.search(term="license")] == ["Tech Solutions"]
        assert [i.vendor_name for i in invoice_manager.search(term="ts-889")] == ["Tech Solutions"]
        assert [i.vendor_name for i in invoice_manager.search(status="overdue")] == ["Cloud Services"]
        assert [i.vendor_name for i in invoice_manager.search(category="Software")] == ["Tech Solutions"]
        assert len(invoice_manager.search(status="all", category="all")) == 3
        assert invoice_manager.search(term="acme", status="paid") == []
        with pytest.raises(ValidationException):
            invoice_manager.search(status="archived")

    @pytest.mark.asyncio
    async def test_spending_by_category(self, invoice_manager: InvoiceManager, sample_invoices):
        invoice_manager.load_invoices()

        spending = invoice_manager.spending_by_category()

        assert [item.category for item in spending] == ["Office Supplies", "Software", "Utilities"]
        assert spending[0].amount == Decimal("1234.56")
        assert spending[0].color == "#2563EB"

    # ==================== lifecycle ====================

    @pytest.mark.asyncio
    async def test_sign_in_loads_persisted_invoices(self, repository, mock_storage_service,
                                                    mock_extraction_service, sample_invoices):
        auth_provider = InMemoryAuthProvider()
        manager = InvoiceManager(repository, mock_storage_service, mock_extraction_service)
        await manager.init(auth_provider)
        assert manager.invoices == []

        await auth_provider.sign_in(AuthUser(id="user-1"))

        assert len(manager.invoices) == len(sample_invoices)
        assert manager.current_user.id == "user-1"

        await auth_provider.sign_out()
        assert manager.invoices == []
        assert manager.current_user is None

    @pytest.mark.asyncio
    async def test_loading_state_does_not_trigger_reload(self, invoice_manager: InvoiceManager,
                                                         auth_provider, repository, monkeypatch):
        load = MagicMock(return_value=[])
        monkeypatch.setattr(repository, "load", load)

        await auth_provider.set_loading(True)
        await auth_provider.set_loading(False)

        load.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispose_unsubscribes(self, repository, mock_storage_service, mock_extraction_service,
                                        sample_invoices):
        auth_provider = InMemoryAuthProvider()
        manager = InvoiceManager(repository, mock_storage_service, mock_extraction_service)
        await manager.init(auth_provider)

        manager.dispose()
        await auth_provider.sign_in(AuthUser(id="user-1"))

        assert manager.invoices == []
        assert manager.current_user is None

    @pytest.mark.asyncio
    async def test_init_with_user_already_signed_in(self, repository, mock_storage_service,
                                                    mock_extraction_service, sample_invoices):
        auth_provider = InMemoryAuthProvider()
        await auth_provider.sign_in(AuthUser(id="user-1"))
        manager = InvoiceManager(repository, mock_storage_service, mock_extraction_service)

        await manager.init(auth_provider)

        assert len(manager.invoices) == 3

    # ==================== ownership ====================

    @pytest.mark.asyncio
    async def test_users_only_see_their_own_invoices(self, invoice_manager: InvoiceManager, auth_provider,
                                                     repository):
        alice_invoice = await invoice_manager.create(make_form(vendor_name="Alice Supplies"))

        await auth_provider.sign_in(AuthUser(id="user-2"))

        assert invoice_manager.invoices == []
        assert invoice_manager.stats().count == 0
        with pytest.raises(InvoiceNotFoundException):
            invoice_manager.get(alice_invoice.id)
        with pytest.raises(InvoiceNotFoundException):
            await invoice_manager.delete(alice_invoice.id)
        with pytest.raises(InvoiceNotFoundException):
            await invoice_manager.update(alice_invoice.id, {"status": "paid"})

        await invoice_manager.create(make_form(vendor_name="Bob Hardware"))
        assert [i.vendor_name for i in repository.load("user-2")] == ["Bob Hardware"]
        assert repository.load("user-1") == [alice_invoice]

        await auth_provider.sign_in(AuthUser(id="user-1"))
        assert invoice_manager.invoices == [alice_invoice]

    @pytest.mark.asyncio
    async def test_update_and_delete_require_signed_in_user(self, invoice_manager: InvoiceManager, auth_provider):
        invoice = await invoice_manager.create(make_form())
        await auth_provider.sign_out()

        with pytest.raises(AuthenticationException):
            await invoice_manager.update(invoice.id, {"status": "paid"})
        with pytest.raises(AuthenticationException):
            await invoice_manager.delete(invoice.id)

    # ==================== update input checks ====================

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields,error", [
        ({"status": None}, "Status is required"),
        ({"amount": None}, "Amount is required"),
        ({"vendorName": None}, "Vendor name is required"),
        ({"invoiceDate": None}, "Invoice date is required"),
        ({"category": None}, "Category is required"),
        ({"vendorName": 123}, "Vendor name must be a string"),
        ({"category": ["Software"]}, "Category must be a string"),
        ({"description": 7}, "Description must be a string"),
    ])
    async def test_update_rejects_missing_or_non_text_values(self, invoice_manager: InvoiceManager, repository,
                                                             fields, error):
        invoice = await invoice_manager.create(make_form())

        with pytest.raises(ValidationException) as exc_info:
            await invoice_manager.update(invoice.id, fields)

        assert exc_info.value.errors == [error]
        assert invoice_manager.get(invoice.id) == invoice
        assert repository.load("user-1") == [invoice]

    @pytest.mark.asyncio
    async def test_update_clears_optional_fields(self, invoice_manager: InvoiceManager):
        invoice = await invoice_manager.create(make_form())

        updated = await invoice_manager.update(invoice.id, {"description": None, "invoiceNumber": None})

        assert updated.description is None
        assert updated.invoice_number is None

    # ==================== stored data ====================

    @pytest.mark.asyncio
    async def test_update_invoice_with_offsetless_timestamps(self, invoice_manager: InvoiceManager, store):
        store.set_item("invoices:user-1", json.dumps([{
            "id": "inv_1a2b3c4d5e6f",
            "userId": "user-1",
            "vendorName": "Acme Corp",
            "amount": "75.00",
            "status": "pending",
            "category": "Software",
            "invoiceDate": "2024-06-01",
            "createdAt": "2024-07-01T09:00:00",
            "updatedAt": "2024-07-01T09:00:00",
        }]))
        invoice_manager.load_invoices()

        updated = await invoice_manager.update("inv_1a2b3c4d5e6f", {"status": "paid"})

        assert updated.created_at == datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc)
        assert updated.updated_at > updated.created_at
        assert updated.payment_date is not None
