"""
Invoice API endpoints.

This module exposes the invoice manager over HTTP: invoice CRUD, search,
dashboard statistics, file upload with text extraction and form pre-fill.
The caller identity is taken from the ``X-User-Id`` header.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Header, HTTPException, Query, Response, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.models.auth import AuthUser
from shared.models.invoice import InvoiceFormData
from shared.utils.exceptions import (
    AuthenticationException,
    InvalidInvoiceStateException,
    InvoiceNotFoundException,
    InvoiceTrackerException,
    PersistenceException,
    UploadException,
    ValidationException,
)
from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.di_container import get_auth_provider, get_invoice_manager
from invoice_tracker_api.application.services.invoice_manager import InvoiceManager
from invoice_tracker_api.domain.uploaded_file_dto import UploadedFileDTO
from invoice_tracker_api.infrastructure.auth.in_memory_auth_provider import InMemoryAuthProvider

logger = get_logger(__name__)

router = APIRouter(
    responses={
        401: {"description": "Missing user identity"},
        404: {"description": "Invoice not found"},
        500: {"description": "Internal server error"}
    }
)


# ==================== Request Models ====================

class InvoiceCreateRequest(BaseModel):
    """Fields of a new invoice, camelCase on the wire."""
    vendor_name: str = Field(..., description="Vendor issuing the invoice", examples=["Acme Corp"])
    amount: Decimal = Field(..., description="Invoice total", examples=[1234.56])
    category: str = Field(..., description="Expense category name", examples=["Software"])
    invoice_date: date = Field(..., description="Invoice date (YYYY-MM-DD)")
    invoice_number: Optional[str] = Field(None, description="Vendor invoice number", examples=["INV-2024-07"])
    description: Optional[str] = Field(None, max_length=1000)
    due_date: Optional[date] = Field(None, description="Payment due date (YYYY-MM-DD)")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractFieldsRequest(BaseModel):
    """Extracted document text plus whatever the user already typed in."""
    text: str
    vendor_name: Optional[str] = None
    invoice_number: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== Dependencies ====================

async def require_user(
    x_user_id: Optional[str] = Header(None),
    auth_provider: InMemoryAuthProvider = Depends(get_auth_provider),
) -> AuthUser:
    """Push the caller identity into the auth provider, which loads that user's invoices."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header is required")
    user = AuthUser(id=x_user_id.strip())
    await auth_provider.sign_in(user)
    return user


def _to_http_exception(e: InvoiceTrackerException) -> HTTPException:
    if isinstance(e, ValidationException):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"errors": e.errors})
    if isinstance(e, InvalidInvoiceStateException):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, AuthenticationException):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    if isinstance(e, InvoiceNotFoundException):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, UploadException):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    if isinstance(e, PersistenceException):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save invoices")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


async def _read_upload(file: UploadFile) -> UploadedFileDTO:
    file_content = await file.read()
    return UploadedFileDTO(file.filename or "upload", file.content_type or "application/octet-stream", file_content)


# ==================== Read Endpoints ====================

@router.get("/", summary="List invoices", description="List invoices, optionally filtered by search term, status and category.")
async def list_invoices(
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = None,
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    try:
        invoices = invoice_manager.search(term=search, status=status_filter, category=category)
        return {
            "invoices": [invoice.to_dict() for invoice in invoices],
            "count": len(invoices),
            "total": len(invoice_manager.invoices),
        }
    except InvoiceTrackerException as e:
        raise _to_http_exception(e)


@router.get("/stats", summary="Dashboard statistics")
async def get_stats(
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    return invoice_manager.stats().to_dict()


@router.get("/stats/categories", summary="Spending by category")
async def get_category_spending(
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> list[dict]:
    return [item.to_dict() for item in invoice_manager.spending_by_category()]


@router.get("/{invoice_id}", summary="Get an invoice")
async def get_invoice(
    invoice_id: str,
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    try:
        return invoice_manager.get(invoice_id).to_dict()
    except InvoiceTrackerException as e:
        raise _to_http_exception(e)


# ==================== Mutation Endpoints ====================

@router.post("/", status_code=status.HTTP_201_CREATED, summary="Create an invoice")
async def create_invoice(
    request: InvoiceCreateRequest,
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    logger.info(f"create_invoice endpoint called for vendor {request.vendor_name}")
    try:
        invoice = await invoice_manager.create(InvoiceFormData(**request.model_dump()))
        return invoice.to_dict()
    except InvoiceTrackerException as e:
        logger.error(f"Error in create_invoice: {e}")
        raise _to_http_exception(e)


@router.post("/with-file", status_code=status.HTTP_201_CREATED, summary="Create an invoice with an attached file")
async def create_invoice_with_file(
    vendor_name: str = Form(..., alias="vendorName"),
    amount: Decimal = Form(...),
    category: str = Form(...),
    invoice_date: date = Form(..., alias="invoiceDate"),
    invoice_number: Optional[str] = Form(None, alias="invoiceNumber"),
    description: Optional[str] = Form(None),
    due_date: Optional[date] = Form(None, alias="dueDate"),
    file: UploadFile = File(...),
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    logger.info(f"create_invoice_with_file endpoint called for vendor {vendor_name}, file {file.filename}")
    try:
        form_data = InvoiceFormData(
            vendor_name=vendor_name,
            amount=amount,
            category=category,
            invoice_date=invoice_date,
            invoice_number=invoice_number,
            description=description,
            due_date=due_date,
            file=await _read_upload(file),
        )
        invoice = await invoice_manager.create(form_data)
        return invoice.to_dict()
    except InvoiceTrackerException as e:
        logger.error(f"Error in create_invoice_with_file: {e}")
        raise _to_http_exception(e)


@router.patch("/{invoice_id}", summary="Update invoice fields")
async def update_invoice(
    invoice_id: str,
    fields: dict[str, Any] = Body(..., examples=[{"status": "paid"}]),
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    try:
        invoice = await invoice_manager.update(invoice_id, fields)
        return invoice.to_dict()
    except InvoiceTrackerException as e:
        logger.error(f"Error in update_invoice: {e}")
        raise _to_http_exception(e)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an invoice")
async def delete_invoice(
    invoice_id: str,
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> Response:
    try:
        await invoice_manager.delete(invoice_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except InvoiceTrackerException as e:
        logger.error(f"Error in delete_invoice: {e}")
        raise _to_http_exception(e)


# ==================== Upload & Extraction ====================

@router.post("/upload", summary="Upload an invoice file and pre-fill its fields")
async def upload_invoice_file(
    file: UploadFile = File(...),
    vendor_name: Optional[str] = Form(None, alias="vendorName"),
    invoice_number: Optional[str] = Form(None, alias="invoiceNumber"),
    user: AuthUser = Depends(require_user),
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    logger.info(f"upload endpoint called for file {file.filename}")
    try:
        result = await invoice_manager.upload_file(await _read_upload(file))
        fields = invoice_manager.prefill_from_text(
            result.extracted_text, vendor_name=vendor_name, invoice_number=invoice_number
        )
        return {
            "fileUrl": result.file_url,
            "fileName": result.file_name,
            "fileSize": result.file_size,
            "extractedText": result.extracted_text,
            "fields": fields.to_dict(),
        }
    except InvoiceTrackerException as e:
        logger.error(f"Error in upload_invoice_file: {e}")
        raise _to_http_exception(e)


@router.post("/extract-fields", summary="Guess invoice fields from document text")
async def extract_fields(
    request: ExtractFieldsRequest,
    invoice_manager: InvoiceManager = Depends(get_invoice_manager),
) -> dict:
    fields = invoice_manager.prefill_from_text(
        request.text, vendor_name=request.vendor_name, invoice_number=request.invoice_number
    )
    return fields.to_dict()
