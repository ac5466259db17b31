from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from invoicing.core.config import settings
from invoicing.core.database import get_db
from invoicing.schemas.common import Envelope
from invoicing.schemas.invoice import (
    InvoiceCreate,
    InvoiceCreatedResponse,
    InvoicePatch,
    InvoiceReplace,
    InvoiceResponse,
)
from invoicing.services.invoice_service import InvoiceService

router = APIRouter()

VALIDATION_ERROR = {400: {"description": "Invalid input"}}
NOT_FOUND = {404: {"description": "Invoice not found"}}


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    """Build the invoice service on the request's database session."""
    return InvoiceService(db)


@router.post(
    "",
    status_code=201,
    response_model=Envelope[InvoiceCreatedResponse],
    summary="Create invoice",
    responses={**VALIDATION_ERROR, 500: {"description": "Database operation failed"}},
)
def create_invoice(
    data: InvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service),
) -> Envelope[InvoiceCreatedResponse]:
    """Create an invoice, applying the requested discount to its total."""
    created = service.create_invoice(data)
    return Envelope(
        status=201,
        message="Invoice created successfully with discount",
        data=created,
    )


@router.get(
    "",
    response_model=Envelope[list[InvoiceResponse]],
    summary="List or filter invoices",
    responses=VALIDATION_ERROR,
)
def list_invoices(
    response: Response,
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    page_number: int = Query(default=1, ge=1, alias="pageNumber"),
    status: str | None = Query(default=None, max_length=20),
    customer_id: int | None = Query(default=None, gt=0),
    order_by: str | None = Query(default=None, description="Sort as field:direction"),
    service: InvoiceService = Depends(get_invoice_service),
) -> Envelope[list[InvoiceResponse]]:
    """List invoices page by page, or every invoice with the given status."""
    if status is not None:
        invoices = service.filter_invoices(status, order_by)
        return Envelope(
            status=200,
            message="Invoices filtered successfully",
            data=[InvoiceResponse.model_validate(i) for i in invoices],
        )

    invoices, total = service.list_invoices(limit, page_number, customer_id, order_by)
    response.headers["X-Total-Count"] = str(total)
    return Envelope(
        status=200,
        message="Invoices fetched successfully",
        data=[InvoiceResponse.model_validate(i) for i in invoices],
    )


@router.patch(
    "",
    response_model=Envelope[InvoiceResponse],
    summary="Patch invoice",
    responses={**VALIDATION_ERROR, **NOT_FOUND},
)
def patch_invoice(
    data: InvoicePatch,
    service: InvoiceService = Depends(get_invoice_service),
) -> Envelope[InvoiceResponse]:
    """Update only the fields present in the body; the body carries the id."""
    invoice = service.patch_invoice(data)
    return Envelope(
        status=200,
        message="Invoice updated successfully",
        data=InvoiceResponse.model_validate(invoice),
    )


@router.get(
    "/{invoice_id}",
    response_model=Envelope[InvoiceResponse],
    summary="Get invoice",
    responses={**VALIDATION_ERROR, **NOT_FOUND},
)
def get_invoice(
    invoice_id: int,
    service: InvoiceService = Depends(get_invoice_service),
) -> Envelope[InvoiceResponse]:
    """Get an invoice by ID."""
    invoice = service.get_invoice(invoice_id)
    return Envelope(
        status=200,
        message="Invoice fetched successfully",
        data=InvoiceResponse.model_validate(invoice),
    )


@router.put(
    "/{invoice_id}",
    response_model=Envelope[InvoiceResponse],
    summary="Update invoice",
    responses={**VALIDATION_ERROR, **NOT_FOUND},
)
def update_invoice(
    invoice_id: int,
    data: InvoiceReplace,
    service: InvoiceService = Depends(get_invoice_service),
) -> Envelope[InvoiceResponse]:
    """Replace every mutable field of an invoice."""
    invoice = service.replace_invoice(invoice_id, data)
    return Envelope(
        status=200,
        message="Invoice updated successfully",
        data=InvoiceResponse.model_validate(invoice),
    )


@router.delete(
    "/{invoice_id}",
    status_code=204,
    summary="Delete invoice",
    responses={**VALIDATION_ERROR, **NOT_FOUND},
)
def delete_invoice(
    invoice_id: int,
    service: InvoiceService = Depends(get_invoice_service),
) -> None:
    """Delete an invoice."""
    service.delete_invoice(invoice_id)
