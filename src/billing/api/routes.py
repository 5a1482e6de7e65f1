"""FastAPI routes for the Billing domain — payments and invoices.

The payment endpoints are called by the checkout widget and report every
failure as HTTP 400 with ``{"error": message}``.
"""

import json

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from billing.api.schemas import (
    CancelInvoiceRequest,
    CreatePaymentOrderRequest,
    GenerateInvoiceRequest,
    InvoiceIdResponse,
    InvoiceItemResponse,
    InvoiceResponse,
    PaymentOrderResponse,
    StatusResponse,
    VerificationResponse,
)
from billing.gateway import get_gateway
from billing.invoice.cancellation import CancelInvoice
from billing.invoice.generation import GenerateInvoice
from billing.invoice.invoice import Invoice
from billing.payment.checkout import CreatePaymentOrder
from billing.payment.exceptions import PaymentVerificationError
from billing.payment.verification import InvoicePaymentVerifier
from shared.auth import AuthenticatedUser, get_identity_provider, require_user
from shared.settings import ConfigurationError, Settings

logger = structlog.get_logger(__name__)


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/verify", response_model=VerificationResponse, response_model_exclude_none=True)
async def verify_payment(request: Request, authorization: str | None = Header(default=None)):
    """Settle an invoice from a gateway payment callback."""
    try:
        verifier = InvoicePaymentVerifier(
            gateway=get_gateway(),
            identity_provider=get_identity_provider(),
        )
        result = verifier.verify(authorization, await request.body())
    except (PaymentVerificationError, ConfigurationError) as exc:
        return _error(exc.message)
    except Exception:
        logger.exception("Payment verification failed")
        return _error(PaymentVerificationError.message)

    if result.already_settled:
        return VerificationResponse(already_settled=True)
    return VerificationResponse()


@payment_router.post("/orders", response_model=PaymentOrderResponse)
async def create_payment_order(
    body: CreatePaymentOrderRequest,
    authorization: str | None = Header(default=None),
):
    """Open a gateway checkout order for the caller's pending invoice."""
    try:
        gateway = get_gateway()
        user = InvoicePaymentVerifier(gateway, get_identity_provider()).authenticate(authorization)
        result = current_domain.process(
            CreatePaymentOrder(invoice_id=body.invoice_id, requested_by=user.id),
            asynchronous=False,
        )
    except (PaymentVerificationError, ConfigurationError) as exc:
        return _error(exc.message)
    except Exception:
        logger.exception("Payment order creation failed", invoice_id=body.invoice_id)
        return _error(PaymentVerificationError.message)

    return PaymentOrderResponse(**result)


# ---------------------------------------------------------------------------
# Invoice Router
# ---------------------------------------------------------------------------
invoice_router = APIRouter(prefix="/invoices", tags=["invoices"])


def _to_response(invoice) -> InvoiceResponse:
    return InvoiceResponse(
        invoice_id=str(invoice.id),
        invoice_number=invoice.invoice_number,
        service_request_id=str(invoice.service_request_id),
        mechanic_id=str(invoice.mechanic_id),
        customer_id=str(invoice.customer_id),
        items=[
            InvoiceItemResponse(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in invoice.items
        ],
        subtotal=invoice.subtotal,
        tax_rate=invoice.tax_rate,
        tax_amount=invoice.tax_amount,
        total_amount=invoice.total_amount,
        currency=invoice.currency,
        notes=invoice.notes,
        status=invoice.status,
        razorpay_order_id=invoice.razorpay_order_id,
        razorpay_payment_id=invoice.razorpay_payment_id,
        paid_at=invoice.paid_at,
        cancelled_at=invoice.cancelled_at,
        cancellation_reason=invoice.cancellation_reason,
        created_at=invoice.created_at,
    )


def _load_invoice(invoice_id: str) -> Invoice:
    try:
        return current_domain.repository_for(Invoice).get(invoice_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")


@invoice_router.post("", status_code=201, response_model=InvoiceIdResponse)
async def generate_invoice(
    body: GenerateInvoiceRequest,
    user: AuthenticatedUser = Depends(require_user),
) -> InvoiceIdResponse:
    """Raise an invoice for a completed job. The caller is the mechanic."""
    settings = Settings.from_env()
    command = GenerateInvoice(
        service_request_id=body.service_request_id,
        mechanic_id=user.id,
        customer_id=body.customer_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        tax_rate=settings.default_tax_rate if body.tax_rate is None else body.tax_rate,
        currency=settings.currency,
        notes=body.notes,
        invoice_number=body.invoice_number,
    )
    try:
        result = current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.messages)
    return InvoiceIdResponse(invoice_id=result)


@invoice_router.get("", response_model=list[InvoiceResponse])
async def list_invoices(user: AuthenticatedUser = Depends(require_user)) -> list[InvoiceResponse]:
    """Invoices the caller raised or has to pay, newest first."""
    invoices = current_domain.repository_for(Invoice).find_for_party(user.id)
    return [_to_response(invoice) for invoice in invoices]


@invoice_router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: str, user: AuthenticatedUser = Depends(require_user)) -> InvoiceResponse:
    """Fetch one invoice. Only its mechanic and customer may see it."""
    invoice = _load_invoice(invoice_id)
    if user.id not in (str(invoice.mechanic_id), str(invoice.customer_id)):
        raise HTTPException(status_code=403, detail="Not a party to this invoice")
    return _to_response(invoice)


@invoice_router.put("/{invoice_id}/cancel", response_model=StatusResponse)
async def cancel_invoice(
    invoice_id: str,
    body: CancelInvoiceRequest,
    user: AuthenticatedUser = Depends(require_user),
) -> StatusResponse:
    """Withdraw an unpaid invoice. Only the mechanic who raised it may cancel."""
    invoice = _load_invoice(invoice_id)
    if user.id != str(invoice.mechanic_id):
        raise HTTPException(status_code=403, detail="Only the issuing mechanic can cancel an invoice")

    try:
        current_domain.process(CancelInvoice(invoice_id=invoice_id, reason=body.reason), asynchronous=False)
    except ValidationError as exc:
        raise HTTPException(status_code=409, detail=exc.messages)
    return StatusResponse(status="cancelled")
