"""Pydantic request/response models for the Billing API."""

from datetime import datetime

from pydantic import BaseModel, Field


class InvoiceItemSchema(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: float = Field(gt=0)
    unit_price: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Payment Request Schemas
# ---------------------------------------------------------------------------
class CreatePaymentOrderRequest(BaseModel):
    invoice_id: str


# ---------------------------------------------------------------------------
# Invoice Request Schemas
# ---------------------------------------------------------------------------
class GenerateInvoiceRequest(BaseModel):
    service_request_id: str
    customer_id: str
    items: list[InvoiceItemSchema] = Field(..., min_length=1)
    tax_rate: float | None = Field(default=None, ge=0, le=100)
    notes: str | None = None
    invoice_number: str | None = Field(default=None, max_length=50)


class CancelInvoiceRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class VerificationResponse(BaseModel):
    success: bool = True
    already_settled: bool | None = None


class PaymentOrderResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    key_id: str | None = None


class InvoiceIdResponse(BaseModel):
    invoice_id: str


class StatusResponse(BaseModel):
    status: str


class InvoiceItemResponse(BaseModel):
    description: str
    quantity: float
    unit_price: float
    total_price: float


class InvoiceResponse(BaseModel):
    invoice_id: str
    invoice_number: str
    service_request_id: str
    mechanic_id: str
    customer_id: str
    items: list[InvoiceItemResponse]
    subtotal: float
    tax_rate: float
    tax_amount: float
    total_amount: float
    currency: str
    notes: str | None = None
    status: str
    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
