"""Pydantic request/response schemas for the Academy API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands and aggregates.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class CourseSummarySchema(BaseModel):
    id: str
    title: str
    slug: str
    thumbnail_url: str | None = None
    price: int


class ErrorBody(BaseModel):
    kind: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorBody


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    course_id: str

    model_config = {"json_schema_extra": {"examples": [{"course_id": "course-python-101"}]}}


class CartItemResponse(BaseModel):
    course_id: str
    added_at: datetime | None = None
    course: CourseSummarySchema | None = None


class CartResponse(BaseModel):
    items: list[CartItemResponse]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineResponse(BaseModel):
    course_id: str
    course_title: str
    course_slug: str | None = None
    course_thumbnail: str | None = None
    price_at_purchase: int


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    status: str
    total_price: int
    lines: list[OrderLineResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class VerifyPaymentRequest(BaseModel):
    payment_id: str = Field(description="Payment id issued by the gateway")
    order_id: str

    model_config = {
        "json_schema_extra": {"examples": [{"payment_id": "payment-01HZX3", "order_id": "ord-001"}]},
    }


class PaymentWebhookRequest(BaseModel):
    payment_id: str
    status: str  # PAID, FAILED, CANCELLED
    transaction_id: str | None = None
    failure_reason: str | None = None


class PaymentResponse(BaseModel):
    payment_id: str
    external_payment_id: str
    order_id: str
    status: str
    amount: int
    currency: str | None = None
    method: str | None = None
    transaction_id: str | None = None
    failure_reason: str | None = None
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Enrollments
# ---------------------------------------------------------------------------
class EnrollmentResponse(BaseModel):
    enrollment_id: str
    user_id: str
    course_id: str
    progress: int
    is_completed: bool
    enrolled_at: datetime | None = None
    expires_at: datetime | None = None
    last_accessed_at: datetime | None = None
    completed_at: datetime | None = None
    course: CourseSummarySchema | None = None


class EnrollmentListResponse(BaseModel):
    enrollments: list[EnrollmentResponse]


class UpdateProgressRequest(BaseModel):
    lecture_id: str
    watch_time: int = Field(ge=0, description="Seconds watched")
    is_completed: bool = False


class LectureProgressResponse(BaseModel):
    lecture_progress_id: str
    lecture_id: str
    watch_time: int
    is_completed: bool
    completed_at: datetime | None = None
    updated_at: datetime | None = None


class LectureProgressListResponse(BaseModel):
    lectures: list[LectureProgressResponse]


class ProgressUpdateResponse(BaseModel):
    lecture_progress: LectureProgressResponse
    enrollment: EnrollmentResponse
