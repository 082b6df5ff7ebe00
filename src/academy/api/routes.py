"""FastAPI routes for the Academy domain: cart, orders, payments and enrollments.

Every route except the gateway webhook acts on behalf of the learner named
in the ``X-User-Id`` header. Routes that reach the repositories or the
payment gateway are plain functions so they run in the threadpool instead of
blocking the event loop.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain

from academy.api.dependencies import current_user_id
from academy.api.schemas import (
    AddToCartRequest,
    CartItemResponse,
    CartResponse,
    CourseSummarySchema,
    EnrollmentListResponse,
    EnrollmentResponse,
    LectureProgressListResponse,
    LectureProgressResponse,
    OrderLineResponse,
    OrderListResponse,
    OrderResponse,
    PaymentResponse,
    PaymentWebhookRequest,
    ProgressUpdateResponse,
    StatusResponse,
    UpdateProgressRequest,
    VerifyPaymentRequest,
)
from academy.cart.management import AddToCart, RemoveFromCart
from academy.cart.queries import get_cart_items
from academy.catalogue import get_catalogue
from academy.enrollment.progress import UpdateLectureProgress
from academy.enrollment.queries import (
    get_enrollment,
    get_enrollment_by_course,
    get_lecture_progress,
    list_enrollments,
)
from academy.gateway import get_gateway
from academy.order.cancellation import CancelOrder
from academy.order.creation import CreateOrder
from academy.order.order import OrderStatus
from academy.order.queries import get_order, list_orders
from academy.payment.queries import get_payment_by_order, load_payment
from academy.payment.verification import VerifyPayment
from academy.payment.webhook import ProcessPaymentWebhook


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------
def _course_summary(course) -> CourseSummarySchema | None:
    if course is None:
        return None
    return CourseSummarySchema(
        id=course.id,
        title=course.title,
        slug=course.slug,
        thumbnail_url=course.thumbnail_url,
        price=course.price,
    )


def _cart_response(user_id: str) -> CartResponse:
    return CartResponse(
        items=[
            CartItemResponse(course_id=entry.course_id, added_at=entry.added_at, course=_course_summary(entry.course))
            for entry in get_cart_items(user_id)
        ]
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        user_id=str(order.user_id),
        status=order.status,
        total_price=order.total_price,
        lines=[
            OrderLineResponse(
                course_id=str(line.course_id),
                course_title=line.course_title,
                course_slug=line.course_slug,
                course_thumbnail=line.course_thumbnail,
                price_at_purchase=line.price_at_purchase,
            )
            for line in order.lines
        ],
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _payment_response(payment) -> PaymentResponse:
    return PaymentResponse(
        payment_id=str(payment.id),
        external_payment_id=payment.external_payment_id,
        order_id=str(payment.order_id),
        status=payment.status,
        amount=payment.amount,
        currency=payment.currency,
        method=payment.method,
        transaction_id=payment.transaction_id,
        failure_reason=payment.failure_reason,
        paid_at=payment.paid_at,
        cancelled_at=payment.cancelled_at,
        created_at=payment.created_at,
    )


def _enrollment_response(enrollment, course=None) -> EnrollmentResponse:
    return EnrollmentResponse(
        enrollment_id=str(enrollment.id),
        user_id=str(enrollment.user_id),
        course_id=str(enrollment.course_id),
        progress=enrollment.progress,
        is_completed=bool(enrollment.is_completed),
        enrolled_at=enrollment.enrolled_at,
        expires_at=enrollment.expires_at,
        last_accessed_at=enrollment.last_accessed_at,
        completed_at=enrollment.completed_at,
        course=_course_summary(course),
    )


def _lecture_progress_response(record) -> LectureProgressResponse:
    return LectureProgressResponse(
        lecture_progress_id=str(record.id),
        lecture_id=str(record.lecture_id),
        watch_time=record.watch_time,
        is_completed=bool(record.is_completed),
        completed_at=record.completed_at,
        updated_at=record.updated_at,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def get_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    """List the courses in the learner's cart."""
    return _cart_response(user_id)


@cart_router.post("/items", status_code=201, response_model=CartResponse)
def add_to_cart(body: AddToCartRequest, user_id: str = Depends(current_user_id)) -> CartResponse:
    """Put a course into the cart."""
    current_domain.process(AddToCart(user_id=user_id, course_id=body.course_id), asynchronous=False)
    return _cart_response(user_id)


@cart_router.delete("/items/{course_id}", response_model=CartResponse)
def remove_from_cart(course_id: str, user_id: str = Depends(current_user_id)) -> CartResponse:
    """Take a course out of the cart."""
    current_domain.process(RemoveFromCart(user_id=user_id, course_id=course_id), asynchronous=False)
    return _cart_response(user_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(user_id: str = Depends(current_user_id)) -> OrderResponse:
    """Check out the learner's cart into a pending order."""
    order_id = current_domain.process(CreateOrder(user_id=user_id), asynchronous=False)
    return _order_response(get_order(user_id, order_id))


@order_router.get("", response_model=OrderListResponse)
def get_orders(
    user_id: str = Depends(current_user_id),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1),
    status: OrderStatus | None = None,
) -> OrderListResponse:
    """List the learner's orders, newest first."""
    result = list_orders(user_id, page=page, page_size=page_size, status=status.value if status else None)
    return OrderListResponse(
        orders=[_order_response(order) for order in result.orders],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return _order_response(get_order(user_id, order_id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    """Cancel a pending order. Paid orders cannot be cancelled here."""
    current_domain.process(CancelOrder(order_id=order_id, requester_id=user_id), asynchronous=False)
    return _order_response(get_order(user_id, order_id))


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/verify", response_model=PaymentResponse)
def verify_payment(
    body: VerifyPaymentRequest,
    user_id: str = Depends(current_user_id),
) -> PaymentResponse:
    """Reconcile an order with the gateway after checkout completes."""
    payment_id = current_domain.process(
        VerifyPayment(external_payment_id=body.payment_id, order_id=body.order_id, requester_id=user_id),
        asynchronous=False,
    )
    return _payment_response(load_payment(payment_id))


@payment_router.post("/webhook", response_model=StatusResponse)
async def process_webhook(
    request: Request,
    body: PaymentWebhookRequest,
    x_gateway_signature: str = Header(default=""),
) -> StatusResponse:
    """Apply a payment status pushed by the gateway."""
    payload = (await request.body()).decode("utf-8")
    if not get_gateway().verify_webhook_signature(payload, x_gateway_signature):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    command = ProcessPaymentWebhook(
        external_payment_id=body.payment_id,
        status=body.status,
        transaction_id=body.transaction_id,
        failure_reason=body.failure_reason,
    )
    await run_in_threadpool(current_domain.process, command, asynchronous=False)
    return StatusResponse(status="processed")


@payment_router.get("/orders/{order_id}", response_model=PaymentResponse)
def get_order_payment(order_id: str, user_id: str = Depends(current_user_id)) -> PaymentResponse:
    return _payment_response(get_payment_by_order(user_id, order_id))


# ---------------------------------------------------------------------------
# Enrollment Router
# ---------------------------------------------------------------------------
enrollment_router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@enrollment_router.get("", response_model=EnrollmentListResponse)
def get_enrollments(user_id: str = Depends(current_user_id)) -> EnrollmentListResponse:
    """List the learner's enrollments with course details."""
    return EnrollmentListResponse(
        enrollments=[_enrollment_response(view.enrollment, view.course) for view in list_enrollments(user_id)]
    )


@enrollment_router.get("/courses/{course_id}", response_model=EnrollmentResponse)
def get_course_enrollment(course_id: str, user_id: str = Depends(current_user_id)) -> EnrollmentResponse:
    enrollment = get_enrollment_by_course(user_id, course_id)
    return _enrollment_response(enrollment, get_catalogue().get_course(course_id))


@enrollment_router.get("/{enrollment_id}", response_model=EnrollmentResponse)
def get_enrollment_detail(enrollment_id: str, user_id: str = Depends(current_user_id)) -> EnrollmentResponse:
    enrollment = get_enrollment(user_id, enrollment_id)
    return _enrollment_response(enrollment, get_catalogue().get_course(str(enrollment.course_id)))


@enrollment_router.get("/{enrollment_id}/lectures", response_model=LectureProgressListResponse)
def get_lectures_progress(
    enrollment_id: str,
    user_id: str = Depends(current_user_id),
) -> LectureProgressListResponse:
    return LectureProgressListResponse(
        lectures=[_lecture_progress_response(record) for record in get_lecture_progress(user_id, enrollment_id)]
    )


@enrollment_router.post("/{enrollment_id}/progress", response_model=ProgressUpdateResponse)
def update_progress(
    enrollment_id: str,
    body: UpdateProgressRequest,
    user_id: str = Depends(current_user_id),
) -> ProgressUpdateResponse:
    """Report watch state for one lecture and get the recomputed course progress."""
    current_domain.process(
        UpdateLectureProgress(
            enrollment_id=enrollment_id,
            requester_id=user_id,
            lecture_id=body.lecture_id,
            watch_time=body.watch_time,
            is_completed=body.is_completed,
        ),
        asynchronous=False,
    )
    enrollment = get_enrollment(user_id, enrollment_id)
    return ProgressUpdateResponse(
        lecture_progress=_lecture_progress_response(enrollment.progress_for(body.lecture_id)),
        enrollment=_enrollment_response(enrollment),
    )
