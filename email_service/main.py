
import logging
import traceback
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import Status, StatusCode

from email_service.config import EmailServiceConfig
from email_service.errors import EmailServiceError, MalformedRequest
from email_service.logs import configure_logging
from email_service.mailer import Mailer, build_mailer, build_message
from email_service.models import ErrorDetail, ErrorResponse, OrderConfirmationRequest, SendResponse
from email_service.templates import render_confirmation
from email_service.tracing import (
    TRACER_NAME,
    RequestContext,
    build_tracer_provider,
    get_request_context,
    request_context,
    trace_fields,
)

logger = logging.getLogger("email_service")

router = APIRouter()


def send_email(ctx: RequestContext, payload: OrderConfirmationRequest,
               mailer: Mailer, config: EmailServiceConfig) -> None:
    with ctx.start_span("send_email") as span:
        logger.info(
            f"Starting to send order confirmation email to: {payload.email}",
            extra=trace_fields(span),
        )

        body = render_confirmation(payload.order_data())
        mailer.deliver(build_message(
            sender=config.sender,
            to=payload.email,
            subject=config.subject,
            body=body,
        ))
        span.set_attribute("app.email.recipient", payload.email)

        logger.info(
            f"Order confirmation email sent to: {payload.email}",
            extra=trace_fields(span),
        )


@router.get("/health")
def health():
    return {"status": "ok", "service": "email"}


@router.post("/send_order_confirmation", response_model=SendResponse)
def send_order_confirmation(request: Request, payload: OrderConfirmationRequest,
                            ctx: RequestContext = Depends(get_request_context)):
    order_id = payload.order.order_id
    ctx.span.set_attribute("app.order.id", order_id)

    try:
        send_email(ctx, payload, request.app.state.mailer, request.app.state.config)
    except EmailServiceError as e:
        if e.order_id is None:
            e.order_id = order_id
        raise
    except Exception as e:
        # Unexpected bugs still end at this request instead of the server
        raise EmailServiceError(str(e) or type(e).__name__, order_id=order_id) from e

    return SendResponse(status="sent")


def _failure_response(request: Request, exc: BaseException, error: EmailServiceError) -> JSONResponse:
    ctx = request_context(request)
    ctx.span.record_exception(exc)
    ctx.span.set_status(Status(StatusCode.ERROR, error.message))

    ids = trace_fields(ctx.span)
    backtrace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        f"Error in email service: {error.message}",
        extra={**ids, "error": error.message, "backtrace": backtrace},
    )

    return JSONResponse(
        status_code=error.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=error.code,
                message=error.message,
                order_id=error.order_id,
                trace_id=ids["trace_id"],
            )
        ).model_dump(exclude_none=True),
    )


async def handle_service_error(request: Request, exc: EmailServiceError) -> JSONResponse:
    return _failure_response(request, exc, exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        problems.append(f"{location}: {err.get('msg', 'invalid')}")
    message = "Malformed request: " + ("; ".join(problems) or "invalid body")
    return _failure_response(request, exc, MalformedRequest(message))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    # Starlette re-raises after this returns; the response is already sent
    return _failure_response(request, exc, EmailServiceError(str(exc) or type(exc).__name__))


def create_app(config: EmailServiceConfig, mailer: Optional[Mailer] = None,
               tracer_provider: Optional[TracerProvider] = None) -> FastAPI:
    """
    Build the email service.

    mailer and tracer_provider default to what the config describes; tests
    inject an in-memory mailer and span exporter instead.
    """
    app = FastAPI(title="Email Service")

    provider = tracer_provider or build_tracer_provider(config)
    app.state.config = config
    app.state.mailer = mailer or build_mailer(config)
    app.state.tracer = provider.get_tracer(TRACER_NAME)

    app.include_router(router)
    app.add_exception_handler(EmailServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)
    return app


def run():
    config = EmailServiceConfig.from_env()
    configure_logging()
    app = create_app(config)

    logger.info(f"Email service starting on port {config.port}")
    # uvicorn's own text logs would break the JSON-lines contract on stdout
    uvicorn.run(app, host=config.host, port=config.port, log_config=None, access_log=False)


if __name__ == "__main__":
    run()
