"""Webhook and health routes.

Handlers are plain functions so the blocking filesystem work runs on the
server's threadpool.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..models.requests import WebhookRequest
from ..models.responses import APIResponse, HealthResponse, WebhookResponse
from ..services import HEALTHY, HealthService, IngestService
from .dependencies import get_health_service, get_ingest_service, require_token

webhook_router = APIRouter(tags=["Webhooks"])
health_router = APIRouter(tags=["Health"])


@webhook_router.post(
    "/webhook",
    response_model=APIResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_token)],
)
def receive_webhook(
    request: WebhookRequest,
    service: IngestService = Depends(get_ingest_service),
) -> APIResponse:
    """Validate and store a webhook payload."""
    service.check_capacity()
    result = service.ingest(request.to_payload())
    return APIResponse.ok(
        message="webhook stored",
        data=WebhookResponse.from_result(result).model_dump(),
    )


@health_router.get("/health", response_model=HealthResponse)
def health(service: HealthService = Depends(get_health_service)):
    """Report service health; 503 when any check fails."""
    report = HealthResponse(**service.check())
    if report.status != HEALTHY:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=report.model_dump(mode="json"),
        )
    return report
