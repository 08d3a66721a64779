"""
Campaign Service Main Application

FastAPI application for email campaign dispatch and workflow emails.
Port: 8261
"""

import logging
import os
import sys
import time
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.auth_dependencies import AuthContext, AuthenticationError, AuthorizationError
from core.config_manager import ConfigManager
from core.logger import setup_service_logger

from .factory import CampaignServiceFactory
from .models import (
    CampaignSendRequest,
    CampaignSendResponse,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
    WorkflowEmailRequest,
    WorkflowEmailResponse,
    WorkflowTestRequest,
    WorkflowTestResponse,
)
from .protocols import (
    CampaignAlreadyDispatchedError,
    CampaignNotFoundError,
    EmailDeliveryError,
    EmailServiceNotConfiguredError,
    InvalidInputError,
    WorkflowNotFoundError,
)

logger = logging.getLogger(__name__)

# Service configuration
SERVICE_NAME = "campaign_service"
SERVICE_VERSION = "1.0.0"
config_manager = ConfigManager(SERVICE_NAME)
service_config = config_manager.get_service_config()
SERVICE_PORT = service_config.service_port

# Track startup time for uptime calculation
startup_time = time.time()

# Global factory instance
factory: Optional[CampaignServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    setup_service_logger(SERVICE_NAME, service_config.log_level)
    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")
    config_manager.print_config_summary()

    factory = CampaignServiceFactory(config_manager)
    await factory.initialize()

    yield

    # Cleanup
    logger.info(f"Shutting down {SERVICE_NAME}")
    await factory.close()


# Create FastAPI application
app = FastAPI(
    title="Campaign Service",
    description="Email campaign dispatch to mailing list subscribers and workflow emails",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    content = {"detail": str(exc)}
    if exc.hint:
        content["message"] = exc.hint
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc)},
    )


@app.exception_handler(CampaignNotFoundError)
async def campaign_not_found_handler(request: Request, exc: CampaignNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(WorkflowNotFoundError)
async def workflow_not_found_handler(request: Request, exc: WorkflowNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(CampaignAlreadyDispatchedError)
async def already_dispatched_handler(request: Request, exc: CampaignAlreadyDispatchedError):
    current = exc.current_status.value if exc.current_status else None
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc), "status": current},
    )


@app.exception_handler(EmailDeliveryError)
async def email_delivery_handler(request: Request, exc: EmailDeliveryError):
    logger.error(f"Email delivery failed on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Failed to send email", "message": str(exc)},
    )


@app.exception_handler(EmailServiceNotConfiguredError)
async def email_not_configured_handler(request: Request, exc: EmailServiceNotConfiguredError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": str(exc),
            "message": "RESEND_API_KEY is not set in environment variables",
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler; details are hidden in production"""
    error_traceback = traceback.format_exc()
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}\n{error_traceback}")
    if service_config.is_production:
        content = {"detail": "Internal server error"}
    else:
        content = {
            "detail": str(exc),
            "type": type(exc).__name__,
            "traceback": error_traceback.split("\n")[-5:-1],
        }
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# ====================
# Dependencies
# ====================


def get_service():
    """Get campaign service from factory"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory.service


async def get_auth_context(authorization: Optional[str] = Header(None)) -> AuthContext:
    """Resolve the bearer credential of the request"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return await factory.auth_resolver.resolve(authorization)


# ====================
# Health Endpoints
# ====================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    dependencies = {}

    if factory:
        try:
            db_healthy = await factory.repository.health_check()
            dependencies["postgres"] = "healthy" if db_healthy else "unhealthy"
        except Exception:
            dependencies["postgres"] = "unhealthy"
        dependencies["resend"] = "configured" if factory.email_client else "not_configured"

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        port=SERVICE_PORT,
        version=SERVICE_VERSION,
        dependencies=dependencies,
    )


@app.get("/health/ready", response_model=ReadinessResponse, tags=["Health"])
async def readiness_check():
    """Readiness check endpoint"""
    checks = {}
    details = {}

    if factory:
        try:
            db_healthy = await factory.repository.health_check()
            checks["database"] = db_healthy
            details["database"] = "Connected" if db_healthy else "Connection failed"
        except Exception as e:
            checks["database"] = False
            details["database"] = str(e)

        checks["email"] = True  # Optional
        details["email"] = "Configured" if factory.email_client else "Not configured (optional)"
    else:
        checks["factory"] = False
        details["factory"] = "Factory not initialized"

    return ReadinessResponse(
        ready=checks.get("database", False),
        checks=checks,
        details=details,
    )


@app.get("/health/live", response_model=LivenessResponse, tags=["Health"])
async def liveness_check():
    """Liveness check endpoint"""
    return LivenessResponse(
        alive=True,
        uptime_seconds=time.time() - startup_time,
    )


# ====================
# Campaign Endpoints
# ====================


@app.post(
    "/api/v1/campaigns/send",
    response_model=CampaignSendResponse,
    response_model_exclude_none=True,
    tags=["Campaigns"],
)
async def send_campaign(
    request: CampaignSendRequest,
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """
    Send a draft campaign to its mailing list

    Each campaign can be sent once. The response reports delivery stats
    and at most the first 10 recipient errors.
    """
    return await service.send_campaign(auth, request.campaign_id)


# ====================
# Workflow Email Endpoints
# ====================


@app.post("/api/v1/emails/workflow", response_model=WorkflowEmailResponse, tags=["Workflows"])
async def send_workflow_email(
    request: WorkflowEmailRequest,
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """Send one email for an organization's workflow"""
    return await service.send_workflow_email(auth, request)


@app.post("/api/v1/workflows/test", response_model=WorkflowTestResponse, tags=["Workflows"])
async def send_workflow_test(
    request: WorkflowTestRequest,
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """Send a workflow rendered with sample data to a test address"""
    return await service.send_workflow_test(auth, request)


# ====================
# Main Entry Point
# ====================


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.campaign_service.main:app",
        host=service_config.service_host,
        port=SERVICE_PORT,
        reload=service_config.debug,
        log_level=service_config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
