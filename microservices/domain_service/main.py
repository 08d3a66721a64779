"""
Domain Service Main Application

FastAPI application for custom domain verification and certificates.
Port: 8260
"""

import logging
import os
import sys
import time
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.auth_dependencies import AuthContext, AuthenticationError, AuthorizationError
from core.config_manager import ConfigManager
from core.logger import setup_service_logger

from .factory import DomainServiceFactory
from .models import (
    CertificateRequest,
    CertificateResponse,
    DnsCheckResponse,
    DomainListResponse,
    DomainRegisterRequest,
    DomainRegisterResponse,
    DomainVerifyRequest,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
    VerificationResult,
)
from .protocols import (
    CertificateIssuanceError,
    DomainAlreadyRegisteredError,
    DomainNotFoundError,
    InvalidInputError,
)

logger = logging.getLogger(__name__)

# Service configuration
SERVICE_NAME = "domain_service"
SERVICE_VERSION = "1.0.0"
config_manager = ConfigManager(SERVICE_NAME)
service_config = config_manager.get_service_config()
SERVICE_PORT = service_config.service_port

# Track startup time for uptime calculation
startup_time = time.time()

# Global factory instance
factory: Optional[DomainServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    setup_service_logger(SERVICE_NAME, service_config.log_level)
    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")
    config_manager.print_config_summary()

    factory = DomainServiceFactory(config_manager)
    await factory.initialize()

    yield

    # Cleanup
    logger.info(f"Shutting down {SERVICE_NAME}")
    await factory.close()


# Create FastAPI application
app = FastAPI(
    title="Domain Service",
    description="Custom domain registration, DNS ownership verification and certificate issuance",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


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


@app.exception_handler(DomainNotFoundError)
async def domain_not_found_handler(request: Request, exc: DomainNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(DomainAlreadyRegisteredError)
async def domain_conflict_handler(request: Request, exc: DomainAlreadyRegisteredError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "domain": exc.domain},
    )


@app.exception_handler(CertificateIssuanceError)
async def certificate_error_handler(request: Request, exc: CertificateIssuanceError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Failed to generate SSL certificate",
            "message": str(exc),
            "output": exc.output,
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
    """Get domain service from factory"""
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
# Domain Endpoints
# ====================


@app.post(
    "/api/v1/domains",
    response_model=DomainRegisterResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Domains"],
)
async def register_domain(
    request: DomainRegisterRequest,
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """Register a custom domain and get its verification TXT record"""
    return await service.register_domain(auth, request.domain, request.organization_id)


@app.get("/api/v1/domains", response_model=DomainListResponse, tags=["Domains"])
async def list_domains(
    organization_id: Optional[str] = Query(None, description="Organization (defaults to the caller's)"),
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """List custom domains of an organization"""
    return await service.list_domains(auth, organization_id or auth.organization_id)


@app.post(
    "/api/v1/domains/verify",
    response_model=VerificationResult,
    response_model_exclude_none=True,
    tags=["Domains"],
)
async def verify_domain(
    request: DomainVerifyRequest,
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """
    Verify domain ownership via the _verification TXT record

    Always answers 200 with verified true or false once the record is found.
    """
    return await service.verify_domain(auth, request.domain_id)


@app.post("/api/v1/domains/ssl/generate", response_model=CertificateResponse, tags=["Certificates"])
async def generate_certificate(
    request: CertificateRequest,
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """Issue a certificate for a verified domain (production only)"""
    return await service.generate_certificate(auth, request.domain)


@app.get("/api/v1/domains/{domain}/dns-check", response_model=DnsCheckResponse, tags=["Diagnostics"])
async def check_dns(
    domain: str,
    organization_id: Optional[str] = Query(None, description="Required when the domain is not registered"),
    service=Depends(get_service),
    auth: AuthContext = Depends(get_auth_context),
):
    """Inspect A, CNAME and verification TXT records of a domain"""
    return await service.check_dns(auth, domain, organization_id)


# ====================
# Main Entry Point
# ====================


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.domain_service.main:app",
        host=service_config.service_host,
        port=SERVICE_PORT,
        reload=service_config.debug,
        log_level=service_config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
