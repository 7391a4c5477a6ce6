"""API Gateway - FastAPI application around the login risk engine."""

import logging, os, threading
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from riskgate.api.schemas import (
    ErrorResponse,
    HistoryResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RecoveryCodeRequest,
    RecoveryCodeResponse,
    RecoveryVerifyRequest,
    SignupRequest,
    SignupResponse,
)
from riskgate.api.service import RiskGateService
from riskgate.common.exceptions import RiskGateException

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("riskgate_api")


STATUS_BY_ERROR_CODE = {
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "IDENTITY_UNKNOWN": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CODE": status.HTTP_401_UNAUTHORIZED,
    "RISK_BLOCKED": status.HTTP_403_FORBIDDEN,
    "IDENTITY_EXISTS": status.HTTP_409_CONFLICT,
    "LEDGER_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "NOTIFICATION_FAILED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ServiceManager:
    """Thread-safe service singleton manager."""

    _instance: Optional[RiskGateService] = None
    _lock = threading.Lock()

    @classmethod
    def get_service(cls) -> RiskGateService:
        """Get or create the service instance (thread-safe)."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = RiskGateService()
                    logger.info("RiskGateService initialized")
        return cls._instance

    @classmethod
    def shutdown(cls) -> None:
        """Drop the service instance."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance = None
                logger.info("RiskGateService shutdown complete")


def get_service() -> RiskGateService:
    """Get the service instance."""
    return ServiceManager.get_service()


def bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Extract a bearer token from the Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="missing_session_token")
    return authorization[len("Bearer "):].strip()


# =============================================================================
# CORS CONFIGURATION
# =============================================================================

def get_cors_origins() -> List[str]:
    """Get allowed CORS origins from environment.

    In production, set RISKGATE_CORS_ORIGINS to a comma-separated list
    of allowed origins.
    """
    origins_env = os.environ.get("RISKGATE_CORS_ORIGINS", "")

    if origins_env:
        return [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    if os.environ.get("RISKGATE_ENVIRONMENT", "development") == "production":
        logger.warning(
            "RISKGATE_CORS_ORIGINS not set in production. CORS will be disabled."
        )
        return []

    logger.warning("Running in development mode with permissive CORS (allow_origins=['*'])")
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("RiskGate API starting up...")
    get_service()  # Pre-initialize service
    logger.info("RiskGate API ready")

    yield

    logger.info("RiskGate API shutting down...")
    ServiceManager.shutdown()


environment = os.environ.get("RISKGATE_ENVIRONMENT", "development")
enable_docs_default = "false" if environment == "production" else "true"
enable_docs = os.environ.get("RISKGATE_ENABLE_DOCS", enable_docs_default).lower() == "true"

app = FastAPI(
    title="RiskGate API",
    description="Risk-based login evaluation: allow, flag or block each sign-in.",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if enable_docs else None,
    redoc_url="/redoc" if enable_docs else None,
)


cors_origins = get_cors_origins()
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["POST", "GET"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(RiskGateException)
async def riskgate_error_handler(request: Request, exc: RiskGateException) -> JSONResponse:
    """Map expected authentication outcomes to HTTP responses."""
    request_id = getattr(request.state, "request_id", None)
    status_code = STATUS_BY_ERROR_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(
            "Request failed",
            extra={"request_id": request_id, "error": exc.code},
        )
    else:
        logger.info(
            "Request refused",
            extra={"request_id": request_id, "error": exc.code},
        )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.code,
            message=exc.message,
            details=exc.details or None,
            request_id=request_id,
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors.

    Logs full exception for debugging but returns sanitized message to client.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.exception(
        "Unexpected error",
        extra={"request_id": request_id, "error_type": type(exc).__name__}
    )
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="internal_error",
            message="An unexpected error occurred",
            request_id=request_id,
        ).model_dump(),
    )


# =============================================================================
# MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to each request for tracing."""
    request_id = f"req_{uuid4().hex[:12]}"
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _client_host(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.post(
    "/signup",
    response_model=SignupResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
    summary="Register an identity",
)
def signup(
    body: SignupRequest,
    service: RiskGateService = Depends(get_service),
) -> SignupResponse:
    return service.signup(body)


@app.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        403: {"description": "Blocked by risk; score disclosed", "model": ErrorResponse},
        503: {"description": "Attempt ledger unavailable", "model": ErrorResponse},
    },
    summary="Evaluate a login attempt",
)
def login(
    body: LoginRequest,
    request: Request,
    user_agent: Optional[str] = Header(default=None),
    service: RiskGateService = Depends(get_service),
) -> LoginResponse:
    """Verify credentials, score the attempt and open a session.

    Flagged attempts get a session and a warning; blocked attempts get
    a 403 whose details carry the score.
    """
    response = service.login(body, client_host=_client_host(request), user_agent=user_agent)

    logger.info(
        "Login evaluation complete",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "score": response.score,
            "outcome": response.outcome,
        }
    )
    return response


@app.post("/logout", response_model=LogoutResponse)
def logout(
    token: str = Depends(bearer_token),
    service: RiskGateService = Depends(get_service),
) -> LogoutResponse:
    if not service.logout(token):
        raise HTTPException(status_code=401, detail="invalid_session_token")
    return LogoutResponse()


@app.get("/history", response_model=HistoryResponse)
def history(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    token: str = Depends(bearer_token),
    service: RiskGateService = Depends(get_service),
) -> HistoryResponse:
    """Attempt history of the session's identity, newest first."""
    identity = service.sessions.identity_for(token)
    if identity is None:
        raise HTTPException(status_code=401, detail="invalid_session_token")
    return service.history(identity, limit=limit)


@app.post(
    "/recovery/request",
    response_model=RecoveryCodeResponse,
    responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def recovery_request(
    body: RecoveryCodeRequest,
    service: RiskGateService = Depends(get_service),
) -> RecoveryCodeResponse:
    return service.request_recovery(body)


@app.post(
    "/recovery/verify",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def recovery_verify(
    body: RecoveryVerifyRequest,
    request: Request,
    user_agent: Optional[str] = Header(default=None),
    service: RiskGateService = Depends(get_service),
) -> LoginResponse:
    return service.verify_recovery(
        body, client_host=_client_host(request), user_agent=user_agent
    )


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "service": "riskgate-gateway"}


@app.get("/ready")
async def readiness_check() -> dict:
    """Readiness check endpoint.

    Returns 503 until the service singleton is initialized.
    """
    if ServiceManager._instance is None:
        raise HTTPException(status_code=503, detail="not_ready")
    return {"status": "ready", "service": "riskgate-gateway"}

