"""Authentication API router."""

from fastapi import APIRouter, Request, status
from sqlalchemy.exc import SQLAlchemyError

from happy_thoughts.deps import AppSettings, DbSession, Hasher, Issuer
from happy_thoughts.ids import UserId
from happy_thoughts.logger import get_logger, log_exception
from happy_thoughts.rate_limit import RateLimiter
from happy_thoughts.schemas.auth import LoginRequest, LoginResponse, SignupRequest, SignupResponse
from happy_thoughts.services import users as user_service
from happy_thoughts.utils.exceptions import (
    Unauthenticated,
    ValidationFailed,
    raise_store_error,
    raise_too_many_requests,
)

router = APIRouter(tags=["auth"])
logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _get_client_ip(request: Request, trust_proxy: bool) -> str:
    """Extract client IP from request, considering proxies.

    NOTE: X-Forwarded-For is only trusted when TRUST_PROXY=true to prevent
    IP spoofing attacks that could bypass rate limiting.
    """
    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP (original client)
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _check_rate_limit(limiter: RateLimiter, client_ip: str, error_msg: str) -> None:
    """Check rate limit and raise TooManyRequests if exceeded."""
    allowed, retry_after = limiter.is_allowed(client_ip)
    if not allowed:
        logger.warning("Rate limit exceeded", client_ip=client_ip)
        raise_too_many_requests(error_msg, retry_after=retry_after)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: Request,
    data: SignupRequest,
    db: DbSession,
    hasher: Hasher,
    settings: AppSettings,
) -> SignupResponse:
    """Register a new user with email and password."""
    client_ip = _get_client_ip(request, settings.trust_proxy)
    _check_rate_limit(
        request.app.state.signup_rate_limiter,
        client_ip,
        "Too many signup attempts. Please try again later.",
    )

    try:
        user = await user_service.create_user(db, hasher, data.email, data.password)
    except user_service.EmailAlreadyRegisteredError as exc:
        logger.info("Signup rejected: duplicate email", client_ip=client_ip)
        raise ValidationFailed(details=str(exc)) from exc
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Signup failed", client_ip=client_ip)
        raise_store_error("Could not create user", cause=exc)

    logger.info("User signed up", user_id=str(user.id), client_ip=client_ip)
    return SignupResponse(email=user.email, id=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    data: LoginRequest,
    db: DbSession,
    hasher: Hasher,
    issuer: Issuer,
    settings: AppSettings,
) -> LoginResponse:
    """Login with email and password."""
    client_ip = _get_client_ip(request, settings.trust_proxy)
    limiter: RateLimiter = request.app.state.login_rate_limiter
    _check_rate_limit(limiter, client_ip, "Too many login attempts. Please try again later.")

    try:
        user = await user_service.authenticate_user(db, hasher, data.email, data.password)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Login lookup failed", client_ip=client_ip)
        raise_store_error("Login failed", cause=exc)

    if user is None:
        logger.warning("Failed login attempt", client_ip=client_ip)
        raise Unauthenticated(INVALID_CREDENTIALS)

    logger.info("Successful login", user_id=str(user.id), client_ip=client_ip)
    limiter.reset(client_ip)

    token = issuer.issue(UserId(user.id))
    return LoginResponse(id=user.id, email=user.email, token=token)
