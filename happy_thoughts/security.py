"""Security utilities for JWT and password hashing."""

from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from happy_thoughts.ids import InvalidIdentifierError, UserId, parse_user_id
from happy_thoughts.logger import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """bcrypt hashing with a configurable work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=rounds))

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. Never raises."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend one verification on a fixed hash; always False.

        Used when the account does not exist so that the response time does not
        reveal whether an email is registered.
        """
        try:
            bcrypt.checkpw(password.encode("utf-8"), self._dummy_hash)
        except (ValueError, TypeError):
            pass
        return False


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidSignature(TokenError):
    """Token signature does not match the signing secret."""


class TokenExpired(TokenError):
    """Token is past its embedded expiry."""


class MalformedToken(TokenError):
    """Token cannot be decoded or carries no usable subject."""


class TokenIssuer:
    """Issues and verifies stateless HS256 access tokens."""

    def __init__(self, secret_key: str, *, algorithm: str = "HS256", expires_delta: timedelta) -> None:
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, subject: UserId, *, expires_delta: timedelta | None = None) -> str:
        """Create a signed token for ``subject``."""
        now = datetime.now(UTC)
        payload = {
            "sub": str(subject),
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self.expires_delta),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> UserId:
        """Verify ``token`` and return its subject."""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            logger.debug("JWT token expired")
            raise TokenExpired("Token has expired") from exc
        except jwt.InvalidSignatureError as exc:
            logger.warning("JWT signature mismatch")
            raise InvalidSignature("Signature verification failed") from exc
        except jwt.PyJWTError as exc:
            logger.warning(
                "JWT decode failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise MalformedToken(str(exc)) from exc

        try:
            return parse_user_id(payload["sub"])
        except InvalidIdentifierError as exc:
            raise MalformedToken("Token subject is not a user id") from exc
