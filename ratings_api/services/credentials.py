"""Password hashing and signed identity tokens.

The signing secret and bcrypt cost are configuration: a CredentialService
is built once from Settings in create_app() and kept on app.state.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import re

from jose import JWTError, jwt
from passlib.context import CryptContext

from ratings_api.errors import Unauthenticated
from ratings_api.models import Role
from ratings_api.settings import Settings

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

_UPPERCASE_RE = re.compile(r"[A-Z]")
_SPECIAL_RE = re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARACTERS)}]")

PASSWORD_POLICY_MESSAGE = (
    "Password must be 8-16 chars, include at least one uppercase and one special character"
)


def check_password_policy(password: str) -> str:
    """Validate a new password and return it unchanged.

    Raises:
        ValueError: If the password is not 8-16 characters long or lacks an
            uppercase letter or a special character.
    """
    if not (PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    if not _UPPERCASE_RE.search(password) or not _SPECIAL_RE.search(password):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return password


@dataclass(frozen=True)
class Identity:
    """Authenticated caller decoded from a bearer token."""

    id: int
    email: str
    role: Role


class CredentialService:
    """bcrypt hashing plus JWT issue/verify bound to one secret."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=7),
        bcrypt_rounds: int = 10,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = lifetime
        self._pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=bcrypt_rounds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        return cls(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            lifetime=settings.jwt_lifetime,
            bcrypt_rounds=settings.bcrypt_rounds,
        )

    def hash_password(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify_password(self, password: str, hashed: str) -> bool:
        try:
            return self._pwd_context.verify(password, hashed)
        except ValueError:
            # Unrecognized or corrupt hash
            return False

    def issue_token(self, identity: Identity) -> str:
        """Sign a token carrying id, email and role."""
        now = datetime.now(timezone.utc)
        claims = {
            "id": identity.id,
            "email": identity.email,
            "role": identity.role.value,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> Identity:
        """Verify signature and expiry and return the carried identity.

        Raises:
            Unauthenticated: On any malformed, tampered or expired token.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise Unauthenticated() from e

        try:
            return Identity(
                id=int(payload["id"]),
                email=str(payload["email"]),
                role=Role(payload["role"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise Unauthenticated() from e
