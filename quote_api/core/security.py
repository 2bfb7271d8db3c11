# =============================================================================
# QUOTE API - CORE SECURITY MODULE
# =============================================================================
# File: core/security.py
# Description: Password hashing and JWT management
#              Argon2id for new hashes, bcrypt accepted for legacy accounts
# =============================================================================

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from quote_api.core.config import Settings
from quote_api.core.exceptions import TokenExpiredError, TokenInvalidError


# =============================================================================
# PASSWORD HASHER CONFIGURATION
# =============================================================================

class PasswordManager:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    PASSWORD HASHING MANAGER                              │
    │  Argon2id for new passwords, bcrypt verification for legacy hashes     │
    │  Reports bcrypt hashes as due for rehash on successful login            │
    └─────────────────────────────────────────────────────────────────────────┘

    Accounts carried over from the earlier deployment hold bcrypt hashes
    ("$2b$...") and keep verifying; such logins report needs_rehash.
    """

    def __init__(self, settings: Settings):
        self._argon2_hasher = PasswordHasher(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
            hash_len=32,
            salt_len=16,
        )

        self._bcrypt_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )

        self._preferred_algorithm = settings.password_hash_algorithm

    def hash_password(self, password: str) -> str:
        """
        Hash a password using the configured algorithm.

        Args:
            password: Plain text password to hash

        Returns:
            str: Hashed password string
        """
        if self._preferred_algorithm == "argon2":
            return self._argon2_hasher.hash(password)
        return self._bcrypt_context.hash(password)

    def verify_password(
        self,
        plain_password: str,
        hashed_password: str
    ) -> tuple[bool, bool]:
        """
        Verify a password against its hash with algorithm detection.

        Returns:
            tuple[bool, bool]: (is_valid, needs_rehash)
        """
        needs_rehash = False

        if hashed_password.startswith("$argon2"):
            try:
                self._argon2_hasher.verify(hashed_password, plain_password)
            except (VerifyMismatchError, VerificationError, InvalidHash):
                return False, False
            if self._argon2_hasher.check_needs_rehash(hashed_password):
                needs_rehash = True
            elif self._preferred_algorithm != "argon2":
                needs_rehash = True
            return True, needs_rehash

        if hashed_password.startswith("$2"):
            try:
                is_valid = self._bcrypt_context.verify(plain_password, hashed_password)
            except ValueError:
                return False, False
            if is_valid and self._preferred_algorithm == "argon2":
                needs_rehash = True
            return is_valid, needs_rehash

        # Unknown hash format
        return False, False


# =============================================================================
# JWT TOKEN PAYLOAD MODELS
# =============================================================================

class TokenPayload(BaseModel):
    """
    Decoded bearer token.

    Attributes:
        id: User identifier assigned by the backend
        email: User's email at issuance
        name: User's display name at issuance
        iat: Issued at timestamp
        exp: Expiration timestamp
    """
    id: Union[int, str]
    email: str
    name: str
    iat: datetime
    exp: datetime


# =============================================================================
# JWT TOKEN MANAGER
# =============================================================================

class JWTManager:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    JWT TOKEN MANAGER                                     │
    │  Issues and verifies stateless HS256 tokens with a fixed lifetime      │
    └─────────────────────────────────────────────────────────────────────────┘

    Tokens are never persisted; validity is signature plus expiry only.
    """

    def __init__(self, settings: Settings):
        self._secret_key = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._expire = timedelta(days=settings.jwt_expire_days)

    @property
    def lifetime(self) -> timedelta:
        return self._expire

    def create_token(
        self,
        user_id: Union[int, str],
        email: str,
        name: str,
        issued_at: Optional[datetime] = None,
    ) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: Backend-assigned user id
            email: User's email
            name: User's name
            issued_at: Issuance time (defaults to now)

        Returns:
            str: Encoded JWT token
        """
        now = issued_at or datetime.now(timezone.utc)

        claims: Dict[str, Any] = {
            "id": user_id,
            "email": email,
            "name": name,
            "iat": now,
            "exp": now + self._expire,
        }

        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenPayload:
        """
        Decode and validate a JWT token.

        Raises:
            TokenExpiredError: If token has expired
            TokenInvalidError: If token is malformed or signature is invalid
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            raise TokenInvalidError(details={"error": str(e)})

        if "id" not in payload or "email" not in payload:
            raise TokenInvalidError(details={"error": "missing claims"})

        return TokenPayload(
            id=payload["id"],
            email=payload["email"],
            name=payload.get("name", ""),
            iat=datetime.fromtimestamp(payload.get("iat", 0), tz=timezone.utc),
            exp=datetime.fromtimestamp(payload.get("exp", 0), tz=timezone.utc),
        )
