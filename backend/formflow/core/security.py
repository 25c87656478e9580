from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
import hmac
import secrets

from formflow.core.config import settings
from formflow.core.exceptions import UnauthorizedError

ACCESS_TOKEN_TYPE = "access"
PRIVATE_SESSION_TYPE = "private_user"
ADMIN_SESSION_TYPE = "admin"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password"""
    if not hashed_password:
        return False
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def generate_verification_token() -> str:
    """Random token mailed to new users"""
    return secrets.token_hex(32)


def generate_reset_token() -> str:
    """Second-factor token issued once the OTP has been verified"""
    return secrets.token_hex(32)


def generate_otp() -> str:
    """Six digit numeric one-time code (100000-999999)"""
    return str(100000 + secrets.randbelow(900000))


def constant_time_equals(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return hmac.compare_digest(a.encode('utf-8'), b.encode('utf-8'))


def create_token(subject: str, token_type: str, expires_delta: timedelta,
                 extra: Optional[Dict[str, Any]] = None) -> str:
    """Create a signed session token"""
    to_encode: Dict[str, Any] = dict(extra or {})
    to_encode.update({
        "sub": subject,
        "type": token_type,
        "exp": datetime.utcnow() + expires_delta,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: str, email: str) -> str:
    """Session token for a form owner"""
    return create_token(
        user_id,
        ACCESS_TOKEN_TYPE,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        extra={"email": email},
    )


def create_private_session_token(private_user_id: str, owner_id: str) -> str:
    """Session token for a private-form respondent"""
    return create_token(
        private_user_id,
        PRIVATE_SESSION_TYPE,
        timedelta(minutes=settings.PRIVATE_SESSION_EXPIRE_MINUTES),
        extra={"owner": owner_id},
    )


def create_admin_session_token(username: str) -> str:
    return create_token(
        username,
        ADMIN_SESSION_TYPE,
        timedelta(minutes=settings.ADMIN_SESSION_EXPIRE_MINUTES),
    )


def decode_token(token: str, expected_type: str) -> Dict[str, Any]:
    """Decode a session token and check its type"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Could not validate credentials")

    if payload.get("type") != expected_type:
        raise UnauthorizedError("Invalid token type")
    if not payload.get("sub"):
        raise UnauthorizedError("Invalid token payload")

    return payload
