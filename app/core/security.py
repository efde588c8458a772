from jose import JWTError, jwt
from app.config import settings
from app.core.exceptions import UnauthorizedException


def decode_jwt(token: str) -> dict:
    """
    Decode and validate an operator's JWT using the shared SECRET_KEY.

    Tokens are issued elsewhere; this service only verifies them.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (operator id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])

        if payload.get("exp") is None:
            raise UnauthorizedException("Token missing expiration")

        if payload.get("sub") is None:
            raise UnauthorizedException("Token missing subject")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def extract_subject(token: str) -> str:
    """Extract the operator id ('sub' claim) from a JWT"""
    payload = decode_jwt(token)
    return payload["sub"]
