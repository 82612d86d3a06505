from fastapi import status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from shared.utils.app_status_code import AppStatusCode
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken

security = HTTPBearer()


def verify_token(token: str) -> UserToken:
    """Decode a JWT issued by the auth service."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, PydanticValidationError):
        return error_response(
            message="Invalid or expired token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UserToken:
    user_data = verify_token(credentials.credentials)

    if not user_data.org_id:
        return error_response(
            message="Organization context is required",
            status_code=str(AppStatusCode.UNAUTHORIZED_ACTION),
            http_status=status.HTTP_403_FORBIDDEN
        )
    return user_data
