from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from typing import Optional
import logging

import config
from errors import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

# Tokens are issued by the external identity provider, never by this service
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


class Identity(BaseModel):
    id: str
    email: Optional[str] = None


def decode_identity(token: str) -> Identity:
    if not config.AUTH_JWT_SECRET:
        raise ConfigurationError("Identity verification is not configured")
    try:
        payload = jwt.decode(
            token,
            config.AUTH_JWT_SECRET,
            algorithms=[config.AUTH_JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthenticationError("Invalid token")
    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError("Invalid token")
    return Identity(id=user_id, email=payload.get("email"))


def get_current_identity(token: str = Depends(oauth2_scheme)) -> Identity:
    return decode_identity(token)
