import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pymongo.database import Database

from ballot_api.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY, USERS_COLLECTION_NAME
from ballot_api.database import get_database
from ballot_api.exceptions import AuthenticationError, ForbiddenError
from ballot_api.models import CurrentUser

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# Create JWT access token
def create_access_token(data: dict, expires_delta: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_delta)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried in the token's ``sub`` claim."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        raise AuthenticationError("Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token")
    return str(user_id)


def get_token_subject(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Authenticated user id from the bearer token; the user may no longer exist."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token not found")
    return decode_access_token(credentials.credentials)


def get_current_user(
    user_id: str = Depends(get_token_subject),
    db: Database = Depends(get_database),
) -> CurrentUser:
    try:
        user = db[USERS_COLLECTION_NAME].find_one({"_id": ObjectId(user_id)})
    except InvalidId:
        raise AuthenticationError("Invalid token")
    if not user:
        raise AuthenticationError("User not found")

    return CurrentUser(
        id=str(user["_id"]),
        role=user.get("role", "voter"),
    )


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Single admin gate for every roster mutation; trusts only the token subject."""
    if not current_user.is_admin:
        logger.warning(f"User {current_user.id} attempted an admin operation")
        raise ForbiddenError("User does not have admin role")
    return current_user
