from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from app.config import settings
from app.errors import Forbidden, InvalidToken, Unauthenticated

security = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class CurrentUser:
    """토큰 클레임만으로 구성한 요청 주체.

    역할은 로그인 시점의 값이며 DB 변경은 재로그인 전까지 반영되지 않는다.
    """

    id: int
    username: str
    role: str


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise InvalidToken()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    payload = decode_token(credentials.credentials)
    user_id = payload.get("id")
    username = payload.get("username")
    role = payload.get("role")
    if user_id is None or not username or not role:
        raise InvalidToken()
    try:
        return CurrentUser(id=int(user_id), username=str(username), role=str(role))
    except (TypeError, ValueError):
        raise InvalidToken()


def require_roles(*roles: str):
    def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in roles:
            raise Forbidden()
        return current_user
    return checker
