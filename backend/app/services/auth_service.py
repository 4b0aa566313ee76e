"""Auth Service 도메인 서비스 레이어입니다. 가입, 자격 증명 검증, 토큰 발급을 담당합니다."""

import logging
from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import DuplicateIdentity, InvalidCredentials, ValidationError
from app.models.user import User
from app.schemas.user import LoginRequest, RegisterRequest
from app.utils.permissions import SELF_REGISTER_ROLES

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# bcrypt는 기존 Node 버전 DB의 해시를 검증하기 위해 유지한다.
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

# 존재하지 않는 사용자에도 동일한 해시 검증 비용을 치르기 위한 값
_DUMMY_HASH = pwd_context.hash("not-a-real-password")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(password, hashed_password)
    except ValueError:
        # 알 수 없는 해시 형식은 불일치로 취급한다.
        return False


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"id": user.id, "username": user.username, "role": user.role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def register_user(db: Session, data: RegisterRequest) -> User:
    username = (data.username or "").strip()
    email = (data.email or "").strip()
    full_name = (data.full_name or "").strip()
    if not username or not email or not data.password or not full_name or not data.role:
        raise ValidationError("All fields are required")
    if data.role not in SELF_REGISTER_ROLES:
        raise ValidationError("Invalid role")

    existing = db.query(User.id).filter(or_(User.username == username, User.email == email)).first()
    if existing:
        raise DuplicateIdentity()

    user = User(
        username=username,
        email=email,
        password=hash_password(data.password),
        full_name=full_name,
        role=data.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # 동시 가입으로 유니크 제약에 걸린 경우
        db.rollback()
        raise DuplicateIdentity()
    db.refresh(user)
    logger.info("registered user id=%s username=%s role=%s", user.id, user.username, user.role)
    return user


def authenticate(db: Session, data: LoginRequest) -> User:
    if not data.username or not data.password:
        raise ValidationError("Username and password required")

    user = db.query(User).filter(User.username == data.username).first()
    if user is None:
        verify_password(data.password, _DUMMY_HASH)
        logger.info("login failed for username=%s", data.username)
        raise InvalidCredentials()
    if not verify_password(data.password, user.password):
        logger.info("login failed for username=%s", data.username)
        raise InvalidCredentials()
    return user
