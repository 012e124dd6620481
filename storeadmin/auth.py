import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from fastapi.security.utils import get_authorization_scheme_param
from jose import jwt, JWTError
from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY, TOKEN_COOKIE
from .models import User
from .schemas import UserCreate, UserOut, UserLogin
from .stores import StoreError, UserStore, get_user_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Use Argon2 for new password hashes but keep bcrypt in the context so existing
# bcrypt-hashed passwords still verify.
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# 🔐 Утилиты
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        # Unrecognised or corrupt hash -> authentication failure, not a 500
        return False


def create_access_token(data: dict, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def token_from_request(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the vf_token cookie."""
    scheme, param = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() == "bearer" and param:
        return param
    return request.cookies.get(TOKEN_COOKIE)


# ✅ Регистрация пользователя
@router.post("/register", response_model=UserOut, status_code=201)
async def register_user(payload: UserCreate, users: UserStore = Depends(get_user_store)):
    if len(payload.password) < 8:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Password must be at least 8 characters long."
        )
    try:
        if await users.find_by_email(payload.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this email already exists"
            )
        user = User(
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            full_name=payload.full_name,
            is_admin=True,
        )
        user = await users.add(user)
    except IntegrityError:
        # Unique constraint lost a race with a concurrent registration
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A user with this email already exists")
    except (SQLAlchemyError, StoreError):
        logger.exception("Registration failed for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database temporarily unavailable, try again later")
    logger.info("Registered user %s", user.email)
    return user


# ✅ Логин (через JSON)
@router.post("/login")
async def login_user(payload: UserLogin, response: Response, users: UserStore = Depends(get_user_store)):
    user = await users.find_by_email(payload.email)

    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    access_token = create_access_token({"sub": user.email})
    # The page gate reads this cookie; API clients use the bearer token
    response.set_cookie(TOKEN_COOKIE, access_token, max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60, path="/", httponly=True, samesite="lax")
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/logout", status_code=204)
async def logout_user(response: Response):
    response.delete_cookie(TOKEN_COOKIE, path="/")
    return


# ✅ Проверка токена
async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    users: UserStore = Depends(get_user_store),
) -> User:
    token = token or request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    payload = decode_access_token(token)
    email = payload.get("sub") if payload else None
    if email is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = await users.find_by_email(email)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_user_from_request(request: Request, users: UserStore) -> Optional[User]:
    """Resolve the user behind the request's token, or None when anonymous."""
    token = token_from_request(request)
    if not token:
        return None
    payload = decode_access_token(token)
    email = payload.get("sub") if payload else None
    if not email:
        return None
    return await users.find_by_email(email)


@router.get("/me", response_model=UserOut)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
