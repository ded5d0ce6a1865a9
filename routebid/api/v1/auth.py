# routebid/api/v1/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
import logging

from routebid.config.database import get_db
from routebid.core.auth.service import AuthService
from routebid.core.auth.schemas import UserLogin, UserRegister, TokenResponse, UserResponse
from routebid.shared.database.models import User, utcnow
from routebid.core.auth.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=AuthService.issue_token(user),
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


def _authenticate(db: Session, email: str, password: str) -> User:
    user = AuthService.authenticate(db, email, password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email o contraseña incorrectos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo"
        )

    return user


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Registrar un cliente o conductor

    **Returns:**
    - Token de acceso JWT
    - Información del usuario
    """
    email = user_data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El email ya está registrado"
        )

    try:
        user = User(
            email=email,
            password_hash=AuthService.get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            role=user_data.role,
            phone=user_data.phone,
            is_active=True,
            created_at=utcnow()
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except Exception:
        db.rollback()
        raise

    logger.info(f"👤 Usuario registrado {user.email} ({user.role})")
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Endpoint de login para obtener token de acceso

    **Parámetros:**
    - **username**: Email del usuario
    - **password**: Contraseña del usuario
    """
    user = _authenticate(db, form_data.username, form_data.password)
    return _token_response(user)


@router.post("/login-json", response_model=TokenResponse)
async def login_json(
    user_login: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Endpoint de login alternativo que acepta JSON

    **Body:**
    ```json
        {
            "email": "cliente@routebid.com",
            "password": "cliente123"
        }
    """
    user = _authenticate(db, user_login.email, user_login.password)
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Obtener información del usuario actual
    **Headers requeridos:**
    - Authorization: Bearer {token}
    """
    return UserResponse.model_validate(current_user)
