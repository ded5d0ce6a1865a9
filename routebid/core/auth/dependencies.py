from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List
from pydantic import ValidationError

from routebid.config.database import get_db
from routebid.shared.database.models import User
from routebid.core.auth.service import AuthService
from routebid.core.auth.schemas import TokenPayload
from routebid.core.exceptions import ForbiddenError

security = HTTPBearer()

class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class AuthorizationError(ForbiddenError):
    """Rol rechazado por los guards del router; mismo formato que ForbiddenError"""
    def __init__(self, message: str = "No tienes permisos suficientes", **context):
        super().__init__(message, **context)

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Obtener usuario actual desde el token"""

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Token inválido o expirado")

    try:
        token = TokenPayload(**payload)
    except ValidationError:
        raise AuthenticationError("Payload del token inválido")

    user = db.query(User).filter(User.id == token.user_id).first()

    if user is None:
        raise AuthenticationError("Usuario no encontrado")

    if not user.is_active:
        raise AuthenticationError("Usuario inactivo")

    return user

def require_roles(allowed_roles: List[str]):
    """Factory para crear dependency que requiere roles específicos"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"Rol '{current_user.role}' no autorizado. Roles permitidos: {allowed_roles}",
                required_role=allowed_roles[0] if len(allowed_roles) == 1 else allowed_roles
            )
        return current_user
    return role_checker

# Dependencies específicas por rol
def get_customer_user(current_user: User = Depends(require_roles(["customer"]))):
    """Dependency para clientes"""
    return current_user

def get_driver_user(current_user: User = Depends(require_roles(["driver"]))):
    """Dependency para conductores"""
    return current_user
