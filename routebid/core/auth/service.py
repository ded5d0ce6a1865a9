# routebid/core/auth/service.py
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from routebid.config.settings import settings
from routebid.shared.database.models import User

logger = logging.getLogger(__name__)

# bcrypt ignora todo lo que pase de 72 bytes
BCRYPT_MAX_BYTES = 72

REQUIRED_CLAIMS = ("user_id", "role")

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds
)


def _bcrypt_input(password: str) -> str:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES].decode('utf-8', errors='ignore')


class AuthService:
    """
    Credenciales de clientes y conductores.

    Los tokens llevan ``user_id``, ``email`` y ``role``; el rol decide qué
    endpoints de pedidos, ofertas y seguimiento puede usar el portador.
    """

    @staticmethod
    def get_password_hash(password: str) -> str:
        return pwd_context.hash(_bcrypt_input(password))

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        try:
            return pwd_context.verify(_bcrypt_input(plain_password), hashed_password)
        except ValueError as e:
            # Hash corrupto o con otro esquema
            logger.warning(f"Hash de contraseña no verificable: {e}")
            return False

    @staticmethod
    def token_claims(user: User) -> Dict[str, Any]:
        return {"user_id": user.id, "email": user.email, "role": user.role}

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Firmar los claims con expiración en UTC"""
        missing = [claim for claim in REQUIRED_CLAIMS if claim not in data]
        if missing:
            raise ValueError(f"Faltan claims requeridos en el token: {', '.join(missing)}")

        issued_at = datetime.now(timezone.utc)
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

        to_encode = dict(data, iat=issued_at, exp=issued_at + expires_delta)
        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    @classmethod
    def issue_token(cls, user: User, expires_delta: Optional[timedelta] = None) -> str:
        return cls.create_access_token(cls.token_claims(user), expires_delta)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Claims del token, o None si la firma no es válida o ya expiró"""
        try:
            return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        except JWTError as e:
            logger.debug(f"Token rechazado: {e}")
            return None

    @classmethod
    def authenticate(cls, db: Session, email: str, password: str) -> Optional[User]:
        """Usuario con ese email y contraseña; None si alguno no coincide"""
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not cls.verify_password(password, user.password_hash):
            logger.info(f"🔒 Login fallido para {email}")
            return None
        return user
