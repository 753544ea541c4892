from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core import get_logger
from app.domain.errors import AuthError, ConflictError, ValidationError
from app.domain.models import User
from app.infrastructure.passwords import hash_password, verify_password

logger = get_logger(__name__)

class AuthService:
    def __init__(self, db: Session, password_min_length: int = 6):
        self.db = db
        self.password_min_length = password_min_length

    @staticmethod
    def normalize_email(email) -> str:
        return str(email or "").strip().lower()

    def get(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.email == email)).first()

    def register(self, email, password, name=None) -> User:
        email = self.normalize_email(email)
        password = str(password or "")
        name = str(name or "").strip() or None

        if not email:
            raise ValidationError("Email is required")
        if len(password) < self.password_min_length:
            raise ValidationError(f"Password must be at least {self.password_min_length} characters")
        if self.find_by_email(email):
            raise ConflictError("Email already registered")

        user = User(email=email, name=name, password_hash=hash_password(password), role="customer")
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise ConflictError("Email already registered") from exc
        self.db.refresh(user)
        logger.info("User registered", extra={'extra_fields': {'user_id': user.id}})
        return user

    def authenticate(self, email, password) -> User:
        email = self.normalize_email(email)
        password = str(password or "")
        if not email or not password:
            raise AuthError("Email and password are required", status_code=400)

        user = self.find_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthError("Invalid credentials")
        return user
