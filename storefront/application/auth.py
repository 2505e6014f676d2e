from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from storefront.core.logging_config import get_logger
from storefront.domain.errors import AuthError, ConflictError, ForbiddenError, ValidationError
from storefront.domain.models import User
from .schemas import RegisterRequest
from .security import create_access_token, decode_access_token, hash_password, verify_password

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6

def normalize_email(email: str) -> str:
    # Format is checked by EmailStr on the request schemas
    return (email or "").strip().lower()

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def _by_email(self, email: str):
        return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def register(self, data: RegisterRequest) -> User:
        email = normalize_email(data.email)
        if len(data.password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self._by_email(email) is not None:
            raise ConflictError("Email is already registered")

        user = User(
            email=email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            self.db.rollback()
            raise ConflictError("Email is already registered")
        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def login(self, email: str, password: str) -> tuple[str, User]:
        user = self._by_email(normalize_email(email))
        if user is None or not verify_password(password or "", user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthError("Invalid email or password")
        return create_access_token(user.id, user.email), user

    def user_from_token(self, token: str) -> User:
        """Resolve a bearer token to its user; ForbiddenError when invalid, expired or orphaned."""
        claims = decode_access_token(token)
        if not claims:
            raise ForbiddenError("Invalid or expired token")
        try:
            user = self.db.get(User, int(claims["sub"]))
        except (KeyError, ValueError):
            user = None
        if user is None:
            raise ForbiddenError("Invalid or expired token")
        return user
