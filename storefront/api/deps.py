from fastapi import Depends, Request
from sqlalchemy.orm import Session
from storefront.application.auth import AuthService
from storefront.application.inventory import SqlInventoryLedger
from storefront.application.orders import Deadline
from storefront.core.logging_config import set_request_context
from storefront.core_settings import get_settings
from storefront.domain.errors import AuthError, ForbiddenError
from storefront.domain.models import User
from storefront.domain.seed_data import INVENTORY
from storefront.infrastructure.cache import CatalogCache, get_catalog_cache
from storefront.infrastructure.db import get_db

BEARER_PREFIX = "Bearer "

def catalog_cache() -> CatalogCache:
    return get_catalog_cache()

def request_deadline() -> Deadline:
    return Deadline(get_settings().REQUEST_TIMEOUT_SECONDS)

def inventory_ledger(db: Session = Depends(get_db)) -> SqlInventoryLedger:
    return SqlInventoryLedger(db, baseline=INVENTORY, default=get_settings().DEFAULT_STOCK)

def bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise AuthError("Missing token")
    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise AuthError("Missing token")
    return token

def current_user(token: str = Depends(bearer_token), db: Session = Depends(get_db)) -> User:
    user = AuthService(db).user_from_token(token)
    set_request_context(user_id=str(user.id))
    return user

def current_admin(user: User = Depends(current_user)) -> User:
    """Catalog and stock writes are limited to the ADMIN_EMAILS allow-list."""
    if user.email.lower() not in get_settings().admin_emails:
        raise ForbiddenError("Administrator access required")
    return user
