"""Domain error taxonomy.

Every error carries the HTTP status it is translated to by the API layer,
so services can raise them without knowing about FastAPI.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """Missing or malformed input."""
    status_code = 400


class ConflictError(StorefrontError):
    """Duplicate unique value, e.g. an already registered email."""
    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class AuthError(StorefrontError):
    """Missing credential."""
    status_code = 401


class ForbiddenError(AuthError):
    """Invalid or expired credential."""
    status_code = 403


class InsufficientStockError(StorefrontError):
    status_code = 409

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for {product_id} "
            f"(requested {requested}, available {available})"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidTransitionError(StorefrontError):
    status_code = 409

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move order from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class EmptyCatalogError(StorefrontError):
    status_code = 404

    def __init__(self, message: str = "Catalog is empty"):
        super().__init__(message)


class RequestTimeoutError(StorefrontError):
    status_code = 504
