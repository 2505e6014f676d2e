from enum import Enum

from .errors import InvalidTransitionError, ValidationError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(f"Unknown order status '{value}' (expected one of: {allowed})")

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]


TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def ensure_transition(current: OrderStatus, requested: OrderStatus) -> None:
    """Raise InvalidTransitionError unless ``current -> requested`` is a legal move."""
    if requested not in TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, requested.value)
