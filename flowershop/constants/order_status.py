from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    delivering = "delivering"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"
    refunded = "refunded"


ALLOWED_TRANSITIONS = {
    "pending": ["processing", "cancelled"],
    "processing": ["delivering", "cancelled"],
    "delivering": ["completed", "cancelled"],
    "completed": [],
    "cancelled": []
}

# statuses an admin may set directly
ADMIN_STATUSES = [s.value for s in OrderStatus]
PAYMENT_STATUSES = [s.value for s in PaymentStatus]

# the only state a customer may cancel from
USER_CANCELLABLE = {OrderStatus.pending.value}

TERMINAL_STATUSES = {
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, [])
