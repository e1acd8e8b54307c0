from fastapi import status


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationFailed(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class Unauthorized(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    message = "Already exists"


class StateConflict(DomainError):
    """Operation is not legal in the entity's current state."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Operation not allowed in current state"


class EmptyCartError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Корзина пуста, невозможно создать заказ"


class OrderCreationError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to create order"
