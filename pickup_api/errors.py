from typing import List, Optional


class PickupError(Exception):
    """Base for every error the API turns into a response."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {'error': self.message, 'code': self.code}


class ValidationError(PickupError):
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        self.fields = fields or []
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.fields:
            data['fields'] = self.fields
        return data


class NotFoundError(PickupError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")


class ConflictError(PickupError):
    """Another writer changed the game between our read and our write."""

    status_code = 409
    code = "CONFLICT"

    def __init__(self, operation: str, game_id: str):
        self.operation = operation
        self.game_id = game_id
        super().__init__(
            f"{operation} on game {game_id} lost a concurrent update, retry the request"
        )


class StoreError(PickupError):
    status_code = 500
    code = "STORE_ERROR"

    def __init__(self, operation: str, game_id: Optional[str], reason: str, transient: bool = False):
        self.operation = operation
        self.game_id = game_id
        self.reason = reason
        self.transient = transient
        target = f" on game {game_id}" if game_id else ""
        super().__init__(f"{operation}{target} failed: {reason}")


class ConditionFailed(Exception):
    """Raised by the store when a conditional update's precondition does not hold."""

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Precondition failed for game {game_id}")
