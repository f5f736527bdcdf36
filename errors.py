from typing import Any


class InteractionException(Exception):
    pass


class MalformedPayload(InteractionException):
    pass


class InvalidForVariant(InteractionException):
    def __init__(self, operation: str, variant: str):
        super().__init__(f"{operation} is not valid for {variant} interactions")
        self.operation = operation
        self.variant = variant


class AlreadyResponded(InteractionException):
    def __init__(self, interaction_id: str, state: Any):
        super().__init__(f"Interaction {interaction_id} already has an initial response ({state})")
        self.interaction_id = interaction_id
        self.state = state


class TransportFailure(InteractionException):
    status: int | None
    code: int | None
    body: Any

    def __init__(self, message: str, status: int | None = None, code: int | None = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.code = code
        self.body = body


class TokenExpired(TransportFailure):
    pass
