from enum import Enum, unique, auto

from errors import AlreadyResponded, InvalidForVariant
from interaction_record import InteractionVariant, Ping, SlashCommand, MessageComponent, variant_name
from interactions import InteractionResponseType
from logs import logger as base_logger

logger = base_logger.bind(context="ResponseState")


@unique
class ResponseState(Enum):
    UNACKNOWLEDGED = auto()
    DEFERRED = auto()
    RESPONDED = auto()
    UPDATE_DEFERRED = auto()
    UPDATED = auto()


_TRANSITIONS = {
    InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE: ResponseState.DEFERRED,
    InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE: ResponseState.RESPONDED,
    InteractionResponseType.DEFERRED_UPDATE_MESSAGE: ResponseState.UPDATE_DEFERRED,
    InteractionResponseType.UPDATE_MESSAGE: ResponseState.UPDATED,
}

_COMPONENT_ONLY = frozenset({InteractionResponseType.DEFERRED_UPDATE_MESSAGE,
                             InteractionResponseType.UPDATE_MESSAGE})


def allows(variant: InteractionVariant, response_type: int) -> bool:
    match variant:
        case MessageComponent():
            return True
        case Ping() | SlashCommand():
            return response_type not in _COMPONENT_ONLY
        case _:
            raise TypeError(f"Unknown interaction variant: {variant!r}")


class ResponseStateMachine:
    """Tracks the one-shot initial response of a single interaction.

    Follow-up traffic is counted but never moves the state.
    """
    interaction_id: str
    state: ResponseState
    response_type: int | None
    followups: int

    def __init__(self, interaction_id: str):
        self.interaction_id = interaction_id
        self.state = ResponseState.UNACKNOWLEDGED
        self.response_type = None
        self.followups = 0

    @property
    def responded(self) -> bool:
        return self.state is not ResponseState.UNACKNOWLEDGED

    def begin(self, operation: str, response_type: int, variant: InteractionVariant) -> ResponseState:
        if response_type not in _TRANSITIONS:
            raise ValueError(f"Not an initial response type: {response_type}")
        if not allows(variant, response_type):
            logger.warning(f"Rejecting {operation} on {variant_name(variant)} interaction {self.interaction_id}")
            raise InvalidForVariant(operation, variant_name(variant))
        if self.responded:
            logger.warning(f"Rejecting {operation} on interaction {self.interaction_id}, already {self.state.name}")
            raise AlreadyResponded(self.interaction_id, self.state)

        self.state = _TRANSITIONS[response_type]
        self.response_type = response_type
        logger.debug(f"Interaction {self.interaction_id} -> {self.state.name}")
        return self.state

    def record_followup(self) -> int:
        self.followups += 1
        return self.followups

    def __str__(self):
        return f"Interaction: {self.interaction_id}, State: {self.state.name}, Followups: {self.followups}"
