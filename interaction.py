import asyncio

from functools import partial
from typing import Any, Callable, Dict

from http_client import HttpClient
from interaction_record import InteractionRecord, InteractionVariant, MessageComponent, variant_name
from interactions import InteractionResponseType
from models import Message
from response_state import ResponseState, ResponseStateMachine
from logs import logger as base_logger

logger = base_logger.bind(context="Interaction")


def build_initial_response(response_type: int, options: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Build a new callback body from caller options, never touching the options themselves."""
    response: Dict[str, Any] = {"type": response_type}
    if options:
        response["data"] = {k: v for k, v in options.items() if k != "type"}
    return response


class Interaction:
    """A received interaction and the operations used to answer it.

    Exactly one initial response (message, deferred message, deferred update or
    update) can be sent. The state moves as soon as the operation is called, so a
    concurrent second attempt is rejected locally while the first is still in
    flight, and a failed send is not rolled back. Use follow-ups to retry.
    """
    record: InteractionRecord
    _http_client: HttpClient
    _state: ResponseStateMachine

    def __init__(self, payload: Dict[str, Any] | str | bytes, http_client: HttpClient):
        self.record = InteractionRecord.from_payload(payload)
        self._http_client = http_client
        self._state = ResponseStateMachine(self.record.id)

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def token(self) -> str:
        return self.record.token

    @property
    def application_id(self) -> str:
        return self.record.application_id

    @property
    def variant(self) -> InteractionVariant:
        return self.record.variant

    @property
    def state(self) -> ResponseState:
        return self._state.state

    @property
    def responded(self) -> bool:
        return self._state.responded

    @property
    def followup_count(self) -> int:
        return self._state.followups

    async def _call(self, fn: Callable[..., Any], *args) -> Any:
        return await asyncio.get_running_loop().run_in_executor(None, partial(fn, *args))

    async def _initial_response(self, operation: str, response_type: int, options: Dict[str, Any] | None = None) -> None:
        self._state.begin(operation, response_type, self.record.variant)
        logger.info(f"{operation} interaction {self.id}")
        await self._call(self._http_client.create_interaction_response, self.id, self.token,
                         build_initial_response(response_type, options))

    async def acknowledge(self) -> None:
        """Acknowledge without replying (Message Component only)."""
        await self._initial_response("acknowledge", InteractionResponseType.DEFERRED_UPDATE_MESSAGE)

    async def defer(self, flags: int = 0) -> None:
        """Show a "thinking" placeholder; pass InteractionFlag.EPHEMERAL (64) to keep the eventual reply private."""
        await self._initial_response("defer", InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE,
                                     {"flags": flags or 0})

    async def defer_update(self) -> None:
        """Defer an update of the source message (Message Component only)."""
        await self._initial_response("defer_update", InteractionResponseType.DEFERRED_UPDATE_MESSAGE)

    async def create_message(self, options: Dict[str, Any] | None = None) -> None:
        await self._initial_response("create_message", InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, options)

    respond = create_message

    async def edit_parent(self, options: Dict[str, Any] | None = None) -> None:
        """Replace the message carrying the component (Message Component only)."""
        await self._initial_response("edit_parent", InteractionResponseType.UPDATE_MESSAGE, options)

    async def create_followup(self, options: Dict[str, Any] | None = None) -> Message | None:
        count = self._state.record_followup()
        logger.info(f"Followup #{count} for interaction {self.id}")
        return await self._call(self._http_client.execute_webhook, self.application_id, self.token, options)

    async def edit(self, message_id: str, options: Dict[str, Any]) -> Message:
        """Edit a sent message; "@original" targets the initial response and fails remotely if it was ephemeral."""
        return await self._call(self._http_client.edit_webhook_message, self.application_id, self.token, message_id, options)

    async def delete(self, message_id: str) -> None:
        await self._call(self._http_client.delete_webhook_message, self.application_id, self.token, message_id)

    @property
    def source_message(self) -> Message | None:
        match self.record.variant:
            case MessageComponent(source_message=message):
                return message
            case _:
                return None

    def __str__(self):
        return f"Interaction: {self.id}, Variant: {variant_name(self.record.variant)}, State: {self.state.name}"
