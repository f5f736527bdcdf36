import json

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from errors import MalformedPayload
from interactions import InteractionType, DISCORD_EPOCH_MS, TOKEN_LIFETIME_SECONDS
from models import Member, Message
from logs import logger as base_logger

logger = base_logger.bind(context="InteractionRecord")


@dataclass(frozen=True)
class CommandOption:
    name: str
    type: int | None = None
    value: Any = None
    options: Tuple["CommandOption", ...] = ()

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "CommandOption":
        if not isinstance(raw, dict) or "name" not in raw:
            raise MalformedPayload(f"Command option is missing its name: {raw!r}")
        return cls(name=raw["name"],
                   type=raw.get("type"),
                   value=raw.get("value"),
                   options=tuple(cls.from_payload(o) for o in raw.get("options") or ()))


@dataclass(frozen=True)
class Ping:
    pass


@dataclass(frozen=True)
class SlashCommand:
    name: str
    command_id: str
    options: Tuple[CommandOption, ...] = ()

    def option(self, name: str) -> Any:
        for opt in self.options:
            if opt.name == name:
                return opt.value
        return None


@dataclass(frozen=True)
class MessageComponent:
    component_type: int
    component_id: str
    source_message: Message
    values: Tuple[str, ...] = ()


InteractionVariant = Ping | SlashCommand | MessageComponent


def variant_name(variant: InteractionVariant) -> str:
    return type(variant).__name__


def _data_field(data: Dict[str, Any], key: str, kind: str) -> Any:
    value = data.get(key)
    if value is None:
        raise MalformedPayload(f"{kind} interaction data is missing '{key}'")
    return value


def _parse_variant(payload: Dict[str, Any]) -> InteractionVariant:
    interaction_type = payload.get("type")
    data = payload.get("data")
    match interaction_type:
        case InteractionType.PING:
            return Ping()

        case InteractionType.APPLICATION_COMMAND:
            if not isinstance(data, dict):
                raise MalformedPayload("Slash command interaction has no data block")
            return SlashCommand(name=_data_field(data, "name", "Slash command"),
                                command_id=str(_data_field(data, "id", "Slash command")),
                                options=tuple(CommandOption.from_payload(o) for o in data.get("options") or ()))

        case InteractionType.MESSAGE_COMPONENT:
            if not isinstance(data, dict):
                raise MalformedPayload("Message component interaction has no data block")
            message = payload.get("message")
            if message is None:
                raise MalformedPayload("Message component interaction has no source message")
            return MessageComponent(component_type=_data_field(data, "component_type", "Message component"),
                                    component_id=_data_field(data, "custom_id", "Message component"),
                                    source_message=Message.from_payload(message),
                                    values=tuple(data.get("values") or ()))

        case _:
            raise MalformedPayload(f"Unrecognized interaction type: {interaction_type!r}")


@dataclass(frozen=True, kw_only=True)
class InteractionRecord:
    """Immutable snapshot of an inbound interaction event.

    The token is valid for 15 minutes after the interaction is created and can be
    used to send follow-up messages, but an initial response must be sent within
    3 seconds of receiving the event or the token is invalidated.
    """
    id: str
    application_id: str
    token: str = field(repr=False)
    variant: InteractionVariant
    version: int = 1
    guild_id: str | None = None
    channel_id: str | None = None
    member: Member | None = None
    data: Mapping[str, Any] | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any] | str | bytes) -> "InteractionRecord":
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise MalformedPayload(f"Interaction payload is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise MalformedPayload(f"Interaction payload must be an object, got {type(payload).__name__}")

        for key in ("id", "application_id", "token", "type"):
            if payload.get(key) is None:
                raise MalformedPayload(f"Interaction payload is missing required field '{key}'")

        variant = _parse_variant(payload)
        member = payload.get("member")
        data = payload.get("data")
        record = cls(id=str(payload["id"]),
                     application_id=str(payload["application_id"]),
                     token=payload["token"],
                     variant=variant,
                     version=payload.get("version", 1),
                     guild_id=payload.get("guild_id"),
                     channel_id=payload.get("channel_id"),
                     member=Member.from_payload(member) if member is not None else None,
                     data=MappingProxyType(dict(data)) if isinstance(data, dict) else None)
        logger.log("IN", f"INTERACTION {record.id} ({variant_name(variant)}) guild = {record.guild_id}, channel = {record.channel_id}")
        return record

    @property
    def created_at(self) -> datetime:
        timestamp_ms = (int(self.id) >> 22) + DISCORD_EPOCH_MS
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=TOKEN_LIFETIME_SECONDS)

    def token_valid_at(self, when: datetime) -> bool:
        # Informational only, the remote side is authoritative on expiry
        return when < self.expires_at
