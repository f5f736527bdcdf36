from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from errors import MalformedPayload
from interactions import InteractionFlag


def _frozen(raw: Dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(raw))


def _require(raw: Dict[str, Any], key: str, kind: str) -> Any:
    if not isinstance(raw, dict):
        raise MalformedPayload(f"{kind} must be an object, got {type(raw).__name__}")
    value = raw.get(key)
    if value is None:
        raise MalformedPayload(f"{kind} is missing required field '{key}'")
    return value


@dataclass(frozen=True, kw_only=True)
class User:
    id: str
    username: str | None = None
    global_name: str | None = None
    bot: bool = False

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "User":
        return cls(id=str(_require(raw, "id", "user")),
                   username=raw.get("username"),
                   global_name=raw.get("global_name"),
                   bot=bool(raw.get("bot", False)))


@dataclass(frozen=True, kw_only=True)
class Member:
    user: User | None
    nick: str | None = None
    roles: Tuple[str, ...] = ()
    joined_at: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Member":
        if not isinstance(raw, dict):
            raise MalformedPayload(f"member must be an object, got {type(raw).__name__}")
        user = raw.get("user")
        return cls(user=User.from_payload(user) if user is not None else None,
                   nick=raw.get("nick"),
                   roles=tuple(raw.get("roles") or ()),
                   joined_at=raw.get("joined_at"),
                   raw=_frozen(raw))

    @property
    def id(self) -> str | None:
        return self.user.id if self.user else None


@dataclass(frozen=True, kw_only=True)
class Message:
    id: str
    channel_id: str | None = None
    author: User | None = None
    content: str = ""
    flags: int = 0
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Message":
        message_id = _require(raw, "id", "message")
        author = raw.get("author")
        return cls(id=str(message_id),
                   channel_id=raw.get("channel_id"),
                   author=User.from_payload(author) if author is not None else None,
                   content=raw.get("content") or "",
                   flags=int(raw.get("flags") or 0),
                   raw=_frozen(raw))

    @property
    def is_ephemeral(self) -> bool:
        return bool(self.flags & InteractionFlag.EPHEMERAL)
