ORIGINAL_MESSAGE = "@original"
DISCORD_EPOCH_MS = 1420070400000
TOKEN_LIFETIME_SECONDS = 15 * 60


class InteractionType:
    PING: int = 1
    APPLICATION_COMMAND: int = 2
    MESSAGE_COMPONENT: int = 3


class InteractionResponseType:
    PONG: int = 1
    CHANNEL_MESSAGE_WITH_SOURCE: int = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE: int = 5
    DEFERRED_UPDATE_MESSAGE: int = 6
    UPDATE_MESSAGE: int = 7


class ComponentType:
    ACTION_ROW: int = 1
    BUTTON: int = 2
    SELECT_MENU: int = 3


class InteractionFlag:
    SUPRESS_EMBEDS: int = 1 << 2
    EPHEMERAL: int = 1 << 6
    SUPPRESS_NOTIFICATIONS: int = 1 << 12


# Discord JSON error codes meaning the interaction token can no longer be used
TOKEN_ERROR_CODES = frozenset({10015, 10062, 50027})
