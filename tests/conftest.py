import os
import tempfile

# logs.py opens its file sink at import time
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "interaction-lifecycle-tests", "test.log"))

from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402

from http_client import HttpClient  # noqa: E402
from interactions import InteractionType, ComponentType  # noqa: E402

APPLICATION_ID = "111111111111111111"
# Snowflake created at 2021-05-01T00:00:00Z
INTERACTION_ID = str((1619827200000 - 1420070400000) << 22)


def make_payload(interaction_type: int, **overrides):
    payload = {"id": INTERACTION_ID,
               "application_id": APPLICATION_ID,
               "token": "interaction-token",
               "type": interaction_type,
               "version": 1,
               "guild_id": "222",
               "channel_id": "333",
               "member": {"user": {"id": "444", "username": "someone"}, "nick": "nick", "roles": ["555"]}}
    if interaction_type == InteractionType.APPLICATION_COMMAND:
        payload["data"] = {"id": "666", "name": "play", "options": [{"name": "query", "type": 3, "value": "song"}]}
    elif interaction_type == InteractionType.MESSAGE_COMPONENT:
        payload["data"] = {"custom_id": "confirm", "component_type": ComponentType.BUTTON}
        payload["message"] = {"id": "777", "channel_id": "333", "content": "Are you sure?", "flags": 0,
                              "author": {"id": APPLICATION_ID, "username": "bot", "bot": True}}
    payload.update(overrides)
    return payload


@pytest.fixture
def ping_payload():
    return make_payload(InteractionType.PING)


@pytest.fixture
def command_payload():
    return make_payload(InteractionType.APPLICATION_COMMAND)


@pytest.fixture
def component_payload():
    return make_payload(InteractionType.MESSAGE_COMPONENT)


@pytest.fixture
def http_client():
    return Mock(spec=HttpClient)
