import dotenv
import os

from typing import Tuple

DEFAULT_LOGFILE = "/tmp/interaction-lifecycle/interaction-lifecycle.log"


class Config:
    _api_token: str | None
    _api_version: str
    _api_url: str
    _request_timeout: float
    _allowed_mentions: Tuple[str, ...]
    _logfile: str

    def __init__(self, env_file: str = ".env"):
        dotenv.load_dotenv(env_file)
        self._api_token = os.getenv("API_TOKEN")
        self._api_version = os.getenv("API_VERSION", default="10")
        self._api_url = os.getenv("API_URL", default="https://discord.com/api").rstrip("/")
        self._request_timeout = float(os.getenv("REQUEST_TIMEOUT", default=10))
        self._allowed_mentions = tuple(m.strip() for m in os.getenv("ALLOWED_MENTIONS", default="users").split(",") if m.strip())
        self._logfile = os.getenv("LOG_FILE", default=DEFAULT_LOGFILE)

    @property
    def api_token(self):
        return self._api_token

    @property
    def api_version(self):
        return self._api_version

    @property
    def api_url(self):
        return self._api_url

    @property
    def request_timeout(self):
        return self._request_timeout

    @property
    def allowed_mentions(self):
        return self._allowed_mentions

    @property
    def logfile(self):
        return self._logfile
