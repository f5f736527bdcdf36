import requests
import json

from config import Config
from errors import TransportFailure, TokenExpired
from interactions import TOKEN_ERROR_CODES
from models import Message
from typing import Dict, Any, List, Tuple
from logs import logger as base_logger

logger = base_logger.bind(context="HttpClient")

# Option keys that steer the request rather than being part of the message body
_CONTROL_KEYS = ("file", "wait", "auth")


def format_allowed_mentions(allowed: Dict[str, Any] | None, default: Dict[str, Any]) -> Dict[str, Any]:
    if allowed is None:
        return default
    result: Dict[str, Any] = {"parse": []}
    if allowed.get("everyone") is True:
        result["parse"].append("everyone")
    for kind in ("roles", "users"):
        value = allowed.get(kind)
        if value is True:
            result["parse"].append(kind)
        elif isinstance(value, (list, tuple)):
            if len(value) > 100:
                raise ValueError(f"Allowed {kind} mentions cannot exceed 100")
            result[kind] = list(value)
    if "replied_user" in allowed:
        result["replied_user"] = bool(allowed["replied_user"])
    return result


def _files(file_opt: Any) -> List[Tuple[str, Tuple[str, bytes]]]:
    if file_opt is None:
        return []
    files = file_opt if isinstance(file_opt, (list, tuple)) else [file_opt]
    return [(f"files[{i}]", (f["name"], f["file"])) for i, f in enumerate(files)]


class HttpClient:
    _api_url: str
    _config: Config
    _default_mentions: Dict[str, Any]

    def __init__(self, config: Config):
        self._config = config
        self._api_url = f"{config.api_url}/v{config.api_version}"
        self._default_mentions = {"parse": list(config.allowed_mentions)}

    def _headers(self, auth: bool = False):
        if auth:
            return {"Authorization": f"Bot {self._config.api_token}"}
        return {}

    def _message_body(self, options: Dict[str, Any] | None) -> Tuple[Dict[str, Any], List[Tuple[str, Tuple[str, bytes]]]]:
        options = dict(options or {})
        files = _files(options.get("file"))
        body = {k: v for k, v in options.items() if k not in _CONTROL_KEYS}
        if "content" in options or "allowed_mentions" in options:
            body["allowed_mentions"] = format_allowed_mentions(options.get("allowed_mentions"), self._default_mentions)
        return body, files

    def _error(self, resp: requests.Response, label: str) -> TransportFailure:
        try:
            body = resp.json()
        except ValueError:
            body = resp.text
        code = body.get("code") if isinstance(body, dict) else None
        message = f"{label} failed with status {resp.status_code}: {body}"
        if resp.status_code == 401 or code in TOKEN_ERROR_CODES:
            logger.warning(f"{label} rejected, interaction token is no longer valid")
            return TokenExpired(message, status=resp.status_code, code=code, body=body)
        logger.error(message)
        return TransportFailure(message, status=resp.status_code, code=code, body=body)

    def request(self, method: str, path: str, label: str, body: Dict[str, Any] | None = None,
                files: List[Tuple[str, Tuple[str, bytes]]] | None = None, auth: bool = False,
                params: Dict[str, Any] | None = None) -> Any:
        kwargs: Dict[str, Any] = {"headers": self._headers(auth), "params": params, "timeout": self._config.request_timeout}
        if files:
            kwargs["data"] = {"payload_json": json.dumps(body)}
            kwargs["files"] = files
        elif body is not None:
            kwargs["json"] = body

        try:
            resp = requests.request(method, f"{self._api_url}{path}", **kwargs)
        except requests.RequestException as e:
            logger.error(f"{label} transport error: {e}")
            raise TransportFailure(f"{label} transport error: {e}") from e

        logger.log("IN", f"{label} GOT STATUS {resp.status_code}")
        if not resp.ok:
            raise self._error(resp, label)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def create_interaction_response(self, interaction_id: str, token: str, response: Dict[str, Any]) -> None:
        label = f"INTERACTION {interaction_id} CALLBACK"
        body: Dict[str, Any] = {"type": response["type"]}
        files: List[Tuple[str, Tuple[str, bytes]]] = []
        if response.get("data") is not None:
            body["data"], files = self._message_body(response["data"])
        logger.log("OUT", f"{label} type = {body['type']}")
        self.request("POST", f"/interactions/{interaction_id}/{token}/callback", label, body=body, files=files)

    def execute_webhook(self, application_id: str, token: str, options: Dict[str, Any] | None = None) -> Message | None:
        options = options or {}
        label = f"WEBHOOK {application_id} EXECUTE"
        body, files = self._message_body(options)
        wait = bool(options.get("wait", False))
        logger.log("OUT", f"{label} wait = {wait}")
        resp = self.request("POST", f"/webhooks/{application_id}/{token}", label, body=body, files=files,
                            auth=bool(options.get("auth", False)), params={"wait": "true"} if wait else None)
        return Message.from_payload(resp) if wait and resp is not None else None

    def edit_webhook_message(self, application_id: str, token: str, message_id: str, options: Dict[str, Any]) -> Message:
        label = f"WEBHOOK {application_id} EDIT {message_id}"
        body, files = self._message_body(options)
        logger.log("OUT", label)
        resp = self.request("PATCH", f"/webhooks/{application_id}/{token}/messages/{message_id}", label, body=body, files=files)
        return Message.from_payload(resp)

    def delete_webhook_message(self, application_id: str, token: str, message_id: str) -> None:
        label = f"WEBHOOK {application_id} DELETE {message_id}"
        logger.log("OUT", label)
        self.request("DELETE", f"/webhooks/{application_id}/{token}/messages/{message_id}", label)
