"""Thread settings (greeting, get-started button, persistent menu)."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, model_validator


class ThreadSettingKind(str, Enum):
    GREETING = "greeting"
    GET_STARTED_BUTTON = "get_started_button"
    PERSISTENT_MENU = "persistent_menu"


class ThreadSettingOp(str, Enum):
    SET = "set"
    CLEAR = "clear"


class ThreadSetting(BaseModel):
    """A single set/clear request against ``me/thread_settings``.

    ``payload`` shape depends on ``kind``:

    - greeting: ``{"text": "..."}``
    - get_started_button: ``{"payload": "GET_STARTED"}``
    - persistent_menu: ``{"call_to_actions": [button, ...]}``
    """

    kind: ThreadSettingKind
    op: ThreadSettingOp = ThreadSettingOp.SET
    payload: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _payload_required_for_set(self) -> "ThreadSetting":
        if self.op is ThreadSettingOp.SET and not self.payload:
            raise ValueError(f"payload is required to set {self.kind.value}")
        return self

    @classmethod
    def greeting(cls, text: str) -> "ThreadSetting":
        return cls(kind=ThreadSettingKind.GREETING, payload={"text": text})

    @classmethod
    def get_started_button(cls, payload: str) -> "ThreadSetting":
        return cls(
            kind=ThreadSettingKind.GET_STARTED_BUTTON,
            payload={"payload": payload},
        )

    @classmethod
    def persistent_menu(cls, call_to_actions: list[dict[str, Any]]) -> "ThreadSetting":
        return cls(
            kind=ThreadSettingKind.PERSISTENT_MENU,
            payload={"call_to_actions": call_to_actions},
        )

    @classmethod
    def clear(cls, kind: ThreadSettingKind) -> "ThreadSetting":
        return cls(kind=kind, op=ThreadSettingOp.CLEAR)

    @property
    def http_method(self) -> str:
        return "POST" if self.op is ThreadSettingOp.SET else "DELETE"

    def to_request_body(self) -> dict[str, Any]:
        """Render the JSON body expected by the thread_settings endpoint."""
        is_set = self.op is ThreadSettingOp.SET
        payload = self.payload or {}

        if self.kind is ThreadSettingKind.GREETING:
            body: dict[str, Any] = {"setting_type": "greeting"}
            if is_set:
                body["greeting"] = {"text": payload["text"]}
            return body

        if self.kind is ThreadSettingKind.GET_STARTED_BUTTON:
            body = {"setting_type": "call_to_actions", "thread_state": "new_thread"}
            if is_set:
                body["call_to_actions"] = [{"payload": payload["payload"]}]
            return body

        body = {"setting_type": "call_to_actions", "thread_state": "existing_thread"}
        if is_set:
            body["call_to_actions"] = list(payload["call_to_actions"])
        return body
