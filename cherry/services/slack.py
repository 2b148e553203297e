"""Slack incoming-webhook messages.

Message mirrors the webhook payload: text, mrkdwn, thread_ts and blocks.
See https://api.slack.com/reference/messaging/payload and
https://api.slack.com/reference/messaging/blocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cherry.core.result import Err, Ok, Result
from cherry.platform.http import HttpClient, HttpError, RealHttpClient

__all__ = ["Block", "Message", "SlackClient", "TextObject"]


@dataclass(frozen=True, slots=True)
class TextObject:
    """Composition text object ("plain_text" or "mrkdwn")."""

    text: str
    type: str = "mrkdwn"

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True, slots=True)
class Block:
    """A layout block. Only "section", "divider" and "context" are modelled."""

    type: str = "section"
    text: TextObject | None = None
    fields: tuple[TextObject, ...] = ()
    elements: tuple[TextObject, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type}
        if self.text is not None:
            out["text"] = self.text.to_payload()
        if self.fields:
            out["fields"] = [f.to_payload() for f in self.fields]
        if self.elements:
            out["elements"] = [e.to_payload() for e in self.elements]
        return out


@dataclass(frozen=True, slots=True)
class Message:
    text: str
    markdown: bool = False
    thread: str = ""
    blocks: tuple[Block, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict[str, Any]:
        out: dict[str, Any] = {"text": self.text, "mrkdwn": self.markdown}
        if self.thread:
            out["thread_ts"] = self.thread
        if self.blocks:
            out["blocks"] = [b.to_payload() for b in self.blocks]
        return out


class SlackClient:
    def __init__(self, http: HttpClient | None = None, timeout: float = 10.0) -> None:
        self._http = http if http is not None else RealHttpClient(timeout=timeout)

    def send(self, webhook: str, message: Message) -> Result[None, HttpError]:
        """POST message to an incoming-webhook URL."""
        result = self._http.post_json(webhook, message.to_payload())
        if isinstance(result, Err):
            return result
        return Ok(None)
