"""Chat message segments and their CQ-code text form."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

_CQ_CODE = re.compile(r"\[CQ:([A-Za-z0-9\-_.]+)((?:,[A-Za-z0-9\-_.]+=[^,\]]*)*),?\]")


def _escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("[", "&#91;").replace("]", "&#93;")


def _escape_param(text: str) -> str:
    return _escape_text(text).replace(",", "&#44;")


def _unescape(text: str) -> str:
    return (
        text.replace("&#44;", ",")
        .replace("&#91;", "[")
        .replace("&#93;", "]")
        .replace("&amp;", "&")
    )


@dataclass
class MessageSegment:
    """One part of a chat message: a type and its string parameters."""

    type: str
    data: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.type == "text":
            return _escape_text(self.data.get("text", ""))
        params = "".join(
            f",{key}={_escape_param(value)}" for key, value in sorted(self.data.items())
        )
        return f"[CQ:{self.type}{params}]"


def text_segment(text: str) -> MessageSegment:
    """A plain-text segment."""
    return MessageSegment("text", {"text": text})


def image_segment(file: str) -> MessageSegment:
    """An image segment referring to a file, URL or base64 data."""
    return MessageSegment("image", {"file": file})


def at_segment(qq: int | str) -> MessageSegment:
    """A segment mentioning a user (or "all")."""
    return MessageSegment("at", {"qq": str(qq)})


def parse_message(text: str) -> list[MessageSegment]:
    """Parse a CQ-code string into message segments."""
    segments: list[MessageSegment] = []
    position = 0
    for match in _CQ_CODE.finditer(text):
        if match.start() > position:
            segments.append(text_segment(_unescape(text[position:match.start()])))
        data: dict[str, str] = {}
        for param in match.group(2).split(",")[1:]:
            key, _, value = param.partition("=")
            data[key] = _unescape(value)
        segments.append(MessageSegment(match.group(1), data))
        position = match.end()
    if position < len(text):
        segments.append(text_segment(_unescape(text[position:])))
    return segments


def message_to_string(message: Iterable[MessageSegment] | None) -> str:
    """The CQ-code form of a whole message."""
    return "".join(str(segment) for segment in message or ())


def extract_plain_text(message: Iterable[MessageSegment] | None) -> str:
    """Concatenate the text of every text segment."""
    return "".join(
        segment.data.get("text", "") for segment in message or () if segment.type == "text"
    )


def image_url(segment: MessageSegment) -> str:
    """The URL of an image segment, or "" for any other segment."""
    if segment.type != "image":
        return ""
    return segment.data.get("url", "")


def image_urls(message: Iterable[MessageSegment] | None) -> list[str]:
    """URLs of every image in a message, in order."""
    return [url for url in map(image_url, message or ()) if url]