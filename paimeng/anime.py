"""Reverse image search replies from trace.moe and SauceNAO."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Mapping

from paimeng.message import MessageSegment, image_segment, text_segment

log = logging.getLogger(__name__)

DEFAULT_TRACEMOE_API = "api.trace.moe"
DEFAULT_SAUCENAO_API = "saucenao.com"

_SAUCENAO_LABELS = {
    "author_name": "作者",
    "author_url": "作者url",
    "creator": "制作人",
    "jp_name": "jp_name",
    "eng_name": "eng_name",
    "pixiv_id": "pixiv_id",
    "source": "源",
}


def _string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _float(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return int(_float(value))
    return 0


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, Mapping) else None


def _array(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _api_base(api: str, name: str) -> str:
    if not api:
        raise ValueError(f"api of {name} is empty")
    if not api.startswith("http://") and not api.startswith("https://"):
        api = "https://" + api
    if not api.endswith("/"):
        api += "/"
    return api


def _trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    quotient = int(value / divisor)
    return quotient, value - quotient * divisor


def format_similarity(value: Any, scale: float = 1.0) -> str:
    """Similarity as a percentage with two decimals, marked when 90 or lower."""
    if value is None:
        return "未知"
    org = _float(value) * scale
    text = f"{org:.2f}%"
    if org <= 90:
        text += "(较低)"
    return text


def format_episode(value: Any) -> str:
    """The episode number, or "?" when unknown."""
    if value is None:
        return "?"
    return str(_int(value))


def format_time(value: Any) -> str:
    """A position in seconds as "MM:SS"."""
    if value is None:
        return "未知时间"
    seconds = int(math.floor(_float(value)))
    minutes, rest = _trunc_divmod(seconds, 60)
    return f"{minutes:02d}:{rest:02d}"


def format_title(result: Mapping[str, Any]) -> str:
    """The native title and one translated title, or the file name."""
    anilist = _get(result, "anilist")
    if not isinstance(anilist, Mapping) or "title" not in anilist:
        return _string(_get(result, "filename"))
    title = anilist["title"]
    text = _string(_get(title, "native"))
    for key in ("chinese", "english", "romaji"):
        translated = _get(title, key)
        if translated is not None:
            text += "\n" + _string(translated)
            break
    return text


def tracemoe_url(api: str, image_url: str) -> str:
    """The trace.moe search URL for an image."""
    return f"{_api_base(api, 'trace.moe')}search?anilistInfo&cutBorders&url={image_url}"


def tracemoe_message(
    data: Mapping[str, Any] | None, show_adult: bool, nickname: str
) -> list[MessageSegment]:
    """The reply for a trace.moe response: title, still and position."""
    data = data or {}
    results = _array(data.get("result"))
    if not results:
        log.warning("result is empty, error=%s", _string(data.get("error")))
        return [text_segment(f"{nickname}也不知道")]
    result = results[0] if isinstance(results[0], Mapping) else {}
    is_adult = bool(_get(result.get("anilist"), "isAdult"))
    picture = image_segment(_string(result.get("image")))
    if is_adult and not show_adult:
        picture = text_segment("\n不给你看图\n")
    text = (
        f"相似度：{format_similarity(result.get('similarity'), 100)}\n"
        f"位置：第{format_episode(result.get('episode'))}集的{format_time(result.get('from'))}"
    )
    return [text_segment(format_title(result)), picture, text_segment(text)]


def saucenao_url(api: str, image_url: str, api_key: str) -> str:
    """The SauceNAO search URL for an image."""
    return (
        f"{_api_base(api, 'SauceNAO')}search.php?db=999&output_type=2"
        f"&url={image_url}&api_key={api_key}"
    )


def saucenao_message(data: Mapping[str, Any] | None, nickname: str) -> list[MessageSegment]:
    """The reply for a SauceNAO response: title, thumbnail and details."""
    data = data or {}
    results = _array(data.get("results"))
    if not results:
        log.warning("result is empty, error=%s", _string(data.get("error")))
        return [text_segment(f"{nickname}也不知道")]
    result = results[0] if isinstance(results[0], Mapping) else {}
    header = result.get("header")
    info = result.get("data")
    title = _string(_get(info, "title"))
    picture = image_segment(_string(_get(header, "thumbnail")))
    text = f"相似度：{format_similarity(_get(header, 'similarity'), 1)}\n"
    if isinstance(info, Mapping):
        for key, value in info.items():
            if key == "ext_urls":
                urls = _array(value)
                if urls:
                    text += f"大图：{_string(urls[0])}\n"
            elif key in _SAUCENAO_LABELS:
                text += f"{_SAUCENAO_LABELS[key]}：{_string(value)}\n"
    return [text_segment(title), picture, text_segment(text)]