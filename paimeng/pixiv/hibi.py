"""Reading illustration details returned by HibiAPI."""

from __future__ import annotations

import json
from typing import Any, Mapping

from paimeng.pixiv.picture import PictureInfo, hibi_api_base
from paimeng.textutil import merge_string_slices


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
            try:
                return int(float(value))
            except ValueError:
                return 0
    return 0


def _dig(value: Any, *keys: Any) -> Any:
    for key in keys:
        if isinstance(key, int):
            if not isinstance(value, list) or not 0 <= key < len(value):
                return None
            value = value[key]
        else:
            if not isinstance(value, Mapping):
                return None
            value = value.get(key)
    return value


def illust_url(api: str, pid: int) -> str:
    """The HibiAPI URL giving the details of one illustration."""
    return f"{hibi_api_base(api)}api/pixiv/illust?id={pid}"


def parse_illust(illust: Mapping[str, Any], p: int = 0) -> PictureInfo:
    """The picture for page ``p`` of an illustration record."""
    picture = PictureInfo(
        title=_string(illust.get("title")),
        pid=_int(illust.get("id")),
        p=p,
        author=_string(_dig(illust, "user", "name")),
        uid=_int(_dig(illust, "user", "id")),
    )
    tags = []
    for tag in illust.get("tags") or []:
        if not isinstance(tag, Mapping):
            continue
        for key in ("name", "translated_name"):
            if tag.get(key) is not None:
                tags.append(_string(tag[key]))
    picture.tags = merge_string_slices(tags)
    page_count = _int(illust.get("page_count"))
    if page_count == 1:
        picture.url = _string(_dig(illust, "meta_single_page", "original_image_url"))
    elif page_count > p:
        picture.url = _string(_dig(illust, "meta_pages", p, "image_urls", "original"))
    return picture


def parse_illust_pages(data: Mapping[str, Any] | None, pid: int) -> list[PictureInfo]:
    """One picture for every page of the illustration in a HibiAPI response.

    Raises LookupError, carrying the API's message when it gives one, if the
    response holds no illustration, and ValueError if it has no pages.
    """
    data = data or {}
    illust = data.get("illust")
    if illust is None:
        message = _string(_dig(data, "error", "user_message"))
        raise LookupError(message or "illust is not found")
    page_count = _int(illust.get("page_count"))
    if page_count <= 0:
        raise ValueError("page_count is zero")
    pictures = [PictureInfo() for _ in range(page_count)]
    pictures[0] = parse_illust(illust, 0)
    if page_count > 1:
        urls = [
            url
            for url in (_dig(page, "image_urls", "original") for page in illust.get("meta_pages") or [])
            if url is not None
        ]
        for index, (picture, url) in enumerate(zip(pictures, urls)):
            picture.pid = pid
            picture.p = index
            picture.url = _string(url)
    return pictures