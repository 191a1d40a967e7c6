"""Pixiv picture records and the helpers that fetch and describe them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from paimeng.note.cron import parse_duration

PIXIV_API = "https://api.lolicon.app/setu/v2"
DEFAULT_TIMEOUT = 10.0
DEFAULT_PROXY = "i.pixiv.re"
DEFAULT_HIBI_API = "api.obfs.dev"
DEFAULT_SCALE = {"lolicon": 5, "omega": 0}

R18_TAG = "R-18"
_NO_SESE = "不可以涩涩！"
_PIXIV_HOSTS = ("i.pximg.net", "i.pixiv.net")

_CHINESE_NUMBERS = {
    "一": 1,
    "两": 2,
    "二": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
    "十": 10,
}

_INT = re.compile(r"[+-]?[0-9]+")
_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)
_ASCII = re.compile(r"""[A-Za-z0-9_+,=~!@#<>\[\]{}:/.?'"$%&*()\-\\]+""")


def _is_japanese(char: str) -> bool:
    return 0x3040 <= ord(char) <= 0x31FF


def _is_korean(char: str) -> bool:
    return 0xAC00 <= ord(char) <= 0xD7AF


def _is_chinese(char: str) -> bool:
    return 0x4E00 <= ord(char) <= 0x9FD5


def is_cn_or_en(text: str) -> bool:
    """Whether a tag is Chinese or plain ASCII, and holds no Japanese or Korean."""
    if any(_is_japanese(c) or _is_korean(c) for c in text):
        return False
    if any(_is_chinese(c) for c in text):
        return True
    return _ASCII.fullmatch(text) is not None


@dataclass
class PictureInfo:
    """A Pixiv picture: either a URL, or a PID and page to look one up by."""

    title: str = ""
    url: str = ""
    pid: int = 0
    p: int = 0
    tags: list[str] = field(default_factory=list)
    author: str = ""
    uid: int = 0
    src: str = ""

    def allowed(self, allow_r18: bool) -> bool:
        """Whether the picture may be shown under the current R-18 setting."""
        return allow_r18 or R18_TAG not in self.tags

    def describe(self, allow_r18: bool) -> str:
        """The caption sent along with the picture."""
        if not self.allowed(allow_r18):
            return _NO_SESE
        tags = [tag for tag in self.tags if is_cn_or_en(tag)]
        tip = f"PID: {self.pid}"
        if self.p:
            tip += f"(p{self.p})"
        if self.author:
            tip += f"\n作者: {self.author}"
        if self.uid:
            tip += f"\nUID: {self.uid}"
        if tags:
            tip += "\n标签: " + ",".join(tags)
        return tip

    def replace_url_to_proxy(self, proxy: str) -> None:
        """Point the picture's URL at a reverse proxy of Pixiv's image hosts."""
        if not self.url or not proxy:
            return
        for host in _PIXIV_HOSTS:
            self.url = self.url.replace(host, proxy)


def cmd_num(text: str) -> int:
    """Number of pictures asked for; 1 unless a positive number is given."""
    if text in _CHINESE_NUMBERS:
        return _CHINESE_NUMBERS[text]
    if not _INT.fullmatch(text):
        return 1
    value = int(text)
    if value <= 0 or value > _INT64_MAX or value < _INT64_MIN:
        return 1
    return value


def hibi_api_base(api: str) -> str:
    """Normalise the HibiAPI address to a scheme-qualified base ending in "/"."""
    if not api:
        raise ValueError("API of HibiAPI is empty")
    if not api.startswith("http://") and not api.startswith("https://"):
        api = "https://" + api
    if not api.endswith("/"):
        api += "/"
    return api


def timeout_from_config(value: str) -> float:
    """Download timeout in seconds; 10 when unset, invalid or under a second."""
    if not value:
        return DEFAULT_TIMEOUT
    try:
        seconds = parse_duration(value)
    except ValueError:
        return DEFAULT_TIMEOUT
    if seconds < 1:
        return DEFAULT_TIMEOUT
    return seconds


def clean_tags(tags: Iterable[str]) -> list[str]:
    """Drop empty tags, keeping the order of the rest."""
    return [tag for tag in tags if tag]


def lolicon_request(tags: Iterable[str], num: int, is_r18: bool, proxy: str) -> dict[str, Any]:
    """The JSON body asking the Lolicon API for ``num`` random pictures."""
    body: dict[str, Any] = {}
    if num:
        body["num"] = num
    tag_list = list(tags)
    if tag_list:
        body["tag"] = tag_list
    body["size"] = ["original"]
    if proxy:
        body["proxy"] = proxy
    body["r18"] = 1 if is_r18 else 0
    return body


def parse_lolicon_response(data: Mapping[str, Any] | None, is_r18: bool) -> list[PictureInfo]:
    """Pictures from a Lolicon API response, leaving out R-18 ones unless asked for."""
    pictures = []
    for item in (data or {}).get("data") or []:
        tags = list(item.get("tags") or [])
        if not is_r18 and (item.get("r18") or R18_TAG in tags):
            continue
        urls = item.get("urls") or {}
        pictures.append(
            PictureInfo(
                title=item.get("title") or "",
                url=urls.get("original") or "",
                tags=tags,
                pid=int(item.get("pid") or 0),
                p=int(item.get("p") or 0),
                author=item.get("author") or "",
                uid=int(item.get("uid") or 0),
            )
        )
    return pictures