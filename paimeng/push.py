"""Pushing a message to a set of friends and groups."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol

from paimeng.message import MessageSegment

log = logging.getLogger(__name__)


class Bot(Protocol):
    """What a push needs from a connected bot."""

    def get_friend_list(self) -> list[Mapping[str, Any]]: ...

    def get_group_list(self) -> list[Mapping[str, Any]]: ...

    def send_private_message(self, user_id: int, message: list[MessageSegment]) -> Any: ...

    def send_group_message(self, group_id: int, message: list[MessageSegment]) -> Any: ...

    def call_action(self, action: str, params: Mapping[str, Any]) -> Mapping[str, Any] | None: ...


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def intersect_ids(
    ids: Iterable[int], records: Iterable[Mapping[str, Any]], key: str
) -> list[int]:
    """IDs found under ``key`` in ``records`` that are also in ``ids``, in record order."""
    wanted = set(ids)
    values = (_as_int(record.get(key)) for record in records)
    return [value for value in values if value in wanted]


@dataclass
class Target:
    """A message and the friends and groups it is to be pushed to."""

    message: list[MessageSegment] = field(default_factory=list)
    friends: list[int] = field(default_factory=list)
    groups: list[int] = field(default_factory=list)
    do_not_check: bool = False
    bot: Bot | None = None

    def _require_bot(self) -> Bot:
        if self.bot is None:
            raise RuntimeError("no bot to push with")
        return self.bot

    def check_friends(self) -> None:
        """Keep only the friends the bot actually has."""
        self.friends = intersect_ids(self.friends, self._require_bot().get_friend_list(), "user_id")

    def check_groups(self) -> None:
        """Keep only the groups the bot has joined."""
        self.groups = intersect_ids(self.groups, self._require_bot().get_group_list(), "group_id")

    def self_check(self) -> None:
        self.check_groups()
        self.check_friends()

    def send(self) -> None:
        """Send the message to every friend and every group."""
        bot = self._require_bot()
        if not self.do_not_check:
            self.self_check()
        if self.friends or self.groups:
            log.info("开始推送消息，目标私聊：%s，目标群聊：%s", self.friends, self.groups)
        for friend in self.friends:
            bot.send_private_message(friend, self.preprocess_private_message(self.message))
        for group in self.groups:
            bot.send_group_message(group, self.preprocess_group_message(group, self.message))

    def preprocess_private_message(self, message: list[MessageSegment]) -> list[MessageSegment]:
        """Drop mentions, which mean nothing in a private chat."""
        return [segment for segment in message if segment.type != "at"]

    def preprocess_group_message(
        self, group_id: int, message: list[MessageSegment]
    ) -> list[MessageSegment]:
        """Drop a mention of everyone if the group does not allow one now."""
        result = list(message)
        for index, segment in enumerate(result):
            if segment.type != "at" or segment.data.get("qq") != "all":
                continue
            response = self._require_bot().call_action(
                "get_group_at_all_remain", {"group_id": group_id}
            ) or {}
            data = response.get("data") or {}
            allowed = bool(data.get("can_at_all")) and _as_int(
                data.get("remain_at_all_count_for_uin")
            ) > 0
            if _as_int(response.get("retcode", 0)) == 0 and not allowed:
                log.info("在群%d中无法@全体成员或当日次数已全部用完，将去除@全体成员发送", group_id)
                del result[index]
                break
        return result