"""Text shown to users about their reminders."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Iterable

from paimeng.message import MessageSegment, extract_plain_text, parse_message
from paimeng.note.parse import AlreadyPassedError, NoMatchError, RemindTask
from paimeng.note.schedule import gen_schedule

_REQUEST = re.compile(r"(.+)提醒(我|本群|群[0-9]+)(.*)")

_SEGMENT_NAMES = {
    "image": "图片",
    "record": "一段语言",
    "video": "一段视频",
    "share": "分享",
}


def gen_brief_time(t: datetime, now: datetime | None = None) -> str:
    """Short form of a time, with the date only when it is not today."""
    now = now or datetime.now()
    text = t.strftime("%H:%M")
    if now.year != t.year:
        return f"{t.year}年{t.month}月{t.day}日" + text
    if now.month != t.month or now.day != t.day:
        return f"{t.month}月{t.day}日" + text
    return text


def gen_brief_message(message: Iterable[MessageSegment]) -> str:
    """A few words summing up a message."""
    segments = list(message)
    text = extract_plain_text(segments)
    if text:
        return text[:10] + "..." if len(text) > 10 else text
    selected = MessageSegment("")
    for segment in segments:
        selected = segment
        if segment.type != "at":
            break
    if selected.type == "face":
        return str(selected) + "..."
    if selected.type == "at":
        return "@" + selected.data.get("qq", "")
    if selected.type in _SEGMENT_NAMES:
        return _SEGMENT_NAMES[selected.type]
    return selected.type + "类型消息..."


def task_time_list(task: RemindTask, now: datetime | None = None) -> str:
    """When a task fires next, and the time after that for repeating ones."""
    now = now or datetime.now()
    try:
        schedule = gen_schedule(task, now)
    except AlreadyPassedError:
        return "已经过预定时间"
    except ValueError:
        return "未知"
    nxt = schedule.next(now)
    if nxt is None:
        return "无效时间"
    text = gen_brief_time(nxt, now)
    if task.is_once:
        return text
    following = schedule.next(nxt + timedelta(seconds=1))
    if following is not None:
        text += "," + gen_brief_time(following, now) + "..."
    return text


def describe_task(task: RemindTask, now: datetime | None = None) -> str:
    """The listing of a task shown to users."""
    text = f"事件ID：{task.id}"
    if task.group_id:
        text += f"\n目标：群{task.group_id}\n设置人：{task.user_id}"
    text += (
        f"\n提醒时间：{task_time_list(task, now)}"
        f"\n简要内容：{gen_brief_message(parse_message(task.content))}"
    )
    return text


def split_note_request(text: str) -> tuple[str, str, str]:
    """Split "<time>提醒<target><content>" into its time, target and content."""
    match = _REQUEST.match(text)
    if not match:
        raise NoMatchError("no regex matched")
    when, target = match.group(1), match.group(2)
    marker = "提醒" + target
    content = text[text.index(marker) + len(marker):].strip()
    return when, target, content