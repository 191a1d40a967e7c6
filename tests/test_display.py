from datetime import datetime, timedelta

import pytest

from paimeng.message import MessageSegment, at_segment, image_segment, text_segment
from paimeng.note.parse import NoMatchError, RemindTask
from paimeng.note.display import (
    describe_task,
    gen_brief_message,
    gen_brief_time,
    split_note_request,
    task_time_list,
)

NOW = datetime(2022, 3, 15, 10, 0, 0)


def test_brief_time_today():
    assert gen_brief_time(NOW.replace(hour=18, minute=30), NOW) == "18:30"


def test_brief_time_other_day_and_year():
    other_day = gen_brief_time(NOW + timedelta(days=1), NOW)
    other_year = gen_brief_time(NOW.replace(year=2023), NOW)
    assert other_day.endswith("日10:00")
    assert other_year.startswith("2023年")


def test_brief_message_text_is_limited():
    text = "一二三四五六七八九十十一"
    assert gen_brief_message([text_segment(text)]) == text[:10] + "..."
    assert gen_brief_message([text_segment("short")]) == "short"


def test_brief_message_segments():
    assert gen_brief_message([at_segment(123), image_segment("a.png")]) == "图片"
    assert gen_brief_message([at_segment(123)]) == "@123"
    assert gen_brief_message([MessageSegment("face", {"id": "1"})]) == "[CQ:face,id=1]..."
    assert gen_brief_message([]) == "类型消息..."


def test_time_list_once():
    at = NOW.replace(hour=18, minute=30)
    task = RemindTask(is_once=True, run_at=at)
    assert task_time_list(task, NOW) == gen_brief_time(at, NOW)


def test_time_list_passed_and_unknown():
    passed = RemindTask(is_once=True, run_at=NOW - timedelta(hours=1))
    assert task_time_list(passed, NOW) == "已经过预定时间"
    assert task_time_list(RemindTask(spec="nonsense"), NOW) == "未知"


def test_time_list_repeating_shows_two():
    result = task_time_list(RemindTask(spec="@every 10m0s"), NOW)
    assert result.count(",") == 1
    assert result.endswith("...")


def test_describe_group_task():
    task = RemindTask(id=4, user_id=7, group_id=42, content="hi", spec="0 8 * * *")
    text = describe_task(task, NOW)
    assert text.startswith("事件ID：4")
    assert "\n目标：群42\n设置人：7" in text
    assert text.endswith("简要内容：hi")


def test_describe_private_task_has_no_target():
    text = describe_task(RemindTask(id=1, user_id=7, content="hi", spec="0 8 * * *"), NOW)
    assert "目标" not in text


def test_split_note_request():
    assert split_note_request("今天18:30提醒我看前瞻直播") == ("今天18:30", "我", "看前瞻直播")
    when, target, content = split_note_request("后天8点20提醒群123456该起床啦")
    assert (target, content) == ("群123456", "该起床啦")


def test_split_note_request_no_match():
    with pytest.raises(NoMatchError):
        split_note_request("nothing here")