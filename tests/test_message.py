import pytest

from paimeng.message import (
    MessageSegment,
    at_segment,
    extract_plain_text,
    image_segment,
    image_url,
    image_urls,
    message_to_string,
    parse_message,
    text_segment,
)


def test_at_segment_cq_code():
    assert str(at_segment(123)) == "[CQ:at,qq=123]"


def test_text_is_escaped():
    assert str(text_segment("[a]&")) == "&#91;a&#93;&amp;"


@pytest.mark.parametrize(
    "message",
    [
        [text_segment("hello "), at_segment("all"), text_segment(" [x], & y")],
        [image_segment("file:///tmp/a,b.png"), text_segment("tail")],
        [MessageSegment("face", {"id": "1"})],
    ],
)
def test_round_trip(message):
    assert parse_message(message_to_string(message)) == message


def test_parse_mixed():
    result = parse_message("hello[CQ:face,id=1]")
    assert result == [text_segment("hello"), MessageSegment("face", {"id": "1"})]


def test_parse_empty():
    assert parse_message("") == []


def test_extract_plain_text_skips_other_segments():
    message = [text_segment("a"), at_segment(5), text_segment("b")]
    assert extract_plain_text(message) == "ab"
    assert extract_plain_text(None) == ""


def test_image_url_only_for_images():
    image = MessageSegment("image", {"file": "x", "url": "http://example.com/a.png"})
    assert image_url(image) == "http://example.com/a.png"
    assert image_url(MessageSegment("video", {"url": "http://example.com/v"})) == ""


def test_image_urls_collects_non_empty():
    message = [
        MessageSegment("image", {"url": "http://example.com/1"}),
        image_segment("no-url"),
        text_segment("t"),
        MessageSegment("image", {"url": "http://example.com/2"}),
    ]
    assert image_urls(message) == ["http://example.com/1", "http://example.com/2"]
    assert image_urls(None) == []