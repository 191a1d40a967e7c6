import pytest

from paimeng.anime import (
    format_episode,
    format_similarity,
    format_time,
    format_title,
    saucenao_message,
    saucenao_url,
    tracemoe_message,
    tracemoe_url,
)


def test_similarity_missing():
    assert format_similarity(None) == "未知"


def test_similarity_high_has_no_mark():
    assert format_similarity(92.5, 1) == "92.50%"


def test_similarity_low_is_marked():
    assert format_similarity("50", 1).endswith("(较低)")
    assert format_similarity(0.5, 100).endswith("%(较低)")


def test_episode():
    assert format_episode(None) == "?"
    assert format_episode(12) == "12"
    assert format_episode("7") == "7"


def test_time():
    assert format_time(None) == "未知时间"
    assert format_time(125.7) == "02:05"


def test_title_falls_back_to_filename():
    assert format_title({"filename": "ep1.mp4", "anilist": 123}) == "ep1.mp4"


def test_title_prefers_chinese():
    result = {"anilist": {"title": {"native": "N", "chinese": "C", "english": "E"}}}
    assert format_title(result) == "N\nC"


def test_title_uses_english_then_romaji():
    assert format_title({"anilist": {"title": {"native": "N", "chinese": None, "english": "E"}}}) == "N\nE"
    assert format_title({"anilist": {"title": {"native": "N", "romaji": "R"}}}) == "N\nR"


def test_tracemoe_url():
    assert tracemoe_url("api.trace.moe", "u") == "https://api.trace.moe/search?anilistInfo&cutBorders&url=u"


def test_tracemoe_url_empty_api():
    with pytest.raises(ValueError):
        tracemoe_url("", "u")


def test_tracemoe_message_no_result():
    message = tracemoe_message({"result": [], "error": "x"}, True, "派蒙")
    assert [seg.data["text"] for seg in message] == ["派蒙也不知道"]


def _tracemoe(adult):
    return {
        "result": [
            {
                "anilist": {"isAdult": adult, "title": {"native": "N", "chinese": "C"}},
                "image": "https://example.com/a.jpg",
                "similarity": 0.5,
                "episode": 3,
                "from": 10.2,
            }
        ]
    }


def test_tracemoe_message_shows_image():
    message = tracemoe_message(_tracemoe(False), False, "派蒙")
    assert message[0].data["text"] == "N\nC"
    assert message[1].type == "image"
    assert message[1].data["file"] == "https://example.com/a.jpg"
    assert "第3集的" in message[2].data["text"]
    assert message[2].data["text"].startswith("相似度：")


def test_tracemoe_message_hides_adult_image():
    message = tracemoe_message(_tracemoe(True), False, "派蒙")
    assert message[1].type == "text"
    assert message[1].data["text"] == "\n不给你看图\n"
    assert tracemoe_message(_tracemoe(True), True, "派蒙")[1].type == "image"


def test_saucenao_url():
    url = saucenao_url("saucenao.com", "u", "placeholder")
    assert url == "https://saucenao.com/search.php?db=999&output_type=2&url=u&api_key=placeholder"


def test_saucenao_message_no_result():
    message = saucenao_message({"results": []}, "我")
    assert message[0].data["text"] == "我也不知道"


def test_saucenao_message_details_in_order():
    data = {
        "results": [
            {
                "header": {"similarity": "95.5", "thumbnail": "https://example.com/t.jpg"},
                "data": {
                    "title": "T",
                    "pixiv_id": 42,
                    "ext_urls": ["https://example.com/big", "https://example.com/other"],
                    "author_name": "A",
                    "ignored": "x",
                },
            }
        ]
    }
    message = saucenao_message(data, "我")
    assert message[0].data["text"] == "T"
    assert message[1].data["file"] == "https://example.com/t.jpg"
    text = message[2].data["text"]
    lines = text.strip("\n").split("\n")
    assert lines[1:] == ["pixiv_id：42", "大图：https://example.com/big", "作者：A"]
    assert "(较低)" not in lines[0]
    assert "ignored" not in text