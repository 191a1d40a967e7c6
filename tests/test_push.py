import pytest

from paimeng.message import at_segment, text_segment
from paimeng.push import Target, intersect_ids


class FakeBot:
    def __init__(self, friends=(), groups=(), at_all=None):
        self.friends = [{"user_id": f} for f in friends]
        self.groups = [{"group_id": g} for g in groups]
        self.at_all = at_all if at_all is not None else {"retcode": 0, "data": {}}
        self.private = []
        self.group = []
        self.actions = []

    def get_friend_list(self):
        return self.friends

    def get_group_list(self):
        return self.groups

    def send_private_message(self, user_id, message):
        self.private.append((user_id, message))

    def send_group_message(self, group_id, message):
        self.group.append((group_id, message))

    def call_action(self, action, params):
        self.actions.append((action, dict(params)))
        return self.at_all


def test_intersect_ids_keeps_record_order():
    records = [{"user_id": 3}, {"user_id": 1}, {"other": 2}, {"user_id": 9}]
    assert intersect_ids([1, 2, 3], records, "user_id") == [3, 1]


def test_send_filters_and_preprocesses():
    bot = FakeBot(friends=[1], groups=[10])
    target = Target(
        message=[at_segment("all"), text_segment("hi")],
        friends=[1, 2],
        groups=[10, 11],
        bot=bot,
    )
    target.send()
    assert target.friends == [1]
    assert target.groups == [10]
    assert bot.private == [(1, [text_segment("hi")])]
    assert bot.group == [(10, [text_segment("hi")])]
    assert bot.actions == [("get_group_at_all_remain", {"group_id": 10})]


def test_at_all_kept_when_allowed():
    bot = FakeBot(
        at_all={"retcode": 0, "data": {"can_at_all": True, "remain_at_all_count_for_uin": 3}}
    )
    target = Target(bot=bot)
    message = [at_segment("all"), text_segment("x")]
    assert target.preprocess_group_message(5, message) == message


def test_at_all_kept_on_failed_call():
    bot = FakeBot(at_all={"retcode": 100, "data": {}})
    target = Target(bot=bot)
    message = [at_segment("all")]
    assert target.preprocess_group_message(5, message) == message


def test_group_preprocess_does_not_mutate_input():
    target = Target(bot=FakeBot())
    message = [at_segment("all"), text_segment("x")]
    result = target.preprocess_group_message(5, message)
    assert result == [text_segment("x")]
    assert len(message) == 2


def test_private_preprocess_drops_mentions():
    target = Target()
    result = target.preprocess_private_message([at_segment(5), text_segment("a"), at_segment("all")])
    assert result == [text_segment("a")]


def test_do_not_check_sends_to_all():
    bot = FakeBot()
    Target(message=[text_segment("m")], friends=[1, 2], do_not_check=True, bot=bot).send()
    assert [user for user, _ in bot.private] == [1, 2]


def test_send_without_bot_raises():
    with pytest.raises(RuntimeError):
        Target(message=[text_segment("m")], friends=[1]).send()