import pytest

from campus import comments, notifications, posts
from campus.live import subscribe
from campus.models import Notification, Post


pytestmark = pytest.mark.django_db


def test_subscription_delivers_initial_result_and_changes(alice, bob, profiles):
    received = []
    unsubscribe = notifications.subscribe_to_notifications(alice.id, received.append)
    try:
        assert received == [[]]

        post = posts.create_post(alice.id, "Pickup game at 5?")
        posts.like_post(profiles, post['id'], bob.id)

        assert len(received) == 2
        assert received[-1][0]['type'] == 'like'
        assert received[-1][0]['content'] == 'Bob liked your post'
    finally:
        unsubscribe()


def test_unsubscribe_stops_delivery(alice, bob, profiles):
    received = []
    unsubscribe = notifications.subscribe_to_notifications(alice.id, received.append)
    unsubscribe()

    Notification.objects.create(user=alice, from_user=bob, type='follow', content='x')
    assert received == [[]]
    unsubscribe()


def test_unchanged_results_are_not_redelivered(alice, bob, profiles):
    received = []
    unsubscribe = notifications.subscribe_to_notifications(alice.id, received.append)
    try:
        Notification.objects.create(user=bob, from_user=alice, type='follow', content='x')
        assert received == [[]]
    finally:
        unsubscribe()


def test_counter_increments_reach_subscribers(alice, bob, profiles):
    post = posts.create_post(alice.id, "Jam session tonight")
    received = []
    unsubscribe = subscribe(
        lambda: Post.objects.get(pk=post['id']).likes_count,
        received.append,
        models=[Post],
    )
    try:
        posts.like_post(profiles, post['id'], bob.id)
        posts.unlike_post(post['id'], bob.id)
    finally:
        unsubscribe()

    assert received == [0, 1, 0]


def test_failing_callback_does_not_break_the_write(alice, bob, profiles, caplog):
    post = posts.create_post(alice.id, "Open mic")
    calls = []

    def explode(result):
        calls.append(result)
        if len(calls) > 1:
            raise RuntimeError("render failed")

    unsubscribe = comments.subscribe_to_comments(profiles, post['id'], explode)
    try:
        with caplog.at_level('ERROR', logger='campus.live'):
            comment = comments.create_comment(profiles, post['id'], bob.id, "I'm in")
    finally:
        unsubscribe()

    assert comment is not None
    assert "Subscription callback failed" in caplog.text


def test_failed_initial_delivery_leaves_nothing_connected(alice, bob):
    calls = []

    def render(rows):
        calls.append(rows)
        raise RuntimeError("render failed")

    with pytest.raises(RuntimeError):
        notifications.subscribe_to_notifications(alice.id, render)

    Notification.objects.create(user=alice, from_user=bob, type='follow', content='x')
    assert len(calls) == 1
