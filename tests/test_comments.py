import pytest

from campus import comments, posts
from campus.exceptions import SocialActionError
from campus.models import Comment, CommentLike, Notification, Post


pytestmark = pytest.mark.django_db


@pytest.fixture
def post(alice):
    return posts.create_post(alice.id, "Who's up for basketball?")


def test_create_comment_counts_and_notifies(post, alice, bob, profiles):
    comment = comments.create_comment(profiles, post['id'], bob.id, "Me!")

    assert comment['parent_comment_id'] is None
    assert comment['profile']['name'] == 'Bob'
    assert Post.objects.get(pk=post['id']).comments_count == 1
    notification = Notification.objects.get()
    assert (notification.user_id, notification.type) == (alice.id, 'comment')
    assert notification.content == 'Bob commented on your post'


def test_comment_on_missing_post(bob, profiles):
    assert comments.create_comment(profiles, 999, bob.id, "hello?") is None


def test_reply_counts_and_notifies_comment_author(post, alice, bob, profiles):
    comment = comments.create_comment(profiles, post['id'], bob.id, "Me!")
    reply = comments.create_reply(profiles, comment['id'], alice.id, "See you at 6")

    assert reply['parent_comment_id'] == comment['id']
    assert reply['post_id'] == post['id']
    assert Comment.objects.get(pk=comment['id']).replies_count == 1
    # replies do not count as post comments
    assert Post.objects.get(pk=post['id']).comments_count == 1
    assert Notification.objects.filter(user=bob, type='reply').count() == 1


def test_reply_to_reply_is_rejected(post, alice, bob, profiles):
    comment = comments.create_comment(profiles, post['id'], bob.id, "Me!")
    reply = comments.create_reply(profiles, comment['id'], alice.id, "ok")

    with pytest.raises(SocialActionError) as excinfo:
        comments.create_reply(profiles, reply['id'], bob.id, "nested")
    assert excinfo.value.status == 400


def test_comment_tree_nests_replies_in_order(post, alice, bob, profiles):
    first = comments.create_comment(profiles, post['id'], bob.id, "first")
    second = comments.create_comment(profiles, post['id'], alice.id, "second")
    r1 = comments.create_reply(profiles, first['id'], alice.id, "r1")
    r2 = comments.create_reply(profiles, first['id'], bob.id, "r2")

    tree = comments.get_comment_tree(profiles, post['id'])

    assert [node['id'] for node in tree] == [first['id'], second['id']]
    assert [node['id'] for node in tree[0]['replies']] == [r1['id'], r2['id']]
    assert tree[1]['replies'] == []


def test_build_comment_tree_any_depth_and_orphans():
    flat = [
        {'id': 1, 'parent_comment_id': None},
        {'id': 2, 'parent_comment_id': 1},
        {'id': 3, 'parent_comment_id': 2},
        {'id': 4, 'parent_comment_id': 99},
    ]

    tree = comments.build_comment_tree(flat)

    assert len(tree) == 1
    assert tree[0]['replies'][0]['replies'][0]['id'] == 3


def test_delete_comment_removes_whole_subtree(post, alice, bob, profiles):
    root = comments.create_comment(profiles, post['id'], bob.id, "root")
    child = comments.create_reply(profiles, root['id'], alice.id, "child")
    # Deeper levels can only come from stored data, not from create_reply.
    grandchild = Comment.objects.create(
        post_id=post['id'], user=bob, content="grandchild", parent_comment_id=child['id']
    )
    great = Comment.objects.create(
        post_id=post['id'], user=alice, content="great", parent_comment=grandchild
    )
    sibling = comments.create_comment(profiles, post['id'], alice.id, "sibling")
    for comment_id in (root['id'], child['id'], grandchild.pk, great.pk, sibling['id']):
        CommentLike.objects.create(comment_id=comment_id, user=bob)

    deleted = comments.delete_comment(root['id'])

    assert deleted == 4
    assert list(Comment.objects.values_list('pk', flat=True)) == [sibling['id']]
    assert list(CommentLike.objects.values_list('comment_id', flat=True)) == [sibling['id']]
    assert Post.objects.get(pk=post['id']).comments_count == 1


def test_delete_reply_decrements_parent(post, alice, bob, profiles):
    root = comments.create_comment(profiles, post['id'], bob.id, "root")
    reply = comments.create_reply(profiles, root['id'], alice.id, "reply")

    assert comments.delete_comment(reply['id']) == 1

    assert Comment.objects.get(pk=root['id']).replies_count == 0
    assert Post.objects.get(pk=post['id']).comments_count == 1


def test_delete_missing_comment():
    assert comments.delete_comment(12345) == 0


def test_comment_and_reply_likes(post, alice, bob, profiles):
    comment = comments.create_comment(profiles, post['id'], bob.id, "root")
    reply = comments.create_reply(profiles, comment['id'], bob.id, "self reply")

    assert comments.like_comment(profiles, comment['id'], alice.id) is True
    assert comments.like_comment(profiles, comment['id'], alice.id) is False
    assert comments.like_comment(profiles, reply['id'], alice.id) is True

    assert Comment.objects.get(pk=comment['id']).likes_count == 1
    types = set(Notification.objects.filter(user=bob).values_list('type', flat=True))
    assert types == {'comment_like', 'reply_like'}

    assert comments.unlike_comment(comment['id'], alice.id) is True
    assert comments.unlike_comment(comment['id'], alice.id) is False
    assert Comment.objects.get(pk=comment['id']).likes_count == 0
    assert not comments.is_comment_liked(comment['id'], alice.id)
