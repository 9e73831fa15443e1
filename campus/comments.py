"""
================================================================================
CAMPUS SOCIAL NETWORK - COMMENTS & REPLIES
================================================================================

MODULE PURPOSE
================================================================================
- Flat comment fetch with author snippets
- Tree assembly grouped on parent_comment_id
- Comment / reply creation with counters and notifications
- Comment likes
- Deletion of a comment together with its whole reply subtree

NESTING
================================================================================
New replies may only target a top-level comment (one level of nesting).
Stored data is not trusted to respect that: the tree builder and the
deletion walk handle any depth.

DELETION
================================================================================
parent_comment has no database cascade, so delete_comment() walks the
subtree itself with an explicit stack:

    1. delete CommentLike rows of the comment
    2. delete the comment
    3. push every comment whose parent_comment_id is the deleted id

parent_comment_id is only set at creation, so the reference graph is a
forest; already deleted rows are never returned by step 3, so the walk
terminates even on corrupted data.

================================================================================
"""

import logging

from django.db import transaction

from .exceptions import SocialActionError
from .live import subscribe
from .models import Comment, CommentLike, Post
from .notifications import fan_out
from .profiles import snippet_for
from .store import increment, soft_read, to_public


logger = logging.getLogger(__name__)


def comment_to_public(profiles, comment):
    data = to_public(comment)
    data['profile'] = snippet_for(profiles, comment.user_id)
    return data


@soft_read(list)
def get_comments(profiles, post_id):
    """All comments and replies of a post, oldest first, flat."""
    comments = Comment.objects.filter(post_id=post_id).order_by('created_at', 'id')
    return [comment_to_public(profiles, comment) for comment in comments]


def build_comment_tree(comments):
    """
    Nest flat comment dicts under their parents.

    Each node gets a ``replies`` list; input order is kept at every level.
    Replies whose parent is not in ``comments`` are dropped.
    """
    nodes = {comment['id']: dict(comment, replies=[]) for comment in comments}
    roots = []
    for comment in comments:
        node = nodes[comment['id']]
        parent_id = comment.get('parent_comment_id')
        if parent_id is None:
            roots.append(node)
        elif parent_id in nodes:
            nodes[parent_id]['replies'].append(node)
    return roots


def get_comment_tree(profiles, post_id):
    return build_comment_tree(get_comments(profiles, post_id))


def subscribe_to_comments(profiles, post_id, callback):
    return subscribe(
        lambda: get_comments(profiles, post_id),
        callback,
        models=[Comment],
    )


# ============================================================================
# CREATION
# ============================================================================

def create_comment(profiles, post_id, user_id, content):
    """
    Add a top-level comment and notify the post author.

    Returns the comment dict, or None when the post does not exist.
    """
    post = Post.objects.filter(pk=post_id).first()
    if post is None:
        return None

    comment = Comment.objects.create(post_id=post_id, user_id=user_id, content=content)
    increment(Post, post_id, 'comments_count', 1)

    fan_out(profiles, post.user_id, user_id, 'comment',
            'commented on your post', f'/post/{post_id}')
    return comment_to_public(profiles, comment)


def create_reply(profiles, parent_comment_id, user_id, content):
    """
    Reply to a top-level comment and notify its author.

    Returns the reply dict, or None when the parent does not exist.
    Raises SocialActionError when the parent is itself a reply.
    """
    parent = Comment.objects.filter(pk=parent_comment_id).first()
    if parent is None:
        return None
    if parent.parent_comment_id is not None:
        raise SocialActionError("Maximum reply depth reached")

    reply = Comment.objects.create(
        post_id=parent.post_id,
        user_id=user_id,
        content=content,
        parent_comment=parent,
    )
    increment(Comment, parent.pk, 'replies_count', 1)

    fan_out(profiles, parent.user_id, user_id, 'reply',
            'replied to your comment', f'/post/{parent.post_id}')
    return comment_to_public(profiles, reply)


# ============================================================================
# DELETION
# ============================================================================

def delete_comment(comment_id):
    """
    Delete a comment, its likes, and all replies below it at any depth.

    Returns the number of comments deleted (0 when it did not exist).
    """
    root = Comment.objects.filter(pk=comment_id).values('post_id', 'parent_comment_id').first()
    if root is None:
        return 0

    deleted = 0
    with transaction.atomic():
        stack = [comment_id]
        while stack:
            current = stack.pop()
            CommentLike.objects.filter(comment_id=current).delete()
            _, per_model = Comment.objects.filter(pk=current).delete()
            deleted += per_model.get(Comment._meta.label, 0)
            stack.extend(
                Comment.objects.filter(parent_comment_id=current).values_list('pk', flat=True)
            )

        if root['parent_comment_id'] is None:
            increment(Post, root['post_id'], 'comments_count', -1)
        else:
            increment(Comment, root['parent_comment_id'], 'replies_count', -1)

    logger.info(f"Deleted comment {comment_id} with {deleted - 1} replies")
    return deleted


# ============================================================================
# LIKES
# ============================================================================

def is_comment_liked(comment_id, user_id):
    return CommentLike.objects.filter(comment_id=comment_id, user_id=user_id).exists()


def like_comment(profiles, comment_id, user_id):
    """
    Like a comment or reply and notify its author.

    Returns True when recorded, False when already liked, None when the
    comment does not exist.
    """
    comment = Comment.objects.filter(pk=comment_id).first()
    if comment is None:
        return None
    if is_comment_liked(comment_id, user_id):
        return False

    CommentLike.objects.create(comment_id=comment_id, user_id=user_id)
    increment(Comment, comment_id, 'likes_count', 1)

    if comment.parent_comment_id is None:
        type, action = 'comment_like', 'liked your comment'
    else:
        type, action = 'reply_like', 'liked your reply'
    fan_out(profiles, comment.user_id, user_id, type, action, f'/post/{comment.post_id}')
    return True


def unlike_comment(comment_id, user_id):
    like = CommentLike.objects.filter(comment_id=comment_id, user_id=user_id).first()
    if like is None:
        return False
    like.delete()
    increment(Comment, comment_id, 'likes_count', -1)
    return True
