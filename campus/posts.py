"""
Posts and post likes.

likes_count is a dual-write counter: the PostLike row and the counter are two
separate writes, and the "already liked?" check before the insert is not
atomic with it. Two concurrent likes by one user can both pass the check and
leave two rows and +2 on the counter. `manage.py counter_drift` reports such
rows.
"""

from .models import Post, PostLike
from .notifications import fan_out
from .profiles import snippet_for
from .store import increment, soft_read, to_public


def post_to_public(profiles, post):
    data = to_public(post)
    data['profile'] = snippet_for(profiles, post.user_id)
    return data


def create_post(user_id, content, post_type='update', interest_category=None,
                sub_interest=None):
    post = Post.objects.create(
        user_id=user_id,
        content=content,
        post_type=post_type,
        interest_category=interest_category or None,
        sub_interest=sub_interest or None,
    )
    return to_public(post)


def get_post(post_id):
    post = Post.objects.filter(pk=post_id).first()
    return to_public(post) if post else None


@soft_read(list)
def get_posts(profiles, interests=None, sub_interests=None, max_results=50):
    """
    Newest posts with author snippets.

    Posts without an interest_category (or sub_interest) always pass the
    matching filter.
    """
    posts = Post.objects.order_by('-created_at', '-id')[:max_results]
    results = []
    for post in posts:
        if interests and post.interest_category and post.interest_category not in interests:
            continue
        if sub_interests and post.sub_interest and post.sub_interest not in sub_interests:
            continue
        results.append(post_to_public(profiles, post))
    return results


@soft_read(list)
def get_posts_by_user(profiles, user_id, max_results=10):
    posts = Post.objects.filter(user_id=user_id).order_by('-created_at', '-id')[:max_results]
    return [post_to_public(profiles, post) for post in posts]


def delete_post(post_id):
    """
    Delete a post with its likes and every comment, reply and comment like
    under it.
    """
    deleted, _ = Post.objects.filter(pk=post_id).delete()
    return deleted > 0


# ============================================================================
# LIKES
# ============================================================================

def is_post_liked(post_id, user_id):
    return PostLike.objects.filter(post_id=post_id, user_id=user_id).exists()


def like_post(profiles, post_id, user_id):
    """
    Like a post and notify its author.

    Returns True when a like was recorded, False when the user had already
    liked it, None when the post does not exist.
    """
    post = Post.objects.filter(pk=post_id).first()
    if post is None:
        return None
    if is_post_liked(post_id, user_id):
        return False

    PostLike.objects.create(post_id=post_id, user_id=user_id)
    increment(Post, post_id, 'likes_count', 1)

    fan_out(profiles, post.user_id, user_id, 'like', 'liked your post', f'/post/{post_id}')
    return True


def unlike_post(post_id, user_id):
    like = PostLike.objects.filter(post_id=post_id, user_id=user_id).first()
    if like is None:
        return False
    like.delete()
    increment(Post, post_id, 'likes_count', -1)
    return True
