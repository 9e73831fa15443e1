"""
Follow graph and interest-based suggestions.
"""

from .exceptions import SocialActionError
from .models import Follow
from .notifications import fan_out
from .profiles import get_profiles
from .store import soft_read


def is_following(follower_id, following_id):
    return Follow.objects.filter(follower_id=follower_id, following_id=following_id).exists()


def follow_user(profiles, follower_id, following_id):
    """
    Add the follow edge and notify the followed user.

    Returns True when a new edge was created, False when it already existed.
    """
    if follower_id == following_id:
        raise SocialActionError("Cannot follow yourself")

    _, created = Follow.objects.get_or_create(
        follower_id=follower_id,
        following_id=following_id,
    )
    if created:
        fan_out(profiles, following_id, follower_id, 'follow',
                'started following you', f'/user/{follower_id}')
    return created


def unfollow_user(follower_id, following_id):
    deleted, _ = Follow.objects.filter(follower_id=follower_id, following_id=following_id).delete()
    return deleted > 0


def get_follow_counts(user_id):
    return {
        'followers': Follow.objects.filter(following_id=user_id).count(),
        'following': Follow.objects.filter(follower_id=user_id).count(),
    }


@soft_read(list)
def get_following_ids(user_id):
    return list(Follow.objects.filter(follower_id=user_id).values_list('following_id', flat=True))


@soft_read(list)
def get_followers(profiles, user_id):
    """Profiles of users following ``user_id``; users without a profile are skipped."""
    ids = Follow.objects.filter(following_id=user_id).order_by('-created_at').values_list('follower_id', flat=True)
    return [p for p in (profiles.get(i) for i in ids) if p is not None]


@soft_read(list)
def get_following(profiles, user_id):
    ids = Follow.objects.filter(follower_id=user_id).order_by('-created_at').values_list('following_id', flat=True)
    return [p for p in (profiles.get(i) for i in ids) if p is not None]


# ============================================================================
# SUGGESTED USERS
# ============================================================================

def shared_interest_count(candidate, interests):
    wanted = set(interests)
    return sum(1 for interest in candidate.get('interests') or [] if interest in wanted)


@soft_read(list)
def get_suggested_users(user_id, interests, max_results=10):
    """
    People you may like: completed profiles sharing interests with the user.

    Up to 2 * max_results candidates sharing at least one interest are
    fetched, users already followed are removed, and the rest are ranked by
    number of shared interests (user id ascending on ties).

    Each returned profile carries a ``shared_count`` key.
    """
    if not interests:
        return []

    followed = set(get_following_ids(user_id))
    candidates = get_profiles(
        exclude_user_id=user_id,
        interests=interests,
        max_results=max_results * 2,
    )

    ranked = [
        dict(candidate, shared_count=shared_interest_count(candidate, interests))
        for candidate in candidates
        if candidate['user_id'] not in followed and candidate['user_id'] != user_id
    ]
    ranked.sort(key=lambda p: (-p['shared_count'], p['user_id']))
    return ranked[:max_results]
