"""
Profile reads and writes.

Every lookup of another user's name/avatar goes through a ProfileCache so
that fan-out joins (posts, comments, messages) do not query the same profile
repeatedly.
"""

import logging

from .models import INTEREST_CATEGORIES, Profile
from .store import soft_read, to_public


logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name', 'bio', 'avatar_url', 'interests', 'sub_interests', 'skill_level',
    'looking_for', 'city', 'student_type', 'department', 'branch', 'year',
    'profile_completed',
)


@soft_read(None)
def load_profile(user_id):
    """Store lookup backing the cache. Returns a profile dict or None."""
    profile = Profile.objects.filter(user_id=user_id).first()
    if profile is None:
        return None
    return to_public(profile)


def get_profile(profiles, user_id):
    return profiles.get(user_id)


def profile_snippet(profile):
    if profile is None:
        return None
    return {'name': profile['name'], 'avatar_url': profile['avatar_url']}


def snippet_for(profiles, user_id):
    return profile_snippet(profiles.get(user_id))


def display_name(profiles, user_id):
    profile = profiles.get(user_id)
    return profile['name'] if profile and profile.get('name') else 'Someone'


def create_profile(profiles, user_id, name, **fields):
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise TypeError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

    profile = Profile.objects.create(user_id=user_id, name=name, **fields)
    data = to_public(profile)
    profiles.put(user_id, data)
    logger.info(f"Profile created for user {user_id}")
    return data


def update_profile(profiles, user_id, updates):
    """
    Apply ``updates`` to the user's profile and drop the cached copy.

    Keys with a None value are ignored rather than written, and only
    EDITABLE_FIELDS are applied. Returns the updated profile dict, or None when
    the user has no profile.
    """
    profile = Profile.objects.filter(user_id=user_id).first()
    if profile is None:
        return None

    changed = []
    for key, value in updates.items():
        if value is None or key not in EDITABLE_FIELDS:
            continue
        setattr(profile, key, value)
        changed.append(key)

    if changed:
        profile.save(update_fields=changed + ['updated_at'])
    profiles.invalidate(user_id)
    return to_public(profile)


@soft_read(list)
def get_profiles(exclude_user_id=None, interest=None, skill_level=None,
                 interests=None, max_results=50):
    """
    Completed profiles, newest first.

    ``interest`` keeps profiles tagged with that category; ``interests`` keeps
    profiles sharing at least one of them. Interest filters run in Python
    because the tag lists are JSON columns.
    """
    queryset = Profile.objects.filter(profile_completed=True).order_by('-created_at')
    if exclude_user_id is not None:
        queryset = queryset.exclude(user_id=exclude_user_id)
    if skill_level and skill_level != 'all':
        queryset = queryset.filter(skill_level=skill_level)

    wanted = set(interests or [])
    results = []
    for profile in queryset.iterator():
        tags = profile.interests or []
        if interest and interest != 'all' and interest not in tags:
            continue
        if wanted and not wanted.intersection(tags):
            continue
        results.append(to_public(profile))
        if len(results) >= max_results:
            break
    return results


def invalid_interests(interests=None, sub_interests=None):
    """
    Check tags against INTEREST_CATEGORIES.

    Returns an error message, or None when every tag is known.
    """
    for interest in interests or []:
        if interest not in INTEREST_CATEGORIES:
            return f"Unknown interest: {interest}"

    known = {sub for subs in INTEREST_CATEGORIES.values() for sub in subs}
    for sub_interest in sub_interests or []:
        if sub_interest not in known:
            return f"Unknown sub-interest: {sub_interest}"
    return None
