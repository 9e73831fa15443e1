"""
Time-boxed profile cache used by every join that attaches a profile snippet
to posts, comments, messages and notifications.
"""

import time

from django.core.cache import caches


DEFAULT_TTL = 5 * 60  # seconds
CACHE_ALIAS = 'profiles'


class ProfileCache:
    """
    Map of user id -> profile dict with a per-entry TTL, kept in the
    ``profiles`` Django cache.

    Entries older than ``ttl`` are reloaded through ``loader`` on read.
    ``loader(user_id)`` returns a profile dict or None; None is not cached.
    Every read returns a fresh dict, so callers may modify what they get.

    Attributes:
        loader: Callable fetching one profile from the store
        ttl (float): Entry lifetime in seconds
        clock: Callable returning the current time in seconds
        cache: Django cache backend holding ``(profile, stored_at)`` entries

    Example:
        profiles = ProfileCache(load_profile, ttl=300)
        profile = profiles.get(user.id)
        profiles.invalidate(user.id)  # after an edit
    """

    def __init__(self, loader, ttl=DEFAULT_TTL, clock=time.monotonic, cache=None):
        self.loader = loader
        self.ttl = ttl
        self.clock = clock
        self._cache = cache

    @property
    def cache(self):
        # caches[] hands out one backend per thread
        return self._cache if self._cache is not None else caches[CACHE_ALIAS]

    @staticmethod
    def key(user_id):
        return f"profile:{user_id}"

    def get(self, user_id):
        entry = self.cache.get(self.key(user_id))
        if entry is not None:
            profile, stored_at = entry
            if self.clock() - stored_at < self.ttl:
                return profile

        profile = self.loader(user_id)
        if profile is None:
            return None
        self.put(user_id, profile)
        return dict(profile)

    def put(self, user_id, profile):
        self.cache.set(self.key(user_id), (profile, self.clock()), None)

    def invalidate(self, user_id):
        self.cache.delete(self.key(user_id))

    def clear(self):
        self.cache.clear()

    def __contains__(self, user_id):
        return self.cache.get(self.key(user_id)) is not None
