from django.core.cache import caches

from campus.cache import ProfileCache


class FakeClock:

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class Loader:

    def __init__(self, profiles):
        self.profiles = profiles
        self.calls = []

    def __call__(self, user_id):
        self.calls.append(user_id)
        return self.profiles.get(user_id)


def test_fresh_entry_served_without_reload():
    clock = FakeClock()
    loader = Loader({1: {'name': 'Asha'}})
    cache = ProfileCache(loader, ttl=300, clock=clock)

    assert cache.get(1) == {'name': 'Asha'}
    clock.advance(299)
    assert cache.get(1) == {'name': 'Asha'}
    assert loader.calls == [1]


def test_stale_entry_is_reloaded():
    clock = FakeClock()
    loader = Loader({1: {'name': 'Asha'}})
    cache = ProfileCache(loader, ttl=300, clock=clock)
    cache.get(1)

    loader.profiles[1] = {'name': 'Asha K'}
    clock.advance(300)

    assert cache.get(1) == {'name': 'Asha K'}
    assert loader.calls == [1, 1]


def test_missing_profile_is_not_cached():
    loader = Loader({})
    cache = ProfileCache(loader, clock=FakeClock())

    assert cache.get(7) is None
    assert cache.get(7) is None
    assert 7 not in cache
    assert loader.calls == [7, 7]


def test_invalidate_forces_reload():
    loader = Loader({1: {'name': 'Asha'}})
    cache = ProfileCache(loader, clock=FakeClock())
    cache.get(1)

    cache.invalidate(1)
    assert 1 not in cache
    cache.get(1)
    assert loader.calls == [1, 1]


def test_put_and_clear():
    cache = ProfileCache(Loader({}), clock=FakeClock())
    cache.put(1, {'name': 'A'})
    cache.put(2, {'name': 'B'})
    assert 1 in cache
    assert cache.get(2) == {'name': 'B'}

    cache.clear()
    assert 1 not in cache
    assert 2 not in cache


def test_entries_live_in_the_profiles_cache():
    cache = ProfileCache(Loader({1: {'name': 'Asha'}}), clock=FakeClock())
    cache.get(1)

    profile, stored_at = caches['profiles'].get(ProfileCache.key(1))
    assert profile == {'name': 'Asha'}
    assert stored_at == 1000.0


def test_callers_get_their_own_copy():
    loader = Loader({1: {'name': 'Asha'}})
    cache = ProfileCache(loader, clock=FakeClock())

    loaded = cache.get(1)
    loaded['name'] = 'changed'
    served = cache.get(1)
    served['name'] = 'changed again'

    assert cache.get(1) == {'name': 'Asha'}
    assert loader.calls == [1]
