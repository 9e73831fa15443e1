import pytest

from campus.apps import profile_cache
from campus.models import Profile, User


@pytest.fixture(autouse=True)
def _test_settings(settings):
    settings.SECURE_SSL_REDIRECT = False
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture(autouse=True)
def profiles():
    """The app's profile cache, emptied so ids reused across tests never hit."""
    cache = profile_cache()
    cache.clear()
    yield cache
    cache.clear()


@pytest.fixture
def make_user(db):
    """
    Create a user, by default with a completed profile.

    make_user('asha', interests=['Sports'])
    make_user('ravi', profile=False)
    """
    def make(username, profile=True, **fields):
        user = User.objects.create_user(username=username, password='pass12345')
        if profile:
            fields.setdefault('name', username.title())
            fields.setdefault('profile_completed', True)
            Profile.objects.create(user=user, **fields)
        return user
    return make


@pytest.fixture
def alice(make_user):
    return make_user('alice', interests=['Sports'])


@pytest.fixture
def bob(make_user):
    return make_user('bob', interests=['Sports', 'Music'])
