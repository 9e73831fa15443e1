from django.apps import AppConfig, apps
from django.conf import settings


class CampusConfig(AppConfig):
    name = 'campus'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        from .cache import ProfileCache
        from .profiles import load_profile

        # Process-wide profile cache; the data-access functions receive it
        # explicitly instead of reaching for a global.
        self.profiles = ProfileCache(
            load_profile,
            ttl=getattr(settings, 'CAMPUS_PROFILE_CACHE_TTL', 300),
        )


def profile_cache():
    return apps.get_app_config('campus').profiles
