"""
WSGI config for the campus_site project.

gunicorn serves ``campus_site.wsgi:application`` (see gunicorn.conf.py).
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'campus_site.settings')

application = get_wsgi_application()
