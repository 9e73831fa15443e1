"""
Store adapter helpers shared by every data-access module.

- read_timeout: per-read statement limit (CAMPUS_READ_TIMEOUT); writes are
  never bounded
- soft_read: reads that degrade to an empty/default value when the database
  fails or read_timeout cancels the query
- increment: atomic server-side counter update
- update_rows: bulk update that live subscriptions still see
- iso / to_public: row -> JSON-ready dict conversion
"""

import functools
import logging
import time
from contextlib import contextmanager
from datetime import datetime

from django.conf import settings
from django.db import DatabaseError, connection, transaction
from django.db.models import F
from django.dispatch import Signal
from django.utils import timezone


logger = logging.getLogger(__name__)


# Sent after writes that bypass post_save (counter increments, bulk updates)
# so that live subscriptions see them too.
store_changed = Signal()

# SQLite virtual machine instructions between deadline checks
SQLITE_PROGRESS_STEPS = 1000


@contextmanager
def read_timeout(seconds=None):
    """
    Bound the statements run inside the block to ``seconds``
    (CAMPUS_READ_TIMEOUT by default).

    The block runs in its own transaction or savepoint. On PostgreSQL the
    limit is a transaction-local statement_timeout, restored on the way out
    so writes later in an enclosing transaction run unbounded. On SQLite a
    progress handler interrupts the statement once the deadline passes.
    Either way the cancelled statement raises OperationalError.
    """
    if seconds is None:
        seconds = settings.CAMPUS_READ_TIMEOUT

    with transaction.atomic():
        if connection.vendor == 'postgresql':
            with connection.cursor() as cursor:
                cursor.execute("SHOW statement_timeout")
                previous = cursor.fetchone()[0]
                cursor.execute(
                    "SELECT set_config('statement_timeout', %s, true)",
                    [f"{int(seconds * 1000)}ms"],
                )
            yield
            with connection.cursor() as cursor:
                cursor.execute("SELECT set_config('statement_timeout', %s, true)", [previous])

        elif connection.vendor == 'sqlite' and getattr(connection, 'read_deadline', None) is None:
            connection.ensure_connection()
            deadline = connection.read_deadline = time.monotonic() + seconds
            connection.connection.set_progress_handler(
                lambda: time.monotonic() > deadline, SQLITE_PROGRESS_STEPS
            )
            try:
                yield
            finally:
                connection.connection.set_progress_handler(None, 0)
                connection.read_deadline = None

        else:
            # other backends, or a nested sqlite read under the outer deadline
            yield


def soft_read(default):
    """
    Turn database failures of a read into ``default``.

    The read runs under read_timeout(), so a statement that outlives
    CAMPUS_READ_TIMEOUT is cancelled and also ends up as ``default``.

    ``default`` may be a value or a zero-argument factory (``list``, ``dict``)
    so that callers never share a mutable result.

    Example:
        @soft_read(list)
        def get_followers(user_id):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                with read_timeout():
                    return func(*args, **kwargs)
            except DatabaseError as e:
                logger.error(f"{func.__name__} error: {e}")
                return default() if callable(default) else default
        return wrapper
    return decorator


def increment(model, pk, field, delta=1):
    """
    Atomically add ``delta`` to ``field`` of one row.

    Returns the number of rows updated (0 when the row is gone).
    """
    updated = model.objects.filter(pk=pk).update(**{field: F(field) + delta})
    if updated:
        store_changed.send(sender=model, pk=pk, field=field, delta=delta)
    return updated


def update_rows(queryset, **values):
    """Bulk update; returns the number of rows changed."""
    updated = queryset.update(**values)
    if updated:
        store_changed.send(sender=queryset.model, pk=None, field=None, delta=None)
    return updated


def iso(value):
    """ISO-8601 string for a stored timestamp; a missing one reads as now."""
    if value is None:
        value = timezone.now()
    return value.isoformat()


def to_public(instance, exclude=()):
    """
    Convert a model instance into a JSON-ready dict.

    Foreign keys are rendered by their column name (``user_id``,
    ``parent_comment_id``), datetimes as ISO strings, and the primary key as
    ``id``.
    """
    data = {}
    for field in instance._meta.concrete_fields:
        if field.name in exclude:
            continue
        value = getattr(instance, field.attname)
        if isinstance(value, datetime):
            value = value.isoformat()
        key = 'id' if field.primary_key else field.attname
        data[key] = value
    if 'created_at' in data and data['created_at'] is None:
        data['created_at'] = iso(None)
    return data
