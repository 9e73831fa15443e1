"""
Live query subscriptions.

A subscription re-runs its fetch whenever a row of one of its models is
saved, deleted, or has a counter incremented, and pushes the new result to
its callback when it differs from the last one delivered. Change delivery is
in-process (Django signals); one-shot reads go through the data-access
modules directly.

Example:
    unsubscribe = subscribe(
        lambda: get_notifications(user.id),
        on_change=render_inbox,
        models=[Notification],
    )
    ...
    unsubscribe()
"""

import logging

from django.db.models.signals import post_delete, post_save

from .store import store_changed


logger = logging.getLogger(__name__)

SIGNALS = (post_save, post_delete, store_changed)


class Subscription:

    def __init__(self, fetch, on_change, models):
        self.fetch = fetch
        self.on_change = on_change
        self.models = list(models)
        self.active = False
        self._last = None

    def start(self):
        for model in self.models:
            for signal in SIGNALS:
                signal.connect(self._on_store_change, sender=model, weak=False)
        self.active = True
        try:
            self.poll()
        except Exception:
            self.cancel()
            raise

    def cancel(self):
        if not self.active:
            return
        for model in self.models:
            for signal in SIGNALS:
                signal.disconnect(self._on_store_change, sender=model)
        self.active = False

    def poll(self):
        """Re-run the query and deliver the result if it changed."""
        result = self.fetch()
        if result == self._last:
            return False
        self._last = result
        self.on_change(result)
        return True

    def _on_store_change(self, sender, **kwargs):
        if not self.active:
            return
        try:
            self.poll()
        except Exception:
            # A failing callback must not break the write that triggered it.
            logger.exception(f"Subscription callback failed for {sender.__name__}")


def subscribe(fetch, on_change, models):
    """
    Deliver ``fetch()`` to ``on_change`` now and after every change.

    Returns a zero-argument unsubscribe callable; call it on teardown so the
    callback stops firing.
    """
    subscription = Subscription(fetch, on_change, models)
    subscription.start()
    return subscription.cancel
