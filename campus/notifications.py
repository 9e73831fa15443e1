"""
================================================================================
CAMPUS SOCIAL NETWORK - NOTIFICATIONS
================================================================================

MODULE PURPOSE
================================================================================
1. Fan-out: every like, comment, reply, follow and direct message writes one
   notification to the recipient's inbox through fan_out().
2. Inbox: listing, unread counts, read flags, deletion, live subscription.

DELIVERY SEMANTICS
================================================================================
fan_out() runs after the primary write has succeeded. It is best effort:
- failures are logged and swallowed, never surfaced to the actor
- the primary write is never rolled back
- the notification insert runs in its own savepoint, so a failed insert
  does not poison a surrounding transaction
- no retry and no outbox: a crash between the two writes drops the
  notification

Self-actions (liking your own post, replying to yourself) are not notified.

================================================================================
"""

import logging

from django.db import transaction

from .live import subscribe
from .models import DirectMessage, Notification
from .profiles import display_name
from .store import soft_read, to_public, update_rows


logger = logging.getLogger(__name__)

INBOX_LIMIT = 50


# ============================================================================
# FAN-OUT
# ============================================================================

def fan_out(profiles, recipient_id, actor_id, type, action, link=''):
    """
    Write one notification "<actor name> <action>" to ``recipient_id``.

    Returns the created Notification, or None when skipped or failed.

    Example:
        fan_out(profiles, post.user_id, request.user.id, 'like',
                'liked your post', f'/post/{post.id}')
    """
    if recipient_id == actor_id:
        return None

    try:
        content = f"{display_name(profiles, actor_id)} {action}"
        with transaction.atomic():
            return Notification.objects.create(
                user_id=recipient_id,
                from_user_id=actor_id,
                type=type,
                content=content,
                link=link,
            )
    except Exception as e:
        logger.error(f"Failed to create {type} notification for user {recipient_id}: {e}")
        return None


# ============================================================================
# INBOX
# ============================================================================

def notification_to_public(notification):
    data = to_public(notification)
    data['link'] = data['link'] or '#'
    return data


@soft_read(list)
def get_notifications(user_id, limit=INBOX_LIMIT):
    queryset = Notification.objects.filter(user_id=user_id).order_by('-created_at', '-id')
    return [notification_to_public(n) for n in queryset[:limit]]


@soft_read(0)
def unread_notification_count(user_id):
    return Notification.objects.filter(user_id=user_id, read=False).count()


def mark_notification_read(user_id, notification_id):
    notification = Notification.objects.filter(pk=notification_id, user_id=user_id).first()
    if notification is None:
        return False
    if not notification.read:
        notification.read = True
        notification.save(update_fields=['read'])
    return True


def mark_all_notifications_read(user_id):
    return update_rows(
        Notification.objects.filter(user_id=user_id, read=False),
        read=True,
    )


def delete_notification(user_id, notification_id):
    deleted, _ = Notification.objects.filter(pk=notification_id, user_id=user_id).delete()
    return deleted > 0


def clear_notifications(user_id):
    deleted, _ = Notification.objects.filter(user_id=user_id).delete()
    return deleted


def subscribe_to_notifications(user_id, callback):
    return subscribe(
        lambda: get_notifications(user_id),
        callback,
        models=[Notification],
    )


@soft_read(dict)
def unread_counts(user_id):
    """
    Badge counts for the navigation bar.

    Message notifications are left out of the notification count because
    unread direct messages already have their own badge.
    """
    return {
        'unread_messages_count': DirectMessage.objects.filter(
            receiver_id=user_id, read=False
        ).count(),
        'unread_notifications_count': Notification.objects.filter(
            user_id=user_id, read=False
        ).exclude(type='message').count(),
    }
