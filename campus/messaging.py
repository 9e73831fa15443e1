"""
================================================================================
CAMPUS SOCIAL NETWORK - MESSAGING
================================================================================

MODULE PURPOSE
================================================================================
- Direct messages between two users (send, thread, read flags)
- Group chat messages for approved members
- Conversation list merging direct and group conversations

CONVERSATION LIST
================================================================================
get_conversations() folds the sent and received message sets into one
entry per partner:

    - the first message seen for a partner creates the entry
    - a later message replaces content and time only if strictly newer
    - any unread message received by the user marks the entry unread,
      whether or not it is the newest one

Groups the user is an approved member of are added as ``group-<id>``
entries. Every source is read independently: a failing query drops that
source and the rest of the list is still returned.

================================================================================
"""

from django.db.models import Q

from .exceptions import SocialActionError
from .groups import is_group_member
from .live import subscribe
from .models import DirectMessage, Group, GroupMessage
from .notifications import fan_out
from .profiles import get_profile, snippet_for
from .store import iso, soft_read, to_public, update_rows


EMPTY_GROUP_PLACEHOLDER = "No messages yet"


# ============================================================================
# DIRECT MESSAGES
# ============================================================================

def send_direct_message(profiles, sender_id, receiver_id, content):
    message = DirectMessage.objects.create(
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
    )
    fan_out(profiles, receiver_id, sender_id, 'message',
            'sent you a message', f'/messages/{sender_id}')
    return to_public(message)


@soft_read(list)
def get_direct_messages(user_id, other_user_id):
    """The thread between two users in both directions, oldest first."""
    messages = DirectMessage.objects.filter(
        Q(sender_id=user_id, receiver_id=other_user_id)
        | Q(sender_id=other_user_id, receiver_id=user_id)
    ).order_by('created_at', 'id')
    return [to_public(message) for message in messages]


def mark_messages_as_read(sender_id, receiver_id):
    """Mark everything ``sender_id`` sent to ``receiver_id`` as read."""
    return update_rows(
        DirectMessage.objects.filter(sender_id=sender_id, receiver_id=receiver_id, read=False),
        read=True,
    )


@soft_read(list)
def get_user_messages(user_id):
    """Every message the user sent or received, oldest first."""
    messages = DirectMessage.objects.filter(
        Q(sender_id=user_id) | Q(receiver_id=user_id)
    ).order_by('created_at', 'id')
    return [to_public(message) for message in messages]


def subscribe_to_direct_messages(user_id, callback):
    return subscribe(
        lambda: get_user_messages(user_id),
        callback,
        models=[DirectMessage],
    )


@soft_read(0)
def unread_message_count(user_id):
    return DirectMessage.objects.filter(receiver_id=user_id, read=False).count()


# ============================================================================
# GROUP MESSAGES
# ============================================================================

def send_group_message(group_id, user_id, content):
    if not is_group_member(group_id, user_id):
        raise SocialActionError("Only group members can post messages", status=403)

    message = GroupMessage.objects.create(group_id=group_id, user_id=user_id, content=content)
    return to_public(message)


@soft_read(list)
def get_group_messages(profiles, group_id):
    messages = GroupMessage.objects.filter(group_id=group_id).order_by('created_at', 'id')
    results = []
    for message in messages:
        data = to_public(message)
        data['profile'] = snippet_for(profiles, message.user_id)
        results.append(data)
    return results


def subscribe_to_group_messages(profiles, group_id, callback):
    return subscribe(
        lambda: get_group_messages(profiles, group_id),
        callback,
        models=[GroupMessage],
    )


# ============================================================================
# CONVERSATIONS
# ============================================================================

@soft_read(list)
def _sent_messages(user_id):
    return list(DirectMessage.objects.filter(sender_id=user_id).order_by('created_at', 'id'))


@soft_read(list)
def _received_messages(user_id):
    return list(DirectMessage.objects.filter(receiver_id=user_id).order_by('created_at', 'id'))


def fold_direct_messages(user_id, messages):
    """
    Fold direct messages into one entry per conversation partner.

    Returns {partner_id: {'last_message', 'last_message_at', 'unread'}}
    with last_message_at left as a datetime.
    """
    partners = {}
    for message in messages:
        partner_id = message.receiver_id if message.sender_id == user_id else message.sender_id
        unread = message.receiver_id == user_id and not message.read

        entry = partners.get(partner_id)
        if entry is None:
            partners[partner_id] = {
                'last_message': message.content,
                'last_message_at': message.created_at,
                'unread': unread,
            }
            continue

        if message.created_at > entry['last_message_at']:
            entry['last_message'] = message.content
            entry['last_message_at'] = message.created_at
        if unread:
            entry['unread'] = True
    return partners


def _direct_conversations(profiles, user_id):
    messages = _sent_messages(user_id) + _received_messages(user_id)
    conversations = []
    for partner_id, entry in fold_direct_messages(user_id, messages).items():
        profile = get_profile(profiles, partner_id)
        conversations.append({
            'id': str(partner_id),
            'type': 'direct',
            'user_id': partner_id,
            'name': profile['name'] if profile else 'Unknown',
            'avatar_url': profile['avatar_url'] if profile else None,
            **entry,
        })
    return conversations


@soft_read(list)
def _group_conversations(user_id):
    groups = Group.objects.filter(
        members__user_id=user_id,
        members__status='approved',
    ).distinct()

    conversations = []
    for group in groups:
        latest = GroupMessage.objects.filter(group=group).order_by('-created_at', '-id').first()
        conversations.append({
            'id': f'group-{group.pk}',
            'type': 'group',
            'group_id': group.pk,
            'name': group.name,
            'avatar_url': None,
            'last_message': latest.content if latest else EMPTY_GROUP_PLACEHOLDER,
            'last_message_at': latest.created_at if latest else group.created_at,
            'unread': False,
        })
    return conversations


def get_conversations(profiles, user_id):
    """
    Direct and group conversations of a user, most recent first.

    Entries are unique by ``id``: the partner's user id as a string for
    direct conversations, ``group-<id>`` for groups.
    """
    merged = {}
    for conversation in _direct_conversations(profiles, user_id) + _group_conversations(user_id):
        merged.setdefault(conversation['id'], conversation)

    conversations = sorted(merged.values(), key=lambda c: c['last_message_at'], reverse=True)
    for conversation in conversations:
        conversation['last_message_at'] = iso(conversation['last_message_at'])
    return conversations
