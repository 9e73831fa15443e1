"""
Interest groups and the membership approval workflow.

member_count counts approved members only:
- joining an open group: approved immediately, +1
- joining a closed group: pending, unchanged until an admin approves (+1)
- leaving: -1 only if the membership was approved
- rejecting a pending request: unchanged
"""

import logging

from django.db import transaction

from .models import Group, GroupMember
from .profiles import snippet_for
from .store import increment, soft_read, to_public, update_rows


logger = logging.getLogger(__name__)


def create_group(user_id, name, interest, description=None, sub_interest=None, is_open=True):
    """Create a group with its creator as the first approved admin."""
    with transaction.atomic():
        group = Group.objects.create(
            name=name,
            description=description or None,
            interest=interest,
            sub_interest=sub_interest or None,
            is_open=is_open,
            creator_id=user_id,
        )
        GroupMember.objects.create(group=group, user_id=user_id, role='admin', status='approved')
        increment(Group, group.pk, 'member_count', 1)

    group.refresh_from_db()
    logger.info(f"Group {group.pk} created by user {user_id}")
    return to_public(group)


def get_group(group_id):
    group = Group.objects.filter(pk=group_id).first()
    return to_public(group) if group else None


@soft_read(list)
def get_groups(interests=None, sub_interests=None, max_results=50):
    """Largest groups first, optionally restricted to the given interests."""
    groups = Group.objects.order_by('-member_count', '-created_at')[:max_results]
    results = []
    for group in groups:
        if interests and group.interest not in interests:
            continue
        if sub_interests and group.sub_interest and group.sub_interest not in sub_interests:
            continue
        results.append(to_public(group))
    return results


# ============================================================================
# MEMBERSHIP
# ============================================================================

def join_group(group_id, user_id, role='member'):
    """
    Join or request to join a group.

    Returns the membership dict (existing memberships are returned as they
    are), or None when the group does not exist.
    """
    group = Group.objects.filter(pk=group_id).first()
    if group is None:
        return None

    membership, created = GroupMember.objects.get_or_create(
        group=group,
        user_id=user_id,
        defaults={
            'role': role,
            'status': 'approved' if group.is_open else 'pending',
        },
    )
    if created and membership.status == 'approved':
        increment(Group, group_id, 'member_count', 1)
    return to_public(membership)


def leave_group(group_id, user_id):
    membership = GroupMember.objects.filter(group_id=group_id, user_id=user_id).first()
    if membership is None:
        return False

    was_approved = membership.status == 'approved'
    membership.delete()
    if was_approved:
        increment(Group, group_id, 'member_count', -1)
    return True


def approve_member(group_id, user_id):
    """Approve a pending request. Returns False if there was none."""
    approved = update_rows(
        GroupMember.objects.filter(group_id=group_id, user_id=user_id, status='pending'),
        status='approved',
    )
    if approved:
        increment(Group, group_id, 'member_count', 1)
    return bool(approved)


def reject_member(group_id, user_id):
    deleted, _ = GroupMember.objects.filter(
        group_id=group_id, user_id=user_id, status='pending'
    ).delete()
    return deleted > 0


def make_admin(group_id, user_id):
    return bool(update_rows(
        GroupMember.objects.filter(group_id=group_id, user_id=user_id, status='approved'),
        role='admin',
    ))


def is_group_member(group_id, user_id):
    return GroupMember.objects.filter(
        group_id=group_id, user_id=user_id, status='approved'
    ).exists()


def is_group_admin(group_id, user_id):
    return GroupMember.objects.filter(
        group_id=group_id, user_id=user_id, status='approved', role='admin'
    ).exists()


@soft_read(list)
def get_group_members(profiles, group_id, status='approved'):
    members = GroupMember.objects.filter(group_id=group_id, status=status).order_by('joined_at', 'id')
    results = []
    for member in members:
        data = to_public(member)
        data['profile'] = snippet_for(profiles, member.user_id)
        results.append(data)
    return results


def get_group_admins(profiles, group_id):
    return [m for m in get_group_members(profiles, group_id) if m['role'] == 'admin']


@soft_read(list)
def get_user_group_memberships(user_id):
    """Ids of the groups the user is an approved member of."""
    return list(
        GroupMember.objects.filter(user_id=user_id, status='approved')
        .order_by('joined_at', 'id')
        .values_list('group_id', flat=True)
    )
