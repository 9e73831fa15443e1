import pytest

from campus import groups
from campus.models import Group, GroupMember


pytestmark = pytest.mark.django_db


def member_count(group):
    return Group.objects.get(pk=group['id']).member_count


@pytest.fixture
def open_group(alice):
    return groups.create_group(alice.id, "Hoopers", 'Sports', sub_interest='Basketball')


@pytest.fixture
def closed_group(alice):
    return groups.create_group(alice.id, "Band Room", 'Music', is_open=False)


def test_creator_is_first_admin(open_group, alice):
    assert open_group['member_count'] == 1
    membership = GroupMember.objects.get(group_id=open_group['id'], user=alice)
    assert (membership.role, membership.status) == ('admin', 'approved')
    assert groups.is_group_admin(open_group['id'], alice.id)


def test_join_open_group_is_approved(open_group, bob):
    membership = groups.join_group(open_group['id'], bob.id)

    assert membership['status'] == 'approved'
    assert membership['role'] == 'member'
    assert member_count(open_group) == 2
    assert groups.is_group_member(open_group['id'], bob.id)


def test_join_twice_changes_nothing(open_group, bob):
    first = groups.join_group(open_group['id'], bob.id)
    second = groups.join_group(open_group['id'], bob.id)

    assert first['id'] == second['id']
    assert member_count(open_group) == 2


def test_join_closed_group_is_pending(closed_group, bob):
    membership = groups.join_group(closed_group['id'], bob.id)

    assert membership['status'] == 'pending'
    assert member_count(closed_group) == 1
    assert not groups.is_group_member(closed_group['id'], bob.id)


def test_join_missing_group(bob):
    assert groups.join_group(4040, bob.id) is None


def test_leave_pending_keeps_count(closed_group, bob):
    groups.join_group(closed_group['id'], bob.id)

    assert groups.leave_group(closed_group['id'], bob.id) is True
    assert member_count(closed_group) == 1


def test_leave_approved_decrements(open_group, bob):
    groups.join_group(open_group['id'], bob.id)

    assert groups.leave_group(open_group['id'], bob.id) is True
    assert member_count(open_group) == 1
    assert groups.leave_group(open_group['id'], bob.id) is False
    assert member_count(open_group) == 1


def test_approve_pending_member(closed_group, bob):
    groups.join_group(closed_group['id'], bob.id)

    assert groups.approve_member(closed_group['id'], bob.id) is True
    assert member_count(closed_group) == 2
    assert groups.is_group_member(closed_group['id'], bob.id)
    # already approved
    assert groups.approve_member(closed_group['id'], bob.id) is False
    assert member_count(closed_group) == 2


def test_reject_pending_member(closed_group, bob):
    groups.join_group(closed_group['id'], bob.id)

    assert groups.reject_member(closed_group['id'], bob.id) is True
    assert not GroupMember.objects.filter(user=bob).exists()
    assert member_count(closed_group) == 1


def test_make_admin(open_group, bob, profiles):
    groups.join_group(open_group['id'], bob.id)

    assert groups.make_admin(open_group['id'], bob.id) is True

    admins = groups.get_group_admins(profiles, open_group['id'])
    assert {a['user_id'] for a in admins} == {open_group['creator_id'], bob.id}


def test_members_lists_by_status(closed_group, alice, bob, make_user, profiles):
    carol = make_user('carol')
    groups.join_group(closed_group['id'], bob.id)
    groups.join_group(closed_group['id'], carol.id)
    groups.approve_member(closed_group['id'], carol.id)

    approved = groups.get_group_members(profiles, closed_group['id'])
    pending = groups.get_group_members(profiles, closed_group['id'], status='pending')

    assert [m['user_id'] for m in approved] == [alice.id, carol.id]
    assert approved[1]['profile'] == {'name': 'Carol', 'avatar_url': None}
    assert [m['user_id'] for m in pending] == [bob.id]


def test_get_groups_filters_and_orders(open_group, closed_group, bob):
    groups.join_group(open_group['id'], bob.id)
    dance = groups.create_group(bob.id, "Breakers", 'Dance', sub_interest='Breaking')

    assert [g['id'] for g in groups.get_groups()][0] == open_group['id']
    # equal member counts: newest first
    assert [g['id'] for g in groups.get_groups(interests=['Music', 'Dance'])] == [
        dance['id'], closed_group['id']
    ]
    assert [g['id'] for g in groups.get_groups(interests=['Dance'], sub_interests=['Hip-Hop'])] == []


def test_user_group_memberships(open_group, closed_group, bob):
    groups.join_group(open_group['id'], bob.id)
    groups.join_group(closed_group['id'], bob.id)

    assert groups.get_user_group_memberships(bob.id) == [open_group['id']]
