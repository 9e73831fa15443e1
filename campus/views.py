"""
JSON API views.

Every view returns a JsonResponse. Errors are {"error": "..."} with status
400 (bad input or rule violation), 403 (not allowed) or 404 (not found).
Views only translate HTTP to the data-access functions; the profile cache
is taken from the app config and handed down explicitly.
"""

import json
import logging

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.db import IntegrityError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt

from . import comments, follows, groups, messaging, notifications, posts, profiles as profile_store
from .apps import profile_cache
from .exceptions import SocialActionError
from .models import POST_TYPE_CHOICES, Comment, Post, User


# Logger
logger = logging.getLogger(__name__)

POST_TYPES = {value for value, _ in POST_TYPE_CHOICES}


def _body(request):
    """Parsed JSON body, or None when it is missing or malformed."""
    try:
        data = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def _limit(request, default):
    try:
        return max(1, min(int(request.GET.get('limit', default)), 200))
    except ValueError:
        return default


def _error(message, status=400):
    return JsonResponse({"error": message}, status=status)


# ============================================================================
# AUTHENTICATION
# ============================================================================

@csrf_exempt
def register(request):
    if request.method != "POST":
        return _error("POST required")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")

    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or len(username) > 30 or not username.replace('_', '').isalnum():
        return _error("Username can only contain letters, numbers, and underscores.")
    if len(password) < 8:
        return _error("Password must be at least 8 characters.")

    try:
        user = User.objects.create_user(
            username=username,
            email=(data.get('email') or '').strip().lower(),
            password=password,
        )
    except IntegrityError:
        return _error("Username already taken.")

    login(request, user)
    logger.info(f"Registered user {user.id}")
    return JsonResponse({"id": user.id, "username": user.username}, status=201)


@csrf_exempt
def login_view(request):
    if request.method != "POST":
        return _error("POST required")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")

    user = authenticate(request, username=data.get('username'), password=data.get('password'))
    if user is None:
        return _error("Invalid username or password.")
    login(request, user)
    return JsonResponse({"id": user.id, "username": user.username})


@csrf_exempt
def logout_view(request):
    logout(request)
    return JsonResponse({"status": "success"})


# ============================================================================
# PROFILES
# ============================================================================

@csrf_exempt
@login_required
def my_profile(request):
    cache = profile_cache()

    if request.method == "GET":
        profile = profile_store.get_profile(cache, request.user.id)
        if profile is None:
            return _error("Profile not found", 404)
        return JsonResponse(profile)

    if request.method not in ("POST", "PUT"):
        return _error("GET, POST or PUT required")

    data = _body(request)
    if data is None:
        return _error("Invalid JSON")
    problem = profile_store.invalid_interests(data.get('interests'), data.get('sub_interests'))
    if problem:
        return _error(problem)

    if request.method == "PUT":
        profile = profile_store.update_profile(cache, request.user.id, data)
        if profile is None:
            return _error("Profile not found", 404)
        return JsonResponse(profile)

    name = (data.get('name') or '').strip()
    if not name:
        return _error("Name required")
    fields = {
        key: value for key, value in data.items()
        if key in profile_store.EDITABLE_FIELDS and key != 'name' and value is not None
    }
    try:
        profile = profile_store.create_profile(cache, request.user.id, name, **fields)
    except IntegrityError:
        return _error("Profile already exists")
    return JsonResponse(profile, status=201)


@login_required
def user_profile(request, user_id):
    cache = profile_cache()
    profile = profile_store.get_profile(cache, user_id)
    if profile is None:
        return _error("Profile not found", 404)

    return JsonResponse({
        "profile": profile,
        "counts": follows.get_follow_counts(user_id),
        "is_following": follows.is_following(request.user.id, user_id),
        "posts": posts.get_posts_by_user(cache, user_id),
    })


@login_required
def profiles_list(request):
    results = profile_store.get_profiles(
        exclude_user_id=request.user.id,
        interest=request.GET.get('interest'),
        skill_level=request.GET.get('skill_level'),
        max_results=_limit(request, 50),
    )
    return JsonResponse({"profiles": results})


@login_required
def suggested_users(request):
    profile = profile_store.get_profile(profile_cache(), request.user.id)
    interests = profile['interests'] if profile else []
    results = follows.get_suggested_users(request.user.id, interests, max_results=_limit(request, 10))
    return JsonResponse({"profiles": results})


# ============================================================================
# POSTS
# ============================================================================

@csrf_exempt
@login_required
def posts_view(request):
    cache = profile_cache()

    if request.method == "GET":
        results = posts.get_posts(
            cache,
            interests=request.GET.getlist('interest'),
            sub_interests=request.GET.getlist('sub_interest'),
            max_results=_limit(request, 50),
        )
        return JsonResponse({"posts": results})

    if request.method != "POST":
        return _error("GET or POST required")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")

    content = (data.get('content') or '').strip()
    if not content:
        return _error("Content required")
    post_type = data.get('post_type') or 'update'
    if post_type not in POST_TYPES:
        return _error("Invalid post type")
    category = data.get('interest_category')
    sub_interest = data.get('sub_interest')
    problem = profile_store.invalid_interests(
        [category] if category else None, [sub_interest] if sub_interest else None
    )
    if problem:
        return _error(problem)

    post = posts.create_post(request.user.id, content, post_type, category, sub_interest)
    return JsonResponse(post, status=201)


@csrf_exempt
@login_required
def post_detail(request, post_id):
    post = get_object_or_404(Post, pk=post_id)

    if request.method == "DELETE":
        if post.user_id != request.user.id:
            return _error("Not yours", 403)
        posts.delete_post(post_id)
        return JsonResponse({"status": "success"})

    cache = profile_cache()
    return JsonResponse({
        "post": posts.post_to_public(cache, post),
        "liked": posts.is_post_liked(post_id, request.user.id),
        "comments": comments.get_comment_tree(cache, post_id),
    })


@csrf_exempt
@login_required
def post_like(request, post_id):
    if request.method == "POST":
        result = posts.like_post(profile_cache(), post_id, request.user.id)
        if result is None:
            return _error("Post not found", 404)
    elif request.method == "DELETE":
        posts.unlike_post(post_id, request.user.id)
    else:
        return _error("POST or DELETE required")

    post = get_object_or_404(Post, pk=post_id)
    return JsonResponse({
        "liked": posts.is_post_liked(post_id, request.user.id),
        "likes_count": post.likes_count,
    })


# ============================================================================
# COMMENTS
# ============================================================================

@csrf_exempt
@login_required
def post_comments(request, post_id):
    cache = profile_cache()

    if request.method == "GET":
        if request.GET.get('flat'):
            return JsonResponse({"comments": comments.get_comments(cache, post_id)})
        return JsonResponse({"comments": comments.get_comment_tree(cache, post_id)})

    if request.method != "POST":
        return _error("GET or POST required")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")
    content = (data.get('content') or '').strip()
    if not content:
        return _error("Comment cannot be empty")

    comment = comments.create_comment(cache, post_id, request.user.id, content)
    if comment is None:
        return _error("Post not found", 404)
    return JsonResponse(comment, status=201)


@csrf_exempt
@login_required
def comment_reply(request, comment_id):
    if request.method != "POST":
        return _error("POST required")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")
    content = (data.get('content') or '').strip()
    if not content:
        return _error("Comment cannot be empty")

    try:
        reply = comments.create_reply(profile_cache(), comment_id, request.user.id, content)
    except SocialActionError as e:
        return _error(e.message, e.status)
    if reply is None:
        return _error("Invalid parent comment", 404)
    return JsonResponse(reply, status=201)


@csrf_exempt
@login_required
def comment_detail(request, comment_id):
    if request.method != "DELETE":
        return _error("DELETE required")
    comment = get_object_or_404(Comment, pk=comment_id)
    if comment.user_id != request.user.id:
        return _error("Not yours", 403)

    deleted = comments.delete_comment(comment_id)
    return JsonResponse({"status": "success", "deleted": deleted})


@csrf_exempt
@login_required
def comment_like(request, comment_id):
    if request.method == "POST":
        result = comments.like_comment(profile_cache(), comment_id, request.user.id)
        if result is None:
            return _error("Comment not found", 404)
    elif request.method == "DELETE":
        comments.unlike_comment(comment_id, request.user.id)
    else:
        return _error("POST or DELETE required")

    comment = get_object_or_404(Comment, pk=comment_id)
    return JsonResponse({
        "liked": comments.is_comment_liked(comment_id, request.user.id),
        "likes_count": comment.likes_count,
    })


# ============================================================================
# GROUPS
# ============================================================================

@csrf_exempt
@login_required
def groups_view(request):
    if request.method == "GET":
        results = groups.get_groups(
            interests=request.GET.getlist('interest'),
            sub_interests=request.GET.getlist('sub_interest'),
            max_results=_limit(request, 50),
        )
        return JsonResponse({"groups": results})

    if request.method != "POST":
        return _error("GET or POST required")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")

    name = (data.get('name') or '').strip()
    interest = data.get('interest')
    if not name or not interest:
        return _error("Missing required fields")
    sub_interest = data.get('sub_interest')
    problem = profile_store.invalid_interests([interest], [sub_interest] if sub_interest else None)
    if problem:
        return _error(problem)
    is_open = data.get('is_open', True)
    if not isinstance(is_open, bool):
        return _error("is_open must be true or false")

    group = groups.create_group(
        request.user.id,
        name,
        interest,
        description=data.get('description'),
        sub_interest=sub_interest,
        is_open=is_open,
    )
    return JsonResponse(group, status=201)


@login_required
def group_detail(request, group_id):
    group = groups.get_group(group_id)
    if group is None:
        return _error("Group not found", 404)

    cache = profile_cache()
    return JsonResponse({
        "group": group,
        "is_member": groups.is_group_member(group_id, request.user.id),
        "is_admin": groups.is_group_admin(group_id, request.user.id),
        "admins": groups.get_group_admins(cache, group_id),
    })


@csrf_exempt
@login_required
def group_join(request, group_id):
    if request.method != "POST":
        return _error("POST required")
    membership = groups.join_group(group_id, request.user.id)
    if membership is None:
        return _error("Group not found", 404)
    return JsonResponse(membership)


@csrf_exempt
@login_required
def group_leave(request, group_id):
    if request.method != "POST":
        return _error("POST required")
    if not groups.leave_group(group_id, request.user.id):
        return _error("Not a member", 404)
    return JsonResponse({"status": "success"})


GROUP_ADMIN_ACTIONS = {
    'approve': groups.approve_member,
    'reject': groups.reject_member,
    'make-admin': groups.make_admin,
}


@csrf_exempt
@login_required
def group_manage(request, group_id, user_id, action):
    """Admin actions on one member: approve, reject, make-admin."""
    if request.method != "POST":
        return _error("POST required")
    if action not in GROUP_ADMIN_ACTIONS:
        return _error("Unknown action", 404)
    if groups.get_group(group_id) is None:
        return _error("Group not found", 404)
    if not groups.is_group_admin(group_id, request.user.id):
        return _error("Admins only", 403)

    if not GROUP_ADMIN_ACTIONS[action](group_id, user_id):
        return _error("Membership not found", 404)
    return JsonResponse({"status": "success", "group": groups.get_group(group_id)})


@login_required
def group_members(request, group_id):
    status = request.GET.get('status', 'approved')
    if status not in ('approved', 'pending'):
        return _error("Invalid status")
    if groups.get_group(group_id) is None:
        return _error("Group not found", 404)
    if status == 'pending' and not groups.is_group_admin(group_id, request.user.id):
        return _error("Admins only", 403)

    return JsonResponse({"members": groups.get_group_members(profile_cache(), group_id, status)})


@csrf_exempt
@login_required
def group_messages(request, group_id):
    if groups.get_group(group_id) is None:
        return _error("Group not found", 404)

    if request.method == "GET":
        if not groups.is_group_member(group_id, request.user.id):
            return _error("Only group members can read messages", 403)
        return JsonResponse({"messages": messaging.get_group_messages(profile_cache(), group_id)})

    if request.method != "POST":
        return _error("GET or POST required")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")
    content = (data.get('content') or '').strip()
    if not content:
        return _error("Message cannot be empty")

    try:
        message = messaging.send_group_message(group_id, request.user.id, content)
    except SocialActionError as e:
        return _error(e.message, e.status)
    return JsonResponse(message, status=201)


# ============================================================================
# DIRECT MESSAGES
# ============================================================================

@login_required
def conversations(request):
    results = messaging.get_conversations(profile_cache(), request.user.id)
    return JsonResponse({"conversations": results})


@csrf_exempt
@login_required
def direct_messages(request, user_id):
    other = get_object_or_404(User, pk=user_id)

    if request.method == "GET":
        messaging.mark_messages_as_read(other.id, request.user.id)
        return JsonResponse({"messages": messaging.get_direct_messages(request.user.id, other.id)})

    if request.method != "POST":
        return _error("GET or POST required")
    if other.id == request.user.id:
        return _error("Cannot message yourself")
    data = _body(request)
    if data is None:
        return _error("Invalid JSON")
    content = (data.get('content') or '').strip()
    if not content:
        return _error("Message cannot be empty")

    message = messaging.send_direct_message(profile_cache(), request.user.id, other.id, content)
    return JsonResponse(message, status=201)


# ============================================================================
# FOLLOWS
# ============================================================================

@csrf_exempt
@login_required
def toggle_follow(request, user_id):
    if request.method != "POST":
        return _error("POST required")
    target = get_object_or_404(User, pk=user_id)

    if follows.is_following(request.user.id, target.id):
        follows.unfollow_user(request.user.id, target.id)
        action = "unfollowed"
    else:
        try:
            follows.follow_user(profile_cache(), request.user.id, target.id)
        except SocialActionError as e:
            return _error(e.message, e.status)
        action = "followed"

    return JsonResponse({"action": action, **follows.get_follow_counts(target.id)})


@login_required
def follow_counts(request, user_id):
    return JsonResponse(follows.get_follow_counts(user_id))


@login_required
def followers_list(request, user_id):
    return JsonResponse({"profiles": follows.get_followers(profile_cache(), user_id)})


@login_required
def following_list(request, user_id):
    return JsonResponse({"profiles": follows.get_following(profile_cache(), user_id)})


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@csrf_exempt
@login_required
def notifications_view(request):
    if request.method == "DELETE":
        cleared = notifications.clear_notifications(request.user.id)
        return JsonResponse({"success": True, "cleared": cleared})
    results = notifications.get_notifications(request.user.id, limit=_limit(request, 50))
    return JsonResponse({"notifications": results})


@csrf_exempt
@login_required
def mark_notification_read(request, notification_id):
    if request.method != "POST":
        return _error("POST required")
    if not notifications.mark_notification_read(request.user.id, notification_id):
        return _error("Notification not found.", 404)
    return JsonResponse({"success": True})


@csrf_exempt
@login_required
def mark_all_notifications_read(request):
    if request.method != "POST":
        return _error("POST required")
    updated = notifications.mark_all_notifications_read(request.user.id)
    return JsonResponse({"success": True, "updated": updated})


@csrf_exempt
@login_required
def delete_notification(request, notification_id):
    if request.method not in ("POST", "DELETE"):
        return _error("POST or DELETE required")
    if not notifications.delete_notification(request.user.id, notification_id):
        return _error("Notification not found.", 404)
    return JsonResponse({"success": True})


@login_required
def unread_counts(request):
    return JsonResponse(notifications.unread_counts(request.user.id))
