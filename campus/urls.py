"""
================================================================================
CAMPUS SOCIAL NETWORK - API URL CONFIGURATION
================================================================================

MODULE PURPOSE
================================================================================
Maps the JSON API onto views. campus_site.urls mounts these patterns under
/api/, so every path below is relative to it.

URL STRUCTURE OVERVIEW
================================================================================
1. Authentication (register, login, logout)
2. Profiles & Discovery (own profile, user profile, list, suggestions)
3. Posts (list/create, detail/delete, like/unlike)
4. Comments (list/tree/create, reply, delete, like/unlike)
5. Groups (list/create, detail, join/leave, admin actions, members, chat)
6. Direct Messages (conversations, thread/send)
7. Follows (toggle, counts, followers, following)
8. Notifications (list/clear, read, read-all, delete, unread counts)

NAMING CONVENTIONS
================================================================================
- Resource actions: <resource>_<action> (e.g., 'post_like', 'group_join')
- Toggles: prefixed with 'toggle_'
- Like endpoints take POST to like and DELETE to unlike

URL PARAMETER TYPES
================================================================================
- <int:user_id>, <int:post_id>, <int:comment_id>, <int:group_id>,
  <int:notification_id>: primary keys
- <str:action>: group admin action (approve, reject, make-admin)

================================================================================
"""

from django.urls import path

from . import views


urlpatterns = [

    # ========================================================================
    # SECTION 1: AUTHENTICATION
    # ========================================================================

    path("register", views.register, name="register"),
    path("login", views.login_view, name="login"),
    path("logout", views.logout_view, name="logout"),


    # ========================================================================
    # SECTION 2: PROFILES & DISCOVERY
    # ========================================================================

    path("profile", views.my_profile, name="my_profile"),  # GET / POST create / PUT update
    path("profiles", views.profiles_list, name="profiles_list"),
    path("profiles/suggested", views.suggested_users, name="suggested_users"),
    path("users/<int:user_id>", views.user_profile, name="user_profile"),


    # ========================================================================
    # SECTION 3: POSTS
    # ========================================================================

    path("posts", views.posts_view, name="posts"),
    path("posts/<int:post_id>", views.post_detail, name="post_detail"),
    path("posts/<int:post_id>/like", views.post_like, name="post_like"),


    # ========================================================================
    # SECTION 4: COMMENTS
    # ========================================================================

    path("posts/<int:post_id>/comments", views.post_comments, name="post_comments"),
    path("comments/<int:comment_id>", views.comment_detail, name="comment_detail"),
    path("comments/<int:comment_id>/replies", views.comment_reply, name="comment_reply"),
    path("comments/<int:comment_id>/like", views.comment_like, name="comment_like"),


    # ========================================================================
    # SECTION 5: GROUPS
    # ========================================================================

    path("groups", views.groups_view, name="groups"),
    path("groups/<int:group_id>", views.group_detail, name="group_detail"),
    path("groups/<int:group_id>/join", views.group_join, name="group_join"),
    path("groups/<int:group_id>/leave", views.group_leave, name="group_leave"),
    path("groups/<int:group_id>/members", views.group_members, name="group_members"),
    path(
        "groups/<int:group_id>/members/<int:user_id>/<str:action>",
        views.group_manage,
        name="group_manage"
    ),  # approve / reject / make-admin
    path("groups/<int:group_id>/messages", views.group_messages, name="group_messages"),


    # ========================================================================
    # SECTION 6: DIRECT MESSAGES
    # ========================================================================

    path("conversations", views.conversations, name="conversations"),
    path("messages/<int:user_id>", views.direct_messages, name="direct_messages"),


    # ========================================================================
    # SECTION 7: FOLLOWS
    # ========================================================================

    path("users/<int:user_id>/follow", views.toggle_follow, name="toggle_follow"),
    path("users/<int:user_id>/follow-counts", views.follow_counts, name="follow_counts"),
    path("users/<int:user_id>/followers", views.followers_list, name="followers_list"),
    path("users/<int:user_id>/following", views.following_list, name="following_list"),


    # ========================================================================
    # SECTION 8: NOTIFICATIONS
    # ========================================================================

    path("notifications", views.notifications_view, name="notifications"),  # GET / DELETE clears
    path("notifications/read-all", views.mark_all_notifications_read, name="mark_all_notifications_read"),
    path("notifications/<int:notification_id>/read", views.mark_notification_read, name="mark_notification_read"),
    path("notifications/<int:notification_id>/delete", views.delete_notification, name="delete_notification"),
    path("unread-counts", views.unread_counts, name="unread_counts"),
]
