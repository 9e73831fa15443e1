from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import Group as AuthGroup
from django.urls import reverse
from django.utils.html import format_html

from .models import (
    User, Profile, Post, PostLike, Comment, CommentLike, Group, GroupMember,
    GroupMessage, DirectMessage, Follow, Notification
)


def short(text, length):
    if text:
        return text[:length] + '...' if len(text) > length else text
    return "(no content)"


# ==================== ADMIN CLASSES ====================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'is_staff', 'is_superuser', 'date_joined')
    search_fields = ('username', 'email')


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'name', 'skill_level', 'student_type', 'profile_completed', 'created_at')
    list_filter = ('profile_completed', 'skill_level', 'student_type')
    search_fields = ('name', 'user__username', 'city', 'department')


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ('id', 'user_link', 'post_type', 'interest_category', 'likes_count',
                    'comments_count', 'created_at', 'content_short')
    list_filter = ('post_type', 'interest_category')
    search_fields = ('content', 'user__username')
    readonly_fields = ('likes_count', 'comments_count')

    def user_link(self, obj):
        url = reverse("admin:campus_user_change", args=[obj.user_id])
        return format_html('<a href="{}">{}</a>', url, obj.user.username)
    user_link.short_description = 'User'
    user_link.admin_order_field = 'user__username'

    def content_short(self, obj):
        return short(obj.content, 80)
    content_short.short_description = 'Content'


@admin.register(PostLike)
class PostLikeAdmin(admin.ModelAdmin):
    list_display = ('id', 'post', 'user', 'created_at')
    search_fields = ('user__username', 'post__id')


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'post', 'parent_comment_id', 'likes_count', 'replies_count',
                    'created_at', 'content_short')
    search_fields = ('content', 'user__username', 'post__id')
    readonly_fields = ('likes_count', 'replies_count')

    def content_short(self, obj):
        return short(obj.content, 50)
    content_short.short_description = 'Content'


@admin.register(CommentLike)
class CommentLikeAdmin(admin.ModelAdmin):
    list_display = ('id', 'comment', 'user', 'created_at')
    search_fields = ('user__username',)


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'interest', 'sub_interest', 'is_open', 'member_count', 'creator', 'created_at')
    list_filter = ('is_open', 'interest')
    search_fields = ('name', 'creator__username')
    readonly_fields = ('member_count',)


@admin.register(GroupMember)
class GroupMemberAdmin(admin.ModelAdmin):
    list_display = ('id', 'group', 'user', 'role', 'status', 'joined_at')
    list_filter = ('role', 'status')
    search_fields = ('group__name', 'user__username')


@admin.register(GroupMessage)
class GroupMessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'group', 'user', 'created_at', 'content_short')
    search_fields = ('content', 'group__name', 'user__username')

    def content_short(self, obj):
        return short(obj.content, 50)
    content_short.short_description = 'Content'


@admin.register(DirectMessage)
class DirectMessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'sender', 'receiver', 'read', 'created_at', 'content_short')
    list_filter = ('read', 'created_at')
    search_fields = ('content', 'sender__username', 'receiver__username')

    def content_short(self, obj):
        return short(obj.content, 50)
    content_short.short_description = 'Content'


@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    list_display = ('id', 'follower', 'following', 'created_at')
    search_fields = ('follower__username', 'following__username')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'from_user', 'type', 'content', 'read', 'created_at')
    list_filter = ('type', 'read', 'created_at')
    search_fields = ('user__username', 'from_user__username', 'content')


# Django's auth Group would clash by name with interest groups in the index
admin.site.unregister(AuthGroup)

admin.site.site_header = "Campus Network Admin"
admin.site.site_title = "Campus Network Admin Portal"
admin.site.index_title = "Welcome"
