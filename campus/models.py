"""
================================================================================
CAMPUS SOCIAL NETWORK - DATABASE MODELS
================================================================================

@file        models.py
@description Django ORM models defining the complete store schema
@version     1.0.0

MODULE PURPOSE
================================================================================
This module defines all collections of the campus network:
- User model (extended from AbstractUser)
- Profiles with interest tags
- Posts, post likes
- Comments with replies, comment likes
- Interest groups with membership approval
- Group and direct messages
- Follow graph
- Notifications

DATABASE STRUCTURE
================================================================================
1. User & Profile
   - User (AbstractUser extension)
   - Profile (OneToOne with User)

2. Content Models
   - Post, PostLike
   - Comment, CommentLike

3. Groups
   - Group, GroupMember, GroupMessage

4. Messaging & Social
   - DirectMessage
   - Follow

5. Notifications
   - Notification

MODEL RELATIONSHIPS
================================================================================
User (1) ──────> (1) Profile
User (1) ──────> (N) Post
Post (1) ──────> (N) Comment
Comment (1) ────> (N) Comment (replies, plain reference, no cascade)
Group (1) ─────> (N) GroupMember, GroupMessage
User (N) <─────> (N) User (Follow, DirectMessage)

DENORMALIZED COUNTERS
================================================================================
likes_count, comments_count, replies_count and member_count are only ever
changed through campus.store.increment(). Like rows carry no unique
constraint: uniqueness is checked by the writer before insert.

================================================================================
"""

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


# ============================================================================
# CONSTANTS & CHOICES
# ============================================================================

"""
Broad interest categories with their sub-interests.
Profiles, posts and groups are tagged from this vocabulary.
"""
INTEREST_CATEGORIES = {
    'Sports': [
        'Basketball', 'Football', 'Cricket', 'Badminton', 'Volleyball',
        'Table Tennis', 'Tennis', 'Chess', 'Kabaddi', 'Athletics',
        'Swimming', 'Boxing', 'MMA',
    ],
    'Dance': [
        'Hip-Hop', 'Contemporary', 'Classical', 'Freestyle', 'Breaking',
        'Bollywood', 'Kathak', 'Bharatnatyam', 'Jazz', 'Salsa',
    ],
    'Music': [
        'Indie', 'Pop', 'Classical', 'Hip-Hop', 'Rock', 'Jazz', 'EDM',
        'Ghazal', 'Folk', 'Instrumental', 'Rap',
    ],
    'Creative': [
        'Photography', 'Filmmaking', 'Writing', 'Poetry', 'Content Creation',
        'Graphic Design', 'UI/UX', 'Illustration',
    ],
    'Theatre': [
        'Acting', 'Scriptwriting', 'Direction', 'Street Play', 'Improvisation',
    ],
    'Fitness': [
        'Gym', 'Yoga', 'Calisthenics', 'CrossFit', 'Zumba',
    ],
    'Gaming': [
        'BGMI', 'Valorant', 'CS:GO', 'FIFA', 'Chess Online', 'Mobile Games',
    ],
}

BROAD_INTERESTS = list(INTEREST_CATEGORIES)

SKILL_LEVEL_CHOICES = [
    ('Beginner', 'Beginner'),
    ('Intermediate', 'Intermediate'),
    ('Advanced', 'Advanced'),
]

LOOKING_FOR_CHOICES = [
    ('Team', 'Team'),
    ('Collaborators', 'Collaborators'),
    ('Exploring', 'Exploring'),
]

STUDENT_TYPE_CHOICES = [
    ('Hosteler', 'Hosteler'),
    ('Localite', 'Localite'),
]

POST_TYPE_CHOICES = [
    ('looking_for_team', 'Looking for team'),
    ('looking_for_collaborators', 'Looking for collaborators'),
    ('update', 'Update'),
]

MEMBER_ROLE_CHOICES = [
    ('admin', 'Admin'),
    ('member', 'Member'),
]

MEMBER_STATUS_CHOICES = [
    ('approved', 'Approved'),
    ('pending', 'Pending'),
]

NOTIFICATION_TYPE_CHOICES = [
    ('message', 'Message'),
    ('follow', 'Follow'),
    ('like', 'Post like'),
    ('comment', 'Post comment'),
    ('comment_like', 'Comment like'),
    ('reply', 'Reply'),
    ('reply_like', 'Reply like'),
]


# ============================================================================
# SECTION 1: USER & PROFILE MODELS
# ============================================================================

class User(AbstractUser):
    """
    Authentication identity.

    Everything shown to other users lives on Profile; the user row only
    carries credentials.

    Related Names:
        profile: the user's Profile
        posts: QuerySet of user's Post objects
        following: Follow edges where this user is the follower
        followers: Follow edges where this user is followed
        notifications: QuerySet of received Notification objects
    """


class Profile(models.Model):
    """
    Public identity snippet of a user.

    One profile per user, created at signup and only edited by its owner.
    Profiles are never deleted by the application.

    Attributes:
        user (OneToOneField): Owner
        name (CharField): Display name
        avatar_url (URLField): Hosted avatar image
        interests (JSONField): Broad interest categories
        sub_interests (JSONField): Specific sub-interests
        skill_level (CharField): Beginner / Intermediate / Advanced
        looking_for (CharField): Team / Collaborators / Exploring
        profile_completed (BooleanField): Setup wizard finished

    Example:
        profile = Profile.objects.create(
            user=user, name="Asha", interests=["Sports", "Music"]
        )
    """

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='profile',
        help_text="Owner of this profile"
    )
    name = models.CharField(
        max_length=100,
        help_text="Display name"
    )
    bio = models.TextField(
        max_length=500,
        blank=True,
        null=True,
        help_text="Profile biography"
    )
    avatar_url = models.URLField(
        max_length=500,
        blank=True,
        null=True,
        help_text="Hosted avatar image URL"
    )
    interests = models.JSONField(
        default=list,
        blank=True,
        help_text="Broad interest categories"
    )
    sub_interests = models.JSONField(
        default=list,
        blank=True,
        help_text="Specific sub-interests within categories"
    )
    skill_level = models.CharField(
        max_length=20,
        choices=SKILL_LEVEL_CHOICES,
        blank=True,
        null=True
    )
    looking_for = models.CharField(
        max_length=20,
        choices=LOOKING_FOR_CHOICES,
        blank=True,
        null=True
    )
    city = models.CharField(max_length=100, blank=True, null=True)
    student_type = models.CharField(
        max_length=20,
        choices=STUDENT_TYPE_CHOICES,
        blank=True,
        null=True
    )
    department = models.CharField(max_length=200, blank=True, null=True)
    branch = models.CharField(max_length=200, blank=True, null=True)
    year = models.CharField(max_length=20, blank=True, null=True)
    profile_completed = models.BooleanField(
        default=False,
        help_text="Profile setup finished"
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'profiles'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


# ============================================================================
# SECTION 2: CONTENT MODELS (Posts, Comments, Likes)
# ============================================================================

class Post(models.Model):
    """
    Interest-tagged post.

    Attributes:
        user (ForeignKey): Post author
        content (TextField): Post text
        post_type (CharField): looking_for_team / looking_for_collaborators / update
        interest_category (CharField): Broad interest the post relates to
        sub_interest (CharField): Specific sub-interest tag
        likes_count (IntegerField): Derived counter, atomic increments only
        comments_count (IntegerField): Top-level comment counter

    Meta:
        ordering: Newest first
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='posts',
        help_text="Author of this post"
    )
    content = models.TextField(
        help_text="Post text content"
    )
    post_type = models.CharField(
        max_length=30,
        choices=POST_TYPE_CHOICES,
        default='update'
    )
    interest_category = models.CharField(max_length=50, blank=True, null=True)
    sub_interest = models.CharField(max_length=50, blank=True, null=True)
    likes_count = models.IntegerField(default=0)
    comments_count = models.IntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'posts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='posts_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.content[:50]}"


class PostLike(models.Model):
    """Like on a post. (post, user) uniqueness is checked before insert."""

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name='likes'
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='post_likes'
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'post_likes'
        indexes = [
            models.Index(fields=['post', 'user'], name='post_likes_post_user_idx'),
        ]


class Comment(models.Model):
    """
    Comment on a post, or a reply to another comment.

    parent_comment is a plain reference without a database constraint or
    cascade: deleting a comment does not touch its replies by itself.
    campus.comments.delete_comment walks the reply forest explicitly.

    Attributes:
        post (ForeignKey): Post being commented on
        user (ForeignKey): Comment author
        parent_comment (ForeignKey): Parent comment for replies
        likes_count (IntegerField): Derived like counter
        replies_count (IntegerField): Direct reply counter

    Example:
        comment = Comment.objects.create(post=post, user=user, content="Nice")
        reply = Comment.objects.create(
            post=post, user=other, content="Thanks!", parent_comment=comment
        )
    """

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Post being commented on"
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Comment author"
    )
    content = models.TextField()
    parent_comment = models.ForeignKey(
        'self',
        null=True,
        blank=True,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='replies',
        help_text="Parent comment for replies"
    )
    likes_count = models.IntegerField(default=0)
    replies_count = models.IntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'comments'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['post', 'created_at'], name='comments_post_created_idx'),
            models.Index(fields=['parent_comment'], name='comments_parent_idx'),
        ]

    def __str__(self):
        return f"Comment {self.pk} on Post {self.post_id}"


class CommentLike(models.Model):
    """Like on a comment or reply."""

    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        related_name='likes'
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='comment_likes'
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'comment_likes'
        indexes = [
            models.Index(fields=['comment', 'user'], name='comment_likes_cmt_user_idx'),
        ]


# ============================================================================
# SECTION 3: GROUP MODELS
# ============================================================================

class Group(models.Model):
    """
    Interest group.

    Open groups approve joins immediately; closed groups queue them as
    pending until an admin approves.

    Attributes:
        name (CharField): Group name
        interest (CharField): Broad interest category
        is_open (BooleanField): Joins are auto-approved
        member_count (IntegerField): Approved members, atomic increments only
        creator (ForeignKey): User who created the group
    """

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    interest = models.CharField(max_length=50)
    sub_interest = models.CharField(max_length=50, blank=True, null=True)
    is_open = models.BooleanField(default=True)
    member_count = models.IntegerField(default=0)
    creator = models.ForeignKey(
        User,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='created_groups'
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'groups'
        ordering = ['-member_count']

    def __str__(self):
        return self.name


class GroupMember(models.Model):
    """
    Membership of a user in a group.

    Meta:
        unique_together: One membership row per user per group
    """

    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        related_name='members'
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='group_memberships'
    )
    role = models.CharField(
        max_length=10,
        choices=MEMBER_ROLE_CHOICES,
        default='member'
    )
    status = models.CharField(
        max_length=10,
        choices=MEMBER_STATUS_CHOICES,
        default='approved'
    )
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'group_members'
        unique_together = ('group', 'user')
        indexes = [
            models.Index(fields=['group', 'status'], name='members_group_status_idx'),
            models.Index(fields=['user', 'status'], name='members_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.user} in {self.group} ({self.status})"


class GroupMessage(models.Model):
    """Chat message posted in a group. Append-only."""

    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        related_name='messages'
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='group_messages'
    )
    content = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'group_messages'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['group', 'created_at'], name='group_msgs_group_created_idx'),
        ]


# ============================================================================
# SECTION 4: MESSAGING & SOCIAL RELATIONSHIP MODELS
# ============================================================================

class DirectMessage(models.Model):
    """
    One-to-one chat message.

    Attributes:
        sender (ForeignKey): User who sent the message
        receiver (ForeignKey): User who receives it
        read (BooleanField): Set by the receiver when the thread is opened
    """

    sender = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='sent_messages'
    )
    receiver = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='received_messages'
    )
    content = models.TextField()
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'direct_messages'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['sender', 'created_at'], name='dms_sender_created_idx'),
            models.Index(fields=['receiver', 'created_at'], name='dms_receiver_created_idx'),
        ]

    def __str__(self):
        return f"{self.sender} to {self.receiver}: {self.content[:30]}"


class Follow(models.Model):
    """
    Directed follow edge.

    Meta:
        unique_together: Prevents duplicate follow relationships
    """

    follower = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='following',
        help_text="User who is following"
    )
    following = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='followers',
        help_text="User being followed"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'follows'
        unique_together = ('follower', 'following')


# ============================================================================
# SECTION 5: NOTIFICATION MODELS
# ============================================================================

class Notification(models.Model):
    """
    Inbox entry written as a side effect of another user's action.

    Attributes:
        user (ForeignKey): Recipient
        from_user (ForeignKey): Actor
        type (CharField): message / follow / like / comment / comment_like /
            reply / reply_like
        content (CharField): Display text, e.g. "Asha liked your post"
        link (CharField): Client-relative navigation path
        read (BooleanField): Read status

    Meta:
        ordering: Newest first
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text="User receiving this notification"
    )
    from_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='+',
        help_text="User who performed the action"
    )
    type = models.CharField(
        max_length=20,
        choices=NOTIFICATION_TYPE_CHOICES
    )
    content = models.CharField(max_length=255)
    link = models.CharField(max_length=255, blank=True, default='')
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='notifs_user_created_idx'),
            models.Index(fields=['user', 'read'], name='notifs_user_read_idx'),
        ]
