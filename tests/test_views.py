import pytest

from campus import comments, groups, posts
from campus.models import Follow, Group, GroupMember, Notification, Profile, User


pytestmark = pytest.mark.django_db


@pytest.fixture
def alice_client(client, alice):
    client.force_login(alice)
    return client


def test_api_requires_login(client):
    response = client.get('/api/posts')
    assert response.status_code == 302


def test_register_and_login(client):
    response = client.post('/api/register', {'username': 'new_user', 'password': 'longenough'},
                           content_type='application/json')
    assert response.status_code == 201
    assert User.objects.filter(username='new_user').exists()

    client.post('/api/logout')
    response = client.post('/api/login', {'username': 'new_user', 'password': 'wrong-one'},
                           content_type='application/json')
    assert response.status_code == 400
    response = client.post('/api/login', {'username': 'new_user', 'password': 'longenough'},
                           content_type='application/json')
    assert response.status_code == 200


def test_profile_create_and_update(client, make_user):
    user = make_user('newbie', profile=False)
    client.force_login(user)

    assert client.get('/api/profile').status_code == 404

    response = client.post('/api/profile', {'name': 'Newbie', 'interests': ['Gaming']},
                           content_type='application/json')
    assert response.status_code == 201
    assert response.json()['interests'] == ['Gaming']

    response = client.put('/api/profile', {'bio': 'Valorant main', 'sub_interests': ['Valorant']},
                          content_type='application/json')
    assert response.status_code == 200
    assert Profile.objects.get(user=user).bio == 'Valorant main'


def test_profile_rejects_unknown_interest(alice_client):
    response = alice_client.put('/api/profile', {'interests': ['Knitting']},
                                content_type='application/json')
    assert response.status_code == 400
    assert response.json() == {"error": "Unknown interest: Knitting"}


def test_invalid_json(alice_client):
    response = alice_client.post('/api/posts', 'not json', content_type='application/json')
    assert response.status_code == 400


def test_post_lifecycle(alice_client, alice, bob):
    response = alice_client.post('/api/posts', {'content': 'Football at 4', 'interest_category': 'Sports'},
                                 content_type='application/json')
    assert response.status_code == 201
    post_id = response.json()['id']

    response = alice_client.post(f'/api/posts/{post_id}/like')
    assert response.json() == {'liked': True, 'likes_count': 1}
    response = alice_client.delete(f'/api/posts/{post_id}/like')
    assert response.json() == {'liked': False, 'likes_count': 0}

    detail = alice_client.get(f'/api/posts/{post_id}').json()
    assert detail['post']['content'] == 'Football at 4'
    assert detail['comments'] == []

    assert alice_client.delete(f'/api/posts/{post_id}').status_code == 200
    assert alice_client.get(f'/api/posts/{post_id}').status_code == 404


def test_cannot_delete_someone_elses_post(alice_client, bob):
    post = posts.create_post(bob.id, "mine")
    assert alice_client.delete(f"/api/posts/{post['id']}").status_code == 403


def test_like_missing_post(alice_client):
    assert alice_client.post('/api/posts/9999/like').status_code == 404


def test_comments_and_replies(alice_client, alice, bob, profiles):
    post = posts.create_post(bob.id, "Open mic night")
    response = alice_client.post(f"/api/posts/{post['id']}/comments", {'content': 'I will sing'},
                                 content_type='application/json')
    assert response.status_code == 201
    comment_id = response.json()['id']

    response = alice_client.post(f'/api/comments/{comment_id}/replies', {'content': 'duet?'},
                                 content_type='application/json')
    assert response.status_code == 201
    reply_id = response.json()['id']

    response = alice_client.post(f'/api/comments/{reply_id}/replies', {'content': 'too deep'},
                                 content_type='application/json')
    assert response.status_code == 400
    assert response.json() == {"error": "Maximum reply depth reached"}

    tree = alice_client.get(f"/api/posts/{post['id']}/comments").json()['comments']
    assert tree[0]['replies'][0]['id'] == reply_id

    assert alice_client.delete(f'/api/comments/{comment_id}').json()['deleted'] == 2


def test_group_is_open_must_be_a_json_boolean(alice_client):
    response = alice_client.post('/api/groups', {'name': 'Drama Club', 'interest': 'Theatre', 'is_open': 'false'},
                                 content_type='application/json')
    assert response.status_code == 400
    assert response.json() == {"error": "is_open must be true or false"}
    assert not Group.objects.exists()

    response = alice_client.post('/api/groups', {'name': 'Drama Club', 'interest': 'Theatre'},
                                 content_type='application/json')
    assert response.status_code == 201
    assert response.json()['is_open'] is True


def test_group_workflow(alice_client, alice, bob, client):
    response = alice_client.post('/api/groups', {'name': 'Drama Club', 'interest': 'Theatre', 'is_open': False},
                                 content_type='application/json')
    assert response.status_code == 201
    group_id = response.json()['id']

    client.force_login(bob)
    assert client.post(f'/api/groups/{group_id}/join').json()['status'] == 'pending'
    assert client.get(f'/api/groups/{group_id}/members?status=pending').status_code == 403
    assert client.post(f'/api/groups/{group_id}/messages', {'content': 'hi'},
                       content_type='application/json').status_code == 403
    assert client.post(f'/api/groups/{group_id}/members/{bob.id}/approve').status_code == 403

    client.force_login(alice)
    pending = client.get(f'/api/groups/{group_id}/members?status=pending').json()['members']
    assert [m['user_id'] for m in pending] == [bob.id]
    response = client.post(f'/api/groups/{group_id}/members/{bob.id}/approve')
    assert response.json()['group']['member_count'] == 2

    client.force_login(bob)
    response = client.post(f'/api/groups/{group_id}/messages', {'content': 'thanks!'},
                           content_type='application/json')
    assert response.status_code == 201
    assert GroupMember.objects.get(group_id=group_id, user=bob).status == 'approved'


def test_direct_messages_and_conversations(alice_client, alice, bob, client):
    response = alice_client.post(f'/api/messages/{bob.id}', {'content': 'hello bob'},
                                 content_type='application/json')
    assert response.status_code == 201

    client.force_login(bob)
    assert client.get('/api/unread-counts').json() == {
        'unread_messages_count': 1,
        'unread_notifications_count': 0,
    }
    conversations = client.get('/api/conversations').json()['conversations']
    assert conversations[0]['id'] == str(alice.id)
    assert conversations[0]['unread'] is True

    thread = client.get(f'/api/messages/{alice.id}').json()['messages']
    assert [m['content'] for m in thread] == ['hello bob']
    assert client.get('/api/unread-counts').json()['unread_messages_count'] == 0


def test_message_unknown_user(alice_client):
    assert alice_client.post('/api/messages/8888', {'content': 'hi'},
                             content_type='application/json').status_code == 404


def test_toggle_follow(alice_client, alice, bob):
    response = alice_client.post(f'/api/users/{bob.id}/follow')
    assert response.json() == {'action': 'followed', 'followers': 1, 'following': 0}
    response = alice_client.post(f'/api/users/{bob.id}/follow')
    assert response.json()['action'] == 'unfollowed'
    assert not Follow.objects.exists()

    assert alice_client.post(f'/api/users/{alice.id}/follow').status_code == 400


def test_suggested_users(alice_client, bob):
    response = alice_client.get('/api/profiles/suggested')
    assert [p['user_id'] for p in response.json()['profiles']] == [bob.id]


def test_notifications_endpoints(alice_client, alice, bob, profiles):
    post = posts.create_post(alice.id, "Swim meet")
    posts.like_post(profiles, post['id'], bob.id)
    comments.create_comment(profiles, post['id'], bob.id, "good luck")

    inbox = alice_client.get('/api/notifications').json()['notifications']
    assert [n['type'] for n in inbox] == ['comment', 'like']

    assert alice_client.post(f"/api/notifications/{inbox[0]['id']}/read").status_code == 200
    assert alice_client.post('/api/notifications/read-all').json()['updated'] == 1
    assert alice_client.post(f"/api/notifications/{inbox[1]['id']}/delete").status_code == 200
    assert alice_client.post('/api/notifications/999/read').status_code == 404
    assert alice_client.delete('/api/notifications').json()['cleared'] == 1
    assert not Notification.objects.exists()


def test_user_profile_page(alice_client, alice, bob):
    groups.create_group(bob.id, "Chess", 'Sports', sub_interest='Chess')
    posts.create_post(bob.id, "checkmate")

    data = alice_client.get(f'/api/users/{bob.id}').json()

    assert data['profile']['name'] == 'Bob'
    assert data['is_following'] is False
    assert [p['content'] for p in data['posts']] == ['checkmate']
    assert alice_client.get('/api/users/7777').status_code == 404
