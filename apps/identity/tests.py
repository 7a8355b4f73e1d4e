import json
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.test import TestCase

from apps.core.exceptions import ConflictError, NotFoundError
from apps.tasks.models import Task, TaskPriority, TaskStatus
from .models import User, UserRole
from .schemas import UserCreate, UserUpdate
from . import services


def make_payload(**overrides):
    data = {
        'username': 'alice',
        'email': 'a@x.com',
        'password': 'pw',
        'name': 'Alice',
    }
    data.update(overrides)
    return UserCreate(**data)


class UserServiceTest(TestCase):

    def test_create_defaults_to_user_role(self):
        dto = services.create_user(make_payload())
        self.assertEqual(dto.username, 'alice')
        self.assertEqual(dto.role, UserRole.USER)
        self.assertFalse(hasattr(dto, 'password'))

    def test_password_is_hashed(self):
        dto = services.create_user(make_payload())
        stored = User.objects.get(id=dto.id).password
        self.assertNotEqual(stored, 'pw')
        self.assertTrue(services.verify_password(dto.id, 'pw'))
        self.assertFalse(services.verify_password(dto.id, 'wrong'))

    def test_duplicate_username_conflicts(self):
        services.create_user(make_payload())
        with self.assertRaises(ConflictError):
            services.create_user(make_payload(email='other@x.com'))
        self.assertEqual(User.objects.count(), 1)

    def test_duplicate_email_conflicts(self):
        services.create_user(make_payload())
        with self.assertRaises(ConflictError):
            services.create_user(make_payload(username='alice2'))

    def test_unique_constraint_conflicts_when_precheck_is_passed(self):
        services.create_user(make_payload())
        with patch.object(services, '_ensure_unique'):
            with self.assertRaises(ConflictError) as ctx:
                services.create_user(make_payload(email='other@x.com'))
        self.assertEqual(ctx.exception.message, 'Username or email already exists')
        self.assertEqual(User.objects.count(), 1)

    def test_unique_constraint_conflicts_on_update(self):
        services.create_user(make_payload())
        bob = services.create_user(make_payload(username='bob', email='b@x.com'))
        with patch.object(services, '_ensure_unique'):
            with self.assertRaises(ConflictError):
                services.update_user(bob.id, UserUpdate(username='bob', email='a@x.com', name='Bob'))
        self.assertEqual(User.objects.get(id=bob.id).email, 'b@x.com')

    def test_email_comparison_is_case_sensitive(self):
        services.create_user(make_payload())
        dto = services.create_user(make_payload(username='alice2', email='A@x.com'))
        self.assertEqual(dto.email, 'A@x.com')

    def test_get_missing_user(self):
        with self.assertRaises(NotFoundError):
            services.get_user(999999)

    def test_update_with_empty_password_keeps_hash(self):
        dto = services.create_user(make_payload())
        original_hash = User.objects.get(id=dto.id).password

        services.update_user(dto.id, UserUpdate(username='alice', email='a@x.com', password='', name='Alicia', role='ADMIN'))
        services.update_user(dto.id, UserUpdate(username='alice', email='a@x.com', name='Alicia', role='ADMIN'))

        user = User.objects.get(id=dto.id)
        self.assertEqual(user.password, original_hash)
        self.assertEqual(user.name, 'Alicia')
        self.assertEqual(user.role, UserRole.ADMIN)

    def test_update_with_password_rehashes(self):
        dto = services.create_user(make_payload())
        original_hash = User.objects.get(id=dto.id).password

        services.update_user(dto.id, UserUpdate(username='alice', email='a@x.com', password='new-pw', name='Alice'))

        self.assertNotEqual(User.objects.get(id=dto.id).password, original_hash)
        self.assertTrue(services.verify_password(dto.id, 'new-pw'))
        self.assertFalse(services.verify_password(dto.id, 'pw'))

    def test_update_role_resets_when_omitted(self):
        dto = services.create_user(make_payload(role='ADMIN'))
        updated = services.update_user(dto.id, UserUpdate(username='alice', email='a@x.com', name='Alice'))
        self.assertEqual(updated.role, UserRole.USER)

    def test_update_username_collision(self):
        services.create_user(make_payload())
        bob = services.create_user(make_payload(username='bob', email='b@x.com'))
        with self.assertRaises(ConflictError):
            services.update_user(bob.id, UserUpdate(username='alice', email='b@x.com', name='Bob'))
        with self.assertRaises(ConflictError):
            services.update_user(bob.id, UserUpdate(username='bob', email='a@x.com', name='Bob'))

    def test_update_missing_user(self):
        with self.assertRaises(NotFoundError):
            services.update_user(999999, UserUpdate(username='x', email='x@x.com', name='X'))

    def test_delete_twice(self):
        dto = services.create_user(make_payload())
        services.delete_user(dto.id)
        with self.assertRaises(NotFoundError):
            services.delete_user(dto.id)

    def test_delete_owner_of_tasks_is_refused(self):
        dto = services.create_user(make_payload())
        Task.objects.create(title='T1', status=TaskStatus.TODO, priority=TaskPriority.LOW, owner_id=dto.id)
        with self.assertRaises(ConflictError):
            services.delete_user(dto.id)
        self.assertTrue(User.objects.filter(id=dto.id).exists())

    def test_delete_assignee_unassigns_tasks(self):
        owner = services.create_user(make_payload())
        helper = services.create_user(make_payload(username='bob', email='b@x.com'))
        task = Task.objects.create(
            title='T1', status=TaskStatus.TODO, priority=TaskPriority.LOW,
            owner_id=owner.id, assigned_to_id=helper.id,
        )

        services.delete_user(helper.id)

        task.refresh_from_db()
        self.assertIsNone(task.assigned_to_id)


class UserAPITest(TestCase):

    def post_user(self, **overrides):
        data = {'username': 'alice', 'email': 'a@x.com', 'password': 'pw', 'name': 'Alice'}
        data.update(overrides)
        return self.client.post('/api/users', data=json.dumps(data), content_type='application/json')

    def test_create_user(self):
        response = self.post_user()
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['role'], 'USER')
        self.assertNotIn('password', data)
        self.assertIn('createdAt', data)
        self.assertRegex(data['createdAt'], r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$')

    def test_create_duplicate_returns_409(self):
        self.post_user()
        response = self.post_user(email='other@x.com')
        self.assertEqual(response.status_code, 409)
        self.assertIn('Username already exists', response.json()['detail'])

    def test_create_invalid_email_returns_400(self):
        response = self.post_user(email='not-an-email')
        self.assertEqual(response.status_code, 400)

    def test_create_missing_field_returns_400(self):
        response = self.client.post(
            '/api/users',
            data=json.dumps({'username': 'alice', 'password': 'pw', 'name': 'Alice'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)

    def test_create_over_long_fields_returns_400(self):
        self.assertEqual(self.post_user(username='u' * 51).status_code, 400)
        self.assertEqual(self.post_user(name='n' * 101).status_code, 400)
        self.assertEqual(self.post_user(email='e' * 250 + '@x.com').status_code, 400)
        self.assertEqual(User.objects.count(), 0)
        self.assertEqual(self.post_user(username='u' * 50, name='n' * 100).status_code, 201)

    def test_create_unknown_role_returns_400(self):
        response = self.post_user(role='ROOT')
        self.assertEqual(response.status_code, 400)

    def test_list_and_get(self):
        user_id = self.post_user().json()['id']
        self.post_user(username='bob', email='b@x.com', name='Bob')

        response = self.client.get('/api/users')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([u['username'] for u in response.json()], ['alice', 'bob'])

        response = self.client.get(f'/api/users/{user_id}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['email'], 'a@x.com')

        self.assertEqual(self.client.get('/api/users/999999').status_code, 404)

    def test_update_user(self):
        user_id = self.post_user().json()['id']
        response = self.client.put(
            f'/api/users/{user_id}',
            data=json.dumps({'username': 'alice', 'email': 'alice@x.com', 'password': '', 'name': 'Alice A', 'role': 'ADMIN'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['email'], 'alice@x.com')
        self.assertEqual(response.json()['role'], 'ADMIN')
        self.assertTrue(services.verify_password(user_id, 'pw'))

    def test_update_missing_user_returns_404(self):
        response = self.client.put(
            '/api/users/999999',
            data=json.dumps({'username': 'x', 'email': 'x@x.com', 'name': 'X'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 404)

    def test_delete_user(self):
        user_id = self.post_user().json()['id']
        self.assertEqual(self.client.delete(f'/api/users/{user_id}').status_code, 204)
        self.assertEqual(self.client.delete(f'/api/users/{user_id}').status_code, 404)


class SeedUsersCommandTest(TestCase):

    def test_seed_is_idempotent(self):
        call_command('seed_users', stdout=StringIO())
        call_command('seed_users', stdout=StringIO())
        self.assertEqual(User.objects.count(), 2)
        admin = User.objects.get(username='admin')
        self.assertEqual(admin.role, UserRole.ADMIN)
        self.assertTrue(services.verify_password(admin.id, 'password'))
