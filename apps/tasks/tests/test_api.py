"""
Integration tests for task API endpoints.
Tests status codes, camelCase payloads, caller resolution and the end-to-end flow.
"""
import json

from django.contrib.auth.hashers import make_password
from django.test import TestCase, override_settings

from apps.identity.models import User
from apps.tasks.models import Task


class TaskAPITestBase(TestCase):

    def setUp(self):
        self.alice = User.objects.create(
            username='alice', email='a@x.com', password=make_password('pw'), name='Alice',
        )
        self.bob = User.objects.create(
            username='bob', email='b@x.com', password=make_password('pw'), name='Bob',
        )

    def post_task(self, caller=None, **overrides):
        data = {'title': 'T1', 'status': 'TODO', 'priority': 'LOW'}
        data.update(overrides)
        headers = {'HTTP_X_USER_ID': str(caller.id if caller else self.alice.id)}
        return self.client.post('/api/tasks', data=json.dumps(data), content_type='application/json', **headers)

    def put_task(self, task_id, **overrides):
        data = {'title': 'T1', 'status': 'TODO', 'priority': 'LOW'}
        data.update(overrides)
        return self.client.put(f'/api/tasks/{task_id}', data=json.dumps(data), content_type='application/json')


class TaskCrudAPITest(TaskAPITestBase):

    def test_create_task(self):
        response = self.post_task(description='first', dueDate='2030-01-01T10:00:00', assignedToId=self.bob.id)
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertEqual(data['title'], 'T1')
        self.assertEqual(data['dueDate'], '2030-01-01T10:00:00')
        self.assertEqual(data['owner']['username'], 'alice')
        self.assertEqual(data['assignedTo']['username'], 'bob')
        self.assertNotIn('password', data['owner'])
        self.assertIn('createdAt', data['owner'])

    def test_owner_comes_from_caller_header(self):
        response = self.post_task(caller=self.bob)
        self.assertEqual(response.json()['owner']['id'], self.bob.id)

    def test_owner_falls_back_to_default_setting(self):
        with override_settings(DEFAULT_TASK_OWNER_ID=self.bob.id):
            response = self.client.post(
                '/api/tasks',
                data=json.dumps({'title': 'T1', 'status': 'TODO', 'priority': 'LOW'}),
                content_type='application/json',
            )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['owner']['id'], self.bob.id)

    def test_unknown_caller_returns_404(self):
        response = self.client.post(
            '/api/tasks',
            data=json.dumps({'title': 'T1', 'status': 'TODO', 'priority': 'LOW'}),
            content_type='application/json',
            HTTP_X_USER_ID='999999',
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(Task.objects.count(), 0)

    def test_malformed_caller_header_returns_400(self):
        response = self.client.post(
            '/api/tasks',
            data=json.dumps({'title': 'T1', 'status': 'TODO', 'priority': 'LOW'}),
            content_type='application/json',
            HTTP_X_USER_ID='alice',
        )
        self.assertEqual(response.status_code, 400)

    def test_unknown_assignee_returns_404(self):
        response = self.post_task(assignedToId=999999)
        self.assertEqual(response.status_code, 404)
        self.assertIn('Assigned user', response.json()['detail'])

    def test_validation_errors_return_400(self):
        self.assertEqual(self.post_task(title='   ').status_code, 400)
        self.assertEqual(self.post_task(status='SOMEDAY').status_code, 400)
        self.assertEqual(self.post_task(priority=None).status_code, 400)
        self.assertEqual(self.post_task(dueDate='not a date').status_code, 400)
        self.assertEqual(self.post_task(title='x' * 201).status_code, 400)
        self.assertEqual(Task.objects.count(), 0)

    def test_title_at_column_limit_is_accepted(self):
        response = self.post_task(title='x' * 200)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.json()['title']), 200)

    def test_get_missing_task(self):
        self.assertEqual(self.client.get('/api/tasks/999999').status_code, 404)

    def test_update_task(self):
        task_id = self.post_task(assignedToId=self.bob.id).json()['id']

        response = self.put_task(task_id, title='T1 v2', status='IN_PROGRESS', priority='HIGH')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['title'], 'T1 v2')
        self.assertEqual(data['status'], 'IN_PROGRESS')
        self.assertIsNone(data['assignedTo'])
        self.assertEqual(data['owner']['id'], self.alice.id)

    def test_update_missing_task_returns_404(self):
        self.assertEqual(self.put_task(999999).status_code, 404)

    def test_delete_missing_task_returns_404(self):
        self.assertEqual(self.client.delete('/api/tasks/999999').status_code, 404)

    def test_scenario(self):
        """User signup, task create, reassign, unassign, delete."""
        response = self.client.post(
            '/api/users',
            data=json.dumps({'username': 'carol', 'email': 'c@x.com', 'password': 'pw', 'name': 'Carol'}),
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 201)
        carol = response.json()
        self.assertEqual(carol['role'], 'USER')

        response = self.post_task(caller=User.objects.get(id=carol['id']))
        self.assertEqual(response.status_code, 201)
        task = response.json()
        self.assertIsNone(task['assignedTo'])

        response = self.put_task(task['id'], assignedToId=self.bob.id)
        self.assertEqual(response.json()['assignedTo']['id'], self.bob.id)

        response = self.put_task(task['id'])
        self.assertIsNone(response.json()['assignedTo'])

        self.assertEqual(self.client.delete(f"/api/tasks/{task['id']}").status_code, 204)
        self.assertEqual(self.client.get(f"/api/tasks/{task['id']}").status_code, 404)


class TaskQueryAPITest(TaskAPITestBase):

    def setUp(self):
        super().setUp()
        self.ids = [
            self.post_task(title='Fix login', status='TODO', priority='HIGH', dueDate='2000-01-01T00:00:00').json()['id'],
            self.post_task(title='Docs', description='login flow', status='DONE', priority='LOW',
                           assignedToId=self.bob.id).json()['id'],
            self.post_task(caller=self.bob, title='Deploy', status='TODO', priority='URGENT',
                           dueDate='2999-01-01T00:00:00').json()['id'],
        ]

    def get_ids(self, url):
        response = self.client.get(url)
        self.assertEqual(response.status_code, 200)
        return [t['id'] for t in response.json()]

    def test_list_without_pagination_returns_everything(self):
        self.assertEqual(self.get_ids('/api/tasks'), self.ids)

    def test_list_with_pagination(self):
        self.assertEqual(self.get_ids('/api/tasks?page=0&size=2'), self.ids[:2])
        self.assertEqual(self.get_ids('/api/tasks?page=1&size=2'), self.ids[2:])
        self.assertEqual(self.get_ids('/api/tasks?size=1'), self.ids[:1])
        self.assertEqual(self.get_ids('/api/tasks?page=1'), [])

    def test_invalid_pagination_returns_400(self):
        self.assertEqual(self.client.get('/api/tasks?size=0').status_code, 400)
        self.assertEqual(self.client.get('/api/tasks?page=-1').status_code, 400)
        self.assertEqual(self.client.get('/api/tasks?size=101').status_code, 400)
        self.assertEqual(self.client.get('/api/tasks?page=abc').status_code, 400)
        self.assertEqual(self.client.get('/api/tasks?page=9223372036854775807&size=10').status_code, 400)

    def test_by_owner(self):
        self.assertEqual(self.get_ids(f'/api/tasks/user/{self.alice.id}'), self.ids[:2])
        self.assertEqual(self.get_ids(f'/api/tasks/user/{self.alice.id}?status=DONE'), self.ids[1:2])
        self.assertEqual(self.client.get('/api/tasks/user/999999').status_code, 404)
        self.assertEqual(self.client.get(f'/api/tasks/user/{self.alice.id}?status=done').status_code, 400)

    def test_by_assignee(self):
        self.assertEqual(self.get_ids(f'/api/tasks/assignee/{self.bob.id}'), self.ids[1:2])

    def test_due_between(self):
        url = f'/api/tasks/user/{self.bob.id}/due?start=2998-12-31T00:00:00&end=2999-01-01T00:00:00'
        self.assertEqual(self.get_ids(url), self.ids[2:])

    def test_by_status_and_priority(self):
        self.assertEqual(self.get_ids('/api/tasks/status/TODO'), [self.ids[0], self.ids[2]])
        self.assertEqual(self.get_ids('/api/tasks/priority/URGENT'), self.ids[2:])

    def test_invalid_enum_segment_returns_400(self):
        response = self.client.get('/api/tasks/status/BOGUS')
        self.assertEqual(response.status_code, 400)
        self.assertIn('TODO', response.json()['detail'])
        self.assertEqual(self.client.get('/api/tasks/priority/low').status_code, 400)

    def test_search(self):
        self.assertEqual(self.get_ids('/api/tasks/search?keyword=login'), self.ids[:2])
        self.assertEqual(self.get_ids('/api/tasks/search?keyword=Login'), [])
        self.assertEqual(self.client.get('/api/tasks/search').status_code, 400)

    def test_overdue(self):
        self.assertEqual(self.get_ids('/api/tasks/overdue'), self.ids[:1])
