from datetime import datetime

from django.test import TestCase

from apps.identity.models import User
from apps.tasks.models import Task, TaskPriority, TaskStatus


class TaskQuerySetTest(TestCase):

    def setUp(self):
        self.owner = User.objects.create(username='owner', email='o@x.com', password='!', name='Owner')
        self.other = User.objects.create(username='other', email='x@x.com', password='!', name='Other')

    def make_task(self, title, description=None, owner=None, **extra):
        return Task.objects.create(
            title=title,
            description=description,
            status=extra.pop('status', TaskStatus.TODO),
            priority=extra.pop('priority', TaskPriority.MEDIUM),
            owner=owner or self.owner,
            **extra
        )

    def test_keyword_wildcards_are_literal(self):
        literal = self.make_task('50% done')
        self.make_task('500 items')
        self.make_task('under_score', description='plain')

        self.assertEqual(list(Task.objects.matching_keyword('50%')), [literal])
        self.assertEqual(list(Task.objects.matching_keyword('%')), [literal])
        self.assertEqual(Task.objects.matching_keyword('r_s').count(), 1)
        self.assertEqual(Task.objects.matching_keyword('_').count(), 1)

    def test_keyword_ignores_null_description(self):
        self.make_task('alpha')
        self.assertEqual(Task.objects.matching_keyword('beta').count(), 0)

    def test_window(self):
        tasks = [self.make_task(f't{i}') for i in range(5)]
        self.assertEqual(list(Task.objects.window(0, 2)), tasks[:2])
        self.assertEqual(list(Task.objects.window(2, 2)), tasks[4:])

    def test_owned_by_with_status(self):
        done = self.make_task('done', status=TaskStatus.DONE)
        self.make_task('todo')
        self.make_task('other done', owner=self.other, status=TaskStatus.DONE)

        self.assertEqual(list(Task.objects.owned_by_with_status(self.owner, TaskStatus.DONE)), [done])

    def test_due_before_excludes_undated(self):
        cutoff = datetime(2030, 1, 1)
        early = self.make_task('early', due_date=datetime(2029, 12, 31, 23, 59, 59))
        self.make_task('late', due_date=cutoff)
        self.make_task('undated')

        self.assertEqual(list(Task.objects.due_before(cutoff)), [early])

    def test_timestamps_stamped_on_save(self):
        task = self.make_task('stamp')
        self.assertIsNotNone(task.created_at)
        first_update = task.updated_at

        task.title = 'stamp 2'
        task.save()
        task.refresh_from_db()
        self.assertGreaterEqual(task.updated_at, first_update)
