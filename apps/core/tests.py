import sys
from datetime import datetime, timedelta, timezone as dt_timezone

from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings

from apps.tasks.models import TaskStatus
from .choices import parse_choice, parse_page_window
from .exceptions import ConflictError, NotFoundError, ValidationFailedError
from .middleware import CallerMiddleware
from .timestamps import format_timestamp, to_local_naive


class ParseChoiceTest(SimpleTestCase):

    def test_known_token(self):
        self.assertEqual(parse_choice(TaskStatus, 'IN_PROGRESS'), TaskStatus.IN_PROGRESS)

    def test_unknown_token(self):
        with self.assertRaises(ValidationFailedError) as ctx:
            parse_choice(TaskStatus, 'in_progress')
        self.assertIn('TaskStatus', ctx.exception.message)
        self.assertEqual(ctx.exception.status_code, 400)


class ParsePageWindowTest(SimpleTestCase):

    def test_absent_parameters_mean_full_list(self):
        self.assertIsNone(parse_page_window(None, None))

    def test_defaults_fill_the_missing_half(self):
        self.assertEqual(parse_page_window(0, 10), (0, 10))
        self.assertEqual(parse_page_window(2, None), (2, 10))
        self.assertEqual(parse_page_window(None, 5), (0, 5))

    @override_settings(MAX_PAGE_SIZE=50)
    def test_bounds(self):
        for page, size in [(-1, 10), (0, 0), (0, 51)]:
            with self.assertRaises(ValidationFailedError):
                parse_page_window(page, size)
        self.assertEqual(parse_page_window(0, 50), (0, 50))

    def test_offset_must_fit_in_64_bits(self):
        with self.assertRaises(ValidationFailedError):
            parse_page_window(sys.maxsize, 10)
        last_page = sys.maxsize // 10 - 1
        self.assertEqual(parse_page_window(last_page, 10), (last_page, 10))


class TimestampTest(SimpleTestCase):

    def test_second_precision_without_offset(self):
        self.assertEqual(format_timestamp(datetime(2025, 3, 4, 5, 6, 7, 890)), '2025-03-04T05:06:07')
        self.assertIsNone(format_timestamp(None))

    @override_settings(TIME_ZONE='UTC')
    def test_aware_values_become_naive(self):
        aware = datetime(2025, 1, 1, 12, 0, tzinfo=dt_timezone(timedelta(hours=2)))
        self.assertEqual(to_local_naive(aware), datetime(2025, 1, 1, 10, 0))
        naive = datetime(2025, 1, 1, 12, 0)
        self.assertIs(to_local_naive(naive), naive)


class ExceptionStatusTest(SimpleTestCase):

    def test_status_codes(self):
        self.assertEqual(NotFoundError('x').status_code, 404)
        self.assertEqual(ConflictError('x').status_code, 409)
        self.assertEqual(ValidationFailedError('x').status_code, 400)


class CallerMiddlewareTest(SimpleTestCase):

    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = CallerMiddleware(lambda request: None)

    def test_header_wins(self):
        request = self.factory.get('/api/tasks', HTTP_X_USER_ID='42')
        self.middleware.process_request(request)
        self.assertEqual(request.caller_id, 42)
        self.assertFalse(request.caller_header_invalid)

    @override_settings(DEFAULT_TASK_OWNER_ID=7)
    def test_default_without_header(self):
        request = self.factory.get('/api/tasks')
        self.middleware.process_request(request)
        self.assertEqual(request.caller_id, 7)

    def test_malformed_header(self):
        for value in ['abc', '0', '-3']:
            request = self.factory.get('/api/tasks', HTTP_X_USER_ID=value)
            self.middleware.process_request(request)
            self.assertIsNone(request.caller_id)
            self.assertTrue(request.caller_header_invalid)


class CorsTest(TestCase):

    def test_frontend_origin_is_allowed(self):
        response = self.client.get('/api/users', HTTP_ORIGIN='http://localhost:3000')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Access-Control-Allow-Origin'], 'http://localhost:3000')

    def test_preflight(self):
        response = self.client.options(
            '/api/tasks',
            HTTP_ORIGIN='http://localhost:3000',
            HTTP_ACCESS_CONTROL_REQUEST_METHOD='POST',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Access-Control-Allow-Origin'], 'http://localhost:3000')

    def test_unknown_origin_gets_no_header(self):
        response = self.client.get('/api/users', HTTP_ORIGIN='http://evil.example')
        self.assertNotIn('Access-Control-Allow-Origin', response)
