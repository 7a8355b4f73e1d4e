from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from apps.identity.models import User, UserRole


class Command(BaseCommand):
    help = 'Seeds the database with a default task owner and an admin'

    def add_arguments(self, parser):
        parser.add_argument('--password', default='password')

    def handle(self, *args, **options):
        # Seeded in order so a fresh database gives the default owner id 1
        users = [
            {'username': 'user', 'name': 'Default User', 'role': UserRole.USER},
            {'username': 'admin', 'name': 'Administrator', 'role': UserRole.ADMIN},
        ]

        for u in users:
            user, created = User.objects.get_or_create(
                username=u['username'],
                defaults={
                    'email': f"{u['username']}@example.com",
                    'name': u['name'],
                    'role': u['role'],
                    'password': make_password(options['password']),
                },
            )

            if created:
                self.stdout.write(self.style.SUCCESS(f'Created user: {user.username} (id={user.id}, role={user.role})'))
            else:
                self.stdout.write(self.style.WARNING(f'User already exists: {user.username} (id={user.id})'))

        if not User.objects.filter(id=settings.DEFAULT_TASK_OWNER_ID).exists():
            self.stdout.write(self.style.WARNING(
                f'DEFAULT_TASK_OWNER_ID={settings.DEFAULT_TASK_OWNER_ID} does not match any user; '
                'task creation without an X-User-ID header will return 404'
            ))
