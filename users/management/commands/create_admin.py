# users/management/commands/create_admin.py
from django.core.management.base import BaseCommand, CommandError

from users.models import User


class Command(BaseCommand):
    help = 'Create an ADMIN or SUPERADMIN account, or promote an existing one'

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('--name', default='Administrator')
        parser.add_argument('--password')
        parser.add_argument('--role', choices=[User.Role.ADMIN, User.Role.SUPERADMIN], default=User.Role.ADMIN)

    def handle(self, *args, **options):
        email = options['email'].lower()
        role = options['role']

        user = User.objects.filter(email=email).first()
        if user is None:
            if not options['password']:
                raise CommandError('--password is required when creating a new account')
            user = User.objects.create_user(
                email=email,
                password=options['password'],
                name=options['name'],
                role=role,
                is_staff=True,
                is_superuser=role == User.Role.SUPERADMIN,
            )
            self.stdout.write(self.style.SUCCESS(f'Created {role} account {email}'))
            return

        user.role = role
        user.is_staff = True
        user.is_superuser = role == User.Role.SUPERADMIN
        user.save(update_fields=['role', 'is_staff', 'is_superuser', 'updated_at'])
        self.stdout.write(self.style.SUCCESS(f'Promoted {email} to {role}'))
