from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.companies.models import Company, Membership
from apps.companies.services import create_company, join_company
from apps.forklifts.models import Forklift

User = get_user_model()

DEMO_PASSWORD = "password123"

DEMO_FORKLIFTS = [
    {
        'customer': "Acme Logistics",
        'brand': "Toyota",
        'model_type': "8FBE15",
        'serial_number': "TY-10234",
        'engine_specs': "48V AC drive motor, 4.5 kW",
        'tire_specs': "Solid, 18x7-8 front",
        'service_hours': 1480,
        'filters_500h': "Hydraulic return filter",
        'lubricants_500h': "Mast chain spray",
        'filters_1000h': "Hydraulic return filter, breather",
        'lubricants_1000h': "Hydraulic oil ISO 32, 14 L",
        'next_in_days': -3,
    },
    {
        'customer': "Acme Logistics",
        'brand': "Linde",
        'model_type': "E20",
        'serial_number': "LD-55810",
        'transmission': "Dual drive",
        'service_hours': 620,
        'filters_500h': "Cabin air filter",
        'next_in_days': 4,
    },
    {
        'customer': "Nordic Foods",
        'brand': "Still",
        'model_type': "RX20-16",
        'serial_number': "ST-88002",
        'engine_specs': "Kubota V2403, diesel",
        'transmission': "Hydrostatic",
        'service_hours': 1950,
        'filters_2000h': "Fuel filter, air filter element",
        'lubricants_2000h': "Engine oil 10W-40, 8 L",
        'next_in_days': 30,
    },
    {
        'customer': "Nordic Foods",
        'brand': "Jungheinrich",
        'model_type': "EFG 216",
        'serial_number': "JH-40417",
        'service_hours': 210,
        'next_in_days': None,
    },
]


class Command(BaseCommand):
    help = 'Seeds the database with demo users, a company and forklifts.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clean',
            action='store_true',
            help='Delete existing data before seeding',
        )

    def handle(self, *args, **options):
        if options['clean']:
            self.stdout.write(self.style.WARNING('Cleaning database...'))
            self._clean_database()
            self.stdout.write(self.style.SUCCESS('Database cleaned.'))

        manager = self._get_or_create_user("manager", "manager@example.com")
        mechanic = self._get_or_create_user("mechanic", "mechanic@example.com")
        company = self._get_or_create_company(manager, mechanic)
        self._seed_forklifts(company, manager, mechanic)

        self.stdout.write(self.style.SUCCESS('Seeding completed successfully.'))
        self.stdout.write(f'Join code for {company.name}: {company.join_code}')

    def _clean_database(self):
        Forklift.objects.all().delete()
        Membership.objects.all().delete()
        Company.objects.all().delete()
        User.objects.exclude(is_superuser=True).delete()

    def _get_or_create_user(self, username, email):
        user = User.objects.filter(username=username).first()
        if user is None:
            user = User.objects.create_user(username=username, email=email, password=DEMO_PASSWORD)
            self.stdout.write(f' - Created {username} ({DEMO_PASSWORD})')
        return user

    def _get_or_create_company(self, manager, mechanic):
        company = Company.objects.filter(name="Demo Truck Service", created_by=manager).first()
        if company is None:
            company = create_company("Demo Truck Service", manager)
            self.stdout.write(f'Created Company: {company.name}')
        else:
            self.stdout.write(f'Using existing Company: {company.name}')

        join_company(company.join_code, mechanic)
        return company

    def _seed_forklifts(self, company, manager, mechanic):
        self.stdout.write('Seeding Forklifts...')
        today = timezone.localdate()

        created = 0
        for index, demo in enumerate(DEMO_FORKLIFTS):
            fields = dict(demo)
            next_in_days = fields.pop('next_in_days')
            fields['next_service_date'] = (
                today + timedelta(days=next_in_days) if next_in_days is not None else None
            )
            fields['last_service_date'] = today - timedelta(days=90)

            _, was_created = Forklift.objects.get_or_create(
                company=company,
                serial_number=fields.pop('serial_number'),
                defaults={**fields, 'user': manager if index % 2 == 0 else mechanic},
            )
            created += int(was_created)

        self.stdout.write(f' - Created {created} forklifts for {company.name}')
