import django.db.models.deletion
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('companies', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Forklift',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('customer', models.TextField(db_index=True)),
                ('brand', models.TextField()),
                ('model_type', models.TextField()),
                ('serial_number', models.TextField(blank=True)),
                ('engine_specs', models.TextField(blank=True)),
                ('transmission', models.TextField(blank=True)),
                ('tire_specs', models.TextField(blank=True)),
                ('service_notes', models.TextField(blank=True)),
                ('last_service_date', models.DateField(blank=True, null=True)),
                ('next_service_date', models.DateField(blank=True, null=True)),
                ('service_hours', models.PositiveIntegerField(blank=True, null=True)),
                ('filters_500h', models.TextField(blank=True)),
                ('lubricants_500h', models.TextField(blank=True)),
                ('documents_500h', models.JSONField(blank=True, default=list)),
                ('filters_1000h', models.TextField(blank=True)),
                ('lubricants_1000h', models.TextField(blank=True)),
                ('documents_1000h', models.JSONField(blank=True, default=list)),
                ('filters_1500h', models.TextField(blank=True)),
                ('lubricants_1500h', models.TextField(blank=True)),
                ('documents_1500h', models.JSONField(blank=True, default=list)),
                ('filters_2000h', models.TextField(blank=True)),
                ('lubricants_2000h', models.TextField(blank=True)),
                ('documents_2000h', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='forklifts', to='companies.company')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='forklifts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['customer', 'brand', 'model_type'],
                'indexes': [models.Index(fields=['company', 'customer'], name='forklift_company_customer_idx')],
            },
        ),
    ]
