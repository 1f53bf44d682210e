from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('admissions', '0001_initial'),
        ('core', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_name', models.CharField(blank=True, default='', max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('date', models.DateField()),
                ('method', models.CharField(choices=[('cash', 'Cash'), ('check', 'Check'), ('virement', 'Bank Transfer')], default='cash', max_length=20)),
                ('status', models.CharField(choices=[('paid', 'Paid'), ('pending_verification', 'Pending Verification'), ('verified', 'Verified'), ('check_received', 'Check Received'), ('check_deposited', 'Check Deposited'), ('check_bounced', 'Check Bounced')], default='paid', max_length=30)),
                ('check_number', models.CharField(blank=True, max_length=50, null=True)),
                ('bank_name', models.CharField(blank=True, max_length=100, null=True)),
                ('deposit_date', models.DateField(blank=True, null=True)),
                ('proof_url', models.TextField(blank=True, null=True)),
                ('session', models.CharField(blank=True, default='', help_text='Academic year, e.g. 2024-2025', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('enrollment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='admissions.enrollment')),
                ('organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='core.organization')),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recorded_payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['organization', 'status'], name='payments_org_status_idx'),
                    models.Index(fields=['enrollment', 'status'], name='payments_enrollment_idx'),
                    models.Index(fields=['organization', 'session'], name='payments_org_session_idx'),
                ],
            },
        ),
    ]
