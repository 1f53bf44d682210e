from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('email', models.EmailField(blank=True, default='', help_text='Parent contact email', max_length=254)),
                ('parent_phone', models.CharField(blank=True, default='', max_length=30)),
                ('parent_name', models.CharField(blank=True, default='', max_length=255)),
                ('address', models.CharField(blank=True, default='', max_length=500)),
                ('school', models.CharField(blank=True, default='', max_length=255)),
                ('birth_date', models.DateField(blank=True, null=True)),
                ('medical_info', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=20)),
                ('login_info', models.JSONField(blank=True, null=True)),
                ('parent_login_info', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='students', to='core.organization')),
            ],
            options={
                'db_table': 'students',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['organization', 'status'], name='students_org_status_idx'),
                    models.Index(fields=['organization', 'name'], name='students_org_name_idx'),
                ],
            },
        ),
    ]
