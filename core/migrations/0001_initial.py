from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Organization',
            fields=[
                ('id', models.SlugField(max_length=100, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Academy display name', max_length=255)),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('owner_email', models.EmailField(blank=True, default='', max_length=254)),
                ('status', models.CharField(choices=[('active', 'Active'), ('disabled', 'Disabled')], default='active', max_length=20)),
                ('modules', models.JSONField(blank=True, default=dict, help_text='Enabled product modules')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'organizations',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='OrganizationSettings',
            fields=[
                ('organization', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='settings', serialize=False, to='core.organization')),
                ('academy_name', models.CharField(blank=True, default='', max_length=255)),
                ('academic_year', models.CharField(blank=True, default='', help_text='Session tag applied to financial records, e.g. 2024-2025', max_length=20)),
                ('login_domain', models.CharField(default='makerlab.academy', help_text='Domain of auto-generated student login emails', max_length=255)),
                ('language', models.CharField(choices=[('en', 'English'), ('fr', 'French')], default='en', max_length=2)),
                ('receipt_contact', models.CharField(blank=True, default='', max_length=255)),
                ('receipt_footer', models.TextField(blank=True, default='')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Organization Settings',
                'verbose_name_plural': 'Organization Settings',
                'db_table': 'organization_settings',
            },
        ),
        migrations.CreateModel(
            name='Program',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('type', models.CharField(choices=[('Regular Program', 'Regular Program'), ('Holiday Camp', 'Holiday Camp'), ('Workshop', 'Workshop')], default='Regular Program', max_length=50)),
                ('description', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=[('active', 'Active'), ('archived', 'Archived')], default='active', max_length=20)),
                ('packs', models.JSONField(blank=True, default=list)),
                ('grades', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='programs', to='core.organization')),
            ],
            options={
                'db_table': 'programs',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['organization', 'status'], name='programs_org_status_idx')],
            },
        ),
    ]
