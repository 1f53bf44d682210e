import re

from django.db import migrations, models


def fill_phone_digits(apps, schema_editor):
    Student = apps.get_model('students', 'Student')
    for student in Student.objects.exclude(parent_phone='').only('pk', 'parent_phone').iterator():
        Student.objects.filter(pk=student.pk).update(
            parent_phone_digits=re.sub(r'\D', '', student.parent_phone or '')
        )


class Migration(migrations.Migration):

    dependencies = [
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='student',
            name='parent_phone_digits',
            field=models.CharField(blank=True, default='', editable=False, max_length=30),
        ),
        migrations.RunPython(fill_phone_digits, migrations.RunPython.noop),
        migrations.AddIndex(
            model_name='student',
            index=models.Index(fields=['organization', 'parent_phone_digits'], name='students_org_phone_idx'),
        ),
    ]
