import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('applications', '0001_initial'),
        ('dormitories', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AcceptedApplication',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_index_number', models.CharField(max_length=50)),
                ('average_grade', models.DecimalField(decimal_places=2, max_digits=4, validators=[django.core.validators.MinValueValidator(6), django.core.validators.MaxValueValidator(10)])),
                ('academic_year', models.CharField(help_text="e.g., '2024/2025'", max_length=9)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('application', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='acceptance', to='applications.application')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accepted_applications', to='dormitories.room')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='accepted_application', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Accepted Application',
                'verbose_name_plural': 'Accepted Applications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['room'], name='accepted_room_idx'),
                    models.Index(fields=['academic_year', 'average_grade'], name='accepted_year_grade_idx'),
                ],
            },
        ),
    ]
