import datetime
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import events.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.SlugField(help_text='e.g. escape-exe-ii', max_length=64, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('max_team_size', models.PositiveIntegerField(default=events.models.default_max_team_size)),
                ('min_random_team_size', models.PositiveIntegerField(default=events.models.default_min_random_team_size, help_text='Smallest team the random pool allocator may create')),
                ('first_slot', models.TimeField(default=datetime.time(11, 0))),
                ('slot_minutes', models.PositiveIntegerField(default=30)),
                ('slot_count', models.PositiveIntegerField(default=16)),
                ('teams_per_slot', models.PositiveIntegerField(default=2)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='EventRegistration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(max_length=254)),
                ('reg_no', models.CharField(blank=True, max_length=32, null=True)),
                ('event_date', models.DateField()),
                ('registered_at', models.DateTimeField(auto_now_add=True)),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='events.event')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='registrations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('event', 'email')},
            },
        ),
        migrations.AddIndex(
            model_name='eventregistration',
            index=models.Index(fields=['event', 'event_date'], name='reg_event_date_idx'),
        ),
        migrations.AddIndex(
            model_name='eventregistration',
            index=models.Index(fields=['user', 'event'], name='reg_user_event_idx'),
        ),
    ]
