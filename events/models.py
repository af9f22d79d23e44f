# events/models.py
from datetime import time

from django.conf import settings
from django.db import models


def default_max_team_size():
    return settings.TEAMS_MAX_MEMBERS


def default_min_random_team_size():
    return settings.TEAMS_MIN_RANDOM_SIZE


class Event(models.Model):
    """
    A competition run over one or more event days.

    Teams are scheduled into fixed-length slots starting at `first_slot`,
    with at most `teams_per_slot` teams sharing a slot on a given day.
    """
    key = models.SlugField(max_length=64, unique=True, help_text="e.g. escape-exe-ii")
    name = models.CharField(max_length=255)

    max_team_size = models.PositiveIntegerField(default=default_max_team_size)
    min_random_team_size = models.PositiveIntegerField(
        default=default_min_random_team_size,
        help_text="Smallest team the random pool allocator may create",
    )

    # Slot schedule
    first_slot = models.TimeField(default=time(11, 0))
    slot_minutes = models.PositiveIntegerField(default=30)
    slot_count = models.PositiveIntegerField(default=16)
    teams_per_slot = models.PositiveIntegerField(default=2)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class EventRegistration(models.Model):
    """
    Roster row: who may take part in an event, and on which day.

    Rows usually arrive before the participant has an account (synced from
    the hosted registration table), so `user` stays empty until onboarding
    links it by email.
    """
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='registrations')
    email = models.EmailField()
    reg_no = models.CharField(max_length=32, blank=True, null=True)
    event_date = models.DateField()
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='registrations',
    )
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('event', 'email')
        indexes = [
            models.Index(
                fields=['event', 'event_date'],
                name='reg_event_date_idx',
            ),
            models.Index(
                fields=['user', 'event'],
                name='reg_user_event_idx',
            ),
        ]

    def __str__(self):
        return f"{self.email} - {self.event.key} ({self.event_date})"

    def save(self, *args, **kwargs):
        self.email = self.email.strip().lower()
        if self.reg_no:
            self.reg_no = self.reg_no.strip().upper()
        super().save(*args, **kwargs)
