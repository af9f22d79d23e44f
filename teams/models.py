# teams/models.py
from django.conf import settings
from django.db import models

from events.models import Event


class Team(models.Model):
    """
    A participant team for one event day.

    Membership lives in TeamMember; `leader` must always be one of the
    members. `slot_time` is the team's scheduled slot on `event_date`
    (empty for teams placed before a slot was chosen).
    """
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='teams')
    event_date = models.DateField()
    slot_time = models.TimeField(blank=True, null=True)
    name = models.CharField(max_length=100)
    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='led_teams',
    )
    score = models.IntegerField(default=0)
    is_random = models.BooleanField(default=False, help_text="Formed by the random pool allocator")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('event', 'name')
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['event', 'event_date', 'slot_time'], name='team_event_slot_idx'),
            models.Index(fields=['event', 'created_at'], name='team_event_created_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.event.key})"

    @property
    def current_size(self):
        return self.members.count()

    @property
    def is_full(self):
        return self.current_size >= self.event.max_team_size


class TeamMember(models.Model):
    """
    Team membership.

    `event` is copied from the team so the database can enforce that a
    participant sits in at most one team per event.
    """
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='members')
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='team_members')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='team_memberships')
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('event', 'user')
        ordering = ['joined_at', 'id']
        indexes = [
            models.Index(fields=['team', 'joined_at'], name='teammember_team_joined_idx'),
        ]

    def __str__(self):
        return f"{self.user} in {self.team.name}"

    def save(self, *args, **kwargs):
        self.event_id = self.team.event_id
        super().save(*args, **kwargs)


class JoinRequest(models.Model):
    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
    ]

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='join_requests')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='join_requests')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    handled_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['team', 'status'], name='joinreq_team_status_idx'),
            models.Index(fields=['user', 'status'], name='joinreq_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.user} -> {self.team.name} ({self.status})"


class RandomPoolEntry(models.Model):
    """A participant waiting to be placed by the random pool allocator."""
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='pool_entries')
    event_date = models.DateField()
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='pool_entries')
    queued_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('event', 'user')
        ordering = ['queued_at', 'id']
        verbose_name_plural = "random pool entries"
        indexes = [
            models.Index(fields=['event', 'event_date'], name='pool_event_date_idx'),
        ]

    def __str__(self):
        return f"{self.user} queued for {self.event.key} ({self.event_date})"
