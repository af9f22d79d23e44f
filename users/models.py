# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_PARTICIPANT = "participant"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = (
        (ROLE_PARTICIPANT, 'Participant'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_PARTICIPANT
    )

    # Registration number printed on the event pass, e.g. 21BCE0001
    reg_no = models.CharField(max_length=32, unique=True, blank=True, null=True)
    name = models.CharField(max_length=150, blank=True, default="")

    is_onboarded = models.BooleanField(default=False, help_text="Has the participant completed their profile?")

    class Meta(AbstractUser.Meta):
        indexes = [
            models.Index(fields=['email'], name='user_email_idx'),
        ]

    def __str__(self):
        return self.name or self.username

    @property
    def is_teams_admin(self):
        return self.is_superuser or self.is_staff or self.role == self.ROLE_ADMIN

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.username

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        if self.reg_no:
            self.reg_no = self.reg_no.strip().upper()
        else:
            self.reg_no = None
        super().save(*args, **kwargs)
