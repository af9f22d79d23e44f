# events/services.py
import logging

from django.conf import settings

from .models import Event, EventRegistration

logger = logging.getLogger("teams.events")


def get_event(key=None):
    """Resolve an event key (defaulting to TEAMS_DEFAULT_EVENT); None if unknown."""
    key = key or settings.TEAMS_DEFAULT_EVENT
    return Event.objects.filter(key=key).first()


def get_registration(user, event):
    """
    Roster row for `user` in `event`, or None.

    Matches on the linked user first, then falls back to email and
    registration number; a row found by fallback gets linked to the user.
    """
    if user is None or event is None:
        return None

    reg = EventRegistration.objects.filter(event=event, user=user).first()
    if reg:
        return reg

    reg = None
    if user.email:
        reg = EventRegistration.objects.filter(event=event, email=user.email.lower(), user__isnull=True).first()
    if reg is None and getattr(user, "reg_no", None):
        reg = EventRegistration.objects.filter(event=event, reg_no=user.reg_no.upper(), user__isnull=True).first()

    if reg is not None:
        reg.user = user
        reg.save(update_fields=["user"])
        logger.info(f"Linked registration {reg.id} to user {user.id} for event {event.key}")
    return reg


def link_registrations(user):
    """Attach every unlinked roster row carrying this user's email. Returns the count."""
    if not user.email:
        return 0
    linked = EventRegistration.objects.filter(email=user.email.lower(), user__isnull=True).update(user=user)
    if linked:
        logger.info(f"Linked {linked} registration(s) to user {user.id}")
    return linked


def upsert_registration(event, email, event_date, reg_no=None):
    """Create or refresh a roster row. Returns (registration, created)."""
    reg, created = EventRegistration.objects.update_or_create(
        event=event,
        email=email.strip().lower(),
        defaults={
            "event_date": event_date,
            "reg_no": reg_no or None,
        },
    )
    return reg, created
