# teams/services.py
"""
Team membership rules.

Every path that puts a participant into a team goes through `add_member`,
and every check that can reject a request raises TeamRuleViolation with
the message and status the API returns. Views stay thin.
"""
import logging
from collections import Counter

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework import status

from events.services import get_event, get_registration
from events.slots import format_slot, is_valid_slot, parse_slot
from .exceptions import TeamRuleViolation
from .models import JoinRequest, RandomPoolEntry, Team, TeamMember

logger = logging.getLogger("teams.api")

User = get_user_model()


# ---- Lookups -----------------------------------------------------------


def find_membership(user, event):
    return (
        TeamMember.objects
        .filter(event=event, user=user)
        .select_related("team")
        .first()
    )


def slot_usage(event, event_date, exclude_team_id=None) -> Counter:
    """How many teams hold each slot on `event_date`."""
    qs = Team.objects.filter(event=event, event_date=event_date, slot_time__isnull=False)
    if exclude_team_id:
        qs = qs.exclude(pk=exclude_team_id)
    return Counter(qs.values_list("slot_time", flat=True))


def lock_team(team_id):
    """Re-read a team with its row locked. Call inside transaction.atomic()."""
    try:
        return Team.objects.select_for_update().select_related("event").get(pk=team_id)
    except Team.DoesNotExist:
        raise TeamRuleViolation("Team not found.", status.HTTP_404_NOT_FOUND)


# ---- Checks ------------------------------------------------------------


def require_registration(user, event):
    reg = get_registration(user, event)
    if reg is None:
        label = getattr(user, "reg_no", None) or user.email or user.username
        raise TeamRuleViolation(
            f"Registration number {label} not verified for this event.",
            status.HTTP_403_FORBIDDEN,
        )
    return reg


def ensure_not_in_team(user, event):
    if TeamMember.objects.filter(event=event, user=user).exists():
        raise TeamRuleViolation("User is already in a team.", status.HTTP_409_CONFLICT)


def ensure_capacity(team, adding=1):
    if team.members.count() + adding > team.event.max_team_size:
        raise TeamRuleViolation("Team is already full.", status.HTTP_409_CONFLICT)


def ensure_same_date(team, registration):
    if team.event_date != registration.event_date:
        raise TeamRuleViolation(
            "You can only join a team scheduled for your date.",
            status.HTTP_400_BAD_REQUEST,
        )


def ensure_slot_available(event, event_date, slot_time, exclude_team_id=None):
    if not is_valid_slot(event, slot_time):
        raise TeamRuleViolation("Invalid slot time for this event.", status.HTTP_400_BAD_REQUEST)

    taken = slot_usage(event, event_date, exclude_team_id=exclude_team_id).get(slot_time, 0)
    if taken >= event.teams_per_slot:
        raise TeamRuleViolation(
            f"Slot {format_slot(slot_time)} is full. Please pick another slot.",
            status.HTTP_400_BAD_REQUEST,
        )


# ---- Mutations ---------------------------------------------------------


def clear_placement_leftovers(user, event):
    """
    A placed participant leaves the random pool of the event and their
    other pending join requests are dropped.
    """
    RandomPoolEntry.objects.filter(event=event, user=user).delete()
    JoinRequest.objects.filter(
        user=user,
        team__event=event,
        status=JoinRequest.STATUS_PENDING,
    ).delete()


def add_member(team, user):
    """
    Insert the membership row and tidy up pool/requests.

    Callers run the rule checks first; the unique (event, user)
    constraint still turns a lost race into a 409.
    """
    try:
        with transaction.atomic():
            member = TeamMember.objects.create(team=team, event=team.event, user=user)
    except IntegrityError:
        raise TeamRuleViolation("User is already in a team.", status.HTTP_409_CONFLICT)

    clear_placement_leftovers(user, team.event)
    return member


def create_team(user, event, name, slot_time):
    name = (name or "").strip()
    if not name:
        raise TeamRuleViolation("Team name is required.", status.HTTP_400_BAD_REQUEST)

    reg = require_registration(user, event)
    ensure_not_in_team(user, event)

    slot = parse_slot(slot_time)
    if slot is None:
        raise TeamRuleViolation("A valid slot time is required.", status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        ensure_slot_available(event, reg.event_date, slot)

        if Team.objects.filter(event=event, name__iexact=name).exists():
            raise TeamRuleViolation(
                f"A team named '{name}' already exists for this event.",
                status.HTTP_400_BAD_REQUEST,
            )

        team = Team.objects.create(
            event=event,
            event_date=reg.event_date,
            slot_time=slot,
            name=name,
            leader=user,
        )
        add_member(team, user)

    logger.info(f"Team created: team={team.id} name={team.name!r} leader={user.id} event={event.key}")
    return team


def join_team(user, team_id):
    """
    Roster and membership are checked before the team lookup, so a placed
    participant gets 409 even for an unknown team id.
    """
    with transaction.atomic():
        team = Team.objects.select_for_update().select_related("event").filter(pk=team_id).first()
        event = team.event if team is not None else get_event()
        if event is not None:
            reg = require_registration(user, event)
            ensure_not_in_team(user, event)
        if team is None:
            raise TeamRuleViolation("Team not found.", status.HTTP_404_NOT_FOUND)
        ensure_same_date(team, reg)
        ensure_capacity(team)
        add_member(team, user)

    logger.info(f"Team joined: team={team.id} user={user.id}")
    return team


def enqueue_random(user, event):
    """
    Put the participant in the random pool for their event day.

    Returns (entry, created).
    """
    reg = require_registration(user, event)
    ensure_not_in_team(user, event)

    entry, created = RandomPoolEntry.objects.get_or_create(
        event=event,
        user=user,
        defaults={"event_date": reg.event_date},
    )
    if not created and entry.event_date != reg.event_date:
        entry.event_date = reg.event_date
        entry.save(update_fields=["event_date"])

    if created:
        logger.info(f"Random pool: queued user={user.id} event={event.key} date={reg.event_date}")
    return entry, created


def leave_team(user, team_id):
    """
    Returns "left" or "disbanded".

    The leader may only leave as the last member, which disbands the team.
    """
    with transaction.atomic():
        team = lock_team(team_id)
        member = TeamMember.objects.filter(team=team, user=user).first()
        if member is None:
            raise TeamRuleViolation("You are not a member of this team.", status.HTTP_403_FORBIDDEN)

        if team.leader_id == user.id:
            if team.members.count() > 1:
                raise TeamRuleViolation(
                    "Leader cannot leave a team with other members. Please transfer leadership first.",
                    status.HTTP_400_BAD_REQUEST,
                )
            team_name = team.name
            team.delete()
            logger.info(f"Team disbanded: name={team_name!r} by leader={user.id}")
            return "disbanded"

        member.delete()

        # A team never outlives its members
        if not team.members.exists():
            team_id = team.id
            team.delete()
            logger.info(f"Team disbanded: team={team_id} after last member={user.id} left")
            return "disbanded"

    logger.info(f"Team left: team={team.id} user={user.id}")
    return "left"


def create_join_request(user, team_id):
    team = Team.objects.select_related("event").filter(pk=team_id).first()
    event = team.event if team is not None else get_event()
    if event is not None:
        ensure_not_in_team(user, event)
    if team is None:
        raise TeamRuleViolation("Team not found.", status.HTTP_404_NOT_FOUND)

    reg = require_registration(user, team.event)
    ensure_same_date(team, reg)

    if JoinRequest.objects.filter(team=team, user=user, status=JoinRequest.STATUS_PENDING).exists():
        raise TeamRuleViolation("Join request already pending.", status.HTTP_409_CONFLICT)

    join_request = JoinRequest.objects.create(team=team, user=user)
    logger.info(f"Join request created: request={join_request.id} team={team.id} user={user.id}")
    return join_request


def _close_request(join_request, new_status):
    join_request.status = new_status
    join_request.handled_at = timezone.now()
    join_request.save(update_fields=["status", "handled_at"])


def respond_to_join_request(join_request, action, actor):
    """
    Accept or reject a pending join request. Returns the outcome message.

    A request that can no longer be honoured (requester already placed,
    team full) is rejected before the 409 is raised.
    """
    if action not in ("accept", "reject"):
        raise TeamRuleViolation("Missing or invalid fields.", status.HTTP_400_BAD_REQUEST)

    team = join_request.team
    if team.leader_id != actor.id and not getattr(actor, "is_teams_admin", False):
        raise TeamRuleViolation(
            "Only the team leader can respond to join requests.",
            status.HTTP_403_FORBIDDEN,
        )

    if join_request.status != JoinRequest.STATUS_PENDING:
        raise TeamRuleViolation("Request already handled.", status.HTTP_400_BAD_REQUEST)

    if action == "reject":
        _close_request(join_request, JoinRequest.STATUS_REJECTED)
        logger.info(f"Join request rejected: request={join_request.id} by={actor.id}")
        return "Request rejected."

    failure = None
    with transaction.atomic():
        team = lock_team(team.pk)
        requester = join_request.user

        if TeamMember.objects.filter(event=team.event, user=requester).exists():
            _close_request(join_request, JoinRequest.STATUS_REJECTED)
            failure = ("User is already in a team.", status.HTTP_409_CONFLICT)
        elif team.members.count() >= team.event.max_team_size:
            _close_request(join_request, JoinRequest.STATUS_REJECTED)
            failure = ("Team is full.", status.HTTP_409_CONFLICT)
        else:
            _close_request(join_request, JoinRequest.STATUS_ACCEPTED)
            add_member(team, requester)

    if failure:
        logger.info(f"Join request auto-rejected: request={join_request.id} reason={failure[0]!r}")
        raise TeamRuleViolation(*failure)

    logger.info(f"Join request accepted: request={join_request.id} team={team.id} user={requester.id}")
    return "User added to team."


def set_score(team, score):
    team.score = score
    team.save(update_fields=["score"])
    logger.info(f"Score updated: team={team.id} score={score}")
    return team


# ---- Admin adjudication ------------------------------------------------


def merge_teams(source_team_id, target_team_id):
    """
    Move the source team's members into the target and delete the source.

    Returns (target_team, merged_count).
    """
    if not source_team_id or not target_team_id:
        raise TeamRuleViolation("Missing source_team_id or target_team_id.", status.HTTP_400_BAD_REQUEST)
    if str(source_team_id) == str(target_team_id):
        raise TeamRuleViolation("Source and target teams must be different.", status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        try:
            source = Team.objects.select_for_update().select_related("event").get(pk=source_team_id)
        except Team.DoesNotExist:
            raise TeamRuleViolation("Source team not found.", status.HTTP_404_NOT_FOUND)
        try:
            target = Team.objects.select_for_update().select_related("event").get(pk=target_team_id)
        except Team.DoesNotExist:
            raise TeamRuleViolation("Target team not found.", status.HTTP_404_NOT_FOUND)

        if source.event_id != target.event_id:
            raise TeamRuleViolation("Teams must be for the same event.", status.HTTP_400_BAD_REQUEST)
        if source.event_date != target.event_date:
            raise TeamRuleViolation("Teams must have the same event date.", status.HTTP_400_BAD_REQUEST)

        target_user_ids = set(target.members.values_list("user_id", flat=True))
        moving = [m for m in source.members.all() if m.user_id not in target_user_ids]

        max_size = target.event.max_team_size
        if len(target_user_ids) + len(moving) > max_size:
            raise TeamRuleViolation(
                f"Merged team would exceed capacity of {max_size}.",
                status.HTTP_400_BAD_REQUEST,
            )

        TeamMember.objects.filter(pk__in=[m.pk for m in moving]).update(team=target)
        source_id = source.id
        source.delete()

    logger.info(f"Teams merged: source={source_id} into target={target.id} moved={len(moving)}")
    return target, len(moving)


def assign_leader(team_id, new_leader_id):
    """Returns (team, previous_leader, new_leader)."""
    if not team_id or not new_leader_id:
        raise TeamRuleViolation("Missing team_id or new_leader_id.", status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        team = lock_team(team_id)
        member = (
            TeamMember.objects
            .filter(team=team, user_id=new_leader_id)
            .select_related("user")
            .first()
        )
        if member is None:
            raise TeamRuleViolation(
                "New leader must be an existing member of the team.",
                status.HTTP_400_BAD_REQUEST,
            )
        if team.leader_id == member.user_id:
            raise TeamRuleViolation("This member is already the team leader.", status.HTTP_400_BAD_REQUEST)

        previous = team.leader
        team.leader = member.user
        team.save(update_fields=["leader"])

    logger.info(
        f"Leader reassigned: team={team.id} from={getattr(previous, 'id', None)} to={member.user_id}"
    )
    return team, previous, member.user


def assign_from_pool(user_id, team_id, event):
    """
    Place one participant into a chosen team. Returns (team, user).
    """
    if not user_id or not team_id:
        raise TeamRuleViolation("Missing user_id or team_id.", status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        team = lock_team(team_id)
        if team.event_id != event.id:
            raise TeamRuleViolation(
                "This team is registered for a different event.",
                status.HTTP_400_BAD_REQUEST,
            )

        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise TeamRuleViolation("User not found.", status.HTTP_404_NOT_FOUND)

        reg = get_registration(user, event)
        if reg is None:
            raise TeamRuleViolation("No event date found for this user.", status.HTTP_403_FORBIDDEN)
        if team.event_date != reg.event_date:
            raise TeamRuleViolation(
                "User can only join a team scheduled for their date.",
                status.HTTP_400_BAD_REQUEST,
            )

        ensure_not_in_team(user, event)
        ensure_capacity(team)
        add_member(team, user)

    logger.info(f"Assigned from pool: user={user.id} team={team.id}")
    return team, user


def pool_stats(event):
    entries = RandomPoolEntry.objects.filter(event=event)
    total = entries.count()
    by_date = Counter(entries.values_list("event_date", flat=True))
    return {
        "event": event.key,
        "count": total,
        "groups_available": total // event.max_team_size if event.max_team_size else 0,
        "by_date": [
            {"event_date": d, "count": c}
            for d, c in sorted(by_date.items())
        ],
    }


def unassigned_participants(event):
    """Roster participants with an account who are not in any team of the event."""
    placed = TeamMember.objects.filter(event=event).values_list("user_id", flat=True)
    regs = (
        event.registrations
        .filter(user__isnull=False)
        .exclude(user_id__in=placed)
        .select_related("user")
        .order_by("event_date", "user__name", "user_id")
    )
    return [
        {
            "id": reg.user.id,
            "name": reg.user.display_name,
            "email": reg.user.email,
            "reg_no": reg.user.reg_no,
            "event_date": reg.event_date,
            "in_random_pool": RandomPoolEntry.objects.filter(event=event, user=reg.user).exists(),
        }
        for reg in regs
    ]
