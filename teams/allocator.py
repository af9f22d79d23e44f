# teams/allocator.py
"""
Random pool allocator.

Groups queued participants of one event into teams:

1. queued participants are grouped by event day (FIFO inside a day);
2. existing teams of that day with open seats are topped up first,
   oldest team first;
3. the rest are cut into new teams of `team_size`; a trailing group
   smaller than the event's minimum random team size stays queued;
4. every new team takes the earliest slot of its day that still has
   room, or stays queued when the day is fully booked.

`plan_allocation` is pure (no database) so it can be previewed and
tested on its own; `run_allocation` loads the state, plans, and applies
the plan one team per transaction.
"""
import logging
import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, List, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from events.slots import format_slot, generate_slots
from .exceptions import TeamRuleViolation
from .models import RandomPoolEntry, Team, TeamMember
from .services import add_member, lock_team

logger = logging.getLogger("teams.allocator")


REASON_TOO_FEW = "not enough participants for a new team"
REASON_NO_SLOT = "no free slot on this date"

MYSTERY_TEAM_NAMES = [
    "The Enigma Squad",
    "Cipher Syndicate",
    "Vortex Voyagers",
    "Phantom Phalanx",
    "Eclipse Raiders",
]


@dataclass
class OpenTeam:
    team_id: int
    event_date: date
    size: int


@dataclass
class Fill:
    team_id: int
    user_ids: List[int]


@dataclass
class NewTeam:
    event_date: date
    slot_time: time
    user_ids: List[int]
    leader_id: int


@dataclass
class Leftover:
    event_date: date
    user_ids: List[int]
    reason: str


@dataclass
class AllocationPlan:
    fills: List[Fill] = field(default_factory=list)
    new_teams: List[NewTeam] = field(default_factory=list)
    leftovers: List[Leftover] = field(default_factory=list)


def plan_allocation(
    queued: Dict[date, List[int]],
    open_teams: List[OpenTeam],
    slot_usage: Dict[date, Counter],
    slots: List[time],
    teams_per_slot: int,
    team_size: int,
    min_team_size: int,
    rng: Optional[random.Random] = None,
) -> AllocationPlan:
    """
    Decide where each queued participant goes.

    `queued` maps an event day to user ids in queue order. `open_teams`
    must be in fill order. `slot_usage` holds the current team count per
    slot for each day and is not modified.
    """
    rng = rng or random.Random()
    plan = AllocationPlan()

    teams_by_date = defaultdict(list)
    for team in open_teams:
        teams_by_date[team.event_date].append(team)

    for event_date in sorted(queued):
        waiting = list(queued[event_date])

        # 1) top up existing teams
        for team in teams_by_date.get(event_date, []):
            if not waiting:
                break
            seats = team_size - team.size
            if seats <= 0:
                continue
            chunk, waiting = waiting[:seats], waiting[seats:]
            plan.fills.append(Fill(team_id=team.team_id, user_ids=chunk))

        # 2) form new teams
        usage = Counter(slot_usage.get(event_date, {}))
        while waiting:
            chunk = waiting[:team_size]
            if len(chunk) < min_team_size:
                plan.leftovers.append(Leftover(event_date, chunk, REASON_TOO_FEW))
                break

            slot = next((s for s in slots if usage[s] < teams_per_slot), None)
            if slot is None:
                plan.leftovers.append(Leftover(event_date, waiting, REASON_NO_SLOT))
                break

            usage[slot] += 1
            waiting = waiting[team_size:]
            plan.new_teams.append(NewTeam(
                event_date=event_date,
                slot_time=slot,
                user_ids=chunk,
                leader_id=rng.choice(chunk),
            ))

    return plan


def unique_team_name(taken, index):
    """Cycle through the mystery names, numbering repeats."""
    base = MYSTERY_TEAM_NAMES[index % len(MYSTERY_TEAM_NAMES)]
    name = base
    suffix = 2
    while name.lower() in taken:
        name = f"{base} {suffix}"
        suffix += 1
    taken.add(name.lower())
    return name


def _load_state(event):
    entries = list(
        RandomPoolEntry.objects
        .filter(event=event)
        .order_by("queued_at", "id")
    )
    placed = set(
        TeamMember.objects
        .filter(event=event, user_id__in=[e.user_id for e in entries])
        .values_list("user_id", flat=True)
    )

    stale = [e for e in entries if e.user_id in placed]
    queued = defaultdict(list)
    for entry in entries:
        if entry.user_id not in placed:
            queued[entry.event_date].append(entry.user_id)

    open_teams = []
    usage = defaultdict(Counter)
    teams = Team.objects.filter(event=event).order_by("created_at", "id")
    sizes = Counter(TeamMember.objects.filter(event=event).values_list("team_id", flat=True))
    for team in teams:
        open_teams.append(OpenTeam(team.id, team.event_date, sizes.get(team.id, 0)))
        if team.slot_time is not None:
            usage[team.event_date][team.slot_time] += 1

    return stale, dict(queued), open_teams, dict(usage)


def _apply_fill(fill):
    with transaction.atomic():
        team = lock_team(fill.team_id)
        if team.members.count() + len(fill.user_ids) > team.event.max_team_size:
            raise TeamRuleViolation("Team is already full.")
        users = _users(fill.user_ids)
        for user in users:
            add_member(team, user)
    return team


def _apply_new_team(event, new_team, name):
    with transaction.atomic():
        users = _users(new_team.user_ids)
        leader = next((u for u in users if u.id == new_team.leader_id), users[0])
        team = Team.objects.create(
            event=event,
            event_date=new_team.event_date,
            slot_time=new_team.slot_time,
            name=name,
            leader=leader,
            is_random=True,
        )
        for user in users:
            add_member(team, user)
    return team


def _users(user_ids):
    by_id = get_user_model().objects.in_bulk(user_ids)
    return [by_id[uid] for uid in user_ids if uid in by_id]


def run_allocation(event, team_size=None, dry_run=False, seed=None):
    """
    Place everyone in the event's random pool. Returns a summary dict.
    """
    team_size = min(max(1, team_size or event.max_team_size), event.max_team_size)
    min_team_size = min(max(1, event.min_random_team_size), team_size)
    rng = random.Random(seed)

    stale, queued, open_teams, usage = _load_state(event)
    plan = plan_allocation(
        queued,
        open_teams,
        usage,
        generate_slots(event),
        event.teams_per_slot,
        team_size,
        min_team_size,
        rng=rng,
    )

    summary = {
        "event": event.key,
        "team_size": team_size,
        "dry_run": dry_run,
        "created_team_ids": [],
        "assigned_to_existing": [],
        "failed": [],
        "skipped": [e.user_id for e in stale],
        "remaining": [],
    }

    if dry_run:
        summary["assigned_to_existing"] = [
            {"team_id": f.team_id, "added": f.user_ids} for f in plan.fills
        ]
        summary["planned_teams"] = [
            {
                "event_date": t.event_date,
                "slot_time": format_slot(t.slot_time),
                "members": t.user_ids,
                "leader_id": t.leader_id,
            }
            for t in plan.new_teams
        ]
        summary["remaining"] = [uid for left in plan.leftovers for uid in left.user_ids]
        summary["failed"] = [
            {"event_date": left.event_date, "users": left.user_ids, "error": left.reason}
            for left in plan.leftovers
            if left.reason != REASON_TOO_FEW
        ]
        return summary

    if stale:
        RandomPoolEntry.objects.filter(pk__in=[e.pk for e in stale]).delete()
        logger.info(f"Random pool: dropped {len(stale)} already-placed entries for {event.key}")

    for fill in plan.fills:
        try:
            _apply_fill(fill)
        except (TeamRuleViolation, IntegrityError) as exc:
            logger.warning(f"Random pool: could not fill team {fill.team_id}: {exc}")
            summary["failed"].append({"team_id": fill.team_id, "users": fill.user_ids, "error": str(exc)})
            summary["remaining"].extend(fill.user_ids)
            continue
        summary["assigned_to_existing"].append({"team_id": fill.team_id, "added": fill.user_ids})

    taken = {n.lower() for n in Team.objects.filter(event=event).values_list("name", flat=True)}
    for index, new_team in enumerate(plan.new_teams):
        name = unique_team_name(taken, index)
        try:
            team = _apply_new_team(event, new_team, name)
        except (TeamRuleViolation, IntegrityError) as exc:
            logger.warning(f"Random pool: could not create team for {new_team.user_ids}: {exc}")
            summary["failed"].append({"users": new_team.user_ids, "error": str(exc)})
            summary["remaining"].extend(new_team.user_ids)
            continue
        summary["created_team_ids"].append(team.id)

    for left in plan.leftovers:
        summary["remaining"].extend(left.user_ids)
        if left.reason != REASON_TOO_FEW:
            summary["failed"].append({"event_date": left.event_date, "users": left.user_ids, "error": left.reason})

    logger.info(
        f"Random allotment for {event.key}: created={len(summary['created_team_ids'])} "
        f"filled={len(summary['assigned_to_existing'])} remaining={len(summary['remaining'])}"
    )
    return summary
