"""In-memory tournament roster: teams, fronts and roosters.

Applies the operations produced by the import reconciler one team or rooster
at a time. Durable storage is someone else's job; see RosterFileAdapter for
the JSON snapshot format.
"""

import itertools
from dataclasses import dataclass, field, fields, replace

from .front_resolver import base_id, base_name, front_name, front_number, list_fronts
from .import_reconciler import (
    AttachRoosterByPlate, CreateTeamWithRoster, ImportResult, normalize_plate
)
from .models import Rooster, RosterSummary, Team, TournamentConfig
from .slot_allocator import build_slots, first_open_slot, front_roosters

ROOSTER_FIELDS = {f.name for f in fields(Rooster)}


@dataclass
class ApplySummary:
    teams_created: list = field(default_factory=list)   # Base team names
    existing_teams: list = field(default_factory=list)  # New registrations refused, name taken
    attached: list = field(default_factory=list)        # Roosters added
    duplicates: list = field(default_factory=list)      # Ring ids already registered
    over_capacity: list = field(default_factory=list)   # Ring ids refused, team full


class RosterBook:
    """Teams, fronts and roosters of one tournament."""

    def __init__(self, config: TournamentConfig | None = None,
                 teams: list[Team] | None = None, roosters: list[Rooster] | None = None):
        self.config = config or TournamentConfig()
        self.teams: list[Team] = list(teams or [])
        self.roosters: list[Rooster] = list(roosters or [])
        self._ids = itertools.count(len(self.teams) + len(self.roosters) + 1)

    def _new_id(self, prefix: str) -> str:
        existing = {t.id for t in self.teams} | {r.id for r in self.roosters}
        while True:
            candidate = f"{prefix}-{next(self._ids)}"
            if candidate not in existing:
                return candidate

    # ---- lookups ----

    def team(self, team_id: str) -> Team:
        for t in self.teams:
            if t.id == team_id:
                return t
        raise ValueError(f"Unknown team: {team_id}")

    def rooster(self, rooster_id: str) -> Rooster:
        for r in self.roosters:
            if r.id == rooster_id:
                return r
        raise ValueError(f"Unknown rooster: {rooster_id}")

    def find_by_ring(self, ring_id: str) -> Rooster | None:
        key = (ring_id or '').strip().lower()
        if not key:
            return None
        return next((r for r in self.roosters if r.ring_id.strip().lower() == key), None)

    def fronts_of(self, team_id: str) -> list[Team]:
        return list_fronts(self.teams, team_id)

    def team_roosters(self, team_id: str) -> list[Rooster]:
        front_ids = {f.id for f in self.fronts_of(team_id)}
        return [r for r in self.roosters if r.team_id in front_ids]

    def teams_with_plate(self, plate: str) -> list[Team]:
        key = normalize_plate(plate)
        if not key:
            return []
        return [t for t in self.teams if normalize_plate(t.breeder_plate) == key]

    def slots_for(self, team_id: str):
        return build_slots(self.fronts_of(team_id), self.roosters,
                           self.config.roosters_per_team)

    def summary(self, team_id: str) -> RosterSummary:
        fronts = self.fronts_of(team_id)
        sizes = [len(front_roosters(self.roosters, f)) for f in fronts]
        return RosterSummary(
            team_name=base_name(self.team(team_id)),
            fronts=len(fronts),
            roosters=sum(sizes),
            capacity=self.config.roosters_per_team,
            front_sizes=sizes,
        )

    # ---- teams ----

    def has_team(self, name: str) -> bool:
        wanted = base_name(name)
        return any(base_name(t) == wanted for t in self.teams)

    def create_team(self, name: str, owner: str = '', city: str = '',
                    front_count: int = 1, breeder_plate: str = '') -> Team:
        """Create the base team "<name> (F1)" and fan out its other fronts.

        Team names are unique per tournament: fronts are grouped by name, so
        a second "El Diamante" would merge into the first one's group.
        """
        if self.has_team(name):
            raise ValueError(f"Team already registered: {base_name(name)}")
        base = Team(
            id=self._new_id('cuerda'),
            name=front_name(name, 1),
            owner=owner,
            city=city,
            breeder_plate=breeder_plate,
            front_count=max(front_count, 1),
        )
        self.teams.append(base)
        self.add_fronts(base, front_count)
        return base

    def add_fronts(self, team: Team, target_count: int) -> list[Team]:
        """Add fronts until the team's group has ``target_count`` of them.

        Missing front numbers are filled lowest first, so after deleting
        "(F2)" of three fronts the next front created is "(F2)" again.
        """
        base = self.team(base_id(team))
        fronts = self.fronts_of(base.id)
        taken = {front_number(f) for f in fronts}
        if front_number(base) is None:
            # Base stored without a suffix still holds front 1
            taken.add(1)
        created = []
        number = 0
        while len(fronts) + len(created) < target_count:
            number += 1
            if number in taken:
                continue
            front = Team(
                id=self._new_id('cuerda'),
                name=front_name(base.name, number),
                owner=base.owner,
                city=base.city,
                breeder_plate=base.breeder_plate,
                base_id=base.id,
            )
            self.teams.append(front)
            created.append(front)
        if created:
            base.front_count = len(fronts) + len(created)
        return created

    def delete_team(self, team_id: str) -> None:
        """Delete a front, or a base team together with all its fronts."""
        team = self.team(team_id)
        doomed = {f.id for f in self.fronts_of(team_id)} if team.is_base else {team.id}
        self.teams = [t for t in self.teams if t.id not in doomed]
        self.roosters = [r for r in self.roosters if r.team_id not in doomed]
        base = next((t for t in self.teams if t.id == base_id(team)), None)
        if base is not None:
            base.front_count = len(self.fronts_of(base.id))

    # ---- roosters ----

    def add_rooster(self, rooster: Rooster, front: Team) -> Rooster:
        if self.find_by_ring(rooster.ring_id) is not None:
            raise ValueError(f"Ring id already registered: {rooster.ring_id}")
        added = replace(rooster, id=self._new_id('gallo'), team_id=front.id)
        self.roosters.append(added)
        return added

    def update_rooster(self, rooster_id: str, **changes) -> Rooster:
        """Edit a rooster in place. Its id can't change and its ring id stays unique."""
        current = self.rooster(rooster_id)
        unknown = sorted(set(changes) - ROOSTER_FIELDS)
        if unknown:
            raise ValueError(f"Unknown rooster field(s): {', '.join(unknown)}")
        if 'id' in changes:
            raise ValueError("Rooster id is immutable")
        ring_id = changes.get('ring_id')
        if ring_id is not None:
            other = self.find_by_ring(ring_id)
            if other is not None and other.id != rooster_id:
                raise ValueError(f"Ring id already registered: {ring_id}")
        if 'team_id' in changes:
            self.team(changes['team_id'])
        for key, value in changes.items():
            setattr(current, key, value)
        return current

    def delete_rooster(self, rooster_id: str) -> None:
        self.rooster(rooster_id)
        self.roosters = [r for r in self.roosters if r.id != rooster_id]

    # ---- import ----

    def _is_full(self, team_id: str) -> bool:
        return len(self.team_roosters(team_id)) >= self.config.roosters_per_team

    def _place(self, rooster: Rooster, fronts: list[Team], scanned_front: int,
               summary: ApplySummary) -> None:
        if self.find_by_ring(rooster.ring_id) is not None:
            summary.duplicates.append(rooster.ring_id)
            return
        if self._is_full(fronts[0].id):
            summary.over_capacity.append(rooster.ring_id)
            return
        front = fronts[(max(scanned_front, 1) - 1) % len(fronts)]
        slots = build_slots(fronts, self.roosters, self.config.roosters_per_team)
        if not any(s.is_open and s.front.id == front.id for s in slots):
            # Scanned front has no slot left; take the team's first open one
            open_slot = first_open_slot(slots)
            if open_slot is not None:
                front = open_slot.front
        summary.attached.append(self.add_rooster(rooster, front))

    def _apply_create(self, op: CreateTeamWithRoster, summary: ApplySummary) -> None:
        if self.has_team(op.name):
            summary.existing_teams.append(base_name(op.name))
            return
        base = self.create_team(op.name, op.owner, op.city, op.front_count, op.breeder_plate)
        summary.teams_created.append(base_name(base))
        fronts = self.fronts_of(base.id)
        for group in op.fronts:
            for rooster in group.roosters:
                self._place(rooster, fronts, group.front_number, summary)

    def _apply_attach(self, op: AttachRoosterByPlate, summary: ApplySummary) -> None:
        matches = self.teams_with_plate(op.plate_code)
        if not matches:
            return
        base = self.team(base_id(matches[0]))
        if op.roosters_per_front:
            self.add_fronts(base, op.roosters_per_front)
        self._place(op.rooster, self.fronts_of(base.id), op.front_number, summary)

    def apply(self, result: ImportResult) -> ApplySummary:
        """Apply a reconciled import. Nothing is applied for a failed batch."""
        summary = ApplySummary()
        if result.failed:
            return summary
        if result.create is not None:
            self._apply_create(result.create, summary)
        for op in result.attachments:
            self._apply_attach(op, summary)
        return summary


def print_apply_summary(summary: ApplySummary) -> None:
    print(f"\nApplied: {len(summary.teams_created)} teams created, "
          f"{len(summary.attached)} roosters attached, "
          f"{len(summary.duplicates)} duplicate ring ids, "
          f"{len(summary.over_capacity)} over capacity")
    if summary.existing_teams:
        print(f"Not registered, team name already taken: {', '.join(summary.existing_teams)}")
    if summary.duplicates:
        print(f"Duplicate ring ids (already registered): {', '.join(summary.duplicates)}")
    if summary.over_capacity:
        print(f"Refused, team roster full: {', '.join(summary.over_capacity)}")


def print_roster_summary(book: RosterBook) -> None:
    """Print one line per registered team: fronts, roosters and capacity."""
    bases = [t for t in book.teams if t.is_base]
    print(f"\nTeams ({len(bases)}):")
    for base in bases[:15]:
        s = book.summary(base.id)
        sizes = ' + '.join(str(n) for n in s.front_sizes)
        print(f"  {s.team_name:<28} {s.fronts} fronts  {s.roosters}/{s.capacity} roosters ({sizes})")
    if len(bases) > 15:
        print(f"  ... and {len(bases) - 15} more")
