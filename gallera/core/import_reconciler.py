"""Turn an AI-scanned roster sheet into roster operations.

Two kinds of sheet come back from the scanner:
  New registration: a header (team name, owner, city, Pc) plus rooster rows
                     grouped by front. Produces one CreateTeamWithRoster.
  Quick note:       rooster rows only, each tagged with its breeder plate (Pc).
                     Each row is matched to an existing team by plate and
                     produces an AttachRoosterByPlate.

Reconciliation is best-effort: rows that cannot be attributed are dropped or
collected, and the batch only fails when nothing at all could be attached.
The team collection passed in is read, never modified.
"""

from dataclasses import dataclass, field

from .models import Phenotype, Rooster, Team
from .weight_codec import decode, encode

CRESTED_MARKER = 'pava'
BLANK_PLATES = {'', 'n/a'}

MODE_NEW_TEAM = 'new_team'
MODE_QUICK_NOTE = 'quick_note'


@dataclass
class FrontRoster:
    front_number: int
    roosters: list = field(default_factory=list)


@dataclass
class CreateTeamWithRoster:
    name: str
    owner: str
    city: str
    front_count: int
    breeder_plate: str
    fronts: list = field(default_factory=list)   # [FrontRoster]


@dataclass
class AttachRoosterByPlate:
    rooster: Rooster
    plate_code: str                 # As written on the scanned row
    front_number: int
    roosters_per_front: int | None = None


@dataclass
class UnmatchedPlateReport:
    plate_codes: list = field(default_factory=list)

    @property
    def message(self) -> str:
        return (f"No registered teams found for plates (Pc): {', '.join(self.plate_codes)}. "
                f"Register those teams with their Pc first.")


@dataclass
class ImportResult:
    """Accumulated outcome of one scanned sheet."""
    mode: str
    create: CreateTeamWithRoster | None = None
    attachments: list = field(default_factory=list)   # [AttachRoosterByPlate]
    unmatched_plates: set = field(default_factory=set)
    skipped_rows: int = 0

    @property
    def unmatched_report(self) -> UnmatchedPlateReport | None:
        if self.attachments or not self.unmatched_plates:
            return None
        return UnmatchedPlateReport(sorted(self.unmatched_plates))

    @property
    def failed(self) -> bool:
        return self.unmatched_report is not None

    @property
    def rooster_count(self) -> int:
        if self.create is not None:
            return sum(len(f.roosters) for f in self.create.fronts)
        return len(self.attachments)


def normalize_plate(code) -> str:
    """Plate matching key: trimmed, lower-cased; "N/A" counts as blank."""
    key = str(code or '').strip().lower()
    return '' if key in BLANK_PLATES else key


def detect_phenotype(text) -> Phenotype:
    if CRESTED_MARKER in str(text or '').lower():
        return Phenotype.CRESTED
    return Phenotype.STANDARD


def _as_int(value) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def normalize_row(row: dict, fallback_plate: str = '') -> Rooster:
    """Build a rooster draft (no id, no team) from one scanned row."""
    return Rooster(
        ring_id=str(row.get('ring_id') or '').strip(),
        color=str(row.get('color') or '').strip(),
        weight=decode(row.get('weight_text')),
        age_months=_as_int(row.get('age_months')),
        marking_plate=str(row.get('marking_plate') or '').strip(),
        breeder_plate=str(row.get('breeder_plate') or '').strip() or fallback_plate,
        phenotype=detect_phenotype(row.get('phenotype_text')),
        marca=_as_int(row.get('marca')),
    )


def final_front_count(scan: dict) -> int:
    """Roosters-per-front hint, else the header's front count, else the groups seen."""
    team_info = scan.get('team_info') or {}
    return (_as_int(scan.get('roosters_per_front'))
            or _as_int(team_info.get('front_count'))
            or len(scan.get('front_groups') or []))


def _reconcile_new_team(scan: dict) -> ImportResult:
    info = scan['team_info']
    header_plate = str(info.get('breeder_plate') or '').strip()

    fronts = []
    for group in scan.get('front_groups') or []:
        fronts.append(FrontRoster(
            front_number=_as_int(group.get('front_number')) or 1,
            roosters=[normalize_row(row, header_plate) for row in group.get('roosters') or []],
        ))

    create = CreateTeamWithRoster(
        name=str(info.get('name') or '').strip(),
        owner=str(info.get('owner') or '').strip(),
        city=str(info.get('city') or '').strip(),
        front_count=final_front_count(scan),
        breeder_plate=header_plate,
        fronts=fronts,
    )
    return ImportResult(mode=MODE_NEW_TEAM, create=create)


def _reconcile_quick_note(scan: dict, teams: list[Team]) -> ImportResult:
    result = ImportResult(mode=MODE_QUICK_NOTE)
    target = _as_int(scan.get('roosters_per_front')) or None

    known_plates = {normalize_plate(t.breeder_plate) for t in teams}
    known_plates.discard('')

    for group in scan.get('front_groups') or []:
        front_number = _as_int(group.get('front_number')) or 1
        for row in group.get('roosters') or []:
            key = normalize_plate(row.get('breeder_plate'))
            if not key:
                # No Pc on a quick note: the owning team is unknowable
                result.skipped_rows += 1
                continue

            if key not in known_plates:
                result.unmatched_plates.add(key)
                continue

            result.attachments.append(AttachRoosterByPlate(
                rooster=normalize_row(row),
                plate_code=str(row.get('breeder_plate')).strip(),
                front_number=front_number,
                roosters_per_front=target,
            ))

    return result


def reconcile(scan: dict, teams: list[Team]) -> ImportResult:
    """Translate one canonical scan dict into roster operations.

    Args:
        scan: Scan payload as produced by ScanAdapter (canonical keys).
        teams: Current teams and fronts, used for plate lookup only.

    Returns:
        ImportResult. For a new registration ``create`` is set; for a quick
        note ``attachments`` and ``unmatched_plates`` are filled and
        ``unmatched_report`` is set only when nothing was attached.
    """
    if scan.get('is_new_team') and scan.get('team_info') is not None:
        return _reconcile_new_team(scan)
    return _reconcile_quick_note(scan, teams)


def print_import_report(result: ImportResult) -> None:
    """Print a human-readable import summary to stdout."""
    if result.mode == MODE_NEW_TEAM:
        c = result.create
        print(f"\nNew registration: {c.name} ({c.owner}, {c.city}) Pc {c.breeder_plate or 'N/A'}, "
              f"{c.front_count} fronts, {result.rooster_count} roosters")
        for f in c.fronts:
            print(f"  Front {f.front_number}: {len(f.roosters)} roosters")
            for r in f.roosters[:15]:
                print(f"    A:{r.ring_id} {r.color} {encode(r.weight)} {r.age_months}m {r.phenotype.value}")
            if len(f.roosters) > 15:
                print(f"    ... and {len(f.roosters) - 15} more")
        return

    print(f"\nQuick note: {len(result.attachments)} roosters matched by plate, "
          f"{len(result.unmatched_plates)} unmatched plates, "
          f"{result.skipped_rows} rows without plate")

    lines = [f'  A:{a.rooster.ring_id} -> Pc "{a.plate_code}" front {a.front_number}'
             for a in result.attachments]
    if len(lines) > 15:
        print(f"Matched (showing 15 of {len(lines)}):")
        print('\n'.join(lines[:15]))
    elif lines:
        print("Matched:")
        print('\n'.join(lines))

    if result.failed:
        print(f"Import failed: {result.unmatched_report.message}")
    elif result.unmatched_plates:
        print(f"Partial import, unmatched plates: {', '.join(sorted(result.unmatched_plates))}")
