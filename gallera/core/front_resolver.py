"""Group front records back into their logical team.

A team registered with several fronts is stored as one record per front:
the base "El Diamante (F1)" plus "El Diamante (F2)", ... whose ``base_id``
points at the base. Either the shared base name or the back-reference is
enough to find the siblings.
"""

import re

from .models import Team

_FRONT_SUFFIX = re.compile(r'\s\(F(\d+)\)$')


def base_name(team_or_name) -> str:
    """Strip a trailing front marker: "El Diamante (F2)" -> "El Diamante"."""
    name = team_or_name.name if isinstance(team_or_name, Team) else str(team_or_name or '')
    return _FRONT_SUFFIX.sub('', name)


def base_id(team: Team) -> str:
    return team.base_id or team.id


def front_name(name: str, front_number: int) -> str:
    return f"{base_name(name)} (F{front_number})"


def front_number(team_or_name) -> int | None:
    """Front number from the name suffix: "El Diamante (F2)" -> 2."""
    name = team_or_name.name if isinstance(team_or_name, Team) else str(team_or_name or '')
    match = _FRONT_SUFFIX.search(name)
    return int(match.group(1)) if match else None


def natural_key(text: str) -> list:
    """Numeric-aware sort key so "F2" sorts before "F10"."""
    return [(0, int(chunk), '') if chunk.isdigit() else (1, 0, chunk.lower())
            for chunk in re.split(r'(\d+)', text or '') if chunk]


def _find_anchor(teams: list[Team], key) -> Team | None:
    if isinstance(key, Team):
        return key
    for team in teams:
        if team.id == key:
            return team
    wanted = base_name(key)
    for team in teams:
        if base_name(team) == wanted:
            return team
    return None


def list_fronts(teams: list[Team], base_name_or_id) -> list[Team]:
    """Return every front of the team identified by a name, an id or a record.

    Any front's id resolves to the whole group. Fronts are sorted by full
    name with a natural comparison (F1, F2, ..., F10).
    """
    anchor = _find_anchor(teams, base_name_or_id)
    if anchor is None:
        return []

    group_name = base_name(anchor)
    group_id = base_id(anchor)
    fronts = [t for t in teams
              if base_name(t) == group_name or base_id(t) == group_id]
    if not fronts:
        # Anchor passed as a record that is not in the collection
        fronts = [anchor]
    return sorted(fronts, key=lambda t: natural_key(t.name))


def base_teams(teams: list[Team]) -> list[Team]:
    return [t for t in teams if t.is_base]


def group_label(teams: list[Team], base: Team) -> str:
    """Selector label for a team group: "El Diamante (F1) (F2)"."""
    fronts = list_fronts(teams, base)
    labels = ' '.join(f"(F{i + 1})" for i in range(len(fronts)))
    return f"{base_name(base)} {labels}"
