"""Data models for the tournament roster core."""

from dataclasses import dataclass, field
from enum import Enum


ADULT_AGE_MONTHS = 12


class Phenotype(str, Enum):
    STANDARD = 'Liso'
    CRESTED = 'Pava'


class AgeClass(str, Enum):
    CHICK = 'Pollo'
    ADULT = 'Gallo'


@dataclass
class TournamentConfig:
    """Configuration for a single tournament."""
    name: str = ''
    roosters_per_team: int = 12   # Capacity of every base team, whatever its front count
    date: str = ''


@dataclass
class Team:
    """A breeder team (cuerda) or one of its fronts.

    Fronts carry the base team's id in ``base_id``; a base team has none.
    """
    id: str
    name: str                       # "El Diamante (F2)"
    owner: str = ''
    city: str = ''
    breeder_plate: str = ''         # Pc, e.g. "LMS-34"
    front_count: int | None = None
    base_id: str | None = None

    @property
    def is_base(self) -> bool:
        return self.base_id is None


@dataclass
class Rooster:
    """A rooster (gallo). Drafts coming out of an import have no id or team yet."""
    ring_id: str                    # Anillo (A)
    color: str = ''
    weight: int = 0                 # Ounces
    age_months: int = 0
    marking_plate: str = ''         # Pm
    breeder_plate: str = ''         # Pc
    phenotype: Phenotype = Phenotype.STANDARD
    marca: int = 0
    team_id: str = ''               # Owning front's id, never the base team's
    id: str = ''

    @property
    def age_class(self) -> AgeClass:
        if self.age_months >= ADULT_AGE_MONTHS:
            return AgeClass.ADULT
        return AgeClass.CHICK


@dataclass
class Slot:
    """One position of a team's flat roster view. Computed, never stored."""
    index: int                      # 0-based
    front: Team
    front_index: int
    ordinal: int                    # Position among the front's own roosters
    total: int                      # roosters_per_team
    rooster: Rooster | None = None

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def label(self) -> str:
        return f"F{self.front_index + 1} ({self.number}/{self.total})"

    @property
    def is_open(self) -> bool:
        return self.rooster is None


@dataclass
class RosterSummary:
    """Per-team counts used by the console reports."""
    team_name: str
    fronts: int
    roosters: int
    capacity: int
    front_sizes: list = field(default_factory=list)
