"""Adapter for roster snapshot JSON files.

Snapshot layout:
    {"tournament": {"name": ..., "roosters_per_team": 12, "date": ...},
     "teams":    [{"id", "name", "owner", "city", "breeder_plate",
                   "front_count", "base_id"}, ...],
     "roosters": [{"id", "ring_id", "color", "weight", "age_months",
                   "marking_plate", "breeder_plate", "phenotype", "marca",
                   "team_id"}, ...]}

Weights are stored in ounces. Phenotype is stored by value ("Liso"/"Pava").
"""

import json
import os
from dataclasses import asdict, fields

from .base import BaseAdapter
from gallera.core.models import Phenotype, Rooster, Team, TournamentConfig
from gallera.core.roster_book import RosterBook


def _pick(row: dict, cls) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in row.items() if k in names}


class RosterFileAdapter(BaseAdapter):
    """Load and save RosterBook snapshots."""

    def __init__(self, roosters_per_team: int | None = None):
        # Overrides the snapshot's capacity when given on the command line
        self.roosters_per_team = roosters_per_team

    def parse(self, data_path: str) -> RosterBook:
        try:
            with open(data_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            print(f"Warning: Roster file not found: {data_path} (starting empty)")
            data = {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid roster JSON in {data_path}: {e}") from e

        config = TournamentConfig(**_pick(data.get('tournament') or {}, TournamentConfig))
        if self.roosters_per_team:
            config.roosters_per_team = self.roosters_per_team

        teams = [Team(**_pick(row, Team)) for row in data.get('teams') or []]
        roosters = []
        for row in data.get('roosters') or []:
            values = _pick(row, Rooster)
            values['phenotype'] = self._parse_phenotype(values.get('phenotype'))
            roosters.append(Rooster(**values))
        return RosterBook(config, teams, roosters)

    def save(self, book: RosterBook, data_path: str) -> None:
        out_dir = os.path.dirname(os.path.abspath(data_path))
        os.makedirs(out_dir, exist_ok=True)
        roosters = []
        for r in book.roosters:
            row = asdict(r)
            row['phenotype'] = r.phenotype.value
            row['age_class'] = r.age_class.value
            roosters.append(row)
        snapshot = {
            'tournament': asdict(book.config),
            'teams': [asdict(t) for t in book.teams],
            'roosters': roosters,
        }
        with open(data_path, 'w', encoding='utf-8') as f:
            json.dump(snapshot, f, indent=2, ensure_ascii=False)

    @staticmethod
    def _parse_phenotype(val) -> Phenotype:
        if isinstance(val, Phenotype):
            return val
        text = str(val or '').strip().lower()
        for p in Phenotype:
            if text in (p.value.lower(), p.name.lower()):
                return p
        return Phenotype.STANDARD
