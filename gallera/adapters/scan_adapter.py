"""Adapter for roster sheets read by the AI scanning service.

The scanner answers with a JSON object, sometimes double-encoded as a JSON
string. Keys come back either in the scanner's own Spanish schema
(isNewCuerda, cuerdaInfo, gallos, fenotipo, ...) or in English; both are
matched case-insensitively and mapped onto canonical names:

    {is_new_team, team_info: {name, owner, city, front_count, breeder_plate},
     roosters_per_front,
     front_groups: [{front_number, roosters: [{ring_id, color, weight_text,
                     age_months, marking_plate, breeder_plate,
                     phenotype_text, marca}]}]}

Values are passed through as read; the reconciler does the normalizing.
"""

import json

from .base import BaseAdapter


# Scan-level keys
SCAN_ALIASES = {
    'isnewcuerda': 'is_new_team',
    'isnewteam': 'is_new_team',
    'isnewteamregistration': 'is_new_team',
    'cuerdainfo': 'team_info',
    'teaminfo': 'team_info',
    'gallosperfront': 'roosters_per_front',
    'roostersperfront': 'roosters_per_front',
    'roostersperfronthint': 'roosters_per_front',
    'fronts': 'front_groups',
    'frontgroups': 'front_groups',
}

TEAM_ALIASES = {
    'name': 'name',
    'cuerda': 'name',
    'owner': 'owner',
    'dueno': 'owner',
    'propietario': 'owner',
    'city': 'city',
    'ciudad': 'city',
    'frontcount': 'front_count',
    'frentes': 'front_count',
    'breederplateid': 'breeder_plate',
    'breederplatecode': 'breeder_plate',
    'breederplate': 'breeder_plate',
    'pc': 'breeder_plate',
}

FRONT_ALIASES = {
    'frontnumber': 'front_number',
    'frente': 'front_number',
    'gallos': 'roosters',
    'roosters': 'roosters',
}

ROOSTER_ALIASES = {
    'ringid': 'ring_id',
    'anillo': 'ring_id',
    'color': 'color',
    'weightlbsoz': 'weight_text',
    'weighttext': 'weight_text',
    'weight': 'weight_text',
    'peso': 'weight_text',
    'agemonths': 'age_months',
    'edad': 'age_months',
    'markingid': 'marking_plate',
    'markingcode': 'marking_plate',
    'markingplate': 'marking_plate',
    'pm': 'marking_plate',
    'breederplateid': 'breeder_plate',
    'breederplatecode': 'breeder_plate',
    'breederplate': 'breeder_plate',
    'pc': 'breeder_plate',
    'fenotipo': 'phenotype_text',
    'phenotype': 'phenotype_text',
    'phenotypetext': 'phenotype_text',
    'marca': 'marca',
    'weightclasscode': 'marca',
}


def _alias_key(key: str) -> str:
    return str(key).lower().replace(' ', '').replace('_', '').replace('-', '').replace('ñ', 'n')


def _map_keys(row: dict, aliases: dict) -> dict:
    mapped = {}
    for key, value in row.items():
        canonical = aliases.get(_alias_key(key))
        if canonical and canonical not in mapped:
            mapped[canonical] = value
    return mapped


class ScanAdapter(BaseAdapter):
    """Parse scanner JSON output into a canonical scan dict."""

    def parse(self, data_path: str) -> dict:
        with open(data_path, 'r', encoding='utf-8') as f:
            content = f.read().strip()
        try:
            data = json.loads(content)
            # Double-encoded responses arrive as a JSON string holding the object
            if isinstance(data, str):
                data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scan JSON in {data_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Scan file {data_path} does not hold a JSON object")
        return self.from_dict(data)

    @staticmethod
    def from_dict(data: dict) -> dict:
        """Canonicalize an already-decoded scanner payload."""
        scan = _map_keys(data, SCAN_ALIASES)

        team_info = scan.get('team_info')
        scan['team_info'] = _map_keys(team_info, TEAM_ALIASES) if isinstance(team_info, dict) else None
        scan['is_new_team'] = ScanAdapter._parse_flag(scan.get('is_new_team'))
        scan.setdefault('roosters_per_front', None)

        groups = []
        for group in scan.get('front_groups') or []:
            if not isinstance(group, dict):
                continue
            mapped = _map_keys(group, FRONT_ALIASES)
            groups.append({
                'front_number': mapped.get('front_number') or 1,
                'roosters': [_map_keys(row, ROOSTER_ALIASES)
                             for row in mapped.get('roosters') or []
                             if isinstance(row, dict)],
            })
        scan['front_groups'] = groups
        return scan

    @staticmethod
    def _parse_flag(val) -> bool:
        """Booleans sometimes come back as strings ("true", "si")."""
        if isinstance(val, str):
            return val.strip().lower() in ('true', '1', 'yes', 'si', 'sí')
        return bool(val)
