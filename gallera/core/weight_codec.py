"""Weight conversion between integer ounces and the "Lb.Oz" display form.

Every weight crossing the scan/manual-entry boundary goes through ``decode``;
storage and comparisons use ounces only.
"""

import re

OUNCES_PER_POUND = 16


def to_lbs_oz(total_ounces) -> tuple[int, int]:
    """Split an ounce count into (pounds, ounces). Invalid input gives (0, 0)."""
    try:
        total = round(float(total_ounces))
    except (TypeError, ValueError):
        return 0, 0
    if total < 0:
        return 0, 0
    return total // OUNCES_PER_POUND, total % OUNCES_PER_POUND


def from_lbs_oz(lbs: int, oz: int) -> int:
    return round(lbs * OUNCES_PER_POUND + oz)


def encode(total_ounces, with_unit: bool = False) -> str:
    """Format ounces as "L.OO", e.g. 62 -> "3.14"."""
    lbs, oz = to_lbs_oz(total_ounces)
    unit = ' Lb.Oz' if with_unit else ''
    return f"{lbs}.{oz:02d}{unit}"


def _to_int(digits: str) -> int:
    try:
        return int(digits)
    except ValueError:
        return 0


def decode(text) -> int:
    """Parse a loosely written "Lb.Oz" weight into ounces. Never raises.

    "3.14", "3-14", "3,14", "314" and "3 lb 14 oz" all read as 3 lb 14 oz.
    Ounces of 16 or more roll over: "3.20" is 4 lb 4 oz.
    """
    if text is None:
        return 0
    clean = re.sub(r'[^0-9.]', '', str(text))
    if '.' not in clean and len(clean) == 3:
        clean = f"{clean[0]}.{clean[1:]}"

    parts = clean.split('.')
    lbs = _to_int(parts[0])
    oz = _to_int(parts[1] if len(parts) > 1 and parts[1] else '0')
    if oz >= OUNCES_PER_POUND:
        lbs += oz // OUNCES_PER_POUND
        oz = oz % OUNCES_PER_POUND
    return from_lbs_oz(lbs, oz)
