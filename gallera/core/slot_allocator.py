"""Flat roster view over a team's parallel fronts.

A team owns ``roosters_per_team`` slots no matter how many fronts it was
split into. Slots are dealt round-robin across the fronts:

    slot j  ->  front  j % num_fronts,  ordinal  j // num_fronts

and the rooster shown in a slot is the ``ordinal``-th rooster of that front,
in collection order. Nothing is stored: the layout is recomputed from the
current fronts and roosters every time, so a change in front count simply
re-deals every slot.
"""

from .models import Rooster, Slot, Team
from .weight_codec import encode


def locate_slot(j: int, num_fronts: int) -> tuple[int, int]:
    """Return (front_index, ordinal) for 0-based slot ``j``."""
    if num_fronts <= 0:
        raise ValueError("a team needs at least one front")
    return j % num_fronts, j // num_fronts


def front_roosters(roosters: list[Rooster], front: Team) -> list[Rooster]:
    return [r for r in roosters if r.team_id == front.id]


def build_slots(fronts: list[Team], roosters: list[Rooster],
                roosters_per_team: int) -> list[Slot]:
    """Lay out slots 0..roosters_per_team-1 over ``fronts``."""
    if not fronts:
        return []

    by_front = {f.id: front_roosters(roosters, f) for f in fronts}
    slots = []
    for j in range(roosters_per_team):
        front_index, ordinal = locate_slot(j, len(fronts))
        front = fronts[front_index]
        owned = by_front[front.id]
        slots.append(Slot(
            index=j,
            front=front,
            front_index=front_index,
            ordinal=ordinal,
            total=roosters_per_team,
            rooster=owned[ordinal] if ordinal < len(owned) else None,
        ))
    return slots


def slot_of_rooster(rooster: Rooster, fronts: list[Team], roosters: list[Rooster],
                    roosters_per_team: int) -> int | None:
    """Reverse lookup: the 0-based slot showing ``rooster``, or None.

    None when the rooster's front is not part of ``fronts`` or when its
    position in the front falls past the team's capacity.
    """
    front_ids = [f.id for f in fronts]
    if rooster.team_id not in front_ids:
        return None
    front_index = front_ids.index(rooster.team_id)

    owned = front_roosters(roosters, fronts[front_index])
    ordinal = next((i for i, r in enumerate(owned) if r is rooster or (r.id and r.id == rooster.id)),
                   None)
    if ordinal is None:
        return None

    j = ordinal * len(fronts) + front_index
    return j if j < roosters_per_team else None


def first_open_slot(slots: list[Slot]) -> Slot | None:
    return next((s for s in slots if s.is_open), None)


def print_slot_layout(title: str, slots: list[Slot]) -> None:
    """Print a team's slot layout to stdout."""
    filled = sum(1 for s in slots if not s.is_open)
    print(f"\n{title}: {filled}/{len(slots)} slots filled")
    for s in slots:
        if s.rooster is None:
            print(f"  {s.label:<14} {s.front.name:<28} --")
        else:
            r = s.rooster
            print(f"  {s.label:<14} {s.front.name:<28} A:{r.ring_id} "
                  f"{r.color} {encode(r.weight)} {r.age_class.value}")
