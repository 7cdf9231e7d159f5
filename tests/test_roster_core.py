"""Tests for weight conversion, front grouping and the slot layout."""

import os
import sys

import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from gallera.core.models import AgeClass, Rooster, Team
from gallera.core.weight_codec import decode, encode, from_lbs_oz, to_lbs_oz
from gallera.core.front_resolver import (
    base_id, base_name, base_teams, front_number, group_label, list_fronts, natural_key
)
from gallera.core.slot_allocator import (
    build_slots, first_open_slot, locate_slot, slot_of_rooster
)


# ─── Weight codec ───────────────────────────────────────────────────

class TestWeightCodec:
    def test_encode_pads_ounces(self):
        assert encode(62) == '3.14'
        assert encode(49) == '3.01'
        assert encode(0) == '0.00'
        assert encode(62, with_unit=True) == '3.14 Lb.Oz'

    def test_encode_invalid_is_zero(self):
        assert encode(-5) == '0.00'
        assert encode('abc') == '0.00'

    def test_round_trip(self):
        for oz in list(range(0, 200)) + [1600, 16001]:
            assert decode(encode(oz)) == oz

    def test_separator_variants(self):
        assert decode('3.14') == 62
        assert decode('3-14') == 62
        assert decode('3,14') == 62
        assert decode('3 libras 14 onzas') == 62
        assert decode('314') == 62

    def test_ounce_rollover(self):
        assert decode('3.20') == 68
        assert decode('2.33') == from_lbs_oz(4, 1)

    def test_never_fails(self):
        assert decode('') == 0
        assert decode(None) == 0
        assert decode('abc') == 0
        assert decode('.') == 0
        assert decode('4') == 64
        assert decode('4.') == 64

    def test_numeric_input(self):
        assert decode(3.14) == 62
        assert decode(4) == 64

    def test_lbs_oz_split(self):
        assert to_lbs_oz(62) == (3, 14)
        assert to_lbs_oz(None) == (0, 0)


# ─── Front grouping ─────────────────────────────────────────────────

def _team(team_id, name, base=None, plate=''):
    return Team(id=team_id, name=name, base_id=base, breeder_plate=plate)


@pytest.fixture
def teams():
    return [
        _team('t1', 'Team (F1)'),
        _team('t10', 'Team (F10)', base='t1'),
        _team('t2', 'Team (F2)', base='t1'),
        _team('x1', 'Teamster (F1)'),
        _team('s1', 'Solo'),
    ]


class TestFrontResolver:
    def test_base_name(self):
        assert base_name('El Diamante (F2)') == 'El Diamante'
        assert base_name('El Diamante') == 'El Diamante'
        assert base_name('Rancho (F1) Grande') == 'Rancho (F1) Grande'
        assert base_name(_team('a', 'La Esperanza (F12)')) == 'La Esperanza'

    def test_front_number(self):
        assert front_number('El Diamante (F2)') == 2
        assert front_number(_team('a', 'Team (F10)')) == 10
        assert front_number('Solo') is None
        assert front_number('Rancho (F1) Grande') is None

    def test_base_id(self, teams):
        assert base_id(teams[0]) == 't1'
        assert base_id(teams[2]) == 't1'

    def test_natural_sort(self):
        names = ['Team (F1)', 'Team (F10)', 'Team (F2)']
        assert sorted(names, key=natural_key) == ['Team (F1)', 'Team (F2)', 'Team (F10)']

    def test_list_fronts_by_name(self, teams):
        fronts = list_fronts(teams, 'Team')
        assert [f.name for f in fronts] == ['Team (F1)', 'Team (F2)', 'Team (F10)']

    def test_list_fronts_from_any_front_id(self, teams):
        assert [f.id for f in list_fronts(teams, 't10')] == ['t1', 't2', 't10']

    def test_similar_prefix_not_grouped(self, teams):
        assert [f.id for f in list_fronts(teams, 'x1')] == ['x1']

    def test_base_without_fronts_is_its_own_front(self, teams):
        assert [f.id for f in list_fronts(teams, 's1')] == ['s1']

    def test_unknown_key(self, teams):
        assert list_fronts(teams, 'nobody') == []

    def test_base_teams_and_label(self, teams):
        assert [t.id for t in base_teams(teams)] == ['t1', 'x1', 's1']
        assert group_label(teams, teams[0]) == 'Team (F1) (F2) (F3)'


# ─── Slot layout ────────────────────────────────────────────────────

def _rooster(ring, team_id, age=14):
    return Rooster(ring_id=ring, team_id=team_id, age_months=age, id=f"g-{ring}")


class TestSlotAllocator:
    def test_locate_slot_three_fronts(self):
        assert locate_slot(0, 3) == (0, 0)
        assert locate_slot(3, 3) == (0, 1)
        assert locate_slot(9, 3) == (0, 3)
        assert locate_slot(5, 3) == (2, 1)

    def test_locate_slot_needs_a_front(self):
        with pytest.raises(ValueError):
            locate_slot(0, 0)

    def test_build_slots_round_robin(self):
        fronts = [_team('f1', 'T (F1)'), _team('f2', 'T (F2)', base='f1'),
                  _team('f3', 'T (F3)', base='f1')]
        roosters = [_rooster('A', 'f1'), _rooster('B', 'f2'), _rooster('C', 'f1'),
                    _rooster('D', 'f3')]
        slots = build_slots(fronts, roosters, 10)

        assert len(slots) == 10
        assert [s.front.id for s in slots[:4]] == ['f1', 'f2', 'f3', 'f1']
        assert slots[0].rooster.ring_id == 'A'
        assert slots[1].rooster.ring_id == 'B'
        assert slots[2].rooster.ring_id == 'D'
        assert slots[3].rooster.ring_id == 'C'
        assert slots[4].rooster is None
        assert slots[9].front.id == 'f1' and slots[9].ordinal == 3
        assert slots[3].label == 'F1 (4/10)'
        assert first_open_slot(slots).index == 4

    def test_no_fronts_no_slots(self):
        assert build_slots([], [], 12) == []

    def test_layout_recomputes_when_fronts_change(self):
        f1, f2 = _team('f1', 'T (F1)'), _team('f2', 'T (F2)', base='f1')
        roosters = [_rooster('A', 'f1'), _rooster('B', 'f1')]
        assert build_slots([f1], roosters, 4)[1].rooster.ring_id == 'B'
        two = build_slots([f1, f2], roosters, 4)
        assert two[1].rooster is None
        assert two[2].rooster.ring_id == 'B'

    def test_reverse_lookup_matches_layout(self):
        fronts = [_team('f1', 'T (F1)'), _team('f2', 'T (F2)', base='f1')]
        roosters = [_rooster('A', 'f1'), _rooster('B', 'f2'), _rooster('C', 'f2'),
                    _rooster('D', 'f1')]
        slots = build_slots(fronts, roosters, 6)
        for r in roosters:
            j = slot_of_rooster(r, fronts, roosters, 6)
            assert slots[j].rooster is r

    def test_reverse_lookup_outside_group_or_capacity(self):
        fronts = [_team('f1', 'T (F1)')]
        roosters = [_rooster('A', 'f1'), _rooster('B', 'f1'), _rooster('Z', 'other')]
        assert slot_of_rooster(roosters[1], fronts, roosters, 1) is None
        assert slot_of_rooster(roosters[2], fronts, roosters, 6) is None

    def test_age_class(self):
        assert _rooster('A', 'f1', age=12).age_class == AgeClass.ADULT
        assert _rooster('B', 'f1', age=11).age_class == AgeClass.CHICK
