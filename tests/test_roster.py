"""
Unit tests for roster validation.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from padel_core.errors import InvalidSelection
from padel_core.models import Player
from padel_core.roster import normalize_roster, select_players


class TestNormalizeRoster:
    def test_valid_even_roster(self):
        assert normalize_roster([4, 2, 3, 1]) == [4, 2, 3, 1]

    def test_accepts_any_iterable(self):
        assert normalize_roster(iter(range(6))) == [0, 1, 2, 3, 4, 5]

    @pytest.mark.parametrize("ids", [[], [1], [1, 2], [1, 2, 3]])
    def test_too_few_players(self, ids):
        with pytest.raises(InvalidSelection):
            normalize_roster(ids)

    def test_odd_roster(self):
        with pytest.raises(InvalidSelection) as exc:
            normalize_roster([1, 2, 3, 4, 5])
        assert "even" in exc.value.message

    def test_duplicates(self):
        with pytest.raises(InvalidSelection) as exc:
            normalize_roster([1, 2, 2, 3])
        assert "Duplicate" in exc.value.message

    def test_error_kind(self):
        with pytest.raises(InvalidSelection) as exc:
            normalize_roster([1])
        assert exc.value.kind == 'InvalidSelection'


class TestSelectPlayers:
    def test_select_in_selection_order(self, four_players):
        selected = select_players(four_players, [3, 1, 4, 2])
        assert [p.id for p in selected] == [3, 1, 4, 2]

    def test_unknown_player(self, four_players):
        with pytest.raises(InvalidSelection):
            select_players(four_players, [1, 2, 3, 99])

    def test_validation_happens_first(self):
        with pytest.raises(InvalidSelection):
            select_players([Player(1, "Ana")], [1, 1, 2, 3])
