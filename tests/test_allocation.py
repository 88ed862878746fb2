"""
Tests for candidate selection, FEFO ordering and greedy allocation
"""

import pytest
from decimal import Decimal

from stockpick.core.exceptions import InvalidDemandError
from stockpick.schemas.picking import DiagnosticKind, PlanStatus
from stockpick.services.picking.allocation import allocate, calculate_percentage
from stockpick.services.picking.candidates import build_picking_locations, select_candidates
from stockpick.services.picking.freshness import sort_by_freshness
from stockpick.services.picking.unit_hierarchy import RateFallback


class TestSelectCandidates:
    """Test narrowing the snapshot to one base code"""

    def test_case_insensitive_exact_match(self, make_record):
        records = [
            make_record(code="L3-8G", record_id="a"),
            make_record(code="l3-8g", record_id="b"),
            make_record(code="L3-8G2", record_id="c"),
            make_record(code="L3", record_id="d"),
            make_record(code=None, record_id="e"),
        ]

        selected = select_candidates(records, "L3-8G")

        assert [r.id for r in selected] == ["a", "b"]

    @pytest.mark.parametrize("base_code", ["", "  ", None])
    def test_empty_code_matches_nothing(self, make_record, base_code):
        assert select_candidates([make_record(code="")], base_code) == []


class TestBuildPickingLocations:
    """Test base-unit availability and location decomposition per record"""

    def test_locations_are_decomposed(self, make_record):
        record = make_record(location="a/2/07", level1=1, level1_rate=24, level3=2, lot="L1")

        locations, diagnostics = build_picking_locations([record])

        assert diagnostics == []
        location = locations[0]
        assert location.location == "a/2/07"
        assert location.normalized_location == "A7/2"
        assert (location.zone, location.position, location.level) == ("A", 7, 2)
        assert location.available == Decimal("26")
        assert location.to_pick == 0
        assert location.remaining == Decimal("26")
        assert location.lot == "L1"

    def test_unparseable_location_is_excluded(self, make_record):
        records = [
            make_record(location="DOCK", level3=5, record_id="bad"),
            make_record(location="A1/1", level3=5, record_id="good"),
        ]

        locations, diagnostics = build_picking_locations(records, product_code="L3-8GX2")

        assert [l.stock_record_id for l in locations] == ["good"]
        assert len(diagnostics) == 1
        assert diagnostics[0].kind == DiagnosticKind.UNPARSEABLE_LOCATION
        assert diagnostics[0].stock_record_id == "bad"
        assert diagnostics[0].product_code == "L3-8GX2"

    def test_rate_diagnostics_carry_product_code(self, make_record):
        record = make_record(level1=1, level3=1)

        _, diagnostics = build_picking_locations(
            [record], RateFallback(level1_rate=Decimal("6")), product_code="L3-8G"
        )

        assert [d.kind for d in diagnostics] == [DiagnosticKind.FALLBACK_RATE]
        assert diagnostics[0].product_code == "L3-8G"


class TestFreshnessOrder:
    """Test FEFO ordering of picking candidates"""

    def test_oldest_manufacture_date_first(self, make_location):
        newer = make_location("n", "A1/1", 5, mfd="2024-06-01")
        older = make_location("o", "B9/4", 5, mfd="2024-01-01")

        assert [l.stock_record_id for l in sort_by_freshness([newer, older])] == ["o", "n"]

    def test_undated_records_last(self, make_location):
        undated = make_location("u", "A1/1", 5)
        dated = make_location("d", "Z20/4", 5, mfd="2030-01-01")

        assert [l.stock_record_id for l in sort_by_freshness([undated, dated])] == ["d", "u"]

    def test_lot_breaks_date_ties(self, make_location):
        candidates = [
            make_location("none", "A1/1", 5, mfd="2024-01-01"),
            make_location("b", "A1/1", 5, mfd="2024-01-01", lot="LOT-B"),
            make_location("a", "A1/1", 5, mfd="2024-01-01", lot="LOT-A"),
        ]

        assert [l.stock_record_id for l in sort_by_freshness(candidates)] == ["a", "b", "none"]

    def test_location_breaks_remaining_ties(self, make_location):
        candidates = [
            make_location("b1", "B1/1", 5),
            make_location("a10", "A10/1", 5),
            make_location("a2-2", "A2/2", 5),
            make_location("a2-1", "A2/1", 5),
        ]

        assert [l.stock_record_id for l in sort_by_freshness(candidates)] == ["a2-1", "a2-2", "a10", "b1"]

    def test_order_is_independent_of_input_order(self, make_location):
        """Identical records differ only by id, which settles the order"""
        first = make_location("r-1", "A1/1", 5)
        second = make_location("r-2", "A1/1", 5)

        assert sort_by_freshness([second, first]) == sort_by_freshness([first, second])
        assert sort_by_freshness([second, first])[0].stock_record_id == "r-1"


class TestAllocate:
    """Test greedy allocation over sorted candidates"""

    def test_need_spread_over_locations(self, make_location):
        """Test 15 needed from two locations of 10"""
        candidates = [
            make_location("old", "A1/1", 10, mfd="2024-01-01"),
            make_location("new", "B2/1", 10, mfd="2024-06-01"),
        ]

        result = allocate(candidates, Decimal("15"))

        assert [l.to_pick for l in result.locations] == [Decimal("10"), Decimal("5")]
        assert [l.remaining for l in result.locations] == [Decimal("0"), Decimal("5")]
        assert result.status == PlanStatus.SUFFICIENT
        assert result.percentage == 100.0

    def test_insufficient_stock(self, make_location):
        candidates = [
            make_location("old", "A1/1", 10, mfd="2024-01-01"),
            make_location("new", "B2/1", 10, mfd="2024-06-01"),
        ]

        result = allocate(candidates, Decimal("25"))

        assert [l.to_pick for l in result.locations] == [Decimal("10"), Decimal("10")]
        assert result.total_available == Decimal("20")
        assert result.total_needed == Decimal("25")
        assert result.status == PlanStatus.INSUFFICIENT
        assert result.percentage == 80.0

    def test_available_counts_locations_not_picked(self, make_location):
        """Allocation stops taking stock but keeps counting it"""
        candidates = [
            make_location("a", "A1/1", 10),
            make_location("b", "A2/1", 7),
        ]

        result = allocate(candidates, Decimal("4"))

        assert result.total_available == Decimal("17")
        assert [l.stock_record_id for l in result.active_locations] == ["a"]
        assert result.locations[1].to_pick == 0
        assert result.locations[1].remaining == Decimal("7")

    def test_exact_cover_is_sufficient(self, make_location):
        result = allocate([make_location("a", "A1/1", 12)], Decimal("12"))
        assert result.status == PlanStatus.SUFFICIENT
        assert result.percentage == 100.0

    def test_zero_stock_is_insufficient(self, make_location):
        result = allocate([make_location("a", "A1/1", 0)], Decimal("3"))
        assert result.status == PlanStatus.INSUFFICIENT
        assert result.percentage == 0.0
        assert result.active_locations == []

    def test_no_candidates(self):
        result = allocate([], Decimal("3"))
        assert result.status == PlanStatus.NOT_FOUND
        assert result.total_available == 0
        assert result.locations == []

    @pytest.mark.parametrize("needed", [Decimal("0"), Decimal("-1")])
    def test_non_positive_need_raises(self, make_location, needed):
        with pytest.raises(InvalidDemandError, match="greater than zero"):
            allocate([make_location("a", "A1/1", 5)], needed)

    @pytest.mark.parametrize("needed", ["1", "9.5", "10", "22", "40"])
    def test_total_picked_is_min_of_need_and_stock(self, make_location, needed):
        candidates = sort_by_freshness([
            make_location("a", "A1/1", "3.5", mfd="2024-02-01"),
            make_location("b", "C4/2", 8, mfd="2024-01-01"),
            make_location("c", "B7/1", "10.5"),
        ])

        result = allocate(candidates, Decimal(needed))

        assert result.total_to_pick == min(Decimal(needed), Decimal("22"))
        for location in result.locations:
            assert 0 <= location.to_pick <= location.available


class TestCalculatePercentage:
    """Test coverage percentage"""

    def test_capped_at_100(self):
        assert calculate_percentage(Decimal("50"), Decimal("10")) == 100.0

    def test_partial(self):
        assert calculate_percentage(Decimal("1"), Decimal("4")) == 25.0

    def test_nothing_available(self):
        assert calculate_percentage(Decimal("0"), Decimal("4")) == 0.0
