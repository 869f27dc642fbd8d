"""Tests for recurring series generation and series summaries."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from budgetbook.domain.entities import (
    ItemKind,
    LineItem,
    RecurrenceMode,
    RecurringSeriesSpec,
    SeriesScope,
    ValuationMode,
)
from budgetbook.domain.errors import ValidationError
from budgetbook.domain.series import SeriesGenerator, installment_name
from budgetbook.domain.series_info import build_series_info, standalone_info


def fixed_ids():
    return SeriesGenerator(id_factory=lambda: "series-1")


def spec(**overrides):
    fields = dict(
        kind=ItemKind.EXPENSE,
        name="Rent",
        amount=Decimal("1500.00"),
        start_period="2025-11",
        mode=RecurrenceMode.MONTHLY,
        count=3,
    )
    fields.update(overrides)
    return RecurringSeriesSpec(**fields)


class TestSeriesGenerator:
    def test_monthly_series(self):
        series = fixed_ids().generate(spec(scheduled_day=10))

        assert series.series_id == "series-1"
        assert [d.period for d in series.drafts] == ["2025-11", "2025-12", "2026-01"]
        assert {d.name for d in series.drafts} == {"Rent"}
        assert {d.amount for d in series.drafts} == {Decimal("1500.00")}
        assert {d.series_id for d in series.drafts} == {"series-1"}
        assert series.drafts[2].scheduled_date == date(2026, 1, 10)

    def test_installments_are_numbered(self):
        series = fixed_ids().generate(
            spec(name="TV", amount=Decimal("300"), mode=RecurrenceMode.INSTALLMENTS, count=3)
        )
        assert [d.name for d in series.drafts] == ["TV (1/3)", "TV (2/3)", "TV (3/3)"]

    def test_installments_repeat_full_amount(self):
        series = fixed_ids().generate(
            spec(amount=Decimal("300"), mode=RecurrenceMode.INSTALLMENTS, count=10)
        )
        assert all(d.amount == Decimal("300") for d in series.drafts)

    def test_scheduled_day_clamped_per_month(self):
        series = fixed_ids().generate(spec(start_period="2025-01", scheduled_day=31))
        assert [d.scheduled_date for d in series.drafts] == [
            date(2025, 1, 31),
            date(2025, 2, 28),
            date(2025, 3, 31),
        ]

    def test_sum_group_series_starts_at_zero(self):
        series = fixed_ids().generate(spec(is_group=True, valuation_mode=ValuationMode.SUM))
        assert all(d.is_group and d.amount == Decimal("0") for d in series.drafts)

    def test_fixed_group_series_keeps_amount(self):
        series = fixed_ids().generate(spec(is_group=True, valuation_mode=ValuationMode.FIXED))
        assert all(d.amount == Decimal("1500.00") for d in series.drafts)

    def test_default_ids_are_unique(self):
        generator = SeriesGenerator()
        assert generator.generate(spec()).series_id != generator.generate(spec()).series_id

    @pytest.mark.parametrize("count", [1, 61])
    def test_count_out_of_range(self, count):
        with pytest.raises(ValidationError, match="between 2 and 60"):
            fixed_ids().generate(spec(count=count))

    def test_sixty_months_accepted(self):
        assert len(fixed_ids().generate(spec(count=60)).drafts) == 60

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "  "},
            {"amount": Decimal("-1")},
            {"start_period": "2025-13"},
            {"scheduled_day": 32},
        ],
    )
    def test_invalid_input(self, overrides):
        with pytest.raises(ValidationError):
            fixed_ids().generate(spec(**overrides))


def test_installment_name():
    assert installment_name("Laptop", 2, 12) == "Laptop (2/12)"


class TestInstallmentNameLength:
    def test_base_name_must_leave_room_for_suffix(self):
        with pytest.raises(ValidationError, match="at most 92 characters for 12 installments"):
            fixed_ids().generate(spec(name="x" * 95, mode=RecurrenceMode.INSTALLMENTS, count=12))

    def test_longest_fitting_name(self):
        series = fixed_ids().generate(spec(name="x" * 92, mode=RecurrenceMode.INSTALLMENTS, count=12))
        assert max(len(d.name) for d in series.drafts) == 100

    def test_monthly_names_keep_full_length(self):
        series = fixed_ids().generate(spec(name="x" * 100))
        assert {len(d.name) for d in series.drafts} == {100}


def member(item_id, period, completed=False, series_id="s1"):
    now = datetime(2025, 1, 1)
    return LineItem(
        id=item_id,
        user_id="alice",
        profile_id=None,
        kind=ItemKind.EXPENSE,
        name="Gym",
        amount=Decimal("90"),
        period=period,
        completed=completed,
        scheduled_date=None,
        due_date=None,
        category_id=None,
        parent_id=None,
        is_group=False,
        valuation_mode=ValuationMode.SUM,
        series_id=series_id,
        created_at=now,
        updated_at=now,
    )


class TestSeriesInfo:
    def test_scope_counts_from_third_of_six(self):
        members = [member(i, f"2025-0{i}", completed=i <= 2) for i in range(1, 7)]
        info = build_series_info(members[2], list(reversed(members)))

        assert info.series_id == "s1"
        assert info.total == 6
        assert info.completed == 2
        assert info.pending == 4
        assert info.first_period == "2025-01"
        assert info.last_period == "2025-06"
        assert info.anchor_period == "2025-03"
        assert info.scope_counts == {
            SeriesScope.THIS_ONLY: 1,
            SeriesScope.THIS_AND_FOLLOWING: 4,
            SeriesScope.ALL: 6,
        }

    def test_standalone_item(self):
        info = standalone_info(member(1, "2025-04", series_id=None))
        assert info.series_id is None
        assert info.total == 1
        assert set(info.scope_counts.values()) == {1}

    def test_anchor_without_series_falls_back_to_standalone(self):
        anchor = member(1, "2025-04", series_id=None)
        assert build_series_info(anchor, []).series_id is None
