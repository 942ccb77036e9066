import random
from datetime import date, timedelta

import pytest
from timesheets.aggregation import (DayCategory, DayFacts, Totals,
                                    adjust_totals, contribution,
                                    summarize_year, summarize_years,
                                    total_of, totals_equal)


def test_contribution_routes_by_category():
    assert contribution(DayCategory.WORKING, 8.0) == Totals(working_hours=8.0)
    assert contribution(DayCategory.VACATION, 0.0) == Totals(vacation_days=1)
    assert contribution(DayCategory.SICK, 0.0) == Totals(sick_days=1)


def test_contribution_ignores_hours_of_absence_days():
    assert contribution("vacation", 8.0) == Totals(vacation_days=1)
    assert contribution("sick", 3.0) == Totals(sick_days=1)


def test_zero_hour_working_day_is_valid():
    assert contribution("working", 0.0) == Totals()
    summary = summarize_year(
        2024, [DayFacts(day=date(2024, 3, 1), category=DayCategory.WORKING, hours=0.0)]
    )
    assert summary.totals.working_hours == 0.0
    assert summary.months[0].days[0].hours == 0.0


def test_contribution_rejects_unknown_category():
    with pytest.raises(ValueError, match="holiday"):
        contribution("holiday", 8.0)


def test_contribution_rejects_negative_hours():
    with pytest.raises(ValueError):
        contribution(DayCategory.WORKING, -1.0)


def test_summarize_year_groups_by_month():
    days = [
        DayFacts(day=date(2024, 1, 1), category=DayCategory.WORKING, hours=8.0),
        DayFacts(day=date(2024, 1, 2), category=DayCategory.VACATION),
        DayFacts(day=date(2024, 3, 5), category=DayCategory.SICK),
        DayFacts(day=date(2024, 3, 6), category=DayCategory.WORKING, hours=4.5),
    ]

    summary = summarize_year(2024, days)

    assert summary.totals == Totals(working_hours=12.5, vacation_days=1, sick_days=1)
    assert [b.month for b in summary.months] == [1, 3]

    january, march = summary.months
    assert january.name == "January"
    assert january.totals == Totals(working_hours=8.0, vacation_days=1)
    assert [d.day for d in january.days] == [date(2024, 1, 1), date(2024, 1, 2)]
    assert march.name == "March"
    assert march.totals == Totals(working_hours=4.5, sick_days=1)


def test_summarize_year_rejects_day_of_another_year():
    with pytest.raises(ValueError):
        summarize_year(2024, [DayFacts(day=date(2023, 12, 31), category=DayCategory.SICK)])


def test_summarize_year_rejects_unsorted_days():
    days = [
        DayFacts(day=date(2024, 2, 1), category=DayCategory.SICK),
        DayFacts(day=date(2024, 1, 1), category=DayCategory.SICK),
    ]
    with pytest.raises(ValueError):
        summarize_year(2024, days)


def test_summarize_years_oldest_first():
    days = [
        DayFacts(day=date(2023, 12, 31), category=DayCategory.WORKING, hours=2.0),
        DayFacts(day=date(2024, 1, 1), category=DayCategory.WORKING, hours=3.0),
    ]
    summaries = summarize_years(days)
    assert [s.year for s in summaries] == [2023, 2024]
    assert [s.totals.working_hours for s in summaries] == [2.0, 3.0]


def test_adjust_totals_moves_working_day_to_sick():
    old = DayFacts(day=date(2024, 1, 1), category=DayCategory.WORKING, hours=8.0)
    new = DayFacts(day=date(2024, 1, 1), category=DayCategory.SICK, hours=8.0)
    totals = Totals(working_hours=8.0, vacation_days=1)

    assert adjust_totals(totals, old, new) == Totals(working_hours=0.0, vacation_days=1, sick_days=1)


def test_adjust_totals_hours_only_change():
    old = DayFacts(day=date(2024, 1, 1), category=DayCategory.WORKING, hours=8.0)
    new = DayFacts(day=date(2024, 1, 1), category=DayCategory.WORKING, hours=6.0)

    assert adjust_totals(Totals(working_hours=10.0), old, new) == Totals(working_hours=8.0)


def test_adjust_totals_identical_patch_is_noop():
    d = DayFacts(day=date(2024, 1, 1), category=DayCategory.VACATION)
    totals = Totals(working_hours=3.0, vacation_days=2, sick_days=1)
    assert adjust_totals(totals, d, d) == totals


def test_adjust_totals_refuses_different_days():
    with pytest.raises(ValueError):
        adjust_totals(
            Totals(),
            DayFacts(day=date(2024, 1, 1), category=DayCategory.SICK),
            DayFacts(day=date(2024, 1, 2), category=DayCategory.SICK),
        )


def test_incremental_adjustment_matches_full_recompute():
    rng = random.Random(1234)
    categories = list(DayCategory)
    hour_choices = [0.0, 0.5, 4.0, 7.5, 8.0]

    start = date(2024, 1, 1)
    days = {
        start + timedelta(days=i): DayFacts(
            day=start + timedelta(days=i),
            category=rng.choice(categories),
            hours=rng.choice(hour_choices),
        )
        for i in range(60)
    }
    totals = total_of(days.values())

    for _ in range(300):
        key = rng.choice(list(days))
        new = DayFacts(day=key, category=rng.choice(categories), hours=rng.choice(hour_choices))
        totals = adjust_totals(totals, days[key], new)
        days[key] = new

        assert totals_equal(totals, total_of(days.values()))


def test_totals_equal_tolerates_float_noise_only():
    assert totals_equal(Totals(working_hours=0.1 + 0.2), Totals(working_hours=0.3))
    assert not totals_equal(Totals(sick_days=1), Totals(sick_days=2))
    assert not totals_equal(Totals(working_hours=1.0), Totals(working_hours=1.5))


@pytest.mark.parametrize("hours", [float("inf"), float("-inf"), float("nan")])
def test_contribution_rejects_non_finite_hours(hours):
    with pytest.raises(ValueError):
        contribution(DayCategory.WORKING, hours)
    with pytest.raises(ValueError):
        contribution(DayCategory.VACATION, hours)
