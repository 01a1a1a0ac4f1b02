from datetime import date, timedelta

from scheduling.occurrence import occurrences_on, occurs_on
from timeline_planner.models import sunday_weekday

ANCHOR = date(2024, 1, 1)  # Monday


def _days(start: date, count: int):
    return [start + timedelta(days=i) for i in range(count)]


def test_single_task_only_on_its_date(make_task):
    t = make_task(date=ANCHOR)
    for d in _days(ANCHOR - timedelta(days=10), 30):
        assert occurs_on(t, d) == (d == ANCHOR)


def test_exception_wins_even_on_anchor(make_task):
    t = make_task(date=ANCHOR, recurring={"type": "daily"}, exceptions=[ANCHOR])
    assert not occurs_on(t, ANCHOR)
    assert occurs_on(t, ANCHOR + timedelta(days=1))


def test_nothing_before_anchor(make_task):
    for rule in ({"type": "daily"}, {"type": "weekdays"}, {"type": "custom", "days": [0, 1, 2, 3, 4, 5, 6]}):
        t = make_task(date=ANCHOR, recurring=rule)
        for d in _days(ANCHOR - timedelta(days=21), 21):
            assert not occurs_on(t, d)


def test_custom_monday_wednesday():
    from timeline_planner.models import Task

    t = Task(
        id=7, title="Gym", start="18:00", end="19:00", date=ANCHOR,
        recurring={"type": "custom", "days": [1, 3]},
        exceptions=[date(2024, 1, 10), date(2024, 2, 5)],
    )
    for d in _days(ANCHOR, 90):
        expected = sunday_weekday(d) in (1, 3) and d not in (date(2024, 1, 10), date(2024, 2, 5))
        assert occurs_on(t, d) == expected, d


def test_weekdays_rule(make_task):
    t = make_task(date=ANCHOR, recurring={"type": "weekdays"})
    assert occurs_on(t, date(2024, 1, 5))  # Friday
    assert not occurs_on(t, date(2024, 1, 6))  # Saturday
    assert not occurs_on(t, date(2024, 1, 7))  # Sunday
    assert occurs_on(t, date(2024, 1, 8))


def test_empty_custom_set_is_anchor_only(make_task):
    t = make_task(date=ANCHOR, recurring={"type": "custom", "days": []})
    assert occurs_on(t, ANCHOR)
    assert not any(occurs_on(t, d) for d in _days(ANCHOR + timedelta(days=1), 14))


def test_anchor_counts_when_rule_does_not_match(make_task):
    t = make_task(date=ANCHOR, recurring={"type": "custom", "days": [3]})
    assert occurs_on(t, ANCHOR)


def test_future_anchor_hides_earlier_matching_dates(make_task):
    t = make_task(date=date(2024, 2, 1), recurring={"type": "daily"})
    assert not occurs_on(t, date(2024, 1, 31))
    assert occurs_on(t, date(2024, 2, 2))


def test_occurrences_ordered_by_start(make_task):
    late = make_task(id=1, title="Dinner", start="19:00", end="20:00")
    early = make_task(id=20, title="Run", start="7:30", end="8:00", recurring={"type": "daily"})
    broken = make_task(id=40, title="Broken", start="soon", end="")
    other_day = make_task(id=60, title="Tomorrow", date=ANCHOR + timedelta(days=1))

    day = occurrences_on([late, broken, other_day, early], ANCHOR)
    assert [t.title for t in day] == ["Run", "Dinner", "Broken"]
