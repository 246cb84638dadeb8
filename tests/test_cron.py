from datetime import datetime, timedelta, timezone
from itertools import islice

import pytest

from cronsched.cron import parse_cron
from cronsched.errors import ErrorKind, JobSchedulerError

START = datetime(2024, 3, 10, 7, 45, 13)


def take(iterator, n=10):
    return list(islice(iterator, n))


@pytest.mark.parametrize(
    "pattern",
    [
        "*/2 * * * * *",
        "1/5 * * * * *",
        "0 15 6,8,10 * Mar,Jun Fri",
        "0 0 0 13 * FRI",
        "30 5-10/2 * * * *",
        "0 0 0 * * 1-5",
    ],
)
def test_results_match_and_increase(pattern):
    cron = parse_cron(pattern)
    results = take(cron.iter_from(START))
    assert len(results) == 10
    assert all(cron.matches(r) for r in results)
    assert all(a < b for a, b in zip(results, results[1:]))
    assert results[0] >= START


def test_pinned_noon():
    assert next(parse_cron("0 0 12 * * *").iter_from(datetime(2024, 1, 1))) == datetime(2024, 1, 1, 12)


def test_month_name_rolls_into_next_year():
    result = next(parse_cron("0 0 0 1 JAN *").iter_from(datetime(2024, 6, 1)))
    assert result == datetime(2025, 1, 1)


def test_iter_from_is_inclusive_and_iter_after_is_not():
    cron = parse_cron("* * * * * *")
    assert next(cron.iter_from(START)) == START
    assert next(cron.iter_after(START)) == START + timedelta(seconds=1)


def test_subsecond_start_moves_to_next_second():
    start = START.replace(microsecond=500000)
    result = next(parse_cron("* * * * * *").iter_from(start))
    assert result > start
    assert result.microsecond == 0


def test_double_space_pattern_keeps_pattern():
    pattern = "*/1  * * * * *"
    cron = parse_cron(pattern)
    assert cron.pattern == pattern
    assert str(cron) == pattern
    assert next(cron.iter_from(START)) == START


def test_fields_from_pattern():
    hour, minute, second = 6, 15, 0
    for r in take(parse_cron(f"{second} {minute} {hour} * * *").iter_from(START), 5):
        assert (r.hour, r.minute, r.second) == (hour, minute, second)


def test_last_day_of_month():
    for r in take(parse_cron("0 0 0 L * *").iter_from(START), 6):
        assert (r + timedelta(days=1)).day == 1


def test_nth_weekday():
    for r in take(parse_cron("0 0 0 * * FRI#2").iter_from(START), 6):
        assert r.weekday() == 4
        assert 8 <= r.day <= 14


def test_last_weekday():
    for r in take(parse_cron("0 0 0 * * 5L").iter_from(START), 6):
        assert r.weekday() == 4
        assert (r + timedelta(days=7)).month != r.month


def test_nearest_weekday():
    for r in take(parse_cron("0 0 0 15W * *").iter_from(START), 12):
        assert r.weekday() < 5
        assert abs(r.day - 15) <= 2


def test_dom_and_dow_both_required():
    for r in take(parse_cron("0 0 0 13 * FRI").iter_from(START), 3):
        assert r.day == 13
        assert r.weekday() == 4


def test_sunday_as_seven_and_zero():
    a = take(parse_cron("0 0 0 * * 7").iter_from(START), 4)
    b = take(parse_cron("0 0 0 * * 0").iter_from(START), 4)
    assert a == b
    assert all(r.weekday() == 6 for r in a)


def test_nickname_daily():
    cron = parse_cron("@daily")
    for r in take(cron.iter_from(START), 3):
        assert (r.hour, r.minute, r.second) == (0, 0, 0)
    assert cron.pattern == "@daily"


def test_aware_start_keeps_timezone():
    tz = timezone(timedelta(hours=2))
    start = START.replace(tzinfo=tz)
    results = take(parse_cron("*/2 * * * * *").iter_from(start), 3)
    assert all(r.tzinfo is tz for r in results)
    assert results[0] >= start


def test_matches_rejects_other_second():
    cron = parse_cron("0 * * * * *")
    assert cron.matches(START.replace(second=0))
    assert not cron.matches(START.replace(second=1))


def test_impossible_date_yields_nothing():
    assert next(parse_cron("0 0 0 30 2 *").iter_from(START), None) is None


@pytest.mark.parametrize(
    "pattern",
    ["* * * * *", "61 * * * * *", "*/0 * * * * *", "a * * * * *", "0 0 0 * * FRI#6", "5-1 * * * * *", "every 10 seconds"],
)
def test_invalid_patterns(pattern):
    with pytest.raises(JobSchedulerError) as info:
        parse_cron(pattern)
    assert info.value.kind is ErrorKind.PARSE_SCHEDULE