"""Tests for day-bucket allocation."""

from datetime import date, datetime, timezone

import pytest

from readingtracker.analytics.allocation import (
    DayAllocation,
    DaySegment,
    allocate_minutes_within_budget,
    attribute_session,
    compute_day_segments,
    distribute_pages,
)
from readingtracker.dates import month_window


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def segments_of(*minutes: int) -> list[DaySegment]:
    """Consecutive November 2023 segments with the given minute weights."""
    return [DaySegment(day=date(2023, 11, 1 + idx), minutes=m) for idx, m in enumerate(minutes)]


class TestDayKeys:
    """Tests for the day labels on segments and allocations."""

    def test_segment_and_allocation_keys(self):
        assert DaySegment(day=date(2023, 1, 5), minutes=0).day_key == "2023-01-05"
        assert DayAllocation(day=date(2023, 12, 31), minutes=0, pages=1).day_key == "2023-12-31"


class TestComputeDaySegments:
    """Tests for cutting sessions at UTC midnights."""

    def test_single_day_session(self, make_session):
        """Test a session inside one day."""
        session = make_session(utc(2023, 11, 5, 10, 0), utc(2023, 11, 5, 10, 45), 45, 10)

        segments = compute_day_segments(session, utc(2023, 11, 1), utc(2023, 12, 1))

        assert segments == [DaySegment(day=date(2023, 11, 5), minutes=45)]
        assert segments[0].day_key == "2023-11-05"

    def test_clipped_to_window(self, make_session):
        """Test that only the part inside the window is returned."""
        session = make_session(utc(2023, 10, 31, 23, 30), utc(2023, 11, 1, 0, 30), 60, 60)

        october = compute_day_segments(session, *month_window(2023, 10))
        november = compute_day_segments(session, *month_window(2023, 11))

        assert october == [DaySegment(day=date(2023, 10, 31), minutes=30)]
        assert november == [DaySegment(day=date(2023, 11, 1), minutes=30)]

    def test_three_day_span(self, make_session):
        """Test a session covering three calendar days."""
        session = make_session(utc(2023, 11, 10, 23, 50), utc(2023, 11, 12, 0, 10), 120, 13)

        segments = compute_day_segments(session, *month_window(2023, 11))

        assert [s.minutes for s in segments] == [10, 1440, 10]
        assert [s.day_key for s in segments] == ["2023-11-10", "2023-11-11", "2023-11-12"]

    def test_open_session_uses_duration(self, make_session):
        """Test that a session without an end runs for its duration."""
        session = make_session(utc(2023, 10, 31, 23, 30), None, 45, 10)

        segments = compute_day_segments(session, utc(2023, 10, 1), utc(2023, 12, 1))

        assert segments == [
            DaySegment(day=date(2023, 10, 31), minutes=30),
            DaySegment(day=date(2023, 11, 1), minutes=15),
        ]

    def test_partial_minutes_are_floored(self, make_session):
        """Test that partial minutes on a day are dropped."""
        session = make_session(
            datetime(2023, 10, 31, 23, 30, 30, tzinfo=timezone.utc),
            utc(2023, 11, 1, 0, 30),
            60,
            10,
        )

        segments = compute_day_segments(session, utc(2023, 10, 1), utc(2023, 12, 1))

        assert [s.minutes for s in segments] == [29, 30]

    def test_outside_window_is_empty(self, make_session):
        """Test a session entirely before the window."""
        session = make_session(utc(2023, 9, 10, 8, 0), utc(2023, 9, 10, 9, 0), 60, 10)

        assert compute_day_segments(session, *month_window(2023, 11)) == []

    def test_inverted_session_is_empty(self, make_session):
        """Test that an end before the start yields nothing instead of failing."""
        session = make_session(utc(2023, 11, 5, 10, 0), utc(2023, 11, 5, 9, 0), 60, 10)

        assert compute_day_segments(session, *month_window(2023, 11)) == []

    def test_sub_minute_session_falls_back_to_start_day(self, make_session):
        """Test that a session shorter than a minute keeps a start-day segment."""
        session = make_session(
            utc(2023, 11, 5, 10, 0),
            datetime(2023, 11, 5, 10, 0, 40, tzinfo=timezone.utc),
            1,
            3,
        )

        segments = compute_day_segments(session, *month_window(2023, 11))

        assert segments == [DaySegment(day=date(2023, 11, 5), minutes=0)]


class TestDistributePages:
    """Tests for proportional page distribution."""

    def test_even_split(self):
        """Test two equal halves."""
        assert distribute_pages(segments_of(30, 30), 60) == {
            "2023-11-01": 30,
            "2023-11-02": 30,
        }

    def test_three_day_weights(self):
        """Test the heaviest day gets the remainder."""
        pages = distribute_pages(segments_of(10, 100, 10), 13)

        assert pages == {"2023-11-01": 1, "2023-11-02": 11, "2023-11-03": 1}

    def test_every_segment_gets_a_page_when_possible(self):
        """Test the one-page floor for light segments."""
        pages = distribute_pages(segments_of(1, 1000, 1), 3)

        assert list(pages.values()) == [1, 1, 1]

    def test_remainder_round_robin_among_ties(self):
        """Test tied heaviest segments share the remainder earliest first."""
        pages = distribute_pages(segments_of(30, 30), 5)

        assert list(pages.values()) == [3, 2]

    def test_fewer_pages_than_segments(self):
        """Test the whole remainder goes to the single heaviest segment."""
        pages = distribute_pages(segments_of(10, 100, 10), 2)

        assert list(pages.values()) == [0, 2, 0]

    def test_fewer_pages_ties_go_to_earliest(self):
        """Test tie-breaking by chronological order."""
        pages = distribute_pages(segments_of(30, 30, 30), 2)

        assert list(pages.values()) == [2, 0, 0]

    def test_zero_weight_segment_takes_all_pages(self):
        """Test the sub-minute fallback segment carries every page."""
        pages = distribute_pages([DaySegment(day=date(2023, 11, 5), minutes=0)], 7)

        assert pages == {"2023-11-05": 7}

    def test_zero_pages_zero_weights(self):
        """Test nothing to distribute and no weights."""
        assert list(distribute_pages(segments_of(0, 0), 0).values()) == [0, 0]

    def test_empty_segments(self):
        """Test no segments."""
        assert distribute_pages([], 10) == {}

    def test_negative_pages_rejected(self):
        """Test negative page counts raise."""
        with pytest.raises(ValueError):
            distribute_pages(segments_of(10), -1)

    @pytest.mark.parametrize(
        "weights,total",
        [
            ((10, 100, 10), 13),
            ((7, 1440, 1440, 3), 100),
            ((59, 1, 30), 2),
            ((1, 2, 3, 4, 5), 4),
            ((1440, 1440, 1440), 1000),
        ],
    )
    def test_total_conserved_and_weight_monotonic(self, weights, total):
        """Test exact totals and that heavier days never get fewer pages."""
        segments = segments_of(*weights)
        pages = list(distribute_pages(segments, total).values())

        assert sum(pages) == total
        for i, a in enumerate(weights):
            for j, b in enumerate(weights):
                if a > b:
                    assert pages[i] >= pages[j]


class TestAllocateMinutesWithinBudget:
    """Tests for fitting recorded minutes into elapsed segments."""

    def test_budget_covers_everything(self):
        """Test segments are returned unchanged when nothing needs trimming."""
        segments = segments_of(30, 30)

        assert allocate_minutes_within_budget(segments, 90) == segments

    def test_single_segment(self):
        """Test a single segment is capped at the budget."""
        result = allocate_minutes_within_budget(segments_of(50), 20)

        assert [s.minutes for s in result] == [20]

    def test_two_segments_fill_first(self):
        """Test the first day is filled before the last."""
        result = allocate_minutes_within_budget(segments_of(30, 30), 40)

        assert [s.minutes for s in result] == [30, 10]

    def test_boundary_days_before_middle(self):
        """Test first and last days take priority over interior days."""
        result = allocate_minutes_within_budget(segments_of(10, 100, 10), 50)

        assert [s.minutes for s in result] == [10, 30, 10]

    def test_middle_split_proportionally(self):
        """Test interior days share the rest by their actual minutes."""
        result = allocate_minutes_within_budget(segments_of(60, 1440, 1440, 60), 600)

        assert [s.minutes for s in result] == [60, 240, 240, 60]

    def test_last_middle_absorbs_rounding(self):
        """Test the final interior day takes the rounding residue."""
        result = allocate_minutes_within_budget(segments_of(10, 1, 1, 1, 10), 21)

        assert [s.minutes for s in result] == [10, 0, 0, 1, 10]

    def test_rounding_never_exceeds_budget(self):
        """Test rounding up on many interior days still sums to the budget."""
        result = allocate_minutes_within_budget(segments_of(10, 2, 2, 2, 2, 2, 10), 23)

        assert sum(s.minutes for s in result) == 23

    def test_zero_budget(self):
        """Test a zero budget gives zero everywhere."""
        result = allocate_minutes_within_budget(segments_of(10, 20, 30), 0)

        assert [s.minutes for s in result] == [0, 0, 0]

    def test_empty(self):
        """Test no segments."""
        assert allocate_minutes_within_budget([], 30) == []


class TestAttributeSession:
    """Tests for whole-session attribution."""

    def test_month_boundary_split(self, make_session):
        """Test a session crossing midnight into a new month."""
        session = make_session(utc(2023, 10, 31, 23, 30), utc(2023, 11, 1, 0, 30), 60, 60)

        october = attribute_session(session, *month_window(2023, 10))
        november = attribute_session(session, *month_window(2023, 11))

        assert october == [DayAllocation(day=date(2023, 10, 31), minutes=30, pages=30)]
        assert november == [DayAllocation(day=date(2023, 11, 1), minutes=30, pages=30)]

    def test_three_day_split(self, make_session):
        """Test pages weighted by minutes across three days."""
        session = make_session(utc(2023, 11, 10, 23, 50), utc(2023, 11, 12, 0, 10), 120, 13)

        allocations = attribute_session(session)

        assert [a.minutes for a in allocations] == [10, 100, 10]
        assert sum(a.pages for a in allocations) == 13
        assert allocations[1].pages >= 11
        assert allocations[0].pages >= 1
        assert allocations[2].pages >= 1

    def test_minutes_capped_by_duration(self, make_session):
        """Test recorded minutes cap the attributed minutes."""
        session = make_session(utc(2023, 11, 10, 23, 50), utc(2023, 11, 12, 0, 10), 30, 13)

        allocations = attribute_session(session)

        assert [a.minutes for a in allocations] == [10, 10, 10]
        assert [a.pages for a in allocations] == [1, 11, 1]

    def test_open_session_across_months(self, make_session):
        """Test an active timer crossing a month boundary."""
        session = make_session(utc(2023, 10, 31, 23, 30), None, 60, 20)

        october = attribute_session(session, *month_window(2023, 10))
        november = attribute_session(session, *month_window(2023, 11))

        assert october == [DayAllocation(day=date(2023, 10, 31), minutes=30, pages=10)]
        assert november == [DayAllocation(day=date(2023, 11, 1), minutes=30, pages=10)]

    def test_zero_length_session_keeps_pages(self, make_session):
        """Test a session with identical start and end lands on its start day."""
        instant = utc(2023, 11, 5, 10, 0)
        session = make_session(instant, instant, 5, 4)

        assert attribute_session(session) == [
            DayAllocation(day=date(2023, 11, 5), minutes=0, pages=4)
        ]

    def test_inverted_session_attributes_nothing(self, make_session):
        """Test an end before the start attributes nothing."""
        session = make_session(utc(2023, 11, 5, 10, 0), utc(2023, 11, 5, 9, 0), 60, 10)

        assert attribute_session(session) == []
