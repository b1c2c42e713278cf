"""Tests for Instant, FrameTimer, and timestamp()."""

import pytest
from unittest.mock import Mock
from term_tick import NANOS_PER_SEC, ClockUnavailableError, FrameTimer, Instant, frame_ns, timestamp


class TestInstant:
    """Tests for the Instant value type."""

    def test_from_ns_splits_seconds(self):
        """Test a nanosecond count splits into seconds and nanoseconds."""
        instant = Instant.from_ns(3 * NANOS_PER_SEC + 42)
        assert instant.seconds == 3
        assert instant.nanoseconds == 42

    def test_subtraction_borrows_across_seconds(self):
        """Test subtraction borrows across a seconds boundary in both directions."""
        later = Instant(seconds=10, nanoseconds=100)
        earlier = Instant(seconds=9, nanoseconds=999_999_900)
        assert later - earlier == 200
        assert earlier - later == -200

    def test_multi_hour_delta(self):
        """Test a twelve hour delta is exact to the nanosecond."""
        start = Instant.from_ns(0)
        end = Instant.from_ns(12 * 3600 * NANOS_PER_SEC + 1)
        assert end - start == 43_200_000_000_001

    def test_nanoseconds_out_of_range(self):
        """Test nanoseconds of a full second are rejected."""
        with pytest.raises(ValueError):
            Instant(seconds=1, nanoseconds=NANOS_PER_SEC)

    def test_immutable(self):
        """Test an Instant cannot be modified."""
        instant = Instant(1, 2)
        with pytest.raises(Exception):
            instant.seconds = 5

    def test_now_wraps_clock_errors(self):
        """Test a failing clock raises ClockUnavailableError."""
        broken = Mock(side_effect=OSError(22, 'Invalid argument'))
        with pytest.raises(ClockUnavailableError):
            Instant.now(broken)


class TestFrameTimer:
    """Tests for the FrameTimer class."""

    @pytest.mark.parametrize('threshold, elapsed, expected', [
        (0, 0, True),
        (1000, 999, False),
        (1000, 1000, True),
        (1000, 1001, True),
        (NANOS_PER_SEC, NANOS_PER_SEC - 1, False),
        (NANOS_PER_SEC // 60, NANOS_PER_SEC // 60, True),
    ])
    def test_elapsed_at_least_boundary(self, clock, threshold, elapsed, expected):
        """Test the threshold comparison is inclusive."""
        timer = FrameTimer(clock)
        timer.start()
        clock.advance(elapsed)
        assert timer.elapsed_at_least(threshold) is expected

    def test_zero_threshold_right_after_start(self):
        """Test a zero threshold is met immediately after start."""
        timer = FrameTimer()
        timer.start()
        assert timer.elapsed_at_least(0)

    def test_restart_back_to_back(self):
        """Test restarting immediately keeps a zero threshold met."""
        timer = FrameTimer()
        timer.start()
        assert timer.elapsed_at_least(0)
        timer.start()
        assert timer.elapsed_at_least(0)

    def test_large_threshold_right_after_start(self):
        """Test an hour threshold is not met right after start."""
        timer = FrameTimer()
        timer.start()
        assert not timer.elapsed_at_least(3600 * NANOS_PER_SEC)

    def test_query_does_not_reset(self, clock):
        """Test querying leaves the start instant alone."""
        timer = FrameTimer(clock)
        started = timer.start()
        clock.advance(500)
        timer.elapsed_at_least(100)
        assert timer.started_at == started
        assert timer.elapsed_ns() == 500

    def test_start_resets_period(self, clock):
        """Test start begins a new period."""
        timer = FrameTimer(clock)
        timer.start()
        clock.advance(2000)
        timer.start()
        clock.advance(10)
        assert not timer.elapsed_at_least(2000)

    def test_query_before_start(self, clock):
        """Test querying an unstarted timer raises."""
        timer = FrameTimer(clock)
        with pytest.raises(RuntimeError):
            timer.elapsed_at_least(0)

    def test_negative_threshold(self, clock):
        """Test a negative threshold is rejected."""
        timer = FrameTimer(clock)
        timer.start()
        with pytest.raises(ValueError):
            timer.elapsed_at_least(-1)

    def test_start_with_unavailable_clock(self):
        """Test start leaves the timer unstarted when the clock fails."""
        timer = FrameTimer(Mock(side_effect=OSError(22, 'Invalid argument')))
        with pytest.raises(ClockUnavailableError):
            timer.start()
        assert timer.started_at is None


class TestFrameNs:
    """Tests for the frame_ns() helper."""

    def test_sixty_fps(self):
        """Test the frame length at 60 frames per second."""
        assert frame_ns(60) == 16_666_666

    @pytest.mark.parametrize('fps', [0, -30])
    def test_rejects_non_positive(self, fps):
        """Test zero and negative rates are rejected."""
        with pytest.raises(ValueError):
            frame_ns(fps)


class TestTimestamp:
    """Tests for timestamp()."""

    def test_ctime_format_without_newline(self):
        """Test the stamp is ctime text without a newline."""
        stamp = timestamp(lambda: 0.0)
        assert '\n' not in stamp
        assert len(stamp.split()) == 5

    def test_unavailable_calendar_time(self):
        """Test an unrepresentable time raises ClockUnavailableError."""
        with pytest.raises(ClockUnavailableError):
            timestamp(lambda: float('inf'))
