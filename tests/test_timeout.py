"""Composite timeout predicate tests."""

from datetime import timedelta

from reviewgate.timeout import DAY, WEEK, Timeout, TimeoutOperator

THRESHOLD = timedelta(seconds=2000)


def make_timeout(operation: TimeoutOperator) -> Timeout:
    return Timeout(sessions=10, duration=THRESHOLD, operation=operation)


def seconds(n: float) -> timedelta:
    return timedelta(seconds=n)


class TestTimeoutOr:
    def test_true_if_only_duration_passed(self):
        assert make_timeout(TimeoutOperator.OR).has_elapsed(5, seconds(2001))

    def test_true_if_only_sessions_passed(self):
        assert make_timeout(TimeoutOperator.OR).has_elapsed(11, seconds(1999))

    def test_true_if_both_passed(self):
        assert make_timeout(TimeoutOperator.OR).has_elapsed(11, seconds(2001))

    def test_false_if_neither_passed(self):
        assert not make_timeout(TimeoutOperator.OR).has_elapsed(9, seconds(1999))


class TestTimeoutAnd:
    def test_false_if_only_duration_passed(self):
        assert not make_timeout(TimeoutOperator.AND).has_elapsed(5, seconds(2001))

    def test_false_if_only_sessions_passed(self):
        assert not make_timeout(TimeoutOperator.AND).has_elapsed(11, seconds(1999))

    def test_true_if_both_passed(self):
        assert make_timeout(TimeoutOperator.AND).has_elapsed(11, seconds(2001))

    def test_false_if_neither_passed(self):
        assert not make_timeout(TimeoutOperator.AND).has_elapsed(9, seconds(1999))


class TestTimeoutBoundaries:
    """Thresholds are exclusive on both dimensions."""

    def test_equal_to_threshold_is_not_elapsed_for_and(self):
        assert not make_timeout(TimeoutOperator.AND).has_elapsed(10, THRESHOLD)

    def test_equal_to_threshold_is_not_elapsed_for_or(self):
        assert not make_timeout(TimeoutOperator.OR).has_elapsed(10, THRESHOLD)

    def test_one_past_threshold_on_either_side_for_or(self):
        timeout = make_timeout(TimeoutOperator.OR)
        assert timeout.has_elapsed(11, THRESHOLD)
        assert timeout.has_elapsed(10, THRESHOLD + seconds(1))


class TestTimeoutConstruction:
    def test_operation_accepts_string_value(self):
        timeout = Timeout(sessions=1, duration=DAY, operation="or")
        assert timeout.operation is TimeoutOperator.OR

    def test_week_is_seven_days(self):
        assert WEEK == 7 * DAY
