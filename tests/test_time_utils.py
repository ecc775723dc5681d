import datetime

from snoozeskip.core.time_utils import (TimeComponents, add_components, as_utc,
                                        shift_absolute, to_local)

from .conftest import TZ


class TestTimeComponents:

    def test_total_seconds(self):
        assert TimeComponents(1, 2, 3).total_seconds() == 3723

    def test_subtraction_is_component_wise_and_may_go_negative(self):
        delta = TimeComponents(0, 5, 30) - TimeComponents(0, 9, 0)
        assert delta == TimeComponents(0, -4, 30)
        assert delta.total_seconds() == -210


class TestAddComponents:

    def test_simple_addition(self, at):
        assert add_components(at(2025, 1, 6, 7, 31), TimeComponents(0, 30, 0)) == at(2025, 1, 6, 8, 1)

    def test_rolls_over_month_end(self, at):
        result = add_components(at(2025, 1, 31, 23, 50), TimeComponents(0, 20, 0))
        assert result == at(2025, 2, 1, 0, 10)

    def test_result_in_spring_forward_gap_moves_past_it(self, at):
        # Europe/Vienna skips from 02:00 to 03:00 on 2024-03-31
        result = add_components(at(2024, 3, 31, 1, 45), TimeComponents(0, 30, 0))
        assert (result.hour, result.minute) == (3, 15)
        assert result.utcoffset() == datetime.timedelta(hours=2)

    def test_wall_clock_semantics_across_fall_back(self, at):
        # 2024-10-27 repeats the 02:00 hour; one wall-clock hour spans two real ones
        start = at(2024, 10, 27, 1, 30)
        result = add_components(start, TimeComponents(1, 0, 0))
        assert (result.hour, result.minute, result.fold) == (2, 30, 0)

    def test_start_in_repeated_hour_stays_in_it(self):
        # 02:40 on the second pass of the repeated hour, 01:40 UTC
        start = datetime.datetime(2024, 10, 27, 2, 40, fold=1, tzinfo=TZ)
        result = add_components(start, TimeComponents(0, 15, 0))
        assert (result.hour, result.minute, result.fold) == (2, 55, 1)
        assert (as_utc(result) - as_utc(start)).total_seconds() == 15 * 60

    def test_start_in_repeated_hour_leaving_it(self):
        start = datetime.datetime(2024, 10, 27, 2, 40, fold=1, tzinfo=TZ)
        result = add_components(start, TimeComponents(0, 30, 0))
        assert (result.hour, result.minute) == (3, 10)
        assert as_utc(result) > as_utc(start)

    def test_utc_input_is_interpreted_locally(self):
        start = datetime.datetime(2025, 1, 6, 6, 0, tzinfo=datetime.timezone.utc)
        result = add_components(start, TimeComponents(0, 30, 0), TZ)
        assert result.tzinfo is TZ
        assert (result.hour, result.minute) == (7, 30)


def test_shift_absolute_counts_elapsed_seconds_over_dst(at):
    start = at(2024, 3, 31, 1, 55)
    shifted = shift_absolute(start, 10 * 60)
    assert (shifted.hour, shifted.minute) == (3, 5)
    assert (as_utc(shifted) - as_utc(start)).total_seconds() == 600


def test_to_local_treats_naive_values_as_local_wall_time():
    local = to_local(datetime.datetime(2025, 1, 6, 8, 0))
    assert local.tzinfo is TZ
    assert local.hour == 8
