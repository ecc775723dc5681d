"""
Tests for next-skippable selection in snoozeskip/core/selector.py.
"""

from unittest.mock import MagicMock

from snoozeskip.core.recurrence import Recurrence
from snoozeskip.core.selector import next_skippable, sort_by_next_fire


class TestNextSkippable:

    def test_earliest_skippable_occurrence_wins(self, at, local_notification, make_prefs):
        later = local_notification("later", at(2025, 1, 1, 8, 10))
        sooner = local_notification("sooner", at(2025, 1, 1, 8, 5))
        prefs = {"later": make_prefs("later"), "sooner": make_prefs("sooner")}

        assert next_skippable([later, sooner], prefs, at(2025, 1, 6, 8, 0)) is sooner

    def test_snoozed_occurrence_is_never_returned(self, at, local_notification, make_prefs):
        snoozed = local_notification("wake-up", at(2025, 1, 6, 8, 5), Recurrence.once(), snoozed=True)
        prefs = {"wake-up": make_prefs("wake-up")}

        assert next_skippable([snoozed], prefs, at(2025, 1, 6, 8, 0)) is None

    def test_earlier_alarm_without_skip_is_passed_over(self, at, local_notification, make_prefs):
        alarm_a = local_notification("a", at(2025, 1, 1, 8, 0))
        alarm_b = local_notification("b", at(2025, 1, 1, 7, 45))
        prefs = {"a": make_prefs("a"), "b": make_prefs("b", skip_enabled=False)}

        assert next_skippable([alarm_a, alarm_b], prefs, at(2025, 1, 6, 7, 40)) is alarm_a

    def test_empty_schedule(self, at):
        assert next_skippable([], {}, at(2025, 1, 6, 7, 40)) is None

    def test_unconfigured_alarm_is_not_skippable(self, at, local_notification, make_prefs):
        unconfigured = local_notification("unknown", at(2025, 1, 1, 7, 45))
        configured = local_notification("known", at(2025, 1, 1, 8, 0))

        result = next_skippable([unconfigured, configured], {"known": make_prefs("known")}, at(2025, 1, 6, 7, 40))

        assert result is configured

    def test_non_alarm_notifications_are_ignored(self, at, local_notification, notification_request, make_prefs):
        reminder = notification_request("wake-up", at(2025, 1, 1, 7, 45), category="Reminder")
        plain = local_notification(None, at(2025, 1, 1, 7, 45))

        assert next_skippable([reminder, plain], {"wake-up": make_prefs()}, at(2025, 1, 6, 7, 40)) is None

    def test_exhausted_one_time_alarm_is_excluded(self, at, local_notification, make_prefs):
        fired = local_notification("fired", at(2025, 1, 6, 7, 30), Recurrence.once())
        upcoming = local_notification("upcoming", at(2025, 1, 6, 8, 0), Recurrence.once())
        prefs = {"fired": make_prefs("fired"), "upcoming": make_prefs("upcoming")}

        assert next_skippable([fired, upcoming], prefs, at(2025, 1, 6, 7, 40)) is upcoming

    def test_mixed_representations(self, at, local_notification, notification_request, make_prefs):
        legacy = local_notification("legacy", at(2025, 1, 1, 8, 0))
        modern = notification_request("modern", at(2025, 1, 1, 7, 50))
        prefs = {"legacy": make_prefs("legacy"), "modern": make_prefs("modern")}

        assert next_skippable([legacy, modern], prefs, at(2025, 1, 6, 7, 40)) is modern

    def test_stops_at_first_skippable_occurrence(self, at, local_notification, make_prefs):
        first = local_notification("first", at(2025, 1, 1, 7, 45))
        second = local_notification("second", at(2025, 1, 1, 7, 50))
        lookup = MagicMock(side_effect=lambda alarm_id: make_prefs(alarm_id))

        assert next_skippable([second, first], lookup, at(2025, 1, 6, 7, 40)) is first
        lookup.assert_called_once_with("first")

    def test_accepts_store_style_callable(self, at, local_notification, make_prefs):
        alarm = local_notification("wake-up", at(2025, 1, 1, 7, 45))
        prefs = make_prefs()

        assert next_skippable([alarm], lambda alarm_id: prefs if alarm_id == "wake-up" else None,
                              at(2025, 1, 6, 7, 40)) is alarm


class TestSortByNextFire:

    def test_orders_by_next_occurrence_not_anchor(self, at, local_notification):
        # Anchored earlier in the day but already fired today, so it comes last
        morning = local_notification("morning", at(2025, 1, 1, 6, 0))
        noon = local_notification("noon", at(2025, 1, 1, 12, 0))

        ordered = sort_by_next_fire([morning, noon], at(2025, 1, 6, 7, 0))

        assert [occurrence.alarm_id for _, occurrence in ordered] == ["noon", "morning"]
        assert ordered[1][0] == at(2025, 1, 7, 6, 0)

    def test_ties_keep_input_order(self, at, local_notification):
        one = local_notification("one", at(2025, 1, 1, 8, 0))
        two = local_notification("two", at(2025, 1, 1, 8, 0))

        ordered = sort_by_next_fire([two, one], at(2025, 1, 6, 7, 0))

        assert [occurrence for _, occurrence in ordered] == [two, one]
