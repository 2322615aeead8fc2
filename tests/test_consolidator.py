"""
tests/test_consolidator.py

Per-identifier folding of raw per-day gift-update rows.
"""

from __future__ import annotations

from batch_import.consolidator import VALID_DAY_MINUTES, consolidate_gift_updates, is_valid_day
from batch_import.types import ImportErrorKind, ParsedGiftUpdate


def _row(streamer_id: str, luck: int, exclusive: int, minutes: int, name: str = "Jub") -> ParsedGiftUpdate:
    return ParsedGiftUpdate(
        streamer_id=streamer_id,
        luck_gifts=luck,
        exclusive_gifts=exclusive,
        minutes=minutes,
        is_valid=True,
        streamer_name=name,
    )


class TestValidDay:
    def test_threshold_is_two_hours(self) -> None:
        assert VALID_DAY_MINUTES == 120
        assert is_valid_day(120)
        assert not is_valid_day(119)

    def test_threshold_is_configurable(self) -> None:
        assert is_valid_day(30, threshold=30)


class TestConsolidate:
    def test_three_days_of_one_streamer(self) -> None:
        [entry] = consolidate_gift_updates(
            [_row("10597690", 10, 1, 150), _row("10597690", 20, 2, 90), _row("10597690", 30, 3, 200)]
        )
        assert entry.minutes == 440
        assert entry.luck_gifts == 60
        assert entry.exclusive_gifts == 6
        assert entry.days_count == 3
        assert entry.valid_days_count == 2
        assert entry.streamer_name == "Jub"
        assert entry.is_valid

    def test_sums_do_not_depend_on_the_threshold(self) -> None:
        rows = [_row("10597690", 1, 1, 150), _row("10597690", 1, 1, 90)]
        strict = consolidate_gift_updates(rows, valid_day_minutes=1000)[0]
        lenient = consolidate_gift_updates(rows, valid_day_minutes=0)[0]
        assert strict.minutes == lenient.minutes == 240
        assert (strict.valid_days_count, lenient.valid_days_count) == (0, 2)

    def test_first_seen_order_then_invalid_entries(self) -> None:
        invalid = ParsedGiftUpdate(
            streamer_id="",
            luck_gifts=0,
            exclusive_gifts=0,
            minutes=0,
            is_valid=False,
            error="invalid format",
            error_kind=ImportErrorKind.FORMAT_ERROR,
        )
        result = consolidate_gift_updates(
            [
                _row("22222", 1, 0, 10, name="B"),
                invalid,
                _row("11111", 1, 0, 10, name="A"),
                _row("22222", 1, 0, 10, name="B"),
            ]
        )
        assert [entry.streamer_id for entry in result] == ["22222", "11111", ""]
        assert result[0].days_count == 2
        assert result[-1] is invalid

    def test_single_row_gets_a_day_count(self) -> None:
        [entry] = consolidate_gift_updates([_row("10597690", 5, 5, 60)])
        assert (entry.days_count, entry.valid_days_count) == (1, 0)

    def test_empty_input(self) -> None:
        assert consolidate_gift_updates([]) == []
