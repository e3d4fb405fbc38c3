import pytest

from snapshots.services.sanitizer import strip_relative_time


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Great project! 2h", "Great project!"),
        ("3 days ago this pumped", "this pumped"),
        ("just now", ""),
        ("", ""),
        ("Just now · GM frens", "GM frens"),
        ("$SOL looking strong | 45m", "$SOL looking strong"),
        ("[5 min ago] new listing", "new listing"),
    ],
)
def test_strips_tokens_at_edges(raw, expected):
    assert strip_relative_time(raw) == expected


def test_none_is_returned_unchanged():
    assert strip_relative_time(None) is None


def test_drops_lines_that_are_only_a_timestamp():
    text = "GM\n(2h)\nwagmi\n  1 hour ago  "
    assert strip_relative_time(text) == "GM\nwagmi"


def test_removes_tokens_between_separators():
    assert strip_relative_time("BTC breaking out · 5m · huge volume") == "BTC breaking out · huge volume"


def test_removes_multiple_interior_tokens():
    assert strip_relative_time("gm 2h wagmi 3d ngmi") == "gm wagmi ngmi"


@pytest.mark.parametrize(
    "text",
    [
        "Bought 5 more ETH today",
        "Solana is a monster",
        "Holding 100 BTC",
        "Mid-cap season",
    ],
)
def test_leaves_ordinary_text_alone(text):
    assert strip_relative_time(text) == text


def test_collapses_whitespace_and_trims():
    assert strip_relative_time("  moon   soon  ") == "moon soon"


def test_only_ascii_digits_form_a_time_token():
    # U+0663 ARABIC-INDIC DIGIT THREE
    assert strip_relative_time("gm ٣h") == "gm ٣h"
    assert strip_relative_time("gm 3h") == "gm"
