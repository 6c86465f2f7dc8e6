"""Tests for mapping raw upstream records onto LeaderboardEntry."""

import pytest

from mindshare.normalizer import (
    EntryNormalizer,
    FieldMapping,
    NormalizationStats,
    clean_username,
    parse_number,
)


@pytest.fixture
def normalizer() -> EntryNormalizer:
    return EntryNormalizer()


@pytest.fixture
def stats() -> NormalizationStats:
    return NormalizationStats()


@pytest.mark.parametrize("record", [None, "alice", 42, ["alice", 1], True])
def test_non_objects_are_rejected(normalizer, stats, record):
    assert normalizer.normalize(record, 1, 0, stats=stats) is None
    assert stats.skipped_non_objects == 1


def test_empty_object_still_yields_entry(normalizer):
    entry = normalizer.normalize({}, 1, 0)

    assert entry is not None
    assert entry.username is None
    assert entry.mindshare is None
    assert entry.rank == 1


def test_known_shape_maps_directly(normalizer, stats):
    record = {"rank": 1, "username": "alice", "mindshare": 90}
    entry = normalizer.normalize(record, 1, 0, stats=stats)

    assert entry.rank == 1
    assert entry.username == "alice"
    assert entry.mindshare == 90
    assert entry.raw == record
    assert stats.heuristic_total == 0


@pytest.mark.parametrize(
    "page_index, index_in_page, page_size_hint, expected",
    [(1, 0, 100, 1), (1, 99, 100, 100), (2, 0, 100, 101), (3, 4, 50, 105)],
)
def test_synthetic_rank_from_position(normalizer, stats, page_index, index_in_page, page_size_hint, expected):
    record = {"username": "bob", "mindshare": 5}
    entry = normalizer.normalize(record, page_index, index_in_page, page_size_hint, stats=stats)

    assert entry.rank == expected
    assert stats.synthetic_ranks == 1


def test_rank_read_from_position_string(normalizer):
    entry = normalizer.normalize({"handle": "gina", "position": " 7 "}, 4, 9)
    assert entry.rank == 7
    assert isinstance(entry.rank, int)


def test_integral_float_rank_becomes_int(normalizer):
    entry = normalizer.normalize({"username": "hal", "rank": 3.0}, 1, 0)
    assert entry.rank == 3
    assert isinstance(entry.rank, int)


def test_boolean_is_not_a_rank(normalizer):
    entry = normalizer.normalize({"username": "ivy", "rank": True}, 2, 1)
    assert entry.rank == 102


@pytest.mark.parametrize("raw, expected", [
    ("  @alice  ", "alice"),
    ("@@alice", "@alice"),
    ("alice", "alice"),
    ("   ", None),
    ("@", None),
    (12345, "12345"),
    (None, None),
])
def test_clean_username(raw, expected):
    assert clean_username(raw) == expected


def test_username_cleaning_is_idempotent():
    for name in ["alice", "Bob_99", "zama.fan"]:
        assert clean_username(clean_username(name)) == name


def test_username_trimmed_and_single_at_stripped(normalizer):
    entry = normalizer.normalize({"username": "  @Alice "}, 1, 0)
    assert entry.username == "Alice"


def test_mapped_key_beats_earlier_heuristic_key(normalizer):
    record = {"displayName": "Bob Smith", "username": "bob"}
    assert normalizer.normalize(record, 1, 0).username == "bob"


def test_heuristic_username_is_first_hinted_key(normalizer, stats):
    record = {"rank": 2, "displayName": "Bob", "creatorId": "x1"}
    entry = normalizer.normalize(record, 1, 0, stats=stats)

    assert entry.username == "Bob"
    assert stats.heuristic_hits["username"] == 1


def test_username_falls_back_to_at_prefixed_value(normalizer):
    entry = normalizer.normalize({"id": 7, "account": "@carol", "pts": 3}, 1, 0)
    assert entry.username == "carol"


def test_unusable_hinted_username_blocks_value_fallback(normalizer):
    entry = normalizer.normalize({"username": None, "note": "@dave"}, 1, 0)
    assert entry.username is None


def test_mindshare_heuristic_substring_match(normalizer, stats):
    entry = normalizer.normalize({"user": "dan", "totalPoints": "12.5"}, 1, 0, stats=stats)

    assert entry.username == "dan"
    assert entry.mindshare == 12.5
    assert stats.heuristic_hits["mindshare"] == 1


def test_mindshare_skips_non_numeric_candidates(normalizer):
    record = {"username": "eve", "score": "n/a", "mindshare_pct": "3.5"}
    assert normalizer.normalize(record, 1, 0).mindshare == 3.5


def test_ms_key_is_a_mindshare_hint(normalizer):
    assert normalizer.normalize({"username": "kim", "ms": "42"}, 1, 0).mindshare == 42


@pytest.mark.parametrize("value", ["Infinity", float("nan"), float("inf"), "", None, [], {}])
def test_non_finite_or_missing_mindshare_is_absent(normalizer, value):
    assert normalizer.normalize({"username": "fay", "mindshare": value}, 1, 0).mindshare is None


def test_negative_mindshare_passes_through(normalizer):
    assert normalizer.normalize({"username": "neg", "mindshare": -4}, 1, 0).mindshare == -4


@pytest.mark.parametrize("value, expected", [
    (5, 5.0), ("5", 5.0), (" 2.5 ", 2.5), ("1e3", 1000.0),
    (True, None), ("abc", None), (10**400, None), (None, None),
])
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_stats_accumulate_across_records(normalizer):
    walk = NormalizationStats()
    normalizer.normalize({"displayName": "a"}, 1, 0, stats=walk)
    normalizer.normalize("junk", 1, 1, stats=walk)

    assert walk.records == 1
    assert walk.skipped_non_objects == 1
    assert walk.heuristic_hits["username"] == 1
    assert walk.synthetic_ranks == 1


def test_stats_are_optional(normalizer):
    assert normalizer.normalize({"displayName": "a"}, 1, 0).username == "a"
    assert normalizer.normalize("junk", 1, 0) is None


def test_custom_mapping_table():
    normalizer = EntryNormalizer(
        mappings=(FieldMapping(version="test", username_keys=("who",), rank_keys=("place",)),)
    )
    entry = normalizer.normalize({"label": "ignored", "who": "zed", "place": 9}, 1, 0)

    assert entry.username == "zed"
    assert entry.rank == 9
