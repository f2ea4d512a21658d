from datetime import date, datetime, timedelta, timezone

import pytest

from query_service.templates import functions


@pytest.mark.parametrize("text,expected", [
    ("-24h", timedelta(hours=-24)),
    ("1h30m", timedelta(minutes=90)),
    ("1.5h", timedelta(minutes=90)),
    ("90s", timedelta(seconds=90)),
    ("500ms", timedelta(milliseconds=500)),
    ("+1m30s", timedelta(seconds=90)),
])
def test_parse_duration(text, expected):
    assert functions.parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "10d", "1h xx"])
def test_parse_duration_rejects_garbage(text):
    with pytest.raises(ValueError):
        functions.parse_duration(text)


def test_case_conversions():
    assert functions.snakecase("HelloWorld") == "hello_world"
    assert functions.snakecase("start date") == "start_date"
    assert functions.kebabcase("hello world_foo") == "hello-world-foo"
    assert functions.camelcase("hello_world") == "HelloWorld"
    assert functions.nospace(" a b\tc ") == "abc"


def test_string_helpers():
    assert functions.trim_prefix("acme-data", "acme-") == "data"
    assert functions.trim_suffix("events-*", "-*") == "events"
    assert functions.trim_prefix("data", "") == "data"
    assert functions.trunc("abcdef", 3) == "abc"
    assert functions.trunc("abcdef", -2) == "ef"
    assert functions.repeat("ab", 3) == "ababab"
    assert functions.split("a,b") == ["a", "b"]
    assert functions.split("") == []


def test_quote_escapes_for_json():
    assert functions.quote('say "hi"') == '"say \\"hi\\""'
    assert functions.quote(None) == '""'
    assert functions.squote("x") == "'x'"


def test_empty_and_coalesce():
    assert functions.empty("")
    assert functions.empty(None)
    assert functions.empty(0)
    assert functions.empty([])
    assert not functions.empty("0")
    assert not functions.empty(True)
    assert functions.coalesce("", None, "x", "y") == "x"
    assert functions.coalesce("", None) is None
    assert functions.ternary(True, "a", "b") == "a"


def test_to_date_inputs():
    assert functions.to_date("2020-03-15T10:30:00Z") == datetime(2020, 3, 15, 10, 30, tzinfo=timezone.utc)
    assert functions.to_date(date(2020, 3, 15)) == datetime(2020, 3, 15)
    assert functions.to_date(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_date_arithmetic():
    assert functions.date_add("2020-01-31", months=1) == datetime(2020, 2, 29)
    assert functions.date_modify("2020-03-15T00:00:00", "-24h") == datetime(2020, 3, 14)
    assert functions.format_date("2020-03-15T10:30:00", "%Y.%m") == "2020.03"
    assert functions.unix_epoch("2020-03-15T10:30:00Z") == 1584268200
    assert functions.iso8601(datetime(2020, 3, 15)) == "2020-03-15T00:00:00"


def test_list_and_map_helpers():
    assert functions.make_list(1, 2) == [1, 2]
    assert functions.append(None, 1) == [1]
    assert functions.first([]) is None
    assert functions.last([1, 2]) == 2
    assert functions.uniq([1, 2, 1]) == [1, 2]
    assert functions.compact(["a", "", None, 0]) == ["a"]
    assert functions.keys({"b": 1, "a": 2}) == ["a", "b"]
    assert functions.values({"b": 1, "a": 2}) == [2, 1]
    assert functions.has_key({"a": 1}, "a")
    assert functions.pluck("a", {"a": 1}, {"b": 2}, {"a": 3}) == [1, 3]
    assert functions.to_json({"b": [1], "a": "é"}) == '{"a": "é", "b": [1]}'


def test_globals_use_injected_clock():
    fixed = datetime(2021, 1, 1, tzinfo=timezone.utc)
    assert functions.build_globals(lambda: fixed)["now"]() == fixed


def test_repeat_is_bounded():
    assert functions.repeat("ab", 3) == "ababab"
    with pytest.raises(ValueError):
        functions.repeat("x", functions.MAX_REPEAT_LENGTH + 1)
