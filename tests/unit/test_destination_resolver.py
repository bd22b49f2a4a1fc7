"""Tests for destination to country code resolution."""

import pytest

from travel_info.resolver import (
    get_country_name_by_code,
    get_default_emergency_contacts,
    get_embassy_by_code,
    get_emergency_contacts_by_code,
    get_english_name_by_code,
    get_supported_destinations,
    resolve,
)
from travel_info.resolver.destination import (
    match_english_alias,
    match_exact,
    match_hint,
    match_partial,
    normalize_for_match,
)
from travel_info.resolver.tables import DESTINATION_TO_COUNTRY_CODE


@pytest.mark.parametrize(
    "destination, expected",
    [
        ("タイ", "0066"),
        ("バンコク", "0066"),
        ("パリ", "0033"),
        ("フランス", "0033"),
        ("ニューヨーク", "1000"),
        ("ハワイ", "1808"),
        ("韓国（ソウル）", "0082"),
    ],
)
def test_exact_match(destination, expected):
    assert resolve(destination) == expected


def test_every_supported_destination_resolves_to_its_code():
    for destination in get_supported_destinations():
        assert resolve(destination) == DESTINATION_TO_COUNTRY_CODE[destination]


def test_surrounding_whitespace_is_ignored():
    assert resolve("  バンコク ") == "0066"


def test_hint_used_when_destination_is_unknown():
    assert resolve("スプリングフィールド", "アメリカ") == "1000"


def test_exact_destination_beats_hint():
    assert resolve("パリ", "アメリカ") == "0033"


@pytest.mark.parametrize(
    "destination, expected",
    [
        ("Thailand", "0066"),
        ("United Kingdom", "0044"),
        ("UK", "0044"),
        ("South Korea", "0082"),
        ("United States", "1000"),
    ],
)
def test_english_alias(destination, expected):
    assert resolve(destination) == expected


def test_english_hint():
    assert resolve("Springfield", "United States") == "1000"


@pytest.mark.parametrize(
    "destination, expected",
    [
        ("タイ（バンコク）", "0066"),
        ("タイ (バンコク)", "0066"),
        ("バンコク市内", "0066"),
        ("ホーチ", "0084"),
        ("国ソウ", "0082"),
    ],
)
def test_partial_match(destination, expected):
    assert resolve(destination) == expected


@pytest.mark.parametrize("destination", ["未知の国", "", "   "])
def test_unknown_destination(destination):
    assert resolve(destination) is None


def test_stage_functions():
    assert match_exact("バンコク") == "0066"
    assert match_exact("Thailand") is None
    assert match_hint("不明", None) is None
    assert match_hint("不明", "タイ") == "0066"
    assert match_english_alias("不明", "Thailand") == "0066"
    assert match_partial("", None) is None


def test_custom_stage_chain():
    assert resolve("Thailand", stages=(match_exact,)) is None
    assert resolve("Thailand", stages=(match_exact, match_english_alias)) == "0066"


def test_normalize_for_match():
    assert normalize_for_match("タイ（バンコク）") == "タイバンコク"
    assert normalize_for_match("New York (NY)") == "NewYorkNY"


def test_code_lookups():
    assert get_country_name_by_code("0066") == "タイ"
    assert get_country_name_by_code("9999") is None
    assert get_english_name_by_code("0044") == "United Kingdom"
    assert get_english_name_by_code("0082") == "South Korea"


def test_emergency_contacts():
    contacts = get_emergency_contacts_by_code("0066")
    assert ("警察", "191") in [(c.name, c.number) for c in contacts]

    assert get_emergency_contacts_by_code("9999") == get_default_emergency_contacts()


def test_embassy_lookup():
    assert get_embassy_by_code("0066").name == "在タイ日本国大使館"
    assert get_embassy_by_code("9999") is None
