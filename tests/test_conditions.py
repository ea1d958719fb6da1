import os
from pathlib import Path

import pytest

from macleftovers.python.discovery import (
    AppDescriptor,
    Classification,
    ConditionEngine,
    ConditionTable,
    ConditionsError,
    build_identifiers,
    load_conditions,
    parse_conditions,
)


def _engine(table, bundle_id: str) -> ConditionEngine:
    app = AppDescriptor(bundle_id=bundle_id, app_name="Example", path=Path("/Applications/Example.app"))
    return ConditionEngine(table, build_identifiers(app))


TABLE = {
    "conditions": [
        {
            "bundle_id": "com.vendor.suite",
            "include": ["suite"],
            "exclude": ["suitehelper"],
            "include_force": ["/Library/Vendor/Suite"],
            "exclude_force": ["/Library/Vendor/Shared"],
        },
        {
            "bundle_id": "vendor",
            "include": ["vendordata"],
            "include_force": ["/Library/Vendor/Suite", "/Library/Vendor/Data"],
        },
        {"bundle_id": "other", "include": ["anything"]},
    ],
    "skip_conditions": [
        {"skip_prefix": ["com.apple"], "allow_prefixes": ["com.apple.dt"]},
    ],
}


def test_parse_normalizes_keys_and_tokens() -> None:
    conditions = parse_conditions(TABLE)
    first = conditions.conditions[0]
    assert first.bundle_id == "comvendorsuite"
    assert first.include == ("suite",)
    assert first.exclude == ("suitehelper",)
    assert first.include_force == ("/Library/Vendor/Suite",)
    assert conditions.conditions[2].include_force is None
    assert conditions.skip_conditions[0].skip_prefix == ("comapple",)


def test_applicable_uses_bundle_id_substring() -> None:
    engine = _engine(parse_conditions(TABLE), "com.vendor.suite")
    assert [c.bundle_id for c in engine.applicable()] == ["comvendorsuite", "vendor"]


def test_classify_exclude_wins_over_include() -> None:
    engine = _engine(parse_conditions(TABLE), "com.vendor.suite")
    assert engine.classify("suitehelper") is Classification.EXCLUDE
    assert engine.classify("suite") is Classification.INCLUDE
    assert engine.classify("vendordata") is Classification.INCLUDE
    assert engine.classify("unrelated") is Classification.NONE


def test_classify_ignores_conditions_for_unrelated_apps() -> None:
    engine = _engine(parse_conditions(TABLE), "com.example.notes")
    assert engine.applicable() == ()
    assert engine.classify("suite") is Classification.NONE


def test_classify_skipped_for_invalid_bundle_id() -> None:
    table = parse_conditions({"conditions": [{"bundle_id": "abc", "include": ["abc"]}]})
    engine = _engine(table, "abc")
    assert len(engine.applicable()) == 1
    assert engine.classify("abc") is Classification.NONE


def test_forced_paths_union_without_duplicates() -> None:
    engine = _engine(parse_conditions(TABLE), "com.vendor.suite")
    assert engine.forced_include_paths() == ["/Library/Vendor/Suite", "/Library/Vendor/Data"]
    assert engine.forced_exclude_paths() == ["/Library/Vendor/Shared"]


def test_force_paths_expand_home() -> None:
    conditions = parse_conditions({
        "conditions": [{"bundle_id": "comx", "include_force": ["~/Library/X"]}]
    })
    assert conditions.conditions[0].include_force == (
        os.path.join(os.path.expanduser("~"), "Library", "X"),
    )


@pytest.mark.parametrize("entry", [
    {"include": ["x"]},
    {"bundle_id": "comx", "include": "not-a-list"},
    {"bundle_id": "comx", "include_force": ["relative/path"]},
    {"bundle_id": "comx", "exclude_force": ["/Library/../etc"]},
])
def test_parse_rejects_malformed_entries(entry) -> None:
    with pytest.raises(ConditionsError):
        parse_conditions({"conditions": [entry]})


def test_skip_condition_allow_prefix() -> None:
    skip = parse_conditions(TABLE).skip_conditions[0]
    assert skip.skips("comapplesafari")
    assert not skip.skips("comappledtxcode")
    assert not skip.skips("comexamplenotes")


def test_load_conditions_from_yaml(tmp_path) -> None:
    path = tmp_path / "conditions.yaml"
    path.write_text(
        "conditions:\n"
        "  - bundle_id: com.vendor.app\n"
        "    include: [vendor]\n"
    )
    conditions = load_conditions(path)
    assert conditions.conditions[0].bundle_id == "comvendorapp"
    assert conditions.skip_conditions == ()


def test_load_conditions_empty_file(tmp_path) -> None:
    path = tmp_path / "conditions.yaml"
    path.write_text("")
    assert load_conditions(path).conditions == ()


def test_default_table_loads() -> None:
    table = ConditionTable()
    conditions = table.conditions
    assert conditions.conditions
    assert conditions.skip_conditions
    assert table.conditions is conditions
    table.reload()
    assert table.conditions is not conditions
