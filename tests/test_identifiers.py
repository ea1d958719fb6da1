from pathlib import Path

from macleftovers.python.discovery import (
    AppDescriptor,
    build_identifiers,
    derive_suffix,
    is_valid_bundle_identifier,
    normalize,
)
from macleftovers.python.discovery.identifiers import item_token


def test_normalize_strips_separators_and_case() -> None:
    assert normalize("com.Example.My-App") == "comexamplemyapp"
    assert normalize("Visual Studio Code") == "visualstudiocode"
    assert normalize("under_score") == "underscore"
    assert normalize("") == ""


def test_item_token_removes_dots_and_spaces_only() -> None:
    assert item_token("com.example.MyApp.plist") == "comexamplemyappplist"
    assert item_token("MyApp Helper") == "myapphelper"
    assert item_token("my-app") == "my-app"


def test_derive_suffix() -> None:
    assert derive_suffix("com.example.notes") == "examplenotes"
    assert derive_suffix("com.Example.Notes") == "examplenotes"
    assert derive_suffix("notes") == "notes"
    assert derive_suffix("com.example.-") == "comexample"


def test_bundle_identifier_validity() -> None:
    assert is_valid_bundle_identifier("com.example.app")
    assert is_valid_bundle_identifier("a.b")
    assert is_valid_bundle_identifier("Notes")
    assert not is_valid_bundle_identifier("app")
    assert not is_valid_bundle_identifier("")


def test_build_identifiers() -> None:
    app = AppDescriptor(
        bundle_id="com.example.notes",
        app_name="Notes Helper 2",
        path=Path("/Applications/Notes-Helper.app"),
    )
    ids = build_identifiers(app)
    assert ids.bundle_id_normalized == "comexamplenotes"
    assert ids.bundle_suffix == "examplenotes"
    assert ids.name_normalized == "noteshelper2"
    assert ids.name_letters == "noteshelper"
    assert ids.name_path_stem == "noteshelper"
    assert ids.use_bundle_id is True


def test_build_identifiers_short_bundle_id_disables_bundle_matching() -> None:
    app = AppDescriptor(bundle_id="abc", app_name="Abc", path=Path("/Applications/Abc.app"))
    assert build_identifiers(app).use_bundle_id is False
