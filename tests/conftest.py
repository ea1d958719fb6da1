import plistlib
from pathlib import Path
from typing import Optional

import pytest

from macleftovers.python.discovery import ConditionSet
from macleftovers.python.utils.settings import FinderSettings


def make_bundle(
    parent: Path,
    name: str,
    bundle_id: Optional[str],
    executable: Optional[bytes] = None,
    icon: bool = False,
) -> Path:
    """Create a minimal .app bundle with an Info.plist."""
    bundle = parent / f"{name}.app"
    contents = bundle / "Contents"
    contents.mkdir(parents=True)
    info = {"CFBundleName": name, "CFBundleExecutable": name}
    if bundle_id is not None:
        info["CFBundleIdentifier"] = bundle_id
    if icon:
        info["CFBundleIconFile"] = "AppIcon"
        resources = contents / "Resources"
        resources.mkdir()
        (resources / "AppIcon.icns").write_bytes(b"icns")
    with open(contents / "Info.plist", "wb") as f:
        plistlib.dump(info, f)
    if executable is not None:
        macos = contents / "MacOS"
        macos.mkdir()
        (macos / name).write_bytes(executable)
    return bundle


@pytest.fixture
def home(tmp_path) -> Path:
    path = tmp_path / "home"
    (path / "Library" / "Containers").mkdir(parents=True)
    (path / "Library" / "Group Containers").mkdir(parents=True)
    return path


@pytest.fixture
def applications(tmp_path) -> Path:
    path = tmp_path / "Applications"
    path.mkdir()
    return path


@pytest.fixture
def no_conditions() -> ConditionSet:
    return ConditionSet()


def quiet_settings(*locations: Path, strict: bool = True) -> FinderSettings:
    """Settings scanning only ``locations`` with Spotlight disabled."""
    return FinderSettings(
        name_search_strict=strict,
        spotlight=False,
        locations=[str(loc) for loc in locations],
        size_chunk_size=2,
        size_max_workers=2,
    )
