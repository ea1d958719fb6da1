import subprocess

import pytest

from macleftovers.python.discovery import spotlight


class FakeRun:
    """Stands in for subprocess.run and records the command."""

    def __init__(self, stdout=b"", returncode=0, raises=None):
        self.stdout = stdout
        self.returncode = returncode
        self.raises = raises
        self.calls = []

    def __call__(self, cmd, **kwargs):
        assert cmd[0] == spotlight.MDFIND
        self.calls.append((cmd, kwargs))
        if self.raises is not None:
            raise self.raises
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, b"")


@pytest.fixture
def fake_run(monkeypatch):
    def install(**kwargs):
        fake = FakeRun(**kwargs)
        monkeypatch.setattr(spotlight.subprocess, "run", fake)
        return fake
    return install


def test_build_query_escapes_and_dedupes() -> None:
    query = spotlight.build_query('My "App"*', 'My "App"*')
    assert query == (
        'kMDItemDisplayName == "*My \\"App\\"\\**"cd || '
        'kMDItemPath == "*My \\"App\\"\\**"cd'
    )
    assert spotlight.build_query("", "") is None


def test_disabled_query_never_runs(fake_run, tmp_path) -> None:
    fake = fake_run(stdout=b"/x\n")
    assert spotlight.query("Notes", "com.example.notes", enabled=False, home=tmp_path) == []
    assert fake.calls == []


def test_query_scopes_to_home_and_bounds_time(fake_run, tmp_path) -> None:
    fake = fake_run(stdout=b"")
    spotlight.query("Notes", "com.example.notes", timeout=2.5, home=tmp_path)
    cmd, kwargs = fake.calls[0]
    assert cmd[1:3] == ["-onlyin", str(tmp_path)]
    assert kwargs["timeout"] == 2.5


def test_loose_query_keeps_every_result(fake_run, tmp_path) -> None:
    fake_run(stdout=b"/h/Notes Backup\n/h/Docs/com.example.notes\n\n/h/Notes Backup\n")
    found = spotlight.query("Notes", "com.example.notes", strict=False, home=tmp_path)
    assert found == ["/h/Notes Backup", "/h/Docs/com.example.notes"]


def test_strict_query_requires_exact_file_name(fake_run, tmp_path) -> None:
    fake_run(stdout=b"/h/Notes Backup\n/h/Docs/com.example.notes\n/h/Old/notes\n")
    found = spotlight.query("Notes", "com.example.notes", strict=True, home=tmp_path)
    assert found == ["/h/Docs/com.example.notes", "/h/Old/notes"]


def test_timeout_uses_partial_output(fake_run, tmp_path) -> None:
    error = subprocess.TimeoutExpired(["mdfind"], 5.0, output=b"/a/one\n/a/tw")
    fake_run(raises=error)
    assert spotlight.query("one", "", strict=False, home=tmp_path) == ["/a/one"]


def test_timeout_without_output(fake_run, tmp_path) -> None:
    fake_run(raises=subprocess.TimeoutExpired(["mdfind"], 5.0))
    assert spotlight.query("Notes", "", home=tmp_path) == []


def test_missing_mdfind(fake_run, tmp_path) -> None:
    fake_run(raises=FileNotFoundError("mdfind"))
    assert spotlight.query("Notes", "com.example.notes", home=tmp_path) == []


def test_nonzero_exit_still_parses_output(fake_run, tmp_path) -> None:
    fake_run(stdout=b"/h/notes\n", returncode=1)
    assert spotlight.query("Notes", "", home=tmp_path) == ["/h/notes"]
