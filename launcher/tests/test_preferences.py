from __future__ import annotations

import subprocess

import pytest

from safari_launcher import preferences
from safari_launcher.errors import PreferenceError
from safari_launcher.preferences import PreferenceFlag


class _FakeRun:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.calls: list[list[str]] = []
        self._result = (returncode, stdout, stderr)

    def __call__(self, args: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        self.calls.append(args)
        returncode, stdout, stderr = self._result
        return subprocess.CompletedProcess(args, returncode, stdout, stderr)


@pytest.mark.parametrize(("stdout", "expected"), [("1\n", True), ("0\n", False), ("true", True)])
def test_read_flag_parses_defaults_output(
    monkeypatch: pytest.MonkeyPatch, stdout: str, expected: bool
) -> None:
    fake = _FakeRun(stdout=stdout)
    monkeypatch.setattr(preferences.subprocess, "run", fake)

    flag = PreferenceFlag("com.apple.Safari", "IncludeDevelopMenu")

    assert flag.read_flag() is expected
    assert fake.calls == [["defaults", "read", "com.apple.Safari", "IncludeDevelopMenu"]]


def test_read_flag_treats_missing_key_as_false(monkeypatch: pytest.MonkeyPatch) -> None:
    stderr = "The domain/default pair of (com.apple.Safari, IncludeDevelopMenu) does not exist\n"
    monkeypatch.setattr(preferences.subprocess, "run", _FakeRun(returncode=1, stderr=stderr))

    assert PreferenceFlag("com.apple.Safari", "IncludeDevelopMenu").read_flag() is False


def test_read_flag_raises_on_other_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(preferences.subprocess, "run", _FakeRun(returncode=1, stderr="boom"))

    with pytest.raises(PreferenceError):
        PreferenceFlag("com.apple.Safari", "IncludeDevelopMenu").read_flag()


@pytest.mark.parametrize(("value", "literal"), [(True, "true"), (False, "false")])
def test_write_flag_uses_bool_type(monkeypatch: pytest.MonkeyPatch, value: bool, literal: str) -> None:
    fake = _FakeRun()
    monkeypatch.setattr(preferences.subprocess, "run", fake)

    PreferenceFlag("com.apple.Safari", "IncludeDevelopMenu", defaults_path="/usr/bin/defaults").write_flag(value)

    assert fake.calls == [
        ["/usr/bin/defaults", "write", "com.apple.Safari", "IncludeDevelopMenu", "-bool", literal]
    ]


def test_missing_defaults_binary_is_a_preference_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def raise_missing(*args: object, **kwargs: object) -> None:
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(preferences.subprocess, "run", raise_missing)

    with pytest.raises(PreferenceError):
        PreferenceFlag("com.apple.Safari", "IncludeDevelopMenu").write_flag(True)
