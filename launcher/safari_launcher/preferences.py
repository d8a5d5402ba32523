"""Accessor for a single per-application boolean preference."""

from __future__ import annotations

import logging
import subprocess

from .errors import PreferenceError

LOGGER = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes"}


class PreferenceFlag:
    """Read and write one boolean key through the ``defaults`` tool.

    Values are never cached; each call reflects the live preference store.
    """

    def __init__(
        self,
        domain: str,
        key: str,
        *,
        defaults_path: str = "defaults",
        timeout: float = 10.0,
    ) -> None:
        self.domain = domain
        self.key = key
        self._defaults_path = defaults_path
        self._timeout = timeout

    def read_flag(self) -> bool:
        result = self._run("read", self.domain, self.key)
        if result.returncode != 0:
            # ``defaults read`` exits non-zero when the key has never been set.
            if "does not exist" in result.stderr:
                return False
            raise PreferenceError(
                f"Failed to read {self.domain} {self.key}: {result.stderr.strip() or result.returncode}"
            )
        return result.stdout.strip().lower() in _TRUE_VALUES

    def write_flag(self, value: bool) -> None:
        result = self._run("write", self.domain, self.key, "-bool", "true" if value else "false")
        if result.returncode != 0:
            raise PreferenceError(
                f"Failed to write {self.domain} {self.key}: {result.stderr.strip() or result.returncode}"
            )
        LOGGER.info("Set %s %s to %s", self.domain, self.key, value)

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                [self._defaults_path, *args],
                check=False,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise PreferenceError(f"Unable to run {self._defaults_path} {args[0]}: {exc}") from exc


__all__ = ["PreferenceFlag"]
