"""Driver configuration.

Configuration can be built directly or loaded from the ``visa`` section of a
YAML file::

    visa:
      backend: "@py"
      timeout_ms: 5000
      close_on_clear_failure: true
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class VisaConfig:
    """Configuration for a :class:`hwtest_visa.driver.VisaDriver`.

    Attributes:
        backend: pyvisa backend specification (``""`` for the system VISA
            library, ``"@py"`` for pyvisa-py).
        timeout_ms: I/O timeout applied to every session right after it is
            opened. ``None`` keeps the transport default.
        close_on_clear_failure: Close a freshly opened session when the
            post-open buffer clear fails. When False the session is left open,
            which leaks the handle.
    """

    backend: str = ""
    timeout_ms: int | None = None
    close_on_clear_failure: bool = True

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.timeout_ms is not None and self.timeout_ms < 0:
            raise ValueError("timeout_ms must be non-negative")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VisaConfig:
        """Create config from a mapping.

        Unknown keys are rejected so that typos do not go unnoticed.

        Args:
            data: Mapping with any of the dataclass field names.

        Returns:
            VisaConfig instance.

        Raises:
            ValueError: If *data* contains unknown keys or invalid values.
        """
        known = {"backend", "timeout_ms", "close_on_clear_failure"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown VISA config keys: {', '.join(sorted(unknown))}")
        timeout = data.get("timeout_ms")
        return cls(
            backend=str(data.get("backend", "")),
            timeout_ms=int(timeout) if timeout is not None else None,
            close_on_clear_failure=bool(data.get("close_on_clear_failure", True)),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> VisaConfig:
        """Load config from the ``visa`` section of a YAML file.

        A file without a ``visa`` section yields the defaults.

        Args:
            path: Path to the YAML file.

        Returns:
            VisaConfig instance.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the section is not a mapping or has invalid values.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        section = data.get("visa") or {}
        if not isinstance(section, dict):
            raise ValueError(f"'visa' section in {path} must be a mapping")
        return cls.from_dict(section)
