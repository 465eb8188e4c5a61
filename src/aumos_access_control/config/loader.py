"""Grants file loader with Pydantic v2 validation.

A grants file is a YAML (or JSON) document::

    version: "1"
    lock: true
    grants:
      user:
        video:
          "create:own": ["*"]
          "read:any": ["*", "!id"]
      admin:
        $extend: [user]
        video:
          "delete:any": ["*"]

``grants`` may also be the flat list form::

    grants:
      - {role: user, resource: video, action: "read:any", attributes: ["*", "!id"]}

Example
-------
::

    loader = GrantsLoader()
    ac = loader.load("/path/to/grants.yaml")
    ac.can("user").read_any("video").granted
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from aumos_access_control.access_control import AccessControl
from aumos_access_control.errors import AccessControlError, ErrorKind

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


def _config_error(message: str, config_path: str | None) -> AccessControlError:
    prefix = f"[{config_path}] " if config_path else ""
    return AccessControlError(f"{prefix}{message}", ErrorKind.INVALID_CONFIG)


class GrantsConfig(BaseModel):
    """Top-level grants file schema."""

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    lock: bool = Field(default=False)
    grants: Union[dict[str, Any], list[dict[str, Any]]] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, value: object) -> str:
        version = str(value)
        if version not in _SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported config version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}."
            )
        return version


class GrantsLoader:
    """Loads AccessControl instances from grants files or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are treated as an error.
        Default ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "lock", "grants", "metadata", "description"]
    )

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def load(self, config_path: str | Path) -> AccessControl:
        """Load an AccessControl from a YAML or JSON file on disk.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        AccessControlError
            If the file cannot be parsed or the grants are invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Grants file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise _config_error(f"Failed to parse YAML: {exc}", str(config_path)) from exc

        return self._build(raw, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> AccessControl:
        """Load an AccessControl from an already-parsed config dictionary."""
        return self._build(config, config_path=config_path)

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> AccessControl:
        """Load an AccessControl from YAML (or JSON) text."""
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise _config_error(f"Failed to parse YAML string: {exc}", config_path) from exc
        return self._build(raw, config_path=config_path)

    def parse(self, raw: object, config_path: str | None = None) -> GrantsConfig:
        """Validate the top-level structure and return the typed config."""
        if not isinstance(raw, dict):
            raise _config_error("Grants config must be a YAML mapping (dict).", config_path)

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise _config_error(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )

        try:
            return GrantsConfig.model_validate(raw)
        except ValidationError as exc:
            raise _config_error(f"Invalid grants config: {exc}", config_path) from exc

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build(self, raw: object, config_path: str | None = None) -> AccessControl:
        config = self.parse(raw, config_path)
        try:
            ac = AccessControl(config.grants)
            if config.lock:
                ac.lock()
        except AccessControlError as exc:
            prefix = f"[{config_path}] " if config_path else ""
            raise AccessControlError(f"{prefix}{exc.message}", exc.kind) from exc

        logger.info(
            "Loaded grants for %d roles from %s (lock=%s)",
            len(ac.get_roles()),
            config_path or "<dict>",
            config.lock,
        )
        return ac
