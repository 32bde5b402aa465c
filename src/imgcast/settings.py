"""Persisted user settings.

:class:`SettingsStore` keeps the two user-editable values (webhook URL
and display name) in a small JSON file using the keys ``webhookUrl`` and
``username``.  Loading applies defaults first and then whatever is
persisted, ignoring unknown keys; saving writes the live values back.

The store never owns the configuration: it reads from and writes to the
:class:`ImgcastConfig` the upload services already hold by reference, so
an edit is visible to the next upload without a restart.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from imgcast.config import DEFAULT_USERNAME, ImgcastConfig, validate_webhook_url
from imgcast.observability import get_logger
from imgcast.utils.redact import redact_url

log = get_logger("imgcast.settings")

# Persisted key -> config attribute.
_FIELDS: dict[str, str] = {
    "webhookUrl": "webhook_url",
    "username": "username",
}

DEFAULT_SETTINGS: dict[str, str] = {
    "webhookUrl": "",
    "username": DEFAULT_USERNAME,
}


def _check(attr: str, value: str) -> None:
    """Raise ``ValueError`` if *value* is not acceptable for config field *attr*."""
    if attr == "webhook_url":
        validate_webhook_url(value)


class SettingsStore:
    """JSON-file settings persistence.

    Parameters
    ----------
    path:
        Location of the settings file.  Parent directories are created on
        first save.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> dict[str, Any]:
        """Return defaults merged with the persisted values."""
        merged: dict[str, Any] = dict(DEFAULT_SETTINGS)
        if not self._path.exists():
            return merged
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning(
                "Unreadable settings file, using defaults",
                extra={"extra_fields": {"path": str(self._path), "error": str(exc)}},
            )
            return merged
        if isinstance(raw, dict):
            merged.update({k: v for k, v in raw.items() if k in _FIELDS and isinstance(v, str)})
        return merged

    def load(self, config: ImgcastConfig | None = None) -> ImgcastConfig:
        """Apply persisted settings onto *config* (or a new one) and return it."""
        values = self.read()
        for key, attr in _FIELDS.items():
            try:
                _check(attr, values[key])
            except ValueError as exc:
                log.warning(
                    "Invalid persisted setting, using default",
                    extra={
                        "extra_fields": {
                            "path": str(self._path),
                            "key": key,
                            "error": str(exc),
                        }
                    },
                )
                values[key] = DEFAULT_SETTINGS[key]
        if config is None:
            return ImgcastConfig(**{attr: values[key] for key, attr in _FIELDS.items()})
        for key, attr in _FIELDS.items():
            setattr(config, attr, values[key])
        return config

    def save(self, config: ImgcastConfig) -> None:
        payload = {key: getattr(config, attr) for key, attr in _FIELDS.items()}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        log.debug(
            "Settings saved",
            extra={
                "extra_fields": {
                    "path": str(self._path),
                    "webhook_url": redact_url(config.webhook_url),
                    "username": config.username,
                }
            },
        )

    def update(self, config: ImgcastConfig, **changes: str) -> ImgcastConfig:
        """Mutate the live *config* and persist it.

        Accepts ``webhook_url`` and ``username`` keyword arguments.
        """
        unknown = set(changes) - set(_FIELDS.values())
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        for attr, value in changes.items():
            _check(attr, value)
        for attr, value in changes.items():
            setattr(config, attr, value)
        self.save(config)
        return config
