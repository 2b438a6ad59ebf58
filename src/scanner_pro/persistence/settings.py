"""User settings persisted alongside scan history."""

import logging
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

# Persisted key for each settings attribute
SETTINGS_KEYS = {
    "auto_open_urls": "autoOpenURLs",
    "vibrate_on_scan": "vibrateOnScan",
    "beep_on_scan": "beepOnScan",
    "save_history": "saveHistory",
}


@dataclass
class AppSettings:
    """Boolean preferences for scan handling."""
    auto_open_urls: bool = False      # Open URL payloads right after scanning
    vibrate_on_scan: bool = True      # Haptic feedback on a successful scan
    beep_on_scan: bool = False        # Sound feedback on a successful scan
    save_history: bool = True         # Persist scans to history

    def to_dict(self) -> dict:
        """Serialize using the persisted camelCase keys."""
        return {SETTINGS_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> 'AppSettings':
        """
        Build settings from persisted data, merged over the defaults.

        Unknown keys are ignored; missing or non-boolean values keep the
        default.
        """
        settings = cls()
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings of type {type(data).__name__}, using defaults")
            return settings

        for attr, key in SETTINGS_KEYS.items():
            if key not in data:
                continue
            value = data[key]
            if isinstance(value, bool):
                setattr(settings, attr, value)
            else:
                logger.warning(
                    f"Invalid value {value!r} for setting '{key}'. "
                    f"Using default: {getattr(settings, attr)}"
                )
        return settings

    def updated(self, key: str, value: bool) -> 'AppSettings':
        """
        Return a copy with one setting changed.

        Args:
            key: Attribute name (``save_history``) or persisted key (``saveHistory``)
            value: New value

        Raises:
            KeyError: If ``key`` is not a known setting
        """
        attr = key if key in SETTINGS_KEYS else _attr_for_key(key)
        data = self.to_dict()
        data[SETTINGS_KEYS[attr]] = value
        return AppSettings.from_dict(data)


def _attr_for_key(key: str) -> str:
    for attr, persisted in SETTINGS_KEYS.items():
        if persisted == key:
            return attr
    raise KeyError(f"Unknown setting '{key}'. Valid: {', '.join(SETTINGS_KEYS)}")
