"""Settings domain service."""

from dataclasses import dataclass
from typing import Any, Optional

from kedai.database.base import SETTINGS, EntityStore
from kedai.domain.entities import Setting
from kedai.domain.errors import ValidationError

AUTO_BACKUP_ENABLED_KEY = "autoBackupEnabled"
AUTO_BACKUP_INTERVAL_KEY = "autoBackupIntervalMin"
DEFAULT_AUTO_BACKUP_INTERVAL = 60


@dataclass(frozen=True)
class AutoBackupConfig:
    """Auto-backup on/off switch and cadence."""

    enabled: bool = False
    interval_minutes: int = DEFAULT_AUTO_BACKUP_INTERVAL

    def __post_init__(self):
        interval = self.interval_minutes
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise ValidationError(
                f"Auto-backup interval must be a positive number of minutes, got {interval!r}"
            )


class SettingsService:
    """Service for key/value settings."""

    def __init__(self, store: EntityStore):
        """Initialize settings service.

        Args:
            store: Entity store instance
        """
        self.store = store

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value, or ``default`` if unset."""
        setting = self.store.get(SETTINGS, key)
        return default if setting is None else setting.value

    def set(self, key: str, value: Any) -> None:
        """Store a setting value."""
        self.store.put(SETTINGS, Setting(key=key, value=value))

    def all(self) -> dict[str, Any]:
        """Return every setting as a dict."""
        return {s.key: s.value for s in self.store.get_all(SETTINGS)}

    def get_auto_backup_config(self) -> AutoBackupConfig:
        """Read the persisted auto-backup configuration."""
        return AutoBackupConfig(
            enabled=bool(self.get(AUTO_BACKUP_ENABLED_KEY, False)),
            interval_minutes=self.get(AUTO_BACKUP_INTERVAL_KEY, DEFAULT_AUTO_BACKUP_INTERVAL),
        )

    def set_auto_backup_config(
        self, enabled: Optional[bool] = None, interval_minutes: Optional[int] = None
    ) -> AutoBackupConfig:
        """Update and persist the auto-backup configuration.

        Raises:
            ValidationError: If the interval is not a positive integer
        """
        current = self.get_auto_backup_config()
        config = AutoBackupConfig(
            enabled=current.enabled if enabled is None else enabled,
            interval_minutes=current.interval_minutes if interval_minutes is None else interval_minutes,
        )
        self.set(AUTO_BACKUP_ENABLED_KEY, config.enabled)
        self.set(AUTO_BACKUP_INTERVAL_KEY, config.interval_minutes)
        return config
