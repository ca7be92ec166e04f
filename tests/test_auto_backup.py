"""Tests for the auto-backup scheduler."""

import logging
import threading

import pytest

from kedai.domain.auto_backup import DEBOUNCE_SECONDS, AutoBackupScheduler
from kedai.domain.errors import StoreUnavailable, ValidationError
from kedai.domain.settings import AutoBackupConfig, SettingsService


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FailingSnapshots:
    def create_backup(self, name=None, prefix="backup"):
        raise StoreUnavailable("disk full")


@pytest.fixture
def clock():
    return FakeClock()


def test_triggers_within_debounce_window_collapse(snapshots, clock):
    scheduler = AutoBackupScheduler(snapshots, AutoBackupConfig(enabled=True), clock=clock)

    assert scheduler.trigger() is not None
    clock.advance(5)
    assert scheduler.trigger() is None

    assert len(snapshots.list_backups()) == 1


def test_trigger_after_debounce_window(snapshots, clock):
    scheduler = AutoBackupScheduler(snapshots, AutoBackupConfig(enabled=True), clock=clock)

    scheduler.trigger()
    clock.advance(DEBOUNCE_SECONDS + 10)
    backup = scheduler.trigger()

    assert backup is not None
    assert backup.name.startswith("autobackup-")
    assert len(snapshots.list_backups()) == 2


def test_failed_backup_is_logged_not_raised(clock, caplog):
    scheduler = AutoBackupScheduler(FailingSnapshots(), AutoBackupConfig(enabled=True), clock=clock)

    with caplog.at_level(logging.ERROR, logger="kedai.domain.auto_backup"):
        assert scheduler.trigger() is None

    assert "Auto-backup failed" in caplog.text
    assert scheduler.last_run == clock()


def test_trigger_while_running_is_skipped(snapshots, clock):
    started = threading.Event()
    release = threading.Event()

    class SlowSnapshots:
        def create_backup(self, name=None, prefix="backup"):
            started.set()
            release.wait(5)
            return snapshots.create_backup(prefix=prefix)

    scheduler = AutoBackupScheduler(SlowSnapshots(), AutoBackupConfig(enabled=True), clock=clock)
    worker = threading.Thread(target=scheduler.trigger)
    worker.start()
    assert started.wait(5)

    clock.advance(DEBOUNCE_SECONDS * 2)
    assert scheduler.trigger() is None

    release.set()
    worker.join(5)
    assert len(snapshots.list_backups()) == 1


def test_start_runs_immediately_and_stop_cancels(snapshots, clock):
    scheduler = AutoBackupScheduler(
        snapshots, AutoBackupConfig(enabled=True, interval_minutes=60), clock=clock
    )

    scheduler.start()
    try:
        assert scheduler.is_running
        assert len(snapshots.list_backups()) == 1
    finally:
        scheduler.stop()

    assert not scheduler.is_running
    scheduler.stop()


def test_restart_replaces_timer(snapshots, clock):
    scheduler = AutoBackupScheduler(snapshots, AutoBackupConfig(enabled=True), clock=clock)

    scheduler.start()
    scheduler.start()
    try:
        assert scheduler.is_running
        assert len(snapshots.list_backups()) == 1
    finally:
        scheduler.stop()


def test_apply_disabled_config_stops(snapshots, clock):
    scheduler = AutoBackupScheduler(snapshots, AutoBackupConfig(enabled=True), clock=clock)
    scheduler.start()

    scheduler.apply(AutoBackupConfig(enabled=False, interval_minutes=15))

    assert not scheduler.is_running
    assert scheduler.config.interval_minutes == 15


def test_from_settings(temp_store, snapshots):
    settings = SettingsService(temp_store)
    settings.set_auto_backup_config(enabled=True, interval_minutes=15)

    scheduler = AutoBackupScheduler.from_settings(snapshots, settings)

    assert scheduler.config == AutoBackupConfig(enabled=True, interval_minutes=15)


def test_settings_defaults(temp_store):
    config = SettingsService(temp_store).get_auto_backup_config()

    assert config == AutoBackupConfig(enabled=False, interval_minutes=60)


@pytest.mark.parametrize("interval", [0, -5, "60", 1.5])
def test_interval_must_be_positive_integer(temp_store, interval):
    with pytest.raises(ValidationError):
        SettingsService(temp_store).set_auto_backup_config(interval_minutes=interval)
