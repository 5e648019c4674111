"""Tests for config snapshots."""

import json
from datetime import datetime

import pytest

from dotfiles.errors import SnapshotError
from dotfiles.models import DotfilesConfig
from dotfiles.snapshots import (
    clean_snapshots,
    create_snapshot,
    delete_snapshot,
    list_snapshots,
    load_snapshot,
)

NOW = datetime(2026, 3, 14, 9, 26, 53)


class TestSnapshots:
    def test_create_and_load(self, config):
        dotfiles_config = DotfilesConfig(brews=["git"], stow=["zsh"])

        snapshot = create_snapshot(config, dotfiles_config, "Before cleanup", now=NOW)

        assert snapshot.id == "20260314-092653"
        assert snapshot.timestamp == "2026-03-14T09:26:53"
        assert snapshot.metadata["total_packages"] == "2"
        data = json.loads((config.snapshots_dir / "20260314-092653.json").read_text())
        assert data["description"] == "Before cleanup"
        assert data["config"]["brews"] == ["git"]

        loaded = load_snapshot(config, "20260314-092653.json")
        assert loaded.config == dotfiles_config

    def test_snapshot_is_a_copy(self, config):
        dotfiles_config = DotfilesConfig(brews=["git"])
        snapshot = create_snapshot(config, dotfiles_config, now=NOW)
        dotfiles_config.brews.append("jq")

        assert snapshot.config.brews == ["git"]
        assert snapshot.description == "Manual snapshot"

    def test_same_second_ids_are_unique(self, config):
        first = create_snapshot(config, DotfilesConfig(), now=NOW)
        second = create_snapshot(config, DotfilesConfig(), now=NOW)

        assert first.id == "20260314-092653"
        assert second.id == "20260314-092653-1"

    def test_list_newest_first(self, config):
        create_snapshot(config, DotfilesConfig(), now=datetime(2026, 1, 1))
        create_snapshot(config, DotfilesConfig(), now=datetime(2026, 2, 1))
        (config.snapshots_dir / "garbage.json").write_text("{")

        assert [snapshot.id for snapshot in list_snapshots(config)] == ["20260201-000000", "20260101-000000"]

    def test_list_without_directory(self, config):
        assert list_snapshots(config) == []

    def test_missing_snapshot(self, config):
        with pytest.raises(SnapshotError, match="Snapshot not found"):
            load_snapshot(config, "20200101-000000")
        with pytest.raises(SnapshotError, match="Snapshot not found"):
            delete_snapshot(config, "20200101-000000")

    def test_clean_removes_old_snapshots(self, config):
        create_snapshot(config, DotfilesConfig(), now=datetime(2026, 1, 1))
        create_snapshot(config, DotfilesConfig(), now=datetime(2026, 3, 10))

        removed = clean_snapshots(config, days=30, now=NOW)

        assert [snapshot.id for snapshot in removed] == ["20260101-000000"]
        assert [snapshot.id for snapshot in list_snapshots(config)] == ["20260310-000000"]

    def test_dry_run_writes_and_deletes_nothing(self, config):
        create_snapshot(config, DotfilesConfig(), now=datetime(2026, 1, 1))
        config.dryrun = True

        create_snapshot(config, DotfilesConfig(), now=NOW)
        removed = clean_snapshots(config, days=30, now=NOW)

        assert len(removed) == 1
        assert [snapshot.id for snapshot in list_snapshots(config)] == ["20260101-000000"]

    def test_collision_counter_sorts_numerically(self, config):
        ids = [create_snapshot(config, DotfilesConfig(), now=NOW).id for _ in range(12)]

        listed = [snapshot.id for snapshot in list_snapshots(config)]

        assert ids[-1] == "20260314-092653-11"
        assert listed == list(reversed(ids))

    @pytest.mark.parametrize("snapshot_id", ["../config", "..", "20260314-092653/../../config", "latest"])
    def test_rejects_ids_outside_snapshot_directory(self, env, config, snapshot_id):
        env.write_config({"brews": ["git"]})
        config.snapshots_dir.mkdir(parents=True)

        with pytest.raises(SnapshotError, match="Invalid snapshot id"):
            delete_snapshot(config, snapshot_id)
        with pytest.raises(SnapshotError, match="Invalid snapshot id"):
            load_snapshot(config, snapshot_id)
        assert config.config_path.exists()
