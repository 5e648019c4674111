"""Config snapshot storage."""

# ============================================================
# Imports
# ============================================================

import json
import platform
import re
import socket
from datetime import datetime, timedelta
from pathlib import Path

from .config import Config, load_json, write_json
from .errors import SnapshotError
from .models import DotfilesConfig, Snapshot


# ============================================================
# Storage
# ============================================================

ID_FORMAT = "%Y%m%d-%H%M%S"
# Creation time plus an optional collision counter
ID_PATTERN = re.compile(r"\d{8}-\d{6}(?:-(\d+))?")


def machine_metadata(dotfiles_config: DotfilesConfig) -> dict[str, str]:
    """Describe the current machine for snapshot and profile metadata."""
    return {
        "hostname": socket.gethostname(),
        "platform": f"{platform.system().lower()}/{platform.machine()}",
        "total_packages": str(dotfiles_config.total_packages()),
        "created_by": "dotfiles",
    }


def create_snapshot(
    config: Config,
    dotfiles_config: DotfilesConfig,
    description: str = "",
    now: datetime | None = None,
) -> Snapshot:
    """
    Write a snapshot of the config document.

    The id is the creation time; a numeric suffix keeps ids unique when
    several snapshots are taken within one second.
    """
    now = now or datetime.now()
    snapshot_id = now.strftime(ID_FORMAT)
    counter = 1
    while (config.snapshots_dir / f"{snapshot_id}.json").exists():
        snapshot_id = f"{now.strftime(ID_FORMAT)}-{counter}"
        counter += 1

    snapshot = Snapshot(
        id=snapshot_id,
        timestamp=now.isoformat(timespec='seconds'),
        description=description or "Manual snapshot",
        config=dotfiles_config.copy(),
        metadata=machine_metadata(dotfiles_config),
    )
    if not config.dryrun:
        write_json(config.snapshots_dir / f"{snapshot_id}.json", snapshot.to_dict())
    return snapshot


def snapshot_path(config: Config, snapshot_id: str) -> Path:
    """
    Return the file of a snapshot id, with or without a .json suffix.

    Raises:
        SnapshotError: If the id is not a snapshot id
    """
    snapshot_id = snapshot_id.removesuffix('.json')
    if not ID_PATTERN.fullmatch(snapshot_id):
        raise SnapshotError(f"Invalid snapshot id: {snapshot_id}")
    return config.snapshots_dir / f"{snapshot_id}.json"


def snapshot_sort_key(snapshot_id: str) -> tuple[str, int]:
    """Order ids by creation time, then numerically by collision counter."""
    match = ID_PATTERN.fullmatch(snapshot_id)
    counter = match.group(1) if match else None
    return snapshot_id[:15], int(counter or 0)


def load_snapshot(config: Config, snapshot_id: str) -> Snapshot:
    path = snapshot_path(config, snapshot_id)
    if not path.exists():
        raise SnapshotError(f"Snapshot not found: {snapshot_id}")
    try:
        return Snapshot.from_dict(path.stem, load_json(path))
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {snapshot_id} is corrupt: {e}") from e


def list_snapshots(config: Config) -> list[Snapshot]:
    """Return all readable snapshots, newest first."""
    if not config.snapshots_dir.is_dir():
        return []

    snapshots = []
    for path in config.snapshots_dir.glob("*.json"):
        if not ID_PATTERN.fullmatch(path.stem):
            continue
        try:
            snapshots.append(Snapshot.from_dict(path.stem, load_json(path)))
        except (json.JSONDecodeError, OSError):
            continue
    return sorted(snapshots, key=lambda snapshot: snapshot_sort_key(snapshot.id), reverse=True)


def delete_snapshot(config: Config, snapshot_id: str) -> None:
    path = snapshot_path(config, snapshot_id)
    if not path.exists():
        raise SnapshotError(f"Snapshot not found: {snapshot_id}")
    if not config.dryrun:
        path.unlink()


def snapshot_time(snapshot: Snapshot) -> datetime | None:
    """Parse the creation time from a snapshot id."""
    try:
        return datetime.strptime(snapshot.id[:15], ID_FORMAT)
    except ValueError:
        return None


def clean_snapshots(config: Config, days: int, now: datetime | None = None) -> list[Snapshot]:
    """
    Delete snapshots older than a number of days.

    Returns:
        The snapshots that were (or in dry-run mode would be) deleted
    """
    cutoff = (now or datetime.now()) - timedelta(days=days)
    removed = []
    for snapshot in list_snapshots(config):
        created = snapshot_time(snapshot)
        if created is not None and created < cutoff:
            delete_snapshot(config, snapshot.id)
            removed.append(snapshot)
    return removed
