"""Filesystem free space probe.

Uses statvfs directly rather than parsing ``df`` output.
"""

from __future__ import annotations

import os
from typing import Dict, List

from .base import CollectorError
from ..data.models import FilesystemFree, FilesystemHealthStatus


def filesystem_free(path: str) -> int:
    """Get the free disk percentage of the filesystem backing a path.

    Args:
        path: Any path on the filesystem

    Returns:
        Percentage of blocks available to unprivileged users, floored.

    Raises:
        CollectorError: If the path cannot be stat'd or the filesystem
            reports zero total blocks.
    """
    try:
        stat = os.statvfs(path)
    except OSError as e:
        raise CollectorError("filesystem", f"Unable to stat {path}: {e}", e)

    if stat.f_blocks == 0:
        raise CollectorError(
            "filesystem",
            f"Filesystem at {path} reports zero total blocks",
            ZeroDivisionError("blocks_total is 0"),
        )
    return 100 * stat.f_bavail // stat.f_blocks


def filesystem_status(path: str) -> FilesystemFree:
    """Free space for a path as a report entry; errors are recorded, not raised."""
    try:
        return FilesystemFree(path=path, percent_free=filesystem_free(path))
    except CollectorError as e:
        return FilesystemFree(path=path, error=str(e))


def get_filesystem_warnings(filesystems: List[FilesystemFree]) -> List[Dict[str, object]]:
    """Generate warnings for filesystems that are running low.

    Returns:
        List of warning dictionaries, lowest free space first.
    """
    warnings = []
    for fs in filesystems:
        status = fs.status
        if status == FilesystemHealthStatus.CRITICAL:
            warnings.append({
                "path": fs.path,
                "message": f"Filesystem critically full ({fs.percent_free}% free). Clean up immediately.",
                "severity": status.value,
                "percent_free": fs.percent_free,
            })
        elif status == FilesystemHealthStatus.WARNING:
            warnings.append({
                "path": fs.path,
                "message": f"Filesystem running low ({fs.percent_free}% free). Consider cleanup.",
                "severity": status.value,
                "percent_free": fs.percent_free,
            })

    return sorted(warnings, key=lambda w: w["percent_free"])
