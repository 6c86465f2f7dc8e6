"""In-process storage for Mindshare.

Snapshots live only in memory; nothing survives a restart.
"""

from .cache import DEFAULT_TTL_SECONDS, SnapshotCache, snapshot_key

__all__ = ["DEFAULT_TTL_SECONDS", "SnapshotCache", "snapshot_key"]
