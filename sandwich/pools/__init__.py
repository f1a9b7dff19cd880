"""Pool snapshots."""

from sandwich.pools.snapshot import PoolSnapshot

__all__ = ["PoolSnapshot"]
