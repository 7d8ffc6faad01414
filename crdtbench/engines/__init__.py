"""Pure-Python CRDT engines bundled with crdtbench."""

from .shelf import ShelfAwareness, ShelfCRDT, ShelfMap, ShelfValue

__all__ = ["ShelfAwareness", "ShelfCRDT", "ShelfMap", "ShelfValue"]
