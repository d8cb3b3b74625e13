"""
Per-product mutual exclusion.

Stock movements on the same product must not interleave their
read-balance / append-entry / update-balance sequence, or two
concurrent sales could both pass the sufficiency check. Movements
on different products must not block each other.

ProductLocks hands out one lock per product id. The coordinator
holds it from the balance read until the commit returns. Row
locks (SELECT ... FOR UPDATE) give the same guarantee across
processes on databases that support them; SQLite ignores them, so
the in-process lock is what serializes writers there.
"""

import threading
from contextlib import contextmanager

from stock_ledger.exceptions import StorageError


class _Slot:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class ProductLocks:
    """
    Registry of one exclusive lock per product id.

    A product's entry lives only while some thread holds or waits
    on it, so the registry stays bounded by the number of movements
    in flight, not by the number of ids ever seen.
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._slots: dict[int, _Slot] = {}

    def in_use(self) -> int:
        """Number of products currently held or waited on."""
        with self._guard:
            return len(self._slots)

    def _checkout(self, product_id: int) -> _Slot:
        with self._guard:
            slot = self._slots.get(product_id)
            if slot is None:
                slot = self._slots[product_id] = _Slot()
            slot.users += 1
            return slot

    def _checkin(self, product_id: int, slot: _Slot) -> None:
        with self._guard:
            slot.users -= 1
            if slot.users == 0:
                del self._slots[product_id]

    @contextmanager
    def hold(self, product_id: int):
        """
        Hold the product's lock for the duration of the block.

        Raises StorageError if the lock is not acquired within the
        timeout; the caller has done nothing yet at that point.
        """
        slot = self._checkout(product_id)
        try:
            if not slot.lock.acquire(timeout=self.timeout):
                raise StorageError(
                    f"Timed out after {self.timeout}s waiting for "
                    f"product {product_id}"
                )
            try:
                yield
            finally:
                slot.lock.release()
        finally:
            self._checkin(product_id, slot)
