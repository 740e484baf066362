"""
Lolytics Auto Accept - Busy Guard
Single-slot reservation used to stop a UI trigger from re-firing an
asynchronous action that is still in flight.
"""
import logging


class BusyGuard:
    """
    Acquire / fail-if-held / release.

    The guard only gates callers that check it. It does not queue, and it
    is not a lock: all access happens on the one event loop thread.
    """

    def __init__(self, name: str):
        self.name = name
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def try_acquire(self) -> bool:
        """
        Reserve the slot.
        Returns True if acquired, False if already taken.
        """
        if self._held:
            logging.debug(f"[{self.name}] busy, trigger ignored")
            return False
        self._held = True
        return True

    def release(self):
        """Release the slot. Releasing a free slot is a no-op."""
        self._held = False

    def __repr__(self) -> str:
        return f"BusyGuard({self.name!r}, held={self._held})"
