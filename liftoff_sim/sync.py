"""
Liftoff Flight Replay - Completion Gate

Single-use gate between the telemetry replay and the dynamics simulation:
the replay releases it exactly once after its final step, and the dynamics
run waits on it before reading the produced profile.
"""

import threading
from typing import Optional


class CompletionLatch:
    """
    Gate that is released once and awaited by consumers.

    A failed producer can release the latch with its exception so waiters do
    not block forever; check `error` after wait() returns.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._released = False
        self.error: Optional[BaseException] = None

    @property
    def released(self) -> bool:
        return self._event.is_set()

    def release(self, error: Optional[BaseException] = None) -> None:
        """
        Open the gate.

        Raises:
            RuntimeError: If the latch was already released
        """
        with self._lock:
            if self._released:
                raise RuntimeError("CompletionLatch can only be released once")
            self._released = True
            self.error = error
        self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until released; False if the timeout expired first."""
        return self._event.wait(timeout)
