"""Repeating background timer used for the session clock and frame sampling."""

from __future__ import annotations

import threading


class RepeatingTimer:
    """Calls *fn* every *interval* seconds on a daemon thread until stopped.

    Exceptions from *fn* are printed and the timer keeps running.
    """

    def __init__(self, interval: float, fn, name: str = "timer") -> None:
        self.interval = interval
        self._fn = fn
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout=self.interval + 1.0)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self._fn()
            except Exception as exc:
                print(f"[{self._thread.name}] Error: {exc}")
