"""
Session controller – sampling loop, result application and auto-stop.

Lifecycle: not started -> active -> ended, and back to active only through
``start``, which builds a fresh ``Session``.  While active two timers run:
a one-second session clock and the frame sampler.  Each sampler tick
captures a frame and hands it to a worker thread for analysis; a tick that
finds a request still in flight, or no frame, is dropped.

Results are applied under a lock and only to the session that issued
them, so a response that lands after the session ended is discarded.
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace

import cv2

from analysis_client import AnalysisError
from config import TrackerConfig
from session_state import (
    SERVER_BUSY, STATUS_ACTIVE, STATUS_ENDED, AnalysisResult, Session,
    TickUpdate, interpret,
)
from session_store import SessionSummary
from timers import RepeatingTimer
from voice_debounce import VoiceDebouncer

CLOCK_INTERVAL = 1.0


def _spawn(fn, *args) -> None:
    threading.Thread(target=fn, args=args, daemon=True).start()


def completion_message(target_reps: int) -> str:
    return f"Great job! You completed {target_reps} reps."


class SessionController:
    """Owns the current session and wires sampler, gateway, voice and overlay.

    Collaborators are duck-typed so tests can pass fakes:

    * ``gateway.analyze_frame(payload)`` -> ``AnalysisResult | None``
    * ``sampler.sample()`` -> encoded payload or None
    * ``speaker.say(text)``
    * ``store.start_session(target)`` / ``store.end_session(summary)``
    * ``overlay.draw(landmarks)`` / ``overlay.clear()``

    ``timer_factory(interval, fn, name)`` and ``dispatch(fn, *args)`` replace
    the background threads; ``clock`` feeds the voice cooldown.
    """

    def __init__(
        self,
        gateway,
        sampler,
        speaker,
        store=None,
        overlay=None,
        config: TrackerConfig | None = None,
        clock=time.monotonic,
        timer_factory=RepeatingTimer,
        dispatch=_spawn,
    ) -> None:
        self.config = config or TrackerConfig()
        self._gateway = gateway
        self._sampler = sampler
        self._speaker = speaker
        self._store = store
        self._overlay = overlay
        self._timer_factory = timer_factory
        self._dispatch = dispatch

        self._debouncer = VoiceDebouncer(speaker, clock, self.config.voice_cooldown)
        self._lock = threading.Lock()
        self._timers: list = []
        self._in_flight = False
        self.session = Session()

    # --- Lifecycle ---

    @property
    def active(self) -> bool:
        return self.session.active

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def snapshot(self) -> Session:
        """Copy of the current session for the UI thread."""
        with self._lock:
            return replace(self.session, state=replace(self.session.state))

    def start(self, target_reps: int | None = None) -> bool:
        """Begin a new session.  Ignored while one is already active."""
        if self.session.active:
            return False
        if target_reps is None:
            target_reps = self.config.target_reps
        target = max(0, int(target_reps or 0))

        if self._store is not None:
            self._store.start_session(target)

        with self._lock:
            self.session = Session(target_reps=target, status=STATUS_ACTIVE)
            self._debouncer.reset()
        if self._overlay is not None:
            self._overlay.clear()

        self._arm()
        print(f"[session] Started (target {target or 'none'})")
        return True

    def end(self) -> bool:
        """Manual end.  Returns False if there was nothing to end."""
        with self._lock:
            session = self.session
            if not session.active or session.auto_ended:
                return False
            session.auto_ended = True
        self._finish(session, auto=False)
        return True

    def close(self) -> None:
        """Tear down: end any active session and stop every timer."""
        self.end()
        self._disarm()

    def _finish(self, session: Session, auto: bool) -> None:
        with self._lock:
            session.status = STATUS_ENDED
            summary = SessionSummary(
                reps_completed=session.state.reps,
                duration_seconds=session.elapsed_seconds,
                auto_stopped=auto,
            )
            # Swapped under the same lock as the status change.
            timers, self._timers = self._timers, []
        self._stop_timers(timers)
        if self._store is not None:
            self._store.end_session(summary)
        how = "auto-stopped" if auto else "ended"
        print(f"[session] {how.capitalize()} – {summary.reps_completed} reps in "
              f"{summary.duration_seconds}s")

    def _arm(self) -> None:
        timers = [
            self._timer_factory(CLOCK_INTERVAL, self._advance_clock, "session-clock"),
            self._timer_factory(self.config.frame_interval, self.tick, "frame-sampler"),
        ]
        with self._lock:
            old, self._timers = self._timers, timers
        self._stop_timers(old)
        for timer in timers:
            timer.start()

    def _disarm(self) -> None:
        with self._lock:
            timers, self._timers = self._timers, []
        self._stop_timers(timers)

    @staticmethod
    def _stop_timers(timers) -> None:
        for timer in timers:
            timer.stop()

    def _advance_clock(self) -> None:
        with self._lock:
            if self.session.active:
                self.session.elapsed_seconds += 1

    # --- Sampling ---

    def tick(self) -> bool:
        """One sampler iteration.  Returns True if an analysis was issued."""
        session = self.session
        if not session.active or self._in_flight:
            return False
        payload = self._sampler.sample()
        if payload is None:
            return False

        self._in_flight = True
        try:
            self._dispatch(self._analyze, session, payload)
        except Exception:
            self._in_flight = False
            raise
        return True

    def _analyze(self, session: Session, payload: str) -> None:
        try:
            try:
                result = self._gateway.analyze_frame(payload)
            except (AnalysisError, OSError) as exc:
                print(f"[analyze] Error: {exc}")
                self._report_error(session)
                return
            if result is not None:
                self.apply(session, result)
        finally:
            self._in_flight = False

    def _report_error(self, session: Session) -> None:
        with self._lock:
            if session is self.session and session.active:
                session.state.error = SERVER_BUSY

    # --- Result application ---

    def apply(self, session: Session, result: AnalysisResult) -> TickUpdate | None:
        """Fold *result* into *session*; None if the session is no longer live."""
        tolerance = self.config.no_person_tolerance
        with self._lock:
            if session is not self.session or not session.active:
                print("[analyze] Late result discarded (session over)")
                return None

            state = session.state
            update = interpret(state, result, tolerance)

            if not update.no_person:
                self._debouncer.handle(result, state.reps)

            auto_stop = (
                not update.no_person
                and session.target_reached()
                and not session.auto_ended
            )
            if auto_stop:
                session.auto_ended = True

            if self._overlay is not None:
                try:
                    if update.clear_overlay:
                        self._overlay.clear()
                    else:
                        self._overlay.draw(update.landmarks)
                except cv2.error as exc:
                    print(f"[overlay] Error: {exc}")
                    self._overlay.clear()

        if auto_stop:
            self._speaker.say(completion_message(session.target_reps))
            self._finish(session, auto=True)
        return update
