"""
Session data model and the per-tick result interpreter.

``interpret`` folds one analysis result into the session's derived state
(reps, stage, angle, validity, feedback) and reports what the caller
should do with the overlay.  It never raises on partial or odd-shaped
results: every field has a fallback.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

STATUS_NOT_STARTED = "not_started"
STATUS_ACTIVE = "active"
STATUS_ENDED = "ended"

START_STAGE = "down"
NEUTRAL_STAGE = "none"

DEFAULT_FEEDBACK = "Tracking…"
REFRAME_FEEDBACK = "Please stand fully in the camera frame"
SERVER_BUSY = "Server busy, retrying…"

NO_PERSON_WARNING = "no_person"
REP_COMPLETED_EVENT = "rep_completed"
NO_PERSON_TOLERANCE = 2


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _text(value) -> str | None:
    return value if isinstance(value, str) else None


# ---------------------------------------------------------------------------
# Analysis result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Landmark:
    """Normalized body-joint position, x/y in [0, 1]."""
    x: float
    y: float


@dataclass
class AnalysisResult:
    """One response from the analysis service.  Every field is optional."""
    reps: float | None = None
    count: float | None = None
    stage: str | None = None
    angle: float | None = None
    warning: str | None = None
    feedback: str | None = None
    guidance: str | None = None
    landmarks: list[Landmark | None] | None = None
    event: str | None = None

    @staticmethod
    def from_json(data: dict) -> "AnalysisResult":
        """Build a result from decoded JSON, dropping wrong-typed fields.

        Landmark entries without numeric x/y become ``None`` so the
        remaining points keep their anatomical indices.
        """
        landmarks = None
        raw_lms = data.get("landmarks")
        if isinstance(raw_lms, list):
            landmarks = []
            for p in raw_lms:
                if (isinstance(p, dict) and _is_number(p.get("x"))
                        and _is_number(p.get("y"))):
                    landmarks.append(Landmark(float(p["x"]), float(p["y"])))
                else:
                    landmarks.append(None)

        return AnalysisResult(
            reps=data.get("reps") if _is_number(data.get("reps")) else None,
            count=data.get("count") if _is_number(data.get("count")) else None,
            stage=_text(data.get("stage")),
            angle=data.get("angle") if _is_number(data.get("angle")) else None,
            warning=_text(data.get("warning")),
            feedback=_text(data.get("feedback")),
            guidance=_text(data.get("guidance")),
            landmarks=landmarks,
            event=_text(data.get("event")),
        )

    @property
    def no_person(self) -> bool:
        return bool(self.warning) and NO_PERSON_WARNING in self.warning.lower()

    @property
    def has_landmarks(self) -> bool:
        return bool(self.landmarks) and any(p is not None for p in self.landmarks)

    def reported_reps(self) -> int | None:
        if self.reps is not None:
            return int(self.reps)
        if self.count is not None:
            return int(self.count)
        return None


# ---------------------------------------------------------------------------
# Session + derived state
# ---------------------------------------------------------------------------


@dataclass
class DerivedState:
    """What the UI shows.  Mutated by ``interpret`` on every applied result."""
    reps: int = 0
    stage: str = START_STAGE
    angle: float = 0.0
    is_valid: bool | None = None
    feedback: str = DEFAULT_FEEDBACK
    guidance: str = ""
    error: str = ""
    no_person_count: int = 0


@dataclass
class Session:
    """One start-to-end workout.  A fresh object is created on every start."""
    target_reps: int = 0
    status: str = STATUS_NOT_STARTED
    elapsed_seconds: int = 0
    auto_ended: bool = False
    state: DerivedState = field(default_factory=DerivedState)

    @property
    def active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def target_reached(self) -> bool:
        return self.target_reps > 0 and self.state.reps >= self.target_reps


@dataclass
class TickUpdate:
    """Side effects requested by one interpreted result."""
    no_person: bool = False
    landmarks: list[Landmark | None] | None = None

    @property
    def clear_overlay(self) -> bool:
        return self.landmarks is None


def interpret(
    state: DerivedState,
    result: AnalysisResult,
    no_person_tolerance: int = NO_PERSON_TOLERANCE,
) -> TickUpdate:
    """Apply *result* to *state* in place and return the overlay/voice plan."""
    reported = result.reported_reps()
    if reported is not None and reported > state.reps:
        state.reps = reported

    state.stage = result.stage or NEUTRAL_STAGE
    state.angle = float(result.angle) if result.angle is not None else 0.0
    state.guidance = result.guidance or ""
    state.error = ""

    if result.no_person:
        state.no_person_count += 1
        if state.no_person_count > no_person_tolerance:
            state.feedback = REFRAME_FEEDBACK
            state.is_valid = False
        return TickUpdate(no_person=True, landmarks=None)

    state.no_person_count = 0
    state.feedback = result.feedback or DEFAULT_FEEDBACK
    state.is_valid = True

    landmarks = result.landmarks if result.has_landmarks else None
    return TickUpdate(no_person=False, landmarks=landmarks)
