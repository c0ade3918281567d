"""
Decides which coaching cue, if any, gets spoken for an analysis result.

Checks run in a fixed order (no-person prompt, rep completed, stage
change) and the last matching one wins.  A cue identical to the
previously spoken one is dropped, so a stage that keeps repeating is
only announced once.
"""

from __future__ import annotations

import time

from session_state import (
    NEUTRAL_STAGE, REP_COMPLETED_EVENT, START_STAGE, AnalysisResult,
)

MOVE_INTO_FRAME = "Please move into the camera frame"
NO_PERSON_COOLDOWN = 5.0


class VoiceDebouncer:
    """Stateful filter between interpreted results and the speaker.

    *speaker* is anything with a ``say(text)`` method; *clock* returns
    seconds and is swapped for a fake in tests.
    """

    def __init__(
        self,
        speaker,
        clock=time.monotonic,
        no_person_cooldown: float = NO_PERSON_COOLDOWN,
    ) -> None:
        self._speaker = speaker
        self._clock = clock
        self._cooldown = no_person_cooldown

        self.last_spoken = ""
        self.last_spoken_at = clock()
        self.last_stage = START_STAGE
        self.last_reps = 0

    def reset(self) -> None:
        """Forget rep/stage progress at the start of a new session."""
        self.last_stage = START_STAGE
        self.last_reps = 0

    def choose(self, result: AnalysisResult, count: int) -> str | None:
        """Return the cue this result asks for, updating rep/stage trackers."""
        now = self._clock()
        message = None

        if result.no_person and now - self.last_spoken_at >= self._cooldown:
            message = MOVE_INTO_FRAME

        if result.event == REP_COMPLETED_EVENT and count > self.last_reps:
            message = f"Rep {count} completed"
            self.last_reps = count

        stage = result.stage
        if stage and stage != self.last_stage and stage != NEUTRAL_STAGE:
            message = stage
            self.last_stage = stage

        return message

    def handle(self, result: AnalysisResult, count: int) -> str | None:
        """Speak the chosen cue unless it repeats the last one.

        Returns the spoken text, or None when nothing was said.
        """
        message = self.choose(result, count)
        if not message or message == self.last_spoken:
            return None

        self.last_spoken = message
        self.last_spoken_at = self._clock()
        self._speaker.say(message)
        return message
