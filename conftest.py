"""
Shared fakes for the controller, debouncer and store tests.
"""

import pytest

from session_state import Landmark


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSpeaker:
    def __init__(self) -> None:
        self.said: list[str] = []

    def say(self, text: str) -> None:
        self.said.append(text)


class FakeTimer:
    def __init__(self, interval, fn, name="timer") -> None:
        self.interval = interval
        self.fn = fn
        self.name = name
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True


class FakeSampler:
    def __init__(self, payload="data:image/jpeg;base64,AAAA") -> None:
        self.payload = payload
        self.calls = 0

    def sample(self):
        self.calls += 1
        return self.payload


class FakeGateway:
    """Returns queued results in order; exceptions in the queue are raised."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.payloads: list[str] = []

    def push(self, *outcomes) -> None:
        self.outcomes.extend(outcomes)

    def analyze_frame(self, payload):
        self.payloads.append(payload)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeStore:
    def __init__(self) -> None:
        self.started: list[int] = []
        self.ended: list = []

    def start_session(self, target_reps) -> None:
        self.started.append(target_reps)

    def end_session(self, summary=None) -> None:
        self.ended.append(summary)


class FakeOverlay:
    def __init__(self) -> None:
        self.draws: list = []
        self.clears = 0

    def draw(self, landmarks):
        self.draws.append(landmarks)
        return []

    def clear(self) -> None:
        self.clears += 1


class DeferredDispatch:
    """Holds analysis calls until ``run_all`` so in-flight states can be tested."""

    def __init__(self) -> None:
        self.pending: list = []

    def __call__(self, fn, *args) -> None:
        self.pending.append((fn, args))

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for fn, args in pending:
            fn(*args)


def inline_dispatch(fn, *args) -> None:
    fn(*args)


def make_landmarks(n: int = 25) -> list:
    return [Landmark(0.1 + 0.03 * i, 0.1 + 0.03 * i) for i in range(n)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def speaker():
    return FakeSpeaker()


@pytest.fixture
def landmarks():
    return make_landmarks()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def overlay():
    return FakeOverlay()


@pytest.fixture
def timers():
    return []


@pytest.fixture
def make_controller(clock, speaker, timers, gateway, store, overlay):
    """Build a controller wired to fakes; keyword overrides replace any part."""
    from config import TrackerConfig
    from session_controller import SessionController

    def timer_factory(interval, fn, name="timer"):
        timer = FakeTimer(interval, fn, name)
        timers.append(timer)
        return timer

    def build(dispatch=inline_dispatch, **kw):
        parts = {
            "gateway": gateway,
            "sampler": FakeSampler(),
            "speaker": speaker,
            "store": store,
            "overlay": overlay,
            "config": TrackerConfig(),
            "clock": clock,
            "timer_factory": timer_factory,
            "dispatch": dispatch,
        }
        parts.update(kw)
        return SessionController(**parts)

    return build


@pytest.fixture
def deferred():
    return DeferredDispatch()


@pytest.fixture
def empty_sampler():
    return FakeSampler(payload=None)
