from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from ..core.enums import ScannerEffect, ScannerEvent, ScannerState, ScanOutcomeKind
from .gateway import CheckInGateway, ScanOutcome
from .model import SeatSnapshot


@dataclass(frozen=True)
class Transition:
    state: ScannerState
    effect: ScannerEffect = ScannerEffect.NONE


def transition(
    state: ScannerState,
    event: ScannerEvent,
    outcome: Optional[ScanOutcomeKind] = None,
) -> Transition:
    """Pure transition function of the scanner.

    The camera loop feeds events in and performs the returned effect; it
    never decides on its own when to pause, resume or stop.
    """

    if state is ScannerState.CLOSED:
        return Transition(state)

    if event is ScannerEvent.CAMERA_ERROR:
        if state is ScannerState.IDLE:
            return Transition(ScannerState.CLOSED)
        return Transition(ScannerState.CLOSED, ScannerEffect.STOP_CAMERA)

    if state is ScannerState.IDLE:
        if event is ScannerEvent.OPEN:
            return Transition(ScannerState.SCANNING, ScannerEffect.START_CAMERA)
        if event is ScannerEvent.CANCEL:
            return Transition(ScannerState.CLOSED)
        return Transition(state)

    if state is ScannerState.SCANNING:
        if event is ScannerEvent.DECODED:
            return Transition(ScannerState.PROCESSING, ScannerEffect.PROCESS_PAYLOAD)
        if event is ScannerEvent.CANCEL:
            return Transition(ScannerState.CLOSED, ScannerEffect.STOP_CAMERA)
        return Transition(state)

    # PROCESSING: frames and cancel requests wait for the in-flight scan.
    if event is ScannerEvent.RESOLVED:
        if outcome is ScanOutcomeKind.INVALID_PAYLOAD:
            return Transition(ScannerState.SCANNING, ScannerEffect.RESUME_CAMERA)
        return Transition(ScannerState.CLOSED, ScannerEffect.STOP_CAMERA)
    return Transition(state)


@dataclass(frozen=True)
class ScanStep:
    effect: ScannerEffect
    outcome: Optional[ScanOutcome] = None


class ScanSession:
    """One device's scanning session for one member.

    Frames are handled one at a time, so a double-fired scanner reaches the
    gateway at most once per accepted frame.
    """

    def __init__(self, gateway: CheckInGateway, student_id: str, *, seat: Optional[SeatSnapshot] = None):
        self._gateway = gateway
        self._student_id = student_id
        self._seat = seat
        self._lock = threading.Lock()
        self._state = ScannerState.IDLE
        self.last_outcome: Optional[ScanOutcome] = None

    @property
    def state(self) -> ScannerState:
        return self._state

    def _apply(self, event: ScannerEvent, outcome: Optional[ScanOutcomeKind] = None) -> ScannerEffect:
        t = transition(self._state, event, outcome)
        self._state = t.state
        return t.effect

    def open(self) -> ScanStep:
        with self._lock:
            return ScanStep(self._apply(ScannerEvent.OPEN))

    def feed(self, payload: Optional[str]) -> ScanStep:
        with self._lock:
            effect = self._apply(ScannerEvent.DECODED if payload else ScannerEvent.NOISE)
            if effect is not ScannerEffect.PROCESS_PAYLOAD:
                return ScanStep(effect)

            outcome = self._gateway.handle_scan(payload, self._student_id, seat=self._seat)
            self.last_outcome = outcome
            return ScanStep(self._apply(ScannerEvent.RESOLVED, outcome.kind), outcome)

    def cancel(self) -> ScanStep:
        with self._lock:
            return ScanStep(self._apply(ScannerEvent.CANCEL))

    def camera_error(self) -> ScanStep:
        with self._lock:
            return ScanStep(self._apply(ScannerEvent.CAMERA_ERROR))
