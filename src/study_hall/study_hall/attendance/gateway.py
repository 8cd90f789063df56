from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.enums import ScanOutcomeKind
from ..core.exceptions import AlreadyCheckedIn, StorageUnavailable, ValidationError
from .model import AttendanceRecord, SeatSnapshot
from .tracker import SessionTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    kind: ScanOutcomeKind
    record: Optional[AttendanceRecord] = None
    error_kind: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind in (ScanOutcomeKind.CHECKED_IN, ScanOutcomeKind.ALREADY_ACTIVE)


class CheckInGateway:
    """Turns an untrusted scan payload into a SessionTracker check-in.

    The payload is an opaque shared token compared for exact equality. The
    gateway never retries; storage failures come back as ERROR outcomes.
    """

    def __init__(self, tracker: SessionTracker, expected_token: str):
        if not expected_token:
            raise ValueError("expected_token must be a non-empty string")
        self._tracker = tracker
        self._expected_token = expected_token

    def handle_scan(
        self,
        payload: Optional[str],
        student_id: str,
        *,
        seat: Optional[SeatSnapshot] = None,
    ) -> ScanOutcome:
        if not payload:
            # No code in frame / partial decode: not an event.
            return ScanOutcome(ScanOutcomeKind.IGNORED, message="No QR code detected")

        if payload != self._expected_token:
            logger.info("Rejected scan for %s: payload mismatch", student_id)
            return ScanOutcome(
                ScanOutcomeKind.INVALID_PAYLOAD,
                message="Invalid QR code. Please scan the official library QR code.",
            )

        try:
            record = self._tracker.check_in(student_id, seat)
        except AlreadyCheckedIn as e:
            return ScanOutcome(
                ScanOutcomeKind.ALREADY_ACTIVE,
                record=e.active,
                message="You are already checked in.",
            )
        except ValidationError as e:
            return ScanOutcome(ScanOutcomeKind.ERROR, error_kind=e.kind, message=str(e))
        except StorageUnavailable as e:
            logger.exception("Check-in for %s failed: storage unavailable", student_id)
            return ScanOutcome(ScanOutcomeKind.ERROR, error_kind=e.kind, message=str(e))

        return ScanOutcome(ScanOutcomeKind.CHECKED_IN, record=record, message="Checked in.")
