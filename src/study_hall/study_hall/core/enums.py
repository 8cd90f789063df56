from __future__ import annotations

from enum import Enum


class ScanOutcomeKind(str, Enum):
    """Kết quả xử lý một lần quét mã QR."""

    CHECKED_IN = "CHECKED_IN"
    ALREADY_ACTIVE = "ALREADY_ACTIVE"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    IGNORED = "IGNORED"
    ERROR = "ERROR"


class ScannerState(str, Enum):
    IDLE = "IDLE"
    SCANNING = "SCANNING"
    PROCESSING = "PROCESSING"
    CLOSED = "CLOSED"


class ScannerEvent(str, Enum):
    OPEN = "OPEN"
    DECODED = "DECODED"
    NOISE = "NOISE"
    RESOLVED = "RESOLVED"
    CANCEL = "CANCEL"
    CAMERA_ERROR = "CAMERA_ERROR"


class ScannerEffect(str, Enum):
    NONE = "NONE"
    START_CAMERA = "START_CAMERA"
    PROCESS_PAYLOAD = "PROCESS_PAYLOAD"
    RESUME_CAMERA = "RESUME_CAMERA"
    STOP_CAMERA = "STOP_CAMERA"
