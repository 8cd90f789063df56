"""Ví dụ: dùng service layer (không qua Flask).

Một thành viên quét QR, quét lại lần nữa, rồi check-out; in số giờ học trong tháng.
"""

import importlib

from config import get_settings_module

from study_hall.attendance.model import SeatSnapshot
from study_hall.common.datetime_utils import YearMonth
from study_hall.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        storage_backend=settings.STORAGE_BACKEND,
        db_config=settings.DB_CONFIG,
        checkin_token=settings.CHECKIN_TOKEN,
        timezone=settings.TIMEZONE,
    )
    gateway = container.checkin_gateway

    seat = SeatSnapshot(seat_number="A-12", shift="morning")
    first = gateway.handle_scan(settings.CHECKIN_TOKEN, "S1", seat=seat)
    second = gateway.handle_scan(settings.CHECKIN_TOKEN, "S1", seat=seat)
    print(first.kind.value, second.kind.value)

    if first.record:
        print(container.session_tracker.check_out(first.record.record_id).to_dict())

    now = container.clock.now()
    print(container.aggregator.daily_detail(now.date(), "S1"))
    print(container.aggregator.monthly_study_hours("S1", YearMonth.of(now)))


if __name__ == "__main__":
    main()
