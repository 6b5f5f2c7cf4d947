from datetime import datetime

from upkeep.domain.downtime import business_downtime_hours
from upkeep.domain.files import add_machine_prefix, file_extension, has_machine_prefix, strip_machine_prefix

# 2024-01-08 Pazartesi, 2024-01-05 Cuma


def test_same_day_inside_hours():
    assert business_downtime_hours(datetime(2024, 1, 8, 9), datetime(2024, 1, 8, 11)) == 2.0


def test_clipped_to_workday():
    assert business_downtime_hours(datetime(2024, 1, 8, 6), datetime(2024, 1, 8, 18)) == 8.5


def test_overnight_counts_both_days():
    # Pzt 15:00-16:00 + Sal 07:30-09:00
    assert business_downtime_hours(datetime(2024, 1, 8, 15), datetime(2024, 1, 9, 9)) == 2.5


def test_weekend_is_skipped():
    # Cum 15:00-16:00 + Pzt 07:30-08:30
    assert business_downtime_hours(datetime(2024, 1, 5, 15), datetime(2024, 1, 8, 8, 30)) == 2.0


def test_completion_day_stops_at_completion():
    assert business_downtime_hours(datetime(2024, 1, 8, 7, 30), datetime(2024, 1, 10, 8)) == 17.5


def test_non_positive_interval():
    t = datetime(2024, 1, 8, 10)
    assert business_downtime_hours(t, t) == 0.0
    assert business_downtime_hours(t, datetime(2024, 1, 8, 9)) == 0.0


def test_file_name_helpers():
    assert add_machine_prefix(7, "manual.pdf") == "7_manual.pdf"
    assert strip_machine_prefix("7_wiring_diagram.dwg") == "wiring_diagram.dwg"
    assert has_machine_prefix(7, "7_manual.pdf")
    assert not has_machine_prefix(7, "17_manual.pdf")
    assert file_extension("archive.tar.gz") == "gz"
    assert file_extension("README") == ""
