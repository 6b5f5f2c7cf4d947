# backend/upkeep/domain/constants.py

"""
Uygulama genelinde durum / aralık metinlerinin ve sabit saatlerin tek kaynağı.
"""

from datetime import time
from typing import Final

# Makine durumları
MACHINE_ACTIVE: Final[str] = "active"
MACHINE_HAS_PROBLEMS: Final[str] = "has problems"
MACHINE_UNDER_MAINTENANCE: Final[str] = "under maintenance"
MACHINE_INACTIVE: Final[str] = "inactive"
MACHINE_STATUSES: Final[tuple] = (
    MACHINE_ACTIVE, MACHINE_HAS_PROBLEMS, MACHINE_UNDER_MAINTENANCE, MACHINE_INACTIVE,
)

# Ticket durumları
TICKET_PENDING: Final[str] = "pending"
TICKET_IN_PROGRESS: Final[str] = "in progress"
TICKET_LATE: Final[str] = "late"
TICKET_COMPLETED: Final[str] = "completed"
TICKET_COMPLETED_LATE: Final[str] = "completed late"
TICKET_STATUSES: Final[tuple] = (
    TICKET_PENDING, TICKET_IN_PROGRESS, TICKET_LATE, TICKET_COMPLETED, TICKET_COMPLETED_LATE,
)
TICKET_CLOSED_STATUSES: Final[tuple] = (TICKET_COMPLETED, TICKET_COMPLETED_LATE)

# Checklist aralıkları ve durumları
INTERVAL_TYPES: Final[tuple] = ("daily", "weekly", "monthly", "semi", "annually", "custom")
CHECKLIST_PLANNED: Final[str] = "planned"
CHECKLIST_LATE: Final[str] = "late"

# Mesai takvimi (Pzt-Cum, 07:30-16:00)
WORKDAY_START: Final[time] = time(7, 30)
WORKDAY_END: Final[time] = time(16, 0)
WORKDAYS: Final[tuple] = (0, 1, 2, 3, 4)

# Şifre sıfırlama kodu geçerlilik süresi
RESET_CODE_TTL_MINUTES: Final[int] = 15
RESET_CODE_MAX_ATTEMPTS: Final[int] = 5

# PDF rapor dosya adı kalıbı: başlık, makine, tarih
REPORT_FILENAME: Final[str] = "maintenance_report_{}_{}_{}.pdf"

# Checklist tamamlama kaydı: tüm maddeler işaretli mi
COMPLETION_COMPLETE: Final[str] = "complete"
COMPLETION_PARTIAL: Final[str] = "partial"
