# backend/upkeep/services/report_service.py
"""
Ticket tamamlama raporu (PDF). matplotlib Figure ile A4 sayfa çizilir.
"""
import io
import logging
import os
import re
import textwrap
from datetime import datetime
from typing import Optional, Tuple

from fastapi import HTTPException
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle
from sqlalchemy.orm import Session

from ..core.config import upload_folder
from ..domain.constants import REPORT_FILENAME
from ..domain.files import add_machine_prefix
from ..models import MaintenanceTicket
from . import document_service, email_service
from .ticket_service import get_ticket, ticket_mail_data

logger = logging.getLogger(__name__)

A4_INCHES = (8.27, 11.69)
BAND_COLOR = "#009b9a"
WRAP_CHARS = 90


def _fmt(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


def report_details(ticket: MaintenanceTicket) -> list:
    return [
        ("Ticket ID:", str(ticket.TicketID)),
        ("Title:", ticket.Title),
        ("Description:", ticket.Description),
        ("Status:", ticket.Status_s),
        ("Scheduled Date:", _fmt(ticket.ScheduledDate)),
        ("Completed Date:", _fmt(ticket.CompletedDate)),
        ("Machine:", ticket.machine.Name if ticket.machine else "-"),
        ("Assigned User:", ticket.user.FullName if ticket.user else "-"),
        ("Critical:", "Yes" if ticket.Critical else "No"),
        ("Category:", ticket.category.Name if ticket.category else "-"),
    ]


def render_pdf(ticket: MaintenanceTicket, problem: str = "", solution: str = "", notes: Optional[str] = None) -> bytes:
    fig = Figure(figsize=A4_INCHES)
    # Koordinatlar figür oranı (0..1), y yukarıdan aşağı azalır
    fig.add_artist(Rectangle((0, 0.93), 1, 0.07, transform=fig.transFigure, color=BAND_COLOR))
    fig.text(0.5, 0.965, "Ticket Completion Report", ha="center", va="center",
             fontsize=18, color="white", weight="bold")

    y = 0.89
    for label, value in report_details(ticket):
        lines = textwrap.wrap(str(value), WRAP_CHARS - 25) or ["-"]
        fig.text(0.07, y, label, fontsize=11, weight="bold", va="top")
        fig.text(0.28, y, "\n".join(lines), fontsize=11, va="top")
        y -= 0.025 * len(lines) + 0.005

    y -= 0.02
    fig.text(0.07, y, "Completion Details:", fontsize=13, weight="bold", va="top")
    y -= 0.035

    sections = [("Problem:", problem), ("Solution:", solution)]
    if notes:
        sections.append(("Notes:", notes))
    for label, body in sections:
        fig.text(0.07, y, label, fontsize=11, weight="bold", va="top")
        y -= 0.025
        lines = textwrap.wrap(body or "-", WRAP_CHARS) or ["-"]
        fig.text(0.07, y, "\n".join(lines), fontsize=10, va="top")
        y -= 0.02 * len(lines) + 0.02

    fig.add_artist(Rectangle((0, 0), 1, 0.06, transform=fig.transFigure, color=BAND_COLOR))
    fig.text(0.05, 0.03, "Upkeep maintenance management", fontsize=9, color="white", va="center")
    fig.text(0.95, 0.03, f"Generated {datetime.now():%Y-%m-%d %H:%M}", fontsize=9,
             color="white", va="center", ha="right")

    buf = io.BytesIO()
    fig.savefig(buf, format="pdf")
    return buf.getvalue()


def _safe(part: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", part or "").strip("_") or "na"


def report_filename(ticket: MaintenanceTicket) -> str:
    machine = ticket.machine.Name if ticket.machine else "machine"
    return REPORT_FILENAME.format(_safe(ticket.Title), _safe(machine), datetime.now().strftime("%Y%m%d"))


def generate_report(
    db: Session,
    ticket_id: int,
    problem: str = "",
    solution: str = "",
    notes: Optional[str] = None,
    save_to_documents: bool = False,
    email: bool = False,
) -> Tuple[bytes, str, dict]:
    """(pdf, dosya adı, ek bilgi) döner; ek bilgi kayıt yolu ve e-posta sonucunu taşır."""
    ticket = get_ticket(db, ticket_id)
    pdf = render_pdf(ticket, problem, solution, notes)
    filename = report_filename(ticket)
    info: dict = {"filename": filename}

    if save_to_documents:
        if ticket.machine is None:
            raise HTTPException(status_code=409, detail="Ticket has no machine to attach the report to")
        stored = add_machine_prefix(ticket.machine.MachineID, filename)
        path = os.path.join(upload_folder(), stored)
        try:
            with open(path, "wb") as fh:
                fh.write(pdf)
        except OSError as e:
            logger.exception("rapor yazılamadı: %s", path)
            raise HTTPException(status_code=500, detail=f"file_error: {e}")
        doc = document_service.add_document(db, ticket.machine, filename, path)
        db.commit()
        db.refresh(doc)
        info.update(path=path, DocumentID=doc.DocumentID)
        logger.info("rapor kaydedildi: %s", path)

    if email:
        if ticket.user is None:
            info["email"] = {"sent": False, "error": "No assignee"}
        else:
            data = ticket_mail_data(ticket)
            data.update(problem=problem, solution=solution, notes=notes)
            info["email"] = email_service.notify(
                "report", ticket.user.Email, data, attachments=[(filename, pdf, "application/pdf")]
            )
    return pdf, filename, info
