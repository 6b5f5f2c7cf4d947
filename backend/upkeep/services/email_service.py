# backend/upkeep/services/email_service.py
"""
Bildirim e-postaları: Jinja2 HTML şablonu + SMTP gönderimi.

Gönderim hataları çağırana exception olarak dönmez; sonuç
{"sent": bool, "error": str} sözlüğü olarak raporlanır.
"""
from __future__ import annotations

import logging
import os
import smtplib
import ssl
from email.message import EmailMessage
from typing import Any, Dict, Iterable, Optional, Union

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from ..core.config import AppConfig, load_config

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", "email")

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

HEADERS = {
    "ticket": "You have been assigned a maintenance ticket",
    "machine": "A machine has been assigned to you",
    "checklist": "Upcoming checklist notification",
    "password": "You Requested a Password Reset",
    "report": "Maintenance Report",
}
DEFAULT_HEADER = "Notification"

SUBJECTS = {
    "ticket": "New Maintenance Ticket Notification : {title}",
    "machine": "Maintenance Notification New Machine Assigned : {machine_name}",
    "checklist": "Upcoming CheckList Notification : {checklist_name}",
    "password": "Maintenance App Password Reset",
    "report": "Maintenance Report : {title}",
}
DEFAULT_SUBJECT = "Maintenance Notification"


def render_email(kind: str, data: Optional[Dict[str, Any]] = None) -> str:
    """Bilinmeyen tür -> genel şablon."""
    context = dict(data or {})
    context["header"] = HEADERS.get(kind, DEFAULT_HEADER)
    try:
        template = _env.get_template(f"{kind}.html")
    except TemplateNotFound:
        template = _env.get_template("default.html")
    return template.render(**context)


def build_subject(kind: str, data: Optional[Dict[str, Any]] = None) -> str:
    pattern = SUBJECTS.get(kind)
    if not pattern:
        return DEFAULT_SUBJECT
    try:
        return pattern.format(**(data or {}))
    except KeyError:
        return pattern.split(" : ")[0]


def build_message(
    to: Union[str, Iterable[str]],
    subject: str,
    html: str,
    sender: Optional[str],
    attachments: Optional[Iterable[tuple]] = None,
) -> EmailMessage:
    recipients = [to] if isinstance(to, str) else list(to)
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender or "noreply@localhost"
    msg["To"] = ", ".join(recipients)
    msg.set_content("This message requires an HTML capable mail client.")
    msg.add_alternative(html, subtype="html")
    # (dosya adı, bytes, mime) üçlüleri
    for filename, payload, mime in attachments or ():
        maintype, _, subtype = (mime or "application/octet-stream").partition("/")
        msg.add_attachment(payload, maintype=maintype, subtype=subtype, filename=filename)
    return msg


def _deliver(msg: EmailMessage, config: AppConfig) -> None:
    if not config.smtpServer:
        raise RuntimeError("SMTP server is not configured")

    if config.smtpSecure:
        # 465 gibi doğrudan TLS portları
        server = smtplib.SMTP_SSL(
            config.smtpServer, config.smtpPort, context=ssl.create_default_context(), timeout=30
        )
    else:
        server = smtplib.SMTP(config.smtpServer, config.smtpPort, timeout=30)
    try:
        if config.smtpTLS and not config.smtpSecure:
            server.starttls(context=ssl.create_default_context())
        if config.smtpUsername and config.smtpPassword:
            server.login(config.smtpUsername, config.smtpPassword)
        server.send_message(msg)
    finally:
        server.quit()


def send_email(
    to: Union[str, Iterable[str], None],
    subject: str,
    html: str,
    attachments: Optional[Iterable[tuple]] = None,
    config: Optional[AppConfig] = None,
) -> Dict[str, Any]:
    if not to:
        return {"sent": False, "error": "No recipient"}

    config = config or load_config()
    msg = build_message(to, subject, html, config.emailFrom, attachments)
    try:
        _deliver(msg, config)
    except (smtplib.SMTPException, OSError, RuntimeError) as e:
        logger.exception("e-posta gönderilemedi (to=%s, subject=%s)", msg["To"], subject)
        return {"sent": False, "error": f"{type(e).__name__}: {e}"}

    logger.info("e-posta gönderildi (to=%s, subject=%s)", msg["To"], subject)
    return {"sent": True}


def notify(
    kind: str,
    to: Union[str, Iterable[str], None],
    data: Optional[Dict[str, Any]] = None,
    attachments: Optional[Iterable[tuple]] = None,
) -> Dict[str, Any]:
    """Şablonu doldurup gönderir: ticket, machine, checklist, password, report."""
    return send_email(to, build_subject(kind, data), render_email(kind, data), attachments)
