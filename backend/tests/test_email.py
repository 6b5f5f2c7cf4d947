from upkeep.core.config import AppConfig
from upkeep.services import email_service


def test_render_ticket_template_escapes_html():
    html = email_service.render_email("ticket", {
        "title": "<b>Leak</b>",
        "description": "Oil & water",
        "scheduled_date": "2024-05-01 08:00",
        "machine_name": "Press 1",
        "critical": True,
    })
    assert "You have been assigned a maintenance ticket" in html
    assert "&lt;b&gt;Leak&lt;/b&gt;" in html
    assert "Oil &amp; water" in html


def test_unknown_kind_uses_default_template():
    html = email_service.render_email("something-else", {})
    assert "Notification" in html


def test_password_template_has_code():
    html = email_service.render_email("password", {"code": "123456", "ttl_minutes": 15})
    assert "123456" in html
    assert "15" in html


def test_subjects():
    assert email_service.build_subject("ticket", {"title": "Leak"}) == "New Maintenance Ticket Notification : Leak"
    assert email_service.build_subject("checklist", {}) == "Upcoming CheckList Notification"
    assert email_service.build_subject("nope") == "Maintenance Notification"


def test_message_with_attachment():
    msg = email_service.build_message(
        ["a@factory-test.com", "b@factory-test.com"], "Hi", "<p>x</p>", None,
        attachments=[("r.pdf", b"%PDF-1.4", "application/pdf")],
    )
    assert msg["To"] == "a@factory-test.com, b@factory-test.com"
    assert msg["From"] == "noreply@localhost"
    assert [a.get_filename() for a in msg.iter_attachments()] == ["r.pdf"]


def test_send_without_smtp_server_reports_failure():
    result = email_service.send_email("a@factory-test.com", "Hi", "<p>x</p>", config=AppConfig())
    assert result["sent"] is False
    assert "SMTP server is not configured" in result["error"]


def test_send_without_recipient():
    assert email_service.send_email(None, "Hi", "<p>x</p>", config=AppConfig()) == {
        "sent": False, "error": "No recipient",
    }
