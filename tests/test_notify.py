"""
Tests for mail composition and delivery.
"""

import smtplib
from dataclasses import replace

import pytest

from fibrewatch.errors import NotifyError
from fibrewatch.logger import get_logger
from fibrewatch.notify import SMTP_HOST, SMTP_PORT, SUBJECT, compose_message, send_notification

MARKUP = '<pre><code><strong>-</strong><span style="color:red">A/a: 2\n</span></code></pre>'


class FakeSMTP:
    """Records what the notifier does with its SMTP client."""

    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.logins = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def login(self, user, password):
        self.logins.append((user, password))

    def send_message(self, msg):
        self.sent.append(msg)


class RejectingSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"Username and Password not accepted")


@pytest.fixture(autouse=True)
def clear_instances():
    FakeSMTP.instances = []


class TestComposeMessage:

    def test_headers(self, settings):
        msg = compose_message(settings, MARKUP)

        assert msg["From"] == "watch@example.com"
        assert msg["To"] == "watch@example.com"
        assert str(msg["Subject"]) == SUBJECT
        assert msg.get_content_type() == "multipart/alternative"

    def test_single_html_part(self, settings):
        msg = compose_message(settings, MARKUP)

        parts = msg.get_payload()
        assert len(parts) == 1
        assert parts[0].get_content_type() == "text/html"
        assert parts[0].get_payload(decode=True).decode("utf-8") == MARKUP

    def test_requires_address(self, settings):
        with pytest.raises(NotifyError):
            compose_message(replace(settings, gmail_address=None), MARKUP)


class TestSendNotification:

    def test_sends_over_smtps(self, settings):
        send_notification(settings, MARKUP, smtp_factory=FakeSMTP)

        smtp = FakeSMTP.instances[0]
        assert (smtp.host, smtp.port) == (SMTP_HOST, SMTP_PORT)
        assert smtp.logins == [("watch@example.com", "app-password")]
        assert len(smtp.sent) == 1
        assert get_logger().metrics["notifications_sent"] == 1

    def test_smtp_failure(self, settings):
        with pytest.raises(NotifyError, match=SMTP_HOST):
            send_notification(settings, MARKUP, smtp_factory=RejectingSMTP)
        assert get_logger().metrics["notifications_sent"] == 0

    def test_connection_failure(self, settings):
        def refuse(host, port, timeout=None):
            raise ConnectionRefusedError("connection refused")

        with pytest.raises(NotifyError):
            send_notification(settings, MARKUP, smtp_factory=refuse)

    def test_missing_credentials(self, settings):
        with pytest.raises(NotifyError):
            send_notification(replace(settings, gmail_password=None), MARKUP, smtp_factory=FakeSMTP)
        assert FakeSMTP.instances == []
