import smtplib

from shared.utils import email_client as email_client_module
from shared.utils.email_client import EmailClient


class FakeSMTP:
    instances = []
    failures_left = 0

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        self.logged_in = (username, password)

    def send_message(self, message):
        if FakeSMTP.failures_left:
            FakeSMTP.failures_left -= 1
            raise smtplib.SMTPServerDisconnected("connection dropped")
        self.sent.append(message)


def install_fake_smtp(monkeypatch, failures=0):
    FakeSMTP.instances = []
    FakeSMTP.failures_left = failures
    monkeypatch.setattr(email_client_module.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(email_client_module.time, "sleep", lambda seconds: None)


def test_message_carries_text_and_html():
    message = EmailClient.build_message(
        "billing@example.com", ["a@example.com", "b@example.com"], "Invoice", "plain", "<p>html</p>")

    assert message["To"] == "a@example.com, b@example.com"
    assert message.get_body(("plain",)).get_content().strip() == "plain"
    assert message.get_body(("html",)).get_content().strip() == "<p>html</p>"


def test_missing_host_is_a_failed_send():
    client = EmailClient(smtp_host=None)
    assert client.send_email("billing@example.com", ["a@example.com"], "Invoice", "body") is False


def test_sends_and_logs_in_when_configured(monkeypatch):
    install_fake_smtp(monkeypatch)
    client = EmailClient("smtp.example.com", 587, username="billing", password="secret")

    assert client.send_email("billing@example.com", ["a@example.com"], "Invoice", "body") is True

    server = FakeSMTP.instances[0]
    assert server.logged_in == ("billing", "secret")
    assert server.sent[0]["Subject"] == "Invoice"


def test_retries_transient_failures(monkeypatch):
    install_fake_smtp(monkeypatch, failures=2)
    client = EmailClient("smtp.example.com", max_retries=3)

    assert client.send_email("billing@example.com", ["a@example.com"], "Invoice", "body") is True
    assert len(FakeSMTP.instances) == 3


def test_gives_up_after_max_retries(monkeypatch):
    install_fake_smtp(monkeypatch, failures=5)
    client = EmailClient("smtp.example.com", max_retries=2)

    assert client.send_email("billing@example.com", ["a@example.com"], "Invoice", "body") is False
    assert len(FakeSMTP.instances) == 2
