import pytest

from regportal import create_app
from regportal.config import Settings

NOW = 1_700_000_000
SECRET = "s3cr3t"

class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail_with = None

    def send(self, to, subject, html, text=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})

class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

@pytest.fixture
def settings():
    return Settings(email_user="sender@example.com", email_pass="app-password",
                    otp_secret=SECRET, target_email="ops@example.com")

@pytest.fixture
def mailer():
    return FakeMailer()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def app(settings, mailer, clock):
    app = create_app(settings=settings, mailer=mailer, clock=clock)
    app.config["TESTING"] = True
    return app

@pytest.fixture
def client(app):
    return app.test_client()
