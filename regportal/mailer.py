# regportal/mailer.py
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

from .errors import TransportFailure

class SmtpMailer:
    """Hands a message to the configured SMTP relay.

    Delivery ends at "accepted by the relay". Any SMTP or socket error is
    re-raised as TransportFailure with the original exception chained.
    """

    def __init__(self, settings):
        self.settings = settings

    def _connect(self):
        s = self.settings
        if s.smtp_ssl:
            return smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout,
                                    context=ssl.create_default_context())
        return smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout)

    def build_message(self, to: str, subject: str, html: str, text: str = None) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.settings.email_user
        msg["To"] = to
        msg["Subject"] = subject
        msg["Date"] = formatdate(localtime=False)
        msg["Message-ID"] = make_msgid()
        msg.set_content(text or "This message requires an HTML-capable mail client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def send(self, to: str, subject: str, html: str, text: str = None) -> None:
        self.settings.require_mail()
        msg = self.build_message(to, subject, html, text)
        try:
            with self._connect() as conn:
                if not self.settings.smtp_ssl:
                    conn.starttls(context=ssl.create_default_context())
                conn.login(self.settings.email_user, self.settings.email_pass)
                conn.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportFailure(f"could not send to {to}: {e}") from e
