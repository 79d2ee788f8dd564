"""
Mocked outbound mail.

Nothing is sent; messages are logged and kept in `outbox` so callers (and
tests) can see what would have gone out.
"""

import logging

logger = logging.getLogger(__name__)


class MockMailer:
    def __init__(self):
        self.outbox: list[dict] = []

    def send(self, to: str, subject: str, body: str) -> None:
        self.outbox.append({"to": to, "subject": subject, "body": body})
        logger.info("mail to %s: %s", to, subject)


def get_mailer() -> MockMailer:
    return MockMailer()
