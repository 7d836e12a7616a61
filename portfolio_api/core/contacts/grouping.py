"""
Contact thread grouping.

Turns flat contact submissions into per-sender threads for the admin inbox.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from portfolio_api.core.models import ContactStatus, as_utc


class Submission(Protocol):
    name: str
    email: str
    created_at: datetime
    status: Any


@dataclass
class ContactThread:
    """All submissions from one email, oldest message first."""

    email: str
    messages: list[Any] = field(default_factory=list)
    latest_message: Any = None

    @property
    def name(self) -> str:
        return self.latest_message.name

    @property
    def total_messages(self) -> int:
        return len(self.messages)

    @property
    def has_unreplied(self) -> bool:
        return any(_is_pending(message) for message in self.messages)


def _is_pending(message: Submission) -> bool:
    return message.status in (ContactStatus.PENDING, ContactStatus.PENDING.value)


def _created(message: Submission) -> datetime:
    return as_utc(message.created_at)


def group_contacts_by_email(submissions: Iterable[Submission]) -> list[ContactThread]:
    """
    Group submissions by exact sender email.

    Within a thread, messages are ordered by ``created_at`` ascending. Among
    messages sharing the newest timestamp, the first one seen is the
    ``latest_message``. Threads are ordered most recently active first.
    """
    threads: dict[str, ContactThread] = {}

    for submission in submissions:
        thread = threads.get(submission.email)
        if thread is None:
            thread = threads[submission.email] = ContactThread(email=submission.email)
        thread.messages.append(submission)
        # Strictly newer only, so ties keep the earlier insertion
        if thread.latest_message is None or _created(submission) > _created(thread.latest_message):
            thread.latest_message = submission

    for thread in threads.values():
        thread.messages.sort(key=_created)

    return sorted(
        threads.values(),
        key=lambda thread: _created(thread.latest_message),
        reverse=True,
    )
