"""
Contact form, thread grouping and notifier tests.
"""

import smtplib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.contacts import ContactNotifier, group_contacts_by_email
from portfolio_api.core.models import Contact, ContactStatus

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class Msg:
    email: str
    status: str
    created_at: datetime
    name: str = "Sender"
    message: str = "Hello"


# ==========================================================================
# Grouping
# ==========================================================================

class TestGroupContactsByEmail:

    def test_pending_and_replied_from_same_sender(self):
        t1, t2 = T0, T0 + timedelta(hours=1)
        threads = group_contacts_by_email([
            Msg("a@x.com", "pending", t1),
            Msg("a@x.com", "replied", t2),
        ])

        assert len(threads) == 1
        thread = threads[0]
        assert thread.total_messages == 2
        assert thread.has_unreplied is True
        assert thread.latest_message.created_at == t2

    def test_messages_oldest_first_threads_newest_first(self):
        threads = group_contacts_by_email([
            Msg("a@x.com", "replied", T0 + timedelta(minutes=5)),
            Msg("b@x.com", "replied", T0 + timedelta(minutes=10)),
            Msg("a@x.com", "replied", T0),
            Msg("a@x.com", "pending", T0 + timedelta(minutes=20)),
        ])

        assert [t.email for t in threads] == ["a@x.com", "b@x.com"]
        assert [m.created_at for m in threads[0].messages] == [
            T0,
            T0 + timedelta(minutes=5),
            T0 + timedelta(minutes=20),
        ]
        assert threads[1].has_unreplied is False

    def test_email_match_is_case_sensitive(self):
        threads = group_contacts_by_email([
            Msg("A@x.com", "pending", T0),
            Msg("a@x.com", "pending", T0),
        ])
        assert {t.email for t in threads} == {"A@x.com", "a@x.com"}

    def test_latest_message_tie_prefers_first_inserted(self):
        first = Msg("a@x.com", "replied", T0, message="first")
        second = Msg("a@x.com", "pending", T0, message="second")

        thread = group_contacts_by_email([first, second])[0]

        assert thread.latest_message is first
        assert [m.message for m in thread.messages] == ["first", "second"]

    def test_accepts_enum_status(self):
        thread = group_contacts_by_email([Msg("a@x.com", ContactStatus.PENDING, T0)])[0]
        assert thread.has_unreplied is True

    def test_empty_input(self):
        assert group_contacts_by_email([]) == []


# ==========================================================================
# Notifier
# ==========================================================================

class TestContactNotifier:

    async def test_disabled_without_smtp_host(self):
        notifier = ContactNotifier(host="", recipient="")
        assert notifier.enabled is False
        assert await notifier.notify_new_contact("Ann", "ann@x.com", "Hi") is True

    async def test_delivery_failure_is_swallowed(self, monkeypatch):
        notifier = ContactNotifier(host="smtp.invalid", recipient="owner@x.com")

        def refuse(mail):
            raise smtplib.SMTPConnectError(421, "unavailable")

        monkeypatch.setattr(notifier, "_deliver", refuse)

        assert await notifier.notify_new_contact("Ann", "ann@x.com", "Hi") is False

    def test_message_headers(self):
        notifier = ContactNotifier(host="smtp.x.com", sender="site@x.com", recipient="owner@x.com")
        mail = notifier.build_message("Ann", "ann@x.com", "Hello there")

        assert mail["Subject"] == "New Contact Form Submission from Ann"
        assert mail["To"] == "owner@x.com"
        assert mail["Reply-To"] == "ann@x.com"
        assert "Hello there" in mail.get_content()


# ==========================================================================
# Endpoints
# ==========================================================================

class TestContactEndpoints:

    async def test_submit(self, client: AsyncClient, db_session: AsyncSession, notifier):
        response = await client.post(
            "/api/contact",
            json={"name": "Ann", "email": "ann@example.com", "message": "Let's talk"},
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Message sent successfully"
        contact = (await db_session.execute(select(Contact))).scalar_one()
        assert contact.status == ContactStatus.PENDING
        assert notifier.sent == [("Ann", "ann@example.com", "Let's talk")]

    async def test_submit_succeeds_when_notification_fails(
        self, client: AsyncClient, db_session: AsyncSession, notifier
    ):
        notifier.fail = True

        response = await client.post(
            "/api/contact",
            json={"name": "Ann", "email": "ann@example.com", "message": "Hi"},
        )

        assert response.status_code == 201
        assert (await db_session.execute(select(Contact))).scalar_one().email == "ann@example.com"

    async def test_submit_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/contact", json={"name": "Ann"})
        assert response.status_code == 422

    async def test_submit_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/contact",
            json={"name": "Ann", "email": "not-an-email", "message": "Hi"},
        )
        assert response.status_code == 422

    async def test_list_is_public(self, client: AsyncClient):
        response = await client.get("/api/contact")
        assert response.status_code == 200
        assert response.json() == []

    async def test_list_threads(self, client: AsyncClient, db_session: AsyncSession):
        db_session.add_all([
            Contact(id=uuid4(), name="Ann", email="ann@x.com", message="1", created_at=T0),
            Contact(id=uuid4(), name="Bob", email="bob@x.com", message="2",
                    created_at=T0 + timedelta(hours=2)),
            Contact(id=uuid4(), name="Ann", email="ann@x.com", message="3",
                    created_at=T0 + timedelta(hours=1), status=ContactStatus.REPLIED),
        ])
        await db_session.commit()

        response = await client.get("/api/contact")

        assert response.status_code == 200
        threads = response.json()
        assert [t["email"] for t in threads] == ["bob@x.com", "ann@x.com"]
        ann = threads[1]
        assert ann["total_messages"] == 2
        assert ann["has_unreplied"] is True
        assert [m["message"] for m in ann["messages"]] == ["1", "3"]
        assert ann["latest_message"]["message"] == "3"

    async def test_reply(self, client: AsyncClient, admin_headers: dict, db_session: AsyncSession):
        contact = Contact(id=uuid4(), name="Ann", email="ann@x.com", message="Hi")
        db_session.add(contact)
        await db_session.commit()

        response = await client.post(
            f"/api/contact/{contact.id}/reply",
            json={"reply": "Thanks!"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "replied"
        assert data["reply"] == "Thanks!"
        assert data["reply_date"] is not None

    async def test_reply_unknown_contact(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            f"/api/contact/{uuid4()}/reply",
            json={"reply": "Thanks!"},
            headers=admin_headers,
        )
        assert response.status_code == 404

    async def test_delete(self, client: AsyncClient, admin_headers: dict, db_session: AsyncSession):
        contact = Contact(id=uuid4(), name="Ann", email="ann@x.com", message="Hi")
        db_session.add(contact)
        await db_session.commit()

        response = await client.delete(f"/api/contact/{contact.id}", headers=admin_headers)
        assert response.status_code == 200

        response = await client.delete(f"/api/contact/{contact.id}", headers=admin_headers)
        assert response.status_code == 404

    async def test_delete_requires_auth(self, client: AsyncClient):
        response = await client.delete(f"/api/contact/{uuid4()}")
        assert response.status_code == 401
