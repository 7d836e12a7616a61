"""
Portfolio API - Contact
=======================

Contact form submissions, listed as threads by sender email. Replying and
deleting need an admin token.
"""

from datetime import datetime, timezone
from typing import Annotated
from uuid import UUID, uuid4

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy import select

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.contacts import ContactNotifier, get_notifier, group_contacts_by_email
from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.models import Contact, ContactStatus
from portfolio_api.core.schemas import (
    ContactCreate,
    ContactReply,
    ContactResponse,
    ContactThreadResponse,
    MessageResponse,
)

router = APIRouter(prefix="/contact", tags=["Contact"])

logger = structlog.get_logger()

Notifier = Annotated[ContactNotifier, Depends(get_notifier)]


async def get_contact_or_404(contact_id: UUID, db) -> Contact:
    """Get contact submission by ID or raise 404."""
    contact = await db.get(Contact, contact_id)
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the contact form",
)
async def submit_contact(
    data: ContactCreate,
    db: DbSession,
    notifier: Notifier,
) -> MessageResponse:
    """
    Store a contact submission and notify the site owner.

    The submission is committed before the notification is attempted;
    notification failures do not affect the response.
    """
    contact = Contact(
        id=uuid4(),
        name=data.name,
        email=str(data.email),
        message=data.message,
        status=ContactStatus.PENDING,
    )
    db.add(contact)
    await db.commit()
    logger.info("contact_submitted", contact_id=str(contact.id))

    await notifier.notify_new_contact(contact.name, contact.email, contact.message)

    return MessageResponse(message="Message sent successfully")


@router.get(
    "",
    response_model=list[ContactThreadResponse],
    summary="List contact threads",
)
async def list_contact_threads(db: DbSession) -> list[ContactThreadResponse]:
    """Submissions grouped by sender email, most recently active thread first."""
    result = await db.execute(select(Contact).order_by(Contact.created_at))
    threads = group_contacts_by_email(result.scalars().all())

    return [
        ContactThreadResponse(
            email=thread.email,
            name=thread.name,
            messages=[ContactResponse.model_validate(m) for m in thread.messages],
            total_messages=thread.total_messages,
            has_unreplied=thread.has_unreplied,
            latest_message=ContactResponse.model_validate(thread.latest_message),
        )
        for thread in threads
    ]


@router.post(
    "/{contact_id}/reply",
    response_model=ContactResponse,
    summary="Reply to a submission",
)
async def reply_to_contact(
    contact_id: UUID,
    data: ContactReply,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> ContactResponse:
    contact = await get_contact_or_404(contact_id, db)

    contact.reply = data.reply
    contact.reply_date = datetime.now(timezone.utc)
    contact.status = ContactStatus.REPLIED

    await db.commit()
    await db.refresh(contact)
    return ContactResponse.model_validate(contact)


@router.delete("/{contact_id}", response_model=MessageResponse, summary="Delete a submission")
async def delete_contact(
    contact_id: UUID,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    contact = await get_contact_or_404(contact_id, db)
    await db.delete(contact)
    await db.commit()
    return MessageResponse(message="Contact deleted successfully")
