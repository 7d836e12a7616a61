"""
Contacts
========

Contact-form threading and owner notifications.
"""

from portfolio_api.core.contacts.grouping import ContactThread, group_contacts_by_email
from portfolio_api.core.contacts.notifier import ContactNotifier, get_notifier

__all__ = ["ContactNotifier", "ContactThread", "get_notifier", "group_contacts_by_email"]
