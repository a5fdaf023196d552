"""Sample address-book application built on crudkit."""

from crudkit.addressbook.app import (
    AddressBook,
    build_addressbook,
    create_addressbook_app,
    init_schema,
)
from crudkit.addressbook.models import Contact, Tag
from crudkit.addressbook.schemas import ContactSchema, TagSchema

__all__ = [
    "AddressBook",
    "Contact",
    "ContactSchema",
    "Tag",
    "TagSchema",
    "build_addressbook",
    "create_addressbook_app",
    "init_schema",
]
