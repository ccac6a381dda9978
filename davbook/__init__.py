"""
davbook is an asynchronous CardDAV client library. See the README for more
details.
"""

__version__ = "0.1.0"

from .account import create_account  # noqa: E402
from .addressbook import create_vcard  # noqa: E402
from .addressbook import delete_vcard  # noqa: E402
from .addressbook import fetch_address_books  # noqa: E402
from .addressbook import fetch_vcards  # noqa: E402
from .addressbook import update_vcard  # noqa: E402
from .models import Account  # noqa: E402
from .models import AddressBook  # noqa: E402
from .models import VCard  # noqa: E402
from .session import DAVSession  # noqa: E402

__all__ = [
    "Account",
    "AddressBook",
    "DAVSession",
    "VCard",
    "create_account",
    "create_vcard",
    "delete_vcard",
    "fetch_address_books",
    "fetch_vcards",
    "update_vcard",
]
