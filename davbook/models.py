"""Records exchanged between davbook and its callers.

Instances are built fresh on every call and never mutated in place by the
library. Two records are equal when all of their fields are equal.
"""


class _Record:
    _fields: tuple = ()

    def __init__(self, **kwargs):
        unknown = set(kwargs) - set(self._fields)
        if unknown:
            raise TypeError(
                "{} got unexpected fields: {}".format(
                    type(self).__name__, ", ".join(sorted(unknown))
                )
            )
        for name in self._fields:
            setattr(self, name, kwargs.get(name))

    def replace(self, **changes):
        """Return a copy with ``changes`` applied."""
        values = {name: getattr(self, name) for name in self._fields}
        values.update(changes)
        return type(self)(**values)

    def as_dict(self):
        return {name: getattr(self, name) for name in self._fields}

    def __eq__(self, other):
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        return "<{} {}>".format(
            type(self).__name__,
            " ".join(f"{name}={getattr(self, name)!r}" for name in self._fields),
        )


class Account(_Record):
    """A server principal.

    :param server_url: The URL the account was configured with.
    :param root_url: Scheme and host of the server, used to resolve hrefs.
    :param principal_url: The ``current-user-principal`` of the user.
    :param home_url: The ``addressbook-home-set`` below which address books
        are discovered.
    """

    _fields = (
        "server_url",
        "root_url",
        "principal_url",
        "home_url",
        "account_type",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("account_type", "carddav")
        super().__init__(**kwargs)


class AddressBook(_Record):
    """A contact collection.

    ``ctag`` summarizes the state of the whole collection, ``sync_token``
    enables incremental sync. ``resourcetype`` and ``reports`` are lists of
    local element names as reported by the server.
    """

    _fields = (
        "url",
        "ctag",
        "display_name",
        "resourcetype",
        "sync_token",
        "reports",
    )


class VCard(_Record):
    """A single contact resource with its entity tag and raw payload."""

    _fields = ("url", "etag", "data")


class DAVResponse(_Record):
    """One ``<response>`` of a multistatus.

    ``props`` maps :class:`davbook.davxml.Prop` to the decoded value. Only
    properties reported with a successful status are present.
    """

    _fields = ("href", "status", "ok", "props")

    def __init__(self, **kwargs):
        kwargs.setdefault("props", {})
        kwargs.setdefault("ok", False)
        super().__init__(**kwargs)
