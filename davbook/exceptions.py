"""
Contains exception classes used by davbook. Not all exceptions are here, only
the most commonly used ones.
"""


class Error(Exception):
    """Baseclass for all errors."""

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if getattr(self, key, object()) is not None:  # pragma: no cover
                raise TypeError(f"Invalid argument: {key}")
            setattr(self, key, value)

        super().__init__(*args)


class UserError(Error, ValueError):
    """Wrapper exception to be used to signify the traceback should not be
    shown to the user."""

    problems = None

    def __str__(self):
        msg = Error.__str__(self)
        for problem in self.problems or ():
            msg += f"\n  - {problem}"

        return msg


class MissingFieldsError(UserError):
    """A record lacks attributes an operation needs."""

    fields = None


class PreconditionFailed(Error):
    """
      - The item doesn't exist although it should
      - The item exists although it shouldn't
      - The etags don't match.

    Due to CardDAV we can't actually say which error it is.
    """


class NotFoundError(PreconditionFailed):
    """Item not found"""


class InvalidResponse(Error, ValueError):
    """The server returned an invalid result."""


class InvalidXMLResponse(InvalidResponse):
    """The server returned XML we could not parse."""
