from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from base64 import b64encode
from ssl import create_default_context

import aiohttp
import requests.auth
from requests.utils import parse_dict_header

from . import __version__
from . import exceptions
from .utils import expand_path

logger = logging.getLogger(__name__)
USERAGENT = f"davbook/{__version__}"


class AuthMethod(ABC):
    """Credentials of a DAV account and how to present them to the server."""

    def __init__(self, username, password):
        self.username = username
        self.password = password

    def __eq__(self, other):
        return isinstance(other, AuthMethod) and (
            type(self),
            self.username,
            self.password,
        ) == (type(other), other.username, other.password)

    def __repr__(self):
        return f"<{type(self).__name__} username={self.username!r}>"

    def handle_401(self, response):
        """Take note of the challenge in a 401 ``response``."""

    @abstractmethod
    def get_auth_header(self, method, url):
        """Return the ``Authorization`` value for ``method`` on ``url``, or an
        empty string to send the request without one."""


class BasicAuthMethod(AuthMethod):
    def get_auth_header(self, method, url):
        token = b64encode(f"{self.username}:{self.password}".encode("utf-8"))
        return "Basic " + token.decode("ascii")


_DIGEST_CHALLENGE = re.compile(r"digest\s+", flags=re.IGNORECASE)


class DigestAuthMethod(AuthMethod):
    # One requests helper per credentials, so the nonce of an earlier
    # request carries over to new sessions.
    _helpers: dict = {}

    def __init__(self, username, password):
        super().__init__(username, password)
        self._helper = self._helpers.setdefault(
            (username, password), requests.auth.HTTPDigestAuth(username, password)
        )

    @property
    def _state(self):
        self._helper.init_per_thread_state()
        return self._helper._thread_local

    def handle_401(self, response):
        challenge = response.headers.get("WWW-Authenticate", "")
        match = _DIGEST_CHALLENGE.search(challenge)
        if match:
            self._state.chal = parse_dict_header(challenge[match.end() :])

    def get_auth_header(self, method, url):
        if not self._state.chal:
            return ""
        return self._helper.build_digest_header(method, url)


AUTH_METHODS = {"basic": BasicAuthMethod, "digest": DigestAuthMethod}


def prepare_auth(auth, username, password):
    """Return the :class:`AuthMethod` for an account's ``auth`` setting.

    Without credentials there is nothing to authenticate with and ``None`` is
    returned. Basic authentication is the default.
    """
    if not (username and password):
        if auth:
            raise exceptions.UserError(
                f"You need to specify username and password for {auth} "
                "authentication."
            )
        return None

    try:
        method = AUTH_METHODS[auth or "basic"]
    except KeyError:
        raise exceptions.UserError(
            f"Unknown authentication method: {auth}",
            problems=["Use one of: " + ", ".join(sorted(AUTH_METHODS))],
        ) from None
    return method(username, password)


def prepare_verify(verify, verify_fingerprint):
    """Build the ``ssl`` argument for aiohttp from an account's TLS settings.

    ``verify`` is the path of a CA bundle; ``verify_fingerprint`` pins the
    server certificate by its SHA-256 fingerprint, with or without colons.
    """
    if verify is not None:
        if not isinstance(verify, str):
            raise exceptions.UserError(
                f"Invalid value for verify ({verify}), must be a path to a PEM-file."
            )
        return create_default_context(cafile=expand_path(verify))

    if verify_fingerprint is None:
        return None
    if not isinstance(verify_fingerprint, str):
        raise exceptions.UserError(
            f"Invalid value for verify_fingerprint ({verify_fingerprint}), "
            "must be a string."
        )
    try:
        return aiohttp.Fingerprint(bytes.fromhex(verify_fingerprint.replace(":", "")))
    except ValueError as e:
        raise exceptions.UserError(
            f"Invalid value for verify_fingerprint ({verify_fingerprint}): {e}"
        ) from None


def prepare_client_cert(cert):
    """Expand the paths of a client certificate: a single PEM file, or a
    ``(certfile, keyfile)`` pair."""
    if cert is None:
        return None
    if isinstance(cert, (str, bytes)):
        return expand_path(cert)
    return tuple(expand_path(path) for path in cert)


def merge_headers(*mappings):
    """Merge header mappings left to right. A later header replaces an
    earlier one with the same name, regardless of case."""
    rv = {}
    for mapping in mappings:
        for name, value in (mapping or {}).items():
            for existing in [k for k in rv if k.lower() == name.lower()]:
                del rv[existing]
            rv[name] = value
    return rv


def exclude_headers(headers, names_to_exclude):
    """Return a copy of ``headers`` without the headers named in
    ``names_to_exclude`` (compared case-insensitively)."""
    if not headers:
        return {}
    excluded = {name.lower() for name in names_to_exclude or ()}
    return {k: v for k, v in headers.items() if k.lower() not in excluded}


def _may_authorize(headers, headers_to_exclude):
    names = {name.lower() for name in headers}
    names.update(name.lower() for name in headers_to_exclude or ())
    return "authorization" not in names


async def request(
    method,
    url,
    session,
    auth=None,
    raise_for_status=True,
    headers_to_exclude=None,
    **kwargs,
):
    """Wrapper method for requests, to ease logging and mocking as well as to
    support auth methods currently unsupported by aiohttp.

    Parameters should be the same as for ``aiohttp.request``, except:

    :param session: An ``aiohttp.ClientSession`` to use.
    :param auth: The HTTP ``AuthMethod`` to use for authentication.
    :param raise_for_status: If false, the response is returned whatever its
        status is. Otherwise 412 raises :class:`PreconditionFailed`, 404 and
        410 raise :class:`NotFoundError` and any other error status raises
        ``aiohttp.ClientResponseError``.
    :param headers_to_exclude: Header names the caller stripped from
        ``headers``. If ``Authorization`` is among them, or ``headers``
        already carries one, ``auth`` is not applied.

    The body of the returned response is already read.
    """

    logger.debug("=" * 20)
    logger.debug(f"{method} {url}")
    logger.debug(kwargs.get("headers", {}))
    logger.debug(kwargs.get("data", None))
    logger.debug("Sending request...")

    assert isinstance(kwargs.get("data", b""), bytes)

    cert = kwargs.pop("cert", None)
    if cert is not None:
        ssl_context = kwargs.pop("ssl", create_default_context())
        if isinstance(cert, tuple):
            ssl_context.load_cert_chain(*cert)
        else:
            ssl_context.load_cert_chain(cert)
        kwargs["ssl"] = ssl_context

    headers = dict(kwargs.pop("headers", None) or {})
    if auth and not _may_authorize(headers, headers_to_exclude):
        auth = None

    num_401 = 0
    while num_401 < 2:
        if auth:
            authorization = auth.get_auth_header(method, url)
            if authorization:
                headers["Authorization"] = authorization
        response = await session.request(method, url, headers=headers, **kwargs)

        if response.ok or not auth:
            # we don't need to do the 401-loop if we don't do auth in the first place
            break

        if response.status == 401:
            num_401 += 1
            auth.handle_401(response)
        else:
            # some other error, will be handled later on
            break

    await response.read()

    logger.debug(response.status)
    logger.debug(response.headers)

    if not raise_for_status:
        return response

    if response.status == 412:
        raise exceptions.PreconditionFailed(response.reason)
    if response.status in (404, 410):
        raise exceptions.NotFoundError(response.reason)

    response.raise_for_status()
    return response
