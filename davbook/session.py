import urllib.parse as urlparse
from inspect import getfullargspec

import aiohttp

from . import http
from . import utils
from .http import USERAGENT
from .http import prepare_auth
from .http import prepare_client_cert
from .http import prepare_verify


class DAVSession:
    """A helper class to connect to DAV servers.

    Holds the base URL and the connection settings shared by all requests.
    The connector is owned by the caller; every request runs in its own
    short-lived ``aiohttp.ClientSession`` on top of it.
    """

    connector: aiohttp.BaseConnector

    @classmethod
    def init_and_remaining_args(cls, **kwargs):
        def is_arg(k):
            """Return true if ``k`` is an argument of ``cls.__init__``."""
            return k in argspec.args or k in argspec.kwonlyargs

        argspec = getfullargspec(cls.__init__)
        self_args, remainder = utils.split_dict(kwargs, is_arg)

        return cls(**self_args), remainder

    def __init__(
        self,
        url,
        username="",
        password="",
        verify=None,
        auth=None,
        useragent=USERAGENT,
        verify_fingerprint=None,
        auth_cert=None,
        *,
        connector: aiohttp.BaseConnector,
    ):
        self._settings = {
            "cert": prepare_client_cert(auth_cert),
        }
        auth = prepare_auth(auth, username, password)
        if auth:
            self._settings["auth"] = auth

        ssl = prepare_verify(verify, verify_fingerprint)
        if ssl:
            self._settings["ssl"] = ssl

        self.username = username
        self.useragent = useragent
        self.url = url.rstrip("/") + "/"
        self.connector = connector

    def __repr__(self):
        return f"<DAVSession url={self.url!r} username={self.username!r}>"

    def absolute_url(self, path):
        if not path:
            return self.url
        return urlparse.urljoin(self.url, path)

    async def request(self, method, path, **kwargs):
        url = self.absolute_url(path)

        more = dict(self._settings)
        more.update(kwargs)

        async with self._session as session:
            return await http.request(method, url, session=session, **more)

    @property
    def _session(self):
        """Return a new session for requests."""

        return aiohttp.ClientSession(
            connector=self.connector,
            connector_owner=False,
        )

    def get_default_headers(self):
        return {
            "User-Agent": self.useragent,
            "Content-Type": "application/xml; charset=utf-8",
        }
