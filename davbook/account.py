"""Account bootstrap: find the principal and address book home of a user."""
import logging
import urllib.parse as urlparse

import aiohttp

from . import davxml
from . import exceptions
from .http import exclude_headers
from .http import merge_headers
from .models import Account
from .utils import server_root

dav_logger = logging.getLogger(__name__)

WELL_KNOWN_URI = "/.well-known/carddav"


async def _find_property(session, url, prop, headers, headers_to_exclude, request_options):
    """PROPFIND a single href-valued property with depth 0.

    Returns the response, for its final URL after redirects, and the first
    value found.
    """
    headers = exclude_headers(
        merge_headers(session.get_default_headers(), {"Depth": "0"}, headers),
        headers_to_exclude,
    )
    response = await session.request(
        "PROPFIND",
        url,
        headers=headers,
        data=davxml.serialize(davxml.propfind_body([prop])),
        **(request_options or {}),
    )
    for res in davxml.parse_multistatus(await response.read()):
        value = res.props.get(prop)
        if value:
            return response, value
    return response, None


def _collection_url(base, href):
    return urlparse.urljoin(str(base), href).rstrip("/") + "/"


async def find_principal(session, headers=None, headers_to_exclude=None, request_options=None):
    try:
        return await _find_principal_impl(
            session, "", headers, headers_to_exclude, request_options
        )
    except (aiohttp.ClientResponseError, exceptions.Error):
        dav_logger.debug("Trying out well-known URI")
        return await _find_principal_impl(
            session, WELL_KNOWN_URI, headers, headers_to_exclude, request_options
        )


async def _find_principal_impl(session, url, headers, headers_to_exclude, request_options):
    response, href = await _find_property(
        session,
        url,
        davxml.CURRENT_USER_PRINCIPAL,
        headers,
        headers_to_exclude,
        request_options,
    )
    if href is None:
        # Servers without current-user-principal, e.g. Synology NAS.
        dav_logger.debug(
            f"No current-user-principal returned, re-using URL {response.url}"
        )
        return _collection_url(response.url, "")
    return _collection_url(response.url, href)


async def find_home(session, principal_url, headers=None, headers_to_exclude=None, request_options=None):
    response, href = await _find_property(
        session,
        principal_url,
        davxml.ADDRESSBOOK_HOME_SET,
        headers,
        headers_to_exclude,
        request_options,
    )
    if href is None:
        raise exceptions.InvalidResponse("Couldn't find addressbook-home-set.")
    return _collection_url(response.url, href)


async def create_account(session, headers=None, headers_to_exclude=None, request_options=None):
    """Discover the account behind ``session``.

    The principal is looked up at the session URL first and at
    ``/.well-known/carddav`` if that fails. ``root_url`` is scheme and host of
    the server that answered.
    """
    principal_url = await find_principal(
        session, headers, headers_to_exclude, request_options
    )
    home_url = await find_home(
        session, principal_url, headers, headers_to_exclude, request_options
    )
    dav_logger.debug(f"Found principal {principal_url}, home {home_url}")
    return Account(
        server_url=session.url,
        root_url=server_root(principal_url),
        principal_url=principal_url,
        home_url=home_url,
    )
