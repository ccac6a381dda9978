"""Protocol-level requests.

XML requests (PROPFIND, REPORT) decode the multistatus answer and raise on
error statuses. The object requests (PUT, DELETE) return the raw
``aiohttp.ClientResponse`` whatever its status, so that a failed precondition
reaches the caller as a 412 response.
"""
import logging

from . import davxml
from .http import exclude_headers
from .http import merge_headers

dav_logger = logging.getLogger(__name__)


async def dav_request(
    session,
    method,
    url,
    body=None,
    depth=None,
    default_namespace=None,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    """Send an XML ``body`` to ``url`` and return the decoded responses."""
    depth_header = {} if depth is None else {"Depth": str(depth)}
    headers = exclude_headers(
        merge_headers(session.get_default_headers(), depth_header, headers),
        headers_to_exclude,
    )
    data = b"" if body is None else davxml.serialize(body, default_namespace)

    response = await session.request(
        method,
        url,
        data=data,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        **(request_options or {}),
    )
    rv = davxml.parse_multistatus(await response.read())
    dav_logger.debug(f"{method} {url} returned {len(rv)} responses")
    return rv


async def propfind(
    session,
    url,
    props,
    depth=None,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    """Fetch ``props`` (an iterable of :class:`davbook.davxml.Prop`)."""
    return await dav_request(
        session,
        "PROPFIND",
        url,
        body=davxml.propfind_body(props),
        depth=depth,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )


def _object_headers(session, defaults, headers, headers_to_exclude):
    return exclude_headers(
        merge_headers({"User-Agent": session.useragent}, defaults, headers),
        headers_to_exclude,
    )


def _encode(data):
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


async def create_object(
    session, url, data, headers=None, headers_to_exclude=None, request_options=None
):
    return await session.request(
        "PUT",
        url,
        data=_encode(data),
        headers=_object_headers(session, None, headers, headers_to_exclude),
        raise_for_status=False,
        headers_to_exclude=headers_to_exclude,
        **(request_options or {}),
    )


async def update_object(
    session,
    url,
    data,
    etag,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    return await session.request(
        "PUT",
        url,
        data=_encode(data),
        headers=_object_headers(
            session, {"If-Match": etag}, headers, headers_to_exclude
        ),
        raise_for_status=False,
        headers_to_exclude=headers_to_exclude,
        **(request_options or {}),
    )


async def delete_object(
    session, url, etag, headers=None, headers_to_exclude=None, request_options=None
):
    return await session.request(
        "DELETE",
        url,
        headers=_object_headers(
            session, {"If-Match": etag}, headers, headers_to_exclude
        ),
        raise_for_status=False,
        headers_to_exclude=headers_to_exclude,
        **(request_options or {}),
    )
