"""Address book discovery, vCard enumeration and vCard mutations.

All operations take a :class:`davbook.session.DAVSession` followed by keyword
arguments. The following ones are accepted everywhere:

:param headers: Headers merged over the defaults of the operation. Header
    names are compared case-insensitively.
:param headers_to_exclude: Names of headers to strip after the merge, so an
    excluded header is never sent, default or not.
:param request_options: Extra keyword arguments for ``aiohttp``, e.g.
    ``timeout``.
"""
import logging

import aiostream

from . import davxml
from . import exceptions
from .collection import collection_query
from .collection import supported_report_set
from .http import merge_headers
from .models import AddressBook
from .models import VCard
from .request import create_object
from .request import delete_object
from .request import propfind
from .request import update_object
from .utils import absolute_url
from .utils import find_missing_field_names
from .utils import is_absolute_url
from .utils import url_path

dav_logger = logging.getLogger(__name__)

VCARD_CONTENT_TYPE = "text/vcard; charset=utf-8"

ADDRESSBOOK_PROPS = (
    davxml.DISPLAYNAME,
    davxml.GETCTAG,
    davxml.RESOURCETYPE,
    davxml.SYNC_TOKEN,
)
VCARD_PROPS = (davxml.GETETAG, davxml.ADDRESS_DATA)


def _require_fields(obj, fields, what, operation):
    if obj is None:
        raise exceptions.UserError(f"no {what} for {operation}")
    missing = find_missing_field_names(obj, fields)
    if missing:
        raise exceptions.MissingFieldsError(
            "{} must have {} before {}".format(what, ", ".join(missing), operation),
            fields=missing,
        )


async def addressbook_query(
    session,
    url,
    props,
    filters=None,
    depth=None,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    """Send an ``addressbook-query`` REPORT.

    :param props: The :class:`davbook.davxml.Prop` to return per vCard.
    :param filters: Elements for the query's ``<filter>``. Tags without a
        namespace are taken to be CardDAV ones. By default all vCards having
        an ``FN`` property match.
    """
    return await collection_query(
        session,
        url,
        davxml.addressbook_query_body(props, filters),
        default_namespace=davxml.CARDDAV,
        depth=depth,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )


async def addressbook_multiget(
    session,
    url,
    props,
    object_urls,
    depth="1",
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    """Fetch ``props`` of the vCards at ``object_urls`` in one REPORT."""
    return await collection_query(
        session,
        url,
        davxml.addressbook_multiget_body(props, object_urls),
        default_namespace=davxml.CARDDAV,
        depth=depth,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )


def _is_addressbook(res):
    return "addressbook" in (res.props.get(davxml.RESOURCETYPE) or ())


def _to_addressbook(res, root_url):
    display_name = res.props.get(davxml.DISPLAYNAME)
    if not isinstance(display_name, str):
        display_name = ""
    dav_logger.debug(f"Found address book named {display_name!r}, props: {res.props}")
    return AddressBook(
        url=absolute_url(root_url, res.href),
        ctag=res.props.get(davxml.GETCTAG),
        display_name=display_name,
        resourcetype=list(res.props.get(davxml.RESOURCETYPE) or ()),
        sync_token=res.props.get(davxml.SYNC_TOKEN),
    )


async def fetch_address_books(
    session,
    account,
    props=None,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
    report_task_limit=None,
):
    """Discover the address books below ``account.home_url``.

    :param account: A :class:`davbook.models.Account` with ``home_url`` and
        ``root_url``.
    :param props: Properties to request instead of display name, ctag,
        resource type and sync token.
    :param report_task_limit: Maximum number of concurrent
        ``supported-report-set`` lookups. ``None`` means no limit.
    :returns: A list of :class:`davbook.models.AddressBook` in the order the
        server listed them, each with ``reports`` filled in.
    """
    _require_fields(account, ("home_url", "root_url"), "account", "fetch_address_books")

    res = await propfind(
        session,
        account.home_url,
        props or ADDRESSBOOK_PROPS,
        depth=1,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )
    address_books = [
        _to_addressbook(r, account.root_url) for r in res if _is_addressbook(r)
    ]
    if not address_books:
        return []

    async def with_reports(address_book):
        reports = await supported_report_set(
            session,
            address_book,
            headers=headers,
            headers_to_exclude=headers_to_exclude,
            request_options=request_options,
        )
        return address_book.replace(reports=reports)

    xs = aiostream.stream.iterate(address_books)
    xs = aiostream.stream.map(xs, with_reports, task_limit=report_task_limit)
    return await aiostream.stream.list(xs)


def _to_vcard(res, address_book_url):
    return VCard(
        url=absolute_url(address_book_url, res.href),
        etag=res.props.get(davxml.GETETAG),
        data=res.props.get(davxml.ADDRESS_DATA),
    )


async def fetch_vcards(
    session,
    address_book,
    object_urls=None,
    url_filter=None,
    use_multiget=True,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    """Fetch the vCards of ``address_book``.

    :param object_urls: URLs of the vCards to fetch. If not given, all members
        of the address book are listed first.
    :param url_filter: Called with each absolute vCard URL; vCards for which
        it returns false are skipped.
    :param use_multiget: Fetch exactly the selected URLs with an
        ``addressbook-multiget``. Otherwise a single ``addressbook-query``
        fetches everything.
    :returns: A list of :class:`davbook.models.VCard` in server order.
    """
    _require_fields(address_book, ("url",), "address_book", "fetch_vcards")
    dav_logger.debug(f"Fetching vcards from {address_book.url}")

    if object_urls is None:
        res = await addressbook_query(
            session,
            address_book.url,
            [davxml.GETETAG],
            depth=1,
            headers=headers,
            headers_to_exclude=headers_to_exclude,
            request_options=request_options,
        )
        object_urls = [r.href for r in res if r.ok and r.href]

    urls = [
        url if is_absolute_url(url) else absolute_url(address_book.url, url)
        for url in object_urls
        if url
    ]
    if url_filter is not None:
        urls = [url for url in urls if url_filter(url)]
    hrefs = [url_path(url) for url in urls]

    if not hrefs:
        return []

    if use_multiget:
        res = await addressbook_multiget(
            session,
            address_book.url,
            VCARD_PROPS,
            hrefs,
            depth=1,
            headers=headers,
            headers_to_exclude=headers_to_exclude,
            request_options=request_options,
        )
    else:
        res = await addressbook_query(
            session,
            address_book.url,
            VCARD_PROPS,
            depth=1,
            headers=headers,
            headers_to_exclude=headers_to_exclude,
            request_options=request_options,
        )

    return [_to_vcard(r, address_book.url) for r in res]


async def create_vcard(
    session,
    address_book,
    vcard_string,
    filename,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    """Upload a new vCard as ``filename`` below ``address_book.url``.

    ``If-None-Match: *`` keeps an existing resource from being overwritten;
    in that case the server answers 412. Returns the raw response.
    """
    _require_fields(address_book, ("url",), "address_book", "create_vcard")
    return await create_object(
        session,
        absolute_url(address_book.url, filename),
        vcard_string,
        headers=merge_headers(
            {"Content-Type": VCARD_CONTENT_TYPE, "If-None-Match": "*"}, headers
        ),
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )


async def update_vcard(
    session, vcard, headers=None, headers_to_exclude=None, request_options=None
):
    """Replace the content at ``vcard.url`` with ``vcard.data``, if its etag
    is still ``vcard.etag``. Returns the raw response; a stale etag shows as
    412."""
    _require_fields(vcard, ("url", "data", "etag"), "vcard", "update_vcard")
    return await update_object(
        session,
        vcard.url,
        vcard.data,
        vcard.etag,
        headers=merge_headers({"Content-Type": VCARD_CONTENT_TYPE}, headers),
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )


async def delete_vcard(
    session, vcard, headers=None, headers_to_exclude=None, request_options=None
):
    _require_fields(vcard, ("url", "etag"), "vcard", "delete_vcard")
    return await delete_object(
        session,
        vcard.url,
        vcard.etag,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )
