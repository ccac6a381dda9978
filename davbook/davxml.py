import copy
import logging
import xml.etree.ElementTree as etree
from collections import namedtuple

from . import exceptions
from .models import DAVResponse

dav_logger = logging.getLogger(__name__)

DAV = "DAV:"
CARDDAV = "urn:ietf:params:xml:ns:carddav"
CALENDARSERVER = "http://calendarserver.org/ns/"

etree.register_namespace("d", DAV)
etree.register_namespace("card", CARDDAV)
etree.register_namespace("cs", CALENDARSERVER)


def _tag(namespace, name):
    return f"{{{namespace}}}{name}"


def local_name(tag):
    return tag.rsplit("}", 1)[-1]


class Prop(namedtuple("Prop", "namespace name")):
    """A namespace-qualified WebDAV property name."""

    __slots__ = ()

    @property
    def tag(self):
        return _tag(self.namespace, self.name)

    @classmethod
    def from_tag(cls, tag):
        if tag.startswith("{"):
            namespace, _, name = tag[1:].partition("}")
            return cls(namespace, name)
        return cls("", tag)

    def __str__(self):
        return self.tag


DISPLAYNAME = Prop(DAV, "displayname")
RESOURCETYPE = Prop(DAV, "resourcetype")
SYNC_TOKEN = Prop(DAV, "sync-token")
GETETAG = Prop(DAV, "getetag")
GETCONTENTTYPE = Prop(DAV, "getcontenttype")
SUPPORTED_REPORT_SET = Prop(DAV, "supported-report-set")
CURRENT_USER_PRINCIPAL = Prop(DAV, "current-user-principal")
GETCTAG = Prop(CALENDARSERVER, "getctag")
ADDRESS_DATA = Prop(CARDDAV, "address-data")
ADDRESSBOOK_HOME_SET = Prop(CARDDAV, "addressbook-home-set")
ADDRESSBOOK_DESCRIPTION = Prop(CARDDAV, "addressbook-description")


# Body builders


def _append_props(parent, props):
    prop = etree.SubElement(parent, _tag(DAV, "prop"))
    for p in props:
        etree.SubElement(prop, p.tag)
    return prop


def propfind_body(props):
    root = etree.Element(_tag(DAV, "propfind"))
    _append_props(root, props)
    return root


def addressbook_query_body(props, filters=None):
    """Build an ``addressbook-query`` REPORT body.

    ``filters`` is an element or a list of elements to place inside
    ``<filter>``. Without it, every vCard having an ``FN`` matches.
    """
    root = etree.Element(_tag(CARDDAV, "addressbook-query"))
    _append_props(root, props)
    filter_element = etree.SubElement(root, _tag(CARDDAV, "filter"))
    if filters is None:
        etree.SubElement(filter_element, _tag(CARDDAV, "prop-filter"), name="FN")
    elif etree.iselement(filters):
        filter_element.append(filters)
    else:
        filter_element.extend(filters)
    return root


def addressbook_multiget_body(props, hrefs):
    root = etree.Element(_tag(CARDDAV, "addressbook-multiget"))
    _append_props(root, props)
    for href in hrefs:
        etree.SubElement(root, _tag(DAV, "href")).text = href
    return root


def serialize(body, default_namespace=None):
    """Serialize ``body`` to UTF-8 bytes.

    Elements without a namespace are placed into ``default_namespace``. The
    given element is left untouched.
    """
    if default_namespace is not None:
        body = copy.deepcopy(body)
        for element in body.iter():
            if isinstance(element.tag, str) and not element.tag.startswith("{"):
                element.tag = _tag(default_namespace, element.tag)

    return etree.tostring(body, encoding="utf-8", xml_declaration=True)


# Response parsing


_BAD_XML_CHARS = (
    b"\x00\x01\x02\x03\x04\x05\x06\x07\x08\x0b\x0c\x0e\x0f"
    b"\x10\x11\x12\x13\x14\x15\x16\x17\x18\x19\x1a\x1b\x1c\x1d\x1e\x1f"
)


def _clean_body(content, bad_chars=_BAD_XML_CHARS):
    new_content = content.translate(None, bad_chars)
    if new_content != content:
        dav_logger.warning(
            "Your server incorrectly returned ASCII control characters in its "
            "XML. davbook ignores those, but this is a bug in your server."
        )
    return new_content


def parse_xml(content):
    try:
        return etree.XML(_clean_body(content))
    except etree.ParseError as e:
        raise exceptions.InvalidXMLResponse(
            "Invalid XML encountered: {}\n"
            "Double-check the URLs in your config.".format(e)
        )


def parse_status(text):
    """Extract the code from a status line such as ``HTTP/1.1 200 OK``."""
    if not text:
        return None
    parts = text.strip().split()
    try:
        return int(parts[1])
    except (ValueError, IndexError):
        return None


def _is_success(status):
    return status is not None and 200 <= status < 300


def _decode_text(element):
    if len(element):
        return [local_name(child.tag) for child in element]
    return element.text or ""


def _decode_token(element):
    return (element.text or "").strip()


def _decode_names(element):
    return [local_name(child.tag) for child in element]


def _decode_reports(element):
    return [
        local_name(report.tag)
        for report in element.iterfind(
            "{DAV:}supported-report/{DAV:}report/*"
        )
    ]


def _decode_href(element):
    href = element.find("{DAV:}href")
    if href is None or not href.text:
        return None
    return href.text.strip()


_DECODERS = {
    RESOURCETYPE: _decode_names,
    SUPPORTED_REPORT_SET: _decode_reports,
    CURRENT_USER_PRINCIPAL: _decode_href,
    ADDRESSBOOK_HOME_SET: _decode_href,
    GETETAG: _decode_token,
    GETCTAG: _decode_token,
    SYNC_TOKEN: _decode_token,
}


def decode_property(element):
    """Decode a property element into ``(Prop, value)``.

    Resource types and report sets become lists of local names, href-valued
    properties the href text, everything else its text content.
    """
    prop = Prop.from_tag(element.tag)
    return prop, _DECODERS.get(prop, _decode_text)(element)


def parse_multistatus(content):
    """Decode a ``207 Multi-Status`` body into a list of
    :class:`davbook.models.DAVResponse`, in document order."""
    root = parse_xml(content)
    rv = []
    for response in root.iter("{DAV:}response"):
        href = response.find("{DAV:}href")
        if href is None or not href.text:
            dav_logger.error("Skipping response, href is missing.")
            continue
        href = href.text.strip()

        status = parse_status(response.findtext("{DAV:}status"))
        props = {}
        any_success = False
        for propstat in response.findall("{DAV:}propstat"):
            propstat_status = parse_status(propstat.findtext("{DAV:}status"))
            if propstat_status is not None and not _is_success(propstat_status):
                dav_logger.debug(
                    f"Ignoring properties of {href!r} with status {propstat_status}"
                )
                continue

            any_success = True
            for prop in propstat.findall("{DAV:}prop"):
                for element in prop:
                    key, value = decode_property(element)
                    props[key] = value

        ok = _is_success(status) if status is not None else any_success
        rv.append(DAVResponse(href=href, status=status, ok=ok, props=props))
    return rv
