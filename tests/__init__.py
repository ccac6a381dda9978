"""
Test suite for davbook.
"""

import hypothesis.strategies as st

BASE_URL = "https://dav.example.com/"


VCARD_TEMPLATE = """BEGIN:VCARD
VERSION:3.0
FN:Cyrus Daboo
N:Daboo;Cyrus;;;
EMAIL;TYPE=PREF:cyrus@example.com
NOTE:Example VCard.
UID:{uid}
END:VCARD"""


def multistatus(*responses):
    """Wrap ``<response>`` snippets into a multistatus document."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<d:multistatus xmlns:d="DAV:" '
        'xmlns:card="urn:ietf:params:xml:ns:carddav" '
        'xmlns:cs="http://calendarserver.org/ns/">'
        + "".join(responses)
        + "</d:multistatus>"
    ).encode("utf-8")


def response(href, props="", status="HTTP/1.1 200 OK", missing=""):
    rv = f"<d:response><d:href>{href}</d:href>"
    if props:
        rv += f"<d:propstat><d:prop>{props}</d:prop><d:status>{status}</d:status></d:propstat>"
    if missing:
        rv += (
            f"<d:propstat><d:prop>{missing}</d:prop>"
            "<d:status>HTTP/1.1 404 Not Found</d:status></d:propstat>"
        )
    return rv + "</d:response>"


def not_found(href):
    return (
        f"<d:response><d:href>{href}</d:href>"
        "<d:status>HTTP/1.1 404 Not Found</d:status></d:response>"
    )


def addressbook_response(href, name, ctag="ctag-1", token="token-1"):
    return response(
        href,
        f"<d:displayname>{name}</d:displayname>"
        f"<cs:getctag>{ctag}</cs:getctag>"
        "<d:resourcetype><d:collection/><card:addressbook/></d:resourcetype>"
        f"<d:sync-token>{token}</d:sync-token>",
    )


def vcard_response(href, etag, uid):
    return response(
        href,
        f"<d:getetag>{etag}</d:getetag>"
        f"<card:address-data>{VCARD_TEMPLATE.format(uid=uid)}</card:address-data>",
    )


def report_set_response(href, *reports):
    return response(
        href,
        "<d:supported-report-set>"
        + "".join(
            f"<d:supported-report><d:report><card:{r}/></d:report></d:supported-report>"
            for r in reports
        )
        + "</d:supported-report-set>",
    )


def sent(m, method, url):
    """Return the keyword arguments of the ``method`` requests to ``url`` that
    ``m`` recorded."""
    rv = []
    for (sent_method, sent_url), calls in m.requests.items():
        if sent_method == method and str(sent_url).rstrip("?") == url:
            rv.extend(call.kwargs for call in calls)
    return rv


header_names_strategy = st.text(
    alphabet=st.characters(min_codepoint=ord("A"), max_codepoint=ord("z")).filter(
        str.isalpha
    ),
    min_size=1,
    max_size=12,
)
