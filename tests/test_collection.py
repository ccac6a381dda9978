import xml.etree.ElementTree as etree

import pytest

from davbook import davxml
from davbook.addressbook import addressbook_query
from davbook.collection import collection_query
from davbook.collection import supported_report_set
from davbook.models import AddressBook
from davbook.request import propfind
from tests import BASE_URL
from tests import multistatus
from tests import report_set_response
from tests import response
from tests import sent

URL = BASE_URL + "contacts/"


@pytest.mark.asyncio
async def test_collection_query_default_namespace(session, mocked):
    mocked.add(URL, method="REPORT", status=207, body=multistatus())

    body = etree.Element("addressbook-query")
    etree.SubElement(body, "{DAV:}prop")
    etree.SubElement(body, "filter")

    res = await collection_query(
        session, URL, body, default_namespace=davxml.CARDDAV, depth=1
    )

    assert res == []
    (request,) = sent(mocked, "REPORT", URL)
    assert request["headers"]["Depth"] == "1"
    assert request["headers"]["Content-Type"] == "application/xml; charset=utf-8"
    sent_body = etree.XML(request["data"])
    assert sent_body.tag == "{urn:ietf:params:xml:ns:carddav}addressbook-query"
    assert [child.tag for child in sent_body] == [
        "{DAV:}prop",
        "{urn:ietf:params:xml:ns:carddav}filter",
    ]


@pytest.mark.asyncio
async def test_addressbook_query_custom_filter(session, mocked):
    mocked.add(
        URL,
        method="REPORT",
        status=207,
        body=multistatus(response("/contacts/a.vcf", '<d:getetag>"1"</d:getetag>')),
    )

    email = etree.Element("prop-filter", name="EMAIL")
    etree.SubElement(email, "text-match").text = "example.com"
    (res,) = await addressbook_query(
        session, URL, [davxml.GETETAG], filters=[email], depth=1
    )

    assert res.href == "/contacts/a.vcf"
    assert res.props == {davxml.GETETAG: '"1"'}
    (request,) = sent(mocked, "REPORT", URL)
    text_match = etree.XML(request["data"]).find(
        "{urn:ietf:params:xml:ns:carddav}filter"
        "/{urn:ietf:params:xml:ns:carddav}prop-filter"
        "/{urn:ietf:params:xml:ns:carddav}text-match"
    )
    assert text_match.text == "example.com"


@pytest.mark.asyncio
async def test_propfind_without_depth(session, mocked):
    mocked.add(URL, method="PROPFIND", status=207, body=multistatus())

    await propfind(session, URL, [davxml.DISPLAYNAME])

    (request,) = sent(mocked, "PROPFIND", URL)
    assert "Depth" not in request["headers"]
    assert request["headers"]["User-Agent"] == session.useragent


@pytest.mark.asyncio
async def test_supported_report_set(session, mocked):
    mocked.add(
        URL,
        method="PROPFIND",
        status=207,
        body=multistatus(
            report_set_response("/contacts/", "addressbook-multiget", "sync-collection")
        ),
    )

    reports = await supported_report_set(session, AddressBook(url=URL))

    assert reports == ["addressbook-multiget", "sync-collection"]
    (request,) = sent(mocked, "PROPFIND", URL)
    assert request["headers"]["Depth"] == "0"


@pytest.mark.asyncio
async def test_supported_report_set_empty(session, mocked):
    mocked.add(URL, method="PROPFIND", status=207, body=multistatus())

    assert await supported_report_set(session, AddressBook(url=URL)) == []
