import pytest

from davbook.models import Account
from davbook.models import AddressBook
from davbook.models import DAVResponse
from davbook.models import VCard


def test_structural_equality():
    a = VCard(url="https://dav.example.com/c/a.vcf", etag='"1"', data="x")
    b = VCard(url="https://dav.example.com/c/a.vcf", etag='"1"', data="x")

    assert a == b
    assert a != a.replace(etag='"2"')
    assert a != AddressBook(url=a.url)


def test_replace_returns_copy():
    book = AddressBook(url="https://dav.example.com/c/", display_name="Contacts")
    with_reports = book.replace(reports=["addressbook-multiget"])

    assert book.reports is None
    assert with_reports.reports == ["addressbook-multiget"]
    assert with_reports.display_name == "Contacts"


def test_unknown_fields_rejected():
    with pytest.raises(TypeError) as excinfo:
        VCard(url="x", color="red")
    assert "color" in str(excinfo.value)


def test_defaults():
    assert Account(home_url="https://dav.example.com/").account_type == "carddav"
    res = DAVResponse(href="/c/")
    assert res.props == {}
    assert res.ok is False


def test_repr():
    assert repr(VCard(url="u", etag="e", data=None)) == (
        "<VCard url='u' etag='e' data=None>"
    )
