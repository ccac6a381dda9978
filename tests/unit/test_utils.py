import pytest

from davbook import utils
from davbook.models import Account


def test_split_dict():
    a, b = utils.split_dict({"url": 1, "collection": 2}, lambda k: k == "url")
    assert a == {"url": 1}
    assert b == {"collection": 2}


def test_find_missing_field_names():
    account = Account(root_url="https://dav.example.com/", home_url="")

    assert utils.find_missing_field_names(account, ["home_url", "root_url"]) == [
        "home_url"
    ]
    assert utils.find_missing_field_names(object(), ["url"]) == ["url"]
    assert not utils.has_fields(account, ["home_url"])
    assert utils.has_fields(account, ["root_url"])


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://dav.example.com/c/a.vcf", True),
        ("http://dav.example.com/c/a.vcf", True),
        ("/c/a.vcf", False),
        ("a.vcf", False),
    ],
)
def test_is_absolute_url(url, expected):
    assert utils.is_absolute_url(url) is expected


def test_absolute_url():
    base = "https://dav.example.com/addressbooks/alice/contacts/"
    assert utils.absolute_url(base, "card1.vcf") == base + "card1.vcf"
    assert (
        utils.absolute_url(base, "/addressbooks/bob/")
        == "https://dav.example.com/addressbooks/bob/"
    )
    assert utils.absolute_url(base, "https://other.example.com/x") == (
        "https://other.example.com/x"
    )
    assert utils.absolute_url(base, None) == base


def test_url_path_and_server_root():
    url = "https://dav.example.com:8443/c/a%40b.vcf?x=1"
    assert utils.url_path(url) == "/c/a%40b.vcf"
    assert utils.server_root(url) == "https://dav.example.com:8443/"
