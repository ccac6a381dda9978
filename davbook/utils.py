import os
import urllib.parse as urlparse


def expand_path(p):
    p = os.path.expanduser(p)
    p = os.path.normpath(p)
    return p


def split_dict(d, f):
    """Puts key into first dict if f(key), otherwise in second dict"""
    a, b = split_sequence(d.items(), lambda item: f(item[0]))
    return dict(a), dict(b)


def split_sequence(s, f):
    """Puts item into first list if f(item), else in second list"""
    a = []
    b = []
    for item in s:
        if f(item):
            a.append(item)
        else:
            b.append(item)

    return a, b


def find_missing_field_names(obj, fields):
    """Return the names in ``fields`` for which ``obj`` has no truthy
    attribute, in the order given."""
    return [name for name in fields if not getattr(obj, name, None)]


def has_fields(obj, fields):
    return not find_missing_field_names(obj, fields)


def is_absolute_url(url):
    return urlparse.urlsplit(url).scheme in ("http", "https")


def absolute_url(base, href):
    """Resolve ``href`` against ``base``. Absolute hrefs are returned as-is."""
    return urlparse.urljoin(base, href or "")


def url_path(url):
    """Reduce an URL to its path, the form multiget requests expect."""
    return urlparse.urlsplit(url).path


def server_root(url):
    """Return scheme and host of ``url`` with a trailing slash."""
    parts = urlparse.urlsplit(str(url))
    return urlparse.urlunsplit((parts.scheme, parts.netloc, "/", "", ""))
