from . import davxml
from .request import dav_request
from .request import propfind


async def collection_query(
    session,
    url,
    body,
    default_namespace=davxml.DAV,
    depth=None,
    headers=None,
    headers_to_exclude=None,
    request_options=None,
):
    """Send ``body`` as a REPORT to ``url``.

    Tags in ``body`` without a namespace are serialized into
    ``default_namespace``.
    """
    return await dav_request(
        session,
        "REPORT",
        url,
        body=body,
        depth=depth,
        default_namespace=default_namespace,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )


async def supported_report_set(
    session, collection, headers=None, headers_to_exclude=None, request_options=None
):
    """Return the local names of the reports ``collection`` advertises."""
    res = await propfind(
        session,
        collection.url,
        [davxml.SUPPORTED_REPORT_SET],
        depth=0,
        headers=headers,
        headers_to_exclude=headers_to_exclude,
        request_options=request_options,
    )
    if not res:
        return []
    return res[0].props.get(davxml.SUPPORTED_REPORT_SET, [])
