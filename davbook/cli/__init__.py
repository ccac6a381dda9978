import asyncio
import functools
import logging
import os
import sys

import aiohttp
import click
import click_log

from .. import __version__

cli_logger = logging.getLogger(__name__)
click_log.basic_config("davbook")


class AppContext:
    def __init__(self):
        self.config = None

    def run(self, operation):
        """Run ``operation(session)`` on a fresh connector and return its
        result."""

        async def main():
            async with aiohttp.TCPConnector(limit_per_host=16) as conn:
                return await operation(self.config.make_session(conn))

        return asyncio.run(main())


pass_context = click.make_pass_decorator(AppContext, ensure=True)


def catch_errors(f):
    @functools.wraps(f)
    def inner(*a, **kw):
        try:
            f(*a, **kw)
        except BaseException:
            from .utils import handle_cli_error

            handle_cli_error()
            sys.exit(1)

    return inner


@click.group()
@click_log.simple_verbosity_option("davbook")
@click.version_option(version=__version__)
@click.option("--config", "-c", metavar="FILE", help="Config file to use.")
@pass_context
@catch_errors
def app(ctx, config):
    """
    Query and edit contacts on a CardDAV server
    """

    if not ctx.config:
        from .config import load_config

        ctx.config = load_config(config)


main = app


@app.command()
@pass_context
@catch_errors
def discover(ctx):
    """
    Show the principal and address book home of the configured account.
    """
    from ..account import create_account
    from .utils import echo_json

    account = ctx.run(create_account)
    echo_json(account.as_dict())


@app.command()
@pass_context
@catch_errors
def addressbooks(ctx):
    """
    List the address books of the configured account.
    """
    from ..account import create_account
    from ..addressbook import fetch_address_books
    from .utils import echo_json

    async def operation(session):
        account = await create_account(session)
        return await fetch_address_books(session, account)

    echo_json([a.as_dict() for a in ctx.run(operation)])


@app.command()
@click.argument("addressbook_url", required=False)
@click.option(
    "--multiget/--no-multiget",
    default=True,
    help="Fetch vCards by URL (default) or with a single addressbook-query.",
)
@click.option("--data/--no-data", default=False, help="Include the vCard content.")
@pass_context
@catch_errors
def vcards(ctx, addressbook_url, multiget, data):
    """
    List the vCards of ADDRESSBOOK_URL, or of every address book if none is
    given.
    """
    from ..account import create_account
    from ..addressbook import fetch_address_books
    from ..addressbook import fetch_vcards
    from ..models import AddressBook
    from .utils import echo_json

    async def operation(session):
        if addressbook_url:
            books = [AddressBook(url=session.absolute_url(addressbook_url))]
        else:
            account = await create_account(session)
            books = await fetch_address_books(session, account)

        rv = []
        for book in books:
            rv.extend(await fetch_vcards(session, book, use_multiget=multiget))
        return rv

    fields = ("url", "etag", "data") if data else ("url", "etag")
    echo_json(
        [{name: getattr(vcard, name) for name in fields} for vcard in ctx.run(operation)]
    )


@app.command()
@click.argument("addressbook_url")
@click.argument("vcard_file", type=click.File("r", encoding="utf-8"))
@click.option("--filename", help="Resource name, defaults to the file's name.")
@pass_context
@catch_errors
def create(ctx, addressbook_url, vcard_file, filename):
    """
    Upload VCARD_FILE as a new vCard into ADDRESSBOOK_URL.
    """
    from ..addressbook import create_vcard
    from ..models import AddressBook
    from .utils import check_mutation
    from .utils import echo_json

    filename = filename or os.path.basename(vcard_file.name)
    vcard_string = vcard_file.read()

    async def operation(session):
        book = AddressBook(url=session.absolute_url(addressbook_url))
        return await create_vcard(session, book, vcard_string, filename)

    response = ctx.run(operation)
    check_mutation(response)
    echo_json({"url": str(response.url), "etag": response.headers.get("ETag")})


@app.command()
@click.argument("url")
@click.argument("etag")
@click.argument("vcard_file", type=click.File("r", encoding="utf-8"))
@pass_context
@catch_errors
def update(ctx, url, etag, vcard_file):
    """
    Replace the vCard at URL with VCARD_FILE if its etag is still ETAG.
    """
    from ..addressbook import update_vcard
    from ..models import VCard
    from .utils import check_mutation
    from .utils import echo_json

    vcard_string = vcard_file.read()

    async def operation(session):
        vcard = VCard(url=session.absolute_url(url), etag=etag, data=vcard_string)
        return await update_vcard(session, vcard)

    response = ctx.run(operation)
    check_mutation(response)
    echo_json({"url": str(response.url), "etag": response.headers.get("ETag")})


@app.command()
@click.argument("url")
@click.argument("etag")
@pass_context
@catch_errors
def delete(ctx, url, etag):
    """
    Delete the vCard at URL if its etag is still ETAG.
    """
    from ..addressbook import delete_vcard
    from ..models import VCard
    from .utils import check_mutation

    async def operation(session):
        vcard = VCard(url=session.absolute_url(url), etag=etag)
        return await delete_vcard(session, vcard)

    check_mutation(ctx.run(operation))
