import json
import sys
import traceback

import aiohttp
import click

from .. import exceptions
from . import cli_logger


def handle_cli_error(e=None):
    """
    Print a useful error message for the current exception.

    This is supposed to catch all exceptions, and should never raise any
    exceptions itself.
    """

    try:
        if e is not None:
            raise e
        else:
            raise
    except exceptions.UserError as e:
        cli_logger.critical(e)
    except click.Abort:
        pass
    except exceptions.PreconditionFailed as e:
        cli_logger.error(f"The server refused the request: {e}")
    except exceptions.InvalidResponse as e:
        cli_logger.error(
            "The server returned something davbook doesn't understand. "
            "Error message: {!r}\n"
            "This is most likely a serverside problem.".format(e)
        )
    except exceptions.Error as e:
        cli_logger.error(e)
    except aiohttp.ClientResponseError as e:
        cli_logger.error(
            f"{e.request_info.method} {e.request_info.url}: {e.status} {e.message}"
        )
    except Exception as e:
        tb = traceback.format_tb(sys.exc_info()[2])
        cli_logger.error(
            f"Unknown error occurred: {e}\nUse `-vdebug` to see the full traceback."
        )
        cli_logger.debug("".join(tb))


def check_mutation(response):
    """Raise an error for a non-2xx answer to PUT or DELETE."""
    if not 200 <= response.status < 300:
        if response.status == 412:
            raise exceptions.PreconditionFailed(
                f"{response.url}: resource exists or etag does not match"
            )
        raise exceptions.Error(f"{response.url}: {response.status} {response.reason}")


def echo_json(data):
    click.echo(json.dumps(data, indent=2))
