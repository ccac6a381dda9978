import os
from configparser import RawConfigParser

from .. import exceptions
from ..session import DAVSession
from ..utils import expand_path

ACCOUNT_SECTION = "account"
ACCOUNT_ALL = frozenset(
    [
        "url",
        "username",
        "password",
        "auth",
        "verify",
        "verify_fingerprint",
        "auth_cert",
        "useragent",
    ]
)
ACCOUNT_REQUIRED = frozenset(["url"])


def _validate_account_section(account_config):
    invalid = set(account_config) - ACCOUNT_ALL
    missing = ACCOUNT_REQUIRED - set(account_config)
    problems = []

    if invalid:
        problems.append(
            "account section doesn't take the parameters: {}".format(
                ", ".join(sorted(invalid))
            )
        )

    if missing:
        problems.append(
            "account section is missing the parameters: {}".format(
                ", ".join(sorted(missing))
            )
        )

    if problems:
        raise exceptions.UserError("Invalid account section.", problems=problems)


class Config:
    def __init__(self, account):
        _validate_account_section(account)
        self.account = account

    @classmethod
    def from_fileobject(cls, f):
        parser = RawConfigParser()
        parser.read_file(f)
        if not parser.has_section(ACCOUNT_SECTION):
            raise exceptions.UserError(
                f"Config file must contain an [{ACCOUNT_SECTION}] section."
            )
        return cls(dict(parser.items(ACCOUNT_SECTION)))

    def make_session(self, connector):
        return DAVSession(connector=connector, **self.account)


def _get_config_path():
    fname = os.environ.get("DAVBOOK_CONFIG", None)
    if fname:
        return expand_path(fname)

    xdg_config_dir = os.environ.get("XDG_CONFIG_HOME", expand_path("~/.config/"))
    return os.path.join(xdg_config_dir, "davbook", "config")


def load_config(fname=None):
    fname = fname or _get_config_path()

    try:
        with open(fname) as f:
            return Config.from_fileobject(f)
    except OSError as e:
        raise exceptions.UserError(f"Unable to read config file {fname}: {e}")
