import pytest

from davbook import exceptions


def test_user_error_problems():
    e = exceptions.UserError(
        "A few problems occurred",
        problems=["Problem one", "Problem two", "Problem three"],
    )

    assert "one" in str(e)
    assert "two" in str(e)
    assert "three" in str(e)
    assert "problems occurred" in str(e)


def test_missing_fields_error():
    e = exceptions.MissingFieldsError("account must have home_url", fields=["home_url"])

    assert e.fields == ["home_url"]
    assert isinstance(e, exceptions.UserError)
    assert isinstance(e, ValueError)


def test_unknown_attribute_rejected():
    with pytest.raises(TypeError):
        exceptions.UserError("nope", fields=["url"])


def test_not_found_is_precondition_failure():
    assert issubclass(exceptions.NotFoundError, exceptions.PreconditionFailed)
    assert issubclass(exceptions.InvalidXMLResponse, exceptions.InvalidResponse)
