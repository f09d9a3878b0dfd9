import pytest

from hearthweb.status import (
    HttpStatus,
    is_client_error,
    is_informational,
    is_redirection,
    is_server_error,
    is_successful,
    status_message,
)


def test_known_messages():
    assert status_message(HttpStatus.NOT_FOUND) == "Not Found"
    assert status_message(HttpStatus.OK) == "OK"
    assert status_message(HttpStatus.HTTP_VERSION_NOT_SUPPORTED) == "HTTP Version Not Supported"


def test_unknown_code_gives_unknown_status():
    assert status_message(299) == "Unknown Status"
    assert status_message(999) == "Unknown Status"


@pytest.mark.parametrize("status", list(HttpStatus))
def test_int_and_enum_lookup_agree(status):
    assert status_message(int(status)) == status_message(status)


@pytest.mark.parametrize(
    "status, phrase",
    [
        (HttpStatus.CONTINUE, "Continue"),
        (HttpStatus.OK, "OK"),
        (HttpStatus.CREATED, "Created"),
        (HttpStatus.FOUND, "Found"),
        (HttpStatus.NOT_FOUND, "Not Found"),
        (HttpStatus.TOO_MANY_REQUESTS, "Too Many Requests"),
        (HttpStatus.BAD_GATEWAY, "Bad Gateway"),
        (HttpStatus.HTTP_VERSION_NOT_SUPPORTED, "HTTP Version Not Supported"),
    ],
)
def test_every_member_has_a_phrase(status, phrase):
    assert status_message(status) == phrase


@pytest.mark.parametrize("status", list(HttpStatus))
def test_exactly_one_class_predicate_holds(status):
    flags = [
        is_informational(status),
        is_successful(status),
        is_redirection(status),
        is_client_error(status),
        is_server_error(status),
    ]
    assert flags.count(True) == 1


@pytest.mark.parametrize(
    "status, predicate",
    [
        (HttpStatus.CONTINUE, is_informational),
        (HttpStatus.CREATED, is_successful),
        (HttpStatus.FOUND, is_redirection),
        (HttpStatus.TOO_MANY_REQUESTS, is_client_error),
        (HttpStatus.BAD_GATEWAY, is_server_error),
    ],
)
def test_predicates(status, predicate):
    assert predicate(status) is True


def test_boundaries():
    assert is_successful(200) is True
    assert is_successful(300) is False
    assert is_server_error(599) is True
    assert is_server_error(600) is False
    assert is_informational(99) is False