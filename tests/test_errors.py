import errno

import pytest

from arwen.errors import ECUSTOM, LibCError, describe_errno


def test_describe_known_errno():
    assert describe_errno(errno.ENOENT) == ("ENOENT", "No such file or directory")
    assert describe_errno(errno.EINVAL) == ("EINVAL", "Invalid argument")
    assert describe_errno(errno.EISDIR) == ("EISDIR", "Is a directory")


def test_describe_unknown_errno():
    assert describe_errno(-17) == ("UNKNOWN", "Unknown error")
    assert describe_errno(ECUSTOM + 1000) == ("UNKNOWN", "Unknown error")


def test_describe_custom_errno():
    assert describe_errno(ECUSTOM) == ("ECUSTOM", "Custom error message")
    assert LibCError.ECUSTOM == ECUSTOM


@pytest.mark.parametrize("number", [errno.ENOENT, errno.EINVAL, errno.EPERM, errno.EACCES])
def test_custom_is_past_every_known_code(number):
    err = LibCError(number)
    assert err.err_no < ECUSTOM
    assert err.code not in ("ECUSTOM", "UNKNOWN")
    assert describe_errno(number)[0] == err.code


def test_error_fields_and_str():
    err = LibCError(errno.ENOENT)
    assert err.err_no == errno.ENOENT
    assert err.code == "ENOENT"
    assert err.description == "No such file or directory"
    assert str(err) == f"ENOENT ({errno.ENOENT}): No such file or directory"


def test_explicit_description_overrides():
    err = LibCError(errno.EIO, "disk went away")
    assert err.code == "EIO"
    assert err.description == "disk went away"
    assert str(err) == f"EIO ({errno.EIO}): disk went away"


def test_custom_formats_arguments():
    err = LibCError.custom("bad {} at {}", "token", 3)
    assert err.err_no == ECUSTOM
    assert err.code == "ECUSTOM"
    assert err.description == "bad token at 3"


def test_custom_without_arguments_keeps_braces():
    err = LibCError.custom("literal {braces}")
    assert err.description == "literal {braces}"


def test_from_os_error(tmp_path):
    missing = tmp_path / "missing.txt"
    with pytest.raises(FileNotFoundError) as info:
        missing.open()
    err = LibCError.from_os_error(info.value)
    assert err.err_no == errno.ENOENT
    assert err.code == "ENOENT"


def test_from_os_error_without_errno():
    err = LibCError.from_os_error(OSError("something odd"))
    assert err.code == "ECUSTOM"
    assert err.description == "something odd"


def test_can_be_raised_and_caught():
    err = LibCError(errno.EISDIR)
    with pytest.raises(LibCError) as info:
        raise err
    assert info.value is err
    assert str(info.value) == f"EISDIR ({errno.EISDIR}): Is a directory"