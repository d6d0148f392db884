import pytest

from utility.validation import is_valid_nickname


@pytest.mark.parametrize("nickname, valid", [
    ("", False),
    ("   ", False),
    ("\t\n", False),
    ("A", True),
    ("x" * 32, True),
    ("x" * 33, False),
    ("  " + "x" * 32 + "  ", True),
    ("Al  the  Pal", True),
    ("é" * 32, True),
])
def test_is_valid_nickname(nickname, valid):
    assert is_valid_nickname(nickname) is valid


def test_internal_whitespace_counts_toward_length():
    assert is_valid_nickname("a" + " " * 30 + "b")
    assert not is_valid_nickname("a" + " " * 31 + "b")
