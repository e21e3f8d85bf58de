"""Tests for the delimiter tokenizer."""

import pytest

from dynstr import ContractError, Cursor, DynamicString, iter_tokens, next_token


def _collect(text: bytes, delimiters: bytes) -> list[bytes]:
    token = DynamicString()
    cursor: Cursor | None = Cursor.start(text)
    found = []
    while (cursor := next_token(cursor, token, delimiters)) is not None:
        found.append(bytes(token))
    return found


class TestNextToken:
    """Step-by-step behaviour of next_token()."""

    def test_collapses_repeated_delimiters(self) -> None:
        token = DynamicString()
        cursor = Cursor.start(b",,a,,b,,")

        cursor = next_token(cursor, token, b",")
        assert cursor is not None
        assert bytes(token) == b"a"

        cursor = next_token(cursor, token, b",")
        assert cursor is not None
        assert bytes(token) == b"b"

        cursor = next_token(cursor, token, b",")
        assert cursor is None
        assert bytes(token) == b""

    def test_cursor_points_past_token(self) -> None:
        token = DynamicString()
        cursor = next_token(Cursor.start(b"  ab cd"), token, b" ")
        assert cursor is not None
        assert cursor.pos == 4
        assert cursor.remaining == b" cd"

    def test_exhausted_cursor_is_noop(self) -> None:
        token = DynamicString.dup(b"stale")
        assert next_token(None, token, b",") is None
        assert bytes(token) == b""

    def test_empty_text(self) -> None:
        token = DynamicString()
        assert next_token(Cursor.start(b""), token, b",") is None

    def test_only_delimiters(self) -> None:
        token = DynamicString()
        assert next_token(Cursor.start(b";;;"), token, b";") is None

    def test_overwrites_previous_token(self) -> None:
        token = DynamicString.dup(b"much longer previous content")
        next_token(Cursor.start(b"x"), token, b" ")
        assert bytes(token) == b"x"
        assert token.is_ok()

    def test_multiple_delimiters(self) -> None:
        assert _collect(b"a b\tc\n\nd", b" \t\n") == [b"a", b"b", b"c", b"d"]

    def test_no_delimiter_in_text(self) -> None:
        assert _collect(b"whole", b",") == [b"whole"]

    def test_empty_delimiters_raise(self) -> None:
        with pytest.raises(ContractError, match="delimiter set is empty"):
            next_token(Cursor.start(b"a"), DynamicString(), b"")

    def test_empty_delimiters_raise_even_when_exhausted(self) -> None:
        with pytest.raises(ContractError):
            next_token(None, DynamicString(), "")

    def test_released_token_raises(self) -> None:
        token = DynamicString()
        token.release()
        with pytest.raises(ContractError):
            next_token(Cursor.start(b"a"), token, b",")


class TestCursor:
    """Cursor construction."""

    def test_start_from_str(self) -> None:
        assert Cursor.start("a,b").text == b"a,b"

    def test_start_stops_at_zero_byte(self) -> None:
        assert Cursor.start(b"a,b\x00,c").text == b"a,b"

    def test_start_snapshots_dynamic_string(self) -> None:
        s = DynamicString.dup(b"x y")
        cursor = Cursor.start(s)
        s.assign(b"changed")
        assert cursor.text == b"x y"

    def test_start_none_raises(self) -> None:
        with pytest.raises(ContractError):
            Cursor.start(None)  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        cursor = Cursor.start(b"a")
        with pytest.raises(AttributeError):
            cursor.pos = 3  # type: ignore[misc]


class TestIterTokens:
    """iter_tokens() convenience generator."""

    def test_splits(self) -> None:
        assert list(iter_tokens("usr/local//bin/", "/")) == [b"usr", b"local", b"bin"]

    def test_empty(self) -> None:
        assert list(iter_tokens(b"", b" ")) == []

    def test_from_dynamic_string(self) -> None:
        s = DynamicString.dup(b"k=v;k2=v2")
        assert list(iter_tokens(s, b"=;")) == [b"k", b"v", b"k2", b"v2"]
