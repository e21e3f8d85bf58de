"""Property-based tests for DynamicString invariants using Hypothesis.

Random sequences of operations must never leave a live instance with a
wrong capacity, a missing terminator or an embedded zero byte, and the
content must always match a plain ``bytes`` model of the same operations.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dynstr import (
    BufferConfig,
    ContractError,
    Cursor,
    DynamicString,
    InvariantError,
    buffer_config_context,
    create_from,
    equals,
    next_token,
)
from dynstr.growth import is_valid_capacity

# Any bytes, zero bytes included: they must be cut at the natural length
raw_text = st.binary(max_size=64)
embeddable = st.binary(max_size=64).map(lambda b: b.replace(b"\x00", b""))
bounds = st.integers(min_value=0, max_value=80)
char_codes = st.integers(min_value=0, max_value=255)


def _natural(data: bytes) -> bytes:
    end = data.find(0)
    return data if end < 0 else data[:end]


operations = st.one_of(
    st.tuples(st.just("assign"), raw_text),
    st.tuples(st.just("assign_bounded"), raw_text, bounds),
    st.tuples(st.just("append"), raw_text),
    st.tuples(st.just("append_bounded"), raw_text, bounds),
    st.tuples(st.just("append_all"), st.lists(raw_text, max_size=4)),
    st.tuples(st.just("append_chars"), st.lists(char_codes, max_size=8)),
    st.tuples(st.just("append_self"),),
    st.tuples(st.just("format"), st.integers(min_value=-(2**63), max_value=2**63 - 1), embeddable),
    st.tuples(st.just("tokenize"), raw_text),
    st.tuples(st.just("release"),),
)


def _apply(s: DynamicString, model: bytes, op: tuple) -> bytes:
    """Apply op to s and return the expected content."""
    match op:
        case ("assign", data):
            s.assign(data)
            return _natural(data)
        case ("assign_bounded", data, n):
            s.assign_bounded(data, n)
            return _natural(data)[:n]
        case ("append", data):
            s.append(data)
            return model + _natural(data)
        case ("append_bounded", data, n):
            s.append_bounded(data, n)
            return model + _natural(data)[:n]
        case ("append_all", items):
            s.append_all(*items)
            return model + b"".join(_natural(item) for item in items)
        case ("append_chars", codes):
            s.append_chars(*codes)
            kept = codes[: codes.index(0)] if 0 in codes else codes
            return model + bytes(kept)
        case ("append_self",):
            s.append_all_owned(s)
            return model + model
        case ("format", n, data):
            s.append_formatted("%I:%s", n, data)
            return model + str(n).encode() + b":" + data
        case ("tokenize", data):
            next_token(Cursor.start(data), s, b" ,")
            tokens = [t for t in _natural(data).replace(b",", b" ").split(b" ") if t]
            return tokens[0] if tokens else b""
    raise AssertionError(f"unknown operation {op!r}")


class TestOperationSequences:
    """Random interleavings of public operations."""

    @given(st.lists(operations, max_size=30))
    @settings(max_examples=200)
    def test_invariant_holds_after_every_call(self, ops: list[tuple]) -> None:
        s = DynamicString()
        model = b""

        for op in ops:
            if op[0] == "release":
                s.release()
                assert not s.is_ok()
                s = DynamicString()
                model = b""
                continue

            model = _apply(s, model, op)
            assert s.is_ok()
            assert bytes(s) == model
            assert s.to_cstring() == model + b"\x00"
            assert is_valid_capacity(s.capacity, s.length)

    @given(st.lists(operations, max_size=20))
    @settings(max_examples=100)
    def test_capacity_never_shrinks(self, ops: list[tuple]) -> None:
        s = DynamicString()
        model = b""
        capacity = s.capacity

        for op in ops:
            if op[0] == "release":
                continue
            model = _apply(s, model, op)
            assert s.capacity >= capacity
            capacity = s.capacity


class TestRoundTrip:
    """Copies preserve content exactly."""

    @given(embeddable)
    @settings(max_examples=100)
    def test_create_from_equals_itself(self, data: bytes) -> None:
        assert equals(create_from(data), create_from(data))

    @given(embeddable)
    @settings(max_examples=100)
    def test_assign_from_preserves_content(self, data: bytes) -> None:
        src = create_from(data)
        dest = DynamicString.dup(b"placeholder")
        dest.assign_from(src)
        assert equals(dest, src)
        assert bytes(dest) == data

    @given(raw_text)
    @settings(max_examples=100)
    def test_no_embedded_zero(self, data: bytes) -> None:
        s = create_from(data)
        assert 0 not in bytes(s)


class TestInvariantDetection:
    """The internal check notices corrupted state."""

    def test_embedded_zero_detected(self) -> None:
        s = create_from(b"abc")
        s._buf[1] = 0
        assert not s.is_ok()
        with buffer_config_context(BufferConfig(check_invariants=True)):
            with pytest.raises(InvariantError):
                s.append(b"d")

    def test_missing_terminator_detected(self) -> None:
        s = create_from(b"abc")
        s._buf[3] = ord("x")
        with pytest.raises(InvariantError, match="length=3"):
            s.check()

    def test_bad_capacity_detected(self) -> None:
        s = create_from(b"abc")
        s._alloc = 24
        assert not s.is_ok()

    def test_released_check_is_contract_error(self) -> None:
        s = DynamicString()
        s.release()
        with pytest.raises(ContractError, match="release"):
            s.check()
