"""
Tests for lazy token reading and pairing.
"""

import io

import pytest

from tsortkit.engine.errors import MalformedInputError
from tsortkit.engine.tokens import iter_pairs, iter_tokens


class TestIterTokens:
    def test_splits_on_any_ascii_whitespace(self):
        data = b"  a\tb\n\nc \r\n d\x0be\x0cf  "
        assert list(iter_tokens(data)) == [b"a", b"b", b"c", b"d", b"e", b"f"]

    def test_empty_and_blank_input(self):
        assert list(iter_tokens(b"")) == []
        assert list(iter_tokens(io.BytesIO(b" \n\t "))) == []

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 5, 64])
    def test_tokens_straddling_chunks(self, chunk_size):
        data = b"alpha beta\ngamma  delta\tepsilon"
        stream = io.BytesIO(data)
        assert list(iter_tokens(stream, chunk_size=chunk_size)) == data.split()

    def test_text_input_is_utf8_encoded(self):
        assert list(iter_tokens("é ü\n")) == ["é".encode(), "ü".encode()]
        assert list(iter_tokens(io.StringIO("x y"))) == [b"x", b"y"]

    def test_iterable_of_chunks(self):
        chunks = [b"ab", b"c d", b" ", b"e", b"f\n"]
        assert list(iter_tokens(chunks)) == [b"abc", b"d", b"ef"]

    def test_reads_lazily(self):
        stream = io.BytesIO(b"a b c d")
        tokens = iter_tokens(stream, chunk_size=2)
        assert next(tokens) == b"a"
        assert stream.tell() < len(b"a b c d")

    def test_rejects_bad_chunk_size(self):
        with pytest.raises(ValueError):
            list(iter_tokens(b"a", chunk_size=0))


class TestIterPairs:
    def test_pairs_in_order(self):
        assert list(iter_pairs([b"a", b"b", b"c", b"d"])) == [(b"a", b"b"), (b"c", b"d")]

    def test_odd_count_raises_after_complete_pairs(self):
        pairs = iter_pairs([b"a", b"b", b"c"])
        assert next(pairs) == (b"a", b"b")
        with pytest.raises(MalformedInputError) as exc:
            next(pairs)
        assert exc.value.token_count == 3
        assert exc.value.dangling == b"c"
        assert "odd number of tokens" in str(exc.value)

    def test_malformed_is_a_value_error(self):
        with pytest.raises(ValueError):
            list(iter_pairs([b"only"]))
