from __future__ import annotations

from typing import BinaryIO, Iterable, Iterator, TextIO, Union

from .errors import MalformedInputError

# bytes.split() with no argument splits on exactly these.
ASCII_WHITESPACE = frozenset(b" \t\n\r\x0b\x0c")

TokenSource = Union[BinaryIO, TextIO, bytes, str, Iterable[bytes]]


def iter_tokens(source: TokenSource, *, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
    """
    Lazily yield whitespace-delimited tokens.

    `source` may be a binary stream (read in `chunk_size` pieces), a text stream or
    `str` (encoded as UTF-8), raw `bytes`, or any iterable of byte chunks. Tokens may
    straddle chunk boundaries.
    """

    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1.")

    carry = b""
    for chunk in _iter_chunks(source, chunk_size):
        if not chunk:
            continue
        parts = chunk.split()
        if not parts:
            # Pure whitespace terminates any pending token.
            if carry:
                yield carry
                carry = b""
            continue

        if chunk[0] in ASCII_WHITESPACE:
            if carry:
                yield carry
                carry = b""
        else:
            parts[0] = carry + parts[0]
            carry = b""

        if chunk[-1] not in ASCII_WHITESPACE:
            carry = parts.pop()

        yield from parts

    if carry:
        yield carry


def iter_pairs(tokens: Iterable[bytes]) -> Iterator[tuple[bytes, bytes]]:
    """
    Group tokens as (predecessor, successor) pairs.

    Raises MalformedInputError once the stream ends with a token left over.
    """

    count = 0
    pending: bytes | None = None
    for tok in tokens:
        count += 1
        if pending is None:
            pending = tok
            continue
        yield pending, tok
        pending = None

    if pending is not None:
        raise MalformedInputError(
            "input contains an odd number of tokens",
            token_count=count,
            dangling=pending,
        )


def _iter_chunks(source: TokenSource, chunk_size: int) -> Iterator[bytes]:
    if isinstance(source, bytes):
        yield source
        return
    if isinstance(source, str):
        yield source.encode("utf-8")
        return

    read = getattr(source, "read", None)
    if read is None:
        for chunk in source:
            yield chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)
        return

    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk
