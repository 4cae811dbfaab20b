"""
Persistence and Text Construction

Binary stream layout (big-endian, compatible with Java ``DataOutputStream``)::

    u16     length of the type tag
    bytes   type tag, UTF-8 ("double")
    i32     columns
    i32     rows
    i32     buffer length
    f64[]   buffer, column-major

Loading rejects a wrong tag, negative dimensions, a buffer length that
differs from ``rows * columns`` and truncated data.

Text format::

    "1 2 3; 4 5 6"

Rows are separated by ``;``, values within a row by whitespace. Every row
must have the same number of values.
"""

from __future__ import annotations

import logging
import os
import struct
from typing import BinaryIO, List, Tuple, Union

import numpy as np

from .._errors import FormatError, DMAT_ERROR_INVALID_ARGUMENT, DMAT_ERROR_TYPE_MISMATCH

__all__ = ['TYPE_TAG', 'write_matrix', 'read_matrix', 'save_file', 'load_file', 'parse_text']

logger = logging.getLogger("dmat.io")

TYPE_TAG = "double"

_HEADER = struct.Struct(">iii")
_TAG_LENGTH = struct.Struct(">H")

PathLike = Union[str, "os.PathLike[str]"]


# =============================================================================
# Binary
# =============================================================================

def write_matrix(rows: int, columns: int, data: np.ndarray, stream: BinaryIO) -> None:
    """Write a matrix in the binary layout."""
    tag = TYPE_TAG.encode("utf-8")
    stream.write(_TAG_LENGTH.pack(len(tag)))
    stream.write(tag)
    stream.write(_HEADER.pack(columns, rows, data.shape[0]))
    stream.write(data.astype(">f8").tobytes())


def _read_exact(stream: BinaryIO, n: int, what: str) -> bytes:
    buf = stream.read(n)
    if buf is None or len(buf) != n:
        got = 0 if buf is None else len(buf)
        raise FormatError(f"Unexpected end of stream while reading {what} ({got} of {n} bytes)")
    return buf


def read_matrix(stream: BinaryIO) -> Tuple[int, int, np.ndarray]:
    """
    Read one matrix from ``stream``.

    Returns:
        (rows, columns, data) with ``data`` a native float64 buffer

    Raises:
        FormatError: On a wrong tag, inconsistent header or truncated data
    """
    (tag_len,) = _TAG_LENGTH.unpack(_read_exact(stream, _TAG_LENGTH.size, "type tag length"))
    try:
        tag = _read_exact(stream, tag_len, "type tag").decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError("Type tag is not valid UTF-8") from e
    if tag != TYPE_TAG:
        raise FormatError(f"Wrong type tag {tag!r}, expected {TYPE_TAG!r}", code=DMAT_ERROR_TYPE_MISMATCH)

    columns, rows, length = _HEADER.unpack(_read_exact(stream, _HEADER.size, "header"))
    if rows < 0 or columns < 0 or length < 0:
        raise FormatError(f"Negative size in header ({rows}x{columns}, length {length})")
    if rows * columns != length:
        raise FormatError(
            f"Stored length {length} does not match dimensions {rows}x{columns}"
        )

    raw = _read_exact(stream, 8 * length, "matrix data")
    data = np.frombuffer(raw, dtype=">f8").astype(np.float64)
    return rows, columns, data


def save_file(rows: int, columns: int, data: np.ndarray, path: PathLike) -> None:
    with open(path, "wb") as f:
        write_matrix(rows, columns, data, f)
    logger.debug("Saved %dx%d matrix to %s", rows, columns, path)


def load_file(path: PathLike) -> Tuple[int, int, np.ndarray]:
    with open(path, "rb") as f:
        rows, columns, data = read_matrix(f)
    logger.debug("Loaded %dx%d matrix from %s", rows, columns, path)
    return rows, columns, data


# =============================================================================
# Text
# =============================================================================

def parse_text(text: str) -> Tuple[int, int, np.ndarray]:
    """
    Parse ``"a b; c d"`` into (rows, columns, column-major data).

    Empty segments after the last ``;`` are ignored.

    Raises:
        FormatError: On blank input, ragged rows or a non-numeric token
    """
    segments = text.split(";")
    while segments and not segments[-1].strip():
        segments.pop()
    if not segments:
        raise FormatError("Cannot parse a matrix from blank text", code=DMAT_ERROR_INVALID_ARGUMENT)

    values: List[List[float]] = []
    for r, segment in enumerate(segments):
        tokens = segment.split()
        try:
            row = [float(tok) for tok in tokens]
        except ValueError as e:
            raise FormatError(f"Row {r}: {e}", code=DMAT_ERROR_INVALID_ARGUMENT) from e
        if values and len(row) != len(values[0]):
            raise FormatError(
                f"Row {r} has {len(row)} values, expected {len(values[0])}",
                code=DMAT_ERROR_INVALID_ARGUMENT,
            )
        values.append(row)

    rows, columns = len(values), len(values[0])
    if columns == 0:
        raise FormatError("Rows must contain at least one value", code=DMAT_ERROR_INVALID_ARGUMENT)
    data = np.array(values, dtype=np.float64).ravel(order='F')
    return rows, columns, data
