"""Fixed-width key encodings."""

import struct

UINT64_MAX = 2**64 - 1

_UINT64 = struct.Struct(">Q")


def encode_uint64(value: int) -> bytes:
    """Encode an unsigned integer as 8 big-endian bytes.

    Byte order of the encoding matches numeric order, so integer keys
    iterate in ascending numeric order.
    """
    if value < 0 or value > UINT64_MAX:
        raise ValueError(f"value out of unsigned 64-bit range: {value}")
    return _UINT64.pack(value)


def decode_uint64(data: bytes) -> int:
    if len(data) != _UINT64.size:
        raise ValueError(f"expected {_UINT64.size} bytes, got {len(data)}")
    return _UINT64.unpack(data)[0]
