#!/usr/bin/env python3
"""
Response wire format.

Every endpoint except refresh answers with one message:

    byte 0     status (0 = failure, 1 = success)
    byte 1     tens digit of the size exponent
    byte 2     ones digit of the size exponent
    bytes 3..  payload (result text, or error text on failure)

The size exponent P is a buffer-sizing hint: clients may allocate 2**P
bytes for the payload. It is computed the same way existing clients expect
and is never checked against the payload length; for payloads shorter than
two bytes it is 1 regardless.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from .exceptions import ProtocolError

HEADER_SIZE = 3

# Payload text is encoded this way so surrogate-escaped request bytes are
# written back unchanged.
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'


class Status(IntEnum):
    """Response status byte."""
    FAILURE = 0
    SUCCESS = 1


@dataclass(frozen=True)
class Response:
    """A decoded response."""
    status: Status
    power: int
    payload: bytes

    @property
    def ok(self) -> bool:
        return self.status == Status.SUCCESS

    @property
    def text(self) -> str:
        return self.payload.decode(ENCODING, errors='replace')


def size_exponent(payload_length: int) -> int:
    """Smallest P >= 1 with 2**P >= payload_length (1 for lengths up to 2)."""
    power = 1
    res = 2
    while res < payload_length:
        res *= 2
        power += 1
    return power


def encode_response(status: Status, payload: Union[str, bytes]) -> bytes:
    """
    Build one response message.

    Args:
        status: Success or failure
        payload: Result or error text; str is encoded as UTF-8

    Returns:
        Header followed by the payload bytes
    """
    if isinstance(payload, str):
        payload = payload.encode(ENCODING, errors=ENCODING_ERRORS)
    power = size_exponent(len(payload))
    header = bytes((int(status), power // 10, power % 10))
    return header + payload


def decode_response(message: bytes) -> Response:
    """
    Split a response into status, exponent and payload.

    Raises:
        ProtocolError: If the message is shorter than the header
    """
    if len(message) < HEADER_SIZE:
        raise ProtocolError(len(message))
    return Response(
        status=Status(message[0]) if message[0] in (0, 1) else Status.FAILURE,
        power=message[1] * 10 + message[2],
        payload=bytes(message[HEADER_SIZE:]),
    )
