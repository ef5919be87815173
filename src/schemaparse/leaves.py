"""Canonicalizing leaf transforms for hex-encoded chain values.

Each function takes one raw value and returns its canonical form, raising
LeafTransformError when the value cannot be canonicalized. They are meant to
be used directly as schema leaves:

    tx = compile_schema({
        "from": address,
        "to": compile_schema(address).or_(lambda v: None),
        "value": drip,
        "epoch": compile_schema(epoch_number, default=EPOCH_LATEST_STATE),
    })

Canonical hex is lower case, ``0x`` prefixed and of even length.
Unit conversion uses Decimal with ROUND_HALF_DOWN, scoped to this module.
"""

import re
from datetime import datetime
from decimal import ROUND_HALF_DOWN, Context, Decimal, InvalidOperation
from typing import Any

from schemaparse.errors import LeafTransformError

HEX_RE = re.compile(r"^0x([0-9a-f][0-9a-f])*$")

GDRIP_IN_DRIP = Decimal(10) ** 9
CFX_IN_DRIP = Decimal(10) ** 18

ADDRESS_BYTES = 20
HASH_BYTES = 32

EPOCH_EARLIEST = "earliest"
EPOCH_LATEST_STATE = "latest_state"
EPOCH_LATEST_MINED = "latest_mined"
EPOCH_TAGS = frozenset({EPOCH_EARLIEST, EPOCH_LATEST_STATE, EPOCH_LATEST_MINED})

_DECIMAL_CONTEXT = Context(prec=80, rounding=ROUND_HALF_DOWN)


def is_hex(value: Any) -> bool:
    """Check for a canonical hex string ('0x', '0x01'; not '0x1' or '01')."""
    return isinstance(value, str) and HEX_RE.fullmatch(value) is not None


def hex_string(value: Any) -> str:
    """Canonicalize a value to a hex string.

    >>> hex_string(None)
    '0x'
    >>> hex_string(1)
    '0x01'
    >>> hex_string('10')
    '0x10'
    >>> hex_string('0x1')
    '0x01'
    >>> hex_string(b'\\x01\\x02')
    '0x0102'
    """
    if value is None:
        return "0x"

    if isinstance(value, bool):
        raise LeafTransformError(f"{value!r} do not match hex string")

    if isinstance(value, (int, Decimal)):
        return hex_string(_number_to_hex_digits(value))

    if isinstance(value, float):
        return hex_string(_number_to_hex_digits(Decimal(str(value))))

    if isinstance(value, str):
        if is_hex(value):
            return value

        string = value.lower()
        string = string if string.startswith("0x") else f"0x{string}"
        string = f"0x0{string[2:]}" if len(string) % 2 else string
        if not is_hex(string):
            raise LeafTransformError(f'"{value}" do not match hex string')
        return string

    if isinstance(value, (bytes, bytearray)):
        return f"0x{bytes(value).hex()}"

    if isinstance(value, datetime):
        seconds = int(value.replace(microsecond=0).timestamp())
        return hex_string(seconds * 1000 + value.microsecond // 1000)

    return hex_string(str(value))


def _number_to_hex_digits(value: int | Decimal) -> str:
    if isinstance(value, Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            raise LeafTransformError(f"{value} is not an integer")
        value = int(value)
    if value < 0:
        raise LeafTransformError(f"{value} is negative")
    return format(value, "x")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise LeafTransformError(f"{value!r} is not a number")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    try:
        text = str(value).strip()
        if text.lower().startswith("0x"):
            return Decimal(int(text, 16))
        return Decimal(text)
    except (InvalidOperation, ValueError) as e:
        raise LeafTransformError(f'"{value}" is not a number') from e


def hex_from_number(value: Any) -> str:
    """Hex string of a numeric value; decimal strings are read as numbers.

    >>> hex_from_number('10')
    '0x0a'
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return hex_string(value)
    return hex_string(_to_decimal(value))


def hex_to_bytes(value: str) -> bytes:
    """Decode a canonical hex string; non-canonical input is rejected."""
    if not is_hex(value):
        raise LeafTransformError(f'"{value}" do not match hex string')
    return bytes.fromhex(value[2:])


def hex_concat(*values: str) -> str:
    """Concatenate canonical hex strings in order."""
    for index, value in enumerate(values):
        if not is_hex(value):
            raise LeafTransformError(f'values[{index}] do not match hex string, got "{value}"')
    return "0x" + "".join(value[2:] for value in values)


def drip(value: Any) -> str:
    """Amount in drip as hex."""
    return hex_from_number(value)


def drip_from_gdrip(value: Any) -> str:
    """Drip hex from an amount in GDrip (rounded half down to an integer)."""
    number = _DECIMAL_CONTEXT.multiply(_to_decimal(value), GDRIP_IN_DRIP)
    return drip(number.to_integral_value(context=_DECIMAL_CONTEXT))


def drip_from_cfx(value: Any) -> str:
    """Drip hex from an amount in CFX (rounded half down to an integer)."""
    number = _DECIMAL_CONTEXT.multiply(_to_decimal(value), CFX_IN_DRIP)
    return drip(number.to_integral_value(context=_DECIMAL_CONTEXT))


def drip_to_gdrip(value: Any) -> Decimal:
    """Amount in GDrip from drip."""
    return _DECIMAL_CONTEXT.divide(_to_decimal(value), GDRIP_IN_DRIP)


def drip_to_cfx(value: Any) -> Decimal:
    """Amount in CFX from drip."""
    return _DECIMAL_CONTEXT.divide(_to_decimal(value), CFX_IN_DRIP)


def _fixed_length_hex(value: Any, size: int, kind: str) -> str:
    string = hex_string(value)
    if len(string) != 2 + size * 2:
        raise LeafTransformError(f"{value!r} do not match {kind}")
    return string


def private_key(value: Any) -> str:
    """32-byte private key as hex."""
    return _fixed_length_hex(value, HASH_BYTES, "PrivateKey")


def address(value: Any) -> str:
    """20-byte account address as hex."""
    return _fixed_length_hex(value, ADDRESS_BYTES, "Address")


def block_hash(value: Any) -> str:
    """32-byte block hash as hex."""
    return _fixed_length_hex(value, HASH_BYTES, "BlockHash")


def tx_hash(value: Any) -> str:
    """32-byte transaction hash as hex."""
    return _fixed_length_hex(value, HASH_BYTES, "TxHash")


def epoch_number(value: Any) -> str:
    """Epoch tag (case-insensitive) or epoch number as hex.

    >>> epoch_number('LATEST_STATE')
    'latest_state'
    >>> epoch_number(100)
    '0x64'
    """
    if isinstance(value, str) and value.lower() in EPOCH_TAGS:
        return value.lower()
    return hex_from_number(value)


LEAVES = {
    "hex_string": hex_string,
    "hex_from_number": hex_from_number,
    "drip": drip,
    "drip_from_gdrip": drip_from_gdrip,
    "drip_from_cfx": drip_from_cfx,
    "private_key": private_key,
    "address": address,
    "block_hash": block_hash,
    "tx_hash": tx_hash,
    "epoch_number": epoch_number,
}
