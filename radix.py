"""
Hex and base64 text <-> bytes

Both directions regroup the input into fixed-size chunks and convert each chunk with positional-numeral arithmetic:
fold the digits into an integer in the source base, then peel that integer back out as digits of the target base.

    2 hex chars  <-> 1 byte
    3 bytes      <-> 4 base64 chars
"""

from typing import Dict, List

HEX_ALPHABET = "0123456789abcdef"
BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
BASE64_PAD = "="

_HEX_DIGITS: Dict[str, int] = {c: i for i, c in enumerate(HEX_ALPHABET)}
_BASE64_DIGITS: Dict[str, int] = {c: i for i, c in enumerate(BASE64_ALPHABET)}


class InvalidCharacterError(ValueError):
    pass


class StructuralError(ValueError):
    pass


def _fold(chars: str, digits: Dict[str, int], name: str) -> int:
    """
    Interpret chars as a big-endian numeral whose digit values are given by digits

    >>> _fold("ff", _HEX_DIGITS, "hex")
    255
    >>> _fold("TWFu", _BASE64_DIGITS, "base64")
    5071214
    """
    value = 0
    base = len(digits)
    for c in chars:
        try:
            value = base * value + digits[c]
        except KeyError:
            raise InvalidCharacterError(f"{c!r} is not a valid {name} character") from None
    return value


def _unfold(value: int, base: int, width: int) -> List[int]:
    """
    Split value into exactly width big-endian digits of the given base

    >>> _unfold(5071214, 256, 3)
    [77, 97, 110]
    >>> _unfold(256, 256, 1)
    Traceback (most recent call last):
    radix.StructuralError: 256 does not fit in 1 base-256 digit(s)
    """
    original = value
    res = []
    for _ in range(width):
        value, digit = divmod(value, base)
        res.append(digit)
    if value:
        raise StructuralError(f"{original} does not fit in {width} base-{base} digit(s)")
    return res[::-1]


def hex_to_bytes(hex_text: str) -> bytes:
    """
    Decode lowercase hex to bytes. An odd-length input is zero-extended on the most-significant side

    >>> hex_to_bytes("4d616e")
    b'Man'
    >>> bytes_to_hex(hex_to_bytes("abc"))
    '0abc'
    >>> hex_to_bytes("")
    b''
    >>> hex_to_bytes("4D")
    Traceback (most recent call last):
    radix.InvalidCharacterError: 'D' is not a valid hex character
    """
    if len(hex_text) % 2:
        hex_text = "0" + hex_text
    res = []
    for i in range(0, len(hex_text), 2):
        res.append(_fold(hex_text[i:i + 2], _HEX_DIGITS, "hex"))
    return bytes(res)


def bytes_to_hex(data: bytes) -> str:
    """
    >>> bytes_to_hex(b"Man")
    '4d616e'
    """
    return "".join(HEX_ALPHABET[d] for b in data for d in _unfold(b, 16, 2))


def bytes_to_base64(data: bytes, pad: bool = False) -> str:
    """
    Encode bytes as base64. A final partial group of 1 or 2 bytes becomes exactly 2 or 3 characters, followed by
    "=" padding only if pad is True

    >>> bytes_to_base64(b"Man")
    'TWFu'
    >>> bytes_to_base64(b"Ma")
    'TWE'
    >>> bytes_to_base64(b"M")
    'TQ'
    >>> bytes_to_base64(b"M", pad=True)
    'TQ=='
    """
    res = []
    for i in range(0, len(data), 3):
        group = data[i:i + 3]
        num_chars = len(group) + 1
        # Left-align the group's bits within the 6-bit digits
        shift = num_chars * 6 - len(group) * 8
        value = int.from_bytes(group, "big") << shift
        res.extend(BASE64_ALPHABET[d] for d in _unfold(value, 64, num_chars))
        if pad:
            res.append(BASE64_PAD * (4 - num_chars))
    return "".join(res)


def base64_to_bytes(b64_text: str) -> bytes:
    """
    Decode base64, with or without trailing "=" padding

    >>> base64_to_bytes("TWFu")
    b'Man'
    >>> base64_to_bytes("TWE=")
    b'Ma'
    >>> base64_to_bytes("TQ")
    b'M'
    >>> base64_to_bytes("TW=u")
    Traceback (most recent call last):
    radix.InvalidCharacterError: '=' is not a valid base64 character
    >>> base64_to_bytes("TWFuT")
    Traceback (most recent call last):
    radix.StructuralError: Dangling base64 character at offset 4
    """
    body = b64_text.rstrip(BASE64_PAD)
    num_pad = len(b64_text) - len(body)
    if num_pad > 2 or (num_pad and len(b64_text) % 4):
        raise StructuralError(f"Bad base64 padding in {b64_text[-4:]!r}")

    res = bytearray()
    for i in range(0, len(body), 4):
        group = body[i:i + 4]
        if len(group) == 1:
            raise StructuralError(f"Dangling base64 character at offset {i}")
        num_bytes = len(group) * 6 // 8
        value = _fold(group, _BASE64_DIGITS, "base64") >> (len(group) * 6 - num_bytes * 8)
        res.extend(_unfold(value, 256, num_bytes))
    return bytes(res)


def hex2b64(hex_text: str) -> str:
    """
    Decodes hex to bytes and returns a base64 representation of those bytes

    >>> hex2b64('49276d206b696c6c696e6720796f757220627261696e206c696b65206120706f69736f6e6f7573206d757368726f6f6d')
    'SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t'
    >>> hex2b64('4d61')
    'TWE'
    """
    return bytes_to_base64(hex_to_bytes(hex_text))


def b642hex(b64_text: str) -> str:
    """
    Decodes base64 to bytes and returns a hex representation of those bytes

    >>> b642hex('SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t')
    '49276d206b696c6c696e6720796f757220627261696e206c696b65206120706f69736f6e6f7573206d757368726f6f6d'
    """
    return bytes_to_hex(base64_to_bytes(b64_text))
