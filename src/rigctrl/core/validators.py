"""Payout address and worker name validators.

All validators are pure predicates: malformed input yields False, never
an exception.
"""

import hashlib
import logging
import re

logger = logging.getLogger(__name__)

MAX_WORKER_NAME_LEN = 15

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {c: i for i, c in enumerate(_BASE58_ALPHABET)}
_BASE58_RE = re.compile(r"[13][1-9A-HJ-NP-Za-km-z]{25,34}")

_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_HRP = "bc"
_BECH32_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3
_BECH32_CHECKSUM_LEN = 6
_MAX_WITNESS_VERSION = 16

# Witness program sizes in bytes; v0 is P2WPKH (20) or P2WSH (32)
_MIN_PROGRAM_LEN = 2
_MAX_PROGRAM_LEN = 40
_V0_PROGRAM_LENS = frozenset({20, 32})

_WORKER_NAME_RE = re.compile(rf"[a-zA-Z0-9]{{0,{MAX_WORKER_NAME_LEN}}}")

# P2PKH and P2SH version bytes on mainnet
_BASE58_VERSIONS = frozenset({0x00, 0x05})
_BASE58_PAYLOAD_LEN = 25


def _decode_base58(address: str) -> bytes | None:
    """Decode a base58 string into a fixed 25-byte payload.

    Returns:
        The decoded payload, or None if it does not fit in 25 bytes.
    """
    number = 0
    for char in address:
        number = number * 58 + _BASE58_INDEX[char]
    try:
        return number.to_bytes(_BASE58_PAYLOAD_LEN, "big")
    except OverflowError:
        return None


def _is_valid_base58check(address: str) -> bool:
    if not _BASE58_RE.fullmatch(address):
        return False
    payload = _decode_base58(address)
    if payload is None or payload[0] not in _BASE58_VERSIONS:
        return False
    body, checksum = payload[:-4], payload[-4:]
    digest = hashlib.sha256(hashlib.sha256(body).digest()).digest()
    return digest[:4] == checksum


def _bech32_polymod(values: list[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i, gen in enumerate(_BECH32_GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _bech32_hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data: list[int], from_bits: int, to_bits: int) -> list[int] | None:
    """Regroup bits without padding; None if the leftover bits are invalid."""
    acc = 0
    bits = 0
    ret: list[int] = []
    maxv = (1 << to_bits) - 1
    for value in data:
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            ret.append((acc >> bits) & maxv)
    if bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        return None
    return ret


def _is_valid_bech32(address: str) -> bool:
    """Check a native segwit (bech32/bech32m) mainnet address."""
    if address.lower() != address and address.upper() != address:
        return False
    address = address.lower()
    pos = address.rfind("1")
    if pos < 1 or pos + 7 > len(address) or len(address) > 90:  # noqa: PLR2004
        return False
    hrp, data_part = address[:pos], address[pos + 1 :]
    if hrp != _BECH32_HRP or any(c not in _BECH32_CHARSET for c in data_part):
        return False
    data = [_BECH32_CHARSET.find(c) for c in data_part]
    if len(data) <= _BECH32_CHECKSUM_LEN:
        return False
    checksum = _bech32_polymod(_bech32_hrp_expand(hrp) + data)
    witness_version = data[0]
    if witness_version > _MAX_WITNESS_VERSION:
        return False
    expected = _BECH32_CONST if witness_version == 0 else _BECH32M_CONST
    if checksum != expected:
        return False

    program = _convert_bits(data[1:-_BECH32_CHECKSUM_LEN], 5, 8)
    if program is None or not _MIN_PROGRAM_LEN <= len(program) <= _MAX_PROGRAM_LEN:
        return False
    return witness_version != 0 or len(program) in _V0_PROGRAM_LENS


def validate_bitcoin_address(address: str) -> bool:
    """Return True if ``address`` is a well-formed mainnet bitcoin address.

    Accepts legacy base58check (P2PKH, P2SH) and native segwit addresses.

    Args:
        address: Candidate address, already trimmed.

    Returns:
        True if the address is valid.
    """
    if not address:
        return False
    if address[:3].lower() == f"{_BECH32_HRP}1":
        return _is_valid_bech32(address)
    return _is_valid_base58check(address)


def validate_worker_name(worker_name: str) -> bool:
    """Return True if ``worker_name`` is at most 15 alphanumeric characters.

    An empty worker name is allowed.
    """
    return bool(_WORKER_NAME_RE.fullmatch(worker_name))


def validate_rig_group(rig_group: str) -> bool:
    """Return True for every rig group; groups are not validated yet."""
    return True
