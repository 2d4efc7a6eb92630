from typing import Union

import eth_utils as eth

from distributor.errors import AddressParseError

# type aliases for clarity
Address = bytes
EthereumAddress = str
BigNumber = str
AddressLike = Union[Address, EthereumAddress]

ADDRESS_LENGTH = 20


def to_address(value: AddressLike) -> Address:
    """
    Normalize a hex string or raw bytes to the 20 byte canonical address.
    Raw bytes of the wrong length are rejected rather than padded.
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_LENGTH:
            raise AddressParseError(
                f"Expected {ADDRESS_LENGTH} address bytes, got {len(value)}"
            )
        return bytes(value)
    if not isinstance(value, str) or not eth.is_hex_address(value):
        raise AddressParseError(f"Not a hex address: {value!r}")
    return eth.to_canonical_address(value)


def to_checksum(address: AddressLike) -> EthereumAddress:
    return eth.to_checksum_address(to_address(address))
