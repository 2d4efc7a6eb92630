from eth_utils import decode_hex


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def from_hex(data: str) -> bytes:
    return decode_hex(data)
