"""
Leaf encodings for the two levels of the distribution tree.

Both leaves are 53 bytes: a one byte salt, a 20 byte address and a 32 byte word.
The salt is what separates an earner leaf from a token leaf, so the two can
never be confused by a verifier walking a tree that carries no type labels.
These layouts are checked on-chain and must not change.
"""
from distributor.errors import AmountOutOfRangeError, EncodingOverflowError
from distributor.models.types import ADDRESS_LENGTH, Address, AddressLike, to_address

EARNER_LEAF_SALT = b"\x00"
TOKEN_LEAF_SALT = b"\x01"

WORD_LENGTH = 32
LEAF_LENGTH = 1 + ADDRESS_LENGTH + WORD_LENGTH

MAX_AMOUNT = 2 ** (8 * WORD_LENGTH) - 1


def encode_amount(amount: int) -> bytes:
    """Big endian uint256, refusing anything that would need truncating"""
    if amount < 0 or amount > MAX_AMOUNT:
        raise AmountOutOfRangeError(f"Amount {amount} does not fit in a uint256")
    return amount.to_bytes(WORD_LENGTH, "big")


def encode_account_leaf(address: AddressLike, token_root: bytes) -> bytes:
    if len(token_root) != WORD_LENGTH:
        raise EncodingOverflowError(
            f"Token root must be {WORD_LENGTH} bytes, got {len(token_root)}"
        )
    return EARNER_LEAF_SALT + to_address(address) + bytes(token_root)


def encode_token_leaf(token: AddressLike, amount: int) -> bytes:
    return TOKEN_LEAF_SALT + to_address(token) + encode_amount(amount)


def _split_leaf(leaf: bytes, salt: bytes) -> tuple[Address, bytes]:
    if len(leaf) != LEAF_LENGTH:
        raise ValueError(f"Leaf must be {LEAF_LENGTH} bytes, got {len(leaf)}")
    if leaf[:1] != salt:
        raise ValueError(f"Unexpected leaf salt {leaf[:1].hex()}")
    return leaf[1 : 1 + ADDRESS_LENGTH], leaf[1 + ADDRESS_LENGTH :]


def decode_account_leaf(leaf: bytes) -> tuple[Address, bytes]:
    return _split_leaf(leaf, EARNER_LEAF_SALT)


def decode_token_leaf(leaf: bytes) -> tuple[Address, int]:
    token, amount = _split_leaf(leaf, TOKEN_LEAF_SALT)
    return token, int.from_bytes(amount, "big")
