from pydantic import BaseModel

from distributor.models.types import BigNumber, EthereumAddress

# hex encoded bytes, 0x prefixed
HexBytes = str


class EarnerTreeLeaf(BaseModel):
    earner: EthereumAddress
    earnerTokenRoot: HexBytes


class TokenTreeLeaf(BaseModel):
    token: EthereumAddress
    cumulativeEarnings: BigNumber


class Claim(BaseModel):
    """
    Everything an earner submits to prove what they are owed against a published root.
    :param `earnerIndex`: position of the earner leaf in the account tree
    :param `earnerTreeProof`: concatenated sibling hashes from the earner leaf to the root
    :param `tokenIndices`: position of each claimed token leaf in the earner's token tree
    :param `tokenTreeProofs`: concatenated sibling hashes, one entry per claimed token
    """

    root: HexBytes
    earnerIndex: int
    earnerTreeProof: HexBytes
    earnerLeaf: EarnerTreeLeaf
    tokenIndices: list[int]
    tokenTreeProofs: list[HexBytes]
    tokenLeaves: list[TokenTreeLeaf]
