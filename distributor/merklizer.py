from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from distributor.errors import ClaimNotFoundError, EmptyTreeError
from distributor.leaves import (
    WORD_LENGTH,
    decode_token_leaf,
    encode_account_leaf,
    encode_token_leaf,
)
from distributor.merkle import MerkleTree
from distributor.models.Claim import Claim, EarnerTreeLeaf, TokenTreeLeaf
from distributor.models.types import Address, AddressLike, to_address, to_checksum
from distributor.utils import from_hex, to_hex

if TYPE_CHECKING:
    from distributor.distribution import Distribution


@dataclass(frozen=True)
class IndexTables:
    """
    Leaf positions assigned by a merklization
    :param `accounts`: earner => position in the account tree
    :param `tokens`: (earner, token) => position in that earner's token tree
    """

    accounts: dict[Address, int]
    tokens: dict[tuple[Address, Address], int]


@dataclass(frozen=True)
class MerklizedDistribution:
    """The published trees of a distribution, everything needed to serve claims"""

    account_tree: MerkleTree
    token_trees: dict[Address, MerkleTree]
    index: IndexTables

    @property
    def root(self) -> bytes:
        return self.account_tree.root

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    def get_claim(
        self, earner: AddressLike, tokens: Optional[Iterable[AddressLike]] = None
    ) -> Claim:
        """
        Build the proofs for `earner` over `tokens`, or over every token they are owed.
        Tokens are returned in the order requested.
        """
        address = to_address(earner)
        if address not in self.index.accounts:
            raise ClaimNotFoundError(f"{to_checksum(address)} is not in the distribution")

        earner_index = self.index.accounts[address]
        token_tree = self.token_trees[address]

        if tokens is None:
            token_indices = list(range(len(token_tree)))
        else:
            token_indices = []
            for token in tokens:
                key = (address, to_address(token))
                if key not in self.index.tokens:
                    raise ClaimNotFoundError(
                        f"{to_checksum(address)} is not owed token {to_checksum(key[1])}"
                    )
                token_indices.append(self.index.tokens[key])

        token_leaves = []
        for i in token_indices:
            token, amount = decode_token_leaf(token_tree.leaf_at(i))
            token_leaves.append(
                TokenTreeLeaf(token=to_checksum(token), cumulativeEarnings=str(amount))
            )

        return Claim(
            root=self.root_hex,
            earnerIndex=earner_index,
            earnerTreeProof=to_hex(b"".join(self.account_tree.proof(earner_index))),
            earnerLeaf=EarnerTreeLeaf(
                earner=to_checksum(address), earnerTokenRoot=token_tree.root_hex
            ),
            tokenIndices=token_indices,
            tokenTreeProofs=[to_hex(b"".join(token_tree.proof(i))) for i in token_indices],
            tokenLeaves=token_leaves,
        )

    def claims(self) -> Iterator[Claim]:
        """One claim per earner, covering all of their tokens, in account tree order"""
        for address in self.token_trees:
            yield self.get_claim(address)

    def verify_claim(self, claim: Claim) -> bool:
        return claim.root == self.root_hex and verify_claim(claim)


def _split_proof(proof: str) -> Optional[list[bytes]]:
    raw = from_hex(proof)
    if len(raw) % WORD_LENGTH:
        return None
    return [raw[i : i + WORD_LENGTH] for i in range(0, len(raw), WORD_LENGTH)]


def verify_claim(claim: Claim) -> bool:
    """
    Check every proof in `claim` against its own root.
    Off-chain sanity check of what the rewards coordinator will verify.
    """
    if len(claim.tokenIndices) != len(claim.tokenLeaves) or len(claim.tokenIndices) != len(
        claim.tokenTreeProofs
    ):
        return False

    token_root = from_hex(claim.earnerLeaf.earnerTokenRoot)
    earner_proof = _split_proof(claim.earnerTreeProof)
    if earner_proof is None or len(token_root) != WORD_LENGTH:
        return False

    earner_leaf = encode_account_leaf(claim.earnerLeaf.earner, token_root)
    if not MerkleTree.verify(from_hex(claim.root), earner_leaf, claim.earnerIndex, earner_proof):
        return False

    for index, leaf, proof in zip(claim.tokenIndices, claim.tokenLeaves, claim.tokenTreeProofs):
        token_proof = _split_proof(proof)
        if token_proof is None:
            return False
        token_leaf = encode_token_leaf(leaf.token, int(leaf.cumulativeEarnings))
        if not MerkleTree.verify(token_root, token_leaf, index, token_proof):
            return False
    return True


def merklize(distribution: Distribution, tree_cls=MerkleTree) -> MerklizedDistribution:
    """
    Build one token tree per account and an account tree over the token tree roots.

    `tree_cls` only needs a `build(leaves)` constructor returning a tree with
    `root`, `root_hex`, `leaf_at(i)`, `proof(i)` and `len()`.

    The index tables are handed to the distribution in a single step once every
    tree has been built; if anything fails the distribution goes back to the
    unmerklized state with no tables.
    """
    if len(distribution) == 0:
        raise EmptyTreeError("Cannot merklize an empty distribution")

    distribution._begin_merklize()
    try:
        token_trees: dict[Address, MerkleTree] = {}
        account_index: dict[Address, int] = {}
        token_index: dict[tuple[Address, Address], int] = {}
        account_leaves = []

        for i, account in enumerate(distribution.accounts):
            if not account.tokens:
                raise EmptyTreeError(f"{to_checksum(account.address)} has no tokens")

            token_leaves = []
            for j, entry in enumerate(account.tokens):
                token_leaves.append(encode_token_leaf(entry.token, entry.amount))
                token_index[(account.address, entry.token)] = j

            token_tree = tree_cls.build(token_leaves)
            token_trees[account.address] = token_tree

            account_leaves.append(encode_account_leaf(account.address, token_tree.root))
            account_index[account.address] = i

        account_tree = tree_cls.build(account_leaves)
    except Exception:
        distribution._abort_merklize()
        raise

    index = IndexTables(accounts=account_index, tokens=token_index)
    distribution._publish_index(index)
    return MerklizedDistribution(account_tree=account_tree, token_trees=token_trees, index=index)
