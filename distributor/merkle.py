from __future__ import annotations

from typing import Sequence

from eth_utils import keccak

from distributor.errors import EmptyTreeError

ZERO_HASH = b"\x00" * 32


class MerkleTree:
    """
    Keccak merkle tree over an ordered list of leaves.

    Leaves keep their position (no sorting), so a leaf's index is part of what
    the proof commits to. Each layer is padded to a power of two with zero
    hashes and parents are `keccak(left + right)`, the scheme checked by
    `Merkle.verifyInclusionKeccak` on-chain.
    """

    def __init__(self, leaves: Sequence[bytes]):
        if len(leaves) == 0:
            raise EmptyTreeError("Cannot build a merkle tree without leaves")
        self.data = [bytes(leaf) for leaf in leaves]
        self.layers = MerkleTree.get_layers([keccak(leaf) for leaf in self.data])

    @classmethod
    def build(cls, leaves: Sequence[bytes]) -> MerkleTree:
        return cls(leaves)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    @property
    def root_hex(self) -> str:
        return "0x" + self.root.hex()

    def leaf_at(self, index: int) -> bytes:
        return self.data[index]

    def proof(self, index: int) -> list[bytes]:
        """Sibling hashes from the leaf at `index` up to, but excluding, the root"""
        if index < 0 or index >= len(self.data):
            raise IndexError(f"Leaf index {index} out of range for {len(self.data)} leaves")
        proof = []
        for layer in self.layers[:-1]:
            proof.append(layer[index ^ 1])
            index //= 2
        return proof

    @staticmethod
    def get_layers(nodes: list[bytes]) -> list[list[bytes]]:
        width = 1
        while width < len(nodes):
            width *= 2
        layers = [nodes + [ZERO_HASH] * (width - len(nodes))]
        while len(layers[-1]) > 1:
            layers.append(MerkleTree.get_next_layer(layers[-1]))
        return layers

    @staticmethod
    def get_next_layer(nodes: list[bytes]) -> list[bytes]:
        return [keccak(a + b) for a, b in zip(nodes[::2], nodes[1::2])]

    @staticmethod
    def process_proof(leaf: bytes, index: int, proof: Sequence[bytes]) -> bytes:
        computed = keccak(leaf)
        for sibling in proof:
            if index % 2 == 0:
                computed = keccak(computed + sibling)
            else:
                computed = keccak(sibling + computed)
            index //= 2
        return computed

    @staticmethod
    def verify(root: bytes, leaf: bytes, index: int, proof: Sequence[bytes]) -> bool:
        # a proof of the right length pins the index; leftover bits mean a wrong index
        if index >> len(proof):
            return False
        return MerkleTree.process_proof(leaf, index, proof) == root
