from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter
from typing import Iterator, Optional

from distributor.errors import (
    AddressNotInOrderError,
    AlreadyMerklizedError,
    AmountOutOfRangeError,
    DistributionMerklizedError,
    TokenNotInOrderError,
)
from distributor.merkle import MerkleTree
from distributor.merklizer import IndexTables, MerklizedDistribution, merklize
from distributor.models.Distribution import (
    SerializedAccount,
    SerializedDistribution,
    SerializedToken,
)
from distributor.models.types import Address, AddressLike, to_address, to_checksum


class DistributionState(str, Enum):
    """
    :state UNMERKLIZED: accepting `set` calls, no index tables
    :state MERKLIZING: trees are being built, still no index tables
    :state MERKLIZED: index tables published, the distribution is read only
    """

    UNMERKLIZED = "unmerklized"
    MERKLIZING = "merklizing"
    MERKLIZED = "merklized"


@dataclass
class TokenEntry:
    token: Address
    amount: int


@dataclass
class AccountEntry:
    address: Address
    tokens: list[TokenEntry] = field(default_factory=list)


class Distribution:
    """
    Cumulative amounts owed per earner and token, held in leaf order.

    Earners are kept strictly ascending, and so are the tokens within each earner.
    `set` only ever appends: callers must present pairs already sorted, and
    anything out of order is refused rather than moved into place, because the
    position of an entry is its index in the merkle trees.
    """

    def __init__(self):
        self.accounts: list[AccountEntry] = []
        self.state = DistributionState.UNMERKLIZED
        self._index: Optional[IndexTables] = None

    def __len__(self) -> int:
        return len(self.accounts)

    def num_tokens(self) -> int:
        return sum(len(a.tokens) for a in self.accounts)

    def items(self) -> Iterator[tuple[Address, Address, int]]:
        for account in self.accounts:
            for entry in account.tokens:
                yield account.address, entry.token, entry.amount

    def set(self, address: AddressLike, token: AddressLike, amount: Optional[int] = None) -> None:
        """
        Append `amount` for (`address`, `token`). A missing amount is stored as zero.
        Raises an ordering error, leaving the distribution untouched, if the pair
        does not sort strictly after the last pair inserted.
        """
        if self.state != DistributionState.UNMERKLIZED:
            raise DistributionMerklizedError(
                "Distribution has been merklized, call reset_index() before modifying it"
            )

        address = to_address(address)
        token = to_address(token)
        amount = 0 if amount is None else int(amount)
        if amount < 0:
            raise AmountOutOfRangeError(f"Amount cannot be negative, got {amount}")

        if not self.accounts or address > self.accounts[-1].address:
            self.accounts.append(AccountEntry(address, [TokenEntry(token, amount)]))
            return

        last = self.accounts[-1]
        if address < last.address:
            raise AddressNotInOrderError(
                f"{to_checksum(address)} is lower than the last address {to_checksum(last.address)}"
            )
        if token <= last.tokens[-1].token:
            raise TokenNotInOrderError(
                f"{to_checksum(token)} is not greater than the last token "
                f"{to_checksum(last.tokens[-1].token)} of {to_checksum(address)}"
            )
        last.tokens.append(TokenEntry(token, amount))

    def _find_account(self, address: Address) -> Optional[AccountEntry]:
        i = bisect_left(self.accounts, address, key=attrgetter("address"))
        if i < len(self.accounts) and self.accounts[i].address == address:
            return self.accounts[i]
        return None

    def get(self, address: AddressLike, token: AddressLike) -> tuple[int, bool]:
        account = self._find_account(to_address(address))
        if account is None:
            return 0, False

        token = to_address(token)
        i = bisect_left(account.tokens, token, key=attrgetter("token"))
        if i < len(account.tokens) and account.tokens[i].token == token:
            return account.tokens[i].amount, True
        return 0, False

    def get_account_index(self, address: AddressLike) -> tuple[int, bool]:
        index = self._index
        if index is None:
            return 0, False
        position = index.accounts.get(to_address(address))
        return (0, False) if position is None else (position, True)

    def get_token_index(self, address: AddressLike, token: AddressLike) -> tuple[int, bool]:
        index = self._index
        if index is None:
            return 0, False
        position = index.tokens.get((to_address(address), to_address(token)))
        return (0, False) if position is None else (position, True)

    def merklize(self, tree_cls=MerkleTree) -> MerklizedDistribution:
        return merklize(self, tree_cls)

    def reset_index(self) -> None:
        """Drop the index tables so the distribution can be modified and merklized again"""
        self._index = None
        self.state = DistributionState.UNMERKLIZED

    # state transitions driven by the merklizer

    def _begin_merklize(self) -> None:
        if self.state != DistributionState.UNMERKLIZED:
            raise AlreadyMerklizedError(
                f"Distribution is {self.state.value}, call reset_index() to rebuild"
            )
        self.state = DistributionState.MERKLIZING

    def _abort_merklize(self) -> None:
        self._index = None
        self.state = DistributionState.UNMERKLIZED

    def _publish_index(self, index: IndexTables) -> None:
        self._index = index
        self.state = DistributionState.MERKLIZED

    def to_model(self) -> SerializedDistribution:
        return SerializedDistribution(
            accounts=[
                SerializedAccount(
                    address=to_checksum(a.address),
                    tokens=[
                        SerializedToken(token=to_checksum(t.token), amount=str(t.amount))
                        for t in a.tokens
                    ],
                )
                for a in self.accounts
            ]
        )

    def to_json(self, indent: Optional[int] = 4) -> str:
        return self.to_model().model_dump_json(indent=indent)
