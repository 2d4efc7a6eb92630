from __future__ import annotations

import eth_utils as eth
from pydantic import BaseModel, field_validator

from distributor.models.types import BigNumber, EthereumAddress


class SerializedToken(BaseModel):
    """A token and the cumulative amount owed for it"""

    token: EthereumAddress
    amount: BigNumber

    @field_validator("token")
    @classmethod
    def checksum_token(cls, addr: EthereumAddress):
        return eth.to_checksum_address(addr)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_string(cls, amount):
        if isinstance(amount, int) and not isinstance(amount, bool):
            return str(amount)
        return amount


class SerializedAccount(BaseModel):
    address: EthereumAddress
    tokens: list[SerializedToken]

    @field_validator("address")
    @classmethod
    def checksum_address(cls, addr: EthereumAddress):
        return eth.to_checksum_address(addr)


class SerializedDistribution(BaseModel):
    """
    A distribution that has already been sorted, as written out after a build.
    Accounts and their tokens are listed in leaf order, so loading it back
    does not need to re-sort anything.
    """

    accounts: list[SerializedAccount]
