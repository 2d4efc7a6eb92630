from __future__ import annotations

import eth_utils as eth
from pydantic import BaseModel, field_validator

from distributor.models.types import Address, EthereumAddress, BigNumber, to_address


class EarnerLine(BaseModel):
    """
    One raw record of the bulk reward file
    :param `earner`: the account owed the rewards
    :param `token`: the reward token
    :param `snapshot`: millisecond timestamp of the snapshot, informational only
    :param `cumulative_amount`: running total owed, may use scientific notation
    """

    earner: EthereumAddress
    token: EthereumAddress
    snapshot: int
    cumulative_amount: BigNumber

    @field_validator("earner", "token")
    @classmethod
    def checksum_address(cls, input: str):
        if not eth.is_hex_address(input):
            raise ValueError(f"Not a hex address: {input}")
        return eth.to_checksum_address(input)

    @field_validator("cumulative_amount", mode="before")
    @classmethod
    def amount_as_string(cls, amount):
        # some exporters write small amounts as bare json numbers
        if isinstance(amount, int) and not isinstance(amount, bool):
            return str(amount)
        return amount

    @property
    def earner_address(self) -> Address:
        return to_address(self.earner)

    @property
    def token_address(self) -> Address:
        return to_address(self.token)
