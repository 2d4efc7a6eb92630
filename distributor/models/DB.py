from __future__ import annotations

import os
from typing import TYPE_CHECKING, Optional

from tinydb import TinyDB, where

from distributor.errors import ClaimNotFoundError, MissingDBException
from distributor.models.Claim import Claim
from distributor.models.Config import Config
from distributor.models.types import AddressLike, to_checksum

if TYPE_CHECKING:
    from distributor.merklizer import MerklizedDistribution


class DB(TinyDB):
    """
    Claims of a merklized distribution, stored for whatever serves proofs to earners.
    Tables:
    `root`: a single document with the account tree root and its size
    `claims`: one claim per earner covering all of their tokens
    """

    config: Config

    def __init__(self, conf: Config, drop=False, **kwargs):
        self.config = conf
        path = self.db_path(conf)

        # check if the directory exists
        create_dirs = self.exists(path) == False
        super().__init__(
            path,
            indent=4,
            create_dirs=create_dirs,
            **kwargs,
        )

        if drop:
            self.drop_tables()

    @staticmethod
    def db_path(conf: Config) -> str:
        return f"{conf.path}/distribution-db.json"

    @staticmethod
    def exists(path: str):
        return os.path.exists(path)

    @classmethod
    def open_existing(cls, conf: Config) -> DB:
        if not cls.exists(cls.db_path(conf)):
            raise MissingDBException(
                f"Missing DB at {cls.db_path(conf)}, please build the distribution first"
            )
        return cls(conf, drop=False)

    def write_merklized(self, merklized: MerklizedDistribution) -> None:
        self.table("root").truncate()
        self.table("root").insert(
            {"root": merklized.root_hex, "earners": len(merklized.token_trees)}
        )
        self.table("claims").truncate()
        self.table("claims").insert_multiple([c.model_dump() for c in merklized.claims()])

    def get_root(self) -> Optional[str]:
        roots = self.table("root").all()
        return roots[0]["root"] if roots else None

    def get_claim(self, earner: AddressLike) -> Claim:
        found = self.table("claims").get(where("earnerLeaf")["earner"] == to_checksum(earner))
        if found is None:
            raise ClaimNotFoundError(f"No claim stored for {to_checksum(earner)}")
        return Claim.model_validate(dict(found))
