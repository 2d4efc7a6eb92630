from enum import Enum

from pydantic import BaseModel, field_validator

from distributor.env import DEFAULT_DUPLICATE_POLICY, DEFAULT_OUTPUT_DIR
from distributor.errors import BadConfigException


class DuplicatePolicy(str, Enum):
    """
    What to do when the same (earner, token) pair appears more than once in a batch
    :option REJECT: fail the batch
    :option LATEST_SNAPSHOT: keep the record with the most recent snapshot
    :option SUM: add the amounts together
    """

    REJECT = "reject"
    LATEST_SNAPSHOT = "latest_snapshot"
    SUM = "sum"


class Config(BaseModel):
    """
    Settings for a single distribution build
    :param `name`: label of the build, used as the output folder
    :param `output_dir`: parent folder for every build
    :param `duplicate_policy`: how repeated (earner, token) records are handled on ingestion
    """

    name: str
    output_dir: str = DEFAULT_OUTPUT_DIR
    duplicate_policy: DuplicatePolicy = DuplicatePolicy(DEFAULT_DUPLICATE_POLICY)

    @field_validator("name")
    @classmethod
    def validate_name(cls, name: str) -> str:
        name = name.strip()
        if not name:
            raise BadConfigException("Config name cannot be empty")
        if "/" in name or "\\" in name:
            raise BadConfigException(f"Config name cannot contain a path separator: {name}")
        return name

    @property
    def path(self) -> str:
        return f"{self.output_dir}/{self.name}"
