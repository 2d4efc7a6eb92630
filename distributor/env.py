import os
from typing import Optional

from dotenv import load_dotenv

from distributor.errors import MissingEnvironmentVariableException

load_dotenv()


def env_var(accessor: str, default: Optional[str] = None) -> str:
    """
    Attempt to fetch an environment variable, falling back to `default`,
    and throw an error if neither is set
    """
    var = os.environ.get(accessor, default)
    if not var:
        raise MissingEnvironmentVariableException(accessor)
    return var


DEFAULT_OUTPUT_DIR = env_var("DISTRIBUTOR_OUTPUT_DIR", "distributions")
DEFAULT_DUPLICATE_POLICY = env_var("DISTRIBUTOR_DUPLICATE_POLICY", "reject")
