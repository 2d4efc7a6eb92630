from pathlib import Path

import pytest

from distributor.config import load_conf
from distributor.distribution import Distribution
from distributor.models import Config

STUBS = Path(__file__).parent / "stubs"

# both lists are in ascending byte order
ADDRESSES = [
    "0x055fc8880e53d9d063f78d4fc0b8750bda2e73c6",
    "0x0d18775c9ae9fe07447995726d58e6395eed8d71",
    "0x464115b4f48f676048cd685b5136bcf66f63b120",
    "0x8e979b94c73f7c97ad94a2fb1a3b567f97691b90",
    "0xcca3c8a844abf1d141ea1b7d76148bcbb660aecb",
]

TOKENS = [
    "0x16b67e94257352a230636a870a4bed27b3ea9bf9",
    "0x3b0d95bdf43f686242cd9c7c3aeda6ea8fe590e1",
    "0x94373a4919b3240d86ea41593d5eba789fef3848",
    "0xe1b7a1249c71b538cc183b0080ffc3efd02bffb9",
    "0xfc4c8b6c7a257be6e2477be98d94304978a9c0a5",
]


def build_test_distribution() -> Distribution:
    """
    Give earlier addresses more tokens:
    addr_0 => token_0..token_4 => 1..5
    addr_1 => token_0..token_3 => 2..5
    ...
    addr_4 => token_0 => 5
    """
    d = Distribution()
    for i in range(len(ADDRESSES)):
        for j in range(len(TOKENS) - i):
            d.set(ADDRESSES[i], TOKENS[j], j + i + 1)
    return d


@pytest.fixture
def config(tmp_path) -> Config:
    conf = load_conf(f"{STUBS}/config/distribution-conf.json")
    conf.output_dir = str(tmp_path)
    return conf


@pytest.fixture
def distribution() -> Distribution:
    return build_test_distribution()
