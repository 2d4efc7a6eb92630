import json
from typing import Optional

import fire

from distributor.config import default_conf
from distributor.ingest import from_lines, read_distribution, read_lines
from distributor.merklizer import MerklizedDistribution
from distributor.models import DB, Config, Writer


def write_outputs(conf: Config, distribution, merklized: MerklizedDistribution) -> None:
    writer = Writer(conf)

    # the sorted distribution, so the same root can be rebuilt later
    writer.to_json(distribution.to_model().model_dump(), "distribution")

    summary = [
        {
            "earner": claim.earnerLeaf.earner,
            "earnerIndex": claim.earnerIndex,
            "tokens": len(claim.tokenLeaves),
            "earnerTokenRoot": claim.earnerLeaf.earnerTokenRoot,
        }
        for claim in merklized.claims()
    ]
    writer.to_csv_and_json(summary, "earners")
    writer.to_json({"root": merklized.root_hex}, "root")

    db = DB(conf, drop=True)
    db.write_merklized(merklized)


def build(lines: str, name: str = "latest", config: Optional[str] = None) -> str:
    """Ingest a newline delimited json file of earner lines and merklize it"""
    conf = default_conf(name, config)

    earner_lines = read_lines(lines)
    print(f"⚗ Ingesting {len(earner_lines)} records from {lines}...")

    distribution = from_lines(earner_lines, conf.duplicate_policy)
    merklized = distribution.merklize()
    print(
        f"🌳 Merklized {len(distribution)} earners and {distribution.num_tokens()} tokens"
    )

    write_outputs(conf, distribution, merklized)
    print(f"🚀🚀🚀 Successfully built the distribution in {conf.path}")
    return merklized.root_hex


def rebuild(distribution: str) -> str:
    """Reload a serialized distribution and recompute its root"""
    merklized = read_distribution(distribution).merklize()
    print(f"🌳 Rebuilt {distribution}")
    return merklized.root_hex


def claim(earner: str, name: str = "latest", config: Optional[str] = None) -> str:
    """Stored claim for `earner` as json, printed by fire"""
    conf = default_conf(name, config)
    db = DB.open_existing(conf)
    return json.dumps(db.get_claim(earner).model_dump(), indent=4)


def main():
    fire.Fire({"build": build, "rebuild": rebuild, "claim": claim})


if __name__ == "__main__":
    main()
