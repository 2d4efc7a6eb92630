import json, csv
from pathlib import Path
from dataclasses import dataclass
from typing import Any

from distributor.models.Config import Config


@dataclass
class Writer:
    config: Config

    @property
    def path(self) -> str:
        return self.config.path

    @property
    def csv_path(self) -> str:
        return f"{self.path}/csv"

    @property
    def json_path(self) -> str:
        return f"{self.path}/json"

    @staticmethod
    def flatten_json(y):
        out = {}

        def flatten(x, name=""):
            # nested dicts join their keys with underscores
            if type(x) is dict:
                for a in x:
                    flatten(x[a], name + a + "_")

            # lists are keyed by position
            elif type(x) is list:
                for i, a in enumerate(x):
                    flatten(a, name + str(i) + "_")
            else:
                out[name[:-1]] = x

        flatten(y)
        return out

    def flatten_json_array(self, data):
        return [self.flatten_json(item) for item in data]

    @staticmethod
    def write_csv(data: list[dict], path: str, fieldnames: list[str]) -> None:
        with open(path, "w+", newline="") as f:
            writer = csv.DictWriter(
                f, delimiter=",", fieldnames=fieldnames, extrasaction="ignore"
            )
            writer.writeheader()
            writer.writerows(data)

    # create the directory for csv and json if it doesn't exist
    def _create_dir(self) -> None:
        Path(self.path).mkdir(parents=True, exist_ok=True)
        Path(self.csv_path).mkdir(parents=True, exist_ok=True)
        Path(self.json_path).mkdir(parents=True, exist_ok=True)

    # write to a csv file
    def to_csv(self, data, name: str, fieldnames: list[str]) -> None:
        self._create_dir()
        self.write_csv(data, f"{self.csv_path}/{name}.csv", fieldnames)

    # write to a json file
    def to_json(self, data, name: str) -> None:
        self._create_dir()
        with open(f"{self.json_path}/{name}.json", "w") as f:
            json.dump(data, f, indent=4)

    def to_csv_and_json(self, data: Any, name: str) -> None:
        if isinstance(data, list):
            csv_data = self.flatten_json_array(data)
            keys = list(csv_data[0].keys()) if csv_data else []
        else:
            csv_data = [self.flatten_json(data)]
            keys = list(csv_data[0].keys())
        self.to_json(data, name)
        self.to_csv(csv_data, name, keys)
