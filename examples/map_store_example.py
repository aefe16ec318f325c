"""Minimal example for the in-process MapStore."""

import logging
from dataclasses import dataclass

from kv_store import PICKLE, MapOptions, MapStore


@dataclass
class User:
    name: str
    age: int


def main() -> None:
    """Run a basic set/get/delete flow on the in-process store."""
    logging.basicConfig(level=logging.DEBUG)
    with MapStore(MapOptions(codec=PICKLE)) as store:
        store.set("alice", User(name="alice", age=30))
        found, user = store.get("alice", User)
        print("found:", found, "user:", user)

        store.delete("alice")
        print("after delete:", store.get("alice", User))


if __name__ == "__main__":
    main()
