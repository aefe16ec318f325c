"""Minimal example for RedisStore against a local Redis/Dragonfly."""

import logging

from kv_store import EngineError, RedisOptions, RedisStore


def main() -> None:
    """Run a basic set/get/overwrite flow against Redis."""
    logging.basicConfig(level=logging.DEBUG)
    try:
        store = RedisStore(RedisOptions(address="localhost:6379", db=15))
    except EngineError as error:
        print(f"redis unavailable (transient={error.transient}): {error}")
        return

    with store:
        store.set("user", {"alice": {"age": 30}})
        print("user:", store.get("user", dict))

        store.set("user", {"alice": {"age": 42}})
        print("overwritten:", store.get("user", dict))

        store.delete("user")
        print("missing:", store.get("user", dict))


if __name__ == "__main__":
    main()
