"""Value codecs."""

from .codec import JSON, PICKLE, Codec, JSONCodec, PickleCodec


__all__ = ["JSON", "PICKLE", "Codec", "JSONCodec", "PickleCodec"]
