"""Value codecs used when a cached operation asks for explicit serialization."""

from __future__ import annotations

import base64
import json
import pickle
from typing import Any, Protocol, runtime_checkable

from mnemosyne.errors import SerializationError


@runtime_checkable
class Codec(Protocol):
    """Turns values into store-safe text and back."""

    def encode(self, value: Any) -> str:
        """Encode a value for storage."""
        ...

    def decode(self, data: str) -> Any:
        """Decode a stored payload."""
        ...


class PickleCodec:
    """Pickle codec producing base64 text so JSON-backed stores can hold it.

    Only decode payloads written by a store you trust: unpickling runs
    arbitrary code.
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def encode(self, value: Any) -> str:
        try:
            raw = pickle.dumps(value, protocol=self._protocol)
        except Exception as e:
            raise SerializationError(f"Cannot pickle {type(value).__name__}: {e}") from e
        return base64.b64encode(raw).decode("ascii")

    def decode(self, data: str) -> Any:
        if not isinstance(data, (str, bytes)):
            raise SerializationError(
                f"Expected encoded payload, got {type(data).__name__}"
            )
        try:
            raw = base64.b64decode(data, validate=True)
            return pickle.loads(raw)
        except Exception as e:  # unpickling can raise almost anything
            raise SerializationError(f"Corrupted cached payload: {e}") from e


class JsonCodec:
    """JSON codec for plain data; structure beyond JSON types is lost."""

    def encode(self, value: Any) -> str:
        try:
            return json.dumps(value, sort_keys=True)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode {type(value).__name__}: {e}") from e

    def decode(self, data: str) -> Any:
        try:
            return json.loads(data)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Corrupted cached payload: {e}") from e


__all__ = ["Codec", "JsonCodec", "PickleCodec"]
