"""Key template resolution.

A template such as ``"users:dept:{dept_id}:status:{status}"`` is expanded
against an operation's parameter names and the actual call arguments.
Operations without a template get an auto key: an xxh3 digest of the
operation identity and a type-tagged encoding of its arguments.
"""

from __future__ import annotations

import dataclasses
import re
import threading
from collections.abc import Mapping, Sequence
from typing import Any

import xxhash

_PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")


def _label(tag: str, text: str) -> str:
    """Length-prefixed text, so no encoded piece can run into the next."""
    return f"{tag}{len(text)}:{text}"


def _type_name(kind: type) -> str:
    return f"{kind.__module__}.{kind.__qualname__}"


def encode_args(value: Any) -> str:
    """Encode a value canonically, tagging every part with its type.

    Equal structures encode identically whatever the dict or set ordering;
    values of different types never share an encoding (``1`` vs ``"1"``,
    ``{1: "a"}`` vs ``{"1": "a"}``). Objects outside the builtin types are
    encoded as their type name plus ``str(value)``.
    """
    kind = type(value)
    if value is None:
        return "N"
    if kind is bool:
        return "T" if value else "F"
    if kind is int:
        return f"i{value};"
    if kind is float:
        return f"f{value!r};"
    if kind is str:
        return _label("s", value)
    if kind is bytes:
        return _label("y", value.hex())

    name = _label("", _type_name(kind))
    if isinstance(value, Mapping):
        # Sort by encoded key: raw keys of mixed types are not comparable
        items = sorted((encode_args(k), encode_args(v)) for k, v in value.items())
        return "d" + name + "{" + "".join(k + v for k, v in items) + "}"
    if isinstance(value, (set, frozenset)):
        return "e" + name + "{" + "".join(sorted(encode_args(v) for v in value)) + "}"
    if isinstance(value, (list, tuple)):
        return "l" + name + "[" + "".join(encode_args(v) for v in value) + "]"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        return "c" + name + encode_args(fields)
    return "o" + name + _label("", str(value))


def make_auto_key(operation: str, args: Sequence[Any]) -> str:
    """Hash an operation identity and its arguments into a stable key."""
    payload = encode_args(list(args))
    return xxhash.xxh3_128_hexdigest(f"{operation}::{payload}".encode())


class KeyResolver:
    """Resolves key and tag templates, memoizing each template's placeholders.

    The parse cache only grows: templates are treated as constants declared
    alongside the code that uses them.
    """

    def __init__(self) -> None:
        self._placeholders: dict[str, tuple[str, ...]] = {}
        self._lock = threading.Lock()

    def placeholders(self, template: str) -> tuple[str, ...]:
        """Return the placeholder names of a template, in order of appearance."""
        names = self._placeholders.get(template)
        if names is None:
            names = tuple(_PLACEHOLDER_PATTERN.findall(template))
            with self._lock:
                names = self._placeholders.setdefault(template, names)
        return names

    def resolve(
        self,
        template: str | None,
        param_names: Sequence[str],
        args: Sequence[Any],
        *,
        operation: str,
    ) -> str:
        """Resolve a template into a concrete key.

        Placeholders naming an unknown parameter, or one whose argument is
        missing or None, are left in the key as literal ``{name}``.
        Substitution is a single pass: braces inside an argument value are
        copied as-is, never expanded again.
        """
        if template is None:
            return make_auto_key(operation, args)

        values: dict[str, str] = {}
        for name in self.placeholders(template):
            try:
                position = param_names.index(name)
            except ValueError:
                continue
            if position < len(args) and args[position] is not None:
                values[name] = str(args[position])

        if not values:
            return template
        return _PLACEHOLDER_PATTERN.sub(
            lambda m: values.get(m.group(1), m.group(0)), template
        )


__all__ = ["KeyResolver", "encode_args", "make_auto_key"]
