"""Static (tag, generation) -> decoder mapping.

Decoders register themselves with the @decodes decorator when their
module is imported. The document module imports every generation module
and then freezes the table; after that it is read-only and shared by all
parses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.types import Generation


class Namespace(Enum):
    CARD = "EF"
    VU_BLOCK = "TREP"
    VU_RECORD = "record type"


@dataclass(frozen=True)
class Tag:
    """Identifies one record or block kind within a generation."""

    namespace: Namespace
    identifier: int
    generation: Generation

    def __str__(self) -> str:
        width = 4 if self.namespace is Namespace.CARD else 2
        return f"{self.namespace.value} {self.identifier:0{width}X}/{self.generation.label}"


@dataclass(frozen=True)
class Length:
    """Length policy for a tagged payload.

    exact:  the payload is exactly `size` bytes
    step:   a `header` followed by whole records of `size` bytes
    min:    at least `size` bytes
    range:  between `size` and `upper` bytes inclusive
    choice: one of the listed `sizes`
    any:    no constraint
    """

    kind: str
    size: int = 0
    header: int = 0
    upper: int = 0
    sizes: tuple[int, ...] = ()

    @classmethod
    def exact(cls, size: int) -> Length:
        return cls("exact", size)

    @classmethod
    def step(cls, size: int, header: int = 0) -> Length:
        return cls("step", size, header)

    @classmethod
    def at_least(cls, size: int) -> Length:
        return cls("min", size)

    @classmethod
    def between(cls, lower: int, upper: int) -> Length:
        return cls("range", lower, upper=upper)

    @classmethod
    def one_of(cls, *sizes: int) -> Length:
        return cls("choice", min(sizes), sizes=sizes)

    @classmethod
    def any(cls) -> Length:
        return cls("any")

    def accepts(self, n: int) -> bool:
        if self.kind == "exact":
            return n == self.size
        if self.kind == "step":
            return n >= self.header and (n - self.header) % self.size == 0
        if self.kind == "min":
            return n >= self.size
        if self.kind == "range":
            return self.size <= n <= self.upper
        if self.kind == "choice":
            return n in self.sizes
        return True

    def __str__(self) -> str:
        if self.kind == "exact":
            return f"{self.size} bytes"
        if self.kind == "step":
            head = f"{self.header} + " if self.header else ""
            return f"{head}n x {self.size} bytes"
        if self.kind == "min":
            return f"at least {self.size} bytes"
        if self.kind == "range":
            return f"{self.size}..{self.upper} bytes"
        if self.kind == "choice":
            return " or ".join(str(s) for s in self.sizes) + " bytes"
        return "any length"


@dataclass(frozen=True)
class DecoderSpec:
    """A registered decoder and the policy that guards it."""

    tag: Tag
    name: str
    decode: Callable[[Cursor], Any]
    length: Length
    group: str = ""


class DispatchTable:
    """Registry of decoders keyed by (namespace, identifier, generation)."""

    def __init__(self) -> None:
        self._specs: dict[tuple[Namespace, int, Generation], DecoderSpec] = {}
        self._frozen = False

    def register(self, spec: DecoderSpec) -> None:
        if self._frozen:
            raise RuntimeError(f"dispatch table is frozen, cannot add {spec.tag}")
        key = (spec.tag.namespace, spec.tag.identifier, spec.tag.generation)
        if key in self._specs:
            raise ValueError(f"duplicate decoder for {spec.tag}")
        self._specs[key] = spec

    def freeze(self) -> None:
        self._frozen = True

    def resolve(self, tag: Tag) -> DecoderSpec | None:
        """Find the decoder for tag, falling back along the generation lineage."""
        for generation in tag.generation.lineage():
            spec = self._specs.get((tag.namespace, tag.identifier, generation))
            if spec is not None:
                return spec
        return None

    def generations(self, namespace: Namespace, identifier: int) -> list[Generation]:
        """Generations that define a decoder for this identifier."""
        return sorted(g for ns, ident, g in self._specs if ns is namespace and ident == identifier)

    def __len__(self) -> int:
        return len(self._specs)


TABLE = DispatchTable()


def decodes(
    namespace: Namespace,
    identifier: int,
    *generations: Generation,
    name: str,
    length: Length | None = None,
    group: str = "",
) -> Callable:
    """Decorator that registers a function as decoder for a tag in each generation."""

    def decorator(func: Callable[[Cursor], Any]) -> Callable[[Cursor], Any]:
        for generation in generations:
            TABLE.register(
                DecoderSpec(
                    tag=Tag(namespace, identifier, generation),
                    name=name,
                    decode=func,
                    length=length or Length.any(),
                    group=group,
                )
            )
        return func

    return decorator
