from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Attribute:
    name: str
    value: str


@dataclass(frozen=True)
class Field:
    name: str
    value: str
    attributes: tuple[Attribute, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", tuple(self.attributes))


@dataclass(frozen=True)
class Section:
    """A BEGIN/END wrapped block of fields and nested sections."""

    name: str
    content: tuple[Field | Section, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "content", tuple(self.content))

    def iter_fields(self) -> Iterator[Field]:
        yield Field("BEGIN", self.name)
        for node in self.content:
            if isinstance(node, Section):
                yield from node.iter_fields()
            else:
                yield node
        yield Field("END", self.name)

    def fields(self) -> list[Field]:
        return list(self.iter_fields())


def new_field(name: str, value: object, *attributes: Attribute) -> Field:
    return Field(name=name, value=str(value), attributes=attributes)


def new_section(name: str, *content: Field | Section) -> Section:
    return Section(name=name, content=content)
