"""Document tree model and traversal.

A Sketch document is an unvalidated, heterogeneous JSON tree.  Child nodes
live under several differently-named container fields, so every traversal
goes through :meth:`Node.children`, which knows all of them and always
visits them in the same order:

1. ``layers`` (list)
2. ``artboards.objects`` (list)
3. ``pages.objects`` (list)

Traversal is iterative (explicit stack), so deeply nested documents never
hit the interpreter recursion limit.

INVARIANT: nothing here mutates the raw document.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

COMPONENT_CLASS = "symbolMaster"

#: (field, key) pairs; key ``None`` means the field itself is the list.
CONTAINER_FIELDS: tuple[tuple[str, str | None], ...] = (
    ("layers", None),
    ("artboards", "objects"),
    ("pages", "objects"),
)


@dataclass(frozen=True)
class Node:
    """Read-only view over one raw document object."""

    raw: Mapping[str, Any]

    @property
    def id(self) -> str | None:
        return self.raw.get("do_objectID")

    @property
    def cls(self) -> str | None:
        return self.raw.get("_class")

    @property
    def name(self) -> str | None:
        return self.raw.get("name")

    @property
    def is_component(self) -> bool:
        return self.cls == COMPONENT_CLASS

    def children(self) -> Iterator[Node]:
        """Yield direct children across all known container fields."""
        for field_name, key in CONTAINER_FIELDS:
            container = self.raw.get(field_name)
            if key is not None:
                container = container.get(key) if isinstance(container, Mapping) else None
            if not isinstance(container, list):
                continue
            for child in container:
                if isinstance(child, Mapping):
                    yield Node(child)

    def walk(self) -> Iterator[Node]:
        """Depth-first pre-order walk starting at this node."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children())))


@dataclass(frozen=True)
class DocumentTree:
    """Parsed document container: manifest, metadata, and ordered pages."""

    document: dict[str, Any]
    meta: dict[str, Any] = field(default_factory=dict)
    pages: tuple[dict[str, Any], ...] = ()

    def roots(self) -> Iterator[Node]:
        """The document first, then each page in archive order."""
        yield Node(self.document)
        for page in self.pages:
            yield Node(page)

    def walk(self) -> Iterator[Node]:
        for root in self.roots():
            yield from root.walk()

    def to_dict(self) -> dict[str, Any]:
        return {"document": self.document, "meta": self.meta, "pages": list(self.pages)}


class ComponentSummary(BaseModel):
    """One reusable component master found in the document."""

    model_config = ConfigDict(frozen=True)

    id: str | None
    name: str | None
    type: str = "component"
    frame: Any = None

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump()
        if data["frame"] is None:
            del data["frame"]
        return data


class NodeMetadata(BaseModel):
    """Stable identity summary of a node."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None
    name: str | None
    class_: str | None = Field(default=None, alias="class")


class EnrichedNode(BaseModel):
    """Read-only projection of a found node plus its identity summary."""

    model_config = ConfigDict(frozen=True)

    node: dict[str, Any]
    type: str | None
    metadata: NodeMetadata

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def _walk_source(source: DocumentTree | Mapping[str, Any]) -> Iterator[Node]:
    if isinstance(source, DocumentTree):
        return source.walk()
    return Node(source).walk()


def find_node_by_id(source: DocumentTree | Mapping[str, Any], node_id: str) -> dict[str, Any] | None:
    """Return the first raw node whose ``do_objectID`` equals *node_id*.

    A :class:`DocumentTree` is searched document-first, then page by page.
    """
    for node in _walk_source(source):
        if node.id == node_id:
            return dict(node.raw)
    return None


def list_components(source: DocumentTree | Mapping[str, Any]) -> list[ComponentSummary]:
    """Collect every component master, in traversal order."""
    return [
        ComponentSummary(id=node.id, name=node.name, frame=node.raw.get("frame"))
        for node in _walk_source(source)
        if node.is_component
    ]


def enrich(node: Mapping[str, Any]) -> EnrichedNode:
    """Wrap a raw node with its identity/type/name summary."""
    view = Node(node)
    return EnrichedNode(
        node=dict(node),
        type=view.cls,
        metadata=NodeMetadata(id=view.id, name=view.name, class_=view.cls),
    )
