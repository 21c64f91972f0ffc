from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from bs4 import BeautifulSoup, CData, NavigableString, Tag

TEXT_MODES = ("aggregated", "own")


@dataclass(slots=True)
class DocumentNode:
    index: int
    tag: str
    id: str | None
    classes: tuple[str, ...]
    attributes: dict[str, str]
    text: str
    parent: int | None = None
    children: list[int] = field(default_factory=list)

    def has_class(self, token: str) -> bool:
        return token in self.classes


class DocumentTree:
    """Read-only snapshot of the page markup stored as an arena of nodes.

    Nodes live in document order in a flat list; parent and child links are
    indices into that list. A tree is built once per heal attempt and never
    mutated afterwards.
    """

    def __init__(self, nodes: list[DocumentNode], text_mode: str = "aggregated") -> None:
        self._nodes = nodes
        self.text_mode = text_mode

    @classmethod
    def from_markup(cls, markup: str, text_mode: str = "aggregated") -> DocumentTree:
        if text_mode not in TEXT_MODES:
            raise ValueError(f"Unsupported text mode: {text_mode}")
        soup = BeautifulSoup(markup or "", "lxml")
        nodes: list[DocumentNode] = []
        positions: dict[int, int] = {}
        for element in soup.descendants:
            if not isinstance(element, Tag):
                continue
            parent_index = positions.get(id(element.parent))
            node = DocumentNode(
                index=len(nodes),
                tag=element.name,
                id=_attribute_value(element.get("id")) or None,
                classes=_class_tokens(element.get("class")),
                attributes={key: _attribute_value(value) for key, value in element.attrs.items()},
                text=_element_text(element, text_mode),
                parent=parent_index,
            )
            positions[id(element)] = node.index
            if parent_index is not None:
                nodes[parent_index].children.append(node.index)
            nodes.append(node)
        return cls(nodes, text_mode=text_mode)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[DocumentNode]:
        return iter(self._nodes)

    def node(self, index: int) -> DocumentNode:
        return self._nodes[index]

    @property
    def root(self) -> DocumentNode | None:
        for node in self._nodes:
            if node.parent is None:
                return node
        return None

    def parent_of(self, node: DocumentNode) -> DocumentNode | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def children_of(self, node: DocumentNode) -> list[DocumentNode]:
        return [self._nodes[index] for index in node.children]

    def same_tag_siblings(self, node: DocumentNode) -> list[DocumentNode]:
        """Nodes sharing the parent and tag of `node`, including itself."""

        if node.parent is None:
            pool = [item for item in self._nodes if item.parent is None]
        else:
            pool = self.children_of(self._nodes[node.parent])
        return [item for item in pool if item.tag == node.tag]

    def by_id(self, value: str) -> DocumentNode | None:
        for node in self._nodes:
            if node.id == value:
                return node
        return None

    def containing_text(self, value: str) -> list[DocumentNode]:
        return [node for node in self._nodes if value in node.text]

    def with_class(self, token: str) -> list[DocumentNode]:
        return [node for node in self._nodes if node.has_class(token)]

    def with_attribute(self, name: str, value: str) -> list[DocumentNode]:
        return [node for node in self._nodes if node.attributes.get(name) == value]

    def with_tag(self, tag: str) -> list[DocumentNode]:
        return [node for node in self._nodes if node.tag == tag]


def _attribute_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def _class_tokens(value) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(token for token in value if token)


def _element_text(element: Tag, text_mode: str) -> str:
    if text_mode == "own":
        raw = "".join(
            str(child) for child in element.children if type(child) in (NavigableString, CData)
        )
    else:
        raw = element.get_text()
    return " ".join(raw.split())
