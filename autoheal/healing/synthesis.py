from __future__ import annotations

from typing import Callable

from autoheal.healing.document import DocumentNode, DocumentTree


def synthesize_path(tree: DocumentTree, node: DocumentNode) -> str | None:
    """Builds an absolute locator for `node` from the current tree shape.

    The root element is kept as a bare anchor step; every node below it gets
    the most specific step available: id, then name, then first class token,
    then a position among same-tag siblings when one is needed. The root
    element itself has no steps below the anchor and yields None.
    """

    if node.parent is None:
        return None
    steps: list[str] = []
    current: DocumentNode | None = node
    while current is not None and current.parent is not None:
        steps.append(build_step(tree, current))
        current = tree.parent_of(current)
    if current is not None:
        steps.append(current.tag)
    steps.reverse()
    return "/" + "/".join(steps)


def build_step(tree: DocumentTree, node: DocumentNode) -> str:
    if node.id:
        node_id = node.id
        return _predicate_step(tree, node, f"@id={xpath_literal(node_id)}", lambda item: item.id == node_id)
    name = node.attributes.get("name")
    if name:
        return _predicate_step(
            tree, node, f"@name={xpath_literal(name)}", lambda item: item.attributes.get("name") == name
        )
    if node.classes:
        token = node.classes[0]
        # contains() is a substring test, so `btn` also selects `btn-primary`.
        return _predicate_step(
            tree,
            node,
            f"contains(@class,{xpath_literal(token)})",
            lambda item: token in item.attributes.get("class", ""),
        )
    siblings = tree.same_tag_siblings(node)
    if len(siblings) > 1:
        return f"{node.tag}[{_position(siblings, node)}]"
    return node.tag


def _predicate_step(
    tree: DocumentTree,
    node: DocumentNode,
    predicate: str,
    matches: Callable[[DocumentNode], bool],
) -> str:
    step = f"{node.tag}[{predicate}]"
    selected = [item for item in tree.same_tag_siblings(node) if matches(item)]
    if len(selected) > 1:
        step += f"[{_position(selected, node)}]"
    return step


def _position(nodes: list[DocumentNode], node: DocumentNode) -> int:
    return next(offset for offset, item in enumerate(nodes, start=1) if item.index == node.index)


def xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    pieces = ", \"'\", ".join(f"'{part}'" for part in parts)
    return f"concat({pieces})"
