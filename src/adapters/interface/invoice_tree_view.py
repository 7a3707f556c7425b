"""Expand/collapse state for the invoice hierarchy.

This module contains pure, testable presentation state over the tree
produced by ``aggregate_invoices`` (no IO and no Streamlit import here).

The UI is responsible for:
    - building the tree for the current records and filters,
    - persisting the ``TreeViewController`` in ``st.session_state``,
    - forwarding row clicks to ``toggle``.

Every node starts collapsed. Flags are independent: collapsing a parent
keeps the flags of its descendants, so expanding it again restores what was
visible before.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
import logging

from src.domain.models.invoices import TreeNode
from src.domain.services.invoice_tree import iter_nodes


@dataclass(frozen=True)
class VisibleRow:
    """Row to draw: a node and its depth below the root level."""

    node: TreeNode
    depth: int


@dataclass
class ViewState:
    """Expansion state bound to one generation of the tree.

    Attributes:
        tree: Root client nodes of the current tree.
        expanded: Map node id -> expanded flag; missing ids are collapsed.
        generation: Counter bumped on every rebuild of the tree.
        node_ids: Ids of every node in ``tree``.
    """

    tree: tuple[TreeNode, ...] = ()
    expanded: dict[str, bool] = field(default_factory=dict)
    generation: int = 0
    node_ids: frozenset[str] = frozenset()

    def is_expanded(self, node_id: str) -> bool:
        return self.expanded.get(node_id, False)


class TreeViewController:
    """Own the expansion state of one invoice tree at a time."""

    def __init__(self, logger=None) -> None:
        """Initialize the controller with an empty tree.

        Args:
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._logger = logger or logging.getLogger(__name__)
        self._state = ViewState()

    @property
    def state(self) -> ViewState:
        return self._state

    def build(
        self,
        tree: Sequence[TreeNode],
        *,
        carry_over: bool = False,
    ) -> ViewState:
        """Bind a freshly aggregated tree, collapsing every node.

        Args:
            tree: Root nodes produced by the aggregator.
            carry_over: Keep flags of node ids that survive the rebuild.

        Returns:
            ViewState: The new live state.
        """
        roots = tuple(tree)
        node_ids = frozenset(node.id for node in iter_nodes(roots))
        expanded: dict[str, bool] = {}
        if carry_over:
            expanded = {
                node_id: flag
                for node_id, flag in self._state.expanded.items()
                if node_id in node_ids
            }
        self._state = ViewState(
            tree=roots,
            expanded=expanded,
            generation=self._state.generation + 1,
            node_ids=node_ids,
        )
        return self._state

    def toggle(
        self,
        node_id: str,
        *,
        generation: int | None = None,
    ) -> ViewState:
        """Flip the expansion flag of a node.

        Unknown ids and clicks issued against an older generation of the
        tree are ignored.

        Args:
            node_id: Id of the clicked node.
            generation: Generation the click was rendered from, if known.

        Returns:
            ViewState: The live state, changed or not.
        """
        state = self._state
        if generation is not None and generation != state.generation:
            self._logger.debug(
                f"Ignoring toggle of {node_id} from generation {generation}; "
                f"live generation is {state.generation}"
            )
            return state
        if node_id not in state.node_ids:
            self._logger.debug(f"Ignoring toggle of unknown node {node_id}")
            return state
        state.expanded[node_id] = not state.is_expanded(node_id)
        return state

    def is_expanded(self, node_id: str) -> bool:
        return self._state.is_expanded(node_id)

    def expand_all(self) -> ViewState:
        """Expand every node that has children."""
        for node in iter_nodes(self._state.tree):
            if not node.is_leaf:
                self._state.expanded[node.id] = True
        return self._state

    def collapse_all(self) -> ViewState:
        self._state.expanded.clear()
        return self._state

    def visible_rows(self) -> Iterator[VisibleRow]:
        """Yield the rows to draw, depth-first and parents first.

        Children of a collapsed node are never visited. The generator reads
        the live state, so iterating twice without a toggle in between gives
        the same rows.
        """
        return _walk(self._state.tree, self._state.expanded, 0)


def _walk(
    nodes: Sequence[TreeNode],
    expanded: dict[str, bool],
    depth: int,
) -> Iterator[VisibleRow]:
    for node in nodes:
        yield VisibleRow(node=node, depth=depth)
        if node.children and expanded.get(node.id, False):
            yield from _walk(node.children, expanded, depth + 1)


__all__ = ["VisibleRow", "ViewState", "TreeViewController"]
