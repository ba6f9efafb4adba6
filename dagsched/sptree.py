"""Series-parallel decomposition trees of nested fork-join DAGs."""

from __future__ import annotations

import subprocess
from collections import deque
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dagsched.subtask import SubTask


class NodeType(Enum):
    """Kind of a node in a decomposition tree."""

    S = "S"  # series composition
    P = "P"  # parallel composition
    L = "L"  # leaf: a vertex of the DAG


@dataclass(eq=False)
class SPNode:
    """Node of a decomposition tree; leaves carry the DAG vertex id."""

    type: NodeType
    id: int = -1
    v_id: int = -1
    left: SPNode | None = None
    right: SPNode | None = None


@dataclass
class STempNode:
    """An edge of the DAG awaiting placement in the tree."""

    left: int = -1
    right: int = -1
    right_ordids: int = -1  # topological position of ``right``
    left_ordids: int = -1  # topological position of ``left``
    used: bool = False
    visited: bool = False


def _preorder(node: SPNode) -> Iterator[SPNode]:
    yield node
    for child in (node.left, node.right):
        if child is not None:
            yield from _preorder(child)


def _child_vid(node: SPNode | None) -> int:
    return -1 if node is None else node.v_id


def _attach(parent: SPNode, vid: int, node: SPNode) -> None:
    """Put ``node`` in place of the child of ``parent`` that holds ``vid``."""
    if _child_vid(parent.left) == vid:
        parent.left = node
    else:
        parent.right = node


def _topological_order(vertices: Sequence[SubTask]) -> list[int]:
    indegree = [len(v.pred) for v in vertices]
    queue = deque(i for i, d in enumerate(indegree) if d == 0)
    order: list[int] = []
    while queue:
        i = queue.popleft()
        order.append(i)
        for s in vertices[i].succ:
            indegree[s.id] -= 1
            if indegree[s.id] == 0:
                queue.append(s.id)
    if len(order) != len(vertices):
        raise ValueError("the graph has a cycle")
    return order


def _descendants(vertices: Sequence[SubTask], order: list[int]) -> list[set[int]]:
    reach: list[set[int]] = [set() for _ in vertices]
    for i in reversed(order):
        for s in vertices[i].succ:
            reach[i].add(s.id)
            reach[i] |= reach[s.id]
    return reach


class SPTree:
    """Binary series-parallel decomposition of a nested fork-join DAG."""

    def __init__(self) -> None:
        self.root: SPNode | None = None
        self._index = 0

    # node creation -----------------------------------------------------

    def _new_node(self, node_type: NodeType, v_id: int = -1) -> SPNode:
        node = SPNode(node_type, self._index, v_id)
        self._index += 1
        return node

    def _new_parallel(self, right_vid: int, left_vid: int) -> SPNode:
        node = self._new_node(NodeType.P)
        node.left = self._new_node(NodeType.L, left_vid)
        node.right = self._new_node(NodeType.L, right_vid)
        return node

    # searches ----------------------------------------------------------

    @staticmethod
    def _tree_vids(root: SPNode) -> list[tuple[int, SPNode]]:
        """Vertex ids of all leaves, each with its parent node."""
        found: list[tuple[int, SPNode]] = []

        def visit(node: SPNode) -> None:
            for child in (node.left, node.right):
                if child is not None and child.type is NodeType.L:
                    found.append((child.v_id, node))
            for child in (node.left, node.right):
                if child is not None:
                    visit(child)

        visit(root)
        return found

    @staticmethod
    def _find_node(start: SPNode, vid: int) -> SPNode | None:
        found = None
        for node in _preorder(start):
            if node.type is NodeType.L and node.v_id == vid:
                found = node
        return found

    @staticmethod
    def _find_dad(start: SPNode, son: SPNode) -> SPNode | None:
        dad = None

        def visit(node: SPNode) -> None:
            nonlocal dad
            if node.type is NodeType.L:
                return
            if node.left is son or node.right is son:
                dad = node
                return
            for child in (node.left, node.right):
                if child is not None:
                    visit(child)

        visit(start)
        return dad

    @staticmethod
    def _is_descendant(dad: SPNode, son: SPNode) -> bool:
        return any(
            node.type is not NodeType.L and (node.left is son or node.right is son)
            for node in _preorder(dad)
        )

    # construction ------------------------------------------------------

    @staticmethod
    def _joins(vertices: Sequence[SubTask], order: list[int]) -> list[list[int]]:
        """For every vertex, the join vertices that follow it."""
        reach = _descendants(vertices, order)
        joins: list[list[int]] = [[] for _ in vertices]
        for i in order:
            if len(vertices[i].pred) > 1:
                for k, following in enumerate(reach):
                    if k != i and i in following:
                        joins[k].append(i)
                joins[i].append(i)
        return joins

    @staticmethod
    def _initial_series(vertices: Sequence[SubTask], order: list[int]) -> list[STempNode]:
        position = {vid: idx for idx, vid in enumerate(order)}
        return [
            STempNode(
                left=i,
                right=s.id,
                left_ordids=idx,
                right_ordids=position.get(s.id, -1),
            )
            for idx, i in enumerate(order)
            for s in vertices[i].succ
        ]

    def _parallel_subtrees(
        self, joins: list[list[int]], series: list[STempNode]
    ) -> list[SPNode]:
        """Group edges leaving the same vertex into parallel constructs."""
        subtrees: list[SPNode] = []
        for i, first in enumerate(series):
            if first.visited:
                continue
            group = [first]
            first.visited = True
            for other in series[i + 1 :]:
                if other.left == first.left:
                    group.append(other)
                    other.visited = True
            if len(group) < 2:
                continue

            s_node = self._new_node(NodeType.S)
            s_node.left = self._new_node(NodeType.L, first.left)

            if len(group) == 2:
                s_node.right = self._new_parallel(group[0].right, group[1].right)
                subtrees.append(s_node)
                group[0].used = group[1].used = True
                continue

            same_left: list[SPNode] = []
            for j, sj in enumerate(group):
                for k, sk in enumerate(group):
                    if (
                        j != k
                        and not sk.used
                        and not sj.used
                        and joins[sk.right] == joins[sj.right]
                    ):
                        same_left.append(self._new_parallel(sj.right, sk.right))
                        sj.used = sk.used = True
                for k, sub in enumerate(same_left):
                    if not sj.used and joins[sj.right] == joins[sub.right.v_id]:
                        joined = self._new_node(NodeType.P)
                        joined.left = sub
                        joined.right = self._new_node(NodeType.L, sj.right)
                        sj.used = True
                        same_left[k] = joined

            root_p = same_left[0] if len(same_left) == 1 else self._new_node(NodeType.P)
            for sub in same_left:
                if root_p.left is None:
                    root_p.left = sub
                elif root_p.right is None:
                    root_p.right = sub
                else:
                    new_root = self._new_node(NodeType.P)
                    new_root.left = root_p
                    new_root.right = sub
                    root_p = new_root

            for sj in group:
                if not sj.used:
                    new_root = self._new_node(NodeType.P)
                    new_root.left = root_p
                    new_root.right = self._new_node(NodeType.L, sj.right)
                    root_p = new_root

            s_node.right = root_p
            subtrees.append(s_node)
        return subtrees

    def _merge_subtrees(self, subtrees: list[SPNode]) -> list[SPNode]:
        """Join subtrees that share a vertex until no more can be joined."""
        subtrees = list(subtrees)
        merged: list[SPNode] = []
        first_round = True
        while len(merged) != len(subtrees):
            if not first_round:
                subtrees, merged = merged, []
            first_round = False
            if len(subtrees) == 1:
                break

            used = [False] * len(subtrees)
            for i, tree_i in enumerate(subtrees):
                vids_i = self._tree_vids(tree_i)
                for j, tree_j in enumerate(subtrees):
                    if i == j or used[i] or used[j]:
                        continue
                    vids_j = self._tree_vids(tree_j)
                    for vid_i, parent_i in vids_i:
                        for vid_j, parent_j in vids_j:
                            if vid_i != vid_j:
                                continue
                            if (
                                parent_i.type is NodeType.S
                                and _child_vid(parent_i.left) == vid_i
                            ):
                                _attach(parent_j, vid_j, parent_i)
                                merged.append(tree_j)
                            elif (
                                parent_j.type is NodeType.S
                                and _child_vid(parent_j.left) == vid_j
                            ):
                                _attach(parent_i, vid_i, parent_j)
                                merged.append(tree_i)
                            else:
                                raise ValueError("The vid is never son of S")
                            used[i] = used[j] = True
                            break
                        if used[i]:
                            break
            merged.extend(t for t, u in zip(subtrees, used) if not u)
        return subtrees

    def _common_root(
        self, subtrees: list[SPNode], series: list[STempNode], group: list[int]
    ) -> tuple[SPNode | None, int]:
        """Lowest node covering the sources of all edges in ``group``."""
        subtree_idx = 0
        if len(subtrees) > 1:
            subtree_idx = -1
            for idx, tree in enumerate(subtrees):
                vids = self._tree_vids(tree)
                if not vids or all(series[s].left == vids[0][0] for s in group):
                    subtree_idx = idx
                    break
            if subtree_idx == -1:
                raise ValueError("no subtree holds all the vertices")

        tree = subtrees[subtree_idx]
        dad: SPNode | None = None
        is_son = False
        for s in group:
            vid = series[s].left
            current = self._find_node(tree, vid)
            if current is None:
                raise ValueError(f"vertex {vid} not found in the subtree")
            if dad is None:
                dad = self._find_dad(tree, current)
            else:
                is_son = is_son or self._is_descendant(dad, current)
                while not is_son:
                    parent = self._find_dad(tree, dad)
                    if parent is None:
                        raise ValueError(f"vertex {vid} is outside the subtree")
                    dad = parent
                    is_son = self._is_descendant(dad, current)
        return dad, subtree_idx

    def _insert_series(
        self, subtrees: list[SPNode], series: list[STempNode]
    ) -> list[SPNode]:
        """Place the edges not yet used by parallel constructs."""
        for s in series:
            s.visited = False
        if len(subtrees) > 1:
            subtrees = self._merge_subtrees(subtrees)

        series.sort(key=lambda s: s.right_ordids)

        for i, first in enumerate(series):
            if first.used or first.visited:
                continue
            group = [i]
            first.visited = first.used = True
            for j, other in enumerate(series[i + 1 :], start=i + 1):
                if not other.used and not other.visited and other.right == first.right:
                    group.append(j)
                    other.visited = other.used = True

            if not subtrees:
                if len(group) > 1:
                    raise ValueError("Problem, the first S can't be already a join")
                node = self._new_node(NodeType.S)
                node.left = self._new_node(NodeType.L, first.left)
                node.right = self._new_node(NodeType.L, first.right)
                subtrees.append(node)
            else:
                common_root, idx = self._common_root(subtrees, series, group)
                node = self._new_node(NodeType.S)
                node.left = common_root
                node.right = self._new_node(NodeType.L, first.right)
                if common_root is subtrees[idx]:
                    subtrees[idx] = node
                elif common_root is None:
                    raise ValueError("Problem in the tree construction")
                elif len(group) == 1 and first.left in (
                    _child_vid(common_root.left),
                    _child_vid(common_root.right),
                ):
                    node.left = self._new_node(NodeType.L, first.left)
                    _attach(common_root, first.left, node)
                else:
                    parent = self._find_dad(subtrees[idx], common_root)
                    if parent is None:
                        raise ValueError("Problem in the tree construction")
                    if parent.left is common_root:
                        parent.left = node
                    elif parent.right is common_root:
                        parent.right = node
            if len(subtrees) > 1:
                subtrees = self._merge_subtrees(subtrees)
        return subtrees

    # public interface --------------------------------------------------

    def convert(self, vertices: Sequence[SubTask]) -> SPNode:
        """Build the tree of a nested fork-join DAG; vertex ids index ``vertices``."""
        order = _topological_order(vertices)
        joins = self._joins(vertices, order)
        series = self._initial_series(vertices, order)
        subtrees = self._parallel_subtrees(joins, series)
        subtrees = self._insert_series(subtrees, series)
        if not subtrees:
            raise ValueError("the DAG has no edges")
        if len(subtrees) > 1:
            raise ValueError("Was not able to merge all subtrees")
        self.root = subtrees[0]
        return self.root

    def _require_root(self) -> SPNode:
        if self.root is None:
            raise ValueError("the tree has not been built")
        return self.root

    def to_dot(self) -> str:
        """Graphviz description of the tree."""
        nodes = list(_preorder(self._require_root()))
        parts = ["digraph Task {\n"]
        for node in nodes:
            label = str(node.v_id) if node.type is NodeType.L else node.type.value
            parts.append(f'{node.id} [label="{label}({node.id})"];\n')
        for node in nodes:
            for child in (node.left, node.right):
                if child is not None:
                    parts.append(f"{node.id} -> {child.id};\n")
        parts.append("}")
        return "".join(parts)

    def save_as_dot(self, filename: str) -> Path:
        """Write ``filename.dot`` and try to render ``filename.png`` with dot."""
        path = Path(f"{filename}.dot")
        path.write_text(self.to_dot())
        try:
            subprocess.run(
                ["dot", "-Tpng", str(path), "-o", f"{filename}.png"], check=False
            )
        except FileNotFoundError:
            pass
        return path

    def _parallel_ids(self, node: SPNode, wcets: list[float]) -> list[int]:
        left = self._parallel_ids(node.left, wcets) if node.left is not None else []
        right = self._parallel_ids(node.right, wcets) if node.right is not None else []
        if node.type is NodeType.P:
            return left + right
        if node.type is NodeType.S:
            return right if len(right) > len(left) else left
        return [node.v_id] if wcets[node.v_id] > 0 else []

    def compute_parallel_ids(self, vertices: Sequence[SubTask]) -> list[int]:
        """Widest set of vertices with work left that may run in parallel."""
        return self._parallel_ids(self._require_root(), [v.c for v in vertices])

    def compute_wd_uco(self, vertices: Sequence[SubTask]) -> list[tuple[float, float]]:
        """Carry-out workload distribution as (width, parallelism) pairs.

        The vertices themselves are left untouched.
        """
        root = self._require_root()
        wcets = [v.c for v in vertices]
        distribution: list[tuple[float, float]] = []
        while ids := self._parallel_ids(root, wcets):
            width = min(wcets[p] for p in ids)
            distribution.append((width, float(len(ids))))
            for p in ids:
                wcets[p] -= width
        return distribution