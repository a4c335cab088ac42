"""
Graph Validator - Prerequisite DAG integrity for the modules of one course.

Edges run from a module to each of its prerequisites. Validation is pure and
runs in O(V+E); callers must resolve any reported problem before persisting.
"""

import heapq
from collections import Counter
from typing import Dict, Iterable, List, Sequence, Tuple

from src.engines.errors import CycleError, DanglingRefError, ReorderError
from src.engines.progression.models import Module

_UNVISITED, _IN_PROGRESS, _DONE = 0, 1, 2


def _sort_key(module: Module) -> Tuple[int, str]:
    return (module.order, module.id)


class GraphValidator:
    """
    Validates and orders the prerequisite graph of a course.

    Usage:
        GraphValidator.validate(modules)
        order = GraphValidator.topological_order(modules)
    """

    @classmethod
    def _index(cls, modules: Iterable[Module]) -> Dict[str, Module]:
        return {m.id: m for m in sorted(modules, key=_sort_key)}

    @classmethod
    def _check_references(cls, index: Dict[str, Module]) -> None:
        for module in index.values():
            for target in module.prerequisites:
                prereq = index.get(target)
                if prereq is None or prereq.course_id != module.course_id:
                    raise DanglingRefError(module.id, target)

    @classmethod
    def _find_cycle(cls, index: Dict[str, Module]) -> List[str]:
        """Iterative DFS; returns the first cycle met as a closed id sequence, or []."""
        state = {module_id: _UNVISITED for module_id in index}
        for root in index:
            if state[root] != _UNVISITED:
                continue
            path: List[str] = [root]
            stack = [(root, iter(index[root].prerequisites))]
            state[root] = _IN_PROGRESS
            while stack:
                node, edges = stack[-1]
                advanced = False
                for target in edges:
                    if state[target] == _IN_PROGRESS:
                        start = path.index(target)
                        return path[start:] + [target]
                    if state[target] == _UNVISITED:
                        state[target] = _IN_PROGRESS
                        path.append(target)
                        stack.append((target, iter(index[target].prerequisites)))
                        advanced = True
                        break
                if not advanced:
                    state[node] = _DONE
                    path.pop()
                    stack.pop()
        return []

    @classmethod
    def validate(cls, course_modules: Iterable[Module]) -> None:
        """
        Validate the prerequisite graph of one course.

        Raises:
            DanglingRefError: an edge targets a module outside the supplied set
            CycleError: the graph has a cycle
        """
        index = cls._index(course_modules)
        cls._check_references(index)
        cycle = cls._find_cycle(index)
        if cycle:
            raise CycleError(cycle)

    @classmethod
    def validate_prerequisite_update(
        cls,
        course_modules: Iterable[Module],
        module_id: str,
        prerequisites: Sequence[str],
    ) -> None:
        """Validate the graph as it would be after replacing one module's prerequisites."""
        candidate = [
            m.model_copy(update={"prerequisites": list(prerequisites)}) if m.id == module_id else m
            for m in course_modules
        ]
        cls.validate(candidate)

    @classmethod
    def validate_new_module(cls, course_modules: Iterable[Module], module: Module) -> None:
        """Validate the graph with a module about to be created."""
        cls.validate([*[m for m in course_modules if m.id != module.id], module])

    @classmethod
    def topological_order(cls, course_modules: Iterable[Module]) -> List[str]:
        """Module ids with every prerequisite ahead of its dependents."""
        index = cls._index(course_modules)
        cls._check_references(index)

        dependents: Dict[str, List[str]] = {module_id: [] for module_id in index}
        pending = {module_id: len(set(m.prerequisites)) for module_id, m in index.items()}
        for module in index.values():
            for target in set(module.prerequisites):
                dependents[target].append(module.id)

        ready = [_sort_key(m) for module_id, m in index.items() if pending[module_id] == 0]
        heapq.heapify(ready)
        ordered: List[str] = []
        while ready:
            _, current = heapq.heappop(ready)
            ordered.append(current)
            for dependent in dependents[current]:
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, _sort_key(index[dependent]))

        if len(ordered) != len(index):
            raise CycleError(cls._find_cycle(index))
        return ordered

    @classmethod
    def validate_reorder(
        cls,
        course_modules: Iterable[Module],
        ordered_ids: Sequence[str],
    ) -> Dict[str, int]:
        """
        Check a reorder request and return the new 1-based positions.

        Reordering never touches prerequisite edges, so it cannot break the DAG;
        it only has to name every module of the course exactly once.
        """
        existing = {m.id for m in course_modules}
        unknown = set(ordered_ids) - existing
        if unknown:
            raise ReorderError(ReorderError.INVALID_MODULE, unknown)
        missing = existing - set(ordered_ids)
        duplicated = {i for i, seen in Counter(ordered_ids).items() if seen > 1}
        if missing or duplicated:
            raise ReorderError(ReorderError.MISSING_MODULES, missing | duplicated)
        return {module_id: position for position, module_id in enumerate(ordered_ids, start=1)}
