"""Reporting lines as an explicit forest.

Each employee points at zero or one manager by ``emp_id``. Stored data may
already contain a cycle (older rows were never checked), so every walk
here stops at the first repeated node instead of looping.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional


class ReportingForest:
    def __init__(self, managers: Mapping[str, Optional[str]]) -> None:
        # emp_id -> manager emp_id (None for roots)
        self._managers = {emp: (mgr or None) for emp, mgr in managers.items()}

    @classmethod
    def from_records(cls, records: Iterable[Mapping]) -> ReportingForest:
        return cls({r["emp_id"]: r.get("manager_id") for r in records})

    def __contains__(self, emp_id: str) -> bool:
        return emp_id in self._managers

    def manager_of(self, emp_id: str) -> Optional[str]:
        return self._managers.get(emp_id)

    def chain_of(self, emp_id: str) -> list[str]:
        """Managers above ``emp_id``, nearest first."""
        chain: list[str] = []
        seen = {emp_id}
        current = self._managers.get(emp_id)
        while current and current not in seen:
            chain.append(current)
            seen.add(current)
            current = self._managers.get(current)
        return chain

    def would_cycle(self, emp_id: str, manager_id: Optional[str]) -> bool:
        """True if making ``manager_id`` the manager of ``emp_id`` closes a loop."""
        if not manager_id:
            return False
        if manager_id == emp_id:
            return True
        return emp_id in self.chain_of(manager_id)

    def direct_reports(self, manager_id: str) -> list[str]:
        return [emp for emp, mgr in self._managers.items() if mgr == manager_id]

    def all_reports(self, manager_id: str) -> set[str]:
        found: set[str] = set()
        frontier = [manager_id]
        while frontier:
            current = frontier.pop()
            for emp in self.direct_reports(current):
                if emp not in found and emp != manager_id:
                    found.add(emp)
                    frontier.append(emp)
        return found

    def cycles(self) -> list[list[str]]:
        """Every distinct reporting loop already present in the data."""
        found: list[list[str]] = []
        seen_members: set[str] = set()
        for start in self._managers:
            path: list[str] = []
            index: dict[str, int] = {}
            current: Optional[str] = start
            while current and current not in index and current not in seen_members:
                index[current] = len(path)
                path.append(current)
                current = self._managers.get(current)
            if current in index:
                loop = path[index[current]:]
                found.append(loop)
                seen_members.update(loop)
            seen_members.update(path)
        return found
