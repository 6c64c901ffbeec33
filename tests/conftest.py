from __future__ import annotations

import pytest

from manuscript.domain.models import Project
from manuscript.domain.ports import PersistenceError


class MemoryRepository:
    """In-memory snapshot store that can be switched into a failing mode."""

    def __init__(self, project: Project | None = None) -> None:
        self.stored = project
        self.commits = 0
        self.fail_commits = False
        self.fail_loads = False

    def load(self) -> Project | None:
        if self.fail_loads:
            raise PersistenceError("snapshot store offline")
        return self.stored

    def commit(self, project: Project) -> None:
        if self.fail_commits:
            raise PersistenceError("snapshot store offline")
        self.stored = project
        self.commits += 1


@pytest.fixture
def memory_repository() -> MemoryRepository:
    return MemoryRepository()
