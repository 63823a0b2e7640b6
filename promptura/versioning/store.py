"""
Version Store Adapter

Storage interface consumed by the version manager. Implementations only
persist and query rows; the single-current rule and the ban on deleting
the current version live in VersionManager.
"""

import asyncio
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager, Dict, List, Optional

from promptura.models.prompt_version import PromptComparison, PromptVersion, SavedPromptSnapshot


class VersionStore(ABC):
    """Persisted-storage collaborator for prompt versions"""

    @abstractmethod
    async def insert_version(self, row: PromptVersion) -> str:
        """Insert a version row and return its id"""

    @abstractmethod
    async def get_version(self, version_id: str) -> Optional[PromptVersion]:
        """Fetch one version, or None"""

    @abstractmethod
    async def update_version_current_flag(self, version_id: str, is_current: bool):
        """Set or clear the current flag of one version"""

    @abstractmethod
    async def delete_version(self, version_id: str):
        """Remove a version row"""

    @abstractmethod
    async def query_versions(self, prompt_id: str) -> List[PromptVersion]:
        """All versions of a prompt, highest version_number first"""

    @abstractmethod
    async def update_owning_prompt_snapshot(
        self,
        prompt_id: str,
        title: str,
        content: str,
        highest_version_number: Optional[int] = None,
    ):
        """Refresh the saved prompt's denormalized title/content; None keeps the stored high-water mark"""

    @abstractmethod
    async def get_prompt_snapshot(self, prompt_id: str) -> Optional[SavedPromptSnapshot]:
        """Denormalized title/content of a saved prompt"""

    @abstractmethod
    async def insert_comparison(self, row: PromptComparison) -> str:
        """Persist a comparison record and return its id"""

    @abstractmethod
    async def query_comparisons(self, user_id: Optional[str], limit: int = 20) -> List[PromptComparison]:
        """A user's comparisons, newest first"""

    @abstractmethod
    def lock(self, prompt_id: str) -> AsyncContextManager:
        """Advisory lock serializing current-flag writes for one prompt"""


class InMemoryVersionStore(VersionStore):
    """Process-local store, used for tests and single-process deployments"""

    def __init__(self):
        self.versions: Dict[str, PromptVersion] = {}
        self.snapshots: Dict[str, SavedPromptSnapshot] = {}
        self.comparisons: List[PromptComparison] = []
        self._locks: Dict[str, asyncio.Lock] = {}

    async def insert_version(self, row: PromptVersion) -> str:
        version_id = row.id or str(uuid.uuid4())
        self.versions[version_id] = row.model_copy(update={"id": version_id})
        return version_id

    async def get_version(self, version_id: str) -> Optional[PromptVersion]:
        version = self.versions.get(version_id)
        return version.model_copy() if version else None

    async def update_version_current_flag(self, version_id: str, is_current: bool):
        version = self.versions.get(version_id)
        if version:
            self.versions[version_id] = version.model_copy(
                update={"is_current": is_current, "updated_at": datetime.now()}
            )

    async def delete_version(self, version_id: str):
        self.versions.pop(version_id, None)

    async def query_versions(self, prompt_id: str) -> List[PromptVersion]:
        rows = [v.model_copy() for v in self.versions.values() if v.prompt_id == prompt_id]
        return sorted(rows, key=lambda v: v.version_number, reverse=True)

    async def update_owning_prompt_snapshot(
        self,
        prompt_id: str,
        title: str,
        content: str,
        highest_version_number: Optional[int] = None,
    ):
        if highest_version_number is None:
            previous = self.snapshots.get(prompt_id)
            highest_version_number = previous.highest_version_number if previous else 0
        self.snapshots[prompt_id] = SavedPromptSnapshot(
            prompt_id=prompt_id,
            title=title,
            content=content,
            highest_version_number=highest_version_number,
        )

    async def get_prompt_snapshot(self, prompt_id: str) -> Optional[SavedPromptSnapshot]:
        return self.snapshots.get(prompt_id)

    async def insert_comparison(self, row: PromptComparison) -> str:
        comparison_id = row.id or str(uuid.uuid4())
        self.comparisons.append(row.model_copy(update={"id": comparison_id}))
        return comparison_id

    async def query_comparisons(self, user_id: Optional[str], limit: int = 20) -> List[PromptComparison]:
        rows = [c for c in reversed(self.comparisons) if c.user_id == user_id]
        return rows[:limit]

    def lock(self, prompt_id: str) -> asyncio.Lock:
        if prompt_id not in self._locks:
            self._locks[prompt_id] = asyncio.Lock()
        return self._locks[prompt_id]
