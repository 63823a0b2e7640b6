"""
Version/Diff Manager

Orchestrates version history for saved prompts on top of a VersionStore.
Invariants enforced here:

* exactly one version per prompt has ``is_current`` set
* version numbers are one above the highest ever issued, never reused
* the current version cannot be deleted

Current-flag writes are two steps (clear the others, then set the target)
done while holding the store's per-prompt lock. A writer that bypasses the
lock can observe a short window with two current versions.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from promptura.errors import InvalidOperationError, NotFoundError
from promptura.models.prompt_version import (
    DiffEntry,
    PromptComparison,
    PromptVersion,
    VersionHistory,
)
from promptura.versioning.diff import positional_diff
from promptura.versioning.store import VersionStore

logger = logging.getLogger(__name__)

RECENT_CHANGES_LIMIT = 5


class VersionManager:
    """Manage prompt versions with history, branching and diffs"""

    def __init__(self, store: VersionStore):
        self.store = store

    async def get_history(self, prompt_id: str, *, user_id: Optional[str] = None) -> VersionHistory:
        """All versions of a prompt, newest first"""
        versions = self._visible(await self.store.query_versions(prompt_id), user_id)
        if not versions:
            raise NotFoundError(f"No versions found for prompt {prompt_id}")

        current = next((v for v in versions if v.is_current), versions[0])
        return VersionHistory(
            versions=versions,
            total_versions=len(versions),
            current_version=current,
            recent_changes=versions[:RECENT_CHANGES_LIMIT],
        )

    async def get_version(self, version_id: str, *, user_id: Optional[str] = None) -> PromptVersion:
        """Fetch one version"""
        version = await self.store.get_version(version_id)
        if version is None or not self._owned_by(version, user_id):
            raise NotFoundError(f"Version {version_id} not found")
        return version

    async def create_version(
        self,
        prompt_id: str,
        title: str,
        content: str,
        change_description: Optional[str] = None,
        parent_version_id: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
    ) -> PromptVersion:
        """
        Create a new current version of a prompt

        Args:
            prompt_id: Owning saved prompt
            title: Version title
            content: Prompt text
            change_description: Optional note about what changed
            parent_version_id: Version this one was branched from

        Returns:
            The stored version, with ``is_current`` set

        Raises:
            InvalidOperationError: title or content is blank
            NotFoundError: the prompt already belongs to another user
        """
        if not title or not title.strip():
            raise InvalidOperationError("Version title must not be empty")
        if not content or not content.strip():
            raise InvalidOperationError("Version content must not be empty")

        async with self.store.lock(prompt_id):
            existing = await self.store.query_versions(prompt_id)
            if user_id is not None and any(v.user_id != user_id for v in existing):
                raise NotFoundError(f"Prompt {prompt_id} not found")
            snapshot = await self.store.get_prompt_snapshot(prompt_id)
            next_number = max(
                max((v.version_number for v in existing), default=0),
                snapshot.highest_version_number if snapshot else 0,
            ) + 1

            for version in existing:
                if version.is_current:
                    await self.store.update_version_current_flag(version.id, False)

            now = datetime.now()
            row = PromptVersion(
                id=str(uuid.uuid4()),
                prompt_id=prompt_id,
                user_id=user_id,
                version_number=next_number,
                title=title,
                content=content,
                change_description=change_description,
                parent_version_id=parent_version_id,
                is_current=True,
                created_at=now,
                updated_at=now,
            )
            version_id = await self.store.insert_version(row)
            await self.store.update_owning_prompt_snapshot(
                prompt_id, title, content, highest_version_number=next_number
            )

        logger.info(f"Created version {next_number} of prompt {prompt_id}")
        return row.model_copy(update={"id": version_id})

    async def set_current_version(self, version_id: str, *, user_id: Optional[str] = None) -> PromptVersion:
        """Promote a version to current and refresh the saved prompt"""
        version = await self.get_version(version_id, user_id=user_id)

        async with self.store.lock(version.prompt_id):
            # A concurrent delete may have removed it since the first read.
            version = await self.store.get_version(version_id)
            if version is None:
                raise NotFoundError(f"Version {version_id} not found")
            for other in await self.store.query_versions(version.prompt_id):
                if other.is_current and other.id != version.id:
                    await self.store.update_version_current_flag(other.id, False)
            await self.store.update_version_current_flag(version.id, True)
            await self.store.update_owning_prompt_snapshot(version.prompt_id, version.title, version.content)

        logger.info(f"Version {version.version_number} is now current for prompt {version.prompt_id}")
        return version.model_copy(update={"is_current": True})

    async def delete_version(self, version_id: str, *, user_id: Optional[str] = None):
        """Delete a non-current version; numbering is left untouched"""
        version = await self.get_version(version_id, user_id=user_id)

        async with self.store.lock(version.prompt_id):
            # Re-read under the lock; another writer may have promoted it.
            latest = await self.store.get_version(version_id)
            if latest is None:
                raise NotFoundError(f"Version {version_id} not found")
            if latest.is_current:
                raise InvalidOperationError(
                    f"Cannot delete version {latest.version_number}: it is the current version. "
                    "Make another version current first."
                )
            await self.store.delete_version(version_id)

        logger.info(f"Deleted version {version.version_number} of prompt {version.prompt_id}")

    async def branch_from_version(
        self,
        version_id: str,
        new_title: str,
        new_content: str,
        change_description: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
    ) -> PromptVersion:
        """Create a new version whose parent is an existing one"""
        source = await self.get_version(version_id, user_id=user_id)
        return await self.create_version(
            source.prompt_id,
            new_title,
            new_content,
            change_description or f"Branched from version {source.version_number}",
            parent_version_id=version_id,
            user_id=user_id,
        )

    @staticmethod
    def diff(version_a: PromptVersion, version_b: PromptVersion) -> List[DiffEntry]:
        """Positional line diff from version_a to version_b"""
        return positional_diff(version_a.content, version_b.content)

    async def compare_versions(
        self,
        version_a_id: str,
        version_b_id: str,
        notes: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
    ) -> PromptComparison:
        """Record that the user compared two versions"""
        await self.get_version(version_a_id, user_id=user_id)
        await self.get_version(version_b_id, user_id=user_id)

        comparison = PromptComparison(
            id=str(uuid.uuid4()),
            user_id=user_id,
            version_a_id=version_a_id,
            version_b_id=version_b_id,
            comparison_notes=notes,
        )
        comparison_id = await self.store.insert_comparison(comparison)
        return comparison.model_copy(update={"id": comparison_id})

    async def get_comparisons(self, limit: int = 20, *, user_id: Optional[str] = None) -> List[PromptComparison]:
        """The user's most recent comparisons"""
        return await self.store.query_comparisons(user_id, limit)

    @staticmethod
    def _owned_by(version: PromptVersion, user_id: Optional[str]) -> bool:
        return user_id is None or version.user_id == user_id

    def _visible(self, versions: List[PromptVersion], user_id: Optional[str]) -> List[PromptVersion]:
        return [v for v in versions if self._owned_by(v, user_id)]
