"""Prompt version models"""

from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field


class PromptVersion(BaseModel):
    """One revision of a saved prompt"""
    id: str
    prompt_id: str
    user_id: Optional[str] = None
    version_number: int = Field(..., ge=1)
    title: str
    content: str
    change_description: Optional[str] = None
    parent_version_id: Optional[str] = None  # weak reference, no ownership
    is_current: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class VersionHistory(BaseModel):
    """Read view over all versions of a prompt"""
    versions: List[PromptVersion]  # descending version_number
    total_versions: int
    current_version: PromptVersion
    recent_changes: List[PromptVersion]


class DiffEntry(BaseModel):
    """One line of a positional diff"""
    type: Literal["added", "removed", "unchanged"]
    content: str
    line_number: int


class SavedPromptSnapshot(BaseModel):
    """Denormalized title/content of the owning saved prompt"""
    prompt_id: str
    title: str
    content: str
    highest_version_number: int = 0  # high-water mark; numbers are never reused
    updated_at: datetime = Field(default_factory=datetime.now)


class PromptComparison(BaseModel):
    """Record of a user comparing two versions"""
    id: str
    user_id: Optional[str] = None
    version_a_id: str
    version_b_id: str
    comparison_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
