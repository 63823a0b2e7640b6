"""Pydantic models for API requests and responses"""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field

from promptura.models.optimization import OptimizationResult, PromptConfig
from promptura.models.prompt_version import DiffEntry, PromptComparison


class OptimizeRequest(BaseModel):
    """Prompt optimization request"""
    prompt: str = Field(..., description="Prompt to optimize")
    technique: Optional[str] = Field(None, description="Technique key (optional)")
    config: PromptConfig = Field(default_factory=PromptConfig)
    target_model: Optional[str] = Field(None, description="Model to optimize for")


class VariationsRequest(BaseModel):
    """A/B variation request"""
    prompt: str
    technique_a: Optional[str] = None
    technique_b: Optional[str] = None
    config: PromptConfig = Field(default_factory=PromptConfig)
    target_model: Optional[str] = None


class VariationsResponse(BaseModel):
    variation_a: OptimizationResult
    variation_b: OptimizationResult


class RewriteRequest(BaseModel):
    prompt: str
    rewrite_type: Literal["clarity", "brevity", "creativity", "specificity"]


class TextRequest(BaseModel):
    """Request carrying only prompt text"""
    text: str


class RecommendResponse(BaseModel):
    technique: str


class TokenEstimateResponse(BaseModel):
    tokens: int


class CreateVersionRequest(BaseModel):
    title: str
    content: str
    change_description: Optional[str] = None
    parent_version_id: Optional[str] = None


class BranchVersionRequest(BaseModel):
    title: str
    content: str
    change_description: Optional[str] = None


class DiffRequest(BaseModel):
    version_a_id: str
    version_b_id: str


class DiffResponse(BaseModel):
    changes: List[DiffEntry]


class ComparisonRequest(BaseModel):
    version_a_id: str
    version_b_id: str
    notes: Optional[str] = None


class ComparisonResponse(BaseModel):
    comparison: PromptComparison
    changes: List[DiffEntry]
