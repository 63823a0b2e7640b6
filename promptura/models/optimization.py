"""Optimization request/result models"""

from typing import Optional, Dict, List, Literal
from pydantic import BaseModel, Field

from promptura.models.technique import ComplexityTier


class PromptConfig(BaseModel):
    """Generation options chosen by the user"""
    temperature: Optional[float] = Field(None, ge=0, le=2)
    max_tokens: Optional[int] = Field(None, ge=1)
    style: Optional[Literal["creative", "balanced", "precise"]] = None
    tone: Optional[Literal["professional", "casual", "friendly"]] = None
    complexity: Optional[ComplexityTier] = None
    domain: Optional[str] = None


class OptimizationRequest(BaseModel):
    """A single optimization call; never persisted"""
    original_text: str
    technique: Optional[str] = None
    config: PromptConfig = Field(default_factory=PromptConfig)
    target_model: Optional[str] = None


class OptimizationResult(BaseModel):
    """Optimized prompt and where it came from"""
    text: str = Field(..., min_length=1)
    source: Literal["remote", "fallback"]


class FactorScore(BaseModel):
    """Score and feedback for one quality factor"""
    score: int
    feedback: str


class QualityReport(BaseModel):
    """Heuristic prompt quality score (0-100)"""
    score: float
    factors: Dict[str, FactorScore]


class IntentAnalysis(BaseModel):
    """Detected intent of a prompt with improvement suggestions"""
    intent: Literal["creation", "analysis", "explanation", "coding", "general"]
    suggestions: List[str]
