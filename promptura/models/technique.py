"""Prompt engineering technique catalog"""

from typing import Dict, List, Literal
from pydantic import BaseModel, ConfigDict

ComplexityTier = Literal["simple", "intermediate", "advanced"]


class Technique(BaseModel):
    """Static catalog entry for a prompt engineering technique"""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str
    complexity_tier: ComplexityTier


TECHNIQUES: Dict[str, Technique] = {
    technique.key: technique
    for technique in [
        Technique(
            key="few-shot",
            name="Few-Shot Learning",
            description="Provides examples to guide the AI's response pattern",
            complexity_tier="intermediate",
        ),
        Technique(
            key="chain-of-thought",
            name="Chain of Thought",
            description="Breaks down complex reasoning into step-by-step thinking",
            complexity_tier="advanced",
        ),
        Technique(
            key="tree-of-thought",
            name="Tree of Thought",
            description="Explores multiple reasoning paths and selects the best approach",
            complexity_tier="advanced",
        ),
        Technique(
            key="self-consistency",
            name="Self-Consistency",
            description="Generates multiple reasoning paths and finds consensus",
            complexity_tier="advanced",
        ),
        Technique(
            key="role-based",
            name="Role-Based (PRIMER)",
            description="Assigns specific expert roles to guide AI behavior",
            complexity_tier="simple",
        ),
        Technique(
            key="constraint-based",
            name="Constraint-Based (ULTRA)",
            description="Uses detailed constraints and requirements for precision",
            complexity_tier="intermediate",
        ),
        Technique(
            key="meta-prompting",
            name="Meta-Prompting",
            description="Prompts the AI to think about how to approach the task",
            complexity_tier="advanced",
        ),
        Technique(
            key="recursive-prompting",
            name="Recursive Prompting",
            description="Builds upon previous responses iteratively",
            complexity_tier="advanced",
        ),
        Technique(
            key="perspective-taking",
            name="Perspective Taking",
            description="Considers multiple viewpoints before responding",
            complexity_tier="intermediate",
        ),
        Technique(
            key="socratic-method",
            name="Socratic Method",
            description="Uses questioning to guide discovery and understanding",
            complexity_tier="intermediate",
        ),
        Technique(
            key="json-prompting",
            name="JSON Prompting",
            description="Generates structured JSON outputs for creative and technical projects",
            complexity_tier="advanced",
        ),
    ]
}

_ALLOWED_TIERS: Dict[str, List[str]] = {
    "simple": ["simple"],
    "intermediate": ["simple", "intermediate"],
    "advanced": ["simple", "intermediate", "advanced"],
}


def available_techniques(complexity: ComplexityTier = "intermediate") -> Dict[str, Technique]:
    """Techniques whose tier does not exceed the requested complexity"""
    allowed = _ALLOWED_TIERS[complexity]
    return {
        key: technique
        for key, technique in TECHNIQUES.items()
        if technique.complexity_tier in allowed
    }
