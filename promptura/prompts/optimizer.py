"""Prompt heuristics: technique recommendation, quality scoring, intent detection"""

import math
import re
from typing import List, Tuple

from promptura.models.optimization import FactorScore, IntentAnalysis, QualityReport

# Checked in order; the first category with a matching keyword wins.
TECHNIQUE_KEYWORDS: List[Tuple[str, List[str]]] = [
    ("tree-of-thought", ["analyze", "compare", "evaluate"]),
    ("perspective-taking", ["creative", "innovative", "brainstorm"]),
    ("socratic-method", ["explain", "teach", "understand"]),
    ("few-shot", ["example", "format", "style"]),
    ("chain-of-thought", ["solve", "strategy", "plan"]),
]
DEFAULT_TECHNIQUE = "role-based"

INTENT_RULES: List[Tuple[str, List[str], List[str]]] = [
    ("creation", ["write", "create", "generate"], [
        "Specify the target audience",
        "Add tone and style requirements",
        "Include format specifications",
        "Mention word count or length",
    ]),
    ("analysis", ["analyze", "review", "evaluate"], [
        "Define evaluation criteria",
        "Specify the analysis framework",
        "Request specific metrics or scores",
        "Ask for actionable recommendations",
    ]),
    ("explanation", ["explain", "describe", "what is"], [
        "Specify the audience level (beginner/expert)",
        "Request examples or analogies",
        "Ask for step-by-step breakdown",
        "Include practical applications",
    ]),
    ("coding", ["code", "program", "function"], [
        "Specify programming language",
        "Include error handling requirements",
        "Request code comments",
        "Mention performance considerations",
    ]),
]
GENERAL_SUGGESTIONS = [
    "Add specific context or background",
    "Define the desired outcome",
    "Specify constraints or requirements",
    "Include examples if helpful",
]

_ROLE = re.compile(r"act as|you are|imagine you're", re.IGNORECASE)
_CONTEXT = re.compile(r"context|background|situation", re.IGNORECASE)
_CONSTRAINTS = re.compile(r"format|length|style|tone|audience", re.IGNORECASE)
_EXAMPLES = re.compile(r"example|such as|like|including", re.IGNORECASE)
_NUMBERED = re.compile(r"\d+\.")
_BULLETS = re.compile(r"[-•*]")
_HEADERS = re.compile(r"\*\*.*\*\*|#")
_TASK = re.compile(r"task|goal|objective|purpose", re.IGNORECASE)
_OUTPUT = re.compile(r"output|result|response|format", re.IGNORECASE)


class PromptOptimizer:
    """Heuristic analysis of prompts; no I/O"""

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """Rough token count: one token per four characters"""
        return math.ceil(len(text) / 4)

    @staticmethod
    def recommend_technique(text: str) -> str:
        """Pick a technique key from keywords in the text"""
        lowered = text.lower()
        for technique, keywords in TECHNIQUE_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return technique
        return DEFAULT_TECHNIQUE

    @staticmethod
    def score_prompt_quality(text: str) -> QualityReport:
        """
        Score a prompt on clarity, specificity, structure and completeness

        Each factor is scored 0-100 from independent pattern checks; the
        overall score is the mean of the four factors.
        """
        has_role = bool(_ROLE.search(text))
        has_context = bool(_CONTEXT.search(text))
        clarity = FactorScore(
            score=(25 if has_role else 0) + (25 if has_context else 0) + (25 if len(text) > 50 else 0) + 25,
            feedback="Good role definition" if has_role else "Consider adding a specific role",
        )

        has_constraints = bool(_CONSTRAINTS.search(text))
        has_examples = bool(_EXAMPLES.search(text))
        specificity = FactorScore(
            score=(40 if has_constraints else 0) + (30 if has_examples else 0) + 30,
            feedback="Good constraints specified" if has_constraints else "Add more specific requirements",
        )

        has_steps = bool(_NUMBERED.search(text))
        has_bullets = bool(_BULLETS.search(text))
        has_headers = bool(_HEADERS.search(text))
        structure = FactorScore(
            score=(30 if has_steps else 0) + (30 if has_bullets else 0) + (40 if has_headers else 0),
            feedback="Well structured" if has_headers else "Consider adding structure with headers or lists",
        )

        has_task = bool(_TASK.search(text))
        has_output = bool(_OUTPUT.search(text))
        completeness = FactorScore(
            score=(50 if has_task else 0) + (50 if has_output else 0),
            feedback="Complete prompt" if has_task and has_output else "Add clear task and output requirements",
        )

        factors = {
            "clarity": clarity,
            "specificity": specificity,
            "structure": structure,
            "completeness": completeness,
        }
        overall = sum(factor.score for factor in factors.values()) / len(factors)
        return QualityReport(score=overall, factors=factors)

    @staticmethod
    def detect_intent(text: str) -> IntentAnalysis:
        """Classify what the prompt asks for and suggest what to add"""
        lowered = text.lower()
        for intent, keywords, suggestions in INTENT_RULES:
            if any(keyword in lowered for keyword in keywords):
                return IntentAnalysis(intent=intent, suggestions=list(suggestions))
        return IntentAnalysis(intent="general", suggestions=list(GENERAL_SUGGESTIONS))
