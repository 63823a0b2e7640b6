"""Tests for prompt heuristics"""

import pytest

from promptura.models.technique import available_techniques
from promptura.prompts.optimizer import PromptOptimizer


@pytest.mark.parametrize("text,expected", [
    ("please analyze and compare these two options", "tree-of-thought"),
    ("explain how photosynthesis works", "socratic-method"),
    ("give me an example in this style", "few-shot"),
    ("brainstorm creative names for a bakery", "perspective-taking"),
    ("solve this scheduling puzzle", "chain-of-thought"),
    ("write a haiku about rain", "role-based"),
])
def test_recommend_technique(text, expected):
    assert PromptOptimizer.recommend_technique(text) == expected


def test_recommend_priority_order():
    """Analysis keywords win over every later category"""
    text = "Explain and evaluate this creative plan with an example"
    assert PromptOptimizer.recommend_technique(text) == "tree-of-thought"

    # Creativity beats explanation
    assert PromptOptimizer.recommend_technique("explain a creative idea") == "perspective-taking"


def test_recommend_is_case_insensitive():
    assert PromptOptimizer.recommend_technique("ANALYZE THIS") == "tree-of-thought"


def test_structure_score_rewards_steps_and_bullets():
    plain = "Summarize the quarterly report for the leadership team"
    structured = "Summarize the quarterly report for the leadership team\n1. Revenue\n- Costs"

    plain_score = PromptOptimizer.score_prompt_quality(plain)
    structured_score = PromptOptimizer.score_prompt_quality(structured)

    assert structured_score.factors["structure"].score > plain_score.factors["structure"].score
    assert structured_score.factors["structure"].score == 60


def test_quality_score_factors():
    prompt = (
        "**Role**: Act as a senior editor.\n"
        "Context: quarterly newsletter.\n"
        "Task: rewrite the intro in a friendly tone, such as a personal note.\n"
        "1. Keep it short\n"
        "- Output format: two paragraphs"
    )
    report = PromptOptimizer.score_prompt_quality(prompt)

    assert report.factors["clarity"].score == 100
    assert report.factors["specificity"].score == 100
    assert report.factors["structure"].score == 100
    assert report.factors["completeness"].score == 100
    assert report.score == 100
    assert report.factors["completeness"].feedback == "Complete prompt"


def test_quality_score_baseline():
    """A bare prompt keeps only the flat clarity and specificity points"""
    report = PromptOptimizer.score_prompt_quality("hi")

    assert report.factors["clarity"].score == 25
    assert report.factors["specificity"].score == 30
    assert report.factors["structure"].score == 0
    assert report.factors["completeness"].score == 0
    assert report.score == pytest.approx((25 + 30 + 0 + 0) / 4)
    assert report.factors["clarity"].feedback == "Consider adding a specific role"


def test_estimate_tokens_rounds_up():
    assert PromptOptimizer.estimate_tokens("") == 0
    assert PromptOptimizer.estimate_tokens("abcd") == 1
    assert PromptOptimizer.estimate_tokens("abcde") == 2


@pytest.mark.parametrize("text,intent", [
    ("Write a blog post about tides", "creation"),
    ("Review this contract", "analysis"),
    ("What is a monad?", "explanation"),
    ("Fix this function", "coding"),
    ("Tides", "general"),
])
def test_detect_intent(text, intent):
    analysis = PromptOptimizer.detect_intent(text)
    assert analysis.intent == intent
    assert len(analysis.suggestions) == 4


def test_available_techniques_by_complexity():
    simple = available_techniques("simple")
    intermediate = available_techniques("intermediate")
    advanced = available_techniques("advanced")

    assert list(simple) == ["role-based"]
    assert set(simple) < set(intermediate) < set(advanced)
    assert "chain-of-thought" not in intermediate
    assert len(advanced) == 11
