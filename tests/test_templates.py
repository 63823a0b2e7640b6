"""Tests for instruction and fallback templates"""

import random

import pytest

from promptura.models.optimization import PromptConfig
from promptura.models.technique import TECHNIQUES
from promptura.prompts.fallback import FALLBACK_TEMPLATES, get_fallback
from promptura.prompts.openers import PROMPT_OPENERS, random_opener
from promptura.prompts.templates import (
    INSTRUCTION_TEMPLATES,
    build_instruction,
    register_template,
)

ORIGINAL = "Write a product launch email for our new note-taking app"


def test_every_technique_has_templates():
    """The catalog, instruction table and fallback table agree"""
    assert set(INSTRUCTION_TEMPLATES) >= set(TECHNIQUES)
    assert set(FALLBACK_TEMPLATES) >= set(TECHNIQUES)


@pytest.mark.parametrize("technique", list(TECHNIQUES) + [None, "unknown-technique"])
def test_instruction_contains_original_text(technique):
    """The original prompt is embedded verbatim"""
    instruction = build_instruction(ORIGINAL, technique, opener="Act as a")
    assert ORIGINAL in instruction
    assert "Act as a" in instruction


def test_instruction_is_deterministic_with_injected_opener():
    first = build_instruction(ORIGINAL, "few-shot", "GPT-4", opener="You are now")
    second = build_instruction(ORIGINAL, "few-shot", "GPT-4", opener="You are now")
    assert first == second


def test_technique_scaffolding():
    """Each technique carries its own structure"""
    cot = build_instruction(ORIGINAL, "chain-of-thought", opener="Act as a")
    for step in ("1.", "2.", "3.", "4."):
        assert step in cot

    tot = build_instruction(ORIGINAL, "tree-of-thought", opener="Act as a")
    assert "Branch 1" in tot and "Branch 2" in tot and "Branch 3" in tot
    assert "Synthesis" in tot

    few_shot = build_instruction(ORIGINAL, "few-shot", opener="Act as a")
    assert "Example 1" in few_shot and "Example 2" in few_shot and "Example 3" in few_shot


def test_unknown_technique_uses_generic_template():
    generic = build_instruction(ORIGINAL, None, opener="Act as a")
    assert build_instruction(ORIGINAL, "no-such-thing", opener="Act as a") == generic
    assert "Context:" in generic
    assert "Constraints:" in generic
    assert "Output format:" in generic


def test_context_blocks_are_appended():
    config = PromptConfig(complexity="advanced", domain="healthcare")
    instruction = build_instruction(ORIGINAL, "role-based", "Claude 3", config, opener="Act as a")

    assert "Optimize specifically for Claude 3" in instruction
    assert instruction.endswith("Domain Focus: healthcare")
    assert "Complexity Level: advanced" in instruction


def test_no_context_blocks_without_options():
    instruction = build_instruction(ORIGINAL, "role-based", opener="Act as a")
    assert "Optimize specifically" not in instruction
    assert "Complexity Level" not in instruction
    assert "Domain Focus" not in instruction


def test_register_template_extends_table():
    @register_template("test-echo")
    def echo(original_text, opener):
        return f"{opener} echo: {original_text}"

    try:
        assert build_instruction("hi", "test-echo", opener="Act as a") == "Act as a echo: hi"
    finally:
        INSTRUCTION_TEMPLATES.pop("test-echo")


def test_random_opener_uses_injected_rng():
    assert random_opener(random.Random(7)) == random_opener(random.Random(7))
    assert random_opener() in PROMPT_OPENERS


@pytest.mark.parametrize("technique", list(TECHNIQUES) + [None])
def test_fallback_is_technique_flavored_and_clean(technique):
    """Fallbacks embed the prompt and never contain refusal markers"""
    text = get_fallback(ORIGINAL, technique, opener="Act as a")

    assert ORIGINAL in text
    assert text.startswith("Act as a")
    assert "i cannot" not in text.lower()
    assert "i'm sorry" not in text.lower()


def test_fallback_model_context():
    text = get_fallback(ORIGINAL, "role-based", "Gemini", opener="Act as a")
    assert text.endswith("(optimized for Gemini)")
