"""Local fallback prompts used when the remote model is unavailable"""

from typing import Callable, Dict, Optional

from promptura.prompts.openers import random_opener

FallbackFunc = Callable[[str, str], str]

FALLBACK_TEMPLATES: Dict[str, FallbackFunc] = {}


def register_fallback(key: str) -> Callable[[FallbackFunc], FallbackFunc]:
    """Register a fallback template for a technique key"""
    def decorator(func: FallbackFunc) -> FallbackFunc:
        FALLBACK_TEMPLATES[key] = func
        return func
    return decorator


@register_fallback("few-shot")
def few_shot(text: str, opener: str) -> str:
    return f"""{opener} expert in the relevant field. Use the examples below to guide your response pattern.

Task: {text}

Example 1: [A relevant example of the desired output format and quality]
Example 2: [Another example showing variation at the same quality]
Example 3: [A third example that establishes the pattern]

Following the pattern set by these examples, respond to the task above with the same level of detail, structure and quality."""


@register_fallback("chain-of-thought")
def chain_of_thought(text: str, opener: str) -> str:
    return f"""{opener} analytical expert working through a problem step by step.

Objective: {text}

Approach:
1. Understand the core objective and requirements
2. Analyze the key components and how they relate
3. Develop a structured solution with clear reasoning
4. Verify the result with explicit quality checks

Instructions: Follow this progression and explain the reasoning behind each step."""


@register_fallback("tree-of-thought")
def tree_of_thought(text: str, opener: str) -> str:
    return f"""{opener} strategic thinker exploring several approaches to this problem.

Problem: {text}

Branch 1 - Direct Approach:
- What is the most straightforward solution?
- What are its pros and cons?

Branch 2 - Creative Approach:
- Which unconventional methods could work?
- What unique advantages might they offer?

Branch 3 - Systematic Approach:
- Which methodical process ensures thoroughness?
- How can risks be minimized?

After exploring the three branches, synthesize their best elements into an optimal solution."""


@register_fallback("self-consistency")
def self_consistency(text: str, opener: str) -> str:
    return f"""{opener} expert analyst who checks every answer from multiple angles.

Task: {text}

Reasoning Path 1:
[Approach the problem from one perspective]

Reasoning Path 2:
[Approach the same problem from a different angle]

Reasoning Path 3:
[Use a third distinct approach]

Final Answer:
Compare the three paths and give a consensus answer built from their most consistent elements."""


@register_fallback("role-based")
def role_based(text: str, opener: str) -> str:
    return f"""{opener} senior specialist in the field relevant to this task. Your task is to provide expert guidance and thorough analysis.

Context: {text}
Constraints: Give detailed, professional-level advice with clear reasoning and actionable insights.
Output format: Structured response with headings, bullet points for key takeaways and specific next steps."""


@register_fallback("constraint-based")
def constraint_based(text: str, opener: str) -> str:
    return f"""{opener} precise domain expert working to strict requirements.

Task: {text}

Requirements:
- Provide specific, actionable guidance
- Use clear, professional language
- Include relevant examples where helpful
- Consider alternative approaches

Output Format: Structured analysis with clear sections, practical recommendations and implementation guidance.

Quality Standards: Ensure accuracy, completeness and practical applicability."""


@register_fallback("meta-prompting")
def meta_prompting(text: str, opener: str) -> str:
    return f"""{opener} meta-cognitive expert. Before addressing the main task, decide how best to approach it.

Main Task: {text}

Meta-Analysis:
1. What type of problem is this? (analytical, creative, technical, etc.)
2. Which expertise or knowledge domains are most relevant?
3. Which pitfalls or challenges should be anticipated?
4. What would a high-quality response look like?
5. Which approach would be most effective?

Using this meta-analysis, respond to the main task with the approach you identified."""


@register_fallback("recursive-prompting")
def recursive_prompting(text: str, opener: str) -> str:
    return f"""{opener} iterative problem solver who refines the solution step by step.

Initial Task: {text}

Step 1 - Initial Response:
Give a first attempt at the task.

Step 2 - Self-Evaluation:
Critically evaluate the first attempt. What could be improved or is missing?

Step 3 - Refined Response:
Produce an improved version that fixes the identified shortcomings.

Step 4 - Final Optimization:
Make final adjustments for the most complete and effective response."""


@register_fallback("perspective-taking")
def perspective_taking(text: str, opener: str) -> str:
    return f"""{opener} multi-perspective analyst. Examine this from several viewpoints before concluding.

Central Issue: {text}

Perspective 1 - Stakeholder A:
How would [relevant stakeholder] view this? What are their priorities and concerns?

Perspective 2 - Stakeholder B:
How would [another stakeholder] approach it differently?

Perspective 3 - External Observer:
What would an objective outsider notice that insiders miss?

Perspective 4 - Future Impact:
How does this look in the long term? What are the broader implications?

Synthesis:
Integrate all perspectives into a balanced, well-rounded response."""


@register_fallback("socratic-method")
def socratic_method(text: str, opener: str) -> str:
    return f"""{opener} Socratic questioner. Explore this topic through guided inquiry.

Topic: {text}

1. What do we already know about this topic?
2. Which assumptions are we making?
3. What evidence supports our current understanding?
4. Which questions does this raise?
5. How might someone disagree?
6. What are the implications of our conclusions?
7. How does this connect to broader principles?

Work through each question, then give a thorough response based on the inquiry."""


@register_fallback("json-prompting")
def json_prompting(text: str, opener: str) -> str:
    return f"""{opener} JSON architect specializing in structured content generation.

Objective: {text}

Produce a single valid JSON object with these fields:
- title, description, style
- camera, lighting, environment
- elements (array), motion, effects, sound_effects
- mood, color_palette, style_reference, keywords (array), text

Output format: Only the JSON object, properly nested and ready to use."""


def default_fallback(text: str, opener: str) -> str:
    return f"""{opener} expert consultant. Your task is to provide clear, actionable guidance on the following:

{text}

Context: Provide professional-level analysis with clear reasoning and practical insights.
Constraints: Be specific, actionable and well-structured.
Output format: Organized response with key points, examples and next steps."""


def get_fallback(
    text: str,
    technique: Optional[str],
    target_model: Optional[str] = None,
    opener: Optional[str] = None,
) -> str:
    """Technique-flavored prompt built without any network access"""
    template = FALLBACK_TEMPLATES.get(technique or "", default_fallback)
    model_context = f" (optimized for {target_model})" if target_model else ""
    return template(text, opener or random_opener()) + model_context
