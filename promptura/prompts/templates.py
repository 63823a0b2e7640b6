"""
Optimization instruction templates

Each technique maps to a template function that turns the user's text into
an instruction for the remote model. New techniques are added by decorating
a function with ``register_template``; ``build_instruction`` never branches
on technique keys itself.
"""

from typing import Callable, Dict, List, Optional

from promptura.models.optimization import PromptConfig
from promptura.prompts.openers import random_opener

TemplateFunc = Callable[[str, str], str]

INSTRUCTION_TEMPLATES: Dict[str, TemplateFunc] = {}

NO_FORMATTING_RULE = "- Do NOT use asterisks, bold markers, or markdown formatting"


def register_template(key: str) -> Callable[[TemplateFunc], TemplateFunc]:
    """Register an instruction template for a technique key"""
    def decorator(func: TemplateFunc) -> TemplateFunc:
        INSTRUCTION_TEMPLATES[key] = func
        return func
    return decorator


def _instruction(
    label: str,
    original_text: str,
    structure: str,
    requirements: List[str],
) -> str:
    """Shared frame: header, original prompt, structure, requirement list"""
    lines = [
        f"Transform this prompt using the {label} technique. "
        "Return ONLY the optimized prompt without asterisks or formatting markers.",
        "",
        f'Original prompt: "{original_text}"',
        "",
        "Use this structure but remove all asterisks and formatting:",
        structure.strip("\n"),
        "",
        "Requirements:",
        *[f"- {requirement}" for requirement in requirements],
        NO_FORMATTING_RULE,
        "- Use clear section breaks with plain text",
        "",
        "Return only the final optimized prompt.",
    ]
    return "\n".join(lines)


@register_template("few-shot")
def few_shot(original_text: str, opener: str) -> str:
    structure = f"""
{opener} [expert role] with extensive experience in [relevant domain].

Task: [Clear task description]

Here are examples to guide your response:

Example 1:
Input: [Relevant example input]
Output: [Example output showing the desired format and depth]

Example 2:
Input: [Second example input with some variation]
Output: [Second example output at the same quality]

Example 3:
Input: [Third example input]
Output: [Third example output that makes the pattern unmistakable]

Now, following the pattern shown in these examples, [specific instruction for the main task].
"""
    return _instruction("FEW-SHOT LEARNING", original_text, structure, [
        f'Start with "{opener}" followed by the expert role',
        "Provide three examples that establish the pattern",
        "Make every example relevant to the specific task",
        "Show the expected output format and quality level in the examples",
    ])


@register_template("chain-of-thought")
def chain_of_thought(original_text: str, opener: str) -> str:
    structure = f"""
{opener} [expert role] tasked with [mission].

Context: [Background, challenges, constraints, expectations]

Approach:
1. [Analysis step]
2. [Planning step]
3. [Execution step]
4. [Verification step]

Response Format: [Structured output format]

Instructions: [Quality guidelines and best practices]
"""
    return _instruction("CHAIN-OF-THOUGHT", original_text, structure, [
        f'Start with "{opener}" followed by the expert role',
        "Lay out a logical step-by-step approach",
        "Break complex reasoning into clear phases",
        "Include a verification or quality check step",
        "Specify a detailed response format",
    ])


@register_template("tree-of-thought")
def tree_of_thought(original_text: str, opener: str) -> str:
    structure = f"""
{opener} strategic problem solver tasked with exploring multiple solution paths.

Problem: [Clear problem statement]

Branch 1 - [First approach name]:
- What would this approach involve?
- What are its key steps, advantages and limitations?

Branch 2 - [Second approach name]:
- How does it differ from the first branch?
- What unique benefits and challenges does it bring?

Branch 3 - [Third approach name]:
- Which alternative perspective does it offer?
- How does it address limitations of the other branches?

Synthesis:
After exploring all three branches, combine their strongest elements into one optimal solution.
"""
    return _instruction("TREE-OF-THOUGHT", original_text, structure, [
        f'Start with "{opener}" followed by the strategic problem solver role',
        "Create three distinct solution branches",
        "Weigh pros and cons for each branch",
        "Finish with a synthesis of the best elements",
    ])


@register_template("self-consistency")
def self_consistency(original_text: str, opener: str) -> str:
    structure = f"""
{opener} analytical expert who approaches problems from several independent angles.

Task: [Clear task description]

Reasoning Path 1 - [First perspective]:
Work through the problem with [specific methodology] and reach a conclusion.

Reasoning Path 2 - [Second perspective]:
Solve the same problem independently using [different methodology].

Reasoning Path 3 - [Third perspective]:
Tackle it once more with [third distinct approach].

Consensus Analysis:
Compare the three conclusions, note agreements and discrepancies, and give the most consistent final answer.
"""
    return _instruction("SELF-CONSISTENCY", original_text, structure, [
        f'Start with "{opener}" followed by the analytical expert role',
        "Use three genuinely different reasoning approaches",
        "Keep each path independent and thorough",
        "End with a consensus-based final answer",
    ])


@register_template("role-based")
def role_based(original_text: str, opener: str) -> str:
    structure = f"""
{opener} [specific expert role]. Your task is to [clear goal].
Context: [relevant background or use case].
Constraints: [word limit, tone, audience, format requirements].
Output format: [bullet points, essay, code, etc.].
"""
    return _instruction("ROLE-BASED", original_text, structure, [
        f'Start directly with "{opener}" followed by the expert role',
        "Make the goal clear and actionable",
        "Add context that helps the AI understand the situation",
        "Include constraints such as tone, length and audience",
        "Specify the exact output format",
    ])


@register_template("constraint-based")
def constraint_based(original_text: str, opener: str) -> str:
    structure = f"""
Prompt Title: [Concise, descriptive title]

Role & Framing: {opener} [ultra-specialized expert] tasked with [specific mission].

Context: [Layered context covering challenges, constraints and expectations]

Output Objectives:
- [Objective 1]
- [Objective 2]
- [Objective 3]

Detailed Requirements:
1. [Specific requirement with constraints]
2. [Quality standards and limitations]
3. [Format and structure specifications]

Meta Instructions:
- Verify reasoning before answering
- Challenge assumptions where appropriate

Response Guidelines: [Structure requirements and terminology]
"""
    return _instruction("CONSTRAINT-BASED", original_text, structure, [
        f'Start with "{opener}" in the Role & Framing section',
        "Write precise specifications and quality controls",
        "Include several layers of context",
        "Specify the exact output format and structure",
    ])


@register_template("meta-prompting")
def meta_prompting(original_text: str, opener: str) -> str:
    structure = f"""
{opener} meta-cognitive expert who plans how to approach a problem before solving it.

Primary Task: [Clear task description]

Meta-Analysis Phase:
1. Problem Classification: What kind of challenge is this?
2. Required Expertise: Which knowledge domains matter most?
3. Potential Challenges: Which pitfalls or biases should be avoided?
4. Success Criteria: What does an excellent response look like?
5. Optimal Methodology: Which approach fits best given the above?

Implementation Phase:
Answer the primary task using the methodology and criteria identified above.
"""
    return _instruction("META-PROMPTING", original_text, structure, [
        f'Start with "{opener}" followed by the meta-cognitive expert role',
        "Complete the meta-analysis before the main task",
        "Let the meta-analysis drive the final approach",
    ])


@register_template("recursive-prompting")
def recursive_prompting(original_text: str, opener: str) -> str:
    structure = f"""
{opener} iterative problem solver who improves a solution through successive refinement.

Initial Challenge: [Clear task description]

Iteration 1 - First Attempt:
Address the core requirements with your best current understanding.

Iteration 2 - Critical Review:
Which parts are strong? What is missing or could be more effective?

Iteration 3 - Enhanced Version:
Rewrite the answer to fix the shortcomings found in the review.

Iteration 4 - Final Optimization:
Polish the answer into its most complete form.
"""
    return _instruction("RECURSIVE PROMPTING", original_text, structure, [
        f'Start with "{opener}" followed by the iterative problem solver role',
        "Show clear progression through each iteration",
        "Build on previous iterations instead of starting over",
    ])


@register_template("perspective-taking")
def perspective_taking(original_text: str, opener: str) -> str:
    structure = f"""
{opener} multi-perspective analyst who examines an issue from several stakeholder viewpoints.

Central Issue: [Clear issue or task description]

Perspective 1 - [Stakeholder A]:
Priorities, constraints, success metrics and likely objections.

Perspective 2 - [Stakeholder B]:
Distinct interests, resources, risk tolerance and preferred solutions.

Perspective 3 - [External Observer]:
Patterns insiders miss and assumptions nobody questions.

Perspective 4 - [Long-term View]:
Future developments, sustainability and unintended consequences.

Integrated Analysis:
Combine the insights of all perspectives into one balanced response.
"""
    return _instruction("PERSPECTIVE-TAKING", original_text, structure, [
        f'Start with "{opener}" followed by the multi-perspective analyst role',
        "Include four distinct and relevant perspectives",
        "Synthesize all viewpoints into one conclusion",
    ])


@register_template("socratic-method")
def socratic_method(original_text: str, opener: str) -> str:
    structure = f"""
{opener} Socratic facilitator who guides discovery through systematic questioning.

Topic for Exploration: [Clear topic or question]

Question 1 - Foundation: What do we already know or assume?
Question 2 - Assumptions: Which assumptions deserve closer examination?
Question 3 - Evidence: What supports our view, and how reliable is it?
Question 4 - Alternative Viewpoints: What valid counterarguments exist?
Question 5 - Implications: What follows if our understanding is correct?
Question 6 - Connections: How does this relate to broader principles?
Question 7 - Open Questions: What remains unanswered?

Synthesis Through Inquiry:
Answer comprehensively, drawing on what the questions revealed.
"""
    return _instruction("SOCRATIC METHOD", original_text, structure, [
        f'Start with "{opener}" followed by the Socratic facilitator role',
        "Work through each question in order",
        "Make the final response reflect the insights of the inquiry",
    ])


@register_template("json-prompting")
def json_prompting(original_text: str, opener: str) -> str:
    structure = f"""
{opener} expert JSON architect and creative director for structured content generation.

Primary Objective: [Clear task description]

JSON Structure Requirements:
Core Information: title, description, style
Technical Specifications: camera, lighting, environment
Creative Elements: elements (array), motion, effects, sound_effects
Project Metadata: mood, color_palette, style_reference, keywords (array), text

Execution Guidelines:
1. Produce valid, properly nested JSON
2. Use descriptive, actionable language in every field
3. Use arrays wherever several items are listed

Output Format: A single complete JSON object ready for direct use.
"""
    return _instruction("JSON PROMPTING", original_text, structure, [
        f'Start with "{opener}" followed by the JSON architect role',
        "Ask for a complete, valid JSON structure",
        "Cover both creative and technical specifications",
    ])


def generic_instruction(original_text: str, opener: str) -> str:
    """Template for unknown or missing techniques"""
    structure = f"""
{opener} [role]. Your task is to [goal].
Context: [background or use case].
Constraints: [word limit, tone, audience, etc.].
Output format: [bullet list, blog, email, code, etc.].
"""
    return _instruction("ROLE + CONTEXT + CONSTRAINTS + OUTPUT FORMAT", original_text, structure, [
        f'Start with "{opener}" followed by a specific expert role',
        "Make the instructions clear and actionable",
        "Add relevant context and background information",
        "Include constraints such as tone, length, audience and format",
        "Specify the exact output format",
        "Make the prompt more specific and structured than the original",
    ])


def _context_blocks(target_model: Optional[str], config: Optional[PromptConfig]) -> str:
    blocks = ""
    if target_model:
        blocks += (
            f"\n\nIMPORTANT: Optimize specifically for {target_model}, "
            "considering its unique strengths and prompt preferences."
        )
    if config and config.complexity:
        blocks += f"\n\nComplexity Level: {config.complexity}"
    if config and config.domain:
        blocks += f"\n\nDomain Focus: {config.domain}"
    return blocks


def build_instruction(
    original_text: str,
    technique: Optional[str],
    target_model: Optional[str] = None,
    config: Optional[PromptConfig] = None,
    opener: Optional[str] = None,
) -> str:
    """
    Build the optimization instruction sent to the remote model

    Args:
        original_text: The user's prompt, embedded verbatim
        technique: Technique key; unknown keys and None use the generic template
        target_model: Model the prompt is being optimized for
        config: Generation options; complexity and domain add context blocks
        opener: Role-opener phrase; drawn at random when omitted

    Returns:
        Instruction string
    """
    template = INSTRUCTION_TEMPLATES.get(technique or "", generic_instruction)
    return template(original_text, opener or random_opener()) + _context_blocks(target_model, config)
