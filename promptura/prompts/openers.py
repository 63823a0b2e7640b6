"""Role-opener phrases used to start optimized prompts"""

import random
from typing import List, Optional

PROMPT_OPENERS: List[str] = [
    "Act as a",
    "Imagine you're the world's best",
    "Think of yourself as a",
    "You are now",
    "Pretend you're leading",
    "Give me the perspective of a",
    "You're advising a",
    "Step into the mindset of",
    "As a master of",
    "Channel the voice of",
    "Embody the expertise of a",
    "Transform into a",
    "Assume the role of a",
    "Position yourself as the",
    "Take on the persona of a",
]


def random_opener(rng: Optional[random.Random] = None) -> str:
    """Pick an opener uniformly at random"""
    return (rng or random).choice(PROMPT_OPENERS)
