"""
Regex patterns and token heuristics for utterance parsing.

Contains the particle suffix pattern used to widen keyword matching,
the model-code heuristic used to route price lookups, and the
step-key delimiter used by price drill-down payloads.
"""

import re
from typing import List

# === Particle Patterns ===

# Trailing case markers, topic markers and polite sentence endings.
# re.search on an anchored alternation takes the leftmost start, so the
# longest matching suffix is removed first.
PARTICLE_SUFFIXES = [
    # Sentence endings
    '인가요', '있나요', '되나요', '하나요', '알려주세요', '알려줘', '주세요',
    '인데요', '는데요', '나요', '까요', '해요', '돼요', '에요', '예요', '이요',
    '은요', '는요', '뭐야', '이야', '요',
    # Case / topic markers
    '에서는', '에서', '으로는', '으로', '에게', '한테', '이랑', '이란', '라는',
    '부터', '까지', '처럼', '보다', '은', '는', '이', '가', '을', '를',
    '에', '로', '의', '도', '만', '와', '과', '랑', '란',
]
PARTICLE_PATTERN = re.compile('(?:' + '|'.join(PARTICLE_SUFFIXES) + ')$')

MAX_PARTICLE_PASSES = 3


# === Model Code Patterns ===

MODEL_ALNUM_PATTERN = re.compile(r'[^A-Z0-9]')
MODEL_MIN_LENGTH = 3


# === Step Key ===

# Separates model / care type / care detail / visit cycle in drill-down payloads
STEP_DELIMITER = '::'


def strip_particles(text: str) -> List[str]:
    """
    Split text on whitespace and strip trailing particles from each token.

    Each token is stripped at most MAX_PARTICLE_PASSES times; tokens that
    end up empty are dropped.

    Args:
        text: Query text (already normalized)

    Returns:
        List of content tokens

    Example:
        >>> strip_particles("해약금은 얼마인가요")
        ["해약금", "얼마"]
    """
    tokens = []
    for token in text.split():
        for _ in range(MAX_PARTICLE_PASSES):
            stripped = PARTICLE_PATTERN.sub('', token, count=1)
            if stripped == token:
                break
            token = stripped
        if token:
            tokens.append(token)
    return tokens


def looks_like_model_name(text: str) -> bool:
    """
    Check whether text looks like a product model code.

    A model code has at least three alphanumeric characters including
    at least one letter and one digit (e.g. "A720WA", "OLED55B4KW").
    """
    cleaned = text.strip().upper()
    alphanumeric = MODEL_ALNUM_PATTERN.sub('', cleaned)
    return (
        len(alphanumeric) >= MODEL_MIN_LENGTH
        and re.search(r'[A-Z]', cleaned) is not None
        and re.search(r'[0-9]', cleaned) is not None
    )


def has_step_delimiter(text: str) -> bool:
    """Check whether text is an encoded drill-down step key."""
    return STEP_DELIMITER in text
