"""Required-skill resolution for job postings."""

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 20
MIN_KEYWORD_LENGTH = 4

# "+" and "#" stay attached so that C++ and C# survive
_EDGE_PUNCTUATION = ".,;:!?()[]{}<>\"'`*/\\|"


def dedupe_skills(skills: Iterable[Optional[str]]) -> List[str]:
    """
    Remove blanks and case-insensitive duplicates, keeping first-seen order.

    Args:
        skills: Raw skill names

    Returns:
        Ordered list of unique skill names in their first spelling
    """
    seen = set()
    result = []
    for skill in skills:
        if skill is None:
            continue
        name = " ".join(str(skill).split())
        key = name.lower()
        if not name or key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result


def extract_keywords(text: Optional[str], limit: int = MAX_KEYWORDS) -> List[str]:
    """
    Extract fallback keywords from free-text job description.

    Tokens are split on whitespace, trimmed of surrounding punctuation and
    kept when longer than three characters.

    Args:
        text: Description text
        limit: Maximum number of keywords

    Returns:
        Up to ``limit`` unique keywords in first-seen order
    """
    if not text:
        return []

    tokens = (token.strip(_EDGE_PUNCTUATION) for token in text.split())
    keywords = dedupe_skills(t for t in tokens if len(t) >= MIN_KEYWORD_LENGTH)
    return keywords[:limit]


def resolve_required_skills(
    skill_tags: Iterable[Optional[str]], description: Optional[str] = None
) -> List[str]:
    """
    Resolve the required-skill set for a job.

    Structured skill tags win; when there are none the description is mined
    for keywords instead.

    Args:
        skill_tags: Structured skill tags attached to the job
        description: Free-text job description

    Returns:
        Ordered, de-duplicated required skills (possibly empty, never None)
    """
    skills = dedupe_skills(skill_tags or [])
    if skills:
        return skills

    keywords = extract_keywords(description)
    if keywords:
        logger.info(
            f"No skill tags, extracted {len(keywords)} keywords from description: "
            f"{', '.join(keywords[:5])}"
        )
    return keywords
