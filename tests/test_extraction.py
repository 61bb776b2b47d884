"""
Tests for required-skill resolution.
"""

from matching.extraction import dedupe_skills, extract_keywords, resolve_required_skills


def test_skill_tags_are_deduplicated_in_order():
    skills = resolve_required_skills(["Java", " SQL ", "java", "", None, "Docker"])
    assert skills == ["Java", "SQL", "Docker"]


def test_tags_take_precedence_over_description():
    assert resolve_required_skills(["Go"], "Experienced Python developer") == ["Go"]


def test_description_fallback_keeps_long_tokens():
    skills = resolve_required_skills([], "We need a Python, SQL and Docker expert!")
    assert skills == ["need", "Python", "Docker", "expert"]


def test_description_fallback_is_capped_at_twenty():
    text = " ".join(f"keyword{i}" for i in range(40))
    keywords = extract_keywords(text)

    assert len(keywords) == 20
    assert keywords[0] == "keyword0"
    assert keywords[-1] == "keyword19"


def test_symbols_survive_punctuation_trimming():
    assert extract_keywords("Modern (C++14) and C#/.NET stacks") == [
        "Modern",
        "C++14",
        "C#/.NET",
        "stacks",
    ]


def test_nothing_to_extract_yields_empty_list():
    assert resolve_required_skills([], None) == []
    assert resolve_required_skills(None, "a an the") == []


def test_dedupe_collapses_whitespace():
    assert dedupe_skills(["Machine   Learning", "machine learning"]) == [
        "Machine Learning"
    ]
