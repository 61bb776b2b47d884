"""
Tests for skill matching.
"""

import json

import pytest

from matching.skills import (
    EnhancedSkillMatcher,
    ExactSkillMatcher,
    SkillTaxonomy,
    build_skill_matcher,
)


@pytest.fixture
def taxonomy():
    return SkillTaxonomy(
        version="test",
        synonyms=[["javascript", "js"], ["kubernetes", "k8s"]],
        parents={"spring": "java", "spring boot": "spring", "react": "javascript"},
        hierarchy_credit=0.5,
    )


def test_exact_matcher_is_case_insensitive():
    matcher = ExactSkillMatcher()
    result = matcher.evaluate(["Java", "SQL", "Docker"], ["java", "sql", "Spring"])

    assert result.matched == ["Java", "SQL"]
    assert result.missing == ["Docker"]
    assert result.score == pytest.approx(2 / 3)


def test_exact_matcher_full_match_scores_one():
    matcher = ExactSkillMatcher()
    assert matcher.match_score(["Java", "SQL"], ["Java", "SQL", "Spring"]) == 1.0


def test_empty_required_is_vacuous_match():
    assert ExactSkillMatcher().match_score([], ["Java"]) == 1.0
    assert EnhancedSkillMatcher().match_score([], []) == 1.0


def test_candidate_without_skills_scores_zero(taxonomy):
    matcher = EnhancedSkillMatcher(taxonomy)
    result = matcher.evaluate(["Java"], [])

    assert result.score == 0.0
    assert result.missing == ["Java"]


def test_synonyms_earn_full_credit(taxonomy):
    matcher = EnhancedSkillMatcher(taxonomy)
    result = matcher.evaluate(["JavaScript", "Kubernetes"], ["JS", "k8s"])

    assert result.matched == ["JavaScript", "Kubernetes"]
    assert result.score == 1.0


def test_hierarchy_match_earns_partial_credit(taxonomy):
    matcher = EnhancedSkillMatcher(taxonomy)
    # Spring Boot -> Spring -> Java
    result = matcher.evaluate(["Java", "SQL"], ["Spring Boot"])

    assert result.matched == ["Java"]
    assert result.missing == ["SQL"]
    assert result.score == pytest.approx(0.25)


def test_parent_does_not_imply_child(taxonomy):
    matcher = EnhancedSkillMatcher(taxonomy)
    assert matcher.match_score(["Spring"], ["Java"]) == 0.0


def test_exact_beats_hierarchy_credit(taxonomy):
    matcher = EnhancedSkillMatcher(taxonomy)
    assert matcher.match_score(["Java"], ["Java", "Spring"]) == 1.0


def test_adding_matching_skill_never_lowers_score(taxonomy):
    matcher = EnhancedSkillMatcher(taxonomy)
    required = ["Java", "SQL", "React", "Docker"]
    candidate = ["Spring"]

    previous = matcher.match_score(required, candidate)
    for skill in ["React", "SQL", "Java", "Docker"]:
        candidate = candidate + [skill]
        current = matcher.match_score(required, candidate)
        assert current >= previous
        previous = current

    assert previous == 1.0


def test_matched_and_missing_accessors_agree_with_evaluate(taxonomy):
    matcher = EnhancedSkillMatcher(taxonomy)
    required = ["Java", "Go"]
    candidate = ["spring"]

    assert matcher.matched_skills(required, candidate) == ["Java"]
    assert matcher.missing_skills(required, candidate) == ["Go"]


def test_taxonomy_loads_from_file(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text(
        json.dumps(
            {
                "version": "2024-06",
                "synonyms": [["postgresql", "postgres"]],
                "parents": {"postgresql": "sql"},
                "hierarchy_credit": 0.4,
            }
        ),
        encoding="utf-8",
    )

    matcher = build_skill_matcher("enhanced", SkillTaxonomy.from_file(str(path)))

    assert matcher.taxonomy.version == "2024-06"
    assert matcher.match_score(["SQL"], ["Postgres"]) == pytest.approx(0.4)


def test_build_skill_matcher_reads_environment(monkeypatch):
    monkeypatch.setenv("SKILL_MATCHER", "exact")
    assert isinstance(build_skill_matcher(), ExactSkillMatcher)
    assert not isinstance(build_skill_matcher(), EnhancedSkillMatcher)


def test_build_skill_matcher_rejects_unknown_kind():
    with pytest.raises(ValueError):
        build_skill_matcher("fuzzy")


def test_default_taxonomy_keeps_unrelated_tools_apart():
    matcher = EnhancedSkillMatcher()

    assert matcher.match_score(["Docker"], ["Kubernetes"]) == 0.0
    assert matcher.match_score(["Kubernetes"], ["k8s"]) == 1.0
