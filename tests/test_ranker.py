"""
Tests for score fusion and ranking.
"""

import pytest

from api.models import RetrievalHit
from matching.ranker import (
    Ranker,
    ScoringWeights,
    SkillOverlapStrategy,
    WeightedFusionStrategy,
    build_strategy,
    experience_factor,
)
from matching.skills import ExactSkillMatcher


def hit(candidate_id, skills, similarity=0.8, experience=0):
    return RetrievalHit(
        candidate_id=candidate_id,
        name=f"Candidate {candidate_id}",
        email=f"{candidate_id}@example.com",
        skills=skills,
        total_experience=experience,
        summary="",
        similarity=similarity,
    )


@pytest.fixture
def ranker():
    return Ranker(
        matcher=ExactSkillMatcher(),
        strategy=WeightedFusionStrategy(ScoringWeights()),
    )


def test_experience_factor_without_requirement():
    assert experience_factor(0, 0) == 1.0
    assert experience_factor(15, 0) == 1.0


def test_experience_factor_below_requirement():
    assert experience_factor(2, 5) == pytest.approx(0.88)
    assert experience_factor(0, 5) == pytest.approx(0.8)


def test_experience_factor_above_requirement_is_capped():
    assert experience_factor(5, 5) == pytest.approx(1.0)
    assert experience_factor(8, 5) == pytest.approx(1.06)
    assert experience_factor(40, 5) == pytest.approx(1.2)


def test_fused_score_for_full_skill_match(ranker):
    results = ranker.rank(
        [hit("c1", ["Java", "SQL", "Spring"], similarity=0.8)],
        ["Java", "SQL"],
        min_experience=0,
        limit=10,
        threshold=0.0,
    )

    assert len(results) == 1
    assert results[0].scores.skill == 1.0
    assert results[0].scores.experience_factor == 1.0
    assert results[0].match_score == pytest.approx(0.82)


def test_experience_factor_multiplies_base_score(ranker):
    results = ranker.rank(
        [hit("c1", ["Java", "SQL"], similarity=0.8, experience=2)],
        ["Java", "SQL"],
        min_experience=5,
        limit=10,
        threshold=0.0,
    )

    assert results[0].match_score == pytest.approx(0.82 * 0.88)


def test_combined_score_is_capped_at_one():
    strategy = WeightedFusionStrategy(ScoringWeights(skill_weight=0.7, semantic_weight=0.6))
    ranker = Ranker(matcher=ExactSkillMatcher(), strategy=strategy)

    results = ranker.rank(
        [hit("c1", ["Java"], similarity=1.0, experience=30)],
        ["Java"],
        min_experience=1,
        limit=10,
        threshold=0.0,
    )

    assert results[0].match_score == 1.0


def test_scores_stay_within_bounds(ranker):
    hits = [
        hit(f"c{i}", ["Java"] * (i % 2), similarity=i / 10, experience=i)
        for i in range(11)
    ]

    for min_experience in (0, 3, 12):
        for result in ranker.rank(hits, ["Java", "Go"], min_experience, 20, 0.0):
            assert 0.0 <= result.match_score <= 1.0


def test_threshold_is_inclusive():
    ranker = Ranker(matcher=ExactSkillMatcher(), strategy=SkillOverlapStrategy())
    hits = [hit("half", ["Java"]), hit("none", ["Rust"])]

    results = ranker.rank(hits, ["Java", "SQL"], 0, 10, threshold=0.5)

    assert [r.candidate_id for r in results] == ["half"]
    assert results[0].match_score == 0.5


def test_ties_are_broken_by_experience(ranker):
    hits = [
        hit("junior", ["Java"], similarity=0.625, experience=3),
        hit("senior", ["Java"], similarity=0.625, experience=7),
    ]

    results = ranker.rank(hits, ["Java"], 0, 10, 0.0)

    assert results[0].match_score == pytest.approx(0.75)
    assert results[0].match_score == results[1].match_score
    assert [r.candidate_id for r in results] == ["senior", "junior"]


def test_exact_ties_keep_retrieval_order(ranker):
    hits = [hit(f"c{i}", ["Java"], similarity=0.7, experience=4) for i in range(5)]

    first = ranker.rank(hits, ["Java"], 0, 10, 0.0)
    second = ranker.rank(hits, ["Java"], 0, 10, 0.0)

    assert [r.candidate_id for r in first] == ["c0", "c1", "c2", "c3", "c4"]
    assert first == second


def test_results_are_truncated_to_limit(ranker):
    hits = [hit(f"c{i}", ["Java"], similarity=i / 10) for i in range(10)]

    results = ranker.rank(hits, ["Java"], 0, limit=3, threshold=0.0)

    assert [r.candidate_id for r in results] == ["c9", "c8", "c7"]


def test_explanation_matches_skill_score(ranker):
    results = ranker.rank(
        [hit("c1", ["java", "docker"])], ["Java", "SQL"], 0, 10, 0.0
    )

    assert results[0].matched_skills == ["Java"]
    assert results[0].missing_skills == ["SQL"]
    assert results[0].scores.skill == 0.5


def test_skill_overlap_ignores_similarity_and_experience():
    ranker = Ranker(matcher=ExactSkillMatcher(), strategy=SkillOverlapStrategy())

    results = ranker.rank(
        [hit("c1", ["Java"], similarity=0.1, experience=0)],
        ["Java"],
        min_experience=10,
        limit=10,
        threshold=0.0,
    )

    assert results[0].match_score == 1.0


def test_failing_hit_is_skipped():
    class BrokenMatcher(ExactSkillMatcher):
        def evaluate(self, required, candidate_skills):
            if "boom" in candidate_skills:
                raise ValueError("bad skills")
            return super().evaluate(required, candidate_skills)

    ranker = Ranker(matcher=BrokenMatcher(), strategy=SkillOverlapStrategy())
    results = ranker.rank(
        [hit("bad", ["boom"]), hit("good", ["Java"])], ["Java"], 0, 10, 0.0
    )

    assert [r.candidate_id for r in results] == ["good"]


def test_build_strategy_from_environment(monkeypatch):
    monkeypatch.setenv("SCORING_STRATEGY", "skill_overlap")
    assert build_strategy().name == "skill_overlap"

    monkeypatch.setenv("SCORING_STRATEGY", "weighted_fusion")
    monkeypatch.setenv("SKILL_WEIGHT", "0.6")
    monkeypatch.setenv("SEMANTIC_WEIGHT", "0.3")
    strategy = build_strategy()
    assert strategy.weights.skill_weight == 0.6
    assert strategy.weights.semantic_weight == 0.3


def test_build_strategy_rejects_unknown_name():
    with pytest.raises(ValueError):
        build_strategy("random")


def test_threshold_is_inclusive_for_fused_scores(ranker):
    # 0.25 * 0.5 + 0.7 * 0.4 == 0.405 exactly, but not in float arithmetic
    results = ranker.rank(
        [hit("c1", ["Java"], similarity=0.7)],
        ["Java", "SQL", "Go", "Rust"],
        min_experience=0,
        limit=10,
        threshold=0.405,
    )

    assert [r.candidate_id for r in results] == ["c1"]
    assert results[0].match_score == 0.405


def test_skill_overlap_reports_neutral_experience_factor():
    ranker = Ranker(matcher=ExactSkillMatcher(), strategy=SkillOverlapStrategy())

    results = ranker.rank(
        [hit("c1", ["Java"], experience=0)], ["Java"], 5, limit=10, threshold=0.0
    )

    assert results[0].scores.experience_factor == 1.0
    assert results[0].scores.combined == results[0].match_score
