"""
Skill matching between a job's required skills and a candidate's skills.

This module provides a plain case-insensitive matcher and an enhanced matcher
that understands synonym groups and parent/child skill families, driven by an
injectable, versioned skill taxonomy.
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class SkillTaxonomy(BaseModel):
    """Synonym groups and skill hierarchy used for enhanced matching."""

    version: str = Field("builtin-1", description="Taxonomy version label")
    synonyms: List[List[str]] = Field(
        default_factory=list,
        description="Groups of names that denote the same skill; first is canonical",
    )
    parents: Dict[str, str] = Field(
        default_factory=dict, description="Child skill -> parent skill"
    )
    hierarchy_credit: float = Field(
        0.5, ge=0.0, le=1.0, description="Credit awarded for hierarchy-only matches"
    )

    @classmethod
    def from_file(cls, path: str) -> "SkillTaxonomy":
        """
        Load a taxonomy from a JSON file.

        Args:
            path: Path to the JSON taxonomy file

        Returns:
            Parsed SkillTaxonomy
        """
        with open(path, "r", encoding="utf-8") as f:
            taxonomy = cls.model_validate_json(f.read())
        logger.info(f"Loaded skill taxonomy {taxonomy.version} from {path}")
        return taxonomy


DEFAULT_TAXONOMY = SkillTaxonomy(
    version="builtin-1",
    synonyms=[
        ["javascript", "js", "ecmascript", "es6"],
        ["typescript", "ts"],
        ["python", "python3", "py"],
        ["golang", "go"],
        ["c#", "csharp", "c sharp"],
        ["c++", "cpp"],
        ["node.js", "nodejs", "node"],
        ["react", "reactjs", "react.js"],
        ["vue", "vuejs", "vue.js"],
        ["angular", "angularjs"],
        ["postgresql", "postgres", "psql"],
        ["sql server", "mssql", "microsoft sql server"],
        ["mongodb", "mongo"],
        ["kubernetes", "k8s"],
        ["aws", "amazon web services"],
        ["gcp", "google cloud", "google cloud platform"],
        ["azure", "microsoft azure"],
        ["machine learning", "ml"],
        ["artificial intelligence", "ai"],
        ["ci/cd", "cicd", "continuous integration"],
        ["spring boot", "springboot"],
        [".net", "dotnet"],
    ],
    parents={
        "spring": "java",
        "spring boot": "spring",
        "hibernate": "java",
        "django": "python",
        "flask": "python",
        "fastapi": "python",
        "pandas": "python",
        "react": "javascript",
        "vue": "javascript",
        "angular": "typescript",
        "node.js": "javascript",
        "express": "node.js",
        "next.js": "react",
        "asp.net": ".net",
        ".net": "c#",
        "laravel": "php",
        "rails": "ruby",
        "postgresql": "sql",
        "mysql": "sql",
        "sql server": "sql",
        "oracle": "sql",
        "pytorch": "machine learning",
        "tensorflow": "machine learning",
        "scikit-learn": "machine learning",
        "machine learning": "artificial intelligence",
    },
)


def normalize_skill(skill: str) -> str:
    """Lower-case and collapse whitespace in a skill name."""
    return " ".join(str(skill).split()).lower()


class SkillMatch(BaseModel):
    """Outcome of matching one required-skill set against one candidate."""

    matched: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    score: float = Field(0.0, ge=0.0, le=1.0)

    model_config = {"frozen": True}


class ExactSkillMatcher:
    """
    Case-insensitive exact matching.

    Score is the plain ratio of matched required skills.
    """

    name = "exact"

    def _credit(self, required: str, candidate: set) -> float:
        return 1.0 if normalize_skill(required) in candidate else 0.0

    def _candidate_set(self, candidate_skills: Iterable[str]) -> set:
        return {normalize_skill(s) for s in candidate_skills if s and str(s).strip()}

    def evaluate(
        self, required: Sequence[str], candidate_skills: Iterable[str]
    ) -> SkillMatch:
        """
        Match required skills against candidate skills in a single pass.

        Args:
            required: Required skill names, in job order
            candidate_skills: Skill names held by the candidate

        Returns:
            SkillMatch with matched/missing names (required spelling) and score
        """
        if not required:
            return SkillMatch(matched=[], missing=[], score=1.0)

        candidate = self._candidate_set(candidate_skills)
        matched, missing = [], []
        total = 0.0
        for skill in required:
            credit = self._credit(skill, candidate)
            if credit > 0:
                matched.append(skill)
                total += credit
            else:
                missing.append(skill)

        return SkillMatch(
            matched=matched, missing=missing, score=min(1.0, total / len(required))
        )

    def matched_skills(
        self, required: Sequence[str], candidate_skills: Iterable[str]
    ) -> List[str]:
        return self.evaluate(required, candidate_skills).matched

    def missing_skills(
        self, required: Sequence[str], candidate_skills: Iterable[str]
    ) -> List[str]:
        return self.evaluate(required, candidate_skills).missing

    def match_score(
        self, required: Sequence[str], candidate_skills: Iterable[str]
    ) -> float:
        return self.evaluate(required, candidate_skills).score


class EnhancedSkillMatcher(ExactSkillMatcher):
    """
    Synonym- and hierarchy-aware matching.

    Exact and synonym matches earn full credit. A required skill that is only
    an ancestor of one of the candidate's skills (for example ``Java`` when the
    candidate lists ``Spring Boot``) earns the taxonomy's hierarchy credit.
    """

    name = "enhanced"

    def __init__(self, taxonomy: Optional[SkillTaxonomy] = None):
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        self._aliases: Dict[str, str] = {}
        for group in self.taxonomy.synonyms:
            names = [normalize_skill(name) for name in group if name]
            if not names:
                continue
            for name in names:
                self._aliases[name] = names[0]
        self._parents = {
            self.canonical(child): self.canonical(parent)
            for child, parent in self.taxonomy.parents.items()
        }

    def canonical(self, skill: str) -> str:
        name = normalize_skill(skill)
        return self._aliases.get(name, name)

    def ancestors(self, skill: str) -> List[str]:
        """Return the parent chain of a canonical skill, nearest first."""
        chain = []
        current = self._parents.get(skill)
        while current is not None and current not in chain and current != skill:
            chain.append(current)
            current = self._parents.get(current)
        return chain

    def _candidate_set(self, candidate_skills: Iterable[str]) -> set:
        return {
            self.canonical(s) for s in candidate_skills if s and str(s).strip()
        }

    def _credit(self, required: str, candidate: set) -> float:
        wanted = self.canonical(required)
        if wanted in candidate:
            return 1.0
        for skill in candidate:
            if wanted in self.ancestors(skill):
                return self.taxonomy.hierarchy_credit
        return 0.0


def build_skill_matcher(
    kind: Optional[str] = None, taxonomy: Optional[SkillTaxonomy] = None
) -> ExactSkillMatcher:
    """
    Build the configured skill matcher.

    Args:
        kind: "enhanced" or "exact"; defaults to SKILL_MATCHER env var
        taxonomy: Taxonomy for the enhanced matcher; defaults to the file named
            by SKILL_TAXONOMY_PATH, else the built-in table

    Returns:
        Skill matcher instance
    """
    kind = (kind or os.getenv("SKILL_MATCHER", "enhanced")).lower()

    if kind == "exact":
        return ExactSkillMatcher()
    if kind != "enhanced":
        raise ValueError(f"Unknown skill matcher: {kind}. Use 'enhanced' or 'exact'")

    if taxonomy is None:
        path = os.getenv("SKILL_TAXONOMY_PATH")
        taxonomy = SkillTaxonomy.from_file(path) if path else DEFAULT_TAXONOMY

    return EnhancedSkillMatcher(taxonomy)
