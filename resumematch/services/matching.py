import math
import re
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel

from resumematch.models.models import JobProfile, StructuredProfile
from resumematch.models.response import (
    ExperienceGap, MatchBreakdown, MatchRecommendation, MatchResult,
)
from resumematch.models.settings import EngineSettings, MatchWeights
from resumematch.services.keywords import (
    extract_job_keywords, extract_keywords, resume_skill_names,
)
from resumematch.utils.exceptions import ConfigurationError
from resumematch.utils.logging_config import get_logger

logger = get_logger(__name__)

WEIGHT_TOLERANCE = 1e-6
FUZZY_MATCH_CREDIT = 0.5

EXPERIENCE_PATTERNS = [
    re.compile(r"(\d+)\+?\s*years?\s*of?\s*experience"),
    re.compile(r"(\d+)\+?\s*years?\s*experience"),
    re.compile(r"minimum\s*(\d+)\s*years?"),
    re.compile(r"at\s*least\s*(\d+)\s*years?"),
]

YEAR_PATTERN = re.compile(r"(\d{4})")


def validate_weights(weights: Union[BaseModel, Dict[str, float]], expected: List[str], name: str) -> Dict[str, float]:
    """
    Check a weight set and return it as a plain dict.

    Raises ConfigurationError for unknown or missing keys, negative or
    non-finite values, or a total that is not 1.0 within WEIGHT_TOLERANCE.
    """
    values = weights.model_dump() if isinstance(weights, BaseModel) else dict(weights)

    unknown = sorted(set(values) - set(expected))
    if unknown:
        raise ConfigurationError(f"Unknown {name} weights: {unknown}", config_key=name, config_value=values)
    missing = [k for k in expected if k not in values]
    if missing:
        raise ConfigurationError(f"Missing {name} weights: {missing}", config_key=name, config_value=values)

    for key, value in values.items():
        if not math.isfinite(value):
            raise ConfigurationError(f"{name} weight '{key}' must be a finite number", config_key=name, config_value=values)
        if value < 0:
            raise ConfigurationError(f"{name} weight '{key}' must not be negative", config_key=name, config_value=values)

    total = sum(values.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ConfigurationError(f"{name} weights must sum to 1.0, got {total}", config_key=name, config_value=values)

    return {k: float(values[k]) for k in expected}


def levenshtein_distance(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def string_similarity(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1]; two empty strings are identical"""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - levenshtein_distance(a, b)) / max_len


def semantic_similarity(a: Optional[List[float]], b: Optional[List[float]]) -> Tuple[int, bool]:
    """
    Cosine of two embeddings remapped to 0..100.

    Returns (score, embedding_missing). A missing or mismatched embedding
    scores 0 and is flagged so the caller can request a new one.
    """
    if not a or not b or len(a) != len(b):
        return 0, True
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    num = float(np.dot(va, vb))
    den = float(np.linalg.norm(va) * np.linalg.norm(vb)) or 1e-8
    return max(0, round((num / den + 1) * 50)), False


def _normalize_skills(skills: List[str]) -> List[str]:
    out = []
    for s in skills:
        s = (s or "").strip().lower()
        if s and s not in out:
            out.append(s)
    return out


def _contains_either(a: str, b: str) -> bool:
    return a in b or b in a


def _year_of(date_str: Optional[str]) -> Optional[int]:
    if not date_str:
        return None
    match = YEAR_PATTERN.search(date_str)
    return int(match.group(1)) if match else None


class MatchingEngine:
    """Weighted four-signal résumé/job scorer. Stateless once built."""

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        weights: Union[MatchWeights, Dict[str, float], None] = None,
        current_year: Optional[int] = None,
    ):
        self.settings = settings or EngineSettings()
        self.weights = validate_weights(
            weights if weights is not None else self.settings.match_weights,
            list(MatchWeights.model_fields),
            "match",
        )
        self.fuzzy_threshold = self.settings.fuzzy_threshold
        self.experience_levels = dict(self.settings.experience_levels)
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year or datetime.now().year

    def calculate_skills_match(self, resume_skills: List[str], job_skills: List[str]) -> int:
        resume_set = _normalize_skills(resume_skills)
        job_set = _normalize_skills(job_skills)
        if not resume_set or not job_set:
            return 0

        exact = [s for s in job_set if s in resume_set]
        fuzzy = 0
        for job_skill in job_set:
            if job_skill in exact:
                continue
            for resume_skill in resume_set:
                if string_similarity(job_skill, resume_skill) > self.fuzzy_threshold:
                    fuzzy += 1
                    break

        total = len(exact) + FUZZY_MATCH_CREDIT * fuzzy
        return min(100, round(total / len(job_set) * 100))

    def calculate_resume_experience(self, resume: StructuredProfile) -> int:
        total = 0
        for exp in resume.experience:
            start = _year_of(exp.start_date)
            if start is None:
                continue
            # a closed position without a parsable end year is not counted
            end = self.current_year if exp.current else _year_of(exp.end_date)
            if end is None:
                continue
            total += max(0, end - start)
        return total

    def extract_required_experience(self, job: JobProfile) -> int:
        text = " ".join([job.description or ""] + list(job.requirements)).lower()
        for pattern in EXPERIENCE_PATTERNS:
            match = pattern.search(text)
            if match:
                return int(match.group(1))

        if job.experience_level is None:
            return 0
        return self.experience_levels.get(job.experience_level.value, 0)

    @staticmethod
    def experience_score(resume_years: int, required_years: int) -> int:
        if required_years == 0:
            return 100
        if resume_years == 0:
            return 80 if required_years <= 1 else 20

        ratio = resume_years / required_years
        if ratio >= 1.0:
            return 100
        if ratio >= 0.8:
            return 90
        if ratio >= 0.6:
            return 75
        if ratio >= 0.4:
            return 50
        return 25

    @staticmethod
    def calculate_keyword_match(resume_keywords: List[str], job_keywords: List[str]) -> int:
        if not resume_keywords or not job_keywords:
            return 0
        # counts résumé keywords, so several résumé words may hit one job word
        matches = sum(
            1 for rk in resume_keywords
            if any(_contains_either(rk, jk) for jk in job_keywords)
        )
        return min(100, round(matches / len(job_keywords) * 100))

    @staticmethod
    def partition_skills(resume_skills: List[str], job_skills: List[str]) -> Tuple[List[str], List[str]]:
        resume_set = _normalize_skills(resume_skills)
        matched, missing = [], []
        for skill in job_skills:
            normalized = (skill or "").strip().lower()
            if not normalized:
                continue
            if any(_contains_either(normalized, r) for r in resume_set):
                matched.append(skill)
            else:
                missing.append(skill)
        return matched, missing

    @staticmethod
    def recommendations(breakdown: MatchBreakdown) -> List[MatchRecommendation]:
        recs = []
        if breakdown.skills < 70:
            recs.append(MatchRecommendation(
                type="skills",
                priority="high",
                message="Consider developing the missing skills for this role",
                action="skill_development",
            ))
        if breakdown.experience < 60:
            recs.append(MatchRecommendation(
                type="experience",
                priority="medium",
                message="Highlight relevant experience and transferable skills",
                action="experience_emphasis",
            ))
        if breakdown.keywords < 50:
            recs.append(MatchRecommendation(
                type="keywords",
                priority="medium",
                message="Update resume with relevant industry keywords",
                action="keyword_optimization",
            ))
        return recs

    def score(self, resume: StructuredProfile, job: JobProfile) -> MatchResult:
        """Score one résumé against one job. Inputs are not modified."""
        resume_skills = resume_skill_names(resume)

        semantic, embedding_missing = semantic_similarity(resume.embedding, job.embedding)
        resume_years = self.calculate_resume_experience(resume)
        required_years = self.extract_required_experience(job)

        breakdown = MatchBreakdown(
            semantic=semantic,
            skills=self.calculate_skills_match(resume_skills, job.skills),
            experience=self.experience_score(resume_years, required_years),
            keywords=self.calculate_keyword_match(extract_keywords(resume), extract_job_keywords(job)),
        )
        overall = round(sum(self.weights[k] * getattr(breakdown, k) for k in self.weights))
        matched, missing = self.partition_skills(resume_skills, job.skills)

        if embedding_missing:
            logger.debug(f"Embedding missing for resume={resume.id} job={job.id}, semantic score is 0")

        return MatchResult(
            resume_id=resume.id,
            job_id=job.id,
            overall_score=max(0, min(100, overall)),
            breakdown=breakdown,
            weights=dict(self.weights),
            matched_skills=matched,
            missing_skills=missing,
            experience_gap=ExperienceGap(
                resume_experience=resume_years,
                required_experience=required_years,
                gap=max(0, required_years - resume_years),
                meets_requirement=resume_years >= required_years,
            ),
            recommendations=self.recommendations(breakdown),
            embedding_missing=embedding_missing,
        )
