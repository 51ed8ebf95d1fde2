from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Union

from resumematch.models.models import JobProfile, StructuredProfile
from resumematch.models.response import (
    CandidateExperience, CandidateSkills, CandidateSummary, JobSummary, MatchResult, MatchSummary,
    RankedResult, ScoreDistribution,
)
from resumematch.models.settings import RankingSettings
from resumematch.services.keywords import extract_skills
from resumematch.services.matching import MatchingEngine
from resumematch.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)

Profile = Union[StructuredProfile, JobProfile]


def summarize(matches: List[MatchResult]) -> MatchSummary:
    """Average, top score and bucket counts over the given matches"""
    if not matches:
        return MatchSummary()
    scores = [m.overall_score for m in matches]
    return MatchSummary(
        average_score=round(sum(scores) / len(scores)),
        top_score=max(scores),
        distribution=ScoreDistribution(
            excellent=sum(1 for s in scores if s >= 80),
            good=sum(1 for s in scores if 60 <= s < 80),
            fair=sum(1 for s in scores if 40 <= s < 60),
        ),
    )


def job_summary(job: JobProfile) -> JobSummary:
    return JobSummary(
        id=job.id,
        title=job.title,
        company=job.company,
        location=job.location,
        employment_type=job.employment_type,
        salary=job.salary,
    )


def candidate_summary(resume: StructuredProfile) -> CandidateSummary:
    """Contact details, skills (top 10 extracted) and a position/company/duration list"""
    experience = [
        CandidateExperience(
            position=exp.position,
            company=exp.company,
            duration=f"{exp.start_date or ''} - {exp.end_date or ('Present' if exp.current else '')}",
            current=exp.current,
        )
        for exp in resume.experience
    ]
    return CandidateSummary(
        id=resume.id,
        profile=resume.personal_info,
        skills=CandidateSkills(
            technical=resume.skills.technical,
            soft=resume.skills.soft,
            extracted=[s.skill for s in extract_skills(resume)[:10]],
        ),
        experience=experience,
    )


class RankingService:
    """Scores one source profile against many targets and ranks the results"""

    def __init__(self, engine: MatchingEngine, settings: Optional[RankingSettings] = None):
        self.engine = engine
        self.settings = settings or engine.settings.ranking

    def _score_pair(self, source: Profile, target: Profile) -> MatchResult:
        if isinstance(source, JobProfile):
            result = self.engine.score(target, source)
            return result.model_copy(update={"candidate": candidate_summary(target)})
        result = self.engine.score(source, target)
        return result.model_copy(update={"job": job_summary(target)})

    def _score_one(self, index: int, source: Profile, target: Profile) -> Optional[MatchResult]:
        try:
            return self._score_pair(source, target)
        except Exception as e:
            logger.warning(f"Skipping target #{index} (id={getattr(target, 'id', None)}): {e}")
            return None

    def _sort_key(self, source: Profile):
        by_id = self.settings.tie_break_by_id
        targets_are_resumes = isinstance(source, JobProfile)

        def key(item):
            index, result = item
            if by_id:
                target_id = (result.resume_id if targets_are_resumes else result.job_id) or ""
                return (-result.overall_score, target_id, index)
            return (-result.overall_score, index)

        return key

    def find_matches(
        self,
        source: Profile,
        targets: Sequence[Profile],
        min_score: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> RankedResult:
        """
        Rank ``targets`` against ``source``.

        A résumé source is scored against job targets and a job source
        against résumé targets. A target whose scoring raises is logged,
        counted in ``failed`` and left out. Results below ``min_score`` are
        dropped, the rest sorted by descending score (input order breaks
        ties) and cut to ``limit``.
        """
        min_score = self.settings.min_score if min_score is None else min_score
        limit = self.settings.limit if limit is None else limit
        targets = list(targets)

        with PerformanceMonitor(f"Ranking {len(targets)} targets", logger=logger):
            if targets:
                workers = min(self.settings.max_concurrency, len(targets))
                with ThreadPoolExecutor(max_workers=workers) as pool:
                    futures = [
                        pool.submit(self._score_one, i, source, target)
                        for i, target in enumerate(targets)
                    ]
                    results = [f.result() for f in futures]
            else:
                results = []

        failed = sum(1 for r in results if r is None)
        scored = [(i, r) for i, r in enumerate(results) if r is not None]
        above = [(i, r) for i, r in scored if r.overall_score >= min_score]
        above.sort(key=self._sort_key(source))
        matches = [r for _, r in above[:max(0, limit)]]

        if failed:
            logger.warning(f"{failed} of {len(targets)} targets failed to score")

        return RankedResult(
            matches=matches,
            total_considered=len(targets),
            above_threshold=len(above),
            threshold=min_score,
            failed=failed,
            summary=summarize(matches),
        )
