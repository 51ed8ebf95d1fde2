# routers/matching.py
import logging

from fastapi import APIRouter, Depends

from resumematch.models.response import MatchResult, RankedResult
from resumematch.models.schemas import CandidateMatchRequest, JobMatchRequest, ScoreRequest
from resumematch.services.pipeline import ResumeMatchPipeline, get_pipeline

router = APIRouter(prefix="/match", tags=["matching"])
logger = logging.getLogger(__name__)


@router.post("/score", response_model=MatchResult)
async def score_match(req: ScoreRequest, pipeline: ResumeMatchPipeline = Depends(get_pipeline)):
    """Score one résumé against one job"""
    if req.generate_embeddings:
        return await pipeline.score_with_embeddings(req.resume, req.job)
    return pipeline.score(req.resume, req.job)


@router.post("/jobs", response_model=RankedResult)
def match_jobs(req: JobMatchRequest, pipeline: ResumeMatchPipeline = Depends(get_pipeline)):
    """Rank jobs for a candidate"""
    logger.info(f"Ranking {len(req.jobs)} jobs for resume {req.resume.id}")
    return pipeline.rank_matches(req.resume, req.jobs, min_score=req.min_score, limit=req.limit)


@router.post("/candidates", response_model=RankedResult)
def match_candidates(req: CandidateMatchRequest, pipeline: ResumeMatchPipeline = Depends(get_pipeline)):
    """Rank candidates for a job"""
    logger.info(f"Ranking {len(req.resumes)} candidates for job {req.job.id}")
    return pipeline.rank_matches(req.job, req.resumes, min_score=req.min_score, limit=req.limit)
