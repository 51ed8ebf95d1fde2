# routers/analysis.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from resumematch.models.models import StructuredProfile
from resumematch.models.response import ATSResult, Suggestion
from resumematch.models.schemas import ATSRequest, ParseRequest, SuggestionsRequest
from resumematch.services.pipeline import ResumeMatchPipeline, get_pipeline
from resumematch.utils.exceptions import ValidationError

router = APIRouter(tags=["analysis"])
logger = logging.getLogger(__name__)


@router.post("/parse", response_model=StructuredProfile)
def parse_resume(req: ParseRequest, pipeline: ResumeMatchPipeline = Depends(get_pipeline)):
    """Extract a structured profile from raw résumé text"""
    if not req.raw_text.strip():
        raise ValidationError("raw_text must not be empty", field="raw_text")
    profile = pipeline.parse(req.raw_text)
    if req.resume_id:
        profile = profile.model_copy(update={"id": req.resume_id})
    return profile


@router.post("/ats", response_model=ATSResult)
def analyze_ats(req: ATSRequest, pipeline: ResumeMatchPipeline = Depends(get_pipeline)):
    """Grade a résumé for ATS compatibility"""
    return pipeline.analyze_ats(req.profile, req.file_metadata)


@router.post("/suggestions", response_model=List[Suggestion])
def suggestions(req: SuggestionsRequest, pipeline: ResumeMatchPipeline = Depends(get_pipeline)):
    """Prioritized improvement suggestions for a résumé"""
    result = pipeline.generate_suggestions(req.profile, req.file_metadata)
    logger.debug(f"{len(result)} suggestions for resume {req.profile.id}")
    return result
