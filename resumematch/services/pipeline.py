"""
Entry points of the matching core.

One ``ResumeMatchPipeline`` is built per process (see ``main.py``) and shared
by the routers. Every component it holds is stateless after construction.
"""
from functools import lru_cache, partial
from typing import List, Optional, Sequence, Union

from resumematch.helpers.parsing import extract_structured_content
from resumematch.models.models import FileMetadata, JobProfile, StructuredProfile
from resumematch.models.response import ATSResult, MatchResult, RankedResult, Suggestion
from resumematch.models.settings import EngineSettings
from resumematch.services.ats import ATSAnalyzer
from resumematch.services.embeddings import EmbedFn, ensure_embeddings
from resumematch.services.matching import MatchingEngine
from resumematch.services.ranking import RankingService
from resumematch.services.suggestions import SuggestionGenerator
from resumematch.utils.exceptions import ExceptionContext
from resumematch.utils.logging_config import get_logger, log_function_call
from resumematch.utils.utils import ollama_embed

logger = get_logger(__name__)


class ResumeMatchPipeline:
    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings.from_env()
        self.engine = MatchingEngine(self.settings)
        self.ranking = RankingService(self.engine)
        self.ats = ATSAnalyzer(self.settings)
        self.suggestions = SuggestionGenerator(self.settings)
        logger.info(
            f"Pipeline ready (vocabulary v{self.settings.vocabulary.version}, "
            f"weights={self.engine.weights})"
        )

    @log_function_call
    def parse(self, raw_text: str) -> StructuredProfile:
        return extract_structured_content(raw_text, self.settings.vocabulary)

    @log_function_call
    def score(self, resume: StructuredProfile, job: JobProfile) -> MatchResult:
        with ExceptionContext("score", logger, resume_id=resume.id, job_id=job.id):
            return self.engine.score(resume, job)

    async def score_with_embeddings(
        self,
        resume: StructuredProfile,
        job: JobProfile,
        embed_fn: Optional[EmbedFn] = None,
    ) -> MatchResult:
        """Request missing embeddings from the provider, then score"""
        if embed_fn is None:
            embed_fn = partial(ollama_embed, settings=self.settings.embedding)

        resume, job = await ensure_embeddings(resume, job, embed_fn)
        return self.score(resume, job)

    @log_function_call
    def rank_matches(
        self,
        source: Union[StructuredProfile, JobProfile],
        targets: Sequence[Union[StructuredProfile, JobProfile]],
        min_score: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> RankedResult:
        with ExceptionContext("rank_matches", logger, source_id=source.id):
            return self.ranking.find_matches(source, targets, min_score=min_score, limit=limit)

    def analyze_ats(self, profile: StructuredProfile, file_metadata: Optional[FileMetadata] = None) -> ATSResult:
        with ExceptionContext("analyze_ats", logger, resume_id=profile.id):
            return self.ats.analyze(profile, file_metadata)

    def generate_suggestions(
        self, profile: StructuredProfile, file_metadata: Optional[FileMetadata] = None
    ) -> List[Suggestion]:
        with ExceptionContext("generate_suggestions", logger, resume_id=profile.id):
            return self.suggestions.generate(profile, file_metadata)


@lru_cache(maxsize=None)
def get_pipeline() -> ResumeMatchPipeline:
    """Process-wide pipeline, built on first use; routers receive it through Depends"""
    return ResumeMatchPipeline()
