from pydantic import BaseModel, Field
from typing import List, Optional

from resumematch.models.models import FileMetadata, JobProfile, StructuredProfile

# -------- Parsing --------
class ParseRequest(BaseModel):
    raw_text: str = Field(..., description="Text already extracted from the résumé document")
    resume_id: Optional[str] = None

# -------- Matching --------
class ScoreRequest(BaseModel):
    resume: StructuredProfile
    job: JobProfile
    generate_embeddings: bool = Field(
        default=False,
        description="Ask the embedding provider for missing embeddings before scoring"
    )

class JobMatchRequest(BaseModel):
    resume: StructuredProfile
    jobs: List[JobProfile] = []
    min_score: Optional[int] = Field(default=None, ge=0, le=100)
    limit: Optional[int] = Field(default=None, ge=1)

class CandidateMatchRequest(BaseModel):
    job: JobProfile
    resumes: List[StructuredProfile] = []
    min_score: Optional[int] = Field(default=None, ge=0, le=100)
    limit: Optional[int] = Field(default=None, ge=1)

# -------- Analysis --------
class ATSRequest(BaseModel):
    profile: StructuredProfile
    file_metadata: Optional[FileMetadata] = None

class SuggestionsRequest(BaseModel):
    profile: StructuredProfile
    file_metadata: Optional[FileMetadata] = None
