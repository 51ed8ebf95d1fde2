# models/response.py
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from resumematch.models.models import PersonalInfo, SalaryRange


class MatchBreakdown(BaseModel):
    semantic: int = 0
    skills: int = 0
    experience: int = 0
    keywords: int = 0


class ExperienceGap(BaseModel):
    resume_experience: int
    required_experience: int
    gap: int
    meets_requirement: bool


class MatchRecommendation(BaseModel):
    type: str
    priority: str
    message: str
    action: str


class JobSummary(BaseModel):
    """Display data for a ranked job"""
    id: Optional[str] = None
    title: str = ""
    company: str = ""
    location: str = ""
    employment_type: str = ""
    salary: Optional[SalaryRange] = None


class CandidateSkills(BaseModel):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    extracted: List[str] = Field(default_factory=list)


class CandidateExperience(BaseModel):
    position: str = ""
    company: str = ""
    duration: str = ""
    current: bool = False


class CandidateSummary(BaseModel):
    """Display data for a ranked résumé"""
    id: Optional[str] = None
    profile: PersonalInfo = Field(default_factory=PersonalInfo)
    skills: CandidateSkills = Field(default_factory=CandidateSkills)
    experience: List[CandidateExperience] = Field(default_factory=list)


class MatchResult(BaseModel):
    resume_id: Optional[str] = None
    job_id: Optional[str] = None
    overall_score: int = Field(ge=0, le=100)
    breakdown: MatchBreakdown
    weights: Dict[str, float]
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    experience_gap: ExperienceGap
    recommendations: List[MatchRecommendation] = Field(default_factory=list)
    embedding_missing: bool = False
    # filled in by ranking only
    job: Optional[JobSummary] = None
    candidate: Optional[CandidateSummary] = None


class ScoreDistribution(BaseModel):
    excellent: int = 0
    good: int = 0
    fair: int = 0


class MatchSummary(BaseModel):
    average_score: int = 0
    top_score: int = 0
    distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)


class RankedResult(BaseModel):
    matches: List[MatchResult] = Field(default_factory=list)
    total_considered: int = 0
    above_threshold: int = 0
    threshold: int = 0
    failed: int = 0
    summary: MatchSummary = Field(default_factory=MatchSummary)


class ATSFactor(BaseModel):
    score: int = 0
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    found: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)


class ATSFactors(BaseModel):
    formatting: ATSFactor
    keywords: ATSFactor
    structure: ATSFactor
    readability: ATSFactor


class ATSResult(BaseModel):
    score: int = Field(ge=0, le=100)
    factors: ATSFactors


class SuggestionType(str, Enum):
    CONTENT = "content"
    FORMATTING = "formatting"
    KEYWORDS = "keywords"
    STRUCTURE = "structure"
    GRAMMAR = "grammar"


class SuggestionPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Suggestion(BaseModel):
    type: SuggestionType
    priority: SuggestionPriority
    title: str = Field(max_length=200)
    description: str = Field(max_length=1000)
    section: Optional[str] = None
    impact: str = "medium"  # low, medium, high
    category: str
    current_text: Optional[str] = None
    suggested_text: Optional[str] = None
