"""
Engine Settings Models for Configuration Management
"""
import os
from typing import Dict, List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from resumematch.helpers import vocabulary as defaults

load_dotenv()


class MatchWeights(BaseModel):
    """Weights of the four match sub-scores (must sum to 1.0)"""
    semantic: float = Field(default=0.40, description="Embedding cosine similarity")
    skills: float = Field(default=0.25, description="Direct skills matching")
    experience: float = Field(default=0.20, description="Experience level matching")
    keywords: float = Field(default=0.15, description="Keyword overlap")


class ATSWeights(BaseModel):
    """Weights of the four ATS sub-analyzers (must sum to 1.0)"""
    formatting: float = Field(default=0.25)
    keywords: float = Field(default=0.30)
    structure: float = Field(default=0.25)
    readability: float = Field(default=0.20)


class RankingSettings(BaseModel):
    """Batch ranking configuration"""
    min_score: int = Field(default=50, ge=0, le=100, description="Minimum overall score kept in results")
    limit: int = Field(default=10, ge=1, description="Maximum number of matches returned")
    max_concurrency: int = Field(default=4, ge=1, le=64, description="Worker threads used to score a batch")
    tie_break_by_id: bool = Field(
        default=False,
        description="Order equal scores by target id before input position"
    )


class EmbeddingSettings(BaseModel):
    """Embedding provider configuration (used outside the scoring core)"""
    model_name: str = Field(default="nomic-embed-text", description="Embedding model name")
    base_url: str = Field(default="http://localhost:11434", description="Ollama base URL")
    timeout: int = Field(default=30, ge=1, le=300, description="Request timeout in seconds")


class Vocabulary(BaseModel):
    """Versioned lookup tables consumed by extractors and analyzers"""
    version: str = defaults.VOCABULARY_VERSION
    section_synonyms: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in defaults.SECTION_SYNONYMS.items()})
    extra_section_headings: List[str] = Field(default_factory=lambda: list(defaults.EXTRA_SECTION_HEADINGS))
    technical_skills: List[str] = Field(default_factory=lambda: list(defaults.TECHNICAL_SKILLS))
    soft_skills: List[str] = Field(default_factory=lambda: list(defaults.SOFT_SKILLS))
    spoken_languages: List[str] = Field(default_factory=lambda: list(defaults.SPOKEN_LANGUAGES))
    language_proficiencies: List[str] = Field(default_factory=lambda: list(defaults.LANGUAGE_PROFICIENCIES))
    certification_issuers: List[str] = Field(default_factory=lambda: list(defaults.CERTIFICATION_ISSUERS))
    important_keywords: List[str] = Field(default_factory=lambda: list(defaults.IMPORTANT_KEYWORDS))
    action_verbs: List[str] = Field(default_factory=lambda: list(defaults.ACTION_VERBS))
    weak_verbs: List[str] = Field(default_factory=lambda: list(defaults.WEAK_VERBS))
    tech_keywords: List[str] = Field(default_factory=lambda: list(defaults.TECH_KEYWORDS))
    soft_skill_keywords: List[str] = Field(default_factory=lambda: list(defaults.SOFT_SKILL_KEYWORDS))
    buzzwords: List[str] = Field(default_factory=lambda: list(defaults.BUZZWORDS))
    informal_words: List[str] = Field(default_factory=lambda: list(defaults.INFORMAL_WORDS))
    misspellings: Dict[str, str] = Field(default_factory=lambda: dict(defaults.MISSPELLINGS))


def default_experience_levels() -> Dict[str, int]:
    return {"entry": 0, "mid": 3, "senior": 7, "lead": 10, "executive": 15}


class EngineSettings(BaseModel):
    """Complete engine configuration, built once per process"""
    match_weights: MatchWeights = Field(default_factory=MatchWeights)
    ats_weights: ATSWeights = Field(default_factory=ATSWeights)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    experience_levels: Dict[str, int] = Field(
        default_factory=default_experience_levels,
        description="Required years assumed for each experience level"
    )
    fuzzy_threshold: float = Field(default=0.7, ge=0.0, le=1.0, description="Minimum string similarity for a fuzzy skill match")
    vocabulary: Vocabulary = Field(default_factory=Vocabulary)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from environment variables (and a .env file, if present)"""
        ranking = RankingSettings(
            min_score=int(os.getenv("MIN_MATCH_SCORE", "50")),
            limit=int(os.getenv("MAX_RECOMMENDATIONS", "10")),
            max_concurrency=int(os.getenv("MATCH_CONCURRENCY", "4")),
        )
        embedding = EmbeddingSettings(
            model_name=os.getenv("EMBED_MODEL", "nomic-embed-text"),
            base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            timeout=int(os.getenv("EMBED_TIMEOUT", "30")),
        )
        return cls(ranking=ranking, embedding=embedding)
