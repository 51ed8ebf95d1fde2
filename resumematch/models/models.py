from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    EXECUTIVE = "executive"


class PersonalInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None
    summary: Optional[str] = Field(default=None, max_length=500)


class ExperienceEntry(BaseModel):
    position: str = ""
    company: str = ""
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    current: bool = False
    description: str = ""
    achievements: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)


class EducationEntry(BaseModel):
    degree: str = ""
    field: str = ""
    institution: str = ""
    end_date: Optional[str] = None
    current: bool = False


class LanguageSkill(BaseModel):
    language: str
    proficiency: Optional[str] = None


class Certification(BaseModel):
    name: str
    issuer: str = "Unknown"


class SkillSet(BaseModel):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    languages: List[LanguageSkill] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)


class ProjectEntry(BaseModel):
    name: str
    description: str = ""
    technologies: List[str] = Field(default_factory=list)
    url: str = ""
    github: str = ""


class AwardEntry(BaseModel):
    title: str
    description: str = ""
    issuer: str = ""
    date: str = ""


class PublicationEntry(BaseModel):
    title: str
    publisher: str = ""
    date: str = ""
    url: str = ""
    description: str = ""


class VolunteerEntry(BaseModel):
    organization: str
    role: str = ""
    description: str = ""
    current: bool = False


class StructuredProfile(BaseModel):
    """Normalized representation of a résumé"""
    id: Optional[str] = None
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: SkillSet = Field(default_factory=SkillSet)
    projects: List[ProjectEntry] = Field(default_factory=list)
    awards: List[AwardEntry] = Field(default_factory=list)
    publications: List[PublicationEntry] = Field(default_factory=list)
    volunteering: List[VolunteerEntry] = Field(default_factory=list)
    raw_text: str = ""
    embedding: Optional[List[float]] = None


class SalaryRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"


class JobProfile(BaseModel):
    id: Optional[str] = None
    title: str = ""
    company: str = ""
    location: str = ""
    employment_type: str = ""
    salary: Optional[SalaryRange] = None
    description: str = ""
    requirements: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    experience_level: Optional[ExperienceLevel] = None
    embedding: Optional[List[float]] = None


class FileMetadata(BaseModel):
    mime_type: str = ""
    file_size: int = Field(default=0, ge=0, description="File size in bytes")


class ExtractedSkill(BaseModel):
    skill: str
    confidence: float = Field(ge=0.0, le=1.0)
    context: str
    category: str = "technical"
