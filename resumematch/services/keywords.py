import re
from typing import Iterable, List

from resumematch.models.models import ExtractedSkill, JobProfile, StructuredProfile

MAX_KEYWORDS = 100
MIN_KEYWORD_LENGTH = 3

SKILLS_SECTION_CONFIDENCE = 0.9
EXPERIENCE_CONFIDENCE = 0.8

WORD_PATTERN = re.compile(r"\b\w{3,}\b")


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def tokenize(text: str) -> List[str]:
    return WORD_PATTERN.findall((text or "").lower())


def extract_keywords(profile: StructuredProfile) -> List[str]:
    """
    Ordered, lower-cased keyword list for a résumé.

    Sources, in order: summary words, technical skills, experience
    descriptions. Duplicates and words shorter than three characters are
    dropped and the list is capped at MAX_KEYWORDS.
    """
    candidates = tokenize(profile.personal_info.summary or "")
    candidates += [skill.strip().lower() for skill in profile.skills.technical]
    for exp in profile.experience:
        candidates += tokenize(exp.description)

    keywords = _dedupe(k for k in candidates if len(k) >= MIN_KEYWORD_LENGTH)
    return keywords[:MAX_KEYWORDS]


def extract_job_keywords(job: JobProfile) -> List[str]:
    text = " ".join([job.description or ""] + list(job.requirements))
    return _dedupe(tokenize(text))


def extract_skills(profile: StructuredProfile) -> List[ExtractedSkill]:
    """Technical skills with a fixed confidence per source"""
    skills = []
    seen = set()

    for skill in profile.skills.technical:
        if skill.lower() not in seen:
            seen.add(skill.lower())
            skills.append(ExtractedSkill(
                skill=skill,
                confidence=SKILLS_SECTION_CONFIDENCE,
                context="skills_section",
                category="technical",
            ))

    for exp in profile.experience:
        for tech in exp.technologies:
            if tech.lower() not in seen:
                seen.add(tech.lower())
                skills.append(ExtractedSkill(
                    skill=tech,
                    confidence=EXPERIENCE_CONFIDENCE,
                    context="experience",
                    category="technical",
                ))

    return skills


def resume_skill_names(profile: StructuredProfile) -> List[str]:
    names = [s.skill for s in extract_skills(profile)] + list(profile.skills.soft)
    return _dedupe(names)
