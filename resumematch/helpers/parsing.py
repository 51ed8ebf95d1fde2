import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from resumematch.helpers.sections import SectionSegmenter
from resumematch.models.models import (
    AwardEntry, Certification, EducationEntry, ExperienceEntry, LanguageSkill,
    PersonalInfo, ProjectEntry, PublicationEntry, SkillSet, StructuredProfile,
    VolunteerEntry,
)
from resumematch.models.settings import Vocabulary

logger = logging.getLogger(__name__)

SUMMARY_MAX_CHARS = 500

_DATE = r"\d{1,2}/\d{4}|\d{4}|\w+\s+\d{4}"
_END_DATE = _DATE + r"|present|current"

# Ordered title / organization / date-range patterns
JOB_PATTERNS = [
    re.compile(
        rf"([A-Z][^|\n]*?)\s*[|\-\n]\s*([A-Z][^|\n]*?)\s*[|\-\n]\s*({_DATE})\s*(?:-|to|–)\s*({_END_DATE})",
        re.IGNORECASE,
    ),
    re.compile(
        rf"([A-Z][^|\n]*?)\s*\n\s*([A-Z][^|\n]*?)\s*\n\s*({_DATE})\s*(?:-|to|–)\s*({_END_DATE})",
        re.IGNORECASE,
    ),
]

_DEGREE = (
    r"\b(bachelor(?:'?s)?|master(?:'?s)?|phd|doctorate|associate|mba|"
    r"b\.?a\.?|b\.?s\.?|b\.?sc\.?|b\.?tech\.?|m\.?a\.?|m\.?s\.?|m\.?sc\.?|m\.?tech\.?|ph\.?d\.?)(?![a-z])"
)

DEGREE_PATTERNS = [
    re.compile(rf"{_DEGREE}([^|\n]*?)\s*[|\-\n]\s*([^|\n]*?)\s*[|\-\n]\s*(\d{{4}})", re.IGNORECASE),
    re.compile(rf"{_DEGREE}([^|\n]*?)\s*\n\s*([^|\n]*?)\s*\n\s*(\d{{4}})", re.IGNORECASE),
]

NAME_PATTERN = re.compile(r"^([A-Z][a-z]+[ \t]+[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*)", re.MULTILINE)
EMAIL_PATTERN = re.compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")
PHONE_PATTERNS = [
    re.compile(r"(?:\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})"),
    re.compile(r"\+[0-9]{1,3}[-.\s]?[0-9]{3,5}[-.\s]?[0-9]{3,4}[-.\s]?[0-9]{3,4}"),
]
LINKEDIN_PATTERN = re.compile(r"linkedin\.com/in/([a-zA-Z0-9-]+)", re.IGNORECASE)
GITHUB_PATTERN = re.compile(r"github\.com/([a-zA-Z0-9-]+)", re.IGNORECASE)
WEBSITE_PATTERN = re.compile(r"(https?://(?:www\.)?[a-zA-Z0-9-]+\.[a-zA-Z]{2,}(?:/[^\s]*)?)")
ADDRESS_PATTERN = re.compile(r"([A-Z][a-z]+,?\s+[A-Z]{2}\s+\d{5})")

_SUMMARY_END = r"(?=\n\s*(?:experience|education|skills|employment|work|career))"
SUMMARY_PATTERNS = [
    re.compile(rf"(?:summary|objective|profile)\s*:?\s*([\s\S]*?){_SUMMARY_END}", re.IGNORECASE),
    re.compile(
        rf"(?:professional\s+summary|career\s+objective|personal\s+statement)\s*:?\s*([\s\S]*?){_SUMMARY_END}",
        re.IGNORECASE,
    ),
]

BULLET_PATTERN = re.compile(r"^\s*[•\-\*]\s*")
LINE_RECORD_PATTERN = re.compile(r"^([^|\-:]+)[|\-:]?\s*(.+)?")
CERTIFICATION_WORD = re.compile(r"\bcertif\w*", re.IGNORECASE)
LABEL_PREFIX = re.compile(r"^(?:certifications?|certificates?|licenses?)\s*:\s*", re.IGNORECASE)


def clean_text(x: str) -> str:
    x = re.sub(r'\s+', ' ', x).strip()
    return x


def _lines(section: Optional[str]) -> List[str]:
    if not section:
        return []
    return [BULLET_PATTERN.sub("", line).strip() for line in section.split("\n") if line.strip()]


def _term_pattern(term: str, flags: int) -> "re.Pattern":
    return re.compile(rf"(?<![\w]){re.escape(term)}(?![\w+#])", flags)


def find_terms(text: str, terms: List[str], strict_short: bool = False) -> List[str]:
    """
    Return the vocabulary terms that occur in ``text`` as whole tokens.

    With ``strict_short`` set, terms of four characters or fewer must match
    case-sensitively, which keeps prose words like "go" or "less" from being
    read as technologies.
    """
    if not text:
        return []
    found = []
    for term in terms:
        flags = 0 if strict_short and len(term) <= 4 else re.IGNORECASE
        if _term_pattern(term, flags).search(text) and term not in found:
            found.append(term)
    return found


def is_current(token: Optional[str]) -> bool:
    if not token:
        return False
    lowered = token.strip().lower()
    return "present" in lowered or "current" in lowered


def parse_date(date_str: Optional[str]) -> Optional[str]:
    """Reduce a date token to its 4-digit year; present/current map to None"""
    if not date_str:
        return None
    clean_date = date_str.strip().lower()
    if is_current(clean_date):
        return None
    year_match = re.search(r"(\d{4})", clean_date)
    if year_match:
        return year_match.group(1)
    return clean_date


def _ordered_matches(patterns: List["re.Pattern"], text: str) -> List["re.Match"]:
    """
    Run every pattern over ``text`` and keep non-overlapping matches in
    document order. An earlier start wins; on the same start the earlier
    pattern wins.
    """
    candidates: List[Tuple[int, int, "re.Match"]] = []
    for index, pattern in enumerate(patterns):
        for match in pattern.finditer(text):
            candidates.append((match.start(), index, match))
    candidates.sort(key=lambda c: (c[0], c[1]))

    accepted = []
    last_end = -1
    for start, _, match in candidates:
        if start >= last_end:
            accepted.append(match)
            last_end = match.end()
    return accepted


def extract_personal_info(text: str, segmenter: SectionSegmenter) -> PersonalInfo:
    info: Dict[str, Any] = {}

    headings = set()
    for names in segmenter.synonyms.values():
        headings.update(n.lower() for n in names)
    for match in NAME_PATTERN.finditer(text):
        candidate = match.group(1).strip()
        if candidate.lower() not in headings:
            info["name"] = candidate
            break

    email_match = EMAIL_PATTERN.search(text)
    if email_match:
        info["email"] = email_match.group(1)

    for pattern in PHONE_PATTERNS:
        phone_match = pattern.search(text)
        if phone_match:
            info["phone"] = phone_match.group(0).strip()
            break

    linkedin_match = LINKEDIN_PATTERN.search(text)
    if linkedin_match:
        info["linkedin"] = f"https://linkedin.com/in/{linkedin_match.group(1)}"

    github_match = GITHUB_PATTERN.search(text)
    if github_match:
        info["github"] = f"https://github.com/{github_match.group(1)}"

    for website_match in WEBSITE_PATTERN.finditer(text):
        url = website_match.group(1)
        if "linkedin" not in url and "github" not in url:
            info["website"] = url
            break

    address_match = ADDRESS_PATTERN.search(text)
    if address_match:
        info["address"] = address_match.group(1)

    summary = segmenter.extract_section(text, "summary")
    if not summary:
        for pattern in SUMMARY_PATTERNS:
            summary_match = pattern.search(text)
            if summary_match:
                summary = summary_match.group(1)
                break
    if summary:
        summary = clean_text(summary)[:SUMMARY_MAX_CHARS]
        if summary:
            info["summary"] = summary

    return PersonalInfo(**info)


def extract_experience(section: Optional[str], vocab: Vocabulary) -> List[ExperienceEntry]:
    experiences = []
    if not section:
        return experiences

    matches = _ordered_matches(JOB_PATTERNS, section)
    for i, match in enumerate(matches):
        block_end = matches[i + 1].start() if i + 1 < len(matches) else len(section)
        block = section[match.end():block_end]
        raw_lines = [line.strip() for line in block.split("\n") if line.strip()]
        achievements = [BULLET_PATTERN.sub("", line).strip() for line in raw_lines if BULLET_PATTERN.match(line)]
        description = "\n".join(raw_lines)

        end_token = match.group(4)
        current = is_current(end_token)
        experiences.append(ExperienceEntry(
            position=match.group(1).strip(),
            company=match.group(2).strip(),
            start_date=parse_date(match.group(3)),
            end_date=None if current else parse_date(end_token),
            current=current,
            description=description,
            achievements=achievements,
            technologies=find_terms(description, vocab.technical_skills, strict_short=True),
        ))

    return experiences


def _field_of_study(raw: str) -> str:
    field = raw.strip(" ,.;")
    if " in " in field:
        field = field.rsplit(" in ", 1)[1]
    field = re.sub(r"^(?:of|in)\s+", "", field, flags=re.IGNORECASE)
    return field.strip(" ,.;()")


def extract_education(section: Optional[str]) -> List[EducationEntry]:
    education = []
    if not section:
        return education

    for match in _ordered_matches(DEGREE_PATTERNS, section):
        education.append(EducationEntry(
            degree=clean_text(match.group(1) + match.group(2)).strip(" ,"),
            field=_field_of_study(match.group(2)),
            institution=match.group(3).strip(),
            end_date=match.group(4),
            current="expected" in match.group(0).lower(),
        ))

    return education


def _issuer_for(name: str, vocab: Vocabulary) -> str:
    issuers = find_terms(name, vocab.certification_issuers)
    return issuers[0] if issuers else "Unknown"


def extract_certifications(
    skills_section: Optional[str],
    certifications_section: Optional[str],
    vocab: Vocabulary,
) -> List[Certification]:
    names: List[str] = []

    candidates = _lines(certifications_section)
    candidates += [line for line in _lines(skills_section) if CERTIFICATION_WORD.search(line)]
    for line in candidates:
        stripped = LABEL_PREFIX.sub("", line)
        parts = re.split(r"[;,]", stripped) if stripped != line else [stripped]
        for part in parts:
            name = part.strip(" .")
            if name and all(name.lower() != existing.lower() for existing in names):
                names.append(name)

    return [Certification(name=name, issuer=_issuer_for(name, vocab)) for name in names]


def extract_languages(text: Optional[str], vocab: Vocabulary) -> List[LanguageSkill]:
    languages = []
    if not text:
        return languages

    proficiencies = "|".join(re.escape(p) for p in vocab.language_proficiencies)
    for language in find_terms(text, vocab.spoken_languages):
        match = re.search(
            rf"{re.escape(language)}\s*(?:\(|-|:|–)?\s*({proficiencies})",
            text,
            re.IGNORECASE,
        )
        languages.append(LanguageSkill(
            language=language,
            proficiency=match.group(1).lower() if match else None,
        ))
    return languages


def extract_skills(sections: Dict[str, str], vocab: Vocabulary) -> SkillSet:
    skills_section = sections.get("skills")
    language_text = "\n".join(s for s in (skills_section, sections.get("languages")) if s)

    return SkillSet(
        technical=find_terms(skills_section, vocab.technical_skills),
        soft=find_terms(skills_section, vocab.soft_skills),
        languages=extract_languages(language_text, vocab),
        certifications=extract_certifications(skills_section, sections.get("certifications"), vocab),
    )


def extract_projects(section: Optional[str], vocab: Vocabulary) -> List[ProjectEntry]:
    projects = []
    for line in _lines(section):
        project_match = LINE_RECORD_PATTERN.match(line)
        if not project_match:
            continue
        project = ProjectEntry(
            name=project_match.group(1).strip(),
            description=(project_match.group(2) or "").strip(),
            technologies=find_terms(line, vocab.technical_skills, strict_short=True),
        )

        github_match = re.search(r"github\.com/[^\s]+", line, re.IGNORECASE)
        if github_match:
            project.github = f"https://{github_match.group(0)}"

        url_match = re.search(r"https?://[^\s]+", line)
        if url_match and "github" not in url_match.group(0):
            project.url = url_match.group(0)

        projects.append(project)
    return projects


def extract_awards(section: Optional[str]) -> List[AwardEntry]:
    awards = []
    for line in _lines(section):
        award_match = LINE_RECORD_PATTERN.match(line)
        if award_match:
            year = re.search(r"\b(\d{4})\b", line)
            awards.append(AwardEntry(
                title=award_match.group(1).strip(),
                description=(award_match.group(2) or "").strip(),
                date=year.group(1) if year else "",
            ))
    return awards


def extract_publications(section: Optional[str]) -> List[PublicationEntry]:
    publications = []
    for line in _lines(section):
        url = re.search(r"https?://[^\s]+", line)
        year = re.search(r"\b(\d{4})\b", line)
        publications.append(PublicationEntry(
            title=line,
            url=url.group(0) if url else "",
            date=year.group(1) if year else "",
        ))
    return publications


def extract_volunteering(section: Optional[str]) -> List[VolunteerEntry]:
    volunteering = []
    for line in _lines(section):
        volunteer_match = LINE_RECORD_PATTERN.match(line)
        if volunteer_match:
            volunteering.append(VolunteerEntry(
                organization=volunteer_match.group(1).strip(),
                role=(volunteer_match.group(2) or "").strip(),
                current=is_current(line),
            ))
    return volunteering


def extract_structured_content(raw_text: str, vocab: Optional[Vocabulary] = None) -> StructuredProfile:
    """
    Turn raw résumé text into a StructuredProfile.

    Never raises: a failing sub-extraction is logged and the fields gathered
    so far are returned with defaults for the rest.
    """
    vocab = vocab or Vocabulary()
    raw_text = raw_text or ""
    segmenter = SectionSegmenter(vocab.section_synonyms, vocab.extra_section_headings)
    content: Dict[str, Any] = {"raw_text": raw_text}

    try:
        sections = segmenter.segment(raw_text)
    except Exception as e:
        logger.warning(f"Section segmentation failed: {e}")
        return StructuredProfile(**content)

    steps = [
        ("personal_info", lambda: extract_personal_info(raw_text, segmenter)),
        ("experience", lambda: extract_experience(sections.get("experience"), vocab)),
        ("education", lambda: extract_education(sections.get("education"))),
        ("skills", lambda: extract_skills(sections, vocab)),
        ("projects", lambda: extract_projects(sections.get("projects"), vocab)),
        ("awards", lambda: extract_awards(sections.get("awards"))),
        ("publications", lambda: extract_publications(sections.get("publications"))),
        ("volunteering", lambda: extract_volunteering(sections.get("volunteering"))),
    ]
    for field, extractor in steps:
        try:
            content[field] = extractor()
        except Exception as e:
            logger.warning(f"Extraction of {field} failed, keeping defaults: {e}")

    logger.debug(
        f"Extracted profile: {len(content.get('experience', []))} positions, "
        f"{len(content.get('education', []))} degrees, sections={sorted(sections)}"
    )
    return StructuredProfile(**content)
