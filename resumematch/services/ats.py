"""
ATS compatibility grading.

Four independent heuristic analyzers (formatting, keywords, structure,
readability) each produce a 0-100 score with their own issues and
suggestions. The overall score is their weighted sum, rounded.
"""
import re
from typing import Callable, Dict, List, Optional, Union

from resumematch.helpers.sections import SectionSegmenter
from resumematch.models.models import FileMetadata, StructuredProfile
from resumematch.models.response import ATSFactor, ATSFactors, ATSResult
from resumematch.models.settings import ATSWeights, EngineSettings
from resumematch.services.keywords import extract_keywords
from resumematch.services.matching import validate_weights
from resumematch.utils.logging_config import get_logger

logger = get_logger(__name__)

MB = 1024 * 1024

SPECIAL_CHAR_PATTERN = re.compile(r"[^\w\s.,;:()\-]")
HEADER_FOOTER_PATTERNS = [
    re.compile(r"page \d+ of \d+", re.IGNORECASE),
    re.compile(r"confidential", re.IGNORECASE),
    re.compile(r"resume of", re.IGNORECASE),
]

QUANTIFIABLE_PATTERNS = [
    re.compile(r"\d+%"),
    re.compile(r"\$[\d,]+"),
    re.compile(r"\d+[km]?\+?\s*(?:users|customers|clients|employees|projects|years)", re.IGNORECASE),
    re.compile(r"\d+x\s*(?:faster|better|more|improvement)", re.IGNORECASE),
]

BULLET_LINE_PATTERN = re.compile(r"^[ \t]*([•\-\*])[ \t]*(\S[^\n]*)", re.MULTILINE)
PRONOUN_PATTERN = re.compile(r"\b(?:i|me|my|mine)\b", re.IGNORECASE)
PASSIVE_PATTERN = re.compile(r"\b(?:was|were|been)\s+\w+ed\b", re.IGNORECASE)
SENTENCE_SPLIT = re.compile(r"[.!?]+")
DATE_PATTERN = re.compile(
    r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?\s+\d{4}\b"
    r"|\b\d{1,2}/\d{4}\b"
    # bare years only from 19xx/20xx so phone number groups are not read as dates
    r"|\b(?:19|20)\d{2}\b",
    re.IGNORECASE,
)

IDEAL_ORDER = ["summary", "experience", "education"]
ORDER_SECTIONS = ["summary", "experience", "education", "skills"]


def word_pattern(term: str) -> "re.Pattern":
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


def bullet_lines(text: str) -> List[tuple]:
    """(bullet character, content) for every line that starts with a bullet"""
    return BULLET_LINE_PATTERN.findall(text or "")


def date_format_of(token: str) -> str:
    if "/" in token:
        return "MM/YYYY"
    if token.isdigit():
        return "YYYY"
    return "Month YYYY"


class ATSAnalyzer:
    """Grades a structured résumé for applicant-tracking-system compatibility"""

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        weights: Union[ATSWeights, Dict[str, float], None] = None,
    ):
        self.settings = settings or EngineSettings()
        self.weights = validate_weights(
            weights if weights is not None else self.settings.ats_weights,
            list(ATSWeights.model_fields),
            "ats",
        )
        self.vocab = self.settings.vocabulary
        self.segmenter = SectionSegmenter(self.vocab.section_synonyms, self.vocab.extra_section_headings)

    def _run(self, name: str, analyzer: Callable[[], ATSFactor]) -> ATSFactor:
        try:
            return analyzer()
        except Exception as e:
            logger.error(f"{name} analysis error: {e}")
            return ATSFactor(
                score=50,
                issues=[f"Error analyzing {name}"],
                suggestions=["Ensure resume is in a standard format"],
            )

    def analyze(self, profile: StructuredProfile, file_metadata: Optional[FileMetadata] = None) -> ATSResult:
        factors = ATSFactors(
            formatting=self._run("formatting", lambda: self.analyze_formatting(profile, file_metadata)),
            keywords=self._run("keywords", lambda: self.analyze_keywords(profile)),
            structure=self._run("structure", lambda: self.analyze_structure(profile)),
            readability=self._run("readability", lambda: self.analyze_readability(profile)),
        )
        score = round(sum(self.weights[name] * getattr(factors, name).score for name in self.weights))
        logger.debug(
            f"ATS score {score}: " + ", ".join(f"{n}={getattr(factors, n).score}" for n in self.weights)
        )
        return ATSResult(score=max(0, min(100, score)), factors=factors)

    def analyze_formatting(self, profile: StructuredProfile, file_metadata: Optional[FileMetadata]) -> ATSFactor:
        factor = ATSFactor(score=100)

        if file_metadata is not None:
            mime_type = (file_metadata.mime_type or "").lower()
            if mime_type == "application/pdf":
                pass
            elif "word" in mime_type:
                factor.score -= 5
                factor.suggestions.append("Consider using PDF format for better ATS compatibility")
            else:
                factor.score -= 15
                factor.issues.append("Unsupported file format for some ATS systems")
                factor.suggestions.append("Use PDF or DOCX format for optimal ATS compatibility")

            size_mb = file_metadata.file_size / MB
            if size_mb > 5:
                factor.score -= 10
                factor.issues.append("File size too large (over 5MB)")
                factor.suggestions.append("Reduce file size to under 5MB")
            elif size_mb > 2:
                factor.score -= 5
                factor.suggestions.append("Consider reducing file size for faster processing")

        text = profile.raw_text
        if not text:
            factor.score -= 30
            factor.issues.append("Text extraction failed or incomplete")
            factor.suggestions.append("Ensure resume text is selectable and not embedded in images")
        else:
            if len(text) < 500:
                factor.score -= 20
                factor.issues.append("Very little text extracted - possible formatting issues")
                factor.suggestions.append("Ensure all content is in text format, not images")
            elif len(text) < 1000:
                factor.score -= 10
                factor.suggestions.append("Consider adding more detailed content")

            if len(SPECIAL_CHAR_PATTERN.findall(text)) / len(text) > 0.1:
                factor.score -= 15
                factor.issues.append("Excessive special characters detected")
                factor.suggestions.append("Use simple formatting and standard characters")

            if text.count("|") > 10:
                factor.score -= 10
                factor.issues.append("Complex table formatting detected")
                factor.suggestions.append("Use simple bullet points instead of tables")

            for pattern in HEADER_FOOTER_PATTERNS:
                if pattern.search(text):
                    factor.score -= 5
                    factor.suggestions.append("Remove headers and footers for cleaner parsing")

        factor.score = max(0, factor.score)
        return factor

    def analyze_keywords(self, profile: StructuredProfile) -> ATSFactor:
        factor = ATSFactor()
        text = (profile.raw_text or "").lower()
        if not text:
            factor.suggestions.append("Unable to analyze keywords - text extraction failed")
            return factor

        score = 0
        for keyword in self.vocab.important_keywords:
            if word_pattern(keyword).search(text):
                factor.found.append(keyword)
                score += 2
            else:
                factor.missing.append(keyword)

        quantifiable = sum(len(p.findall(text)) for p in QUANTIFIABLE_PATTERNS)
        if quantifiable > 0:
            score += min(20, quantifiable * 5)
            factor.found.append(f"{quantifiable} quantifiable achievements")
        else:
            factor.missing.append("Quantifiable achievements")
            factor.suggestions.append("Include specific numbers, percentages, and measurable results")

        action_verbs = set(v.lower() for v in self.vocab.action_verbs)
        action_count = 0
        for _, content in bullet_lines(text):
            first_word = re.match(r"\w+", content)
            if first_word and first_word.group(0) in action_verbs:
                action_count += 1
        if action_count > 0:
            score += min(15, action_count * 2)
            factor.found.append(f"{action_count} strong action verbs")
        else:
            factor.missing.append("Strong action verbs")
            factor.suggestions.append("Start bullet points with strong action verbs")

        keyword_count = len(extract_keywords(profile))
        if keyword_count > 10:
            score += 10
            factor.found.append("Good keyword diversity")
        elif keyword_count > 5:
            score += 5
        else:
            factor.missing.append("Keyword diversity")
            factor.suggestions.append("Include more relevant industry keywords")

        factor.score = min(100, score)
        if factor.missing:
            factor.suggestions.append("Include more relevant keywords from job descriptions")
            factor.suggestions.append("Use industry-standard terminology")
        return factor

    def analyze_structure(self, profile: StructuredProfile) -> ATSFactor:
        factor = ATSFactor()
        score = 0

        info = profile.personal_info
        if info.name or info.email or info.phone:
            score += 15
        else:
            factor.issues.append("Contact Information section incomplete")
            factor.suggestions.append("Complete your contact information")

        if profile.experience:
            detailed = any(
                exp.company and exp.position and (exp.start_date or exp.description)
                for exp in profile.experience
            )
            if detailed:
                score += 25
            else:
                factor.issues.append("Work experience lacks detail")
                factor.suggestions.append("Include company names, job titles, and dates for all positions")
        else:
            factor.issues.append("Work Experience section missing or empty")
            factor.suggestions.append("Add your work experience")

        if profile.education:
            score += 15
        else:
            factor.issues.append("Education section missing or empty")
            factor.suggestions.append("Add your education")

        if profile.skills.technical or profile.skills.soft:
            score += 15
        else:
            factor.issues.append("Skills section missing or empty")
            factor.suggestions.append("Add your skills")

        optional = [
            (profile.projects, 10),
            (profile.skills.certifications, 10),
            (profile.awards, 5),
            (profile.volunteering, 5),
        ]
        score += sum(weight for items, weight in optional if items)

        if info.summary:
            score += 10
        else:
            factor.suggestions.append("Add a professional summary at the top of your resume")

        offsets = self.segmenter.find_heading_offsets(profile.raw_text)
        actual = sorted((s for s in ORDER_SECTIONS if s in offsets), key=lambda s: offsets[s])
        if actual[:3] == IDEAL_ORDER:
            score += 10
        else:
            factor.suggestions.append("Consider reordering sections: Summary, Experience, Education, Skills")

        factor.score = min(100, score)
        return factor

    def analyze_readability(self, profile: StructuredProfile) -> ATSFactor:
        factor = ATSFactor()
        text = profile.raw_text
        if not text:
            factor.issues.append("Unable to analyze readability")
            factor.suggestions.append("Ensure resume text is readable")
            return factor

        score = 0

        word_count = len(text.split())
        if 200 <= word_count <= 800:
            score += 20
        elif word_count < 200:
            factor.issues.append("Resume too short")
            factor.suggestions.append("Add more detail to your experience and achievements")
        elif word_count > 1000:
            factor.issues.append("Resume too long")
            factor.suggestions.append("Condense content to 1-2 pages")

        sentences = [s for s in SENTENCE_SPLIT.split(text) if len(s.strip()) > 10]
        if sentences:
            avg_length = sum(len(s.split()) for s in sentences) / len(sentences)
            if 8 <= avg_length <= 20:
                score += 15
            elif avg_length > 25:
                factor.issues.append("Sentences too long")
                factor.suggestions.append("Use shorter, more concise sentences")
            elif avg_length < 5:
                factor.issues.append("Sentences too short")
                factor.suggestions.append("Provide more detailed descriptions")

        bullets = bullet_lines(text)
        if len(bullets) >= 5:
            score += 15
        else:
            factor.suggestions.append("Use more bullet points to improve readability")

        bullet_styles = set(char for char, _ in bullets)
        if len(bullet_styles) == 1:
            score += 10
        elif bullet_styles:
            factor.issues.append("Inconsistent bullet point formatting")
            factor.suggestions.append("Use consistent bullet point style throughout")

        if len(PRONOUN_PATTERN.findall(text)) > 2:
            factor.issues.append("Avoid first person pronouns")
            score -= 5

        for wrong, right in self.vocab.misspellings.items():
            if word_pattern(wrong).search(text):
                factor.issues.append(f'Spelling error: "{wrong}" should be "{right}"')
                score -= 5

        if len(PASSIVE_PATTERN.findall(text)) > 3:
            factor.issues.append("Too much passive voice")
            factor.suggestions.append("Use active voice and strong action verbs")
            score -= 10

        date_formats = set(date_format_of(d) for d in DATE_PATTERN.findall(text))
        if len(date_formats) > 2:
            factor.issues.append("Inconsistent date formatting")
            factor.suggestions.append("Use consistent date format throughout resume")
        else:
            score += 10

        whitespace_ratio = text.count("\n") / len(text)
        if 0.02 <= whitespace_ratio <= 0.08:
            score += 10
        elif whitespace_ratio < 0.02:
            factor.issues.append("Text appears too dense")
            factor.suggestions.append("Add more white space between sections")

        for word in self.vocab.informal_words:
            if word_pattern(word).search(text):
                factor.issues.append(f'Informal language detected: "{word}"')
                factor.suggestions.append("Use professional language throughout")
                score -= 2

        factor.score = max(0, min(100, score))
        return factor
