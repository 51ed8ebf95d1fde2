import re
from typing import List, Optional

from resumematch.helpers.sections import SectionSegmenter
from resumematch.models.models import FileMetadata, StructuredProfile
from resumematch.models.response import Suggestion, SuggestionPriority, SuggestionType
from resumematch.models.settings import EngineSettings
from resumematch.services.ats import (
    MB, PASSIVE_PATTERN, PRONOUN_PATTERN, QUANTIFIABLE_PATTERNS, bullet_lines, word_pattern,
)
from resumematch.utils.logging_config import get_logger

logger = get_logger(__name__)

PRIORITY_RANK = {
    SuggestionPriority.CRITICAL: 4,
    SuggestionPriority.HIGH: 3,
    SuggestionPriority.MEDIUM: 2,
    SuggestionPriority.LOW: 1,
}

METRIC_PATTERNS = QUANTIFIABLE_PATTERNS + [
    re.compile(r"increased?\s+by\s+\d+", re.IGNORECASE),
    re.compile(r"reduced?\s+by\s+\d+", re.IGNORECASE),
    re.compile(r"improved?\s+by\s+\d+", re.IGNORECASE),
]


# longest name or list quoted inside a description
QUOTE_LIMIT = 100


def clip(text: str, limit: int = QUOTE_LIMIT) -> str:
    text = text or ""
    return text if len(text) <= limit else text[:limit - 3].rstrip() + "..."


def has_quantifiable_metrics(text: str) -> bool:
    return any(p.search(text) for p in METRIC_PATTERNS)


def prioritize(suggestions: List[Suggestion]) -> List[Suggestion]:
    """Highest priority first; sorted() is stable so ties keep their order"""
    return sorted(suggestions, key=lambda s: -PRIORITY_RANK[s.priority])


class SuggestionGenerator:
    """Turns a structured résumé into a prioritized list of improvement suggestions"""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.vocab = self.settings.vocabulary
        self.segmenter = SectionSegmenter(self.vocab.section_synonyms, self.vocab.extra_section_headings)

    def generate(self, profile: StructuredProfile, file_metadata: Optional[FileMetadata] = None) -> List[Suggestion]:
        suggestions = []
        suggestions += self.content_suggestions(profile)
        suggestions += self.formatting_suggestions(profile, file_metadata)
        suggestions += self.keyword_suggestions(profile)
        suggestions += self.structure_suggestions(profile)
        suggestions += self.grammar_suggestions(profile)
        logger.debug(f"Generated {len(suggestions)} suggestions")
        return prioritize(suggestions)

    def find_weak_verbs(self, text: str) -> List[str]:
        return [verb for verb in self.vocab.weak_verbs if word_pattern(verb).search(text)]

    def content_suggestions(self, profile: StructuredProfile) -> List[Suggestion]:
        suggestions = []

        summary = profile.personal_info.summary
        if not summary or len(summary) < 50:
            suggestions.append(Suggestion(
                type=SuggestionType.CONTENT,
                priority=SuggestionPriority.HIGH,
                title="Add Professional Summary",
                description="Include a compelling 2-3 sentence professional summary at the top of your "
                            "resume to grab recruiters' attention.",
                section="personal_info",
                impact="high",
                category="summary",
            ))

        for exp in profile.experience:
            if len(exp.description) < 100:
                suggestions.append(Suggestion(
                    type=SuggestionType.CONTENT,
                    priority=SuggestionPriority.HIGH,
                    title="Expand Experience Description",
                    description=f"Add more detailed description for your role at {clip(exp.company)}. "
                                f"Include specific responsibilities and achievements.",
                    section="experience",
                    impact="high",
                    category="experience-detail",
                ))

            if exp.description and not has_quantifiable_metrics(exp.description):
                suggestions.append(Suggestion(
                    type=SuggestionType.CONTENT,
                    priority=SuggestionPriority.MEDIUM,
                    title="Add Quantifiable Achievements",
                    description=f"Include specific numbers, percentages, or metrics in your {clip(exp.position)} "
                                f"role to demonstrate impact.",
                    section="experience",
                    current_text=exp.description,
                    suggested_text='Add metrics like: "Increased sales by 25%" or "Managed team of 8 developers"',
                    impact="medium",
                    category="quantification",
                ))

            weak_verbs = self.find_weak_verbs(exp.description) if exp.description else []
            if weak_verbs:
                suggestions.append(Suggestion(
                    type=SuggestionType.CONTENT,
                    priority=SuggestionPriority.MEDIUM,
                    title="Use Stronger Action Verbs",
                    description=f"Replace weak action verbs with more impactful alternatives in your "
                                f"{clip(exp.position)} description.",
                    section="experience",
                    current_text=", ".join(weak_verbs),
                    suggested_text="Use verbs like: achieved, implemented, optimized, spearheaded, transformed",
                    impact="medium",
                    category="action-verbs",
                ))

        if len(profile.skills.technical) < 5:
            suggestions.append(Suggestion(
                type=SuggestionType.CONTENT,
                priority=SuggestionPriority.MEDIUM,
                title="Expand Technical Skills",
                description="Add more relevant technical skills to improve keyword matching with job descriptions.",
                section="skills",
                impact="medium",
                category="skills-expansion",
            ))

        if not profile.projects:
            suggestions.append(Suggestion(
                type=SuggestionType.CONTENT,
                priority=SuggestionPriority.MEDIUM,
                title="Add Projects Section",
                description="Include relevant projects to showcase your practical skills and initiative.",
                section="projects",
                impact="medium",
                category="sections",
            ))

        return suggestions

    def formatting_suggestions(
        self, profile: StructuredProfile, file_metadata: Optional[FileMetadata]
    ) -> List[Suggestion]:
        suggestions = []

        if file_metadata is not None:
            if (file_metadata.mime_type or "").lower() != "application/pdf":
                suggestions.append(Suggestion(
                    type=SuggestionType.FORMATTING,
                    priority=SuggestionPriority.HIGH,
                    title="Convert to PDF Format",
                    description="PDF format ensures consistent formatting across different systems "
                                "and is preferred by most ATS.",
                    impact="high",
                    category="file-format",
                ))

            if file_metadata.file_size / MB > 2:
                suggestions.append(Suggestion(
                    type=SuggestionType.FORMATTING,
                    priority=SuggestionPriority.MEDIUM,
                    title="Reduce File Size",
                    description="Large files may have issues with some ATS systems. Consider optimizing "
                                "images or reducing file size.",
                    impact="medium",
                    category="file-size",
                ))

        text = profile.raw_text
        if text:
            if len(set(char for char, _ in bullet_lines(text))) > 1:
                suggestions.append(Suggestion(
                    type=SuggestionType.FORMATTING,
                    priority=SuggestionPriority.MEDIUM,
                    title="Use Consistent Bullet Points",
                    description="Use the same bullet point style throughout your resume for better visual consistency.",
                    impact="low",
                    category="bullet-consistency",
                ))

            caps_ratio = len(re.findall(r"[A-Z]", text)) / len(text)
            if caps_ratio > 0.15:
                suggestions.append(Suggestion(
                    type=SuggestionType.FORMATTING,
                    priority=SuggestionPriority.LOW,
                    title="Reduce Excessive Capitalization",
                    description="Too many capital letters can make your resume hard to read. "
                                "Use standard capitalization.",
                    impact="low",
                    category="capitalization",
                ))

        return suggestions

    def keyword_suggestions(self, profile: StructuredProfile) -> List[Suggestion]:
        suggestions = []
        text = (profile.raw_text or "").lower()
        if not text:
            return suggestions

        missing_tech = [k for k in self.vocab.tech_keywords if not word_pattern(k).search(text)]
        if missing_tech:
            suggestions.append(Suggestion(
                type=SuggestionType.KEYWORDS,
                priority=SuggestionPriority.MEDIUM,
                title="Add Relevant Tech Keywords",
                description=f"Consider adding these relevant keywords if they apply to your experience: "
                            f"{clip(', '.join(missing_tech[:5]), 300)}",
                section="skills",
                impact="medium",
                category="tech-keywords",
            ))

        missing_soft = [k for k in self.vocab.soft_skill_keywords if not word_pattern(k).search(text)]
        if len(missing_soft) > 5:
            suggestions.append(Suggestion(
                type=SuggestionType.KEYWORDS,
                priority=SuggestionPriority.LOW,
                title="Include Soft Skills",
                description=f"Add relevant soft skills to your resume: {clip(', '.join(missing_soft[:3]), 300)}",
                section="skills",
                impact="low",
                category="soft-skills",
            ))

        buzzword_count = sum(len(word_pattern(w).findall(text)) for w in self.vocab.buzzwords)
        if buzzword_count > 5:
            suggestions.append(Suggestion(
                type=SuggestionType.KEYWORDS,
                priority=SuggestionPriority.LOW,
                title="Reduce Generic Buzzwords",
                description="Too many generic buzzwords can make your resume less impactful. "
                            "Focus on specific achievements instead.",
                impact="low",
                category="buzzwords",
            ))

        return suggestions

    def structure_suggestions(self, profile: StructuredProfile) -> List[Suggestion]:
        suggestions = []
        text = profile.raw_text or ""

        offsets = self.segmenter.find_heading_offsets(text)
        if "experience" in offsets and "education" in offsets and offsets["education"] < offsets["experience"]:
            suggestions.append(Suggestion(
                type=SuggestionType.STRUCTURE,
                priority=SuggestionPriority.MEDIUM,
                title="Reorder Resume Sections",
                description="Consider placing Work Experience before Education unless you're a recent graduate.",
                impact="medium",
                category="section-order",
            ))

        info = profile.personal_info
        if not info.email or not info.phone:
            suggestions.append(Suggestion(
                type=SuggestionType.STRUCTURE,
                priority=SuggestionPriority.CRITICAL,
                title="Add Complete Contact Information",
                description="Ensure your resume includes your full name, phone number, email address, "
                            "and location at the top.",
                section="personal_info",
                impact="high",
                category="contact-info",
            ))

        word_count = len(text.split())
        if word_count > 1000:
            suggestions.append(Suggestion(
                type=SuggestionType.STRUCTURE,
                priority=SuggestionPriority.MEDIUM,
                title="Reduce Resume Length",
                description="Your resume appears lengthy. Consider condensing to 1-2 pages for better readability.",
                impact="medium",
                category="length",
            ))
        elif word_count < 200:
            suggestions.append(Suggestion(
                type=SuggestionType.STRUCTURE,
                priority=SuggestionPriority.HIGH,
                title="Expand Resume Content",
                description="Your resume seems too brief. Add more details about your experience and achievements.",
                impact="high",
                category="length",
            ))

        return suggestions

    def grammar_suggestions(self, profile: StructuredProfile) -> List[Suggestion]:
        suggestions = []
        text = profile.raw_text
        if not text:
            return suggestions

        pronouns = PRONOUN_PATTERN.findall(text)
        if len(pronouns) > 2:
            suggestions.append(Suggestion(
                type=SuggestionType.GRAMMAR,
                priority=SuggestionPriority.MEDIUM,
                title="Remove First Person Pronouns",
                description='Avoid using "I", "me", "my" in your resume. Use bullet points and action verbs instead.',
                current_text=", ".join(pronouns[:3]),
                impact="medium",
                category="pronouns",
            ))

        if len(PASSIVE_PATTERN.findall(text)) > 3:
            suggestions.append(Suggestion(
                type=SuggestionType.GRAMMAR,
                priority=SuggestionPriority.MEDIUM,
                title="Use Active Voice",
                description="Replace passive voice constructions with active voice and strong action verbs.",
                impact="medium",
                category="voice",
            ))

        for wrong, right in self.vocab.misspellings.items():
            if word_pattern(wrong).search(text):
                suggestions.append(Suggestion(
                    type=SuggestionType.GRAMMAR,
                    priority=SuggestionPriority.HIGH,
                    title="Fix Spelling Error",
                    description=f'Correct spelling error: replace "{wrong}" with "{right}"',
                    current_text=wrong,
                    suggested_text=right,
                    impact="high",
                    category="spelling",
                ))

        return suggestions
