"""
Heading-based section segmentation of résumé text.

A heading is a line holding nothing but a section name, optionally followed by
a colon. For each canonical section the synonyms are tried in order and the
first one found wins; the section body runs up to the next recognized heading
or the end of the document.
"""
import re
from typing import Dict, List, Optional

from resumematch.helpers import vocabulary


def _all_headings(synonyms: Dict[str, List[str]], extra: List[str]) -> List[str]:
    names = []
    for section_names in synonyms.values():
        names.extend(section_names)
    names.extend(extra)
    # longest first so "work experience" is not cut short by "work"
    return sorted(set(n.lower() for n in names), key=len, reverse=True)


class SectionSegmenter:
    """Splits raw text into named sections by heading detection"""

    def __init__(
        self,
        synonyms: Optional[Dict[str, List[str]]] = None,
        extra_headings: Optional[List[str]] = None,
    ):
        self.synonyms = synonyms or vocabulary.SECTION_SYNONYMS
        extra = vocabulary.EXTRA_SECTION_HEADINGS if extra_headings is None else extra_headings
        terminators = "|".join(re.escape(h) for h in _all_headings(self.synonyms, extra))
        self._terminator = rf"(?=\n[ \t]*(?:{terminators})[ \t]*:?[ \t]*\n|\Z)"

    def _section_pattern(self, name: str) -> "re.Pattern":
        return re.compile(
            rf"(?:^|\n)[ \t]*{re.escape(name)}[ \t]*:?[ \t]*\n([\s\S]*?){self._terminator}",
            re.IGNORECASE,
        )

    def extract_section(self, text: str, section: str) -> Optional[str]:
        """Return the body of ``section`` or None when no synonym heading is present"""
        if not text:
            return None
        for name in self.synonyms.get(section, []):
            match = self._section_pattern(name).search(text)
            if match:
                return match.group(1).strip()
        return None

    def segment(self, text: str) -> Dict[str, str]:
        """Map every canonical section found in ``text`` to its body"""
        sections = {}
        for section in self.synonyms:
            body = self.extract_section(text, section)
            if body is not None:
                sections[section] = body
        return sections

    def find_heading_offsets(self, text: str) -> Dict[str, int]:
        """Character offset of the first heading line of each canonical section"""
        offsets = {}
        if not text:
            return offsets
        for section, names in self.synonyms.items():
            alternatives = "|".join(re.escape(n) for n in sorted(names, key=len, reverse=True))
            match = re.search(
                rf"^[ \t]*(?:{alternatives})[ \t]*:?[ \t]*$",
                text,
                re.IGNORECASE | re.MULTILINE,
            )
            if match:
                offsets[section] = match.start()
        return offsets
