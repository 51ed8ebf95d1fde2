import re

import pytest
from unittest.mock import patch

from resumematch.helpers.parsing import (
    _ordered_matches, extract_education, extract_experience, extract_structured_content,
    find_terms, is_current, parse_date,
)
from resumematch.helpers.sections import SectionSegmenter
from resumematch.models.settings import Vocabulary


class TestSectionSegmenter:
    """Heading detection and section bodies"""

    def test_segment_finds_all_sections(self, sample_text):
        sections = SectionSegmenter().segment(sample_text)
        assert set(sections) == {"summary", "experience", "education", "skills", "projects"}
        assert sections["education"].startswith("Bachelor of Science")

    def test_section_runs_to_next_heading(self, sample_text):
        body = SectionSegmenter().extract_section(sample_text, "experience")
        assert body.startswith("Senior Software Engineer")
        assert "Education" not in body
        assert body.endswith("PostgreSQL tuning")

    def test_last_section_runs_to_end_of_document(self, sample_text):
        body = SectionSegmenter().extract_section(sample_text, "projects")
        assert body.startswith("Resume Matcher")

    def test_first_synonym_wins(self):
        text = "Employment\nOld Job\n\nExperience\nNew Job\n"
        body = SectionSegmenter().extract_section(text, "experience")
        assert body == "New Job"

    def test_heading_with_colon_and_case(self):
        text = "WORK EXPERIENCE:\nDeveloper at Initech\nSKILLS\nPython\n"
        segmenter = SectionSegmenter()
        assert segmenter.extract_section(text, "experience") == "Developer at Initech"
        assert segmenter.extract_section(text, "skills") == "Python"

    def test_missing_section_is_none(self):
        assert SectionSegmenter().extract_section("Just some text", "education") is None
        assert SectionSegmenter().extract_section("", "education") is None

    def test_heading_offsets_follow_document_order(self, sample_text):
        offsets = SectionSegmenter().find_heading_offsets(sample_text)
        assert offsets["summary"] < offsets["experience"] < offsets["education"] < offsets["skills"]

    def test_custom_synonyms(self):
        segmenter = SectionSegmenter({"experience": ["career"]}, extra_headings=["hobbies"])
        text = "Career\nDeveloper\nHobbies\nChess\n"
        assert segmenter.extract_section(text, "experience") == "Developer"


class TestDates:
    """Year extraction from date tokens"""

    @pytest.mark.parametrize("token,expected", [
        ("2019", "2019"),
        ("03/2020", "2020"),
        ("Jan 2021", "2021"),
        ("Present", None),
        ("current", None),
        (None, None),
    ])
    def test_parse_date(self, token, expected):
        assert parse_date(token) == expected

    def test_is_current(self):
        assert is_current("Present")
        assert is_current("CURRENT")
        assert not is_current("2020")
        assert not is_current(None)


class TestFieldExtractors:
    """Per-section extraction into structured records"""

    def test_personal_info(self, sample_profile):
        info = sample_profile.personal_info
        assert info.name == "John Smith"
        assert info.email == "john.smith@example.com"
        assert info.phone == "(555) 123-4567"
        assert info.linkedin == "https://linkedin.com/in/johnsmith"
        assert info.github == "https://github.com/jsmith"
        assert info.website is None
        assert "CA 94105" in info.address
        assert info.summary.startswith("Backend engineer with eight years")

    def test_summary_is_truncated(self):
        text = "Summary\n" + "word " * 200 + "\n\nExperience\nNothing here\n"
        profile = extract_structured_content(text)
        assert len(profile.personal_info.summary) == 500

    def test_experience_entries(self, sample_profile):
        first, second = sample_profile.experience
        assert first.position == "Senior Software Engineer"
        assert first.company == "Acme Corp"
        assert first.start_date == "2019"
        assert first.end_date is None
        assert first.current is True
        assert len(first.achievements) == 2
        assert first.achievements[1] == "Developed Python APIs serving 2M users"
        assert first.technologies == ["Python", "Kubernetes"]

        assert second.position == "Software Engineer"
        assert second.company == "Beta Systems"
        assert second.start_date == "2015"
        assert second.end_date == "2019"
        assert second.current is False
        assert second.technologies == ["PostgreSQL", "Apache Spark", "Airflow"]

    def test_experience_newline_layout(self):
        section = "Data Analyst\nUmbrella Inc\nJan 2018 to Dec 2020\n- Built dashboards in Tableau"
        entries = extract_experience(section, Vocabulary())
        assert len(entries) == 1
        assert entries[0].position == "Data Analyst"
        assert entries[0].company == "Umbrella Inc"
        assert entries[0].start_date == "2018"
        assert entries[0].end_date == "2020"
        assert entries[0].technologies == ["Tableau"]

    def test_education_entry(self, sample_profile):
        (edu,) = sample_profile.education
        assert edu.degree == "Bachelor of Science in Computer Science"
        assert edu.field == "Computer Science"
        assert edu.institution == "State University"
        assert edu.end_date == "2015"

    def test_education_abbreviated_degree(self):
        entries = extract_education("B.S., Mathematics | Tech Institute | 2012")
        assert len(entries) == 1
        assert entries[0].field == "Mathematics"
        assert entries[0].institution == "Tech Institute"

    def test_skills(self, sample_profile):
        skills = sample_profile.skills
        assert skills.technical == ["Python", "PostgreSQL", "AWS", "Docker", "Kubernetes"]
        assert skills.soft == ["Leadership", "Communication"]
        assert [(l.language, l.proficiency) for l in skills.languages] == [
            ("English", "native"), ("Spanish", "conversational"),
        ]
        (cert,) = skills.certifications
        assert cert.name == "AWS Certified Solutions Architect"
        assert cert.issuer == "AWS"

    def test_certifications_section_with_unknown_issuer(self):
        text = "Certifications\nCertified Scrum Master\nCKA\n"
        profile = extract_structured_content(text)
        names = [c.name for c in profile.skills.certifications]
        assert names == ["Certified Scrum Master", "CKA"]
        assert all(c.issuer == "Unknown" for c in profile.skills.certifications)

    def test_projects(self, sample_profile):
        (project,) = sample_profile.projects
        assert project.name == "Resume Matcher"
        assert project.github == "https://github.com/jsmith/matcher"
        assert project.url == ""
        assert "Python" in project.technologies

    def test_awards_publications_volunteering(self):
        text = (
            "Awards\nEmployee of the Year: Acme Corp 2021\n\n"
            "Publications\nScaling Search Systems, 2020\n\n"
            "Volunteer\nCode Club - Mentor (current)\n"
        )
        profile = extract_structured_content(text)
        assert profile.awards[0].title == "Employee of the Year"
        assert profile.awards[0].date == "2021"
        assert profile.publications[0].date == "2020"
        assert profile.volunteering[0].organization == "Code Club"
        assert profile.volunteering[0].current is True


class TestExtractStructuredContent:
    """Whole-document extraction never fails"""

    def test_empty_text_gives_defaults(self):
        profile = extract_structured_content("")
        assert profile.experience == []
        assert profile.education == []
        assert profile.skills.technical == []
        assert profile.projects == []
        assert profile.personal_info.email is None

    def test_raw_text_is_kept(self, sample_text, sample_profile):
        assert sample_profile.raw_text == sample_text

    def test_failing_extractor_keeps_partial_profile(self, sample_text, caplog):
        with patch("resumematch.helpers.parsing.extract_education", side_effect=RuntimeError("boom")):
            profile = extract_structured_content(sample_text)

        assert profile.education == []
        assert len(profile.experience) == 2
        assert profile.personal_info.email == "john.smith@example.com"
        assert "Extraction of education failed" in caplog.text


class TestHelpers:
    """Pattern utilities"""

    def test_find_terms_respects_token_boundaries(self):
        terms = ["Java", "JavaScript", "C++", "SQL"]
        assert find_terms("Java and C++ with MySQL", terms) == ["Java", "C++"]

    def test_find_terms_strict_short_terms(self):
        assert find_terms("go to the less crowded park", ["Go", "Less"], strict_short=True) == []
        assert find_terms("Written in Go", ["Go"], strict_short=True) == ["Go"]

    def test_ordered_matches_prefers_earlier_start_then_earlier_pattern(self):
        patterns = [re.compile(r"bc"), re.compile(r"abc"), re.compile(r"b")]
        matches = _ordered_matches(patterns, "abc abc")
        assert [(m.start(), m.group(0)) for m in matches] == [(0, "abc"), (4, "abc")]
