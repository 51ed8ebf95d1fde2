from resumematch.models.models import (
    ExperienceEntry, JobProfile, PersonalInfo, SkillSet, StructuredProfile,
)
from resumematch.services.keywords import (
    MAX_KEYWORDS, extract_job_keywords, extract_keywords, extract_skills, resume_skill_names,
)


class TestExtractKeywords:
    """Bounded, ordered keyword set for a résumé"""

    def test_sources_in_order(self):
        profile = StructuredProfile(
            personal_info=PersonalInfo(summary="Data engineer"),
            skills=SkillSet(technical=["Python", "Go"]),
            experience=[ExperienceEntry(description="Built data pipelines")],
        )
        assert extract_keywords(profile) == ["data", "engineer", "python", "built", "pipelines"]

    def test_cap_and_no_duplicates(self):
        words = " ".join(f"word{i}" for i in range(300))
        profile = StructuredProfile(
            personal_info=PersonalInfo(summary="Python PYTHON python"),
            experience=[ExperienceEntry(description=words)],
        )
        keywords = extract_keywords(profile)
        assert len(keywords) == MAX_KEYWORDS
        assert len(set(k.lower() for k in keywords)) == len(keywords)

    def test_short_words_dropped(self, sample_profile):
        assert all(len(k) >= 3 for k in extract_keywords(sample_profile))

    def test_empty_profile(self):
        assert extract_keywords(StructuredProfile()) == []


class TestJobKeywords:
    """Job keywords come from description and requirements"""

    def test_job_keywords(self):
        job = JobProfile(
            title="Ignored Title",
            description="Build APIs",
            requirements=["APIs in Python", "Go experience"],
        )
        assert extract_job_keywords(job) == ["build", "apis", "python", "experience"]


class TestExtractSkills:
    """Provenance-weighted skill extraction"""

    def test_confidence_by_source(self, python_resume):
        python_resume.experience[0].technologies = ["Python", "Docker"]
        skills = extract_skills(python_resume)
        assert [(s.skill, s.confidence, s.context) for s in skills] == [
            ("Python", 0.9, "skills_section"),
            ("AWS", 0.9, "skills_section"),
            ("Docker", 0.8, "experience"),
        ]
        assert all(s.category == "technical" for s in skills)

    def test_resume_skill_names_includes_soft_skills(self, sample_profile):
        names = resume_skill_names(sample_profile)
        assert "Leadership" in names
        assert "Airflow" in names
        assert len(names) == len(set(names))
