import os

os.environ.setdefault("ENVIRONMENT", "testing")

import pytest

from resumematch.helpers.parsing import extract_structured_content
from resumematch.models.models import (
    ExperienceEntry, JobProfile, PersonalInfo, SkillSet, StructuredProfile,
)
from resumematch.models.settings import EngineSettings
from resumematch.services.matching import MatchingEngine

SAMPLE_RESUME = """John Smith
john.smith@example.com | (555) 123-4567
linkedin.com/in/johnsmith | github.com/jsmith
San Francisco, CA 94105

Summary
Backend engineer with eight years of experience building scalable APIs and data platforms for high traffic products.

Experience
Senior Software Engineer | Acme Corp | 2019 - Present
- Led migration of 12 services to Kubernetes, reducing deploy time by 40%
- Developed Python APIs serving 2M users
Software Engineer | Beta Systems | 2015 - 2019
- Implemented data pipelines with Apache Spark and Airflow
- Improved query performance 3x faster with PostgreSQL tuning

Education
Bachelor of Science in Computer Science | State University | 2015

Skills
Python, AWS, Docker, Kubernetes, PostgreSQL, Leadership, Communication
English (native), Spanish - conversational
AWS Certified Solutions Architect

Projects
Resume Matcher - Matching engine built with Python and FastAPI https://github.com/jsmith/matcher
"""


@pytest.fixture
def sample_text():
    return SAMPLE_RESUME


@pytest.fixture
def sample_profile():
    return extract_structured_content(SAMPLE_RESUME)


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def engine(settings):
    return MatchingEngine(settings, current_year=2025)


@pytest.fixture
def python_resume():
    return StructuredProfile(
        id="r-1",
        personal_info=PersonalInfo(name="Jane Doe", summary="Python developer building cloud services"),
        experience=[
            ExperienceEntry(
                position="Developer",
                company="Initech",
                start_date="2018",
                end_date="2023",
                description="Built Python services on AWS",
                technologies=["Python", "AWS"],
            )
        ],
        skills=SkillSet(technical=["Python", "AWS"]),
        raw_text="Jane Doe\nPython developer",
    )


@pytest.fixture
def backend_job():
    return JobProfile(
        id="j-1",
        title="Backend Engineer",
        company="Globex",
        description="Build Python services in the cloud",
        requirements=["Experience with Docker"],
        skills=["python", "docker"],
        experience_level="mid",
    )
