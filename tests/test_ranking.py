import pytest

from resumematch.models.models import ExperienceEntry, JobProfile, PersonalInfo, SalaryRange, SkillSet, StructuredProfile
from resumematch.models.response import ExperienceGap, MatchBreakdown, MatchResult
from resumematch.models.settings import RankingSettings
from resumematch.services.ranking import RankingService, candidate_summary, summarize


def make_result(score, resume_id=None, job_id=None):
    return MatchResult(
        resume_id=resume_id,
        job_id=job_id,
        overall_score=score,
        breakdown=MatchBreakdown(),
        weights={},
        experience_gap=ExperienceGap(resume_experience=0, required_experience=0, gap=0, meets_requirement=True),
    )


class StubEngine:
    """Scores by job id (or résumé id) from a lookup table; None means raise"""

    def __init__(self, scores):
        self.scores = scores
        self.calls = []

    def score(self, resume, job):
        self.calls.append((resume.id, job.id))
        key = job.id if job.id in self.scores else resume.id
        score = self.scores[key]
        if score is None:
            raise RuntimeError(f"cannot score {key}")
        return make_result(score, resume_id=resume.id, job_id=job.id)


def jobs(*ids):
    return [JobProfile(id=i, title=i) for i in ids]


class TestFindMatches:
    """Threshold, ordering, limit and failure isolation"""

    def test_sorted_desc_and_thresholded(self):
        engine = StubEngine({"a": 55, "b": 90, "c": 30, "d": 70})
        service = RankingService(engine, RankingSettings())
        result = service.find_matches(StructuredProfile(id="r"), jobs("a", "b", "c", "d"))

        assert [m.job_id for m in result.matches] == ["b", "d", "a"]
        assert result.total_considered == 4
        assert result.above_threshold == 3
        assert result.threshold == 50
        assert result.failed == 0

    def test_limit_and_min_score(self):
        engine = StubEngine({f"j{i}": 40 + i * 5 for i in range(10)})
        service = RankingService(engine, RankingSettings())
        result = service.find_matches(StructuredProfile(id="r"), jobs(*[f"j{i}" for i in range(10)]), min_score=60, limit=3)

        assert len(result.matches) <= 3
        assert all(m.overall_score >= 60 for m in result.matches)
        assert [m.overall_score for m in result.matches] == [85, 80, 75]
        assert result.above_threshold == 6

    def test_ties_keep_input_order(self):
        engine = StubEngine({"x": 70, "y": 80, "z": 70, "w": 70})
        service = RankingService(engine, RankingSettings(max_concurrency=4))
        result = service.find_matches(StructuredProfile(id="r"), jobs("x", "y", "z", "w"))
        assert [m.job_id for m in result.matches] == ["y", "x", "z", "w"]

    def test_ties_by_id(self):
        engine = StubEngine({"x": 70, "y": 80, "z": 70, "w": 70})
        service = RankingService(engine, RankingSettings(tie_break_by_id=True))
        result = service.find_matches(StructuredProfile(id="r"), jobs("x", "y", "z", "w"))
        assert [m.job_id for m in result.matches] == ["y", "w", "x", "z"]

    def test_failure_is_skipped(self, caplog):
        engine = StubEngine({"a": 80, "bad": None, "c": 60})
        service = RankingService(engine, RankingSettings())
        result = service.find_matches(StructuredProfile(id="r"), jobs("a", "bad", "c"))

        assert [m.job_id for m in result.matches] == ["a", "c"]
        assert result.failed == 1
        assert result.total_considered == 3
        assert "Skipping target #1" in caplog.text

    def test_job_source_scores_resumes(self):
        engine = StubEngine({"r1": 65, "r2": 95})
        service = RankingService(engine, RankingSettings())
        resumes = [StructuredProfile(id="r1"), StructuredProfile(id="r2")]
        result = service.find_matches(JobProfile(id="job"), resumes)

        assert [m.resume_id for m in result.matches] == ["r2", "r1"]
        assert all(call[1] == "job" for call in engine.calls)

    def test_empty_targets(self):
        service = RankingService(StubEngine({}), RankingSettings())
        result = service.find_matches(StructuredProfile(id="r"), [])
        assert result.matches == []
        assert result.summary.average_score == 0

    def test_defaults_from_engine_settings(self, engine, python_resume, backend_job):
        service = RankingService(engine)
        result = service.find_matches(python_resume, [backend_job], min_score=0)
        assert result.matches[0].job_id == "j-1"


class TestSummary:
    """Summary over the returned matches"""

    def test_distribution(self):
        summary = summarize([make_result(s) for s in (95, 80, 79, 60, 59, 40)])
        assert summary.top_score == 95
        assert summary.average_score == round((95 + 80 + 79 + 60 + 59 + 40) / 6)
        assert summary.distribution.excellent == 2
        assert summary.distribution.good == 2
        assert summary.distribution.fair == 2

    def test_summary_only_counts_returned_matches(self):
        engine = StubEngine({"a": 90, "b": 85, "c": 45})
        service = RankingService(engine, RankingSettings())
        result = service.find_matches(StructuredProfile(id="r"), jobs("a", "b", "c"), limit=1)
        assert result.summary.top_score == 90
        assert result.summary.average_score == 90
        assert result.summary.distribution.excellent == 1
        assert result.summary.distribution.fair == 0

    @pytest.mark.parametrize("scores", [[], [50]])
    def test_small_inputs(self, scores):
        summary = summarize([make_result(s) for s in scores])
        assert summary.top_score == (scores[0] if scores else 0)


class TestTargetSummaries:
    """Display data attached to each ranked target"""

    def test_job_targets_carry_job_summary(self):
        engine = StubEngine({"j-9": 75})
        job = JobProfile(
            id="j-9",
            title="Data Engineer",
            company="Globex",
            location="Remote",
            employment_type="full-time",
            salary=SalaryRange(min=90000, max=120000),
        )
        result = RankingService(engine, RankingSettings()).find_matches(StructuredProfile(id="r"), [job])

        match = result.matches[0]
        assert match.job.title == "Data Engineer"
        assert match.job.company == "Globex"
        assert match.job.salary.max == 120000
        assert match.candidate is None

    def test_resume_targets_carry_candidate_summary(self):
        engine = StubEngine({"r-7": 82})
        resume = StructuredProfile(
            id="r-7",
            personal_info=PersonalInfo(name="Ada Park", email="ada@example.com"),
            skills=SkillSet(technical=["Python", "SQL"], soft=["Leadership"]),
            experience=[
                ExperienceEntry(position="Analyst", company="Initech", start_date="2019", current=True),
                ExperienceEntry(position="Intern", company="Hooli", start_date="2017", end_date="2018"),
            ],
        )
        result = RankingService(engine, RankingSettings()).find_matches(JobProfile(id="job"), [resume])

        candidate = result.matches[0].candidate
        assert candidate.id == "r-7"
        assert candidate.profile.name == "Ada Park"
        assert candidate.skills.technical == ["Python", "SQL"]
        assert candidate.skills.extracted[:2] == ["Python", "SQL"]
        assert [e.duration for e in candidate.experience] == ["2019 - Present", "2017 - 2018"]
        assert result.matches[0].job is None

    def test_extracted_skills_capped_at_ten(self):
        resume = StructuredProfile(id="r", skills=SkillSet(technical=[f"skill{i}" for i in range(15)]))
        assert len(candidate_summary(resume).skills.extracted) == 10
