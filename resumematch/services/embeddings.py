import asyncio
from typing import Callable, List, Optional, Tuple

from resumematch.models.models import JobProfile, StructuredProfile
from resumematch.utils.logging_config import get_logger
from resumematch.utils.utils import ollama_embed

logger = get_logger(__name__)

EmbedFn = Callable[[str], List[float]]


def build_resume_content(profile: StructuredProfile) -> str:
    parts = []
    if profile.personal_info.summary:
        parts.append(f"Summary: {profile.personal_info.summary}")
    if profile.experience:
        experience = ". ".join(
            f"{exp.position} at {exp.company}: {exp.description}" for exp in profile.experience
        )
        parts.append(f"Experience: {experience}")
    if profile.skills.technical:
        parts.append(f"Technical Skills: {', '.join(profile.skills.technical)}")
    if profile.education:
        education = ". ".join(f"{edu.degree} from {edu.institution}" for edu in profile.education)
        parts.append(f"Education: {education}")
    return ". ".join(parts)


def build_job_content(job: JobProfile) -> str:
    parts = [
        f"Job Title: {job.title}",
        f"Company: {job.company}",
        f"Description: {job.description}",
    ]
    if job.requirements:
        parts.append(f"Requirements: {'. '.join(job.requirements)}")
    if job.responsibilities:
        parts.append(f"Responsibilities: {'. '.join(job.responsibilities)}")
    if job.skills:
        parts.append(f"Required Skills: {', '.join(job.skills)}")
    return ". ".join(parts)


async def _embed(content: str, embed_fn: EmbedFn, label: str) -> Optional[List[float]]:
    try:
        return await asyncio.to_thread(embed_fn, content)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.warning(f"Embedding generation failed for {label}: {e}")
        return None


async def ensure_embeddings(
    resume: StructuredProfile,
    job: JobProfile,
    embed_fn: Optional[EmbedFn] = None,
) -> Tuple[StructuredProfile, JobProfile]:
    """
    Return copies of ``resume`` and ``job`` with missing embeddings filled in.

    Both provider calls run concurrently. A failed call is logged and the
    embedding stays missing, so scoring falls back to a semantic score of 0.
    Cancellation propagates to the caller.
    """
    embed_fn = embed_fn or ollama_embed

    pending = {}
    if not resume.embedding and resume.raw_text:
        pending["resume"] = _embed(build_resume_content(resume), embed_fn, f"resume {resume.id}")
    if not job.embedding:
        pending["job"] = _embed(build_job_content(job), embed_fn, f"job {job.id}")

    if not pending:
        return resume, job

    vectors = dict(zip(pending, await asyncio.gather(*pending.values())))

    if vectors.get("resume"):
        resume = resume.model_copy(update={"embedding": vectors["resume"]})
    if vectors.get("job"):
        job = job.model_copy(update={"embedding": vectors["job"]})
    return resume, job
