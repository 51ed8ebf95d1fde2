from typing import List, Optional, Union

import numpy as np
import requests

from resumematch.models.settings import EmbeddingSettings
from resumematch.utils.exceptions import ExternalServiceError, retry_with_logging
from resumematch.utils.logging_config import get_logger

logger = get_logger(__name__)


@retry_with_logging(max_attempts=3, backoff_factor=0.5, exceptions=(requests.RequestException,), logger=logger)
def _post_json(url: str, payload: dict, timeout: int) -> dict:
    resp = requests.post(url, json=payload, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def ollama_embed(
    texts: Union[str, List[str]],
    settings: Optional[EmbeddingSettings] = None,
) -> Union[List[float], List[List[float]]]:
    """
    Embed one text (returns a vector) or a batch (returns a list of vectors)
    through the Ollama /api/embed endpoint.
    """
    settings = settings or EmbeddingSettings()
    url = f"{settings.base_url.rstrip('/')}/api/embed"
    try:
        data = _post_json(url, {"model": settings.model_name, "input": texts}, settings.timeout)
    except requests.RequestException as e:
        status = getattr(getattr(e, "response", None), "status_code", None)
        raise ExternalServiceError(
            f"Embedding request failed: {e}", service_name="ollama", status_code=status, cause=e
        ) from e

    embeddings = data.get("embeddings") or []
    if not embeddings:
        raise ExternalServiceError("Embedding response contained no vectors", service_name="ollama")

    vectors = np.array(embeddings, dtype=np.float32)
    # supports single or batch
    if isinstance(texts, str):
        return vectors[0].tolist()
    return vectors.tolist()
