"""HTTP download of the raw ``f=pbf`` query response."""

import requests

from .config import DEFAULT_TIMEOUT
from .errors import FetchError
from .logger import get_logger


def fetch_payload(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Fetch the feature service response body.

    No retry: a failed fetch aborts the run and the next scheduled run
    tries again against the same snapshot.

    Raises:
        FetchError: On any HTTP error, timeout, or request failure
    """
    logger = get_logger()
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        logger.error("Feature service request failed", url=url, status=status)
        raise FetchError(f"Feature service request failed ({status}): {url}") from e
    except requests.exceptions.Timeout as e:
        logger.warning("Feature service request timed out", url=url, timeout=timeout)
        raise FetchError(f"Feature service request timed out after {timeout}s: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Feature service request error", url=url, error=str(e))
        raise FetchError(f"Feature service request error: {e}") from e

    body = resp.content
    logger.record_fetch(len(body))
    logger.debug("Fetched feature service payload", url=url, size=len(body))
    return body
