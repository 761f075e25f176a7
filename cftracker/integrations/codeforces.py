import logging
from datetime import datetime
from typing import Iterable, Optional

import httpx
import pytz

from ..config import constants

logger = logging.getLogger(__name__)


class InvalidHandleOrUpstream(Exception):
    """Codeforces could not give us a handle's submissions (unknown handle, API down, bad reply)."""

    def __init__(self, handle: str, reason: str):
        self.handle = handle
        self.reason = reason
        super().__init__(f"Could not fetch submissions for {handle}: {reason}")


def start_of_day(now: datetime) -> int:
    """Unix timestamp of midnight of `now`'s day, in `now`'s timezone (host local if naive)."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    tz = midnight.tzinfo
    if tz is not None and hasattr(tz, "localize"):
        # pytz zones need localize() to pick the offset in effect at midnight.
        midnight = tz.localize(midnight.replace(tzinfo=None))
    return int(midnight.timestamp())


def _is_submission(submission) -> bool:
    return isinstance(submission, dict) and isinstance(submission.get("problem", {}), dict)


def count_solved_since(submissions: Iterable[dict], cutoff: int) -> int:
    """Counts distinct problems with an accepted submission created at or after `cutoff`."""
    solved = set()
    for submission in submissions:
        if submission.get("verdict") != constants.ACCEPTED_VERDICT:
            continue
        if submission.get("creationTimeSeconds", 0) < cutoff:
            continue
        problem = submission.get("problem") or {}
        solved.add(f"{problem.get('contestId')}-{problem.get('index')}")
    return len(solved)


class CodeforcesClient:
    """Async client for the public Codeforces API."""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, timezone: Optional[str] = None):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=constants.HTTP_TIMEOUT_SECONDS)
        self._tz = pytz.timezone(timezone) if timezone else None

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def now(self) -> datetime:
        if self._tz is not None:
            return datetime.now(self._tz)
        return datetime.now()

    async def get_user_status(self, handle: str) -> list:
        """Fetches the full submission history of a handle, newest first."""
        url = f"{constants.CODEFORCES_API_URL}/user.status"
        try:
            response = await self._client.get(url, params={"handle": handle})
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Codeforces request failed for {handle}: {e}")
            raise InvalidHandleOrUpstream(handle, str(e)) from e

        # Unknown handles come back as HTTP 400 with a JSON "FAILED" body, so read it before the status code.
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Codeforces returned a non-JSON reply for {handle} (HTTP {response.status_code})")
            raise InvalidHandleOrUpstream(handle, f"non-JSON reply, HTTP {response.status_code}") from e

        if not isinstance(data, dict) or data.get("status") != "OK":
            comment = data.get("comment", "unknown error") if isinstance(data, dict) else "malformed reply"
            logger.warning(f"Codeforces API returned status for {handle}: {comment}")
            raise InvalidHandleOrUpstream(handle, comment)

        result = data.get("result", [])
        if not isinstance(result, list) or not all(_is_submission(s) for s in result):
            logger.warning(f"Codeforces API returned a malformed submission list for {handle}")
            raise InvalidHandleOrUpstream(handle, "malformed submission list")
        return result

    async def get_today_solved_count(self, handle: str, now: Optional[datetime] = None) -> int:
        """Number of distinct problems `handle` got accepted since local midnight."""
        submissions = await self.get_user_status(handle)
        cutoff = start_of_day(now or self.now())
        return count_solved_since(submissions, cutoff)
