import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple

import aiohttp

from ..exceptions import BackendUnavailableError

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, Any]]


def mask_credentials(url: str) -> str:
    """Masque les credentials dans l'URL pour l'affichage."""
    if "@" in url and "://" in url:
        protocol, rest = url.split("://", 1)
        host_and_path = rest.split("@", 1)[1]
        return f"{protocol}://***:***@{host_and_path}"
    return url


def _decode(text: str) -> Dict[str, Any]:
    if not text:
        return {}
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        return {"raw": text}
    return decoded if isinstance(decoded, dict) else {"raw": decoded}


class ElasticsearchClient:
    """
    Client HTTP Elasticsearch minimal basé sur aiohttp.

    Every call returns ``(status_code, body)``; only transport failures raise,
    as ``BackendUnavailableError``. Classification of status codes belongs to
    the callers.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        logger.info(f"ElasticsearchClient configured for {mask_credentials(self.base_url)}")

    async def initialize(self):
        """Initialise la session HTTP"""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.headers,
            )
            logger.info("🚀 HTTP session initialized")

    async def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Response:
        if self.session is None:
            await self.initialize()

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            async with self.session.request(method, url, json=body) as response:
                text = await response.text()
                return response.status, _decode(text)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"HTTP error during {method} {path}: {type(e).__name__}: {e}")
            raise BackendUnavailableError(f"Error communicating with database: {e}") from e

    async def get(self, path: str) -> Response:
        return await self.request("GET", path)

    async def post(self, path: str, body: Optional[Dict[str, Any]]) -> Response:
        return await self.request("POST", path, body)

    async def put(self, path: str, body: Dict[str, Any]) -> Response:
        return await self.request("PUT", path, body)

    async def info(self) -> Dict[str, Any]:
        """Informations du cluster ; lève si le cluster ne répond pas 200."""
        status, body = await self.get("/")
        if status != 200:
            raise BackendUnavailableError(
                f"Elasticsearch returned status {status}",
                backend_status=status,
                backend_error=body.get("error"),
            )
        return body

    async def close(self):
        """Ferme la session HTTP"""
        if self.session and not self.session.closed:
            await self.session.close()
            logger.info("✅ HTTP session closed")
        self.session = None


async def wait_until_ready(
    readiness_check: Callable[[], Awaitable[Any]],
    delays: Sequence[float],
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Any:
    """Exécute ``readiness_check`` jusqu'au succès, en attendant ``delays[i]`` entre chaque tentative.

    There are ``len(delays) + 1`` attempts in total. The last failure is
    re-raised as ``BackendUnavailableError`` once the sequence is exhausted.
    """
    attempts = len(delays) + 1
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        start = time.perf_counter()
        try:
            result = await readiness_check()
            logger.info(f"✅ Elasticsearch ready after {attempt} attempt(s) ({(time.perf_counter() - start) * 1000:.0f}ms)")
            return result
        except BackendUnavailableError as e:
            last_error = e
            if attempt == attempts:
                break
            delay = delays[attempt - 1]
            logger.warning(f"⏱️ Elasticsearch not ready (attempt {attempt}/{attempts}): {e.message}; retrying in {delay}s")
            await sleep(delay)

    logger.error(f"❌ Elasticsearch still unavailable after {attempts} attempts")
    raise BackendUnavailableError(
        f"Elasticsearch unavailable after {attempts} attempts: {last_error}",
        backend_status=getattr(last_error, "backend_status", None),
        backend_error=getattr(last_error, "backend_error", None),
    ) from last_error
