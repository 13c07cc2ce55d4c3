"""ESI Entity Resolver - looks up current display names from the EVE Swagger Interface.

Invariants:
    - One GET per lookup: /latest/{characters|corporations|alliances}/{id}/
    - Connection errors, timeouts, non-2xx and payloads without a string "name"
      all map to UpstreamDependencyError(service="esi")
    - No retries: a failed lookup aborts ban creation immediately

Design Decisions:
    - Wrapper over a shared httpx.AsyncClient: one connection pool per process,
      created in the lifespan and closed on shutdown
    - Transport injectable so tests drive it with httpx.MockTransport
"""

import logging

import httpx

from app.core.domain_types import EntityCategory, EntityId
from app.core.errors import ErrorContext, UpstreamDependencyError

logger = logging.getLogger(__name__)

SERVICE_NAME = "esi"


class EsiEntityResolver:
    """Resolves entity names through the public (unauthenticated) ESI endpoints."""

    def __init__(
        self,
        base_url: str = "https://esi.evetech.net",
        timeout_seconds: float = 10.0,
        user_agent: str = "waitlist-bans",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            transport=transport,
        )

    async def resolve_name(
        self, category: EntityCategory, entity_id: EntityId,
    ) -> str:
        path = f"/latest/{category.esi_path}/{entity_id}/"
        context = ErrorContext(entity_id=entity_id)
        try:
            response = await self.client.get(path)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"ESI returned {e.response.status_code} for {path}",
                extra={"entity_id": entity_id, "status_code": e.response.status_code},
            )
            raise UpstreamDependencyError(
                f"HTTP {e.response.status_code} for {category.value} {entity_id}",
                SERVICE_NAME, context,
            )
        except httpx.HTTPError as e:
            logger.error(
                f"ESI request failed for {path}: {e}",
                extra={"entity_id": entity_id},
            )
            raise UpstreamDependencyError(
                f"{type(e).__name__} for {category.value} {entity_id}",
                SERVICE_NAME, context,
            )
        except ValueError:
            raise UpstreamDependencyError(
                "response body is not JSON", SERVICE_NAME, context,
            )

        name = payload.get("name") if isinstance(payload, dict) else None
        if not isinstance(name, str) or not name:
            raise UpstreamDependencyError(
                "response is missing a name", SERVICE_NAME, context,
            )
        return name

    async def aclose(self) -> None:
        await self.client.aclose()


# Singleton (initialized on startup)
esi_resolver: EsiEntityResolver | None = None


def init_esi(**kwargs) -> EsiEntityResolver:
    global esi_resolver
    esi_resolver = EsiEntityResolver(**kwargs)
    return esi_resolver


async def close_esi() -> None:
    global esi_resolver
    if esi_resolver:
        await esi_resolver.aclose()
    esi_resolver = None


def get_entity_resolver() -> EsiEntityResolver:
    """FastAPI dependency for the shared ESI resolver."""
    if not esi_resolver:
        raise RuntimeError("ESI client not initialized")
    return esi_resolver
