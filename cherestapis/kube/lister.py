"""Best-effort listing of the Services and Ingresses belonging to a workspace.

Discovery never fails the request: an API error or a timeout is logged and
yields an empty list, so a missing cluster object only thins out the runtime
view.  Paginated results are fully drained before returning.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any

from anyio import to_thread
from kubernetes import client
from kubernetes.client.rest import ApiException
from loguru import logger
from urllib3.exceptions import HTTPError

DEFAULT_PAGE_SIZE = 1000
DEFAULT_REQUEST_TIMEOUT = 5.0


class ClusterObjectLister:
    """Lists workspace objects through the kubernetes client.

    The kubernetes client is synchronous; each listing runs in a worker
    thread.  ``core_api`` and ``networking_api`` only need the
    ``list_namespaced_service`` / ``list_namespaced_ingress`` methods, which
    lets tests pass lightweight fakes.
    """

    def __init__(
        self,
        core_api: client.CoreV1Api,
        networking_api: client.NetworkingV1Api,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._core = core_api
        self._networking = networking_api
        self._page_size = page_size
        self._request_timeout = request_timeout

    async def list_services(self, namespace: str, selector: str) -> list[client.V1Service]:
        return await self._list("services", self._core.list_namespaced_service, namespace, selector)

    async def list_ingresses(self, namespace: str, selector: str) -> list[client.V1Ingress]:
        return await self._list("ingresses", self._networking.list_namespaced_ingress, namespace, selector)

    async def _list(
        self,
        kind: str,
        list_func: Callable[..., Any],
        namespace: str,
        selector: str,
    ) -> list[Any]:
        try:
            items = await to_thread.run_sync(partial(self._drain, list_func, namespace, selector))
        except (ApiException, HTTPError) as exc:
            logger.error("Problem while retrieving the workspace {} in {}: {}", kind, namespace, exc)
            return []
        logger.debug("Listed {} workspace {} (selector={!r})", len(items), kind, selector)
        return items

    def _drain(self, list_func: Callable[..., Any], namespace: str, selector: str) -> list[Any]:
        """Follow ``_continue`` tokens until the listing is complete.

        A token the server already handed out ends the listing with what was
        collected so far.
        """
        items: list[Any] = []
        token: str | None = None
        seen: set[str] = set()
        while True:
            kwargs: dict[str, Any] = {
                "label_selector": selector,
                "limit": self._page_size,
                "timeout_seconds": max(1, int(self._request_timeout)),
                "_request_timeout": self._request_timeout,
            }
            if token:
                kwargs["_continue"] = token
            page = list_func(namespace, **kwargs)
            items.extend(page.items or [])
            token = page.metadata._continue if page.metadata else None
            if not token:
                return items
            if token in seen:
                logger.warning("Listing returned a repeated continue token {!r}; stopping pagination", token)
                return items
            seen.add(token)
