"""
Fan-out of site state to interested observers.

After a mutating command the dispatcher broadcasts the site's new state.
Observers register with a domain pattern and only hear about matching
domains. Patterns follow browser match-pattern host rules:

- ``example.test`` matches exactly that domain
- ``*.example.test`` matches example.test and any subdomain
- ``*`` matches everything
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from hidesync.core.document.models import SiteState

logger = logging.getLogger(__name__)


class StateUpdate(BaseModel):
    """Message delivered to observers after a site changes."""

    type: Literal["STATE_UPDATED"] = "STATE_UPDATED"
    domain: str
    site: SiteState


Observer = Callable[[StateUpdate], Awaitable[None] | None]


def domain_matches(pattern: str, domain: str) -> bool:
    """
    Check whether a domain falls under an observer's pattern.

    Args:
        pattern: Exact domain, ``*.domain``, or ``*``
        domain: Domain being broadcast

    Returns:
        True if the observer should receive the update
    """
    pattern = pattern.lower()
    domain = domain.lower()
    if pattern == "*":
        return True
    if pattern.startswith("*."):
        base = pattern[2:]
        return domain == base or domain.endswith("." + base)
    return domain == pattern


@dataclass
class _Subscription:
    observer: Observer
    pattern: str


class StateBroadcaster:
    """
    Registry of observers plus the broadcast operation.

    Example:
        >>> broadcaster = StateBroadcaster()
        >>> unsubscribe = broadcaster.subscribe(print, "*.example.test")
        >>> await broadcaster.broadcast("example.test", site)
        1
        >>> unsubscribe()
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    def subscribe(self, observer: Observer, pattern: str = "*") -> Callable[[], None]:
        """
        Register an observer.

        Args:
            observer: Callable receiving a StateUpdate; may be async
            pattern: Domain pattern the observer is interested in

        Returns:
            A function that removes the subscription
        """
        subscription = _Subscription(observer, pattern)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._subscriptions)

    async def broadcast(self, domain: str, site: SiteState) -> int:
        """
        Deliver a site's state to every matching observer.

        A failing observer is logged and skipped; it never affects the
        command that triggered the broadcast or the other observers.

        Returns:
            Number of observers that received the update
        """
        delivered = 0
        for subscription in list(self._subscriptions):
            if not domain_matches(subscription.pattern, domain):
                continue
            update = StateUpdate(domain=domain, site=site.model_copy(deep=True))
            try:
                result = subscription.observer(update)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.warning("Observer failed for %s", domain, exc_info=True)
                continue
            delivered += 1
        return delivered
