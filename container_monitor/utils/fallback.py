"""
Ordered "first success wins" helper.

Policy providers, volume enumerators and notification backends are all
configured as priority lists; each chain is walked with first_success().
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar

P = TypeVar("P")
R = TypeVar("R")


@dataclass
class FallbackResult(Generic[P, R]):
    provider: P
    result: R
    attempts: int


def _is_not_none(result) -> bool:
    return result is not None


def describe_provider(provider) -> str:
    return getattr(provider, "name", None) or type(provider).__name__


def first_success(
    providers: Iterable[P],
    attempt: Callable[[P], R],
    accept: Callable[[R], bool] = _is_not_none,
    label: str = "fallback chain",
) -> Optional[FallbackResult[P, R]]:
    """
    Call attempt(provider) for each provider in order.

    Exceptions from a provider are logged and the next provider is tried.
    Returns the first result accepted by ``accept`` together with the
    provider that produced it, or None when every provider failed.
    """
    attempts = 0
    for provider in providers:
        attempts += 1
        name = describe_provider(provider)
        try:
            result = attempt(provider)
        except Exception as e:
            logging.warning(
                f"{label}: {name} failed: {e}",
                extra={"operation": "fallback_attempt", "provider": name},
            )
            continue

        if accept(result):
            logging.debug(f"{label}: {name} succeeded after {attempts} attempt(s)")
            return FallbackResult(provider=provider, result=result, attempts=attempts)

        logging.debug(f"{label}: {name} had no result, trying next")

    if attempts == 0:
        logging.warning(f"{label}: no providers configured")
    return None
