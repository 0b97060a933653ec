"""Fingerprints for a component's dependency closure."""

from __future__ import annotations

import hashlib
import logging
from functools import lru_cache
from typing import Sequence

from ..models import Component

logger = logging.getLogger("buildcache.fingerprint")

TAG_SEPARATOR = "|"


def dependency_closure(
    component: Component, build_order: Sequence[Component]
) -> list[Component]:
    """Return every entry of *build_order* that precedes *component*.

    The scan stops at the first entry sharing the component's name and
    version. When no entry matches, the whole build order is returned.
    """

    closure: list[Component] = []
    for dep in build_order:
        if dep.matches(component):
            return closure
        closure.append(dep)
    logger.debug(
        "%s %s not found in build order; closure spans all %d entries",
        component.name,
        component.version,
        len(closure),
    )
    return closure


def fingerprint_input(component: Component, build_order: Sequence[Component]) -> str:
    shasums = [dep.shasum for dep in dependency_closure(component, build_order)]
    shasums.append(component.shasum)
    return TAG_SEPARATOR.join(shasums)


def compute_tag(component: Component, build_order: Sequence[Component]) -> str:
    """Return ``<name>-<sha256>`` over the closure shasums and the component's own."""

    digest = hashlib.sha256(
        fingerprint_input(component, build_order).encode("utf-8")
    ).hexdigest()
    return f"{component.name}-{digest}"


class FingerprintResolver:
    """Memoize tags for recently seen (component, build order) pairs."""

    def __init__(self, maxsize: int = 256) -> None:
        self._cached_tag = lru_cache(maxsize=maxsize)(_tag_for)

    def tag(self, component: Component, build_order: Sequence[Component]) -> str:
        return self._cached_tag(component, tuple(build_order))

    def cache_info(self):
        return self._cached_tag.cache_info()


def _tag_for(component: Component, build_order: tuple[Component, ...]) -> str:
    return compute_tag(component, build_order)


default_resolver = FingerprintResolver()
