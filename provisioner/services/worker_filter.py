"""Narrow the worker pool by domain, language and location."""

from collections.abc import Iterable, Sequence

from ..models.worker import Worker


def _folded(values: Iterable[str]) -> set[str]:
    return {v.casefold() for v in values if v}


def filter_workers(
    pool: Sequence[Worker],
    domains: Iterable[str] = (),
    langs: Iterable[str] = (),
    locations: Iterable[str] = (),
) -> list[Worker]:
    """
    Return the workers matching every non-empty criteria list.

    Within one dimension any listed value matches (case-insensitive); an
    empty list places no constraint. Pool order is preserved.
    """
    wanted_domains = _folded(domains)
    wanted_langs = _folded(langs)
    wanted_locations = _folded(locations)

    def matches(worker: Worker) -> bool:
        if wanted_domains and not wanted_domains & _folded(worker.domain):
            return False
        if wanted_langs and not wanted_langs & _folded(worker.lang):
            return False
        if wanted_locations and worker.location.casefold() not in wanted_locations:
            return False
        return True

    return [w for w in pool if matches(w)]
