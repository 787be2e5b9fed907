"""
Stream sorted hits target by target, resolve overlaps within each target and
write the surviving rows.

Only the current target's hits are held in memory. A target is flushed as
soon as a row for a different target is read, and must not show up again.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, TextIO

from .config import Options
from .errors import OrderingError
from .hits import Hit
from .overlap import Outcome, resolve

Report = Callable[[str], None]


@dataclass
class TargetGroup:
    """Hits to one target, in the order read."""
    target: str
    hits: list[Hit] = field(default_factory=list)

    def add(self, hit: Hit, rank_by_score: bool) -> None:
        if self.hits:
            prev = self.hits[-1]
            if rank_by_score and hit.score > prev.score:
                raise OrderingError(
                    f"found lines with same target [{hit.target}] incorrectly sorted by score, "
                    "did you sort by sequence name and score?"
                )
            if not rank_by_score and hit.evalue < prev.evalue:
                raise OrderingError(
                    f"found lines with same target [{hit.target}] incorrectly sorted by E-value, "
                    "did you sort by sequence name and E-value?"
                )
        self.hits.append(hit)

    def resolve(self, options: Options, clan_scoped: bool) -> list[Outcome]:
        return resolve(self.hits, options.noverlap, options.maxkeep, clan_scoped)


def _report_removals(group: TargetGroup, outcomes: list[Outcome], options: Options, report: Report) -> None:
    for hit, outcome in zip(group.hits, outcomes):
        if outcome.kept:
            continue
        blocker = group.hits[outcome.blocked_by]
        if options.debug:
            report(
                f"target: {hit.target} model: {hit.model}: removing {hit.start}..{hit.end}, "
                f"it overlapped with {blocker.start}..{blocker.end}"
            )
        if options.verbose:
            report(f"REMOVED                    {hit.raw_text}")
            report(f"BECAUSE-IT-OVERLAPPED-WITH {blocker.raw_text}")


def flush_group(
    group: TargetGroup,
    out: TextIO,
    options: Options,
    clan_scoped: bool = False,
    report: Report | None = None,
) -> tuple[int, int]:
    """Resolve one target, write its kept rows in input order. Returns (kept, removed)."""
    outcomes = group.resolve(options, clan_scoped)
    if report is not None:
        _report_removals(group, outcomes, options, report)
    nkept = 0
    for hit, outcome in zip(group.hits, outcomes):
        if not outcome.kept:
            continue
        nkept += 1
        out.write(hit.raw_text + "\n")
        if options.verbose and report is not None:
            report(f"NUM-OVERLAPS:{outcome.overlap_count} {hit.raw_text}")
    return nkept, len(group.hits) - nkept


def deoverlap_hits(
    hits: Iterable[Hit],
    out: TextIO,
    options: Options,
    clan_scoped: bool = False,
    report: Report | None = None,
) -> tuple[int, int]:
    """
    Remove overlapping hits from a stream sorted by target, then by rank key.

    Raises OrderingError when a target reappears after its group was flushed,
    or when the rank key gets better within a target.
    Returns total (kept, removed).
    """
    nkept = nremoved = 0
    finished: set[str] = set()
    group: TargetGroup | None = None

    for hit in hits:
        if hit.target in finished:
            raise OrderingError(
                f"found line with target {hit.target} previously output, did you sort by sequence name?"
            )
        if group is not None and group.target != hit.target:
            kept, removed = flush_group(group, out, options, clan_scoped, report)
            nkept += kept
            nremoved += removed
            finished.add(group.target)
            group = None
        if group is None:
            group = TargetGroup(hit.target)
        group.add(hit, options.rank_by_score)

    if group is not None:
        kept, removed = flush_group(group, out, options, clan_scoped, report)
        nkept += kept
        nremoved += removed

    return nkept, nremoved
