"""Interval overlap and the greedy rank-ordered overlap removal applied within one target."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import FormatError
from .hits import Hit


@dataclass
class Outcome:
    """
    Verdict for one hit of a group.

    overlap_count is the number of lower ranked hits this hit removed; it is
    only meaningful for kept hits and is -1 for removed ones. blocked_by is the
    index (within the group) of the hit that caused the removal.
    """
    kept: bool = True
    blocked_by: int | None = None
    overlap_count: int = 0


def get_overlap(start1: int, end1: int, start2: int, end2: int) -> int:
    """
    Number of residues shared by start1..end1 and start2..end2 (inclusive, 1-based).

    Both intervals must already be ascending. Returns 0 when they do not overlap.
    """
    if start1 > end1:
        raise ValueError(f"start1 > end1 ({start1} > {end1})")
    if start2 > end2:
        raise ValueError(f"start2 > end2 ({start2} > {end2})")
    if start1 > start2:
        start1, end1, start2, end2 = start2, end2, start1, end1
    if end1 < start2:
        return 0
    return min(end1, end2) - start2 + 1


def hit_interval(hit: Hit) -> tuple[int, int]:
    """
    Ascending (start, end) for a hit; minus strand coordinates are reported high to low.

    Raises FormatError when the coordinate order contradicts the strand.
    """
    start, end = (hit.end, hit.start) if hit.strand == "-" else (hit.start, hit.end)
    if start > end:
        raise FormatError(
            f"coordinates {hit.start}..{hit.end} do not agree with strand {hit.strand} at line: {hit.raw_text}"
        )
    return start, end


def clans_match(clan_scoped: bool, clan1: str | None, clan2: str | None) -> bool:
    """True when clan scoping is off, or both hits belong to the same (known) clan."""
    if not clan_scoped:
        return True
    if clan1 is None or clan2 is None:
        return False
    return clan1 == clan2


def find_blocker(
    hits: Sequence[Hit],
    outcomes: Sequence[Outcome],
    idx: int,
    noverlap: int = 1,
    maxkeep: bool = False,
    clan_scoped: bool = False,
) -> int | None:
    """Index of the first better ranked hit that removes hits[idx], or None if it survives."""
    hit = hits[idx]
    interval = None
    for j in range(idx):
        prev = hits[j]
        if prev.strand != hit.strand:
            continue
        if not clans_match(clan_scoped, hit.clan, prev.clan):
            continue
        # with maxkeep only hits that are still kept can remove others
        if maxkeep and not outcomes[j].kept:
            continue
        # coordinates are only checked once the hit is compared with another
        if interval is None:
            interval = hit_interval(hit)
        if get_overlap(*interval, *hit_interval(prev)) >= noverlap:
            return j
    return None


def resolve(
    hits: Sequence[Hit],
    noverlap: int = 1,
    maxkeep: bool = False,
    clan_scoped: bool = False,
) -> list[Outcome]:
    """
    Decide which hits of one target survive.

    hits must be ordered best to worst. Each hit is compared against every
    better ranked hit on the same strand (and in the same clan when
    clan_scoped); the first one overlapping it by at least noverlap residues
    removes it. By default a removed hit still removes the hits below it,
    exactly like cmscan does. With maxkeep only kept hits can remove others,
    so more hits may survive. Verdicts are never revisited.
    """
    outcomes: list[Outcome] = []
    for idx in range(len(hits)):
        blocker = find_blocker(hits, outcomes, idx, noverlap, maxkeep, clan_scoped)
        if blocker is None:
            outcomes.append(Outcome())
        else:
            outcomes[blocker].overlap_count += 1
            outcomes.append(Outcome(kept=False, blocked_by=blocker, overlap_count=-1))
    return outcomes
