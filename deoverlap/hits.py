"""
Normalize one row of tabular (--tblout) search output into a Hit.

Supported producers and their 1-based columns:

  cmsearch   target 1, model 3, seq from/to 8/9, strand 10, score 15, E-value 16
  cmscan     same columns as cmsearch with target and model swapped (model 1, target 3)
  nhmmer     target 1, model 3, ali from/to 7/8, strand 12, E-value 13, score 14
  hmmsearch  target 1, model 3, full-sequence E-value/score 5/6,
             best 1 domain E-value/score 8/9 (--besthmm)

hmmsearch rows carry no coordinates. Every hmmsearch hit is placed at 1..1 on
the + strand so that any two hits to the same target overlap, which leaves at
most one hit per target after de-overlapping.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, NamedTuple

from .config import CMSCAN, CMSEARCH, HMMSEARCH, NHMMER, Options
from .errors import FormatError

# Rfam model accession in the target accession column means cmscan output
RFAM_ACC_RE = re.compile(r"^RF\d+")


@dataclass(frozen=True)
class Hit:
    target: str
    model: str
    model_accession: str
    start: int
    end: int
    strand: str
    score: float
    evalue: float
    raw_text: str
    clan: str | None = None


class Columns(NamedTuple):
    """0-based field indices for one tblout format; None where the format has no such column."""
    min_fields: int
    target: int
    target_accession: int
    model: int
    model_accession: int
    start: int | None
    end: int | None
    strand: int | None
    score: int
    evalue: int


FORMATS: dict[str, Columns] = {
    CMSEARCH: Columns(18, 0, 1, 2, 3, 7, 8, 9, 14, 15),
    CMSCAN: Columns(18, 2, 3, 0, 1, 7, 8, 9, 14, 15),
    NHMMER: Columns(16, 0, 1, 2, 3, 6, 7, 11, 13, 12),
    HMMSEARCH: Columns(19, 0, 1, 2, 3, None, None, None, 5, 4),
}

# hmmsearch "best 1 domain" score and E-value
HMMSEARCH_BEST_DOMAIN = FORMATS[HMMSEARCH]._replace(score=8, evalue=7)


def columns_for(fmt: str, best_domain: bool = False) -> Columns:
    if best_domain:
        return HMMSEARCH_BEST_DOMAIN
    return FORMATS[fmt]


def _number(fields: list[str], idx: int, cast, what: str, line: str):
    try:
        return cast(fields[idx])
    except ValueError:
        raise FormatError(f"non-numeric {what} {fields[idx]!r} in {len(fields)}-column row: {line}") from None


def normalize(
    line: str,
    fmt: str = CMSEARCH,
    best_domain: bool = False,
    assert_cmsearch: bool = False,
    clan: str | None = None,
) -> Hit:
    """Parse one tblout row. The row text is kept verbatim (minus its line terminator) for output."""
    raw = line.rstrip("\r\n")
    fields = raw.split()
    cols = columns_for(fmt, best_domain)
    if len(fields) < cols.min_fields:
        raise FormatError(f"found less than {cols.min_fields} columns in {fmt} tabular output at line: {raw}")

    if fmt == CMSEARCH and not assert_cmsearch and RFAM_ACC_RE.match(fields[cols.target_accession]):
        raise FormatError(
            f"target accession {fields[cols.target_accession]} looks like an Rfam accession suggesting this is "
            "cmscan tblout output, did you mean to use --cmscan? "
            "Use --fcmsearch to assert this is cmsearch output and avoid this error. "
            f"Line: {raw}"
        )

    if cols.start is None:
        start, end, strand = 1, 1, "+"
    else:
        start = _number(fields, cols.start, int, "start coordinate", raw)
        end = _number(fields, cols.end, int, "end coordinate", raw)
        strand = fields[cols.strand]
        if strand not in ("+", "-"):
            raise FormatError(f"strand must be + or -, got {strand!r} at line: {raw}")

    return Hit(
        target=fields[cols.target],
        model=fields[cols.model],
        model_accession=fields[cols.model_accession],
        start=start,
        end=end,
        strand=strand,
        score=_number(fields, cols.score, float, "bit score", raw),
        evalue=_number(fields, cols.evalue, float, "E-value", raw),
        raw_text=raw,
        clan=clan,
    )


def read_hits(lines: Iterable[str], options: Options, clans: dict[str, str] | None = None) -> Iterator[Hit]:
    """Normalize a sorted tblout stream. Blank lines are skipped; comment lines are an error."""
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("#"):
            raise FormatError(
                "found line that begins with #, input should have these lines removed "
                f"and be sorted by the first column: {stripped}"
            )
        hit = normalize(line.lstrip(), options.fmt, options.best_domain, options.assert_cmsearch)
        if clans is not None and hit.model in clans:
            hit = replace(hit, clan=clans[hit.model])
        yield hit
