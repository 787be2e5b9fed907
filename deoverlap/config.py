"""Run options shared by the normalizer, sorter and driver."""
from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigError

CMSEARCH = "cmsearch"
CMSCAN = "cmscan"
NHMMER = "nhmmer"
HMMSEARCH = "hmmsearch"

FORMAT_NAMES = (CMSEARCH, CMSCAN, NHMMER, HMMSEARCH)


@dataclass(frozen=True)
class Options:
    fmt: str = CMSEARCH
    rank_by_score: bool = False
    noverlap: int = 1
    maxkeep: bool = False
    best_domain: bool = False
    assert_cmsearch: bool = False
    verbose: bool = False
    debug: bool = False
    keep_intermediate: bool = False

    def validate(self) -> "Options":
        if self.fmt not in FORMAT_NAMES:
            raise ConfigError(f"unknown tblout format {self.fmt!r}, expected one of {', '.join(FORMAT_NAMES)}")
        if self.best_domain and self.fmt != HMMSEARCH:
            raise ConfigError("--besthmm requires --hmmsearch")
        if self.noverlap < 1:
            raise ConfigError(f"--noverlap must be at least 1, got {self.noverlap}")
        return self


def pick_format(cmscan: bool = False, nhmmer: bool = False, hmmsearch: bool = False) -> str:
    """Map the mutually exclusive format flags to one format name (cmsearch when none is set)."""
    chosen = [name for name, flag in ((CMSCAN, cmscan), (NHMMER, nhmmer), (HMMSEARCH, hmmsearch)) if flag]
    if len(chosen) > 1:
        raise ConfigError(
            " and ".join(f"--{name}" for name in chosen) + " cannot be used in combination. Pick one."
        )
    return chosen[0] if chosen else CMSEARCH
