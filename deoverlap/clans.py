"""Clan membership: which models are related enough that their overlaps should be resolved."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .errors import ClanFileError


def parse_clan_lines(lines: Iterable[str], source: str = "<clan info>") -> dict[str, str]:
    """
    Build model name -> clan name from clan info lines.

    Each line is a clan name followed by the models in that clan:

        CL00111 SSU_rRNA_bacteria SSU_rRNA_archaea SSU_rRNA_eukarya

    Lines starting with # are ignored. A model listed twice is an error.
    """
    clans: dict[str, str] = {}
    for lineno, line in enumerate(lines, start=1):
        if line.startswith("#"):
            continue
        parts = line.split()
        if not parts:
            continue
        clan = parts[0]
        for model in parts[1:]:
            if model in clans:
                raise ClanFileError(
                    f"parsing clan info file {source}, read model {model} more than once "
                    f"(line {lineno}, already in clan {clans[model]})"
                )
            clans[model] = clan
    return clans


def load_clan_file(path: Path) -> dict[str, str]:
    with open(path) as f:
        return parse_clan_lines(f, source=str(path))
