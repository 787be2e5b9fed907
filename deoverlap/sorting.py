"""Pre-sort a tblout file with the external sort utility: by target, then best to worst hit."""
from __future__ import annotations

import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Callable

from .config import CMSCAN, HMMSEARCH, NHMMER, Options
from .errors import ConfigError

SPACES_RE = re.compile(r"  +")

# one byte per character, so rows of any encoding pass through unchanged
TBLOUT_ENCODING = "latin-1"


def sort_keys(options: Options) -> list[str]:
    """sort(1) key arguments: target name, then the rank key, then the other key as tie-break."""
    if options.fmt == HMMSEARCH:
        target, evalue, score = 1, (8 if options.best_domain else 5), (9 if options.best_domain else 6)
    elif options.fmt == NHMMER:
        target, evalue, score = 1, 13, 14
    elif options.fmt == CMSCAN:
        target, evalue, score = 3, 16, 15
    else:
        target, evalue, score = 1, 16, 15

    evalue_key = f"{evalue},{evalue}g"
    score_key = f"{score},{score}rn"
    ranked = [score_key, evalue_key] if options.rank_by_score else [evalue_key, score_key]
    keys = [f"{target},{target}"] + ranked
    return [arg for key in keys for arg in ("-k", key)]


def sort_command(options: Options) -> list[str]:
    return ["sort"] + sort_keys(options)


def _check_sort() -> None:
    if shutil.which("sort") is None:
        raise ConfigError("sort not in PATH, it is required to pre-sort tblout files")


def sort_tblout(
    tblout: Path,
    sorted_path: Path | None = None,
    options: Options = Options(),
    report: Callable[[str], None] | None = None,
) -> Path:
    """
    Write tblout rows sorted for de-overlapping to sorted_path (default: <tblout>.sort).

    Comment lines are dropped and runs of spaces collapsed to one before sorting.
    """
    _check_sort()
    sorted_path = sorted_path or tblout.with_name(tblout.name + ".sort")
    cmd = sort_command(options)
    if options.debug and report is not None:
        report(f"Running cmd: {' '.join(cmd)} < {tblout} > {sorted_path}")

    # C collation so grouping by target does not depend on the locale
    env = {**os.environ, "LC_ALL": "C"}
    with open(tblout, encoding=TBLOUT_ENCODING) as fin, open(sorted_path, "w", encoding=TBLOUT_ENCODING) as fout:
        proc = subprocess.Popen(cmd, stdin=subprocess.PIPE, stdout=fout, encoding=TBLOUT_ENCODING, env=env)
        try:
            for line in fin:
                if line.startswith("#"):
                    continue
                proc.stdin.write(SPACES_RE.sub(" ", line))
        finally:
            proc.stdin.close()
            returncode = proc.wait()
    if returncode != 0:
        raise subprocess.CalledProcessError(returncode, cmd)
    return sorted_path
