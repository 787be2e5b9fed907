"""Click CLI: remove lower scoring overlaps from cmsearch, cmscan, nhmmer or hmmsearch --tblout files."""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import click

from .clans import load_clan_file
from .config import Options, pick_format
from .driver import deoverlap_hits
from .errors import DeoverlapError
from .hits import read_hits
from .sorting import TBLOUT_ENCODING, sort_tblout


def _read_list_file(list_file: Path) -> list[Path]:
    """Paths listed one per line; blank and # lines skipped. Each must exist and be non-empty."""
    files = []
    with open(list_file) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            path = Path(line)
            if not path.exists():
                raise click.ClickException(f"file {path} read from {list_file} does not exist")
            if path.stat().st_size == 0:
                raise click.ClickException(f"file {path} read from {list_file} is empty")
            files.append(path)
    return files


def deoverlap_file(
    tblout: Path,
    options: Options,
    clans: dict[str, str] | None = None,
) -> tuple[Path, int, int]:
    """Sort one tblout file, write its kept hits to <tblout>.deoverlapped. Returns (output, kept, removed)."""
    if not tblout.exists():
        raise click.ClickException(f"tblout file {tblout} does not exist")
    if tblout.stat().st_size == 0:
        raise click.ClickException(f"tblout file {tblout} is empty")

    report = click.echo if (options.verbose or options.debug) else None
    sorted_path = tblout.with_name(tblout.name + ".sort")
    output = tblout.with_name(tblout.name + ".deoverlapped")
    try:
        sort_tblout(tblout, sorted_path, options, report)
        with open(sorted_path, encoding=TBLOUT_ENCODING) as fin, open(output, "w", encoding=TBLOUT_ENCODING) as out:
            hits = read_hits(fin, options, clans)
            nkept, nremoved = deoverlap_hits(hits, out, options, clans is not None, report)
    finally:
        if not options.keep_intermediate:
            sorted_path.unlink(missing_ok=True)
    return output, nkept, nremoved


@click.command()
@click.argument("tblout", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option("-l", "--list", "is_list", is_flag=True,
              help="TBLOUT is a list of tblout files, one per line, not a single tblout file.")
@click.option("-s", "--score", "rank_by_score", is_flag=True,
              help="Rank hits by bit score [default: rank by E-value].")
@click.option("-d", "--debug", is_flag=True, help="Print extra information, including each removal.")
@click.option("-v", "--verbose", is_flag=True, help="Print all removed and kept hits.")
@click.option("--noverlap", default=1, show_default=True, type=click.IntRange(min=1),
              help="Define an overlap as >= N overlapping residues.")
@click.option("--nhmmer", is_flag=True, help="tblout files are from nhmmer v3.x.")
@click.option("--hmmsearch", is_flag=True, help="tblout files are from hmmsearch v3.x.")
@click.option("--cmscan", is_flag=True, help="tblout files are from cmscan v1.1x, not cmsearch.")
@click.option("--fcmsearch", "assert_cmsearch", is_flag=True,
              help="Assert tblout files are cmsearch, not cmscan.")
@click.option("--besthmm", "best_domain", is_flag=True,
              help="With --hmmsearch, rank by E-value/score of the best single domain, not the full sequence.")
@click.option("--clanin", "clan_file", default=None, type=click.Path(path_type=Path, exists=True, dir_okay=False),
              help="Only remove overlaps within clans, read clan info from this file [default: remove all overlaps].")
@click.option("--maxkeep", is_flag=True,
              help="Keep hits that only overlap with other hits that are not kept "
                   "[default: remove all hits with a higher scoring overlap].")
@click.option("--dirty", "keep_intermediate", is_flag=True,
              help="Keep intermediate files (sorted tblout files).")
def main(
    tblout: Path,
    is_list: bool,
    rank_by_score: bool,
    debug: bool,
    verbose: bool,
    noverlap: int,
    nhmmer: bool,
    hmmsearch: bool,
    cmscan: bool,
    assert_cmsearch: bool,
    best_domain: bool,
    clan_file: Path | None,
    maxkeep: bool,
    keep_intermediate: bool,
) -> None:
    """Remove lower scoring overlaps from cmsearch/cmscan/nhmmer/hmmsearch --tblout files."""
    try:
        options = Options(
            fmt=pick_format(cmscan=cmscan, nhmmer=nhmmer, hmmsearch=hmmsearch),
            rank_by_score=rank_by_score,
            noverlap=noverlap,
            maxkeep=maxkeep,
            best_domain=best_domain,
            assert_cmsearch=assert_cmsearch,
            verbose=verbose,
            debug=debug,
            keep_intermediate=keep_intermediate,
        ).validate()
        tblout_files = _read_list_file(tblout) if is_list else [tblout]
        clans = load_clan_file(clan_file) if clan_file is not None else None

        for path in tblout_files:
            output, nkept, nremoved = deoverlap_file(path, options, clans)
            click.echo(f"Saved {nkept:5d} hits ({nremoved:5d} removed) to {output}")
    except DeoverlapError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except subprocess.CalledProcessError as e:
        click.echo(f"Error: the following command failed: {' '.join(e.cmd)}", err=True)
        sys.exit(1)
