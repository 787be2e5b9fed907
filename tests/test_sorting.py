import shutil

import pytest

from deoverlap.config import CMSCAN, HMMSEARCH, NHMMER, Options
from deoverlap.sorting import sort_command, sort_keys, sort_tblout


@pytest.mark.parametrize("options,expected", [
    (Options(), ["-k", "1,1", "-k", "16,16g", "-k", "15,15rn"]),
    (Options(rank_by_score=True), ["-k", "1,1", "-k", "15,15rn", "-k", "16,16g"]),
    (Options(fmt=CMSCAN), ["-k", "3,3", "-k", "16,16g", "-k", "15,15rn"]),
    (Options(fmt=NHMMER), ["-k", "1,1", "-k", "13,13g", "-k", "14,14rn"]),
    (Options(fmt=NHMMER, rank_by_score=True), ["-k", "1,1", "-k", "14,14rn", "-k", "13,13g"]),
    (Options(fmt=HMMSEARCH), ["-k", "1,1", "-k", "5,5g", "-k", "6,6rn"]),
    (Options(fmt=HMMSEARCH, best_domain=True), ["-k", "1,1", "-k", "8,8g", "-k", "9,9rn"]),
    (Options(fmt=HMMSEARCH, best_domain=True, rank_by_score=True), ["-k", "1,1", "-k", "9,9rn", "-k", "8,8g"]),
])
def test_sort_keys(options, expected):
    assert sort_keys(options) == expected
    assert sort_command(options) == ["sort"] + expected


@pytest.mark.skipif(shutil.which("sort") is None, reason="sort not in PATH")
def test_sort_tblout(tmp_path):
    tblout = tmp_path / "hits.tblout"
    tblout.write_text(
        "# header\n"
        "seqB - 5S_rRNA RF00001 1.0e-05   20.0 0.0 1.0e-05 20.0 0.0 1.0 1 0 0 1 1 1 1 -\n"
        "seqA - 5S_rRNA RF00001 1.0e-03   10.0 0.0 1.0e-03 10.0 0.0 1.0 1 0 0 1 1 1 1 -\n"
        "seqA - 5S_rRNA RF00001 1.0e-30   90.0 0.0 1.0e-30 90.0 0.0 1.0 1 0 0 1 1 1 1 -\n"
    )
    messages = []
    sorted_path = sort_tblout(tblout, options=Options(fmt=HMMSEARCH, debug=True), report=messages.append)
    assert sorted_path == tmp_path / "hits.tblout.sort"
    lines = sorted_path.read_text().splitlines()
    assert [line.split()[0] for line in lines] == ["seqA", "seqA", "seqB"]
    assert lines[0].split()[5] == "90.0"
    assert "  " not in lines[0]
    assert messages[0].startswith("Running cmd: sort -k 1,1 -k 5,5g -k 6,6rn")
