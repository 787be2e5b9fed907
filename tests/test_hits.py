import pytest

from deoverlap.config import CMSCAN, HMMSEARCH, NHMMER, Options, pick_format
from deoverlap.errors import ConfigError, FormatError
from deoverlap.hits import normalize, read_hits


CMSEARCH_ROW = (
    "contig--151565 - LSU_rRNA_eukarya RF02543 hmm 632 2329 410 1883 + - 6 0.48 1.1 726.0 1.1e-216 ! -"
)
CMSCAN_ROW = "5S_rRNA RF00001 sample10 - cm 1 119 121 1 - no 1 0.61 0.0 108.2 1.5e-27 ! -"
NHMMER_ROW = "5S_rRNA-sample10 - 5S_rRNA RF00001 4 115 4 117 1 121 121 + 1.6e-17 53.3 4.8 -"
HMMSEARCH_ROW = (
    "5S_rRNA-sample10 - 5S_rRNA RF00001 1.1e-19 59.8 0.0 1.2e-19 59.7 0.0 1.0 1 0 0 1 1 1 1 -"
)


# =============================================================================
# COLUMN MAPPING
# =============================================================================

def test_cmsearch_row():
    hit = normalize(CMSEARCH_ROW)
    assert hit.target == "contig--151565"
    assert hit.model == "LSU_rRNA_eukarya"
    assert hit.model_accession == "RF02543"
    assert (hit.start, hit.end, hit.strand) == (410, 1883, "+")
    assert hit.score == 726.0
    assert hit.evalue == 1.1e-216
    assert hit.raw_text == CMSEARCH_ROW
    assert hit.clan is None


def test_cmscan_row_swaps_target_and_model():
    hit = normalize(CMSCAN_ROW, CMSCAN)
    assert hit.target == "sample10"
    assert hit.model == "5S_rRNA"
    assert hit.model_accession == "RF00001"
    assert (hit.start, hit.end, hit.strand) == (121, 1, "-")
    assert hit.score == 108.2
    assert hit.evalue == 1.5e-27


def test_nhmmer_row():
    hit = normalize(NHMMER_ROW, NHMMER)
    assert hit.target == "5S_rRNA-sample10"
    assert hit.model == "5S_rRNA"
    assert (hit.start, hit.end, hit.strand) == (4, 117, "+")
    assert hit.evalue == 1.6e-17
    assert hit.score == 53.3


def test_hmmsearch_row_gets_unit_interval():
    hit = normalize(HMMSEARCH_ROW, HMMSEARCH)
    assert (hit.start, hit.end, hit.strand) == (1, 1, "+")
    assert hit.evalue == 1.1e-19
    assert hit.score == 59.8


def test_hmmsearch_best_domain():
    hit = normalize(HMMSEARCH_ROW, HMMSEARCH, best_domain=True)
    assert hit.evalue == 1.2e-19
    assert hit.score == 59.7


def test_line_terminator_is_not_part_of_raw_text():
    hit = normalize(CMSEARCH_ROW + "\n")
    assert hit.raw_text == CMSEARCH_ROW


# =============================================================================
# REJECTED ROWS
# =============================================================================

@pytest.mark.parametrize("fmt,row", [
    ("cmsearch", CMSEARCH_ROW),
    (NHMMER, NHMMER_ROW),
    (HMMSEARCH, HMMSEARCH_ROW),
])
def test_too_few_columns(fmt, row):
    short = " ".join(row.split()[:-1])
    with pytest.raises(FormatError, match="found less than"):
        normalize(short, fmt)


def test_cmscan_output_parsed_as_cmsearch_is_rejected():
    with pytest.raises(FormatError, match="--cmscan"):
        normalize(CMSCAN_ROW)


def test_fcmsearch_overrides_rfam_accession_check():
    hit = normalize(CMSCAN_ROW, assert_cmsearch=True)
    assert hit.target == "5S_rRNA"


def test_non_numeric_score():
    row = CMSEARCH_ROW.replace("726.0", "high")
    with pytest.raises(FormatError, match="bit score"):
        normalize(row)


def test_bad_strand():
    row = CMSEARCH_ROW.replace(" + ", " ? ")
    with pytest.raises(FormatError, match="strand"):
        normalize(row)


def test_coordinates_are_not_checked_against_strand_when_parsing():
    hit = normalize(CMSEARCH_ROW.replace(" + ", " - "))
    assert (hit.start, hit.end, hit.strand) == (410, 1883, "-")


# =============================================================================
# STREAMS AND OPTIONS
# =============================================================================

def test_read_hits_skips_blank_lines_and_attaches_clans():
    lines = [CMSEARCH_ROW + "\n", "\n", "  " + CMSEARCH_ROW.replace("LSU_rRNA_eukarya", "5S_rRNA") + "\n"]
    hits = list(read_hits(lines, Options(), {"LSU_rRNA_eukarya": "CL00112"}))
    assert len(hits) == 2
    assert hits[0].clan == "CL00112"
    assert hits[1].clan is None
    assert not hits[1].raw_text.startswith(" ")


def test_read_hits_rejects_comment_lines():
    with pytest.raises(FormatError, match="begins with #"):
        list(read_hits(["#target name accession\n"], Options()))


def test_besthmm_requires_hmmsearch():
    with pytest.raises(ConfigError, match="--besthmm requires --hmmsearch"):
        Options(best_domain=True).validate()
    assert Options(fmt=HMMSEARCH, best_domain=True).validate().best_domain


def test_format_flags_are_exclusive():
    assert pick_format() == "cmsearch"
    assert pick_format(nhmmer=True) == NHMMER
    with pytest.raises(ConfigError, match="Pick one"):
        pick_format(nhmmer=True, hmmsearch=True)


def test_noverlap_must_be_positive():
    with pytest.raises(ConfigError):
        Options(noverlap=0).validate()
