import pytest

from app.core.errors import AssetMissingError
from app.pdf.text import ensure_font, justify, layout_paragraph, measure, wrap

FONT = "Helvetica"

SAMPLE = (
    "This offer involves the purchase of Fixed Deposit Notes in private equity. Given the inherent "
    "risks associated we strongly recommend independent advice before making any commitment."
)


def test_wrap_lines_fit_and_keep_words():
    lines = wrap(SAMPLE, 200, FONT, 10)
    assert len(lines) > 1
    for line in lines:
        assert measure(line, FONT, 10) <= 200
    assert " ".join(lines).split() == SAMPLE.split()


def test_wrap_is_stable_when_rewrapped():
    lines = wrap(SAMPLE, 180, FONT, 9)
    assert wrap(" ".join(lines), 180, FONT, 9) == lines
    for line in lines:
        assert wrap(line, 180, FONT, 9) == [line]


def test_wrap_collapses_whitespace_and_handles_empty():
    assert wrap("  alpha \n\t beta  ", 500, FONT, 10) == ["alpha beta"]
    assert wrap("", 100, FONT, 10) == []
    assert wrap("   ", 100, FONT, 10) == []


def test_overlong_word_is_not_split():
    word = "Supercalifragilisticexpialidocious"
    lines = wrap(f"a {word} b", 40, FONT, 10)
    assert word in lines
    assert lines == ["a", word, "b"]


def test_justified_line_spans_exact_width():
    max_width = 220.0
    for line in wrap(SAMPLE, max_width, FONT, 10)[:-1]:
        placed = justify(line, max_width, FONT, 10)
        last_word, last_x = placed[-1]
        end = last_x + measure(last_word, FONT, 10)
        assert end == pytest.approx(max_width, abs=1e-6)
        assert placed[0][1] == 0.0
        offsets = [x for _, x in placed]
        assert offsets == sorted(offsets)


def test_single_word_line_is_left_alone():
    assert justify("Signature", 300, FONT, 10) == [("Signature", 0.0)]
    assert justify("", 300, FONT, 10) == []


def test_paragraph_does_not_justify_last_line():
    laid = layout_paragraph(SAMPLE, 200, FONT, 10)
    assert all(line.justified for line in laid[:-1])
    assert not laid[-1].justified
    assert laid[-1].width == pytest.approx(measure(laid[-1].text, FONT, 10))


def test_paragraph_without_justification():
    laid = layout_paragraph(SAMPLE, 200, FONT, 10, justify_lines=False)
    assert not any(line.justified for line in laid)


def test_unknown_font_is_missing_asset():
    with pytest.raises(AssetMissingError):
        ensure_font("NoSuchFont-Regular")
    ensure_font(FONT)
