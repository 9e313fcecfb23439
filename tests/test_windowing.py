import pytest

from docsum.errors import ConfigurationError
from docsum.windowing import window


def _doc(n):
    return "".join(chr(ord("a") + i % 26) for i in range(n))


def test_window_bounds_for_25k_document():
    doc = _doc(25000)
    chunks = window(doc, 10000, 2000)
    assert [(c.start, c.end) for c in chunks] == [
        (0, 10000),
        (8000, 18000),
        (16000, 25000),
        (24000, 25000),
    ]
    assert [c.index for c in chunks] == [0, 1, 2, 3]
    assert len(chunks[-1]) == 1000
    for c in chunks:
        assert c.text == doc[c.start:c.end]


@pytest.mark.parametrize("n,size,overlap", [(1, 5, 0), (100, 7, 3), (999, 100, 10), (1000, 100, 99), (4321, 1000, 0)])
def test_window_covers_document_with_exact_overlap(n, size, overlap):
    doc = _doc(n)
    chunks = window(doc, size, overlap)
    assert chunks[0].start == 0
    assert chunks[-1].end == n
    for prev, nxt in zip(chunks, chunks[1:]):
        assert nxt.start <= prev.end  # no gaps
        if len(prev) == size:
            assert prev.end - nxt.start == overlap
    for c in chunks:
        assert 0 <= c.start < c.end <= n


def test_zero_overlap_reconstructs_document():
    doc = _doc(12345)
    chunks = window(doc, 1000, 0)
    assert "".join(c.text for c in chunks) == doc


def test_window_is_deterministic():
    doc = _doc(5000)
    assert window(doc, 700, 70) == window(doc, 700, 70)


def test_short_document_is_single_chunk():
    doc = "A short document."
    chunks = window(doc, 1000, 200)
    assert len(chunks) == 1
    assert chunks[0].text == doc
    assert (chunks[0].start, chunks[0].end) == (0, len(doc))


def test_document_exactly_one_window_is_single_chunk():
    doc = _doc(1000)
    assert len(window(doc, 1000, 200)) == 1


def test_empty_document_gives_no_chunks():
    assert window("", 1000, 100) == []


@pytest.mark.parametrize("size,overlap", [(0, 0), (-5, 0), (100, 100), (100, 150), (100, -1), (True, False), (100, True), (10.0, 2)])
def test_invalid_sizes_raise_configuration_error(size, overlap):
    with pytest.raises(ConfigurationError):
        window("some text", size, overlap)
