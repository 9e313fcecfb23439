from docsum.models import PartialSummary
from docsum.prompts import final_prompt
from docsum.reduce import combine, condense, reduce_summaries
from conftest import StubPort


def _results(*texts, order=None):
    order = order or range(len(texts))
    return {i: PartialSummary(i, texts[i]) for i in order}


def test_combine_uses_index_order_not_insertion_order():
    results = _results("A", "B", "C", order=[2, 0, 1])
    assert list(results) == [2, 0, 1]
    assert combine(results) == "A\nB\nC"


def test_reduce_issues_single_final_call(stub_port):
    final = reduce_summaries(stub_port, _results("A", "B", "C", order=[1, 2, 0]), "sys", 0.5)
    assert final == "summary"
    assert stub_port.calls == [("sys", final_prompt("A\nB\nC"), 0.5)]


def test_reduce_of_nothing_makes_no_call(stub_port):
    assert reduce_summaries(stub_port, {}) == ""
    assert stub_port.calls == []


def test_without_limit_large_context_is_not_rechunked(stub_port):
    results = _results(*["x" * 1000 for _ in range(10)])
    reduce_summaries(stub_port, results)
    assert len(stub_port.calls) == 1


def test_condense_batches_preserve_order():
    port = StubPort(reply=lambda prompt: prompt.split("```")[1].replace("\n", "+"))
    results = _results("aaaa", "bbbb", "cccc", "dddd", "eeee")
    out = condense(port, results, max_context_chars=10)
    # "aaaa\nbbbb" is 9 chars, so pairs merge; a second level cannot merge further
    assert combine(out) == "aaaa+bbbb\ncccc+dddd\neeee"
    assert len(port.calls) == 3


def test_condense_stops_when_nothing_can_merge():
    port = StubPort(reply=lambda prompt: "never called")
    results = _results("x" * 50, "y" * 50)
    out = condense(port, results, max_context_chars=10)
    assert out == results
    assert port.calls == []


def test_reduce_with_limit_condenses_then_finalizes():
    port = StubPort(reply=lambda prompt: "short")
    results = _results(*["p" * 8 for _ in range(6)])
    final = reduce_summaries(port, results, max_context_chars=20)
    assert final == "short"
    prompts = [call[1] for call in port.calls]
    assert prompts[-1] == final_prompt("short\nshort\nshort")
    assert len(prompts) == 4
