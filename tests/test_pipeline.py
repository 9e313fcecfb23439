import pytest

from docsum.config import SummarizerConfig
from docsum.errors import ConfigurationError, ServiceError
from docsum.pipeline import stuff, summarize_document, summarize_text
from docsum.prompts import chunk_prompt, final_prompt, stuff_prompt
from conftest import StubPort, fail_on

DOC = "0000" + "1111" + "2222"
CONFIG = SummarizerConfig(window_size=4, overlap_size=0, system_instruction="sys", temperature=0.1)


def _abc(prompt):
    for marker, out in (("0000", "A"), ("1111", "B"), ("2222", "C")):
        if marker in prompt:
            return out
    return "FINAL"


def test_final_context_follows_chunk_order_not_completion_order():
    port = StubPort(reply=_abc, delays={"0000": 0.1, "1111": 0.2})
    result = summarize_text(port, DOC, CONFIG)
    assert port.finished[:3] == ["C", "A", "B"]
    assert port.calls[-1] == ("sys", final_prompt("A\nB\nC"), 0.1)
    assert result.final_summary == "FINAL"
    assert result.partial_summaries == ["A", "B", "C"]
    assert result.chunks == 3
    assert result.mode == "map_reduce"


def test_parallel_chunks_get_no_running_context():
    port = StubPort(reply=_abc)
    summarize_text(port, DOC, CONFIG)
    chunk_calls = sorted(call[1] for call in port.calls[:3])
    assert chunk_calls == sorted(chunk_prompt(t) for t in ("0000", "1111", "2222"))


def test_chunk_failure_fails_pipeline_without_final_call():
    port = StubPort(reply=fail_on("1111"))
    with pytest.raises(ServiceError):
        summarize_text(port, DOC, CONFIG)
    assert all("partial summaries" not in call[1] for call in port.calls)


def test_empty_document_is_a_no_op(stub_port):
    result = summarize_text(stub_port, "", CONFIG)
    assert result.final_summary == ""
    assert result.chunks == 0
    assert result.mode == "empty"
    assert stub_port.calls == []


def test_invalid_config_fails_before_any_call(stub_port):
    with pytest.raises(ConfigurationError):
        summarize_text(stub_port, DOC, SummarizerConfig(window_size=10, overlap_size=10))
    assert stub_port.calls == []


def test_stuff_threshold_uses_single_call(stub_port):
    config = SummarizerConfig(stuff_threshold=100, system_instruction="sys", temperature=0.3)
    result = summarize_text(stub_port, DOC, config)
    assert result.mode == "stuff"
    assert stub_port.calls == [("sys", stuff_prompt(DOC), 0.3)]


def test_stuff_of_empty_document(stub_port):
    assert stuff(stub_port, "") == ""
    assert stub_port.calls == []


def test_sequential_mode_carries_previous_summary():
    counter = iter(range(100))
    port = StubPort(reply=lambda prompt: f"S{next(counter)}")
    config = SummarizerConfig(window_size=4, overlap_size=0, carry_context=True)
    result = summarize_text(port, DOC, config)
    prompts = [call[1] for call in port.calls]
    assert prompts[0] == chunk_prompt("0000")
    assert "S0" in prompts[1] and "1111" in prompts[1]
    assert "S1" in prompts[2] and "2222" in prompts[2]
    assert result.partial_summaries == ["S0", "S1", "S2"]
    assert result.mode == "sequential"
    assert result.final_summary == "S3"


def test_summarize_document_reads_text_file(tmp_path, stub_port):
    path = tmp_path / "doc.txt"
    path.write_text(DOC, encoding="utf-8")
    result = summarize_document(stub_port, str(path), CONFIG)
    assert result.chunks == 3
    assert len(stub_port.calls) == 4


def test_result_as_dict():
    port = StubPort(reply=_abc)
    data = summarize_text(port, DOC, CONFIG).as_dict()
    assert data["final_summary"] == "FINAL"
    assert data["partial_summaries"] == ["A", "B", "C"]
    assert data["chunks"] == 3
