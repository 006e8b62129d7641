import pytest

from factguard_core import config
from factguard_core.errors import TextGenerationError
from factguard_verify import generate_corrected_summary, generate_summary

from conftest import SOURCE, ScriptedLLM


def test_summary_prompt_carries_context_and_truncates_source():
    llm = ScriptedLLM(summaries=["  **Warsaw** approved 15 million zloty.  "])
    source = SOURCE + "y" * config.SUMMARY_SOURCE_CHARS

    out = generate_summary(llm, "Bridge budget", source, None)

    assert out == "**Warsaw** approved 15 million zloty."
    prompt = llm.calls[0][1]
    assert "CATEGORY: news" in prompt
    assert "TITLE: Bridge budget" in prompt
    assert source[:config.SUMMARY_SOURCE_CHARS] in prompt
    assert source[:config.SUMMARY_SOURCE_CHARS + 1] not in prompt


def test_summary_generation_failure_propagates():
    llm = ScriptedLLM(summaries=[TextGenerationError("Failed to generate summary: 502", status_code=502)])
    with pytest.raises(TextGenerationError) as exc:
        generate_summary(llm, "t", SOURCE, "local")
    assert exc.value.status_code == 502


def test_correction_prompt_lists_errors_and_fabrications():
    llm = ScriptedLLM(corrections=["New summary."])

    out = generate_corrected_summary(
        llm, "Bridge budget", SOURCE, "local",
        ["[DIGIT_CHANGE] 16 million - amount differs", "[NAME_CHANGE] Trzaskowsky - spelling"],
        ["Works will end in 2025."],
    )

    assert out == "New summary."
    prompt = llm.calls[0][1]
    assert "1. [DIGIT_CHANGE] 16 million - amount differs\n2. [NAME_CHANGE] Trzaskowsky - spelling" in prompt
    assert "1. Works will end in 2025." in prompt
    assert "IGNORE the previous summary" in prompt
    assert "local" in prompt


def test_correction_prompt_without_fabrications():
    llm = ScriptedLLM(corrections=["New summary."])
    generate_corrected_summary(llm, "t", SOURCE, None, ["Verification parsing failed"], [])
    prompt = llm.calls[0][1]
    assert "None identified" in prompt
    assert "1. Verification parsing failed" in prompt


def test_blank_correction_is_a_failure():
    llm = ScriptedLLM(corrections=[""])
    with pytest.raises(TextGenerationError):
        generate_corrected_summary(llm, "t", SOURCE, None, ["x"], [])
