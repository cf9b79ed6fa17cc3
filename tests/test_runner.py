"""
End-to-end tests for the run driver with a fake browser and fake LLM.
"""

import json
from contextlib import asynccontextmanager

import pytest

from uiforge_core.config import config
from uiforge_core.exceptions import ElementResolutionError, InstructionParseError
from uiforge_core.runner import run_command
from uiforge_logs import RunLogger


INSTRUCTIONS = json.dumps([
    {"action": "navigate", "details": "https://x"},
    {"action": "wait", "details": "2000"},
    {"action": "extractCode", "details": ".ui"},
    {"action": "refineCode", "details": {"refinement": "make responsive"}},
])


@pytest.fixture
def dirs(tmp_path):
    return {"artifact_dir": tmp_path / "artifacts", "log_dir": tmp_path / "logs"}


@pytest.mark.asyncio
async def test_full_run(fake_llm, fake_session, session_factory, dirs):
    fake_llm.ainvoke.side_effect = [
        {"text": INSTRUCTIONS},
        {"text": "<div class='r'>UI</div>"},
    ]

    result = await run_command("build ui", llm=fake_llm, session_factory=session_factory, **dirs)

    assert result.command == "build ui"
    assert result.final_code == "<div class='r'>UI</div>"
    assert result.state.iteration_count == 1
    assert sorted(p.name for p in result.run_dir.iterdir()) == [
        "extracted_code.html",
        "final_screenshot.png",
        "refined_code_iteration_1.html",
    ]
    assert result.screenshot == result.run_dir / "final_screenshot.png"
    assert fake_session.names()[-1] == "screenshot"

    log = (dirs["log_dir"] / f"run-{result.run_dir.name[4:]}.md").read_text()
    assert "Generated Instructions" in log
    assert "✅ SUCCESS" in log
    assert "final_screenshot.png" in log


@pytest.mark.asyncio
async def test_default_command_used(fake_llm, session_factory, dirs):
    fake_llm.ainvoke.return_value = {"text": "[]"}

    result = await run_command(None, llm=fake_llm, session_factory=session_factory, **dirs)

    assert result.command == config.default_command
    assert result.final_code == ""
    prompt = fake_llm.ainvoke.await_args_list[0].args[0]
    assert config.default_command in prompt


@pytest.mark.asyncio
async def test_parse_failure_before_browser(fake_llm, dirs):
    fake_llm.ainvoke.return_value = {"text": "not json"}
    opened = []

    @asynccontextmanager
    async def factory():
        opened.append(True)
        yield None

    with pytest.raises(InstructionParseError):
        await run_command("x", llm=fake_llm, session_factory=factory, **dirs)

    assert opened == []
    assert not dirs["artifact_dir"].exists()


@pytest.mark.asyncio
async def test_fatal_step_keeps_earlier_artifacts(fake_llm, fake_session, session_factory, dirs):
    fake_llm.ainvoke.return_value = {"text": json.dumps([
        {"action": "extractCode", "details": ".ui"},
        {"action": "click", "details": "#gone"},
        {"action": "refineCode", "details": {"refinement": "never"}},
    ])}

    with pytest.raises(ElementResolutionError):
        await run_command("x", llm=fake_llm, session_factory=session_factory, **dirs)

    run_dirs = list(dirs["artifact_dir"].glob("run-*"))
    assert len(run_dirs) == 1
    assert sorted(p.name for p in run_dirs[0].iterdir()) == ["extracted_code.html", "final_screenshot.png"]
    assert fake_llm.ainvoke.await_count == 1

    log = next(dirs["log_dir"].glob("run-*.md")).read_text()
    assert "❌ FAILED" in log
    assert "#gone" in log


@pytest.mark.asyncio
async def test_back_to_back_runs_keep_separate_artifacts(fake_llm, session_factory, dirs):
    fake_llm.ainvoke.side_effect = [
        {"text": INSTRUCTIONS},
        {"text": "<p>FIRST</p>"},
        {"text": INSTRUCTIONS},
        {"text": "<p>SECOND</p>"},
    ]

    first = await run_command("one", llm=fake_llm, session_factory=session_factory, **dirs)
    second = await run_command("two", llm=fake_llm, session_factory=session_factory, **dirs)

    assert first.run_dir != second.run_dir
    assert (first.run_dir / "refined_code_iteration_1.html").read_text() == "<p>FIRST</p>"
    assert (second.run_dir / "refined_code_iteration_1.html").read_text() == "<p>SECOND</p>"
    assert first.log_path != second.log_path
    assert len(list(dirs["log_dir"].glob("run-*.md"))) == 2
    assert "**Command**: one" in open(first.log_path, encoding="utf-8").read()


@pytest.mark.asyncio
async def test_browser_launch_failure_finalizes_log(fake_llm, dirs):
    fake_llm.ainvoke.return_value = {"text": INSTRUCTIONS}

    @asynccontextmanager
    async def factory():
        raise RuntimeError("chromium failed to launch")
        yield

    with pytest.raises(RuntimeError, match="chromium failed to launch"):
        await run_command("x", llm=fake_llm, session_factory=factory, **dirs)

    log = next(dirs["log_dir"].glob("run-*.md")).read_text()
    assert "❌ FAILED" in log
    assert "chromium failed to launch" in log
    assert RunLogger.TOC_PLACEHOLDER not in log
