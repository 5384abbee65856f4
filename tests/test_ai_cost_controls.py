"""Tests for the ai-cost-controls-checker."""

import asyncio
from pathlib import Path

from vibecheck.checkers.ai_cost_controls import AiCostControlsChecker
from vibecheck.checkers.base import CheckOptions
from vibecheck.findings.models import Severity

UNBOUNDED_OPENAI = """import OpenAI from "openai";
const client = new OpenAI();
export async function ask(q) {
  return client.chat.completions.create({ model: "gpt-4o", messages: [{ role: "user", content: q }] });
}
"""

BOUNDED_OPENAI = """import OpenAI from "openai";
const client = new OpenAI();
export async function ask(user, q) {
  try {
    const res = await client.chat.completions.create({ model: "gpt-4o", max_tokens: 256, messages: [] });
    await recordTokenUsage(user, res.usage);
    return res;
  } catch (err) {
    return null;
  }
}
"""


def _run_checker(root: Path) -> list:
    return asyncio.run(AiCostControlsChecker().check(CheckOptions(directory=root)))


def _write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_no_code_passes(tmp_path):
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    assert findings[0].passed
    assert findings[0].id == "ai-cost-controls"


def test_code_without_ai_usage_passes(tmp_path):
    _write(tmp_path, "src/util.js", "export const add = (a, b) => a + b;\n")
    findings = _run_checker(tmp_path)
    assert findings[0].passed
    assert "No AI API usage" in findings[0].details


def test_unbounded_openai_usage(tmp_path):
    _write(tmp_path, "src/chat.js", UNBOUNDED_OPENAI)
    findings = _run_checker(tmp_path)
    by_id = {f.id: f for f in findings}
    assert set(by_id) == {
        "openai-missing-parameter-controls",
        "openai-missing-budget-controls",
        "openai-missing-error-handling",
    }
    assert by_id["openai-missing-budget-controls"].severity == Severity.HIGH
    assert by_id["openai-missing-parameter-controls"].severity == Severity.MEDIUM
    assert all(f.location.line == 2 for f in findings)


def test_bounded_openai_usage_passes(tmp_path):
    _write(tmp_path, "src/chat.js", BOUNDED_OPENAI)
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    assert findings[0].passed
    assert "1 AI API usages" in findings[0].details


def test_python_anthropic_usage(tmp_path):
    _write(
        tmp_path,
        "worker/summarize.py",
        "import anthropic\n\nclient = anthropic.Anthropic()\n"
        "try:\n    client.messages.create(model='claude', max_tokens=512, messages=[])\n"
        "except anthropic.APIError:\n    pass\n",
    )
    findings = _run_checker(tmp_path)
    assert [f.id for f in findings] == ["anthropic-missing-budget-controls"]
    assert findings[0].location.line == 3


def test_test_files_skipped(tmp_path):
    _write(tmp_path, "src/chat.test.js", UNBOUNDED_OPENAI)
    assert _run_checker(tmp_path)[0].passed
