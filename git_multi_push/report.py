"""Plain-text summary of a push run."""

from __future__ import annotations

from .models import PushReport

FAILURE_HINT = "Hint: check SSH key setup and the account name configured for each failed platform."


def summarize(report: PushReport) -> str:
    """Render successes and failures as separate sections. Never raises."""

    successes = ", ".join(report.successes) if report.successes else "none"
    failed_keys = ", ".join(key for key, _ in report.failures) if report.failures else "none"
    lines = [
        "Push results",
        f"  Succeeded: {successes}",
        f"  Failed: {failed_keys}",
    ]
    for key, message in report.failures:
        detail = (message or "").strip() or "no diagnostic from git"
        lines.append(f"    {key}:")
        lines.extend(f"      {line}" for line in detail.splitlines())
    if report.failures:
        lines.append("")
        lines.append(FAILURE_HINT)
    return "\n".join(lines)
