from pathlib import Path
from typing import List, Optional

from mrmm.batch import BatchReport
from mrmm.trace.schema import now_iso


def render_report(report: BatchReport, generated_at: Optional[str] = None) -> str:
    command = report.command
    lines: List[str] = ["# Milestone Batch Report", ""]
    lines.append(f"**Command**: {command.name}")
    lines.append(f"**Milestone**: {command.title}")
    lines.append(f"**Generated**: {generated_at or now_iso()}")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append(f"- **Repositories**: {len(report)}")
    lines.append(f"- **Succeeded**: {len(report.succeeded)}")
    lines.append(f"- **Failed**: {len(report.failed)}")
    lines.append("")

    lines.append("## Repositories")
    lines.append("")
    lines.append("| Repository | Result | Milestone | Detail |")
    lines.append("|---|---|---|---|")
    for outcome in report:
        number = f"#{outcome.milestone.number}" if outcome.milestone and outcome.milestone.number else ""
        detail = _escape(outcome.reason) if outcome.reason else ""
        result = outcome.status.value if outcome.ok else f"{outcome.status.value} ({outcome.error_kind})"
        lines.append(f"| {outcome.target} | {result} | {number} | {detail} |")
    lines.append("")

    lines.append("## Failures")
    lines.append("")
    if report.failed:
        for outcome in report.failed:
            lines.append(f"- **{outcome.target}**: {outcome.reason}")
    else:
        lines.append("No failures.")
    lines.append("")

    return "\n".join(lines)


def write_report(report: BatchReport, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_report(report))
    return path


def _escape(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")
