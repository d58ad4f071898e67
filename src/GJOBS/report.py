"""
Plain-text report of a run, printed to the terminal.
"""

from typing import List

from src.GJOBS.models import JobDetail, RunResult

RULE = "=" * 40
THIN_RULE = "-" * 40


def _value(text: str) -> str:
    return text or "N/A"


def format_tabs(result: RunResult) -> List[str]:
    lines = [RULE, "AVAILABLE GOOGLE SEARCH TABS", RULE]
    if not result.tabs:
        lines.append("No tabs found. The page structure might be different.")
    for number, tab in enumerate(result.tabs, 1):
        lines.append(f"{number}. {tab.name}")
        if tab.href:
            lines.append(f"   Link: {tab.href}")
    lines.append(RULE)
    return lines


def format_summary(result: RunResult) -> List[str]:
    if not result.records:
        return [
            "No jobs found. The page structure might be different.",
            f"Current page URL: {result.final_url}",
        ]

    lines = [f"Jobs found: {len(result.records)} (strategy: {result.strategy})", ""]
    for item in result.enriched:
        lines.extend([
            f"Title: {_value(item.record.title)}",
            f"Company: {_value(item.record.company)}",
            f"Location: {_value(item.record.location)}",
            f"Search Result: {_value(item.search_link)}",
            "---------",
        ])
    return lines


def format_detail(detail: JobDetail) -> List[str]:
    lines = [
        f"Job Tab #{detail.index}",
        f"Title      : {_value(detail.title)}",
        f"Company    : {_value(detail.company)}",
        f"Location   : {_value(detail.location)}",
        f"Description: {_value(detail.description)}",
        f"URL        : {_value(detail.link)}",
        f"Apply URL  : {_value(detail.apply_link or detail.link)}",
    ]
    if detail.content:
        lines.extend(["", "Content:", detail.content])
    if detail.anchors:
        lines.extend(["", "Anchors:"])
        for number, anchor in enumerate(detail.anchors, 1):
            lines.append(f"  [{detail.index}.{number}] Text: {_value(anchor.text)}")
            lines.append(f"               URL : {_value(anchor.href)}")
    lines.append(THIN_RULE)
    return lines


def format_details(details: List[JobDetail]) -> List[str]:
    lines = [RULE, "STORED JOB CONTENT", RULE]
    if not details:
        lines.append("No job details captured.")
    for detail in details:
        lines.append("")
        lines.extend(format_detail(detail))
    lines.append(RULE)
    return lines


def format_report(result: RunResult) -> str:
    lines = format_tabs(result)
    lines.append("")
    lines.extend(format_summary(result))
    if result.details is not None:
        lines.append("")
        lines.extend(format_details(result.details))
    return "\n".join(lines)
