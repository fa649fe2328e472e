"""
Command-line entry point for the HSE inspection client.

    python -m app.main analyze photo.jpg
    python -m app.main history --sort risk-high --status completed
    python -m app.main show <inspection-id> [--share]
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from hse_client.acquisition import FileImageSource, ImageAcquisition
from hse_client.clients import get_analysis_client, get_auth, get_upload_client
from hse_client.errors import InspectionError, PermissionDenied
from hse_client.history import SORT_KEYS, HistoryCache, InspectionTracker
from hse_client.orchestration import InspectionPipeline, PipelineStage, PipelineState
from hse_client.reporting import (
    build_report,
    severity_color_key,
    status_display,
    summarize_inspection,
)
from hse_client.schemas import AnalysisResult, Inspection, ProcessingStatus
from utils.config import config
from utils.logger import (
    console,
    print_analysis_report,
    print_banner,
    print_error,
    print_history_table,
    print_stage,
    setup_logger,
)

logger = setup_logger(__name__, level=config.log_level, component="MAIN")

_STAGE_LABELS = {
    PipelineStage.IMAGE_READY: "📷 Image ready",
    PipelineStage.UPLOADING: "⬆️  Uploading image...",
    PipelineStage.ANALYZING: "🔍 Analyzing hazards (usually 10-30s)...",
    PipelineStage.COMPLETED: "✓ Analysis complete",
    PipelineStage.FAILED: "✗ Analysis failed",
}


def show_analysis(analysis: AnalysisResult):
    """Render an analysis with rich."""
    report = build_report(analysis)
    sections = {
        section.title: [
            {
                "description": hazard.description,
                "severity": hazard.severity,
                "severity_color": severity_color_key(hazard.severity).value,
                "priority": str(hazard.priority),
            }
            for hazard in section.data
        ]
        for section in report.sections
    }
    print_analysis_report(
        risk_score=report.risk_score,
        risk_band=report.risk_band.value,
        safety_grade=report.safety_grade,
        grade_color=report.grade_color.value,
        hazard_count=report.hazard_count,
        top_priorities=report.top_priorities,
        sections=sections,
    )


def show_history(history: HistoryCache, sort: str, status: Optional[ProcessingStatus]):
    rows = [
        {
            "id": inspection.id,
            "created_at": inspection.created_at.strftime("%b %d, %Y %H:%M"),
            "status": status_display(inspection.processing_status).label,
            "risk_score": str(inspection.risk_score) if inspection.risk_score is not None else "-",
            "grade": inspection.safety_grade or "-",
        }
        for inspection in history.sorted_by(sort, status)
    ]
    print_history_table(rows, history.total_count)


def show_inspection(inspection: Inspection):
    display = status_display(inspection.processing_status)
    print_stage(display.label, {"Inspection": inspection.id, "Detail": display.subtitle})
    if inspection.analysis_results is not None:
        show_analysis(inspection.analysis_results)
    elif display.refreshable:
        console.print("[dim]Still in progress. Run `show` again to refresh.[/dim]")


def _on_state(state: PipelineState):
    label = _STAGE_LABELS.get(state.stage)
    if label:
        print_stage(label)


async def run_analyze(path: str) -> int:
    auth = get_auth()
    uploader = get_upload_client(auth)
    analyzer = get_analysis_client(auth)
    history = HistoryCache(analyzer)
    pipeline = InspectionPipeline(
        acquisition=ImageAcquisition(library=FileImageSource(path)),
        auth=auth,
        uploader=uploader,
        analyzer=analyzer,
        history=history,
    )
    pipeline.subscribe(_on_state)

    try:
        image = await pipeline.pick()
        if image is None:
            print_error("No image", f"Could not read an image from {path}")
            return 1

        final_state = await pipeline.analyze()
    except PermissionDenied as e:
        print_error("Permission needed", str(e))
        return 1
    except InspectionError as e:
        print_error(e.code, e.message)
        return 1
    finally:
        uploader.close()
        analyzer.close()

    if final_state.stage == PipelineStage.FAILED:
        print_error(final_state.error.code, final_state.error.message, final_state.error.body)
        return 1

    show_analysis(final_state.result.analysis)
    if history.inspections:
        show_history(history, "newest", None)
    return 0


async def run_history(sort: str, status: Optional[str], page_size: Optional[int]) -> int:
    analyzer = get_analysis_client(get_auth())
    history = HistoryCache(analyzer, page_size=page_size)
    try:
        refreshed = await history.refresh()
    finally:
        analyzer.close()

    if not refreshed:
        print_error("History unavailable", "Failed to load recent inspections.")
        return 1

    show_history(history, sort, ProcessingStatus(status) if status else None)
    return 0


async def run_show(inspection_id: str, share: bool) -> int:
    analyzer = get_analysis_client(get_auth())
    tracker = InspectionTracker(analyzer)
    try:
        inspection = await tracker.refresh(inspection_id)
        usage = await tracker.usage_log(inspection.id)
    except InspectionError as e:
        print_error(e.code, e.message, e.body)
        return 1
    finally:
        analyzer.close()

    if share:
        console.print(summarize_inspection(inspection), markup=False)
        return 0

    show_inspection(inspection)
    if usage is not None:
        print_stage("Usage", {
            "Tokens": str(usage.tokens_used or 0),
            "Response time": f"{usage.response_time or 0:.0f}ms",
            "Success": "yes" if usage.success else "no",
        })
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hse-inspect", description="HSE photo inspection client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Upload a photo and analyze it for hazards")
    analyze.add_argument("path", help="Path to a photo")

    history = subparsers.add_parser("history", help="List recent inspections")
    history.add_argument("--sort", choices=SORT_KEYS, default="newest")
    history.add_argument("--status", choices=[s.value for s in ProcessingStatus])
    history.add_argument("--page-size", type=int)

    show = subparsers.add_parser("show", help="Show (and refresh) one inspection")
    show.add_argument("inspection_id")
    show.add_argument("--share", action="store_true", help="Print a shareable text summary")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    print_banner()

    if args.command == "analyze":
        return asyncio.run(run_analyze(args.path))
    if args.command == "history":
        return asyncio.run(run_history(args.sort, args.status, args.page_size))
    return asyncio.run(run_show(args.inspection_id, args.share))


if __name__ == "__main__":
    sys.exit(main())
