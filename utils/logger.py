"""
Enhanced logging with rich formatting and colorlog.
Provides Spring Boot-style logging with readable terminal output.
"""

import logging
import re
import sys
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import colorlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel

# Global console for rich output
console = Console()

# Run ID context for correlating the log lines of one pipeline run
_run_context = {}


def get_run_id() -> str:
    """Get or create run ID for current context."""
    if "run_id" not in _run_context:
        _run_context["run_id"] = str(uuid.uuid4())[:8]
    return _run_context["run_id"]


def set_run_id(run_id: str):
    """Set run ID for current context."""
    _run_context["run_id"] = run_id


def clear_run_id():
    """Clear run ID from context."""
    _run_context.clear()


class SensitiveDataFilter(logging.Filter):
    """Filter to mask bearer tokens and credentials in log messages."""

    # (regex, replacement)
    SENSITIVE_PATTERNS = [
        (re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+"), r"\1***MASKED***"),
        (re.compile(r"(token=)[A-Za-z0-9._~+/=-]+"), r"\1***MASKED***"),
        (re.compile(r"(api_key=)[A-Za-z0-9._~+/=-]+", re.IGNORECASE), r"\1***MASKED***"),
    ]

    def filter(self, record):
        if hasattr(record, "msg") and record.msg:
            msg = str(record.msg)
            for regex, replacement in self.SENSITIVE_PATTERNS:
                msg = regex.sub(replacement, msg)
            record.msg = msg
        return True


class ContextFilter(logging.Filter):
    """Add run ID and component name to log records."""

    def __init__(self, component: str = "SYSTEM"):
        super().__init__()
        self.component = component

    def filter(self, record):
        record.run_id = get_run_id()
        record.component = self.component
        return True


def setup_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[Path] = None,
    component: str = None
) -> logging.Logger:
    """
    Setup logger with colorlog formatting.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging
        component: Component name for contextualized logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    # Component name (use module name if not specified)
    comp = component or name.split(".")[-1].upper()

    # Console handler with colorlog
    console_handler = colorlog.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))

    console_formatter = colorlog.ColoredFormatter(
        fmt=(
            "%(log_color)s[%(asctime)s.%(msecs)03d] "
            "%(levelname)-8s "
            "%(white)s[%(run_id)s] "
            "%(cyan)s[%(component)s] "
            "%(message_log_color)s%(message)s"
        ),
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "blue",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={
            "message": {
                "DEBUG": "white",
                "INFO": "white",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            }
        },
        reset=True,
        style="%"
    )

    console_handler.setFormatter(console_formatter)
    console_handler.addFilter(ContextFilter(comp))
    console_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)

        # JSON-style formatter for file (easier parsing)
        file_formatter = logging.Formatter(
            fmt=(
                '{"timestamp":"%(asctime)s.%(msecs)03d",'
                '"level":"%(levelname)s",'
                '"run_id":"%(run_id)s",'
                '"component":"%(component)s",'
                '"logger":"%(name)s",'
                '"message":"%(message)s"}'
            ),
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.addFilter(ContextFilter(comp))
        file_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(file_handler)

    return logger


def print_banner():
    """Print CLI startup banner."""
    banner = """
╔══════════════════════════════════════════════════════════╗
║                                                          ║
║   🦺  HSE PHOTO INSPECTION  v1.0.0                       ║
║   Workplace Hazard Analysis Client                       ║
║                                                          ║
╚══════════════════════════════════════════════════════════╝
"""
    console.print(banner, style="bold cyan")


# Rich styles for presentation color keys
COLOR_KEY_STYLES = {
    "success": "green",
    "info": "blue",
    "warning": "yellow",
    "caution": "dark_orange",
    "danger": "red",
    "critical": "bold red",
    "neutral": "dim",
}


def print_stage(stage: str, details: Optional[Dict[str, str]] = None):
    """
    Print a pipeline stage update.

    Args:
        stage: Stage name
        details: Optional additional details
    """
    text = f"[cyan]{stage}[/cyan]"
    if details:
        for k, v in details.items():
            text += f"\n• {k}: {v}"
    console.print(text)


def print_analysis_report(
    risk_score: int,
    risk_band: str,
    safety_grade: str,
    grade_color: str,
    hazard_count: int,
    top_priorities: Sequence[str],
    sections: Dict[str, List[Dict[str, str]]],
):
    """
    Print a completed hazard analysis.

    Args:
        risk_score: Risk score 0-100
        risk_band: Risk band label (low, moderate, elevated, severe)
        safety_grade: Safety grade as reported by the server
        grade_color: Color key for the grade
        hazard_count: Number of hazards found
        top_priorities: Ordered priority statements
        sections: Category title -> list of hazard rows
            (description, severity, severity_color, priority)
    """
    grade_style = COLOR_KEY_STYLES.get(grade_color, "dim")

    content = (
        f"[bold]Risk Score:[/bold] {risk_score}/100 ({risk_band})\n"
        f"[bold]Safety Grade:[/bold] [{grade_style}]{safety_grade}[/{grade_style}]\n"
        f"[bold]Hazards Found:[/bold] {hazard_count}"
    )
    if top_priorities:
        content += "\n\n[bold]Top Priorities:[/bold]"
        for index, priority in enumerate(top_priorities, start=1):
            content += f"\n  {index}. {escape(priority)}"

    console.print(Panel(content, title="Safety Assessment", border_style=grade_style, expand=False))

    for title, rows in sections.items():
        table = Table(title=f"{title} ({len(rows)})", show_header=True, header_style="bold magenta")
        table.add_column("Hazard", style="white")
        table.add_column("Severity", width=10)
        table.add_column("Priority", width=8, justify="right")
        for row in rows:
            style = COLOR_KEY_STYLES.get(row["severity_color"], "dim")
            table.add_row(
                escape(row["description"]),
                f"[{style}]{row['severity']}[/{style}]",
                f"{row['priority']}/10",
            )
        console.print(table)


def print_history_table(rows: List[Dict[str, str]], total_count: int):
    """
    Print recent inspections.

    Args:
        rows: List of dicts with id, created_at, status, risk_score, grade
        total_count: Total inspections on the server
    """
    table = Table(
        title=f"Recent Inspections ({len(rows)} of {total_count})",
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("ID", style="cyan")
    table.add_column("Created", style="dim")
    table.add_column("Status", width=12)
    table.add_column("Risk", justify="right")
    table.add_column("Grade", justify="center")

    for row in rows:
        table.add_row(row["id"], row["created_at"], row["status"], row["risk_score"], row["grade"])

    console.print(table)


def print_error(error_type: str, message: str, details: Optional[str] = None):
    """
    Print error message in formatted panel.

    Args:
        error_type: Type of error
        message: Error message
        details: Optional detailed error information
    """
    content = f"[bold red]{escape(error_type)}[/bold red]\n\n{escape(message)}"
    if details:
        content += f"\n\n[dim]{escape(details)}[/dim]"

    panel = Panel(
        content,
        title="❌ Error",
        border_style="red",
        expand=False
    )
    console.print(panel)
