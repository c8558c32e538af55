"""Shared fixtures for tests — synthetic manuals, no network calls."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Synthetic manual content
# ---------------------------------------------------------------------------


@pytest.fixture
def manual_pages() -> list[str]:
    """Three pages of a pump manual, each well above the index minimum."""
    return [
        textwrap.dedent("""\
            Model X200 Water Pump. Installation requires two steps. First mount
            the bracket on a level surface. Then connect the power cable to a
            grounded outlet. Installation must be done by a qualified technician.
        """),
        textwrap.dedent("""\
            Maintenance. Replace the intake filter every three months. Warning:
            disconnect power before opening the filter housing. Inspect the seal
            for cracks and replace it if damaged.
        """),
        textwrap.dedent("""\
            Troubleshooting. If the pump makes a grinding noise, check the
            impeller for debris. If the motor does not start, verify the fuse and
            the power cable connection.
        """),
    ]


@pytest.fixture
def manual_txt_file(tmp_path: Path, manual_pages: list[str]) -> Path:
    p = tmp_path / "x200_manual.txt"
    p.write_text("\n".join(manual_pages), encoding="utf-8")
    return p


@pytest.fixture
def manual_pdf_file(tmp_path: Path, manual_pages: list[str]) -> Path:
    """Create a three-page PDF using fpdf2."""
    from fpdf import FPDF

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.set_font("Helvetica", size=12)
    for page in manual_pages:
        pdf.add_page()
        pdf.multi_cell(0, 10, text=" ".join(page.split()))

    p = tmp_path / "x200_manual.pdf"
    pdf.output(str(p))
    return p


# ---------------------------------------------------------------------------
# Model replies
# ---------------------------------------------------------------------------


def extraction_reply(
    key_points: list[str] | None = None,
    warnings: list[str] | None = None,
    steps: list[str] | None = None,
) -> str:
    """Build a model reply that wraps an extraction object in a ```json fence."""
    body = json.dumps({
        "key_points": key_points or [],
        "warnings": warnings or [],
        "steps": steps or [],
    }, indent=2)
    return f"Here is the extracted information:\n\n```json\n{body}\n```\n"


@pytest.fixture
def reply_factory():
    return extraction_reply


@pytest.fixture
def no_sleep() -> list[float]:
    """Record of requested sleeps; pass ``no_sleep.append`` as the sleep hook."""
    return []
