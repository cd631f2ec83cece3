"""
Shared helpers for the hipdf functional tests.

Builds small source PDFs with pikepdf and runs a module's tests as a script
with a pass/fail summary.
"""

import io
import sys
import traceback
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Tuple

import pikepdf

from hipdf.utilities import Print


def make_pdf(sizes: Sequence[Tuple[float, float]], title: Optional[str] = "Sample") -> pikepdf.Pdf:
    """
    A document with one page per (width, height), each carrying a short
    stroked diagonal and a font resource.
    """
    pdf = pikepdf.new()
    font = pdf.make_indirect(pikepdf.Dictionary(
        Type=pikepdf.Name.Font,
        Subtype=pikepdf.Name.Type1,
        BaseFont=pikepdf.Name.Helvetica,
    ))

    for width, height in sizes:
        pdf.add_blank_page(page_size=(width, height))
        page = pdf.pages[-1]
        page.obj.Resources = pikepdf.Dictionary(Font=pikepdf.Dictionary(F1=font))
        content = f"0 0 m {width} {height} l S".encode()
        page.obj.Contents = pdf.make_indirect(pikepdf.Stream(pdf, content))

    if title is not None:
        pdf.trailer.Info = pdf.make_indirect(pikepdf.Dictionary(Title=pikepdf.String(title)))

    return pdf


def pdf_bytes(sizes: Sequence[Tuple[float, float]], title: Optional[str] = "Sample") -> bytes:
    buffer = io.BytesIO()
    with make_pdf(sizes, title) as pdf:
        pdf.save(buffer)
    return buffer.getvalue()


def write_pdf(path: Path, sizes: Sequence[Tuple[float, float]], title: Optional[str] = "Sample") -> Path:
    path.write_bytes(pdf_bytes(sizes, title))
    return path


def target_pdf(width: float = 595, height: float = 842) -> pikepdf.Pdf:
    pdf = pikepdf.new()
    pdf.add_blank_page(page_size=(width, height))
    return pdf


def run_tests(title: str, tests: Iterable[Callable[[], None]]) -> None:
    """Run test functions outside pytest and exit with a summary."""
    Print("HEADER", title)
    print("=" * 60)

    results = []
    for test in tests:
        try:
            test()
            results.append((test.__name__, True))
        except Exception as e:
            Print("FAILURE", f"{test.__name__}: {e}")
            traceback.print_exc()
            results.append((test.__name__, False))

    print("=" * 60)
    all_passed = True
    for name, passed in results:
        status = "PASSED" if passed else "FAILED"
        symbol = "✓" if passed else "✗"
        print(f"  {symbol} {name}: {status}")
        all_passed = all_passed and passed
    print()

    if all_passed:
        Print("COMPLETED", f"All {len(results)} tests passed!")
        sys.exit(0)
    Print("FAILURE", "Some tests failed")
    sys.exit(1)
