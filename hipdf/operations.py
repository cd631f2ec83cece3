"""
Content stream operators for hipdf

All modules build content as lists of pikepdf.ContentStreamInstruction and
only turn them into bytes at the end, through pikepdf's own unparser. The
helpers here cover the small amount of plumbing every module shares:
creating instructions, (de)serializing them, and attaching them to pages.

PDF Content Stream Graphics Operators used across hipdf:
- q / Q: Save / restore graphics state
- cm: Concatenate matrix (transformation)
- Do: Paint XObject
- re, m, l, c, h: Path construction
- S, f, B, n, W: Path painting and clipping
"""

from typing import Iterable, List, Sequence, Union

import pikepdf

Operation = pikepdf.ContentStreamInstruction


def op(operator: str, *operands) -> Operation:
    """
    Create a single content stream instruction.

    Args:
        operator: PDF operator, e.g. 'q', 'cm', 'Do'
        *operands: Operands in PDF order. Python numbers and strings are
                   converted by pikepdf; use pikepdf.Name for names.

    Returns:
        pikepdf.ContentStreamInstruction
    """
    return pikepdf.ContentStreamInstruction(list(operands), pikepdf.Operator(operator))


def name(value: str) -> pikepdf.Name:
    """Build a PDF name from a bare resource name ('XO1' -> /XO1)."""
    if value.startswith('/'):
        return pikepdf.Name(value)
    return pikepdf.Name('/' + value)


def operator_names(operations: Iterable[Operation]) -> List[str]:
    """Operator names of a sequence of instructions, in order."""
    return [str(instruction.operator) for instruction in operations]


def encode_operations(operations: Sequence[Operation]) -> bytes:
    """Serialize instructions into content stream bytes."""
    if not operations:
        return b''
    return pikepdf.unparse_content_stream(list(operations))


def decode_operations(content: bytes) -> List[Operation]:
    """
    Parse content stream bytes back into instructions.

    A scratch document owns the temporary stream so that callers do not
    need a Pdf of their own.
    """
    if not content:
        return []
    scratch = pikepdf.Pdf.new()
    stream = scratch.make_indirect(pikepdf.Stream(scratch, content))
    return list(pikepdf.parse_content_stream(stream))


def resource_dictionary(page: Union[pikepdf.Page, pikepdf.Dictionary], category: str) -> pikepdf.Dictionary:
    """
    Get (creating if needed) a named sub-dictionary of a page's /Resources.

    Args:
        page: pikepdf.Page or page dictionary
        category: Resource category without slash, e.g. 'XObject', 'Pattern'

    Returns:
        The /Resources/<category> dictionary, attached to the page
    """
    page_obj = page.obj if isinstance(page, pikepdf.Page) else page

    if '/Resources' not in page_obj:
        page_obj.Resources = pikepdf.Dictionary()
    resources = page_obj.Resources

    key = '/' + category
    if key not in resources:
        resources[key] = pikepdf.Dictionary()
    return resources[key]


def append_content(pdf: pikepdf.Pdf, page: pikepdf.Page, operations: Sequence[Operation]) -> None:
    """
    Append instructions to the end of a page's content.

    The bytes are wrapped in a new indirect stream; existing content streams
    are left untouched.
    """
    if not operations:
        return
    content = pdf.make_indirect(pikepdf.Stream(pdf, encode_operations(operations)))
    page.contents_add(content, prepend=False)
