"""
Composite layouts built from several embed calls, and option presets.
"""

from pathlib import Path
from typing import Optional, Union

import pikepdf

from .embedder import EmbedOptions, EmbedResult, PdfEmbedder
from .layouts import FirstOnly, Grid, GridFillOrder


class EmbedLayoutBuilder:
    """
    Accumulates the results of several embed calls into one EmbedResult.

    Usage:
        builder = EmbedLayoutBuilder()
        source = builder.load_pdf("report.pdf")
        builder.create_thumbnail_gallery(target, source, 50, 700, 120, 4, 10)
        builder.build().apply(target, target.pages[0])
    """

    def __init__(self, embedder: Optional[PdfEmbedder] = None):
        self._embedder = embedder or PdfEmbedder()
        self._result = EmbedResult()

    def load_pdf(self, path: Union[str, Path]) -> str:
        return self._embedder.load_pdf(path)

    def add_embedded_pdf(self, target: pikepdf.Pdf, source_id: str, options: EmbedOptions) -> "EmbedLayoutBuilder":
        self._result.extend(self._embedder.embed_pdf(target, source_id, options))
        return self

    def create_thumbnail_gallery(
        self,
        target: pikepdf.Pdf,
        source_id: str,
        x: float,
        y: float,
        thumb_size: float,
        columns: int,
        gap: float
    ) -> "EmbedLayoutBuilder":
        """
        Every page of the source as a row-first grid of thumbnails fitting
        in thumb_size x thumb_size.
        """
        options = (
            EmbedOptions()
            .at_position(x, y)
            .with_max_size(thumb_size, thumb_size)
            .with_layout(Grid(columns=columns, gap_x=gap, gap_y=gap, fill_order=GridFillOrder.ROW_FIRST))
        )
        return self.add_embedded_pdf(target, source_id, options)

    def create_comparison(
        self,
        target: pikepdf.Pdf,
        left_id: str,
        right_id: str,
        x: float,
        y: float,
        width: float,
        height: float,
        gap: float
    ) -> "EmbedLayoutBuilder":
        """
        First pages of two sources side by side, each fitted into half of
        `width` minus the gap.
        """
        half_width = (width - gap) / 2.0

        left_options = EmbedOptions().at_position(x, y).with_max_size(half_width, height).with_layout(FirstOnly())
        self.add_embedded_pdf(target, left_id, left_options)

        right_options = (
            EmbedOptions()
            .at_position(x + half_width + gap, y)
            .with_max_size(half_width, height)
            .with_layout(FirstOnly())
        )
        return self.add_embedded_pdf(target, right_id, right_options)

    def build(self) -> EmbedResult:
        return self._result

    @property
    def embedder(self) -> PdfEmbedder:
        return self._embedder


def watermark_options(opacity: float, scale: float) -> EmbedOptions:
    """Scaled, rotated 45 degrees at (100, 100), with the given opacity."""
    return EmbedOptions().with_opacity(opacity).with_scale(scale).at_position(100.0, 100.0).with_rotation(45.0)


def thumbnail_options(x: float, y: float, size: float) -> EmbedOptions:
    return EmbedOptions().at_position(x, y).with_max_size(size, size).with_aspect_ratio(True)


def full_page_options(page_width: float, page_height: float) -> EmbedOptions:
    return EmbedOptions().at_position(0.0, 0.0).with_max_size(page_width, page_height).with_aspect_ratio(True)
