"""
hipdf: a builder layer over pikepdf

- blocks: reusable content as Form XObjects, instanced with transforms
- layers: Optional Content Groups that viewers can toggle
- embedding: pages of other PDFs placed with multi-page layouts
- hatching: tiling patterns from built-in styles or custom content

Usage:
    import pikepdf
    from hipdf import PdfEmbedder, EmbedOptions, Grid

    with PdfEmbedder() as embedder, pikepdf.new() as pdf:
        pdf.add_blank_page()
        source = embedder.load_pdf("slides.pdf")
        options = EmbedOptions().at_position(20, 600).with_max_size(180, 180).with_layout(Grid(columns=3))
        embedder.embed_pdf(pdf, source, options).apply(pdf, pdf.pages[0])
        pdf.save("contact-sheet.pdf")
"""

from .blocks import Block, BlockInstance, BlockManager, merge_blocks
from .config import load_config
from .embedding import (
    All,
    Custom,
    EmbeddedPdfInfo,
    EmbedLayoutBuilder,
    EmbedOptions,
    EmbedResult,
    FirstOnly,
    Grid,
    GridFillOrder,
    HorizontalStack,
    Pages,
    PdfEmbedder,
    Range,
    Single,
    SpecificIndex,
    VerticalStack,
    get_layout,
)
from .errors import PageNotFoundError, SourceNotLoadedError
from .hatching import (
    CompositePattern,
    CustomPatternBuilder,
    HatchConfig,
    HatchingManager,
    HatchStyle,
    ParametricPattern,
    PatternedShapeBuilder,
    PatternOperations,
    ProceduralPattern,
    SimplePattern,
)
from .layers import Layer, LayerContentBuilder, LayerOperations, OCGConfig, OCGManager
from .operations import Operation, op
from .transform import Transform

__version__ = "0.3.0"
