"""
Lookup failures raised while embedding.

Everything else uses the built-in exceptions (ValueError, RuntimeError,
FileNotFoundError).
"""


class SourceNotLoadedError(LookupError):
    """Raised when an embed refers to a source identifier that was never loaded."""

    def __init__(self, identifier: str):
        super().__init__(f"PDF not loaded: '{identifier}'. Call load_pdf() first.")
        self.identifier = identifier


class PageNotFoundError(IndexError):
    """Raised when a requested page index is outside the source document."""

    def __init__(self, page_index: int, page_count: int):
        super().__init__(
            f"Page {page_index} not found in source PDF "
            f"(valid indices: 0-{page_count - 1})" if page_count else
            f"Page {page_index} not found in source PDF (document has no pages)"
        )
        self.page_index = page_index
        self.page_count = page_count
