"""
渲染模块

负责 LaTeX 预览与 PDF 导出
"""

from .preview import (
    CompileResult,
    LatexCompiler,
    build_preview_page,
    clamp_zoom,
    ZOOM_STEP,
)
from .pdf import PdfExporter, pdf_filename

__all__ = [
    "CompileResult",
    "LatexCompiler",
    "build_preview_page",
    "clamp_zoom",
    "ZOOM_STEP",
    "PdfExporter",
    "pdf_filename",
]
