"""
编辑操作模块

宏包增删、代码块应用与差异对比
"""

from .packages import (
    AVAILABLE_PACKAGES,
    PackageEntry,
    PackageInfo,
    add_package,
    filter_packages,
    get_installed_packages,
    package_listing,
    remove_package,
)
from .apply import CodeBlock, apply_code, extract_code_blocks, is_latex_code
from .diff import DiffRow, diff_lines, has_changes, render_diff_html

__all__ = [
    "AVAILABLE_PACKAGES",
    "PackageEntry",
    "PackageInfo",
    "add_package",
    "filter_packages",
    "get_installed_packages",
    "package_listing",
    "remove_package",
    "CodeBlock",
    "apply_code",
    "extract_code_blocks",
    "is_latex_code",
    "DiffRow",
    "diff_lines",
    "has_changes",
    "render_diff_html",
]
