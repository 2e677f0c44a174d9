"""
宏包管理

已安装宏包不单独保存，每次从文档文本中用正则扫描得到
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field


USEPACKAGE_PATTERN = re.compile(r"\\usepackage(?:\[.*?\])?\{([^}]+)\}")


class PackageInfo(BaseModel):
    """可用宏包"""
    name: str = Field(..., description="宏包名")
    desc: str = Field(..., description="说明")
    supported: bool = Field(default=False, description="预览是否支持（否则仅 PDF 生效）")


class PackageEntry(BaseModel):
    """宏包列表中的一行"""
    package: PackageInfo
    installed: bool = False


AVAILABLE_PACKAGES: list[PackageInfo] = [
    PackageInfo(name=name, desc=desc, supported=supported)
    for name, desc, supported in [
        ("amsmath", "Advanced math typesetting", True),
        ("amssymb", "Extended math symbols", True),
        ("graphicx", "Include graphics and images", True),
        ("hyperref", "Hyperlinks and cross-references", False),
        ("geometry", "Page layout customization", False),
        ("booktabs", "Professional table formatting", False),
        ("xcolor", "Color support", True),
        ("listings", "Code listings with syntax highlighting", False),
        ("tikz", "Programmable vector graphics", False),
        ("algorithm2e", "Algorithm typesetting", False),
        ("biblatex", "Advanced bibliography support", False),
        ("fontspec", "Font selection (XeLaTeX)", False),
        ("microtype", "Micro-typography improvements", False),
        ("siunitx", "SI units formatting", False),
        ("cleveref", "Smart cross-references", False),
        ("enumitem", "List customization", True),
        ("fancyhdr", "Custom headers and footers", False),
        ("caption", "Caption customization", False),
        ("subcaption", "Subfigures and subtables", False),
        ("float", "Improved float placement", False),
        ("array", "Extended array/tabular", True),
        ("tabularx", "Auto-width tables", False),
        ("multirow", "Multi-row table cells", False),
        ("url", "URL typesetting", True),
        ("inputenc", "Input encoding (utf8)", True),
        ("babel", "Multilingual support", False),
        ("natbib", "Bibliography citations", False),
        ("setspace", "Line spacing control", False),
        ("parskip", "Paragraph spacing", False),
        ("lipsum", "Lorem ipsum text", True),
    ]
]


def get_installed_packages(content: str) -> list[str]:
    """扫描文档中的 \\usepackage，逗号分隔的多个宏包逐个展开"""
    packages = []
    for match in USEPACKAGE_PATTERN.finditer(content):
        packages.extend(p.strip() for p in match.group(1).split(","))
    return packages


def add_package(content: str, name: str) -> str:
    """
    插入 \\usepackage{name}

    位置：最后一个 \\usepackage 行之后；没有时在 \\documentclass 行之后；
    都没有时插在第一行。
    """
    lines = content.split("\n")
    insert_index = 0

    for i, line in enumerate(lines):
        if "\\usepackage" in line:
            insert_index = i + 1
        elif "\\documentclass" in line and insert_index == 0:
            insert_index = i + 1

    lines.insert(insert_index, f"\\usepackage{{{name}}}")
    return "\n".join(lines)


def remove_package(content: str, name: str) -> str:
    """删除所有只引入该宏包的 \\usepackage 行（连同一个换行）"""
    pattern = re.compile(r"\\usepackage(?:\[.*?\])?\{" + re.escape(name) + r"\}\n?")
    return pattern.sub("", content)


def filter_packages(query: str = "") -> list[PackageInfo]:
    """按名称或说明过滤（忽略大小写）"""
    needle = query.lower()
    return [
        pkg for pkg in AVAILABLE_PACKAGES
        if needle in pkg.name.lower() or needle in pkg.desc.lower()
    ]


def package_listing(content: str, query: str = "") -> list[PackageEntry]:
    """过滤后的宏包列表，并标记是否已在文档中引入"""
    installed = set(get_installed_packages(content))
    return [
        PackageEntry(package=pkg, installed=pkg.name in installed)
        for pkg in filter_packages(query)
    ]
