"""
PDF 导出

使用 Playwright 在无头浏览器中打开预览页面并打印为 PDF
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console

console = Console()


# 页边距（毫米），A4 纵向
PDF_MARGIN_MM = 10


def pdf_filename(active_file: str) -> str:
    """由当前文件名得到 PDF 文件名：去掉第一个 .tex，为空时使用 document"""
    stem = active_file.replace(".tex", "", 1) or "document"
    return f"{stem}.pdf"


class PdfExporter:
    """
    PDF 导出器

    复用同一个浏览器实例导出多个文件，用完调用 close()
    """

    def __init__(self, render_timeout: int = 10000):
        """
        初始化导出器

        Args:
            render_timeout: 等待公式渲染完成的超时（毫秒）
        """
        self.render_timeout = render_timeout
        self._browser = None
        self._playwright = None

    async def _ensure_browser(self):
        """确保浏览器已启动"""
        if self._browser is None:
            try:
                from playwright.async_api import async_playwright
            except ImportError:
                raise RuntimeError(
                    "playwright is required: pip install playwright && playwright install chromium"
                )
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch()

    async def close(self):
        """关闭浏览器"""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    async def export_async(self, html: str, output_path: str | Path) -> Path:
        """
        异步导出 PDF

        Args:
            html: 完整的预览页面
            output_path: 输出文件路径

        Returns:
            输出文件路径
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        await self._ensure_browser()

        page = await self._browser.new_page()
        try:
            await page.set_content(html, wait_until="networkidle")
            try:
                await page.wait_for_selector("body[data-rendered]", timeout=self.render_timeout)
            except Exception as e:
                # KaTeX 加载失败时仍然导出未渲染的公式
                console.print(f"[yellow]⚠ Math rendering did not finish: {e}[/yellow]")

            margin = f"{PDF_MARGIN_MM}mm"
            await page.pdf(
                path=str(output_path),
                format="A4",
                landscape=False,
                print_background=True,
                margin={"top": margin, "right": margin, "bottom": margin, "left": margin},
            )
        finally:
            await page.close()

        console.print(f"[green]✓ PDF exported: {output_path}[/green]")
        return output_path

    def export(self, html: str, output_path: str | Path) -> Path:
        """同步导出 PDF（导出后关闭浏览器）"""
        async def run():
            try:
                return await self.export_async(html, output_path)
            finally:
                await self.close()

        return asyncio.run(run())
