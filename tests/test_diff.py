"""
测试逐行差异对比
"""

from latexy.editor import diff_lines, has_changes, render_diff_html


class TestDiffLines:

    def test_identical(self):
        rows = diff_lines("a\nb", "a\nb")
        assert [r.status for r in rows] == ["equal", "equal"]
        assert not has_changes(rows)

    def test_unequal_lengths(self):
        rows = diff_lines("a\nb", "a\nc\nd")
        assert [(r.original, r.modified, r.status) for r in rows] == [
            ("a", "a", "equal"),
            ("b", "c", "changed"),
            ("", "d", "changed"),
        ]

    def test_insertion_shifts_following_lines(self):
        rows = diff_lines("a\nb\nc", "x\na\nb\nc")
        assert len(rows) == 4
        assert all(r.status == "changed" for r in rows)

    def test_empty_inputs(self):
        rows = diff_lines("", "")
        assert len(rows) == 1
        assert rows[0].status == "equal"


class TestRenderDiffHtml:

    def test_escapes_content(self):
        html = render_diff_html(diff_lines("<b>", "<i>"))
        assert "&lt;b&gt;" in html
        assert "&lt;i&gt;" in html
        assert "<b>" not in html

    def test_classes_and_placeholders(self):
        html = render_diff_html(diff_lines("same\nold", "same"))
        assert 'class="diff-pane original"' in html
        assert 'class="diff-pane modified"' in html
        assert '<div class="diff-line removed">old</div>' in html
        assert '<div class="diff-line added">&nbsp;</div>' in html
        assert '<div class="diff-line">same</div>' in html
