"""
Tests for display formatting and output escaping.
"""
from datetime import date

import ddt  # type: ignore[import]

from folio.api import content as api
from folio.lib.test_utils import TestCase


@ddt.ddt
class HumanReadableTestCase(TestCase):
    """
    Turning stored values into display strings.
    """

    @ddt.data(
        (0, "0 bytes"),
        (512, "512 bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5 MB"),
        (3 * 1024 * 1024 * 1024, "3 GB"),
    )
    @ddt.unpack
    def test_bytes(self, num_bytes, expected):
        assert api.convert_bytes_to_human_readable(num_bytes) == expected

    def test_fields(self):
        download = api.Download(
            date=date(2024, 3, 5),
            format="application/pdf",
            file_size=2048,
            rights=10,
            tags=[4, 2],
            description='<p><a href="FOLIO_LINKabout">About</a></p>',
        )
        assert api.make_data_human_readable(download, "date") == "5 March 2024"
        assert api.make_data_human_readable(download, "format") == "pdf"
        assert api.make_data_human_readable(download, "file_size") == "2 KB"
        assert api.make_data_human_readable(download, "rights") == "Public domain."
        assert api.make_data_human_readable(download, "tags") == [4, 2]
        assert "https://folio.example.com/about" in api.make_data_human_readable(download, "description")
        assert api.make_data_human_readable(download, "expires_on") == ""


class EscapeTestCase(TestCase):
    """
    Escaping values for HTML output.
    """

    def setUp(self):
        super().setUp()
        self.article = api.Article(
            title='Fish & "Chips" <b>',
            description="<p>Kept <em>as is</em></p>",
        )

    def test_plain_fields_are_escaped(self):
        assert api.escape_for_xss(self.article, "title") == "Fish &amp; &quot;Chips&quot; &lt;b&gt;"

    def test_html_fields_are_not_escaped(self):
        assert api.escape_for_xss(self.article, "description") == "<p>Kept <em>as is</em></p>"
        assert api.escape_for_xss(self.article, "icon") == api.Article.icon

    def test_html_fields_escaped_for_editing(self):
        escaped = api.escape_for_xss(self.article, "description", escape_html=True)
        assert escaped == "&lt;p&gt;Kept &lt;em&gt;as is&lt;/em&gt;&lt;/p&gt;"

    def test_derived_fields(self):
        assert api.escape_for_xss(self.article, "template") == "article"
        assert api.escape_for_xss(self.article, "handler") == "content"

    def test_unknown_or_zeroed(self):
        assert api.escape_for_xss(self.article, "password") is None
        assert api.escape_for_xss(api.Tag(title="x"), "creator") is None
