"""
Unit tests for the .docx template renderer.
"""

import io

import pytest
from docx import Document

from sat_portal.core.exceptions import RenderError, TemplateError
from sat_portal.modules.documents.renderer import render


def _texts(content: bytes) -> list[str]:
    return [paragraph.text for paragraph in Document(io.BytesIO(content)).paragraphs]


class TestRender:
    """Tests for render."""

    def test_fills_placeholders(self, make_docx):
        template = make_docx("Kepada Yth. {nama}", "NIM: {nim}")

        output = render(template, {"nama": "Ani", "nim": "2010511001"})

        assert _texts(output) == ["Kepada Yth. Ani", "NIM: 2010511001"]

    def test_missing_value_renders_dash(self, make_docx):
        template = make_docx("Ruang: {ruang}", "Judul: {judul}")

        output = render(template, {"judul": ""})

        assert _texts(output) == ["Ruang: -", "Judul: -"]

    def test_tag_split_over_runs(self, make_docx):
        template = make_docx(split_runs=("Nomor: {no_surat} tanggal {tgl}",))

        output = render(template, {"no_surat": "001/UN/2024", "tgl": "20 Juni 2024"})

        assert _texts(output) == ["Nomor: 001/UN/2024 tanggal 20 Juni 2024"]

    def test_unknown_tag_renders_dash(self, make_docx):
        template = make_docx("Harap dicetak {dan} dibawa", "Tanpa tag")

        output = render(template, {})

        assert _texts(output) == ["Harap dicetak - dibawa", "Tanpa tag"]

    def test_output_is_deterministic(self, docx_template):
        fields = {"nama": "Ani", "tgl": "20 Juni 2024"}

        assert render(docx_template, fields) == render(docx_template, fields)

    def test_table_cells_are_filled(self):
        document = Document()
        table = document.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "Penguji"
        table.cell(0, 1).text = "{dosen3}"
        buffer = io.BytesIO()
        document.save(buffer)

        output = render(buffer.getvalue(), {"dosen3": "Budi (NIP: 1)"})

        rendered = Document(io.BytesIO(output))
        assert rendered.tables[0].cell(0, 1).text == "Budi (NIP: 1)"

    def test_unclosed_tag(self, make_docx):
        template = make_docx("Nama: {nama")

        with pytest.raises(RenderError):
            render(template, {"nama": "Ani"})

    def test_literal_brace_text_is_kept(self, make_docx):
        template = make_docx("Catatan: {lihat lampiran} untuk {nama}")

        output = render(template, {"nama": "Ani"})

        assert _texts(output) == ["Catatan: {lihat lampiran} untuk Ani"]

    def test_empty_template(self):
        with pytest.raises(TemplateError):
            render(b"", {})

    def test_not_a_docx(self):
        with pytest.raises(TemplateError):
            render(b"plain text, not a zip", {})
