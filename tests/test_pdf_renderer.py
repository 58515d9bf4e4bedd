from datetime import date

import pymupdf
import pytest

from creative_brief.errors import RenderError
from creative_brief.pdf_renderer import BriefPdfRenderer, render_pdf
from creative_brief.schema import default_brief

TODAY = date(2026, 2, 11)


def _pages(content: bytes) -> list[str]:
    with pymupdf.open(stream=content, filetype="pdf") as document:
        return [" ".join(page.get_text().split()) for page in document]


def test_filled_brief_renders_single_page(ramadan_brief):
    content = render_pdf(ramadan_brief, today=TODAY)

    assert content.startswith(b"%PDF")
    pages = _pages(content)
    assert len(pages) == 1
    text = pages[0]
    assert "7Ciel" in text
    assert "Ramadan Special" in text
    assert "URGENT PRIORITY" in text
    assert "01. OBJECTIVES & STRATEGY" in text
    assert "KEY OBJECTIVE" in text
    assert "Break your fast with us" in text
    assert "OPEN LINK 1" in text
    assert "INTERNAL USE ONLY" in text
    assert "PAGE 1 OF 1" in text
    assert "Head of marketing" not in text


def test_default_brief_shows_placeholders_and_empty_sections():
    text = _pages(render_pdf(default_brief(), today=TODAY))[0]

    assert "Client Name" in text
    assert "Project Name" in text
    assert "06. ASSETS & DELIVERABLES" in text
    assert "URGENT PRIORITY" not in text
    assert "KEY OBJECTIVE" not in text
    assert "Generated by Brief Generator" in text


def test_asset_links_are_clickable(ramadan_brief):
    content = render_pdf(ramadan_brief, today=TODAY)

    with pymupdf.open(stream=content, filetype="pdf") as document:
        uris = [link.get("uri") for link in document[0].get_links()]
    assert "https://drive.example.com/ramadan" in uris


def test_long_brief_is_shrunk_onto_one_page(ramadan_brief):
    brief = ramadan_brief.model_copy(deep=True)
    brief.copy.headlines = [f"Headline number {i}" for i in range(60)]
    brief.audience.profile = "Long persona description. " * 80

    assert len(_pages(render_pdf(brief, today=TODAY))) == 1


def test_rendering_is_deterministic(ramadan_brief):
    renderer = BriefPdfRenderer()
    assert renderer.render(ramadan_brief, today=TODAY) == renderer.render(ramadan_brief, today=TODAY)


def test_missing_logo_raises_render_error(tmp_path, ramadan_brief):
    renderer = BriefPdfRenderer(logo_path=tmp_path / "missing.png")
    with pytest.raises(RenderError):
        renderer.render(ramadan_brief, today=TODAY)
