from __future__ import annotations

import io
import logging
from datetime import date
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    HRFlowable,
    Image,
    KeepInFrame,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from .errors import RenderError
from .layout import GENERATOR_NAME, BriefLayoutBuilder
from .models.brief import BriefData
from .models.layout import BriefLayout, FooterBlock, HeaderBlock, LayoutItem, LayoutSection

logger = logging.getLogger(__name__)

PRIMARY = HexColor("#1a1a1a")
SECONDARY = HexColor("#666666")
ACCENT = HexColor("#000000")
BORDER = HexColor("#e5e5e5")
BG_LIGHT = HexColor("#f9f9f9")
TAG_BG = "#f3f4f6"
URGENT_BG = HexColor("#fee2e2")
URGENT_TEXT = HexColor("#dc2626")

PAGE_MARGIN = 40
FOOTER_HEIGHT = 24


def _text(value: str) -> str:
    return escape(value).replace("\n", "<br/>")


def _attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


class BriefPdfRenderer:
    """Turns a brief into a single A4 page using ReportLab platypus."""

    def __init__(
        self,
        *,
        logo_path: Path | str | None = None,
        layout_builder: BriefLayoutBuilder | None = None,
    ) -> None:
        self._logo_path = Path(logo_path) if logo_path else None
        self._builder = layout_builder or BriefLayoutBuilder()
        self._styles = self._build_styles()

    def render(self, brief: BriefData, *, today: date | None = None) -> bytes:
        today = today or date.today()
        layout = self._builder.build(brief, today=today)
        return self.render_layout(layout, title=brief.general.project_name or "Creative Brief")

    def render_layout(self, layout: BriefLayout, *, title: str = "Creative Brief") -> bytes:
        if self._logo_path is not None and not self._logo_path.is_file():
            raise RenderError(f"Logo file not found: {self._logo_path}")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN + FOOTER_HEIGHT,
            title=title,
            author=GENERATOR_NAME,
            subject="Creative brief",
            invariant=1,
        )

        def draw_footer(canvas: Any, document: Any) -> None:
            self._draw_footer(canvas, document, layout.footer)

        try:
            content = self._header(layout.header, doc.width)
            for section in layout.sections:
                content.extend(self._section(section, doc.width))
            # everything must fit on one page
            story = [KeepInFrame(doc.width, doc.height, content, mode="shrink")]
            doc.build(story, onFirstPage=draw_footer, onLaterPages=draw_footer)
        except RenderError:
            raise
        except Exception as exc:
            logger.error("PDF build failed", exc_info=True, extra={"title": title})
            raise RenderError(f"Failed to generate PDF: {exc}") from exc

        return buffer.getvalue()

    def _build_styles(self) -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()["BodyText"]
        body = ParagraphStyle("BriefBody", parent=base, fontName="Helvetica", fontSize=9, leading=13.5, textColor=PRIMARY)
        return {
            "body": body,
            "caption": ParagraphStyle("BriefCaption", parent=body, fontSize=7, leading=10, textColor=SECONDARY),
            "caption_right": ParagraphStyle("BriefCaptionRight", parent=body, fontSize=7, leading=10, textColor=SECONDARY, alignment=TA_RIGHT),
            "client": ParagraphStyle("BriefClient", parent=body, fontName="Helvetica-Bold", fontSize=20, leading=24),
            "title": ParagraphStyle(
                "BriefTitle", parent=body, fontName="Helvetica-Bold", fontSize=24, leading=28, textColor=ACCENT, alignment=TA_RIGHT
            ),
            "logo": ParagraphStyle("BriefLogo", parent=body, fontName="Helvetica-Bold", fontSize=12, leading=14, textColor=SECONDARY),
            "badge": ParagraphStyle("BriefBadge", parent=body, fontName="Helvetica-Bold", fontSize=8, leading=10, textColor=URGENT_TEXT),
            "section": ParagraphStyle("BriefSection", parent=body, fontName="Helvetica-Bold", fontSize=10, leading=12, textColor=ACCENT),
            "label": ParagraphStyle("BriefLabel", parent=body, fontSize=7, leading=10, textColor=SECONDARY, spaceBefore=4),
            "value": ParagraphStyle("BriefValue", parent=body, spaceAfter=2),
        }

    def _header(self, header: HeaderBlock, width: float) -> list[Any]:
        styles = self._styles
        if self._logo_path is not None:
            logo: Any = Image(str(self._logo_path), width=120, height=40, kind="proportional")
        else:
            logo = Table([[Paragraph("BRIEF", styles["logo"])]], colWidths=[120])
            logo.setStyle(
                TableStyle(
                    [
                        ("BOX", (0, 0), (-1, -1), 0.75, BORDER),
                        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                        ("TOPPADDING", (0, 0), (-1, -1), 8),
                        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
                    ]
                )
            )

        badge: Any = ""
        if header.urgent:
            badge = Table([[Paragraph("URGENT PRIORITY", styles["badge"])]])
            badge.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), URGENT_BG)]))

        top = Table([[logo, badge]], colWidths=[width / 2, width / 2])
        top.setStyle(
            TableStyle(
                [
                    ("ALIGN", (1, 0), (1, 0), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )

        client_block = [
            Paragraph("CLIENT / BRAND", styles["caption"]),
            Paragraph(_text(header.client_name or "Client Name"), styles["client"]),
        ]
        project_block = [
            Paragraph("PROJECT", styles["caption_right"]),
            Paragraph(_text(header.project_name or "Project Name"), styles["title"]),
        ]
        titles = Table([[client_block, project_block]], colWidths=[width / 2, width / 2])
        titles.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )

        flowables: list[Any] = [top, Spacer(1, 16), titles]
        if header.meta:
            cells = [
                [Paragraph(_text(item.label), styles["caption"]), Paragraph(_text(item.value or ""), styles["value"])]
                for item in header.meta
            ]
            meta = Table([cells], colWidths=[width / len(cells)] * len(cells))
            meta.setStyle(TableStyle([("LEFTPADDING", (0, 0), (-1, -1), 0), ("VALIGN", (0, 0), (-1, -1), "TOP")]))
            flowables.extend([Spacer(1, 12), meta])
        flowables.extend([Spacer(1, 8), HRFlowable(width="100%", thickness=0.75, color=BORDER), Spacer(1, 16)])
        return flowables

    def _section(self, section: LayoutSection, width: float) -> list[Any]:
        heading = Table([[Paragraph(_text(section.heading), self._styles["section"])]], colWidths=[width])
        heading.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), BG_LIGHT),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        flowables: list[Any] = [heading, Spacer(1, 4)]
        for item in section.items:
            flowables.extend(self._item(item))
        flowables.append(Spacer(1, 12))
        return flowables

    def _item(self, item: LayoutItem) -> list[Any]:
        styles = self._styles
        label = Paragraph(_text(item.label.upper()), styles["label"])
        if item.kind == "field":
            return [label, Paragraph(_text(item.value or ""), styles["value"])]
        if item.kind == "checkboxes":
            marks = "&nbsp;&nbsp;&nbsp;".join(
                f'<font name="ZapfDingbats">n</font>&nbsp;{_text(entry)}' for entry in item.entries
            )
            return [label, Paragraph(marks, styles["value"])]
        if item.kind == "tags":
            tags = "&nbsp;&nbsp;".join(
                f'<font backColor="{TAG_BG}">&nbsp;{_text(entry)}&nbsp;</font>' for entry in item.entries
            )
            return [label, Paragraph(tags, styles["value"])]
        if item.kind == "lines":
            return [label, *(Paragraph(_text(entry), styles["value"]) for entry in item.entries)]
        if item.kind == "links":
            links = "&nbsp;&nbsp;&nbsp;".join(
                f'<link href="{_attr(link.href)}"><u>{_text(link.label)}</u></link>' for link in item.links
            )
            return [label, Paragraph(links, styles["value"])]
        raise RenderError(f"Unsupported layout item: {item.kind}")

    def _draw_footer(self, canvas: Any, doc: Any, footer: FooterBlock) -> None:
        left = doc.leftMargin
        right = doc.leftMargin + doc.width
        baseline = PAGE_MARGIN - 8
        canvas.saveState()
        canvas.setStrokeColor(BORDER)
        canvas.setLineWidth(0.75)
        canvas.line(left, baseline + 14, right, baseline + 14)
        canvas.setFont("Helvetica", 7)
        canvas.setFillColor(SECONDARY)
        canvas.drawString(left, baseline, footer.marker)
        canvas.drawCentredString((left + right) / 2, baseline, footer.generated_line)
        canvas.drawRightString(right, baseline, footer.page_label)
        canvas.restoreState()


def render_pdf(brief: BriefData, *, today: date | None = None, logo_path: Path | str | None = None) -> bytes:
    return BriefPdfRenderer(logo_path=logo_path).render(brief, today=today)


__all__ = ["BriefPdfRenderer", "render_pdf"]
