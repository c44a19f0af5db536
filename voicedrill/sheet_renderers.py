"""Renderer implementations for practice-sheet output formats."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Any, cast

from voicedrill.sheet_models import ScoreDocument


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class SheetRenderer(ABC):
    """Abstract practice-sheet renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(
        self,
        *,
        title: str,
        legend: list[str] | None = None,
        musicxml_bytes: bytes | None = None,
        score_document: ScoreDocument | None = None,
    ) -> str:
        """Render output into a file content string."""


class VerovioHtmlRenderer(SheetRenderer):
    """Engrave MusicXML with verovio into a printable HTML practice sheet."""

    # Verovio layout constants (abstract units; ~1 unit ≈ 0.1 mm)
    _PAGE_HEIGHT: int = 2970  # A4 portrait height
    _PAGE_WIDTH: int = 2100  # A4 portrait width
    _SCALE: int = 45  # chord symbols stay legible at arm's length
    _PAGE_MARGIN: int = 100

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(
        self,
        *,
        title: str,
        legend: list[str] | None = None,
        musicxml_bytes: bytes | None = None,
        score_document: ScoreDocument | None = None,
    ) -> str:
        if musicxml_bytes is None:
            raise ValueError("musicxml_bytes is required for HTML rendering.")

        return self.build_html(title, self.render_svgs(musicxml_bytes), legend or [])

    def render_svgs(self, musicxml_bytes: bytes) -> list[str]:
        """
        Engrave a MusicXML document into one SVG string per page.

        Raises:
            ValueError: If verovio cannot load the MusicXML data.
        """
        import verovio

        tk = verovio.toolkit()
        tk.setOptions(
            {
                "pageHeight": self._PAGE_HEIGHT,
                "pageWidth": self._PAGE_WIDTH,
                "scale": self._SCALE,
                "pageMarginTop": self._PAGE_MARGIN,
                "pageMarginBottom": self._PAGE_MARGIN,
                "pageMarginLeft": self._PAGE_MARGIN,
                "pageMarginRight": self._PAGE_MARGIN,
                "adjustPageHeight": True,
            }
        )

        if not tk.loadData(musicxml_bytes.decode("utf-8")):
            raise ValueError("verovio could not load the MusicXML data.")

        page_count: int = tk.getPageCount()
        return [self._page_svg(tk, page_no) for page_no in range(1, page_count + 1)]

    def _page_svg(self, toolkit: Any, page_no: int) -> str:
        """Render one page; older verovio bindings only take positional arguments."""
        try:
            return cast(str, toolkit.renderToSVG(pageNo=page_no, xmlDeclaration=False))
        except TypeError:
            return cast(str, toolkit.renderToSVG(page_no))

    def build_html(self, title: str, svgs: list[str], legend: list[str] | None = None) -> str:
        """
        Wrap engraved pages and the bar-by-bar legend in one HTML document.

        Every page sits in its own ``.page`` div; pages break when printed.
        """
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""
        items = "".join(f"<li>{_escape_html(line)}</li>" for line in legend or [])
        legend_html = f'  <ol class="legend">{items}</ol>\n' if items else ""
        pages = "\n".join(f'  <div class="page">{svg}</div>' for svg in svgs)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>{title_safe}</title>
  <style>
    body {{ font-family: Georgia, serif; margin: 0; padding: 2rem; background: #fafafa; }}
    h1 {{ text-align: center; font-size: 1.5rem; color: #222; }}
    .legend {{ columns: 2; font-family: Menlo, monospace; font-size: 0.85rem; max-width: 860px; margin: 0 auto 2rem; }}
    .page {{ background: #fff; max-width: 860px; margin: 0 auto 2rem; padding: 1rem; }}
    .page svg {{ display: block; width: 100%; height: auto; }}
    @media print {{
      body {{ background: #fff; padding: 0; }}
      .page {{ page-break-after: always; max-width: 100%; margin: 0; padding: 0; }}
      .page:last-child {{ page-break-after: avoid; }}
    }}
  </style>
</head>
<body>
{heading}{legend_html}{pages}
</body>
</html>"""


class VexflowMarkdownRenderer(SheetRenderer):
    """Render a practice sheet as Markdown with an embedded VexFlow script."""

    @property
    def default_extension(self) -> str:
        return ".md"

    def render(
        self,
        *,
        title: str,
        legend: list[str] | None = None,
        musicxml_bytes: bytes | None = None,
        score_document: ScoreDocument | None = None,
    ) -> str:
        if score_document is None:
            raise ValueError("score_document is required for md-vexflow rendering.")

        title_safe = _escape_html(title)
        legend_md = "".join(f"{i}. {line}\n" for i, line in enumerate(legend or [], start=1))
        score_json = json.dumps(asdict(score_document), separators=(",", ":"), ensure_ascii=False)
        score_json = score_json.replace("</", "<\\/")

        return f"""# {title_safe}

{legend_md}
The bars below are drawn by VexFlow; open this file in a Markdown viewer that runs embedded scripts.

<style>
  #voicedrill-score {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(360px, 1fr)); gap: 1rem; }}
  .voicedrill-bar {{ border: 1px solid #d8d8d8; border-radius: 6px; background: #fff; padding: 0.25rem; }}
</style>

<div id="voicedrill-score"></div>
<script id="voicedrill-score-data" type="application/json">{score_json}</script>
<script type="module">
  import {{
    Accidental,
    Formatter,
    Renderer,
    Stave,
    StaveConnector,
    StaveNote,
    Voice
  }} from "https://cdn.jsdelivr.net/npm/vexflow@4.2.3/build/esm/entry/vexflow.js";

  const host = document.getElementById("voicedrill-score");
  const payload = JSON.parse(document.getElementById("voicedrill-score-data").textContent || "{{}}");
  const beats = Number(payload.beats) || 4;
  const beatValue = Number(payload.beat_value) || 4;

  const toStaveNotes = (entries, clef) => entries.map((entry) => {{
    const staveNote = new StaveNote({{ clef, keys: entry.keys, duration: entry.duration }});
    (entry.accidentals || []).forEach((symbol, noteIndex) => {{
      if (symbol) {{
        staveNote.addModifier(new Accidental(symbol), noteIndex);
      }}
    }});
    return staveNote;
  }});

  (payload.measures || []).forEach((bar, index) => {{
    const barRoot = document.createElement("div");
    barRoot.className = "voicedrill-bar";
    host.appendChild(barRoot);

    const renderer = new Renderer(barRoot, Renderer.Backends.SVG);
    renderer.resize(360, 250);
    const context = renderer.getContext();

    const trebleStave = new Stave(10, 40, 330).addClef("treble");
    const bassStave = new Stave(10, 140, 330).addClef("bass");
    if (index === 0) {{
      trebleStave.addTimeSignature(payload.time_signature);
      bassStave.addTimeSignature(payload.time_signature);
    }}
    trebleStave.setContext(context).draw();
    bassStave.setContext(context).draw();
    context.fillText(`${{index + 1}}. ${{bar.symbol}}`, 16, 24);

    const brace = new StaveConnector(trebleStave, bassStave);
    brace.setType(StaveConnector.type.BRACE);
    brace.setContext(context).draw();

    const trebleVoice = new Voice({{ num_beats: beats, beat_value: beatValue }}).setMode(Voice.Mode.SOFT);
    const bassVoice = new Voice({{ num_beats: beats, beat_value: beatValue }}).setMode(Voice.Mode.SOFT);
    trebleVoice.addTickables(toStaveNotes(bar.treble, "treble"));
    bassVoice.addTickables(toStaveNotes(bar.bass, "bass"));

    new Formatter().joinVoices([trebleVoice]).joinVoices([bassVoice]).format([trebleVoice, bassVoice], 240);
    trebleVoice.draw(context, trebleStave);
    bassVoice.draw(context, bassStave);
  }});
</script>
"""
