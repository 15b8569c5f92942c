"""Export a two-turn chat with an embedded image to a Markdown file."""

from pathlib import Path

from domdown import TranscriptBuilder, ai_studio_chrome, parse_html, render_transcript
from domdown.cli import write_images
from domdown.transcript import export_basename

PIXEL = "data:image/png;base64,iVBORw0KGgo="

builder = TranscriptBuilder(policy=ai_studio_chrome)
builder.add_turn("user", parse_html("<ms-cmark-node><p>Draw me a pixel</p></ms-cmark-node>"))
builder.add_turn(
    "model",
    parse_html(f'<p>Here it is:</p><img alt="pixel" src="{PIXEL}"><button>Copy</button>'),
    thinking=parse_html("<p>One pixel, <b>PNG</b>.</p>"),
)
transcript = builder.build("Pixel art")

out_dir = Path("export")
out_dir.mkdir(exist_ok=True)
target = out_dir / f"{export_basename(transcript.title, transcript.exported_at)}.md"
target.write_text(render_transcript(transcript), encoding="utf-8")
write_images(transcript.images, out_dir)
print(f"Wrote {target} and {len(transcript.images)} image(s)")
