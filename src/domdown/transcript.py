"""Chat transcript assembly.

Renders each turn of a conversation with the Markdown renderer and stitches
the turns into a single Markdown document: title, export metadata, optional
system instructions, then one section per turn with an optional collapsible
"thinking" block.

Example:
    >>> from datetime import datetime, UTC
    >>> from domdown import parse_html
    >>> builder = TranscriptBuilder()
    >>> _ = builder.add_turn("user", parse_html("<p>Hi</p>"))
    >>> _ = builder.add_turn("model", parse_html("<p>Hello!</p>"))
    >>> doc = builder.build("Greeting", exported_at=datetime(2026, 1, 2, tzinfo=UTC))
    >>> print(render_transcript(doc).splitlines()[0])
    # Greeting
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from domdown.cleanup import Policy, identity
from domdown.config import RenderConfig
from domdown.images import CollectedImage
from domdown.nodes import Node
from domdown.renderers.markdown import MarkdownRenderer
from domdown.utils.logger import get_logger
from domdown.utils.text import sanitize_filename

logger = get_logger(__name__)

_ROLE_LABEL = re.compile(r"^\s*(User|Model)\s*\n")
_IMAGE_TARGET = re.compile(r"\]\(([^)\s]+)\)")

ROLE_HEADINGS: dict[str, str] = {
    "user": "## 👤 User",
    "model": "## 🤖 Model",
}


@dataclass(frozen=True, slots=True)
class Turn:
    """One rendered conversation turn."""

    role: str
    content: str
    thinking: str | None = None


@dataclass(frozen=True, slots=True)
class Transcript:
    """A whole conversation, ready to be rendered as Markdown."""

    title: str
    turns: tuple[Turn, ...]
    exported_at: datetime
    source_url: str | None = None
    system_prompt: str | None = None
    source_name: str = "Google AI Studio"
    images: tuple[CollectedImage, ...] = ()
    failed_images: tuple[str, ...] = ()


def clean_turn_content(content: str) -> str:
    """Drop a leading "User"/"Model" role label line and surrounding whitespace."""
    return _ROLE_LABEL.sub("", content, count=1).strip()


def role_heading(role: str) -> str:
    return ROLE_HEADINGS.get(role.lower(), f"## {role.strip().capitalize() or 'Unknown'}")


def export_basename(title: str, exported_at: datetime) -> str:
    """Filesystem-safe base name: sanitized title plus a timestamp.

    Examples:
        >>> export_basename("My chat: part 2", datetime(2026, 3, 4, 5, 6, 7))
        'My_chat_part_2_2026-03-04T05-06-07'
    """
    safe = sanitize_filename(title, max_length=80, allow_dots=False) or "export"
    return f"{safe}_{exported_at.strftime('%Y-%m-%dT%H-%M-%S')}"


def render_transcript(transcript: Transcript) -> str:
    """Render a transcript as a Markdown document."""
    md: list[str] = [f"# {transcript.title}", ""]
    md.append(
        f"> Exported from {transcript.source_name} on {transcript.exported_at.isoformat()}"
    )
    if transcript.source_url:
        md.append(f"> Source: {transcript.source_url}")
    md.append("")
    if transcript.system_prompt:
        md.extend(["## System Instructions", "", "```", transcript.system_prompt, "```", ""])
    md.extend(["---", ""])
    for turn in transcript.turns:
        md.extend([role_heading(turn.role), ""])
        if turn.thinking:
            md.extend([
                "<details>",
                "<summary>💭 Thinking / Reasoning</summary>",
                "",
                turn.thinking,
                "",
                "</details>",
                "",
            ])
        md.extend([turn.content, "", "---", ""])
    return "\n".join(md)


class TranscriptBuilder:
    """Render turns one at a time and collect their images.

    Each turn is an independent render, so image numbering restarts per turn.
    Filenames that collide with an earlier turn's images are renamed (and the
    turn's Markdown rewritten) so the whole transcript stays collision-free.
    """

    __slots__ = ("_renderer", "_policy", "_turns", "_images", "_failed", "_filenames")

    def __init__(
        self,
        config: RenderConfig | None = None,
        *,
        policy: Policy | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            config: Render configuration for every turn
            policy: Cleanup applied to each turn's tree before rendering
        """
        self._renderer = MarkdownRenderer(config)
        self._policy = policy or identity
        self._turns: list[Turn] = []
        self._images: list[CollectedImage] = []
        self._failed: list[str] = []
        self._filenames: set[str] = set()

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def images(self) -> tuple[CollectedImage, ...]:
        return tuple(self._images)

    def _render(self, tree: Node | None, turn_index: int) -> str:
        if tree is None:
            return ""
        result = self._renderer.render(self._policy(tree))
        markdown = result.markdown
        renames: dict[str, str] = {}
        for name in (*(img.filename for img in result.images), *result.failed_images):
            if name in self._filenames:
                stem, dot, ext = name.rpartition(".")
                new_name = f"{stem}_t{turn_index}{dot}{ext}"
                suffix = 2
                while new_name in self._filenames:
                    new_name = f"{stem}_t{turn_index}_{suffix}{dot}{ext}"
                    suffix += 1
                renames[name] = new_name
            self._filenames.add(renames.get(name, name))
        if renames:
            markdown = _IMAGE_TARGET.sub(
                lambda m: f"]({renames.get(m.group(1), m.group(1))})", markdown
            )
        self._images.extend(
            replace(img, filename=renames[img.filename]) if img.filename in renames else img
            for img in result.images
        )
        self._failed.extend(renames.get(name, name) for name in result.failed_images)
        return markdown

    def add_turn(self, role: str, content: Node | None, thinking: Node | None = None) -> Turn | None:
        """Render and append a turn.

        Returns:
            The appended Turn, or None when both content and thinking are empty
            (the turn is skipped).
        """
        turn_index = len(self._turns) + 1
        text = clean_turn_content(self._render(content, turn_index))
        thought = self._render(thinking, turn_index) or None
        if not text and not thought:
            logger.warning("Turn %d (%s) is empty, skipping", turn_index, role)
            return None
        turn = Turn(role=role.lower(), content=text, thinking=thought)
        self._turns.append(turn)
        return turn

    def build(
        self,
        title: str,
        *,
        exported_at: datetime | None = None,
        source_url: str | None = None,
        system_prompt: str | None = None,
        source_name: str = "Google AI Studio",
    ) -> Transcript:
        return Transcript(
            title=title,
            turns=tuple(self._turns),
            exported_at=exported_at or datetime.now(UTC),
            source_url=source_url,
            system_prompt=(system_prompt or "").strip() or None,
            source_name=source_name,
            images=tuple(self._images),
            failed_images=tuple(self._failed),
        )
