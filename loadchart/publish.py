# loadchart/publish.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol

from .errors import EmbedNotFoundError
from .util.console import eprint, obs_enabled

STATUS_REPLACED = "Replaced"
STATUS_UNCHANGED = "No replacement"


class EmbedSurface(Protocol):
    def list_block_children(self, block_id: str, *, page_size: int = 50) -> List[Dict[str, Any]]: ...

    def update_embed(self, block_id: str, url: str) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class EmbedBlock:
    id: str
    url: str


def find_embed_block(blocks: List[Dict[str, Any]], page_id: str = "") -> EmbedBlock:
    """First embed block among a page's children."""
    for b in blocks:
        if not isinstance(b, dict) or b.get("type") != "embed":
            continue
        embed = b.get("embed") if isinstance(b.get("embed"), dict) else {}
        return EmbedBlock(id=str(b.get("id") or ""), url=str(embed.get("url") or ""))
    raise EmbedNotFoundError(
        f"Destination page {page_id!r} has no embed block; add an embed block to the page "
        "and check NOTION_PAGE_ID."
    )


def publish_chart(surface: EmbedSurface, page_id: str, chart_url: str) -> str:
    """Point the page's embed at `chart_url` if it isn't already; returns the status."""
    block = find_embed_block(surface.list_block_children(page_id, page_size=50), page_id)
    if block.url == chart_url:
        if obs_enabled():
            eprint(f"[loadchart.publish] unchanged block={block.id}")
        return STATUS_UNCHANGED

    surface.update_embed(block.id, chart_url)
    if obs_enabled():
        eprint(f"[loadchart.publish] replaced block={block.id}")
    return STATUS_REPLACED
