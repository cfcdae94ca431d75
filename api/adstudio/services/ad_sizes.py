from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional


@dataclass(frozen=True)
class AdSize:
    id: str
    name: str
    width: int
    height: int
    aspect_ratio: str
    channel: str

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["aspectRatio"] = data.pop("aspect_ratio")
        return data


AD_SIZES: List[AdSize] = [
    AdSize("instagram-square", "Instagram Square", 1080, 1080, "1:1", "instagram"),
    AdSize("instagram-story", "Instagram Story", 1080, 1920, "9:16", "instagram"),
    AdSize("facebook-feed", "Facebook Feed", 1200, 628, "1.91:1", "facebook"),
    AdSize("facebook-story", "Facebook Story", 1080, 1920, "9:16", "facebook"),
    AdSize("pinterest", "Pinterest Pin", 1000, 1500, "2:3", "pinterest"),
    AdSize("custom", "Custom Size", 1080, 1080, "custom", "other"),
]


def get_ad_size(size_id: Optional[str]) -> AdSize:
    """Look up a size by id; unknown ids fall back to the first entry."""
    for size in AD_SIZES:
        if size.id == size_id:
            return size
    return AD_SIZES[0]
