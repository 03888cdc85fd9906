# ecs_diagram/constants.py
from __future__ import annotations

# Default source locations (relative to the working directory).
COMPONENTS_SRC_DEFAULT = "src/components.ts"
ENTITIES_SRC_DEFAULT = "src/index.ts"

# Declaration shapes recognised by the extractors.
COMPONENT_FACTORY = "defComponent"
SLOT_ACCESS_PREFIX = "c"

# Capability flag -> keyword searched for in the declaration span.
FLAG_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("is_marker", "Marker"),
    ("is_text", "LoroText"),
    ("is_map", "LoroMap"),
    ("is_list", "LoroList"),
    ("is_movable_list", "LoroMovableList"),
)
ENTITY_REF_TOKEN = "EntityIdStr"

# Layout rows per entity type. Unlisted entity types land in the overflow row.
LEVELS: dict[str, int] = {
    "Space": 0,
    "Category": 1,
    "Channel": 1,
    "Thread": 2,
    "Message": 3,
    "Image": 4,
    "WikiPage": 2,
    "Announcement": 3,
    "TimelineItem": 3,
    "Reactions": 4,
}

# Slot name -> entity types it may point at.
SLOT_TARGETS: dict[str, tuple[str, ...]] = {
    "Channels": ("Channel",),
    "SidebarItems": ("Channel", "Category"),
    "Threads": ("Thread",),
    "Timeline": ("Message", "Announcement", "TimelineItem"),
    "ReplyTo": ("Message",),
    "Images": ("Image",),
    "WikiPages": ("WikiPage",),
}

SLOT_COLORS: dict[str, str] = {
    "Channels": "#2196f3",
    "SidebarItems": "#009688",
    "Threads": "#ff9800",
    "Timeline": "#9c27b0",
    "ReplyTo": "#f44336",
    "Images": "#4caf50",
}
DEFAULT_LINK_COLOR = "#666"
DEFAULT_MARKER_ID = "default-arrowhead"

# Config file sections whose defaults can be dropped wholesale.
REPLACEABLE_TABLES: tuple[str, ...] = ("levels", "colors", "targets")

OUTPUTS_DEFAULT: tuple[str, ...] = ("graph", "html")
