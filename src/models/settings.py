"""
Immutable planner settings passed explicitly to the view assemblers.
"""

from dataclasses import dataclass, field, replace

from core.config import DEFAULT_SETTINGS, LAYOUTS, SUPPORTED_LANGUAGES, VIEW_MODES


@dataclass(frozen=True)
class CalendarSettings:
    """User-facing display preferences."""

    fade_past: bool = True
    show_burnout_warnings: bool = True
    active_category_ids: frozenset[str] = field(default_factory=frozenset)
    view_mode: str = "weekday"  # "weekday" or "numeric"
    layout: str = "horizontal"  # "horizontal", "vertical" or "cyclic"
    is_bird_eye_view: bool = False
    language: str = "en"

    @classmethod
    def from_dict(cls, data: dict | None) -> "CalendarSettings":
        """
        Build settings from stored/request data.

        Unknown keys are ignored and invalid values fall back to defaults,
        mirroring how a corrupted settings blob should never block a render.
        """
        merged = {**DEFAULT_SETTINGS, **(data or {})}

        view_mode = merged["view_mode"]
        if view_mode not in VIEW_MODES:
            view_mode = DEFAULT_SETTINGS["view_mode"]

        layout = merged["layout"]
        if layout not in LAYOUTS:
            layout = DEFAULT_SETTINGS["layout"]

        language = merged["language"]
        if language not in SUPPORTED_LANGUAGES:
            language = DEFAULT_SETTINGS["language"]

        category_ids = merged["active_category_ids"]
        if not isinstance(category_ids, (list, tuple, set, frozenset)):
            category_ids = []

        return cls(
            fade_past=bool(merged["fade_past"]),
            show_burnout_warnings=bool(merged["show_burnout_warnings"]),
            active_category_ids=frozenset(str(c) for c in category_ids),
            view_mode=view_mode,
            layout=layout,
            is_bird_eye_view=bool(merged["is_bird_eye_view"]),
            language=language,
        )

    def to_dict(self) -> dict:
        return {
            "fade_past": self.fade_past,
            "show_burnout_warnings": self.show_burnout_warnings,
            "active_category_ids": sorted(self.active_category_ids),
            "view_mode": self.view_mode,
            "layout": self.layout,
            "is_bird_eye_view": self.is_bird_eye_view,
            "language": self.language,
        }

    def with_categories(self, category_ids) -> "CalendarSettings":
        """Return settings with every category active when none is selected."""
        if self.active_category_ids:
            return self
        return replace(self, active_category_ids=frozenset(category_ids))
