"""
Sketch map editing: incident placement and freehand lines.

`SketchCanvas.payload()` produces the `incidents` / `drawnLines` fields of a
sketch save.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel

LINE_COLOR = "#FF0000"
LINE_WEIGHT = 3
TEXT_TOOL = "tekstblok"
TEXT_PLACEHOLDER = "TEKST"

Position = tuple[float, float]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Incident(BaseModel):
    id: str
    type: str
    position: Position
    timestamp: str
    rotation: int = 0
    scale: float = 1
    flipped: bool = False
    text: str | None = None


class DrawnLine(BaseModel):
    id: str
    positions: list[Position]
    color: str = LINE_COLOR
    weight: int = LINE_WEIGHT
    timestamp: str


class SketchCanvas:
    def __init__(self, *, now: Callable[[], datetime] = _utc_now) -> None:
        self.now = now
        self.incidents: list[Incident] = []
        self.drawn_lines: list[DrawnLine] = []
        self.selected_tool: str | None = None
        self.drawing_mode = False
        self.is_drawing = False
        self.current_line: list[Position] = []

    def _timestamp(self) -> str:
        return self.now().isoformat()

    def select_tool(self, tool: str | None) -> None:
        self.selected_tool = tool

    def set_drawing_mode(self, enabled: bool) -> None:
        self.drawing_mode = enabled
        if not enabled:
            # Leaving drawing mode drops an unfinished line.
            self.is_drawing = False
            self.current_line = []

    def click(self, lat: float, lng: float) -> Incident | None:
        """
        Extend the line in drawing mode, otherwise place the selected tool.
        """
        point = (lat, lng)
        if self.drawing_mode:
            if not self.is_drawing:
                self.is_drawing = True
                self.current_line = [point]
            else:
                self.current_line.append(point)
            return None

        if self.selected_tool is None:
            return None

        incident = Incident(
            id=f"{self.selected_tool}-{uuid.uuid4().hex}",
            type=self.selected_tool,
            position=point,
            timestamp=self._timestamp(),
            text=TEXT_PLACEHOLDER if self.selected_tool == TEXT_TOOL else None,
        )
        self.incidents.append(incident)
        return incident

    def double_click(self) -> DrawnLine | None:
        if not (self.drawing_mode and self.is_drawing and len(self.current_line) > 1):
            return None

        line = DrawnLine(
            id=f"line-{uuid.uuid4().hex}",
            positions=list(self.current_line),
            timestamp=self._timestamp(),
        )
        self.drawn_lines.append(line)
        self.is_drawing = False
        self.current_line = []
        return line

    def update_incident(self, incident_id: str, **changes: Any) -> Incident | None:
        for index, incident in enumerate(self.incidents):
            if incident.id == incident_id:
                updated = incident.model_copy(update=changes)
                self.incidents[index] = updated
                return updated
        return None

    def remove_incident(self, incident_id: str) -> None:
        self.incidents = [i for i in self.incidents if i.id != incident_id]

    def remove_line(self, line_id: str) -> None:
        self.drawn_lines = [line for line in self.drawn_lines if line.id != line_id]

    def clear(self) -> None:
        self.incidents = []
        self.drawn_lines = []
        self.is_drawing = False
        self.current_line = []

    def load(self, sketch: dict[str, Any]) -> None:
        self.clear()
        self.incidents = [Incident.model_validate(item) for item in sketch.get("incidents") or []]
        lines = sketch.get("drawn_lines", sketch.get("drawnLines")) or []
        self.drawn_lines = [DrawnLine.model_validate(item) for item in lines]

    def payload(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "incidents": [i.model_dump(mode="json", exclude_none=True) for i in self.incidents],
            "drawnLines": [line.model_dump(mode="json") for line in self.drawn_lines],
        }
