from dataclasses import dataclass, field
from typing import Callable, List

from .models import SelectedFile
from .view import FileInput

DRAG_EVENTS = ("dragenter", "dragover", "dragleave", "drop")
HIGHLIGHT_EVENTS = ("dragenter", "dragover")
UNHIGHLIGHT_EVENTS = ("dragleave", "drop")


@dataclass
class DragEvent:
    type: str
    files: List[SelectedFile] = field(default_factory=list)
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self):
        self.default_prevented = True

    def stop_propagation(self):
        self.propagation_stopped = True


class DragDropAdapter:
    """Routes drag-and-drop gestures on an input's container into a normal selection change."""

    def __init__(self, file_input: FileInput, on_change: Callable[[], None]):
        self.file_input = file_input
        self.on_change = on_change

    def handle(self, event: DragEvent):
        if event.type not in DRAG_EVENTS:
            raise ValueError(f"Unsupported drag event: {event.type}")

        # Keep the browser from navigating to the dropped file
        event.prevent_default()
        event.stop_propagation()

        if event.type in HIGHLIGHT_EVENTS:
            self.file_input.highlighted = True
        elif event.type in UNHIGHLIGHT_EVENTS:
            self.file_input.highlighted = False

        if event.type == "drop":
            self.file_input.files = list(event.files)
            self.on_change()
