"""Drawing surfaces the renderer paints into, and the host container."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Protocol

from .models import Viewport

_LOGGER = logging.getLogger("globemap.surface")


class DrawingSurface(Protocol):
    width: float
    height: float

    def resize(self, width: float, height: float) -> None: ...

    def clear(self) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def close_path(self) -> None: ...

    def fill(self, color: str) -> None: ...

    def stroke(self, color: str, width: float) -> None: ...


@dataclass(frozen=True, slots=True)
class DrawCommand:
    op: str
    args: tuple[Any, ...] = ()


class RecordingSurface:
    """Surface that keeps the command stream instead of painting."""

    def __init__(self, width: float = 0.0, height: float = 0.0) -> None:
        self.width = float(width)
        self.height = float(height)
        self.commands: list[DrawCommand] = []
        self.clear_count = 0

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self.commands.append(DrawCommand("resize", (self.width, self.height)))

    def clear(self) -> None:
        self.clear_count += 1
        self.commands.append(DrawCommand("clear"))

    def begin_path(self) -> None:
        self.commands.append(DrawCommand("begin_path"))

    def move_to(self, x: float, y: float) -> None:
        self.commands.append(DrawCommand("move_to", (x, y)))

    def line_to(self, x: float, y: float) -> None:
        self.commands.append(DrawCommand("line_to", (x, y)))

    def close_path(self) -> None:
        self.commands.append(DrawCommand("close_path"))

    def fill(self, color: str) -> None:
        self.commands.append(DrawCommand("fill", (color,)))

    def stroke(self, color: str, width: float) -> None:
        self.commands.append(DrawCommand("stroke", (color, width)))

    def paint_ops(self) -> list[DrawCommand]:
        """Only the fill/stroke commands issued since the last clear."""
        ops: list[DrawCommand] = []
        for command in self.commands:
            if command.op == "clear":
                ops = []
            elif command.op in ("fill", "stroke"):
                ops.append(command)
        return ops


class MatplotlibSurface:
    """Agg-backed raster surface with a top-left pixel origin."""

    def __init__(self, width: float, height: float, *, dpi: float = 100.0, background: str = "white") -> None:
        self.dpi = float(dpi)
        self.background = background
        self.width = 0.0
        self.height = 0.0
        self._vertices: list[tuple[float, float]] = []
        self._codes: list[int] = []
        self._zorder = 0
        self._figure, self._ax = self._create_figure()
        self.resize(width, height)

    def _create_figure(self) -> tuple[Any, Any]:
        figure_cls, canvas_cls, _, _ = _require_matplotlib()
        fig = figure_cls(dpi=self.dpi)
        canvas_cls(fig)
        ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        ax.axis("off")
        return fig, ax

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self._figure.set_size_inches(max(self.width, 1.0) / self.dpi, max(self.height, 1.0) / self.dpi)
        self._figure.patch.set_facecolor(self.background)
        self._ax.set_xlim(0.0, max(self.width, 1.0))
        self._ax.set_ylim(max(self.height, 1.0), 0.0)

    def clear(self) -> None:
        for artist in list(self._ax.patches):
            artist.remove()
        self._vertices = []
        self._codes = []
        self._zorder = 0

    def begin_path(self) -> None:
        self._vertices = []
        self._codes = []

    def move_to(self, x: float, y: float) -> None:
        _, _, path_cls, _ = _require_matplotlib()
        self._vertices.append((x, y))
        self._codes.append(path_cls.MOVETO)

    def line_to(self, x: float, y: float) -> None:
        _, _, path_cls, _ = _require_matplotlib()
        if not self._codes:
            self.move_to(x, y)
            return
        self._vertices.append((x, y))
        self._codes.append(path_cls.LINETO)

    def close_path(self) -> None:
        _, _, path_cls, _ = _require_matplotlib()
        if not self._codes:
            return
        self._vertices.append(self._vertices[-1])
        self._codes.append(path_cls.CLOSEPOLY)

    def fill(self, color: str) -> None:
        self._add_patch(facecolor=_css_color(color), edgecolor="none", linewidth=0.0)

    def stroke(self, color: str, width: float) -> None:
        if width <= 0:
            return
        self._add_patch(facecolor="none", edgecolor=_css_color(color), linewidth=width * 72.0 / self.dpi)

    def _add_patch(self, **style: Any) -> None:
        if not self._codes:
            return
        _, _, path_cls, patch_cls = _require_matplotlib()
        self._zorder += 1
        patch = patch_cls(
            path_cls(self._vertices, self._codes),
            zorder=self._zorder,
            joinstyle="round",
            capstyle="round",
            **style,
        )
        self._ax.add_patch(patch)

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._figure.savefig(path, dpi=self.dpi, format="png", facecolor=self._figure.get_facecolor())
        _LOGGER.debug("Surface written to %s", path)
        return path


class Holder:
    """Host container: reports its bounding box and announces size changes."""

    def __init__(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)
        self._listeners: list[Callable[[], None]] = []

    def bounding_box(self) -> Viewport:
        return Viewport(width=self._width, height=self._height)

    def add_resize_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def set_size(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)
        for listener in list(self._listeners):
            listener()


def _css_color(color: str) -> str:
    """Expand CSS shorthand hex (`#F90`) into the long form matplotlib accepts."""
    value = color.strip()
    if value.startswith("#") and len(value) in (4, 5):
        return "#" + "".join(ch * 2 for ch in value[1:])
    return value


def _require_matplotlib() -> tuple[Any, Any, Any, Any]:
    try:
        from matplotlib.backends.backend_agg import FigureCanvasAgg
        from matplotlib.figure import Figure
        from matplotlib.patches import PathPatch
        from matplotlib.path import Path as MplPath
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("matplotlib is required for raster rendering") from exc
    return (Figure, FigureCanvasAgg, MplPath, PathPatch)
