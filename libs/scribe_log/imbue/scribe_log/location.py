import inspect
import sys

from pydantic import Field

from imbue.scribe_log.frozen_model import FrozenModel


class SourceLocation(FrozenModel):
    """Call site of a log statement. Optional on every item."""

    filename: str = Field(description="Source file path as reported by the interpreter")
    package: str = Field(description="Top-level package containing the module")
    module: str = Field(description="Dotted module name")
    line: int = Field(ge=0, description="1-based line number")
    column: int = Field(ge=0, description="1-based column number, 0 if unknown")


class LocationCaptureError(ValueError):
    """Raised when the requested stack depth is beyond the outermost frame."""


def capture_location(depth: int = 1) -> SourceLocation:
    """Return the location of the frame `depth` levels above the caller.

    depth=0 is the function calling capture_location itself, depth=1 (the
    default) is that function's caller.
    """
    try:
        frame = sys._getframe(depth + 1)
    except ValueError as e:
        raise LocationCaptureError(f"No frame at depth {depth}") from e
    try:
        frame_info = inspect.getframeinfo(frame, context=0)
        module_name = frame.f_globals.get("__name__") or "__main__"
        positions = frame_info.positions
        column = positions.col_offset + 1 if positions is not None and positions.col_offset is not None else 0
        return SourceLocation(
            filename=frame_info.filename,
            package=_package_of(module_name, frame.f_globals.get("__package__")),
            module=module_name,
            line=frame_info.lineno,
            column=column,
        )
    finally:
        del frame


def _package_of(module_name: str, package_name: str | None) -> str:
    if package_name:
        return package_name.split(".")[0]
    return module_name.split(".")[0]


def location_to_string(location: SourceLocation) -> str:
    """Render a location as `package:module filename:line:column`."""
    return f"{location.package}:{location.module} {location.filename}:{location.line}:{location.column}"
