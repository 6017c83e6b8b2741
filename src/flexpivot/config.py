"""Style options and YAML loading for the layout engine."""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Optional
import yaml

from .errors import InvalidInputError


class ZebraStyle(Enum):
    """Body banding modes."""
    CLASSIC = "classic"  # Every other body row
    STATS = "stats"      # Blocks of rows sharing one row-group's stat rows
    NONE = "none"


@dataclass
class StyleOptions:
    """Visual options applied when laying out a pivot table."""

    # Header and row-label colors
    background: str = "#81A1C1"
    foreground: str = "#FFFFFF"

    # Border applied to every cell; None disables the pass
    border_color: Optional[str] = "#FFFFFF"
    border_width: float = 1.0

    # Rule drawn above the first stat row of each row-group
    separator_color: str = "#D8DEE9"
    separator_width: float = 2.0

    font_size: float = 14
    font_name: Optional[str] = None

    zebra_style: ZebraStyle = ZebraStyle.CLASSIC
    zebra_color: str = "#ECEFF4"

    drop_stats: bool = False
    keep_source: bool = True

    padding: float = 10.0
    column_width: float = 1.5  # Inches

    # Raise instead of degrading when a table has several column-grouping variables
    strict_layout: bool = False

    def __post_init__(self):
        self.zebra_style = parse_zebra_style(self.zebra_style)
        if self.font_size <= 0:
            raise InvalidInputError(f"font_size must be positive, got {self.font_size}")
        if self.column_width <= 0:
            raise InvalidInputError(f"column_width must be positive, got {self.column_width}")
        if self.padding < 0:
            raise InvalidInputError(f"padding must not be negative, got {self.padding}")

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "StyleOptions":
        """Build options from a plain mapping, rejecting unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidInputError(f"Unknown style options: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> "StyleOptions":
        """Load style options from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["zebra_style"] = self.zebra_style.value
        return data

    def to_yaml(self, path: Path) -> None:
        """Save style options to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def parse_zebra_style(value) -> ZebraStyle:
    """Convert a zebra style name to ZebraStyle, raising InvalidInputError if unknown."""
    if isinstance(value, ZebraStyle):
        return value
    try:
        return ZebraStyle(value)
    except ValueError:
        choices = ", ".join(z.value for z in ZebraStyle)
        raise InvalidInputError(
            f"zebra_style must be one of {choices}, got {value!r}"
        ) from None


def load_style(path: Optional[Path] = None) -> StyleOptions:
    """Load style options from path or return the defaults."""
    if path is None:
        return StyleOptions()
    return StyleOptions.from_yaml(path)
