"""Tests for style options, YAML persistence and themes."""

import pytest

from flexpivot.config import StyleOptions, ZebraStyle, load_style, parse_zebra_style
from flexpivot.errors import InvalidInputError
from flexpivot.themes import THEMES, apply_theme, get_bold_font, get_theme


class TestStyleOptions:

    def test_defaults(self):
        options = StyleOptions()
        assert options.background == "#81A1C1"
        assert options.foreground == "#FFFFFF"
        assert options.border_color == "#FFFFFF"
        assert options.font_size == 14
        assert options.font_name is None
        assert options.zebra_style is ZebraStyle.CLASSIC
        assert options.keep_source is True

    def test_zebra_style_from_string(self):
        assert StyleOptions(zebra_style="stats").zebra_style is ZebraStyle.STATS
        assert parse_zebra_style(ZebraStyle.NONE) is ZebraStyle.NONE

    def test_unknown_zebra_style(self):
        with pytest.raises(InvalidInputError, match="classic, stats, none"):
            StyleOptions(zebra_style="checkered")

    def test_invalid_sizes(self):
        with pytest.raises(InvalidInputError):
            StyleOptions(font_size=0)
        with pytest.raises(InvalidInputError):
            StyleOptions(column_width=-1)
        with pytest.raises(InvalidInputError):
            StyleOptions(padding=-2)

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / "style.yaml"
        options = StyleOptions(
            background="#000000",
            border_color=None,
            zebra_style="none",
            drop_stats=True,
        )
        options.to_yaml(path)
        assert "zebra_style: none" in path.read_text()
        assert StyleOptions.from_yaml(path) == options

    def test_unknown_keys_rejected(self):
        with pytest.raises(InvalidInputError, match="colour"):
            StyleOptions.from_dict({"colour": "#FFFFFF"})

    def test_load_style_defaults(self):
        assert load_style(None) == StyleOptions()


class TestThemes:

    def test_get_theme_fallback(self):
        assert get_theme("ocean").name == "ocean"
        assert get_theme("unknown").name == "nord"

    def test_nord_matches_defaults(self):
        themed = apply_theme(StyleOptions(), THEMES["nord"])
        assert themed == StyleOptions()

    def test_apply_theme_keeps_other_options(self):
        options = StyleOptions(font_size=9, drop_stats=True)
        themed = apply_theme(options, get_theme("print"))
        assert themed.background == "#E0E0E0"
        assert themed.font_name == "Times-Roman"
        assert themed.font_size == 9
        assert themed.drop_stats is True
        assert options.background == "#81A1C1"

    def test_bold_fonts(self):
        assert get_bold_font("Helvetica") == "Helvetica-Bold"
        assert get_bold_font("Times-Roman") == "Times-Bold"
        assert get_bold_font("Courier-Bold") == "Courier-Bold"
