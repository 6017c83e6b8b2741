"""Tests for the command-line interface."""

import json

from flexpivot.cli import main


def _write_inputs(tmp_path, pivot):
    data_path = tmp_path / "table.csv"
    meta_path = tmp_path / "meta.yaml"
    pivot.data.to_csv(data_path, index=False)
    meta_path.write_text(
        "rows: [sex]\n"
        "cols: [treatment]\n"
        "cols_values:\n"
        "  treatment: [A, B]\n"
    )
    return data_path, meta_path


def test_renders_pdf_and_json(tmp_path, crosstab_pivot, capsys):
    data_path, meta_path = _write_inputs(tmp_path, crosstab_pivot)
    out = tmp_path / "out" / "table.pdf"
    layout = tmp_path / "out" / "layout.json"

    status = main([
        "--data", str(data_path),
        "--meta", str(meta_path),
        "--out", str(out),
        "--json", str(layout),
        "--theme", "slate",
        "--drop-stats",
    ])

    assert status == 0
    assert out.read_bytes().startswith(b"%PDF")
    data = json.loads(layout.read_text())
    assert data["col_keys"] == ["sex", "A", "B"]
    assert data["body"][3] == ["M", "42.3%", "11.9%"]
    assert "Body rows: 4" in capsys.readouterr().out


def test_style_file(tmp_path, crosstab_pivot):
    data_path, meta_path = _write_inputs(tmp_path, crosstab_pivot)
    style_path = tmp_path / "style.yaml"
    style_path.write_text("zebra_style: none\nborder_color: null\nfont_size: 10\n")
    layout = tmp_path / "layout.json"

    status = main([
        "--data", str(data_path),
        "--meta", str(meta_path),
        "--style", str(style_path),
        "--out", str(tmp_path / "t.pdf"),
        "--json", str(layout),
    ])

    assert status == 0
    rules = json.loads(layout.read_text())["rules"]
    assert not any("border_left" in r["style"] for r in rules)
    assert any(r["style"].get("font_size") == 10 for r in rules)


def test_invalid_zebra_style_reports_error(tmp_path, crosstab_pivot, capsys):
    data_path, meta_path = _write_inputs(tmp_path, crosstab_pivot)
    status = main([
        "--data", str(data_path),
        "--meta", str(meta_path),
        "--out", str(tmp_path / "t.pdf"),
        "--zebra-style", "diagonal",
    ])
    assert status == 1
    assert "zebra_style" in capsys.readouterr().err


def test_zero_font_size_is_rejected(tmp_path, crosstab_pivot, capsys):
    data_path, meta_path = _write_inputs(tmp_path, crosstab_pivot)
    status = main([
        "--data", str(data_path),
        "--meta", str(meta_path),
        "--out", str(tmp_path / "t.pdf"),
        "--font-size", "0",
    ])
    assert status == 1
    assert "font_size must be positive" in capsys.readouterr().err
    assert not (tmp_path / "t.pdf").exists()
