#!/usr/bin/env python3
"""
Functional Test for the hipdf command line and configuration

Verifies:
1. Configuration loading and merging
2. Log level handling
3. Argument translation into EmbedOptions
4. End-to-end composition and exit codes

Usage:
    python tests/functional_tests/cli_test.py
"""

import json
import tempfile
from pathlib import Path

import pikepdf
import pytest

from hipdf import utilities
from hipdf import cli
from hipdf.config import load_config
from hipdf.embedding import FirstOnly, Grid, Pages, Range, VerticalStack
from hipdf.utilities import Print, get_log_level, set_log_level

from sample_pdfs import run_tests, write_pdf


def test_default_config():
    Print("HEADER", "Configuration")
    config = load_config()
    assert config['version'] == "0.3.0"
    assert config['embedding']['resource_prefix'] == "XO"
    assert config['embedding']['layouts']['grid']['columns'] == 2
    assert config['hatching']['style'] == "diagonal_right"
    assert config['blocks']['name_prefix'] == "Blk"


def test_config_overrides_merge_one_level():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "hipdf.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "embedding": {"layout": "grid"}}))

        config = load_config(path)
        assert config['log_level'] == "DEBUG"
        assert config['embedding']['layout'] == "grid"
        # untouched keys in a merged section survive
        assert config['embedding']['resource_prefix'] == "XO"


def test_config_errors():
    with pytest.raises(FileNotFoundError):
        load_config(Path("/nonexistent/hipdf.json"))

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_config(path)


def test_log_levels():
    previous = get_log_level()
    try:
        set_log_level("debug")
        assert get_log_level() == "DEBUG"
        set_log_level("WARNING")
        assert get_log_level() == "WARNING"
        with pytest.raises(ValueError, match="Available levels"):
            set_log_level("chatty")
    finally:
        set_log_level(previous)


def test_print_respects_threshold(capsys):
    previous = get_log_level()
    try:
        set_log_level("WARNING")
        Print("INFO", "quiet message")
        Print("WARNING", "loud message")
    finally:
        set_log_level(previous)

    err = capsys.readouterr().err
    assert "quiet message" not in err
    assert "loud message" in err


def test_cpu_and_memory_usage():
    assert "CPU Usage" in utilities.CPU_and_Mem_usage()


def test_build_options():
    Print("HEADER", "Argument translation")
    parser = cli.build_parser()
    config = load_config()

    args = parser.parse_args(["in.pdf", "out.pdf"])
    options = cli.build_options(args, config)
    assert isinstance(options.layout, FirstOnly)
    assert options.page_range is None

    args = parser.parse_args([
        "in.pdf", "out.pdf", "--layout", "grid", "--columns", "3", "--gap", "4",
        "--max-size", "100", "120", "--first-page", "2", "--last-page", "5",
        "--position", "10", "700", "--rotation", "90",
    ])
    options = cli.build_options(args, config)
    assert options.layout == Grid(columns=3, gap_x=4.0, gap_y=4.0)
    assert (options.max_width, options.max_height) == (100, 120)
    assert options.page_range == Range(1, 4)
    assert options.position == (10, 700)
    assert options.rotation == 90

    args = parser.parse_args(["in.pdf", "out.pdf", "--layout", "vertical", "--pages", "3,1"])
    options = cli.build_options(args, config)
    assert options.layout == VerticalStack(10.0)
    assert options.page_range == Pages([2, 0])


def test_invalid_page_list_is_rejected():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["in.pdf", "out.pdf", "--pages", "0,2"])
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["in.pdf", "out.pdf", "--pages", "one,two"])


def test_compose_grid():
    Print("HEADER", "End-to-end composition")
    with tempfile.TemporaryDirectory() as tmp:
        source = write_pdf(Path(tmp) / "source.pdf", [(200, 300)] * 5)
        output = Path(tmp) / "out" / "sheet.pdf"

        code = cli.main([
            str(source), str(output),
            "--layout", "grid", "--columns", "2", "--max-size", "100", "150",
            "--position", "20", "650", "--page-size", "400", "842", "--stats",
        ])
        assert code == 0

        with pikepdf.open(output) as result:
            assert len(result.pages) == 1
            page = result.pages[0]
            assert [float(v) for v in page.MediaBox] == [0, 0, 400, 842]
            assert sorted(page.Resources.XObject.keys()) == ['/XO1', '/XO2', '/XO3', '/XO4', '/XO5']


def test_exit_codes():
    with tempfile.TemporaryDirectory() as tmp:
        source = write_pdf(Path(tmp) / "source.pdf", [(100, 100)] * 2)
        output = Path(tmp) / "out.pdf"

        assert cli.main([str(Path(tmp) / "missing.pdf"), str(output)]) == 1
        assert cli.main([str(source), str(output), "--pages", "9"]) == 1

        garbage = Path(tmp) / "garbage.pdf"
        garbage.write_bytes(b"not a pdf at all")
        assert cli.main([str(garbage), str(output)]) == 2

        assert cli.main([str(source), str(output), "--layout", "grid", "--columns", "0"]) == 2
        assert not output.exists()


def main():
    tests = [
        test_default_config,
        test_config_overrides_merge_one_level,
        test_config_errors,
        test_log_levels,
        test_cpu_and_memory_usage,
        test_build_options,
        test_invalid_page_list_is_rejected,
        test_compose_grid,
        test_exit_codes,
    ]
    run_tests("CLI Functional Test", tests)


if __name__ == "__main__":
    main()
