import logging

import numpy as np
import pytest

from fastfib.cli import format_value, main


@pytest.mark.parametrize("n, expected", [("0", "0"), ("1", "1"), ("5", "5"), ("10", "55"), ("20", "6765")])
def test_fibonacci_command(capsys, n, expected):
    rc = main(["fibonacci", n])
    assert rc == 0
    assert capsys.readouterr().out == expected + "\n"


@pytest.mark.parametrize("backend", ["bigint", "int64", "float64", "longdouble"])
def test_backends_print_plain_integers(capsys, backend):
    rc = main(["fibonacci", "50", "--backend", backend])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "12586269025"


def test_iterative_method(capsys):
    assert main(["fibonacci", "90", "--method", "iterative"]) == 0
    assert capsys.readouterr().out.strip() == "2880067194370816120"


def test_missing_index_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["fibonacci"])
    assert exc.value.code == 2
    assert "usage" in capsys.readouterr().err


def test_missing_command_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_negative_index_returns_error(capsys):
    rc = main(["fibonacci", "-1"])
    assert rc == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: n must be >= 0" in captured.err


def test_int64_overflow_returns_error(capsys):
    rc = main(["fibonacci", "92", "--backend", "int64"])
    assert rc == 1
    assert "does not fit in int64" in capsys.readouterr().err


def test_strict_precision_loss_returns_error(capsys):
    rc = main(["fibonacci", "80", "--backend", "float64", "--strict"])
    assert rc == 1
    assert "max exact index 77" in capsys.readouterr().err


def test_backend_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("FASTFIB_BACKEND", "int64")
    rc = main(["fibonacci", "92"])
    assert rc == 1
    assert "int64" in capsys.readouterr().err


def test_unknown_backend_in_environment(monkeypatch, capsys):
    monkeypatch.setenv("FASTFIB_BACKEND", "decimal")
    rc = main(["fibonacci", "10"])
    assert rc == 1
    assert "unknown backend" in capsys.readouterr().err


def test_limits_command(capsys):
    assert main(["limits"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:3] == ["bigint\tunbounded", "int64\t91", "float64\t77"]
    assert lines[3].startswith("longdouble\t")


def test_verbose_logs_engine(capsys, caplog):
    caplog.set_level(logging.DEBUG, logger="fastfib")
    assert main(["-v", "fibonacci", "10"]) == 0
    assert capsys.readouterr().out.strip() == "55"
    assert "F(10) on bigint" in caplog.text


def test_verbose_applies_on_repeated_calls(capsys, caplog):
    assert main(["fibonacci", "10"]) == 0
    assert main(["-v", "fibonacci", "20"]) == 0
    assert main(["fibonacci", "30"]) == 0
    assert capsys.readouterr().out.split() == ["55", "6765", "832040"]
    assert "F(20) on bigint" in caplog.text
    assert "F(10) on bigint" not in caplog.text
    assert "F(30) on bigint" not in caplog.text


def test_float_overflow_returns_error(capsys):
    rc = main(["fibonacci", "2049", "--backend", "float64"])
    assert rc == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "finite range of float64" in captured.err


def test_format_value():
    assert format_value(55) == "55"
    assert format_value(np.float64(55.0)) == "55"
    assert format_value(np.float64(1e20)) == "100000000000000000000"
