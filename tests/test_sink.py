import os
from unittest.mock import patch

import pytest

from wktkit import sink
from wktkit.errors import IOFailureError, TruncatedError

# Unit tests for the 'sink' module functions.
#
# The test boundary is the os module's write interface; short writes are
# simulated by patching os.write.


def test_writes_named_file(tmp_path):
    path = tmp_path / "out.wkt"

    written = sink.write_output(str(path), b"POINT (1 2)")

    assert written == 11
    assert path.read_bytes() == b"POINT (1 2)"


def test_existing_file_is_not_truncated(tmp_path):
    path = tmp_path / "out.wkt"
    path.write_bytes(b"XXXXXXXXXX")

    sink.write_output(str(path), b"abc")

    assert path.read_bytes() == b"abcXXXXXXX"


@pytest.mark.parametrize("destination", [None, "-"])
def test_writes_stdout(destination, capfd):
    written = sink.write_output(destination, b"POINT (1 2)")

    assert written == 11
    assert capfd.readouterr().out == "POINT (1 2)"


def test_is_stdout():
    assert sink.is_stdout(None)
    assert sink.is_stdout("-")
    assert not sink.is_stdout("out.wkt")


def test_open_failure_reports_path(tmp_path):
    path = tmp_path / "no-such-dir" / "out.wkt"

    with pytest.raises(IOFailureError, match="out.wkt: No such file or directory"):
        sink.write_output(str(path), b"POINT (1 2)")


def test_short_write_is_truncated(tmp_path):
    path = tmp_path / "out.wkt"
    real_write = os.write

    def short_write(fd, data):
        return real_write(fd, data[:4])

    with patch("wktkit.sink.os.write", side_effect=short_write):
        with pytest.raises(TruncatedError, match="truncated"):
            sink.write_output(str(path), b"POINT (1 2)")

    # No rollback: the partial content stays.
    assert path.read_bytes() == b"POIN"


def test_truncated_on_stdout_names_stdout():
    with patch("wktkit.sink.os.write", return_value=0):
        with pytest.raises(TruncatedError, match="<stdout>"):
            sink.write_output(None, b"POINT (1 2)")


def test_write_failure(tmp_path):
    path = tmp_path / "out.wkt"

    with patch("wktkit.sink.os.write", side_effect=OSError(28, "No space left on device")):
        with pytest.raises(IOFailureError, match="No space left on device"):
            sink.write_output(str(path), b"POINT (1 2)")
