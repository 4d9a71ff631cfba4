"""Tests for byte-range planning and ranged file reads."""

import asyncio
from pathlib import Path

import pytest

from music_streamer.domain.streaming.ranges import iter_file_range, parse_range, plan_stream

SIZE = 1000
MIME = "audio/mpeg"


class TestPlanStreamFull:
    """Test responses without a Range header."""

    def test_no_header_is_full_200(self):
        plan = plan_stream(None, SIZE, MIME)
        assert plan.status == 200
        assert plan.headers["Content-Length"] == str(SIZE)
        assert plan.headers["Content-Type"] == MIME
        assert (plan.start, plan.end) == (0, SIZE - 1)

    def test_blank_header_is_full_200(self):
        assert plan_stream("  ", SIZE, MIME).status == 200

    def test_empty_file_has_no_body(self):
        plan = plan_stream(None, 0, MIME)
        assert plan.status == 200
        assert plan.headers["Content-Length"] == "0"
        assert not plan.has_body


class TestPlanStreamPartial:
    """Test satisfiable single ranges."""

    def test_first_hundred_bytes(self):
        plan = plan_stream("bytes=0-99", SIZE, MIME)
        assert plan.status == 206
        assert plan.headers["Content-Range"] == f"bytes 0-99/{SIZE}"
        assert plan.headers["Content-Length"] == "100"
        assert plan.headers["Accept-Ranges"] == "bytes"
        assert plan.headers["Content-Type"] == MIME
        assert plan.length == 100

    def test_open_ended_range_is_whole_file(self):
        plan = plan_stream("bytes=0-", SIZE, MIME)
        assert plan.status == 206
        assert (plan.start, plan.end) == (0, SIZE - 1)
        assert plan.headers["Content-Range"] == f"bytes 0-{SIZE - 1}/{SIZE}"

    def test_tail_range(self):
        plan = plan_stream("bytes=500-999", SIZE, MIME)
        assert plan.headers["Content-Length"] == "500"
        assert plan.headers["Content-Range"] == "bytes 500-999/1000"

    def test_last_byte(self):
        plan = plan_stream(f"bytes={SIZE - 1}-", SIZE, MIME)
        assert (plan.start, plan.end) == (SIZE - 1, SIZE - 1)
        assert plan.length == 1

    def test_end_past_eof_is_clamped(self):
        """Test an over-long end is clamped to the last byte, not rejected."""
        plan = plan_stream("bytes=900-5000", SIZE, MIME)
        assert plan.status == 206
        assert plan.headers["Content-Range"] == f"bytes 900-999/{SIZE}"
        assert plan.headers["Content-Length"] == "100"

    def test_whitespace_and_case_tolerated(self):
        assert plan_stream(" Bytes = 0 - 9 ", SIZE, MIME).status == 206


class TestPlanStreamUnsatisfiable:
    """Test ranges answered with 416."""

    @pytest.mark.parametrize(
        "header",
        [
            f"bytes={SIZE}-",  # start == size
            f"bytes={SIZE + 10}-{SIZE + 20}",
            "bytes=50-10",  # start > end
            "bytes=-100",  # suffix form unsupported
            "bytes=0-10,20-30",  # multi-range unsupported
            "items=0-10",
            "bytes=abc-def",
            "bytes=",
            "garbage",
        ],
    )
    def test_416_with_star_content_range(self, header):
        plan = plan_stream(header, SIZE, MIME)
        assert plan.status == 416
        assert plan.headers["Content-Range"] == f"bytes */{SIZE}"
        assert not plan.has_body

    def test_any_range_on_empty_file(self):
        plan = plan_stream("bytes=0-", 0, MIME)
        assert plan.status == 416
        assert plan.headers["Content-Range"] == "bytes */0"


def test_parse_range_returns_inclusive_window():
    assert parse_range("bytes=10-19", SIZE) == (10, 19)
    assert parse_range("bytes=10-", SIZE) == (10, SIZE - 1)
    assert parse_range("bytes=10-5", SIZE) is None


class TestIterFileRange:
    """Test ranged reads from disk."""

    @pytest.fixture
    def data_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "data.bin"
        path.write_bytes(bytes(range(256)) * 4)
        return path

    @pytest.mark.anyio
    async def test_exact_window(self, data_file: Path):
        chunks = [c async for c in iter_file_range(data_file, 10, 19)]
        assert b"".join(chunks) == bytes(range(10, 20))

    @pytest.mark.anyio
    async def test_small_chunks_concatenate(self, data_file: Path):
        chunks = [c async for c in iter_file_range(data_file, 0, 1023, chunk_size=100)]
        assert len(chunks) == 11
        assert b"".join(chunks) == data_file.read_bytes()

    @pytest.mark.anyio
    async def test_stops_at_eof_if_file_shrank(self, data_file: Path):
        chunks = [c async for c in iter_file_range(data_file, 1000, 2000)]
        assert b"".join(chunks) == data_file.read_bytes()[1000:]

    @pytest.mark.anyio
    async def test_early_close_releases_handle(self, data_file: Path, monkeypatch):
        """Test an aborted download closes the file."""
        opened = []
        real_open = open

        def tracking_open(*args, **kwargs):
            f = real_open(*args, **kwargs)
            opened.append(f)
            return f

        monkeypatch.setattr("builtins.open", tracking_open)

        gen = iter_file_range(data_file, 0, 1023, chunk_size=10)
        first = await gen.__anext__()
        assert len(first) == 10
        await gen.aclose()

        assert opened and opened[0].closed

    @pytest.mark.anyio
    async def test_cancel_before_first_chunk_releases_handle(
        self, data_file: Path, monkeypatch
    ):
        """Test a client that drops before any bytes are sent leaks no handle."""
        opened = []
        real_open = open

        def tracking_open(*args, **kwargs):
            f = real_open(*args, **kwargs)
            opened.append(f)
            return f

        monkeypatch.setattr("builtins.open", tracking_open)

        gen = iter_file_range(data_file, 0, 1023)
        task = asyncio.ensure_future(gen.__anext__())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(opened) == 1
        assert opened[0].closed
