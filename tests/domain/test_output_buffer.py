"""Tests for OutputBuffer entity."""

import pytest

from serialconsole.domain import OUTPUT_BUFFER_MAX_LINES, OutputBuffer


class TestOutputBufferBasic:
    """Basic OutputBuffer tests."""

    def test_empty_buffer(self):
        """Test newly created buffer is empty."""
        buf = OutputBuffer()
        assert buf.is_empty
        assert len(buf) == 0
        assert buf.render() == ""
        assert buf.max_lines == OUTPUT_BUFFER_MAX_LINES

    def test_append_chunk(self):
        """Test appending a chunk."""
        buf = OutputBuffer()
        buf.append("hello")
        assert not buf.is_empty
        assert buf.lines == ["hello"]
        assert buf.render() == "hello"

    def test_render_concatenates_in_order(self):
        """Test render joins chunks without separators."""
        buf = OutputBuffer()
        buf.append("A")
        buf.append("B")
        buf.append("line\n")
        assert buf.render() == "ABline\n"

    def test_clear(self):
        """Test clearing buffer."""
        buf = OutputBuffer()
        buf.append("hello")
        buf.clear()
        assert buf.is_empty
        assert buf.render() == ""

    def test_invalid_capacity_rejected(self):
        """Test zero capacity is rejected."""
        with pytest.raises(ValueError):
            OutputBuffer(max_lines=0)


class TestOutputBufferEviction:
    """Tests for sliding-window eviction."""

    def test_oldest_chunk_evicted(self):
        """Test the fourth append drops the first chunk."""
        buf = OutputBuffer(max_lines=3)
        for chunk in ("1", "2", "3", "4"):
            buf.append(chunk)
        assert buf.lines == ["2", "3", "4"]

    def test_length_never_exceeds_capacity(self):
        """Test capacity holds after every append."""
        buf = OutputBuffer(max_lines=5)
        for i in range(50):
            buf.append(str(i))
            assert len(buf) <= 5
        assert buf.lines == ["45", "46", "47", "48", "49"]
        assert buf.render() == "4546474849"

    def test_chunks_are_not_split(self):
        """Test eviction removes whole chunks, however long."""
        buf = OutputBuffer(max_lines=2)
        buf.append("first line\nsecond line\n")
        buf.append("x")
        buf.append("y")
        assert buf.lines == ["x", "y"]

    def test_resize_shrinks_immediately(self):
        """Test shrinking evicts the oldest chunks right away."""
        buf = OutputBuffer(max_lines=10)
        for chunk in "abcdef":
            buf.append(chunk)
        buf.resize(2)
        assert buf.max_lines == 2
        assert buf.lines == ["e", "f"]

    def test_resize_grow_keeps_chunks(self):
        """Test growing keeps everything."""
        buf = OutputBuffer(max_lines=2)
        buf.append("a")
        buf.append("b")
        buf.resize(5)
        buf.append("c")
        assert buf.lines == ["a", "b", "c"]

    def test_resize_rejects_zero(self):
        """Test resize validates the capacity."""
        buf = OutputBuffer()
        with pytest.raises(ValueError):
            buf.resize(0)
