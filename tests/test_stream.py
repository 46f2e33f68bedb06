"""
Stream Tests - Load and store through byte streams, text streams and files.
"""

import io
import os
import re
import tempfile
from pathlib import Path

import pytest

from oprops.errors import PropertiesFormatError
from oprops.reader import PropertiesReader
from oprops.store import OrderedProperties
from oprops.writer import DateSuppressingWriter, PropertiesWriter, format_date

DATE_LINE = re.compile(r"^#\w{3} \w{3} \d{2} \d{2}:\d{2}:\d{2} .*\d{4}$")


def reverse_order(a, b):
    return (a < b) - (a > b)


@pytest.fixture
def props():
    p = OrderedProperties()
    p.set_property("b", "2")
    p.set_property("a", "1")
    p.set_property("my key", " spaced value ")
    p.set_property("path", "C:\\temp\\file")
    p.set_property("unicode", "café ☃")
    p.set_property("multi", "line1\nline2")
    p.set_property("empty", "")
    return p


@pytest.fixture
def quiet():
    return OrderedProperties.builder().with_suppress_date_in_comment(True).build()


# =============================================================================
# Store output
# =============================================================================

class TestStore:

    def test_suppressed_date_with_comment(self, quiet):
        quiet.set_property("k", "v")
        out = io.StringIO()
        quiet.store(out, "hdr", line_separator="\n")
        assert out.getvalue() == "#hdr\nk=v\n"

    def test_suppressed_date_platform_separator(self, quiet):
        quiet.set_property("k", "v")
        out = io.StringIO()
        quiet.store(out, "hdr")
        assert out.getvalue() == f"#hdr{os.linesep}k=v{os.linesep}"

    def test_suppressed_date_bytes(self, quiet):
        quiet.set_property("k", "v")
        out = io.BytesIO()
        quiet.store(out, "hdr", line_separator="\n")
        assert out.getvalue() == b"#hdr\nk=v\n"

    def test_suppressed_date_without_comment(self, quiet):
        quiet.set_property("k", "v")
        out = io.StringIO()
        quiet.store(out, line_separator="\n")
        assert out.getvalue() == "k=v\n"

    def test_suppressed_date_multi_line_comment(self, quiet):
        quiet.set_property("k", "v")
        out = io.StringIO()
        quiet.store(out, "first\nsecond\n!third", line_separator="\n")
        assert out.getvalue() == "#first\n#second\n!third\nk=v\n"

    def test_suppressed_date_empty_store(self, quiet):
        out = io.StringIO()
        quiet.store(out, "hdr", line_separator="\n")
        assert out.getvalue() == "#hdr\n"

    def test_date_line_written_by_default(self):
        props = OrderedProperties()
        props.set_property("k", "v")
        out = io.StringIO()
        props.store(out, "hdr", line_separator="\n")
        lines = out.getvalue().split("\n")
        assert lines[0] == "#hdr"
        assert DATE_LINE.match(lines[1])
        assert lines[2] == "k=v"
        assert lines[3] == ""

    def test_date_line_without_comment(self):
        out = io.StringIO()
        OrderedProperties().store(out, line_separator="\n")
        lines = out.getvalue().split("\n")
        assert len(lines) == 2
        assert DATE_LINE.match(lines[0])

    def test_entries_in_store_order(self, quiet):
        for key in ("b", "a", "c"):
            quiet.set_property(key, key)
        out = io.StringIO()
        quiet.store(out, line_separator="\n")
        assert out.getvalue() == "b=b\na=a\nc=c\n"

    def test_comparator_order(self):
        props = (
            OrderedProperties.builder()
            .with_ordering(reverse_order)
            .with_suppress_date_in_comment(True)
            .build()
        )
        for key in ("a", "b", "c"):
            props.set_property(key, key)
        out = io.StringIO()
        props.store(out, line_separator="\n")
        assert out.getvalue() == "c=c\nb=b\na=a\n"

    def test_escaping(self, quiet):
        quiet.set_property("my key", " v a=l ")
        quiet.set_property("#hash", "!bang")
        out = io.StringIO()
        quiet.store(out, line_separator="\n")
        assert out.getvalue() == "my\\ key=\\ v a\\=l \n\\#hash=\\!bang\n"

    def test_bytes_escape_non_ascii(self, quiet):
        quiet.set_property("k", "café ☃")
        out = io.BytesIO()
        quiet.store(out, line_separator="\n")
        assert out.getvalue() == b"k=caf\\u00E9 \\u2603\n"

    def test_text_keeps_non_ascii(self, quiet):
        quiet.set_property("k", "café ☃")
        out = io.StringIO()
        quiet.store(out, line_separator="\n")
        assert out.getvalue() == "k=café ☃\n"

    def test_bytes_comment_latin_1(self, quiet):
        out = io.BytesIO()
        quiet.store(out, "café ☃", line_separator="\n")
        assert out.getvalue() == b"#caf\xe9 \\u2603\n"

    def test_serialize(self, quiet):
        quiet.set_property("k", "v")
        data = PropertiesWriter.serialize(quiet._adapter(), suppress_date=True, line_separator="\n")
        assert data == b"k=v\n"

    def test_stream_not_closed(self, quiet):
        out = io.BytesIO()
        quiet.store(out)
        assert not out.closed


class TestDateSuppressingWriter:

    def test_drops_last_comment_before_data(self):
        out = []
        w = DateSuppressingWriter(out.append, "\n")
        for part in ["#", "one", "\n", "#two", "\n", "k=v", "\n"]:
            w.write(part)
        assert "".join(out) == "#one\nk=v\n"

    def test_passes_data_through(self):
        out = []
        w = DateSuppressingWriter(out.append, "\n")
        for part in ["a=1", "\n", "b=2", "\n"]:
            w.write(part)
        assert "".join(out) == "a=1\nb=2\n"

    def test_single_comment_dropped(self):
        out = []
        w = DateSuppressingWriter(out.append, "\r\n")
        for part in ["#date", "\r\n", "k=v", "\r\n"]:
            w.write(part)
        assert "".join(out) == "k=v\r\n"

    def test_format_date(self):
        assert DATE_LINE.match("#" + format_date())


# =============================================================================
# Round trips
# =============================================================================

class TestRoundTrip:

    def test_bytes_round_trip(self, props):
        out = io.BytesIO()
        props.store(out, "round trip")
        loaded = OrderedProperties()
        loaded.load(io.BytesIO(out.getvalue()))
        assert loaded == props

    def test_text_round_trip(self, props):
        out = io.StringIO()
        props.store(out, "round trip")
        loaded = OrderedProperties()
        loaded.load(io.StringIO(out.getvalue()))
        assert loaded == props

    def test_comparator_round_trip(self):
        props = OrderedProperties.builder().with_ordering(reverse_order).build()
        for key in ("x", "z", "y"):
            props.set_property(key, key * 3)
        out = io.BytesIO()
        props.store(out)
        loaded = OrderedProperties.builder().with_ordering(reverse_order).build()
        loaded.load(io.BytesIO(out.getvalue()))
        assert loaded == props

    def test_bulk_load_equals_individual_sets(self):
        loaded = PropertiesReader.parse(b"b=2\na=1\n")
        built = OrderedProperties()
        built.set_property("b", "2")
        built.set_property("a", "1")
        assert loaded == built

    def test_file_round_trip(self, props):
        with tempfile.NamedTemporaryFile(suffix=".properties", delete=False) as f:
            path = f.name

        props.write(path, "file round trip")
        assert Path(path).read_bytes().startswith(b"#file round trip")

        loaded = OrderedProperties.read(path)
        assert loaded == props

        Path(path).unlink()

    def test_writer_file_helpers(self, quiet):
        quiet.set_property("k", "v")
        with tempfile.NamedTemporaryFile(suffix=".properties", delete=False) as f:
            path = f.name

        count = PropertiesWriter.write(quiet._adapter(), path, suppress_date=True)
        assert count == 1
        assert PropertiesReader.read(path).entry_set() == [("k", "v")]

        Path(path).unlink()


# =============================================================================
# Failure propagation
# =============================================================================

class FailingStream(io.RawIOBase):

    def readable(self):
        return True

    def writable(self):
        return True

    def read(self, size=-1):
        raise OSError("disk on fire")

    def write(self, data):
        raise OSError("disk on fire")


class TestFailures:

    def test_read_failure_propagates(self):
        with pytest.raises(OSError, match="disk on fire"):
            OrderedProperties().load(FailingStream())

    def test_write_failure_propagates(self, props):
        with pytest.raises(OSError, match="disk on fire"):
            props.store(FailingStream())

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            OrderedProperties.read(tmp_path / "missing.properties")


# =============================================================================
# XML documents
# =============================================================================

class TestXml:

    def test_document_layout(self):
        props = OrderedProperties()
        props.set_property("a", "1")
        out = io.StringIO()
        props.store_to_xml(out, "hi")
        assert out.getvalue() == (
            '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'
            '<!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">\n'
            "<properties>\n"
            "<comment>hi</comment>\n"
            '<entry key="a">1</entry>\n'
            "</properties>\n"
        )

    def test_xml_round_trip_keeps_order(self, props):
        out = io.BytesIO()
        props.store_to_xml(out)
        loaded = OrderedProperties()
        loaded.load_from_xml(io.BytesIO(out.getvalue()))
        assert loaded == props
        assert loaded.property_names()[:2] == ["b", "a"]

    def test_xml_entries_in_order(self):
        props = OrderedProperties()
        props.set_property("b", "2")
        props.set_property("a", "1")
        out = io.BytesIO()
        props.store_to_xml(out)
        data = out.getvalue().decode("utf-8")
        assert data.index('key="b"') < data.index('key="a"')

    def test_empty_entry_value(self):
        loaded = OrderedProperties()
        loaded.load_from_xml(io.StringIO('<properties><entry key="k"/></properties>'))
        assert loaded.get_property("k") == ""

    def test_comment_ignored_on_load(self):
        loaded = OrderedProperties()
        loaded.load_from_xml(io.StringIO("<properties><comment>c</comment></properties>"))
        assert loaded.is_empty()

    def test_malformed_document(self):
        with pytest.raises(PropertiesFormatError, match="Invalid XML"):
            OrderedProperties().load_from_xml(io.StringIO("<properties><entry"))

    def test_wrong_root(self):
        with pytest.raises(PropertiesFormatError, match="root element"):
            OrderedProperties().load_from_xml(io.StringIO("<props/>"))

    def test_entry_without_key(self):
        with pytest.raises(PropertiesFormatError, match="without a key"):
            OrderedProperties().load_from_xml(io.StringIO("<properties><entry>v</entry></properties>"))

    def test_carriage_return_in_value_survives(self):
        props = OrderedProperties()
        props.set_property("k", "a\rb\tc")
        props.set_property("crlf", "line1\r\nline2")
        props.set_property("k\r\n\t", "v")
        out = io.BytesIO()
        props.store_to_xml(out, "note\r")
        assert b"a&#13;b" in out.getvalue()
        loaded = OrderedProperties()
        loaded.load_from_xml(io.BytesIO(out.getvalue()))
        assert loaded == props

    def test_markup_in_values_escaped(self):
        props = OrderedProperties()
        props.set_property('<k a="1">', "x < y & z > w")
        out = io.StringIO()
        props.store_to_xml(out)
        loaded = OrderedProperties()
        loaded.load_from_xml(io.StringIO(out.getvalue()))
        assert loaded == props
