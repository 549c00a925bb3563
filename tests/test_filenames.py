"""Unit tests for the ping ID <-> file name mapping."""

import re

import pytest

from telemetry_ping_store.stores.filenames import (
    filename_for_id,
    id_from_filename,
    is_ping_filename,
)

# Generic extraction pattern used by tooling that inspects the directory.
ID_PATTERN = re.compile(r"[^0-9]*([0-9]+)[^0-9]*")

IDS = [0, 1, 9, 10, 42, 48679, 465739201, 1234567890, 2**31 - 1, 2**63 - 1, 10**30]

# ---- Round trip -----------------------------------------------------------


@pytest.mark.parametrize("ping_id", IDS)
def test_id_survives_encoding(ping_id):
    assert id_from_filename(filename_for_id(ping_id)) == ping_id


@pytest.mark.parametrize("ping_id", IDS)
def test_filename_contains_decimal_id(ping_id):
    assert str(ping_id) in filename_for_id(ping_id)


@pytest.mark.parametrize("ping_id", IDS)
def test_generic_pattern_extracts_id(ping_id):
    """The ID is the only digit run in the name."""
    match = ID_PATTERN.fullmatch(filename_for_id(ping_id))
    assert match is not None
    assert int(match.group(1)) == ping_id


def test_filename_format():
    assert filename_for_id(48679) == "ping-48679.json"


def test_distinct_ids_get_distinct_names():
    names = {filename_for_id(i) for i in range(1000)}
    assert len(names) == 1000


# ---- Invalid IDs ----------------------------------------------------------


@pytest.mark.parametrize("bad", [-1, -100, True, False, 1.0, "1", None])
def test_filename_for_invalid_id_raises(bad):
    with pytest.raises(ValueError):
        filename_for_id(bad)


# ---- Decoding foreign names -----------------------------------------------


@pytest.mark.parametrize(
    "name",
    [
        "ping-007.json",  # non-canonical
        "ping--1.json",
        "ping-.json",
        "ping-1.json.corrupt",
        ".ping-k2j3h4.tmp",
        "ping-1.txt",
        "ping-1a.json",
        "other-1.json",
        "",
    ],
)
def test_foreign_names_rejected(name):
    assert is_ping_filename(name) is False
    with pytest.raises(ValueError):
        id_from_filename(name)


def test_zero_is_canonical():
    assert is_ping_filename("ping-0.json") is True
    assert id_from_filename("ping-0.json") == 0
