"""Shared fixtures: small MaxMind DB files written at session start."""

import pytest
from mmdb_writer import MMDBWriter
from netaddr import IPSet

from mmdbridge import open_database

CITY_RECORD = {
    "city": {"geoname_id": 2643743, "names": {"en": "London", "de": "London"}},
    "continent": {"code": "EU", "geoname_id": 6255148},
    "country": {"iso_code": "GB", "is_in_european_union": False},
    "location": {"latitude": 51.5142, "longitude": -0.0931, "accuracy_radius": 10},
    "subdivisions": [
        {"iso_code": "ENG", "names": {"en": "England"}},
        {"iso_code": "WSM", "names": {"en": "Westminster"}},
    ],
}

IPV6_RECORD = {
    "country": {"iso_code": "ZZ"},
    "network": {"documentation": True, "tags": ["test", "ipv6"]},
}

NUMBERS_RECORD = {
    "small": 42,
    "negative": -7,
    "whole_float": 43.0,
    "fraction": 1.5,
    "uint64_max": 2**64 - 1,
    "uint128": 2**100,
}

IPV4_ONLY_RECORD = {"country": {"iso_code": "US"}}


# The writer shares one encoded entry between values that compare equal
# across types (True and 1, 43 and 43.0), so no int in these records may
# equal a bool or a float stored elsewhere in the same database.
NESTED_LEVEL_BASE = 100


def _nested(depth):
    record = {"leaf": "bottom"}
    for level in range(depth):
        record = {"level": NESTED_LEVEL_BASE + level, "child": record}
    return record


NESTED_DEPTH = 40
NESTED_RECORD = _nested(NESTED_DEPTH)


@pytest.fixture(scope="session")
def database_path(tmp_path_factory):
    """Dual-stack database with a handful of known networks."""
    writer = MMDBWriter(
        ip_version=6,
        database_type="mmdbridge-Test-City",
        languages=["en", "de"],
        description={
            "en": "mmdbridge test database",
            "de": "mmdbridge Testdatenbank",
        },
        ipv4_compatible=True,
    )
    writer.insert_network(IPSet(["81.2.69.0/24"]), CITY_RECORD)
    writer.insert_network(IPSet(["203.0.113.0/24"]), NUMBERS_RECORD)
    writer.insert_network(IPSet(["198.51.100.0/24"]), NESTED_RECORD)
    writer.insert_network(IPSet(["2001:db8::/32"]), IPV6_RECORD)

    path = tmp_path_factory.mktemp("mmdb") / "test-city.mmdb"
    writer.to_db_file(str(path))
    return path


@pytest.fixture(scope="session")
def ipv4_database_path(tmp_path_factory):
    """IPv4-only database."""
    writer = MMDBWriter(
        ip_version=4,
        database_type="mmdbridge-Test-IPv4",
        languages=["en"],
        description={"en": "mmdbridge IPv4 test database"},
    )
    writer.insert_network(IPSet(["8.8.8.0/24"]), IPV4_ONLY_RECORD)

    path = tmp_path_factory.mktemp("mmdb") / "test-ipv4.mmdb"
    writer.to_db_file(str(path))
    return path


@pytest.fixture
def reader(database_path):
    with open_database(database_path) as r:
        yield r
