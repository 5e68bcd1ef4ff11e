import logging
import textwrap

import pytest

from railflow.exceptions import DuplicateEntityError, StationNotFoundError
from railflow.loader import (
    LinkRecord,
    StationRecord,
    build_network,
    load_network_file,
    load_network_yaml,
)
from railflow.model.network import ServiceClass


class TestBuildNetwork:
    def test_ids_follow_record_order(self):
        net = build_network(
            [StationRecord("Braga", district="Braga"), StationRecord("Nine")],
            [LinkRecord("Braga", "Nine", 4)],
        )
        assert net.get_station("Braga").id == 0
        assert net.get_station("Nine").id == 1
        assert net.get_station(0).district == "Braga"
        segment = net.get_segment("Braga", "Nine")
        assert segment.capacity == 4
        assert segment.service is ServiceClass.STANDARD

    def test_duplicate_station_name(self):
        with pytest.raises(DuplicateEntityError):
            build_network([StationRecord("Braga"), StationRecord("Braga")], [])

    def test_duplicate_link_skipped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="railflow"):
            net = build_network(
                [StationRecord("A"), StationRecord("B")],
                [LinkRecord("A", "B", 3), LinkRecord("A", "B", 7)],
            )
        assert net.link_count == 2
        assert net.get_segment("A", "B").capacity == 3
        assert "Skipping duplicate" in caplog.text

    def test_parallel_service_classes_kept(self):
        net = build_network(
            [StationRecord("A"), StationRecord("B")],
            [LinkRecord("A", "B", 3), LinkRecord("A", "B", 3, "pendular")],
        )
        assert net.link_count == 4

    def test_unknown_station_in_link(self):
        with pytest.raises(StationNotFoundError):
            build_network([StationRecord("A")], [LinkRecord("A", "Z", 1)])

    def test_negative_capacity(self):
        with pytest.raises(ValueError):
            build_network(
                [StationRecord("A"), StationRecord("B")], [LinkRecord("A", "B", -1)]
            )


class TestLoadYaml:
    def test_regional_document(self, regional):
        assert regional.station_count == 6
        assert regional.link_count == 8
        segment = regional.get_segment("Gaia Devesas", "Lisboa Oriente")
        assert segment.service is ServiceClass.PENDULAR
        assert regional.get_station("Faro").township == "Se"

    def test_minimal_document(self):
        net = load_network_yaml(
            textwrap.dedent(
                """
                stations:
                  - name: A
                  - name: B
                links:
                  - source: A
                    target: B
                    capacity: 2
                """
            )
        )
        station = net.get_station("A")
        assert (station.district, station.municipality, station.township) == (
            "",
            "",
            "",
        )
        assert net.get_segment("B", "A").capacity == 2

    def test_empty_document(self):
        net = load_network_yaml("")
        assert net.station_count == 0
        assert net.link_count == 0

    def test_empty_sections(self):
        net = load_network_yaml("stations:\nlinks:\n")
        assert net.station_count == 0

    def test_top_level_must_be_mapping(self):
        with pytest.raises(ValueError, match="dictionary"):
            load_network_yaml("- a\n- b\n")

    def test_unknown_top_level_key(self):
        with pytest.raises(ValueError, match="Unrecognized"):
            load_network_yaml("stations: []\ntrains: []\n")

    def test_section_must_be_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            load_network_yaml("stations: {name: A}\n")

    def test_station_requires_name(self):
        with pytest.raises(ValueError, match="name"):
            load_network_yaml("stations:\n  - district: Braga\n")

    def test_link_missing_fields(self):
        doc = (
            "stations:\n  - name: A\n  - name: B\n"
            "links:\n  - {source: A, target: B}\n"
        )
        with pytest.raises(ValueError, match="capacity"):
            load_network_yaml(doc)

    def test_self_loop_link(self):
        doc = (
            "stations:\n  - name: A\n  - name: B\n"
            "links:\n  - {source: A, target: A, capacity: 5}\n"
        )
        with pytest.raises(ValueError, match="endpoints must differ"):
            load_network_yaml(doc)

    def test_fractional_capacity(self):
        doc = (
            "stations:\n  - name: A\n  - name: B\n"
            "links:\n  - {source: A, target: B, capacity: 2.7}\n"
        )
        with pytest.raises(ValueError, match="integer"):
            load_network_yaml(doc)

    def test_whole_float_capacity(self):
        doc = (
            "stations:\n  - name: A\n  - name: B\n"
            "links:\n  - {source: A, target: B, capacity: 3.0}\n"
        )
        assert load_network_yaml(doc).get_segment("A", "B").capacity == 3

    def test_reserved_station_name(self):
        doc = "stations:\n  - name: __super_source__\n  - name: A\n"
        with pytest.raises(ValueError, match="reserved"):
            load_network_yaml(doc)

    def test_unknown_service(self):
        doc = (
            "stations:\n  - name: A\n  - name: B\n"
            "links:\n  - {source: A, target: B, capacity: 1, service: FREIGHT}\n"
        )
        with pytest.raises(ValueError, match="FREIGHT"):
            load_network_yaml(doc)


def test_load_network_file(regional_file):
    net = load_network_file(regional_file)
    assert net.get_station("Lisboa Oriente").id == 3
    assert net.get_segment("Porto Campanha", "Gaia Devesas").capacity == 5


def test_load_network_file_accepts_str(regional_file):
    assert load_network_file(str(regional_file)).station_count == 6


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_network_file(tmp_path / "missing.yaml")
