import pytest

from railflow.algorithms.super_source import (
    calc_max_inflow,
    super_source,
    terminal_stations,
)
from railflow.config import FLOW_CONFIG
from railflow.exceptions import InvalidMutationStateError
from railflow.model.network import ServiceClass


def _inflow(net, name):
    return calc_max_inflow(net, net.get_station(name))


def _assert_no_super_source(net):
    assert net.find_station(FLOW_CONFIG.super_source_id) is None
    assert net.find_station(FLOW_CONFIG.super_source_name) is None
    for link in net.links.values():
        assert FLOW_CONFIG.super_source_id not in (link.src, link.dst)


def test_terminal_stations(line4):
    assert [s.name for s in terminal_stations(line4)] == ["A", "D"]


def test_terminal_stations_exclude(line4):
    sink = line4.get_station("D")
    assert [s.name for s in terminal_stations(line4, exclude=sink)] == ["A"]


def test_terminal_degree_ignores_enabled_flags(line4):
    line4.disable_segment(line4.get_segment("C", "D"))
    assert [s.name for s in terminal_stations(line4)] == ["A", "D"]


class TestSuperSource:
    def test_links_added_and_removed(self, star):
        stations_before = star.station_count
        links_before = star.link_count
        leaves = terminal_stations(star)

        with super_source(star, leaves) as source:
            assert source.id == FLOW_CONFIG.super_source_id
            assert source.name == FLOW_CONFIG.super_source_name
            assert star.station_count == stations_before + 1
            assert star.link_count == links_before + 2 * len(leaves)
            for link_id in source.links:
                link = star.links[link_id]
                assert link.capacity == FLOW_CONFIG.super_source_capacity
                assert link.service is ServiceClass.STANDARD

        assert star.station_count == stations_before
        assert star.link_count == links_before
        _assert_no_super_source(star)
        for leaf in leaves:
            assert len(leaf.links) == 1

    def test_removed_when_block_raises(self, star):
        links_before = set(star.links)
        with pytest.raises(RuntimeError):
            with super_source(star, terminal_stations(star)):
                raise RuntimeError("boom")
        assert set(star.links) == links_before
        _assert_no_super_source(star)

    def test_nested_super_source_rejected(self, line4):
        links_before = set(line4.links)
        with super_source(line4, terminal_stations(line4)):
            with pytest.raises(InvalidMutationStateError):
                with super_source(line4, []):
                    pass
        assert set(line4.links) == links_before
        _assert_no_super_source(line4)

    def test_link_ids_not_reused(self, line4):
        with super_source(line4, terminal_stations(line4)) as source:
            used = set(source.links)
        segment = line4.add_link("A", "C", 1)
        assert segment.forward.id not in used
        assert segment.forward.id > max(used)


class TestMaxInflow:
    def test_line(self, line4):
        assert _inflow(line4, "D") == 5
        _assert_no_super_source(line4)

    def test_star_hub(self, star):
        assert _inflow(star, "H") == 2 + 3 + 4

    def test_star_leaf(self, star):
        # L2 and L3 feed L1 through the hub
        assert _inflow(star, "L1") == 2

    def test_no_terminals(self, network_factory):
        triangle = network_factory([("A", "B", 3), ("B", "C", 3), ("C", "A", 3)])
        assert _inflow(triangle, "A") == 0

    def test_network_restored(self, diamond):
        stations_before = diamond.station_count
        links_before = diamond.link_count
        for name in "ABCD":
            _inflow(diamond, name)
        assert diamond.station_count == stations_before
        assert diamond.link_count == links_before
        _assert_no_super_source(diamond)

    @pytest.mark.parametrize("seed", range(8))
    def test_segment_failure_never_raises_inflow(self, random_network_factory, seed):
        net = random_network_factory(seed)
        sink = net.get_station("S3")
        before = calc_max_inflow(net, sink)
        for segment in list(net.segments()):
            with net.segment_disabled(segment):
                assert calc_max_inflow(net, sink) <= before
