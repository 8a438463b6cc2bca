import logging
import math
import pickle

import pytest

import msgspec
import geocodec
from geocodec.position import (
    Position,
    PositionSequence,
    decode_position,
    decode_positions,
    encode_position,
    encode_positions,
)


def test_module_dir():
    assert set(dir(geocodec.position)) == {
        "Position",
        "PositionSequence",
        "decode_position",
        "decode_positions",
        "encode_position",
        "encode_positions",
    }


class TestPosition:
    def test_init(self):
        p = Position(1, 2)
        assert p.longitude == 1.0
        assert p.latitude == 2.0
        assert p.altitude is None
        assert isinstance(p.longitude, float)

    def test_altitude(self):
        p = Position(1, 2, 10)
        assert p.altitude == 10.0

    def test_zero_altitude_is_absent(self):
        p = Position(1, 2, 0)
        assert p.altitude is None
        assert p == Position(1, 2)
        assert hash(p) == hash(Position(1, 2))

    @pytest.mark.parametrize("altitude", ["0", 0.0, -0.0, "0.0"])
    def test_zero_altitude_is_absent_after_conversion(self, altitude):
        assert Position(1, 2, altitude).altitude is None

    def test_eq(self):
        assert Position(1, 2) == Position(1.0, 2.0)
        assert Position(1, 2) != Position(2, 1)
        assert Position(1, 2) != Position(1, 2, 3)
        assert Position(1, 2) != (1.0, 2.0)

    def test_immutable(self):
        p = Position(1, 2)
        with pytest.raises(AttributeError):
            p.longitude = 3
        with pytest.raises(AttributeError):
            p.foo = 3
        with pytest.raises(AttributeError):
            del p.latitude

    def test_iter(self):
        assert list(Position(1, 2)) == [1.0, 2.0]
        assert list(Position(1, 2, 3)) == [1.0, 2.0, 3.0]

    def test_repr(self):
        assert repr(Position(1, 2)) == "Position(longitude=1.0, latitude=2.0)"
        assert (
            repr(Position(1, 2, 3))
            == "Position(longitude=1.0, latitude=2.0, altitude=3.0)"
        )

    @pytest.mark.parametrize("altitude", [None, 5.5])
    def test_pickle(self, altitude):
        p = Position(-122.428938, 37.766713, altitude)
        assert pickle.loads(pickle.dumps(p)) == p


class TestPositionSequence:
    def test_init_from_positions(self):
        s = PositionSequence([Position(0, 0), Position(1, 1)])
        assert len(s) == 2
        assert s[0] == Position(0, 0)
        assert s[-1] == Position(1, 1)

    def test_init_coerces_arrays(self):
        s = PositionSequence([(0, 0), [1, 1, 5]])
        assert s == PositionSequence([Position(0, 0), Position(1, 1, 5)])

    def test_init_invalid_item_errors(self):
        with pytest.raises(geocodec.ParseError):
            PositionSequence([(0, 0), (1,)])

    def test_empty(self):
        s = PositionSequence()
        assert len(s) == 0
        assert not s.is_closed

    def test_slice(self):
        s = PositionSequence([(0, 0), (1, 1), (2, 2)])
        res = s[1:]
        assert isinstance(res, PositionSequence)
        assert res == PositionSequence([(1, 1), (2, 2)])

    def test_is_sequence(self):
        s = PositionSequence([(0, 0), (1, 1)])
        assert Position(1, 1) in s
        assert s.index(Position(1, 1)) == 1
        assert list(reversed(s)) == [Position(1, 1), Position(0, 0)]

    def test_is_closed(self):
        assert PositionSequence([(0, 0), (1, 0), (1, 1), (0, 0)]).is_closed
        assert not PositionSequence([(0, 0), (1, 0), (1, 1)]).is_closed

    def test_hashable(self):
        a = PositionSequence([(0, 0), (1, 1)])
        b = PositionSequence([(0, 0), (1, 1)])
        assert hash(a) == hash(b)
        assert a != [Position(0, 0), Position(1, 1)]


class TestDecodePosition:
    def test_decode_2d(self):
        assert decode_position([-122.428938, 37.766713]) == Position(
            -122.428938, 37.766713
        )

    def test_decode_3d(self):
        p = decode_position([1.5, 2.5, 10])
        assert (p.longitude, p.latitude, p.altitude) == (1.5, 2.5, 10.0)

    def test_decode_zero_altitude(self):
        p = decode_position([1.5, 2.5, 0])
        assert p.altitude is None

    def test_decode_ignores_extra_elements(self):
        assert decode_position([1.0, 2.0, 3.0, 4.0]) == Position(1, 2, 3)

    def test_decode_order(self):
        p = decode_position([10, 20])
        assert p.longitude == 10
        assert p.latitude == 20

    def test_decode_numeric_strings(self):
        assert decode_position(["1.5", "-2"]) == Position(1.5, -2)
        assert decode_position(["1e2", "2", "-0.5"]) == Position(100, 2, -0.5)

    @pytest.mark.parametrize("node", [None, [], [1.0], "1, 2", {"lon": 1, "lat": 2}])
    def test_decode_wrong_shape_errors(self, node):
        with pytest.raises(geocodec.ParseError, match="could not be parsed") as rec:
            decode_position(node)
        assert rec.value.raw == node

    @pytest.mark.parametrize(
        "node, name",
        [
            (["a", 1], "longitude"),
            ([1, None], "latitude"),
            ([1, 2, True], "altitude"),
            ([[1], 2], "longitude"),
            ([1, "2x"], "latitude"),
            (["1_0", 2], "longitude"),
            ([1, " 2 "], "latitude"),
            ([1, 2, "0x10"], "altitude"),
            (["nan", 2], "longitude"),
            (["Infinity", 2], "longitude"),
        ],
    )
    def test_decode_non_numeric_errors(self, node, name):
        with pytest.raises(geocodec.ParseError, match=name) as rec:
            decode_position(node)
        assert rec.value.raw == node

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_decode_non_finite_errors(self, value):
        with pytest.raises(geocodec.ParseError, match="not finite"):
            decode_position([value, 0])

    def test_parse_error_is_decode_error(self):
        with pytest.raises(msgspec.DecodeError):
            decode_position([1])


class TestDecodePositions:
    def test_decode(self):
        res = decode_positions([[0, 0], [1, 0, 5], [1, 1]])
        assert res == PositionSequence(
            [Position(0, 0), Position(1, 0, 5), Position(1, 1)]
        )

    def test_decode_lenient_skips_invalid(self):
        res = decode_positions([[0, 0], [1], ["a", 2], None, [3, 4]])
        assert res == PositionSequence([Position(0, 0), Position(3, 4)])

    def test_decode_lenient_logs_skipped(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="geocodec.position"):
            decode_positions([[0, 0], [1]])
        assert "Skipping invalid position at index 1" in caplog.text

    def test_decode_lenient_all_invalid(self):
        assert len(decode_positions([[1], [2]])) == 0

    def test_decode_strict_errors(self):
        with pytest.raises(geocodec.ParseError, match="at index 1") as rec:
            decode_positions([[0, 0], [1], [3, 4]], strict=True)
        assert rec.value.raw == [1]

    @pytest.mark.parametrize("strict", [False, True])
    @pytest.mark.parametrize("node", [None, [], 1, "[[0, 0]]"])
    def test_decode_wrong_shape_errors(self, node, strict):
        with pytest.raises(geocodec.ParseError, match="could not be parsed"):
            decode_positions(node, strict=strict)


class TestEncodePosition:
    def test_encode_2d(self):
        assert encode_position(Position(1, 2)) == [1.0, 2.0]

    def test_encode_altitude(self):
        assert encode_position(Position(1, 2, 10)) == [1.0, 2.0, 10.0]

    def test_encode_zero_altitude_omitted(self):
        assert encode_position(Position(1, 2, 0)) == [1.0, 2.0]

    @pytest.mark.parametrize("value", [None, [1, 2], (1, 2), "1,2"])
    def test_encode_non_position(self, value):
        assert encode_position(value) is None

    @pytest.mark.parametrize("lon, lat", [(0, 0), (-122.428938, 37.766713), (1e10, -1e-10)])
    def test_roundtrip(self, lon, lat):
        p = Position(lon, lat)
        msg = encode_position(p)
        assert len(msg) == 2
        assert decode_position(msg) == p

    def test_roundtrip_altitude(self):
        p = Position(1, 2, 10)
        assert decode_position(encode_position(p)) == p


class TestEncodePositions:
    def test_encode(self):
        s = PositionSequence([(0, 0), (1, 0, 5), (1, 1)])
        assert encode_positions(s) == [[0.0, 0.0], [1.0, 0.0, 5.0], [1.0, 1.0]]

    def test_encode_drops_non_positions(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="geocodec.position"):
            res = encode_positions([Position(0, 0), (5, 5), None, Position(1, 1)])
        assert res == [[0.0, 0.0], [1.0, 1.0]]
        assert "Dropping non-position element at index 1" in caplog.text

    def test_encode_empty(self):
        assert encode_positions([]) == []

    def test_roundtrip(self):
        s = PositionSequence([(0, 0), (1, 0, 0), (1, 1, 3)])
        assert decode_positions(encode_positions(s), strict=True) == s
