import pathlib
import sys

import pytest

# Ensure src/ is importable
REPO_ROOT = pathlib.Path(__file__).resolve().parents[2]
SRC_DIR = REPO_ROOT / "src"
sys.path.append(str(SRC_DIR))

import embed_params as ep  # type: ignore


@pytest.mark.parametrize(
    "level, expected",
    [(-5, 0), (0, 0), (12, 12), (21, 21), (30, 21), (14.9, 14)],
)
def test_zoom_is_clamped(level, expected):
    p = ep.EmbedParams()
    p.set_zoom(level)
    assert p.map.zoom == expected
    assert isinstance(p.map.zoom, int)


def test_camera_angles_are_clamped():
    p = ep.EmbedParams()
    p.set_heading(400)
    p.set_pitch(-120)
    p.set_fov(5)
    assert p.view.heading == 360
    assert p.view.pitch == -90
    assert p.view.fov == 10

    p.set_heading(-1)
    p.set_pitch(95.5)
    p.set_fov(150)
    assert p.view.heading == 0
    assert p.view.pitch == 90
    assert p.view.fov == 100

    p.set_heading(123.5)
    assert p.view.heading == 123.5


@pytest.mark.parametrize("bad", ["12", None, True, float("nan")])
def test_numeric_setters_reject_non_numbers(bad):
    p = ep.EmbedParams()
    with pytest.raises(ep.ValidationError):
        p.set_zoom(bad)
    with pytest.raises(ep.ValidationError):
        p.set_heading(bad)
    assert p.map.zoom == ep.DEFAULT_ZOOM


def test_enums_reject_unknown_values():
    p = ep.EmbedParams()
    with pytest.raises(ep.ValidationError, match="roadmap, satellite"):
        p.set_map_type("terrain")
    with pytest.raises(ep.ValidationError):
        p.set_mode("flying")
    with pytest.raises(ep.ValidationError):
        p.set_units("furlongs")
    # Nothing changed
    assert p.map.maptype == "roadmap"
    assert p.direction.mode == "driving"
    assert p.direction.units == "metric"


def test_avoid_whole_set_rejection_and_dedupe():
    p = ep.EmbedParams()
    p.set_avoid(["highways", "tolls", "highways"])
    assert p.direction.avoid == ["highways", "tolls"]

    with pytest.raises(ep.ValidationError, match="potholes"):
        p.set_avoid(["ferries", "potholes"])
    # Previous value kept intact
    assert p.direction.avoid == ["highways", "tolls"]

    with pytest.raises(ep.ValidationError):
        p.set_avoid("tolls")

    p.set_avoid([])
    assert p.direction.avoid == []


def test_language_region_are_stripped_strings():
    p = ep.EmbedParams()
    p.set_language(" fr ")
    p.set_region("CA")
    assert p.map.language == "fr"
    assert p.map.region == "CA"
    with pytest.raises(ep.ValidationError):
        p.set_region(None)


def test_group_resets():
    p = ep.EmbedParams()
    p.set_zoom(3)
    p.set_heading(90)
    p.set_mode("walking")

    p.reset_view()
    assert p.view.heading == 0
    assert p.map.zoom == 3
    assert p.direction.mode == "walking"

    p.reset_map()
    assert p.map.zoom == 12
    assert p.direction.mode == "walking"

    p.reset_direction()
    assert p.direction.mode == "driving"


def test_as_dict_is_a_snapshot():
    p = ep.EmbedParams()
    p.set_avoid(["tolls"])
    snap = p.as_dict()
    snap["direction"]["avoid"].append("ferries")
    assert p.direction.avoid == ["tolls"]
    assert snap["map"] == {"zoom": 12, "maptype": "roadmap", "language": "", "region": ""}
    assert snap["view"] == {"heading": 0.0, "pitch": 0.0, "fov": 90.0}


@pytest.mark.parametrize("bad", [None, 5])
def test_avoid_rejects_non_iterables(bad):
    p = ep.EmbedParams()
    p.set_avoid(["ferries"])
    with pytest.raises(ep.ValidationError, match="expected a list of features"):
        p.set_avoid(bad)
    assert p.direction.avoid == ["ferries"]
