"""Tests for the macro registry and built-in macros."""

from typing import Any

import pytest

from sewdraft.core.macros import (
    CutOnFold,
    Macro,
    MacroRegistry,
    Scalebox,
    default_registry,
)
from sewdraft.domain import Path, Point
from sewdraft.exceptions import MacroError


@pytest.fixture
def registry() -> MacroRegistry:
    """Registry with every built-in macro."""
    return default_registry()


@pytest.fixture
def maps() -> tuple[dict[str, Point], dict[str, Path]]:
    """Empty point and path maps."""
    return {}, {}


class Marker(Macro):
    """Minimal macro for registry tests."""

    name = "marker"
    required = ("at",)
    point_params = ("at",)

    def apply(self, params, points, paths, options) -> None:
        points["marker"] = params["at"]


class TestRegistry:
    """Tests for MacroRegistry."""

    def test_builtins_registered(self, registry: MacroRegistry) -> None:
        """Test the closed set of built-in names."""
        assert registry.names() == [
            "cutonfold",
            "grainline",
            "title",
            "scalebox",
            "hd",
            "vd",
            "ld",
            "pd",
        ]

    def test_register_custom(self) -> None:
        """Test registering and applying a custom macro."""
        registry = MacroRegistry([Marker()])
        points: dict[str, Point] = {}
        registry.apply("marker", {"at": Point(1, 2)}, points, {}, {})
        assert points["marker"] == Point(1, 2)

    def test_duplicate_name(self) -> None:
        """Test that names are unique."""
        registry = MacroRegistry([Marker()])
        with pytest.raises(MacroError, match="already registered"):
            registry.register(Marker())

    def test_register_non_macro(self) -> None:
        """Test that only Macro instances are accepted."""
        with pytest.raises(MacroError, match="expected a Macro"):
            MacroRegistry().register(object())  # type: ignore[arg-type]

    def test_register_unnamed(self) -> None:
        """Test that a macro must have a name."""

        class Unnamed(Marker):
            name = ""

        with pytest.raises(MacroError, match="no name"):
            MacroRegistry().register(Unnamed())

    def test_unknown_macro(self, registry: MacroRegistry, maps: Any) -> None:
        """Test that applying an unregistered name raises."""
        points, paths = maps
        with pytest.raises(MacroError, match="no macro with this name"):
            registry.apply("pleat", {}, points, paths, {})

    def test_resolve(self, registry: MacroRegistry) -> None:
        """Test resolving declared names up front."""
        assert [m.name for m in registry.resolve(["title", "hd"])] == ["title", "hd"]
        with pytest.raises(MacroError):
            registry.resolve(["title", "bogus"])


class TestValidation:
    """Tests for parameter validation."""

    def test_missing_required(self, registry: MacroRegistry, maps: Any) -> None:
        """Test that a missing required parameter is named."""
        points, paths = maps
        with pytest.raises(MacroError, match="missing required parameter 'to'"):
            registry.apply("cutonfold", {"from": Point(0, 0)}, points, paths, {})

    def test_non_point(self, registry: MacroRegistry, maps: Any) -> None:
        """Test that point parameters must be Points."""
        points, paths = maps
        with pytest.raises(MacroError, match="must be a Point"):
            registry.apply("title", {"at": (0, 0), "nr": 1, "title": "x"}, points, paths, {})

    def test_unknown_parameter(self, registry: MacroRegistry, maps: Any) -> None:
        """Test that misspelled parameters are rejected."""
        points, paths = maps
        with pytest.raises(MacroError, match="unknown parameter 'grain'"):
            registry.apply(
                "cutonfold",
                {"from": Point(0, 0), "to": Point(0, 100), "grain": True},
                points,
                paths,
                {},
            )

    def test_failed_macro_leaves_maps_untouched(self, registry: MacroRegistry, maps: Any) -> None:
        """Test that validation runs before anything is written."""
        points, paths = maps
        with pytest.raises(MacroError):
            registry.apply("grainline", {"from": Point(0, 0)}, points, paths, {})
        assert points == {}
        assert paths == {}


class TestCutOnFold:
    """Tests for the cutonfold macro."""

    def test_bracket(self, maps: Any) -> None:
        """Test fold bracket points and path."""
        points, paths = maps
        CutOnFold().run({"from": Point(0, 0), "to": Point(0, 200)}, points, paths, {})
        assert set(points) == {
            "cutonfold_from",
            "cutonfold_via1",
            "cutonfold_via2",
            "cutonfold_to",
        }
        # 5% margin at each end
        assert points["cutonfold_from"] == Point(0, 10)
        assert points["cutonfold_to"] == Point(0, 190)
        # Travelling down the page, the markers sit on the +x side
        assert points["cutonfold_via1"].x == pytest.approx(15)
        assert paths["cutonfold"].get_attribute("data-text") == "Cut on fold"
        assert paths["cutonfold"].get_attribute("class") == "note"

    def test_with_grainline(self, maps: Any) -> None:
        """Test that grainline adds a parallel grainline path."""
        points, paths = maps
        CutOnFold().run(
            {"from": Point(0, 0), "to": Point(0, 200), "grainline": True, "prefix": "back_"},
            points,
            paths,
            {},
        )
        assert "back_cutonfold_grainline" in paths
        assert points["back_cutonfold_grainline_from"].x == pytest.approx(30)
        assert paths["back_cutonfold"].get_attribute("data-text") == "Cut on fold and grainline"

    def test_coincident_points(self, maps: Any) -> None:
        """Test that a zero-length fold is rejected."""
        points, paths = maps
        with pytest.raises(MacroError, match="coincide"):
            CutOnFold().run({"from": Point(1, 1), "to": Point(1, 1)}, points, paths, {})


class TestAnnotations:
    """Tests for title, grainline and scalebox."""

    def test_title(self, registry: MacroRegistry, maps: Any) -> None:
        """Test title text points."""
        points, paths = maps
        registry.apply(
            "title",
            {"at": Point(50, 50), "nr": 2, "title": "back", "pattern": "tee"},
            points,
            paths,
            {},
        )
        assert points["title_nr"].get_attribute("data-text") == "2"
        assert points["title_name"].get_attribute("data-text") == "back"
        assert points["title_pattern"].get_attribute("data-text") == "tee"
        # Lines run down the page
        assert points["title_name"].y > points["title_nr"].y

    def test_grainline(self, registry: MacroRegistry, maps: Any) -> None:
        """Test grainline path."""
        points, paths = maps
        registry.apply("grainline", {"from": Point(0, 0), "to": Point(0, 100)}, points, paths, {})
        assert paths["grainline"].get_attribute("class") == "grainline"
        assert paths["grainline"].length() == pytest.approx(100)

    def test_scalebox(self, maps: Any) -> None:
        """Test scalebox sizes and corner points."""
        points, paths = maps
        Scalebox().run({"at": Point(0, 0)}, points, paths, {})
        metric = paths["scalebox_metric"].bounding_box()
        imperial = paths["scalebox_imperial"].bounding_box()
        assert (metric.width, metric.height) == pytest.approx((100, 50))
        assert (imperial.width, imperial.height) == pytest.approx((101.6, 50.8))
        assert points["scalebox_metric_top_left"] == Point(-50, -25)
        assert "scalebox_label" in points


class TestDimensions:
    """Tests for paperless dimension macros."""

    def test_horizontal(self, registry: MacroRegistry, maps: Any) -> None:
        """Test horizontal dimension line and label."""
        points, paths = maps
        registry.apply(
            "hd", {"from": Point(0, 0), "to": Point(123, 40), "y": 60}, points, paths, {}
        )
        line = paths["hd_1"]
        assert line.start() == Point(0, 60)
        assert line.end() == Point(123, 60)
        assert line.get_attribute("data-text") == "12.3cm"
        assert "hd_1_leader_from" in paths
        assert points == {}

    def test_vertical_with_id_and_units(self, registry: MacroRegistry, maps: Any) -> None:
        """Test vertical dimension with an explicit id and imperial units."""
        points, paths = maps
        registry.apply(
            "vd",
            {"from": Point(0, 0), "to": Point(0, 254), "x": -15, "id": "length"},
            points,
            paths,
            {"units": "imperial"},
        )
        assert paths["length"].get_attribute("data-text") == '10.00"'
        assert paths["length"].start() == Point(-15, 0)

    def test_ids_do_not_clash(self, registry: MacroRegistry, maps: Any) -> None:
        """Test that repeated dimensions get distinct default ids."""
        points, paths = maps
        params = {"from": Point(0, 0), "to": Point(10, 0), "y": 5}
        registry.apply("hd", params, points, paths, {})
        registry.apply("hd", params, points, paths, {})
        assert "hd_1" in paths
        assert "hd_2" in paths

    def test_linear(self, registry: MacroRegistry, maps: Any) -> None:
        """Test linear dimension offset sideways."""
        points, paths = maps
        registry.apply(
            "ld", {"from": Point(0, 0), "to": Point(30, 40), "d": 10}, points, paths, {}
        )
        assert paths["ld_1"].length() == pytest.approx(50)
        assert paths["ld_1"].get_attribute("data-text") == "5.0cm"

    def test_path_dimension(self, registry: MacroRegistry, maps: Any) -> None:
        """Test path dimension measures the path length."""
        points, paths = maps
        edge = Path().move(Point(0, 0)).line(Point(100, 0)).line(Point(100, 50))
        registry.apply("pd", {"path": edge, "d": 10, "id": "edge"}, points, paths, {})
        assert paths["edge"].get_attribute("data-text") == "15.0cm"
        assert paths["edge"].start() == Point(0, 10)

    def test_path_dimension_needs_path(self, registry: MacroRegistry, maps: Any) -> None:
        """Test that pd rejects an empty path."""
        points, paths = maps
        with pytest.raises(MacroError, match="non-empty Path"):
            registry.apply("pd", {"path": Path()}, points, paths, {})
