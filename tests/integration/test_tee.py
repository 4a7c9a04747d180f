"""End-to-end drafts of the bundled t-shirt design."""

import pytest

from sewdraft.config import DraftConfig, SewdraftSettings
from sewdraft.core import Design, Draft, Part
from sewdraft.designs import get_design, tee
from sewdraft.domain import PatternDocument, Point, SegmentType
from sewdraft.exceptions import ConfigurationError

MEASUREMENTS = {
    "neck": 380,
    "chest": 1000,
    "hips": 1000,
    "shoulder_to_shoulder": 450,
    "hps_to_waist_back": 420,
    "waist_to_hips": 200,
    "biceps": 300,
    "shoulder_to_wrist": 600,
}
OPTIONS = {"back_neck_cutout": 0.2}


def bernstein(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> tuple[float, float]:
    """Point on a cubic from the Bernstein form."""
    mt = 1 - t
    a, b, c, d = mt**3, 3 * mt * mt * t, 3 * mt * t * t, t**3
    return (
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def sampled_length(start: Point, segments, steps: int = 20000) -> float:
    """Polyline length of consecutive cubics sampled densely."""
    total = 0.0
    current = start
    for segment in segments:
        prev = (current.x, current.y)
        for i in range(1, steps + 1):
            x, y = bernstein(current, segment.cp1, segment.cp2, segment.to, i / steps)
            total += ((x - prev[0]) ** 2 + (y - prev[1]) ** 2) ** 0.5
            prev = (x, y)
        current = segment.to
    return total


def draft(**config) -> PatternDocument:
    settings = SewdraftSettings(draft=DraftConfig(**config))
    return Draft(get_design("tee"), settings).run(MEASUREMENTS, OPTIONS)


@pytest.fixture(scope="module")
def document() -> PatternDocument:
    """Complete draft without seam allowance."""
    return draft()


class TestTeeDraft:
    """Tests for the structure of a complete draft."""

    def test_parts(self, document: PatternDocument) -> None:
        """Test that every part is drafted in order."""
        assert list(document.parts) == ["back", "front", "sleeve"]
        assert document.design == "tee"
        assert document.version == tee.VERSION

    @pytest.mark.parametrize("part", ["back", "front", "sleeve"])
    def test_seam_closed(self, document: PatternDocument, part: str) -> None:
        """Test that each seam is a single closed outline."""
        seam = document.part(part).paths["seam"]
        assert seam.ops[0].type == SegmentType.MOVE
        assert seam.ops[-1].type == SegmentType.CLOSE
        assert seam.is_closed
        assert seam.end() == seam.start()
        assert sum(op.type == SegmentType.MOVE for op in seam.ops) == 1
        assert seam.get_attribute("class") == "fabric"

    def test_back_neckline_depth(self, document: PatternDocument) -> None:
        """Test that the back neck cutout option moves centre back."""
        points = document.part("back").points
        assert points["cb_neck"].y == pytest.approx(0.2 * 380)
        assert points["cb_neck"].x == 0

    def test_front_neckline_deeper_than_back_default(self) -> None:
        """Test the default front and back neckline depths."""
        doc = Draft(get_design("tee")).run(MEASUREMENTS)
        back = doc.part("back").points["cb_neck"]
        front = doc.part("front").points["cf_neck"]
        assert front.y > back.y

    def test_store_exports(self, document: PatternDocument) -> None:
        """Test values exported to the pattern document."""
        store = document.store
        assert store["sleevecap_ease"] == 0
        assert store["back_armhole_length"] > 0
        assert store["front_armhole_length"] > 0
        assert [entry["part"] for entry in store["cutlist"]] == ["back", "front", "sleeve"]

    def test_back_armhole_length(self, document: PatternDocument) -> None:
        """Test the stored armhole length against an independent measurement."""
        seam = document.part("back").paths["seam"]
        # move, hem, side seam, curve to armhole, then the two armhole curves
        armhole_start = seam.ops[3].to
        reference = sampled_length(armhole_start, [seam.ops[4], seam.ops[5]])
        assert document.store["back_armhole_length"] == pytest.approx(reference, rel=1e-3)

    def test_sleevecap_fits_armholes(self, document: PatternDocument) -> None:
        """Test that the sleeve cap matches both armholes."""
        store = document.store
        target = store["back_armhole_length"] + store["front_armhole_length"]
        assert store["sleevecap_length"] == pytest.approx(target, abs=0.1)

    def test_sleeve_symmetric(self, document: PatternDocument) -> None:
        """Test that the sleeve is symmetric about its centre line."""
        points = document.part("sleeve").points
        assert points["biceps_left"].x == pytest.approx(-points["biceps_right"].x)
        assert points["hem_left"].y == points["hem_right"].y

    def test_finishing_annotations(self, document: PatternDocument) -> None:
        """Test title, fold and scale box on the back."""
        back = document.part("back")
        for name in (
            "title_nr",
            "title_name",
            "scalebox",
            "scalebox_metric_top_left",
            "scalebox_label",
        ):
            assert name in back.points
        assert back.points["title_nr"].get_attribute("data-text") == "2"
        assert "cutonfold" in back.paths
        assert "cutonfold_grainline" in back.paths
        assert "grainline" in document.part("sleeve").paths

    def test_no_seam_allowance_by_default(self, document: PatternDocument) -> None:
        """Test that sa paths are only drawn when requested."""
        for part in document.parts.values():
            assert "sa" not in part.paths

    def test_document_round_trip(self, document: PatternDocument) -> None:
        """Test that the serialized document restores the same geometry."""
        restored = PatternDocument.from_dict(document.to_dict())
        assert restored.part("back").paths["seam"] == document.part("back").paths["seam"]
        assert restored.store["cutlist"] == document.store["cutlist"]


class TestTeeVariants:
    """Tests for draft settings on the t-shirt."""

    def test_not_complete(self) -> None:
        """Test that only core geometry is drawn without finishing."""
        doc = draft(complete=False)
        back = doc.part("back")
        assert "title_nr" not in back.points
        assert "cutonfold" not in back.paths
        assert set(back.paths) == {"seam"}

    def test_paperless_is_additive(self, document: PatternDocument) -> None:
        """Test that paperless adds dimension paths and changes nothing else."""
        paperless = draft(paperless=True)
        for name, part in document.parts.items():
            other = paperless.part(name)
            assert other.points == part.points
            for key, path in part.paths.items():
                assert other.paths[key] == path
            extra = set(other.paths) - set(part.paths)
            assert extra
            assert all(key.startswith("dim_") for key in extra)
        assert "dim_armhole" in paperless.part("back").paths
        assert "dim_sleevecap" in paperless.part("sleeve").paths

    def test_seam_allowance(self, document: PatternDocument) -> None:
        """Test that seam allowance is drawn outside the seam."""
        doc = draft(sa=10)
        for name in ("back", "front", "sleeve"):
            part = doc.part(name)
            assert "sa" in part.paths
            seam_box = part.paths["seam"].bounding_box()
            sa_box = part.paths["sa"].bounding_box()
            assert sa_box.bottom_right.y == pytest.approx(seam_box.bottom_right.y + 10, abs=0.5)
        # The bodice allowance stops at the fold
        assert not doc.part("back").paths["sa"].is_closed
        assert doc.part("sleeve").paths["sa"].is_closed
        assert doc.part("back").paths["seam"] == document.part("back").paths["seam"]

    def test_strict_mode(self) -> None:
        """Test that the bundled part order satisfies strict reads."""
        doc = draft(strict_store=True)
        assert doc.store["sleevecap_length"] > 0

    def test_invalid_option(self) -> None:
        """Test that an out-of-range option is rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            Draft(get_design("tee")).run(MEASUREMENTS, {"back_neck_cutout": 0.5})
        assert exc_info.value.key == "back_neck_cutout"

    def test_larger_chest_wider_pattern(self, document: PatternDocument) -> None:
        """Test that measurements drive the geometry."""
        bigger = Draft(get_design("tee")).run(dict(MEASUREMENTS, chest=1200), OPTIONS)
        assert (
            bigger.part("front").points["armhole"].x
            > document.part("front").points["armhole"].x
        )

    def test_sleeve_alone_estimates_armhole(self) -> None:
        """Test that a lenient sleeve draft falls back to an estimate."""
        sleeve_only = Design(
            name="sleeve",
            version=tee.VERSION,
            parts=(Part("sleeve", tee.draft_sleeve),),
            measurements=tee.MEASUREMENTS,
            options=tee.OPTIONS,
            macros=tee.MACROS,
        )
        doc = Draft(sleeve_only).run(MEASUREMENTS)
        estimate = 2 * MEASUREMENTS["hps_to_waist_back"] * 0.55
        assert doc.store["sleevecap_length"] == pytest.approx(estimate, abs=0.1)
