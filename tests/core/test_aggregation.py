"""
Tests for country aggregation.
"""

from travel_gallery.core.aggregation import (
    build_country_stats,
    get_country_code,
    update_country_stats,
)
from travel_gallery.core.types import CountryRecord, Dataset, ImageRecord


def image(image_id: str, country: str, featured: bool = False) -> ImageRecord:
    return ImageRecord(
        id=image_id, filename=f"{image_id}.jpg", country=country, featured=featured
    )


class TestCountryCode:
    """Tests for country code lookup."""

    def test_known_countries(self) -> None:
        assert get_country_code("Japan") == "JP"
        assert get_country_code("Denmark") == "DK"
        assert get_country_code("Chile") == "CL"

    def test_fallback_uses_first_two_letters(self) -> None:
        assert get_country_code("France") == "FR"
        assert get_country_code("vietnam") == "VI"


class TestBuildCountryStats:
    """Tests for the aggregate rebuild."""

    def test_empty(self) -> None:
        assert build_country_stats([]) == []

    def test_counts_in_first_appearance_order(self) -> None:
        """Test countries keep the order their first image appears in."""
        stats = build_country_stats(
            [
                image("1", "Peru"),
                image("2", "Japan"),
                image("3", "Peru"),
                image("4", "Chile"),
            ]
        )

        assert [(c.name, c.image_count) for c in stats] == [
            ("Peru", 2),
            ("Japan", 1),
            ("Chile", 1),
        ]

    def test_first_featured_wins(self) -> None:
        """Test the earliest featured image represents the country."""
        stats = build_country_stats(
            [
                image("1", "Japan", featured=True),
                image("2", "Japan", featured=True),
            ]
        )

        assert stats[0].featured_image == "1"

    def test_later_featured_image_used_when_earlier_is_not(self) -> None:
        """Test only images with the flag are considered."""
        stats = build_country_stats(
            [image("first", "Peru"), image("second", "Peru", featured=True)]
        )

        assert stats == [
            CountryRecord(name="Peru", code="PE", image_count=2, featured_image="second")
        ]

    def test_no_featured_image(self) -> None:
        stats = build_country_stats([image("1", "Bolivia")])
        assert stats[0].featured_image is None
        assert stats[0].code == "BO"

    def test_update_replaces_stale_aggregates(self) -> None:
        """Test the dataset's countries are rebuilt, not patched."""
        dataset = Dataset(
            images=[image("1", "Japan")],
            countries=[CountryRecord(name="Gone", code="GO", image_count=5)],
        )

        update_country_stats(dataset)

        assert dataset.countries == [
            CountryRecord(name="Japan", code="JP", image_count=1, featured_image=None)
        ]
