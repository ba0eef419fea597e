"""
Tests for icon matching — bucket tables, resolve, list and add.
"""

import pytest

from pwagen.core.models.manifest import IconRef, ManifestContent
from pwagen.core.services.icons import (
    LAUNCHER_SPLASH_TABLE,
    LAUNCHER_TABLE,
    BucketTable,
    SizeBucket,
    add_icon,
    is_png,
    list_icon_references,
    normalize_size_key,
    parse_size_token,
    resolve_icon,
)


# ── PNG filter ──────────────────────────────────────────────────


class TestIsPng:
    def test_png_extension(self):
        assert is_png(IconRef(src="icon.png", sizes="48x48"))

    def test_extension_case_insensitive(self):
        assert is_png(IconRef(src="https://example.com/ICON.PNG?v=2", sizes="48x48"))

    def test_declared_type(self):
        assert is_png(IconRef(src="https://example.com/icon", sizes="48x48", type="IMAGE/PNG"))

    def test_other_formats_rejected(self):
        assert not is_png(IconRef(src="icon.svg", sizes="48x48"))
        assert not is_png(IconRef(src="icon.jpg", sizes="48x48", type="image/jpeg"))

    def test_query_string_does_not_count(self):
        assert not is_png(IconRef(src="icon.jpg?format=.png", sizes="48x48"))


class TestParseSizeToken:
    def test_two_dimensions(self):
        assert parse_size_token("48x96") == ("48", "96")

    def test_single_dimension_is_square(self):
        assert parse_size_token("48") == ("48", "48")

    def test_upper_case_separator(self):
        assert parse_size_token(" 48X48 ") == ("48", "48")

    def test_invalid(self):
        assert parse_size_token("any") is None
        assert parse_size_token("1x2x3") is None


# ── Square mode ─────────────────────────────────────────────────


class TestResolveSquare:
    def test_match(self):
        icons = [IconRef(src="icon1.png", sizes="48x48")]
        assert resolve_icon(icons, "48", "square") is icons[0]

    def test_integer_key(self):
        icons = [IconRef(src="icon1.png", sizes="48x48")]
        assert resolve_icon(icons, 48, "square") is icons[0]

    def test_no_match(self):
        icons = [IconRef(src="icon1.png", sizes="48x48")]
        assert resolve_icon(icons, "72", "square") is None

    def test_non_square_token_rejected(self):
        icons = [IconRef(src="icon1.png", sizes="48x96")]
        assert resolve_icon(icons, "48", "square") is None

    def test_any_token_in_list(self):
        icons = [IconRef(src="multi.png", sizes="16x16 48x48 256x256")]
        assert resolve_icon(icons, "48", "square") is icons[0]

    def test_first_in_list_order_wins(self):
        icons = [
            IconRef(src="first.png", sizes="48x48"),
            IconRef(src="second.png", sizes="48x48"),
        ]
        assert resolve_icon(icons, "48", "square").src == "first.png"

    def test_skips_non_png(self):
        icons = [
            IconRef(src="icon.svg", sizes="48x48"),
            IconRef(src="icon.png", sizes="48x48"),
        ]
        assert resolve_icon(icons, "48", "square").src == "icon.png"

    def test_no_icons(self):
        assert resolve_icon(None, "48", "square") is None
        assert resolve_icon([], "48", "square") is None


# ── Exact mode ──────────────────────────────────────────────────


class TestResolveExact:
    def test_match(self):
        icons = [IconRef(src="splash.png", sizes="1080x1920", type="image/png")]
        assert resolve_icon(icons, "1080x1920", "exact") is icons[0]

    def test_near_miss(self):
        icons = [IconRef(src="splash.png", sizes="1080x1920", type="image/png")]
        assert resolve_icon(icons, "1081x1920", "exact") is None

    def test_token_is_normalized(self):
        icons = [IconRef(src="splash.png", sizes=" 1080X1920 ")]
        assert resolve_icon(icons, "1080x1920", "exact") is icons[0]

    def test_no_numeric_reparse(self):
        # "048x048" equals 48x48 numerically but not verbatim
        icons = [IconRef(src="icon.png", sizes="048x048")]
        assert resolve_icon(icons, "48x48", "exact") is None

    def test_single_dimension_not_expanded(self):
        icons = [IconRef(src="icon.png", sizes="48")]
        assert resolve_icon(icons, "48x48", "exact") is None


# ── Tables ──────────────────────────────────────────────────────


class TestBucketTable:
    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            BucketTable((SizeBucket("48", "mdpi"), SizeBucket("48", "hdpi")), mode="square")

    def test_lookup(self):
        bucket = LAUNCHER_TABLE.lookup("192")
        assert bucket.density == "xxxhdpi"
        assert bucket.folder == "mipmap-xxxhdpi"
        assert bucket.file_name == "ic_launcher.png"

    def test_lookup_unknown(self):
        assert LAUNCHER_TABLE.lookup("100") is None

    def test_splash_bucket(self):
        bucket = LAUNCHER_SPLASH_TABLE.lookup("1080x1920")
        assert bucket.role == "splash"
        assert bucket.file_name == "ic_splash.png"
        assert bucket.folder == "mipmap-xxhdpi"

    def test_highest_density_launcher_is_square(self):
        assert LAUNCHER_SPLASH_TABLE.lookup("192x192").density == "xxxhdpi"
        assert LAUNCHER_SPLASH_TABLE.lookup("192x92") is None

    def test_modes(self):
        assert LAUNCHER_TABLE.mode == "square"
        assert LAUNCHER_SPLASH_TABLE.mode == "exact"

    def test_resolve_uses_table_mode(self):
        icons = [IconRef(src="icon.png", sizes="48x48")]
        assert LAUNCHER_TABLE.resolve(icons, "48") is icons[0]
        assert LAUNCHER_SPLASH_TABLE.resolve(icons, "48") is None
        assert LAUNCHER_SPLASH_TABLE.resolve(icons, "48x48") is icons[0]


# ── Manifest helpers ────────────────────────────────────────────


class TestListIconReferences:
    def test_square_table(self, sample_content):
        refs = list_icon_references(sample_content, LAUNCHER_TABLE)
        assert refs == [
            ("48.png", "icons/icon-48.png"),
            ("96.png", "icons/icon-96.png"),
            ("144.png", "icons/icon-96.png"),
            ("192.png", "icons/icon-192"),
        ]

    def test_exact_table_includes_splash(self, sample_content):
        refs = dict(list_icon_references(sample_content, LAUNCHER_SPLASH_TABLE))
        assert refs["1080x1920.png"] == "icons/splash.png"
        assert refs["48x48.png"] == "icons/icon-48.png"
        assert "72x72.png" not in refs  # only an SVG at that size

    def test_empty_manifest(self):
        assert list_icon_references(ManifestContent(), LAUNCHER_TABLE) == []


class TestAddIcon:
    def test_creates_list(self):
        manifest = ManifestContent()
        add_icon(manifest, "48.png", "48")
        assert manifest.icons == [IconRef(src="48.png", sizes="48x48")]

    def test_appends_duplicates(self):
        manifest = ManifestContent()
        add_icon(manifest, "48.png", "48")
        add_icon(manifest, "48.png", "48")
        assert len(manifest.icons) == 2

    def test_square_write_then_read(self):
        manifest = ManifestContent()
        added = add_icon(manifest, "launcher.png", "96")
        assert resolve_icon(manifest.icons, "96", "square") is added

    def test_exact_write_then_read(self):
        manifest = ManifestContent()
        added = add_icon(manifest, "splash.png", "1080x1920")
        assert LAUNCHER_SPLASH_TABLE.resolve(manifest.icons, "1080x1920") is added

    def test_normalize_size_key(self):
        assert normalize_size_key("48") == "48x48"
        assert normalize_size_key(" 1080X1920 ") == "1080x1920"
        assert normalize_size_key("any") == "any"
