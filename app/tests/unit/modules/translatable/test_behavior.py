"""Behavior tests for modules.translatable across storage strategies.

Each test runs against an Artists model translated into en, it and ja with
ja as the canonical locale, once per storage strategy unless stated otherwise.
"""

import pytest

from infrastructure.persistence import Entity
from modules.translatable import (
    UnavailableFieldError,
    UnavailableLocaleError,
    UnknownTranslatedFieldError,
    UnsupportedConditionShapeError,
)

MERGING_STRATEGIES = ["nested", "subrecord"]
REWRITING_STRATEGIES = ["inline", "subrecord"]


@pytest.mark.unit
class TestWritePath:
    """Create, validate and save."""

    def test_create_and_read_back(self, saved_artist):
        """Values given per locale come back in the map, missing ones as None."""
        record = saved_artist.first()

        assert record["name"] == "リチャード"
        assert record["i18n"]["name"] == {"en": "Richard", "it": None, "ja": "リチャード"}
        assert record["i18n"]["profile"] == {"en": None, "it": None, "ja": None}

    def test_create_returns_full_map(self, artists):
        """A created record already exposes every field and locale."""
        artist = artists.create({"name": "リチャード", "it.name": "Riccardo"})

        assert artist["i18n"]["name"] == {"en": None, "it": "Riccardo", "ja": "リチャード"}
        assert "it.name" not in artist
        assert artist.exists() is False

    def test_update_one_locale(self, saved_artist):
        """Updating one locale leaves the others untouched."""
        record = saved_artist.first()

        assert saved_artist.save(record, {"it.name": "Ricardo"}) is True

        updated = saved_artist.first()
        assert updated["i18n"]["name"] == {"en": "Richard", "it": "Ricardo", "ja": "リチャード"}
        assert saved_artist.count() == 1

    def test_update_through_map(self, saved_artist):
        """Writing into the map of a read record persists the change."""
        record = saved_artist.first()
        record["i18n"]["profile"]["en"] = "Singer"

        assert saved_artist.save(record) is True

        assert saved_artist.first()["i18n"]["profile"]["en"] == "Singer"

    def test_canonical_change_through_field(self, saved_artist):
        """The bare field wins over the canonical map entry."""
        record = saved_artist.first()
        record["name"] = "リッキー"
        record["i18n"]["name"]["ja"] = "ignored"

        assert saved_artist.save(record) is True

        updated = saved_artist.first()
        assert updated["name"] == "リッキー"
        assert updated["i18n"]["name"]["ja"] == "リッキー"

    @pytest.mark.parametrize("strategy", MERGING_STRATEGIES)
    def test_partial_update_merges_persisted(self, saved_artist):
        """A partial record only replaces the locales it carries."""
        identity = saved_artist.first()["_id"]
        partial = Entity({"_id": identity, "it.name": "Ricardo"}, model=saved_artist, exists=True)

        assert saved_artist.save(partial) is True

        updated = saved_artist.first()
        assert updated["name"] == "リチャード"
        assert updated["i18n"]["name"] == {"en": "Richard", "it": "Ricardo", "ja": "リチャード"}

    def test_partial_canonical_update(self, saved_artist):
        """A partial record holding only a canonical value replaces it."""
        identity = saved_artist.first()["_id"]
        partial = Entity({"_id": identity, "name": "リッキー"}, model=saved_artist, exists=True)

        assert saved_artist.save(partial) is True

        updated = saved_artist.first()
        assert updated["name"] == "リッキー"
        assert updated["i18n"]["name"] == {"en": "Richard", "it": None, "ja": "リッキー"}

    def test_canonical_values_only(self, artists):
        """A record given only canonical values reads back with empty translations."""
        artist = artists.create({"name": "Richard"})

        assert artists.save(artist) is True

        record = artists.first()
        assert record["name"] == "Richard"
        assert record["i18n"]["name"]["ja"] == "Richard"

    def test_unknown_translated_field(self, artists):
        """A map naming an unconfigured field is rejected on save."""
        artist = artists.create({"name": "Richard"})
        artist["i18n"]["bio"] = {"en": "Born in Tokyo"}

        with pytest.raises(UnknownTranslatedFieldError):
            artists.save(artist)
        assert artists.count() == 0


@pytest.mark.unit
class TestValidation:
    """Relaxed validation of translated values."""

    def test_missing_translations_are_valid(self, artists):
        """Only the canonical locale is required."""
        artist = artists.create({"name": "リチャード"})

        assert artists.validates(artist) is True
        assert artist.errors == {}

    def test_missing_canonical_value(self, artists):
        """A record without the canonical value fails on the bare field."""
        artist = artists.create({"it.name": "Riccardo"})

        assert artists.save(artist) is False
        assert artist.errors == {"name": ["Artist name can't be empty."]}
        assert artists.count() == 0

    def test_present_translation_is_checked(self, artists):
        """A translated value that is present must satisfy the field rules."""
        artist = artists.create({"name": "リチャード", "it.name": "Ric"})

        assert artists.save(artist) is False
        assert artist.errors == {"i18n.name.it": ["Must have between 4 and 20 chars."]}
        assert artists.count() == 0

    def test_explicit_rules_are_relaxed(self, artists):
        """Rules passed at save time are relaxed the same way."""
        rules = {"profile": [{"rule": "notEmpty", "message": "Profile required."}]}
        artist = artists.create({"name": "リチャード", "profile": "歌手"})

        assert artists.save(artist, rules=rules) is True

    def test_validation_does_not_touch_record(self, artists):
        """Validating works on a copy of the record."""
        artist = artists.create({"name": "リチャード", "en.profile": "Singer"})
        before = artist.data()

        artists.validates(artist)

        assert artist.data() == before

    def test_unknown_translated_field(self, artists):
        """A map naming an unconfigured field is rejected on validation."""
        artist = artists.create({"name": "リチャード"})
        artist["i18n"]["bio"] = {"en": "Born in Tokyo"}

        with pytest.raises(UnknownTranslatedFieldError) as exc_info:
            artists.validates(artist)
        assert exc_info.value.fields == ["bio"]


@pytest.mark.unit
class TestReadPath:
    """Find, query rewriting and collapsed views."""

    def test_query_by_translation_path(self, saved_artist):
        """i18n.<field>.<locale> conditions find translated values."""
        assert saved_artist.first(conditions={"i18n.name.en": "Richard"}) is not None
        assert saved_artist.first(conditions={"i18n.name.en": "Ricardo"}) is None
        assert saved_artist.count(conditions={"i18n.name.en": "Richard"}) == 1

    @pytest.mark.parametrize("strategy", REWRITING_STRATEGIES)
    def test_query_by_locale_prefix(self, saved_artist):
        """<locale>.<field> conditions find translated values."""
        record = saved_artist.first(conditions={"en.name": "Richard"})

        assert record is not None
        assert record["name"] == "リチャード"

    @pytest.mark.parametrize("strategy", REWRITING_STRATEGIES)
    def test_query_with_locale_option(self, saved_artist):
        """The locale option applies to bare field conditions."""
        assert saved_artist.first(conditions={"name": "Richard"}, locale="en") is not None
        assert saved_artist.first(conditions={"name": "Richard"}, locale="it") is None

    def test_query_by_canonical_field(self, saved_artist):
        """Bare fields without a locale option keep matching canonical values."""
        assert saved_artist.first(conditions={"name": "リチャード"}) is not None

    def test_unsupported_condition(self, saved_artist):
        """Nested conditions on translations are refused."""
        with pytest.raises(UnsupportedConditionShapeError):
            saved_artist.all(conditions={"i18n.name.en.first": "R"})

    def test_all_formats_every_record(self, saved_artist):
        """Every record of a list result is formatted."""
        second = saved_artist.create({"name": "ミッキー", "en.name": "Mick"})
        saved_artist.save(second)

        records = saved_artist.all()

        assert [record["i18n"]["name"]["en"] for record in records] == ["Richard", "Mick"]

    def test_collapsed_view(self, saved_artist):
        """translate=<locale> yields single-locale records."""
        record = saved_artist.first(translate="en")

        assert record["name"] == "Richard"
        assert record["profile"] is None
        assert record["locale"] == "en"
        assert "i18n" not in record

    def test_collapsed_unknown_locale(self, saved_artist):
        """Collapsing to an unconfigured locale is a usage error."""
        with pytest.raises(UnavailableLocaleError):
            saved_artist.first(translate="fr")

    def test_saving_collapsed_view(self, saved_artist):
        """Saving a collapsed record writes only the collapsed locale."""
        record = saved_artist.first(translate="it")
        record["name"] = "Riccardo"

        assert saved_artist.save(record) is True

        updated = saved_artist.first()
        assert updated["name"] == "リチャード"
        assert updated["i18n"]["name"] == {"en": "Richard", "it": "Riccardo", "ja": "リチャード"}

    def test_saving_collapsed_canonical_view(self, saved_artist):
        """Saving a record collapsed to the canonical locale updates the bare field."""
        record = saved_artist.first(translate="ja")
        record["name"] = "リッキー"

        assert saved_artist.save(record) is True

        updated = saved_artist.first()
        assert updated["name"] == "リッキー"
        assert updated["i18n"]["name"] == {"en": "Richard", "it": None, "ja": "リッキー"}

    def test_raw_records(self, saved_artist, strategy):
        """translate=False returns the physical record."""
        raw = saved_artist.first(translate=False)

        if strategy == "inline":
            assert raw["i18n_name_en"] == "Richard"
            assert "i18n" not in raw
        elif strategy == "nested":
            assert raw["i18n"]["name"] == {"en": "Richard", "it": None}
        else:
            assert "i18n" not in raw
            assert raw["validation_locale"] == "ja"
            assert {"locale": "en", "name": "Richard", "profile": None} in raw["localizations"]
            assert not any(sub["locale"] == "it" for sub in raw["localizations"])

    def test_saving_raw_record(self, saved_artist):
        """A raw record saved back keeps its translations."""
        raw = saved_artist.first(translate=False)
        raw["name"] = "リッキー"

        assert saved_artist.save(raw) is True

        updated = saved_artist.first()
        assert updated["name"] == "リッキー"
        assert updated["i18n"]["name"]["en"] == "Richard"


@pytest.mark.unit
class TestAccessors:
    """translate() and is_translated()."""

    def test_translate_reads_all_locales(self, translatable):
        """Without a locale every value of the field is returned."""
        record = translatable.model.create({"name": "リチャード", "en.name": "Richard"})

        assert translatable.translate(record, "name") == {
            "en": "Richard",
            "it": None,
            "ja": "リチャード",
        }

    def test_translate_reads_one_locale(self, translatable):
        """A locale selects one value; the canonical one falls back to the field."""
        record = translatable.model.create({"name": "リチャード", "en.name": "Richard"})
        record["i18n"]["name"].pop("ja")

        assert translatable.translate(record, "name", "en") == "Richard"
        assert translatable.translate(record, "name", "it") is None
        assert translatable.translate(record, "name", "ja") == "リチャード"

    def test_translate_writes(self, translatable):
        """Writing a value updates the map and persists on save."""
        model = translatable.model
        record = model.create({"name": "リチャード"})

        translatable.translate(record, "name", "it", "Riccardo")
        translatable.translate(record, "name", "ja", "リッキー")

        assert record["name"] == "リッキー"
        assert model.save(record) is True
        assert model.first()["i18n"]["name"]["it"] == "Riccardo"

    def test_is_translated(self, translatable):
        """Only non-empty values in non-canonical locales count."""
        record = translatable.model.create({"name": "リチャード", "en.profile": ""})

        assert translatable.is_translated(record, "name") is False
        assert translatable.is_translated(record, "profile") is False

        translatable.translate(record, "profile", "en", "Singer")
        assert translatable.is_translated(record, "profile") is True

    def test_unknown_field(self, translatable):
        """Fields outside the configuration are refused."""
        record = translatable.model.create({"name": "リチャード"})

        with pytest.raises(UnavailableFieldError):
            translatable.translate(record, "bio")
        with pytest.raises(UnavailableFieldError):
            translatable.is_translated(record, "bio")

    def test_unknown_locale(self, translatable):
        """Locales outside the configuration are refused."""
        record = translatable.model.create({"name": "リチャード"})

        with pytest.raises(UnavailableLocaleError):
            translatable.translate(record, "name", "fr")
