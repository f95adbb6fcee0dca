"""Feature-level fixtures for translatable behavior tests."""

import pytest

from modules.translatable import StorageStrategy
from tests.factories.translatable import (
    make_artists_model,
    make_config,
    make_translatable,
)

STRATEGIES = ["inline", "nested", "subrecord"]


@pytest.fixture(params=STRATEGIES)
def strategy(request):
    """Every storage strategy."""
    return request.param


@pytest.fixture
def artists(strategy):
    """Artists model with the translatable behavior attached."""
    model = make_artists_model(strategy)
    make_translatable(model, strategy=strategy)
    return model


@pytest.fixture
def translatable(strategy):
    """Translatable behavior of a fresh Artists model."""
    return make_translatable(make_artists_model(strategy), strategy=strategy)


@pytest.fixture
def saved_artist(artists):
    """Artists model holding one record translated into ja and en."""
    artist = artists.create({"ja.name": "リチャード", "en.name": "Richard"})
    assert artists.save(artist) is True
    return artists


@pytest.fixture
def nested_config():
    return make_config(StorageStrategy.NESTED)


@pytest.fixture
def inline_config():
    return make_config(StorageStrategy.INLINE)


@pytest.fixture
def subrecord_config():
    return make_config(StorageStrategy.SUBRECORD)
