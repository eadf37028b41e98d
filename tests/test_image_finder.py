import os

import pytest
import requests

import config
from conftest import FakeResponse, ScriptedProvider, make_candidate
from exceptions import DownloadError
from image_finder import (
    build_attribution, category_folder, find_and_download_image, find_recipe_image, recipe_slug
)
from models import ImageProvider, RecipeImageRequest

NORMA_KEYWORDS = ["rigatoni pasta", "eggplant tomato"]


def norma_request():
    return RecipeImageRequest(title="Rigatoni alla Norma", category="Pasta", slug="rigatoni-norma",
                              imageKeywords=NORMA_KEYWORDS)


def four_providers(p1=None, p2=None, p3=None, p4=None):
    return [
        p1 or ScriptedProvider(ImageProvider.PEXELS),
        p2 or ScriptedProvider(ImageProvider.UNSPLASH),
        p3 or ScriptedProvider(ImageProvider.PIXABAY),
        p4 or ScriptedProvider(ImageProvider.WIKIMEDIA),
    ]


def test_strong_match_on_first_query_stops_everything(no_sleep):
    strong = make_candidate("https://p/rigatoni.jpg", title="rigatoni pasta dish")
    providers = four_providers(p1=ScriptedProvider(ImageProvider.PEXELS, default=[strong]))

    best = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, set(), providers, sleep=no_sleep)

    assert best.url == "https://p/rigatoni.jpg"
    assert best.score == 15
    assert providers[0].calls == ["rigatoni pasta"]
    for other in providers[1:]:
        assert other.calls == []


def test_weak_results_try_every_query_then_next_provider(no_sleep, sleeps):
    weak = make_candidate("https://p/weak.jpg", title="plate", width=1000, height=1000)
    good = make_candidate("https://u/good.jpg", title="rigatoni pasta bowl", provider=ImageProvider.UNSPLASH)
    providers = four_providers(
        p1=ScriptedProvider(ImageProvider.PEXELS, default=[weak]),
        p2=ScriptedProvider(ImageProvider.UNSPLASH, default=[good]),
    )

    best = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, set(), providers, sleep=no_sleep)

    assert best.url == "https://u/good.jpg"
    assert len(providers[0].calls) == 5
    assert providers[1].calls == ["rigatoni pasta"]
    assert providers[2].calls == []
    assert all(s == config.QUERY_DELAY_SECONDS for s in sleeps)


def test_acceptable_match_stops_provider_loop(no_sleep):
    decent = make_candidate("https://p/decent.jpg", title="food", description="rigatoni pasta",
                            width=1000, height=700)
    providers = four_providers(p1=ScriptedProvider(ImageProvider.PEXELS, default=[decent]))

    best = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, set(), providers, sleep=no_sleep)

    assert best.score == 8
    assert len(providers[0].calls) == 5
    assert providers[1].calls == []


def test_running_best_is_kept_across_queries():
    first = make_candidate("https://p/a.jpg", title="plate", description="eggplant tomato", width=900, height=900)
    second = make_candidate("https://p/b.jpg", title="plate", width=900, height=900)
    provider = ScriptedProvider(ImageProvider.PEXELS, results_by_query={
        "rigatoni pasta": [first],
        "eggplant tomato": [second],
    })

    best = find_recipe_image("Rigatoni alla Norma", "", NORMA_KEYWORDS, set(), [provider], sleep=lambda s: None)

    assert best.url == "https://p/a.jpg"
    assert best.score == 5


def test_ties_go_to_the_first_found(no_sleep):
    a = make_candidate("https://p/a.jpg", title="rigatoni pasta")
    b = make_candidate("https://p/b.jpg", title="rigatoni pasta")
    provider = ScriptedProvider(ImageProvider.PEXELS, default=[a, b])

    best = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, set(), [provider], sleep=no_sleep)

    assert best.url == "https://p/a.jpg"


def test_winner_is_added_to_used_urls(no_sleep):
    used = set()
    provider = ScriptedProvider(ImageProvider.PEXELS, default=[make_candidate("https://p/a.jpg", title="rigatoni pasta")])

    find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, used, [provider], sleep=no_sleep)

    assert used == {"https://p/a.jpg"}


def test_used_url_is_never_returned_again(no_sleep):
    shared = make_candidate("https://p/shared.jpg", title="rigatoni pasta")
    other = make_candidate("https://p/other.jpg", title="rigatoni pasta", width=900, height=900)
    used = set()

    first = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, used,
                              [ScriptedProvider(ImageProvider.PEXELS, default=[shared, other])], sleep=no_sleep)
    second = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, used,
                               [ScriptedProvider(ImageProvider.PEXELS, default=[shared, other])], sleep=no_sleep)

    assert first.url == "https://p/shared.jpg"
    assert second.url == "https://p/other.jpg"
    assert used == {"https://p/shared.jpg", "https://p/other.jpg"}


def test_only_duplicates_means_no_image(no_sleep):
    shared = make_candidate("https://p/shared.jpg", title="rigatoni pasta")
    used = {"https://p/shared.jpg"}

    best = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, used,
                             four_providers(p1=ScriptedProvider(ImageProvider.PEXELS, default=[shared])),
                             sleep=no_sleep)

    assert best is None
    assert used == {"https://p/shared.jpg"}


def test_non_positive_best_means_no_image(no_sleep):
    junk = make_candidate("https://w/IMG_1.jpg", title="IMG_0001", width=700, height=900)
    provider = ScriptedProvider(ImageProvider.WIKIMEDIA, default=[junk])

    assert find_recipe_image("Pane", "Pane", [], set(), [provider], sleep=no_sleep) is None


def test_unconfigured_providers_are_skipped(no_sleep):
    p1 = ScriptedProvider(ImageProvider.PEXELS, default=[make_candidate("https://p/x.jpg", title="pane")],
                          configured=False)
    p4 = ScriptedProvider(ImageProvider.WIKIMEDIA)

    best = find_recipe_image("Pane", "Pane", [], set(), [p1, p4], sleep=no_sleep)

    assert best is None
    assert p1.calls == []
    assert p4.calls == ["bread", "pane italian homemade", "bread italian traditional"]


def test_same_inputs_give_same_result(no_sleep):
    def run():
        providers = four_providers(
            p1=ScriptedProvider(ImageProvider.PEXELS, default=[
                make_candidate("https://p/1.jpg", title="pasta", width=900, height=900),
                make_candidate("https://p/2.jpg", title="eggplant tomato"),
            ]),
        )
        best = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, set(), providers, sleep=no_sleep)
        return best.url, providers[0].calls

    assert run() == run()


def test_without_credentials_only_wikimedia_is_queried(monkeypatch, clear_provider_keys, no_sleep):
    urls = []

    def fake_get(url, params=None, headers=None, timeout=None):
        urls.append(url)
        return FakeResponse(json_data={"batchcomplete": ""})

    monkeypatch.setattr(requests, "get", fake_get)

    best = find_recipe_image("Rigatoni alla Norma", "Pasta", NORMA_KEYWORDS, set(), sleep=no_sleep)

    assert best is None
    assert urls
    assert set(urls) == {config.WIKIMEDIA_API_URL}


def test_category_folder():
    assert category_folder("Pasta") == "pasta"
    assert category_folder("Focaccia") == "pane"
    assert category_folder("Dolci") == "dolci"
    assert category_folder("") == "pane"


def test_recipe_slug_defaults_to_title():
    assert recipe_slug(RecipeImageRequest(title="Pane  di Altamura")) == "pane-di-altamura"
    assert recipe_slug(RecipeImageRequest(title="x", slug="custom")) == "custom"


def test_build_attribution():
    image = make_candidate("u", title="t", author="", license="Pexels License")

    assert build_attribution(image) == "📷 Foto: Pexels - Pexels License via Pexels"
    assert build_attribution(None) == ""


def test_find_and_download_rigatoni_example(monkeypatch, tmp_path, clear_provider_keys, no_sleep):
    monkeypatch.setenv("PEXELS_API_KEY", "secret")

    def fake_get(url, params=None, headers=None, timeout=None):
        if url == config.PEXELS_SEARCH_URL:
            return FakeResponse(json_data={"photos": [{
                "alt": "rigatoni pasta dish", "width": 1600, "height": 1067,
                "photographer": "Mario", "src": {"large2x": "https://images.pexels.com/rigatoni.jpg"},
            }]})
        if url == "https://images.pexels.com/rigatoni.jpg":
            return FakeResponse(content=b"\xff\xd8jpeg-bytes")
        raise AssertionError(f"unexpected request to {url}")

    monkeypatch.setattr(requests, "get", fake_get)
    used = set()

    descriptor = find_and_download_image(norma_request(), str(tmp_path), used, sleep=no_sleep)

    assert descriptor.local_path.endswith(os.path.join("pasta", "rigatoni-norma.jpg"))
    assert descriptor.home_relative_path == "images/ricette/pasta/rigatoni-norma.jpg"
    assert descriptor.relative_path == "../../images/ricette/pasta/rigatoni-norma.jpg"
    assert descriptor.provider == ImageProvider.PEXELS
    assert descriptor.attribution == "📷 Foto: Mario - Pexels License via Pexels"
    assert (descriptor.width, descriptor.height) == (1600, 1067)
    with open(descriptor.local_path, "rb") as f:
        assert f.read() == b"\xff\xd8jpeg-bytes"
    assert used == {"https://images.pexels.com/rigatoni.jpg"}


def test_find_and_download_without_image_returns_none(tmp_path, no_sleep):
    providers = four_providers()

    assert find_and_download_image(norma_request(), str(tmp_path), set(), providers, sleep=no_sleep) is None
    assert not (tmp_path / "public").exists()


def test_find_and_download_propagates_download_error(monkeypatch, tmp_path, no_sleep):
    provider = ScriptedProvider(ImageProvider.PEXELS, default=[make_candidate("https://p/a.jpg", title="rigatoni pasta")])
    monkeypatch.setattr(requests, "get", lambda *a, **k: FakeResponse(status_code=404))

    with pytest.raises(DownloadError):
        find_and_download_image(norma_request(), str(tmp_path), set(), [provider], sleep=no_sleep)


def test_find_and_download_refuses_empty_slug(tmp_path, no_sleep):
    provider = ScriptedProvider(ImageProvider.PEXELS, default=[make_candidate("https://p/a.jpg", title="pane")])
    used = set()

    with pytest.raises(ValueError):
        find_and_download_image(RecipeImageRequest(title="  ", category="Pane"), str(tmp_path), used,
                                [provider], sleep=no_sleep)

    assert provider.calls == []
    assert used == set()
