from dataclasses import replace
from unittest.mock import patch

import pytest

from services.exceptions import DataConsistencyError, HttpError, NotFoundError
from services.radarr import RadarrService

TAGS = [
    {"id": 1, "label": "4k"},
    {"id": 7, "label": "do-not-purge"},
    {"id": 9, "label": "do-not-purge"},
]


@pytest.fixture
def radarr(config, mock_session):
    service = RadarrService(config.radarr, dry_run=False)
    service.session = mock_session
    return service


def test_session_sends_api_key_header(config):
    service = RadarrService(config.radarr)

    assert service.session.headers["X-Api-Key"] == "radarr-key"
    assert service.session.verify is True


def test_get_tag_returns_first_match(radarr, mock_session, make_response):
    mock_session.request.return_value = make_response(TAGS)

    tag = radarr.get_tag("do-not-purge")

    assert tag.id == 7
    mock_session.request.assert_called_once_with(
        "GET", "http://radarr:7878/api/v3/tag", params=None, json=None, timeout=30
    )


def test_get_tag_requires_exact_label(radarr, mock_session, make_response):
    mock_session.request.return_value = make_response(TAGS)

    with pytest.raises(NotFoundError):
        radarr.get_tag("Do-Not-Purge")


def test_get_tag_http_failure(radarr, mock_session, make_response):
    mock_session.request.return_value = make_response(
        status_code=500, reason="Internal Server Error", text="boom"
    )

    with pytest.raises(HttpError, match="Failed to fetch tags from Radarr"):
        radarr.get_tag("do-not-purge")


def test_get_movies(radarr, mock_session, make_response):
    mock_session.request.return_value = make_response(
        [
            {"id": 1, "title": "Alien", "added": "2020-01-01T00:00:00Z", "tags": []},
            {"id": 2, "title": "Aliens", "added": "2021-01-01T00:00:00Z", "tags": [7]},
        ]
    )

    movies = radarr.get_movies()

    assert [m.title for m in movies] == ["Alien", "Aliens"]
    assert mock_session.request.call_args.args == ("GET", "http://radarr:7878/api/v3/movie")


def test_get_movies_rejects_non_list(radarr, mock_session, make_response):
    mock_session.request.return_value = make_response({"message": "unexpected"})

    with pytest.raises(DataConsistencyError):
        radarr.get_movies()


def test_delete_movie(radarr, mock_session, make_response):
    mock_session.request.return_value = make_response(status_code=200)

    radarr.delete_movie(42)

    mock_session.request.assert_called_once_with(
        "DELETE",
        "http://radarr:7878/api/v3/movie/42",
        params={"deleteFiles": "true", "addImportExclusion": "false"},
        json=None,
        timeout=30,
    )


def test_delete_movie_failure(radarr, mock_session, make_response):
    mock_session.request.return_value = make_response(status_code=404, reason="Not Found", text="")

    with pytest.raises(HttpError) as exc_info:
        radarr.delete_movie(42)

    assert exc_info.value.status_code == 404


def test_delete_movie_dry_run_sends_nothing(config, mock_session):
    radarr = RadarrService(config.radarr, dry_run=True)
    radarr.session = mock_session

    radarr.delete_movie(42)

    mock_session.request.assert_not_called()


def test_tls_verification_can_be_disabled(config):
    insecure = replace(config.radarr, verify_ssl=False)

    with patch("services.arr.urllib3.disable_warnings") as disable_warnings:
        service = RadarrService(insecure)

    assert service.session.verify is False
    disable_warnings.assert_called_once()


def test_timeout_is_configurable(config, mock_session, make_response):
    radarr = RadarrService(replace(config.radarr, request_timeout=5), dry_run=False)
    radarr.session = mock_session
    mock_session.request.return_value = make_response([])

    radarr.get_movies()

    assert mock_session.request.call_args.kwargs["timeout"] == 5
