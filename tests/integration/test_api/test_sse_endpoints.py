"""Integration tests for SSE (Server-Sent Events) endpoints."""
import pytest
from unittest.mock import patch


async def _one_event():
    yield 'data: {"test": "data"}\n\n'


@pytest.mark.integration
class TestSSEVotesEndpoint:

    @patch('classvote.api.v1.endpoints.sse.event_generator')
    def test_sse_votes_headers(self, mock_event_generator, client):
        mock_event_generator.return_value = _one_event()

        response = client.get("/api/v1/sse/votes")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/event-stream; charset=utf-8"
        assert response.headers["cache-control"] == "no-cache"
        assert response.headers["x-accel-buffering"] == "no"
        assert 'data: {"test": "data"}' in response.text


@pytest.mark.integration
class TestSSEVoteAdminEndpoint:

    def test_requires_admin(self, client, make_vote):
        vote = make_vote()
        response = client.get(f"/api/v1/sse/votes/{vote.id}/admin")
        assert response.status_code == 401

    def test_other_vote_forbidden(self, client, make_vote, login_as_admin):
        vote = make_vote()
        other = make_vote(title="other")
        login_as_admin(other.id)
        response = client.get(f"/api/v1/sse/votes/{vote.id}/admin")
        assert response.status_code == 403

    @patch('classvote.api.v1.endpoints.sse.event_generator')
    def test_admin_stream(self, mock_event_generator, client, make_vote, login_as_admin):
        vote = make_vote()
        login_as_admin(vote.id)
        mock_event_generator.return_value = _one_event()

        response = client.get(f"/api/v1/sse/votes/{vote.id}/admin")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/event-stream; charset=utf-8"
