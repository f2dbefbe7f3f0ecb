"""Integration tests for the student submission flow."""
import pytest


@pytest.mark.integration
class TestSubmit:

    def test_submit_yes_no(self, client, make_vote):
        vote = make_vote()

        response = client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 3, "value": "yes"})

        assert response.status_code == 200
        data = response.json()
        assert data["vote_id"] == vote.id
        assert data["voter_attendance_number"] == "3"
        assert data["submitted_at"].endswith("+09:00")

    def test_duplicate_submission(self, client, make_vote):
        vote = make_vote()
        client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 3, "value": "yes"})

        response = client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 3, "value": "no"})

        assert response.status_code == 400
        assert response.json()["detail"] == "You have already voted in this vote"

    def test_closed_vote(self, client, make_vote, db_session):
        from classvote.services.vote import update_vote_status
        vote = make_vote()
        update_vote_status(db_session, vote.id, "closed")

        response = client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 1, "value": "yes"})

        assert response.status_code == 400
        assert response.json()["detail"] == "This vote is closed"

    def test_out_of_range_is_field_error(self, client, make_vote):
        vote = make_vote(total_expected_voters=5)

        response = client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 6, "value": "yes"})

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail[0]["loc"] == ["body", "attendance_number"]

    def test_attendance_number_must_be_positive(self, client, make_vote):
        vote = make_vote()
        response = client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 0, "value": "yes"})
        assert response.status_code == 422

    def test_invalid_value_is_field_error(self, client, make_vote):
        vote = make_vote()

        response = client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 1, "value": "maybe"})

        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["body", "value"]

    def test_reserved_marker_is_field_error(self, client, make_vote):
        vote = make_vote(vote_type="free_text")

        response = client.post(
            f"/api/v1/votes/{vote.id}/submissions",
            json={"attendance_number": 1, "value": "ANONYMOUS_VOTED_STUB"},
        )

        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["body", "value"]
        assert client.get(f"/api/v1/votes/{vote.id}/voters/1").json()["has_voted"] is False

    def test_missing_vote(self, client):
        response = client.post("/api/v1/votes/nope/submissions", json={"attendance_number": 1, "value": "yes"})
        assert response.status_code == 404

    def test_multi_select_with_custom_option(self, client, make_vote):
        vote = make_vote(
            vote_type="multiple_choice", options=["A", "B"],
            allow_multiple_selections=True, allow_adding_options=True,
        )
        ids = [opt["id"] for opt in vote.options]

        response = client.post(
            f"/api/v1/votes/{vote.id}/submissions",
            json={"attendance_number": 1, "value": ids, "custom_option": "C"},
        )

        assert response.status_code == 200
        series = client.get(f"/api/v1/votes/{vote.id}/results").json()["results"]["series"]
        assert [entry["name"] for entry in series] == ["A", "B", "（自由記述） C"]


@pytest.mark.integration
class TestVoterStatusAndReset:

    def test_voter_status(self, client, make_vote):
        vote = make_vote()

        before = client.get(f"/api/v1/votes/{vote.id}/voters/2").json()
        client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 2, "value": "no"})
        after = client.get(f"/api/v1/votes/{vote.id}/voters/2").json()

        assert before == {"attendance_number": "2", "has_voted": False, "reset_requested": False}
        assert after["has_voted"] is True

    def test_voter_status_missing_vote(self, client):
        assert client.get("/api/v1/votes/nope/voters/1").status_code == 404

    def test_reset_request(self, client, make_vote):
        vote = make_vote()
        client.post(f"/api/v1/votes/{vote.id}/submissions", json={"attendance_number": 2, "value": "no"})

        first = client.post(f"/api/v1/votes/{vote.id}/reset-requests", json={"attendance_number": 2})
        second = client.post(f"/api/v1/votes/{vote.id}/reset-requests", json={"attendance_number": 2})

        assert first.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        assert client.get(f"/api/v1/votes/{vote.id}/voters/2").json()["reset_requested"] is True

    def test_reset_request_without_submission(self, client, make_vote):
        vote = make_vote()
        response = client.post(f"/api/v1/votes/{vote.id}/reset-requests", json={"attendance_number": 2})
        assert response.status_code == 400
