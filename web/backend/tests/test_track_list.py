"""Tests for track-list document endpoints."""


def _ids(tracks):
    return [t["id"] for t in tracks]


class TestGetTrackList:
    """Test GET /track-list."""

    def test_returns_document(self, client, track_list_data):
        response = client.get("/track-list")

        assert response.status_code == 200
        assert response.json() == track_list_data

    def test_missing_document_is_initialized(self, client, media_dir):
        (media_dir / "trackList.json").unlink()

        response = client.get("/track-list")

        assert response.json() == {
            "score": [], "gnomeMusic": [], "outsideScope": [], "bonusUnassigned": [],
        }
        assert (media_dir / "trackList.json").exists()


class TestAssignTrack:
    """Test POST /assign-track."""

    def test_assign_subtrack(self, client, saved_track_list):
        response = client.post("/assign-track", json={"trackId": "a-b", "filename": "b.mp3"})

        assert response.status_code == 200
        subtrack = saved_track_list()["score"][0]["subtracks"][0]
        assert subtrack["filename"] == "b.mp3"
        assert subtrack["status"] == "ready"
        assert response.json()["trackList"]["score"][0]["filename"] == "a.mp3"

    def test_clear_assignment(self, client):
        response = client.post("/assign-track", json={"trackId": "a", "filename": None})

        track = response.json()["trackList"]["score"][0]
        assert track["filename"] is None
        assert track["status"] == "planned"

    def test_unknown_track(self, client):
        response = client.post("/assign-track", json={"trackId": "ghost", "filename": "x.mp3"})

        assert response.status_code == 404


class TestAddAndDelete:
    """Test POST /track-list/add and DELETE /track-list/{section}/{id}."""

    def test_add_top_level(self, client, saved_track_list):
        response = client.post(
            "/track-list/add",
            json={"section": "outsideScope", "newTrack": {"title": "Forest Walk"}},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Added forest-walk"
        added = saved_track_list()["outsideScope"][0]
        assert added == {
            "id": "forest-walk", "title": "Forest Walk", "filename": None, "status": "planned",
        }

    def test_add_subtrack(self, client):
        response = client.post(
            "/track-list/add",
            json={
                "section": "score",
                "parentTrackId": "a",
                "newTrack": {"title": "Strings", "type": "substem", "filename": "s.mp3"},
            },
        )

        subtracks = response.json()["trackList"]["score"][0]["subtracks"]
        assert _ids(subtracks) == ["a-b", "a-strings"]
        assert subtracks[1]["status"] == "ready"

    def test_add_then_delete_restores_document(self, client, track_list_data):
        client.post("/track-list/add", json={"section": "score", "newTrack": {"title": "Temp"}})
        response = client.delete("/track-list/score/temp")

        assert response.status_code == 200
        assert client.get("/track-list").json() == track_list_data

    def test_add_empty_title(self, client):
        response = client.post(
            "/track-list/add", json={"section": "score", "newTrack": {"title": " "}}
        )

        assert response.status_code == 400

    def test_add_duplicate_id(self, client):
        response = client.post(
            "/track-list/add", json={"section": "score", "newTrack": {"id": "g1", "title": "G1"}}
        )

        assert response.status_code == 409

    def test_add_unknown_section(self, client):
        response = client.post(
            "/track-list/add", json={"section": "nope", "newTrack": {"title": "X"}}
        )

        assert response.status_code == 404

    def test_delete_missing(self, client):
        assert client.delete("/track-list/score/ghost").status_code == 404


class TestUpdate:
    """Test POST /track-list/update."""

    def test_update_title(self, client, saved_track_list):
        response = client.post(
            "/track-list/update",
            json={"section": "score", "trackId": "c", "updates": {"title": "C Minor"}},
        )

        assert response.status_code == 200
        assert saved_track_list()["score"][1]["title"] == "C Minor"
        assert saved_track_list()["score"][1]["id"] == "c"


class TestMove:
    """Test POST /track-list/move."""

    def test_move_down_then_up(self, client):
        down = client.post(
            "/track-list/move", json={"trackId": "a", "section": "score", "direction": "down"}
        )
        assert _ids(down.json()["trackList"]["score"]) == ["c", "a"]

        up = client.post(
            "/track-list/move", json={"trackId": "a", "section": "score", "direction": "up"}
        )
        assert _ids(up.json()["trackList"]["score"]) == ["a", "c"]

    def test_move_past_top(self, client, track_list_data):
        response = client.post(
            "/track-list/move", json={"trackId": "a", "section": "score", "direction": "up"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Track is already at the top"
        assert client.get("/track-list").json() == track_list_data

    def test_invalid_direction(self, client):
        response = client.post(
            "/track-list/move", json={"trackId": "a", "section": "score", "direction": "left"}
        )

        assert response.status_code == 422


class TestReorder:
    """Test POST /track-list/reorder."""

    def test_move_across_sections(self, client, track_list_data):
        moved = track_list_data["score"][0]

        response = client.post(
            "/track-list/reorder",
            json={
                "trackId": "a",
                "sourceSection": "score",
                "destinationSection": "gnomeMusic",
                "sourceIndex": 0,
                "destinationIndex": 1,
            },
        )

        document = response.json()["trackList"]
        assert len(document["score"]) == 1
        assert len(document["gnomeMusic"]) == 2
        assert document["gnomeMusic"][1] == moved

    def test_negative_index_rejected(self, client):
        response = client.post(
            "/track-list/reorder",
            json={
                "trackId": "a",
                "sourceSection": "score",
                "destinationSection": "score",
                "sourceIndex": -1,
                "destinationIndex": 0,
            },
        )

        assert response.status_code == 422


class TestSave:
    """Test POST /track-list/save."""

    def test_save_whole_document(self, client, saved_track_list):
        document = {"score": [{"id": "x", "title": "X", "filename": None}]}

        response = client.post("/track-list/save", json={"trackList": document})

        assert response.status_code == 200
        assert saved_track_list() == {
            "score": [{"id": "x", "title": "X", "filename": None, "status": "planned"}]
        }

    def test_save_creates_backup(self, client, media_dir, track_list_data):
        client.post("/track-list/save", json={"trackList": {"score": []}})

        backups = sorted((media_dir / "backups").glob("trackList-*.json"))
        assert len(backups) == 1
