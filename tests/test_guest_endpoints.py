"""Tests for guest endpoints authorized by access codes."""

from fastapi.testclient import TestClient

from collab_access.api.app import create_app
from collab_access.services.sessions import SessionParams


def test_validate_hides_the_reason(
    container, session_authority, owner_id, project_id
) -> None:
    client = TestClient(create_app(container))
    session = session_authority.create_session(owner_id, project_id)

    live = client.post(
        "/collaboration/validate", json={"access_code": session.access_code}
    )
    session_authority.revoke_session(owner_id, session.id)
    revoked = client.post(
        "/collaboration/validate", json={"access_code": session.access_code}
    )

    assert live.json()["valid"] is True
    assert "user_id" not in live.json()["session"]
    assert revoked.json() == {"valid": False, "reason": "invalid_or_expired"}


def test_guest_crud_within_project(
    container, session_authority, project_repository, owner_id, project_id
) -> None:
    client = TestClient(create_app(container))
    code = session_authority.create_session(owner_id, project_id).access_code
    project_repository.add_row("locations", project_id, name="Pier", type="exterior")

    listed = client.get(
        "/collaboration/locations", params={"access_code": code, "type": "exterior"}
    )
    added = client.post(
        "/collaboration/characters",
        json={"access_code": code, "values": {"name": "Lin"}},
    )
    record_id = added.json()["record"]["id"]
    edited = client.patch(
        f"/collaboration/characters/{record_id}",
        json={"access_code": code, "values": {"description": "Lead"}},
    )
    deleted = client.delete(
        f"/collaboration/characters/{record_id}", params={"access_code": code}
    )
    gone = client.get(
        f"/collaboration/characters/{record_id}", params={"access_code": code}
    )

    assert [row["name"] for row in listed.json()["locations"]] == ["Pier"]
    assert added.status_code == 201
    assert edited.json()["record"]["description"] == "Lead"
    assert deleted.status_code == 204
    assert gone.status_code == 404


def test_guest_write_denied_by_flag(
    container, session_authority, owner_id, project_id
) -> None:
    client = TestClient(create_app(container))
    code = session_authority.create_session(
        owner_id, project_id, SessionParams(allow_edit=False)
    ).access_code

    response = client.post(
        "/collaboration/characters",
        json={"access_code": code, "values": {"name": "Lin"}},
    )

    assert response.status_code == 403
    assert response.json()["type"] == "forbidden"


def test_project_filter_is_refused(
    container, session_authority, owner_id, project_id
) -> None:
    client = TestClient(create_app(container))
    code = session_authority.create_session(owner_id, project_id).access_code

    response = client.get(
        "/collaboration/characters",
        params={"access_code": code, "project_id": "someone-else"},
    )

    assert response.status_code == 400


def test_expired_code_is_rejected(
    container, session_authority, owner_id, project_id, clock
) -> None:
    client = TestClient(create_app(container))
    session = session_authority.create_session(
        owner_id, project_id, SessionParams(expires_at=clock.now)
    )
    clock.advance(seconds=1)

    response = client.get(
        "/collaboration/project", params={"access_code": session.code}
    )

    assert response.status_code == 403
    assert response.json() == {
        "error": "Invalid or expired access code",
        "type": "invalid_or_expired",
    }


def test_join_reports_full_session(
    container, session_authority, owner_id, project_id
) -> None:
    client = TestClient(create_app(container))
    code = session_authority.create_session(
        owner_id, project_id, SessionParams(max_participants=1)
    ).access_code

    first = client.post("/collaboration/join", json={"access_code": code})
    second = client.post("/collaboration/join", json={"access_code": code})

    assert first.status_code == 201
    assert second.status_code == 403


def test_project_summary(container, session_authority, owner_id, project_id) -> None:
    client = TestClient(create_app(container))
    code = session_authority.create_session(owner_id, project_id).access_code

    response = client.get("/collaboration/project", params={"access_code": code})

    assert response.json()["project"]["name"] == "Night Train"


def test_guests_turned_off_cannot_delete(
    container, session_authority, project_repository, owner_id, project_id
) -> None:
    client = TestClient(create_app(container))
    row = project_repository.add_row("characters", project_id, name="Ada")
    code = session_authority.create_session(
        owner_id, project_id, SessionParams(allow_guests=False)
    ).access_code

    response = client.delete(
        f"/collaboration/characters/{row['id']}", params={"access_code": code}
    )

    assert response.status_code == 403
    assert response.json()["type"] == "forbidden"
    assert project_repository.tables["characters"] == [row]
