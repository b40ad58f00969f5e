from app.services.onboarding_service import get_onboarding_status


def test_no_resume_and_no_preferences(store):
    status = get_onboarding_status(store, "user-1")
    assert status.complete is False
    assert status.missing == ["resume", "preferences"]


def test_resume_with_empty_roles(store):
    store.resumes.add("user-1")
    store.preferences["user-1"] = []
    status = get_onboarding_status(store, "user-1")
    assert status.complete is False
    assert status.missing == ["preferences"]


def test_complete_profile(store):
    store.resumes.add("user-1")
    store.preferences["user-1"] = ["Backend Engineer"]
    status = get_onboarding_status(store, "user-1")
    assert status.complete is True
    assert status.missing == []


def test_anonymous_caller(store):
    assert get_onboarding_status(store, None).missing == ["auth"]


def test_onboarding_endpoint(client, store):
    store.preferences["user-1"] = ["Data Engineer"]
    resp = client.get("/onboarding")
    assert resp.status_code == 200
    assert resp.json() == {"complete": False, "missing": ["resume"]}
