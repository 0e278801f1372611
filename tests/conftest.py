from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import api
from config import get_settings
from storage import get_store


class InMemoryStore:
    """Same surface as storage.MongoStore, backed by dicts."""

    def __init__(self):
        self.jobs = {}
        self.users = {}
        self.analyses = {}
        self._clock = count()

    def _stamp(self):
        return datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._clock))

    def list_jobs(self):
        return sorted(self.jobs.values(), key=lambda j: j["title"])

    def create_job(self, title, description):
        job_id = str(ObjectId())
        self.jobs[job_id] = {"_id": job_id, "title": title, "description": description, "createdAt": self._stamp()}
        return job_id

    def update_job(self, job_id, title, description):
        if job_id not in self.jobs:
            return False
        self.jobs[job_id].update(title=title, description=description)
        return True

    def delete_job(self, job_id):
        return self.jobs.pop(job_id, None) is not None

    def find_user(self, email, phone_number):
        for user in self.users.values():
            if user["email"] == email or user["phoneNumber"] == phone_number:
                return dict(user)
        return None

    def create_user(self, username, email, phone_number, password_hash):
        user_id = str(ObjectId())
        self.users[user_id] = {
            "_id": user_id,
            "username": username,
            "email": email,
            "phoneNumber": phone_number,
            "password": password_hash,
            "createdAt": self._stamp(),
        }
        return user_id

    def list_users(self):
        users = [{k: v for k, v in u.items() if k != "password"} for u in self.users.values()]
        return sorted(users, key=lambda u: u["createdAt"], reverse=True)

    def delete_user(self, user_id):
        return self.users.pop(user_id, None) is not None

    def save_analysis(self, user_email, resume_file_name, job_description, match_score):
        analysis_id = str(ObjectId())
        self.analyses[analysis_id] = {
            "_id": analysis_id,
            "userEmail": user_email,
            "resumeFileName": resume_file_name,
            "jobDescription": job_description,
            "matchScore": match_score,
            "createdAt": self._stamp(),
        }
        return analysis_id

    def list_history(self, user_email):
        rows = [a for a in self.analyses.values() if a["userEmail"] == user_email]
        return sorted(rows, key=lambda a: a["createdAt"], reverse=True)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.delenv("STRICT_MATCHING", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def client(store):
    api.app.dependency_overrides[get_store] = lambda: store
    with TestClient(api.app) as test_client:
        yield test_client
    api.app.dependency_overrides.clear()


@pytest.fixture
def fake_llm(monkeypatch):
    """
    Replace the Gemini call in the given modules with a canned reply.

    Usage: ``fake_llm("Score: 7", "evaluator")``. Returns the list of prompts
    the fake received.
    """
    calls = []

    def install(reply, *modules):
        def fake_call(system_prompt, user_prompt, temperature=None):
            calls.append((system_prompt, user_prompt))
            return reply

        for module in modules:
            monkeypatch.setattr(f"{module}.call_gemini_text", fake_call)
        return calls

    return install
