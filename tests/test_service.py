import pytest
from fastapi.testclient import TestClient

from ll1lab.service import app


@pytest.fixture
def client():
	return TestClient(app)


def test_health(client):
	assert client.get("/health").json() == {"status": "ok"}


def test_samples(client):
	body = client.get("/api/samples").json()
	assert body["default"] in body["samples"]
	assert body["samples"]["lists"] == "S->(L)\nS->a\nL->L,S\nL->S"


def test_default_sample_is_parsed(client):
	resp = client.post("/api/ll1", json={"input": "i=n+i;"})
	assert resp.status_code == 200
	body = resp.json()
	assert body["ll1"] is True
	assert body["result"]["accepted"] is True
	assert body["result"]["steps"][-1]["stack"] == ""
	assert body["working"] is None


def test_custom_grammar(client):
	resp = client.post(
		"/api/ll1",
		json={"grammar": "S->S,T\nS->T\nT->id\nT->id(S)", "input": "id,(id)", "include_working": True},
	)
	body = resp.json()
	assert body["original"]["rules"]["S"] == ["S,T", "T"]
	assert body["grammar"]["order"] == ["S", "S'", "T", "T'"]
	assert body["grammar"]["rules"]["T'"] == ["&", "(S)"]
	assert body["table"]["T'"]["("] == "T' -> (S)"
	assert body["table"]["T'"]["$"] == "T' -> &"
	assert body["follow"]["S"] == ["$", ")"]
	assert body["working"]["follow_passes"][0] == {"S": ["$"]}

	result = body["result"]
	assert result["accepted"] is False
	assert result["status"] == "REJECTED"
	assert result["error"] == "unexpected symbol"
	assert result["steps"][-1]["error"] == "unexpected symbol"


def test_conflicts_are_reported(client):
	body = client.post("/api/ll1", json={"sample": "indirect", "input": "dba"}).json()
	assert body["ll1"] is False
	assert body["result"] is None
	assert body["conflicts"] == [
		{"nonterminal": "C'", "lookahead": "b", "existing": "C' -> bacC'", "incoming": "C' -> &"}
	]


def test_invalid_grammar(client):
	resp = client.post("/api/ll1", json={"grammar": "S->a\nab->c"})
	assert resp.status_code == 400
	detail = resp.json()["detail"]
	assert detail["error"] == "InvalidLeftHandSide"
	assert detail["line"] == 2


def test_reserved_symbol_in_input(client):
	resp = client.post("/api/ll1", json={"sample": "lists", "input": "a$"})
	assert resp.status_code == 400
	assert resp.json()["detail"]["error"] == "ReservedSymbolMisuse"


def test_unknown_sample(client):
	resp = client.post("/api/ll1", json={"sample": "nope"})
	assert resp.status_code == 404
	assert resp.json()["detail"]["error"] == "UnknownSample"


def test_blank_grammar(client):
	resp = client.post("/api/ll1", json={"grammar": "\n", "input": "a"})
	assert resp.status_code == 400
	detail = resp.json()["detail"]
	assert detail["error"] == "EmptyGrammar"
	assert detail["line"] is None
