"""Integration tests for the sandwich planner API."""

from collections.abc import Iterator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from solders.signature import Signature

from sandwich.api.endpoints import get_config, get_store
from sandwich.api.main import app
from sandwich.config import SandwichConfig
from sandwich.coordination import InMemorySandwichStore
from tests.helpers import OTHER_VAULT, TOKEN, USDC, VAULT_A, VAULT_B, WSOL


def make_pool(reserve0: int = 100, reserve1: int = 1_000) -> dict:
    """Fee-free constant product pool: token0 = TOKEN, token1 = WSOL."""
    return {
        "mint0": str(TOKEN),
        "mint1": str(WSOL),
        "vault0": str(VAULT_A),
        "vault1": str(VAULT_B),
        "curve": {
            "family": "constant_product",
            "reserve0": reserve0,
            "reserve1": str(reserve1),
            "fee_bps": 0,
        },
    }


def make_victim(limit: int = 60) -> dict:
    """Victim buying 5 TOKEN with at most `limit` WSOL."""
    return {"direction": "one_for_zero", "mode": "exact_output", "amount": 5, "limit": limit}


BUY_MINTS = {"token_in": str(WSOL), "token_out": str(TOKEN)}


@pytest.fixture
def store() -> InMemorySandwichStore:
    return InMemorySandwichStore()


@pytest.fixture
def client(store) -> Iterator[TestClient]:
    """Client with an isolated store and no dust floor."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_config] = lambda: SandwichConfig(
        safety_fraction=Decimal(1), dust_floor=1
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def begin(client: TestClient, sandwich_id: int = 1, **overrides) -> dict:
    body = {"input_amount": 65, "output_amount": 6, **BUY_MINTS, **overrides}
    response = client.post(f"/sandwiches/{sandwich_id}/begin", json=body)
    assert response.status_code == 200
    return response.json()


class TestHealth:
    """Tests for the health endpoint."""

    def test_health_check(self, client):
        """Health endpoint returns ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestFrontrunPlanEndpoint:
    """Tests for POST /frontrun/plan."""

    def test_plan(self, client):
        """The hand-checked sandwich is planned with the closed form."""
        response = client.post(
            "/frontrun/plan", json={"pool": make_pool(), "victim": make_victim()}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["strategy"] == "closed_form"
        assert data["direction"] == "one_for_zero"
        assert data["frontrun_amount_in"] == 65
        assert data["expected_frontrun_amount_out"] == 6
        assert data["expected_profit"] == 6
        assert Decimal(data["profit_ratio"]) == Decimal(6) / Decimal(65)

    def test_safety_override(self, client):
        """A request-level safety fraction overrides the config."""
        response = client.post(
            "/frontrun/plan",
            json={"pool": make_pool(), "victim": make_victim(), "safety_fraction": "0.95"},
        )
        assert response.status_code == 200
        assert response.json()["frontrun_amount_in"] == 57

    def test_exceeded_slippage(self, client):
        """A victim that already fails its bound is a 422 with the error code."""
        response = client.post(
            "/frontrun/plan", json={"pool": make_pool(), "victim": make_victim(limit=40)}
        )
        assert response.status_code == 422
        assert response.json()["error"] == "exceeded_slippage"

    def test_invalid_pubkey(self, client):
        """Malformed mints fail request validation."""
        pool = make_pool()
        pool["mint0"] = "not-a-key"
        response = client.post("/frontrun/plan", json={"pool": pool, "victim": make_victim()})
        assert response.status_code == 422

    def test_identical_mints(self, client):
        """A pool trading a mint against itself is an invalid vault setup."""
        pool = make_pool()
        pool["mint1"] = pool["mint0"]
        response = client.post("/frontrun/plan", json={"pool": pool, "victim": make_victim()})
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_vault"

    def test_matching_vaults(self, client):
        """Vaults presented in the victim's direction are accepted."""
        body = {
            "pool": make_pool(),
            "victim": make_victim(),
            "input_vault": str(VAULT_B),
            "output_vault": str(VAULT_A),
        }
        response = client.post("/frontrun/plan", json=body)
        assert response.status_code == 200
        assert response.json()["frontrun_amount_in"] == 65
        assert response.json()["frontrun_sqrt_price_limit_x64"] is None

    @pytest.mark.parametrize(
        ("input_vault", "output_vault"),
        [(VAULT_A, VAULT_B), (OTHER_VAULT, VAULT_A), (VAULT_B, OTHER_VAULT)],
    )
    def test_rejected_vaults(self, client, input_vault, output_vault):
        """Foreign vaults, or vaults ordered for the other direction, are invalid_vault."""
        body = {
            "pool": make_pool(),
            "victim": make_victim(),
            "input_vault": str(input_vault),
            "output_vault": str(output_vault),
        }
        response = client.post("/frontrun/plan", json=body)
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_vault"

    def test_single_vault(self, client):
        """One vault without the other is an invalid request."""
        body = {"pool": make_pool(), "victim": make_victim(), "input_vault": str(VAULT_B)}
        response = client.post("/frontrun/plan", json=body)
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_request"

    def test_price_limit_on_reserve_pool(self, client):
        """A sqrt price limit is refused on a constant product pool."""
        victim = {**make_victim(), "sqrt_price_limit_x64": str(2**64)}
        response = client.post("/frontrun/plan", json={"pool": make_pool(), "victim": victim})
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_request"


class TestCoordinationEndpoints:
    """Tests for the begin / finish / finalize lifecycle."""

    def test_begin_and_get(self, client):
        """begin creates a pending record visible through GET."""
        signature = str(Signature(bytes([3] * 64)))
        created = begin(client, target_tx_signature=signature)

        assert created["status"] == "pending"
        assert created["target_tx_signature"] == signature

        response = client.get("/sandwiches/1")
        assert response.status_code == 200
        assert response.json()["frontrun_output_amount"] == 6

    def test_get_missing(self, client):
        """Unknown ids are 404."""
        response = client.get("/sandwiches/404")
        assert response.status_code == 404
        assert response.json()["error"] == "sandwich_not_found"

    def test_finish(self, client):
        """finish returns the recorded amounts."""
        begin(client)
        response = client.post("/sandwiches/1/finish", json=BUY_MINTS)
        assert response.status_code == 200
        assert response.json() == {
            "input_amount": 65,
            "output_amount": 6,
            "token_in": str(WSOL),
            "token_out": str(TOKEN),
        }

    def test_finish_mint_mismatch(self, client):
        """Mismatched mints are a coordination conflict."""
        begin(client)
        response = client.post(
            "/sandwiches/1/finish", json={"token_in": str(USDC), "token_out": str(TOKEN)}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "token_mint_mismatch"

    def test_backrun_plan(self, client):
        """The back-run is priced on the post-victim snapshot."""
        begin(client)
        response = client.post(
            "/backrun/plan", json={"sandwich_id": 1, "pool": make_pool(89, 1_125)}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["direction"] == "zero_for_one"
        assert data["expected_amount_out"] == 71
        assert data["min_amount_out"] == 69

    def test_backrun_plan_wrong_vaults(self, client):
        """Back-run vaults ordered like the front-run are invalid_vault."""
        begin(client)
        body = {
            "sandwich_id": 1,
            "pool": make_pool(89, 1_125),
            "input_vault": str(VAULT_B),
            "output_vault": str(VAULT_A),
        }
        response = client.post("/backrun/plan", json=body)
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_vault"

    def test_finalize_once(self, client):
        """finalize completes the record; a second call conflicts."""
        begin(client)
        body = {"output_balance_before": 935, "output_balance_after": 1_006, "recorded_input": 65}

        response = client.post("/sandwiches/1/finalize", json=body)
        assert response.status_code == 200
        assert response.json()["profit"] == 6
        assert response.json()["output_amount"] == 71

        again = client.post("/sandwiches/1/finalize", json=body)
        assert again.status_code == 409
        assert again.json()["error"] == "sandwich_already_completed"
        assert client.get("/sandwiches/1").json()["status"] == "complete"

    def test_begin_after_complete(self, client, store):
        """A finalized id cannot be reopened."""
        begin(client)
        store.complete(1)
        response = client.post(
            "/sandwiches/1/begin", json={"input_amount": 1, "output_amount": 1, **BUY_MINTS}
        )
        assert response.status_code == 409
