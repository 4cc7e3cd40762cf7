import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from walletauth.exceptions import StorageError
from walletauth.main import create_app
from walletauth.repositories.nonce_repo import NonceRepository


# Create a TestClient running the app lifespan against the in-memory backend
@pytest.fixture
def client(memory_settings):
    with TestClient(create_app(memory_settings)) as test_client:
        yield test_client


class TestRouteRegistration:
    def test_auth_routes(self, client, test_wallet_address):
        """Test that both scheme routers respond with non-404 status codes."""
        for scheme in ("evm", "ed25519"):
            response = client.get(f"/api/auth/{scheme}/nonce/{test_wallet_address}")
            assert response.status_code != 404, f"Route /api/auth/{scheme}/nonce not found"

            response = client.post(f"/api/auth/{scheme}/verify", json={
                "wallet_address": test_wallet_address,
                "signature": "0xsignature123"
            })
            assert response.status_code != 404, f"Route /api/auth/{scheme}/verify not found"

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": True}


class TestEVMAuthenticationFlow:
    def test_complete_flow(self, client, evm_account, sign_evm):
        """Test nonce -> verify -> replay against the EVM endpoints."""
        response = client.get(f"/api/auth/evm/nonce/{evm_account.address.lower()}")
        assert response.status_code == 200
        body = response.json()
        assert body["wallet_address"] == evm_account.address
        nonce = body["nonce"]

        # Nonce is stable until it is consumed
        assert client.get(f"/api/auth/evm/nonce/{evm_account.address}").json()["nonce"] == nonce

        signature = sign_evm(evm_account, nonce)
        response = client.post("/api/auth/evm/verify", json={
            "wallet_address": evm_account.address,
            "signature": signature
        })
        assert response.status_code == 200
        assert response.json()["verified"] is True

        replay = client.post("/api/auth/evm/verify", json={
            "wallet_address": evm_account.address,
            "signature": signature
        })
        assert replay.status_code == 401

        rotated = client.get(f"/api/auth/evm/nonce/{evm_account.address}").json()["nonce"]
        assert rotated != nonce

    def test_invalid_address_is_400(self, client):
        response = client.get("/api/auth/evm/nonce/not-an-address")

        assert response.status_code == 400

    def test_unknown_and_bad_signature_look_identical(self, client, evm_account):
        """Test that unknown addresses and bad signatures give the same response."""
        unknown = client.post("/api/auth/evm/verify", json={
            "wallet_address": evm_account.address,
            "signature": "0xdeadbeef"
        })

        client.get(f"/api/auth/evm/nonce/{evm_account.address}")
        bad = client.post("/api/auth/evm/verify", json={
            "wallet_address": evm_account.address,
            "signature": "0xdeadbeef"
        })

        assert unknown.status_code == bad.status_code == 401
        assert unknown.json() == bad.json()


class TestEd25519AuthenticationFlow:
    def test_complete_flow(self, client, ed25519_key, ed25519_address, sign_ed25519):
        response = client.get(f"/api/auth/ed25519/nonce/{ed25519_address}")
        assert response.status_code == 200
        nonce = response.json()["nonce"]

        signature = sign_ed25519(ed25519_key, nonce)
        payload = {"wallet_address": ed25519_address, "signature": signature}

        assert client.post("/api/auth/ed25519/verify", json=payload).status_code == 200
        assert client.post("/api/auth/ed25519/verify", json=payload).status_code == 401

    def test_evm_address_rejected(self, client, evm_account):
        """Test that scheme selection is by endpoint, not inferred from the address."""
        response = client.get(f"/api/auth/ed25519/nonce/{evm_account.address}")

        assert response.status_code == 400

    def test_storage_failure_is_503(self, client, ed25519_address, monkeypatch):
        monkeypatch.setattr(
            NonceRepository,
            "get_auth_record",
            AsyncMock(side_effect=StorageError("get_auth_record", "timeout"))
        )

        response = client.post("/api/auth/ed25519/verify", json={
            "wallet_address": ed25519_address,
            "signature": "garbage"
        })

        assert response.status_code == 503
