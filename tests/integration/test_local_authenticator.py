"""
Integration tests for the local (username/password) authenticator.
"""

from http import HTTPStatus
from urllib.parse import parse_qs, urlsplit

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from character_authentication.authenticators.local import (
    Credential,
    hash_password,
    verify_password,
)
from character_authentication.main import create_app
from character_authentication.models import Account, Identity
from tests.helpers import session_from

LOGIN_URL = "/api/v1/authentication/local/"
REGISTER_URL = "/api/v1/authentication/local/register"


def reason(response) -> str:
    return parse_qs(urlsplit(response.headers["location"]).query)["reason"][0]


@pytest_asyncio.fixture
async def registered(client: AsyncClient):
    """Register alice through the API"""
    response = await client.post(REGISTER_URL, data={"username": "alice", "password": "correct horse"})
    assert response.status_code == 303
    client.cookies.clear()
    return session_from(response)["user"]


class TestPasswordHashing:
    """Test bcrypt helpers"""

    def test_hash_and_verify(self):
        password_hash = hash_password("s3cret-pass")

        assert password_hash != "s3cret-pass"
        assert verify_password("s3cret-pass", password_hash)
        assert not verify_password("wrong", password_hash)

    def test_malformed_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestRegister:
    """Test POST /api/v1/authentication/local/register"""

    @pytest.mark.asyncio
    async def test_register_logs_in(self, client: AsyncClient, database):
        response = await client.post(REGISTER_URL, data={"username": "Alice", "password": "correct horse"})

        assert response.status_code == 303
        assert response.headers["location"] == "/welcome"

        async with database.session() as db:
            credential = (await db.execute(select(Credential))).scalar_one()

        assert credential.username == "alice"
        assert verify_password("correct horse", credential.password_hash)

        user = session_from(response)["user"]
        assert user["authenticator"]["name"] == "local"
        assert user["authenticator"]["account"]["id"] == str(credential.id)

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, client: AsyncClient, registered):
        response = await client.post(REGISTER_URL, data={"username": "alice", "password": "another pass"})

        assert response.status_code == 303
        assert reason(response) == "Conflict"

    @pytest.mark.asyncio
    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post(REGISTER_URL, json={"username": "bob", "password": "short"})

        assert response.status_code == 303
        assert reason(response) == HTTPStatus.UNPROCESSABLE_ENTITY.phrase
        assert session_from(response) is None

    @pytest.mark.asyncio
    async def test_register_onboards_once(self, client: AsyncClient, database, events):
        """Credential and identity are created together, identify reuses the link"""
        response = await client.post(REGISTER_URL, data={"username": "alice", "password": "correct horse"})

        async with database.session() as db:
            identity_id = (await db.execute(select(Identity.id))).scalar_one()
            link = (await db.execute(select(Account))).scalar_one()
            credential = (await db.execute(select(Credential))).scalar_one()

        assert session_from(response)["user"]["id"] == str(identity_id)
        assert link.authenticator_name == "local"
        assert link.authenticator_account_id == str(credential.id)
        assert [event for event, _ in events] == ["authentication:onboard", "authentication:authenticate"]

    @pytest.mark.asyncio
    async def test_register_unavailable_without_onboarding(self, test_settings, character, database):
        """Onboarding disabled: no /register route, and retrying never leaves a credential behind"""
        test_settings.onboard_known_accounts = False
        app = create_app(test_settings, character)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            first = await ac.post(REGISTER_URL, data={"username": "alice", "password": "correct horse"})
            retry = await ac.post(REGISTER_URL, data={"username": "alice", "password": "correct horse"})

        assert first.status_code == 404
        assert retry.status_code == 404
        async with database.session() as db:
            assert (await db.execute(select(func.count()).select_from(Credential))).scalar_one() == 0

    @pytest.mark.asyncio
    async def test_account_usable_after_failed_login_step(self, client: AsyncClient, character, database):
        """A failure after the credential is stored still leaves a working account"""

        def reject(payload):
            raise RuntimeError("listener failed")

        character.on("authentication:authenticate", reject)
        response = await client.post(REGISTER_URL, data={"username": "alice", "password": "correct horse"})

        assert reason(response) == "Internal Server Error"
        assert session_from(response) is None
        async with database.session() as db:
            identity_id = (await db.execute(select(Identity.id))).scalar_one()

        character.off("authentication:authenticate", reject)
        retry = await client.post(REGISTER_URL, data={"username": "alice", "password": "correct horse"})
        login = await client.post(LOGIN_URL, data={"username": "alice", "password": "correct horse"})

        assert reason(retry) == "Conflict"
        assert login.status_code == 303
        assert login.headers["location"] == "/welcome"
        assert session_from(login)["user"]["id"] == str(identity_id)


class TestLogin:
    """Test POST /api/v1/authentication/local/"""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, registered):
        response = await client.post(LOGIN_URL, data={"username": "alice", "password": "correct horse"})

        assert response.status_code == 303
        assert response.headers["location"] == "/welcome"
        assert session_from(response)["user"]["id"] == registered["id"]

    @pytest.mark.asyncio
    async def test_login_json_body(self, client: AsyncClient, registered):
        response = await client.post(LOGIN_URL, json={"username": "alice", "password": "correct horse"})

        assert response.headers["location"] == "/welcome"
        assert session_from(response)["user"]["id"] == registered["id"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, registered):
        response = await client.post(LOGIN_URL, data={"username": "alice", "password": "wrong password"})

        assert response.status_code == 303
        assert reason(response) == "Unauthorized"
        assert session_from(response) is None

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client: AsyncClient):
        response = await client.post(LOGIN_URL, data={"username": "nobody", "password": "whatever1"})

        assert reason(response) == "Unauthorized"

    @pytest.mark.asyncio
    async def test_login_missing_fields(self, client: AsyncClient):
        response = await client.post(LOGIN_URL, data={"username": "alice"})

        assert reason(response) == "Bad Request"

    @pytest.mark.asyncio
    async def test_login_malformed_json(self, client: AsyncClient):
        response = await client.post(
            LOGIN_URL,
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert reason(response) == "Bad Request"
