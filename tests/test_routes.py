import unittest

from account_tokens.app import create_app
from account_tokens.config import TestingConfig
from account_tokens.core.errors import StorageError
from account_tokens.services.user_store import InMemoryUserStore


class FailingStore(InMemoryUserStore):
    def update(self, username, fields):
        raise StorageError("disk full")


PASSWORD_AUTH = {"X-Auth-Method": "username/password", "X-Auth-Identity": "alice"}


def token_auth(name):
    return {"X-Auth-Method": "token", "X-Auth-Identity": name}


class TestTokenRoutes(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryUserStore()
        self.store.create("alice")
        self.app = create_app(TestingConfig, user_store=self.store)
        self.client = self.app.test_client()

    def test_list_empty(self):
        response = self.client.get("/users/alice/tokens", headers=PASSWORD_AUTH)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"apiTokens": {}})

    def test_post_generates_named_token(self):
        response = self.client.post("/users/alice/tokens", headers=PASSWORD_AUTH)
        self.assertEqual(response.status_code, 201)
        body = response.get_json()
        self.assertEqual(body["operation"], "insert")
        self.assertTrue(body["name"].startswith("gen_"))
        self.assertEqual(self.store.get("alice").tokens, {body["name"]: body["value"]})

    def test_put_inserts_then_rotates(self):
        first = self.client.put("/users/alice/tokens/ci", headers=PASSWORD_AUTH).get_json()
        second = self.client.put("/users/alice/tokens/ci", headers=PASSWORD_AUTH).get_json()
        self.assertEqual(first["operation"], "insert")
        self.assertEqual(second["operation"], "update")
        self.assertEqual(self.store.get("alice").tokens, {"ci": second["value"]})

    def test_token_auth_list_is_filtered(self):
        ci = self.client.put("/users/alice/tokens/ci", headers=PASSWORD_AUTH).get_json()
        self.client.put("/users/alice/tokens/laptop", headers=PASSWORD_AUTH)

        response = self.client.get("/users/alice/tokens", headers=token_auth("ci"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"apiTokens": {"ci": ci["value"]}})

    def test_delete(self):
        self.client.put("/users/alice/tokens/ci", headers=PASSWORD_AUTH)
        response = self.client.delete("/users/alice/tokens/ci", headers=PASSWORD_AUTH)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json(), {"ok": True, "id": "ci"})
        self.assertEqual(self.store.get("alice").tokens, {})

    def test_delete_missing_token(self):
        response = self.client.delete("/users/alice/tokens/nope", headers=PASSWORD_AUTH)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["error"], "TokenNotFound")

    def test_unknown_account(self):
        response = self.client.get("/users/nobody/tokens", headers=PASSWORD_AUTH)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["error"], "NotFound")

    def test_put_and_delete_unknown_account(self):
        for response in (
            self.client.put("/users/nobody/tokens/ci", headers=PASSWORD_AUTH),
            self.client.delete("/users/nobody/tokens/ci", headers=PASSWORD_AUTH),
            self.client.post("/users/nobody/tokens", headers=PASSWORD_AUTH),
        ):
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.get_json()["error"], "NotFound")

    def test_malformed_stored_tokens_are_a_server_error(self):
        self.store.create("bob", tokens={"ci": 123})
        response = self.client.get("/users/bob/tokens", headers=PASSWORD_AUTH)
        self.assertEqual(response.status_code, 500)
        body = response.get_json()
        self.assertEqual(body["error"], "InternalError")
        self.assertNotIn("validation error", body["detail"])

    def test_missing_auth_context(self):
        response = self.client.get("/users/alice/tokens")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "AuthenticationRequired")

    def test_bad_auth_method(self):
        response = self.client.get("/users/alice/tokens", headers={"X-Auth-Method": "oauth"})
        self.assertEqual(response.status_code, 400)

    def test_custom_auth_resolver(self):
        from account_tokens.models.auth_context import AuthContext

        app = create_app(
            TestingConfig,
            user_store=self.store,
            auth_resolver=lambda req: AuthContext.token("ci"),
        )
        client = app.test_client()
        self.client.put("/users/alice/tokens/ci", headers=PASSWORD_AUTH)
        self.client.put("/users/alice/tokens/laptop", headers=PASSWORD_AUTH)

        body = client.get("/users/alice/tokens").get_json()
        self.assertEqual(list(body["apiTokens"]), ["ci"])


class TestStorageFailureRoutes(unittest.TestCase):

    def setUp(self):
        self.store = FailingStore()
        self.store.create("alice", tokens={"ci": "abc"})
        self.client = create_app(TestingConfig, user_store=self.store).test_client()

    def assertStorageError(self, response):
        self.assertEqual(response.status_code, 500)
        body = response.get_json()
        self.assertEqual(body["error"], "StorageError")
        self.assertEqual(body["detail"], "disk full")

    def test_post(self):
        self.assertStorageError(self.client.post("/users/alice/tokens", headers=PASSWORD_AUTH))

    def test_put(self):
        self.assertStorageError(self.client.put("/users/alice/tokens/ci", headers=PASSWORD_AUTH))

    def test_delete(self):
        self.assertStorageError(
            self.client.delete("/users/alice/tokens/ci", headers=PASSWORD_AUTH)
        )

    def test_tokens_unchanged(self):
        self.client.put("/users/alice/tokens/ci", headers=PASSWORD_AUTH)
        self.client.delete("/users/alice/tokens/ci", headers=PASSWORD_AUTH)
        self.assertEqual(self.store.get("alice").tokens, {"ci": "abc"})


class TestCreateApp(unittest.TestCase):

    def test_default_store_is_sqlite(self):
        app = create_app(TestingConfig)
        store = app.extensions["account_tokens.user_store"]
        store.create("alice")
        client = app.test_client()

        response = client.post("/users/alice/tokens", headers=PASSWORD_AUTH)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(store.get("alice").tokens), 1)

    def test_serialized_writes_flag(self):
        class SerializedConfig(TestingConfig):
            SERIALIZE_ACCOUNT_WRITES = True

        app = create_app(SerializedConfig, user_store=InMemoryUserStore())
        manager = app.extensions["account_tokens.gateway"].manager
        self.assertIsNotNone(manager.account_locks)


if __name__ == '__main__':
    unittest.main()
