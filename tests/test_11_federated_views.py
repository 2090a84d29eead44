import copy
import json
import os
from urllib.parse import parse_qs
from urllib.parse import urlparse

import pytest
from cryptojwt.jwt import JWT
from cryptojwt.key_jar import KeyJar
from cryptojwt.key_jar import build_keyjar

from oidcinteract.account import AccountStore
from oidcinteract.application import interaction_app
from oidcinteract.configure import InteractionConfiguration
from oidcinteract.exception import StateMismatch
from oidcinteract.exception import UnexpectedPrompt
from oidcinteract.federated import GOOGLE_DEFAULTS
from oidcinteract.federated import FederatedClient
from oidcinteract.federated import new_nonce
from oidcinteract.federated import new_state

from fake_provider import FakeProvider
from fake_provider import make_interaction

BASEDIR = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(BASEDIR, "users.json")) as fp:
    USERS = json.load(fp)

KEYDEFS = [{"type": "RSA", "key": "", "use": ["sig"]}]
GOOGLE_KEYJAR = build_keyjar(KEYDEFS)
GOOGLE_ISSUER = GOOGLE_DEFAULTS["issuer"]

ISSUER = "https://op.example.com"
CLIENT_ID = "1234.apps.googleusercontent.com"
REDIRECT_URI = "{}/interaction/callback/google".format(ISSUER)
HANDSHAKE_PATH = "/interaction/abc/federated"


def make_id_token(nonce, sub="1029384756"):
    _jwt = JWT(GOOGLE_KEYJAR, iss=GOOGLE_ISSUER, lifetime=3600, sign_alg="RS256")
    return _jwt.pack({"sub": sub, "aud": [CLIENT_ID], "nonce": nonce,
                      "email": "alice@gmail.com", "name": "Alice G"})


def set_cookies(resp):
    return resp.headers.getlist("Set-Cookie")


def set_handshake_cookies(client, state, nonce):
    client.set_cookie("google.state", state, path=HANDSHAKE_PATH)
    client.set_cookie("google.nonce", nonce, path=HANDSHAKE_PATH)


class TestFederatedViews(object):
    @pytest.fixture(autouse=True)
    def create_app(self):
        keyjar = KeyJar()
        keyjar.import_jwks(GOOGLE_KEYJAR.export_jwks(), GOOGLE_ISSUER)
        google = FederatedClient(CLIENT_ID, redirect_uri=REDIRECT_URI, keyjar=keyjar)

        self.account_store = AccountStore(db=copy.deepcopy(USERS))
        self.provider = FakeProvider(account_store=self.account_store)
        config = InteractionConfiguration(conf={"issuer": ISSUER})
        self.app = interaction_app(config, "test", provider=self.provider,
                                   account_store=self.account_store,
                                   federated={"google": google})
        self.app.testing = True
        self.client = self.app.test_client()
        self.provider.add(make_interaction(prompt="login"))

    def test_login_page_offers_google(self):
        _html = self.client.get("/interaction/abc").get_data(as_text=True)
        assert 'action="/interaction/abc/federated"' in _html
        assert 'value="google"' in _html

    def test_start(self):
        resp = self.client.post(HANDSHAKE_PATH, data={"provider": "google"})
        assert resp.status_code == 302

        p = urlparse(resp.headers["Location"])
        assert "{}://{}{}".format(p.scheme, p.netloc, p.path) == \
            GOOGLE_DEFAULTS["authorization_endpoint"]
        qs = parse_qs(p.query)
        assert qs["client_id"] == [CLIENT_ID]
        assert qs["redirect_uri"] == [REDIRECT_URI]
        assert qs["response_type"] == ["id_token"]
        assert qs["scope"] == ["openid email profile"]
        state = qs["state"][0]
        uid, _random = state.split("|")
        assert uid == "abc"
        assert len(_random) == 64
        assert len(qs["nonce"][0]) == 64

        cookies = set_cookies(resp)
        assert len(cookies) == 2
        _state = [c for c in cookies if c.startswith("google.state=")][0]
        _nonce = [c for c in cookies if c.startswith("google.nonce=")][0]
        for c in (_state, _nonce):
            assert "Path={}".format(HANDSHAKE_PATH) in c
            assert "SameSite=Strict" in c
            assert "HttpOnly" in c
        assert state in _state
        assert qs["nonce"][0] in _nonce

        # nothing resolved yet
        assert self.provider.finished == []

    def test_start_new_state_each_time(self):
        first = self.client.post(HANDSHAKE_PATH, data={"provider": "google"})
        second = self.client.post(HANDSHAKE_PATH, data={"provider": "google"})
        _first = parse_qs(urlparse(first.headers["Location"]).query)
        _second = parse_qs(urlparse(second.headers["Location"]).query)
        assert _first["state"] != _second["state"]
        assert _first["nonce"] != _second["nonce"]

    def test_unknown_provider(self):
        resp = self.client.post(HANDSHAKE_PATH, data={"provider": "facebook"})
        assert resp.status_code == 404
        assert set_cookies(resp) == []
        assert self.provider.finished == []

    def test_wrong_prompt(self):
        self.provider.add(make_interaction(uid="xyz", prompt="consent"))
        with pytest.raises(UnexpectedPrompt):
            self.client.post("/interaction/xyz/federated", data={"provider": "google"})

    def test_complete(self):
        state = new_state("abc")
        nonce = new_nonce()
        set_handshake_cookies(self.client, state, nonce)
        resp = self.client.post(
            HANDSHAKE_PATH,
            data={"provider": "google", "state": state, "id_token": make_id_token(nonce)},
        )
        assert resp.status_code == 302
        assert resp.headers["Location"] == "https://op.example.com/auth/abc"
        assert self.provider.finished == [
            {"uid": "abc",
             "result": {"select_account": {}, "login": {"account": "google.1029384756"}},
             "merge": False}
        ]

        account = self.account_store.find_account("google.1029384756")
        assert account.profile["email"] == "alice@gmail.com"
        assert "nonce" not in account.profile

        cookies = set_cookies(resp)
        for name in ("google.state", "google.nonce"):
            _cookie = [c for c in cookies if c.startswith("{}=".format(name))][0]
            assert "Max-Age=0" in _cookie
            assert "Path={}".format(HANDSHAKE_PATH) in _cookie
            assert self.client.get_cookie(name, path=HANDSHAKE_PATH) is None

    def test_complete_state_mismatch(self):
        nonce = new_nonce()
        set_handshake_cookies(self.client, new_state("abc"), nonce)
        with pytest.raises(StateMismatch, match="state mismatch"):
            self.client.post(
                HANDSHAKE_PATH,
                data={"provider": "google", "state": new_state("abc"),
                      "id_token": make_id_token(nonce)},
            )
        assert self.provider.finished == []

    def test_complete_failure_clears_cookies(self):
        self.app.config["PROPAGATE_EXCEPTIONS"] = False
        nonce = new_nonce()
        set_handshake_cookies(self.client, new_state("abc"), nonce)
        resp = self.client.post(
            HANDSHAKE_PATH,
            data={"provider": "google", "state": new_state("abc"),
                  "id_token": make_id_token(nonce)},
        )
        assert resp.status_code == 500
        assert self.provider.finished == []

        cookies = set_cookies(resp)
        assert [c for c in cookies if c.startswith("google.state=") and "Max-Age=0" in c]
        assert [c for c in cookies if c.startswith("google.nonce=") and "Max-Age=0" in c]

    def test_complete_without_cookies(self):
        nonce = new_nonce()
        with pytest.raises(StateMismatch, match="No state"):
            self.client.post(
                HANDSHAKE_PATH,
                data={"provider": "google", "state": new_state("abc"),
                      "id_token": make_id_token(nonce)},
            )

    def test_callback_page(self):
        resp = self.client.get("/interaction/callback/google")
        assert resp.status_code == 200
        _html = resp.get_data(as_text=True)
        assert 'form.action = "/interaction/"' in _html
        assert 'add("provider", "google")' in _html
        assert resp.headers["Cache-Control"] == "no-cache, no-store"

    def test_callback_page_unknown_provider(self):
        resp = self.client.get("/interaction/callback/facebook")
        assert resp.status_code == 404
