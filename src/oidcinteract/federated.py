"""
Log in through an external OpenID Provider.

The handshake uses the implicit 'id_token' response type. The provider
returns the ID Token in the URL fragment of the callback page, which posts
it back to the federated route of the interaction the 'state' belongs to.
"""
import logging
from typing import Optional

from cryptojwt.key_jar import KeyJar
from oidcmsg.oidc import AuthorizationRequest
from oidcmsg.oidc import IdToken

from oidcinteract import FEDERATED_SCOPE
from oidcinteract import INTERACTION_PATH
from oidcinteract import random_hex
from oidcinteract.exception import CallbackError
from oidcinteract.exception import FederatedLoginError
from oidcinteract.exception import MissingIdToken
from oidcinteract.exception import NonceMismatch
from oidcinteract.exception import StateMismatch

logger = logging.getLogger(__name__)

GOOGLE = "google"

GOOGLE_DEFAULTS = {
    "issuer": "https://accounts.google.com",
    "authorization_endpoint": "https://accounts.google.com/o/oauth2/v2/auth",
    "jwks_uri": "https://www.googleapis.com/oauth2/v3/certs",
}

# Parameters an authorization response may carry
CALLBACK_PROPERTIES = [
    "access_token",
    "code",
    "error",
    "error_description",
    "error_uri",
    "expires_in",
    "id_token",
    "state",
    "token_type",
    "session_state",
]


def handshake_path(uid):
    """The cookies of a handshake are only sent back to this path."""
    return "{}/{}/federated".format(INTERACTION_PATH, uid)


def callback_path(provider):
    return "{}/callback/{}".format(INTERACTION_PATH, provider)


def state_cookie(provider):
    return "{}.state".format(provider)


def nonce_cookie(provider):
    return "{}.nonce".format(provider)


def new_state(uid):
    return "{}|{}".format(uid, random_hex())


def new_nonce():
    return random_hex()


def uid_from_state(state):
    return state.split("|", 1)[0]


class TokenSet(object):
    def __init__(self, params, id_token):
        self.params = params
        self.id_token = id_token

    def claims(self):
        return self.id_token.to_dict()


class FederatedClient(object):
    """
    Relying party side of the handshake with one external provider.

    :param client_id: Client ID registered with the provider
    :param issuer: The provider's issuer identifier
    :param authorization_endpoint: Where the end-user is sent
    :param jwks_uri: Where the provider publishes its signing keys
    :param redirect_uri: The callback page registered with the provider
    :param response_type: Only 'id_token' is supported
    :param keyjar: A KeyJar holding the provider's keys under `issuer`.
        Created from `jwks_uri` if not given.
    :param httpc_params: Parameters used when fetching the JWKS
    :param skew: Allowed clock skew in seconds
    """

    def __init__(
        self,
        client_id,
        issuer=GOOGLE_DEFAULTS["issuer"],
        authorization_endpoint=GOOGLE_DEFAULTS["authorization_endpoint"],
        jwks_uri=GOOGLE_DEFAULTS["jwks_uri"],
        redirect_uri="",
        response_type="id_token",
        keyjar: Optional[KeyJar] = None,
        httpc_params: Optional[dict] = None,
        skew=60,
        **kwargs
    ):
        if "code" in response_type.split(" "):
            raise ValueError("Only implicit 'id_token' responses are supported")

        self.client_id = client_id
        self.issuer = issuer
        self.authorization_endpoint = authorization_endpoint
        self.jwks_uri = jwks_uri
        self.redirect_uri = redirect_uri
        self.response_type = response_type
        self.skew = skew

        if keyjar is None:
            keyjar = KeyJar()
            keyjar.httpc_params = httpc_params or {}
            keyjar.add_url(issuer, jwks_uri)
        self.keyjar = keyjar

    def callback_params(self, request) -> dict:
        """
        Picks the authorization response parameters out of a request.

        :param request: A flask/werkzeug request
        :return: Dictionary, empty if the request is not a callback
        """
        if request.method == "POST":
            _source = request.form
        else:
            _source = request.args

        return {k: _source[k] for k in CALLBACK_PROPERTIES if _source.get(k)}

    def authorization_url(self, state, nonce, scope=FEDERATED_SCOPE):
        areq = AuthorizationRequest(
            client_id=self.client_id,
            redirect_uri=self.redirect_uri,
            response_type=self.response_type.split(" "),
            scope=scope.split(" "),
            state=state,
            nonce=nonce,
        )
        return areq.request(self.authorization_endpoint)

    def _verify_id_token(self, jwt):
        try:
            _idt = IdToken().from_jwt(jwt, keyjar=self.keyjar)
            _idt.verify(iss=self.issuer, client_id=self.client_id, skew=self.skew)
        except Exception as err:
            logger.warning("ID Token verification failed: {}".format(err))
            raise FederatedLoginError("ID Token verification failed: {}".format(err)) from err
        return _idt

    def callback(self, redirect_uri, params, state=None, nonce=None, response_type=None):
        """
        Check an authorization response and verify the ID Token in it.

        :param redirect_uri: The redirect URI used, None for the configured one
        :param params: The callback parameters, see callback_params
        :param state: The state value set when the handshake started
        :param nonce: The nonce value set when the handshake started
        :param response_type: The expected response type
        :return: A TokenSet
        """
        if not state:
            raise StateMismatch("No state to check the response against")
        if params.get("state") != state:
            raise StateMismatch(
                "state mismatch, expected {}, got: {}".format(state, params.get("state"))
            )

        if "error" in params:
            raise CallbackError(params["error"], params.get("error_description", ""))

        response_type = response_type or self.response_type
        if "id_token" in response_type.split(" ") and "id_token" not in params:
            raise MissingIdToken("id_token not present in the response")

        logger.debug("Callback to {} from {}".format(redirect_uri or self.redirect_uri,
                                                     self.issuer))
        _idt = self._verify_id_token(params["id_token"])

        if not nonce or _idt.get("nonce") != nonce:
            raise NonceMismatch(
                "nonce mismatch, expected {}, got: {}".format(nonce, _idt.get("nonce"))
            )

        return TokenSet(params, _idt)
