import copy

from flask import redirect

from oidcinteract.engine import Interaction
from oidcinteract.engine import Prompt
from oidcinteract.engine import Provider
from oidcinteract.exception import EngineError
from oidcinteract.exception import EngineErrorKind

CLIENTS = {
    "client_1": {
        "client_id": "client_1",
        "client_name": "Example RP",
        "tos_uri": "https://rp.example.com/tos",
    }
}

AUTHZ_PARAMS = {
    "client_id": "client_1",
    "redirect_uri": "https://rp.example.com/cb",
    "response_type": "code",
    "scope": "openid email",
    "state": "rp_state",
    "nonce": "",
}


def make_interaction(uid="abc", prompt="login", session=None, details=None, **params):
    _params = copy.deepcopy(AUTHZ_PARAMS)
    _params.update(params)
    return Interaction(uid, Prompt(prompt, reasons=["no_session"], details=details or {}),
                       params=_params, session=session)


class FakeProvider(Provider):
    """Stands in for the OIDC engine, remembers what it was told."""

    def __init__(self, account_store=None, clients=None):
        self.account_store = account_store
        self.clients = clients if clients is not None else CLIENTS
        self.interactions = {}
        self.events = []
        self.error = None

    def add(self, interaction):
        self.interactions[interaction.uid] = interaction
        return interaction

    @property
    def finished(self):
        return [e[1] for e in self.events if e[0] == "finished"]

    @property
    def saved(self):
        return [e[1] for e in self.events if e[0] == "saved"]

    def interaction_details(self, request):
        if self.error is not None:
            raise self.error

        uid = request.view_args["uid"]
        try:
            return self.interactions[uid]
        except KeyError:
            raise EngineError(EngineErrorKind.SESSION_NOT_FOUND, "invalid_request",
                              "interaction session not found", 400)

    def interaction_finished(self, request, result, merge_with_last_submission=True):
        uid = request.view_args["uid"]
        self.events.append(
            ("finished", {"uid": uid, "result": result, "merge": merge_with_last_submission}))
        return redirect("https://op.example.com/auth/{}".format(uid))

    def save_interaction(self, interaction):
        self.events.append(("saved", {"uid": interaction.uid,
                                      "params": copy.deepcopy(interaction.params)}))

    def find_client(self, client_id):
        return self.clients.get(client_id)

    def find_account(self, account_id):
        return self.account_store.find_account(account_id)
