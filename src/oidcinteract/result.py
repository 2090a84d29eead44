"""Resolutions of an interaction as handed to the OIDC engine."""
from oidcmsg.message import OPTIONAL_LIST_OF_STRINGS
from oidcmsg.message import SINGLE_OPTIONAL_INT
from oidcmsg.message import SINGLE_OPTIONAL_STRING
from oidcmsg.message import SINGLE_REQUIRED_STRING
from oidcmsg.message import Message
from oidcmsg.oauth2 import ResponseMessage

ABORT_DESCRIPTION = "End-User aborted interaction"


class SelectAccountResult(object):
    """The end-user confirmed the current account. Carries nothing."""

    def to_dict(self):
        return {}


class LoginResult(Message):
    c_param = {
        "account": SINGLE_REQUIRED_STRING,
        "acr": SINGLE_OPTIONAL_STRING,
        "amr": OPTIONAL_LIST_OF_STRINGS,
        "ts": SINGLE_OPTIONAL_INT,
    }


class ConsentResult(object):
    """
    :param rejected_scopes: Scopes not to grant. Everything else offered is granted.
    :param rejected_claims: Claims not to grant.
    :param replace: If False, earlier rejections remain. If True they are
        replaced by these.
    """

    def __init__(self, rejected_scopes=None, rejected_claims=None, replace=False):
        self.rejected_scopes = list(rejected_scopes or [])
        self.rejected_claims = list(rejected_claims or [])
        self.replace = replace

    def to_dict(self):
        return {
            "rejected_scopes": list(self.rejected_scopes),
            "rejected_claims": list(self.rejected_claims),
            "replace": self.replace,
        }


class InteractionResult(object):
    """
    The outcome of one interaction step. Any combination of select_account,
    login and consent, or an error on its own. No parts at all means
    'ask again'.
    """

    def __init__(self, select_account=None, login=None, consent=None, error=None):
        if error is not None and any(
            p is not None for p in (select_account, login, consent)
        ):
            raise ValueError("An error outcome can not be combined with other outcomes")
        self.select_account = select_account
        self.login = login
        self.consent = consent
        self.error = error

    @classmethod
    def logged_in(cls, account_id, **kwargs):
        # select_account is included so the engine does not prompt for it
        # right after a new session was established
        return cls(select_account=SelectAccountResult(),
                   login=LoginResult(account=account_id, **kwargs))

    @classmethod
    def aborted(cls, description=ABORT_DESCRIPTION):
        return cls(error=ResponseMessage(error="access_denied",
                                         error_description=description))

    def is_empty(self):
        return (self.select_account is None and self.login is None
                and self.consent is None and self.error is None)

    def to_dict(self):
        if self.error is not None:
            return self.error.to_dict()

        res = {}
        for attr in ["select_account", "login", "consent"]:
            _val = getattr(self, attr)
            if _val is not None:
                res[attr] = _val.to_dict()
        return res
