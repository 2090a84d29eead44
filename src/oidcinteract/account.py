import json
import logging

from oidcinteract.scopes import convert_scopes2claims

logger = logging.getLogger(__name__)

# ID Token claims that say nothing about the end-user
TOKEN_CLAIMS = ["sub", "iss", "aud", "exp", "iat", "nbf", "nonce", "azp", "at_hash", "c_hash",
                "auth_time", "jti"]


class Account(object):
    """An end-user account as seen by the interaction views."""

    def __init__(self, account_id, profile=None, scope2claim_map=None):
        self.account_id = account_id
        self.profile = profile or {}
        self.scope2claim_map = scope2claim_map

    def claims(self, use, scope, claims=None, rejected=None):
        """
        Return the claims that may be released.

        :param use: 'id_token', 'userinfo' or 'prompt'. Not used for filtering.
        :param scope: The granted scopes, space separated or as a list
        :param claims: Explicitly requested claims, a dictionary keyed by claim name
        :param rejected: Claims the end-user has rejected
        :return: Dictionary of claim values, always including 'sub'
        """
        allowed = convert_scopes2claims(scope, self.scope2claim_map)
        if claims:
            allowed.update(claims.keys())
        if rejected:
            allowed.difference_update(rejected)

        res = {k: v for k, v in self.profile.items() if k in allowed}
        res["sub"] = self.account_id
        return res

    def __repr__(self):
        return "Account({!r})".format(self.account_id)


class AccountStore(object):
    """
    A simple account store backed by a dictionary or a JSON file.

    The database maps account identifiers to claim profiles. A profile may
    carry a 'password' which is then required by find_by_login.
    """

    login_attributes = ["email", "preferred_username"]

    def __init__(self, db=None, db_file="", auto_provision=True, scope2claim_map=None):
        if db is not None:
            self.db = db
        elif db_file:
            with open(db_file) as fp:
                self.db = json.load(fp)
        else:
            self.db = {}
        self.auto_provision = auto_provision
        self.scope2claim_map = scope2claim_map

    def _account(self, account_id):
        profile = {k: v for k, v in self.db[account_id].items() if k != "password"}
        return Account(account_id, profile, scope2claim_map=self.scope2claim_map)

    def _lookup(self, login):
        if login in self.db:
            return login
        for account_id, profile in self.db.items():
            for attr in self.login_attributes:
                if profile.get(attr) == login:
                    return account_id
        return None

    def find_account(self, account_id):
        try:
            return self._account(account_id)
        except KeyError:
            return None

    def find_by_login(self, login, password=None):
        if not login:
            return None

        account_id = self._lookup(login)
        if account_id is None:
            logger.debug("No account matching login {}".format(login))
            return None

        _pwd = self.db[account_id].get("password")
        if _pwd is not None and _pwd != password:
            logger.debug("Wrong password for {}".format(account_id))
            return None

        return self._account(account_id)

    def find_by_federated(self, provider, claims):
        try:
            account_id = "{}.{}".format(provider, claims["sub"])
        except KeyError:
            logger.warning("No 'sub' in claims from {}".format(provider))
            return None

        if account_id not in self.db:
            if not self.auto_provision:
                return None
            logger.info("Provisioning account {}".format(account_id))
            self.db[account_id] = {}

        _profile = self.db[account_id]
        _profile.update({k: v for k, v in claims.items() if k not in TOKEN_CLAIMS})
        return self._account(account_id)
