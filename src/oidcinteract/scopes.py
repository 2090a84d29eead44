# default set, the account store can be given another mapping

SCOPE2CLAIMS = {
    "openid": ["sub"],
    "profile": [
        "name",
        "given_name",
        "family_name",
        "middle_name",
        "nickname",
        "profile",
        "picture",
        "website",
        "gender",
        "birthdate",
        "zoneinfo",
        "locale",
        "updated_at",
        "preferred_username",
    ],
    "email": ["email", "email_verified"],
    "address": ["address"],
    "phone": ["phone_number", "phone_number_verified"],
    "offline_access": [],
}


def split_scope(scope):
    if not scope:
        return []
    if isinstance(scope, str):
        return scope.split(" ")
    return list(scope)


def convert_scopes2claims(scopes, scope2claim_map=None):
    """
    Map scopes to the claims they release.

    :param scopes: A space separated string or a list of scope names
    :param scope2claim_map: Scope to claims mapping, defaults to SCOPE2CLAIMS
    :return: Set of claim names
    """
    scope2claim_map = scope2claim_map or SCOPE2CLAIMS

    res = set()
    for scope in split_scope(scopes):
        res.update(scope2claim_map.get(scope, []))
    return res
