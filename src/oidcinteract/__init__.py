import secrets

__version__ = "1.0.0"

INTERACTION_PATH = "/interaction"

FEDERATED_SCOPE = "openid email profile"


def random_hex(size=32):
    """
    Returns a string of random hex characters

    :param size: Number of random bytes, the string is twice as long
    :return: string
    """
    return secrets.token_hex(size)
