import importlib
import json
import logging
import os
import ssl

import yaml

from oidcinteract.exception import ConfigurationError

logger = logging.getLogger(__name__)


def modsplit(s):
    """Split importable"""
    if ":" in s:
        c = s.split(":")
        if len(c) != 2:
            raise ValueError(f"Syntax error: {s}")
        return c[0], c[1]
    else:
        c = s.split(".")
        if len(c) < 2:
            raise ValueError(f"Syntax error: {s}")
        return ".".join(c[:-1]), c[-1]


def importer(name):
    """Import by name"""
    c1, c2 = modsplit(name)
    module = importlib.import_module(c1)
    return getattr(module, c2)


def instantiate(cls, **kwargs):
    if isinstance(cls, str):
        return importer(cls)(**kwargs)
    else:
        return cls(**kwargs)


def instantiate_from_spec(spec, **extra):
    """
    Instantiate from a configuration item of the form
    ``{"class": ..., "kwargs": {...}}``.
    """
    try:
        _cls = spec["class"]
    except (KeyError, TypeError):
        raise ConfigurationError("Missing 'class' in {}".format(spec))

    kwargs = dict(spec.get("kwargs", {}))
    kwargs.update(extra)
    logger.debug("Instantiating {}".format(_cls))
    return instantiate(_cls, **kwargs)


def load_yaml_config(file_name):
    """Loads a configuration file. YAML is a superset of JSON so both work."""
    with open(file_name) as fp:
        if file_name.endswith(".json"):
            return json.load(fp)
        return yaml.safe_load(fp)


def create_context(dir_path, config, **kwargs):
    """
    Creates a server side TLS context from the 'server_cert' and 'server_key'
    items of the web server configuration.

    :return: A ssl.SSLContext or None if no certificate is configured
    """
    _cert_file = config.get("server_cert")
    _key_file = config.get("server_key")
    if not _cert_file or not _key_file:
        return None

    if not os.path.isabs(_cert_file):
        _cert_file = os.path.join(dir_path, _cert_file)
    if not os.path.isabs(_key_file):
        _key_file = os.path.join(dir_path, _key_file)

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER, **kwargs)
    try:
        context.load_cert_chain(_cert_file, _key_file)
    except (OSError, ssl.SSLError) as err:
        raise ConfigurationError(
            f"Missing or unusable cert/key ({_cert_file}, {_key_file}): {err}"
        )

    return context
