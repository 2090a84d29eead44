"""Configuration management for the interaction views"""
import copy
import logging
import os
from typing import Dict
from typing import List
from typing import Optional

from oidcmsg.configure import Base

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

DEFAULT_CONFIG = {
    "account_store": {
        "class": "oidcinteract.account.AccountStore",
        "kwargs": {},
    },
    "debug": True,
    "federated": {
        "google": {
            "class": "oidcinteract.federated.FederatedClient",
            "kwargs": {
                "client_id": "",
                "redirect_uri": "{issuer}/interaction/callback/google",
            },
        }
    },
    "httpc_params": {"verify": True, "timeout": 4},
    "issuer": "http://{domain}:{port}",
    "secure": False,
    "template_dir": TEMPLATE_DIR,
}


class InteractionConfiguration(Base):
    "Interaction views configuration"
    default_config = DEFAULT_CONFIG
    uris = ["issuer"]
    parameter = {
        "account_store": None,
        "debug": None,
        "federated": None,
        "httpc_params": {},
        "issuer": "",
        "provider": None,
        "secure": None,
        "template_dir": None,
    }

    def __init__(
            self,
            conf: Dict,
            base_path: Optional[str] = "",
            domain: Optional[str] = "127.0.0.1",
            port: Optional[int] = 3000,
            file_attributes: Optional[List[str]] = None,
            dir_attributes: Optional[List[str]] = None,
    ):

        conf = copy.deepcopy(conf)
        Base.__init__(self, conf, base_path, file_attributes, domain=domain, port=port,
                      dir_attributes=dir_attributes)

        for key in conf.keys():
            if key not in self.parameter:
                logger.warning(f"{key} does not seem to be a valid configuration parameter")

        for key in self.parameter.keys():
            _val = conf.get(key)
            if _val is None:
                if key in self.default_config:
                    _val = copy.deepcopy(self.default_config[key])
                    if isinstance(_val, dict):
                        self.format(
                            _val,
                            base_path=base_path,
                            file_attributes=file_attributes,
                            domain=domain,
                            port=port,
                            dir_attributes=dir_attributes
                        )
                    logger.debug(f"{key} not configured, using default configuration values")
                else:
                    continue

            if key == "issuer":
                _val = _val.format(domain=domain, port=port)
            elif key == "template_dir":
                _val = os.path.abspath(_val)

            setattr(self, key, _val)

        self._complete_federated()

    def _complete_federated(self):
        _issuer = self.issuer.rstrip("/")
        for name, spec in self.federated.items():
            _kwargs = spec.setdefault("kwargs", {})
            _kwargs.setdefault("httpc_params", self.httpc_params)
            _redirect_uri = _kwargs.get("redirect_uri")
            if not _redirect_uri:
                _kwargs["redirect_uri"] = f"{_issuer}/interaction/callback/{name}"
            else:
                _kwargs["redirect_uri"] = _redirect_uri.replace("{issuer}", _issuer)
