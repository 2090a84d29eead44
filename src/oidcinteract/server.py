#!/usr/bin/env python3
import argparse
import logging
import os

from oidcinteract.application import interaction_app
from oidcinteract.configure import InteractionConfiguration
from oidcinteract.logging import configure_logging
from oidcinteract.util import create_context
from oidcinteract.util import load_yaml_config

logger = logging.getLogger(__name__)


def main(config_file, debug=False):
    _conf = load_yaml_config(config_file)
    dir_path = os.path.dirname(os.path.abspath(config_file))

    configure_logging(debug=debug, config=_conf.get('logging'))

    web_conf = _conf.get('webserver', {})
    domain = web_conf.get('domain', '127.0.0.1')
    port = int(web_conf.get('port', 3000))

    config = InteractionConfiguration(_conf.get('interaction', {}), base_path=dir_path,
                                      domain=domain, port=port)
    app = interaction_app(config, 'oidc_interaction')

    ssl_context = create_context(dir_path, web_conf)
    logger.info('application is listening on port {}'.format(port))
    app.run(host=domain, port=port, debug=web_conf.get('debug', False),
            ssl_context=ssl_context)


def run():
    parser = argparse.ArgumentParser()
    parser.add_argument('-d', dest='debug', action='store_true')
    parser.add_argument(dest="config")
    args = parser.parse_args()
    main(args.config, args.debug)


if __name__ == '__main__':
    run()
