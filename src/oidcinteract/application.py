import logging

from flask import jsonify
from flask import redirect
from flask import request
from flask.app import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from oidcinteract.util import instantiate_from_spec

logger = logging.getLogger(__name__)


def init_federated_clients(config):
    clients = {}
    for name, spec in config.get('federated', {}).items():
        if not spec.get('kwargs', {}).get('client_id'):
            logger.warning('No client_id for federated provider {}, disabled'.format(name))
            continue
        clients[name] = instantiate_from_spec(spec)
    return clients


def https_only():
    if request.is_secure:
        return None

    if request.method in ('GET', 'HEAD'):
        return redirect(request.url.replace('http://', 'https://', 1))

    resp = jsonify(error='invalid_request',
                   error_description='do yourself a favor and only use https')
    resp.status_code = 400
    return resp


def interaction_app(config, name=None, provider=None, account_store=None, federated=None,
                    **kwargs):
    """
    Create the Flask application serving the interaction views.

    :param config: An InteractionConfiguration
    :param name: Application name
    :param provider: The OIDC engine adapter, created from config['provider'] if not given
    :param account_store: Created from config['account_store'] if not given
    :param federated: Dictionary of federated provider name to client, created
        from config['federated'] if not given
    :return: A Flask app
    """
    name = name or __name__
    app = Flask(name, template_folder=config.get('template_dir'), **kwargs)
    app.srv_config = config

    from oidcinteract.views import interaction_views

    app.register_blueprint(interaction_views)

    if provider is None:
        provider = instantiate_from_spec(config.get('provider'))
    app.provider = provider

    if account_store is None:
        account_store = instantiate_from_spec(config.get('account_store'))
    app.account_store = account_store

    if federated is None:
        federated = init_federated_clients(config)
    app.federated = federated

    if config.get('secure', False):
        # behind a TLS terminating proxy
        app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)
        app.before_request(https_only)

    return app
