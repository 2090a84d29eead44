import logging

from flask import Blueprint
from flask import abort
from flask import current_app
from flask import g
from flask import redirect
from flask import render_template
from flask import request
from flask.helpers import make_response

from oidcinteract import FEDERATED_SCOPE
from oidcinteract import INTERACTION_PATH
from oidcinteract.debug import debug
from oidcinteract.error_page import render_error
from oidcinteract.exception import RENDERED_KINDS
from oidcinteract.exception import EngineError
from oidcinteract.exception import UnexpectedPrompt
from oidcinteract.federated import GOOGLE
from oidcinteract.federated import handshake_path
from oidcinteract.federated import new_nonce
from oidcinteract.federated import new_state
from oidcinteract.federated import nonce_cookie
from oidcinteract.federated import state_cookie
from oidcinteract.result import ConsentResult
from oidcinteract.result import InteractionResult
from oidcinteract.result import SelectAccountResult

logger = logging.getLogger(__name__)

interaction_views = Blueprint('oidc_interaction', __name__, url_prefix=INTERACTION_PATH)

# Federated providers the views know how to talk to
FEDERATED_PROVIDERS = [GOOGLE]


@interaction_views.after_request
def add_headers_and_cookies(resp):
    resp.headers['Pragma'] = 'no-cache'
    resp.headers['Cache-Control'] = 'no-cache, no-store'
    # Also runs for the response to an unhandled exception
    for name, path in g.get('expired_cookies', []):
        resp.delete_cookie(name, path=path)
    return resp


@interaction_views.errorhandler(EngineError)
def engine_error(err):
    if err.kind not in RENDERED_KINDS:
        raise err

    logger.warning('{}: {}'.format(err.kind.value, err.error_description))
    return make_response(render_error(err.to_dict()), err.status,
                         {'Content-Type': 'text/html; charset=utf-8'})


def expire_cookie(name, path):
    g.setdefault('expired_cookies', []).append((name, path))


def expect_prompt(interaction, name):
    if interaction.prompt.name != name:
        raise UnexpectedPrompt(name, interaction.prompt.name)


def finish(uid, result, merge_with_last_submission):
    _result = result.to_dict()
    logger.info('Interaction {} resolved: {}'.format(uid, _result))
    return current_app.provider.interaction_finished(
        request, _result, merge_with_last_submission=merge_with_last_submission)


def login_result(account):
    if account is None:
        # nothing resolved, the engine prompts again
        return InteractionResult()
    return InteractionResult.logged_in(account.account_id)


def render_interaction(template, interaction, client, title, **kwargs):
    args = {
        'client': client or {},
        'uid': interaction.uid,
        'details': interaction.prompt.details,
        'params': interaction.params,
        'title': title,
        'session': None,
        'dbg': None,
    }

    if current_app.srv_config.get('debug', False):
        seen = set()
        if interaction.session:
            args['session'] = debug(interaction.session, seen)
        args['dbg'] = {
            'params': debug(interaction.params, seen),
            'prompt': debug(interaction.prompt, seen),
        }

    args.update(kwargs)
    return render_template(template, **args)


@interaction_views.route('/<uid>', methods=['GET'])
def interaction(uid):
    _provider = current_app.provider
    _interaction = _provider.interaction_details(request)
    client = _provider.find_client(_interaction.params.get('client_id'))

    _name = _interaction.prompt.name
    logger.debug('Interaction {} waits for {}'.format(_interaction.uid, _name))

    if _name == 'select_account':
        if not _interaction.session:
            return finish(_interaction.uid, InteractionResult(select_account=SelectAccountResult()),
                          False)

        account = _provider.find_account(_interaction.account_id)
        email = ''
        if account is not None:
            _claims = account.claims('prompt', 'email', {'email': None}, [])
            email = _claims.get('email') or ''

        return render_interaction('select_account.html', _interaction, client, 'Sign-in',
                                  email=email)
    elif _name == 'login':
        return render_interaction('login.html', _interaction, client, 'Sign-in',
                                  federated=[p for p in FEDERATED_PROVIDERS
                                             if p in current_app.federated])
    elif _name == 'consent':
        return render_interaction('interaction.html', _interaction, client, 'Authorize')

    logger.debug('No view for prompt {}'.format(_name))
    abort(404)


@interaction_views.route('/callback/<provider>', methods=['GET'])
def federated_callback(provider):
    if provider not in FEDERATED_PROVIDERS or provider not in current_app.federated:
        abort(404)
    return render_template('repost.html', provider=provider,
                           interaction_path=INTERACTION_PATH)


@interaction_views.route('/<uid>/login', methods=['POST'])
def login(uid):
    _interaction = current_app.provider.interaction_details(request)
    expect_prompt(_interaction, 'login')

    account = current_app.account_store.find_by_login(request.form.get('login'),
                                                      request.form.get('password'))
    return finish(uid, login_result(account), False)


@interaction_views.route('/<uid>/federated', methods=['POST'])
def federated(uid):
    _interaction = current_app.provider.interaction_details(request)
    expect_prompt(_interaction, 'login')

    _name = request.form.get('provider')
    if _name not in FEDERATED_PROVIDERS or _name not in current_app.federated:
        logger.debug('Unknown federated provider: {}'.format(_name))
        abort(404)

    client = current_app.federated[_name]
    path = handshake_path(uid)
    callback_params = client.callback_params(request)

    if callback_params:
        state = request.cookies.get(state_cookie(_name))
        expire_cookie(state_cookie(_name), path)
        nonce = request.cookies.get(nonce_cookie(_name))
        expire_cookie(nonce_cookie(_name), path)

        token_set = client.callback(None, callback_params, state=state, nonce=nonce,
                                    response_type='id_token')
        account = current_app.account_store.find_by_federated(_name, token_set.claims())
        return finish(uid, login_result(account), False)

    state = new_state(uid)
    nonce = new_nonce()

    resp = redirect(client.authorization_url(state, nonce, FEDERATED_SCOPE))
    _secure = current_app.srv_config.get('secure', False)
    resp.set_cookie(state_cookie(_name), state, path=path, samesite='Strict',
                    httponly=True, secure=_secure)
    resp.set_cookie(nonce_cookie(_name), nonce, path=path, samesite='Strict',
                    httponly=True, secure=_secure)
    logger.info('Interaction {} sent to {}'.format(uid, _name))
    return resp


@interaction_views.route('/<uid>/continue', methods=['POST'])
def select_account_continue(uid):
    _interaction = current_app.provider.interaction_details(request)
    expect_prompt(_interaction, 'select_account')

    if request.form.get('switch'):
        _prompt = _interaction.params.get('prompt')
        if _prompt:
            _interaction.params['prompt'] = ' '.join(_prompt.split(' ') + ['login'])
        else:
            _interaction.params['prompt'] = 'logout'
        current_app.provider.save_interaction(_interaction)

    return finish(uid, InteractionResult(select_account=SelectAccountResult()), False)


@interaction_views.route('/<uid>/confirm', methods=['POST'])
def confirm(uid):
    _interaction = current_app.provider.interaction_details(request)
    expect_prompt(_interaction, 'consent')

    # Everything offered is granted, earlier rejections stay in place
    result = InteractionResult(consent=ConsentResult(rejected_scopes=[], rejected_claims=[],
                                                     replace=False))
    return finish(uid, result, True)


@interaction_views.route('/<uid>/abort', methods=['GET'])
def abort_interaction(uid):
    return finish(uid, InteractionResult.aborted(), False)
