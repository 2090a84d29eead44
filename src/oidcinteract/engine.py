"""
The interface the interaction views expect from the embedded OIDC engine.

The engine owns every pending interaction. The views only read an
interaction, optionally ask the engine to persist a changed authorization
request, and finally hand back the end-user's decision.
"""
from typing import Optional


class Prompt(object):
    def __init__(self, name, reasons=None, details=None):
        self.name = name
        self.reasons = reasons or []
        self.details = details or {}

    def to_dict(self):
        return {"name": self.name, "reasons": self.reasons, "details": self.details}


class Interaction(object):
    """
    A paused authorization request.

    :param uid: Interaction identifier issued by the engine
    :param prompt: The Prompt the engine needs answered
    :param params: The authorization request parameters
    :param session: The existing end-user session, a dictionary holding at
        least 'account_id', or None
    :param last_submission: What was submitted for this interaction earlier
    """

    def __init__(self, uid, prompt, params=None, session=None, last_submission=None):
        self.uid = uid
        self.prompt = prompt
        self.params = params or {}
        self.session = session
        self.last_submission = last_submission

    @property
    def account_id(self) -> Optional[str]:
        if self.session:
            return self.session.get("account_id")
        return None


class Provider(object):
    """Base class for OIDC engine adapters."""

    def interaction_details(self, request) -> Interaction:
        """
        Return the pending interaction the request belongs to.

        :raises EngineError: with kind SESSION_NOT_FOUND or
            INTERACTION_NOT_FOUND when there is none
        """
        raise NotImplementedError()

    def interaction_finished(self, request, result: dict, merge_with_last_submission=True):
        """
        Resume the authorization request with the end-user's decision.

        :param request: The incoming HTTP request
        :param result: The resolution, see InteractionResult.to_dict
        :param merge_with_last_submission: Whether result is layered onto
            what was submitted earlier for the same interaction
        :return: The HTTP response the engine wants sent, normally a redirect
        """
        raise NotImplementedError()

    def save_interaction(self, interaction: Interaction):
        """Persist changes made to interaction.params."""
        raise NotImplementedError()

    def find_client(self, client_id) -> Optional[dict]:
        """Return the client metadata for client_id or None."""
        raise NotImplementedError()

    def find_account(self, account_id):
        """Return an account object with a claims() method or None."""
        raise NotImplementedError()
