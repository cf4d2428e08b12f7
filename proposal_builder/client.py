r"""HTTP client for the proposal templates API.

The server exposes ``/proposal-templates`` under its API base: ``GET`` lists
templates, ``POST`` creates one and ``PUT /{id}`` updates one. Templates travel
as the camelCase payload produced by
:func:`~proposal_builder.document.template_to_payload`.

Example
-------
>>> from proposal_builder.client import ProposalTemplateClient
>>> client = ProposalTemplateClient("https://crm.example/api")  # doctest: +SKIP
>>> [entry["name"] for entry in client.list_templates()]  # doctest: +SKIP
['Professional Proposal']
"""

from __future__ import annotations

import json
import logging
import typing as typ
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .document import (
    DEFAULT_TEMPLATE_ID,
    TemplateError,
    template_from_payload,
    template_to_payload,
)

if typ.TYPE_CHECKING:
    from .document import Template

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:5000/api"
TEMPLATES_PATH = "/proposal-templates"


class TemplateClientError(RuntimeError):
    """Raised when the templates API is unreachable or answers with an error."""


def build_session() -> requests.Session:
    """Return a session that retries idempotent requests on transient errors."""
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD", "PUT"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class ProposalTemplateClient:
    """Thin wrapper around the proposal template endpoints."""

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        *,
        token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialise the client.

        Parameters
        ----------
        api_base : str, optional
            Base URL of the API, without the ``/proposal-templates`` suffix.
        token : str | None, optional
            Bearer token sent in the ``Authorization`` header when provided.
        session : requests.Session, optional
            Session to reuse. Defaults to :func:`build_session`.
        timeout : float, optional
            Per-request timeout in seconds.
        """
        self._api_base = api_base.rstrip("/") or DEFAULT_API_BASE
        self._session = session or build_session()
        self.timeout = timeout
        self._headers = {
            "Accept": "application/json",
            "User-Agent": "proposal-builder/0.1",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    @property
    def collection_url(self) -> str:
        return f"{self._api_base}{TEMPLATES_PATH}"

    def list_templates(self) -> list[dict[str, typ.Any]]:
        """Return every template payload the server knows about."""
        response = self._request("GET", self.collection_url, "list templates")
        self._raise_for_status(response, "list templates")
        payload = self._decode(response, "list templates")
        if not isinstance(payload, list):
            msg = "Template list response was not a JSON array"
            raise TemplateClientError(msg)
        return [entry for entry in payload if isinstance(entry, dict)]

    def fetch(self, template_id: str) -> Template | None:
        """Return the template with ``template_id`` or ``None`` when absent.

        The item route is tried first. Servers that only implement the
        collection route answer it with 404, in which case the list is
        searched instead.
        """
        normalized = template_id.strip()
        if not normalized:
            msg = "Template id cannot be empty"
            raise ValueError(msg)
        action = f"fetch template '{normalized}'"
        url = f"{self.collection_url}/{normalized}"
        response = self._request("GET", url, action)
        if response.status_code == HTTPStatus.NOT_FOUND:
            logger.info("no item route for %s; searching the list", normalized)
            for entry in self.list_templates():
                if str(entry.get("id")) == normalized:
                    return self._to_template(entry, action)
            return None
        self._raise_for_status(response, action)
        return self._to_template(self._decode(response, action), action)

    def save(self, template: Template) -> Template:
        """Create or update ``template`` and return the server's copy.

        Templates whose id is still the unsaved placeholder are created with
        ``POST``; all others are updated with ``PUT``.
        """
        body = template_to_payload(template)
        if template.id == DEFAULT_TEMPLATE_ID:
            body.pop("id")
            action = "create template"
            response = self._request("POST", self.collection_url, action, body)
        else:
            action = f"update template '{template.id}'"
            url = f"{self.collection_url}/{template.id}"
            response = self._request("PUT", url, action, body)
            if response.status_code == HTTPStatus.NOT_FOUND:
                msg = f"Template '{template.id}' does not exist on the server"
                raise TemplateClientError(msg)
        self._raise_for_status(response, action)
        saved = self._to_template(self._decode(response, action), action)
        logger.info("saved template %s (%s)", saved.id, saved.name)
        return saved

    def _request(
        self,
        method: str,
        url: str,
        action: str,
        body: dict[str, typ.Any] | None = None,
    ) -> requests.Response:
        logger.info("%s %s", method, url)
        try:
            return self._session.request(
                method, url, json=body, headers=self._headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to {action} at {url}: {exc}"
            raise TemplateClientError(msg) from exc

    @staticmethod
    def _raise_for_status(response: requests.Response, action: str) -> None:
        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            msg = f"Could not {action}: status {response.status_code}: {snippet}"
            raise TemplateClientError(msg)

    @staticmethod
    def _decode(response: requests.Response, action: str) -> typ.Any:
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Response to {action} was not valid JSON"
            raise TemplateClientError(msg) from exc

    @staticmethod
    def _to_template(payload: typ.Any, action: str) -> Template:
        if not isinstance(payload, typ.Mapping):
            msg = f"Response to {action} was not a JSON object"
            raise TemplateClientError(msg)
        try:
            return template_from_payload(payload)
        except TemplateError as exc:
            msg = f"Response to {action} held an invalid template: {exc}"
            raise TemplateClientError(msg) from exc


__all__ = [
    "DEFAULT_API_BASE",
    "ProposalTemplateClient",
    "TemplateClientError",
    "build_session",
]
