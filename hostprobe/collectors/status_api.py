"""PE status API probe.

Queries ``https://<certname>:<port>/status/v1/services/<endpoint>`` using the
node's own Puppet TLS identity. One attempt per call, no retries; failures are
logged at debug level and reported as an unknown status.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from requests.utils import requote_uri
import urllib3
import yaml

from ..config import Config
from ..data.models import StatusErrorKind, StatusResult

try:
    import certifi
    DEFAULT_CA_BUNDLE = certifi.where()
except Exception:
    DEFAULT_CA_BUNDLE = True

LOG = logging.getLogger(__name__)

LOG_PREFIX = "fact 'self_service'"


class StatusApiClient:
    """HTTPS client for the local status API.

    The session is created on first use and reused for later calls.
    """

    def __init__(
        self,
        certname: str,
        timeout: Optional[float] = 30,
        verify: bool = True,
        ca_bundle: Optional[str] = None,
        client_cert: Optional[Tuple[str, str]] = None,
    ):
        self.certname = certname
        self.timeout = timeout
        self.client_cert = client_cert
        self._verify = self._determine_verify(verify, ca_bundle)
        self._session: Optional[requests.Session] = None

        if self._verify is False:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @classmethod
    def from_config(cls, config: Config) -> "StatusApiClient":
        api = config.status_api
        return cls(
            certname=api.resolved_certname(),
            timeout=api.timeout,
            verify=api.verify,
            ca_bundle=api.resolved_ca_bundle(),
            client_cert=api.resolved_client_cert(),
        )

    def _determine_verify(self, verify: bool, ca_bundle: Optional[str]):
        """Determine SSL verification setting."""
        if not verify:
            return False
        if ca_bundle:
            return ca_bundle
        return DEFAULT_CA_BUNDLE

    def _get_session(self) -> requests.Session:
        if self._session is None:
            session = requests.Session()
            adapter = HTTPAdapter(max_retries=0, pool_connections=1, pool_maxsize=2)
            session.mount("https://", adapter)
            session.verify = self._verify
            if self.client_cert:
                session.cert = self.client_cert
            session.headers.update({"Accept": "application/json", "User-Agent": "hostprobe/1.0"})
            self._session = session
        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def build_url(self, port: int, endpoint: str) -> str:
        return requote_uri(f"https://{self.certname}:{port}/status/v1/services/{endpoint}")

    def check(self, port: int, endpoint: str) -> StatusResult:
        """Query one status endpoint.

        Returns:
            StatusResult with the decoded body, or with the failure kind and
            message when the call or the JSON decoding failed.
        """
        url = self.build_url(port, endpoint)
        result = StatusResult(port=port, endpoint=endpoint, url=url)

        try:
            resp = self._get_session().get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            code = e.response.status_code if e.response is not None else "?"
            reason = e.response.reason if e.response is not None else str(e)
            return self._fail(result, StatusErrorKind.HTTP, f"HTTP: {code} {reason}")
        except requests.exceptions.SSLError as e:
            return self._fail(result, StatusErrorKind.SSL, f"SSL error: {e}")
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            return self._fail(result, StatusErrorKind.CONNECTION, f"Connection error: {e}")
        except requests.exceptions.RequestException as e:
            return self._fail(result, StatusErrorKind.GENERAL, f"General HTTP error: {e}")

        try:
            result.data = json.loads(resp.text)
        except ValueError as e:
            return self._fail(result, StatusErrorKind.PARSE, f"Could not parse body for JSON: {e}")
        return result

    def _fail(self, result: StatusResult, kind: StatusErrorKind, message: str) -> StatusResult:
        LOG.debug("%s - %s", LOG_PREFIX, message)
        result.error_kind = kind
        result.message = message
        return result


def status_check(
    port: int,
    endpoint: str,
    client: Optional[StatusApiClient] = None,
    config: Optional[Config] = None,
) -> Any:
    """Query the status API and return the decoded response body.

    Args:
        port: The status API port to query
        endpoint: The status API endpoint (service name) to query
        client: Client to use; built from config when omitted
        config: Configuration used to build a client

    Returns:
        The decoded JSON body, or None if the call failed for any reason.
    """
    owned = client is None
    if client is None:
        try:
            client = StatusApiClient.from_config(config or Config.load())
        except (yaml.YAMLError, OSError, ValueError, TypeError, AttributeError) as e:
            LOG.debug("%s - Could not load status API configuration: %s", LOG_PREFIX, e)
            return None
    try:
        return client.check(port, endpoint).value
    finally:
        if owned:
            client.close()
