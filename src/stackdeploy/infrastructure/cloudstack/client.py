"""
CloudStack API client implementing the control plane port.

Requests are signed the CloudStack way: parameters are sorted by name,
URL-encoded, lower-cased and signed with HMAC-SHA1 using the secret key.

Usage:
    client = CloudStackClient(
        api_url="https://cloud.example.com/client/api",
        api_key="...",
        secret_key="...",
    )
    zone_id = client.name_to_id("zone1", ResourceKind.ZONE, {"available": "true"})
"""
import base64
import hashlib
import hmac
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from stackdeploy.domain.base.ports import ControlPlanePort
from stackdeploy.domain.provisioning.jobs import AsyncJobHandle, CreatedResource, JobStatus
from stackdeploy.domain.references.value_objects import ResourceKind
from stackdeploy.infrastructure.exceptions import (
    ControlPlaneConnectionError,
    ControlPlaneError,
    LookupFailedError,
)

logger = logging.getLogger(__name__)


class CloudStackClient(ControlPlanePort):
    """Thin CloudStack client covering the calls the deploy step needs."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        secret_key: str,
        timeout: float = 30,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("?")
        self._api_key = api_key
        self._secret_key = secret_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = verify_ssl

    def sign(self, params: Dict[str, str]) -> str:
        """
        Build the signed query string for a set of parameters.

        Args:
            params: Request parameters, including ``command``

        Returns:
            Query string with the ``signature`` parameter appended
        """
        query = "&".join(
            f"{key}={quote(str(params[key]), safe='*')}"
            for key in sorted(params, key=str.lower)
        )
        digest = hmac.new(
            self._secret_key.encode("utf-8"),
            query.lower().encode("utf-8"),
            hashlib.sha1,
        ).digest()
        signature = base64.b64encode(digest).decode("ascii")
        return f"{query}&signature={quote(signature, safe='')}"

    def request(self, command: str, **params: Any) -> Dict[str, Any]:
        """
        Call an API command and return the body of its response.

        Parameters with empty values are not sent.

        Raises:
            ControlPlaneConnectionError: Cannot reach the API
            ControlPlaneError: The API returned an error
        """
        query_params = {key: str(value) for key, value in params.items() if value not in (None, "")}
        query_params.update({"command": command, "response": "json", "apikey": self._api_key})
        url = f"{self.api_url}?{self.sign(query_params)}"

        logger.debug(f"CloudStack {command} {sorted(k for k in query_params if k != 'apikey')}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except (ConnectionError, Timeout) as e:
            raise ControlPlaneConnectionError(f"Cannot reach CloudStack API at {self.api_url}: {e}")
        except RequestException as e:
            raise ControlPlaneError(f"CloudStack request {command} failed: {e}")

        try:
            data = response.json()
        except ValueError:
            raise ControlPlaneError(
                f"CloudStack {command} returned a non-JSON response (HTTP {response.status_code})"
            )

        body = data.get(f"{command.lower()}response")
        if body is None and len(data) == 1:
            body = next(iter(data.values()))
        body = body or {}

        if response.status_code >= 400 or "errorcode" in body:
            error_code = body.get("errorcode", response.status_code)
            error_text = body.get("errortext", response.text)
            raise ControlPlaneError(f"CloudStack {command} failed ({error_code}): {error_text}",
                                    error_code=error_code, details=body)
        return body

    def name_to_id(self, name: str, kind: ResourceKind,
                   filters: Optional[Dict[str, str]] = None) -> str:
        body = self.request(kind.list_command, name=name, **(filters or {}))
        matches = [item for item in body.get(kind.response_key, []) if item.get("name") == name]

        if not matches:
            raise LookupFailedError(f"No {kind.value} named '{name}' found")
        if len(matches) > 1:
            raise LookupFailedError(f"{len(matches)} resources of type {kind.value} named '{name}' found")
        return matches[0]["id"]

    def deploy_virtual_machine(self, service_offering_id: str, template_id: str,
                               zone_id: str, disk_offering_id: str, display_name: str,
                               network_ids: List[str], key_pair: str, user_data: str,
                               hypervisor: str) -> CreatedResource:
        encoded_user_data = base64.b64encode(user_data.encode("utf-8")).decode("ascii") if user_data else ""
        body = self.request(
            "deployVirtualMachine",
            serviceofferingid=service_offering_id,
            templateid=template_id,
            zoneid=zone_id,
            diskofferingid=disk_offering_id,
            displayname=display_name,
            networkids=",".join(network_id for network_id in network_ids if network_id),
            keypair=key_pair,
            userdata=encoded_user_data,
            hypervisor=hypervisor,
        )
        try:
            return CreatedResource(resource_id=body["id"], job=AsyncJobHandle(job_id=body["jobid"]))
        except KeyError as e:
            raise ControlPlaneError(f"deployVirtualMachine response is missing {e}", details=body)

    def destroy_virtual_machine(self, resource_id: str) -> AsyncJobHandle:
        body = self.request("destroyVirtualMachine", id=resource_id)
        try:
            return AsyncJobHandle(job_id=body["jobid"])
        except KeyError:
            raise ControlPlaneError("destroyVirtualMachine response is missing jobid", details=body)

    def query_async_job(self, job: AsyncJobHandle) -> JobStatus:
        body = self.request("queryAsyncJobResult", jobid=job.job_id)
        try:
            return JobStatus(int(body["jobstatus"]))
        except (KeyError, ValueError) as e:
            raise ControlPlaneError(f"Unexpected status for async job {job}: {e}", details=body)
