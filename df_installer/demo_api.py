"""
Demo API provisioning against the DreamFactory REST API.

Logs in as the DreamFactory administrator and creates, in order, a MySQL
database service (reused if one with the same name exists), a role granting
full access to that service, and an API-key application bound to the role.
The resulting API key is handed to the MCP server configuration.

Public API:
    DreamFactoryClient: thin httpx wrapper for the system endpoints
    DemoApiProvisioner: the provisioning sequence
    provision_demo_api: caller-facing wrapper that never raises
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx
import structlog

from df_installer import console
from df_installer.config import DEFAULT_SERVICE_NAME, InstallerContext
from df_installer.exceptions import DemoApiError
from df_installer.timeout_config import Timeouts

logger = structlog.get_logger(__name__)

SESSION_TOKEN_HEADER = "X-DreamFactory-Session-Token"

# Verb bits understood by DreamFactory role service access
VERB_GET = 1
VERB_POST = 2
VERB_PUT = 4
VERB_PATCH = 8
VERB_DELETE = 16
FULL_ACCESS_VERB_MASK = VERB_GET | VERB_POST | VERB_PUT | VERB_PATCH | VERB_DELETE

# Requestor bits: API (1) and script (2)
ALL_REQUESTORS_MASK = 3

APP_TYPE_API_KEY_ONLY = 0

DEMO_SERVICE_CONFIG: Dict[str, Any] = {
    "host": "mysql",
    "port": 3306,
    "database": "dreamfactory",
    "username": "df_admin",
    "password": "df_admin",  # pragma: allowlist secret
    "schema": "dreamfactory",
    "max_records": 1000,
}


@dataclass(frozen=True)
class DemoApiCredentials:
    api_key: str
    service_name: str


def _first_resource(body: Any) -> Dict[str, Any]:
    if isinstance(body, dict):
        resources = body.get("resource")
        if isinstance(resources, list) and resources and isinstance(resources[0], dict):
            return resources[0]
    return {}


def _extract_id(body: Any) -> Optional[Any]:
    if isinstance(body, dict) and body.get("id") is not None:
        return body["id"]
    return _first_resource(body).get("id")


class DreamFactoryClient:
    """
    Synchronous client for the DreamFactory system API.

    Requests after ``login`` carry the session token header. HTTP status
    errors are raised as ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = Timeouts.API_REQUEST,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": "DreamFactory-Installer/1.0"},
            transport=transport,
        )

    def __enter__(self) -> "DreamFactoryClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http_client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.debug(event="DreamFactory API request", method=method, path=path)
        response = self._http_client.request(method, path, **kwargs)
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    def get(self, path: str, **kwargs: Any) -> Any:
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self._request("POST", path, **kwargs)

    def login(self, email: str, password: str) -> str:
        """Open an admin session and authorize subsequent requests with it."""
        body = self.post("/system/admin/session", json={"email": email, "password": password})
        token = None
        if isinstance(body, dict):
            token = body.get("session_token") or body.get("sessionToken")
        if not token:
            raise DemoApiError("Login response did not include a session token", step="login")
        self._http_client.headers[SESSION_TOKEN_HEADER] = token
        return token


class DemoApiProvisioner:
    """Creates the demo database service, role and API-key app."""

    def __init__(
        self,
        client: DreamFactoryClient,
        service_name: str = DEFAULT_SERVICE_NAME,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.service_name = service_name
        self._clock = clock

    def _suffix(self) -> str:
        return str(int(self._clock() * 1000))

    def find_service_id(self) -> Optional[Any]:
        body = self.client.get(
            "/system/service", params={"filter": f"name={self.service_name}"}
        )
        resources = body.get("resource") if isinstance(body, dict) else None
        for service in resources or []:
            if isinstance(service, dict) and service.get("name") == self.service_name:
                return service.get("id")
        return None

    def create_service(self) -> Any:
        payload = {
            "resource": [
                {
                    "name": self.service_name,
                    "label": "Demo Database",
                    "description": "Demo MySQL database for the DreamFactory MCP server",
                    "is_active": True,
                    "type": "mysql",
                    "config": dict(DEMO_SERVICE_CONFIG),
                }
            ]
        }
        body = self.client.post("/system/service", json=payload)
        service_id = _extract_id(body)
        if service_id is None:
            raise DemoApiError("Service creation did not return an id", step="service")
        return service_id

    def ensure_service(self) -> Any:
        service_id = self.find_service_id()
        if service_id is not None:
            logger.info(event="Reusing existing service", service=self.service_name, id=service_id)
            console.info(f"Using existing '{self.service_name}' service")
            return service_id
        service_id = self.create_service()
        logger.info(event="Created service", service=self.service_name, id=service_id)
        return service_id

    def create_role(self, service_id: Any) -> Any:
        payload = {
            "resource": [
                {
                    "name": f"mcp_demo_role_{self._suffix()}",
                    "description": "Full access to the demo database service for the MCP server",
                    "is_active": True,
                    "role_service_access_by_role_id": [
                        {
                            "service_id": service_id,
                            "component": "*",
                            "verb_mask": FULL_ACCESS_VERB_MASK,
                            "requestor_mask": ALL_REQUESTORS_MASK,
                            "filters": [],
                            "filter_op": "AND",
                        }
                    ],
                }
            ]
        }
        body = self.client.post("/system/role", json=payload)
        role_id = _extract_id(body)
        if role_id is None:
            raise DemoApiError("Role creation did not return an id", step="role")
        return role_id

    def create_app(self, role_id: Any) -> Any:
        payload = {
            "resource": [
                {
                    "name": f"mcp_demo_app_{self._suffix()}",
                    "description": "API key for the DreamFactory MCP server",
                    "type": APP_TYPE_API_KEY_ONLY,
                    "role_id": role_id,
                    "is_active": True,
                }
            ]
        }
        return self.client.post("/system/app", params={"fields": "*"}, json=payload)

    def extract_api_key(self, app_body: Any) -> str:
        """
        Find the API key in an app-creation response.

        Looks at the top-level ``api_key``, then the first ``resource`` entry,
        then fetches the app by id when only an id came back.
        """
        if isinstance(app_body, dict) and app_body.get("api_key"):
            return app_body["api_key"]
        first = _first_resource(app_body)
        if first.get("api_key"):
            return first["api_key"]
        app_id = _extract_id(app_body)
        if app_id is not None:
            detail = self.client.get(f"/system/app/{app_id}", params={"fields": "*"})
            if isinstance(detail, dict) and detail.get("api_key"):
                return detail["api_key"]
        raise DemoApiError("App creation did not return an API key", step="app")

    def provision(self, email: str, password: str) -> DemoApiCredentials:
        self.client.login(email, password)
        service_id = self.ensure_service()
        role_id = self.create_role(service_id)
        app_body = self.create_app(role_id)
        api_key = self.extract_api_key(app_body)
        return DemoApiCredentials(api_key=api_key, service_name=self.service_name)


def provision_demo_api(
    ctx: InstallerContext,
    email: str,
    password: str,
    transport: Optional[httpx.BaseTransport] = None,
) -> Optional[DemoApiCredentials]:
    """
    Run the demo API provisioning, returning None instead of raising.

    Any HTTP or API failure is reported and swallowed here: without a demo
    API the install continues and asks for a key manually.
    """
    try:
        with DreamFactoryClient(ctx.api_base_url, transport=transport) as client:
            with console.spinner("Creating demo database API..."):
                credentials = DemoApiProvisioner(client).provision(email, password)
    except (DemoApiError, httpx.HTTPError, ValueError) as e:
        logger.warning(event="Demo API provisioning failed", error=str(e))
        console.failure(f"Could not create the demo API: {e}")
        return None
    console.success(f"Demo API ready: service '{credentials.service_name}'")
    return credentials
