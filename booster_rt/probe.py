# /*
# Copyright 2026 The Booster RT Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""HTTP probe against the deployed application's route."""

from __future__ import annotations

import json
import socket
from dataclasses import dataclass
from typing import Any, Literal

import requests

from booster_rt import logger
from booster_rt.constants import DEFAULT_HTTP_TIMEOUT_SECONDS, JSON_CONTENT_TYPE
from booster_rt.errors import DeploymentAssertionError, EnvironmentUnavailable

Method = Literal["GET", "POST", "PUT", "DELETE"]
METHODS = ("GET", "POST", "PUT", "DELETE")


@dataclass(frozen=True)
class ProbeResponse:
    status_code: int
    body: str

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            DeploymentAssertionError: If the body is not JSON.
        """
        try:
            return json.loads(self.body)
        except json.JSONDecodeError as err:
            raise DeploymentAssertionError(f"Unexpected response, expecting json. Actual : {self.body}") from err

    def field(self, name: str) -> Any:
        payload = self.json()
        if not isinstance(payload, dict) or name not in payload:
            raise DeploymentAssertionError(f"Response has no '{name}' field: {self.body}")
        return payload[name]


def build_request(method: Method, url: str, body: str | None = None) -> requests.Request:
    """Build a request for any supported verb.

    GET carries no body; the other verbs send *body*, or an empty JSON
    object when it is None.
    """
    method = method.upper()
    if method not in METHODS:
        raise ValueError(f"Unsupported HTTP method '{method}'")
    if method == "GET":
        return requests.Request(method, url)
    return requests.Request(
        method, url,
        data=(body if body is not None else json.dumps({})).encode("utf-8"),
        headers={"Content-Type": JSON_CONTENT_TYPE},
    )


def _is_unresolvable(exc: BaseException) -> bool:
    """True if a DNS resolution failure appears anywhere in the exception chain."""
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        err = pending.pop()
        if id(err) in seen:
            continue
        seen.add(id(err))
        if isinstance(err, socket.gaierror):
            return True
        pending.extend(arg for arg in err.args if isinstance(arg, BaseException))
        for linked in (getattr(err, "reason", None), err.__cause__, err.__context__):
            if isinstance(linked, BaseException):
                pending.append(linked)
    return False


def request(
    method: Method,
    url: str,
    body: str | None = None,
    *,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> ProbeResponse:
    """Send one request and return its status and body.

    Raises:
        EnvironmentUnavailable: If the target host cannot be resolved.
        requests.RequestException: For any other transport failure.
    """
    owned = session is None
    session = session or requests.Session()
    try:
        prepared = session.prepare_request(build_request(method, url, body))
        response = session.send(prepared, timeout=timeout)
    except requests.ConnectionError as err:
        if _is_unresolvable(err):
            raise EnvironmentUnavailable(f"No host with name {url} found, maybe the wildcard DNS is down!") from err
        raise
    finally:
        if owned:
            session.close()
    logger.info("[%s] %s %s", method.upper(), url, response.status_code)
    return ProbeResponse(status_code=response.status_code, body=response.text)
