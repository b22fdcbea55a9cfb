"""
Minimal client for the Wolfram Alpha LLM API.

    GET https://www.wolframalpha.com/api/v1/llm-api?input=...&appid=...

The API answers 200 with a plain-text result. Failures are mapped onto a
small exception hierarchy so callers can tell auth, input, server and
network problems apart (see the ``is_*_error`` predicates).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

LLM_API_URL = "https://www.wolframalpha.com/api/v1/llm-api"
DEFAULT_USER_AGENT = "MCP-Wolfram-Alpha-Server/1.0"

# Small reads so the total deadline is checked as bytes trickle in.
READ_CHUNK_SIZE = 1


class WolframError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(WolframError):
    pass


class InvalidInputError(WolframError):
    pass


class ServerError(WolframError):
    pass


class NetworkError(WolframError):
    pass


def is_auth_error(err: BaseException) -> bool:
    return isinstance(err, AuthError)


def is_invalid_input_error(err: BaseException) -> bool:
    return isinstance(err, InvalidInputError)


def is_server_error(err: BaseException) -> bool:
    return isinstance(err, ServerError)


def is_network_error(err: BaseException) -> bool:
    return isinstance(err, NetworkError)


@dataclass
class QueryOptions:
    max_chars: int = 0  # <= 0 means "use the client default"
    units: str = ""  # "metric" | "nonmetric"
    country_code: str = ""
    language_code: str = ""


@dataclass
class LLMResponse:
    result: str
    status_code: int = 200


class WolframLLMClient:
    def __init__(
        self,
        app_id: str,
        *,
        timeout: float = 30,
        use_bearer: bool = False,
        default_max_chars: int = 0,
        user_agent: str = DEFAULT_USER_AGENT,
        base_url: str = LLM_API_URL,
        session: Optional[requests.Session] = None,
    ):
        if not app_id:
            raise ValueError("app_id is required")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.app_id = app_id
        self.timeout = timeout
        self.use_bearer = use_bearer
        self.default_max_chars = default_max_chars
        self.user_agent = user_agent
        self.base_url = base_url
        self.session = session or requests.Session()

    def _params(self, query: str, options: QueryOptions) -> Dict[str, str]:
        params = {"input": query}
        if not self.use_bearer:
            params["appid"] = self.app_id
        max_chars = options.max_chars if options.max_chars > 0 else self.default_max_chars
        if max_chars > 0:
            params["maxchars"] = str(max_chars)
        if options.units:
            params["units"] = options.units
        if options.country_code:
            params["countrycode"] = options.country_code
        if options.language_code:
            params["languagecode"] = options.language_code
        return params

    def _headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if self.use_bearer:
            headers["Authorization"] = f"Bearer {self.app_id}"
        return headers

    def _read_text(self, resp: requests.Response, deadline: float) -> str:
        """Read the whole body, failing once ``deadline`` has passed.

        ``requests`` only bounds each socket read, so a server dribbling bytes
        could otherwise hold the call open indefinitely.
        """
        chunks: List[bytes] = []
        if time.monotonic() > deadline:
            raise NetworkError(f"request timed out after {self.timeout}s")
        for chunk in resp.iter_content(chunk_size=READ_CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise NetworkError(f"request timed out after {self.timeout}s")
            chunks.append(chunk)
        content_type = resp.headers.get("Content-Type", "")
        encoding = resp.encoding if "charset" in content_type.lower() and resp.encoding else "utf-8"
        return b"".join(chunks).decode(encoding, errors="replace")

    def query(self, query: str, options: Optional[QueryOptions] = None) -> LLMResponse:
        if not query:
            raise InvalidInputError("input cannot be empty")
        options = options or QueryOptions()

        deadline = time.monotonic() + self.timeout
        try:
            resp = self.session.get(
                self.base_url,
                params=self._params(query, options),
                headers=self._headers(),
                timeout=self.timeout,
                stream=True,
            )
            try:
                text = self._read_text(resp, deadline)
            finally:
                resp.close()
        except requests.Timeout as e:
            raise NetworkError(f"request timed out after {self.timeout}s: {e}") from e
        except requests.RequestException as e:
            raise NetworkError(f"request failed: {e}") from e

        status = resp.status_code
        if status == 200:
            return LLMResponse(result=text, status_code=status)

        body = text.strip()
        message = f"HTTP {status}: {body}" if body else f"HTTP {status}"
        if status in (401, 403):
            raise AuthError(message, status)
        if status in (400, 501):
            # 501: the API could not interpret the input
            raise InvalidInputError(message, status)
        if status >= 500:
            raise ServerError(message, status)
        raise WolframError(message, status)
