"""
Chain RPC Client

One JSON-RPC request/response round trip to a chain node per invoke().
Bitcoin-family nodes speak JSON-RPC 1.0 behind HTTP Basic auth, Ethereum
nodes speak JSON-RPC 2.0 without auth. No retries happen here: a failed
round trip raises and the caller owns retry policy.
"""

import time
from decimal import Decimal
from typing import Any, Protocol, Sequence

import requests
import structlog
from opentelemetry import trace

from core.logging import VerificationEvents
from core.metrics import rpc_latency

log = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

# Bitcoin Core RPC_INVALID_ADDRESS_OR_KEY: "Invalid or non-wallet transaction id"
BITCOIN_TX_NOT_FOUND = -5


class RpcError(Exception):
    def __init__(self, message: str, method: str | None = None):
        super().__init__(message)
        self.method = method


class RpcTransportError(RpcError):
    """The round trip itself failed: network, HTTP status, auth or envelope."""


class RpcNodeError(RpcTransportError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, message: str, method: str | None = None, code: Any = None):
        super().__init__(message, method)
        self.code = code


class RpcFormatError(RpcError):
    """A field that must be hex-encoded was not."""


class RpcClient(Protocol):
    def invoke(self, method: str, params: Sequence[Any] = ()) -> Any: ...


class JsonRpcClient:
    """requests-backed JSON-RPC client for a single node endpoint."""

    def __init__(
        self,
        url: str,
        *,
        version: str = "2.0",
        request_id: Any = 1,
        auth: tuple[str, str] | None = None,
        timeout: float = 30.0,
        not_found_codes: Sequence[int] = (),
        session: requests.Session | None = None,
    ):
        self.url = url
        self.version = version
        self.request_id = request_id
        self.auth = auth
        self.timeout = timeout
        self.not_found_codes = frozenset(not_found_codes)
        self._http = session or requests

    @classmethod
    def bitcoin(cls, url: str, user: str, password: str, timeout: float = 30.0):
        return cls(
            url,
            version="1.0",
            request_id="autoconf",
            auth=(user, password),
            timeout=timeout,
            not_found_codes=(BITCOIN_TX_NOT_FOUND,),
        )

    @classmethod
    def ethereum(cls, url: str, timeout: float = 30.0):
        return cls(url, version="2.0", request_id=1, timeout=timeout)

    def invoke(self, method: str, params: Sequence[Any] = ()) -> Any:
        payload = {
            "jsonrpc": self.version,
            "id": self.request_id,
            "method": method,
            "params": list(params),
        }
        log.debug(VerificationEvents.RPC_CALL, method=method, url=self.url)

        with tracer.start_as_current_span(f"rpc.{method}") as span:
            span.set_attribute("rpc.system", "jsonrpc")
            span.set_attribute("rpc.method", method)
            started = time.perf_counter()
            try:
                response = self._http.post(
                    self.url,
                    json=payload,
                    auth=self.auth,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                log.error(VerificationEvents.RPC_FAILURE, method=method, error=str(e))
                raise RpcTransportError(f"{method}: {e}", method) from e
            finally:
                rpc_latency.labels(method=method).observe(
                    time.perf_counter() - started
                )

            span.set_attribute("http.status_code", response.status_code)
            return self._unwrap(method, response)

    def _unwrap(self, method: str, response: requests.Response) -> Any:
        # Amounts must survive as exact decimals, never floats
        try:
            envelope = response.json(parse_float=Decimal)
        except ValueError:
            envelope = None

        if not isinstance(envelope, dict) or not (
            "result" in envelope or "error" in envelope
        ):
            # Bitcoin Core answers 401 with an empty body on bad credentials
            if not response.ok:
                message = f"{method}: HTTP {response.status_code}"
            else:
                message = f"{method}: malformed JSON-RPC envelope"
            log.error(
                VerificationEvents.RPC_FAILURE,
                method=method,
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise RpcTransportError(message, method)

        error = envelope.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            if code in self.not_found_codes:
                return None
            message = error.get("message") if isinstance(error, dict) else error
            log.error(
                VerificationEvents.RPC_FAILURE,
                method=method,
                code=code,
                error=str(message),
            )
            raise RpcNodeError(f"{method}: {message}", method, code)

        if not response.ok:
            log.error(
                VerificationEvents.RPC_FAILURE,
                method=method,
                status_code=response.status_code,
            )
            raise RpcTransportError(f"{method}: HTTP {response.status_code}", method)

        return envelope.get("result")
