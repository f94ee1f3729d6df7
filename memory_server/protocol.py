"""
JSON-RPC Protocol Layer

Decodes request envelopes, routes protocol methods and shapes every
response. Both transports (HTTP and stdio) forward raw requests here, so
envelope handling exists exactly once.
"""

import json
import logging
import math
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from . import __version__
from .base import EnvelopeError, MemoryServerError, UnknownMethod, ValidationError
from .dispatcher import ToolDispatcher
from .events import EventSink, NullEventSink
from .registry import ToolRegistry

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "memory-server"

METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class JsonRpcRequest(BaseModel):
    """Incoming request envelope."""
    model_config = ConfigDict(extra="allow")

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    method: str
    params: Optional[Dict[str, Any]] = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set and self.method.startswith("notifications/")


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and cannot be echoed back in a response
    raise EnvelopeError(f"Parse error: invalid constant {name}")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise EnvelopeError(f"Parse error: number out of range {text}")
    return value


def success_response(id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "result": result}


def error_response(id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "error": {"code": code, "message": message}}


def text_result(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


class McpProtocol:
    """
    Envelope codec and method router.

    handle() never raises: every fault becomes an error envelope.
    A None return means the request was a notification and gets no reply.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        dispatcher: ToolDispatcher,
        events: EventSink = None,
        server_name: str = SERVER_NAME,
        server_version: str = __version__
    ):
        self.registry = registry
        self.dispatcher = dispatcher
        self.events = events or NullEventSink()
        self.server_name = server_name
        self.server_version = server_version

        self._methods: Dict[str, Callable[[JsonRpcRequest], Awaitable[Any]]] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    def decode(self, body: Union[str, bytes]) -> Any:
        """Parse a raw request body into JSON."""
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise EnvelopeError(f"Parse error: {e}")
        try:
            return json.loads(body, parse_constant=_reject_constant, parse_float=_parse_float)
        except json.JSONDecodeError as e:
            raise EnvelopeError(f"Parse error: {e}")

    async def handle_raw(self, body: Union[str, bytes]) -> Optional[Dict[str, Any]]:
        """Decode and handle one raw request body."""
        try:
            payload = self.decode(body)
        except EnvelopeError as e:
            self.events.error("Request decode failed", error=e.message)
            return error_response(None, INTERNAL_ERROR, e.message)
        return await self.handle(payload)

    async def handle(self, payload: Any) -> Optional[Dict[str, Any]]:
        """Handle one decoded request envelope."""
        raw_id = payload.get("id") if isinstance(payload, dict) else None

        try:
            request = self._parse_envelope(payload)
        except EnvelopeError as e:
            self.events.error("Invalid request envelope", id=raw_id, error=e.message)
            return error_response(raw_id, INTERNAL_ERROR, e.message)

        self.events.info("Request received", method=request.method, id=request.id)

        if request.is_notification:
            self.events.debug("Notification received", method=request.method)
            return None

        try:
            result = await self._route(request)
        except UnknownMethod:
            self.events.warn("Method not found", method=request.method, id=request.id)
            return error_response(request.id, METHOD_NOT_FOUND, "Method not found")
        except MemoryServerError as e:
            self.events.error("Request failed", method=request.method, id=request.id, error=e.message)
            return error_response(request.id, INTERNAL_ERROR, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error handling {request.method}")
            return error_response(request.id, INTERNAL_ERROR, str(e))

        self.events.info("Response sent", method=request.method, id=request.id, success=True)
        return success_response(request.id, result)

    def _parse_envelope(self, payload: Any) -> JsonRpcRequest:
        if not isinstance(payload, dict):
            raise EnvelopeError("Invalid request: expected a JSON object")
        try:
            return JsonRpcRequest.model_validate(payload)
        except PydanticValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise EnvelopeError(f"Invalid request: bad or missing field(s): {fields}")

    async def _route(self, request: JsonRpcRequest) -> Any:
        handler = self._methods.get(request.method)
        if handler is None:
            raise UnknownMethod(f"Unknown method: {request.method}")
        return await handler(request)

    async def _initialize(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self.server_name, "version": self.server_version},
        }

    async def _ping(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return {}

    async def _list_tools(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return {"tools": self.registry.to_mcp_tools()}

    async def _call_tool(self, request: JsonRpcRequest) -> Dict[str, Any]:
        params = request.params or {}
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ValidationError("Missing required parameter: name")

        text = await self.dispatcher.invoke(name, params.get("arguments"), request_id=request.id)
        return text_result(text)
