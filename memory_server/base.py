"""
Memory Tool Base Classes

Provides the parameter model, argument validation and error taxonomy shared
by every memory tool.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .events import EventSink, NullEventSink
from .store import MemoryStore


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""
    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None
    items_type: Optional[str] = None


@dataclass
class ToolDefinition:
    """Complete definition of a memory tool."""
    name: str
    description: str
    parameters: List[ToolParameter] = field(default_factory=list)


class MemoryServerError(Exception):
    """Base exception for memory server errors."""
    def __init__(self, message: str, tool_name: str = None, details: Dict = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(MemoryServerError):
    """Raised when tool input validation fails."""
    pass


class UnknownOperation(MemoryServerError):
    """Raised when a tools/call names a tool that is not registered."""
    pass


class UnknownMethod(MemoryServerError):
    """Raised when a request names a protocol method that is not handled."""
    pass


class EnvelopeError(MemoryServerError):
    """Raised when a request envelope cannot be decoded."""
    pass


def _matches_type(value: Any, json_type: str) -> bool:
    # bool is an int subclass but never a JSON number
    if json_type == "string":
        return isinstance(value, str)
    if json_type in ("number", "integer"):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return json_type == "number" or isinstance(value, int) or float(value).is_integer()
    if json_type == "boolean":
        return isinstance(value, bool)
    if json_type == "array":
        return isinstance(value, list)
    if json_type == "object":
        return isinstance(value, dict)
    return True


class MemoryTool(ABC):
    """
    Abstract base class for memory tools.

    Every tool is bound to the store it operates on and to an event sink.
    Subclasses implement:
    - name: Tool identifier
    - description: What the tool does
    - parameters: List of ToolParameter definitions
    - execute(): The actual tool logic, returning the result text
    """

    def __init__(self, store: MemoryStore, events: EventSink = None):
        self.store = store
        self.events = events or NullEventSink()

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for the tool."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        pass

    @property
    def parameters(self) -> List[ToolParameter]:
        """List of parameters the tool accepts."""
        return []

    def validate(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate input parameters.
        Returns validated/normalized parameters; arguments not declared by
        the tool are dropped.
        Raises ValidationError if validation fails.
        """
        validated = {}

        for param in self.parameters:
            value = arguments.get(param.name)

            if value is None:
                if param.required:
                    raise ValidationError(
                        f"Missing required parameter: {param.name}",
                        tool_name=self.name
                    )
                validated[param.name] = param.default
                continue

            if not _matches_type(value, param.type):
                raise ValidationError(
                    f"Parameter '{param.name}' must be of type {param.type}",
                    tool_name=self.name,
                    details={"received": type(value).__name__}
                )

            if param.type == "array" and param.items_type:
                for item in value:
                    if not _matches_type(item, param.items_type):
                        raise ValidationError(
                            f"Parameter '{param.name}' must be an array of {param.items_type}",
                            tool_name=self.name
                        )

            validated[param.name] = value

        return validated

    @abstractmethod
    async def execute(self, **kwargs) -> str:
        """
        Execute the tool with validated parameters.
        Returns the human-readable result text.
        """
        pass

    async def run(self, arguments: Dict[str, Any]) -> str:
        """
        Public entry point: validate and execute.
        Faults propagate to the caller unchanged.
        """
        validated = self.validate(arguments)
        return await self.execute(**validated)

    def to_definition(self) -> ToolDefinition:
        """Convert tool to ToolDefinition for the registry."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters
        )

    def input_schema(self) -> Dict[str, Any]:
        """JSON-schema-like description of the tool's arguments."""
        properties: Dict[str, Dict] = {}
        required: List[str] = []

        for param in self.parameters:
            prop: Dict[str, Any] = {"type": param.type}
            if param.type == "array":
                prop["items"] = {"type": param.items_type or "string"}
            prop["description"] = param.description
            properties[param.name] = prop

            if param.required:
                required.append(param.name)

        schema: Dict[str, Any] = {"type": "object", "properties": properties}
        # required is omitted when empty
        if required:
            schema["required"] = required
        return schema
