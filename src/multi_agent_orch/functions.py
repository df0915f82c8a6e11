"""Function metadata consumed by the orchestrator.

Tool metadata is declared explicitly instead of being harvested from
signatures. Either decorate a function with ``agent_function`` and list its
parameters, or build a ``FunctionMetadata`` directly:

    >>> @agent_function(
    ...     "Look up the weather for a city.",
    ...     params=[FunctionParam("city", "string", description="City name")],
    ... )
    ... def get_weather(city):
    ...     return f"Sunny in {city}"

Methods on a ``FunctionSet`` subclass are bound to the instance when it is
created, so they can be registered on an agent directly.
"""

import inspect
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

# Parameters with this type tag receive the run's context variables.
CONTEXT_VARIABLES_TYPE = "ContextVariables"

METADATA_ATTRIBUTE = "function_metadata"


@dataclass(frozen=True)
class FunctionParam:
    """Descriptor for a single tool parameter."""

    name: str
    type: str = "string"
    optional: bool = False
    description: Optional[str] = None

    @property
    def is_context(self) -> bool:
        return self.type == CONTEXT_VARIABLES_TYPE


@dataclass(frozen=True)
class FunctionMetadata:
    """Name, parameters and invocation handle of a registered tool.

    Instances are callable and forward to ``func``, so they can be put on an
    agent's function list as-is.
    """

    name: str
    func: Callable[..., Any]
    description: Optional[str] = None
    params: Tuple[FunctionParam, ...] = field(default_factory=tuple)
    return_type: str = "string"

    def __post_init__(self):
        if not callable(self.func):
            raise TypeError(f"FunctionMetadata.func must be callable, got {self.func!r}")
        object.__setattr__(self, "params", tuple(_coerce_param(p) for p in self.params))

    def __call__(self, *args, **kwargs):
        return self.func(*args, **kwargs)

    @property
    def context_param(self) -> Optional[FunctionParam]:
        """The parameter that receives context variables, if declared."""
        for param in self.params:
            if param.is_context:
                return param
        return None

    def to_tool_schema(self) -> Dict[str, Any]:
        """Render the outward-facing tool schema.

        The context parameter is hidden from the model; type tags are copied
        verbatim.
        """
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for param in self.params:
            if param.is_context:
                continue
            prop = {"type": param.type}
            if param.description:
                prop["description"] = param.description
            properties[param.name] = prop
            if not param.optional:
                required.append(param.name)

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description or f"function: {self.name}",
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": required,
                },
            },
        }


ParamDescriptor = Union[FunctionParam, str, Tuple[Any, ...], Dict[str, Any]]


def _coerce_param(descriptor: ParamDescriptor) -> FunctionParam:
    """Accept FunctionParam, a bare name, a tuple or a dict."""
    if isinstance(descriptor, FunctionParam):
        return descriptor
    if isinstance(descriptor, str):
        return FunctionParam(descriptor)
    if isinstance(descriptor, tuple):
        return FunctionParam(*descriptor)
    if isinstance(descriptor, dict):
        return FunctionParam(**descriptor)
    raise TypeError(f"Invalid parameter descriptor: {descriptor!r}")


def agent_function(
    description: Optional[str] = None,
    *,
    name: Optional[str] = None,
    params: Sequence[ParamDescriptor] = (),
    return_type: str = "string",
):
    """Attach explicit tool metadata to a function.

    Args:
        description: Human-readable description sent to the model
        name: Tool name (defaults to the function's ``__name__``)
        params: Parameter descriptors in call order
        return_type: Declared return type tag

    Returns:
        Decorator returning the original function with a
        ``function_metadata`` attribute.
    """

    def decorator(func):
        metadata = FunctionMetadata(
            name=name or func.__name__,
            func=func,
            description=description,
            params=tuple(params),
            return_type=return_type,
        )
        setattr(func, METADATA_ATTRIBUTE, metadata)
        return func

    return decorator


def resolve_function_metadata(handle: Any) -> Optional[FunctionMetadata]:
    """Return the metadata for a registered handle, or None if it has none.

    Bound methods of decorated functions get metadata whose ``func`` is the
    bound method, so ``self`` is supplied on invocation.
    """
    if isinstance(handle, FunctionMetadata):
        return handle

    metadata = getattr(handle, METADATA_ATTRIBUTE, None)
    if not isinstance(metadata, FunctionMetadata):
        return None

    if inspect.ismethod(handle) and metadata.func is handle.__func__:
        return replace(metadata, func=handle)
    return metadata


class FunctionSet:
    """Groups decorated methods and binds them to the instance.

    Example:
        >>> class Transfers(FunctionSet):
        ...     def __init__(self, target):
        ...         self.target = target
        ...         super().__init__()
        ...
        ...     @agent_function("Hand the user over to the target agent.")
        ...     def transfer(self):
        ...         return self.target
    """

    def __init__(self):
        self.functions: List[FunctionMetadata] = []
        for attr_name in dir(type(self)):
            if attr_name.startswith("__"):
                continue
            member = getattr(self, attr_name, None)
            if not inspect.ismethod(member):
                continue
            metadata = resolve_function_metadata(member)
            if metadata is not None:
                self.functions.append(metadata)

    def get_function_by_name(self, name: str) -> Optional[FunctionMetadata]:
        for metadata in self.functions:
            if metadata.name == name:
                return metadata
        return None

    def __iter__(self) -> Iterator[FunctionMetadata]:
        return iter(self.functions)
