"""
Response header boundary for Armor.

Armor never owns a response. The hosting framework hands over something
that can set and delete headers, and Armor applies mutations to it.

Two shapes are supported:
    - Any object implementing HeaderTarget (set_header/delete_header)
    - Any mutable header mapping (dict, starlette MutableHeaders, ...),
      wrapped in MappingHeaderTarget
"""

from collections.abc import Iterable, MutableMapping
from typing import Any, Protocol, runtime_checkable

from armor.schema import HeaderMutation, MutationAction


@runtime_checkable
class HeaderTarget(Protocol):
    """The two capabilities Armor needs from a response."""

    def set_header(self, name: str, value: str) -> None: ...

    def delete_header(self, name: str) -> None: ...


class MappingHeaderTarget:
    """
    Adapt a mutable header mapping to HeaderTarget.

    Header names match case-insensitively even on a plain dict: setting a
    header replaces every differently-cased copy of it, and deleting removes
    them all. Deleting a header that isn't present is a no-op.
    """

    def __init__(self, headers: MutableMapping[str, str] | Any) -> None:
        self.headers = headers

    def set_header(self, name: str, value: str) -> None:
        self.delete_header(name)
        self.headers[name] = value

    def delete_header(self, name: str) -> None:
        for key in self._matching_keys(name):
            if key in self.headers:
                del self.headers[key]

    def _matching_keys(self, name: str) -> list[str]:
        lowered = name.lower()
        return [key for key in list(self.headers) if key.lower() == lowered]


def as_target(target: HeaderTarget | MutableMapping[str, str] | Any) -> HeaderTarget:
    """Return target unchanged if it is a HeaderTarget, else wrap it as a mapping."""
    if isinstance(target, HeaderTarget):
        return target
    return MappingHeaderTarget(target)


def apply_mutations(
    mutations: Iterable[HeaderMutation],
    target: HeaderTarget | MutableMapping[str, str] | Any,
) -> list[HeaderMutation]:
    """
    Apply mutations to a response in sequence order.

    Args:
        mutations: Output of PolicyEngine.derive()
        target: A HeaderTarget or a mutable header mapping

    Returns:
        The mutations that were applied
    """
    sink = as_target(target)
    applied = []
    for mutation in mutations:
        if mutation.action == MutationAction.SET:
            sink.set_header(mutation.name, mutation.value or "")
        else:
            sink.delete_header(mutation.name)
        applied.append(mutation)
    return applied
