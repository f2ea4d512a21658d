"""Liaison des paramètres déclarés avec les valeurs fournies par l'appelant."""

from typing import Dict, Iterable, Mapping

from ..models.query import Parameter


def bind_parameters(parameters: Iterable[Parameter], supplied: Mapping[str, str]) -> Dict[str, str]:
    """Build the render context for a templated query.

    Only declared parameters end up in the result: a value supplied under a
    name that is not declared is dropped. A declared parameter takes the
    supplied value when present (even if empty), its default otherwise, and
    an empty string when it has no default. Never raises.
    """
    bound: Dict[str, str] = {}
    for parameter in parameters:
        name = parameter.machine_name
        if name in supplied:
            value = supplied[name]
        else:
            value = parameter.default_value
        bound[name] = "" if value is None else str(value)
    return bound
