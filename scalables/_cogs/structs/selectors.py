"""
Label selectors as used in the workloads' ``spec.selector``.

The structured selectors (``matchLabels`` & ``matchExpressions``) are rendered
into the textual form accepted by the API's ``?labelSelector=...`` parameter.
The rendering is canonical: the requirements are sorted by their keys,
the values of set-based requirements are sorted too, so that the same selector
always gives the same string regardless of the order in the workload's body.
"""
from typing import Any, Collection, List, Mapping, Optional, Tuple

from typing_extensions import TypedDict


class RawLabelSelectorRequirement(TypedDict, total=False):
    key: str
    operator: str  # In, NotIn, Exists, DoesNotExist
    values: Collection[str]


class RawLabelSelector(TypedDict, total=False):
    matchLabels: Mapping[str, str]
    matchExpressions: Collection[RawLabelSelectorRequirement]


def format_label_selector(selector: Optional[Mapping[str, Any]]) -> str:
    """
    Render a structured label selector as a string.

    An empty or absent selector renders to an empty string, i.e. no filtering.
    """
    selector = selector or {}
    labels: Mapping[str, str] = selector.get('matchLabels') or {}
    exprs: Collection[RawLabelSelectorRequirement] = selector.get('matchExpressions') or []

    requirements: List[Tuple[str, str]] = []
    for key, value in labels.items():
        requirements.append((key, f'{key}={value}'))
    for expr in exprs:
        requirements.append((expr['key'], format_requirement(expr)))
    return ','.join(text for _, text in sorted(requirements, key=lambda pair: pair[0]))


def format_requirement(expr: RawLabelSelectorRequirement) -> str:
    key = expr['key']
    operator = expr.get('operator', '')
    values = sorted(expr.get('values', None) or [])
    match operator.lower():
        case 'in':
            return f'{key} in ({",".join(values)})'
        case 'notin':
            return f'{key} notin ({",".join(values)})'
        case 'exists':
            return key
        case 'doesnotexist':
            return f'!{key}'
        case _:
            raise ValueError(f"Unsupported label selector operator: {operator!r}")
