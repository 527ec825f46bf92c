"""Persistence module for saving and loading a parsed VCD header as YAML."""

import yaml
import pathlib
from typing import Dict, Any, Optional
from .config import EXPORT
from .data_model import (
    Header, Scope, ScopeItem, ScopeType, Variable, VarType, IdentifierCode,
    Timescale, TimescaleUnit
)


def _serialize_item(item: ScopeItem) -> Dict[str, Any]:
    """Serialize a Variable or a Scope to a dictionary, handling nested children."""
    if isinstance(item, Variable):
        return {
            'var': {
                'type': item.var_type.value,
                'size': item.size,
                'code': item.code.text,
                'reference': item.reference,
            }
        }
    return {'scope': _serialize_scope(item)}


def _serialize_scope(scope: Scope) -> Dict[str, Any]:
    return {
        'type': scope.scope_type.value,
        'identifier': scope.identifier,
        'children': [_serialize_item(child) for child in scope.children],
    }


def _deserialize_scope(data: Dict[str, Any]) -> Scope:
    """Deserialize a dictionary to a Scope, handling nested children."""
    children: list[ScopeItem] = []
    for child_data in data.get('children', []):
        if 'var' in child_data:
            var_data = child_data['var']
            children.append(Variable(
                var_type=VarType(var_data['type']),
                size=var_data['size'],
                code=IdentifierCode(var_data['code']),
                reference=var_data['reference'],
            ))
        elif 'scope' in child_data:
            children.append(_deserialize_scope(child_data['scope']))
        else:
            raise ValueError(f"Unknown scope item: {sorted(child_data)}")
    return Scope(ScopeType(data['type']), data['identifier'], children)


def header_to_dict(header: Header) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        'comment': header.comment,
        'date': header.date,
        'version': header.version,
        'timescale': None,
        'scope': _serialize_scope(header.scope) if header.scope else None,
    }
    if header.timescale:
        data['timescale'] = {
            'magnitude': header.timescale.magnitude,
            'unit': header.timescale.unit.value
        }
    return data


def header_from_dict(data: Dict[str, Any]) -> Header:
    timescale: Optional[Timescale] = None
    timescale_data = data.get('timescale')
    if timescale_data:
        timescale = Timescale(
            magnitude=timescale_data['magnitude'],
            unit=TimescaleUnit(timescale_data['unit'])
        )

    scope_data = data.get('scope')
    return Header(
        comment=data.get('comment'),
        date=data.get('date'),
        version=data.get('version'),
        timescale=timescale,
        scope=_deserialize_scope(scope_data) if scope_data else None,
    )


def save_header(header: Header, path: pathlib.Path) -> None:
    """Serialize a header to YAML."""
    with open(path, 'w') as f:
        yaml.safe_dump(header_to_dict(header), f,
                       default_flow_style=EXPORT.DEFAULT_FLOW_STYLE,
                       sort_keys=EXPORT.SORT_KEYS,
                       indent=EXPORT.INDENT)


def load_header(path: pathlib.Path) -> Header:
    """Deserialize YAML written by ``save_header``."""
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a VCD header mapping")
    return header_from_dict(data)
