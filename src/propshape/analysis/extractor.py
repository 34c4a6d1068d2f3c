"""Locate the props type of a classified component."""
from __future__ import annotations

from typing import Optional

from ..config import Settings
from ..facade.base import Declaration, TypeNode
from ..models.records import Classification
from .classifier import forward_ref_call, function_parameters

FORWARD_REF_PROPS_INDEX = 1  # forwardRef<RefType, Props>


def extract_props_type(
    declaration: Declaration,
    classification: Classification,
    settings: Optional[Settings] = None,
) -> Optional[TypeNode]:
    settings = settings or Settings()
    if classification is Classification.FORWARD_REF_COMPONENT:
        call = forward_ref_call(declaration)
        if call is None:
            return None
        arguments = call.type_arguments()
        if len(arguments) <= FORWARD_REF_PROPS_INDEX:
            return None
        return arguments[FORWARD_REF_PROPS_INDEX]

    if classification is Classification.DIRECT_COMPONENT:
        params = function_parameters(declaration)
        if params:
            return params[0].type
        if settings.class_props_from_heritage:
            heritage = declaration.heritage_type_arguments()
            return heritage[0] if heritage else None
    return None
