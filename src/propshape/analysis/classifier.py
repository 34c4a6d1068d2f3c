"""Decide which exported declarations are UI components."""
from __future__ import annotations

import logging
from typing import List, Optional

from ..config import Settings
from ..facade.base import Declaration, DeclarationKind, ExpressionNode, Parameter
from ..models.records import Classification

logger = logging.getLogger(__name__)


def classify(declaration: Declaration, settings: Optional[Settings] = None) -> Classification:
    """Classify a declaration; facade failures mean "not a component"."""
    settings = settings or Settings()
    try:
        if is_forward_ref(declaration, settings):
            return Classification.FORWARD_REF_COMPONENT
        if is_direct_component(declaration):
            return Classification.DIRECT_COMPONENT
    except Exception as exc:  # facade queries may fail on odd syntax
        logger.debug("Classification of %s failed: %s", declaration.name, exc)
    return Classification.NOT_A_COMPONENT


def is_forward_ref(declaration: Declaration, settings: Settings) -> bool:
    call = forward_ref_call(declaration)
    if call is None:
        return False
    callee = call.callee()
    if callee is None or not callee.text.endswith(settings.forward_ref_name):
        return False
    return callee.import_source() == settings.ui_module


def forward_ref_call(declaration: Declaration) -> Optional[ExpressionNode]:
    """The call expression a variable is initialized with, if any."""
    if declaration.kind is not DeclarationKind.VARIABLE:
        return None
    initializer = declaration.initializer()
    if initializer is None or not initializer.is_call:
        return None
    return initializer


def is_direct_component(declaration: Declaration) -> bool:
    if declaration.kind is DeclarationKind.CLASS:
        return True
    params = function_parameters(declaration)
    return bool(params) and params[0].type.is_object()


def function_parameters(declaration: Declaration) -> Optional[List[Parameter]]:
    """Parameters of a function, or of an arrow assigned to a variable."""
    if declaration.kind is DeclarationKind.FUNCTION:
        return declaration.parameters()
    if declaration.kind is DeclarationKind.VARIABLE:
        initializer = declaration.initializer()
        if initializer is not None and initializer.is_function_like:
            return initializer.parameters()
    return None
