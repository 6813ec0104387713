"""Application layer - Constructor signature deduction."""

import inspect
import logging
import types
import typing
from typing import Any, Callable, Dict, List, Optional, Tuple, Union, get_type_hints

from scopewire.domain import ConstructorParameter, ConstructorSignature, ISignatureDeducer

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Split ``Optional[X]`` (or ``X | None``) into ``(X, True)``; other annotations pass through."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1 and len(members) < len(typing.get_args(annotation)):
            return members[0], True
    return annotation, False


class ConstructorCandidate:
    """One constructor overload seen as the range of arities it accepts.

    Attributes:
        function: The ``__init__`` implementation or overload stub, or None for the
            implicit constructor inherited from ``object``.
        positional: Positional parameters in declaration order.
        required_keywords: Keyword-only parameters without defaults.
        var_positional: The ``*args`` parameter, if declared.
        minimum: Smallest accepted arity.
        maximum: Largest accepted arity, or None when ``*args`` makes it unbounded.
    """

    def __init__(self, function: Optional[Callable[..., Any]]) -> None:
        self.function = function
        self.positional: List[inspect.Parameter] = []
        self.required_keywords: List[inspect.Parameter] = []
        self.var_positional: Optional[inspect.Parameter] = None

        if function is not None:
            parameters = list(inspect.signature(function).parameters.values())[1:]
            for parameter in parameters:
                if parameter.kind in _POSITIONAL_KINDS:
                    self.positional.append(parameter)
                elif parameter.kind == inspect.Parameter.VAR_POSITIONAL:
                    self.var_positional = parameter
                elif parameter.kind == inspect.Parameter.KEYWORD_ONLY and parameter.default is inspect.Parameter.empty:
                    self.required_keywords.append(parameter)

        required_positional = sum(1 for p in self.positional if p.default is inspect.Parameter.empty)
        self.minimum = len(self.required_keywords) + required_positional
        self.maximum: Optional[int] = None
        if self.var_positional is None:
            self.maximum = len(self.required_keywords) + len(self.positional)

    def accepts(self, arity: int) -> bool:
        return self.minimum <= arity and (self.maximum is None or arity <= self.maximum)

    def exhausted_below(self, arity: int) -> bool:
        return self.maximum is not None and self.maximum < arity

    def signature_at(self, dependency_type: Any, arity: int) -> Optional[ConstructorSignature]:
        """Parameter list used when this candidate is called with ``arity`` arguments.

        Returns None when a selected parameter has no usable type hint.
        """
        if self.function is None:
            return ConstructorSignature(dependency_type=dependency_type)

        try:
            hints = get_type_hints(self.function)
        except (NameError, TypeError) as e:
            logger.debug("Type hints of %s.__init__ cannot be evaluated: %s", dependency_type, e)
            return None

        slots = arity - len(self.required_keywords)
        selected: List[Tuple[str, inspect.Parameter, bool]] = [(p.name, p, False) for p in self.positional[:slots]]
        if self.var_positional is not None:
            for index in range(slots - len(self.positional)):
                selected.append((f"{self.var_positional.name}[{index}]", self.var_positional, False))
        selected.extend((p.name, p, True) for p in self.required_keywords)

        parameters = []
        for name, parameter, keyword_only in selected:
            if parameter.name not in hints:
                logger.debug("Parameter '%s' of %s lacks a type hint", parameter.name, dependency_type)
                return None
            annotation, optional = unwrap_optional(hints[parameter.name])
            parameters.append(
                ConstructorParameter(name=name, annotation=annotation, optional=optional, keyword_only=keyword_only)
            )
        return ConstructorSignature(dependency_type=dependency_type, parameters=tuple(parameters))


class SignatureDeducer(ISignatureDeducer):
    """Deduces constructor parameter lists from ``__init__`` overloads and type hints.

    Every ``typing.overload`` of ``__init__`` (or the implementation itself when no
    overloads are declared) is a candidate. Arities are probed in increasing order
    and the first arity accepted by exactly one candidate selects the constructor;
    arities matched by several candidates are ambiguous and skipped.

    Attributes:
        _max_parameter_count: Arities from 0 up to this bound (exclusive) are probed.
        _cache: Successfully deduced signatures per type. Failures are not cached,
            so a type whose hints name a class defined later can still be deduced.
    """

    def __init__(self, max_parameter_count: int = 100) -> None:
        self._max_parameter_count = max_parameter_count
        self._cache: Dict[Any, ConstructorSignature] = {}

    def candidates(self, dependency_type: Any) -> List[ConstructorCandidate]:
        """Constructor candidates of a class; empty when it offers none that can be inspected.

        Classes whose metaclass overrides ``__call__`` (such as ``Enum`` subclasses)
        are not built through ``__init__`` and have no candidates.
        """
        if type(dependency_type).__call__ is not type.__call__:
            return []

        init = dependency_type.__init__
        if init is object.__init__:
            if dependency_type.__new__ is object.__new__:
                return [ConstructorCandidate(None)]
            return []

        if not inspect.isfunction(init):
            return []

        functions = typing.get_overloads(init) or [init]
        try:
            return [ConstructorCandidate(function) for function in functions]
        except (TypeError, ValueError) as e:
            logger.debug("Constructor of %s cannot be introspected: %s", dependency_type, e)
            return []

    def deduce(self, dependency_type: Any) -> Optional[ConstructorSignature]:
        """Return the parameter list of the shortest unambiguous constructor.

        Args:
            dependency_type: The class to inspect.

        Returns:
            The deduced signature, or None when no arity below the configured
            maximum selects exactly one constructor, or the selected one is not
            fully annotated.

        Example:
            >>> class Service:
            ...     def __init__(self, repo: Repository, clock: Clock): ...
            >>> SignatureDeducer().deduce(Service).parameter_types
            (Repository, Clock)
        """
        if not inspect.isclass(dependency_type):
            return None
        signature = self._cache.get(dependency_type)
        if signature is None:
            signature = self._deduce(dependency_type)
            if signature is not None:
                self._cache[dependency_type] = signature
        return signature

    def _deduce(self, dependency_type: type) -> Optional[ConstructorSignature]:
        candidates = self.candidates(dependency_type)

        for arity in range(self._max_parameter_count):
            if all(candidate.exhausted_below(arity) for candidate in candidates):
                break

            matching = [candidate for candidate in candidates if candidate.accepts(arity)]
            if len(matching) == 1:
                signature = matching[0].signature_at(dependency_type, arity)
                logger.debug("Deduced constructor of %s at arity %d: %s", dependency_type.__name__, arity, signature)
                return signature
            if len(matching) > 1:
                logger.debug("Arity %d of %s is ambiguous, probing further", arity, dependency_type.__name__)

        logger.debug("No unambiguous constructor found for %s", dependency_type.__name__)
        return None

    def is_default_constructible(self, dependency_type: Any) -> bool:
        """Whether some constructor of the class accepts no arguments."""
        if not inspect.isclass(dependency_type):
            return False
        return any(candidate.accepts(0) for candidate in self.candidates(dependency_type))
