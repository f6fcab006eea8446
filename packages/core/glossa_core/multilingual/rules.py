"""
Validation rule projection.

The owner's field rules come from a pydantic schema: a field without a
default carries a ``required`` rule, and each constraint in its metadata
(``MaxLen``, ``MinLen``, ``Gt``, pattern, ...) is one more rule. Rules on
translatable fields are copied to every ``<field>_<language>`` attribute.
A ``required`` rule is only copied when overwrite is forced; otherwise the
virtual attribute gets a ``safe`` rule so a missing translation never
blocks saving.
"""

import types
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Optional, Union, get_args, get_origin

from pydantic import BaseModel, create_model

from .names import NameScheme, snake_case

REQUIRED = "required"
SAFE = "safe"
TYPE = "type"


@dataclass(frozen=True)
class Rule:
    """
    One field-level rule.

    Attributes:
        attribute: Attribute the rule applies to.
        kind: ``required``, ``safe``, ``type`` or the constraint name (``max_len``).
        param: Constraint object, or the annotation for ``type`` rules.
    """

    attribute: str
    kind: str
    param: Any = None

    def on(self, attribute: str) -> "Rule":
        """Same rule bound to another attribute."""
        return Rule(attribute, self.kind, self.param)


def _constraint_kind(constraint: Any) -> str:
    return snake_case(type(constraint).__name__.lstrip("_"))


def _strip_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
        return Union[tuple(args)]
    return annotation


def collect_rules(schema: type[BaseModel]) -> list[Rule]:
    """Enumerate the field-level rules declared on ``schema``."""
    rules: list[Rule] = []
    for name, info in schema.model_fields.items():
        rules.append(Rule(name, TYPE, info.annotation))
        if info.is_required():
            rules.append(Rule(name, REQUIRED))
        rules.extend(Rule(name, _constraint_kind(m), m) for m in info.metadata)
    return rules


class RuleProjector:
    """Projects owner rules onto per-language virtual attributes."""

    def __init__(self, names: NameScheme) -> None:
        self.names = names

    def project(
        self,
        rules: Sequence[Rule],
        languages: Iterable[str],
        fields: Iterable[str],
        force_overwrite: bool,
    ) -> list[Rule]:
        """
        Derive virtual attribute rules.

        Args:
            rules: Rules configured on the owner.
            languages: Configured language codes.
            fields: Translatable field names.
            force_overwrite: Keep ``required`` rules instead of degrading them.

        Returns:
            Rules registered against ``<field>_<language>`` names.
        """
        fields = list(fields)
        projected: list[Rule] = []
        for language in languages:
            for field in fields:
                virtual = self.names.virtual_attr(field, language)
                for rule in rules:
                    if rule.attribute != field:
                        continue
                    if rule.kind != REQUIRED or force_overwrite:
                        projected.append(rule.on(virtual))
                    else:
                        projected.append(Rule(virtual, SAFE))
        return projected

    def build_validator(
        self, schema: type[BaseModel], projected: Sequence[Rule]
    ) -> type[BaseModel]:
        """
        Extend ``schema`` with one field per virtual attribute.

        Args:
            schema: Owner rules schema.
            projected: Output of ``project``.

        Returns:
            Pydantic model validating owner fields and translations together.
        """
        grouped: dict[str, list[Rule]] = {}
        for rule in projected:
            grouped.setdefault(rule.attribute, []).append(rule)

        definitions: dict[str, Any] = {}
        for attribute, attr_rules in grouped.items():
            base: Any = Any
            constraints: list[Any] = []
            required = False
            for rule in attr_rules:
                if rule.kind == TYPE:
                    base = _strip_optional(rule.param)
                elif rule.kind == REQUIRED:
                    required = True
                elif rule.kind != SAFE:
                    constraints.append(rule.param)

            annotation = Annotated[(base, *constraints)] if constraints else base
            if required:
                definitions[attribute] = (annotation, ...)
            else:
                definitions[attribute] = (Optional[annotation], None)

        return create_model(f"{schema.__name__}Translations", __base__=schema, **definitions)
