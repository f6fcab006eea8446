"""
Translation synchronization engine.

Attach ``Multilingual`` to a mapped model to store its translatable fields
in a per-language shadow table.
"""

from .behavior import Multilingual
from .bridge import PropertyBridge, TranslatableMixin
from .names import NameScheme
from .relations import RelationRegistrar
from .rules import Rule, RuleProjector, collect_rules
from .shadow import ensure_shadow_model
from .store import AttributeStore
from .sync import TranslationSync

__all__ = [
    "Multilingual",
    "TranslatableMixin",
    "PropertyBridge",
    "AttributeStore",
    "NameScheme",
    "RelationRegistrar",
    "Rule",
    "RuleProjector",
    "collect_rules",
    "ensure_shadow_model",
    "TranslationSync",
]
