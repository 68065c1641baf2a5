"""
Check Type Catalog - Declarative rules per check type.

Each definition lists:
- Visible form sections
- Relevant / hidden tasks (hidden wins on overlap)
- Default (pre-selected) tasks
- Required tasks and details
- Soft confirm-or-abort policies

Built-in definitions can be replaced by a JSON file (CHECK_TYPES_PATH)
so new check types ship without a code deploy.
"""

import json
from pathlib import Path
from typing import Optional

from app.config import settings
from app.logger import logger
from app.services.checks.errors import ConfigurationError, UnknownCheckType
from app.services.checks.models import CheckTypeDefinition, SoftPolicy


# Task -> category, used to decide which task groups a form shows
TASK_CATEGORIES = {
    "idv": "identity",
    "likeness": "identity",
    "document-verification": "identity",
    "aml-screen": "screening",
    "lite-screen": "screening",
    "enhanced-screen": "screening",
    "address-check": "address",
    "address-history": "address",
    "sof": "funds",
    "sow": "funds",
    "bank-linking": "funds",
    "kyb": "business",
    "ubo": "business",
    "business-screen": "business",
}

# Provider report type -> form tasks that request it
REPORT_SOURCES = {
    "identity": frozenset({"idv"}),
    "nfc": frozenset({"idv"}),
    "liveness": frozenset({"likeness"}),
    "facial_similarity": frozenset({"likeness"}),
    "document": frozenset({"document-verification"}),
    "peps": frozenset({"aml-screen", "lite-screen", "enhanced-screen"}),
    "sanctions": frozenset({"aml-screen", "enhanced-screen"}),
    "address": frozenset({"address-check", "address-history"}),
    "footprint": frozenset({"address-check", "address-history"}),
    "sof": frozenset({"sof"}),
    "sow": frozenset({"sow"}),
    "bank": frozenset({"bank-linking"}),
    "company": frozenset({"kyb"}),
    "company:ubo": frozenset({"ubo"}),
    "company:peps": frozenset({"business-screen"}),
    "company:sanctions": frozenset({"business-screen"}),
}

SOF_CONVEYANCING = SoftPolicy(
    task="sof",
    matter_category="conveyancing",
    reason="Conveyancing matters typically require Source of Funds verification. Continue without it?",
)


BUILTIN_CHECK_TYPES = [
    CheckTypeDefinition(
        id="electronic-id",
        label="Electronic ID Check",
        visible_sections=frozenset({"client_details", "address_details"}),
        relevant_tasks=frozenset({
            "idv", "likeness", "document-verification", "aml-screen", "lite-screen",
            "enhanced-screen", "address-check", "address-history", "sof", "sow", "bank-linking",
        }),
        hidden_tasks=frozenset({"kyb", "ubo", "business-screen"}),
        default_tasks=frozenset({
            "idv", "likeness", "document-verification", "aml-screen",
            "address-check", "address-history", "sof", "bank-linking",
        }),
        required_tasks=frozenset({"idv", "document-verification", "aml-screen"}),
        soft_policies=(SOF_CONVEYANCING,),
    ),
    CheckTypeDefinition(
        id="idv-lite",
        label="IDV & Lite Screen",
        visible_sections=frozenset({"client_details", "address_details"}),
        relevant_tasks=frozenset({
            "idv", "likeness", "document-verification", "aml-screen", "lite-screen",
            "address-check", "address-history",
        }),
        hidden_tasks=frozenset({"kyb", "ubo", "business-screen", "enhanced-screen"}),
        default_tasks=frozenset({"idv", "likeness", "document-verification", "lite-screen", "address-check"}),
        required_tasks=frozenset({"idv", "lite-screen"}),
    ),
    CheckTypeDefinition(
        id="kyb",
        label="Know Your Business",
        visible_sections=frozenset({"business_details", "client_details", "address_details"}),
        relevant_tasks=frozenset({
            "idv", "likeness", "document-verification", "aml-screen", "enhanced-screen",
            "address-check", "kyb", "ubo", "business-screen", "sof", "sow",
        }),
        default_tasks=frozenset({
            "kyb", "ubo", "business-screen", "idv", "document-verification", "aml-screen", "address-check",
        }),
        required_tasks=frozenset({"kyb", "ubo", "business-screen"}),
        required_details=frozenset({"business_name", "entity_number"}),
        soft_policies=(
            SoftPolicy(
                task="idv",
                reason="UBO verification typically requires Identity Verification of individuals. Continue without it?",
            ),
        ),
    ),
]


LIST_FIELDS = (
    "visible_sections",
    "relevant_tasks",
    "hidden_tasks",
    "default_tasks",
    "required_tasks",
    "required_details",
    "soft_policies",
)


def definition_from_dict(raw: dict) -> CheckTypeDefinition:
    """Build a definition from its JSON form."""
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Malformed check type definition: expected an object, got {type(raw).__name__}")
    for name in LIST_FIELDS:
        if not isinstance(raw.get(name, []), list):
            raise ConfigurationError(
                f"{raw.get('id', '?')}: {name} must be a list, got {type(raw[name]).__name__}"
            )
    try:
        return CheckTypeDefinition(
            id=raw["id"],
            label=raw.get("label", raw["id"]),
            visible_sections=frozenset(raw.get("visible_sections", [])),
            relevant_tasks=frozenset(raw.get("relevant_tasks", [])),
            hidden_tasks=frozenset(raw.get("hidden_tasks", [])),
            default_tasks=frozenset(raw.get("default_tasks", [])),
            required_tasks=frozenset(raw.get("required_tasks", [])),
            required_details=frozenset(raw.get("required_details", [])),
            soft_policies=tuple(
                SoftPolicy(
                    task=p["task"],
                    reason=p["reason"],
                    matter_category=p.get("matter_category"),
                )
                for p in raw.get("soft_policies", [])
            ),
        )
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Malformed check type definition: {e}") from e


def validate_definition(definition: CheckTypeDefinition):
    """Ensure default and required tasks are drawn from the relevant set."""
    stray_defaults = definition.default_tasks - definition.relevant_tasks
    if stray_defaults:
        raise ConfigurationError(
            f"{definition.id}: default tasks not relevant: {', '.join(sorted(stray_defaults))}"
        )
    stray_required = definition.required_tasks - definition.relevant_tasks
    if stray_required:
        raise ConfigurationError(
            f"{definition.id}: required tasks not relevant: {', '.join(sorted(stray_required))}"
        )


class CheckTypeCatalog:
    """Registry of check type definitions."""

    def __init__(
        self,
        definitions: Optional[list[CheckTypeDefinition]] = None,
        path: Optional[str] = None,
    ):
        self.path = path
        self._definitions: dict[str, CheckTypeDefinition] = {}
        if definitions is not None:
            self._install(definitions)
        else:
            self.reload()

    def reload(self):
        """(Re)load definitions from the configured file, or the built-ins."""
        if self.path:
            definitions = self._read_file(Path(self.path))
            logger.info(f"Loaded {len(definitions)} check types from {self.path}")
        else:
            definitions = BUILTIN_CHECK_TYPES
        self._install(definitions)

    def _install(self, definitions: list[CheckTypeDefinition]):
        loaded = {}
        for definition in definitions:
            validate_definition(definition)
            if definition.id in loaded:
                raise ConfigurationError(f"Duplicate check type: {definition.id}")
            loaded[definition.id] = definition
        self._definitions = loaded

    def _read_file(self, path: Path) -> list[CheckTypeDefinition]:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read check types from {path}: {e}") from e

        entries = raw.get("check_types", []) if isinstance(raw, dict) else raw
        if not isinstance(entries, list):
            raise ConfigurationError(f"{path}: expected a list of check types")
        return [definition_from_dict(entry) for entry in entries]

    def lookup(self, type_id: str) -> CheckTypeDefinition:
        """Get a definition by id.

        Raises:
            UnknownCheckType: if no definition is registered under type_id
        """
        definition = self._definitions.get(type_id)
        if definition is None:
            logger.error(f"Unknown check type requested: {type_id}")
            raise UnknownCheckType(type_id)
        return definition

    def all(self) -> list[CheckTypeDefinition]:
        return list(self._definitions.values())

    def ids(self) -> list[str]:
        return list(self._definitions)

    def visible_tasks(self, type_id: str) -> frozenset[str]:
        return self.lookup(type_id).visible_tasks

    def visible_categories(self, type_id: str) -> list[str]:
        """Task categories with at least one visible task, in declaration order."""
        visible = self.visible_tasks(type_id)
        categories = []
        for task, category in TASK_CATEGORIES.items():
            if task in visible and category not in categories:
                categories.append(category)
        return categories


# Global catalog instance
_catalog: CheckTypeCatalog | None = None


def get_catalog() -> CheckTypeCatalog:
    """Get global catalog instance (singleton)."""
    global _catalog
    if _catalog is None:
        _catalog = CheckTypeCatalog(path=settings.CHECK_TYPES_PATH or None)
    return _catalog
