"""Exporter abstraction for design-token documents.

This module defines the abstract base class for exporters, the warning
records they emit, naming helpers shared by every output format, and a
registry/factory for accessing exporters by name.
"""

import importlib
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from rangde.core.log import get_logger
from rangde.model import AliasValue, CollectionNode, Variable, find_collection

logger = get_logger(__name__)

NAME_PREFIX_PATTERN = re.compile(r"^[🎨✦]+/?")

FALLBACK_COLOR = "#000000"


@dataclass
class ExportWarning:
    """Warning emitted when a value cannot be represented faithfully.

    Attributes:
        collection_id: Collection owning the affected variable.
        variable_id: Affected variable.
        mode_id: Mode of the affected value.
        message: Human-readable explanation.
    """

    collection_id: str
    variable_id: str
    mode_id: str
    message: str


@dataclass
class ExportResult:
    """Result of an export including the document and any warnings.

    Attributes:
        content: JSON-ready document.
        warnings: Values that were degraded during export.
        provider: Name of the exporter that produced this result.
    """

    content: Any
    warnings: list[ExportWarning] = field(default_factory=list)
    provider: str = ""

    @property
    def has_warnings(self) -> bool:
        """Check if any warnings were emitted."""
        return len(self.warnings) > 0


# =============================================================================
# Naming helpers
# =============================================================================


def strip_name_prefix(name: str) -> str:
    """Remove leading palette glyphs (🎨, ✦) and one following slash."""
    return NAME_PREFIX_PATTERN.sub("", name)


def slugify(text: str) -> str:
    """Lowercase `text` and reduce it to [a-z0-9-] with single dashes.

    Example:
        >>> slugify("Brand Theme")
        'brand-theme'
    """
    slug = re.sub(r"[^a-z0-9-]", "-", text.lower())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def variable_name_to_path(name: str) -> list[str]:
    """Split a variable name into slugged token path segments.

    Example:
        >>> variable_name_to_path("🎨/Blue 500/Light")
        ['blue', '500', 'light']
    """
    parts = [p for p in re.split(r"[/\s]+", strip_name_prefix(name)) if p]
    return [slug for slug in (slugify(p) for p in parts) if slug]


def token_reference(collection: CollectionNode, variable: Variable) -> str:
    """Reference string `{collection-slug.path.to.token}` for a variable."""
    path = ".".join(variable_name_to_path(variable.name))
    return f"{{{slugify(collection.name)}.{path}}}"


def resolve_alias(
    value: AliasValue,
    owner: CollectionNode,
    collections: list[CollectionNode],
) -> tuple[CollectionNode, Variable] | None:
    """Find the collection and variable an alias points at.

    Args:
        value: Alias to resolve.
        owner: Collection owning the aliasing variable.
        collections: Collections the alias may resolve into.

    Returns:
        (collection, variable), or None when either is missing.
    """
    collection = find_collection(collections, value.collection_id or owner.id)
    if collection is None:
        return None
    variable = collection.get_variable(value.variable_id)
    if variable is None:
        return None
    return collection, variable


def collect_modes(collections: list[CollectionNode]) -> dict[str, str]:
    """Distinct mode ids across collections, in first-seen order.

    Returns:
        dict: Mode id to mode name (the last name seen for an id).
    """
    modes: dict[str, str] = {}
    for collection in collections:
        for mode in collection.modes:
            modes[mode.id] = mode.name
    return modes


def insert_token(tree: dict, path: list[str], token: dict, marker: str) -> None:
    """Place `token` in a nested group tree at `path`.

    Intermediate groups are created as needed. A token and a group never
    share a path: whichever is inserted later replaces the other. `marker`
    is the key that identifies a token dict (e.g. "$type" or "value").
    """
    if not path:
        return

    group = tree
    for part in path[:-1]:
        child = group.get(part)
        if not isinstance(child, dict) or marker in child:
            child = {}
            group[part] = child
        group = child
    group[path[-1]] = token


def record_unresolved_alias(
    warnings: list[ExportWarning] | None,
    collection: CollectionNode,
    variable: Variable,
    mode_id: str,
    value: AliasValue,
) -> None:
    """Log an alias that could not be resolved and append an ExportWarning."""
    target = f"{value.collection_id or collection.id}:{value.variable_id}"
    message = f"Alias reference not found: {target}"
    logger.warning(
        f"{message} (variable {collection.id}:{variable.id}, mode {mode_id})"
    )
    if warnings is not None:
        warnings.append(
            ExportWarning(
                collection_id=collection.id,
                variable_id=variable.id,
                mode_id=mode_id,
                message=message,
            )
        )


# =============================================================================
# Exporter base class
# =============================================================================


class ExportProvider(ABC):
    """Abstract base class for token exporters.

    Each exporter turns a snapshot of collections into a JSON-ready document
    for one external tool (Figma, DTCG, Tokens Studio).

    Subclasses must implement:
        - name: Exporter identifier string
        - file_extension: Output file extension
        - default_filename: Suggested file name for a selection
        - export: Collections to document conversion

    Example:
        >>> class MyExporter(ExportProvider):
        ...     name = "mine"
        ...     file_extension = ".json"
        ...     def default_filename(self, collections):
        ...         return "mine.json"
        ...     def export(self, collections, **kwargs):
        ...         return {}
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Exporter identifier string."""
        ...

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Output file extension (e.g., '.json')."""
        ...

    @abstractmethod
    def default_filename(self, collections: list[CollectionNode]) -> str:
        """Suggested file name when exporting `collections`."""
        ...

    @abstractmethod
    def export(
        self,
        collections: list[CollectionNode],
        *,
        mode_id: str | None = None,
        all_collections: list[CollectionNode] | None = None,
        warnings: list[ExportWarning] | None = None,
    ) -> Any:
        """Export collections to a JSON-ready document.

        Args:
            collections: Collections to export, in output order.
            mode_id: Mode to export, for formats holding one mode at a time.
            all_collections: Collections aliases may resolve into. Defaults
                to `collections`.
            warnings: List that receives an ExportWarning per degraded value.

        Returns:
            JSON-ready document (dicts, lists and scalars only).
        """
        ...

    def export_all_modes(
        self,
        collections: list[CollectionNode],
        *,
        all_collections: list[CollectionNode] | None = None,
        warnings: list[ExportWarning] | None = None,
    ) -> dict[str, Any]:
        """Export every mode, keyed by file name.

        The default writes a single document under the default file name,
        which suits formats that already carry all modes.
        """
        content = self.export(
            collections, all_collections=all_collections, warnings=warnings
        )
        return {self.default_filename(collections): content}

    def export_with_warnings(
        self,
        collections: list[CollectionNode],
        *,
        mode_id: str | None = None,
        all_collections: list[CollectionNode] | None = None,
    ) -> ExportResult:
        """Export and collect warnings for degraded values.

        Returns:
            ExportResult with the document and its warnings.
        """
        warnings: list[ExportWarning] = []
        content = self.export(
            collections,
            mode_id=mode_id,
            all_collections=all_collections,
            warnings=warnings,
        )
        return ExportResult(content=content, warnings=warnings, provider=self.name)


# Exporter registry - populated by exporter modules on import
_registry: dict[str, type[ExportProvider]] = {}

_EXPORTER_MODULES = ("figma", "dtcg", "tokens_studio")


def register_exporter(exporter_cls: type[ExportProvider]) -> type[ExportProvider]:
    """Register an exporter class in the registry.

    Uses a temporary instance to retrieve the exporter name.

    Example:
        >>> @register_exporter
        ... class MyExporter(ExportProvider):
        ...     ...
    """
    _registry[exporter_cls().name] = exporter_cls
    return exporter_cls


def get_exporter(name: str) -> ExportProvider:
    """Get an exporter instance by name.

    Args:
        name: The exporter identifier (e.g., "figma", "dtcg").

    Returns:
        ExportProvider: An instance of the requested exporter.

    Raises:
        KeyError: If no exporter with the given name is registered.

    Example:
        >>> exporter = get_exporter("figma")
        >>> exporter.export(collections)
    """
    if name not in _registry:
        _import_exporters()
        if name not in _registry:
            available = ", ".join(_registry.keys()) or "(none)"
            raise KeyError(f"Unknown exporter '{name}'. Available: {available}")
    return _registry[name]()


def list_exporters() -> list[str]:
    """List all registered exporter names.

    Example:
        >>> list_exporters()
        ['figma', 'dtcg', 'tokens-studio']
    """
    _import_exporters()
    return list(_registry.keys())


def _import_exporters() -> None:
    """Import exporter modules to trigger registration."""
    for module_name in _EXPORTER_MODULES:
        importlib.import_module(f"rangde.exporters.{module_name}")


__all__ = [
    "FALLBACK_COLOR",
    "NAME_PREFIX_PATTERN",
    "ExportProvider",
    "ExportResult",
    "ExportWarning",
    "collect_modes",
    "get_exporter",
    "insert_token",
    "list_exporters",
    "record_unresolved_alias",
    "register_exporter",
    "resolve_alias",
    "slugify",
    "strip_name_prefix",
    "token_reference",
    "variable_name_to_path",
]
