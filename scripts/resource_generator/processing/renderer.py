"""
Template rendering for generated resource accessors.
Shapes parsed catalogs into template contexts and renders them with Jinja2.
"""

import re
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from jinja2 import (
    Environment, FileSystemLoader, StrictUndefined,
    TemplateNotFound, TemplateSyntaxError, UndefinedError
)

from ..parsers import StringsEntry
from .asset_catalog import AssetCatalog, Namespace

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"
TEMPLATE_SUFFIX = ".j2"
DEFAULT_STRINGS_TEMPLATE = "strings-swift"
DEFAULT_ASSETS_TEMPLATE = "assets-swift"

SWIFT_KEYWORDS = {
    "associatedtype", "class", "deinit", "enum", "extension", "fileprivate", "func",
    "import", "init", "inout", "internal", "let", "open", "operator", "private",
    "protocol", "public", "rethrows", "static", "struct", "subscript", "typealias",
    "var", "break", "case", "continue", "default", "defer", "do", "else",
    "fallthrough", "for", "guard", "if", "in", "repeat", "return", "switch",
    "where", "while", "as", "catch", "false", "is", "nil", "self", "Self", "super",
    "throw", "throws", "true", "try", "Type", "Any",
}

_WORD_PATTERN = re.compile(r"[A-Za-z0-9]+")


def _words(name: str) -> List[str]:
    return _WORD_PATTERN.findall(name)


def type_identifier(name: str) -> str:
    """UpperCamelCase identifier, e.g. ``app-icons`` -> ``AppIcons``."""
    identifier = "".join(word[:1].upper() + word[1:] for word in _words(name))
    if not identifier:
        return "_"
    if identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


def swift_identifier(name: str) -> str:
    """lowerCamelCase identifier, e.g. ``settings.title_one`` -> ``settingsTitleOne``."""
    identifier = type_identifier(name)
    if identifier.startswith("_"):
        return identifier
    identifier = identifier[:1].lower() + identifier[1:]
    if identifier in SWIFT_KEYWORDS:
        return f"`{identifier}`"
    return identifier


def escape_string(value: str) -> str:
    """Escape a value for use inside a double-quoted string literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class RenderError(Exception):
    """Exception raised when generated code cannot be rendered or written."""

    def __init__(self, message: str):
        super().__init__(message)


class TemplateRenderer:
    """Renders template contexts into generated source code."""

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the renderer.

        Args:
            template_dir: Extra directory searched for named templates before the built-in ones
        """
        search_path = [str(BUILTIN_TEMPLATE_DIR)]
        if template_dir is not None:
            search_path.insert(0, str(template_dir))
        self.search_path = search_path

        self.env = self._create_environment(FileSystemLoader(search_path))

    def _create_environment(self, loader: FileSystemLoader) -> Environment:
        env = Environment(
            loader=loader,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
            undefined=StrictUndefined,
        )
        env.filters['swift_identifier'] = swift_identifier
        env.filters['type_identifier'] = type_identifier
        env.filters['escape_string'] = escape_string
        return env

    def render(
        self,
        context: Mapping[str, Any],
        template_name: Optional[str] = None,
        template_path: Optional[Union[str, Path]] = None,
    ) -> str:
        """
        Render a context with a named template or a template file.

        Args:
            context: Template variables
            template_name: Name of a template in the search path, without the ``.j2`` suffix
            template_path: Template file; takes precedence over template_name

        Returns:
            Rendered text

        Raises:
            RenderError: If the template is missing, invalid, or references unknown variables
        """
        try:
            if template_path is not None:
                template_path = Path(template_path)
                env = self._create_environment(FileSystemLoader(str(template_path.parent)))
                template = env.get_template(template_path.name)
            else:
                if not template_name:
                    raise RenderError("No template name or template path given")
                template = self.env.get_template(f"{template_name}{TEMPLATE_SUFFIX}")

            return template.render(**context)

        except TemplateNotFound as e:
            raise RenderError(f"Template not found: {e.name}") from e
        except TemplateSyntaxError as e:
            raise RenderError(f"Template syntax error in {e.filename or e.name} line {e.lineno}: {e.message}") from e
        except UndefinedError as e:
            raise RenderError(f"Template rendering failed: {e.message}") from e

    def write_output(self, content: str, output_path: Union[str, Path]) -> Path:
        """
        Write rendered content, creating parent directories as needed.

        Raises:
            RenderError: If the file cannot be written
        """
        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise RenderError(f"Cannot write {output_path}: {e.strerror or e}") from e
        logger.info(f"Wrote {output_path}")
        return output_path


def unique_identifiers(names: List[str], make: Callable[[str], str] = swift_identifier) -> List[str]:
    """
    Map names to identifiers, numbering any that would collide.

    Keys such as ``hello_world`` and ``helloWorld`` produce the same identifier;
    the later one becomes ``helloWorld2`` and a warning is logged.

    Args:
        names: Source names in output order
        make: Identifier filter applied to each name

    Returns:
        One unique identifier per name
    """
    owners: Dict[str, str] = {}
    identifiers = []
    for name in names:
        identifier = make(name)
        if identifier in owners:
            stem = identifier.strip("`")
            number = 2
            while f"{stem}{number}" in owners:
                number += 1
            renamed = f"{stem}{number}"
            logger.warning(f"'{name}' and '{owners[identifier]}' both map to {identifier}, using {renamed}")
            identifier = renamed
        owners[identifier] = name
        identifiers.append(identifier)
    return identifiers


def strings_context(filename: str, table: Mapping[str, StringsEntry]) -> Dict[str, Any]:
    """Build the template context for a unified strings table."""
    entries = list(table.values())
    identifiers = unique_identifiers([entry.key for entry in entries])
    return {
        "filename": filename,
        "entries": [
            {
                "key": entry.key,
                "identifier": identifier,
                "value": entry.value,
                "argumentCount": entry.argument_count,
                "locale": entry.locale.code,
                "isBase": entry.locale.is_base,
            }
            for entry, identifier in zip(entries, identifiers)
        ],
    }


def _namespace_context(namespace: Namespace) -> Dict[str, Any]:
    # Colors, images and data assets share one member scope in the generated type.
    leaves = [*namespace.colors, *namespace.images, *namespace.data_assets]
    identifiers = iter(unique_identifiers([leaf.name for leaf in leaves]))
    type_names = unique_identifiers(list(namespace.subnamespaces), make=type_identifier)

    return {
        "colors": [
            {
                "name": color.name,
                "identifier": next(identifiers),
                "path": list(color.path),
                "bundle": color.bundle,
            }
            for color in namespace.colors
        ],
        "images": [
            {
                "name": image.name,
                "identifier": next(identifiers),
                "path": list(image.path),
                "bundle": image.bundle,
                "locale": image.locale.code if image.locale else None,
                "onDemandResourceTags": list(image.on_demand_resource_tags or []),
            }
            for image in namespace.images
        ],
        "dataAssets": [
            {
                "name": data.name,
                "identifier": next(identifiers),
                "path": list(data.path),
                "bundle": data.bundle,
                "onDemandResourceTags": list(data.on_demand_resource_tags or []),
            }
            for data in namespace.data_assets
        ],
        "namespaces": [
            dict(name=name, typeName=type_name, **_namespace_context(child))
            for (name, child), type_name in zip(namespace.subnamespaces.items(), type_names)
        ],
    }


def assets_context(catalog: AssetCatalog) -> Dict[str, Any]:
    """Build the template context for an asset catalog."""
    context = {"filename": catalog.filename}
    context.update(_namespace_context(catalog.root))
    return context
