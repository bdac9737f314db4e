"""Knowledge base loader for the AtomSpace.

This module loads JSON knowledge base modules (nodes and the links
between them) into an AtomSpace. Modules are validated with the
KBModule schema before anything is created.

Example usage:
    from plnspace.atomspace import AtomSpace
    from plnspace.atomspace.kb_loader import KBLoader

    space = AtomSpace(capacity=100)
    KBLoader.load_modules(space, ["animals"])
    dog = space.get("Dog")
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from plnspace.schema import KBModule

if TYPE_CHECKING:
    from .atom_store import AtomSpace

__all__ = ["KBLoader", "KB_DIR"]

logger = logging.getLogger(__name__)

# Knowledge base directory
KB_DIR = Path(__file__).parent / "kb"


class KBLoader:
    """Loader for AtomSpace knowledge base modules.

    KB modules are JSON files containing:
    - nodes: Named atoms with optional truth values
    - links: Links whose outgoing atoms are given by node name

    Truth value format in JSON:
        "truth_value": {"strength": 0.9, "confidence": 0.85, "count": 10}

    If omitted, DEFAULT_TRUTH is used. Link endpoints resolve to the
    earliest atom with that name already in the space.
    """

    # Cache for validated modules
    _cache: dict[str, KBModule] = {}

    @classmethod
    def available_modules(cls) -> list[str]:
        """List available KB modules.

        Returns:
            List of module names
        """
        if not KB_DIR.exists():
            return []
        return sorted(f.stem for f in KB_DIR.glob("*.json"))

    @classmethod
    def load_modules(
        cls,
        space: "AtomSpace",
        module_names: list[str],
    ) -> dict[str, int]:
        """Load KB modules into an AtomSpace.

        Args:
            space: The space to load into
            module_names: List of module names to load

        Returns:
            Dict mapping module name to number of atoms created
        """
        stats = {}

        for name in module_names:
            try:
                module = cls._load_module(name)
                count = cls._load_into_space(space, module)
                stats[name] = count
                logger.debug(f"Loaded KB module '{name}': {count} atoms")
            except FileNotFoundError as e:
                logger.warning(f"KB module not found: {e}")
                stats[name] = 0

        return stats

    @classmethod
    def load_file(cls, space: "AtomSpace", path: str | Path) -> int:
        """Load a KB module from an arbitrary JSON file.

        Args:
            space: The space to load into
            path: Path to the JSON module

        Returns:
            Number of atoms created

        Raises:
            FileNotFoundError: If the file does not exist
            pydantic.ValidationError: If the file is not a valid module
        """
        with open(path, encoding="utf-8") as f:
            module = KBModule.model_validate(json.load(f))
        return cls._load_into_space(space, module)

    @classmethod
    def _load_module(cls, name: str) -> KBModule:
        """Load and validate a module from the KB directory."""
        if name in cls._cache:
            return cls._cache[name]

        path = KB_DIR / f"{name}.json"
        if not path.exists():
            available = cls.available_modules()
            raise FileNotFoundError(
                f"KB module '{name}' not found. Available: {available}"
            )

        with open(path, encoding="utf-8") as f:
            module = KBModule.model_validate(json.load(f))

        cls._cache[name] = module
        return module

    @classmethod
    def _load_into_space(cls, space: "AtomSpace", module: KBModule) -> int:
        """Create the module's nodes, then its links.

        Returns count of atoms created.
        """
        count = 0

        for node in module.nodes:
            if space.create_atom(node.type, node.name, node.truth_value) is None:
                logger.warning(
                    f"KB module '{module.name}': space full, stopped at node '{node.name}'"
                )
                return count
            count += 1

        for link in module.links:
            outgoing = [space.get(name) for name in link.outgoing]
            missing = [name for name, atom in zip(link.outgoing, outgoing) if atom is None]
            if missing:
                logger.warning(
                    f"KB module '{module.name}': skipping {link.type.label}, "
                    f"unknown atoms {missing}"
                )
                continue

            if space.create_link(link.type, outgoing, link.truth_value) is None:
                logger.warning(
                    f"KB module '{module.name}': space full, stopped at {link.type.label}"
                )
                return count
            count += 1

        return count

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the module cache."""
        cls._cache.clear()

    @classmethod
    def get_module_info(cls, name: str) -> dict:
        """Get metadata about a KB module."""
        module = cls._load_module(name)
        return {
            "name": module.name,
            "version": module.version,
            "description": module.description,
            "nodes_count": len(module.nodes),
            "links_count": len(module.links),
        }
