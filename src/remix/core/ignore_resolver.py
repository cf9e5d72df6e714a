"""
IgnoreResolver module for Remix.

Composes the ordered ignore layers into a single inclusion decision per
path. Layers, highest priority first:

1. Built-in unconditional excludes (cannot be disabled)
2. User custom ignore patterns
3. The project-local ``.remixignore`` file
4. The default pattern set
5. Version-control ignore rules (``.gitignore`` hierarchy)

Each layer answers IGNORE, INCLUDE or NO_OPINION; the first definite
answer wins. Include patterns are applied after the layers, so an ignored
path can never be re-included by an include pattern.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Sequence

from remix.core.config import RemixConfig
from remix.core.errors import PatternError
from remix.core.file_scanner.models import (
    BUILTIN_EXCLUDED_DIRS,
    BUILTIN_EXCLUDED_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    LOCAL_IGNORE_FILENAME,
    CandidatePath,
)
from remix.core.gitignore_manager import GitignoreManager
from remix.core.pattern_matcher import PatternMatcher

logger = logging.getLogger(__name__)


class IgnoreDecision(Enum):
    """Opinion of a single ignore layer about a path."""

    IGNORE = "ignore"
    INCLUDE = "include"
    NO_OPINION = "no_opinion"


class IgnoreLayer(ABC):
    """One ordered source of include/exclude opinions."""

    name: str = "layer"

    @abstractmethod
    def evaluate(self, candidate: CandidatePath) -> IgnoreDecision:
        """Return this layer's opinion about ``candidate``."""
        pass


class BuiltinExcludeLayer(IgnoreLayer):
    """Version-control internals, build output and known binary extensions."""

    name = "builtin"

    def evaluate(self, candidate: CandidatePath) -> IgnoreDecision:
        parts = candidate.relative_path.split("/")
        directories = parts if candidate.is_dir else parts[:-1]
        if any(part in BUILTIN_EXCLUDED_DIRS for part in directories):
            return IgnoreDecision.IGNORE

        if not candidate.is_dir:
            suffix = Path(parts[-1]).suffix.lower()
            if suffix in BUILTIN_EXCLUDED_EXTENSIONS:
                return IgnoreDecision.IGNORE

        return IgnoreDecision.NO_OPINION


class GlobPatternLayer(IgnoreLayer):
    """
    Ignore layer backed by plain glob patterns.

    Invalid patterns are dropped with a warning when the layer is built.
    """

    def __init__(self, name: str, patterns: Sequence[str], matcher: PatternMatcher | None = None):
        self.name = name
        self._matcher = matcher or PatternMatcher()
        self._patterns: list[str] = []

        for pattern in patterns:
            pattern = pattern.strip()
            if not pattern:
                continue
            try:
                self._matcher.validate(pattern)
            except PatternError as e:
                logger.warning(f"Skipping invalid {name} pattern '{pattern}': {e}")
                continue
            self._patterns.append(pattern)

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    def evaluate(self, candidate: CandidatePath) -> IgnoreDecision:
        paths = [candidate.relative_path]
        if candidate.is_dir:
            paths.append(candidate.relative_path + "/")

        for path in paths:
            pattern = self._matcher.first_match(self._patterns, path)
            if pattern is not None:
                logger.debug(f"Ignoring '{candidate.relative_path}' due to {self.name} pattern '{pattern}'")
                return IgnoreDecision.IGNORE

        return IgnoreDecision.NO_OPINION


class GitignoreLayer(IgnoreLayer):
    """Ignore layer with gitignore semantics, including negation."""

    def __init__(self, name: str, manager: GitignoreManager):
        self.name = name
        self._manager = manager

    @property
    def pattern_count(self) -> int:
        return self._manager.pattern_count

    def evaluate(self, candidate: CandidatePath) -> IgnoreDecision:
        decision = self._manager.matches(candidate.relative_path, is_dir=candidate.is_dir)
        if decision is None:
            return IgnoreDecision.NO_OPINION
        if decision:
            logger.debug(f"Ignoring '{candidate.relative_path}' due to {self.name}")
            return IgnoreDecision.IGNORE
        return IgnoreDecision.INCLUDE


def _first_decision(layers: Sequence[IgnoreLayer], candidate: CandidatePath) -> IgnoreDecision:
    for layer in layers:
        decision = layer.evaluate(candidate)
        if decision is not IgnoreDecision.NO_OPINION:
            return decision
    return IgnoreDecision.NO_OPINION


class IgnoreResolver:
    """
    Single inclusion decision over all enabled ignore layers.

    The resolver is built once per scan and only read afterwards, so it can
    be shared between worker threads.
    """

    def __init__(self, root_path: Path, config: RemixConfig | None = None):
        """
        Initialize the resolver and load the ignore files under ``root_path``.

        Args:
            root_path: Scan root; ignore files are read relative to it
            config: Packing configuration (defaults if None)
        """
        self._root_path = Path(root_path).resolve()
        self._config = config or RemixConfig()
        self._layers = self._build_layers()

        self._include_matcher = PatternMatcher(case_sensitive=False, literal_separator=False)
        self._include_configured = bool(self._config.include)
        self._include_patterns: list[str] = []
        for pattern in self._config.include:
            try:
                self._include_matcher.validate(pattern)
            except PatternError as e:
                logger.warning(f"Invalid include pattern '{pattern}': {e}")
                continue
            self._include_patterns.append(pattern)

    def _build_layers(self) -> list[IgnoreLayer]:
        ignore_config = self._config.ignore
        layers: list[IgnoreLayer] = [BuiltinExcludeLayer()]

        if ignore_config.custom_patterns:
            layers.append(GlobPatternLayer("custom", ignore_config.custom_patterns))

        if ignore_config.use_local_ignore_file:
            local_path = self._root_path / LOCAL_IGNORE_FILENAME
            if local_path.is_file():
                manager = GitignoreManager(self._root_path)
                loaded = manager.load_gitignore(local_path, source_depth=0)
                logger.debug(f"Found {LOCAL_IGNORE_FILENAME} with {loaded} patterns")
                layers.append(GitignoreLayer(LOCAL_IGNORE_FILENAME, manager))

        if ignore_config.use_default_patterns:
            layers.append(GlobPatternLayer("default", DEFAULT_IGNORE_PATTERNS))

        if ignore_config.use_version_control_ignore:
            # Subtrees already ignored by the layers above are never searched
            higher_layers = list(layers)

            def prune(relative_dir: str) -> bool:
                candidate = CandidatePath(self._root_path / relative_dir, relative_dir, is_dir=True)
                return _first_decision(higher_layers, candidate) is IgnoreDecision.IGNORE

            manager = GitignoreManager(self._root_path)
            loaded = manager.load_gitignore_hierarchy(prune=prune)
            if loaded:
                layers.append(GitignoreLayer(".gitignore", manager))

        return layers

    @property
    def layers(self) -> list[IgnoreLayer]:
        return list(self._layers)

    def evaluate(self, candidate: CandidatePath) -> IgnoreDecision:
        """Return the first definite opinion over all layers."""
        return _first_decision(self._layers, candidate)

    def is_ignored(self, candidate: CandidatePath) -> bool:
        return self.evaluate(candidate) is IgnoreDecision.IGNORE

    def should_prune(self, candidate: CandidatePath) -> bool:
        """True if the walk must not descend into directory ``candidate``."""
        return candidate.is_dir and self.is_ignored(candidate)

    def matches_include(self, candidate: CandidatePath) -> bool:
        """
        Check the include list (case-insensitive, ``*`` crosses directories).

        Always True when no include patterns are configured.
        """
        if not self._include_configured:
            return True
        return self._include_matcher.first_match(
            self._include_patterns, candidate.relative_path
        ) is not None

    def should_include(self, candidate: CandidatePath) -> bool:
        """
        Final inclusion decision for a file candidate.

        A file is included iff no layer ignores it and, when include
        patterns are configured, it matches at least one of them.
        """
        if candidate.is_dir:
            return False
        if self.is_ignored(candidate):
            return False
        if not self.matches_include(candidate):
            logger.debug(f"Skipping '{candidate.relative_path}': no include pattern matched")
            return False
        return True


def should_include(candidate: CandidatePath, config: RemixConfig, root_path: Path) -> bool:
    """
    One-shot inclusion check for a single candidate.

    Builds a fresh resolver, so prefer IgnoreResolver when checking many
    paths under the same root.
    """
    return IgnoreResolver(root_path, config).should_include(candidate)
