"""
ElementSorter: the single "sort elements" operation.

Wires extraction, sorting, pruning and blank-line normalization together
over one LineBuffer. Trees are re-parsed after every write, so no Element
outlives the buffer state it was read from.
"""

from typing import Dict, List, Optional, Set, Tuple

from phpsorter.diagnostics import DiagnosticsProvider, UnusedImportDetector, is_unused
from phpsorter.logging_config import logger
from phpsorter.mutation.buffer import LineBuffer
from phpsorter.parser.tree import SyntaxTree, TreeProvider
from phpsorter.schemas import RemovedImport, SorterConfig, SortReport
from .elements import Element, ElementCategory
from .engine import SortSession
from .extractor import ElementExtractor, group_contiguous
from .normalizer import BlankLineNormalizer
from .pruner import prune_unused

# Whole file, when it declares no class-like scope
MODULE_SCOPE = (0, -1)


class ElementSorter:
    """
    Sort the elements of one PHP buffer in place.

    Example:
        sorter = ElementSorter(buffer, SorterConfig())
        report = sorter.sort_elements()
    """

    def __init__(
        self,
        buffer: LineBuffer,
        config: Optional[SorterConfig] = None,
        diagnostics: Optional[DiagnosticsProvider] = None,
        tree_provider: Optional[TreeProvider] = None,
    ):
        """
        Args:
            buffer: Buffer to rewrite
            config: Sorting toggles (defaults apply when omitted)
            diagnostics: External unused-declaration oracle; the built-in
                UnusedImportDetector is used when omitted
            tree_provider: Parser front-end
        """
        self.buffer = buffer
        self.config = config or SorterConfig()
        self.diagnostics = diagnostics
        self.tree_provider = tree_provider or TreeProvider()
        self.session = SortSession(buffer, self.config)

    def sort_elements(self) -> SortReport:
        """
        Run one invocation: members per scope, imports, pruning, spacing.

        Idempotent: running it again over its own output writes nothing.

        Raises:
            MissingParserError: No syntax tree for the buffer
            LanguageMismatchError: The buffer is not PHP
        """
        self.session.reset()
        start_count = self.buffer.change_count

        # Fatal errors surface here, before any write
        extractor = self._extractor()
        flagged = self._flag_external_unused(extractor)

        scope_count = max(len(extractor.scope_ranges()), 1)
        for index in range(scope_count):
            for category, use_visibility, is_property in self._member_passes():
                self._sort_scope_category(index, category, use_visibility, is_property)

        if self.config.sort_namespace_uses:
            self._sort_imports()

        removed: List[Element] = []
        if self.config.remove_unused_imports and self.config.sort_namespace_uses:
            removed = self._prune_imports(flagged)

        normalized = BlankLineNormalizer(self.buffer, self._parse(), self.config).normalize()

        report = SortReport(
            file_path=self.buffer.name,
            rewritten_groups=list(self.session.changes),
            removed_imports=[
                RemovedImport(text=element.text, start_line=element.block_start, end_line=element.end_line)
                for element in removed
            ],
            normalized_regions=normalized,
            changed=self.buffer.change_count > start_count,
        )
        logger.debug(
            f"{self.buffer.name}: {len(report.rewritten_groups)} group(s) sorted, "
            f"{len(report.removed_imports)} import(s) removed, {normalized} region(s) normalized"
        )
        return report

    def _member_passes(self) -> List[Tuple[ElementCategory, bool, bool]]:
        """Enabled (category, use_visibility, is_property_group) passes, in order."""
        passes = []
        if self.config.sort_traits:
            passes.append((ElementCategory.TRAIT_USE, False, False))
        if self.config.sort_constants:
            passes.append((ElementCategory.CONSTANT, True, False))
        if self.config.sort_properties:
            passes.append((ElementCategory.PROPERTY, True, True))
        return passes

    def _parse(self) -> SyntaxTree:
        return self.tree_provider.parse(self.buffer)

    def _extractor(self) -> ElementExtractor:
        return ElementExtractor(self._parse(), self.buffer)

    def _scope_rows(self, extractor: ElementExtractor, index: int) -> Optional[Tuple[int, int]]:
        scopes = extractor.scope_ranges()
        if not scopes:
            return MODULE_SCOPE if index == 0 else None
        if index >= len(scopes):
            return None
        return scopes[index]

    def _scope_groups(
        self,
        extractor: ElementExtractor,
        index: int,
        category: ElementCategory,
    ) -> List[List[Element]]:
        rows = self._scope_rows(extractor, index)
        if rows is None:
            return []
        elements = extractor.extract_range(*rows).for_category(category)
        return group_contiguous(elements, self.buffer)

    def _sort_scope_category(
        self,
        index: int,
        category: ElementCategory,
        use_visibility: bool,
        is_property: bool,
    ) -> None:
        extractor = self._extractor()
        groups = self._scope_groups(extractor, index, category)

        position = 0
        while position < len(groups):
            if self.session.sort_and_render(groups[position], use_visibility, is_property):
                # Every line below the write moved: read the groups again
                extractor = self._extractor()
                groups = self._scope_groups(extractor, index, category)
            position += 1

    def _sort_imports(self) -> None:
        groups = group_contiguous(self._extractor().extract_imports(), self.buffer)

        position = 0
        while position < len(groups):
            if self.session.sort_and_render(groups[position], False, False):
                groups = group_contiguous(self._extractor().extract_imports(), self.buffer)
            position += 1

    def _flag_external_unused(self, extractor: ElementExtractor) -> Optional[Set[str]]:
        """
        Texts of the imports an external oracle flags, read before any write.

        External diagnostics are anchored to the rows of the unsorted
        buffer, so they are resolved to statement texts up front.
        """
        if self.diagnostics is None:
            return None
        return {
            element.text
            for element in extractor.extract_imports()
            if is_unused(self.diagnostics, element.start_line - 1)
        }

    def _prune_imports(self, flagged: Optional[Set[str]]) -> List[Element]:
        tree = self._parse()
        imports = ElementExtractor(tree, self.buffer).extract_imports()

        if flagged is None:
            detector = UnusedImportDetector(tree)

            def oracle(row: int) -> bool:
                return is_unused(detector, row)
        else:
            texts_by_row: Dict[int, str] = {element.start_line - 1: element.text for element in imports}

            def oracle(row: int) -> bool:
                return texts_by_row.get(row) in flagged

        return prune_unused(self.buffer, imports, oracle)


def sort_php_source(
    source: str,
    config: Optional[SorterConfig] = None,
    diagnostics: Optional[DiagnosticsProvider] = None,
) -> str:
    """
    Sort the elements of PHP source text and return the result.

    Example:
        sorted_source = sort_php_source("<?php\\nuse B;\\nuse A;\\n")
    """
    buffer = LineBuffer.from_text(source, name="<string>", language="php")
    ElementSorter(buffer, config, diagnostics).sort_elements()
    return buffer.text().replace("\n", buffer.line_ending)
