"""
Expansion driver: runs one structure at a time through option resolution, key assignment and the
duplicate key check.

`expand_structure` is the pure single-structure step and raises on bad input. `BindingExpander`
loops over the structures of a file, reports diagnostics and keeps going, so one broken structure
never stops its neighbours from being bound.
"""
from typing import Callable, List, Optional

from early_model import EarlyStructure
from early_structure_to_model import EarlyStructureToModel
from errors import BindingError
from model import DEFAULT_NAMESPACE_ROOT, UserDataStructure
from model_debug import format_structure
from model_transforms.assign_exposed_keys_transform import AssignExposedKeysTransform
from model_transforms.duplicate_key_transform import DuplicateKeyTransform
from model_transforms.model_transform_pipeline import run_model_transform_pipeline


def expand_structure(
    early: EarlyStructure,
    default_namespace: str = DEFAULT_NAMESPACE_ROOT,
    strict_keys: bool = False,
    on_shadowed: Optional[Callable[[str], None]] = None,
) -> Optional[UserDataStructure]:
    """
    Expand one structure.

    Returns None for a structure without fields.

    Raises:
        GrammarError: If an annotation is malformed
        UnknownOptionError: If an annotation names an option not valid at its scope
        DuplicateKeyError: If strict_keys is set and two fields share a key in one direction
    """
    structure = EarlyStructureToModel(default_namespace).process(early)
    if structure is None:
        return None
    return run_model_transform_pipeline(structure, [
        AssignExposedKeysTransform(),
        DuplicateKeyTransform(strict=strict_keys, on_shadowed=on_shadowed),
    ])


class BindingExpander:
    def __init__(self, default_namespace: str = DEFAULT_NAMESPACE_ROOT, strict_keys: bool = False, verbose: bool = False):
        """
        Args:
            default_namespace: Namespace root for structures without a `crate` option
            strict_keys: Reject duplicate exposed keys instead of letting the first field win
            verbose: Whether to print debug information (default: False)
        """
        self.default_namespace = default_namespace
        self.strict_keys = strict_keys
        self.verbose = verbose
        self.errors = []
        self.warnings = []

    def debug_print(self, message: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {message}")

    def log_error(self, error: str) -> None:
        self.errors.append(error)
        if self.verbose:
            print(f"[ERROR] {error}")

    def log_warning(self, warning: str) -> None:
        self.warnings.append(warning)
        if self.verbose:
            print(f"[WARNING] {warning}")

    def expand(self, early: EarlyStructure) -> Optional[UserDataStructure]:
        """
        Expand one structure, recording a diagnostic instead of raising.

        Returns:
            The expanded structure, or None if it has no fields or failed to expand
        """
        try:
            structure = expand_structure(early, self.default_namespace, self.strict_keys, self.log_warning)
        except BindingError as e:
            self.log_error(e.format_diagnostic())
            return None
        if structure is None:
            self.debug_print(f"{early.name}: no fields, skipping")
            return None
        self.debug_print(format_structure(structure))
        return structure

    def expand_all(self, structures: List[EarlyStructure]) -> List[UserDataStructure]:
        expanded = []
        for early in structures:
            structure = self.expand(early)
            if structure is not None:
                expanded.append(structure)
        return expanded
