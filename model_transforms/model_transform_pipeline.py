"""
model_transform_pipeline.py
Defines a pipeline for transforming UserDataStructure objects using a sequence of StructureTransform objects.
"""
from typing import List, Protocol

from model import UserDataStructure


class StructureTransform(Protocol):
    def transform(self, structure: UserDataStructure) -> UserDataStructure:
        ...


def run_model_transform_pipeline(
    structure: UserDataStructure,
    transforms: List[StructureTransform]
) -> UserDataStructure:
    """
    Applies a sequence of StructureTransform objects to a UserDataStructure.
    Each transform takes a structure and returns it (possibly the same object, updated).
    """
    for transform in transforms:
        structure = transform.transform(structure)
    return structure
