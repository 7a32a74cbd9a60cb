"""
Transform: Converts an EarlyStructure into a UserDataStructure with resolved structure and field options.
"""
from typing import Optional

from early_model import EarlyField, EarlyStructure
from model import DEFAULT_NAMESPACE_ROOT, FieldDescriptor, UserDataStructure
from option_resolver import (
    ANNOTATION_NAME,
    find_structure_annotation,
    parse_annotation_entries,
    resolve_field_options,
    resolve_structure_options,
)


class EarlyStructureToModel:
    def __init__(self, default_namespace: str = DEFAULT_NAMESPACE_ROOT):
        self.default_namespace = default_namespace

    def process(self, early: EarlyStructure) -> Optional[UserDataStructure]:
        """
        Resolve the options of one structure.

        Returns None for a structure without fields, which gets no binding at all.
        Raises GrammarError or UnknownOptionError on a bad annotation.
        """
        structure_entries = parse_annotation_entries(find_structure_annotation(early.annotations))
        options = resolve_structure_options(structure_entries, self.default_namespace)

        if not early.fields:
            return None

        fields = [self._process_field(field) for field in early.fields]
        return UserDataStructure(early.name, early.kind, fields, options,
                                 doc=early.doc, file=early.file, line=early.line)

    def _process_field(self, field: EarlyField) -> FieldDescriptor:
        field_options = None
        annotated = False
        for annotation in field.annotations:
            if annotation.name != ANNOTATION_NAME:
                continue
            # Every occurrence must be valid; the last one decides the policy.
            field_options = resolve_field_options(parse_annotation_entries(annotation))
            annotated = True
        if field_options is None:
            field_options = resolve_field_options(None)
        return FieldDescriptor(
            index=field.index,
            name=field.name,
            type_name=field.type_name,
            readable=field_options.readable,
            writable=field_options.writable,
            rename=field_options.rename,
            annotated=annotated,
            doc=field.doc,
            file=field.file,
            line=field.line,
            column=field.column,
        )
