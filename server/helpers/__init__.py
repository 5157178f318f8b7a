from .DateTimeSerializer import DateTimeSerializerVisitor
from .RegistrationErrors import (
    RegistrationError,
    ValidationError,
    PolicyViolation,
    EmptyExportError,
    SubmissionError,
    ExportGenerationError,
)
from .TeamRuleResolver import resolve_policy, reconcile_draft, validate_submission
from .EventFormSchema import resolve_field_schema, validate_required_fields, build_registration
from .RegistrationFlattener import flatten, build_export_table, rank_institutions, build_summary, compute_stats
from .ExcelExporter import build_registration_workbook, export_registrations

__all__ = [
    'DateTimeSerializerVisitor',
    'RegistrationError',
    'ValidationError',
    'PolicyViolation',
    'EmptyExportError',
    'SubmissionError',
    'ExportGenerationError',
    'resolve_policy',
    'reconcile_draft',
    'validate_submission',
    'resolve_field_schema',
    'validate_required_fields',
    'build_registration',
    'flatten',
    'build_export_table',
    'rank_institutions',
    'build_summary',
    'compute_stats',
    'build_registration_workbook',
    'export_registrations',
]
