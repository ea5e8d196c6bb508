"""
Error handling utilities for ExprQuartiles
Provides actionable error messages for data loading and plotting failures
"""
from dataclasses import dataclass, field
from typing import List

import pandas as pd

from .quartiles import EmptyMatrixError, WhiskerDistanceError


@dataclass
class DiagnosticError:
    """Structured error with a suggested fix"""
    message: str
    category: str
    suggested_fix: str
    details: List[str] = field(default_factory=list)
    severity: str = "error"  # error, warning, info


class ErrorClassifier:
    """Classifies errors and provides actionable diagnostics"""

    @staticmethod
    def classify_data_error(error: Exception) -> DiagnosticError:
        """Classify an exception raised while loading an assay matrix or annotation"""
        error_lower = str(error).lower()

        if 'mismatch' in error_lower or 'not in index' in error_lower:
            return DiagnosticError(
                message="Sample names in the assay matrix don't match the sample annotation",
                category="sample_mismatch",
                suggested_fix="Ensure the annotation has one row per matrix column with identical sample names.",
                details=[str(error)],
                severity="error"
            )

        if 'non-numeric' in error_lower or 'could not convert' in error_lower:
            return DiagnosticError(
                message="Assay matrix contains non-numeric values",
                category="non_numeric",
                suggested_fix="Check that every column except the feature id column holds numbers.",
                details=[str(error)],
                severity="error"
            )

        if 'no sample column' in error_lower or 'not found in annotation' in error_lower:
            return DiagnosticError(
                message="Sample annotation has no sample column",
                category="missing_sample_column",
                suggested_fix="Name the sample column (e.g. 'SampleID') or enter it in 'Sample column'.",
                details=[str(error)],
                severity="error"
            )

        if isinstance(error, (pd.errors.ParserError, UnicodeDecodeError)):
            return DiagnosticError(
                message="File could not be parsed",
                category="parse_error",
                suggested_fix="Upload a UTF-8 comma- or tab-separated text file with a header row.",
                details=[str(error)],
                severity="error"
            )

        return DiagnosticError(
            message=f"Could not load data: {error}",
            category="data_unknown",
            suggested_fix="Check the file format on the Help page.",
            details=[type(error).__name__],
            severity="error"
        )

    @staticmethod
    def classify_plot_error(error: Exception) -> DiagnosticError:
        """Classify an exception raised while building a quartile plot"""
        if isinstance(error, WhiskerDistanceError):
            return DiagnosticError(
                message="Invalid whisker distance",
                category="invalid_whisker_distance",
                suggested_fix="Enter a non-negative number of IQRs (1.5 is the usual choice).",
                details=[str(error)],
                severity="error"
            )

        if isinstance(error, EmptyMatrixError):
            return DiagnosticError(
                message="No data to plot",
                category="empty_matrix",
                suggested_fix="Select at least one sample and an assay with features.",
                details=[str(error)],
                severity="info"
            )

        return DiagnosticError(
            message=f"Plotting error: {error}",
            category="plot_unknown",
            suggested_fix="Check the selected assay and sample annotation.",
            details=[type(error).__name__],
            severity="error"
        )


def format_error_for_streamlit(error: DiagnosticError) -> str:
    """Format a DiagnosticError for display in Streamlit"""
    output = f"**{error.message}**\n\n"

    if error.details:
        output += "\n".join(f"- {d}" for d in error.details) + "\n\n"

    if error.suggested_fix:
        output += f"**Suggested fix:** {error.suggested_fix}"

    return output
