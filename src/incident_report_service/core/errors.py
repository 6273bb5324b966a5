"""Domain exceptions for the incident report service"""


class IncidentReportError(Exception):
    """Base class for incident report errors"""


class UnknownFieldError(IncidentReportError, ValueError):
    """Raised when a mutation names a field that does not accept it"""


class InvalidStepError(IncidentReportError):
    """Raised when an operation is not available in the current wizard step"""


class GenerationInProgressError(IncidentReportError):
    """Raised when a generation is requested while another is in flight"""


class ReportNotReadyError(IncidentReportError):
    """Raised when an export is requested before a report exists"""


class ReportGenerationError(IncidentReportError):
    """Raised by report clients when the model call or its response fails"""


class ExportError(IncidentReportError):
    """Raised when a document cannot be built from the report blocks"""
