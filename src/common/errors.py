"""Error types raised by the audit pipeline.

Each error carries the process exit code the CLI uses when it aborts a run.
"""

from constants import ExitCodes


class VsxAuditError(Exception):
    """Base class for fatal audit errors."""

    exit_code = ExitCodes.FILE_ERROR


class NotFoundError(VsxAuditError):
    """The marketplace search returned no extension for an identifier."""

    exit_code = ExitCodes.NOT_FOUND


class MalformedManifestError(VsxAuditError):
    """An extension manifest has no usable repository information."""

    exit_code = ExitCodes.MALFORMED_MANIFEST


class TransportError(VsxAuditError):
    """A stage-defining remote request failed."""

    exit_code = ExitCodes.CONNECTION_ERROR


class LicenseConflictError(VsxAuditError):
    """The pack was asked to register itself but has no valid license."""

    exit_code = ExitCodes.LICENSE_CONFLICT


class RegistrationError(VsxAuditError):
    """A candidate could not be turned into a registrations file entry."""

    exit_code = ExitCodes.FILE_ERROR
