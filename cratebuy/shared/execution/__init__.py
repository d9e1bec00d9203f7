from cratebuy.shared.execution.errors import (
    ErrorCode,
    CrateError,
    ValidationError,
    CollaboratorUnavailable,
    BasketNotFound,
    AssetQuoteUnavailable,
    TransactionBuildFailure,
    NoSupportedAssets,
    PhaseTimeout,
    UnexpectedError,
)
