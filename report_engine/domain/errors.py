"""Domain errors."""


class ReportEngineError(Exception):
    """Base report engine error."""

    code = "INTERNAL_ERROR"


class InvalidDataTypeError(ReportEngineError):
    """Data type outside the supported set."""

    code = "INVALID_DATA_TYPE"

    def __init__(self, data_type: object) -> None:
        self.data_type = data_type
        super().__init__(f"Unknown data type '{data_type}'")


class PumpNotImplementedError(ReportEngineError, NotImplementedError):
    """Pump class does not implement generate."""

    code = "PUMP_NOT_IMPLEMENTED"


class PumpDefinitionError(ReportEngineError):
    """Invalid pump schema or registration."""

    code = "PUMP_DEFINITION_ERROR"


class UnknownPumpTypeError(ReportEngineError):
    """Pump type name is not registered."""

    code = "UNKNOWN_PUMP_TYPE"

    def __init__(self, pump_type: str) -> None:
        self.pump_type = pump_type
        super().__init__(f"Unknown pump type: {pump_type}")


class InvalidReportConfigError(ReportEngineError):
    """Report configuration does not fit its pump or is inconsistent."""

    code = "INVALID_REPORT_CONFIG"


class ReportConfigNotFoundError(ReportEngineError):
    """Report configuration not found in the store."""

    code = "REPORT_CONFIG_NOT_FOUND"

    def __init__(self, config_id: str) -> None:
        self.config_id = config_id
        super().__init__(f"Report config not found: {config_id}")


class ParameterResolutionError(ReportEngineError):
    """Base error for the parameter resolution stage."""


class MissingParameterError(ParameterResolutionError):
    """Parameter referenced but not supplied and without default."""

    code = "MISSING_PARAMETER"

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"Missing parameter: {parameter}")


class TypeMismatchError(ParameterResolutionError):
    """Resolved value does not match the declared data type."""

    code = "TYPE_MISMATCH"

    def __init__(self, target: str, expected: str, value: object) -> None:
        self.target = target
        self.expected = expected
        self.value = value
        super().__init__(
            f"Type mismatch for {target}: expected {expected}, "
            f"got {type(value).__name__} {value!r}"
        )


class ValueNotInDomainError(ParameterResolutionError):
    """Value outside the enumerated domain of a parameter."""

    code = "VALUE_NOT_IN_DOMAIN"

    def __init__(self, parameter: str, value: object, domain: tuple) -> None:
        self.parameter = parameter
        self.value = value
        self.domain = domain
        super().__init__(
            f"Value {value!r} not allowed for parameter {parameter}: expected one of {list(domain)}"
        )


class PumpGenerationFailedError(ReportEngineError):
    """Pump generate call failed or returned malformed rows."""

    code = "PUMP_GENERATION_FAILED"

    def __init__(self, pump_type: str, reason: str) -> None:
        self.pump_type = pump_type
        self.reason = reason
        super().__init__(f"Pump {pump_type} failed to generate rows: {reason}")
